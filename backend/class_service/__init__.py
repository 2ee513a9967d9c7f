"""
Class Service — Application Package Initializer
================================================

What: REST microservice for academic classes and their embedded exams.

Architecture Note:
    ┌─────────────────────────────────────┐
    │   Middleware (context, auth gate)   │  ← request ID, OAuth validation
    ├─────────────────────────────────────┤
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   Services (orchestrator, handlers) │  ← commands, queries, PATCH resolver
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← pydantic entities + payloads
    ├─────────────────────────────────────┤
    │    Repositories (Persistence)       │  ← MongoDB (motor) or in-memory
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
