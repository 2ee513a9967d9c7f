# Services package init
"""
Class Service — Services Layer
===============================

Service Inventory:
    - commands.py: Create/Update/Delete class handlers (write side)
    - queries.py: GetClassById/GetClasses/GetExams handlers (read side)
    - patching.py: partial-update resolver used by PATCH endpoints
    - class_service.py: orchestrator composing the handlers per endpoint
    - token_validator.py: client for the external OAuth validation endpoint
"""
