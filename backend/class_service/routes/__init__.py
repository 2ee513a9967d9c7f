# Routes package init
"""
Class Service — API Routes Package
===================================

Route Inventory:
    - classes.py: /api/v1/classes[/{id}]                  (class CRUD + PATCH)
    - exams.py:   /api/v1/classes/{id}/exams[/{examId}]   (exam sub-resource)
    - health.py:  /health, /api/v1/health, /              (public endpoints)
"""
