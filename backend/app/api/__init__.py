"""API Layer — FastAPI routes, request dependencies, route guard middleware, error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - All endpoints return structured JSON responses
    - The verified session reaches handlers only through api/dependencies.py

Design Decisions:
    - Thin routes delegate to services; access rules live in core/
"""
