"""API Layer — FastAPI routes, actor resolution and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - All endpoints return structured JSON responses

Design Decisions:
    - Thin routes: decisions come from core/, IO from services/ (functional core, imperative shell)
"""
