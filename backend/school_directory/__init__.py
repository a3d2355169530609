"""
School Directory — Application Package
========================================

What: REST backend and server-rendered views for a directory of schools.
Who:  Imported by uvicorn (school_directory.main:app), Alembic and pytest.

Layers:

    ┌─────────────────────────────────────┐
    │   Web views (Jinja2 pages)          │  ← call the API over HTTP
    ├─────────────────────────────────────┤
    │   Routes (API Layer)                │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   Services                          │  ← validation, uploads, orchestration
    ├─────────────────────────────────────┤
    │   Record Store + Connection Provider│  ← SQL statements, schema lifecycle
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
