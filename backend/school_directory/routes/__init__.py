# Routes package init
"""
School Directory — API Routes Package
=======================================

Route Inventory:
    - schools.py:  GET  /api/schools          (list, newest first)
                   POST /api/schools          (create, multipart)
                   GET  /api/schools/{id}     (single record)
    - stats.py:    GET  /api/stats            (aggregate counts)
    - uploads.py:  GET  /uploads/{path}       (stored images)
    - health.py:   GET  /health               (constant acknowledgement)

Routes stay thin: read the request, call SchoolService, shape the response.
"""
