# Routes package init
"""
Notes API - Routes Package
==========================

Route Inventory:
    - notes.py:     /api/v1/notes...   (CRUD, search, paged listing)
    - health.py:    GET /health        (service health check)
    - auth_info.py: GET /api/auth-info (development authentication only)

Routes stay thin: read the request, call NoteService, wrap the result in the
ApiResponse envelope. Business rules live in app.services.
"""
