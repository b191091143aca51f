# Routes package init
"""
FormDrop Backend: API Routes Package
======================================

Route Inventory:
    - health.py:       GET  /                  (greeting)
                       GET  /health            (store connectivity)
    - submissions.py:  POST /addUser           (form intake)
                       GET  /collectionData    (all submissions)
    - uploads.py:      GET  /uploads/{name}    (stored attachments)

Routes stay thin: read the request, call a service, return a schema.
"""
