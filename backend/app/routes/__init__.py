"""
Bookstore Backend — API Routes Package
========================================

Route Inventory:
    - users.py:   POST /userRegister           (register)
                  POST /userRegisterwithfile   (register + attachments)
                  POST /login                  (credential check)
                  GET  /user/{user_id}         (lookup)
    - health.py:  GET  /health                 (service health check)

Routes stay thin: read the request, call the service, wrap the result.
"""
