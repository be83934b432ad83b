"""
ShiftMaster Backend — API Routes Package
==========================================

Route Inventory:
    - health.py:     GET /                      (service banner)
                     GET /health                (health check)
    - dashboard.py:  GET /api/dashboard/stats   (dashboard statistics)

Routes are thin: they resolve dependencies, call a service, and shape the
HTTP response. Anything under /api/ that is not routed answers 404 JSON.
"""
