# Routes package init
"""
AyurCare Backend — API Routes Package
======================================

Route Inventory:
    - auth.py:      /api/auth/signup, /api/auth/signin, /api/auth/me
    - products.py:  /api/products, /api/products/{id}
    - cart.py:      /api/cart, /api/cart/items[/{id}]
    - orders.py:    /api/orders, /api/orders/{id}/reorder
    - clinic.py:    /api/practitioners[/{id}[/slots]], /api/services,
                    /api/time-slots, /api/appointments
    - blogs.py:     /api/blogs, /api/blogs/{id}
    - admin.py:     /api/admin/... (admin role only)
    - health.py:    /health

Routes stay thin: parse the request, call a service singleton, pick the
status code. Business rules live in ayurcare.services.
"""
