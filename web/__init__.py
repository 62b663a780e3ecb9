"""
MiniSocial web layer.

``web.main.create_app`` builds the FastAPI app; routers live in
``web.routes``.
"""
