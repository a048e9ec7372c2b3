# fabtrack/routers/__init__.py

from .auth.auth_router import router as auth_router
from .auth.activity_router import router as activity_router

from .clients.client_router import router as client_router

from .orders.order_router import router as order_router


__all__ = [
"auth_router",
"activity_router",

"client_router",

"order_router",
]
