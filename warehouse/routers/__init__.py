# warehouse/routers/__init__.py

from .auth.auth_router import router as auth_router

from .masters.product_router import router as product_router

from .inventory.inventory_batch_router import router as inventory_batch_router
from .inventory.inventory_request_router import router as inventory_request_router
from .inventory.location_router import router as location_router

from .orders.order_router import router as order_router

from .admin.admin_router import router as admin_router
from .admin.admin_router import state_router


__all__ = [
"auth_router",

"product_router",

"inventory_batch_router",
"inventory_request_router",
"location_router",

"order_router",

"admin_router",
"state_router",
]
