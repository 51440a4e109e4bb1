# Import all models to register them with SQLModel
from storefront.models.user import User, Role
from storefront.models.catalog import CatalogItem
from storefront.models.cart import CartItem
from storefront.models.order import Order, OrderItem, OrderStatus, OrderStatusChange

__all__ = [
    "User",
    "Role",
    "CatalogItem",
    "CartItem",
    "Order",
    "OrderItem",
    "OrderStatus",
    "OrderStatusChange",
]
