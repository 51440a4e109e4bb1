"""
Business-level failures of the cart and order workflow.

Each class carries the HTTP status a transport should answer with; the
services never raise ``HTTPException`` themselves.
"""
from typing import Optional


class StoreError(Exception):
    """Base exception for all business rule violations."""
    status_code = 400

    def __init__(self, message: str = "Request could not be processed"):
        self.message = message
        super().__init__(self.message)


class NotFound(StoreError):
    """Referenced cart line, order or catalog item does not exist."""
    status_code = 404

    def __init__(self, resource: str, resource_id):
        self.resource = resource
        self.resource_id = resource_id
        super().__init__(f"{resource} {resource_id} not found")


class Forbidden(StoreError):
    """Ownership or role check failed."""
    status_code = 403

    def __init__(self, message: str = "Not authorized"):
        super().__init__(message)


class InsufficientStock(StoreError):
    status_code = 409

    def __init__(self, item_id: int, requested: int, available: int, item_name: Optional[str] = None):
        self.item_id = item_id
        self.requested = requested
        self.available = available
        label = item_name or f"item {item_id}"
        super().__init__(
            f"Insufficient stock for {label}: requested {requested}, only {available} available"
        )


class EmptyCart(StoreError):
    status_code = 400

    def __init__(self):
        super().__init__("Cart is empty")


class InvalidTransition(StoreError):
    status_code = 409

    def __init__(self, current, requested):
        self.current = current
        self.requested = requested
        super().__init__(f"Cannot move order from {current.value} to {requested.value}")


class InvalidQuantity(StoreError):
    status_code = 422

    def __init__(self, quantity):
        self.quantity = quantity
        super().__init__(f"Quantity must be a positive integer, got {quantity!r}")
