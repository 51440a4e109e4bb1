from typing import List, Optional
from decimal import Decimal
from datetime import datetime, timezone
from enum import Enum
from sqlmodel import Field, Relationship, SQLModel
from sqlalchemy import CheckConstraint

from storefront.core.config import StoreVariant


def _now() -> datetime:
    return datetime.now(timezone.utc)


class OrderStatus(str, Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    PREPARING = "PREPARING"
    READY = "READY"
    OUT_FOR_DELIVERY = "OUT_FOR_DELIVERY"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


class Order(SQLModel, table=True):
    __tablename__ = "orders"

    id: Optional[int] = Field(default=None, primary_key=True)
    # Human-facing identifier, e.g. ORD-20261017-4F3A9C
    order_number: str = Field(unique=True, index=True)
    user_id: int = Field(foreign_key="user.id", index=True)

    # Sum of line subtotals at checkout, never recomputed
    total_amount: Decimal = Field(max_digits=14, decimal_places=2)

    status: OrderStatus = Field(default=OrderStatus.PENDING, index=True)
    # Status graph this order moves along
    variant: StoreVariant = Field(default=StoreVariant.RETAIL)

    created_at: datetime = Field(default_factory=_now, index=True)

    items: List["OrderItem"] = Relationship(back_populates="order")


class OrderItem(SQLModel, table=True):
    __tablename__ = "order_item"
    __table_args__ = (
        CheckConstraint("quantity >= 1", name="ck_order_item_qty"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    order_id: int = Field(foreign_key="orders.id", index=True)
    item_id: int = Field(foreign_key="catalog_item.id")

    # Snapshot at time of checkout
    item_name: str
    quantity: int
    unit_price: Decimal = Field(max_digits=12, decimal_places=2)

    order: Optional[Order] = Relationship(back_populates="items")

    @property
    def subtotal(self) -> Decimal:
        return self.unit_price * self.quantity


class OrderStatusChange(SQLModel, table=True):
    __tablename__ = "order_status_change"

    id: Optional[int] = Field(default=None, primary_key=True)
    order_id: int = Field(foreign_key="orders.id", index=True)
    from_status: OrderStatus
    to_status: OrderStatus
    changed_by: int = Field(foreign_key="user.id")
    changed_at: datetime = Field(default_factory=_now)


class OrderStatusUpdate(SQLModel):
    status: OrderStatus


class OrderLineView(SQLModel):
    item_id: int
    item_name: str
    quantity: int
    unit_price: Decimal
    subtotal: Decimal


class OrderView(SQLModel):
    id: int
    order_number: str
    user_id: int
    status: OrderStatus
    variant: StoreVariant
    total_amount: Decimal
    created_at: datetime
    items: List[OrderLineView] = []
    allowed_transitions: List[OrderStatus] = []
