from typing import List, Optional
from decimal import Decimal
from datetime import datetime, timezone
from sqlmodel import Field, SQLModel
from sqlalchemy import CheckConstraint, UniqueConstraint


def _now() -> datetime:
    return datetime.now(timezone.utc)


class CartItem(SQLModel, table=True):
    __tablename__ = "cart_item"
    __table_args__ = (
        UniqueConstraint("user_id", "item_id", name="uq_cart_user_item"),
        CheckConstraint("quantity >= 1", name="ck_cart_qty"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)

    # References
    user_id: int = Field(foreign_key="user.id", index=True)
    item_id: int = Field(foreign_key="catalog_item.id")

    # Cart Details
    quantity: int = Field(default=1, ge=1)

    # Timestamps
    created_at: datetime = Field(default_factory=_now)
    updated_at: datetime = Field(default_factory=_now)


class CartItemCreate(SQLModel):
    item_id: int
    quantity: int = 1


class CartItemUpdate(SQLModel):
    quantity: int


class CartLineView(SQLModel):
    """A cart line priced against the catalog at read time."""
    id: int
    item_id: int
    item_name: str
    quantity: int
    unit_price: Decimal
    subtotal: Decimal
    available: bool = True


class CartSummary(SQLModel):
    lines: List[CartLineView] = []
    item_count: int = 0
    # Indicative only: checkout re-prices every line
    estimated_total: Decimal = Decimal("0.00")
