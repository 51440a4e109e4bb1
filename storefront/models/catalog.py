from typing import Optional
from decimal import Decimal
from datetime import datetime, timezone
from sqlmodel import Field, SQLModel
from sqlalchemy import CheckConstraint


def _now() -> datetime:
    return datetime.now(timezone.utc)


class CatalogItemBase(SQLModel):
    name: str = Field(index=True)
    description: str = ""

    # Pricing
    unit_price: Decimal = Field(max_digits=12, decimal_places=2, ge=0)

    # Inventory
    stock_quantity: int = Field(default=0, ge=0)

    is_active: bool = Field(default=True)


class CatalogItem(CatalogItemBase, table=True):
    """A product, menu item or event seat pool, depending on the store variant."""
    __tablename__ = "catalog_item"
    __table_args__ = (
        CheckConstraint("stock_quantity >= 0", name="ck_catalog_stock"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    created_at: datetime = Field(default_factory=_now)
    updated_at: datetime = Field(default_factory=_now)


class CatalogItemCreate(CatalogItemBase):
    pass


class CatalogItemRead(CatalogItemBase):
    id: int


class StockUpdate(SQLModel):
    stock_quantity: int = Field(ge=0)


class PriceUpdate(SQLModel):
    unit_price: Decimal = Field(max_digits=12, decimal_places=2, ge=0)
