import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import update
from sqlmodel import Session, or_, select

from storefront.core.exceptions import NotFound
from storefront.models.catalog import CatalogItem, CatalogItemCreate

logger = logging.getLogger("storefront.catalog")


@dataclass(frozen=True)
class CatalogEntry:
    item_id: int
    exists: bool
    unit_price: Decimal = Decimal("0.00")
    available_stock: int = 0
    display_name: str = ""


class CatalogService:
    """Read-only price/stock lookup used by the cart and checkout, plus admin upkeep."""

    def __init__(self, session: Session):
        self.session = session

    def lookup(self, item_id: int) -> CatalogEntry:
        """Fresh read of price and stock; inactive items look up as absent."""
        item = self.session.get(CatalogItem, item_id, populate_existing=True)
        if not item or not item.is_active:
            return CatalogEntry(item_id=item_id, exists=False)
        return CatalogEntry(
            item_id=item.id,
            exists=True,
            unit_price=Decimal(item.unit_price),
            available_stock=item.stock_quantity,
            display_name=item.name,
        )

    def decrement_stock(self, item_id: int, quantity: int) -> bool:
        """
        Take ``quantity`` units in a single conditional UPDATE.
        Returns False, changing nothing, when fewer units remain.
        Does not commit: the caller owns the transaction.
        """
        result = self.session.exec(
            update(CatalogItem)
            .where(CatalogItem.id == item_id, CatalogItem.stock_quantity >= quantity)
            .values(stock_quantity=CatalogItem.stock_quantity - quantity)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    # Admin upkeep

    def list_items(self, include_inactive: bool = False) -> List[CatalogItem]:
        query = select(CatalogItem).order_by(CatalogItem.id)
        if not include_inactive:
            query = query.where(CatalogItem.is_active == True)  # noqa: E712
        return self.session.exec(query).all()

    def search(self, q: str) -> List[CatalogItem]:
        """Active items whose name or description contains ``q``, case-insensitive"""
        pattern = f"%{q}%"
        return self.session.exec(
            select(CatalogItem)
            .where(
                CatalogItem.is_active == True,  # noqa: E712
                or_(CatalogItem.name.ilike(pattern), CatalogItem.description.ilike(pattern)),
            )
            .order_by(CatalogItem.id)
        ).all()

    def get_item(self, item_id: int) -> CatalogItem:
        item = self.session.get(CatalogItem, item_id)
        if not item or not item.is_active:
            raise NotFound("Item", item_id)
        return item

    def create_item(self, data: CatalogItemCreate) -> CatalogItem:
        item = CatalogItem.model_validate(data)
        self.session.add(item)
        self.session.commit()
        self.session.refresh(item)
        logger.info("Catalog item %s created (stock %s)", item.id, item.stock_quantity)
        return item

    def set_stock(self, item_id: int, stock_quantity: int) -> CatalogItem:
        item = self.session.get(CatalogItem, item_id)
        if not item:
            raise NotFound("Item", item_id)
        item.stock_quantity = stock_quantity
        item.updated_at = datetime.now(timezone.utc)
        self.session.add(item)
        self.session.commit()
        self.session.refresh(item)
        return item

    def set_price(self, item_id: int, unit_price: Decimal) -> CatalogItem:
        item = self.session.get(CatalogItem, item_id)
        if not item:
            raise NotFound("Item", item_id)
        item.unit_price = unit_price
        item.updated_at = datetime.now(timezone.utc)
        self.session.add(item)
        self.session.commit()
        self.session.refresh(item)
        return item
