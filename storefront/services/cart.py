import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Optional, Tuple

from sqlalchemy import delete
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from storefront.core.exceptions import Forbidden, InsufficientStock, InvalidQuantity, NotFound
from storefront.models.cart import CartItem, CartLineView, CartSummary
from storefront.services.catalog import CatalogEntry, CatalogService

logger = logging.getLogger("storefront.cart")

ZERO = Decimal("0.00")


def _validate_quantity(quantity) -> None:
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise InvalidQuantity(quantity)


class CartService:
    """
    Per-user shopping cart: one line per (user, item), quantities capped by
    catalog stock at the moment of mutation. Every mutating call commits once
    or rolls back entirely.
    """

    def __init__(self, session: Session, catalog: Optional[CatalogService] = None):
        self.session = session
        self.catalog = catalog or CatalogService(session)

    # Queries

    def list_cart(self, user_id: int) -> List[CartLineView]:
        """Get all cart lines for a user, priced fresh from the catalog"""
        lines = self.session.exec(
            select(CartItem).where(CartItem.user_id == user_id).order_by(CartItem.id)
        ).all()
        return [self._to_view(line, self.catalog.lookup(line.item_id)) for line in lines]

    def cart_summary(self, user_id: int) -> CartSummary:
        lines = self.list_cart(user_id)
        return CartSummary(
            lines=lines,
            item_count=sum(line.quantity for line in lines),
            estimated_total=sum((line.subtotal for line in lines), ZERO),
        )

    # Commands

    def add_to_cart(self, user_id: int, item_id: int, quantity: int) -> CartLineView:
        """Add item to cart, or aggregate into the existing line for that item"""
        _validate_quantity(quantity)
        if quantity < 1:
            raise InvalidQuantity(quantity)

        try:
            line, entry = self._add_or_aggregate(user_id, item_id, quantity)
            self.session.commit()
        except IntegrityError:
            # Another request inserted the same (user, item) line first
            self.session.rollback()
            logger.info("Cart line race for user %s item %s, retrying as aggregate", user_id, item_id)
            try:
                line, entry = self._add_or_aggregate(user_id, item_id, quantity)
                self.session.commit()
            except Exception:
                self.session.rollback()
                raise
        except Exception:
            self.session.rollback()
            raise

        self.session.refresh(line)
        logger.info("User %s cart: item %s now x%s", user_id, item_id, line.quantity)
        return self._to_view(line, entry)

    def update_quantity(self, user_id: int, cart_item_id: int, quantity: int) -> Optional[CartLineView]:
        """
        Set a line's quantity. Anything below 1 removes the line and returns None.
        """
        _validate_quantity(quantity)
        try:
            line = self._owned_line(user_id, cart_item_id)

            if quantity < 1:
                self.session.delete(line)
                self.session.commit()
                logger.info("User %s removed cart line %s by quantity %s", user_id, cart_item_id, quantity)
                return None

            entry = self.catalog.lookup(line.item_id)
            if not entry.exists:
                raise NotFound("Item", line.item_id)
            if entry.available_stock < quantity:
                raise InsufficientStock(line.item_id, quantity, entry.available_stock, entry.display_name)

            line.quantity = quantity
            line.updated_at = datetime.now(timezone.utc)
            self.session.add(line)
            self.session.commit()
        except InsufficientStock as exc:
            self.session.rollback()
            logger.warning("User %s cart update rejected: %s", user_id, exc.message)
            raise
        except Exception:
            self.session.rollback()
            raise

        self.session.refresh(line)
        return self._to_view(line, entry)

    def remove_from_cart(self, user_id: int, cart_item_id: int) -> None:
        try:
            line = self._owned_line(user_id, cart_item_id)
            self.session.delete(line)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
        logger.info("User %s removed cart line %s", user_id, cart_item_id)

    def clear_cart(self, user_id: int) -> int:
        """Clear all items from user's cart, returning how many lines went"""
        try:
            result = self.session.exec(delete(CartItem).where(CartItem.user_id == user_id))
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
        return result.rowcount

    # Private helpers

    def _add_or_aggregate(self, user_id: int, item_id: int, quantity: int) -> Tuple[CartItem, CatalogEntry]:
        entry = self.catalog.lookup(item_id)
        if not entry.exists:
            raise NotFound("Item", item_id)
        if entry.available_stock < quantity:
            logger.warning("User %s asked for %s of item %s, stock %s", user_id, quantity, item_id, entry.available_stock)
            raise InsufficientStock(item_id, quantity, entry.available_stock, entry.display_name)

        line = self.session.exec(
            select(CartItem)
            .where(CartItem.user_id == user_id, CartItem.item_id == item_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        ).first()

        if line:
            new_quantity = line.quantity + quantity
            if new_quantity > entry.available_stock:
                logger.warning(
                    "User %s cart line for item %s would reach %s, stock %s",
                    user_id, item_id, new_quantity, entry.available_stock,
                )
                raise InsufficientStock(item_id, new_quantity, entry.available_stock, entry.display_name)
            line.quantity = new_quantity
            line.updated_at = datetime.now(timezone.utc)
        else:
            line = CartItem(user_id=user_id, item_id=item_id, quantity=quantity)

        self.session.add(line)
        self.session.flush()
        return line, entry

    def _owned_line(self, user_id: int, cart_item_id: int) -> CartItem:
        line = self.session.get(CartItem, cart_item_id, with_for_update=True, populate_existing=True)
        if not line:
            raise NotFound("Cart item", cart_item_id)
        if line.user_id != user_id:
            logger.warning("User %s tried to touch cart line %s of user %s", user_id, cart_item_id, line.user_id)
            raise Forbidden("Not your cart item")
        return line

    def _to_view(self, line: CartItem, entry: CatalogEntry) -> CartLineView:
        unit_price = entry.unit_price if entry.exists else ZERO
        return CartLineView(
            id=line.id,
            item_id=line.item_id,
            item_name=entry.display_name or f"Item {line.item_id}",
            quantity=line.quantity,
            unit_price=unit_price,
            subtotal=unit_price * line.quantity,
            available=entry.exists,
        )
