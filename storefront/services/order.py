import logging
import secrets
from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import delete, desc
from sqlmodel import Session, select

from storefront.core.config import StoreVariant, settings
from storefront.core.exceptions import (
    EmptyCart,
    Forbidden,
    InsufficientStock,
    InvalidTransition,
    NotFound,
)
from storefront.models.cart import CartItem
from storefront.models.order import (
    Order,
    OrderItem,
    OrderLineView,
    OrderStatus,
    OrderStatusChange,
    OrderView,
)
from storefront.models.user import Role
from storefront.services import workflow
from storefront.services.catalog import CatalogService

logger = logging.getLogger("storefront.order")

CENT = Decimal("0.01")


def generate_order_number() -> str:
    return f"ORD-{datetime.now(timezone.utc):%Y%m%d}-{secrets.token_hex(3).upper()}"


def _is_admin(role) -> bool:
    return Role(role) == Role.ADMIN


class OrderService:
    """
    Turns a user's cart into an immutable, priced order and moves orders
    along their variant's status graph.
    """

    def __init__(
        self,
        session: Session,
        catalog: Optional[CatalogService] = None,
        variant: Optional[StoreVariant] = None,
        decrement_stock: Optional[bool] = None,
    ):
        self.session = session
        self.catalog = catalog or CatalogService(session)
        self.variant = StoreVariant(variant or settings.STORE_VARIANT)
        self.decrement_stock = (
            settings.DECREMENT_STOCK_ON_CHECKOUT if decrement_stock is None else decrement_stock
        )

    # ==========================================
    # Checkout
    # ==========================================

    def checkout(self, user_id: int) -> OrderView:
        """
        Create an order from the user's cart in one transaction:
        1. Load (and lock) the cart lines; empty cart fails
        2. Re-read price and stock for every line
        3. Take stock with a conditional decrement, when enabled
        4. Snapshot unit prices into order lines, total = sum of subtotals
        5. Persist the PENDING order and delete the cart lines

        Any failure rolls the whole unit back: no order, cart untouched.
        """
        try:
            lines = self.session.exec(
                select(CartItem)
                .where(CartItem.user_id == user_id)
                .order_by(CartItem.id)
                .with_for_update()
                .execution_options(populate_existing=True)
            ).all()
            if not lines:
                raise EmptyCart()

            order_items = []
            total = Decimal("0.00")
            for line in lines:
                entry = self.catalog.lookup(line.item_id)
                if not entry.exists:
                    raise NotFound("Item", line.item_id)
                if entry.available_stock < line.quantity:
                    raise InsufficientStock(
                        line.item_id, line.quantity, entry.available_stock, entry.display_name
                    )

                if self.decrement_stock and not self.catalog.decrement_stock(line.item_id, line.quantity):
                    # Stock moved between the read and the update
                    current = self.catalog.lookup(line.item_id)
                    raise InsufficientStock(
                        line.item_id, line.quantity, current.available_stock, entry.display_name
                    )

                unit_price = entry.unit_price.quantize(CENT)
                order_items.append(OrderItem(
                    item_id=line.item_id,
                    item_name=entry.display_name,
                    quantity=line.quantity,
                    unit_price=unit_price,
                ))
                total += unit_price * line.quantity

            order = Order(
                order_number=generate_order_number(),
                user_id=user_id,
                total_amount=total,
                status=OrderStatus.PENDING,
                variant=self.variant,
                items=order_items,
            )
            self.session.add(order)
            self.session.exec(delete(CartItem).where(CartItem.user_id == user_id))
            self.session.commit()
        except (EmptyCart, InsufficientStock, NotFound) as exc:
            self.session.rollback()
            logger.warning("Checkout rejected for user %s: %s", user_id, exc.message)
            raise
        except Exception:
            self.session.rollback()
            raise

        self.session.refresh(order)
        logger.info(
            "Order %s created for user %s: %s lines, total %s",
            order.order_number, user_id, len(order_items), order.total_amount,
        )
        return self.to_view(order)

    # ==========================================
    # Status transitions
    # ==========================================

    def set_order_status(self, order_id: int, new_status: OrderStatus, acting_user_id: int, acting_role: Role) -> OrderView:
        new_status = OrderStatus(new_status)
        try:
            order = self.session.get(Order, order_id, with_for_update=True, populate_existing=True)
            if not order:
                raise NotFound("Order", order_id)
            if not _is_admin(acting_role):
                raise Forbidden("Only an administrator can change order status")
            if not workflow.can_transition(order.variant, order.status, new_status):
                if workflow.is_terminal(order.status):
                    logger.info("Order %s is closed at %s", order.order_number, order.status.value)
                raise InvalidTransition(order.status, new_status)

            previous = order.status
            order.status = new_status
            self.session.add(order)
            self.session.add(OrderStatusChange(
                order_id=order.id,
                from_status=previous,
                to_status=new_status,
                changed_by=acting_user_id,
            ))
            self.session.commit()
        except (Forbidden, InvalidTransition) as exc:
            self.session.rollback()
            logger.warning("Status change on order %s by user %s rejected: %s", order_id, acting_user_id, exc.message)
            raise
        except Exception:
            self.session.rollback()
            raise

        self.session.refresh(order)
        logger.info("Order %s: %s -> %s by user %s", order.order_number, previous.value, new_status.value, acting_user_id)
        return self.to_view(order)

    def status_history(self, order_id: int, user_id: int, role: Role) -> List[OrderStatusChange]:
        self._readable_order(order_id, user_id, role)
        return self.session.exec(
            select(OrderStatusChange)
            .where(OrderStatusChange.order_id == order_id)
            .order_by(OrderStatusChange.id)
        ).all()

    # ==========================================
    # Queries
    # ==========================================

    def get_order(self, order_id: int, user_id: int, role: Role) -> OrderView:
        return self.to_view(self._readable_order(order_id, user_id, role))

    def list_my_orders(self, user_id: int, page: int = 0, size: Optional[int] = None) -> List[OrderView]:
        """Orders owned by the user, newest first"""
        query = (
            select(Order)
            .where(Order.user_id == user_id)
            .order_by(desc(Order.created_at), desc(Order.id))
        )
        if size:
            query = query.offset(max(page, 0) * size).limit(size)
        return [self.to_view(order) for order in self.session.exec(query).all()]

    def list_orders(self, role: Role, status: Optional[OrderStatus] = None, page: int = 0, size: Optional[int] = None) -> List[OrderView]:
        """Every order in the store, for administrators"""
        if not _is_admin(role):
            raise Forbidden("Admin access required")
        query = select(Order).order_by(desc(Order.created_at), desc(Order.id))
        if status:
            query = query.where(Order.status == status)
        size = size or settings.ORDERS_PAGE_SIZE
        query = query.offset(max(page, 0) * size).limit(size)
        return [self.to_view(order) for order in self.session.exec(query).all()]

    def to_view(self, order: Order) -> OrderView:
        items = sorted(order.items, key=lambda item: item.id)
        return OrderView(
            id=order.id,
            order_number=order.order_number,
            user_id=order.user_id,
            status=order.status,
            variant=order.variant,
            total_amount=order.total_amount,
            created_at=order.created_at,
            items=[
                OrderLineView(
                    item_id=item.item_id,
                    item_name=item.item_name,
                    quantity=item.quantity,
                    unit_price=item.unit_price,
                    subtotal=item.subtotal,
                )
                for item in items
            ],
            allowed_transitions=workflow.allowed_transitions(order.variant, order.status),
        )

    # ==========================================
    # Private Helpers
    # ==========================================

    def _readable_order(self, order_id: int, user_id: int, role: Role) -> Order:
        order = self.session.get(Order, order_id)
        if not order:
            raise NotFound("Order", order_id)
        if order.user_id != user_id and not _is_admin(role):
            logger.warning("User %s denied read of order %s", user_id, order_id)
            raise Forbidden("Not your order")
        return order
