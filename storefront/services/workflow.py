"""
Order status graphs per store variant.

Each variant declares a linear forward path. CANCELLED is reachable from
every status that is not terminal; DELIVERED and CANCELLED are terminal.
"""
from typing import Dict, FrozenSet, List, Tuple

from storefront.core.config import StoreVariant
from storefront.models.order import OrderStatus

FORWARD_PATHS: Dict[StoreVariant, Tuple[OrderStatus, ...]] = {
    StoreVariant.RETAIL: (
        OrderStatus.PENDING,
        OrderStatus.CONFIRMED,
        OrderStatus.SHIPPED,
        OrderStatus.DELIVERED,
    ),
    StoreVariant.FOOD: (
        OrderStatus.PENDING,
        OrderStatus.CONFIRMED,
        OrderStatus.PREPARING,
        OrderStatus.READY,
        OrderStatus.OUT_FOR_DELIVERY,
        OrderStatus.DELIVERED,
    ),
    # Bookings are confirmed or cancelled, nothing ships
    StoreVariant.EVENTS: (
        OrderStatus.PENDING,
        OrderStatus.CONFIRMED,
    ),
}

TERMINAL_STATUSES: FrozenSet[OrderStatus] = frozenset(
    {OrderStatus.DELIVERED, OrderStatus.CANCELLED}
)


def _build_graph(path: Tuple[OrderStatus, ...]) -> Dict[OrderStatus, FrozenSet[OrderStatus]]:
    graph = {}
    for index, status in enumerate(path):
        successors = set()
        if index + 1 < len(path):
            successors.add(path[index + 1])
        if status not in TERMINAL_STATUSES:
            successors.add(OrderStatus.CANCELLED)
        graph[status] = frozenset(successors)
    graph[OrderStatus.CANCELLED] = frozenset()
    return graph


TRANSITIONS: Dict[StoreVariant, Dict[OrderStatus, FrozenSet[OrderStatus]]] = {
    variant: _build_graph(path) for variant, path in FORWARD_PATHS.items()
}


def allowed_transitions(variant: StoreVariant, current: OrderStatus) -> List[OrderStatus]:
    """Legal next statuses, forward step first."""
    successors = TRANSITIONS[variant].get(current, frozenset())
    path = FORWARD_PATHS[variant]
    return sorted(
        successors,
        key=lambda s: path.index(s) if s in path else len(path),
    )


def can_transition(variant: StoreVariant, current: OrderStatus, new: OrderStatus) -> bool:
    return new in TRANSITIONS[variant].get(current, frozenset())


def is_terminal(status: OrderStatus) -> bool:
    return status in TERMINAL_STATUSES
