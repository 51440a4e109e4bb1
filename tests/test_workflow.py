import pytest

from storefront.core.config import StoreVariant
from storefront.models.order import OrderStatus
from storefront.services import workflow

S = OrderStatus


class TestForwardPaths:
    @pytest.mark.parametrize("variant", list(StoreVariant))
    def test_every_forward_step_is_allowed(self, variant):
        path = workflow.FORWARD_PATHS[variant]
        for current, nxt in zip(path, path[1:]):
            assert workflow.can_transition(variant, current, nxt)

    def test_retail_path(self):
        assert workflow.FORWARD_PATHS[StoreVariant.RETAIL] == (S.PENDING, S.CONFIRMED, S.SHIPPED, S.DELIVERED)

    def test_food_path(self):
        assert workflow.FORWARD_PATHS[StoreVariant.FOOD] == (
            S.PENDING, S.CONFIRMED, S.PREPARING, S.READY, S.OUT_FOR_DELIVERY, S.DELIVERED,
        )

    def test_events_stop_at_confirmed(self):
        assert workflow.allowed_transitions(StoreVariant.EVENTS, S.CONFIRMED) == [S.CANCELLED]


class TestIllegalMoves:
    def test_cannot_skip_steps(self):
        assert not workflow.can_transition(StoreVariant.RETAIL, S.PENDING, S.SHIPPED)
        assert not workflow.can_transition(StoreVariant.FOOD, S.CONFIRMED, S.OUT_FOR_DELIVERY)
        assert not workflow.can_transition(StoreVariant.FOOD, S.PREPARING, S.OUT_FOR_DELIVERY)
        assert not workflow.can_transition(StoreVariant.FOOD, S.READY, S.DELIVERED)

    def test_cannot_go_backwards(self):
        assert not workflow.can_transition(StoreVariant.RETAIL, S.SHIPPED, S.CONFIRMED)

    @pytest.mark.parametrize("status", list(OrderStatus))
    def test_self_transition_is_rejected(self, status):
        for variant in StoreVariant:
            assert not workflow.can_transition(variant, status, status)

    def test_statuses_from_other_variants_are_unknown(self):
        assert not workflow.can_transition(StoreVariant.RETAIL, S.CONFIRMED, S.PREPARING)
        assert workflow.allowed_transitions(StoreVariant.RETAIL, S.PREPARING) == []


class TestTerminalStatuses:
    @pytest.mark.parametrize("variant", list(StoreVariant))
    @pytest.mark.parametrize("terminal", [S.DELIVERED, S.CANCELLED])
    def test_nothing_leaves_a_terminal_status(self, variant, terminal):
        assert workflow.allowed_transitions(variant, terminal) == []
        assert workflow.is_terminal(terminal)

    @pytest.mark.parametrize("variant", list(StoreVariant))
    def test_cancel_reachable_from_every_open_status(self, variant):
        for status in workflow.FORWARD_PATHS[variant]:
            if status not in workflow.TERMINAL_STATUSES:
                assert workflow.can_transition(variant, status, S.CANCELLED)

    def test_forward_step_listed_before_cancel(self):
        assert workflow.allowed_transitions(StoreVariant.FOOD, S.PREPARING) == [S.READY, S.CANCELLED]
