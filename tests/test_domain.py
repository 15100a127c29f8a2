"""Tests for money arithmetic and status rules."""

from datetime import datetime
from decimal import Decimal

import pytest

from meatly.domain.models import (
    Order, OrderStatus, Delivery, DeliveryStatus,
    ORDER_TRANSITIONS, DELIVERY_PROGRESS, DELIVERY_SEQUENCE
)
from meatly.domain.money import to_money, line_total, order_total


def make_order(status: OrderStatus) -> Order:
    now = datetime(2026, 1, 1, 12, 0)
    return Order(
        id=1,
        user_id=1,
        total_amount=Decimal("10.00"),
        status=status,
        delivery_address="123 Main St",
        delivery_phone="+1-555-0000",
        created_at=now,
        updated_at=now,
    )


def make_delivery(status: DeliveryStatus) -> Delivery:
    now = datetime(2026, 1, 1, 12, 0)
    return Delivery(id=1, order_id=1, status=status, created_at=now, updated_at=now)


class TestMoney:
    def test_to_money_keeps_two_places(self):
        assert to_money(Decimal("12.99")) == Decimal("12.99")
        assert str(to_money(5)) == "5.00"

    def test_to_money_from_float_does_not_drift(self):
        assert to_money(12.99) == Decimal("12.99")
        assert to_money(0.1 + 0.2) == Decimal("0.30")

    def test_to_money_rounds_half_up(self):
        assert to_money(Decimal("1.005")) == Decimal("1.01")
        assert to_money(Decimal("1.004")) == Decimal("1.00")

    def test_line_total(self):
        assert line_total(Decimal("12.99"), 2) == Decimal("25.98")
        assert line_total(Decimal("24.99"), 1) == Decimal("24.99")

    def test_order_total_is_exact(self):
        lines = [line_total(Decimal("12.99"), 2), line_total(Decimal("24.99"), 1)]
        assert order_total(lines) == Decimal("50.97")

    def test_order_total_of_many_cents(self):
        # 0.01 summed a thousand times in floats is not 10.0
        assert order_total([Decimal("0.01")] * 1000) == Decimal("10.00")

    def test_order_total_empty(self):
        assert order_total([]) == Decimal("0.00")


class TestOrderStatus:
    def test_every_status_has_transitions(self):
        assert set(ORDER_TRANSITIONS) == set(OrderStatus)

    @pytest.mark.parametrize(
        "current, target",
        [
            (OrderStatus.PENDING, OrderStatus.CONFIRMED),
            (OrderStatus.CONFIRMED, OrderStatus.PREPARING),
            (OrderStatus.PREPARING, OrderStatus.OUT_FOR_DELIVERY),
            (OrderStatus.OUT_FOR_DELIVERY, OrderStatus.DELIVERED),
            (OrderStatus.PENDING, OrderStatus.CANCELLED),
            (OrderStatus.CONFIRMED, OrderStatus.CANCELLED),
        ],
    )
    def test_allowed_transitions(self, current, target):
        assert make_order(current).can_transition_to(target)

    @pytest.mark.parametrize(
        "current, target",
        [
            (OrderStatus.PENDING, OrderStatus.DELIVERED),
            (OrderStatus.PREPARING, OrderStatus.CANCELLED),
            (OrderStatus.DELIVERED, OrderStatus.PENDING),
            (OrderStatus.CANCELLED, OrderStatus.CONFIRMED),
            (OrderStatus.CONFIRMED, OrderStatus.PENDING),
        ],
    )
    def test_rejected_transitions(self, current, target):
        assert not make_order(current).can_transition_to(target)

    def test_terminal_states(self):
        assert ORDER_TRANSITIONS[OrderStatus.DELIVERED] == frozenset()
        assert ORDER_TRANSITIONS[OrderStatus.CANCELLED] == frozenset()


class TestDeliveryStatus:
    def test_every_status_has_progress_and_position(self):
        assert set(DELIVERY_PROGRESS) == set(DeliveryStatus)
        assert set(DELIVERY_SEQUENCE) == set(DeliveryStatus)

    def test_progress_lookup(self):
        assert [DELIVERY_PROGRESS[s] for s in DELIVERY_SEQUENCE] == [20, 40, 60, 80, 100]
        assert make_delivery(DeliveryStatus.IN_TRANSIT).progress == 80

    def test_moves_forward_only(self):
        delivery = make_delivery(DeliveryStatus.PICKED_UP)
        assert delivery.can_move_to(DeliveryStatus.IN_TRANSIT)
        assert delivery.can_move_to(DeliveryStatus.DELIVERED)
        assert delivery.can_move_to(DeliveryStatus.PICKED_UP)
        assert not delivery.can_move_to(DeliveryStatus.ASSIGNED)
