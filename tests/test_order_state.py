# Order lifecycle tests

from datetime import timedelta

import pytest

from tableside.db.orders import OrderStatus
from tableside.services import order_state
from tableside.services.order_state import (
    InvalidTransitionError, OrderNotFoundError, TableClosedError, WaiterNameRequired,
)

from conftest import T0, make_order


class TestConfirm:
    """pending -> ready"""

    def test_second_order_inherits_table_waiter(self, session, seeded):
        first = make_order(session, created_at=T0)
        second = make_order(session, created_at=T0 + timedelta(minutes=1))

        order_state.confirm_order(session, "r1", first.id, "Sam", now=T0 + timedelta(minutes=2))
        confirmed = order_state.confirm_order(session, "r1", second.id)

        assert confirmed.status == OrderStatus.READY
        assert confirmed.waiter_name == "Sam"

    def test_table_waiter_wins_over_given_name(self, session, seeded):
        first = make_order(session)
        second = make_order(session)
        order_state.confirm_order(session, "r1", first.id, "Sam")

        confirmed = order_state.confirm_order(session, "r1", second.id, "Kim")

        assert confirmed.waiter_name == "Sam"

    def test_first_confirm_needs_a_name(self, session, seeded):
        order = make_order(session)

        with pytest.raises(WaiterNameRequired):
            order_state.confirm_order(session, "r1", order.id, "  ")

        session.refresh(order)
        assert order.status == OrderStatus.PENDING

    def test_other_tables_do_not_share_waiters(self, session, seeded):
        first = make_order(session, table_number="12")
        other = make_order(session, table_number="4")
        order_state.confirm_order(session, "r1", first.id, "Sam")

        with pytest.raises(WaiterNameRequired):
            order_state.confirm_order(session, "r1", other.id)

    def test_confirm_twice_is_rejected(self, session, seeded):
        order = make_order(session)
        order_state.confirm_order(session, "r1", order.id, "Sam")

        with pytest.raises(InvalidTransitionError):
            order_state.confirm_order(session, "r1", order.id, "Sam")

    def test_closed_table_cannot_confirm(self, session, seeded):
        order = make_order(session)
        order_state.close_table(session, "r1", "12")

        with pytest.raises(TableClosedError):
            order_state.confirm_order(session, "r1", order.id, "Sam")

    def test_order_of_another_restaurant_is_not_found(self, session, seeded):
        order = make_order(session)

        with pytest.raises(OrderNotFoundError):
            order_state.confirm_order(session, "r2", order.id, "Sam")
        with pytest.raises(OrderNotFoundError):
            order_state.confirm_order(session, "r1", 9999, "Sam")


class TestServe:
    """ready -> completed"""

    def test_service_time_in_whole_minutes(self, session, seeded):
        order = make_order(session, created_at=T0)
        order_state.confirm_order(session, "r1", order.id, "Sam", now=T0)

        served = order_state.mark_served(session, "r1", order.id, now=T0 + timedelta(minutes=17, seconds=40))

        assert served.status == OrderStatus.COMPLETED
        assert served.service_time_minutes == 17

    def test_pending_order_cannot_be_served(self, session, seeded):
        order = make_order(session)

        with pytest.raises(InvalidTransitionError):
            order_state.mark_served(session, "r1", order.id)

    def test_serving_twice_keeps_first_service_time(self, session, seeded):
        order = make_order(session, created_at=T0)
        order_state.confirm_order(session, "r1", order.id, "Sam", now=T0)
        order_state.mark_served(session, "r1", order.id, now=T0 + timedelta(minutes=17))

        with pytest.raises(InvalidTransitionError):
            order_state.mark_served(session, "r1", order.id, now=T0 + timedelta(minutes=40))

        session.refresh(order)
        assert order.service_time_minutes == 17

    def test_service_minutes_never_negative(self):
        assert order_state.service_minutes(T0, T0 - timedelta(minutes=5)) == 0


class TestClose:
    """Closing orders and tables"""

    def test_close_order_is_idempotent(self, session, seeded):
        order = make_order(session)

        closed = order_state.close_order(session, "r1", order.id)
        again = order_state.close_order(session, "r1", order.id)

        assert closed.status == OrderStatus.COMPLETED
        assert again.status == OrderStatus.COMPLETED

    def test_close_table_marks_every_order(self, session, seeded):
        make_order(session, table_number="12")
        make_order(session, table_number="12", diner_name="Jo")
        other = make_order(session, table_number="4")

        assert order_state.close_table(session, "r1", "12") == 2
        assert order_state.close_table(session, "r1", "12") == 0

        closed = order_state.table_orders(session, "r1", "12")
        assert all(order.table_closed for order in closed)
        session.refresh(other)
        assert not other.table_closed


class TestRequestFlags:
    """Bill requests and waiter calls"""

    def test_bill_request_scoped_to_diner(self, session, seeded):
        alex = make_order(session, diner_name="Alex")
        jo = make_order(session, diner_name="Jo")

        assert order_state.request_bill(session, "r1", "12", "Alex") == 1

        session.refresh(alex)
        session.refresh(jo)
        assert alex.bill_requested
        assert not jo.bill_requested

    def test_request_without_orders_is_not_found(self, session, seeded):
        with pytest.raises(OrderNotFoundError):
            order_state.call_waiter(session, "r1", "12", "Nobody")

    def test_dismiss_clears_the_whole_table(self, session, seeded):
        alex = make_order(session, diner_name="Alex", waiter_called=True)
        jo = make_order(session, diner_name="Jo", waiter_called=True)

        assert order_state.dismiss_waiter_call(session, "r1", "12") == 2
        assert order_state.dismiss_waiter_call(session, "r1", "12") == 0

        session.refresh(alex)
        session.refresh(jo)
        assert not alex.waiter_called
        assert not jo.waiter_called

    def test_flags_do_not_change_status(self, session, seeded):
        order = make_order(session)
        order_state.request_bill(session, "r1", "12", "Alex")
        order_state.dismiss_bill_request(session, "r1", "12")

        session.refresh(order)
        assert order.status == OrderStatus.PENDING
        assert not order.bill_requested


class TestRestaurantOrders:
    def test_newest_first_and_scoped(self, session, seeded):
        old = make_order(session, created_at=T0)
        new = make_order(session, created_at=T0 + timedelta(hours=1))

        orders = order_state.restaurant_orders(session, "r1")

        assert [o.id for o in orders] == [new.id, old.id]
        assert order_state.restaurant_orders(session, "r2") == []
