"""
Order lifecycle: pending -> ready -> completed, plus the bill/waiter request
flags and table closing, which are independent of the status.
"""
import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import selectinload
from sqlmodel import Session, select

from ..db.orders import Order, OrderStatus, STATUS_FLOW

logger = logging.getLogger(__name__)


class OrderStateError(Exception):
    pass


class OrderNotFoundError(OrderStateError):
    pass


class InvalidTransitionError(OrderStateError):
    pass


class TableClosedError(OrderStateError):
    pass


class WaiterNameRequired(OrderStateError):
    """Nobody serves this table yet; the operator has to name a waiter."""


def get_order(session: Session, restaurant_id: str, order_id: int) -> Order:
    order = session.get(Order, order_id)
    if not order or order.restaurant_id != restaurant_id:
        raise OrderNotFoundError(f"Order {order_id} not found")
    return order


def table_orders(session: Session, restaurant_id: str, table_number: str,
                 include_closed: bool = True) -> List[Order]:
    query = select(Order).where(Order.restaurant_id == restaurant_id, Order.table_number == table_number)
    if not include_closed:
        query = query.where(Order.table_closed == False)  # noqa: E712
    return list(session.exec(query.order_by(Order.created_at)).all())


def table_waiter(session: Session, order: Order) -> Optional[str]:
    """Waiter already serving the order's table, if any."""
    for other in table_orders(session, order.restaurant_id, order.table_number, include_closed=False):
        if other.id != order.id and other.waiter_name:
            return other.waiter_name
    return None


def _advance(order: Order, target: OrderStatus):
    if STATUS_FLOW.get(order.status) != target:
        raise InvalidTransitionError(
            f"Cannot move order {order.id} from {order.status.value} to {target.value}"
        )
    order.status = target


def _commit(session: Session, *orders: Order):
    try:
        for order in orders:
            session.add(order)
        session.commit()
    except Exception:
        session.rollback()
        raise
    for order in orders:
        session.refresh(order)


def confirm_order(session: Session, restaurant_id: str, order_id: int,
                  waiter_name: Optional[str] = None, now: Optional[datetime] = None) -> Order:
    order = get_order(session, restaurant_id, order_id)
    if order.table_closed:
        raise TableClosedError(f"Table {order.table_number} is closed")

    assigned = table_waiter(session, order)
    if assigned:
        waiter_name = assigned
    else:
        waiter_name = (waiter_name or "").strip()
        if not waiter_name:
            raise WaiterNameRequired(f"A waiter name is required to confirm order {order_id}")

    _advance(order, OrderStatus.READY)
    order.waiter_name = waiter_name
    order.updated_at = now or datetime.now()
    _commit(session, order)
    logger.info(f"Order {order_id} confirmed at table {order.table_number}, waiter {waiter_name}")
    return order


def service_minutes(created_at: datetime, served_at: datetime) -> int:
    return max(int((served_at - created_at).total_seconds() // 60), 0)


def mark_served(session: Session, restaurant_id: str, order_id: int, now: Optional[datetime] = None) -> Order:
    order = get_order(session, restaurant_id, order_id)
    now = now or datetime.now()
    _advance(order, OrderStatus.COMPLETED)
    order.service_time_minutes = service_minutes(order.created_at, now)
    order.updated_at = now
    _commit(session, order)
    logger.info(f"Order {order_id} served after {order.service_time_minutes} min")
    return order


def close_order(session: Session, restaurant_id: str, order_id: int, now: Optional[datetime] = None) -> Order:
    order = get_order(session, restaurant_id, order_id)
    if order.status == OrderStatus.COMPLETED:
        return order
    order.status = OrderStatus.COMPLETED
    order.updated_at = now or datetime.now()
    _commit(session, order)
    logger.info(f"Order {order_id} closed")
    return order


def close_table(session: Session, restaurant_id: str, table_number: str, now: Optional[datetime] = None) -> int:
    orders = [o for o in table_orders(session, restaurant_id, table_number) if not o.table_closed]
    now = now or datetime.now()
    for order in orders:
        order.table_closed = True
        order.updated_at = now
    if orders:
        _commit(session, *orders)
    logger.info(f"Table {table_number} closed for restaurant {restaurant_id}, {len(orders)} orders")
    return len(orders)


def _set_flag(session: Session, orders: List[Order], flag: str, value: bool, now: Optional[datetime]) -> int:
    changed = [order for order in orders if getattr(order, flag) != value]
    now = now or datetime.now()
    for order in changed:
        setattr(order, flag, value)
        order.updated_at = now
    if changed:
        _commit(session, *changed)
    return len(changed)


def _diner_orders(session: Session, restaurant_id: str, table_number: str, diner_name: str) -> List[Order]:
    orders = [
        order for order in table_orders(session, restaurant_id, table_number, include_closed=False)
        if order.diner_name == diner_name.strip()
    ]
    if not orders:
        raise OrderNotFoundError(f"No open orders for {diner_name} at table {table_number}")
    return orders


def request_bill(session: Session, restaurant_id: str, table_number: str, diner_name: str,
                 now: Optional[datetime] = None) -> int:
    count = _set_flag(session, _diner_orders(session, restaurant_id, table_number, diner_name),
                      "bill_requested", True, now)
    logger.info(f"Bill requested by {diner_name} at table {table_number}")
    return count


def call_waiter(session: Session, restaurant_id: str, table_number: str, diner_name: str,
                now: Optional[datetime] = None) -> int:
    count = _set_flag(session, _diner_orders(session, restaurant_id, table_number, diner_name),
                      "waiter_called", True, now)
    logger.info(f"Waiter called by {diner_name} at table {table_number}")
    return count


def dismiss_bill_request(session: Session, restaurant_id: str, table_number: str,
                         now: Optional[datetime] = None) -> int:
    orders = table_orders(session, restaurant_id, table_number, include_closed=False)
    return _set_flag(session, orders, "bill_requested", False, now)


def dismiss_waiter_call(session: Session, restaurant_id: str, table_number: str,
                        now: Optional[datetime] = None) -> int:
    orders = table_orders(session, restaurant_id, table_number, include_closed=False)
    return _set_flag(session, orders, "waiter_called", False, now)


def restaurant_orders(session: Session, restaurant_id: str) -> List[Order]:
    """Full order collection for a restaurant, newest first, items loaded."""
    return list(session.exec(
        select(Order)
        .where(Order.restaurant_id == restaurant_id)
        .options(selectinload(Order.items))
        .order_by(Order.created_at.desc(), Order.id.desc())
    ).all())
