from typing import Iterable

from ..db.orders import Order, OrderStatus
from ..schemas.dashboard import NotificationCounts


def count_notifications(orders: Iterable[Order]) -> NotificationCounts:
    open_orders = bill_requests = waiter_requests = 0
    for order in orders:
        if order.table_closed:
            continue
        if order.status == OrderStatus.PENDING:
            open_orders += 1
        if order.bill_requested:
            bill_requests += 1
        if order.waiter_called:
            waiter_requests += 1
    return NotificationCounts(
        open_orders=open_orders,
        bill_requests=bill_requests,
        waiter_requests=waiter_requests,
        total_pending=open_orders + bill_requests + waiter_requests,
    )
