"""
Read-only projections of the order collection for the staff dashboard.

Every function here is pure: it takes the orders already fetched and never
touches the database.
"""
from collections import OrderedDict
from enum import Enum
from typing import Dict, Iterable, List, Optional

from ..cart import safe_price
from ..db.orders import Order, OrderStatus
from ..schemas.dashboard import DashboardView, TableGroup
from ..schemas.orders import to_order_out


class OrderTab(str, Enum):
    OPEN = "open"
    CONFIRMED = "confirmed"
    SERVED = "served"
    CLOSED = "closed"
    BILL_REQUESTS = "bill-requests"
    WAITER_REQUESTS = "waiter-requests"


PRIMARY_TABS = (OrderTab.OPEN, OrderTab.CONFIRMED, OrderTab.SERVED, OrderTab.CLOSED)

_STATUS_TABS = {
    OrderStatus.PENDING: OrderTab.OPEN,
    OrderStatus.READY: OrderTab.CONFIRMED,
    OrderStatus.COMPLETED: OrderTab.SERVED,
}


def primary_tab(order: Order) -> OrderTab:
    if order.table_closed:
        return OrderTab.CLOSED
    return _STATUS_TABS[OrderStatus(order.status)]


def in_tab(order: Order, tab: OrderTab) -> bool:
    tab = OrderTab(tab)
    if tab == OrderTab.BILL_REQUESTS:
        return order.bill_requested and not order.table_closed
    if tab == OrderTab.WAITER_REQUESTS:
        return order.waiter_called and not order.table_closed
    return primary_tab(order) == tab


def filter_orders(orders: Iterable[Order], tab: Optional[OrderTab] = None,
                  table_number: Optional[str] = None) -> List[Order]:
    return [
        order for order in orders
        if (tab is None or in_tab(order, tab))
        and (table_number is None or order.table_number == table_number)
    ]


def group_by_table(orders: Iterable[Order], tab: Optional[OrderTab] = None) -> Dict[str, List[Order]]:
    orders = list(orders)
    if tab is not None and OrderTab(tab) == OrderTab.CONFIRMED:
        # Oldest waiting table first
        orders.sort(key=lambda order: order.created_at)
    groups: Dict[str, List[Order]] = OrderedDict()
    for order in orders:
        groups.setdefault(order.table_number, []).append(order)
    return groups


def table_total(orders: Iterable[Order]) -> float:
    return sum(safe_price(order.total) for order in orders)


def table_numbers(orders: Iterable[Order]) -> List[str]:
    """Distinct tables, numerically sorted, for the table filter."""
    numbers = {order.table_number for order in orders}
    return sorted(numbers, key=lambda n: (int(n) if n.isdigit() else float("inf"), n))


def build_dashboard_view(orders: Iterable[Order], tab: OrderTab = OrderTab.OPEN,
                         table_number: Optional[str] = None) -> DashboardView:
    orders = list(orders)
    visible = filter_orders(orders, tab, table_number)
    groups = [
        TableGroup(
            table_number=number,
            orders=[to_order_out(order) for order in members],
            total=table_total(members),
            waiter_name=next((o.waiter_name for o in members if o.waiter_name), None),
            bill_requested=any(o.bill_requested for o in members),
            waiter_called=any(o.waiter_called for o in members),
        )
        for number, members in group_by_table(visible, tab).items()
    ]
    return DashboardView(
        tab=OrderTab(tab).value,
        table_number=table_number,
        groups=groups,
        order_count=len(visible),
        tab_counts={t.value: len(filter_orders(orders, t)) for t in OrderTab},
        tables=table_numbers(orders),
    )
