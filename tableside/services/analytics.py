"""
Summary statistics over a restaurant's full order history.

Pure reductions; malformed numbers count as zero so a bad row never breaks
the dashboard.
"""
from collections import Counter, OrderedDict
from typing import Iterable, List, Optional

from ..cart import safe_price
from ..db.orders import ItemType, Order, OrderStatus
from ..schemas.analytics import AnalyticsSummary, PeakHour, TopItem, TopSellingItem

TOP_ITEMS_LIMIT = 5
PEAK_HOURS_LIMIT = 6


def _service_time(order: Order) -> int:
    if order.service_time_minutes is not None:
        return order.service_time_minutes
    # Completed before service times were recorded: fall back to the last update
    if order.created_at and order.updated_at:
        return max(int((order.updated_at - order.created_at).total_seconds() // 60), 0)
    return 0


def average_service_time(orders: Iterable[Order]) -> float:
    completed = [order for order in orders if order.status == OrderStatus.COMPLETED]
    if not completed:
        return 0.0
    return round(sum(_service_time(order) for order in completed) / len(completed), 2)


def orders_by_status(orders: Iterable[Order]) -> dict:
    counts = Counter(OrderStatus(order.status).value for order in orders)
    return dict(counts)


def top_items(orders: Iterable[Order], limit: int = TOP_ITEMS_LIMIT) -> List[TopItem]:
    totals = OrderedDict()
    for order in orders:
        for item in order.items:
            entry = totals.setdefault(item.item_name, {"count": 0, "revenue": 0.0})
            entry["count"] += item.quantity or 0
            entry["revenue"] += safe_price(item.total_price)
    ranked = sorted(totals.items(), key=lambda kv: kv[1]["count"], reverse=True)
    return [
        TopItem(name=name, count=entry["count"], revenue=round(entry["revenue"], 2))
        for name, entry in ranked[:limit]
    ]


def top_selling(orders: Iterable[Order], item_type: ItemType, limit: int = TOP_ITEMS_LIMIT) -> List[TopSellingItem]:
    totals = OrderedDict()
    for order in orders:
        for item in order.items:
            if item.item_type != item_type:
                continue
            entry = totals.get(item.item_id)
            if entry is None:
                totals[item.item_id] = TopSellingItem(
                    item_id=item.item_id, item_name=item.item_name, total_quantity=item.quantity or 0
                )
            else:
                entry.total_quantity += item.quantity or 0
    # sorted() is stable, ties keep first-seen order
    return sorted(totals.values(), key=lambda entry: entry.total_quantity, reverse=True)[:limit]


def peak_hours(orders: Iterable[Order], limit: int = PEAK_HOURS_LIMIT) -> List[PeakHour]:
    hours = Counter()
    for order in orders:
        if order.created_at is not None:
            hours[order.created_at.hour] += 1
    # Counter keeps insertion order; stable sort keeps first-seen hour on ties
    ranked = sorted(hours.items(), key=lambda kv: kv[1], reverse=True)
    return [PeakHour(hour=hour, count=count) for hour, count in ranked[:limit]]


def compute_analytics(orders: Iterable[Order], top_limit: Optional[int] = None,
                      peak_limit: Optional[int] = None) -> AnalyticsSummary:
    orders = list(orders)
    top_limit = top_limit or TOP_ITEMS_LIMIT
    peak_limit = peak_limit or PEAK_HOURS_LIMIT

    total_orders = len(orders)
    total_revenue = round(sum(safe_price(order.total) for order in orders), 2)
    average_order_value = round(total_revenue / total_orders, 2) if total_orders else 0.0

    return AnalyticsSummary(
        total_orders=total_orders,
        total_revenue=total_revenue,
        average_order_value=average_order_value,
        average_service_time=average_service_time(orders),
        orders_by_status=orders_by_status(orders),
        top_items=top_items(orders, top_limit),
        top_selling_meals=top_selling(orders, ItemType.MEAL, top_limit),
        top_selling_drinks=top_selling(orders, ItemType.DRINK, top_limit),
        peak_hours=peak_hours(orders, peak_limit),
    )
