"""
Order submission: materialises a diner's cart into an Order with its items.

Lines are repriced from the restaurant menu before anything is written, and
header and items are written in one transaction, so a failure never leaves a
header-only order behind.
"""
import logging
from datetime import datetime
from typing import Iterable, Optional, Union

from sqlmodel import Session

from ..cart import Cart, check_submittable, parse_table_number, safe_price
from ..db.orders import ItemType, Order, OrderItem, OrderStatus
from ..schemas.cart import CartSubmission, DrinkLine, MealLine
from .menu import load_menu
from .pricing import price_submitted_lines

logger = logging.getLogger(__name__)

UNKNOWN_DINER = "Unknown"


class RestaurantNotFoundError(LookupError):
    pass


def order_item_from_line(line: Union[MealLine, DrinkLine]) -> OrderItem:
    unit_price = safe_price(line.unit_price)
    item = OrderItem(
        item_type=ItemType(line.type),
        item_id=line.id,
        item_name=line.name,
        quantity=line.quantity,
        unit_price=unit_price,
        total_price=unit_price * line.quantity,
    )
    if isinstance(line, MealLine):
        item.side_ids = list(line.side_ids)
        item.extra_ids = list(line.extra_ids)
        item.preferences = dict(line.preferences) if line.preferences else None
    else:
        item.variant = line.variant
    return item


def _lines_total(lines) -> float:
    return sum(safe_price(line.unit_price) * line.quantity for line in lines)


def create_order(session: Session, restaurant_id: Optional[str], table_number: Optional[str],
                 diner_name: Optional[str], lines: Iterable[Union[MealLine, DrinkLine]],
                 now: Optional[datetime] = None) -> Order:
    lines = list(lines)
    check_submittable(restaurant_id, table_number, lines)
    table_number = parse_table_number(table_number)

    menu = load_menu(session, restaurant_id)
    if menu is None:
        raise RestaurantNotFoundError(f"Restaurant {restaurant_id} not found")
    lines = price_submitted_lines(menu, lines)

    now = now or datetime.now()
    total = _lines_total(lines)
    order = Order(
        restaurant_id=restaurant_id,
        table_number=table_number,
        diner_name=(diner_name or "").strip() or UNKNOWN_DINER,
        status=OrderStatus.PENDING,
        subtotal=total,
        total=total,
        created_at=now,
        updated_at=now,
    )

    try:
        session.add(order)
        session.flush()  # assigns order.id inside the open transaction
        for line in lines:
            item = order_item_from_line(line)
            item.order_id = order.id
            session.add(item)
        session.commit()
    except Exception:
        session.rollback()
        raise

    session.refresh(order)
    logger.info(f"Order {order.id} placed at table {table_number} for restaurant {restaurant_id}, "
                f"{len(lines)} lines, total {total:.2f}")
    return order


def submit_cart(session: Session, cart: Cart, now: Optional[datetime] = None) -> int:
    """Places the cart and keeps the diner's identity for the next order."""
    order = create_order(session, cart.restaurant_id, cart.table_number, cart.diner_name, cart.lines, now)
    cart.clear_cart_items()
    return order.id


def submit_payload(session: Session, restaurant_id: str, payload: CartSubmission,
                   now: Optional[datetime] = None) -> Order:
    return create_order(session, restaurant_id, payload.table_number, payload.diner_name, payload.lines, now)
