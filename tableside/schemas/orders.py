from pydantic import BaseModel
from typing import Dict, List, Optional
from datetime import datetime
from ..db.orders import DrinkVariant, ItemType, Order, OrderItem, OrderStatus


class OrderItemOut(BaseModel):
    id: int
    item_type: ItemType
    item_id: str
    item_name: str
    quantity: int
    unit_price: float
    total_price: float
    variant: Optional[DrinkVariant] = None
    side_ids: Optional[List[str]] = None
    extra_ids: Optional[List[str]] = None
    preferences: Optional[Dict[str, str]] = None


class OrderOut(BaseModel):
    id: int
    restaurant_id: str
    table_number: str
    diner_name: str
    status: OrderStatus
    subtotal: float
    total: float
    created_at: datetime
    updated_at: datetime
    bill_requested: bool
    waiter_called: bool
    table_closed: bool
    waiter_name: Optional[str] = None
    service_time_minutes: Optional[int] = None
    items: List[OrderItemOut]


class OrderPlaced(BaseModel):
    order_id: int
    status: OrderStatus
    total: float
    message: str


class ConfirmOrder(BaseModel):
    waiter_name: Optional[str] = None


class DinerRequest(BaseModel):
    diner_name: str


class FlagUpdate(BaseModel):
    table_number: str
    updated: int


def to_order_item_out(item: OrderItem) -> OrderItemOut:
    return OrderItemOut(
        id=item.id,
        item_type=item.item_type,
        item_id=item.item_id,
        item_name=item.item_name,
        quantity=item.quantity,
        unit_price=float(item.unit_price) if item.unit_price is not None else 0.0,
        total_price=float(item.total_price) if item.total_price is not None else 0.0,
        variant=item.variant,
        side_ids=item.side_ids,
        extra_ids=item.extra_ids,
        preferences=item.preferences,
    )


def to_order_out(order: Order) -> OrderOut:
    return OrderOut(
        id=order.id,
        restaurant_id=order.restaurant_id,
        table_number=order.table_number,
        diner_name=order.diner_name,
        status=order.status,
        subtotal=float(order.subtotal) if order.subtotal is not None else 0.0,
        total=float(order.total) if order.total is not None else 0.0,
        created_at=order.created_at,
        updated_at=order.updated_at,
        bill_requested=order.bill_requested,
        waiter_called=order.waiter_called,
        table_closed=order.table_closed,
        waiter_name=order.waiter_name,
        service_time_minutes=order.service_time_minutes,
        items=[to_order_item_out(item) for item in order.items],
    )
