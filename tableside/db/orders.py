from datetime import datetime
from enum import Enum
from typing import Optional, List

from sqlalchemy import Column, JSON
from sqlalchemy.dialects.postgresql import JSONB
from sqlmodel import Field, SQLModel, Relationship


def json_column():
    return Column(JSON().with_variant(JSONB, "postgresql"), nullable=True)


class OrderStatus(str, Enum):
    PENDING = "pending"
    READY = "ready"
    COMPLETED = "completed"


class ItemType(str, Enum):
    MEAL = "meal"
    DRINK = "drink"


class DrinkVariant(str, Enum):
    GLASS = "glass"
    JUG = "jug"
    SHOT = "shot"
    BOTTLE = "bottle"


# Allowed forward moves; anything else is rejected by the state machine
STATUS_FLOW = {
    OrderStatus.PENDING: OrderStatus.READY,
    OrderStatus.READY: OrderStatus.COMPLETED,
}


class OrderItem(SQLModel, table=True):
    __tablename__ = "order_items"

    id: Optional[int] = Field(default=None, primary_key=True)
    order_id: int = Field(foreign_key="orders.id", index=True)
    item_type: ItemType
    # Snapshot of the menu item, deliberately not a foreign key
    item_id: str
    item_name: str
    quantity: int = Field(default=1)
    unit_price: float = Field(default=0.0)
    total_price: float = Field(default=0.0)
    variant: Optional[DrinkVariant] = Field(default=None)
    side_ids: Optional[list] = Field(default=None, sa_column=json_column())
    extra_ids: Optional[list] = Field(default=None, sa_column=json_column())
    preferences: Optional[dict] = Field(default=None, sa_column=json_column())

    order: Optional["Order"] = Relationship(back_populates="items")


class Order(SQLModel, table=True):
    __tablename__ = "orders"

    id: Optional[int] = Field(default=None, primary_key=True)
    restaurant_id: str = Field(foreign_key="restaurants.id", index=True)
    table_number: str = Field(index=True)
    diner_name: str
    status: OrderStatus = Field(default=OrderStatus.PENDING)
    subtotal: float = Field(default=0.0)
    total: float = Field(default=0.0)
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)
    bill_requested: bool = Field(default=False)
    waiter_called: bool = Field(default=False)
    table_closed: bool = Field(default=False)
    waiter_name: Optional[str] = Field(default=None)
    service_time_minutes: Optional[int] = Field(default=None)

    items: List[OrderItem] = Relationship(
        back_populates="order",
        sa_relationship_kwargs={"cascade": "all, delete-orphan", "order_by": "OrderItem.id"},
    )
