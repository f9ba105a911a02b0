# Test configuration and fixtures

import os
from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

# In-memory database without migrations; must be set before tableside is imported
os.environ["DB_URL"] = "sqlite://"
os.environ["RUN_MIGRATIONS"] = "false"

from tableside.db.menu import Drink, Meal, Restaurant, Special  # noqa: E402
from tableside.db.orders import ItemType, Order, OrderItem, OrderStatus  # noqa: E402
from tableside.web import app  # noqa: E402

T0 = datetime(2026, 3, 14, 12, 0, 0)


def seed_restaurant(session: Session) -> dict:
    """One restaurant with a small menu; returns the ids tests refer to."""
    restaurant = Restaurant(id="r1", name="Harbour Grill", location="12 Quay Street")
    other = Restaurant(id="r2", name="Corner Cafe")
    session.add_all([restaurant, other])
    session.commit()

    session.add_all([
        Meal(id="chips", restaurant_id="r1", name="Chips", price=25.0),
        Meal(id="salad", restaurant_id="r1", name="Side salad", price=30.0),
        Meal(id="cheese", restaurant_id="r1", name="Cheese topping", price=12.0),
        Meal(
            id="m1", restaurant_id="r1", name="Sirloin steak", price=45.0,
            side_choices=["chips", "salad"], extra_choices=["cheese"],
            allowed_sides=1, allowed_extras=1,
            preferences=["doneness"],
            preference_options={"doneness": ["rare", "medium", "well done"]},
            pairings_drinks=["d1", "d2"],
        ),
        Meal(
            id="m2", restaurant_id="r1", name="Beef burger", price=120.0,
            side_choices=["chips", "salad"], extra_choices=["cheese"], allowed_sides=0,
        ),
        Meal(id="m3", restaurant_id="r1", name="Fish special", price=90.0, availability_status="sold_out"),
        Drink(
            id="d1", restaurant_id="r1", name="House red",
            pricing={"glass": 30.0, "jug": None, "shot": None, "bottle": 160.0},
            pairings_meals=["m1", "m3"],
        ),
        Drink(id="d2", restaurant_id="r1", name="Lemonade", pricing={"glass": 28.0},
              availability_status="unavailable"),
        Special(id="s1", restaurant_id="r1", title="Two-for-one burgers", price=120.0),
        Special(id="s2", restaurant_id="r1", title="Old special", active=False),
    ])
    session.commit()
    return {"restaurant_id": "r1", "other_restaurant_id": "r2"}


def make_order(session: Session, table_number: str = "12", diner_name: str = "Alex",
               total: float = 45.0, created_at: datetime = T0, status: OrderStatus = OrderStatus.PENDING,
               items=None, **fields) -> Order:
    order = Order(
        restaurant_id="r1",
        table_number=table_number,
        diner_name=diner_name,
        status=status,
        subtotal=total,
        total=total,
        created_at=created_at,
        updated_at=created_at,
        **fields,
    )
    session.add(order)
    session.flush()
    for item in items or [("m1", "Sirloin steak", ItemType.MEAL, 1, total)]:
        item_id, name, item_type, quantity, line_total = item
        session.add(OrderItem(
            order_id=order.id, item_type=item_type, item_id=item_id, item_name=name,
            quantity=quantity, unit_price=line_total / quantity, total_price=line_total,
        ))
    session.commit()
    session.refresh(order)
    return order


@pytest.fixture
def engine():
    """Fresh in-memory database per test"""
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def seeded(session):
    return seed_restaurant(session)


@pytest.fixture
def client():
    """FastAPI test client with a seeded in-memory database"""
    with TestClient(app) as client:
        with Session(app.state.engine) as session:
            seed_restaurant(session)
        yield client
