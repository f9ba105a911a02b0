"""
Diner-facing order API.

Contains endpoints for:
- Placing an order from a cart
- Tracking a diner's orders at a table
- Requesting the bill and calling a waiter
"""
import logging
from typing import List

from fastapi import APIRouter, HTTPException
from sqlmodel import select

from tableside.cart import CartPreconditionError, TABLE_NUMBER_MAX_LENGTH, parse_table_number
from tableside.db.orders import Order
from tableside.dependencies import ChangesDep, SessionDep
from tableside.schemas.cart import CartSubmission
from tableside.schemas.orders import DinerRequest, FlagUpdate, OrderOut, OrderPlaced, to_order_out
from tableside.services import order_state
from tableside.services.pricing import PricingError
from tableside.services.submission import RestaurantNotFoundError, submit_payload

logger = logging.getLogger(__name__)
router = APIRouter()


def _table(table_number: str) -> str:
    table = parse_table_number(table_number)
    if not table:
        raise HTTPException(status_code=422,
                            detail=f"Table number must be 1-{TABLE_NUMBER_MAX_LENGTH} digits, got '{table_number}'")
    return table


@router.post("/restaurants/{restaurant_id}/orders", response_model=OrderPlaced, status_code=201)
def place_order(restaurant_id: str, payload: CartSubmission, session: SessionDep, changes: ChangesDep):
    try:
        logger.info(f"Placing order: restaurant={restaurant_id}, table={payload.table_number}, "
                    f"lines={len(payload.lines)}")
        order = submit_payload(session, restaurant_id, payload)
    except (CartPreconditionError, PricingError) as e:
        raise HTTPException(status_code=422, detail=str(e))
    except RestaurantNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        logger.error(f"Unexpected error placing order: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Internal server error: {str(e)}")

    changes.publish(restaurant_id)
    return OrderPlaced(
        order_id=order.id,
        status=order.status,
        total=order.total,
        message=f"Order {order.id} received for table {order.table_number}",
    )


@router.get("/restaurants/{restaurant_id}/orders", response_model=List[OrderOut])
def track_orders(restaurant_id: str, table_number: str, diner_name: str, session: SessionDep):
    """A diner's orders at a table, newest first."""
    orders = session.exec(
        select(Order)
        .where(
            Order.restaurant_id == restaurant_id,
            Order.table_number == _table(table_number),
            Order.diner_name == diner_name.strip(),
        )
        .order_by(Order.created_at.desc())
    ).all()
    return [to_order_out(order) for order in orders]


@router.post("/restaurants/{restaurant_id}/tables/{table_number}/bill-request", response_model=FlagUpdate)
def request_bill(restaurant_id: str, table_number: str, request: DinerRequest,
                 session: SessionDep, changes: ChangesDep):
    table = _table(table_number)
    try:
        updated = order_state.request_bill(session, restaurant_id, table, request.diner_name)
    except order_state.OrderNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        logger.error(f"Error requesting bill: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Internal server error: {str(e)}")
    if updated:
        changes.publish(restaurant_id)
    return FlagUpdate(table_number=table, updated=updated)


@router.post("/restaurants/{restaurant_id}/tables/{table_number}/waiter-call", response_model=FlagUpdate)
def call_waiter(restaurant_id: str, table_number: str, request: DinerRequest,
                session: SessionDep, changes: ChangesDep):
    table = _table(table_number)
    try:
        updated = order_state.call_waiter(session, restaurant_id, table, request.diner_name)
    except order_state.OrderNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        logger.error(f"Error calling waiter: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Internal server error: {str(e)}")
    if updated:
        changes.publish(restaurant_id)
    return FlagUpdate(table_number=table, updated=updated)
