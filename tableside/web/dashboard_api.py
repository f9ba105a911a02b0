"""
Staff dashboard API.

Contains endpoints for:
- Tab/table views over the order collection
- Order transitions (confirm, serve, close) and table closing
- Dismissing bill requests and waiter calls
- Notification counts and analytics
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, HTTPException

from tableside.cart import TABLE_NUMBER_MAX_LENGTH, parse_table_number
from tableside.dependencies import ChangesDep, SessionDep, SettingsDep
from tableside.schemas.analytics import AnalyticsSummary
from tableside.schemas.dashboard import DashboardView, NotificationCounts
from tableside.schemas.orders import ConfirmOrder, FlagUpdate, OrderOut, to_order_out
from tableside.services import order_state
from tableside.services.analytics import compute_analytics
from tableside.services.notifications import count_notifications
from tableside.services.views import OrderTab, build_dashboard_view

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/dashboard/{restaurant_id}")


def _state_error(e: Exception) -> HTTPException:
    if isinstance(e, order_state.OrderNotFoundError):
        return HTTPException(status_code=404, detail=str(e))
    if isinstance(e, order_state.WaiterNameRequired):
        return HTTPException(status_code=409, detail={"code": "waiter_name_required", "message": str(e)})
    if isinstance(e, order_state.TableClosedError):
        return HTTPException(status_code=409, detail={"code": "table_closed", "message": str(e)})
    if isinstance(e, order_state.InvalidTransitionError):
        return HTTPException(status_code=409, detail={"code": "invalid_transition", "message": str(e)})
    logger.error(f"Unexpected dashboard error: {e}", exc_info=True)
    return HTTPException(status_code=500, detail=f"Internal server error: {str(e)}")


def _table(table_number: str) -> str:
    table = parse_table_number(table_number)
    if not table:
        raise HTTPException(status_code=422,
                            detail=f"Table number must be 1-{TABLE_NUMBER_MAX_LENGTH} digits, got '{table_number}'")
    return table


@router.get("/orders", response_model=DashboardView)
def dashboard_orders(restaurant_id: str, session: SessionDep, tab: OrderTab = OrderTab.OPEN,
                     table_number: Optional[str] = None):
    orders = order_state.restaurant_orders(session, restaurant_id)
    table = _table(table_number) if table_number not in (None, "", "all") else None
    return build_dashboard_view(orders, tab, table)


@router.get("/orders/raw", response_model=List[OrderOut])
def all_orders(restaurant_id: str, session: SessionDep):
    return [to_order_out(order) for order in order_state.restaurant_orders(session, restaurant_id)]


@router.post("/orders/{order_id}/confirm", response_model=OrderOut)
def confirm_order(restaurant_id: str, order_id: int, session: SessionDep, changes: ChangesDep,
                  payload: Optional[ConfirmOrder] = None):
    """
    Pending -> ready. When no waiter serves the table yet and no name is
    given, answers 409 with code waiter_name_required.
    """
    try:
        order = order_state.confirm_order(
            session, restaurant_id, order_id, payload.waiter_name if payload else None
        )
    except Exception as e:
        raise _state_error(e)
    changes.publish(restaurant_id)
    return to_order_out(order)


@router.post("/orders/{order_id}/serve", response_model=OrderOut)
def serve_order(restaurant_id: str, order_id: int, session: SessionDep, changes: ChangesDep):
    try:
        order = order_state.mark_served(session, restaurant_id, order_id)
    except Exception as e:
        raise _state_error(e)
    changes.publish(restaurant_id)
    return to_order_out(order)


@router.post("/orders/{order_id}/close", response_model=OrderOut)
def close_order(restaurant_id: str, order_id: int, session: SessionDep, changes: ChangesDep):
    try:
        order = order_state.close_order(session, restaurant_id, order_id)
    except Exception as e:
        raise _state_error(e)
    changes.publish(restaurant_id)
    return to_order_out(order)


@router.post("/tables/{table_number}/close", response_model=FlagUpdate)
def close_table(restaurant_id: str, table_number: str, session: SessionDep, changes: ChangesDep):
    table = _table(table_number)
    try:
        updated = order_state.close_table(session, restaurant_id, table)
    except Exception as e:
        raise _state_error(e)
    if updated:
        changes.publish(restaurant_id)
    return FlagUpdate(table_number=table, updated=updated)


@router.post("/tables/{table_number}/dismiss-bill", response_model=FlagUpdate)
def dismiss_bill(restaurant_id: str, table_number: str, session: SessionDep, changes: ChangesDep):
    table = _table(table_number)
    try:
        updated = order_state.dismiss_bill_request(session, restaurant_id, table)
    except Exception as e:
        raise _state_error(e)
    if updated:
        changes.publish(restaurant_id)
    return FlagUpdate(table_number=table, updated=updated)


@router.post("/tables/{table_number}/dismiss-waiter", response_model=FlagUpdate)
def dismiss_waiter(restaurant_id: str, table_number: str, session: SessionDep, changes: ChangesDep):
    table = _table(table_number)
    try:
        updated = order_state.dismiss_waiter_call(session, restaurant_id, table)
    except Exception as e:
        raise _state_error(e)
    if updated:
        changes.publish(restaurant_id)
    return FlagUpdate(table_number=table, updated=updated)


@router.get("/notifications", response_model=NotificationCounts)
def notifications(restaurant_id: str, session: SessionDep):
    return count_notifications(order_state.restaurant_orders(session, restaurant_id))


@router.get("/analytics", response_model=AnalyticsSummary)
def analytics(restaurant_id: str, session: SessionDep, settings: SettingsDep):
    orders = order_state.restaurant_orders(session, restaurant_id)
    return compute_analytics(orders, settings.top_items_limit, settings.peak_hours_limit)
