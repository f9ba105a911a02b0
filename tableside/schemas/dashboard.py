from pydantic import BaseModel
from typing import Dict, List, Optional
from .orders import OrderOut


class TableGroup(BaseModel):
    table_number: str
    orders: List[OrderOut]
    total: float
    waiter_name: Optional[str] = None
    bill_requested: bool = False
    waiter_called: bool = False


class DashboardView(BaseModel):
    tab: str
    table_number: Optional[str] = None
    groups: List[TableGroup]
    order_count: int
    tab_counts: Dict[str, int]
    tables: List[str]


class NotificationCounts(BaseModel):
    open_orders: int = 0
    bill_requests: int = 0
    waiter_requests: int = 0
    total_pending: int = 0
