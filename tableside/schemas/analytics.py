from pydantic import BaseModel, Field
from typing import Dict, List


class TopItem(BaseModel):
    name: str
    count: int
    revenue: float


class TopSellingItem(BaseModel):
    item_id: str
    item_name: str
    total_quantity: int


class PeakHour(BaseModel):
    hour: int
    count: int


class AnalyticsSummary(BaseModel):
    total_orders: int = 0
    total_revenue: float = 0.0
    average_order_value: float = 0.0
    average_service_time: float = 0.0  # minutes
    orders_by_status: Dict[str, int] = Field(default_factory=dict)
    top_items: List[TopItem] = Field(default_factory=list)
    top_selling_meals: List[TopSellingItem] = Field(default_factory=list)
    top_selling_drinks: List[TopSellingItem] = Field(default_factory=list)
    peak_hours: List[PeakHour] = Field(default_factory=list)
