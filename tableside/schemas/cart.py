from pydantic import BaseModel, Field
from typing import Annotated, Dict, List, Literal, Optional, Union
from ..db.orders import DrinkVariant, ItemType


class MealLine(BaseModel):
    type: Literal["meal"] = "meal"
    id: str
    name: str
    # base + selected extras + charged sides, per unit
    unit_price: Optional[float] = 0.0
    quantity: int = 1
    side_ids: List[str] = Field(default_factory=list)
    extra_ids: List[str] = Field(default_factory=list)
    preferences: Optional[Dict[str, str]] = None


class DrinkLine(BaseModel):
    type: Literal["drink"] = "drink"
    id: str
    name: str
    variant: DrinkVariant
    unit_price: Optional[float] = 0.0
    quantity: int = 1


CartLine = Annotated[Union[MealLine, DrinkLine], Field(discriminator="type")]


class SuggestedItem(BaseModel):
    type: ItemType
    id: str
    name: str


class PairingSuggestion(BaseModel):
    is_open: bool = False
    added_item: Optional[SuggestedItem] = None


class CartSnapshot(BaseModel):
    """Serialisable form of a cart, used for the local store."""
    lines: List[CartLine] = Field(default_factory=list)
    table_number: Optional[str] = None
    restaurant_id: Optional[str] = None
    diner_name: Optional[str] = None


class CartSubmission(BaseModel):
    """Cart payload posted by a diner device when placing an order."""
    table_number: str
    diner_name: Optional[str] = None
    lines: List[CartLine]
