"""
Cart aggregate for a single diner session.

Holds the proposed order lines for one table/diner before submission.
Persistence is not part of the aggregate: pass a listener and it is called
with a fresh snapshot after every mutation.
"""
import logging
import math
import numbers
import re
from typing import Callable, List, Optional, Union

from .db.orders import ItemType
from .schemas.cart import CartSnapshot, DrinkLine, MealLine, PairingSuggestion, SuggestedItem

logger = logging.getLogger(__name__)

TABLE_NUMBER_MAX_LENGTH = 3
TABLE_NUMBER_PATTERN = re.compile(r"\d{1,%d}" % TABLE_NUMBER_MAX_LENGTH)

CartListener = Callable[[CartSnapshot], None]


class CartPreconditionError(ValueError):
    pass


def normalize_table_number(value: Optional[str]) -> Optional[str]:
    """Strip non-digits and cap the length, as the table input field does."""
    if value is None:
        return None
    digits = re.sub(r"\D", "", str(value))[:TABLE_NUMBER_MAX_LENGTH]
    return digits or None


def parse_table_number(value: Optional[str]) -> Optional[str]:
    """Accepts a table number only when it is already 1-3 digits; nothing is rewritten."""
    if value is None:
        return None
    value = str(value).strip()
    return value if TABLE_NUMBER_PATTERN.fullmatch(value) else None


def safe_price(value) -> float:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return 0.0
    value = float(value)
    if math.isnan(value):
        return 0.0
    return value


def is_same_line(existing: Union[MealLine, DrinkLine], candidate: Union[MealLine, DrinkLine]) -> bool:
    if existing.type != candidate.type or existing.id != candidate.id:
        return False
    if isinstance(existing, DrinkLine):
        return existing.variant == candidate.variant
    return (
        sorted(existing.side_ids) == sorted(candidate.side_ids)
        and sorted(existing.extra_ids) == sorted(candidate.extra_ids)
        and (existing.preferences or {}) == (candidate.preferences or {})
    )


class Cart:
    def __init__(self, snapshot: Optional[CartSnapshot] = None, listener: Optional[CartListener] = None):
        snapshot = snapshot or CartSnapshot()
        self.lines: List[Union[MealLine, DrinkLine]] = [line.model_copy() for line in snapshot.lines]
        self.table_number = snapshot.table_number
        self.restaurant_id = snapshot.restaurant_id
        self.diner_name = snapshot.diner_name
        self.pairing_suggestion = PairingSuggestion()
        self._listener = listener

    @classmethod
    def from_snapshot(cls, snapshot: CartSnapshot, listener: Optional[CartListener] = None) -> "Cart":
        return cls(snapshot, listener)

    def to_snapshot(self) -> CartSnapshot:
        return CartSnapshot(
            lines=[line.model_copy() for line in self.lines],
            table_number=self.table_number,
            restaurant_id=self.restaurant_id,
            diner_name=self.diner_name,
        )

    def _changed(self):
        if self._listener is not None:
            self._listener(self.to_snapshot())

    # Scoping fields

    def set_table_number(self, table_number: Optional[str]):
        self.table_number = normalize_table_number(table_number)
        self._changed()

    def set_diner_name(self, name: Optional[str]):
        self.diner_name = name.strip() if name else None
        self._changed()

    def set_restaurant(self, restaurant_id: str):
        self.restaurant_id = restaurant_id
        self._changed()

    def validate_restaurant(self, candidate_id: str) -> bool:
        return not self.restaurant_id or self.restaurant_id == candidate_id

    # Lines

    def _add_line(self, line: Union[MealLine, DrinkLine], suppress_suggestion: bool):
        for existing in self.lines:
            if is_same_line(existing, line):
                existing.quantity += line.quantity
                logger.debug(f"Merged {line.type} {line.id} into existing line, quantity={existing.quantity}")
                break
        else:
            self.lines.append(line.model_copy())
            if not suppress_suggestion:
                self.show_pairing_suggestion(SuggestedItem(type=ItemType(line.type), id=line.id, name=line.name))
        self._changed()

    def add_meal_line(self, line: MealLine, suppress_suggestion: bool = False):
        self._add_line(line, suppress_suggestion)

    def add_drink_line(self, line: DrinkLine, suppress_suggestion: bool = False):
        self._add_line(line, suppress_suggestion)

    def remove_line(self, index: int):
        del self.lines[index]
        self._changed()

    def update_line_quantity(self, index: int, quantity: int):
        if quantity <= 0:
            return
        self.lines[index].quantity = quantity
        self._changed()

    def increment_line_quantity(self, index: int):
        self.lines[index].quantity += 1
        self._changed()

    def decrement_line_quantity(self, index: int):
        line = self.lines[index]
        if line.quantity > 1:
            line.quantity -= 1
            self._changed()

    def clear(self):
        self.lines = []
        self.table_number = None
        self.restaurant_id = None
        self.diner_name = None
        self.pairing_suggestion = PairingSuggestion()
        self._changed()

    def clear_cart_items(self):
        """Drop the lines but keep table, diner and restaurant for the next order."""
        self.lines = []
        self.pairing_suggestion = PairingSuggestion()
        self._changed()

    # Derived values

    def cart_total(self) -> float:
        return sum(safe_price(line.unit_price) * line.quantity for line in self.lines)

    def cart_item_count(self) -> int:
        return sum(line.quantity for line in self.lines)

    def is_empty(self) -> bool:
        return not self.lines

    # Pairing suggestion (single slot, last add wins)

    def show_pairing_suggestion(self, item: SuggestedItem):
        self.pairing_suggestion = PairingSuggestion(is_open=True, added_item=item)

    def hide_pairing_suggestion(self):
        self.pairing_suggestion = PairingSuggestion()


def check_submittable(restaurant_id: Optional[str], table_number: Optional[str], lines) -> None:
    """Raises CartPreconditionError when an order could not be placed from these values."""
    if not restaurant_id:
        raise CartPreconditionError("Cart is not linked to a restaurant")
    if not table_number:
        raise CartPreconditionError("Table number is required to place an order")
    if not parse_table_number(table_number):
        raise CartPreconditionError(f"Table number must be 1-{TABLE_NUMBER_MAX_LENGTH} digits, got '{table_number}'")
    if not lines:
        raise CartPreconditionError("Cannot place an order with an empty cart")
    for line in lines:
        if line.quantity < 1:
            raise CartPreconditionError(f"Quantity for {line.name} must be at least 1")
