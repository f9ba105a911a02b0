"""
Diner device session: cart, identity and the calls a diner makes.

The cart is restored from the local store on start and written back after
every change. A session is bound to one restaurant; entering another one
empties the cart.
"""
import logging
from typing import Dict, List, Optional

from ..cart import Cart, check_submittable
from ..formatting import DEFAULT_CURRENCY_SYMBOL, format_currency
from ..db.orders import DrinkVariant
from ..local_store import (
    CURRENT_RESTAURANT_KEY, DINER_NAME_KEY, TABLE_NUMBER_KEY, LocalStore,
)
from ..schemas.cart import CartSubmission
from ..schemas.menu import MenuOut, PairingsOut
from ..schemas.orders import FlagUpdate, OrderOut
from ..services.pricing import PricingError, build_drink_line, build_meal_line
from ..settings import Settings
from .api import TablesideApi, TablesideClientError, api_from_settings

logger = logging.getLogger(__name__)


class DinerSession:
    def __init__(self, api: TablesideApi, store: LocalStore, currency_symbol: str = DEFAULT_CURRENCY_SYMBOL):
        self.api = api
        self.store = store
        self.currency_symbol = currency_symbol
        self.cart = Cart(store.load_cart(), listener=store.save_cart)
        self.menu: Optional[MenuOut] = None
        self.is_placing_order = False
        self.last_order_id: Optional[int] = None

    @property
    def restaurant_id(self) -> Optional[str]:
        return self.cart.restaurant_id

    def enter_restaurant(self, restaurant_id: str):
        if not self.cart.validate_restaurant(restaurant_id):
            logger.info(f"Switching from restaurant {self.cart.restaurant_id} to {restaurant_id}, clearing cart")
            self.cart.clear()
            self.menu = None
        self.cart.set_restaurant(restaurant_id)
        self.store.set(CURRENT_RESTAURANT_KEY, restaurant_id)

        if not self.cart.table_number and self.store.get(TABLE_NUMBER_KEY):
            self.cart.set_table_number(self.store.get(TABLE_NUMBER_KEY))
        if not self.cart.diner_name and self.store.get(DINER_NAME_KEY):
            self.cart.set_diner_name(self.store.get(DINER_NAME_KEY))

    def set_identity(self, diner_name: Optional[str] = None, table_number: Optional[str] = None):
        if diner_name is not None:
            self.cart.set_diner_name(diner_name)
            self.store.set(DINER_NAME_KEY, self.cart.diner_name)
        if table_number is not None:
            self.cart.set_table_number(table_number)
            self.store.set(TABLE_NUMBER_KEY, self.cart.table_number)

    def cart_total_display(self) -> str:
        return format_currency(self.cart.cart_total(), self.currency_symbol)

    def _require_restaurant(self) -> str:
        if not self.cart.restaurant_id:
            raise TablesideClientError("No restaurant selected")
        return self.cart.restaurant_id

    async def load_menu(self) -> MenuOut:
        self.menu = await self.api.get_menu(self._require_restaurant())
        return self.menu

    def _menu(self) -> MenuOut:
        if self.menu is None:
            raise TablesideClientError("Menu is not loaded")
        return self.menu

    def add_meal(self, meal_id: str, quantity: int = 1, side_ids: Optional[List[str]] = None,
                 extra_ids: Optional[List[str]] = None, preferences: Optional[Dict[str, str]] = None,
                 suppress_suggestion: bool = False):
        catalog = {meal.id: meal for meal in self._menu().meals}
        meal = catalog.get(meal_id)
        if meal is None:
            raise PricingError(f"Meal {meal_id} is not on the menu")
        line = build_meal_line(meal, catalog, quantity, side_ids, extra_ids, preferences)
        self.cart.add_meal_line(line, suppress_suggestion)
        return line

    def add_drink(self, drink_id: str, variant: Optional[DrinkVariant] = None, quantity: int = 1,
                  suppress_suggestion: bool = False):
        drink = next((drink for drink in self._menu().drinks if drink.id == drink_id), None)
        if drink is None:
            raise PricingError(f"Drink {drink_id} is not on the menu")
        line = build_drink_line(drink, variant, quantity)
        self.cart.add_drink_line(line, suppress_suggestion)
        return line

    async def pairing_suggestions(self) -> PairingsOut:
        """Pairings for the item that opened the suggestion slot; empty when the slot is closed."""
        suggestion = self.cart.pairing_suggestion
        if not suggestion.is_open or suggestion.added_item is None:
            return PairingsOut()
        item = suggestion.added_item
        return await self.api.get_pairings(self._require_restaurant(), item.type.value, item.id)

    async def place_order(self) -> int:
        """
        Submits the cart. On success the lines are dropped and table, diner
        and restaurant are kept; on failure the cart is left as it was.
        """
        if self.is_placing_order:
            raise TablesideClientError("An order is already being placed")
        check_submittable(self.cart.restaurant_id, self.cart.table_number, self.cart.lines)

        self.is_placing_order = True
        try:
            placed = await self.api.place_order(
                self.cart.restaurant_id,
                CartSubmission(
                    table_number=self.cart.table_number,
                    diner_name=self.cart.diner_name,
                    lines=list(self.cart.lines),
                ),
            )
        finally:
            self.is_placing_order = False

        self.cart.clear_cart_items()
        self.last_order_id = placed.order_id
        logger.info(f"Order {placed.order_id} placed, total {placed.total:.2f}")
        return placed.order_id

    def _identity(self):
        if not self.cart.table_number or not self.cart.diner_name:
            raise TablesideClientError("Table number and diner name are required")
        return self._require_restaurant(), self.cart.table_number, self.cart.diner_name

    async def track_orders(self) -> List[OrderOut]:
        return await self.api.track_orders(*self._identity())

    async def request_bill(self) -> FlagUpdate:
        return await self.api.request_bill(*self._identity())

    async def call_waiter(self) -> FlagUpdate:
        return await self.api.call_waiter(*self._identity())


def open_diner_session(settings: Settings) -> DinerSession:
    return DinerSession(api_from_settings(settings), LocalStore(settings.local_store_path), settings.currency_symbol)
