"""Turns menu records plus a diner's selections into priced cart lines."""
from typing import Dict, Iterable, List, Optional, Union

from ..cart import safe_price
from ..db.orders import DrinkVariant
from ..schemas.cart import DrinkLine, MealLine
from ..schemas.menu import DrinkOut, MealOut, MenuOut
from .menu import AVAILABLE


class PricingError(ValueError):
    pass


def meal_unit_price(meal: MealOut, side_ids: Iterable[str], extra_ids: Iterable[str],
                    catalog: Dict[str, MealOut]) -> float:
    """
    Base price plus every selected extra. Sides are only charged when the meal
    does not include them (allowed_sides == 0). Sides and extras are meals
    themselves and are priced from the catalog; unknown ids count as zero.
    """
    def price_of(item_id: str) -> float:
        item = catalog.get(item_id)
        return safe_price(item.price) if item else 0.0

    extras_price = sum(price_of(extra_id) for extra_id in extra_ids)
    sides_price = sum(price_of(side_id) for side_id in side_ids) if meal.allowed_sides == 0 else 0.0
    return safe_price(meal.price) + extras_price + sides_price


def build_meal_line(meal: MealOut, catalog: Dict[str, MealOut], quantity: int = 1,
                    side_ids: Optional[List[str]] = None, extra_ids: Optional[List[str]] = None,
                    preferences: Optional[Dict[str, str]] = None) -> MealLine:
    side_ids = list(side_ids or [])
    extra_ids = list(extra_ids or [])

    unknown_sides = [side_id for side_id in side_ids if side_id not in meal.side_choices]
    if unknown_sides:
        raise PricingError(f"Sides {unknown_sides} are not offered with {meal.name}")
    unknown_extras = [extra_id for extra_id in extra_ids if extra_id not in meal.extra_choices]
    if unknown_extras:
        raise PricingError(f"Extras {unknown_extras} are not offered with {meal.name}")
    if meal.allowed_sides and len(side_ids) > meal.allowed_sides:
        raise PricingError(f"{meal.name} allows at most {meal.allowed_sides} sides")
    if meal.allowed_extras and len(extra_ids) > meal.allowed_extras:
        raise PricingError(f"{meal.name} allows at most {meal.allowed_extras} extras")

    preferences = dict(preferences or {})
    missing = [key for key in meal.preferences if not preferences.get(key)]
    if missing:
        raise PricingError(f"Missing preferences for {meal.name}: {', '.join(missing)}")
    for key, value in preferences.items():
        options = (meal.preference_options or {}).get(key)
        if options and value not in options:
            raise PricingError(f"'{value}' is not a valid {key} for {meal.name}")

    return MealLine(
        id=meal.id,
        name=meal.name,
        unit_price=meal_unit_price(meal, side_ids, extra_ids, catalog),
        quantity=quantity,
        side_ids=side_ids,
        extra_ids=extra_ids,
        preferences=preferences or None,
    )


def build_drink_line(drink: DrinkOut, variant: Optional[DrinkVariant] = None, quantity: int = 1) -> DrinkLine:
    variant = variant or drink.pricing.default_variant()
    if variant is None:
        raise PricingError(f"{drink.name} has no serving variant with a price")
    if variant not in drink.pricing.available_variants():
        raise PricingError(f"{drink.name} is not served as {DrinkVariant(variant).value}")
    return DrinkLine(
        id=drink.id,
        name=drink.name,
        variant=variant,
        unit_price=drink.pricing.price_for(variant),
        quantity=quantity,
    )


def _orderable(item, kind: str, item_id: str):
    if item is None:
        raise PricingError(f"{kind} {item_id} is not on the menu")
    if item.availability_status != AVAILABLE:
        raise PricingError(f"{item.name} is {item.availability_status} and cannot be ordered")
    return item


def price_submitted_lines(menu: MenuOut,
                          lines: Iterable[Union[MealLine, DrinkLine]]) -> List[Union[MealLine, DrinkLine]]:
    """
    Rebuilds submitted lines from the restaurant's own menu. Names and unit
    prices sent by a device are replaced with menu values, selections are
    checked as they are when adding to a cart, and items that are off the
    menu or not available raise PricingError.
    """
    catalog = {meal.id: meal for meal in menu.meals}
    drinks = {drink.id: drink for drink in menu.drinks}

    priced: List[Union[MealLine, DrinkLine]] = []
    for line in lines:
        if isinstance(line, MealLine):
            meal = _orderable(catalog.get(line.id), "Meal", line.id)
            priced.append(build_meal_line(meal, catalog, line.quantity, line.side_ids, line.extra_ids,
                                          line.preferences))
        else:
            drink = _orderable(drinks.get(line.id), "Drink", line.id)
            priced.append(build_drink_line(drink, line.variant, line.quantity))
    return priced
