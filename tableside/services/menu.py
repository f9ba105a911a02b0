from typing import Optional

from sqlmodel import Session, select

from ..db.menu import Category, Drink, Meal, Restaurant, Special
from ..db.orders import ItemType
from ..schemas.menu import (
    CategoryOut, DrinkOut, DrinkPricing, MealOut, MenuOut, PairingsOut, RestaurantOut, SpecialOut,
)

AVAILABLE = "available"


def to_meal_out(meal: Meal) -> MealOut:
    return MealOut(
        id=meal.id,
        name=meal.name,
        category_id=meal.category_id,
        description=meal.description,
        dietary_category=meal.dietary_category,
        price=float(meal.price) if meal.price is not None else None,
        availability_status=meal.availability_status,
        side_choices=meal.side_choices or [],
        extra_choices=meal.extra_choices or [],
        allowed_sides=meal.allowed_sides,
        allowed_extras=meal.allowed_extras,
        preferences=meal.preferences or [],
        preference_options=meal.preference_options,
        pairings_drinks=meal.pairings_drinks or [],
    )


def to_drink_out(drink: Drink) -> DrinkOut:
    return DrinkOut(
        id=drink.id,
        name=drink.name,
        category_id=drink.category_id,
        description=drink.description,
        availability_status=drink.availability_status,
        pricing=DrinkPricing.model_validate(drink.pricing or {}),
        pairings_meals=drink.pairings_meals or [],
    )


def load_menu(session: Session, restaurant_id: str) -> Optional[MenuOut]:
    restaurant = session.get(Restaurant, restaurant_id)
    if not restaurant:
        return None

    categories = session.exec(
        select(Category).where(Category.restaurant_id == restaurant_id).order_by(Category.name)
    ).all()
    meals = session.exec(select(Meal).where(Meal.restaurant_id == restaurant_id).order_by(Meal.name)).all()
    drinks = session.exec(select(Drink).where(Drink.restaurant_id == restaurant_id).order_by(Drink.name)).all()
    specials = session.exec(
        select(Special).where(Special.restaurant_id == restaurant_id, Special.active == True)  # noqa: E712
    ).all()

    return MenuOut(
        restaurant=RestaurantOut(
            id=restaurant.id,
            name=restaurant.name,
            logo_url=restaurant.logo_url,
            location=restaurant.location,
            about=restaurant.about,
        ),
        categories=[CategoryOut(id=c.id, name=c.name, description=c.description) for c in categories],
        meals=[to_meal_out(meal) for meal in meals],
        drinks=[to_drink_out(drink) for drink in drinks],
        specials=[
            SpecialOut(
                id=s.id,
                title=s.title,
                description=s.description,
                price=float(s.price) if s.price is not None else None,
            )
            for s in specials
        ],
    )


def suggest_pairings(session: Session, restaurant_id: str, item_type: ItemType,
                     item_id: str) -> PairingsOut:
    """Available complementary items for something just added to a cart."""
    if item_type == ItemType.MEAL:
        meal = session.get(Meal, item_id)
        if not meal or meal.restaurant_id != restaurant_id or not meal.pairings_drinks:
            return PairingsOut()
        drinks = session.exec(
            select(Drink).where(
                Drink.restaurant_id == restaurant_id,
                Drink.id.in_(meal.pairings_drinks),
                Drink.availability_status == AVAILABLE,
            )
        ).all()
        return PairingsOut(drinks=[to_drink_out(drink) for drink in drinks])

    drink = session.get(Drink, item_id)
    if not drink or drink.restaurant_id != restaurant_id or not drink.pairings_meals:
        return PairingsOut()
    meals = session.exec(
        select(Meal).where(
            Meal.restaurant_id == restaurant_id,
            Meal.id.in_(drink.pairings_meals),
            Meal.availability_status == AVAILABLE,
        )
    ).all()
    return PairingsOut(meals=[to_meal_out(meal) for meal in meals])
