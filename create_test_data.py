from sqlmodel import Session

from tableside.db import create_db_engine, init_db
from tableside.db.menu import Category, Drink, Meal, Restaurant, Special
from tableside.settings import Settings


def create_test_data():
    settings = Settings()
    engine = create_db_engine(settings)
    init_db(settings, engine)

    with Session(engine) as session:
        restaurant = Restaurant(
            name="Harbour Grill",
            location="12 Quay Street",
            about="Seafood and grills by the water",
        )
        session.add(restaurant)
        session.commit()

        mains = Category(restaurant_id=restaurant.id, name="Mains")
        sides = Category(restaurant_id=restaurant.id, name="Sides")
        drinks = Category(restaurant_id=restaurant.id, name="Drinks")
        session.add_all([mains, sides, drinks])
        session.commit()

        chips = Meal(restaurant_id=restaurant.id, category_id=sides.id, name="Chips", price=25.0)
        salad = Meal(restaurant_id=restaurant.id, category_id=sides.id, name="Side salad", price=30.0)
        cheese = Meal(restaurant_id=restaurant.id, category_id=sides.id, name="Cheese topping", price=12.0)
        session.add_all([chips, salad, cheese])
        session.commit()

        wine = Drink(
            restaurant_id=restaurant.id,
            category_id=drinks.id,
            name="House red",
            pricing={"glass": 45.0, "jug": None, "shot": None, "bottle": 160.0},
        )
        lemonade = Drink(
            restaurant_id=restaurant.id,
            category_id=drinks.id,
            name="Lemonade",
            pricing={"glass": 28.0, "jug": 70.0},
        )
        session.add_all([wine, lemonade])
        session.commit()

        steak = Meal(
            restaurant_id=restaurant.id,
            category_id=mains.id,
            name="Sirloin steak",
            price=180.0,
            side_choices=[chips.id, salad.id],
            extra_choices=[cheese.id],
            allowed_sides=1,
            allowed_extras=1,
            preferences=["doneness"],
            preference_options={"doneness": ["rare", "medium", "well done"]},
            pairings_drinks=[wine.id],
        )
        burger = Meal(
            restaurant_id=restaurant.id,
            category_id=mains.id,
            name="Beef burger",
            price=120.0,
            side_choices=[chips.id, salad.id],
            extra_choices=[cheese.id],
            allowed_sides=0,
            pairings_drinks=[lemonade.id],
        )
        session.add_all([steak, burger])
        wine.pairings_meals = [steak.id]
        session.add(wine)
        session.add(Special(restaurant_id=restaurant.id, title="Two-for-one burgers", price=120.0))
        session.commit()

        print(f"Test data created successfully! Restaurant id: {restaurant.id}")


if __name__ == "__main__":
    create_test_data()
