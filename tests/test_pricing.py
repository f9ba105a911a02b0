# Menu and pricing tests

import pytest

from tableside.db.orders import DrinkVariant, ItemType
from tableside.schemas.menu import DrinkOut, DrinkPricing, MealOut
from tableside.services.menu import load_menu, suggest_pairings
from tableside.services.pricing import PricingError, build_drink_line, build_meal_line, meal_unit_price


@pytest.fixture
def menu(session, seeded):
    return load_menu(session, "r1")


@pytest.fixture
def catalog(menu):
    return {meal.id: meal for meal in menu.meals}


class TestMealPricing:
    """Unit price of a meal line"""

    def test_included_sides_are_free(self, catalog):
        line = build_meal_line(catalog["m1"], catalog, side_ids=["chips"], preferences={"doneness": "rare"})

        assert line.unit_price == 45.0

    def test_extras_are_charged(self, catalog):
        line = build_meal_line(catalog["m1"], catalog, side_ids=["salad"], extra_ids=["cheese"],
                               preferences={"doneness": "medium"})

        assert line.unit_price == 57.0

    def test_sides_charged_when_none_included(self, catalog):
        line = build_meal_line(catalog["m2"], catalog, side_ids=["chips", "salad"], extra_ids=["cheese"])

        assert line.unit_price == 120.0 + 25.0 + 30.0 + 12.0

    def test_unknown_catalog_entry_counts_as_zero(self):
        meal = MealOut(id="x", name="X", price=10.0, extra_choices=["ghost"])

        assert meal_unit_price(meal, [], ["ghost"], {}) == 10.0

    def test_missing_base_price(self):
        meal = MealOut(id="x", name="X", price=None)

        assert meal_unit_price(meal, [], [], {}) == 0.0

    def test_too_many_sides(self, catalog):
        with pytest.raises(PricingError):
            build_meal_line(catalog["m1"], catalog, side_ids=["chips", "salad"], preferences={"doneness": "rare"})

    def test_side_not_offered(self, catalog):
        with pytest.raises(PricingError):
            build_meal_line(catalog["m2"], catalog, side_ids=["cheese"])

    def test_required_preference(self, catalog):
        with pytest.raises(PricingError):
            build_meal_line(catalog["m1"], catalog)

    def test_preference_must_be_an_option(self, catalog):
        with pytest.raises(PricingError):
            build_meal_line(catalog["m1"], catalog, preferences={"doneness": "blue"})


class TestDrinkPricing:
    """Variant selection for drink lines"""

    def test_default_variant_is_first_priced(self):
        pricing = DrinkPricing(glass=None, jug=70.0, bottle=150.0)

        assert pricing.default_variant() == DrinkVariant.JUG
        assert pricing.min_price() == 70.0

    def test_price_for_missing_variant(self):
        assert DrinkPricing(glass=30.0).price_for(DrinkVariant.SHOT) == 0.0

    def test_build_with_default_variant(self, menu):
        red = next(d for d in menu.drinks if d.id == "d1")

        line = build_drink_line(red)

        assert line.variant == DrinkVariant.GLASS
        assert line.unit_price == 30.0

    def test_build_with_chosen_variant(self, menu):
        red = next(d for d in menu.drinks if d.id == "d1")

        assert build_drink_line(red, DrinkVariant.BOTTLE, quantity=2).unit_price == 160.0

    def test_unsold_variant(self, menu):
        red = next(d for d in menu.drinks if d.id == "d1")

        with pytest.raises(PricingError):
            build_drink_line(red, DrinkVariant.JUG)

    def test_drink_without_prices(self):
        with pytest.raises(PricingError):
            build_drink_line(DrinkOut(id="x", name="Water"))


class TestMenu:
    def test_load_menu(self, menu):
        assert menu.restaurant.name == "Harbour Grill"
        assert {m.id for m in menu.meals} >= {"m1", "m2", "chips"}
        assert [s.id for s in menu.specials] == ["s1"]
        assert isinstance(menu.meals[0].price, float)

    def test_unknown_restaurant(self, session, seeded):
        assert load_menu(session, "nope") is None

    def test_meal_pairings_only_available_drinks(self, session, seeded):
        pairings = suggest_pairings(session, "r1", ItemType.MEAL, "m1")

        assert [d.id for d in pairings.drinks] == ["d1"]
        assert pairings.meals == []

    def test_drink_pairings_only_available_meals(self, session, seeded):
        pairings = suggest_pairings(session, "r1", ItemType.DRINK, "d1")

        assert [m.id for m in pairings.meals] == ["m1"]

    def test_pairings_for_unknown_item(self, session, seeded):
        pairings = suggest_pairings(session, "r1", ItemType.MEAL, "ghost")

        assert pairings.meals == [] and pairings.drinks == []
