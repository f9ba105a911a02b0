# Cart aggregate tests

import pytest

from tableside.cart import (
    Cart, CartPreconditionError, check_submittable, is_same_line, normalize_table_number, parse_table_number,
    safe_price,
)
from tableside.db.orders import DrinkVariant, ItemType
from tableside.schemas.cart import CartSnapshot, DrinkLine, MealLine


def glass_of_red(quantity=1):
    return DrinkLine(id="d1", name="House red", variant=DrinkVariant.GLASS, unit_price=30.0, quantity=quantity)


def steak(quantity=1, **fields):
    return MealLine(id="m1", name="Sirloin steak", unit_price=45.0, quantity=quantity, **fields)


class TestLineMerging:
    """Adding lines"""

    def test_same_drink_twice_merges_into_one_line(self):
        cart = Cart()
        cart.add_drink_line(glass_of_red())
        cart.add_drink_line(glass_of_red())

        assert len(cart.lines) == 1
        assert cart.lines[0].quantity == 2
        assert cart.cart_total() == 60.0

    def test_merge_adds_the_incoming_quantity(self):
        cart = Cart()
        cart.add_meal_line(steak(quantity=2))
        cart.add_meal_line(steak(quantity=3))

        assert cart.lines[0].quantity == 5

    def test_different_variant_is_a_new_line(self):
        cart = Cart()
        cart.add_drink_line(glass_of_red())
        cart.add_drink_line(DrinkLine(id="d1", name="House red", variant=DrinkVariant.BOTTLE, unit_price=160.0))

        assert len(cart.lines) == 2

    def test_side_order_does_not_matter(self):
        assert is_same_line(steak(side_ids=["chips", "salad"]), steak(side_ids=["salad", "chips"]))

    def test_different_extras_are_distinct(self):
        assert not is_same_line(steak(extra_ids=["cheese"]), steak())

    def test_missing_preferences_equal_empty(self):
        assert is_same_line(steak(preferences=None), steak(preferences={}))
        assert not is_same_line(steak(preferences={"doneness": "rare"}), steak(preferences={"doneness": "medium"}))

    def test_added_line_is_a_copy(self):
        cart = Cart()
        line = steak()
        cart.add_meal_line(line)
        cart.add_meal_line(steak())

        assert line.quantity == 1


class TestQuantities:
    """Quantity updates and derived totals"""

    def test_decrement_stops_at_one(self):
        cart = Cart()
        cart.add_meal_line(steak())
        cart.decrement_line_quantity(0)

        assert cart.lines[0].quantity == 1

    def test_increment_and_decrement(self):
        cart = Cart()
        cart.add_meal_line(steak())
        cart.increment_line_quantity(0)
        cart.increment_line_quantity(0)
        cart.decrement_line_quantity(0)

        assert cart.lines[0].quantity == 2

    def test_update_ignores_non_positive_quantity(self):
        cart = Cart()
        cart.add_meal_line(steak())
        cart.update_line_quantity(0, 0)
        cart.update_line_quantity(0, -3)

        assert cart.lines[0].quantity == 1

    def test_update_quantity(self):
        cart = Cart()
        cart.add_meal_line(steak())
        cart.update_line_quantity(0, 4)

        assert cart.cart_total() == 180.0
        assert cart.cart_item_count() == 4

    def test_remove_out_of_range_raises(self):
        cart = Cart()
        with pytest.raises(IndexError):
            cart.remove_line(0)

    def test_missing_price_counts_as_zero(self):
        cart = Cart()
        cart.add_meal_line(MealLine(id="m9", name="Mystery", unit_price=None, quantity=3))
        cart.add_drink_line(glass_of_red())

        assert cart.cart_total() == 30.0
        assert cart.cart_item_count() == 4

    def test_safe_price(self):
        assert safe_price(None) == 0.0
        assert safe_price(float("nan")) == 0.0
        assert safe_price(True) == 0.0
        assert safe_price("12") == 0.0
        assert safe_price(12) == 12.0


class TestScoping:
    """Table, diner and restaurant scoping"""

    def test_table_number_keeps_digits_only(self):
        assert normalize_table_number("T-12") == "12"
        assert normalize_table_number("12345") == "123"
        assert normalize_table_number("abc") is None
        assert normalize_table_number(None) is None

    def test_parse_table_number_does_not_rewrite(self):
        assert parse_table_number("12") == "12"
        assert parse_table_number(" 7 ") == "7"
        assert parse_table_number("1234") is None
        assert parse_table_number("12a") is None
        assert parse_table_number("") is None

    def test_validate_restaurant(self):
        cart = Cart()
        assert cart.validate_restaurant("r1")

        cart.set_restaurant("r1")
        assert cart.validate_restaurant("r1")
        assert not cart.validate_restaurant("r2")

    def test_clear_resets_everything(self):
        cart = Cart()
        cart.set_restaurant("r1")
        cart.set_table_number("12")
        cart.set_diner_name("Alex")
        cart.add_meal_line(steak())
        cart.clear()

        assert cart.is_empty()
        assert cart.restaurant_id is None
        assert cart.table_number is None
        assert cart.diner_name is None

    def test_clear_cart_items_keeps_identity(self):
        cart = Cart()
        cart.set_restaurant("r1")
        cart.set_table_number("12")
        cart.set_diner_name("  Alex ")
        cart.add_meal_line(steak())
        cart.clear_cart_items()

        assert cart.is_empty()
        assert cart.restaurant_id == "r1"
        assert cart.table_number == "12"
        assert cart.diner_name == "Alex"
        assert not cart.pairing_suggestion.is_open


class TestPairingSuggestion:
    """Single suggestion slot"""

    def test_new_line_opens_suggestion(self):
        cart = Cart()
        cart.add_meal_line(steak())

        assert cart.pairing_suggestion.is_open
        assert cart.pairing_suggestion.added_item.id == "m1"
        assert cart.pairing_suggestion.added_item.type == ItemType.MEAL

    def test_last_add_wins(self):
        cart = Cart()
        cart.add_meal_line(steak())
        cart.add_drink_line(glass_of_red())

        assert cart.pairing_suggestion.added_item.id == "d1"

    def test_suppressed_add_keeps_slot_closed(self):
        cart = Cart()
        cart.add_drink_line(glass_of_red(), suppress_suggestion=True)

        assert not cart.pairing_suggestion.is_open

    def test_merge_does_not_reopen_suggestion(self):
        cart = Cart()
        cart.add_meal_line(steak())
        cart.hide_pairing_suggestion()
        cart.add_meal_line(steak())

        assert not cart.pairing_suggestion.is_open


class TestPersistence:
    """Snapshots and the change listener"""

    def test_listener_receives_snapshot_after_each_change(self):
        snapshots = []
        cart = Cart(listener=snapshots.append)
        cart.set_table_number("7")
        cart.add_drink_line(glass_of_red())

        assert len(snapshots) == 2
        assert snapshots[-1].table_number == "7"
        assert snapshots[-1].lines[0].id == "d1"

    def test_snapshot_round_trip_keeps_line_types(self):
        cart = Cart()
        cart.set_restaurant("r1")
        cart.add_meal_line(steak(side_ids=["chips"]))
        cart.add_drink_line(glass_of_red())

        restored = Cart.from_snapshot(CartSnapshot.model_validate(cart.to_snapshot().model_dump(mode="json")))

        assert isinstance(restored.lines[0], MealLine)
        assert isinstance(restored.lines[1], DrinkLine)
        assert restored.cart_total() == cart.cart_total()
        assert restored.restaurant_id == "r1"


class TestSubmittable:
    """Preconditions for placing an order"""

    def test_requires_restaurant_table_and_lines(self):
        with pytest.raises(CartPreconditionError):
            check_submittable(None, "12", [steak()])
        with pytest.raises(CartPreconditionError):
            check_submittable("r1", "", [steak()])
        with pytest.raises(CartPreconditionError):
            check_submittable("r1", "12", [])

    def test_rejects_malformed_table_number(self):
        with pytest.raises(CartPreconditionError):
            check_submittable("r1", "1234", [steak()])
        with pytest.raises(CartPreconditionError):
            check_submittable("r1", "T12", [steak()])

    def test_rejects_zero_quantity(self):
        with pytest.raises(CartPreconditionError):
            check_submittable("r1", "12", [steak(quantity=0)])

    def test_valid_cart_passes(self):
        check_submittable("r1", "12", [steak()])
