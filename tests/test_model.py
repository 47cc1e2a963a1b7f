"""Unit tests for the menu model and its JSON projections."""
import json
from datetime import date

import pytest

from ucla_lib.model import Item, ItemDetail, Menu, NutritionFact, Section
from ucla_lib.parser import parse_item, parse_menu
from ucla_lib.webpage import Meal, Restaurant


def _assert_subset(minimal, full, path="$"):
    """Every value present in ``minimal`` equals the one in ``full``."""
    if isinstance(minimal, dict):
        assert isinstance(full, dict), path
        for key, value in minimal.items():
            assert key in full, f"{path}.{key}"
            _assert_subset(value, full[key], f"{path}.{key}")
    elif isinstance(minimal, list):
        assert isinstance(full, list) and len(minimal) == len(full), path
        for index, (a, b) in enumerate(zip(minimal, full)):
            _assert_subset(a, b, f"{path}[{index}]")
    else:
        assert minimal == full, path


@pytest.fixture
def inflated_menu(menu_html, recipe_html, dinner_request):
    """Parsed menu with details on the first item only."""
    menu = parse_menu(menu_html, dinner_request)
    menu.sections[0].items[0].set_details(parse_item(recipe_html))
    return menu


class TestItem:
    """Test the detail slot."""

    def test_set_details(self):
        """Test attaching details moves the item from absent to present."""
        item = Item(name="Fruit Cup", detail_url="https://x/Recipes/1/1")
        assert not item.has_details
        item.set_details(ItemDetail(name="Fruit Cup", calories=60))
        assert item.has_details
        assert item.detail.calories == 60

    def test_set_details_replaces(self):
        """Test a second call replaces the previous record."""
        item = Item(name="Fruit Cup")
        item.set_details(ItemDetail(calories=60))
        item.set_details(ItemDetail(calories=70))
        assert item.detail.calories == 70

    def test_genuinely_empty_detail_differs_from_absent(self):
        """Test an empty detail record still counts as fetched."""
        item = Item(name="Water")
        item.set_details(ItemDetail())
        assert item.has_details
        assert item.to_json()["detail"] is not None


class TestMenuJson:
    """Test full and minimal JSON projections."""

    def test_full_document_shape(self, inflated_menu):
        """Test every field is present in the full document."""
        data = inflated_menu.to_json()

        assert data["date"] == "2024-02-29"
        assert data["meal"] == "Dinner"
        assert data["restaurant"] == "Covel"
        first, second = data["sections"][0]["items"]
        assert first["detail"]["total_fat"] == {"amount": "10g", "daily_value": "15%"}
        assert first["detail"]["trans_fat"] == {"amount": "0g", "daily_value": None}
        assert second["detail"] is None
        assert second["detail_url"] == "http://menu.dining.ucla.edu/Recipes/142007/1"

    def test_minimal_document_omits_absent_values(self, inflated_menu):
        """Test the minimal document drops empty slots and URLs."""
        data = inflated_menu.to_json_min()
        first, second = data["sections"][0]["items"]

        assert second == {"name": "Veggie Bowl"}
        assert "detail_url" not in first
        assert first["detail"]["trans_fat"] == {"amount": "0g"}
        assert first["detail"]["calories"] == 210

    def test_minimal_is_subset_of_full(self, inflated_menu, closed_html, dinner_request):
        """Test minimization only omits, never alters."""
        _assert_subset(inflated_menu.to_json_min(), inflated_menu.to_json())
        empty = parse_menu(closed_html, dinner_request)
        _assert_subset(empty.to_json_min(), empty.to_json())

        sparse = Menu(date(2024, 1, 1), Meal.LUNCH, Restaurant.DE_NEVE, [
            Section("Grill", [Item("Burger", detail=ItemDetail(name="Burger", sodium=NutritionFact("500mg")))]),
            Section("Empty"),
        ])
        _assert_subset(sparse.to_json_min(), sparse.to_json())

    def test_round_trip_through_json(self, inflated_menu):
        """Test to_json output rebuilds an identical menu."""
        text = json.dumps(inflated_menu.to_json())
        rebuilt = Menu.from_json(json.loads(text))

        assert rebuilt == inflated_menu
        assert [len(s.items) for s in rebuilt.sections] == [2, 1]
        assert [item.name for _, item in rebuilt.items()] == ["Grilled Chicken", "Veggie Bowl", "Fruit Cup"]

    def test_round_trip_keeps_empty_sections(self):
        """Test an empty section survives serialization."""
        menu = Menu(date(2024, 1, 1), Meal.BREAKFAST, Restaurant.FEAST_AT_RIEBER, [Section("Soups")])
        assert Menu.from_json(menu.to_json()) == menu

    def test_read_minimal_document(self, inflated_menu):
        """Test minimal output can be read back with the same structure."""
        rebuilt = Menu.from_json(inflated_menu.to_json_min())
        assert rebuilt.restaurant is Restaurant.COVEL
        assert rebuilt.item_count() == 3
        assert rebuilt.sections[0].items[0].detail.total_fat == NutritionFact("10g", "15%")
        assert rebuilt.sections[0].items[1].detail is None


class TestMenuDisplay:
    """Test the console rendering."""

    def test_rendering_keeps_order_and_context(self, inflated_menu):
        """Test header, sections and items appear in display order."""
        text = str(inflated_menu)
        lines = text.splitlines()

        assert lines[0] == "Dinner at Covel on 2024-02-29"
        assert lines[1].strip() == "Entrees"
        assert lines[2].strip() == "- Grilled Chicken (210 cal)"
        assert lines[3].strip() == "- Veggie Bowl"
        assert lines[4].strip() == "Desserts"
        assert lines[5].strip() == "- Fruit Cup"

    def test_rendering_nothing_served(self, closed_html, dinner_request):
        """Test an empty menu says nothing is served."""
        assert "nothing served" in str(parse_menu(closed_html, dinner_request))
