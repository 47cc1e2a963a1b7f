"""
In-memory menu model and its JSON projections.

A Menu owns its Sections, a Section owns its Items, and an Item owns its
optional ItemDetail. Order of sections and items is display order.
"""
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, Iterator, List, Optional, Tuple

from .webpage import Meal, MenuRequest, Restaurant

NUTRIENT_FIELDS = (
    'total_fat', 'saturated_fat', 'trans_fat',
    'cholesterol', 'sodium', 'total_carbohydrate',
    'dietary_fiber', 'sugars', 'protein',
)

VITAMIN_FIELDS = ('vitamin_a', 'vitamin_c', 'calcium', 'iron')


@dataclass
class NutritionFact:
    amount: str
    daily_value: Optional[str] = None

    def to_json(self) -> Dict:
        return {"amount": self.amount, "daily_value": self.daily_value}

    def to_json_min(self) -> Dict:
        data = {"amount": self.amount}
        if self.daily_value is not None:
            data["daily_value"] = self.daily_value
        return data

    @classmethod
    def from_json(cls, data: Optional[Dict]) -> Optional["NutritionFact"]:
        if not data:
            return None
        return cls(amount=data.get("amount", ""), daily_value=data.get("daily_value"))


@dataclass
class ItemDetail:
    """Nutrition label and ingredients for one item. Unknown values are None or []."""
    name: str = ""
    serving_size: Optional[str] = None
    calories: Optional[int] = None
    fat_calories: Optional[int] = None
    total_fat: Optional[NutritionFact] = None
    saturated_fat: Optional[NutritionFact] = None
    trans_fat: Optional[NutritionFact] = None
    cholesterol: Optional[NutritionFact] = None
    sodium: Optional[NutritionFact] = None
    total_carbohydrate: Optional[NutritionFact] = None
    dietary_fiber: Optional[NutritionFact] = None
    sugars: Optional[NutritionFact] = None
    protein: Optional[NutritionFact] = None
    vitamin_a: Optional[str] = None
    vitamin_c: Optional[str] = None
    calcium: Optional[str] = None
    iron: Optional[str] = None
    ingredients: List[str] = field(default_factory=list)
    allergens: List[str] = field(default_factory=list)

    def to_json(self) -> Dict:
        data = {
            "name": self.name,
            "serving_size": self.serving_size,
            "calories": self.calories,
            "fat_calories": self.fat_calories,
        }
        for key in NUTRIENT_FIELDS:
            fact = getattr(self, key)
            data[key] = fact.to_json() if fact is not None else None
        for key in VITAMIN_FIELDS:
            data[key] = getattr(self, key)
        data["ingredients"] = list(self.ingredients)
        data["allergens"] = list(self.allergens)
        return data

    def to_json_min(self) -> Dict:
        # Drop unknown values only; everything kept is identical to to_json()
        data = {}
        for key, value in self.to_json().items():
            if value is None or value == []:
                continue
            if key in NUTRIENT_FIELDS:
                value = getattr(self, key).to_json_min()
            data[key] = value
        return data

    @classmethod
    def from_json(cls, data: Dict) -> "ItemDetail":
        detail = cls(
            name=data.get("name", ""),
            serving_size=data.get("serving_size"),
            calories=data.get("calories"),
            fat_calories=data.get("fat_calories"),
            ingredients=list(data.get("ingredients") or []),
            allergens=list(data.get("allergens") or []),
        )
        for key in NUTRIENT_FIELDS:
            setattr(detail, key, NutritionFact.from_json(data.get(key)))
        for key in VITAMIN_FIELDS:
            setattr(detail, key, data.get(key))
        return detail


@dataclass
class Item:
    name: str
    detail_url: str = ""
    detail: Optional[ItemDetail] = None

    @property
    def has_details(self) -> bool:
        return self.detail is not None

    def set_details(self, detail: ItemDetail) -> None:
        """Attach the nutrition record, replacing any previous one."""
        self.detail = detail

    def to_json(self) -> Dict:
        return {
            "name": self.name,
            "detail_url": self.detail_url,
            "detail": self.detail.to_json() if self.detail is not None else None,
        }

    def to_json_min(self) -> Dict:
        data = {"name": self.name}
        if self.detail is not None:
            data["detail"] = self.detail.to_json_min()
        return data

    @classmethod
    def from_json(cls, data: Dict) -> "Item":
        detail = data.get("detail")
        return cls(
            name=data["name"],
            detail_url=data.get("detail_url", ""),
            detail=ItemDetail.from_json(detail) if detail is not None else None,
        )


@dataclass
class Section:
    name: str
    items: List[Item] = field(default_factory=list)

    def to_json(self) -> Dict:
        return {"name": self.name, "items": [item.to_json() for item in self.items]}

    def to_json_min(self) -> Dict:
        return {"name": self.name, "items": [item.to_json_min() for item in self.items]}

    @classmethod
    def from_json(cls, data: Dict) -> "Section":
        return cls(name=data["name"], items=[Item.from_json(item) for item in data.get("items", [])])


@dataclass
class Menu:
    date: date
    meal: Meal
    restaurant: Restaurant
    sections: List[Section] = field(default_factory=list)

    @classmethod
    def for_request(cls, request: MenuRequest) -> "Menu":
        return cls(date=request.date, meal=request.meal, restaurant=request.restaurant)

    @property
    def request(self) -> MenuRequest:
        return MenuRequest(date=self.date, meal=self.meal, restaurant=self.restaurant)

    @property
    def is_empty(self) -> bool:
        """True when nothing is served (no sections at all)."""
        return not self.sections

    def items(self) -> Iterator[Tuple[Section, Item]]:
        for section in self.sections:
            for item in section.items:
                yield section, item

    def item_count(self) -> int:
        return sum(len(section.items) for section in self.sections)

    def to_json(self) -> Dict:
        return {
            "date": self.date.isoformat(),
            "meal": self.meal.display_name,
            "restaurant": self.restaurant.display_name,
            "sections": [section.to_json() for section in self.sections],
        }

    def to_json_min(self) -> Dict:
        return {
            "date": self.date.isoformat(),
            "meal": self.meal.display_name,
            "restaurant": self.restaurant.display_name,
            "sections": [section.to_json_min() for section in self.sections],
        }

    @classmethod
    def from_json(cls, data: Dict) -> "Menu":
        """Rebuild a Menu from to_json() (or to_json_min()) output."""
        return cls(
            date=date.fromisoformat(data["date"]),
            meal=Meal.lookup(data["meal"]),
            restaurant=Restaurant.lookup(data["restaurant"]),
            sections=[Section.from_json(section) for section in data.get("sections", [])],
        )

    def __str__(self):
        lines = [f"{self.meal.display_name} at {self.restaurant.display_name} on {self.date.isoformat()}"]
        if not self.sections:
            lines.append("  (nothing served)")
        for section in self.sections:
            lines.append(f"  {section.name}")
            for item in section.items:
                line = f"    - {item.name}"
                if item.detail is not None and item.detail.calories is not None:
                    line += f" ({item.detail.calories} cal)"
                lines.append(line)
        return "\n".join(lines)
