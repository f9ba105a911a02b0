from pydantic import BaseModel, Field
from typing import Dict, List, Optional
from ..db.orders import DrinkVariant


class DrinkPricing(BaseModel):
    """Per-variant drink prices; a missing price means the variant is not sold."""
    glass: Optional[float] = None
    jug: Optional[float] = None
    shot: Optional[float] = None
    bottle: Optional[float] = None

    def available_variants(self) -> List[DrinkVariant]:
        return [variant for variant in DrinkVariant if getattr(self, variant.value) is not None]

    def default_variant(self) -> Optional[DrinkVariant]:
        variants = self.available_variants()
        return variants[0] if variants else None

    def price_for(self, variant: DrinkVariant) -> float:
        return getattr(self, DrinkVariant(variant).value) or 0.0

    def min_price(self) -> Optional[float]:
        prices = [getattr(self, variant.value) for variant in self.available_variants()]
        return min(prices) if prices else None


class RestaurantOut(BaseModel):
    id: str
    name: str
    logo_url: Optional[str] = None
    location: Optional[str] = None
    about: Optional[str] = None


class CategoryOut(BaseModel):
    id: str
    name: str
    description: Optional[str] = None


class MealOut(BaseModel):
    id: str
    name: str
    category_id: Optional[str] = None
    description: Optional[str] = None
    dietary_category: Optional[str] = None
    price: Optional[float] = None
    availability_status: str = "available"
    side_choices: List[str] = Field(default_factory=list)
    extra_choices: List[str] = Field(default_factory=list)
    allowed_sides: Optional[int] = None
    allowed_extras: Optional[int] = None
    preferences: List[str] = Field(default_factory=list)
    preference_options: Optional[Dict[str, List[str]]] = None
    pairings_drinks: List[str] = Field(default_factory=list)


class DrinkOut(BaseModel):
    id: str
    name: str
    category_id: Optional[str] = None
    description: Optional[str] = None
    availability_status: str = "available"
    pricing: DrinkPricing = Field(default_factory=DrinkPricing)
    pairings_meals: List[str] = Field(default_factory=list)


class SpecialOut(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    price: Optional[float] = None


class MenuOut(BaseModel):
    restaurant: RestaurantOut
    categories: List[CategoryOut]
    meals: List[MealOut]
    drinks: List[DrinkOut]
    specials: List[SpecialOut]


class PairingsOut(BaseModel):
    meals: List[MealOut] = Field(default_factory=list)
    drinks: List[DrinkOut] = Field(default_factory=list)
