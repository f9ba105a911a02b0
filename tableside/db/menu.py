from typing import Optional
from uuid import uuid4

from sqlalchemy import Column, Numeric
from sqlalchemy.dialects.sqlite import VARCHAR, TEXT
from sqlmodel import Field, SQLModel

from .orders import json_column


def new_id() -> str:
    return uuid4().hex


class Restaurant(SQLModel, table=True):
    __tablename__ = "restaurants"

    id: str = Field(default_factory=new_id, primary_key=True)
    name: str = Field(sa_column=Column(VARCHAR(255)))
    logo_url: Optional[str] = Field(default=None)
    location: Optional[str] = Field(default=None)
    about: Optional[str] = Field(default=None, sa_column=Column(TEXT))
    hidden: bool = Field(default=False)


class Category(SQLModel, table=True):
    __tablename__ = "categories"

    id: str = Field(default_factory=new_id, primary_key=True)
    restaurant_id: str = Field(foreign_key="restaurants.id", index=True)
    name: str
    description: Optional[str] = Field(default=None)


class Meal(SQLModel, table=True):
    __tablename__ = "meals"

    id: str = Field(default_factory=new_id, primary_key=True)
    restaurant_id: str = Field(foreign_key="restaurants.id", index=True)
    category_id: Optional[str] = Field(default=None, foreign_key="categories.id")
    name: str
    description: Optional[str] = Field(default=None, sa_column=Column(TEXT))
    dietary_category: Optional[str] = Field(default=None)
    price: Optional[float] = Field(default=None, sa_column=Column(Numeric(10, 2)))
    availability_status: str = Field(default="available")
    side_choices: Optional[list] = Field(default=None, sa_column=json_column())
    extra_choices: Optional[list] = Field(default=None, sa_column=json_column())
    # 0 means sides are charged at their own price, otherwise they are included
    allowed_sides: Optional[int] = Field(default=None)
    allowed_extras: Optional[int] = Field(default=None)
    # Required preference keys, e.g. ["doneness"]
    preferences: Optional[list] = Field(default=None, sa_column=json_column())
    preference_options: Optional[dict] = Field(default=None, sa_column=json_column())
    pairings_drinks: Optional[list] = Field(default=None, sa_column=json_column())


class Drink(SQLModel, table=True):
    __tablename__ = "drinks"

    id: str = Field(default_factory=new_id, primary_key=True)
    restaurant_id: str = Field(foreign_key="restaurants.id", index=True)
    category_id: Optional[str] = Field(default=None, foreign_key="categories.id")
    name: str
    description: Optional[str] = Field(default=None, sa_column=Column(TEXT))
    availability_status: str = Field(default="available")
    # {"glass": 30.0, "bottle": 120.0, "jug": null, "shot": null}
    pricing: Optional[dict] = Field(default=None, sa_column=json_column())
    pairings_meals: Optional[list] = Field(default=None, sa_column=json_column())


class Special(SQLModel, table=True):
    __tablename__ = "specials"

    id: str = Field(default_factory=new_id, primary_key=True)
    restaurant_id: str = Field(foreign_key="restaurants.id", index=True)
    title: str
    description: Optional[str] = Field(default=None, sa_column=Column(TEXT))
    price: Optional[float] = Field(default=None, sa_column=Column(Numeric(10, 2)))
    active: bool = Field(default=True)
