# recipe_note/services/persist_models.py
from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from recipe_note.services.types import SourceType


def utc_now_iso(now: Optional[datetime] = None) -> str:
    moment = (now or datetime.now(timezone.utc)).astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_iso(value: str) -> datetime:
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (AttributeError, ValueError):
        return datetime.min.replace(tzinfo=timezone.utc)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class Ingredient(BaseModel):
    name: str = ""
    amount: str = ""
    unit: str = ""


class RecipeStep(BaseModel):
    order: int
    description: str = ""
    timestamp: str = ""
    tips: str = ""


class Recipe(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    title: str = ""
    category: str = "other"
    tags: list[str] = Field(default_factory=list)
    servings: str = ""
    prepTime: str = ""
    cookTime: str = ""
    ingredients: list[Ingredient] = Field(default_factory=list)
    steps: list[RecipeStep] = Field(default_factory=list)
    notes: str = ""
    sourceUrl: str = ""
    sourceType: SourceType = "text"
    thumbnailUrl: str = ""
    createdAt: str
    updatedAt: str

    def touch(self, now: Optional[datetime] = None) -> None:
        self.updatedAt = utc_now_iso(now)

    @property
    def created_at(self) -> datetime:
        return parse_iso(self.createdAt)


class RecipeCollection(BaseModel):
    recipes: list[Recipe] = Field(default_factory=list)
    updatedAt: Optional[str] = None


def newest_first(recipes: list[Recipe]) -> list[Recipe]:
    return sorted(recipes, key=lambda recipe: recipe.created_at, reverse=True)
