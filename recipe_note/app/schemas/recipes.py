from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from recipe_note.services.persist_models import Recipe


class ExtractRequest(BaseModel):
    url: Optional[str] = None
    text: Optional[str] = None


class StepUpdateRequest(BaseModel):
    description: Optional[str] = None
    tips: Optional[str] = None


class RecipeListResponse(BaseModel):
    items: list[Recipe] = Field(default_factory=list)
    total: int


class CategoryResponse(BaseModel):
    id: str
    label: str
    emoji: str
