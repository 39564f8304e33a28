# recipe_note/app/infra/db/memory_repo.py
from __future__ import annotations

import threading
from typing import Optional

from recipe_note.app.infra.db.base import RecipeRepository
from recipe_note.services.errors import RecipeNotFoundError
from recipe_note.services.persist_models import Recipe, newest_first


class InMemoryRecipeRepository(RecipeRepository):
    def __init__(self, recipes: Optional[list[Recipe]] = None) -> None:
        self._lock = threading.Lock()
        self._records: dict[str, Recipe] = {
            recipe.id: recipe.model_copy(deep=True) for recipe in recipes or []
        }

    def put(self, recipe: Recipe) -> Recipe:
        recipe.touch()
        with self._lock:
            self._records[recipe.id] = recipe.model_copy(deep=True)
        return recipe

    def get(self, recipe_id: str) -> Optional[Recipe]:
        with self._lock:
            record = self._records.get(recipe_id)
            return record.model_copy(deep=True) if record else None

    def list(self) -> list[Recipe]:
        with self._lock:
            records = [record.model_copy(deep=True) for record in self._records.values()]
        return newest_first(records)

    def delete(self, recipe_id: str) -> None:
        with self._lock:
            if recipe_id not in self._records:
                raise RecipeNotFoundError(recipe_id)
            del self._records[recipe_id]
