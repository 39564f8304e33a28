# recipe_note/app/infra/db/base.py
"""
Abstract base class for recipe storage.
The CLI, the API and the tests pick an implementation by deployment context.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from recipe_note.services.persist_models import Recipe


class RecipeRepository(ABC):
    """
    Keyed recipe store.

    Implementations:
    - JsonFileRecipeRepository: flat ``{recipes, updatedAt}`` file (CLI)
    - InMemoryRecipeRepository: dict keyed by id (tests, ephemeral runs)
    - SupabaseRecipeRepository: ``recipes`` table (hosted API)
    """

    @abstractmethod
    def put(self, recipe: Recipe) -> Recipe:
        """
        Insert or replace a recipe by id.

        Always refreshes ``updatedAt`` on the given recipe before storing it.

        Returns:
            The stored recipe
        """
        pass

    @abstractmethod
    def get(self, recipe_id: str) -> Optional[Recipe]:
        """Return the recipe with this id, or None."""
        pass

    @abstractmethod
    def list(self) -> list[Recipe]:
        """All recipes, newest ``createdAt`` first."""
        pass

    @abstractmethod
    def delete(self, recipe_id: str) -> None:
        """
        Remove a recipe.

        Raises:
            RecipeNotFoundError: If no recipe has this id; the store is left untouched
        """
        pass

    def list_by_category(self, category: str) -> list[Recipe]:
        """Recipes in one category, newest first."""
        return [recipe for recipe in self.list() if recipe.category == category]
