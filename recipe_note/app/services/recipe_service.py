# recipe_note/app/services/recipe_service.py
"""
Store-facing recipe operations shared by the CLI and the API.
"""
from __future__ import annotations

import logging
from typing import Optional

from recipe_note.app.infra.db.base import RecipeRepository
from recipe_note.services.errors import InvalidInputError, RecipeNotFoundError
from recipe_note.services.persist_models import Recipe

logger = logging.getLogger(__name__)


class RecipeService:
    """
    Thin layer over a RecipeRepository.

    Responsibilities:
    - Look recipes up by id or by their 1-based position in the list
    - Delete recipes
    - Apply step text edits and re-persist
    """

    def __init__(self, repository: RecipeRepository):
        self._repo = repository

    def list_recipes(self, category: Optional[str] = None) -> list[Recipe]:
        if category:
            return self._repo.list_by_category(category)
        return self._repo.list()

    def get_recipe(self, recipe_id: str) -> Recipe:
        recipe = self._repo.get(recipe_id)
        if recipe is None:
            raise RecipeNotFoundError(recipe_id)
        return recipe

    def resolve(self, target: str) -> Recipe:
        """
        Find a recipe by list number (as shown by ``list_recipes``) or by id.

        Raises:
            RecipeNotFoundError: If neither interpretation matches
        """
        target = target.strip()
        if target.isdigit():
            recipes = self._repo.list()
            position = int(target)
            if 1 <= position <= len(recipes):
                return recipes[position - 1]
        return self.get_recipe(target)

    def delete(self, target: str) -> Recipe:
        """Delete by list number or id; returns the removed recipe."""
        return self.delete_by_id(self.resolve(target).id)

    def delete_by_id(self, recipe_id: str) -> Recipe:
        recipe = self.get_recipe(recipe_id)
        self._repo.delete(recipe.id)
        logger.info("Deleted recipe %s (%s)", recipe.id, recipe.title)
        return recipe

    def edit_step(
        self,
        recipe_id: str,
        index: int,
        description: Optional[str] = None,
        tips: Optional[str] = None,
    ) -> Recipe:
        """
        Update the text of one step (0-based ``index``) and re-persist.

        Raises:
            RecipeNotFoundError: Unknown recipe
            InvalidInputError: Index out of range
        """
        recipe = self.get_recipe(recipe_id)
        if not 0 <= index < len(recipe.steps):
            raise InvalidInputError(
                f"Recipe {recipe_id} has no step {index + 1} ({len(recipe.steps)} steps)"
            )

        step = recipe.steps[index]
        if description is not None:
            step.description = description.strip()
        if tips is not None:
            step.tips = tips.strip()

        return self._repo.put(recipe)
