# recipe_note/app/infra/db/supabase_recipes_repo.py
"""
Supabase implementation of the recipe store.

Expected table::

    create table recipes (
        id text primary key,
        category text not null,
        created_at timestamptz not null,
        updated_at timestamptz not null,
        data jsonb not null
    );
"""
from __future__ import annotations

import logging
from typing import Any, Optional

from supabase import Client

from recipe_note.app.infra.db.base import RecipeRepository
from recipe_note.services.errors import RecipeNotFoundError
from recipe_note.services.persist_models import Recipe

logger = logging.getLogger(__name__)

TABLE = "recipes"


def _to_row(recipe: Recipe) -> dict[str, Any]:
    return {
        "id": recipe.id,
        "category": recipe.category,
        "created_at": recipe.createdAt,
        "updated_at": recipe.updatedAt,
        "data": recipe.model_dump(),
    }


def _from_rows(rows: list[dict] | None) -> list[Recipe]:
    return [Recipe.model_validate(row["data"]) for row in rows or [] if row.get("data")]


class SupabaseRecipeRepository(RecipeRepository):
    def __init__(self, client: Client) -> None:
        self._client = client

    def put(self, recipe: Recipe) -> Recipe:
        recipe.touch()
        self._client.table(TABLE).upsert(_to_row(recipe)).execute()
        logger.debug("Upserted recipe %s", recipe.id)
        return recipe

    def get(self, recipe_id: str) -> Optional[Recipe]:
        response = (
            self._client.table(TABLE)
            .select("data")
            .eq("id", recipe_id)
            .limit(1)
            .execute()
        )
        recipes = _from_rows(response.data)
        return recipes[0] if recipes else None

    def list(self) -> list[Recipe]:
        response = (
            self._client.table(TABLE)
            .select("data")
            .order("created_at", desc=True)
            .execute()
        )
        return _from_rows(response.data)

    def list_by_category(self, category: str) -> list[Recipe]:
        response = (
            self._client.table(TABLE)
            .select("data")
            .eq("category", category)
            .order("created_at", desc=True)
            .execute()
        )
        return _from_rows(response.data)

    def delete(self, recipe_id: str) -> None:
        response = self._client.table(TABLE).delete().eq("id", recipe_id).execute()
        if not response.data:
            raise RecipeNotFoundError(recipe_id)
