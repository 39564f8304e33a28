# recipe_note/app/infra/db/json_file_repo.py
"""
Flat-file recipe store.

The whole collection lives in one JSON document,
``{"recipes": [...], "updatedAt": "<iso>" | null}``, rewritten on every
mutation.
"""
from __future__ import annotations

import json
import logging
import os
import threading
from pathlib import Path
from typing import Any, Optional, Sequence

from pydantic import ValidationError

from recipe_note.app.infra.db.base import RecipeRepository
from recipe_note.services.errors import RecipeNotFoundError
from recipe_note.services.persist_models import (
    Recipe,
    RecipeCollection,
    newest_first,
    utc_now_iso,
)
from recipe_note.services.recipe_parser import normalize_stored_record

logger = logging.getLogger(__name__)


class JsonFileRecipeRepository(RecipeRepository):
    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()

    def _read_raw(self) -> Any:
        try:
            return json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return None
        except (OSError, json.JSONDecodeError) as error:
            logger.warning("Unreadable recipe file %s: %s", self.path, error)
            return None

    def _load(self) -> tuple[RecipeCollection, list[Any]]:
        """Parsed collection plus the raw entries that could not be parsed."""
        raw = self._read_raw()
        if not isinstance(raw, dict):
            return RecipeCollection(), []

        recipes: list[Recipe] = []
        unparsed: list[Any] = []
        for entry in raw.get("recipes") or []:
            payload = normalize_stored_record(entry)
            if payload is None:
                logger.warning("Keeping unreadable recipe record in %s as is", self.path)
                unparsed.append(entry)
                continue
            try:
                recipes.append(Recipe.model_validate(payload))
            except ValidationError as error:
                logger.warning("Keeping invalid recipe record in %s as is: %s", self.path, error)
                unparsed.append(entry)

        updated_at = raw.get("updatedAt")
        collection = RecipeCollection(
            recipes=recipes,
            updatedAt=updated_at if isinstance(updated_at, str) else None,
        )
        return collection, unparsed

    def load_collection(self) -> RecipeCollection:
        return self._load()[0]

    def save_collection(self, collection: RecipeCollection, unparsed: Sequence[Any] = ()) -> None:
        """Rewrite the file; ``unparsed`` entries are written back untouched."""
        collection.updatedAt = utc_now_iso()
        self.path.parent.mkdir(parents=True, exist_ok=True)

        document = collection.model_dump()
        document["recipes"].extend(unparsed)

        tmp_path = self.path.with_name(self.path.name + ".tmp")
        tmp_path.write_text(
            json.dumps(document, indent=2, ensure_ascii=False),
            encoding="utf-8",
        )
        os.replace(tmp_path, self.path)

    def put(self, recipe: Recipe) -> Recipe:
        recipe.touch()
        with self._lock:
            collection, unparsed = self._load()
            stored = recipe.model_copy(deep=True)
            for index, existing in enumerate(collection.recipes):
                if existing.id == recipe.id:
                    collection.recipes[index] = stored
                    break
            else:
                collection.recipes.insert(0, stored)
            self.save_collection(collection, unparsed)
        return recipe

    def get(self, recipe_id: str) -> Optional[Recipe]:
        for recipe in self.load_collection().recipes:
            if recipe.id == recipe_id:
                return recipe
        return None

    def list(self) -> list[Recipe]:
        return newest_first(self.load_collection().recipes)

    def delete(self, recipe_id: str) -> None:
        with self._lock:
            collection, unparsed = self._load()
            remaining = [recipe for recipe in collection.recipes if recipe.id != recipe_id]
            if len(remaining) == len(collection.recipes):
                raise RecipeNotFoundError(recipe_id)
            collection.recipes = remaining
            self.save_collection(collection, unparsed)
