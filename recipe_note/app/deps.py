# recipe_note/app/deps.py
from __future__ import annotations

from fastapi import Depends
from supabase import Client, create_client

from recipe_note.app.config import Settings, get_settings, resolve_extractor_config
from recipe_note.app.infra.db.base import RecipeRepository
from recipe_note.app.infra.db.json_file_repo import JsonFileRecipeRepository
from recipe_note.app.infra.db.memory_repo import InMemoryRecipeRepository
from recipe_note.app.infra.db.supabase_recipes_repo import SupabaseRecipeRepository
from recipe_note.app.services.recipe_service import RecipeService
from recipe_note.services.errors import ServiceError
from recipe_note.services.gemini_client import GeminiClient

_client: Client | None = None
_repository: RecipeRepository | None = None


def get_supabase(settings: Settings) -> Client:
    global _client
    if _client is None:
        if not settings.SUPABASE_URL or not settings.SUPABASE_SERVICE_ROLE_KEY:
            raise ServiceError("SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY are required")
        _client = create_client(settings.SUPABASE_URL, settings.SUPABASE_SERVICE_ROLE_KEY)
    return _client


def build_repository(settings: Settings) -> RecipeRepository:
    if settings.STORAGE_BACKEND == "supabase":
        return SupabaseRecipeRepository(get_supabase(settings))
    if settings.STORAGE_BACKEND == "memory":
        return InMemoryRecipeRepository()
    return JsonFileRecipeRepository(settings.RECIPES_FILE)


def get_repository(settings: Settings = Depends(get_settings)) -> RecipeRepository:
    global _repository
    if _repository is None:
        _repository = build_repository(settings)
    return _repository


def get_recipe_service(
    repository: RecipeRepository = Depends(get_repository),
) -> RecipeService:
    return RecipeService(repository)


def get_gemini_client(settings: Settings = Depends(get_settings)) -> GeminiClient:
    config = resolve_extractor_config(settings)
    return GeminiClient(api_key=config.api_key, model_name=config.model)
