# recipe_note/app/routers/recipes.py
from __future__ import annotations

import logging
import time
from typing import Optional

from fastapi import APIRouter, Depends, Query
from starlette.concurrency import run_in_threadpool

from recipe_note.app.config import Settings, get_settings
from recipe_note.app.deps import get_gemini_client, get_recipe_service, get_repository
from recipe_note.app.infra.db.base import RecipeRepository
from recipe_note.app.schemas.recipes import (
    CategoryResponse,
    ExtractRequest,
    RecipeListResponse,
    StepUpdateRequest,
)
from recipe_note.app.services.recipe_service import RecipeService
from recipe_note.services.categories import CATEGORIES, CATEGORY_ORDER
from recipe_note.services.gemini_client import GeminiClient
from recipe_note.services.ingest import ingest as run_ingest
from recipe_note.services.persist_models import Recipe

log = logging.getLogger(__name__)
router = APIRouter(tags=["recipes"])


@router.get("/categories", response_model=list[CategoryResponse])
def list_categories() -> list[CategoryResponse]:
    return [
        CategoryResponse(id=category_id, label=CATEGORIES[category_id].label, emoji=CATEGORIES[category_id].emoji)
        for category_id in CATEGORY_ORDER
    ]


@router.get("/recipes", response_model=RecipeListResponse)
async def list_recipes(
    category: Optional[str] = Query(default=None),
    service: RecipeService = Depends(get_recipe_service),
) -> RecipeListResponse:
    items = await run_in_threadpool(service.list_recipes, category)
    return RecipeListResponse(items=items, total=len(items))


@router.get("/recipes/{recipe_id}", response_model=Recipe)
async def get_recipe(
    recipe_id: str,
    service: RecipeService = Depends(get_recipe_service),
) -> Recipe:
    return await run_in_threadpool(service.get_recipe, recipe_id)


@router.post("/recipes/extract", response_model=Recipe, status_code=201)
async def extract_recipe(
    body: ExtractRequest,
    client: GeminiClient = Depends(get_gemini_client),
    repository: RecipeRepository = Depends(get_repository),
    settings: Settings = Depends(get_settings),
) -> Recipe:
    t0 = time.time()
    log.info("extract.start url=%s text_chars=%d", body.url, len(body.text or ""))
    recipe = await run_in_threadpool(
        lambda: run_ingest(
            url=body.url,
            text=body.text,
            client=client,
            repository=repository,
            languages=settings.CAPTION_LANGUAGES,
        )
    )
    log.info("extract.ok recipe=%s dt=%.2fs", recipe.id, time.time() - t0)
    return recipe


@router.patch("/recipes/{recipe_id}/steps/{index}", response_model=Recipe)
async def update_step(
    recipe_id: str,
    index: int,
    body: StepUpdateRequest,
    service: RecipeService = Depends(get_recipe_service),
) -> Recipe:
    return await run_in_threadpool(
        service.edit_step, recipe_id, index, body.description, body.tips
    )


@router.delete("/recipes/{recipe_id}", status_code=204)
async def delete_recipe(
    recipe_id: str,
    service: RecipeService = Depends(get_recipe_service),
) -> None:
    await run_in_threadpool(service.delete_by_id, recipe_id)
