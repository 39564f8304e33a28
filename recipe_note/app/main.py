# recipe_note/app/main.py
from __future__ import annotations

import logging
import sys

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from recipe_note import __version__
from recipe_note.app.config import get_settings
from recipe_note.app.routers.recipes import router as recipes_router
from recipe_note.services.errors import (
    CaptionFetchFailedError,
    EmptyResponseError,
    InvalidInputError,
    MalformedJsonError,
    MissingApiKeyError,
    ModelApiError,
    NoCaptionsError,
    RateLimitedError,
    RecipeNotFoundError,
    ServiceError,
)

settings = get_settings()

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
log = logging.getLogger(__name__)

# Most specific first
ERROR_STATUS: list[tuple[type[ServiceError], int]] = [
    (RecipeNotFoundError, 404),
    (InvalidInputError, 400),
    (MissingApiKeyError, 400),
    (NoCaptionsError, 422),
    (RateLimitedError, 429),
    (MalformedJsonError, 502),
    (EmptyResponseError, 502),
    (CaptionFetchFailedError, 502),
    (ModelApiError, 502),
]


def status_for(error: ServiceError) -> int:
    for error_type, status_code in ERROR_STATUS:
        if isinstance(error, error_type):
            return status_code
    return 500


app = FastAPI(title="Recipe Note API", version=__version__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.FRONTEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(recipes_router)


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    status_code = status_for(exc)
    if status_code >= 500:
        log.warning("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status_code,
        content={"detail": str(exc), "error": type(exc).__name__},
    )


@app.get("/health")
def health():
    return {"ok": True}
