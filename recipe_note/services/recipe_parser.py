"""
Turns the extraction model's reply into a Recipe.

The model output is best-effort: odd shapes inside ``ingredients`` and
``steps`` are tolerated, missing text becomes "" and missing lists become [].
Only an empty reply or a reply that is not a JSON object is rejected.
"""
from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from recipe_note.services.categories import normalize_category
from recipe_note.services.errors import EmptyResponseError, MalformedJsonError
from recipe_note.services.ids import generate_recipe_id, thumbnail_url
from recipe_note.services.persist_models import Recipe, utc_now_iso

logger = logging.getLogger(__name__)

_TEXT_FIELDS = ("title", "servings", "prepTime", "cookTime", "notes")


def _get(obj: Any, key: str) -> Any:
    if isinstance(obj, dict):
        return obj.get(key)
    return getattr(obj, key, None)


def _first(items: Any) -> Any:
    if isinstance(items, (list, tuple)) and items:
        return items[0]
    return None


def extract_reply_text(response: Any) -> str:
    """Text of the first part of the first candidate."""
    candidate = _first(_get(response, "candidates"))
    part = _first(_get(_get(candidate, "content"), "parts"))
    text = _get(part, "text")

    if not isinstance(text, str) or not text.strip():
        raise EmptyResponseError()
    return text


def _clean_str(value: Any) -> str:
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, bool):
        return ""
    if isinstance(value, (int, float)):
        return str(value)
    return ""


def _to_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return None


def _sanitize_tags(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [tag for tag in (_clean_str(item) for item in value) if tag]


def _sanitize_ingredients(value: Any) -> List[Dict[str, str]]:
    if not isinstance(value, list):
        return []
    items: List[Dict[str, str]] = []
    for entry in value:
        if not isinstance(entry, dict):
            continue
        items.append(
            {
                "name": _clean_str(entry.get("name")),
                "amount": _clean_str(entry.get("amount")),
                "unit": _clean_str(entry.get("unit")),
            }
        )
    return items


def _sanitize_steps(value: Any) -> List[Dict[str, Any]]:
    if not isinstance(value, list):
        return []
    steps: List[Dict[str, Any]] = []
    for entry in value:
        if not isinstance(entry, dict):
            continue
        order = _to_int(entry.get("order"))
        steps.append(
            {
                "order": order if order is not None else len(steps) + 1,
                "description": _clean_str(entry.get("description")),
                "timestamp": _clean_str(entry.get("timestamp")),
                "tips": _clean_str(entry.get("tips")),
            }
        )
    return steps


def load_reply_json(text: str) -> Dict[str, Any]:
    if not text or not text.strip():
        raise EmptyResponseError()

    try:
        data = json.loads(text)
    except json.JSONDecodeError as error:
        raise MalformedJsonError(error.msg, reply_text=text) from error

    if not isinstance(data, dict):
        raise MalformedJsonError(f"expected an object, got {type(data).__name__}", reply_text=text)
    return data


def normalize_stored_record(entry: Any) -> Optional[Dict[str, Any]]:
    """
    Clean up a previously stored recipe the same way a fresh reply is cleaned.

    Stored ids, timestamps and source fields are kept. Returns None when the
    entry has no usable id.
    """
    if not isinstance(entry, dict):
        return None
    record_id = _clean_str(entry.get("id"))
    if not record_id:
        return None

    source_url = _clean_str(entry.get("sourceUrl"))
    source_type = entry.get("sourceType")
    if source_type not in ("youtube", "text"):
        source_type = "youtube" if source_url else "text"
    created_at = _clean_str(entry.get("createdAt"))

    payload: Dict[str, Any] = {field: _clean_str(entry.get(field)) for field in _TEXT_FIELDS}
    payload.update(
        {
            "id": record_id,
            "category": normalize_category(entry.get("category")),
            "tags": _sanitize_tags(entry.get("tags")),
            "ingredients": _sanitize_ingredients(entry.get("ingredients")),
            "steps": _sanitize_steps(entry.get("steps")),
            "sourceUrl": source_url,
            "sourceType": source_type,
            "thumbnailUrl": _clean_str(entry.get("thumbnailUrl")),
            "createdAt": created_at,
            "updatedAt": _clean_str(entry.get("updatedAt")) or created_at,
        }
    )
    return payload


def parse_recipe_reply(
    text: str,
    *,
    source_url: str = "",
    now: Optional[datetime] = None,
) -> Recipe:
    data = load_reply_json(text)
    now = now or datetime.now(timezone.utc)
    stamp = utc_now_iso(now)
    source_url = source_url.strip()
    source_type = "youtube" if source_url else "text"

    payload: Dict[str, Any] = {field: _clean_str(data.get(field)) for field in _TEXT_FIELDS}
    payload.update(
        {
            "id": generate_recipe_id(source_type, now),
            "category": normalize_category(data.get("category")),
            "tags": _sanitize_tags(data.get("tags")),
            "ingredients": _sanitize_ingredients(data.get("ingredients")),
            "steps": _sanitize_steps(data.get("steps")),
            "sourceUrl": source_url,
            "sourceType": source_type,
            "thumbnailUrl": thumbnail_url(source_url) if source_url else "",
            "createdAt": stamp,
            "updatedAt": stamp,
        }
    )

    recipe = Recipe.model_validate(payload)
    logger.info(
        "Parsed recipe id=%s steps=%d ingredients=%d",
        recipe.id,
        len(recipe.steps),
        len(recipe.ingredients),
    )
    return recipe
