from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable, Optional, Sequence

from recipe_note.services.errors import InvalidInputError, NoCaptionsError
from recipe_note.services.fetcher import DEFAULT_LANGUAGES, fetch_caption_document
from recipe_note.services.gemini_client import GeminiClient
from recipe_note.services.ids import extract_video_id
from recipe_note.services.persist_models import Recipe
from recipe_note.services.prompt import build_extraction_prompt
from recipe_note.services.recipe_parser import parse_recipe_reply
from recipe_note.services.subtitles import normalize_subtitles

if TYPE_CHECKING:
    from recipe_note.app.infra.db.base import RecipeRepository

logger = logging.getLogger(__name__)

CaptionFetcher = Callable[[str, Sequence[str]], str]


def _require_video_id(url: str) -> str:
    video_id = extract_video_id(url)
    if not video_id:
        raise InvalidInputError(f"Not a YouTube video URL: {url}")
    return video_id


def extract_from_video(
    url: str,
    client: GeminiClient,
    *,
    languages: Sequence[str] = DEFAULT_LANGUAGES,
    fetch: CaptionFetcher = fetch_caption_document,
) -> Recipe:
    video_id = _require_video_id(url)
    logger.info("Fetching captions for video %s", video_id)

    document = fetch(video_id, languages)
    transcript = normalize_subtitles(document)
    if not transcript:
        raise NoCaptionsError(video_id)
    logger.info("Captions normalized: %d chars", len(transcript))

    prompt = build_extraction_prompt(transcript, with_timestamps=True)
    reply = client.generate_json(prompt)
    return parse_recipe_reply(reply, source_url=url)


def extract_from_text(text: str, client: GeminiClient) -> Recipe:
    prompt = build_extraction_prompt(text)
    reply = client.generate_json(prompt)
    return parse_recipe_reply(reply)


def ingest(
    *,
    url: Optional[str] = None,
    text: Optional[str] = None,
    client: GeminiClient,
    repository: "RecipeRepository",
    languages: Sequence[str] = DEFAULT_LANGUAGES,
    fetch: CaptionFetcher = fetch_caption_document,
) -> Recipe:
    """Extract a recipe from a video URL or pasted text and persist it.

    The URL wins when both are given. Nothing is stored unless every stage
    succeeds.
    """
    url = (url or "").strip()
    text = (text or "").strip()

    if url:
        recipe = extract_from_video(url, client, languages=languages, fetch=fetch)
    elif text:
        recipe = extract_from_text(text, client)
    else:
        raise InvalidInputError("Provide a video URL or recipe text.")

    saved = repository.put(recipe)
    logger.info("Saved recipe %s (%s)", saved.id, saved.title)
    return saved
