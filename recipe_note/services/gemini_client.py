from __future__ import annotations

import logging
from typing import Any, Optional

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from recipe_note.services.errors import MissingApiKeyError, ModelApiError, RateLimitedError
from recipe_note.services.prompt import GENERATION_CONFIG
from recipe_note.services.recipe_parser import extract_reply_text

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-2.0-flash-001"


class GeminiClient:
    def __init__(
        self,
        api_key: str,
        model_name: str = DEFAULT_MODEL,
        client: Optional[Any] = None,
    ) -> None:
        self.api_key = api_key
        self.model_name = model_name or DEFAULT_MODEL
        self._client = self._configure_api(client)

    def _configure_api(self, client: Optional[Any]) -> Any:
        if not self.api_key:
            raise MissingApiKeyError()
        return client if client is not None else genai.Client(api_key=self.api_key)

    def _generation_config(self) -> types.GenerateContentConfig:
        return types.GenerateContentConfig(**GENERATION_CONFIG)

    def generate_content(self, prompt: str) -> Any:
        try:
            return self._client.models.generate_content(
                model=self.model_name,
                contents=prompt,
                config=self._generation_config(),
            )
        except genai_errors.APIError as err:
            raise _translate_api_error(err) from err
        except httpx.HTTPError as err:
            raise ModelApiError(f"Network error calling Gemini: {err}") from err

    def generate_json(self, prompt: str) -> str:
        logger.info("Calling %s (%d prompt chars)", self.model_name, len(prompt))
        response = self.generate_content(prompt)
        return extract_reply_text(response)


def _translate_api_error(err: genai_errors.APIError) -> ModelApiError:
    status_code = getattr(err, "code", None)
    message = getattr(err, "message", None) or f"API Error: {status_code}"
    status = str(getattr(err, "status", "") or "")

    if status_code == 429 or "RESOURCE_EXHAUSTED" in status or "RESOURCE_EXHAUSTED" in message:
        return RateLimitedError(message, status_code=status_code)
    return ModelApiError(message, status_code=status_code)
