from __future__ import annotations

import re
from typing import Any, Dict

from recipe_note.services.categories import CATEGORY_ORDER
from recipe_note.services.errors import InvalidInputError

INLINE_TIMESTAMP_PATTERN = re.compile(r"\[\d{1,3}:\d{2}(?::\d{2})?\]")

GENERATION_CONFIG: Dict[str, Any] = {
    "temperature": 0.2,
    "top_p": 0.8,
    "max_output_tokens": 4096,
    "response_mime_type": "application/json",
}

_INTRO = (
    "You are an expert at structuring recipes. Extract the recipe from the {source} "
    "below and output it as a single JSON object."
)

_TIMESTAMP_RULES = """
## Timestamps
- The input text carries timestamps in [M:SS] form at the start of each line
- Set each step's "timestamp" field to the timestamp where that step starts
- Write timestamps as "M:SS" or "MM:SS"
"""

_EXTRACTION_RULES = """
## Extraction rules
1. Split every ingredient into name, amount and unit
2. Split every step into order, description, timestamp and tips
3. Use an empty string "" for anything unknown
4. Pick the category from: {categories}
5. Rewrite spoken language into clear, readable sentences
6. Write the recipe in the language of the input text
"""

_OUTPUT_SCHEMA = """
## Output format (JSON only, no explanations)
{
  "title": "Recipe title",
  "category": "sweets",
  "tags": ["tag1", "tag2"],
  "servings": "2 servings",
  "prepTime": "10 min",
  "cookTime": "30 min",
  "ingredients": [
    { "name": "ingredient", "amount": "100", "unit": "g" }
  ],
  "steps": [
    {
      "order": 1,
      "description": "What to do",
      "timestamp": "1:23",
      "tips": "Tip"
    }
  ],
  "notes": "General tips and notes"
}
"""


def has_inline_timestamps(text: str) -> bool:
    return bool(INLINE_TIMESTAMP_PATTERN.search(text))


def build_extraction_prompt(text: str, *, with_timestamps: bool | None = None) -> str:
    """
    Compose the instruction text for the extraction model.

    ``with_timestamps`` selects the video variant; when left as None it is
    inferred from ``[M:SS]`` markers in the input.
    """
    if not text or not text.strip():
        raise InvalidInputError("No text to extract a recipe from.")

    if with_timestamps is None:
        with_timestamps = has_inline_timestamps(text)

    source = "YouTube video subtitles" if with_timestamps else "text"
    sections = [_INTRO.format(source=source)]
    if with_timestamps:
        sections.append(_TIMESTAMP_RULES)
    sections.append(_EXTRACTION_RULES.format(categories=", ".join(CATEGORY_ORDER)))
    sections.append(_OUTPUT_SCHEMA)

    header = "## Input text (YouTube subtitles with timestamps):" if with_timestamps else "## Input text:"
    sections.append(f"{header}\n{text.strip()}\n")

    return "\n".join(sections)
