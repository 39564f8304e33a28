from __future__ import annotations

import json
from datetime import datetime, timezone
from types import SimpleNamespace

import pytest

from recipe_note.services.errors import EmptyResponseError, MalformedJsonError
from recipe_note.services.ids import RECIPE_ID_PATTERN
from recipe_note.services.recipe_parser import (
    extract_reply_text,
    load_reply_json,
    normalize_stored_record,
    parse_recipe_reply,
)

NOW = datetime(2026, 2, 1, 12, 0, 0, tzinfo=timezone.utc)

REPLY = {
    "title": "Carbonara",
    "category": "daily",
    "tags": ["pasta", "quick"],
    "servings": "2 servings",
    "prepTime": "5 min",
    "cookTime": "15 min",
    "ingredients": [{"name": "spaghetti", "amount": "200", "unit": "g"}],
    "steps": [
        {"order": 1, "description": "Boil pasta", "timestamp": "0:12", "tips": "Salt the water"},
        {"order": 2, "description": "Mix eggs and cheese", "timestamp": "1:05", "tips": ""},
    ],
    "notes": "Work off the heat",
}


def _response(text: str | None) -> SimpleNamespace:
    part = SimpleNamespace(text=text)
    content = SimpleNamespace(parts=[part])
    return SimpleNamespace(candidates=[SimpleNamespace(content=content)])


class TestExtractReplyText:
    def test_first_candidate_first_part(self) -> None:
        assert extract_reply_text(_response('{"title": "T"}')) == '{"title": "T"}'

    def test_rest_shaped_dict(self) -> None:
        payload = {"candidates": [{"content": {"parts": [{"text": "{}"}]}}]}
        assert extract_reply_text(payload) == "{}"

    @pytest.mark.parametrize(
        "response",
        [
            SimpleNamespace(candidates=[]),
            SimpleNamespace(candidates=None),
            SimpleNamespace(candidates=[SimpleNamespace(content=None)]),
            SimpleNamespace(candidates=[SimpleNamespace(content=SimpleNamespace(parts=[]))]),
            _response(None),
            _response("   "),
            {},
        ],
    )
    def test_empty_candidate_content(self, response: object) -> None:
        with pytest.raises(EmptyResponseError):
            extract_reply_text(response)


class TestLoadReplyJson:
    def test_not_json(self) -> None:
        with pytest.raises(MalformedJsonError) as exc_info:
            load_reply_json("{not json")
        assert exc_info.value.reply_text == "{not json"

    @pytest.mark.parametrize("text", ["[1, 2]", '"title"', "null", "42"])
    def test_json_but_not_object(self, text: str) -> None:
        with pytest.raises(MalformedJsonError):
            load_reply_json(text)

    def test_empty(self) -> None:
        with pytest.raises(EmptyResponseError):
            load_reply_json("")


class TestParseRecipeReply:
    def test_video_reply(self) -> None:
        url = "https://www.youtube.com/watch?v=QMjRLpdON4E"
        recipe = parse_recipe_reply(json.dumps(REPLY), source_url=url, now=NOW)

        assert RECIPE_ID_PATTERN.match(recipe.id)
        assert recipe.id == f"recipe_{int(NOW.timestamp() * 1000)}"
        assert recipe.sourceType == "youtube"
        assert recipe.sourceUrl == url
        assert recipe.thumbnailUrl == "https://img.youtube.com/vi/QMjRLpdON4E/maxresdefault.jpg"
        assert recipe.createdAt == recipe.updatedAt == "2026-02-01T12:00:00.000Z"
        assert recipe.title == "Carbonara"
        assert recipe.ingredients[0].unit == "g"
        assert [step.timestamp for step in recipe.steps] == ["0:12", "1:05"]

    def test_text_reply(self) -> None:
        recipe = parse_recipe_reply(json.dumps(REPLY), now=NOW)

        assert recipe.sourceType == "text"
        assert recipe.sourceUrl == ""
        assert recipe.thumbnailUrl == ""
        assert recipe.id.startswith("recipe_20260201_")

    def test_url_without_video_id_has_no_thumbnail(self) -> None:
        recipe = parse_recipe_reply(json.dumps(REPLY), source_url="https://example.com/r", now=NOW)

        assert recipe.sourceType == "youtube"
        assert recipe.thumbnailUrl == ""

    def test_missing_fields_become_empty(self) -> None:
        recipe = parse_recipe_reply('{"title": null}', now=NOW)

        assert recipe.title == ""
        assert recipe.notes == ""
        assert recipe.servings == ""
        assert recipe.tags == []
        assert recipe.ingredients == []
        assert recipe.steps == []
        assert recipe.category == "other"

    def test_permissive_shapes(self) -> None:
        reply = {
            "servings": 4,
            "tags": ["ok", 3, None, ""],
            "category": "Sweets",
            "ingredients": ["flour", {"name": "sugar"}],
            "steps": [{"description": "Mix"}, "stray", {"order": "7", "description": "Bake", "tips": None}],
        }
        recipe = parse_recipe_reply(json.dumps(reply), now=NOW)

        assert recipe.servings == "4"
        assert recipe.tags == ["ok", "3"]
        assert recipe.category == "sweets"
        assert [(i.name, i.amount, i.unit) for i in recipe.ingredients] == [("sugar", "", "")]
        assert [(s.order, s.description, s.tips) for s in recipe.steps] == [(1, "Mix", ""), (7, "Bake", "")]

    def test_out_of_range_order_falls_back_to_position(self) -> None:
        recipe = parse_recipe_reply('{"steps": [{"order": 1e400, "description": "x"}, {"order": -1e400}]}', now=NOW)

        assert [step.order for step in recipe.steps] == [1, 2]

    def test_unknown_category_normalized(self) -> None:
        recipe = parse_recipe_reply('{"category": "japanese"}', now=NOW)
        assert recipe.category == "other"

    def test_model_supplied_metadata_is_overwritten(self) -> None:
        reply = {"id": "recipe_evil", "sourceType": "youtube", "createdAt": "1999-01-01"}
        recipe = parse_recipe_reply(json.dumps(reply), now=NOW)

        assert recipe.id != "recipe_evil"
        assert recipe.sourceType == "text"
        assert recipe.createdAt == "2026-02-01T12:00:00.000Z"

    def test_malformed(self) -> None:
        with pytest.raises(MalformedJsonError):
            parse_recipe_reply("{not json")

    def test_empty(self) -> None:
        with pytest.raises(EmptyResponseError):
            parse_recipe_reply("  ")


class TestNormalizeStoredRecord:
    def test_loose_record_is_cleaned_and_keeps_identity(self) -> None:
        entry = {
            "id": "recipe_20250101_ab12",
            "title": "Pudding",
            "servings": 2,
            "category": "dessert",
            "steps": [{"description": "Mix", "tips": None}, {"order": 5, "description": "Chill"}],
            "createdAt": "2025-01-01T00:00:00.000Z",
        }

        payload = normalize_stored_record(entry)

        assert payload is not None
        assert payload["id"] == "recipe_20250101_ab12"
        assert payload["servings"] == "2"
        assert payload["category"] == "other"
        assert payload["steps"][0] == {"order": 1, "description": "Mix", "timestamp": "", "tips": ""}
        assert payload["steps"][1]["order"] == 5
        assert payload["createdAt"] == payload["updatedAt"] == "2025-01-01T00:00:00.000Z"
        assert payload["sourceType"] == "text"

    def test_source_type_derived_from_url(self) -> None:
        payload = normalize_stored_record({"id": "recipe_1", "sourceUrl": "https://youtu.be/abc"})
        assert payload["sourceType"] == "youtube"

    @pytest.mark.parametrize("entry", [{"title": "no id"}, {"id": "  "}, "recipe_1", None])
    def test_unusable_entries(self, entry: object) -> None:
        assert normalize_stored_record(entry) is None
