"""
Recipe Note command line.

    recipe-note <youtube-url>          extract a recipe from a video's captions
    recipe-note --text notes.txt       extract a recipe from pasted text ("-" reads stdin)
    recipe-note --list [--category C]  list saved recipes
    recipe-note --show <n|id> [-i]     show a recipe step by step
    recipe-note --delete <n|id>        delete a recipe
    recipe-note --config               show settings
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Callable, Optional, Sequence

from recipe_note.app.config import (
    Settings,
    get_settings,
    load_extractor_config,
    resolve_extractor_config,
    save_extractor_config,
)
from recipe_note.app.deps import build_repository
from recipe_note.app.infra.db.base import RecipeRepository
from recipe_note.app.infra.db.json_file_repo import JsonFileRecipeRepository
from recipe_note.app.services import viewer
from recipe_note.app.services.recipe_service import RecipeService
from recipe_note.services.categories import CATEGORY_ORDER
from recipe_note.services.errors import InvalidInputError, MissingApiKeyError, ServiceError
from recipe_note.services.gemini_client import GeminiClient
from recipe_note.services.ingest import ingest

log = logging.getLogger("recipe_note.cli")

ClientFactory = Callable[[str, str], GeminiClient]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="recipe-note",
        description="Extract recipes from YouTube captions or text with Gemini.",
    )
    parser.add_argument("url", nargs="?", help="YouTube video URL")
    actions = parser.add_mutually_exclusive_group()
    actions.add_argument("--text", metavar="FILE", help="extract from a text file ('-' for stdin)")
    actions.add_argument("--list", action="store_true", help="list saved recipes")
    actions.add_argument("--show", metavar="N|ID", help="show a recipe step by step")
    actions.add_argument("--delete", metavar="N|ID", help="delete a recipe by list number or id")
    actions.add_argument("--config", action="store_true", help="show current settings")
    actions.add_argument("--set-api-key", metavar="KEY", help="save the Gemini API key")
    actions.add_argument("--set-model", metavar="MODEL", help="save the Gemini model name")
    parser.add_argument("--category", choices=CATEGORY_ORDER, help="filter --list by category")
    parser.add_argument("-i", "--interactive", action="store_true", help="walk steps with n/p/q")
    parser.add_argument("--recipes-file", type=Path, help="recipe collection file")
    parser.add_argument("-v", "--verbose", action="store_true", help="log pipeline progress")
    return parser


def _read_text(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    try:
        return Path(source).read_text(encoding="utf-8")
    except OSError as error:
        raise InvalidInputError(f"Cannot read {source}: {error}") from error


def _default_client_factory(api_key: str, model: str) -> GeminiClient:
    return GeminiClient(api_key=api_key, model_name=model)


def _cmd_list(service: RecipeService, category: Optional[str]) -> int:
    recipes = service.list_recipes(category)
    state = viewer.ViewerState(recipes=tuple(recipes))
    print(f"Saved recipes ({len(recipes)})")
    print(viewer.render_recipe_list(state))
    return 0


def _cmd_delete(service: RecipeService, target: str) -> int:
    deleted = service.delete(target)
    print(f"Deleted: {deleted.title} [{deleted.id}]")
    return 0


def _walk_steps(state: viewer.ViewerState, read: Callable[[str], str]) -> None:
    while True:
        print(viewer.render_step_card(state))
        command = read("[n]ext [p]rev [q]uit > ").strip().lower()
        if command in ("q", "quit"):
            return
        if command in ("p", "prev"):
            state = viewer.previous_step(state)
        elif command.isdigit():
            state = viewer.go_to_step(state, int(command) - 1)
        else:
            if state.step_index >= state.step_count - 1:
                return
            state = viewer.next_step(state)


def _cmd_show(
    service: RecipeService,
    target: str,
    interactive: bool,
    read: Callable[[str], str] = input,
) -> int:
    recipe = service.resolve(target)
    state = viewer.open_recipe(viewer.ViewerState(recipes=(recipe,)), recipe.id)

    print(viewer.render_ingredients(recipe))
    print()
    if interactive:
        try:
            _walk_steps(state, read)
        except EOFError:
            pass
        return 0

    for index in range(state.step_count):
        print(viewer.render_step_card(viewer.go_to_step(state, index)))
        print()
    return 0


def _cmd_config(settings: Settings) -> int:
    config = resolve_extractor_config(settings)
    print("Current settings:")
    print(f"  Model: {config.model}")
    print(f"  API key: {'set' if config.has_api_key else 'not set'}")
    print(f"  Recipes file: {settings.RECIPES_FILE}")
    print(f"  Config file: {settings.CONFIG_FILE}")
    return 0


def _cmd_save_config(settings: Settings, api_key: Optional[str], model: Optional[str]) -> int:
    config = load_extractor_config(settings.CONFIG_FILE)
    if api_key is not None:
        config.api_key = api_key.strip()
    if model is not None:
        config.model = model.strip()
    save_extractor_config(config, settings.CONFIG_FILE)
    print(f"Saved settings to {settings.CONFIG_FILE}")
    return 0


def _cmd_extract(
    settings: Settings,
    repository: RecipeRepository,
    client_factory: ClientFactory,
    url: Optional[str],
    text: Optional[str],
) -> int:
    if not url and not text:
        raise InvalidInputError("Provide a YouTube URL or --text FILE.")

    config = resolve_extractor_config(settings)
    if not config.has_api_key:
        raise MissingApiKeyError(
            f"API key not set. Run --set-api-key or add apiKey to {settings.CONFIG_FILE}"
        )

    client = client_factory(config.api_key, config.model)
    recipe = ingest(
        url=url,
        text=text,
        client=client,
        repository=repository,
        languages=settings.CAPTION_LANGUAGES,
    )

    print(f"Extracted: {recipe.title} [{recipe.id}]")
    print(viewer.render_ingredients(recipe))
    print(f"Steps ({len(recipe.steps)})")
    return 0


def run(
    args: argparse.Namespace,
    settings: Settings,
    client_factory: ClientFactory = _default_client_factory,
) -> int:
    if args.recipes_file:
        repository: RecipeRepository = JsonFileRecipeRepository(args.recipes_file)
    else:
        repository = build_repository(settings)
    service = RecipeService(repository)

    if args.list:
        return _cmd_list(service, args.category)
    if args.delete:
        return _cmd_delete(service, args.delete)
    if args.show:
        return _cmd_show(service, args.show, args.interactive)
    if args.config:
        return _cmd_config(settings)
    if args.set_api_key is not None or args.set_model is not None:
        return _cmd_save_config(settings, args.set_api_key, args.set_model)

    text = _read_text(args.text) if args.text else None
    return _cmd_extract(settings, repository, client_factory, args.url, text)


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )

    if not any((args.url, args.text, args.list, args.show, args.delete, args.config,
                args.set_api_key is not None, args.set_model is not None)):
        parser.print_help()
        return 0

    try:
        return run(args, get_settings())
    except ServiceError as error:
        print(f"Error: {error}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
