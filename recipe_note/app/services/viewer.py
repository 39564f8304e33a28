# recipe_note/app/services/viewer.py
"""
View model for the step-by-step recipe viewer.
Every transition returns a new ViewerState; nothing is mutated in place.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional

from recipe_note.services.categories import category_emoji, category_label
from recipe_note.services.persist_models import Recipe
from recipe_note.services.timestamps import parse_timestamp


@dataclass(frozen=True)
class ViewerState:
    """Snapshot of what the viewer shows."""
    recipes: tuple[Recipe, ...] = ()
    category: Optional[str] = None
    recipe_id: Optional[str] = None
    step_index: int = 0

    @property
    def visible_recipes(self) -> tuple[Recipe, ...]:
        if not self.category:
            return self.recipes
        return tuple(recipe for recipe in self.recipes if recipe.category == self.category)

    @property
    def current_recipe(self) -> Optional[Recipe]:
        for recipe in self.recipes:
            if recipe.id == self.recipe_id:
                return recipe
        return None

    @property
    def step_count(self) -> int:
        recipe = self.current_recipe
        return len(recipe.steps) if recipe else 0


def _clamp(index: int, count: int) -> int:
    if count <= 0:
        return 0
    return max(0, min(index, count - 1))


def with_recipes(state: ViewerState, recipes: list[Recipe]) -> ViewerState:
    updated = replace(state, recipes=tuple(recipes))
    if updated.recipe_id and updated.current_recipe is None:
        return replace(updated, recipe_id=None, step_index=0)
    return replace(updated, step_index=_clamp(updated.step_index, updated.step_count))


def with_filter(state: ViewerState, category: Optional[str]) -> ViewerState:
    return replace(state, category=category or None)


def open_recipe(state: ViewerState, recipe_id: str) -> ViewerState:
    if not any(recipe.id == recipe_id for recipe in state.recipes):
        return state
    return replace(state, recipe_id=recipe_id, step_index=0)


def close_recipe(state: ViewerState) -> ViewerState:
    return replace(state, recipe_id=None, step_index=0)


def go_to_step(state: ViewerState, index: int) -> ViewerState:
    return replace(state, step_index=_clamp(index, state.step_count))


def next_step(state: ViewerState) -> ViewerState:
    return go_to_step(state, state.step_index + 1)


def previous_step(state: ViewerState) -> ViewerState:
    return go_to_step(state, state.step_index - 1)


def seek_seconds(state: ViewerState) -> int:
    """Video offset of the current step, 0 when it has no timestamp."""
    recipe = state.current_recipe
    if not recipe or not recipe.steps:
        return 0
    return parse_timestamp(recipe.steps[state.step_index].timestamp)


def render_recipe_list(state: ViewerState) -> str:
    recipes = state.visible_recipes
    if not recipes:
        return "No recipes yet."
    lines = [
        f"{position}. {category_emoji(recipe.category)} [{recipe.id}] {recipe.title}"
        for position, recipe in enumerate(recipes, start=1)
    ]
    return "\n".join(lines)


def render_step_card(state: ViewerState) -> str:
    recipe = state.current_recipe
    if recipe is None:
        return "No recipe selected."

    header = f"{recipe.title} ({category_label(recipe.category)})"
    if not recipe.steps:
        return f"{header}\nThis recipe has no steps."

    step = recipe.steps[state.step_index]
    lines = [header, f"Step {state.step_index + 1}/{len(recipe.steps)}"]
    if step.timestamp:
        lines[-1] += f"  ▶ {step.timestamp}"
    lines.append(step.description)
    if step.tips:
        lines.append(f"Tip: {step.tips}")
    return "\n".join(lines)


def render_ingredients(recipe: Recipe) -> str:
    lines = [f"Ingredients ({len(recipe.ingredients)})"]
    for ingredient in recipe.ingredients:
        lines.append(f"  - {ingredient.name} {ingredient.amount}{ingredient.unit}".rstrip())
    return "\n".join(lines)
