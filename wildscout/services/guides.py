"""
Plant care guides and foraging recipes.

Guides come from plant_care_guides (ordered by plant name); recipes from the
recipes table joined with species. Helpers here search/select guides and
prepare recipes for display.
"""

from __future__ import annotations
from typing import Any, Dict, Iterable, List, Optional

# Signature recipes with a dedicated photo
RECIPE_IMAGES = {
    "Wild Purslane Salad": "recipe-purslane-salad.jpg",
    "Garlic Mustard Pesto": "recipe-pesto.jpg",
    "Dandelion Green Sauté": "recipe-dandelion.jpg",
}

# Everything else cycles through these by position
FALLBACK_RECIPE_IMAGES = [
    "recipe-soup.jpg",
    "recipe-salad-bowl.jpg",
    "recipe-healthy-plate.jpg",
    "recipe-purslane-salad.jpg",
    "recipe-pesto.jpg",
    "recipe-dandelion.jpg",
]


def search_guides(guides: Iterable[Dict[str, Any]], query: Optional[str]) -> List[Dict[str, Any]]:
    """Guides whose plant name contains ``query`` (case-insensitive); all if empty."""
    needle = (query or "").strip().lower()
    if not needle:
        return list(guides)
    return [g for g in guides if needle in (g.get("plant_name") or "").lower()]


def find_guide(guides: Iterable[Dict[str, Any]], plant_name: Optional[str]) -> Optional[Dict[str, Any]]:
    """Exact, case-insensitive lookup by plant name."""
    if not plant_name:
        return None
    wanted = plant_name.strip().lower()
    return next((g for g in guides if (g.get("plant_name") or "").lower() == wanted), None)


def select_guide(guides: List[Dict[str, Any]], plant_name: Optional[str] = None) -> Optional[Dict[str, Any]]:
    """The guide asked for by name, otherwise the first one."""
    return find_guide(guides, plant_name) or (guides[0] if guides else None)


def recipe_image(recipe: Dict[str, Any], index: int) -> str:
    return RECIPE_IMAGES.get(
        recipe.get("title"),
        FALLBACK_RECIPE_IMAGES[index % len(FALLBACK_RECIPE_IMAGES)],
    )


def prepare_recipes(recipes: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Flatten species name and attach an image key to each recipe."""
    prepared = []
    for index, recipe in enumerate(recipes):
        species = recipe.get("species") or {}
        item = {k: v for k, v in recipe.items() if k != "species"}
        item["species_name"] = species.get("name")
        item["ingredients"] = recipe.get("ingredients") or []
        item["steps"] = recipe.get("steps") or []
        item["image"] = recipe_image(recipe, index)
        prepared.append(item)
    return prepared
