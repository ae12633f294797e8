"""
Plant photo classification.

Stand-in for a real species model: returns one of a fixed set of canned
results for an uploaded image path. The result shape is what a real model
integration is expected to return, so callers do not change when one is
plugged in.
"""

from __future__ import annotations
import logging
import random
from typing import Any, Dict, List, Optional

from flask import current_app, has_app_context

from wildscout.utils.errors import InvalidArgument

logger = logging.getLogger(__name__)


def _log_info(message: str) -> None:
    if has_app_context():
        current_app.logger.info(message)
    else:
        logger.info(message)


MOCK_CLASSIFICATIONS: List[Dict[str, Any]] = [
    {
        "species": "Garlic Mustard (Alliaria petiolata)",
        "type": "invasive",
        "confidence": 0.92,
        "description": "An invasive biennial herb that threatens native plants by forming dense stands. It releases chemicals that inhibit other plant growth and disrupts native ecosystems.",
        "safety_notes": "Edible but highly invasive - report all sightings. All parts are edible with a mild garlic flavor.",
    },
    {
        "species": "Purslane (Portulaca oleracea)",
        "type": "edible",
        "confidence": 0.88,
        "description": "A nutritious succulent herb exceptionally rich in omega-3 fatty acids, vitamins A, C, and E. Contains more omega-3s than many fish oils.",
        "safety_notes": "Safe to eat when properly identified. Avoid areas treated with pesticides. Best eaten fresh in salads.",
    },
    {
        "species": "Japanese Knotweed (Fallopia japonica)",
        "type": "invasive",
        "confidence": 0.95,
        "description": "Fast-growing invasive perennial that can grow through concrete and damage buildings. Spreads rapidly through underground rhizomes.",
        "safety_notes": "Extremely invasive - do not plant. Young shoots are edible (taste like rhubarb) but harvesting doesn't control spread.",
    },
    {
        "species": "Dandelion (Taraxacum officinale)",
        "type": "edible",
        "confidence": 0.91,
        "description": "Highly nutritious perennial where every part is edible and medicinal. Leaves are rich in vitamins A, C, K, calcium, and iron. Roots can be roasted as coffee substitute.",
        "safety_notes": "Safe when properly identified. Young spring leaves are less bitter. Excellent for liver health and digestion.",
    },
    {
        "species": "Wild Violet (Viola sororia)",
        "type": "edible",
        "confidence": 0.85,
        "description": "Native North American wildflower with heart-shaped leaves. Both flowers and leaves are edible, high in vitamins A and C.",
        "safety_notes": "Completely safe to eat. Flowers make beautiful salad garnishes. Leaves can be cooked like spinach.",
    },
    {
        "species": "Chickweed (Stellaria media)",
        "type": "edible",
        "confidence": 0.87,
        "description": "Delicate annual herb with tender leaves and small white flowers. Rich in vitamins and minerals, traditionally used for skin conditions.",
        "safety_notes": "Safe to eat raw or cooked. Best harvested young. Excellent in salads or as a spinach substitute.",
    },
    {
        "species": "Lamb's Quarters (Chenopodium album)",
        "type": "edible",
        "confidence": 0.89,
        "description": "Highly nutritious annual plant related to quinoa. More nutritious than spinach with higher protein content, vitamins, and minerals.",
        "safety_notes": "Safe when properly identified. Contains some oxalic acid - cook to reduce. Avoid if prone to kidney stones.",
    },
    {
        "species": "Stinging Nettle (Urtica dioica)",
        "type": "edible",
        "confidence": 0.93,
        "description": "Perennial herb with stinging hairs containing formic acid. Extremely nutritious when cooked, rich in iron, calcium, and vitamins.",
        "safety_notes": "Must be cooked or dried to remove sting. Wear gloves when harvesting. Excellent for anemia and joint health.",
    },
    {
        "species": "Wood Sorrel (Oxalis stricta)",
        "type": "edible",
        "confidence": 0.84,
        "description": "Small plant with clover-like leaves that have a pleasant lemony taste due to oxalic acid. High in vitamin C.",
        "safety_notes": "Safe in moderation. High oxalic acid content - don't eat in large quantities. Avoid if prone to kidney stones.",
    },
    {
        "species": "Wild Garlic (Allium vineale)",
        "type": "edible",
        "confidence": 0.90,
        "description": "Perennial bulb plant with strong garlic odor. All parts edible - bulbs, leaves, and flowers can be used as garlic substitute.",
        "safety_notes": "Safe when properly identified. Ensure it smells like garlic. Similar-looking plants can be toxic.",
    },
    {
        "species": "English Ivy (Hedera helix)",
        "type": "invasive",
        "confidence": 0.94,
        "description": "Aggressive climbing vine that smothers trees and structures. Forms dense ground cover preventing native plant growth.",
        "safety_notes": "NOT EDIBLE - berries and leaves are toxic. Remove carefully as it can damage building exteriors.",
    },
    {
        "species": "Common Plantain (Plantago major)",
        "type": "edible",
        "confidence": 0.86,
        "description": "Perennial herb with medicinal properties. Leaves are edible when young, traditionally used for wound healing.",
        "safety_notes": "Safe to eat young leaves. Older leaves are tough and fibrous. Excellent poultice for insect bites.",
    },
]

# Follow-up actions offered next to a result, by plant type
FOLLOW_UP_ACTIONS = {
    "invasive": [{"key": "map-report", "label": "Report This Sighting", "path": "/map?report=true"}],
    "edible": [{"key": "recipes", "label": "View Recipes", "path": "/recipes"}],
}


def classify_image(image_path: str, rng: Optional[random.Random] = None) -> Dict[str, Any]:
    """
    Classify an uploaded plant image.

    Args:
        image_path: Storage path of the uploaded image ("<user_id>/<file>")
        rng: Optional random generator (tests pass a seeded one)

    Returns:
        Dict with species, type, confidence, description and safety_notes

    Raises:
        InvalidArgument: If image_path is empty
    """
    if not image_path or not str(image_path).strip():
        raise InvalidArgument("image_path is required")

    _log_info(f"Processing classification for image: {image_path}")

    api_key = current_app.config.get("CLASSIFIER_API_KEY") if has_app_context() else None
    if api_key:
        _log_info("Classifier API key configured for production use")
    else:
        _log_info("Using mock classification (no API key configured)")

    result = dict((rng or random).choice(MOCK_CLASSIFICATIONS))
    _log_info(f"Classified plant: {result['species']} ({result['type']})")
    return result


def follow_up_actions(plant_type: Optional[str]) -> List[Dict[str, str]]:
    """Actions to suggest for a classified plant type (empty list if none)."""
    return [dict(action) for action in FOLLOW_UP_ACTIONS.get(plant_type, [])]
