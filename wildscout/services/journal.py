"""
Plant journal service.

A user's personal collection of identified plants (plant_journal table):
saving identifications, favourites, deletion, plus the search/filter and
summary counts shown on the journal page.
"""

from __future__ import annotations
from typing import Optional, Dict, Any, List, Tuple, Iterable
from datetime import datetime, timezone

from wildscout.constants import JOURNAL_FILTERS, PLANT_TYPES
from wildscout.services import supabase_client
from wildscout.utils.errors import InvalidArgument
from wildscout.utils.validation import soft_sanitize, sanitize_text, MAX_NAME_LEN, MAX_NOTES_LEN

_PLANT_TYPE_KEYS = {key for key, _ in PLANT_TYPES}

FAVORITE_TOGGLE_ATTEMPTS = 3


def filter_journal_entries(
    entries: Iterable[Dict[str, Any]],
    query: Optional[str] = None,
    filter_type: str = "all",
) -> List[Dict[str, Any]]:
    """
    Filter journal entries by search text and filter button.

    The search is a case-insensitive substring match on plant_name,
    common_name or scientific_name. filter_type is 'all', 'favorites' or a
    plant type.
    """
    filtered = list(entries)

    needle = (query or "").strip().lower()
    if needle:
        filtered = [
            entry for entry in filtered
            if any(
                needle in (entry.get(field) or "").lower()
                for field in ("plant_name", "common_name", "scientific_name")
            )
        ]

    if filter_type and filter_type != "all":
        if filter_type == "favorites":
            filtered = [entry for entry in filtered if entry.get("is_favorite")]
        else:
            filtered = [entry for entry in filtered if entry.get("plant_type") == filter_type]

    return filtered


def journal_stats(entries: Iterable[Dict[str, Any]]) -> Dict[str, int]:
    """Counts shown above the journal: total, favorites, edible, medicinal."""
    entries = list(entries)
    return {
        "total": len(entries),
        "favorites": sum(1 for e in entries if e.get("is_favorite")),
        "edible": sum(1 for e in entries if e.get("plant_type") == "edible"),
        "medicinal": sum(1 for e in entries if e.get("plant_type") == "medicinal"),
    }


def is_valid_filter(filter_type: str) -> bool:
    return filter_type in JOURNAL_FILTERS


def get_journal(user_id: str) -> Tuple[Optional[List[Dict[str, Any]]], Optional[str]]:
    return supabase_client.get_journal_entries(user_id)


def save_identification(
    user_id: str,
    result: Dict[str, Any],
    image_url: Optional[str] = None,
    notes: Optional[str] = None,
    location_name: Optional[str] = None,
) -> Tuple[Optional[Dict[str, Any]], Optional[str]]:
    """
    Save a classification result to the user's journal.

    Args:
        user_id: Owner UUID
        result: Classification dict (species, type, confidence)
        image_url: Optional storage path/URL of the photo
        notes: Optional free-text notes
        location_name: Optional place name

    Returns:
        (entry_dict, error_message)

    Raises:
        InvalidArgument: If the result has no species name or a field has the
            wrong type
    """
    species = soft_sanitize(result.get("species", ""), MAX_NAME_LEN)
    if not species:
        raise InvalidArgument("plant name is required")
    if image_url is not None and not isinstance(image_url, str):
        raise InvalidArgument("image path must be text")

    # "Purslane (Portulaca oleracea)" -> common + scientific parts
    common_name, scientific_name = species, None
    if species.endswith(")") and "(" in species:
        common_name, _, rest = species.partition("(")
        common_name = common_name.strip()
        scientific_name = rest.rstrip(")").strip() or None

    plant_type = result.get("type")
    if plant_type not in _PLANT_TYPE_KEYS:
        plant_type = None

    confidence = result.get("confidence")
    try:
        confidence = float(confidence) if confidence is not None else None
    except (TypeError, ValueError):
        confidence = None
    if confidence is not None and not 0 <= confidence <= 1:
        confidence = None

    data = {
        "user_id": user_id,
        "plant_name": species,
        "common_name": common_name,
        "scientific_name": scientific_name,
        "image_url": image_url,
        "notes": sanitize_text(notes, MAX_NOTES_LEN) or None,
        "location_name": soft_sanitize(location_name, MAX_NAME_LEN) or None,
        "identified_date": datetime.now(timezone.utc).isoformat(),
        "is_favorite": False,
        "confidence_score": confidence,
        "plant_type": plant_type,
    }
    return supabase_client.insert_journal_entry(data)


def toggle_favorite(entry_id: str, user_id: str) -> Tuple[Optional[Dict[str, Any]], Optional[str]]:
    """
    Flip the favourite flag on one of the user's entries.

    The write is conditional on the flag still holding the value just read;
    if another request flipped it in between, the row is read again and the
    flip retried.

    Returns:
        (updated_entry or None if not found, error_message)
    """
    for _ in range(FAVORITE_TOGGLE_ATTEMPTS):
        entry, error = supabase_client.get_journal_entry(entry_id, user_id)
        if error or entry is None:
            return None, error

        current = entry.get("is_favorite")
        expected = {"is_favorite": current} if current is not None else None
        updated, error = supabase_client.update_journal_entry(
            entry_id, user_id, {"is_favorite": not current}, expected=expected,
        )
        if error or updated is not None:
            return updated, error

    return supabase_client.get_journal_entry(entry_id, user_id)


def delete_entry(entry_id: str, user_id: str) -> Tuple[bool, Optional[str]]:
    return supabase_client.delete_journal_entry(entry_id, user_id)
