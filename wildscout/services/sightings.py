"""
Invasive species sighting reports.

Reports are rows of the reports table joined with species (name, plant_type).
This module flattens the join for the map page and creates new reports from
a user's location.
"""

from __future__ import annotations
from typing import Any, Dict, Iterable, List, Optional, Tuple

from wildscout.services import supabase_client
from wildscout.utils.validation import parse_coordinates, sanitize_text, MAX_NOTES_LEN

RECENT_REPORTS_LIMIT = 5


def serialize_report(report: Dict[str, Any]) -> Dict[str, Any]:
    """Flatten the joined species into species_name / species_type."""
    species = report.get("species") or {}
    return {
        "id": report.get("id"),
        "latitude": report.get("latitude"),
        "longitude": report.get("longitude"),
        "notes": report.get("notes"),
        "created_at": report.get("created_at"),
        "species_name": species.get("name"),
        "species_type": species.get("plant_type"),
    }


def recent_reports(reports: Iterable[Dict[str, Any]], limit: int = RECENT_REPORTS_LIMIT) -> List[Dict[str, Any]]:
    """First ``limit`` reports of a newest-first list."""
    return list(reports)[:max(limit, 0)]


def list_reports() -> Tuple[Optional[List[Dict[str, Any]]], Optional[str]]:
    rows, error = supabase_client.get_reports()
    if error:
        return None, error
    return [serialize_report(row) for row in rows], None


def submit_report(
    user_id: str,
    latitude: Any,
    longitude: Any,
    notes: Optional[str] = None,
    species_id: Optional[str] = None,
) -> Tuple[Optional[Dict[str, Any]], Optional[str]]:
    """
    Record a sighting at the user's location.

    Without an explicit species the first invasive species in the catalog is
    used.

    Raises:
        InvalidArgument: If the coordinates are missing or out of range, or notes
            is not text

    Returns:
        (report_dict, error_message)
    """
    lat, lng = parse_coordinates(latitude, longitude)
    notes = sanitize_text(notes, MAX_NOTES_LEN)

    if not species_id:
        species_id, error = supabase_client.get_first_species_id("invasive")
        if error:
            return None, error
        if not species_id:
            return None, "No invasive species found"

    return supabase_client.insert_report({
        "user_id": user_id,
        "species_id": species_id,
        "latitude": lat,
        "longitude": lng,
        "notes": notes,
    })
