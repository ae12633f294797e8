"""
Seasonal plant matching.

Filters a catalog of seasonal plants (rows of the seasonal_plants table) by
calendar month or by one of the four fixed season buckets. Every function
here works on a snapshot the caller already fetched; nothing touches the
database and the catalog is never mutated.
"""

from __future__ import annotations
from datetime import date
from typing import Any, Dict, Iterable, List, Optional

from wildscout.constants import MONTH_NAMES, SEASONS
from wildscout.utils.errors import InvalidArgument

_MONTH_TO_SEASON = {month: season for season, months in SEASONS.items() for month in months}


def _validate_month(month: Any) -> int:
    # bool is an int subclass; True is not a month
    if isinstance(month, bool) or not isinstance(month, int) or not 1 <= month <= 12:
        raise InvalidArgument(f"month must be an integer between 1 and 12, got {month!r}")
    return month


def _season_months(season: Any) -> tuple:
    key = season.strip().lower() if isinstance(season, str) else season
    if key not in SEASONS:
        raise InvalidArgument(
            f"season must be one of {', '.join(SEASONS)}, got {season!r}"
        )
    return SEASONS[key]


def _active_months(plant: Dict[str, Any]) -> set:
    return set(plant.get("months_active") or ())


def plants_active_in_month(catalog: Iterable[Dict[str, Any]], month: int) -> List[Dict[str, Any]]:
    """
    Return the plants whose active months contain ``month``.

    Args:
        catalog: Seasonal plant records
        month: Month number (1-12)

    Returns:
        Matching plants in their original catalog order

    Raises:
        InvalidArgument: If month is outside 1-12
    """
    month = _validate_month(month)
    return [plant for plant in catalog if month in _active_months(plant)]


def plants_active_in_season(catalog: Iterable[Dict[str, Any]], season: str) -> List[Dict[str, Any]]:
    """
    Return the plants active in at least one month of ``season``.

    Args:
        catalog: Seasonal plant records
        season: 'spring', 'summer', 'fall' or 'winter'

    Returns:
        Matching plants in their original catalog order

    Raises:
        InvalidArgument: If season is not one of the four buckets
    """
    months = set(_season_months(season))
    return [plant for plant in catalog if _active_months(plant) & months]


def season_for_month(month: int) -> str:
    """Name of the season bucket that contains ``month``."""
    return _MONTH_TO_SEASON[_validate_month(month)]


def current_month(today: Optional[date] = None) -> int:
    """Month number for ``today`` (defaults to the current date)."""
    return (today or date.today()).month


def month_name(month: int) -> str:
    return MONTH_NAMES[_validate_month(month) - 1]


def active_month_names(plant: Dict[str, Any]) -> List[str]:
    """Sorted, de-duplicated month names for a plant's active months."""
    months = sorted(m for m in _active_months(plant) if isinstance(m, int) and 1 <= m <= 12)
    return [MONTH_NAMES[m - 1] for m in months]


def plants_by_season(catalog: Iterable[Dict[str, Any]]) -> Dict[str, List[Dict[str, Any]]]:
    """Bucket the catalog into all four seasons (a plant may appear in several)."""
    plants = list(catalog)
    return {season: plants_active_in_season(plants, season) for season in SEASONS}


def seasonal_overview(catalog: Iterable[Dict[str, Any]], month: int) -> Dict[str, Any]:
    """
    Build the "what's growing now" payload for a month.

    Returns:
        Dict with month number and name, its season, the matching plants
        (each with its sorted active month names) and their count
    """
    plants = plants_active_in_month(catalog, month)
    return {
        "month": month,
        "month_name": month_name(month),
        "season": season_for_month(month),
        "count": len(plants),
        "plants": [
            {**plant, "active_month_names": active_month_names(plant)}
            for plant in plants
        ],
    }
