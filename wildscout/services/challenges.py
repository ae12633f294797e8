"""
Challenge progress and leaderboard aggregation.

Derives completion state, progress percentages, level progress and
leaderboard ranks from snapshots of the challenges, user_challenge_progress
and user_stats tables. Stored ``completed`` flags are never trusted; they are
recomputed from the count and the goal every time.
"""

from __future__ import annotations
import math
from typing import Any, Dict, Iterable, List, Optional

from wildscout.constants import POINTS_PER_LEVEL
from wildscout.utils.errors import InvalidArgument

# Challenge states
IN_PROGRESS = "IN_PROGRESS"
COMPLETED = "COMPLETED"

# challenge_type -> navigation key for the "Start Challenge" button
CHALLENGE_ACTIONS = {
    "identification": "identify",
    "reporting": "map-report",
    "recipe": "recipes",
}
DEFAULT_ACTION = "dashboard"

ACTION_PATHS = {
    "identify": "/identify",
    "map-report": "/map?report=true",
    "recipes": "/recipes",
    "dashboard": "/dashboard",
}

# Icon names the client knows how to render
CHALLENGE_ICONS = frozenset({
    "Trophy", "Target", "Shield", "Flame", "Award",
    "ChefHat", "TrendingUp", "Star", "Crown",
})
DEFAULT_ICON = "Trophy"

RANK_BADGES = {1: "crown", 2: "silver", 3: "bronze"}


def _percent(current: int, goal: int) -> int:
    # Round half up, then clamp to 0-100
    value = math.floor(current / goal * 100 + 0.5)
    return max(0, min(100, value))


def _count(value: Any, field: str):
    # Stored value as-is, never truncated
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        raise InvalidArgument(f"{field} must be a finite number, got {value!r}")
    return value


def compute_progress(
    progress_record: Optional[Dict[str, Any]],
    challenge: Dict[str, Any],
) -> Dict[str, Any]:
    """
    Compute progress for one challenge.

    A missing progress record means the user has not started the challenge
    (count 0). A goal of zero or less is trivially satisfied. Counts are
    used as stored, without rounding.

    Args:
        progress_record: Row from user_challenge_progress, or None
        challenge: Row from challenges

    Returns:
        Dict with current_count, goal_count, percent (0-100) and completed

    Raises:
        InvalidArgument: If a count is present but not a number

    Examples:
        >>> compute_progress({"current_count": 3}, {"goal_count": 5})
        {'current_count': 3, 'goal_count': 5, 'percent': 60, 'completed': False}
    """
    current = _count((progress_record or {}).get("current_count"), "current_count")
    goal = _count(challenge.get("goal_count"), "goal_count")

    if goal <= 0:
        return {"current_count": current, "goal_count": goal, "percent": 100, "completed": True}

    return {
        "current_count": current,
        "goal_count": goal,
        "percent": _percent(current, goal),
        "completed": current >= goal,
    }


def challenge_state(progress: Dict[str, Any]) -> str:
    """IN_PROGRESS or COMPLETED for a compute_progress() result."""
    return COMPLETED if progress.get("completed") else IN_PROGRESS


def rank_leaderboard(stats_list: Iterable[Dict[str, Any]], limit: int) -> List[Dict[str, Any]]:
    """
    Rank users by total points.

    Sorting is stable, so users with equal points keep their input order and
    still get consecutive ranks (position based, not dense).

    Args:
        stats_list: Rows from user_stats in arrival order
        limit: Maximum number of entries to return (positive integer)

    Returns:
        New list of entry dicts (copies of the stats plus ``rank``)

    Raises:
        InvalidArgument: If limit is not a positive integer
    """
    if isinstance(limit, bool) or not isinstance(limit, int) or limit <= 0:
        raise InvalidArgument(f"limit must be a positive integer, got {limit!r}")

    # sorted() with reverse=True keeps equal elements in their original order
    ordered = sorted(stats_list, key=lambda s: s.get("total_points") or 0, reverse=True)
    return [
        {**stats, "rank": position}
        for position, stats in enumerate(ordered[:limit], start=1)
    ]


def pick_challenge_action(challenge_type: Optional[str]) -> str:
    """Navigation key for a challenge category; unknown types go to the dashboard."""
    return CHALLENGE_ACTIONS.get(challenge_type, DEFAULT_ACTION)


def action_path(action: str) -> str:
    return ACTION_PATHS.get(action, ACTION_PATHS[DEFAULT_ACTION])


def challenge_icon(icon_name: Optional[str]) -> str:
    return icon_name if icon_name in CHALLENGE_ICONS else DEFAULT_ICON


def rank_badge(rank: int) -> str:
    return RANK_BADGES.get(rank, f"#{rank}")


def index_progress(progress_records: Iterable[Dict[str, Any]]) -> Dict[str, Dict[str, Any]]:
    """Map challenge_id -> progress record (later rows win)."""
    return {record["challenge_id"]: record for record in progress_records if record.get("challenge_id")}


def build_challenge_board(
    challenges: Iterable[Dict[str, Any]],
    progress_records: Iterable[Dict[str, Any]],
) -> List[Dict[str, Any]]:
    """
    Combine challenges with the user's progress into card payloads.

    Each card carries the challenge fields, its computed progress and state,
    a renderable icon name, and (while still in progress) the action that
    starts the challenge.
    """
    by_challenge = index_progress(progress_records)
    board = []
    for challenge in challenges:
        progress = compute_progress(by_challenge.get(challenge.get("id")), challenge)
        card = {
            "id": challenge.get("id"),
            "title": challenge.get("title"),
            "description": challenge.get("description"),
            "challenge_type": challenge.get("challenge_type"),
            "points_reward": challenge.get("points_reward") or 0,
            "icon": challenge_icon(challenge.get("icon")),
            "progress": progress,
            "state": challenge_state(progress),
            "action": None,
        }
        if not progress["completed"]:
            action = pick_challenge_action(challenge.get("challenge_type"))
            card["action"] = {"key": action, "path": action_path(action)}
        board.append(card)
    return board


def level_progress(stats: Optional[Dict[str, Any]]) -> Dict[str, int]:
    """
    Level progress for a user_stats row.

    progress is total_points mod 100; points_for_next_level is level * 100.
    """
    stats = stats or {}
    total_points = int(stats.get("total_points") or 0)
    level = int(stats.get("level") or 1)
    return {
        "level": level,
        "total_points": total_points,
        "progress": total_points % POINTS_PER_LEVEL,
        "points_for_next_level": level * POINTS_PER_LEVEL,
    }
