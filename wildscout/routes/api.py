"""
Defines JSON endpoints used by the front end.

Endpoints:
- /seasonal: What's growing this month, by season, or for one season
- /challenges, /leaderboard: Challenge progress, level progress and rankings
- /identify: Upload a photo and classify it
- /journal: Personal plant journal (list, save, favourite, delete)
- /reports: Invasive species sightings
- /guides, /recipes: Care guides and foraging recipes
- /dashboard: Conservation overview counts
"""

from __future__ import annotations
from flask import Blueprint, request, jsonify, current_app
from werkzeug.utils import secure_filename
from ..utils.auth import require_auth, get_current_user_id
from ..utils.errors import (
    InvalidArgument, GENERIC_MESSAGES, error_response, service_error_response,
    sanitize_error, log_info, log_warning,
)
from ..utils.file_upload import validate_plant_photo
from ..utils.validation import is_valid_uuid, parse_int, soft_sanitize, MAX_QUERY_LEN
from ..services import supabase_client, seasonal, challenges, classifier, journal, sightings, guides
from ..extensions import limiter


api_bp = Blueprint("api", __name__)


@api_bp.before_request
def _enforce_ajax_for_mutations():
    """Enforce X-Requested-With header on all state-changing API requests.

    Custom headers cannot be set by cross-origin requests without CORS, and
    HTML forms cannot set them at all, so this protects every POST/PUT/DELETE
    endpoint against CSRF.
    """
    if request.method in ("POST", "PUT", "DELETE", "PATCH"):
        if request.headers.get("X-Requested-With") != "XMLHttpRequest":
            return error_response("Invalid request. Please refresh the page and try again.", 403)


@api_bp.errorhandler(InvalidArgument)
def _invalid_argument(e: InvalidArgument):
    current_app.logger.info(f"Rejected request to {request.path}: {e}")
    return error_response(str(e), 400)


# ============================================================================
# Seasonal finder
# ============================================================================

@api_bp.route("/seasonal")
@require_auth
def seasonal_now():
    """
    Plants in season for a month.

    Query params:
        month: 1-12 (defaults to the current month)
    """
    raw_month = request.args.get("month")
    month = parse_int(raw_month, "month") if raw_month else seasonal.current_month()

    plants, error = supabase_client.get_seasonal_plants()
    if error:
        return service_error_response(error, "Failed to load seasonal plants")

    return jsonify({"success": True, **seasonal.seasonal_overview(plants, month)})


@api_bp.route("/seasonal/seasons")
@require_auth
def seasonal_all_seasons():
    plants, error = supabase_client.get_seasonal_plants()
    if error:
        return service_error_response(error, "Failed to load seasonal plants")

    buckets = seasonal.plants_by_season(plants)
    return jsonify({
        "success": True,
        "seasons": {
            season: {"count": len(items), "plants": items}
            for season, items in buckets.items()
        },
    })


@api_bp.route("/seasonal/seasons/<season>")
@require_auth
def seasonal_for_season(season: str):
    plants, error = supabase_client.get_seasonal_plants()
    if error:
        return service_error_response(error, "Failed to load seasonal plants")

    matches = seasonal.plants_active_in_season(plants, season)
    return jsonify({
        "success": True,
        "season": season.lower(),
        "count": len(matches),
        "plants": [
            {**plant, "active_month_names": seasonal.active_month_names(plant)}
            for plant in matches
        ],
    })


# ============================================================================
# Challenges & leaderboard
# ============================================================================

@api_bp.route("/challenges")
@require_auth
def challenge_board():
    """
    Active challenges with the user's progress, plus stats and level progress.

    Example response:
        {
            "success": true,
            "challenges": [{"id": ..., "progress": {"percent": 60, ...}, "state": "IN_PROGRESS", ...}],
            "stats": {...} | null,
            "level": {"level": 2, "progress": 40, "points_for_next_level": 200, ...}
        }
    """
    user_id = get_current_user_id()

    active, error = supabase_client.get_active_challenges()
    if error:
        return service_error_response(error, "Failed to load challenges")

    progress, error = supabase_client.get_challenge_progress(user_id)
    if error:
        return service_error_response(error, "Failed to load challenge progress")

    stats, error = supabase_client.get_user_stats(user_id)
    if error:
        return service_error_response(error, "Failed to load user stats")

    return jsonify({
        "success": True,
        "challenges": challenges.build_challenge_board(active, progress),
        "stats": stats,
        "level": challenges.level_progress(stats),
    })


@api_bp.route("/leaderboard")
@require_auth
@limiter.limit("30 per minute")
def leaderboard():
    """
    Ranked leaderboard.

    Query params:
        limit: positive integer (defaults to LEADERBOARD_LIMIT)
    """
    raw_limit = request.args.get("limit")
    limit = parse_int(raw_limit, "limit") if raw_limit else current_app.config["LEADERBOARD_LIMIT"]

    stats, error = supabase_client.get_all_user_stats()
    if error:
        return service_error_response(error, "Failed to load leaderboard")

    user_id = get_current_user_id()
    entries = challenges.rank_leaderboard(stats, limit)
    for entry in entries:
        entry["badge"] = challenges.rank_badge(entry["rank"])
        entry["is_current_user"] = entry.get("user_id") == user_id

    return jsonify({"success": True, "leaderboard": entries})


# ============================================================================
# Identification
# ============================================================================

@api_bp.route("/identify", methods=["POST"])
@require_auth
@limiter.limit(lambda: current_app.config["UPLOAD_RATE_LIMIT"])
def identify():
    """
    Upload a plant photo (multipart field "photo") and classify it.

    Returns:
        200: {"success": true, "result": {...}, "image_path": "...", "actions": [...]}
        400: Missing or invalid photo
        500: Upload or classification failure
    """
    user_id = get_current_user_id()
    file = request.files.get("photo")

    file_bytes, error = validate_plant_photo(file, current_app.config["MAX_PHOTO_SIZE"])
    if error:
        return error_response(error, 400)

    image_path, error = supabase_client.upload_plant_image(file_bytes, user_id, secure_filename(file.filename))
    if error:
        return service_error_response(error, "Plant photo upload failed", "upload")

    try:
        result = classifier.classify_image(image_path)
    except InvalidArgument:
        raise
    except Exception as e:
        return error_response(sanitize_error(e, "classification", "Classification error"), 500)

    return jsonify({
        "success": True,
        "result": result,
        "image_path": image_path,
        "actions": classifier.follow_up_actions(result.get("type")),
    })


# ============================================================================
# Plant journal
# ============================================================================

@api_bp.route("/journal", methods=["GET"])
@require_auth
def journal_list():
    """
    Journal entries filtered by search text and type.

    Query params:
        q: search text (plant, common or scientific name)
        filter: all | favorites | edible | invasive | medicinal
    """
    user_id = get_current_user_id()
    query = soft_sanitize(request.args.get("q", ""), MAX_QUERY_LEN)
    filter_type = (request.args.get("filter") or "all").strip().lower()

    if not journal.is_valid_filter(filter_type):
        raise InvalidArgument(f"Unknown journal filter: {filter_type}")

    entries, error = journal.get_journal(user_id)
    if error:
        return service_error_response(error, "Failed to load plant journal")

    return jsonify({
        "success": True,
        "entries": journal.filter_journal_entries(entries, query, filter_type),
        "stats": journal.journal_stats(entries),
    })


@api_bp.route("/journal", methods=["POST"])
@require_auth
def journal_add():
    """
    Save an identification to the journal.

    Request body (JSON):
        {"result": {"species": ..., "type": ..., "confidence": ...},
         "image_path": "...", "notes": "...", "location_name": "..."}
    """
    user_id = get_current_user_id()
    data = request.get_json(silent=True)
    if not isinstance(data, dict) or not isinstance(data.get("result"), dict):
        return error_response("Invalid request body", 400)

    entry, error = journal.save_identification(
        user_id,
        data["result"],
        image_url=data.get("image_path"),
        notes=data.get("notes"),
        location_name=data.get("location_name"),
    )
    if error:
        return service_error_response(error, "Failed to save journal entry")

    log_info("Journal entry created", user_id=user_id, entry_id=entry.get("id"))
    return jsonify({"success": True, "entry": entry}), 201


@api_bp.route("/journal/<entry_id>/favorite", methods=["POST"])
@require_auth
def journal_favorite(entry_id: str):
    if not is_valid_uuid(entry_id):
        return error_response("Invalid entry ID", 400)

    entry, error = journal.toggle_favorite(entry_id, get_current_user_id())
    if error:
        return service_error_response(error, "Failed to update favorite")
    if entry is None:
        log_warning("Journal entry not found", user_id=get_current_user_id(), entry_id=entry_id)
        return error_response(GENERIC_MESSAGES["not_found"], 404)

    return jsonify({"success": True, "entry": entry})


@api_bp.route("/journal/<entry_id>", methods=["DELETE"])
@require_auth
def journal_delete(entry_id: str):
    if not is_valid_uuid(entry_id):
        return error_response("Invalid entry ID", 400)

    deleted, error = journal.delete_entry(entry_id, get_current_user_id())
    if error:
        return service_error_response(error, "Failed to delete entry")
    if not deleted:
        log_warning("Journal entry not found for delete", user_id=get_current_user_id(), entry_id=entry_id)
        return error_response(GENERIC_MESSAGES["not_found"], 404)

    return jsonify({"success": True})


# ============================================================================
# Sightings
# ============================================================================

@api_bp.route("/reports", methods=["GET"])
@require_auth
def reports_list():
    reports, error = sightings.list_reports()
    if error:
        return service_error_response(error, "Failed to load reports")

    return jsonify({
        "success": True,
        "count": len(reports),
        "reports": reports,
        "recent": sightings.recent_reports(reports),
    })


@api_bp.route("/reports", methods=["POST"])
@require_auth
@limiter.limit("10 per minute")
def reports_create():
    """
    Submit a sighting.

    Request body (JSON):
        {"latitude": 40.7, "longitude": -73.9, "notes": "...", "species_id": "..." (optional)}
    """
    user_id = get_current_user_id()
    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        return error_response("Invalid request body", 400)

    species_id = data.get("species_id")
    if species_id is not None and not is_valid_uuid(species_id):
        return error_response("Invalid species ID", 400)

    report, error = sightings.submit_report(
        user_id,
        data.get("latitude"),
        data.get("longitude"),
        notes=data.get("notes"),
        species_id=species_id,
    )
    if error:
        return service_error_response(error, "Failed to submit report")

    log_info("Sighting reported", user_id=user_id, report_id=report.get("id"))
    return jsonify({"success": True, "report": report}), 201


# ============================================================================
# Guides & recipes
# ============================================================================

@api_bp.route("/guides")
@require_auth
def care_guides():
    """
    Care guides, optionally searched, with one selected guide.

    Query params:
        q: search text (plant name)
        plant: exact plant name to select
    """
    all_guides, error = supabase_client.get_care_guides()
    if error:
        return service_error_response(error, "Failed to load care guides")

    query = soft_sanitize(request.args.get("q", ""), MAX_QUERY_LEN)
    return jsonify({
        "success": True,
        "guides": guides.search_guides(all_guides, query),
        "selected": guides.select_guide(all_guides, request.args.get("plant")),
    })


@api_bp.route("/recipes")
@require_auth
def recipes():
    rows, error = supabase_client.get_recipes()
    if error:
        return service_error_response(error, "Failed to load recipes")

    return jsonify({"success": True, "recipes": guides.prepare_recipes(rows)})


# ============================================================================
# Dashboard
# ============================================================================

@api_bp.route("/dashboard")
@require_auth
def dashboard():
    """Counts for the dashboard cards: my reports, species, recipes."""
    user_id = get_current_user_id()

    counts = {}
    for key, table, owner in (
        ("reports", "reports", user_id),
        ("species", "species", None),
        ("recipes", "recipes", None),
    ):
        count, error = supabase_client.count_rows(table, owner)
        if error:
            return service_error_response(error, f"Failed to count {table}")
        counts[key] = count

    return jsonify({"success": True, "stats": counts})
