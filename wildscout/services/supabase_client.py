"""
Supabase client initialization and record-store helpers.

Provides centralized access to Supabase for:
- Session verification (tokens issued by Supabase Auth)
- Database queries (seasonal plants, challenges, stats, journal, reports, guides, recipes)
- Storage (plant photo uploads)

Query helpers return ``(data, error_message)``. Errors are logged here and
handed back to the caller unchanged in meaning; an unavailable database is
never reported as an empty result.
"""

from __future__ import annotations
from typing import Optional, Dict, Any, List, Tuple
import logging
import uuid
from flask import current_app, has_app_context
from supabase import create_client, Client
from wildscout.utils.cache import cache_catalog, invalidate_catalog

logger = logging.getLogger(__name__)

NOT_CONFIGURED = "Database not configured"


def _safe_log_error(message: str) -> None:
    """Log to the app logger when an app context exists, else the module logger."""
    if has_app_context():
        current_app.logger.error(message)
    else:
        logger.error(message)


def _safe_log_info(message: str) -> None:
    if has_app_context():
        current_app.logger.info(message)
    else:
        logger.info(message)


# Global client instances (initialized once per app)
_supabase_client: Optional[Client] = None  # User client (anon key)
_supabase_admin: Optional[Client] = None   # Admin client (service role key)


def init_supabase(app) -> None:
    """
    Initialize Supabase clients with app config.
    Creates two clients:
    - Regular client with anon key (session verification, storage)
    - Admin client with service role key (server-side queries scoped by user_id)

    Call this from the Flask app factory.
    """
    global _supabase_client, _supabase_admin

    url = app.config.get("SUPABASE_URL", "")
    anon_key = app.config.get("SUPABASE_ANON_KEY", "")
    service_key = app.config.get("SUPABASE_SERVICE_ROLE_KEY", "")

    if not url or not anon_key:
        app.logger.warning("Supabase URL or ANON_KEY not configured. Supabase features will be disabled.")
        _supabase_client = None
        _supabase_admin = None
        return

    try:
        _supabase_client = create_client(url, anon_key)
        app.logger.info("Supabase client initialized successfully")

        if service_key:
            _supabase_admin = create_client(url, service_key)
            app.logger.info("Supabase admin client initialized successfully")
        else:
            app.logger.warning("SUPABASE_SERVICE_ROLE_KEY not configured. Queries will use the anon client.")

    except Exception as e:
        app.logger.error(f"Failed to initialize Supabase client: {e}")
        _supabase_client = None
        _supabase_admin = None


def set_clients(client: Optional[Client], admin: Optional[Client] = None) -> None:
    """Install client instances directly (used by tests and scripts)."""
    global _supabase_client, _supabase_admin
    _supabase_client = client
    _supabase_admin = admin


def is_configured() -> bool:
    """Check if Supabase is properly configured."""
    return _supabase_client is not None


def _db() -> Optional[Client]:
    return _supabase_admin or _supabase_client


# ============================================================================
# Auth
# ============================================================================

def verify_session(access_token: str, refresh_token: Optional[str] = None) -> Optional[Dict[str, Any]]:
    """
    Verify a Supabase access token and return user data.

    With a refresh token the session is established on the client (cookie
    sessions); a bare bearer token is checked with ``auth.get_user``.

    Returns:
        User dict with id, email, etc. or None if invalid
    """
    if not _supabase_client or not access_token:
        return None

    try:
        if refresh_token:
            response = _supabase_client.auth.set_session(
                access_token=access_token,
                refresh_token=refresh_token,
            )
        else:
            response = _supabase_client.auth.get_user(access_token)

        if response and response.user:
            return response.user.model_dump()
        return None

    except Exception as e:
        _safe_log_error(f"Error verifying session: {e}")
        return None


# ============================================================================
# Catalogs (read-only, cached)
# ============================================================================

@cache_catalog("seasonal_plants")
def get_seasonal_plants() -> Tuple[Optional[List[Dict[str, Any]]], Optional[str]]:
    """All seasonal plants ordered by common name."""
    db = _db()
    if not db:
        return None, NOT_CONFIGURED

    try:
        response = db.table("seasonal_plants").select("*").order("common_name").execute()
        return response.data or [], None
    except Exception as e:
        _safe_log_error(f"Error loading seasonal plants: {e}")
        return None, f"Error loading seasonal plants: {e}"


@cache_catalog("challenges")
def get_active_challenges() -> Tuple[Optional[List[Dict[str, Any]]], Optional[str]]:
    """Active challenges, highest reward first."""
    db = _db()
    if not db:
        return None, NOT_CONFIGURED

    try:
        response = (db.table("challenges")
                    .select("*")
                    .eq("is_active", True)
                    .order("points_reward", desc=True)
                    .execute())
        return response.data or [], None
    except Exception as e:
        _safe_log_error(f"Error loading challenges: {e}")
        return None, f"Error loading challenges: {e}"


@cache_catalog("care_guides")
def get_care_guides() -> Tuple[Optional[List[Dict[str, Any]]], Optional[str]]:
    """All plant care guides ordered by plant name."""
    db = _db()
    if not db:
        return None, NOT_CONFIGURED

    try:
        response = db.table("plant_care_guides").select("*").order("plant_name").execute()
        return response.data or [], None
    except Exception as e:
        _safe_log_error(f"Error loading care guides: {e}")
        return None, f"Error loading care guides: {e}"


def get_recipes() -> Tuple[Optional[List[Dict[str, Any]]], Optional[str]]:
    """Recipes with their species name, newest first."""
    db = _db()
    if not db:
        return None, NOT_CONFIGURED

    try:
        response = (db.table("recipes")
                    .select("*, species(name)")
                    .order("created_at", desc=True)
                    .execute())
        return response.data or [], None
    except Exception as e:
        _safe_log_error(f"Error loading recipes: {e}")
        return None, f"Error loading recipes: {e}"


def refresh_catalogs() -> None:
    """Forget cached catalogs (call after editing catalog tables)."""
    for name in ("seasonal_plants", "challenges", "care_guides"):
        invalidate_catalog(name)


# ============================================================================
# Challenges & stats
# ============================================================================

def get_challenge_progress(user_id: str) -> Tuple[Optional[List[Dict[str, Any]]], Optional[str]]:
    """All challenge progress rows for a user."""
    db = _db()
    if not db:
        return None, NOT_CONFIGURED

    try:
        response = db.table("user_challenge_progress").select("*").eq("user_id", user_id).execute()
        return response.data or [], None
    except Exception as e:
        _safe_log_error(f"Error loading challenge progress for {user_id}: {e}")
        return None, f"Error loading challenge progress: {e}"


def get_user_stats(user_id: str) -> Tuple[Optional[Dict[str, Any]], Optional[str]]:
    """
    Stats row for a user.

    Returns:
        (stats_dict or None if the user has no stats yet, error_message)
    """
    db = _db()
    if not db:
        return None, NOT_CONFIGURED

    try:
        response = db.table("user_stats").select("*").eq("user_id", user_id).limit(1).execute()
        rows = response.data or []
        return (rows[0] if rows else None), None
    except Exception as e:
        _safe_log_error(f"Error loading user stats for {user_id}: {e}")
        return None, f"Error loading user stats: {e}"


def get_all_user_stats() -> Tuple[Optional[List[Dict[str, Any]]], Optional[str]]:
    """Every user_stats row in arrival order (leaderboard input)."""
    db = _db()
    if not db:
        return None, NOT_CONFIGURED

    try:
        response = db.table("user_stats").select("*").order("created_at").execute()
        return response.data or [], None
    except Exception as e:
        _safe_log_error(f"Error loading leaderboard stats: {e}")
        return None, f"Error loading leaderboard stats: {e}"


# ============================================================================
# Sightings
# ============================================================================

def get_reports() -> Tuple[Optional[List[Dict[str, Any]]], Optional[str]]:
    """All sighting reports with species name/type, newest first."""
    db = _db()
    if not db:
        return None, NOT_CONFIGURED

    try:
        response = (db.table("reports")
                    .select("*, species(name, plant_type)")
                    .order("created_at", desc=True)
                    .execute())
        return response.data or [], None
    except Exception as e:
        _safe_log_error(f"Error loading reports: {e}")
        return None, f"Error loading reports: {e}"


def get_first_species_id(plant_type: str) -> Tuple[Optional[str], Optional[str]]:
    """ID of the first species of a given plant type, or None if there is none."""
    db = _db()
    if not db:
        return None, NOT_CONFIGURED

    try:
        response = db.table("species").select("id").eq("plant_type", plant_type).limit(1).execute()
        rows = response.data or []
        return (rows[0]["id"] if rows else None), None
    except Exception as e:
        _safe_log_error(f"Error looking up {plant_type} species: {e}")
        return None, f"Error looking up species: {e}"


def insert_report(data: Dict[str, Any]) -> Tuple[Optional[Dict[str, Any]], Optional[str]]:
    db = _db()
    if not db:
        return None, NOT_CONFIGURED

    try:
        response = db.table("reports").insert(data).execute()
        if response.data:
            return response.data[0], None
        return None, "Failed to create report"
    except Exception as e:
        _safe_log_error(f"Error creating report: {e}")
        return None, f"Error creating report: {e}"


# ============================================================================
# Plant journal
# ============================================================================

def get_journal_entries(user_id: str) -> Tuple[Optional[List[Dict[str, Any]]], Optional[str]]:
    """A user's journal entries, most recently identified first."""
    db = _db()
    if not db:
        return None, NOT_CONFIGURED

    try:
        response = (db.table("plant_journal")
                    .select("*")
                    .eq("user_id", user_id)
                    .order("identified_date", desc=True)
                    .execute())
        return response.data or [], None
    except Exception as e:
        _safe_log_error(f"Error loading journal for {user_id}: {e}")
        return None, f"Error loading journal: {e}"


def get_journal_entry(entry_id: str, user_id: str) -> Tuple[Optional[Dict[str, Any]], Optional[str]]:
    """One journal entry owned by user_id, or (None, None) if there is none."""
    db = _db()
    if not db:
        return None, NOT_CONFIGURED

    try:
        response = (db.table("plant_journal")
                    .select("*")
                    .eq("id", entry_id)
                    .eq("user_id", user_id)  # Ownership check
                    .limit(1)
                    .execute())
        rows = response.data or []
        return (rows[0] if rows else None), None
    except Exception as e:
        _safe_log_error(f"Error loading journal entry {entry_id}: {e}")
        return None, f"Error loading journal entry: {e}"


def insert_journal_entry(data: Dict[str, Any]) -> Tuple[Optional[Dict[str, Any]], Optional[str]]:
    db = _db()
    if not db:
        return None, NOT_CONFIGURED

    try:
        response = db.table("plant_journal").insert(data).execute()
        if response.data:
            return response.data[0], None
        return None, "Failed to create journal entry"
    except Exception as e:
        _safe_log_error(f"Error creating journal entry: {e}")
        return None, f"Error creating journal entry: {e}"


def update_journal_entry(
    entry_id: str,
    user_id: str,
    fields: Dict[str, Any],
    expected: Optional[Dict[str, Any]] = None,
) -> Tuple[Optional[Dict[str, Any]], Optional[str]]:
    """
    Update a journal entry owned by user_id.

    ``expected`` adds column == value conditions, so the write only lands if
    the row still holds the values the caller read.

    Returns:
        (updated_row or None if no row matched, error_message)
    """
    db = _db()
    if not db:
        return None, NOT_CONFIGURED

    try:
        query = (db.table("plant_journal")
                 .update(fields)
                 .eq("id", entry_id)
                 .eq("user_id", user_id))  # Ownership check
        for column, value in (expected or {}).items():
            query = query.eq(column, value)
        response = query.execute()
        rows = response.data or []
        return (rows[0] if rows else None), None
    except Exception as e:
        _safe_log_error(f"Error updating journal entry {entry_id}: {e}")
        return None, f"Error updating journal entry: {e}"


def delete_journal_entry(entry_id: str, user_id: str) -> Tuple[bool, Optional[str]]:
    """Delete a journal entry owned by user_id. Returns (deleted, error)."""
    db = _db()
    if not db:
        return False, NOT_CONFIGURED

    try:
        response = (db.table("plant_journal")
                    .delete()
                    .eq("id", entry_id)
                    .eq("user_id", user_id)  # Ownership check
                    .execute())
        return bool(response.data), None
    except Exception as e:
        _safe_log_error(f"Error deleting journal entry {entry_id}: {e}")
        return False, f"Error deleting journal entry: {e}"


# ============================================================================
# Counts & storage
# ============================================================================

def count_rows(table: str, user_id: Optional[str] = None) -> Tuple[int, Optional[str]]:
    """Exact row count for a table, optionally restricted to one user."""
    db = _db()
    if not db:
        return 0, NOT_CONFIGURED

    try:
        query = db.table(table).select("id", count="exact")
        if user_id:
            query = query.eq("user_id", user_id)
        response = query.execute()
        return response.count or 0, None
    except Exception as e:
        _safe_log_error(f"Error counting {table}: {e}")
        return 0, f"Error counting {table}: {e}"


def upload_plant_image(
    file_bytes: bytes,
    user_id: str,
    filename: str,
) -> Tuple[Optional[str], Optional[str]]:
    """
    Upload a photo to be classified.

    Args:
        file_bytes: Validated image bytes
        user_id: Owner (files live under "<user_id>/")
        filename: Original filename (used for the extension)

    Returns:
        (storage_path, error_message)
    """
    if not _supabase_client:
        return None, "Photo upload service not available. Please check your connection."

    ext = filename.rsplit(".", 1)[-1].lower() if "." in filename else "jpg"
    path = f"{user_id}/{uuid.uuid4().hex}.{ext}"
    bucket = current_app.config.get("PLANT_IMAGES_BUCKET", "plant-images") if has_app_context() else "plant-images"
    content_type = "image/jpeg" if ext in ("jpg", "jpeg") else f"image/{ext}"

    try:
        _supabase_client.storage.from_(bucket).upload(
            path,
            file_bytes,
            file_options={"content-type": content_type},
        )
        _safe_log_info(f"Uploaded plant image: {path}")
        return path, None
    except Exception as e:
        _safe_log_error(f"Error uploading plant image: {e}")
        return None, f"Upload failed: {e}"
