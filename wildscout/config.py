"""
Centralized configuration for all environments.

Select a config by setting:
  APP_CONFIG=wildscout.config.DevConfig      # local dev
  APP_CONFIG=wildscout.config.ProdConfig     # production (default if unset)
  APP_CONFIG=wildscout.config.TestConfig     # pytest

Notes:
- SECRET_KEY is read from FLASK_SECRET_KEY
- Rate limiting uses Flask-Limiter v3 keys (RATELIMIT_*).
"""

from __future__ import annotations
import os
import secrets
from datetime import timedelta

class BaseConfig:
    # Generate a random key if the env var is missing so dev/test never runs
    # with an empty string (production enforces a real key at startup)
    SECRET_KEY = os.getenv("FLASK_SECRET_KEY") or secrets.token_hex(32)
    DEBUG = False
    TESTING = False

    # Session configuration (cookie sessions carry Supabase tokens)
    PERMANENT_SESSION_LIFETIME = timedelta(days=7)
    SESSION_COOKIE_SECURE = True  # Only send cookies over HTTPS (overridden in dev)
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = "Lax"

    # Supabase (Database + Auth + Storage)
    SUPABASE_URL = os.getenv("SUPABASE_URL", "")
    SUPABASE_ANON_KEY = os.getenv("SUPABASE_ANON_KEY", "")
    SUPABASE_SERVICE_ROLE_KEY = os.getenv("SUPABASE_SERVICE_ROLE_KEY", "")
    PLANT_IMAGES_BUCKET = os.getenv("PLANT_IMAGES_BUCKET", "plant-images")

    # Classification (optional; without a key the mock classifier is used)
    CLASSIFIER_API_KEY = os.getenv("CLASSIFIER_API_KEY", "")

    # Flask-Limiter v3
    RATELIMIT_ENABLED = os.getenv("RATELIMIT_ENABLED", "true").lower() == "true"
    RATELIMIT_STORAGE_URI = os.getenv("RATELIMIT_STORAGE_URI", "memory://")
    RATELIMIT_DEFAULT = os.getenv("RATELIMIT_DEFAULT", "60 per minute; 2000 per day")

    # Uploads
    MAX_CONTENT_LENGTH = 10 * 1024 * 1024  # request body cap
    MAX_PHOTO_SIZE = 5 * 1024 * 1024
    UPLOAD_RATE_LIMIT = "20 per hour"

    # Leaderboard
    LEADERBOARD_LIMIT = int(os.getenv("LEADERBOARD_LIMIT", "10"))

    # Misc
    PREFERRED_URL_SCHEME = os.getenv("PREFERRED_URL_SCHEME", "https")

class ProdConfig(BaseConfig):
    """Production settings (selected by default if APP_CONFIG is unset)."""
    pass

class DevConfig(BaseConfig):
    """Developer-friendly settings."""
    DEBUG = True
    PREFERRED_URL_SCHEME = "http"
    # Allow cookies over HTTP in dev
    SESSION_COOKIE_SECURE = False
    UPLOAD_RATE_LIMIT = "200 per hour"

class TestConfig(BaseConfig):
    """CI/pytest settings."""
    TESTING = True
    DEBUG = True
    # Usually disable the limiter in tests to avoid flakiness
    RATELIMIT_ENABLED = False
    # The test client talks plain http
    SESSION_COOKIE_SECURE = False
    SUPABASE_URL = ""
    SUPABASE_ANON_KEY = ""
    SUPABASE_SERVICE_ROLE_KEY = ""
    LEADERBOARD_LIMIT = 10
