"""
Application factory and global configuration.

Creates the Flask app, applies security headers, configures rate limiting,
initializes Supabase, registers the API blueprint and CLI commands. This file
keeps startup/config concerns together and avoids domain logic here.
"""

from __future__ import annotations
import os
from flask import Flask, Response, jsonify
from dotenv import load_dotenv
from .extensions import limiter
from .routes.api import api_bp
from .services import supabase_client


def _validate_production_security(app: Flask, cfg_path: str) -> None:
    """
    Validate critical security settings in production environments.

    Raises RuntimeError if production security requirements are not met, so
    the app never starts with an insecure configuration.

    Checks:
    - SESSION_COOKIE_SECURE must be True (cookies only over HTTPS)
    - SECRET_KEY must be set and strong (>= 32 characters)
    - DEBUG must be False
    - Supabase URL and anon key must be configured
    """
    is_production = "ProdConfig" in cfg_path
    if not is_production or app.config.get("TESTING", False):
        return

    errors = []

    if not app.config.get("SESSION_COOKIE_SECURE", False):
        errors.append("SESSION_COOKIE_SECURE must be True in production.")

    secret_key = app.config.get("SECRET_KEY", "")
    if not secret_key:
        errors.append("SECRET_KEY is not set. Set FLASK_SECRET_KEY environment variable.")
    elif len(secret_key) < 32:
        errors.append(f"SECRET_KEY is too weak ({len(secret_key)} chars). Must be at least 32 characters.")

    if app.config.get("DEBUG", False):
        errors.append("DEBUG must be False in production.")

    if not app.config.get("SUPABASE_URL") or not app.config.get("SUPABASE_ANON_KEY"):
        errors.append("SUPABASE_URL and SUPABASE_ANON_KEY must be set in production.")

    if errors:
        error_msg = "\n\n[ERROR] PRODUCTION SECURITY VALIDATION FAILED:\n\n" + "\n\n".join(f"  * {err}" for err in errors)
        raise RuntimeError(error_msg)

    app.logger.info("[OK] Production security validation passed")


def create_app(config_object: str | None = None) -> Flask:
    # override=False so production env vars are not overwritten by a stale .env file
    load_dotenv(override=False)

    app = Flask(__name__)

    # APP_CONFIG selects the config class (e.g., wildscout.config.DevConfig)
    cfg_path = config_object or os.getenv("APP_CONFIG", "wildscout.config.ProdConfig")
    try:
        app.config.from_object(cfg_path)
    except (ImportError, AttributeError) as e:
        app.logger.warning(f"Could not load config object {cfg_path}: {e}")

    _validate_production_security(app, cfg_path)

    limiter.init_app(app)
    if not app.config.get("RATELIMIT_ENABLED", True):
        limiter.enabled = False

    supabase_client.init_supabase(app)

    @app.after_request
    def apply_security_headers(resp: Response) -> Response:
        resp.headers["X-Content-Type-Options"] = "nosniff"
        resp.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        resp.headers["X-Frame-Options"] = "DENY"
        resp.headers["Content-Security-Policy"] = "default-src 'none'; frame-ancestors 'none'"

        if app.config.get("SESSION_COOKIE_SECURE", False):
            resp.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains; preload"

        return resp

    @app.errorhandler(413)
    def payload_too_large(_e):
        return jsonify({"success": False, "error": "Upload is too large."}), 413

    @app.errorhandler(429)
    def rate_limited(_e):
        return jsonify({"success": False, "error": "Too many requests. Please slow down."}), 429

    app.register_blueprint(api_bp, url_prefix="/api/v1")

    @app.route("/healthz")
    def healthz():
        return jsonify({"status": "ok", "supabase": supabase_client.is_configured()})

    from wildscout.cli import leaderboard_command, refresh_catalogs_command, seasonal_plants_command
    app.cli.add_command(seasonal_plants_command)
    app.cli.add_command(leaderboard_command)
    app.cli.add_command(refresh_catalogs_command)

    return app
