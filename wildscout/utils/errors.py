"""
Error types, sanitized messages and logging helpers.

- InvalidArgument marks a value outside a function's input contract (month
  13, unknown season, non-positive leaderboard limit, ...). The API maps it
  to HTTP 400.
- Record-store failures arrive as ``(data, error_message)`` tuples; they are
  logged in full and answered with a generic message so table names and
  driver errors never reach the client.
"""

from __future__ import annotations
from flask import current_app, jsonify

# User-friendly generic error messages
GENERIC_MESSAGES = {
    "database": "We're experiencing technical difficulties. Please try again.",
    "validation": "The information provided is invalid. Please check and try again.",
    "upload": "Failed to upload file. Please try again.",
    "permission": "You don't have permission to perform this action.",
    "not_found": "The requested item was not found.",
    "classification": "We couldn't identify this plant right now. Please try again.",
}


class InvalidArgument(ValueError):
    """Raised when a caller passes a value outside a function's input contract."""


def error_response(message: str, status: int):
    """JSON error body in the API's envelope."""
    return jsonify({"success": False, "error": message}), status


def sanitize_error(
    error: Exception,
    error_type: str = "database",
    log_prefix: str = ""
) -> str:
    """
    Log an exception in full and return the generic message for its type.

    Args:
        error: The exception that occurred
        error_type: Key of GENERIC_MESSAGES
        log_prefix: Optional context for the log line

    Examples:
        >>> try:
        ...     result = classifier.classify_image(path)
        ... except Exception as e:
        ...     msg = sanitize_error(e, "classification", "Classification error")
    """
    log_message = f"{log_prefix}: {error}" if log_prefix else str(error)

    if error_type in ("validation", "not_found"):
        current_app.logger.info(f"Expected error - {log_message}")
    else:
        current_app.logger.error(f"Unexpected error - {log_message}", exc_info=True)

    return GENERIC_MESSAGES.get(error_type, GENERIC_MESSAGES["database"])


def service_error_response(error: str, context: str, error_type: str = "database"):
    """
    500 response for an error string returned by the service layer.

    Examples:
        >>> plants, error = supabase_client.get_seasonal_plants()
        >>> if error:
        ...     return service_error_response(error, "Failed to load seasonal plants")
    """
    current_app.logger.error(f"{context}: {error}")
    return error_response(GENERIC_MESSAGES.get(error_type, GENERIC_MESSAGES["database"]), 500)


def _with_context(message: str, context: dict) -> str:
    if not context:
        return message
    return f"{message} | Context: " + ", ".join(f"{k}={v}" for k, v in context.items())


def log_warning(message: str, **context) -> None:
    """
    Examples:
        >>> log_warning("Journal entry not found", user_id="123", entry_id="abc")
    """
    current_app.logger.warning(_with_context(message, context))


def log_info(message: str, **context) -> None:
    """
    Examples:
        >>> log_info("Sighting reported", user_id="123", report_id="abc")
    """
    current_app.logger.info(_with_context(message, context))
