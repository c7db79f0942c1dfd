"""
Error formatting for API responses

Logs the full error server side and returns a client-safe body. Development
responses carry the real message and traceback; production responses only
ever carry one of a fixed set of user-facing messages.
"""

import traceback
from typing import Any, Dict, Optional

from config import settings
from utils.logger import logger


GENERIC_ERROR = "An error occurred. Please try again."
UNKNOWN_ERROR = "An unexpected error occurred. Please try again."


def sanitize_error(error: Any, is_production: Optional[bool] = None) -> Dict[str, str]:
    """
    Build the `{"error", "details"?}` body for an unexpected failure.

    Args:
        error: Exception (or anything else that was raised/returned as an error)
        is_production: Override the environment check (tests)
    """
    production = settings.is_production if is_production is None else is_production

    if isinstance(error, BaseException):
        logger.error(
            f"Error occurred: {type(error).__name__}: {error}",
            exc_info=(type(error), error, error.__traceback__),
        )
    else:
        logger.error(f"Unknown error occurred: {error!r}")

    if isinstance(error, BaseException):
        message = str(error)

        if not production:
            details = "".join(traceback.format_exception(type(error), error, error.__traceback__))
            return {"error": message or type(error).__name__, "details": details}

        if "OPENROUTER_API_KEY" in message or "environment variable" in message:
            return {
                "error": "Server configuration error",
                "details": "The API key is not properly configured. Please check the server environment variables.",
            }
        if "Network" in message or "fetch" in message:
            return {"error": "Network error. Please try again."}
        if "Rate limit" in message:
            return {"error": "Rate limit exceeded. Please try again in a moment."}
        if "Authentication" in message:
            return {"error": "Authentication failed. Please contact support."}
        return {"error": GENERIC_ERROR}

    if not production:
        return {"error": str(error)}
    return {"error": UNKNOWN_ERROR}


def format_error_response(error: Any, default_message: str = "An error occurred") -> Dict[str, str]:
    """Route-facing alias; `default_message` only labels the log line"""
    logger.debug(f"Formatting error response ({default_message})")
    return sanitize_error(error)
