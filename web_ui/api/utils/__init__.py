"""
Sora Prompt Genie API Utilities

Error formatting helpers for the API.
"""

from .error_formatter import (
    sanitize_error,
    format_error_response,
)

__all__ = [
    "sanitize_error",
    "format_error_response",
]
