"""Error sanitization utilities to prevent information leakage."""

import re
from typing import Any


# Patterns that might expose sensitive information
SENSITIVE_PATTERNS = [
    r"private[_\s]?key[_\s]?id[:\s]+([a-f0-9]{40})",
    r"client[_\s]?email[:\s]+([a-zA-Z0-9\-_\.@]+)",
    r"secret[_\s]?name[:\s]+([a-zA-Z0-9\-_\.]+)",
]

# Fields to redact completely
SENSITIVE_FIELDS = {
    "private_key",
    "password",
    "secret",
    "credentials",
    "token",
    "key.json",
}


def sanitize_error_message(message: str) -> str:
    """Sanitize error message to remove sensitive information.

    Args:
        message: Original error message

    Returns:
        Sanitized error message with sensitive data redacted
    """
    sanitized = message

    for pattern in SENSITIVE_PATTERNS:
        sanitized = re.sub(pattern, "[REDACTED]", sanitized, flags=re.IGNORECASE)

    for field in SENSITIVE_FIELDS:
        sanitized = re.sub(
            rf"{re.escape(field)}[:\s]+([^\s,;\)]+)",
            f"{field}: [REDACTED]",
            sanitized,
            flags=re.IGNORECASE,
        )

    return sanitized


def sanitize_exception(error: Exception) -> str:
    """Sanitize exception message."""
    return sanitize_error_message(str(error))


def sanitize_dict(data: dict[str, Any], sensitive_keys: set[str] | None = None) -> dict[str, Any]:
    """Sanitize dictionary by redacting sensitive fields.

    Args:
        data: Dictionary to sanitize
        sensitive_keys: Additional keys to redact (merged with SENSITIVE_FIELDS)

    Returns:
        Sanitized dictionary with sensitive values redacted
    """
    all_sensitive = SENSITIVE_FIELDS | (sensitive_keys or set())
    sanitized: dict[str, Any] = {}

    for key, value in data.items():
        key_lower = key.lower()
        if any(sensitive in key_lower for sensitive in all_sensitive):
            sanitized[key] = "[REDACTED]"
        elif isinstance(value, dict):
            sanitized[key] = sanitize_dict(value, sensitive_keys)
        elif isinstance(value, str):
            sanitized[key] = sanitize_error_message(value)
        else:
            sanitized[key] = value

    return sanitized
