"""Log processors for structured logging.

Usage:
    from infrastructure.logging.formatters import mask_sensitive_data
"""

from typing import Any

# Key fragments whose values never reach the log output. Push device tokens
# are logged on delivery failure, so bare "token" is not in this set.
SENSITIVE_PATTERNS = frozenset(
    {
        "password",
        "secret",
        "api_key",
        "authorization",
        "credential",
        "private_key",
        "access_token",
        "id_token",
        "refresh_token",
        "bearer",
        "cookie",
    }
)


def mask_sensitive_data(
    mask_value: str = "***REDACTED***",
    additional_patterns: frozenset[str] | None = None,
):
    """Create a processor that masks sensitive data in log entries.

    Keys are matched case-insensitively against SENSITIVE_PATTERNS.

    Args:
        mask_value: The string to replace sensitive values with.
        additional_patterns: Extra patterns to consider sensitive.

    Returns:
        A structlog processor function.
    """
    patterns = SENSITIVE_PATTERNS
    if additional_patterns:
        patterns = patterns | additional_patterns

    def processor(
        logger: Any, method_name: str, event_dict: dict[str, Any]
    ) -> dict[str, Any]:
        return {
            key: (
                mask_value
                if value is not None and any(p in key.lower() for p in patterns)
                else value
            )
            for key, value in event_dict.items()
        }

    return processor


def truncate_large_values(max_length: int = 500):
    """Create a processor that truncates overly large string values.

    Args:
        max_length: Maximum string length before truncation.

    Returns:
        A structlog processor function.
    """

    def processor(
        logger: Any, method_name: str, event_dict: dict[str, Any]
    ) -> dict[str, Any]:
        for key, value in event_dict.items():
            if isinstance(value, str) and len(value) > max_length:
                event_dict[key] = (
                    value[:max_length] + f"...[truncated, {len(value)} chars total]"
                )
        return event_dict

    return processor
