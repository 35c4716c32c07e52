"""
Security utilities for ipbatch.

Keeps the IPinfo access token out of error messages, logs and debug output.
"""

import re
from typing import Iterable, Optional

_SECRET_PATTERNS = [
    re.compile(r'([?&]token=)[^&\s\'"]+'),
    re.compile(r'([Tt]oken[:\s=]+)[\w\-]{8,}'),
    re.compile(r'([Aa]pi[_\s-]*[Kk]ey[:\s=]+)[\w\-]{8,}'),
    re.compile(r'(Bearer\s+)[\w\-]{8,}'),
]

REDACTED = '[REDACTED]'


def redact_secrets(text: str, secrets: Optional[Iterable[str]] = None) -> str:
    """
    Mask credentials in a piece of text.

    Args:
        text: Text that may contain a token (URL, exception message, ...)
        secrets: Known secret values to mask wherever they appear

    Returns:
        Text with every secret replaced by ``[REDACTED]``
    """
    sanitized = str(text)

    for secret in secrets or ():
        if secret:
            sanitized = sanitized.replace(secret, REDACTED)

    for pattern in _SECRET_PATTERNS:
        sanitized = pattern.sub(lambda match: match.group(1) + REDACTED, sanitized)

    return sanitized


def mask_token(token: Optional[str]) -> str:
    """Short, log-safe representation of a token."""
    if not token:
        return '<none>'
    if len(token) <= 4:
        return '****'
    return f"{token[:2]}...{token[-2:]}"
