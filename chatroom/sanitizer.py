"""
Free-text sanitization applied before anything is persisted
"""

import re
from typing import Any, Dict

# Control characters except tab and newline
_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b-\x1f\x7f]")

# Anything that looks like a tag. The body may contain '<' so that
# "<<b>" is removed in one go and no '<' survives with a '>' after it.
_TAG = re.compile(r"<[^>]*>")


def sanitize(text: Any) -> str:
    """
    Strip markup and control content from a free-text field

    Args:
        text: Raw value as received; non-strings are converted with str()

    Returns:
        Text without tags, control characters or surrounding whitespace
    """
    if text is None:
        return ""
    if not isinstance(text, str):
        text = str(text)

    cleaned = _CONTROL_CHARS.sub("", text)
    cleaned = _TAG.sub("", cleaned)
    return cleaned.strip()


def sanitize_fields(payload: Dict[str, Any], *fields: str) -> Dict[str, Any]:
    """
    Copy of payload with the named string fields sanitized

    Non-string values are left untouched so the validator can reject them.
    """
    cleaned = dict(payload)
    for field in fields:
        value = cleaned.get(field)
        if isinstance(value, str):
            cleaned[field] = sanitize(value)
    return cleaned
