"""String ``format`` checks supported by the validator."""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import Callable
from urllib.parse import urlsplit

# Conservative: something@something.tld, no whitespace anywhere.
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
SCHEME_PATTERN = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*$")


def is_email(value: str) -> bool:
    return EMAIL_PATTERN.match(value) is not None


def is_uri(value: str) -> bool:
    """True if *value* parses as an absolute URL (scheme plus a location)."""
    if not value or any(char.isspace() for char in value):
        return False
    try:
        parts = urlsplit(value)
        # Accessing the port validates it.
        parts.port
    except ValueError:
        return False
    if not SCHEME_PATTERN.match(parts.scheme):
        return False
    if parts.scheme in {"http", "https", "ftp", "ws", "wss"}:
        return bool(parts.hostname)
    return bool(parts.netloc or parts.path)


def _fromisoformat(value: str) -> datetime:
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = f"{text[:-1]}+00:00"
    return datetime.fromisoformat(text)


def is_date(value: str) -> bool:
    """True if *value* parses to a valid calendar date (or date-time)."""
    try:
        date.fromisoformat(value.strip())
        return True
    except ValueError:
        pass
    return is_date_time(value)


def is_date_time(value: str) -> bool:
    try:
        _fromisoformat(value)
    except ValueError:
        return False
    return True


FORMAT_CHECKERS: dict[str, Callable[[str], bool]] = {
    "email": is_email,
    "uri": is_uri,
    "date": is_date,
    "date-time": is_date_time,
}


def check_format(format_name: str, value: str) -> bool:
    """Return False only for a known format that *value* does not satisfy."""
    checker = FORMAT_CHECKERS.get(format_name)
    if checker is None:
        return True
    return checker(value)
