import re

from bookshare.errors import InvalidArgument


def parse_positive_int(value, field: str) -> int:
    if isinstance(value, bool):
        raise InvalidArgument(f"{field} must be a positive integer")
    if isinstance(value, float) and not value.is_integer():
        raise InvalidArgument(f"{field} must be a positive integer")
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise InvalidArgument(f"{field} must be a positive integer")
    if number <= 0:
        raise InvalidArgument(f"{field} must be a positive integer")
    return number


def normalize_email(raw) -> str:
    return (raw or "").strip().lower() if isinstance(raw, str) else ""


def looks_like_email(email: str) -> bool:
    return bool(email) and "@" in email


def normalize_isbn(raw) -> str:
    if not raw:
        return ""
    return re.sub(r"[^0-9Xx]", "", str(raw)).upper()
