from datetime import datetime, timezone

from pydantic import AnyUrl, TypeAdapter, ValidationError

_url_adapter = TypeAdapter(AnyUrl)


def check_url(value: str) -> str:
    """Reject strings that do not parse as absolute URLs, keeping the input text as-is."""
    try:
        _url_adapter.validate_python(value)
    except ValidationError:
        raise ValueError("Must be a valid URL")
    return value


def reject_null(value):
    # Update fields may be omitted, but an explicit null would clear a NOT NULL column
    if value is None:
        raise ValueError("Field may be omitted but not set to null")
    return value


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    # SQLite hands timestamps back without tzinfo; everything is stored in UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
