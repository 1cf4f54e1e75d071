"""Normalizers used by Settings field validators (run before type validation)."""


def _clean(value):
    # Values coming from .env files often carry stray whitespace
    if isinstance(value, str):
        return value.strip()
    return value


def to_uppercase(value: str | None) -> str | None:
    """'info ' -> 'INFO'. Non-string values are passed through for pydantic to reject."""
    value = _clean(value)
    if isinstance(value, str):
        return value.upper()
    return value


def to_lowercase(value: str | None) -> str | None:
    """' JSON' -> 'json'. Non-string values are passed through for pydantic to reject."""
    value = _clean(value)
    if isinstance(value, str):
        return value.lower()
    return value
