"""Input checks shared by the service layer."""

from core.exceptions import ValidationError


def require_ids(**ids: str | None) -> None:
    """Raise ValidationError for the first missing or blank identifier."""
    for field, value in ids.items():
        if not value or not value.strip():
            raise ValidationError(field, f"{field} is required")


def require_pagination(offset: int, limit: int, max_limit: int = 100) -> None:
    if offset < 0:
        raise ValidationError("offset", "offset cannot be negative")
    if limit < 1 or limit > max_limit:
        raise ValidationError("limit", f"limit must be between 1 and {max_limit}")
