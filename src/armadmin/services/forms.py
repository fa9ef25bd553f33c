"""Validation of submitted form values."""


class FormError(ValueError):
    """Raised when submitted form input is invalid."""


def require_text(value: str | None, label: str) -> str:
    """Return the trimmed value, rejecting blanks."""
    if value is None or not value.strip():
        raise FormError(f"{label} is required")
    return value.strip()


def optional_text(value: str | None) -> str | None:
    """Return the trimmed value, or None when blank."""
    if value is None or not value.strip():
        return None
    return value.strip()


def parse_optional_int(value: str | None, label: str) -> int | None:
    """Parse a non-negative integer field; a blank field means no value."""
    if value is None or not value.strip():
        return None
    try:
        number = int(value.strip())
    except ValueError:
        raise FormError(f"{label} must be a whole number")
    if number < 0:
        raise FormError(f"{label} cannot be negative")
    return number
