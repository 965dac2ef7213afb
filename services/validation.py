"""
services/validation.py
----------------------
Turns a submitted shareholder form into a validated Shareholder.

One policy per field, used for both create and update:
    - fn_id: trimmed, exactly 6 characters.
    - required text: non-empty after trimming.
    - optional text: trimmed, may be empty.
    - decimals: finite and >= 0; zero is valid, "NaN"/"Infinity" are not;
      at most 2 decimal places so the stored value equals the submitted one.
    - attendance: yes/no style flag, empty means no.
The first failing field short-circuits with its message.
"""

from decimal import Decimal, InvalidOperation
from typing import Mapping, Optional

from models.shareholder import (
    DECIMAL_FIELDS,
    FN_ID_LENGTH,
    OPTIONAL_TEXT_FIELDS,
    REQUIRED_TEXT_FIELDS,
    SHARE_DECIMAL_PLACES,
    SHARE_MAX_VALUE,
    Shareholder,
)

_TRUE_FLAGS = {"1", "true", "yes", "on", "y"}
_FALSE_FLAGS = {"", "0", "false", "no", "off", "n"}


class ValidationError(ValueError):
    """A user-correctable problem with one submitted field."""

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field
        self.message = message


def clean(value: Optional[str]) -> str:
    """Trim a raw form value, treating a missing value as empty."""
    return (value or "").strip()


def validate_fn_id(raw: Optional[str]) -> str:
    fn_id = clean(raw)
    if len(fn_id) != FN_ID_LENGTH:
        raise ValidationError("fn_id", f"FN ID must be exactly {FN_ID_LENGTH} characters")
    return fn_id


def parse_decimal(raw: Optional[str], field: str, label: str, required: bool) -> Decimal:
    """
    Parse a non-negative finite decimal.

    An empty optional value is 0; an empty required value is rejected.
    """
    text = clean(raw)
    if not text:
        if required:
            raise ValidationError(field, f"Valid {label.lower()} is required")
        return Decimal("0")
    try:
        value = Decimal(text)
    except InvalidOperation:
        raise ValidationError(field, f"Valid {label.lower()} is required")
    if not value.is_finite() or value < 0:
        raise ValidationError(field, f"Valid {label.lower()} is required")
    if value > SHARE_MAX_VALUE or value.as_tuple().exponent < -SHARE_DECIMAL_PLACES:
        raise ValidationError(
            field, f"{label} must be at most {SHARE_MAX_VALUE} with {SHARE_DECIMAL_PLACES} decimals"
        )
    return value


def parse_flag(raw: Optional[str], field: str, label: str) -> bool:
    text = clean(raw).lower()
    if text in _TRUE_FLAGS:
        return True
    if text in _FALSE_FLAGS:
        return False
    raise ValidationError(field, f"{label} must be yes or no")


def parse_version(raw: Optional[str]) -> int:
    """Parse the compare-and-swap token sent back with an update."""
    text = clean(raw)
    if not text.isdecimal():
        raise ValidationError("version", "Valid version is required")
    return int(text)


def validate_shareholder(form: Mapping[str, Optional[str]]) -> Shareholder:
    """
    Validate every field of a create/update submission.

    Args:
        form: Raw submitted values keyed by field name.

    Returns:
        A Shareholder with trimmed text and parsed numbers.
        Its version is left at the default; the repository manages it.

    Raises:
        ValidationError: For the first field that fails its policy.
    """
    values: dict = {"fn_id": validate_fn_id(form.get("fn_id"))}

    for field, label in REQUIRED_TEXT_FIELDS:
        text = clean(form.get(field))
        if not text:
            raise ValidationError(field, f"{label} is required")
        values[field] = text

    for field, label, required in DECIMAL_FIELDS:
        values[field] = parse_decimal(form.get(field), field, label, required)

    values["attendance"] = parse_flag(form.get("attendance"), "attendance", "Attendance")

    for field, _ in OPTIONAL_TEXT_FIELDS:
        values[field] = clean(form.get(field))

    return Shareholder(**values)
