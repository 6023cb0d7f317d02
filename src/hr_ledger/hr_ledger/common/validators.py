from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from enum import Enum
from typing import Optional, Type, TypeVar

from ..core.constants import MONEY_QUANT
from ..core.exceptions import ValidationError

E = TypeVar("E", bound=Enum)


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(field_name, "must not be empty")
    return str(value).strip()


def optional_text(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    v = str(value).strip()
    return v or None


def require_enum(enum_cls: Type[E], value, field_name: str) -> E:
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).strip().lower())
    except (ValueError, AttributeError):
        allowed = ", ".join(m.value for m in enum_cls)
        raise ValidationError(field_name, f"must be one of: {allowed}")


def require_money(value, field_name: str, *, allow_negative: bool = False) -> Decimal:
    """Coerce to a 2-place Decimal; floats go through str() to avoid binary noise."""
    if value is None or value == "":
        raise ValidationError(field_name, "is required")
    if isinstance(value, bool):
        raise ValidationError(field_name, "must be a number")
    try:
        amount = Decimal(str(value)).quantize(Decimal(MONEY_QUANT), rounding=ROUND_HALF_UP)
    except (InvalidOperation, ValueError):
        raise ValidationError(field_name, "must be a number")
    if not amount.is_finite():
        raise ValidationError(field_name, "must be a number")
    if amount < 0 and not allow_negative:
        raise ValidationError(field_name, "must not be negative")
    return amount


def require_int(value, field_name: str) -> int:
    if isinstance(value, bool):
        raise ValidationError(field_name, "must be an integer")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(field_name, "must be an integer")
