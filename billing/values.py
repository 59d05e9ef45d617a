# =============================================================================
# billing/values.py  —  Entitlement / Override Values
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   A plan entitlement or a company override grants a feature with ONE of
#   three kinds of value:
#
#     BooleanValue(enabled=True)   → "on" / "off"
#     NumericValue(amount=100)     → a numeric ceiling (events, traits)
#     UnlimitedValue()             → no ceiling at all
#
#   The API stores all three in one record shape (value_type, value_bool,
#   value_numeric).  Here each kind is its own class, so a value can never
#   carry two payloads at once.
#
#   The parse_* functions hold the rules for turning the loose strings an
#   assistant passes ("on", "100", "unlimited") into one of these.
# =============================================================================

import math
from dataclasses import dataclass
from typing import Any, Union

from billing.errors import InvalidArgument

BOOLEAN_LITERALS = {"on": True, "true": True, "off": False, "false": False}
UNLIMITED_LITERAL = "unlimited"

# Feature kinds that accept a numeric limit.
METERED_FEATURE_TYPES = ("event", "trait")


@dataclass(frozen=True)
class BooleanValue:
    enabled: bool

    def to_request(self) -> dict[str, Any]:
        return {"value_type": "boolean", "value_bool": self.enabled}

    def display(self) -> str:
        return "on" if self.enabled else "off"


@dataclass(frozen=True)
class NumericValue:
    amount: int | float

    def to_request(self) -> dict[str, Any]:
        return {"value_type": "numeric", "value_numeric": self.amount}

    def display(self) -> str:
        return str(self.amount)


@dataclass(frozen=True)
class UnlimitedValue:
    def to_request(self) -> dict[str, Any]:
        return {"value_type": "unlimited"}

    def display(self) -> str:
        return UNLIMITED_LITERAL


EntitlementValue = Union[BooleanValue, NumericValue, UnlimitedValue]


def display_value(value: EntitlementValue | None) -> str:
    """Render a stored value; records the API returned without one show 'unknown'."""
    return value.display() if value is not None else "unknown"


def value_from_api(data: dict[str, Any]) -> EntitlementValue | None:
    """Read value_type / value_bool / value_numeric from an API record.

    Unlimited wins over the payload fields; otherwise whichever payload is
    present decides.  Returns None when nothing usable is there.
    """
    if data.get("value_type") == UNLIMITED_LITERAL:
        return UnlimitedValue()
    if data.get("value_bool") is not None:
        return BooleanValue(bool(data["value_bool"]))
    if data.get("value_numeric") is not None:
        return NumericValue(data["value_numeric"])
    return None


def parse_number(raw: str) -> int | float | None:
    """Parse a numeric string; integral values come back as int.  None if not a number."""
    try:
        number = float(raw.strip())
    except ValueError:
        return None
    if not math.isfinite(number):
        return None
    return int(number) if number.is_integer() else number


def parse_override_value(
    raw: str,
    feature_type: str | None,
    feature_display: str,
) -> tuple[EntitlementValue, bool]:
    """Turn a company-override value string into a stored value.

    Tried in order: boolean literal, "unlimited", number.  Anything else is
    stored as boolean on.

    Args:
        raw: The value the caller passed (already checked non-empty).
        feature_type: The feature's kind ("boolean", "event", "trait").
        feature_display: Feature name (or ID) for error messages.

    Returns:
        (value, recognised). recognised is False when the input fell through
        to the boolean-on default.

    Raises:
        InvalidArgument: A number was given for a feature that is not
            event- or trait-based.
    """
    if raw in BOOLEAN_LITERALS:
        return BooleanValue(BOOLEAN_LITERALS[raw]), True

    if raw == UNLIMITED_LITERAL:
        return UnlimitedValue(), True

    number = parse_number(raw)
    if number is not None:
        if feature_type in METERED_FEATURE_TYPES:
            return NumericValue(number), True
        raise InvalidArgument(
            f'Cannot set numeric override for feature "{feature_display}". '
            "Numeric overrides are only supported for event-based or trait-based features. "
            f'This feature is of type "{feature_type}".'
        )

    return BooleanValue(True), False


def parse_entitlement_value(
    raw: str | None,
    feature_type: str | None,
    feature_display: str,
) -> EntitlementValue:
    """Turn a plan-entitlement value string into a stored value.

    Boolean features default to "on"; only "on"/"true" enable them.
    Event and trait features need a number or "unlimited"; there is no
    default for them.
    """
    if feature_type == "boolean":
        value = raw or "on"
        return BooleanValue(value in ("on", "true"))

    if feature_type in METERED_FEATURE_TYPES:
        if not raw:
            raise InvalidArgument(
                f'Value is required for {feature_type}-based feature "{feature_display}". '
                'Please provide a number (e.g., "10", "100") or "unlimited".'
            )
        if raw == UNLIMITED_LITERAL:
            return UnlimitedValue()
        number = parse_number(raw)
        if number is None:
            raise InvalidArgument(
                f'Invalid value "{raw}" for {feature_type}-based feature "{feature_display}". '
                'Must be a number or "unlimited".'
            )
        return NumericValue(number)

    raise InvalidArgument(f'Unsupported feature type "{feature_type}" for feature "{feature_display}".')
