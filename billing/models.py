# =============================================================================
# billing/models.py  —  Data Models (the Schematic records we read)
# =============================================================================
#
# These dataclasses mirror the parts of Schematic's API responses that the
# tools actually use.  Every record is fetched fresh on each tool call and
# never mutated locally; `from_api` builds one from the snake_case JSON the
# REST API returns and ignores everything else.
# =============================================================================

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional

from billing.values import EntitlementValue, value_from_api

STRIPE_CUSTOMER_KEY = "stripe_customer_id"


def _parse_instant(raw: Any) -> Optional[datetime]:
    """Trial ends arrive either as epoch seconds or as an ISO-8601 string.

    An epoch of 0 means no trial end, like an absent field.
    """
    if raw is None or raw == "" or raw == 0:
        return None
    if isinstance(raw, (int, float)):
        return datetime.fromtimestamp(raw, tz=timezone.utc)
    text = str(raw)
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass
class Flag:
    """A keyed on/off toggle attached to a feature."""

    id: str
    key: str
    name: str = ""
    default_value: bool = False

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "Flag":
        return cls(
            id=data.get("id", ""),
            key=data.get("key", ""),
            name=data.get("name") or "",
            default_value=bool(data.get("default_value", False)),
        )


@dataclass
class Feature:
    id: str
    name: str = ""
    description: str = ""
    feature_type: Optional[str] = None     # "boolean" | "event" | "trait"
    flags: list[Flag] = field(default_factory=list)

    @property
    def first_flag_key(self) -> Optional[str]:
        return self.flags[0].key if self.flags else None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "Feature":
        return cls(
            id=data.get("id", ""),
            name=data.get("name") or "",
            description=data.get("description") or "",
            feature_type=data.get("feature_type"),
            flags=[Flag.from_api(f) for f in data.get("flags") or []],
        )


@dataclass
class Plan:
    id: str
    name: str = ""
    description: str = ""
    company_count: int = 0

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "Plan":
        return cls(
            id=data.get("id", ""),
            name=data.get("name") or "",
            description=data.get("description") or "",
            company_count=data.get("company_count") or 0,
        )


@dataclass
class Company:
    """A customer account in Schematic.

    `keys` holds the cross-system identifiers (e.g. stripe_customer_id)
    the company can be looked up by.
    """

    id: str
    name: str = ""
    plan_id: Optional[str] = None
    trial_end: Optional[datetime] = None
    keys: dict[str, str] = field(default_factory=dict)

    @property
    def stripe_customer_id(self) -> Optional[str]:
        return self.keys.get(STRIPE_CUSTOMER_KEY)

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "Company":
        plan = data.get("plan") or {}
        subscription = data.get("billing_subscription") or {}
        return cls(
            id=data.get("id", ""),
            name=data.get("name") or "",
            plan_id=plan.get("id"),
            trial_end=_parse_instant(subscription.get("trial_end")),
            keys={k["key"]: k["value"] for k in data.get("keys") or [] if "key" in k and "value" in k},
        )


@dataclass
class PlanEntitlement:
    id: str
    plan_id: str
    feature_id: str
    value: Optional[EntitlementValue] = None
    feature: Optional[Feature] = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "PlanEntitlement":
        feature = data.get("feature")
        return cls(
            id=data.get("id", ""),
            plan_id=data.get("plan_id", ""),
            feature_id=data.get("feature_id", ""),
            value=value_from_api(data),
            feature=Feature.from_api(feature) if feature else None,
        )


@dataclass
class CompanyOverride:
    id: str
    company_id: str
    feature_id: str
    value: Optional[EntitlementValue] = None
    company_name: Optional[str] = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "CompanyOverride":
        company = data.get("company") or {}
        return cls(
            id=data.get("id", ""),
            company_id=data.get("company_id", ""),
            feature_id=data.get("feature_id", ""),
            value=value_from_api(data),
            company_name=company.get("name") or None,
        )
