# =============================================================================
# billing/resolvers.py  —  Turn Loose Identifiers into One Record
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Tool callers rarely know Schematic IDs.  They say "Acme Corp", or give a
#   Stripe customer ID, or a custom key like app_id=123.  The resolvers turn
#   such an identifier bundle into exactly one Company / Plan / Feature, or
#   raise a descriptive error.
#
# COMPANY PRIORITY (first populated field wins, the rest are ignored):
#   1. company_id              → GET /companies/{id}
#   2. stripe_customer_id      → keyed lookup on stripe_customer_id
#   3. key_name + key_value    → keyed lookup on the named key (both needed)
#   4. company_name            → search; must match exactly one company
#
# PLANS AND FEATURES:
#   By ID, or by exact name over the full list.  Features also match on
#   their first flag's key.  First match wins.
#
#   Empty strings count as "not given" throughout.
# =============================================================================

from dataclasses import dataclass
from typing import Any, Callable, Optional

from billing.client import SchematicClient
from billing.errors import AmbiguousMatch, InvalidArgument, NotFound
from billing.formatting import display_name
from billing.models import STRIPE_CUSTOMER_KEY, Company, Feature, Plan
from billing.pagination import fetch_all

KEY_MANAGEMENT_DOCS_URL = "https://docs.schematichq.com/developer_resources/key_management"


# -----------------------------------------------------------------------------
# Identifier bundles
# -----------------------------------------------------------------------------
# Each is built from a tool's extracted arguments (camelCase on the wire).
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class CompanyIdentifier:
    company_id: Optional[str] = None
    company_name: Optional[str] = None
    stripe_customer_id: Optional[str] = None
    key_name: Optional[str] = None
    key_value: Optional[str] = None

    @classmethod
    def from_args(cls, args: dict[str, Any]) -> "CompanyIdentifier":
        return cls(
            company_id=args.get("companyId"),
            company_name=args.get("companyName"),
            stripe_customer_id=args.get("stripeCustomerId"),
            key_name=args.get("keyName"),
            key_value=args.get("keyValue"),
        )

    def is_empty(self) -> bool:
        return not any((
            self.company_id,
            self.company_name,
            self.stripe_customer_id,
            self.key_name,
            self.key_value,
        ))


@dataclass(frozen=True)
class FeatureIdentifier:
    feature_id: Optional[str] = None
    feature_name: Optional[str] = None

    @classmethod
    def from_args(cls, args: dict[str, Any]) -> "FeatureIdentifier":
        return cls(feature_id=args.get("featureId"), feature_name=args.get("featureName"))

    def is_empty(self) -> bool:
        return not (self.feature_id or self.feature_name)


@dataclass(frozen=True)
class PlanIdentifier:
    plan_id: Optional[str] = None
    plan_name: Optional[str] = None

    @classmethod
    def from_args(cls, args: dict[str, Any]) -> "PlanIdentifier":
        return cls(plan_id=args.get("planId"), plan_name=args.get("planName"))

    def is_empty(self) -> bool:
        return not (self.plan_id or self.plan_name)


# -----------------------------------------------------------------------------
# Companies
# -----------------------------------------------------------------------------
async def resolve_company(client: SchematicClient, identifier: CompanyIdentifier) -> Company:
    """Resolve a company using the highest-priority field that is populated.

    Raises:
        InvalidArgument: Nothing usable given, or only half of a key pair.
        NotFound: The name search returned no companies.
        AmbiguousMatch: The name search returned more than one company.
        UpstreamFailure: The API call failed (including unknown IDs/keys).
    """
    if identifier.company_id:
        return await client.get_company(identifier.company_id)

    if identifier.stripe_customer_id:
        return await client.lookup_company({STRIPE_CUSTOMER_KEY: identifier.stripe_customer_id})

    if identifier.key_name or identifier.key_value:
        if not (identifier.key_name and identifier.key_value):
            raise InvalidArgument(
                "Both keyName and keyValue are required for custom key lookup. "
                f"Key names are configured in Schematic - see {KEY_MANAGEMENT_DOCS_URL}"
            )
        return await client.lookup_company({identifier.key_name: identifier.key_value})

    if identifier.company_name:
        return await _search_company_by_name(client, identifier.company_name)

    raise InvalidArgument("No valid company identifier provided")


async def _search_company_by_name(client: SchematicClient, name: str) -> Company:
    companies = await fetch_all(client.list_companies, q=name)

    if not companies:
        raise NotFound(f'No company found with name "{name}"')

    if len(companies) > 1:
        matches = [display_name(c) for c in companies]
        raise AmbiguousMatch(
            f'Multiple companies found matching "{name}": {", ".join(matches)}. '
            "Please be more specific or use company ID.",
            matches=matches,
        )

    return companies[0]


# -----------------------------------------------------------------------------
# Features
# -----------------------------------------------------------------------------
# A feature matches a name when either predicate holds, checked in order.
# Exact equality only.
# -----------------------------------------------------------------------------
_FEATURE_NAME_PREDICATES: tuple[Callable[[Feature, str], bool], ...] = (
    lambda feature, name: feature.name == name,
    lambda feature, name: feature.first_flag_key == name,
)


def _feature_matches(feature: Feature, name: str) -> bool:
    return any(predicate(feature, name) for predicate in _FEATURE_NAME_PREDICATES)


async def resolve_feature(client: SchematicClient, identifier: FeatureIdentifier) -> Feature:
    """Resolve a feature by ID, or by name / first flag key over every feature."""
    if identifier.feature_id:
        return await client.get_feature(identifier.feature_id)

    if identifier.feature_name:
        features = await fetch_all(client.list_features)
        for feature in features:
            if _feature_matches(feature, identifier.feature_name):
                return feature
        raise NotFound(f'Feature "{identifier.feature_name}" not found')

    raise InvalidArgument("Either featureId or featureName is required")


# -----------------------------------------------------------------------------
# Plans
# -----------------------------------------------------------------------------
async def resolve_plan(client: SchematicClient, identifier: PlanIdentifier) -> Plan:
    """Resolve a plan by ID, or by exact name over every plan."""
    if identifier.plan_id:
        return await client.get_plan(identifier.plan_id)

    if identifier.plan_name:
        plans = await fetch_all(client.list_plans)
        for plan in plans:
            if plan.name == identifier.plan_name:
                return plan
        raise NotFound(f'Plan "{identifier.plan_name}" not found')

    raise InvalidArgument("Either planId or planName is required")
