# =============================================================================
# mcp_tools/handlers.py  —  One Async Function per Tool
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Each handler receives the tool's already-extracted arguments (see
#   mcp_tools/arguments.py) and the shared SchematicClient, resolves
#   whatever companies / plans / features it needs, makes its API calls
#   one after another, and returns the text the assistant will read.
#
# HANDLER RULES:
#   - Raise billing errors; never format them.  The dispatcher turns every
#     failure into one uniform error.
#   - Mutating handlers echo what was actually stored (company, feature,
#     value), not what the caller typed.
#   - Multi-step handlers commit each step before the next.  A failure
#     halfway leaves earlier steps in place; there is no rollback.
# =============================================================================

from typing import Any, Awaitable, Callable

from billing.client import SchematicClient
from billing.errors import BillingError, InvalidArgument
from billing.formatting import (
    display_name,
    format_trial_end,
    generate_flag_key,
    is_title_case,
    plural,
    schematic_company_url,
    stripe_customer_url,
    to_title_case,
)
from billing.models import Company
from billing.pagination import fetch_all
from billing.resolvers import (
    CompanyIdentifier,
    FeatureIdentifier,
    PlanIdentifier,
    resolve_company,
    resolve_feature,
    resolve_plan,
)
from billing.values import BooleanValue, display_value, parse_entitlement_value, parse_override_value

Handler = Callable[[dict[str, Any], SchematicClient], Awaitable[str]]

TRAIT_FEATURES_URL = "https://app.schematichq.com/features"


def _stripe_lines(stripe_customer_id: str) -> list[str]:
    return [
        f"Stripe Customer ID: {stripe_customer_id}",
        f"Stripe: {stripe_customer_url(stripe_customer_id)}",
    ]


# =============================================================================
# Company lookup & billing
# =============================================================================
async def get_company(args: dict[str, Any], client: SchematicClient) -> str:
    company = await resolve_company(client, CompanyIdentifier.from_args(args))

    info = [
        f"Company: {display_name(company)}",
        f"ID: {company.id}",
        f"Plan ID: {company.plan_id}" if company.plan_id else "No plan assigned",
        f"Trial ends: {format_trial_end(company.trial_end)}" if company.trial_end else "Not on trial",
        f"Schematic: {schematic_company_url(company.id)}",
    ]
    if company.stripe_customer_id:
        info.extend(_stripe_lines(company.stripe_customer_id))

    return "\n".join(info)


async def get_company_plan(args: dict[str, Any], client: SchematicClient) -> str:
    company = await resolve_company(client, CompanyIdentifier.from_args(args))

    if not company.plan_id:
        return f"Company {display_name(company)} is not on any plan."

    plan = await client.get_plan(company.plan_id)
    return f"Company {display_name(company)} is on plan: {plan.name} ({plan.id})"


async def get_company_trial_info(args: dict[str, Any], client: SchematicClient) -> str:
    company = await resolve_company(client, CompanyIdentifier.from_args(args))

    if not company.trial_end:
        return f"Company {display_name(company)} is not on a trial."

    return (
        f"Company {display_name(company)} is on a trial.\n"
        f"Trial ends: {format_trial_end(company.trial_end)}"
    )


async def count_companies_on_plan(args: dict[str, Any], client: SchematicClient) -> str:
    plan = await resolve_plan(client, PlanIdentifier.from_args(args))

    count = plan.company_count or 0
    verb = "is" if count == 1 else "are"
    return f"{count} {plural(count, 'company', 'companies')} {verb} on plan {display_name(plan)}"


async def link_stripe_to_schematic(args: dict[str, Any], client: SchematicClient) -> str:
    stripe_customer_id = args.get("stripeCustomerId")
    company_id = args.get("companyId")

    if stripe_customer_id:
        company = await resolve_company(client, CompanyIdentifier(stripe_customer_id=stripe_customer_id))
        return "\n".join([
            f"Stripe Customer ID: {stripe_customer_id}",
            f"Schematic Company: {display_name(company)}",
            f"Schematic Company ID: {company.id}",
            f"Schematic: {schematic_company_url(company.id)}",
            f"Stripe: {stripe_customer_url(stripe_customer_id)}",
        ])

    if company_id:
        company = await resolve_company(client, CompanyIdentifier(company_id=company_id))
        if not company.stripe_customer_id:
            return f"Company {display_name(company)} is not linked to a Stripe customer."
        return "\n".join([
            f"Schematic Company: {display_name(company)}",
            f"Schematic Company ID: {company.id}",
            f"Stripe Customer ID: {company.stripe_customer_id}",
            f"Schematic: {schematic_company_url(company.id)}",
            f"Stripe: {stripe_customer_url(company.stripe_customer_id)}",
        ])

    raise InvalidArgument("Either stripeCustomerId or companyId is required")


# =============================================================================
# Company overrides
# =============================================================================
async def list_company_overrides(args: dict[str, Any], client: SchematicClient) -> str:
    company_identifier = CompanyIdentifier.from_args(args)
    feature_identifier = FeatureIdentifier.from_args(args)

    if company_identifier.is_empty() and feature_identifier.is_empty():
        raise InvalidArgument("Either companyId/companyName or featureId/featureName is required")

    company = None
    if not company_identifier.is_empty():
        company = await resolve_company(client, company_identifier)

    feature = None
    if not feature_identifier.is_empty():
        feature = await resolve_feature(client, feature_identifier)

    overrides = await fetch_all(
        client.list_company_overrides,
        company_id=company.id if company else None,
        feature_id=feature.id if feature else None,
    )

    if not overrides:
        if company:
            return f"Company {display_name(company)} has no overrides."
        return f"No companies have an override for feature {display_name(feature)}."

    if company:
        # Overrides only carry feature IDs; look the names up for display.
        features_by_id = {f.id: f for f in await fetch_all(client.list_features)}
        lines = [f"Company {display_name(company)} has {len(overrides)} {plural(len(overrides), 'override')}:"]
        for override in overrides:
            known = features_by_id.get(override.feature_id)
            feature_display = known.name if known and known.name else override.feature_id
            lines.append(f"  - {feature_display} ({override.feature_id}): {display_value(override.value)}")
        return "\n".join(lines)

    has = "company has" if len(overrides) == 1 else "companies have"
    lines = [f"{len(overrides)} {has} an override for feature {display_name(feature)}:"]
    for override in overrides:
        lines.append(f"  - {override.company_name or override.company_id}: {display_value(override.value)}")
    return "\n".join(lines)


async def set_company_override(args: dict[str, Any], client: SchematicClient) -> str:
    raw_value = args.get("value") or ""
    if not raw_value.strip():
        raise InvalidArgument(
            "Value is required. Please provide a value: 'on' or 'off' for boolean features, "
            "a number for event-based/trait-based features, or 'unlimited' for unlimited quota."
        )

    company = await resolve_company(client, CompanyIdentifier.from_args(args))
    feature = await resolve_feature(client, FeatureIdentifier.from_args(args))

    value, recognised = parse_override_value(raw_value, feature.feature_type, display_name(feature))
    await client.create_company_override(company.id, feature.id, value)

    result = f"Set override for company {display_name(company)}, feature {display_name(feature)}: {value.display()}"
    if not recognised:
        result += f'\nNote: value "{raw_value}" was not recognised, so the override was stored as {value.display()}'
    return result


async def remove_company_override(args: dict[str, Any], client: SchematicClient) -> str:
    company = await resolve_company(client, CompanyIdentifier.from_args(args))
    feature = await resolve_feature(client, FeatureIdentifier.from_args(args))

    overrides = await client.list_company_overrides(company_id=company.id, feature_id=feature.id, limit=1)
    if not overrides:
        return f"No override found for company {display_name(company)} on feature {display_name(feature)}."

    await client.delete_company_override(overrides[0].id)
    return f"Removed override for company {display_name(company)} on feature {display_name(feature)}."


# =============================================================================
# Plan management
# =============================================================================
async def list_plans(args: dict[str, Any], client: SchematicClient) -> str:
    plans = await fetch_all(client.list_plans)
    if not plans:
        return "No plans found."
    return "Plans:\n" + "\n".join(f"- {plan.name} ({plan.id})" for plan in plans)


async def create_plan(args: dict[str, Any], client: SchematicClient) -> str:
    plan = await client.create_plan(
        name=args["name"],
        description=args.get("description") or "",
        plan_type="plan",
    )
    return f"Created plan: {plan.name} ({plan.id})"


async def add_entitlements_to_plan(args: dict[str, Any], client: SchematicClient) -> str:
    entitlements = args.get("entitlements") or []
    if not entitlements:
        raise InvalidArgument("At least one entitlement is required")

    plan = await resolve_plan(client, PlanIdentifier.from_args(args))

    results = []
    for entry in entitlements:
        feature = await resolve_feature(client, FeatureIdentifier.from_args(entry))
        value = parse_entitlement_value(entry.get("value"), feature.feature_type, display_name(feature))
        await client.create_plan_entitlement(plan.id, feature.id, value)
        results.append(f"Added {feature.feature_type} entitlement for feature {display_name(feature)}: {value.display()}")

    return "\n".join(results)


async def get_plan_entitlements(args: dict[str, Any], client: SchematicClient) -> str:
    plan = await resolve_plan(client, PlanIdentifier.from_args(args))

    entitlements = await fetch_all(client.list_plan_entitlements, plan_id=plan.id)
    if not entitlements:
        return f"Plan {display_name(plan)} has no entitlements."

    lines = [f"Plan {plan.name} ({plan.id}) has {len(entitlements)} {plural(len(entitlements), 'entitlement')}:"]
    for entitlement in entitlements:
        feature = entitlement.feature
        feature_name = feature.name if feature and feature.name else entitlement.feature_id
        feature_type = feature.feature_type if feature and feature.feature_type else "unknown"
        lines.append(f"  - {feature_name} ({feature_type}): {display_value(entitlement.value)}")
    return "\n".join(lines)


# =============================================================================
# Feature management
# =============================================================================
async def list_features(args: dict[str, Any], client: SchematicClient) -> str:
    features = await fetch_all(client.list_features)
    if not features:
        return "No features found."
    return "Features:\n" + "\n".join(
        f"- {feature.name} ({feature.id}) - Type: {feature.feature_type or 'unknown'}"
        for feature in features
    )


async def create_feature(args: dict[str, Any], client: SchematicClient) -> str:
    name = args["name"]
    description = args.get("description") or ""
    feature_type = args.get("featureType") or "boolean"
    event_subtype = args.get("eventSubtype")

    if feature_type == "trait":
        return (
            "Trait-based features must be created in the Schematic web app. "
            f"Please visit {TRAIT_FEATURES_URL} to create trait-based features."
        )

    if feature_type == "event" and not event_subtype:
        raise InvalidArgument("eventSubtype is required for event-based features")

    final_name = name if is_title_case(name) else to_title_case(name)

    # Resolve the plan up front so a bad plan name fails before anything is created.
    plan_identifier = PlanIdentifier.from_args(args)
    plan = None if plan_identifier.is_empty() else await resolve_plan(client, plan_identifier)

    feature = await client.create_feature(
        name=final_name,
        description=description,
        feature_type=feature_type,
        event_subtype=event_subtype if feature_type == "event" else None,
    )
    result = f"Created feature: {feature.name} ({feature.id})"

    # The feature exists from here on: later failures are warnings, not errors.
    try:
        flag = await client.create_flag(
            key=generate_flag_key(feature.name),
            name=feature.name,
            description=description or f"Flag for {feature.name}",
            feature_id=feature.id,
            flag_type="boolean",
            default_value=False,
        )
        result += f"\nCreated flag: {flag.name} (key: {flag.key})"
    except BillingError as e:
        result += f"\n⚠️  Warning: Feature created but flag creation failed: {e}"

    if plan is not None:
        if feature_type == "boolean":
            try:
                await client.create_plan_entitlement(plan.id, feature.id, BooleanValue(True))
                result += f"\nEntitled feature to plan {display_name(plan)}: on"
            except BillingError as e:
                result += f"\n⚠️  Warning: Feature created but plan entitlement failed: {e}"
        else:
            result += (
                f"\nNote: {feature_type}-based features need a value to be entitled; use "
                f"add_entitlements_to_plan to add {feature.name} to plan {display_name(plan)}."
            )

    if final_name != name:
        result += f'\n💡 Note: Feature name was capitalized from "{name}" to "{final_name}"'

    return result


# =============================================================================
# Name → handler
# =============================================================================
HANDLERS: dict[str, Handler] = {
    "get_company": get_company,
    "get_company_plan": get_company_plan,
    "get_company_trial_info": get_company_trial_info,
    "count_companies_on_plan": count_companies_on_plan,
    "link_stripe_to_schematic": link_stripe_to_schematic,
    "list_company_overrides": list_company_overrides,
    "set_company_override": set_company_override,
    "remove_company_override": remove_company_override,
    "list_plans": list_plans,
    "create_plan": create_plan,
    "add_entitlements_to_plan": add_entitlements_to_plan,
    "get_plan_entitlements": get_plan_entitlements,
    "list_features": list_features,
    "create_feature": create_feature,
}
