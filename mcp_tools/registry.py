# =============================================================================
# mcp_tools/registry.py  —  The Tool Catalog
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Lists every tool the server exposes: its name, the description the
#   assistant reads to decide WHEN to call it, and its parameters.  The
#   input schema sent in tools/list is generated from the same Param
#   declarations the dispatcher uses to validate real calls, so the two can
#   never drift apart.
#
# TOOL GROUPS:
#   - Company lookup & billing  (get_company, get_company_plan, ...)
#   - Company overrides         (list / set / remove)
#   - Plan management           (list_plans, create_plan, entitlements)
#   - Feature management        (list_features, create_feature)
#
# Handlers live in mcp_tools/handlers.py; this file holds no behaviour.
# =============================================================================

from dataclasses import dataclass
from typing import Any

from billing.resolvers import KEY_MANAGEMENT_DOCS_URL
from mcp_tools.arguments import ARRAY, Param, object_schema

FEATURE_TYPES = ("boolean", "event", "trait")


@dataclass(frozen=True)
class ToolSpec:
    name: str
    description: str
    params: tuple[Param, ...] = ()

    def input_schema(self) -> dict[str, Any]:
        return object_schema(self.params)


# -----------------------------------------------------------------------------
# Shared parameter groups
# -----------------------------------------------------------------------------
COMPANY_PARAMS = (
    Param("companyId", description="Schematic company ID (e.g., comp_xxx)"),
    Param("companyName", description="Company name to search for"),
    Param("stripeCustomerId", description="Stripe customer ID"),
    Param(
        "keyName",
        description=(
            "Custom key name to look up the company by (e.g., 'app_id'). Must be used with keyValue. "
            f"See {KEY_MANAGEMENT_DOCS_URL}"
        ),
    ),
    Param(
        "keyValue",
        description="Custom key value to look up the company by. Must be used with keyName.",
    ),
)

FEATURE_PARAMS = (
    Param("featureId", description="Feature ID (e.g., feat_xxx)"),
    Param("featureName", description="Feature name or flag key"),
)

PLAN_PARAMS = (
    Param("planId", description="Plan ID (e.g., plan_xxx)"),
    Param("planName", description="Plan name"),
)

ENTITLEMENT_ITEM_PARAMS = (
    Param("featureId"),
    Param("featureName"),
    Param(
        "value",
        description=(
            "Optional for boolean features (defaults to 'on'). Required for event/trait features: "
            "a number as string (e.g., '10', '100') or 'unlimited'."
        ),
    ),
)


# -----------------------------------------------------------------------------
# The catalog (order is the order tools/list returns them in)
# -----------------------------------------------------------------------------
TOOLS: tuple[ToolSpec, ...] = (
    # --- Company lookup & billing ---
    ToolSpec(
        name="get_company",
        description=(
            "Get company information by ID, name, Stripe customer ID, or custom key. Returns company "
            "details including plan, trial status, and links. For custom key lookups, the user must "
            "provide both keyName and keyValue. Key names are configured in Schematic - see "
            f"{KEY_MANAGEMENT_DOCS_URL} for details."
        ),
        params=COMPANY_PARAMS,
    ),
    ToolSpec(
        name="get_company_plan",
        description="Get the plan that a company is currently on",
        params=COMPANY_PARAMS,
    ),
    ToolSpec(
        name="get_company_trial_info",
        description="Check if a company is on a trial and when it ends",
        params=COMPANY_PARAMS,
    ),
    ToolSpec(
        name="count_companies_on_plan",
        description="Count how many companies are on a specific plan",
        params=PLAN_PARAMS,
    ),
    ToolSpec(
        name="link_stripe_to_schematic",
        description=(
            "Find the Schematic company for a Stripe customer ID, or vice versa. Returns both IDs "
            "and links to both platforms."
        ),
        params=(
            Param("stripeCustomerId", description="Stripe customer ID"),
            Param("companyId", description="Schematic company ID"),
        ),
    ),
    # --- Company overrides ---
    ToolSpec(
        name="list_company_overrides",
        description=(
            "List company overrides. Filter by company (to see all overrides for a company) or by "
            "feature (to see which companies have an override for a feature)"
        ),
        params=COMPANY_PARAMS + (
            Param(
                "featureName",
                description="Feature name to filter by (finds which companies have an override for this feature)",
            ),
            Param("featureId", description="Feature ID to filter by"),
        ),
    ),
    ToolSpec(
        name="set_company_override",
        description=(
            "Set or update a company override for a feature/entitlement. REQUIRES a value parameter - "
            "always ask the user for the desired value before calling this tool. For boolean features: "
            "use 'on'/'off' or 'true'/'false'. For event-based or trait-based features: use a numeric "
            "value (e.g., '10', '100') or 'unlimited'."
        ),
        params=COMPANY_PARAMS + FEATURE_PARAMS + (
            Param(
                "value",
                required=True,
                description=(
                    "REQUIRED: Override value. For boolean features: 'on'/'off' or 'true'/'false'. "
                    "For event-based or trait-based features: a numeric value as a string (e.g., '10', "
                    "'100') or 'unlimited'. Always ask the user for this value if not provided."
                ),
            ),
        ),
    ),
    ToolSpec(
        name="remove_company_override",
        description=(
            "Remove a company override for a feature/entitlement. This will delete the override and "
            "the company will fall back to their plan's entitlements."
        ),
        params=COMPANY_PARAMS + FEATURE_PARAMS,
    ),
    # --- Plan management ---
    ToolSpec(
        name="list_plans",
        description="List all plans in your Schematic account",
    ),
    ToolSpec(
        name="create_plan",
        description="Create a new plan",
        params=(
            Param("name", required=True, description="Plan name"),
            Param("description", description="Plan description"),
        ),
    ),
    ToolSpec(
        name="add_entitlements_to_plan",
        description=(
            "Add entitlements to a plan. The feature type will be automatically determined by querying "
            "the feature. For boolean features, defaults to 'on' if no value is provided. For "
            "event-based or trait-based features, a value (number or 'unlimited') is required."
        ),
        params=PLAN_PARAMS + (
            Param(
                "entitlements",
                kind=ARRAY,
                required=True,
                description=(
                    "Array of entitlement configurations. For boolean features, value is optional "
                    "(defaults to 'on'). For event/trait features, value is required."
                ),
                item_params=ENTITLEMENT_ITEM_PARAMS,
            ),
        ),
    ),
    ToolSpec(
        name="get_plan_entitlements",
        description=(
            "Get all features/entitlements included in a plan. Shows what features a plan grants and "
            "their values (on/off for boolean, numeric limits for metered, unlimited)."
        ),
        params=PLAN_PARAMS,
    ),
    # --- Feature management ---
    ToolSpec(
        name="list_features",
        description="List all features in your Schematic account",
    ),
    ToolSpec(
        name="create_feature",
        description=(
            "Create a new feature flag. Boolean features are simple on/off switches - the most commonly "
            "used type, ideal for enabling/disabling functionality and basic plan differentiation. "
            "Event-based features are metered against user events and track usage that typically "
            "increases over time (e.g., API calls, reports generated, database queries). Trait-based "
            "features are based on information reported to Schematic and can track usage that "
            "fluctuates up and down (e.g., user seats, projects, devices). Trait-based features must "
            "be created in the web app. Optionally entitle the feature to a plan in the same call."
        ),
        params=(
            Param("name", required=True, description="Feature name/key"),
            Param("description", description="Optional: Feature description"),
            Param(
                "featureType",
                enum=FEATURE_TYPES,
                description=(
                    "Feature type: 'boolean' (simple on/off switch, most common), 'event' (metered "
                    "against events that increase over time), or 'trait' (based on information that can "
                    "fluctuate - must be created in web app). Defaults to 'boolean' if not specified."
                ),
            ),
            Param(
                "eventSubtype",
                description=(
                    "REQUIRED for event-based features: The event subtype to associate with this "
                    "feature (e.g., 'api_call', 'report_generated')."
                ),
            ),
            Param("planId", description="Optional: Plan ID to entitle this feature to"),
            Param("planName", description="Optional: Plan name to entitle this feature to"),
        ),
    ),
)
