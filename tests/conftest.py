"""Pytest configuration and shared fixtures.

Run with:
    pytest tests/                        # Run all tests
    pytest tests/test_resolvers.py -v    # Run specific test file

Handlers, resolvers and the dispatcher run against FakeSchematicClient, an
in-memory stand-in with the same async methods as billing.client.SchematicClient.
"""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from billing.errors import UpstreamFailure
from billing.models import Company, CompanyOverride, Feature, Flag, Plan, PlanEntitlement
from billing.values import BooleanValue, NumericValue, UnlimitedValue


class FakeSchematicClient:
    """In-memory Schematic API.  Every call is recorded in `calls`."""

    def __init__(self):
        self.companies: list[Company] = []
        self.plans: list[Plan] = []
        self.features: list[Feature] = []
        self.entitlements: list[PlanEntitlement] = []
        self.overrides: list[CompanyOverride] = []
        self.calls: list[tuple[str, dict]] = []
        self.fail_flag_creation: str | None = None
        self.closed = False
        self._next_id = 0

    def _record(self, method: str, **kwargs) -> None:
        self.calls.append((method, kwargs))

    def calls_to(self, method: str) -> list[dict]:
        return [kwargs for name, kwargs in self.calls if name == method]

    def _new_id(self, prefix: str) -> str:
        self._next_id += 1
        return f"{prefix}_new{self._next_id}"

    @staticmethod
    def _page(items: list, limit: int | None, offset: int | None) -> list:
        start = offset or 0
        return items[start:start + limit] if limit is not None else items[start:]

    async def aclose(self) -> None:
        self.closed = True

    # --- companies ---
    async def get_company(self, company_id: str) -> Company:
        self._record("get_company", company_id=company_id)
        for company in self.companies:
            if company.id == company_id:
                return company
        raise UpstreamFailure("Not found", status_code=404)

    async def lookup_company(self, keys: dict[str, str]) -> Company:
        self._record("lookup_company", keys=keys)
        for company in self.companies:
            if all(company.keys.get(k) == v for k, v in keys.items()):
                return company
        raise UpstreamFailure("Not found", status_code=404)

    async def list_companies(self, q=None, limit=None, offset=None) -> list[Company]:
        self._record("list_companies", q=q, limit=limit, offset=offset)
        matches = [
            c for c in self.companies
            if q is None or q.lower() in c.name.lower() or q.lower() in c.id.lower()
        ]
        return self._page(matches, limit, offset)

    # --- plans ---
    async def get_plan(self, plan_id: str) -> Plan:
        self._record("get_plan", plan_id=plan_id)
        for plan in self.plans:
            if plan.id == plan_id:
                return plan
        raise UpstreamFailure("Not found", status_code=404)

    async def list_plans(self, limit=None, offset=None) -> list[Plan]:
        self._record("list_plans", limit=limit, offset=offset)
        return self._page(self.plans, limit, offset)

    async def create_plan(self, name: str, description: str = "", plan_type: str = "plan") -> Plan:
        self._record("create_plan", name=name, description=description, plan_type=plan_type)
        plan = Plan(id=self._new_id("plan"), name=name, description=description)
        self.plans.append(plan)
        return plan

    # --- features & flags ---
    async def get_feature(self, feature_id: str) -> Feature:
        self._record("get_feature", feature_id=feature_id)
        for feature in self.features:
            if feature.id == feature_id:
                return feature
        raise UpstreamFailure("Not found", status_code=404)

    async def list_features(self, limit=None, offset=None) -> list[Feature]:
        self._record("list_features", limit=limit, offset=offset)
        return self._page(self.features, limit, offset)

    async def create_feature(self, name, description, feature_type, event_subtype=None) -> Feature:
        self._record(
            "create_feature",
            name=name,
            description=description,
            feature_type=feature_type,
            event_subtype=event_subtype,
        )
        feature = Feature(id=self._new_id("feat"), name=name, description=description, feature_type=feature_type)
        self.features.append(feature)
        return feature

    async def create_flag(self, key, name, description, feature_id, flag_type="boolean", default_value=False) -> Flag:
        self._record(
            "create_flag",
            key=key,
            name=name,
            description=description,
            feature_id=feature_id,
            flag_type=flag_type,
            default_value=default_value,
        )
        if self.fail_flag_creation:
            raise UpstreamFailure(self.fail_flag_creation, status_code=400)
        flag = Flag(id=self._new_id("flag"), key=key, name=name, default_value=default_value)
        for feature in self.features:
            if feature.id == feature_id:
                feature.flags.append(flag)
        return flag

    # --- plan entitlements ---
    async def list_plan_entitlements(self, plan_id=None, limit=None, offset=None) -> list[PlanEntitlement]:
        self._record("list_plan_entitlements", plan_id=plan_id, limit=limit, offset=offset)
        matches = [e for e in self.entitlements if plan_id is None or e.plan_id == plan_id]
        return self._page(matches, limit, offset)

    async def create_plan_entitlement(self, plan_id, feature_id, value) -> PlanEntitlement:
        self._record("create_plan_entitlement", plan_id=plan_id, feature_id=feature_id, value=value)
        entitlement = PlanEntitlement(id=self._new_id("pltl"), plan_id=plan_id, feature_id=feature_id, value=value)
        self.entitlements.append(entitlement)
        return entitlement

    # --- company overrides ---
    async def list_company_overrides(self, company_id=None, feature_id=None, limit=None, offset=None):
        self._record(
            "list_company_overrides",
            company_id=company_id,
            feature_id=feature_id,
            limit=limit,
            offset=offset,
        )
        matches = [
            o for o in self.overrides
            if (company_id is None or o.company_id == company_id)
            and (feature_id is None or o.feature_id == feature_id)
        ]
        return self._page(matches, limit, offset)

    async def create_company_override(self, company_id, feature_id, value) -> CompanyOverride:
        self._record("create_company_override", company_id=company_id, feature_id=feature_id, value=value)
        override = CompanyOverride(id=self._new_id("cmov"), company_id=company_id, feature_id=feature_id, value=value)
        self.overrides.append(override)
        return override

    async def delete_company_override(self, override_id: str) -> None:
        self._record("delete_company_override", override_id=override_id)
        self.overrides = [o for o in self.overrides if o.id != override_id]


@pytest.fixture
def client() -> FakeSchematicClient:
    """A fake account with a few companies, plans and features."""
    fake = FakeSchematicClient()

    fake.plans = [
        Plan(id="plan_free", name="Free", company_count=1),
        Plan(id="plan_pro", name="Pro", company_count=12),
    ]
    fake.features = [
        Feature(
            id="feat_sso",
            name="Single Sign On",
            feature_type="boolean",
            flags=[Flag(id="flag_sso", key="sso")],
        ),
        Feature(
            id="feat_api",
            name="API Calls",
            feature_type="event",
            flags=[Flag(id="flag_api", key="api_calls")],
        ),
        Feature(id="feat_seats", name="Seats", feature_type="trait"),
    ]
    fake.companies = [
        Company(
            id="comp_acme",
            name="Acme Corp",
            plan_id="plan_pro",
            trial_end=datetime(2026, 3, 6, 15, 4, tzinfo=timezone.utc),
            keys={"stripe_customer_id": "cus_acme", "app_id": "123"},
        ),
        Company(id="comp_acme_labs", name="Acme Labs", keys={"app_id": "456"}),
        Company(id="comp_globex", name="Globex", plan_id="plan_free"),
    ]
    fake.entitlements = [
        PlanEntitlement(
            id="pltl_1", plan_id="plan_pro", feature_id="feat_sso",
            value=BooleanValue(True), feature=fake.features[0],
        ),
        PlanEntitlement(
            id="pltl_2", plan_id="plan_pro", feature_id="feat_api",
            value=NumericValue(1000), feature=fake.features[1],
        ),
    ]
    fake.overrides = [
        CompanyOverride(
            id="cmov_1", company_id="comp_acme", feature_id="feat_api",
            value=UnlimitedValue(), company_name="Acme Corp",
        ),
    ]
    return fake
