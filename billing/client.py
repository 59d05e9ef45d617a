# =============================================================================
# billing/client.py  —  Async REST Client for the Schematic API
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   One method per Schematic endpoint the tools need.  Each method sends a
#   single request and returns parsed dataclasses from billing/models.py.
#
# CONVENTIONS OF THE API:
#   - Auth header:  X-Schematic-Api-Key: <key>
#   - Bodies and query params are snake_case JSON.
#   - Every response wraps its payload as {"data": ...}.
#   - List endpoints page with limit/offset (see billing/pagination.py).
#
# FAILURES:
#   Any non-2xx response or transport error becomes UpstreamFailure, with
#   the API's own message when it sent one.  Nothing is retried.
# =============================================================================

import logging
from typing import Any

import httpx

from billing.config import Settings
from billing.errors import UpstreamFailure
from billing.models import Company, CompanyOverride, Feature, Flag, Plan, PlanEntitlement
from billing.values import EntitlementValue

logger = logging.getLogger(__name__)

API_KEY_HEADER = "X-Schematic-Api-Key"


def _error_message(response: httpx.Response) -> str:
    """Pull the API's error text out of a failed response, or fall back to the status."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        for key in ("error", "message"):
            if isinstance(body.get(key), str) and body[key]:
                return body[key]
    return f"{response.status_code} {response.reason_phrase}".strip()


def _drop_none(params: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in params.items() if v is not None}


class SchematicClient:
    """Thin async wrapper around the Schematic REST API.

    Construct it once (see main.py) and share it; call `aclose()` when the
    server shuts down.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._http = httpx.AsyncClient(
            base_url=base_url,
            headers={
                API_KEY_HEADER: api_key,
                "Accept": "application/json",
            },
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "SchematicClient":
        return cls(
            api_key=settings.api_key,
            base_url=settings.api_url,
            timeout=settings.timeout_seconds,
        )

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        body: dict[str, Any] | None = None,
    ) -> Any:
        logger.debug("%s %s params=%s", method, path, params)
        try:
            response = await self._http.request(
                method,
                path,
                params=_drop_none(params or {}),
                json=body,
            )
        except httpx.HTTPError as e:
            raise UpstreamFailure(str(e) or type(e).__name__) from e

        if response.is_error:
            raise UpstreamFailure(_error_message(response), status_code=response.status_code)

        if not response.content:
            return None
        try:
            payload = response.json()
        except ValueError as e:
            raise UpstreamFailure(f"Invalid JSON from Schematic API: {e}") from e
        return payload.get("data") if isinstance(payload, dict) else payload

    # -------------------------------------------------------------------------
    # Companies
    # -------------------------------------------------------------------------
    async def get_company(self, company_id: str) -> Company:
        return Company.from_api(await self._request("GET", f"/companies/{company_id}"))

    async def lookup_company(self, keys: dict[str, str]) -> Company:
        """Exact-match lookup by one or more company keys (e.g. stripe_customer_id)."""
        params = {f"keys[{name}]": value for name, value in keys.items()}
        return Company.from_api(await self._request("GET", "/companies/lookup", params=params))

    async def list_companies(
        self, q: str | None = None, limit: int | None = None, offset: int | None = None
    ) -> list[Company]:
        data = await self._request("GET", "/companies", params={"q": q, "limit": limit, "offset": offset})
        return [Company.from_api(c) for c in data or []]

    # -------------------------------------------------------------------------
    # Plans
    # -------------------------------------------------------------------------
    async def get_plan(self, plan_id: str) -> Plan:
        return Plan.from_api(await self._request("GET", f"/plans/{plan_id}"))

    async def list_plans(self, limit: int | None = None, offset: int | None = None) -> list[Plan]:
        data = await self._request("GET", "/plans", params={"limit": limit, "offset": offset})
        return [Plan.from_api(p) for p in data or []]

    async def create_plan(self, name: str, description: str = "", plan_type: str = "plan") -> Plan:
        body = {"name": name, "description": description, "plan_type": plan_type}
        return Plan.from_api(await self._request("POST", "/plans", body=body))

    # -------------------------------------------------------------------------
    # Features & flags
    # -------------------------------------------------------------------------
    async def get_feature(self, feature_id: str) -> Feature:
        return Feature.from_api(await self._request("GET", f"/features/{feature_id}"))

    async def list_features(self, limit: int | None = None, offset: int | None = None) -> list[Feature]:
        data = await self._request("GET", "/features", params={"limit": limit, "offset": offset})
        return [Feature.from_api(f) for f in data or []]

    async def create_feature(
        self,
        name: str,
        description: str,
        feature_type: str,
        event_subtype: str | None = None,
    ) -> Feature:
        body = _drop_none({
            "name": name,
            "description": description,
            "feature_type": feature_type,
            "event_subtype": event_subtype,
        })
        return Feature.from_api(await self._request("POST", "/features", body=body))

    async def create_flag(
        self,
        key: str,
        name: str,
        description: str,
        feature_id: str,
        flag_type: str = "boolean",
        default_value: bool = False,
    ) -> Flag:
        body = {
            "key": key,
            "name": name,
            "description": description,
            "feature_id": feature_id,
            "flag_type": flag_type,
            "default_value": default_value,
        }
        return Flag.from_api(await self._request("POST", "/flags", body=body))

    # -------------------------------------------------------------------------
    # Plan entitlements
    # -------------------------------------------------------------------------
    async def list_plan_entitlements(
        self, plan_id: str | None = None, limit: int | None = None, offset: int | None = None
    ) -> list[PlanEntitlement]:
        params = {"plan_id": plan_id, "limit": limit, "offset": offset}
        data = await self._request("GET", "/plan-entitlements", params=params)
        return [PlanEntitlement.from_api(e) for e in data or []]

    async def create_plan_entitlement(
        self, plan_id: str, feature_id: str, value: EntitlementValue
    ) -> PlanEntitlement:
        body = {"plan_id": plan_id, "feature_id": feature_id, **value.to_request()}
        return PlanEntitlement.from_api(await self._request("POST", "/plan-entitlements", body=body))

    # -------------------------------------------------------------------------
    # Company overrides
    # -------------------------------------------------------------------------
    async def list_company_overrides(
        self,
        company_id: str | None = None,
        feature_id: str | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> list[CompanyOverride]:
        params = {"company_id": company_id, "feature_id": feature_id, "limit": limit, "offset": offset}
        data = await self._request("GET", "/company-overrides", params=params)
        return [CompanyOverride.from_api(o) for o in data or []]

    async def create_company_override(
        self, company_id: str, feature_id: str, value: EntitlementValue
    ) -> CompanyOverride:
        body = {"company_id": company_id, "feature_id": feature_id, **value.to_request()}
        return CompanyOverride.from_api(await self._request("POST", "/company-overrides", body=body))

    async def delete_company_override(self, override_id: str) -> None:
        await self._request("DELETE", f"/company-overrides/{override_id}")
