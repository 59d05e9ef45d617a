# =============================================================================
# billing/formatting.py  —  Text Helpers for Tool Responses
# =============================================================================

import re
from datetime import datetime, timezone
from typing import Any

SCHEMATIC_APP_URL = "https://app.schematichq.com"
STRIPE_DASHBOARD_URL = "https://dashboard.stripe.com"


def display_name(record: Any) -> str:
    """A record's name, or its ID when it has none."""
    return getattr(record, "name", None) or record.id


def schematic_company_url(company_id: str) -> str:
    return f"{SCHEMATIC_APP_URL}/env/companies/{company_id}"


def stripe_customer_url(stripe_customer_id: str) -> str:
    return f"{STRIPE_DASHBOARD_URL}/customers/{stripe_customer_id}"


def plural(count: int, singular: str, plural_form: str | None = None) -> str:
    """plural(1, "entitlement") → "entitlement"; plural(2, "company", "companies") → "companies"."""
    if count == 1:
        return singular
    return plural_form or f"{singular}s"


def format_trial_end(trial_end: datetime) -> str:
    """Render a trial end like "Friday, March 6, 2026 at 3:04 PM UTC"."""
    moment = trial_end.astimezone(timezone.utc)
    hour = moment.hour % 12 or 12
    return (
        f"{moment:%A}, {moment:%B} {moment.day}, {moment.year} "
        f"at {hour}:{moment:%M} {moment:%p} UTC"
    )


# -----------------------------------------------------------------------------
# Feature naming
# -----------------------------------------------------------------------------
# Feature names are expected in Title Case ("Advanced Analytics").  Words
# are split on whitespace; each must start upper-case with the rest lower.
# -----------------------------------------------------------------------------
_WHITESPACE = re.compile(r"\s+")


def is_title_case(name: str) -> bool:
    if not name:
        return False
    for word in _WHITESPACE.split(name):
        if not word:
            continue
        first, rest = word[0], word[1:]
        if first != first.upper() or rest != rest.lower():
            return False
    return True


def to_title_case(name: str) -> str:
    return " ".join(
        word[0].upper() + word[1:].lower() if word else word
        for word in _WHITESPACE.split(name)
    )


def generate_flag_key(name: str) -> str:
    """'Advanced Analytics' → 'advanced_analytics'."""
    key = re.sub(r"[^a-z0-9]+", "_", name.lower())
    return key.strip("_")
