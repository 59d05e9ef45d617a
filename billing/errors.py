# =============================================================================
# billing/errors.py  —  Error Taxonomy
# =============================================================================
#
# Every failure a tool call can hit is one of these.  Each carries a short
# `kind` tag so the dispatcher can surface it in one uniform shape without
# losing what went wrong.  None of them are retried.
# =============================================================================


class BillingError(Exception):
    """Base class for every failure raised by the billing layer."""

    kind = "billing_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidArgument(BillingError):
    """Malformed, missing or contradictory input."""

    kind = "invalid_argument"


class NotFound(BillingError):
    """A name-based lookup matched nothing."""

    kind = "not_found"


class AmbiguousMatch(BillingError):
    """A name-based lookup matched more than one record."""

    kind = "ambiguous_match"

    def __init__(self, message: str, matches: list[str]):
        super().__init__(message)
        self.matches = matches


class ConfigurationMissing(BillingError):
    """No API credential (or an unusable setting) at startup."""

    kind = "configuration_missing"


class UnknownTool(BillingError):
    kind = "unknown_tool"


class UpstreamFailure(BillingError):
    """The Schematic API call itself failed.  Message is passed through as-is."""

    kind = "upstream_failure"

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code
