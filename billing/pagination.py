# =============================================================================
# billing/pagination.py  —  Collect Every Page of a List Endpoint
# =============================================================================
#
# Schematic list endpoints page with limit/offset and do not say whether
# more pages exist.  fetch_all keeps asking for PAGE_SIZE items at a time
# and stops at the first SHORT page.
#
# Consequence: when the total is an exact multiple of PAGE_SIZE the last
# request comes back empty (200 items → pages of 100, 100, 0).
# =============================================================================

from typing import Any, Awaitable, Callable, TypeVar

T = TypeVar("T")

PAGE_SIZE = 100


async def fetch_all(
    list_fn: Callable[..., Awaitable[list[T]]],
    **filters: Any,
) -> list[T]:
    """Call `list_fn(**filters, limit=PAGE_SIZE, offset=...)` until a short page.

    Items come back in the order the pages were returned.  A failing page
    request propagates; nothing partial is returned.
    """
    items: list[T] = []
    offset = 0

    while True:
        page = await list_fn(**filters, limit=PAGE_SIZE, offset=offset)
        items.extend(page)
        if len(page) < PAGE_SIZE:
            break
        offset += PAGE_SIZE

    return items
