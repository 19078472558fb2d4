"""Status classification for provider responses.

Many 4xx statuses are successful outcomes here: they describe the scraped
target's answer, not the API call. Only the statuses outside the tables
below (5xx gateway failures, 429 concurrency limit, 403, ...) count as
failures of the call itself.
"""

from __future__ import annotations

from typing import Tuple

__all__ = [
    "ACCEPTED_CLIENT_ERROR_STATUSES",
    "ACCEPTED_STATUS_RANGES",
    "accept",
]

ACCEPTED_CLIENT_ERROR_STATUSES: frozenset[int] = frozenset(
    {400, 401, 404, 405, 406, 409, 410, 411, 413, 414, 415, 416, 417, 418, 422, 424, 426, 428}
)
"""4xx statuses passed through from the target site."""

ACCEPTED_STATUS_RANGES: Tuple[Tuple[int, int], ...] = ((100, 299), (300, 399))
"""Inclusive status ranges that are always accepted."""


def accept(status_code: int, transparent_response: bool = False) -> bool:
    """Return True if ``status_code`` is a logical success.

    Args:
        status_code: HTTP status returned by the provider.
        transparent_response: When True every status is accepted and the
            caller inspects the raw status itself.

    Examples:
        >>> accept(404)
        True
        >>> accept(502)
        False
        >>> accept(502, transparent_response=True)
        True
    """
    if transparent_response:
        return True
    if status_code in ACCEPTED_CLIENT_ERROR_STATUSES:
        return True
    return any(low <= status_code <= high for low, high in ACCEPTED_STATUS_RANGES)
