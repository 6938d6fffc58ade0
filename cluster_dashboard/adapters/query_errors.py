"""Project-native error classification for cluster query failures."""

from __future__ import annotations

from typing import Final

import httpx

from .interfaces import QueryErrorKind

PERMISSION_DENIED_STATUS_CODES: Final[frozenset[int]] = frozenset({401, 403})

# Exceptions a cluster query absorbs into a soft failure.
QUERY_SOFT_FAILURE_ERRORS: Final[tuple[type[Exception], ...]] = (
    httpx.HTTPError,
    OSError,
    ValueError,
    KeyError,
    TypeError,
)


class ClusterPayloadError(ValueError):
    """Cluster API response did not match the expected payload contract."""


def adapter_classify_query_error(error: Exception) -> QueryErrorKind:
    """Map one query exception to its soft-failure classification.

    Args:
        error: Exception raised while issuing or decoding a cluster query.

    Returns:
        QueryErrorKind: `TIMEOUT` for timeouts, `PERMISSION_DENIED` for HTTP
        401/403, `UNAVAILABLE` for transport and other HTTP failures,
        `UNKNOWN` for malformed payloads and anything else.
    """

    if isinstance(error, (httpx.TimeoutException, TimeoutError)):
        return QueryErrorKind.TIMEOUT
    if isinstance(error, httpx.HTTPStatusError):
        if error.response.status_code in PERMISSION_DENIED_STATUS_CODES:
            return QueryErrorKind.PERMISSION_DENIED
        return QueryErrorKind.UNAVAILABLE
    if isinstance(error, PermissionError):
        return QueryErrorKind.PERMISSION_DENIED
    if isinstance(error, (httpx.TransportError, OSError)):
        return QueryErrorKind.UNAVAILABLE
    return QueryErrorKind.UNKNOWN
