"""Async HTTP helper for the AI collaborator.

A thin wrapper around ``httpx.AsyncClient`` with an explicit timeout, a
fixed user-agent header and uniform error handling. Unlike a best-effort
fetch, every failure is raised as ``EnhancementError`` so the caller can
decide to keep the pattern-derived text.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

import httpx

from chainaudit import __version__
from chainaudit.exceptions import EnhancementError

logger = logging.getLogger(__name__)

# Timeout for collaborator requests (seconds).
DEFAULT_TIMEOUT: float = 20.0

# User-Agent sent with every request.
USER_AGENT: str = f"chainaudit/{__version__}"


async def post_json(
    url: str,
    payload: Mapping[str, Any],
    *,
    headers: Mapping[str, str] | None = None,
    timeout: float = DEFAULT_TIMEOUT,
    transport: httpx.AsyncBaseTransport | None = None,
) -> dict[str, Any]:
    """POST ``payload`` as JSON and parse a JSON object response.

    Args:
        url: The URL to post to.
        payload: JSON-serializable request body.
        headers: Extra request headers (e.g. authorization).
        timeout: Request timeout in seconds.
        transport: Optional httpx transport, used by tests.

    Returns:
        The decoded JSON object.

    Raises:
        EnhancementError: On timeouts, non-2xx statuses, transport errors,
            or a body that is not a JSON object.
    """
    request_headers = {"User-Agent": USER_AGENT}
    request_headers.update(headers or {})
    try:
        async with httpx.AsyncClient(
            timeout=timeout,
            headers=request_headers,
            transport=transport,
        ) as client:
            resp = await client.post(url, json=dict(payload))
            resp.raise_for_status()
            body = resp.json()
    except httpx.TimeoutException as exc:
        logger.warning("Timeout posting to %s", url)
        raise EnhancementError(f"Timed out after {timeout}s") from exc
    except httpx.HTTPStatusError as exc:
        logger.warning("HTTP %d from %s", exc.response.status_code, url)
        raise EnhancementError(f"HTTP {exc.response.status_code} from collaborator") from exc
    except (httpx.RequestError, ValueError) as exc:
        logger.warning("Request error for %s: %s", url, exc)
        raise EnhancementError(f"Request failed: {exc}") from exc

    if not isinstance(body, dict):
        raise EnhancementError(f"Expected a JSON object, got {type(body).__name__}")
    return body
