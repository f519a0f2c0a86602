"""Request dispatch: query-string building and the authenticated HTTP client."""

import logging
from typing import Any, Dict, Mapping, NamedTuple, Optional, Protocol

import httpx

from app.config import settings
from app.models.result import NormalizedResult
from app.services.errors import NodeApiError
from app.services.normalizer import normalize
from app.services.parameters import RequestSpec

logger = logging.getLogger(__name__)

ACCESS_KEY_HEADER = "X-Access-Key"


class ApiRequest(NamedTuple):
    method: str
    url: str
    params: Dict[str, str]


class RawResponse(NamedTuple):
    status_code: int
    headers: Mapping[str, Any]
    body: Any


class AuthenticatedHttpClient(Protocol):
    """Capability that sends a request with credentials attached."""

    async def send(self, request: ApiRequest) -> RawResponse: ...


def build_query_params(spec: RequestSpec) -> Dict[str, str]:
    """Flatten *spec* into the query parameters sent to the API.

    ``None`` values are dropped, everything else is stringified, and
    ``scenario`` is only attached for the ``animate`` endpoint.
    """
    params: Dict[str, str] = {spec.source: spec.content}
    for key, value in spec.extra.items():
        if value is None:
            continue
        params[key] = _stringify(value)

    if spec.endpoint == "animate" and spec.scenario:
        params["scenario"] = spec.scenario

    return params


def build_request(spec: RequestSpec, base_url: Optional[str] = None) -> ApiRequest:
    base = (base_url or settings.SCREENSHOTONE_API_URL).rstrip("/")
    return ApiRequest(method="GET", url=f"{base}/{spec.endpoint}", params=build_query_params(spec))


async def dispatch(
    client: AuthenticatedHttpClient, spec: RequestSpec, base_url: Optional[str] = None
) -> NormalizedResult:
    """Send *spec* through *client* and normalise the raw response."""
    request = build_request(spec, base_url)
    response = await client.send(request)
    logger.debug(
        "ScreenshotOne %s responded %d", spec.endpoint, response.status_code
    )
    return normalize(response.headers, response.body)


class ScreenshotOneClient:
    """``httpx``-backed :class:`AuthenticatedHttpClient` for ScreenshotOne.

    The access key travels in the ``X-Access-Key`` header so it never shows up
    in URLs or logs.  Bodies are returned as raw bytes, untouched.

    Raises (from :meth:`send`):
        NodeApiError: when the API answers with a non-2xx status.
        httpx.HTTPError: on network errors and timeouts.
    """

    def __init__(
        self,
        access_key: str,
        *,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            headers={ACCESS_KEY_HEADER: access_key},
            timeout=timeout if timeout is not None else settings.SCREENSHOTONE_TIMEOUT,
            follow_redirects=True,
            transport=transport,
        )

    async def send(self, request: ApiRequest) -> RawResponse:
        response = await self._client.request(request.method, request.url, params=request.params)

        if not response.is_success:
            message = _extract_error_message(response)
            logger.warning(
                "ScreenshotOne returned HTTP %d for %s: %s",
                response.status_code,
                request.url,
                message,
            )
            raise NodeApiError(message, status_code=response.status_code)

        return RawResponse(
            status_code=response.status_code,
            headers=dict(response.headers),
            body=response.content,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "ScreenshotOneClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _extract_error_message(response: httpx.Response) -> str:
    """Prefer the API's own ``error_message``; fall back to the status line."""
    fallback = f"ScreenshotOne returned HTTP {response.status_code}"
    try:
        payload = response.json()
    except ValueError:
        return fallback

    if isinstance(payload, dict):
        for key in ("error_message", "message", "error"):
            value = payload.get(key)
            if isinstance(value, str) and value:
                return value
    return fallback
