from __future__ import annotations
from typing import TYPE_CHECKING, Any, Dict, Optional
import logging
import httpx
from .errors import ParseError, TokenError, TransportError

if TYPE_CHECKING:
    from .auth_plus import AccessToken

logger = logging.getLogger(__name__)

NAMESPACE_HEADER = "x-ats-namespace"
DEFAULT_TIMEOUT = 30.0


def ensure_url(value: str) -> str:
    """Validate an absolute http(s) URL and return its normalized form."""
    try:
        url = httpx.URL(str(value).strip())
    except (httpx.InvalidURL, TypeError) as e:
        raise ParseError(f"invalid URL {value!r}: {e}") from e
    if url.scheme not in ("http", "https") or not url.host:
        raise ParseError(f"invalid URL {value!r}: expected an absolute http(s) URL")
    return str(url)


def _redacted(headers: Dict[str, str]) -> Dict[str, str]:
    return {k: ("Bearer ***" if k.lower() == "authorization" else v) for k, v in headers.items()}


class ApiClient:
    """Send requests to the OTA services, attaching identity headers when a token is given."""

    def __init__(self, timeout: float = DEFAULT_TIMEOUT, transport: Optional[httpx.BaseTransport] = None):
        self._client = httpx.Client(timeout=timeout, transport=transport)

    def __enter__(self) -> "ApiClient":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def send(self, method: str, url: str, token: Optional["AccessToken"] = None, **kwargs: Any) -> httpx.Response:
        headers: Dict[str, str] = dict(kwargs.pop("headers", None) or {})
        if token is not None:
            headers["Authorization"] = f"Bearer {token.access_token}"
            try:
                headers[NAMESPACE_HEADER] = token.namespace()
            except TokenError as e:
                logger.error("reading token namespace: %s", e)

        url = ensure_url(url)
        logger.debug("%s %s", method, url)
        if headers:
            logger.debug("request headers: %s", _redacted(headers))

        try:
            r = self._client.request(method, url, headers=headers, **kwargs)
        except httpx.HTTPError as e:
            raise TransportError(str(e) or e.__class__.__name__) from e
        logger.debug("response %s from %s", r.status_code, url)
        return r

    def get(self, url: str, token: Optional["AccessToken"] = None, params: Optional[Dict[str, Any]] = None) -> httpx.Response:
        return self.send("GET", url, token, params=params)

    def post(self, url: str, token: Optional["AccessToken"] = None, **kwargs: Any) -> httpx.Response:
        return self.send("POST", url, token, **kwargs)

    def put(self, url: str, token: Optional["AccessToken"] = None, **kwargs: Any) -> httpx.Response:
        return self.send("PUT", url, token, **kwargs)

    def delete(self, url: str, token: Optional["AccessToken"] = None, params: Optional[Dict[str, Any]] = None) -> httpx.Response:
        return self.send("DELETE", url, token, params=params)
