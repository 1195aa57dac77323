import json
import logging
from http.client import HTTPException
from dataclasses import dataclass
from typing import Any, Iterable, Optional, Tuple
from urllib import error, request
from urllib.parse import quote, urlencode, urlparse

from pydantic import ValidationError

from hotel_inventory.config import get_settings
from hotel_inventory.core.notifications import Notifier

logger = logging.getLogger(__name__)

_ALLOWED_HTTP_SCHEMES = {"http", "https"}
_BODY_METHODS = {"POST", "PUT", "PATCH", "DELETE"}
DEFAULT_ERROR_MESSAGE = "An error occurred"


@dataclass
class ApiResponse:
    data: Any = None
    error: Optional[str] = None
    status: Optional[int] = None
    body: Any = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def envelope(self) -> dict:
        if isinstance(self.body, dict):
            return self.body
        return {}


def _validate_base_url(base_url):
    parsed = urlparse(base_url)
    scheme = parsed.scheme.lower()
    if scheme not in _ALLOWED_HTTP_SCHEMES or not parsed.netloc:
        raise RuntimeError("INVENTORY_API_URL must be an absolute HTTP(S) URL")
    return base_url.rstrip("/")


def validate_base_url(base_url):
    return _validate_base_url(base_url)


def _auth_header(token):
    token = (token or "").strip()
    if not token:
        return None
    if token.lower().startswith("bearer "):
        return token
    return "Bearer {}".format(token)


def path_segment(value):
    value_text = str(value or "").strip()
    if not value_text:
        raise ValueError("id is required")
    return quote(value_text, safe="")


def _decode_body(raw):
    if not raw:
        return None
    return json.loads(raw.decode("utf-8"))


def _error_message(body, fallback):
    if isinstance(body, dict):
        message = body.get("message") or body.get("error")
        if message:
            return str(message)
    return fallback


class ApiClient:
    """Issues one JSON request per call against the inventory REST API.

    ``loading`` is raised for the duration of every request and always
    lowered again, whatever the outcome.
    """

    def __init__(self, base_url=None, token=None, timeout=None):
        settings = get_settings()
        self.base_url = _validate_base_url((base_url or settings.INVENTORY_API_URL or "").strip())
        self.token = token if token is not None else settings.INVENTORY_API_TOKEN
        self.timeout = float(timeout if timeout is not None else settings.INVENTORY_API_TIMEOUT_SECONDS)
        self.loading = False

    def build_url(self, endpoint: str, params: Optional[Iterable[Tuple[str, Any]]] = None) -> str:
        url = "{}/{}".format(self.base_url, endpoint.lstrip("/"))
        params = list(params or [])
        if params:
            url += "?" + urlencode(params, quote_via=quote)
        return url

    def request(self, endpoint, method="GET", data=None, params=None) -> ApiResponse:
        method = method.upper()
        url = self.build_url(endpoint, params)

        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        auth_header = _auth_header(self.token)
        if auth_header:
            headers["Authorization"] = auth_header

        payload = None
        if data is not None and method in _BODY_METHODS:
            payload = json.dumps(data, default=str).encode("utf-8")

        req = request.Request(url, data=payload, method=method, headers=headers)

        self.loading = True
        try:
            with request.urlopen(req, timeout=self.timeout) as response:  # nosec B310
                status_code = response.getcode()
                raw = response.read()
            return self._handle_success(method, url, status_code, raw)
        except error.HTTPError as exc:
            return self._handle_http_error(method, url, exc)
        except error.URLError as exc:
            logger.warning(
                "%s %s failed: %s",
                method,
                url,
                exc.reason,
                extra={"method": method, "endpoint": endpoint},
            )
            return ApiResponse(error=str(exc.reason) or DEFAULT_ERROR_MESSAGE)
        except (OSError, HTTPException) as exc:
            logger.warning(
                "%s %s failed: %r",
                method,
                url,
                exc,
                extra={"method": method, "endpoint": endpoint},
            )
            return ApiResponse(error=str(exc) or DEFAULT_ERROR_MESSAGE)
        finally:
            self.loading = False

    def _handle_success(self, method, url, status_code, raw) -> ApiResponse:
        logger.debug(
            "%s %s -> HTTP %s", method, url, status_code, extra={"method": method, "status": status_code}
        )
        try:
            body = _decode_body(raw)
        except ValueError:
            return ApiResponse(
                error="Invalid JSON response from inventory API", status=status_code
            )

        if status_code < 200 or status_code >= 300:
            return ApiResponse(
                error=_error_message(body, "HTTP {}".format(status_code)),
                status=status_code,
                body=body,
            )
        if isinstance(body, dict) and body.get("success") is False:
            return ApiResponse(
                error=_error_message(body, DEFAULT_ERROR_MESSAGE),
                status=status_code,
                body=body,
            )

        data = body
        if isinstance(body, dict) and "data" in body:
            data = body["data"]
        return ApiResponse(data=data, status=status_code, body=body)

    def _handle_http_error(self, method, url, exc) -> ApiResponse:
        body = None
        try:
            body = _decode_body(exc.read())
        except (OSError, ValueError):
            body = None
        message = _error_message(body, "HTTP {}".format(exc.code))
        logger.warning(
            "%s %s -> HTTP %s: %s",
            method,
            url,
            exc.code,
            message,
            extra={"method": method, "status": exc.code},
        )
        return ApiResponse(error=message, status=exc.code, body=body)


class ResourceClient:
    """Shared state handling for the per-resource clients.

    Every operation on one instance shares ``loading`` and ``error``; the last
    request to finish wins.
    """

    def __init__(self, api=None, notifier=None):
        self.api = api or ApiClient()
        self.notifier = notifier or Notifier()
        self.error: Optional[str] = None

    @property
    def loading(self) -> bool:
        return self.api.loading

    def _fail(self, message, notify=True):
        self.error = message or DEFAULT_ERROR_MESSAGE
        if notify:
            self.notifier.error(self.error)
        return None

    def _succeed(self, message=None, notify=True):
        self.error = None
        if notify and message:
            self.notifier.success(message)

    def _invalid_payload(self, exc: ValidationError, notify=True):
        logger.warning("Unexpected inventory API payload: %s", exc)
        return self._fail(
            "Unexpected response from inventory API ({} validation errors)".format(
                exc.error_count()
            ),
            notify=notify,
        )


def to_payload(data):
    if data is None:
        return {}
    to_payload_method = getattr(data, "to_payload", None)
    if callable(to_payload_method):
        return to_payload_method()
    model_dump = getattr(data, "model_dump", None)
    if callable(model_dump):
        return model_dump(by_alias=True, exclude_none=True, mode="json")
    return dict(data)


__all__ = [
    "ApiClient",
    "ApiResponse",
    "DEFAULT_ERROR_MESSAGE",
    "ResourceClient",
    "path_segment",
    "to_payload",
    "validate_base_url",
]
