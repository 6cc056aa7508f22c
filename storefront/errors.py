"""Checkout error taxonomy and the policy that turns failures into page messages.

Both the HTTP-status message chain and the top-level classification are plain
functions so they can be exercised without a running backend.
"""
from typing import Any, Callable, List, Optional, Tuple

import httpx

from . import config

LOGIN_REQUIRED_MESSAGE = "Please login first. No authentication token found."
FETCH_FAILURE_INDICATOR = "Failed to fetch"

UNAUTHORIZED_MESSAGE = "🔐 Unauthorized: Your session has expired. Please login again."
FORBIDDEN_MESSAGE = "🚫 Forbidden: Access denied. Please login again."
SERVER_ERROR_MESSAGE = "💥 Server Error: Please check backend logs and try again."
BAD_REQUEST_MESSAGE = "⚠️ Bad Request: Check if cart has items and all fields are filled"
DEFAULT_CREATE_MESSAGE = "Payment creation failed"
DEFAULT_CAPTURE_MESSAGE = "Payment capture failed"


class CheckoutError(Exception):
    """Base class for every failure the checkout flow reports to the user."""


class MissingTokenError(CheckoutError):
    def __init__(self, message: str = LOGIN_REQUIRED_MESSAGE):
        super().__init__(message)


class MalformedResponseError(CheckoutError):
    """Backend answered with a non-empty body that is not JSON."""

    def __init__(self, status_code: int, text: str):
        self.status_code = status_code
        self.text = text
        super().__init__(
            f"Server returned invalid JSON. Status: {status_code}. Response: {text[:200]}"
        )


class IncompleteResponseError(CheckoutError):
    """HTTP 200 but one of orderId / paypalOrderId / approvalUrl is missing."""

    def __init__(self, received: str):
        self.received = received
        super().__init__(f"Server returned success but missing data. Received: {received}")


class PaymentHTTPError(CheckoutError):
    def __init__(self, status_code: int, message: str, body: Optional[dict] = None):
        self.status_code = status_code
        self.body = body or {}
        super().__init__(message)


Predicate = Callable[[int, dict], bool]
MessageFactory = Callable[[int, dict], str]


def _status(code: int) -> Predicate:
    return lambda status, body: status == code


def _field(name: str) -> Predicate:
    return lambda status, body: bool(body.get(name))


def _fixed(message: str) -> MessageFactory:
    return lambda status, body: message


def _from_field(name: str) -> MessageFactory:
    return lambda status, body: str(body[name])


# Evaluated top to bottom, first match wins.
# 401/403/500 always replace whatever the body said; 400 only fills in when
# the body carries nothing usable.
HTTP_ERROR_RULES: List[Tuple[Predicate, MessageFactory]] = [
    (_status(401), _fixed(UNAUTHORIZED_MESSAGE)),
    (_status(403), _fixed(FORBIDDEN_MESSAGE)),
    (_status(500), _fixed(SERVER_ERROR_MESSAGE)),
    (_field("error"), _from_field("error")),
    (_field("message"), _from_field("message")),
    (_field("details"), _from_field("details")),
    (_status(400), _fixed(BAD_REQUEST_MESSAGE)),
]


def resolve_http_error_message(status_code: int, body: Any, default: str = DEFAULT_CREATE_MESSAGE) -> str:
    if not isinstance(body, dict):
        body = {}
    for matches, build in HTTP_ERROR_RULES:
        if matches(status_code, body):
            return build(status_code, body)
    return default


def connectivity_message(backend: Optional[str] = None) -> str:
    backend = backend or config.BACKEND_URL
    return (
        "🔌 Cannot connect to backend server.\n\n"
        "Please check:\n"
        f"• Is backend running on {backend}?\n"
        "• Check the storefront logs for connection errors\n"
        f"• Try accessing {backend}/api/products directly"
    )


def is_network_failure(exc: BaseException) -> bool:
    if isinstance(exc, httpx.TransportError):
        return True
    return FETCH_FAILURE_INDICATOR in str(exc)


def classify_error(exc: BaseException) -> str:
    """Map any failure raised during a submission to the text shown on the page."""
    if is_network_failure(exc):
        return connectivity_message()
    message = str(exc)
    return message or exc.__class__.__name__
