# storefront/payments.py
import json
import logging

import httpx

from . import config
from .errors import (
    DEFAULT_CAPTURE_MESSAGE,
    IncompleteResponseError,
    MalformedResponseError,
    PaymentHTTPError,
    resolve_http_error_message,
)
from .schemas import PaymentCaptureRequest, PaymentCreated, PaymentCreationRequest

logger = logging.getLogger(__name__)

REQUIRED_SUCCESS_FIELDS = ("orderId", "paypalOrderId", "approvalUrl")


def parse_response_body(text: str, status_code: int) -> dict:
    """Parse a backend body read as raw text.

    Empty or whitespace-only bodies become ``{}``; anything else that is not
    JSON raises MalformedResponseError whatever the status code was.
    """
    if not text or not text.strip():
        logger.warning("empty response body", extra={"status": status_code})
        return {}
    try:
        data = json.loads(text)
    except ValueError:
        logger.error("response is not JSON", extra={"status": status_code, "body": text[:500]})
        raise MalformedResponseError(status_code, text)
    # a JSON scalar or list carries none of the fields we look for
    return data if isinstance(data, dict) else {}


def _auth_headers(token: str) -> dict:
    return {
        "Content-Type": "application/json",
        "Authorization": f"Bearer {token}",
    }


async def create_payment(client: httpx.AsyncClient, token: str, request: PaymentCreationRequest) -> PaymentCreated:
    url = config.backend_url(config.PAYMENT_CREATE_PATH)
    logger.info("creating payment", extra={"url": url, "return_url": request.returnUrl})

    resp = await client.post(url, headers=_auth_headers(token), content=request.model_dump_json())
    text = resp.text
    logger.info("payment create response", extra={"status": resp.status_code, "length": len(text)})

    data = parse_response_body(text, resp.status_code)

    if resp.status_code == 200:
        if not all(data.get(field) for field in REQUIRED_SUCCESS_FIELDS):
            logger.error("success response without required fields", extra={"keys": sorted(data)})
            raise IncompleteResponseError(json.dumps(data, separators=(",", ":"), ensure_ascii=False))
        return PaymentCreated(
            orderId=data["orderId"],
            paypalOrderId=str(data["paypalOrderId"]),
            approvalUrl=str(data["approvalUrl"]),
        )

    message = resolve_http_error_message(resp.status_code, data)
    logger.error("payment create failed", extra={"status": resp.status_code, "error": message})
    raise PaymentHTTPError(resp.status_code, message, data)


async def capture_payment(client: httpx.AsyncClient, token: str, order_id, paypal_order_id: str) -> dict:
    """Confirm an approved PayPal order with the backend after the buyer returns."""
    url = config.backend_url(config.PAYMENT_CAPTURE_PATH)
    payload = PaymentCaptureRequest(orderId=order_id, paypalOrderId=paypal_order_id)
    logger.info("capturing payment", extra={"url": url, "order_id": str(order_id)})

    resp = await client.post(url, headers=_auth_headers(token), content=payload.model_dump_json())
    data = parse_response_body(resp.text, resp.status_code)
    if resp.is_success:
        return data

    message = resolve_http_error_message(resp.status_code, data, default=DEFAULT_CAPTURE_MESSAGE)
    logger.error("payment capture failed", extra={"status": resp.status_code, "error": message})
    raise PaymentHTTPError(resp.status_code, message, data)
