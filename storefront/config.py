# storefront/config.py
import os
from typing import Optional

# Backend that owns carts, orders and the PayPal integration.
# Inside docker compose point BACKEND_URL at the service name instead of localhost.
BACKEND_URL = os.getenv("BACKEND_URL", "http://localhost:8082").rstrip("/")

PAYMENT_CREATE_PATH = os.getenv("PAYMENT_CREATE_PATH", "/api/payment/create")
PAYMENT_CAPTURE_PATH = os.getenv("PAYMENT_CAPTURE_PATH", "/api/payment/capture")
REGISTER_PATH = os.getenv("REGISTER_PATH", "/api/auth/register")

# Origin used to build returnUrl/cancelUrl. Empty -> taken from the incoming request.
PUBLIC_ORIGIN = os.getenv("PUBLIC_ORIGIN", "").rstrip("/")

TOKEN_COOKIE = os.getenv("TOKEN_COOKIE", "token")
ORDER_ID_COOKIE = "orderId"
PAYPAL_ORDER_ID_COOKIE = "paypalOrderId"

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_JSON = os.getenv("LOG_JSON", "1") == "1"


def _read_timeout(raw: str) -> Optional[float]:
    # unset / empty / "0" -> wait for the backend as long as it takes
    if not raw:
        return None
    value = float(raw)
    return value if value > 0 else None


BACKEND_TIMEOUT = _read_timeout(os.getenv("BACKEND_TIMEOUT", ""))


def backend_url(path: str) -> str:
    return f"{BACKEND_URL}{path}"
