# storefront/pages.py
import logging
from pathlib import Path
from typing import AsyncGenerator, Optional

import httpx
from fastapi import APIRouter, Depends, Form, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from . import config
from .checkout import CheckoutForm
from .errors import LOGIN_REQUIRED_MESSAGE, classify_error
from .payments import capture_payment
from .schemas import ShippingAddress

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
router = APIRouter()


async def get_http_client() -> AsyncGenerator[httpx.AsyncClient, None]:
    async with httpx.AsyncClient(timeout=config.BACKEND_TIMEOUT) as client:
        yield client


def get_token(request: Request) -> Optional[str]:
    """Bearer credential from the `token` cookie, or from the Authorization header."""
    token = request.cookies.get(config.TOKEN_COOKIE)
    if token:
        return token
    auth = request.headers.get("Authorization")
    if auth and auth.lower().startswith("bearer "):
        return auth.split(None, 1)[1].strip() or None
    return None


def public_origin(request: Request) -> str:
    return config.PUBLIC_ORIGIN or str(request.base_url).rstrip("/")


def _render_form(request: Request, form: CheckoutForm, status_code: int = 200):
    ctx = {"request": request, "form": form, "address": form.address}
    return templates.TemplateResponse(request, "checkout.html", ctx, status_code=status_code)


@router.get("/health")
async def health():
    return {"status": "ok"}


# 🧾 Форма оформления оплаты
@router.get("/checkout", response_class=HTMLResponse)
async def checkout_page(request: Request):
    return _render_form(request, CheckoutForm(origin=public_origin(request)))


@router.post("/checkout", response_class=HTMLResponse)
async def checkout_submit(
    request: Request,
    street: str = Form(""),
    city: str = Form(""),
    state: str = Form(""),
    zipCode: str = Form(""),
    country: str = Form("USA"),
    phoneNumber: str = Form(""),
    client: httpx.AsyncClient = Depends(get_http_client),
):
    address = ShippingAddress(
        street=street,
        city=city,
        state=state,
        zipCode=zipCode,
        country=country or "USA",
        phoneNumber=phoneNumber,
    )
    form = CheckoutForm(origin=public_origin(request), address=address)
    outcome = await form.submit(client, get_token(request))

    if not outcome.ok:
        return _render_form(request, form)

    response = RedirectResponse(outcome.redirect_url, status_code=status.HTTP_303_SEE_OTHER)
    # no max_age: cookies live as long as the browser session
    response.set_cookie(config.ORDER_ID_COOKIE, str(outcome.order_id), path="/")
    response.set_cookie(config.PAYPAL_ORDER_ID_COOKIE, outcome.paypal_order_id, path="/")
    return response


# ✅ Возврат с PayPal после подтверждения
@router.get("/payment/success", response_class=HTMLResponse)
async def payment_success_page(request: Request, client: httpx.AsyncClient = Depends(get_http_client)):
    order_id = request.cookies.get(config.ORDER_ID_COOKIE)
    paypal_order_id = request.cookies.get(config.PAYPAL_ORDER_ID_COOKIE)
    token = get_token(request)

    ctx = {"request": request, "order_id": order_id, "paypal_order_id": paypal_order_id, "result": None, "error": None}
    if not order_id or not paypal_order_id:
        ctx["error"] = "No pending payment found. Please start checkout again."
    elif not token:
        ctx["error"] = LOGIN_REQUIRED_MESSAGE
    else:
        try:
            # backend expects a numeric order id
            capture_order_id = int(order_id) if order_id.isdecimal() else order_id
            ctx["result"] = await capture_payment(client, token, capture_order_id, paypal_order_id)
        except Exception as exc:
            ctx["error"] = classify_error(exc)
            logger.error("capture failed", extra={"order_id": order_id, "error": ctx["error"]})

    response = templates.TemplateResponse(request, "payment_success.html", ctx)
    if ctx["result"] is not None:
        response.delete_cookie(config.ORDER_ID_COOKIE, path="/")
        response.delete_cookie(config.PAYPAL_ORDER_ID_COOKIE, path="/")
    return response


# ❌ Покупатель отменил оплату на стороне PayPal
@router.get("/payment/cancel", response_class=HTMLResponse)
async def payment_cancel_page(request: Request):
    ctx = {"request": request, "order_id": request.cookies.get(config.ORDER_ID_COOKIE)}
    response = templates.TemplateResponse(request, "payment_cancel.html", ctx)
    response.delete_cookie(config.ORDER_ID_COOKIE, path="/")
    response.delete_cookie(config.PAYPAL_ORDER_ID_COOKIE, path="/")
    return response
