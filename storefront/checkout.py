# storefront/checkout.py
import logging
from dataclasses import dataclass, field
from typing import Optional, Union

import httpx

from .errors import MissingTokenError, classify_error
from .payments import create_payment
from .schemas import PaymentCreationRequest, ShippingAddress

logger = logging.getLogger(__name__)


@dataclass
class CheckoutOutcome:
    redirect_url: Optional[str] = None
    order_id: Optional[Union[int, str]] = None
    paypal_order_id: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.redirect_url is not None


@dataclass
class CheckoutForm:
    """State of one checkout form plus the submission that drives it.

    ``loading`` is deliberately left on after a successful submit: the caller
    is about to send the browser to the approval page.
    """
    origin: str
    address: ShippingAddress = field(default_factory=ShippingAddress)
    loading: bool = False
    error: Optional[str] = None

    @property
    def return_url(self) -> str:
        return f"{self.origin}/payment/success"

    @property
    def cancel_url(self) -> str:
        return f"{self.origin}/payment/cancel"

    def build_request(self) -> PaymentCreationRequest:
        return PaymentCreationRequest(
            shippingAddress=self.address.model_copy(),
            currency="USD",
            returnUrl=self.return_url,
            cancelUrl=self.cancel_url,
        )

    async def submit(self, client: httpx.AsyncClient, token: Optional[str]) -> CheckoutOutcome:
        self.loading = True
        self.error = None
        logger.info("checkout submitted", extra={"has_token": bool(token)})

        try:
            if not token:
                raise MissingTokenError()
            created = await create_payment(client, token, self.build_request())
        except Exception as exc:
            message = classify_error(exc)
            logger.error("checkout failed", extra={"error_type": exc.__class__.__name__, "error": message})
            self.loading = False
            self.error = message
            return CheckoutOutcome(error=message)

        logger.info(
            "redirecting to approval page",
            extra={"order_id": str(created.orderId), "paypal_order_id": created.paypalOrderId},
        )
        return CheckoutOutcome(
            redirect_url=created.approvalUrl,
            order_id=created.orderId,
            paypal_order_id=created.paypalOrderId,
        )
