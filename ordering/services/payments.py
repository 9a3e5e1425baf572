"""
Ordering Service — Payment gateway client (Razorpay Orders API)

Creates the gateway-side order the checkout widget pays against. Amounts
arrive in rupees and are sent in paise.
"""
import json
import logging
import time
from typing import Any

import httpx

from ordering.core.config import get_settings
from ordering.core.errors import OrderingError
from ordering.schemas.payment import PaymentOrderRequest, PaymentOrderResponse

settings = get_settings()
logger = logging.getLogger(__name__)


class PaymentGatewayError(OrderingError):
    status_code = 500
    code = "payment_gateway_error"


class PaymentGatewayNotConfigured(PaymentGatewayError):
    code = "payment_gateway_not_configured"


class RazorpayClient:
    def __init__(
        self,
        key_id: str | None = None,
        key_secret: str | None = None,
        base_url: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.key_id = settings.RAZORPAY_KEY_ID if key_id is None else key_id
        self.key_secret = settings.RAZORPAY_KEY_SECRET if key_secret is None else key_secret
        self.base_url = base_url or settings.RAZORPAY_API_URL
        self.transport = transport

    @property
    def configured(self) -> bool:
        return bool(self.key_id and self.key_secret)

    async def create_order(self, amount_minor: int, currency: str, receipt: str, notes: dict[str, Any]) -> dict:
        if not self.configured:
            raise PaymentGatewayNotConfigured("Payment gateway configuration missing")

        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                auth=(self.key_id, self.key_secret),
                timeout=settings.HTTP_TIMEOUT_SECONDS,
                transport=self.transport,
            ) as client:
                response = await client.post(
                    "/orders",
                    json={"amount": amount_minor, "currency": currency, "receipt": receipt, "notes": notes},
                )
                response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            logger.error("Razorpay rejected order creation: %s %s", exc.response.status_code, exc.response.text[:200])
            raise PaymentGatewayError("Failed to create order", details=f"gateway status {exc.response.status_code}")
        except httpx.RequestError as exc:
            logger.error("Razorpay unreachable: %s", exc)
            raise PaymentGatewayError("Failed to create order", details=str(exc))

        try:
            created = response.json()
            return {"id": created["id"], "amount": created["amount"], "currency": created["currency"]}
        except (ValueError, KeyError, TypeError) as exc:
            logger.error("Unreadable Razorpay order response: %s", response.text[:200])
            raise PaymentGatewayError("Failed to create order", details=f"unexpected gateway response: {exc!r}")


def get_payment_gateway() -> RazorpayClient:
    return RazorpayClient()


async def create_payment_order(payload: PaymentOrderRequest, gateway: RazorpayClient) -> PaymentOrderResponse:
    """payload must already be checked for missing fields."""
    user = payload.user_details or {}
    created = await gateway.create_order(
        amount_minor=round(payload.amount * 100),
        currency=payload.currency or settings.PAYMENT_CURRENCY,
        receipt=f"order_{int(time.time() * 1000)}",
        notes={
            "visitTime": payload.visit_time,
            "userEmail": user.get("email"),
            "userName": user.get("name"),
            "userPhone": user.get("phone"),
            "items": json.dumps(payload.items),
        },
    )
    return PaymentOrderResponse(order_id=created["id"], amount=created["amount"], currency=created["currency"])
