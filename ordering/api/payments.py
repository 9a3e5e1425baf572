"""
Ordering Service — Payment-order creation
"""
import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from ordering.schemas.payment import PaymentOrderRequest, PaymentOrderResponse
from ordering.services.payments import (
    PaymentGatewayError,
    PaymentGatewayNotConfigured,
    RazorpayClient,
    create_payment_order,
    get_payment_gateway,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/payments", tags=["payments"])


@router.post("/orders", response_model=PaymentOrderResponse)
async def create_gateway_order(
    payload: PaymentOrderRequest,
    gateway: RazorpayClient = Depends(get_payment_gateway),
):
    """Create a Razorpay order for amount x 100 paise."""
    if not gateway.configured:
        logger.error("Razorpay keys are missing from the environment")
        return JSONResponse(status_code=500, content={"error": "Payment gateway configuration missing"})

    missing = payload.missing_fields()
    if missing:
        return JSONResponse(status_code=400, content={"error": "Missing required fields", "fields": missing})

    try:
        return await create_payment_order(payload, gateway)
    except PaymentGatewayNotConfigured:
        return JSONResponse(status_code=500, content={"error": "Payment gateway configuration missing"})
    except PaymentGatewayError as exc:
        logger.error("Error creating payment order: %s", exc.details)
        return JSONResponse(status_code=500, content={"error": "Failed to create order"})
