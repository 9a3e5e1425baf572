"""
Ordering Service — Domain errors and their HTTP mapping
"""
import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class OrderingError(Exception):
    """Base class for errors raised by the ordering services."""

    status_code = status.HTTP_400_BAD_REQUEST
    code = "ordering_error"

    def __init__(self, message: str, details: str | None = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        body = {"message": self.message, "code": self.code}
        if self.details is not None:
            body["details"] = self.details
        return body


class NotFound(OrderingError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"


class StoreError(OrderingError):
    """The database rejected or failed a write."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "store_error"

    def __init__(self, message: str, details: str | None = None, code: str | None = None):
        super().__init__(message, details)
        if code:
            self.code = code


class InvalidTransition(OrderingError):
    status_code = status.HTTP_409_CONFLICT
    code = "invalid_transition"


class CartError(OrderingError):
    code = "cart_error"


class PerItemLimitExceeded(CartError):
    code = "per_item_limit"


class CartLimitExceeded(CartError):
    code = "cart_limit"


class InsufficientStock(CartError):
    code = "insufficient_stock"


class CartItemNotFound(CartError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "cart_item_not_found"


async def ordering_error_handler(request: Request, exc: OrderingError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s (%s)", request.method, request.url.path, exc.message, exc.details)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(OrderingError, ordering_error_handler)
