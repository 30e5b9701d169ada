# marketcart/core/errors.py
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class CartError(Exception):
    """
    Base class for cart failures.

    Carries the HTTP status the API answers with, so the same classes are
    raised by the server services and by the client when it decodes an
    error envelope.
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Cart operation failed"

    def __init__(self, message: str | None = None, status_code: int | None = None):
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class NotFoundError(CartError):
    """Product or cart line does not exist."""

    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class InsufficientStockError(CartError):
    """Requested or target quantity exceeds remaining stock."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Insufficient stock"


class UnauthorizedError(CartError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Authentication required"


class MalformedPersistedStateError(CartError):
    """Locally persisted cart blob could not be parsed."""

    default_message = "Persisted cart state is malformed"


def error_for_status(status_code: int, message: str | None = None) -> CartError:
    """
    Map an HTTP error status (from an error envelope) onto the cart taxonomy.
    """
    if status_code == status.HTTP_404_NOT_FOUND:
        return NotFoundError(message)
    if status_code == status.HTTP_400_BAD_REQUEST:
        return InsufficientStockError(message)
    if status_code == status.HTTP_401_UNAUTHORIZED:
        return UnauthorizedError(message)
    return CartError(message, status_code=status_code)


def _failure(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "message": message},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Render every failure as the `{success: false, message}` envelope.
    """

    @app.exception_handler(CartError)
    async def handle_cart_error(request: Request, exc: CartError):
        return _failure(exc.status_code, exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(request: Request, exc: StarletteHTTPException):
        return _failure(exc.status_code, str(exc.detail))

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
        logger.info("Rejected request %s %s: %s", request.method, request.url.path, message)
        return _failure(status.HTTP_422_UNPROCESSABLE_ENTITY, message)
