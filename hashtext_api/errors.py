"""
Error taxonomy and the responses it maps to.

Failures carry no body, except PaymentRequired which answers with a fixed
plain-text message. Internal errors never expose their cause.
"""

import structlog
from fastapi import Request, status
from fastapi.responses import JSONResponse, Response

logger = structlog.get_logger()

OUT_OF_CREDIT_MESSAGE = "You are out of credit. Please pay us more money."


class HashTextJSONResponse(JSONResponse):
    """JSON response that states its charset, as clients of the service expect."""

    media_type = "application/json; charset=UTF-8"


class HashTextError(Exception):
    """Base application error; status_code is what the caller receives."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str = ""):
        self.message = message
        super().__init__(message)


class UnauthorizedError(HashTextError):
    status_code = status.HTTP_401_UNAUTHORIZED


class BadRequestError(HashTextError):
    status_code = status.HTTP_400_BAD_REQUEST


class PaymentRequiredError(HashTextError):
    status_code = status.HTTP_402_PAYMENT_REQUIRED

    def __init__(self, message: str = OUT_OF_CREDIT_MESSAGE):
        super().__init__(message)


class NotFoundError(HashTextError):
    status_code = status.HTTP_404_NOT_FOUND


class InternalError(HashTextError):
    """A storage or serialization fault, already logged where it happened."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


def error_response(exc: HashTextError) -> Response:
    if isinstance(exc, PaymentRequiredError):
        return Response(
            content=exc.message,
            status_code=exc.status_code,
            media_type="text/plain; charset=UTF-8",
        )
    return Response(status_code=exc.status_code)


async def hashtext_exception_handler(request: Request, exc: HashTextError) -> Response:
    return error_response(exc)


async def generic_exception_handler(request: Request, exc: Exception) -> Response:
    logger.exception("Unhandled exception", path=request.url.path, exc_info=exc)
    return Response(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)
