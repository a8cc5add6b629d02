"""Error types and the handlers that turn them into HTTP responses."""
import logging
from typing import Optional

from fastapi import Request, status
from fastapi.responses import JSONResponse

from files_gateway.schemas import ErrorResponse

logger = logging.getLogger(__name__)


class GatewayError(Exception):
    """
    A failure caught at a handler boundary.

    ``message`` describes the operation that failed; ``error`` carries the raw
    text of the underlying exception, relayed to the client unchanged.
    """

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        error: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.error = error

    @classmethod
    def from_exception(cls, message: str, exc: BaseException) -> "GatewayError":
        """Wrap a storage or transport failure as a 500."""
        return cls(message, error=str(exc))


def _render(status_code: int, message: str, error: Optional[str]) -> JSONResponse:
    body = ErrorResponse(message=message, error=error).model_dump(exclude_none=True)
    return JSONResponse(status_code=status_code, content=body)


async def handle_gateway_error(request: Request, exc: GatewayError) -> JSONResponse:
    """Render a :class:`GatewayError` as ``{message, error}``."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}: {exc.error}")
    else:
        logger.warning(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
    return _render(exc.status_code, exc.message, exc.error)


async def handle_broad_exceptions(request: Request, call_next):
    """Handle any exception that escapes a route and isn't a :class:`GatewayError`."""
    try:
        return await call_next(request)
    except Exception as e:
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return _render(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error", str(e))
