"""Error handling middleware and exception handlers."""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
import structlog

from credit_ledger.domain.exceptions import (
    AlreadySettledException,
    ApprovalRejectedException,
    DomainException,
    InvalidInputException,
    NotFoundException,
    OperationNotPermittedException,
    PersistenceUnavailableException,
)
from .request_context import get_request_id

logger = structlog.get_logger(__name__)


def _error_response(status_code: int, exc: DomainException, **extra) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": exc.code,
            "message": exc.message,
            "request_id": get_request_id(),
            **extra,
        },
    )


def error_handler_middleware(app: FastAPI) -> None:
    """
    Register exception handlers with the FastAPI app.

    Maps domain exceptions to appropriate HTTP responses.
    """

    @app.exception_handler(InvalidInputException)
    async def invalid_input_handler(
        request: Request,
        exc: InvalidInputException,
    ) -> JSONResponse:
        """Handle invalid input errors."""
        return _error_response(400, exc)

    @app.exception_handler(NotFoundException)
    async def not_found_handler(
        request: Request,
        exc: NotFoundException,
    ) -> JSONResponse:
        """Handle unknown buyers, transactions and challenges."""
        return _error_response(404, exc)

    @app.exception_handler(ApprovalRejectedException)
    async def approval_rejected_handler(
        request: Request,
        exc: ApprovalRejectedException,
    ) -> JSONResponse:
        """Handle rejected, expired, exhausted or declined approvals."""
        return _error_response(403, exc, attempts_remaining=exc.attempts_remaining)

    @app.exception_handler(OperationNotPermittedException)
    async def not_permitted_handler(
        request: Request,
        exc: OperationNotPermittedException,
    ) -> JSONResponse:
        """Handle disabled administrative operations."""
        return _error_response(403, exc)

    @app.exception_handler(AlreadySettledException)
    async def already_settled_handler(
        request: Request,
        exc: AlreadySettledException,
    ) -> JSONResponse:
        """Handle repeated settlement of the same transaction."""
        return _error_response(409, exc)

    @app.exception_handler(PersistenceUnavailableException)
    async def persistence_unavailable_handler(
        request: Request,
        exc: PersistenceUnavailableException,
    ) -> JSONResponse:
        """Handle ledger storage write failures."""
        logger.error(
            "persistence_unavailable",
            request_id=get_request_id(),
            operation=exc.operation,
        )
        return JSONResponse(
            status_code=503,
            content={
                "error": exc.code,
                "message": "The change was not saved. Please try again later.",
                "request_id": get_request_id(),
            },
        )

    @app.exception_handler(DomainException)
    async def domain_exception_handler(
        request: Request,
        exc: DomainException,
    ) -> JSONResponse:
        """Handle generic domain exceptions."""
        logger.warning(
            "domain_exception",
            request_id=get_request_id(),
            code=exc.code,
            message=exc.message,
        )
        return _error_response(400, exc)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.exception(
            "unhandled_exception",
            request_id=get_request_id(),
            error=str(exc),
            error_type=type(exc).__name__,
        )
        return JSONResponse(
            status_code=500,
            content={
                "error": "INTERNAL_ERROR",
                "message": "An unexpected error occurred.",
                "request_id": get_request_id(),
            },
        )
