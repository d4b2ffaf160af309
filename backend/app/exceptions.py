from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard error response schema."""

    error: str
    detail: str | None = None
    status_code: int


class AppError(Exception):
    """Base application exception."""

    code: str | None = None

    def __init__(self, message: str, status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)

    @property
    def error_code(self) -> str:
        return self.code or type(self).__name__


class RequestNotFoundError(AppError):
    """The approval request does not exist or is not visible to the caller."""

    code = "NotFound"

    def __init__(self, message: str = "Approval request not found") -> None:
        super().__init__(message, status_code=status.HTTP_404_NOT_FOUND)


class NoApproverFoundError(AppError):
    """No profile in the organization chain (or admin fallback) can approve."""

    code = "NoApproverFound"

    def __init__(self, message: str = "No approver could be found for this request") -> None:
        super().__init__(message, status_code=status.HTTP_422_UNPROCESSABLE_ENTITY)


class AlreadyResolvedError(AppError):
    """The request has already left the PENDING state."""

    code = "AlreadyResolved"

    def __init__(self, message: str = "This request has already been resolved") -> None:
        super().__init__(message, status_code=status.HTTP_409_CONFLICT)


class UnauthorizedActionError(AppError):
    """An action token did not match the request it claims to act on."""

    code = "Unauthorized"

    def __init__(self, message: str = "Invalid or expired approval link") -> None:
        super().__init__(message, status_code=status.HTTP_401_UNAUTHORIZED)


class NotificationFailedError(AppError):
    """Email delivery failed. Never unwinds the request that triggered it."""

    code = "NotificationFailed"

    def __init__(self, message: str = "Notification could not be delivered") -> None:
        super().__init__(message, status_code=status.HTTP_502_BAD_GATEWAY)


class AccountProviderError(AppError):
    """The authentication provider refused or failed an account operation."""

    code = "AccountProviderFailed"

    def __init__(self, message: str = "Authentication provider request failed") -> None:
        super().__init__(message, status_code=status.HTTP_502_BAD_GATEWAY)


class MaterializationFailedError(AppError):
    """The post-approval side effect could not be written."""

    code = "MaterializationFailed"

    def __init__(self, message: str = "Approved request could not be materialized") -> None:
        super().__init__(message, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


async def _app_exception_handler(request: Request, exc: AppError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(
            error=exc.error_code,
            detail=exc.message,
            status_code=exc.status_code,
        ).model_dump(),
    )


async def _validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=ErrorResponse(
            error="ValidationError",
            detail=str(exc.errors()),
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        ).model_dump(),
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Register exception handlers on the application."""
    app.add_exception_handler(AppError, _app_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)  # type: ignore[arg-type]
