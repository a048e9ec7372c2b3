from fastapi import HTTPException
from fabtrack.constants.error_codes import ErrorCode


class AppException(HTTPException):
    def __init__(
        self,
        status_code: int,
        message: str,
        error_code: ErrorCode,
        details: dict | None = None,
    ):
        super().__init__(status_code=status_code, detail=message)
        self.error_code = error_code
        self.details = details


class AuthenticationFailure(AppException):
    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(401, message, ErrorCode.AUTHENTICATION_FAILED)


class AuthorizationFailure(AppException):
    def __init__(
        self,
        message: str = "Permission denied",
        error_code: ErrorCode = ErrorCode.PERMISSION_DENIED,
    ):
        super().__init__(403, message, error_code)


class OrderNotFound(AppException):
    def __init__(self, order_id: str):
        super().__init__(
            404,
            "Order not found",
            ErrorCode.ORDER_NOT_FOUND,
            {"order_id": order_id},
        )


class PreconditionNotMet(AppException):
    """A stage action was attempted before its required signal was given."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(409, message, ErrorCode.STAGE_PRECONDITION_NOT_MET, details)


class BackingServiceFailure(AppException):
    def __init__(self, service: str, message: str | None = None):
        super().__init__(
            503,
            message or f"{service} is unavailable. Please try again.",
            ErrorCode.BACKING_SERVICE_FAILURE,
            {"service": service},
        )
