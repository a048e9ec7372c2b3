import enum


class ErrorCode(str, enum.Enum):
    # generic
    VALIDATION_ERROR = "VALIDATION_ERROR"
    UNAUTHORIZED = "UNAUTHORIZED"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    INTERNAL_ERROR = "INTERNAL_ERROR"

    # auth
    AUTHENTICATION_FAILED = "AUTHENTICATION_FAILED"
    SESSION_EXPIRED = "SESSION_EXPIRED"
    PASSWORD_CHANGE_DISABLED = "PASSWORD_CHANGE_DISABLED"
    PASSWORD_TOO_SHORT = "PASSWORD_TOO_SHORT"

    # orders
    ORDER_NOT_FOUND = "ORDER_NOT_FOUND"
    ORDER_ACCESS_DENIED = "ORDER_ACCESS_DENIED"
    STAGE_PRECONDITION_NOT_MET = "STAGE_PRECONDITION_NOT_MET"

    # directory
    CLIENT_NOT_FOUND = "CLIENT_NOT_FOUND"

    # external services
    BACKING_SERVICE_FAILURE = "BACKING_SERVICE_FAILURE"
