from fastapi import Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from fabtrack.constants.error_codes import ErrorCode
from fabtrack.core.exceptions import AppException
import logging

logger = logging.getLogger(__name__)


# -------------------------
# APP EXCEPTIONS
# -------------------------
async def app_exception_handler(request: Request, exc: AppException):
    if exc.status_code >= 500:
        logger.error(
            "Request failed: %s",
            exc.detail,
            extra={"path": request.url.path, "error_code": exc.error_code},
        )
    else:
        logger.info(
            "Request rejected: %s",
            exc.detail,
            extra={"path": request.url.path, "error_code": exc.error_code},
        )

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "message": exc.detail,
            "error_code": exc.error_code,
            "details": exc.details,
        },
    )


# -------------------------
# FASTAPI VALIDATION
# -------------------------
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
):
    return JSONResponse(
        status_code=422,
        content={
            "success": False,
            "message": "Invalid request data",
            "error_code": ErrorCode.VALIDATION_ERROR,
            "details": jsonable_encoder(exc.errors()),
        },
    )


# -------------------------
# HTTP EXCEPTIONS (mapped)
# -------------------------
HTTP_STATUS_TO_ERROR_CODE = {
    400: ErrorCode.VALIDATION_ERROR,
    401: ErrorCode.UNAUTHORIZED,
    403: ErrorCode.PERMISSION_DENIED,
    404: ErrorCode.NOT_FOUND,
    409: ErrorCode.CONFLICT,
    422: ErrorCode.VALIDATION_ERROR,
}


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
):
    error_code = HTTP_STATUS_TO_ERROR_CODE.get(
        exc.status_code,
        ErrorCode.INTERNAL_ERROR,
    )

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "message": exc.detail,
            "error_code": error_code,
            "details": None,
        },
    )


# -------------------------
# DB ERRORS
# -------------------------
async def database_error_handler(
    request: Request, exc: SQLAlchemyError
):
    logger.exception("Database error", extra={"path": request.url.path})

    return JSONResponse(
        status_code=503,
        content={
            "success": False,
            "message": "Order store is unavailable. Please try again.",
            "error_code": ErrorCode.BACKING_SERVICE_FAILURE,
            "details": None,
        },
    )


# -------------------------
# LAST RESORT
# -------------------------
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(
        "Unhandled exception",
        extra={
            "path": request.url.path,
            "method": request.method,
        },
    )

    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "message": "Something went wrong. Please try again.",
            "error_code": ErrorCode.INTERNAL_ERROR,
            "details": None,
        },
    )
