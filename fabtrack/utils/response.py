# fabtrack/utils/response.py

from typing import TypeVar, Generic, Optional, Dict, Any
from pydantic import BaseModel

T = TypeVar("T")


def success_response(message: str, data: Optional[T] = None) -> Dict[str, Any]:
    return {
        "success": True,
        "message": message,
        "data": data,
    }


class APIResponse(BaseModel, Generic[T]):
    success: bool = True
    message: str
    data: Optional[T] = None


class ErrorResponse(BaseModel):
    success: bool = False
    message: str
    error_code: str
    details: Optional[Any] = None


# documented on every router; bodies come from core.error_handlers
ERROR_RESPONSES = {
    401: {"model": ErrorResponse, "description": "Not logged in or session expired"},
    403: {"model": ErrorResponse, "description": "Not allowed for this user"},
    404: {"model": ErrorResponse, "description": "Order or client not found"},
    409: {"model": ErrorResponse, "description": "Stage precondition not met"},
    503: {"model": ErrorResponse, "description": "Order store or directory unavailable"},
}
