import time
import uuid
import logging
from fastapi import Request

logger = logging.getLogger("access")

REQUEST_ID_HEADER = "X-Request-ID"


async def request_logging_middleware(request: Request, call_next):
    request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:12]
    start_time = time.perf_counter()

    response = await call_next(request)

    process_time = (time.perf_counter() - start_time) * 1000
    user = getattr(request.state, "user", None)

    logger.info(
        "",
        extra={
            "request_id": request_id,
            "client_addr": request.client.host if request.client else "unknown",
            "user": user.email if user else "-",
            "method": request.method,
            "path": request.url.path,
            "status_code": response.status_code,
            "process_time_ms": round(process_time, 2),
        },
    )

    response.headers[REQUEST_ID_HEADER] = request_id
    return response
