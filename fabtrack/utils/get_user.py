from datetime import datetime, timezone

from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from fabtrack.core.db import get_db
from fabtrack.core.exceptions import AppException
from fabtrack.core.security import decode_access_token
from fabtrack.constants.error_codes import ErrorCode
from fabtrack.models.users.user_models import UserSession
from fabtrack.utils.logger import get_logger

logger = get_logger("auth.guard")


async def get_current_user(
    request: Request,
    authorization: str | None = Header(None),
    db: AsyncSession = Depends(get_db),
) -> UserSession:
    if not authorization or not authorization.startswith("Bearer "):
        logger.warning("Missing bearer token")
        raise AppException(401, "Invalid authorization header", ErrorCode.UNAUTHORIZED)

    token = authorization.split("Bearer ")[1].strip()
    payload = decode_access_token(token)

    session = await db.get(UserSession, payload["sid"])

    if not session or session.email != payload.get("sub"):
        logger.warning("Session not found", extra={"email": payload.get("sub")})
        raise AppException(401, "Session expired", ErrorCode.SESSION_EXPIRED)

    session.last_seen_at = datetime.now(timezone.utc)
    await db.commit()

    request.state.user = session
    return session
