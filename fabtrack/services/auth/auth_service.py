from datetime import datetime, timezone
import secrets

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from fabtrack.models.users.user_models import AdminCredential, UserSession
from fabtrack.models.enums.user_role import UserRole
from fabtrack.core.security import hash_password, verify_password, create_access_token
from fabtrack.core.config import (
    ADMIN_EMAIL,
    ADMIN_DEFAULT_PASSWORD,
    CLIENT_DEFAULT_PASSWORD,
    MIN_PASSWORD_LENGTH,
)
from fabtrack.core.exceptions import AppException, AuthenticationFailure
from fabtrack.constants.error_codes import ErrorCode
from fabtrack.constants.activity_codes import ActivityCode
from fabtrack.schemas.auth.auth_schemas import SessionUser, TokenResponse
from fabtrack.services.directory.user_directory import UserDirectory
from fabtrack.utils.activity_helpers import emit_activity
from fabtrack.utils.logger import get_logger

logger = get_logger("auth.service")


# =====================================================
# ADMIN CREDENTIAL
# =====================================================
async def _get_admin(db: AsyncSession) -> AdminCredential | None:
    result = await db.execute(
        select(AdminCredential).where(AdminCredential.email == ADMIN_EMAIL)
    )
    return result.scalars().first()


async def ensure_admin_credential(db: AsyncSession) -> AdminCredential:
    admin = await _get_admin(db)
    if admin:
        return admin

    admin = AdminCredential(
        email=ADMIN_EMAIL,
        password_hash=hash_password(ADMIN_DEFAULT_PASSWORD),
    )
    db.add(admin)
    await db.commit()

    logger.info("Admin credential seeded", extra={"email": ADMIN_EMAIL})
    return admin


# =====================================================
# LOGIN
# =====================================================
async def _authenticate(
    db: AsyncSession,
    directory: UserDirectory,
    email: str,
    password: str,
) -> SessionUser:
    if email == ADMIN_EMAIL:
        admin = await _get_admin(db)
        if not admin or not verify_password(password, admin.password_hash):
            logger.warning("Invalid admin password", extra={"email": email})
            raise AuthenticationFailure("Incorrect password. Please try again.")
        return SessionUser(email=admin.email, name="Admin", role=UserRole.admin)

    client = await directory.find_client(email)
    if not client:
        logger.warning("Unknown client email", extra={"email": email})
        raise AuthenticationFailure(
            "Email not found. Please check your email or contact support."
        )

    if not secrets.compare_digest(password, CLIENT_DEFAULT_PASSWORD):
        logger.warning("Invalid client password", extra={"email": email})
        raise AuthenticationFailure("Incorrect password. Please try again.")

    return SessionUser(email=client.email.lower(), name=client.name, role=UserRole.client)


async def login_user(
    db: AsyncSession,
    directory: UserDirectory,
    email: str,
    password: str,
) -> TokenResponse:
    email = email.strip().lower()
    logger.info("Authenticating user", extra={"email": email})

    user = await _authenticate(db, directory, email, password)

    session = UserSession(
        id=secrets.token_urlsafe(32),
        email=user.email,
        name=user.name,
        role=user.role.value,
        last_seen_at=datetime.now(timezone.utc),
    )
    db.add(session)

    await emit_activity(
        db=db,
        actor_email=user.email,
        actor_role=user.role.value,
        code=ActivityCode.LOGIN,
    )

    await db.commit()

    logger.info("Login successful", extra={"email": user.email, "role": user.role.value})

    return TokenResponse(
        access_token=create_access_token(
            subject=user.email,
            session_id=session.id,
            role=user.role.value,
        ),
        user=user,
    )


# =====================================================
# LOGOUT
# =====================================================
async def logout_user(db: AsyncSession, session: UserSession):
    logger.info("Logging out user", extra={"email": session.email})

    await db.delete(session)

    await emit_activity(
        db=db,
        actor_email=session.email,
        actor_role=session.role,
        code=ActivityCode.LOGOUT,
    )

    await db.commit()


# =====================================================
# PASSWORD
# =====================================================
async def change_password(
    db: AsyncSession,
    session: UserSession,
    current_password: str,
    new_password: str,
):
    if session.role != UserRole.admin.value:
        raise AppException(
            400,
            "Client password management is disabled. Please use the default password.",
            ErrorCode.PASSWORD_CHANGE_DISABLED,
        )

    if len(new_password) < MIN_PASSWORD_LENGTH:
        raise AppException(
            400,
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters long",
            ErrorCode.PASSWORD_TOO_SHORT,
        )

    admin = await _get_admin(db)
    if not admin or not verify_password(current_password, admin.password_hash):
        raise AuthenticationFailure("Current password is incorrect")

    admin.password_hash = hash_password(new_password)

    await emit_activity(
        db=db,
        actor_email=session.email,
        actor_role=session.role,
        code=ActivityCode.CHANGE_PASSWORD,
    )

    await db.commit()

    logger.info("Admin password changed", extra={"email": session.email})
