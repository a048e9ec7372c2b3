from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from fabtrack.core.db import get_db
from fabtrack.core.state import get_user_directory
from fabtrack.models.users.user_models import UserSession
from fabtrack.schemas.auth.auth_schemas import (
    ChangePasswordRequest,
    LoginRequest,
    SessionOut,
    SessionUser,
    TokenResponse,
)
from fabtrack.services.auth.auth_service import (
    change_password,
    login_user,
    logout_user,
)
from fabtrack.services.directory.user_directory import UserDirectory
from fabtrack.utils.get_user import get_current_user
from fabtrack.utils.logger import get_logger
from fabtrack.utils.response import APIResponse, success_response

logger = get_logger("auth.router")

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/login", response_model=APIResponse[TokenResponse])
async def login(
    payload: LoginRequest,
    db: AsyncSession = Depends(get_db),
    directory: UserDirectory = Depends(get_user_directory),
):
    logger.info("Login attempt", extra={"email": payload.email})

    tokens = await login_user(db, directory, payload.email, payload.password)

    return success_response("Login successful", tokens)


@router.get("/session", response_model=APIResponse[SessionOut])
async def current_session(
    current_user: UserSession = Depends(get_current_user),
):
    return success_response(
        "Session restored",
        SessionOut(
            user=SessionUser.model_validate(current_user),
            created_at=current_user.created_at,
        ),
    )


@router.post("/logout")
async def logout(
    db: AsyncSession = Depends(get_db),
    current_user: UserSession = Depends(get_current_user),
):
    logger.info("Logout request", extra={"email": current_user.email})

    await logout_user(db, current_user)

    return success_response("Logged out successfully")


@router.post("/change-password")
async def change_password_api(
    payload: ChangePasswordRequest,
    db: AsyncSession = Depends(get_db),
    current_user: UserSession = Depends(get_current_user),
):
    await change_password(
        db,
        current_user,
        payload.current_password,
        payload.new_password,
    )

    return success_response("Password updated successfully")
