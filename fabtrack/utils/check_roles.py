from fastapi import Depends
from fabtrack.core.exceptions import AuthorizationFailure
from fabtrack.models.users.user_models import UserSession
from fabtrack.utils.get_user import get_current_user


def require_role(roles: list[str]):
    async def role_checker(user: UserSession = Depends(get_current_user)):
        if user.role.lower() not in [r.lower() for r in roles]:
            raise AuthorizationFailure()
        return user
    return role_checker
