from enum import Enum

from fastapi import Depends, Header, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from miturno.core.db import get_session
from miturno.core.security import decode_access_token
from miturno.models.user import Role, User
from miturno.services.auth_service import get_user_by_id

security = HTTPBearer(auto_error=False)


class Capability(str, Enum):
    MANAGE_BUSINESS = "manage_business"
    MANAGE_SERVICES = "manage_services"
    MANAGE_EMPLOYEES = "manage_employees"
    MANAGE_SCHEDULES = "manage_schedules"
    MANAGE_APPOINTMENTS = "manage_appointments"
    VIEW_DASHBOARD = "view_dashboard"
    VIEW_OWN_SCHEDULE = "view_own_schedule"
    VIEW_OWN_APPOINTMENTS = "view_own_appointments"
    EDIT_OWN_PROFILE = "edit_own_profile"


_EMPLOYEE_CAPABILITIES = frozenset(
    {
        Capability.VIEW_OWN_SCHEDULE,
        Capability.VIEW_OWN_APPOINTMENTS,
        Capability.EDIT_OWN_PROFILE,
    }
)

ROLE_CAPABILITIES: dict[str, frozenset[Capability]] = {
    Role.ADMIN.value: frozenset(Capability),
    Role.EMPLOYEE.value: _EMPLOYEE_CAPABILITIES,
}


def capabilities_for(role: str) -> frozenset[Capability]:
    return ROLE_CAPABILITIES.get(role, frozenset())


def refresh_header(x_refresh_token: str | None = Header(default=None, alias="X-Refresh-Token")) -> str | None:
    """Extract X-Refresh-Token header for logout/refresh endpoints."""
    return x_refresh_token


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    session: AsyncSession = Depends(get_session),
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> User:
    if not credentials or credentials.scheme.lower() != "bearer":
        raise _unauthorized("Missing or invalid authorization header")
    user_id = decode_access_token(credentials.credentials)
    if not user_id:
        raise _unauthorized("Invalid or expired token")
    try:
        uid = int(user_id)
    except ValueError:
        raise _unauthorized("Invalid token")
    user = await get_user_by_id(session, uid)
    if not user:
        raise _unauthorized("User not found")
    return user


def require(*needed: Capability):
    """Dependency that resolves the current user and checks the role grants `needed`."""

    async def guard(current_user: User = Depends(get_current_user)) -> User:
        missing = set(needed) - capabilities_for(current_user.role)
        if missing:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Not authorized for this resource",
            )
        return current_user

    return guard
