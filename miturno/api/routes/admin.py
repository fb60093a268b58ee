from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from miturno.api.deps import Capability, require
from miturno.api.schemas.admin import DashboardResponse, ProfileUpdateRequest
from miturno.core.db import get_session
from miturno.models.business import Business, BusinessPublic, BusinessUpdate
from miturno.models.user import User, UserPublic, UserUpdate
from miturno.services.auth_service import user_to_public
from miturno.services.business_service import business_to_public, get_business, update_business
from miturno.services.dashboard_service import get_dashboard_stats
from miturno.services.employee_service import update_user_profile

router = APIRouter(prefix="/admin", tags=["admin"])


async def _own_business(session: AsyncSession, user: User) -> Business:
    business = await get_business(session, user.business_id)
    if not business:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Business not found")
    return business


@router.get("/profile", response_model=UserPublic)
async def get_profile(
    current_user: User = Depends(require(Capability.EDIT_OWN_PROFILE, Capability.MANAGE_BUSINESS)),
) -> UserPublic:
    return user_to_public(current_user)


@router.put("/profile", response_model=UserPublic)
async def update_profile(
    body: ProfileUpdateRequest,
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(require(Capability.EDIT_OWN_PROFILE, Capability.MANAGE_BUSINESS)),
) -> UserPublic:
    user = await update_user_profile(
        session, current_user, UserUpdate(**body.model_dump(exclude_unset=True))
    )
    return user_to_public(user)


@router.get("/business", response_model=BusinessPublic)
async def get_own_business(
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(require(Capability.MANAGE_BUSINESS)),
) -> BusinessPublic:
    return business_to_public(await _own_business(session, current_user))


@router.put("/business", response_model=BusinessPublic)
async def update_own_business(
    body: BusinessUpdate,
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(require(Capability.MANAGE_BUSINESS)),
) -> BusinessPublic:
    """Update name/address/phone; a new name also regenerates the public slug."""
    if body.name is not None and not body.name.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Business name is required",
        )
    business = await _own_business(session, current_user)
    return business_to_public(await update_business(session, business, body))


@router.get("/dashboard", response_model=DashboardResponse)
async def dashboard(
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(require(Capability.VIEW_DASHBOARD)),
) -> DashboardResponse:
    stats = await get_dashboard_stats(session, current_user.business_id)
    return DashboardResponse(**vars(stats))
