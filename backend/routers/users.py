# routers/users.py — Profile of the authenticated user
from fastapi import APIRouter, Depends

from auth import get_current_user, CurrentUser
from routers.auth import get_user_service
from schemas import UserOut, ProfileUpdate
from services.users import UserService

router = APIRouter(prefix="/api/v1/users", tags=["Users"])


@router.get("/profile", response_model=UserOut)
async def get_profile(
    user: CurrentUser = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    return await service.get_profile(user.external_id)


@router.put("/profile", response_model=UserOut)
async def update_profile(
    data: ProfileUpdate,
    user: CurrentUser = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    return await service.update_profile(user.external_id, data)
