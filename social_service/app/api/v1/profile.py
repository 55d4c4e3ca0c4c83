from __future__ import annotations

from fastapi import APIRouter, Depends

from ..dependencies import CurrentUser
from ..schemas.common import MessageResponse
from ..schemas.profile import ProfileResponse, UpdateProfileRequest
from ...models.user import UserProfileUpdate
from ...services.profile_service import ProfileService, get_profile_service


router = APIRouter()


@router.get("", response_model=ProfileResponse, summary="내 프로필 조회")
def get_my_profile(
    identity: CurrentUser,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileResponse:
    user = service.get_profile(identity)
    return ProfileResponse.from_domain(user)


@router.patch("", response_model=MessageResponse, summary="내 프로필 수정")
def update_my_profile(
    body: UpdateProfileRequest,
    identity: CurrentUser,
    service: ProfileService = Depends(get_profile_service),
) -> MessageResponse:
    service.update_profile(identity, UserProfileUpdate(**body.model_dump()))
    return MessageResponse(message="Profile updated successfully")
