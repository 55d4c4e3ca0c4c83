from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status

from ..dependencies import SessionCookie, clear_session_cookie, set_session_cookie
from ..schemas.auth import SignInRequest
from ..schemas.common import MessageResponse
from ..schemas.profile import CreateProfileRequest
from ...services.auth_service import AuthService, get_auth_service


router = APIRouter()


@router.post(
    "/sign-in",
    response_model=MessageResponse,
    summary="로그인 (세션 쿠키 발급)",
)
def sign_in(
    body: SignInRequest,
    response: Response,
    service: AuthService = Depends(get_auth_service),
) -> MessageResponse:
    session = service.sign_in(username=body.username, password=body.password)
    set_session_cookie(response, session)
    return MessageResponse(message="Signed in successfully")


@router.post(
    "/logout",
    response_model=MessageResponse,
    summary="로그아웃 (세션 폐기 및 쿠키 삭제)",
)
def logout(
    response: Response,
    session_token: SessionCookie = None,
    service: AuthService = Depends(get_auth_service),
) -> MessageResponse:
    service.logout(session_token)
    clear_session_cookie(response)
    return MessageResponse(message="Logged out successfully")


@router.post(
    "/profile",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
    summary="프로필 생성 (가입 후 바로 세션 쿠키 발급)",
)
def create_profile(
    body: CreateProfileRequest,
    response: Response,
    service: AuthService = Depends(get_auth_service),
) -> MessageResponse:
    session = service.sign_up(
        name=body.name,
        password=body.password,
        avatar=body.avatar,
    )
    set_session_cookie(response, session)
    return MessageResponse(message="Account created successfully")
