"""
Auth API Endpoints.

Sign-in for admins, ushers and university representatives.
"""

from fastapi import APIRouter

from fairpass.backend.core.dependencies import CurrentPrincipal, DbSession
from fairpass.backend.schemas.auth import (
    AdminLoginRequest,
    PrincipalResponse,
    TokenResponse,
    UniversityLoginRequest,
    UsherLoginRequest,
)
from fairpass.backend.schemas.base import ApiResponse
from fairpass.backend.services.auth import AuthService

router = APIRouter()


@router.post(
    "/admin/login",
    response_model=ApiResponse[TokenResponse],
    summary="Admin sign-in",
    description="Sign in with email and password.",
)
async def login_admin(data: AdminLoginRequest, db: DbSession) -> ApiResponse[TokenResponse]:
    token = await AuthService(db).login_admin(data.email, data.password)
    return ApiResponse(data=token)


@router.post(
    "/usher/login",
    response_model=ApiResponse[TokenResponse],
    summary="Usher sign-in",
    description="Sign in at the venue with a personal access code.",
)
async def login_usher(data: UsherLoginRequest, db: DbSession) -> ApiResponse[TokenResponse]:
    token = await AuthService(db).login_usher(data.access_code)
    return ApiResponse(data=token)


@router.post(
    "/university/login",
    response_model=ApiResponse[TokenResponse],
    summary="University sign-in",
)
async def login_university(
    data: UniversityLoginRequest,
    db: DbSession,
) -> ApiResponse[TokenResponse]:
    token = await AuthService(db).login_university(data.email, data.password)
    return ApiResponse(data=token)


@router.get(
    "/me",
    response_model=ApiResponse[PrincipalResponse],
    summary="Current principal",
)
async def me(principal: CurrentPrincipal) -> ApiResponse[PrincipalResponse]:
    return ApiResponse(data=AuthService.me(principal))
