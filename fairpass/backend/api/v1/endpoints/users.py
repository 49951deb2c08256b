"""
Admin Users API Endpoints.
"""

from fastapi import APIRouter

from fairpass.backend.core.dependencies import DbSession, SuperAdmin
from fairpass.backend.schemas.base import ApiResponse
from fairpass.backend.schemas.user import UserCreate, UserResponse, UserUpdate
from fairpass.backend.services.users import UserService

router = APIRouter()


@router.get("", response_model=ApiResponse[list[UserResponse]], summary="List admin users")
async def list_users(db: DbSession, admin: SuperAdmin) -> ApiResponse[list[UserResponse]]:
    users = await UserService(db).list_users()
    return ApiResponse(data=[UserResponse.model_validate(u) for u in users])


@router.post(
    "",
    response_model=ApiResponse[UserResponse],
    status_code=201,
    summary="Create an admin user",
)
async def create_user(data: UserCreate, db: DbSession, admin: SuperAdmin) -> ApiResponse[UserResponse]:
    user = await UserService(db).create_user(data)
    return ApiResponse(data=UserResponse.model_validate(user))


@router.get("/{user_id}", response_model=ApiResponse[UserResponse], summary="Get an admin user")
async def get_user(user_id: str, db: DbSession, admin: SuperAdmin) -> ApiResponse[UserResponse]:
    user = await UserService(db).get_user(user_id)
    return ApiResponse(data=UserResponse.model_validate(user))


@router.patch(
    "/{user_id}",
    response_model=ApiResponse[UserResponse],
    summary="Update an admin user",
    description="Only provided fields are updated. A new password is re-hashed.",
)
async def update_user(
    user_id: str,
    data: UserUpdate,
    db: DbSession,
    admin: SuperAdmin,
) -> ApiResponse[UserResponse]:
    user = await UserService(db).update_user(user_id, data)
    return ApiResponse(data=UserResponse.model_validate(user))


@router.delete("/{user_id}", status_code=204, summary="Delete an admin user")
async def delete_user(user_id: str, db: DbSession, admin: SuperAdmin) -> None:
    await UserService(db).delete_user(user_id)
