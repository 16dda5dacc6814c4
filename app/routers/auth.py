from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.limiter import limiter
from app.core.permissions import Actor
from app.core.schemas import ApiResponse
from app.database import get_db
from app.models.user import User
from app.routers.auth_deps import get_current_user, require_manager
from app.schemas.auth import (
    CreateUserRequest,
    CreateUserResponse,
    DeletedUser,
    LoginRequest,
    LoginResponse,
    PasswordChange,
    SetNewPasswordRequest,
    TokenResponse,
    UserResponse,
    UserUpdate,
)
from app.services.user_service import UserService

router = APIRouter(
    prefix="/auth",
    tags=["auth"]
)


@router.post("/login", response_model=ApiResponse[LoginResponse])
@limiter.limit(settings.rate_limit_login)
def login(request: Request, login_data: LoginRequest, db: Session = Depends(get_db)):
    token, user = UserService(db).authenticate(login_data.email, login_data.password)
    return ApiResponse.ok(
        data=LoginResponse(token=token, user=UserResponse.model_validate(user)),
        message="Login realizado com sucesso",
    )


@router.get("/profile", response_model=ApiResponse[UserResponse])
def get_profile(current_user: User = Depends(get_current_user)):
    return ApiResponse.ok(data=UserResponse.model_validate(current_user))


@router.post("/refresh", response_model=ApiResponse[TokenResponse])
def refresh_token(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    token = UserService(db).refresh_token(current_user)
    return ApiResponse.ok(data=TokenResponse(token=token))


@router.post("/set-new-password", response_model=ApiResponse[LoginResponse])
def set_new_password(
    data: SetNewPasswordRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Complete the forced password change; returns a token without the flag."""
    token, user = UserService(db).set_new_password(current_user, data.new_password)
    return ApiResponse.ok(
        data=LoginResponse(token=token, user=UserResponse.model_validate(user)),
        message="Senha definida com sucesso",
    )


@router.post("/change-password", response_model=ApiResponse[None])
def change_password(
    data: PasswordChange,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    UserService(db).change_password(current_user, data.current_password, data.new_password)
    return ApiResponse.ok(message="Senha alterada com sucesso")


@router.post("/create-user", response_model=ApiResponse[CreateUserResponse], status_code=status.HTTP_201_CREATED)
def create_user(
    data: CreateUserRequest,
    current_user: User = Depends(require_manager()),
    db: Session = Depends(get_db),
):
    user, temporary_password = UserService(db, Actor.from_user(current_user)).create_user(data)
    return ApiResponse.ok(
        data=CreateUserResponse(
            user=UserResponse.model_validate(user),
            temporary_password=temporary_password,
        ),
        message="Usuário criado com sucesso",
    )


@router.get("/users", response_model=ApiResponse[List[UserResponse]])
def list_users(current_user: User = Depends(require_manager()), db: Session = Depends(get_db)):
    users = UserService(db, Actor.from_user(current_user)).list_users()
    return ApiResponse.ok(data=[UserResponse.model_validate(u) for u in users])


@router.get("/users/{user_id}", response_model=ApiResponse[UserResponse])
def get_user(
    user_id: UUID,
    current_user: User = Depends(require_manager()),
    db: Session = Depends(get_db),
):
    user = UserService(db, Actor.from_user(current_user)).get_user(user_id)
    return ApiResponse.ok(data=UserResponse.model_validate(user))


@router.put("/users/{user_id}", response_model=ApiResponse[UserResponse])
def update_user(
    user_id: UUID,
    data: UserUpdate,
    current_user: User = Depends(require_manager()),
    db: Session = Depends(get_db),
):
    user = UserService(db, Actor.from_user(current_user)).update_user(user_id, data)
    return ApiResponse.ok(data=UserResponse.model_validate(user), message="Usuário atualizado com sucesso")


@router.delete("/users/{user_id}", response_model=ApiResponse[DeletedUser])
def delete_user(
    user_id: UUID,
    current_user: User = Depends(require_manager()),
    db: Session = Depends(get_db),
):
    deleted = UserService(db, Actor.from_user(current_user)).delete_user(user_id)
    return ApiResponse.ok(data=deleted, message="Usuário excluído com sucesso")
