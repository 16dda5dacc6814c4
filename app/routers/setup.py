from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.limiter import limiter
from app.core.schemas import ApiResponse
from app.database import get_db
from app.schemas.auth import InitAdminRequest, InitStatusResponse, UserResponse
from app.services.user_service import UserService

router = APIRouter()


@router.get("/check", response_model=ApiResponse[InitStatusResponse])
def check_initialization(db: Session = Depends(get_db)):
    """Check if the system already has users."""
    user_count = UserService(db).count_users()
    return ApiResponse.ok(data=InitStatusResponse(initialized=user_count > 0, user_count=user_count))


@router.post("/admin", response_model=ApiResponse[UserResponse], status_code=status.HTTP_201_CREATED)
@limiter.limit(settings.rate_limit_login)
def create_first_admin(request: Request, data: InitAdminRequest, db: Session = Depends(get_db)):
    """
    Bootstrap the first admin account.
    Only runs while no user exists and requires the install key.
    """
    user = UserService(db).bootstrap_admin(data)
    return ApiResponse.ok(
        data=UserResponse.model_validate(user),
        message="Usuário administrador criado com sucesso",
    )
