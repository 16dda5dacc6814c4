from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.permissions import Actor
from app.core.schemas import ApiResponse
from app.database import get_db
from app.models.user import User
from app.routers.auth_deps import require_admin, require_manager
from app.schemas.company import CompanyCreate, CompanyResponse, CompanyUpdate
from app.services.company_service import CompanyService

router = APIRouter(
    prefix="/companies",
    tags=["companies"]
)


@router.get("", response_model=ApiResponse[List[CompanyResponse]])
def list_companies(current_user: User = Depends(require_manager()), db: Session = Depends(get_db)):
    """Admins see every company; managers only their own."""
    companies = CompanyService(db, Actor.from_user(current_user)).list_companies()
    return ApiResponse.ok(data=[CompanyResponse.model_validate(c) for c in companies])


@router.post("", response_model=ApiResponse[CompanyResponse], status_code=status.HTTP_201_CREATED)
def create_company(
    data: CompanyCreate,
    current_user: User = Depends(require_admin()),
    db: Session = Depends(get_db),
):
    company = CompanyService(db, Actor.from_user(current_user)).create_company(data)
    return ApiResponse.ok(data=CompanyResponse.model_validate(company), message="Empresa criada com sucesso")


@router.get("/{company_id}", response_model=ApiResponse[CompanyResponse])
def get_company(
    company_id: UUID,
    current_user: User = Depends(require_admin()),
    db: Session = Depends(get_db),
):
    company = CompanyService(db, Actor.from_user(current_user)).get_company(company_id)
    return ApiResponse.ok(data=CompanyResponse.model_validate(company))


@router.put("/{company_id}", response_model=ApiResponse[CompanyResponse])
def update_company(
    company_id: UUID,
    data: CompanyUpdate,
    current_user: User = Depends(require_admin()),
    db: Session = Depends(get_db),
):
    company = CompanyService(db, Actor.from_user(current_user)).update_company(company_id, data)
    return ApiResponse.ok(data=CompanyResponse.model_validate(company), message="Empresa atualizada com sucesso")


@router.delete("/{company_id}", response_model=ApiResponse[None])
def delete_company(
    company_id: UUID,
    current_user: User = Depends(require_admin()),
    db: Session = Depends(get_db),
):
    CompanyService(db, Actor.from_user(current_user)).delete_company(company_id)
    return ApiResponse.ok(message="Empresa excluída com sucesso")
