from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.core.permissions import Actor
from app.core.schemas import ApiResponse
from app.database import get_db
from app.models.user import User
from app.routers.auth_deps import require_manager, require_password_changed
from app.schemas.developer import ArchiveRequest, DeveloperCreate, DeveloperResponse, DeveloperUpdate
from app.schemas.report import PerformanceReportResponse
from app.services.developer_service import DeveloperService
from app.services.report_service import PerformanceReportService

router = APIRouter(
    prefix="/developers",
    tags=["developers"],
    dependencies=[Depends(require_password_changed)]
)


@router.get("", response_model=ApiResponse[List[DeveloperResponse]])
def list_developers(
    include_archived: bool = Query(False),
    current_user: User = Depends(require_password_changed),
    db: Session = Depends(get_db),
):
    developers = DeveloperService(db, Actor.from_user(current_user)).list_developers(include_archived)
    return ApiResponse.ok(data=[DeveloperResponse.model_validate(d) for d in developers])


@router.get("/archived", response_model=ApiResponse[List[DeveloperResponse]])
def list_archived_developers(
    current_user: User = Depends(require_password_changed),
    db: Session = Depends(get_db),
):
    developers = DeveloperService(db, Actor.from_user(current_user)).list_archived()
    return ApiResponse.ok(data=[DeveloperResponse.model_validate(d) for d in developers])


@router.get("/{developer_id}", response_model=ApiResponse[DeveloperResponse])
def get_developer(
    developer_id: UUID,
    current_user: User = Depends(require_password_changed),
    db: Session = Depends(get_db),
):
    developer = DeveloperService(db, Actor.from_user(current_user)).get_developer(developer_id)
    return ApiResponse.ok(data=DeveloperResponse.model_validate(developer))


@router.get("/{developer_id}/reports", response_model=ApiResponse[List[PerformanceReportResponse]])
def list_developer_reports(
    developer_id: UUID,
    current_user: User = Depends(require_password_changed),
    db: Session = Depends(get_db),
):
    reports = PerformanceReportService(db, Actor.from_user(current_user)).list_by_developer(developer_id)
    return ApiResponse.ok(data=[PerformanceReportResponse.model_validate(r) for r in reports])


@router.post("", response_model=ApiResponse[DeveloperResponse], status_code=status.HTTP_201_CREATED)
def create_developer(
    data: DeveloperCreate,
    current_user: User = Depends(require_manager()),
    db: Session = Depends(get_db),
):
    developer = DeveloperService(db, Actor.from_user(current_user)).create_developer(data)
    return ApiResponse.ok(data=DeveloperResponse.model_validate(developer), message="Desenvolvedor criado com sucesso")


@router.put("/{developer_id}", response_model=ApiResponse[DeveloperResponse])
def update_developer(
    developer_id: UUID,
    data: DeveloperUpdate,
    current_user: User = Depends(require_manager()),
    db: Session = Depends(get_db),
):
    developer = DeveloperService(db, Actor.from_user(current_user)).update_developer(developer_id, data)
    return ApiResponse.ok(data=DeveloperResponse.model_validate(developer), message="Desenvolvedor atualizado com sucesso")


@router.put("/{developer_id}/archive", response_model=ApiResponse[DeveloperResponse])
def archive_developer(
    developer_id: UUID,
    data: ArchiveRequest,
    current_user: User = Depends(require_manager()),
    db: Session = Depends(get_db),
):
    """Archive (archive=true) or restore (archive=false) a developer."""
    developer = DeveloperService(db, Actor.from_user(current_user)).set_archived(developer_id, data.archive)
    message = "Desenvolvedor arquivado com sucesso" if data.archive else "Desenvolvedor restaurado com sucesso"
    return ApiResponse.ok(data=DeveloperResponse.model_validate(developer), message=message)


@router.delete("/{developer_id}", response_model=ApiResponse[None])
def delete_developer(
    developer_id: UUID,
    current_user: User = Depends(require_manager()),
    db: Session = Depends(get_db),
):
    DeveloperService(db, Actor.from_user(current_user)).delete_developer(developer_id)
    return ApiResponse.ok(message="Desenvolvedor excluído com sucesso")
