from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.orm import Session

from app.core.permissions import Actor
from app.core.schemas import ApiResponse
from app.database import get_db
from app.models.user import User
from app.routers.auth_deps import require_manager, require_password_changed
from app.schemas.report import (
    MONTH_PATTERN,
    PerformanceReportCreate,
    PerformanceReportResponse,
    PerformanceStats,
)
from app.services.report_service import PerformanceReportService

router = APIRouter(
    prefix="/performance-reports",
    tags=["performance-reports"],
    dependencies=[Depends(require_password_changed)]
)


@router.get("", response_model=ApiResponse[List[PerformanceReportResponse]])
def list_reports(current_user: User = Depends(require_password_changed), db: Session = Depends(get_db)):
    reports = PerformanceReportService(db, Actor.from_user(current_user)).list_reports()
    return ApiResponse.ok(data=[PerformanceReportResponse.model_validate(r) for r in reports])


@router.get("/months", response_model=ApiResponse[List[str]])
def list_available_months(current_user: User = Depends(require_password_changed), db: Session = Depends(get_db)):
    months = PerformanceReportService(db, Actor.from_user(current_user)).available_months()
    return ApiResponse.ok(data=months)


@router.get("/stats", response_model=ApiResponse[PerformanceStats])
def get_stats(current_user: User = Depends(require_password_changed), db: Session = Depends(get_db)):
    stats = PerformanceReportService(db, Actor.from_user(current_user)).stats()
    return ApiResponse.ok(data=stats)


@router.get("/month/{month}", response_model=ApiResponse[List[PerformanceReportResponse]])
def list_reports_by_month(
    month: str = Path(..., pattern=MONTH_PATTERN),
    current_user: User = Depends(require_password_changed),
    db: Session = Depends(get_db),
):
    reports = PerformanceReportService(db, Actor.from_user(current_user)).list_by_month(month)
    return ApiResponse.ok(data=[PerformanceReportResponse.model_validate(r) for r in reports])


@router.get("/{report_id}", response_model=ApiResponse[PerformanceReportResponse])
def get_report(
    report_id: UUID,
    current_user: User = Depends(require_password_changed),
    db: Session = Depends(get_db),
):
    report = PerformanceReportService(db, Actor.from_user(current_user)).get_report(report_id)
    return ApiResponse.ok(data=PerformanceReportResponse.model_validate(report))


@router.post("", response_model=ApiResponse[PerformanceReportResponse], status_code=status.HTTP_201_CREATED)
def create_report(
    data: PerformanceReportCreate,
    current_user: User = Depends(require_manager()),
    db: Session = Depends(get_db),
):
    report = PerformanceReportService(db, Actor.from_user(current_user)).create_report(data)
    return ApiResponse.ok(data=PerformanceReportResponse.model_validate(report), message="Relatório criado com sucesso")
