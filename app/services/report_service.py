"""
Performance Report Service Layer

A report is the authoritative monthly evaluation of one developer. Creating
one also refreshes the developer's cached latest score; that refresh is a
secondary write and never undoes the report.
"""
from typing import List
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError

from app.core.exceptions import ConflictError, NotFoundError
from app.core.permissions import ensure_company_access, list_scope
from app.models.developer import Developer
from app.models.performance_report import PerformanceReport
from app.schemas.report import PerformanceReportCreate, PerformanceStats
from app.services.base import BaseService

REPORT_NOT_FOUND = "Relatório não encontrado"


class PerformanceReportService(BaseService):

    def _scoped_query(self, *entities):
        company_id = list_scope(self.actor)
        if entities:
            query = self.db.query(*entities).select_from(PerformanceReport)
        else:
            query = self.db.query(PerformanceReport)
        if company_id is not None:
            query = query.join(Developer, PerformanceReport.developer_id == Developer.id).filter(
                Developer.company_id == company_id
            )
        return query

    def _visible_developer(self, developer_id: UUID) -> Developer:
        developer = self.db.get(Developer, developer_id)
        if developer is None:
            raise NotFoundError("Desenvolvedor não encontrado")
        ensure_company_access(self.actor, developer.company_id)
        return developer

    def list_reports(self) -> List[PerformanceReport]:
        return (
            self._scoped_query()
            .order_by(PerformanceReport.month.desc(), PerformanceReport.created_at.desc())
            .all()
        )

    def get_report(self, report_id: UUID) -> PerformanceReport:
        report = self._get_or_404(PerformanceReport, report_id, REPORT_NOT_FOUND)
        ensure_company_access(self.actor, report.developer.company_id)
        return report

    def list_by_developer(self, developer_id: UUID) -> List[PerformanceReport]:
        developer = self._visible_developer(developer_id)
        return (
            self.db.query(PerformanceReport)
            .filter(PerformanceReport.developer_id == developer.id)
            .order_by(PerformanceReport.month.desc())
            .all()
        )

    def list_by_month(self, month: str) -> List[PerformanceReport]:
        """Reports of one month, best score first."""
        return (
            self._scoped_query()
            .filter(PerformanceReport.month == month)
            .order_by(
                PerformanceReport.weighted_average_score.desc(),
                PerformanceReport.created_at.desc(),
            )
            .all()
        )

    def available_months(self) -> List[str]:
        rows = (
            self._scoped_query(PerformanceReport.month)
            .distinct()
            .order_by(PerformanceReport.month.desc())
            .all()
        )
        return [row.month for row in rows]

    def stats(self) -> PerformanceStats:
        score = PerformanceReport.weighted_average_score
        total, average, highest, lowest = self._scoped_query(
            func.count(PerformanceReport.id),
            func.avg(score),
            func.max(score),
            func.min(score),
        ).one()
        return PerformanceStats(
            total_reports=total or 0,
            average_score=round(float(average), 2) if average is not None else 0.0,
            highest_score=float(highest) if highest is not None else 0.0,
            lowest_score=float(lowest) if lowest is not None else 0.0,
        )

    def create_report(self, data: PerformanceReportCreate) -> PerformanceReport:
        developer = self._visible_developer(data.developer_id)

        existing = (
            self.db.query(PerformanceReport)
            .filter(
                PerformanceReport.developer_id == developer.id,
                PerformanceReport.month == data.month,
            )
            .first()
        )
        if existing is not None:
            raise ConflictError(f"Já existe um relatório para este desenvolvedor no mês {data.month}")

        report = PerformanceReport(
            developer_id=developer.id,
            month=data.month,
            question_scores=data.question_scores,
            category_scores=data.category_scores,
            weighted_average_score=data.weighted_average_score,
            highlights=data.highlights,
            points_to_develop=data.points_to_develop,
        )
        self.db.add(report)
        self._commit("criar relatório")
        self.db.refresh(report)
        self._logger.info(f"Report {report.id} created for developer {developer.id} ({data.month})")

        self._refresh_latest_score(developer.id, data.weighted_average_score)
        return report

    def _refresh_latest_score(self, developer_id: UUID, score: float) -> bool:
        try:
            self.db.query(Developer).filter(Developer.id == developer_id).update(
                {Developer.latest_performance_score: score}, synchronize_session=False
            )
            self.db.commit()
            return True
        except SQLAlchemyError as e:
            self.db.rollback()
            self._logger.warning(
                f"Could not refresh latest score of developer {developer_id}: {e}"
            )
            return False
