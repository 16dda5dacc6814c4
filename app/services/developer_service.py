"""
Developer Service Layer

Developers are the people being evaluated (not application users). They
belong to one company, optionally to one of its teams, and can be archived
and restored without losing their reports.
"""
from datetime import datetime, timezone
from typing import List
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError

from app.core.exceptions import InternalError, NotFoundError
from app.core.permissions import ensure_company_access, list_scope, resolve_owned_company
from app.models.developer import Developer
from app.models.performance_report import PerformanceReport
from app.models.team import Team
from app.schemas.developer import DeveloperCreate, DeveloperUpdate
from app.services.base import BaseService

DEVELOPER_NOT_FOUND = "Desenvolvedor não encontrado"


class DeveloperService(BaseService):

    def _scoped_query(self):
        company_id = list_scope(self.actor)
        query = self.db.query(Developer)
        if company_id is not None:
            query = query.filter(Developer.company_id == company_id)
        return query

    def _ensure_team_usable(self, team_id: UUID) -> None:
        team = self.db.get(Team, team_id)
        if team is None:
            raise NotFoundError("Time não encontrado")
        ensure_company_access(self.actor, team.company_id, "Time pertence a outra empresa")

    def list_developers(self, include_archived: bool = False) -> List[Developer]:
        query = self._scoped_query()
        if not include_archived:
            query = query.filter(Developer.archived_at.is_(None))
        return query.order_by(Developer.created_at.desc()).all()

    def list_archived(self) -> List[Developer]:
        return (
            self._scoped_query()
            .filter(Developer.archived_at.isnot(None))
            .order_by(Developer.archived_at.desc())
            .all()
        )

    def get_developer(self, developer_id: UUID) -> Developer:
        developer = self._get_or_404(Developer, developer_id, DEVELOPER_NOT_FOUND)
        ensure_company_access(self.actor, developer.company_id)
        return developer

    def create_developer(self, data: DeveloperCreate) -> Developer:
        company_id = resolve_owned_company(self.actor, data.company_id)
        self._resolve_company(company_id)
        if data.team_id is not None:
            self._ensure_team_usable(data.team_id)

        developer = Developer(
            name=data.name,
            role=data.role,
            team_id=data.team_id,
            company_id=company_id,
            latest_performance_score=0.0,
        )
        self.db.add(developer)
        self._commit("criar desenvolvedor")
        self.db.refresh(developer)
        self._logger.info(f"Developer {developer.id} created in company {company_id}")
        return developer

    def update_developer(self, developer_id: UUID, patch: DeveloperUpdate) -> Developer:
        changes = patch.changes()
        developer = self.get_developer(developer_id)
        if changes.get("team_id") is not None:
            self._ensure_team_usable(changes["team_id"])
        self._apply_patch(developer, changes)
        self._commit("atualizar desenvolvedor")
        self.db.refresh(developer)
        return developer

    def set_archived(self, developer_id: UUID, archive: bool) -> Developer:
        developer = self.get_developer(developer_id)
        developer.archived_at = datetime.now(timezone.utc) if archive else None
        developer.updated_at = datetime.now(timezone.utc)
        self._commit("arquivar desenvolvedor" if archive else "restaurar desenvolvedor")
        self.db.refresh(developer)
        self._logger.info(f"Developer {developer.id} {'archived' if archive else 'restored'}")
        return developer

    def _purge_reports(self, developer: Developer) -> None:
        self.db.query(PerformanceReport).filter(
            PerformanceReport.developer_id == developer.id
        ).delete(synchronize_session=False)

    def _delete_row(self, developer: Developer) -> None:
        self.db.delete(developer)
        self.db.flush()

    def delete_developer(self, developer_id: UUID) -> None:
        """Delete a developer and all of their reports atomically."""
        developer = self.get_developer(developer_id)
        try:
            self._purge_reports(developer)
            self._delete_row(developer)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            self._logger.error(f"Deleting developer {developer_id} failed: {e}", exc_info=True)
            raise InternalError("Erro ao excluir desenvolvedor")
        self._logger.warning(f"Developer {developer_id} deleted with their reports")
