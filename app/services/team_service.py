from typing import List
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError

from app.core.exceptions import InternalError
from app.core.permissions import ensure_company_access, list_scope, resolve_owned_company
from app.models.developer import Developer
from app.models.team import DEFAULT_TEAM_COLOR, Team
from app.schemas.team import TeamCreate, TeamUpdate
from app.services.base import BaseService

TEAM_NOT_FOUND = "Time não encontrado"


class TeamService(BaseService):

    def list_teams(self) -> List[Team]:
        company_id = list_scope(self.actor)
        query = self.db.query(Team)
        if company_id is not None:
            query = query.filter(Team.company_id == company_id)
        return query.order_by(Team.name).all()

    def get_team(self, team_id: UUID) -> Team:
        team = self._get_or_404(Team, team_id, TEAM_NOT_FOUND)
        ensure_company_access(self.actor, team.company_id)
        return team

    def list_team_developers(self, team_id: UUID, include_archived: bool = False) -> List[Developer]:
        team = self.get_team(team_id)
        query = self.db.query(Developer).filter(Developer.team_id == team.id)
        if not include_archived:
            query = query.filter(Developer.archived_at.is_(None))
        return query.order_by(Developer.created_at.desc()).all()

    def create_team(self, data: TeamCreate) -> Team:
        company_id = resolve_owned_company(self.actor, data.company_id)
        self._resolve_company(company_id)
        team = Team(
            name=data.name,
            description=data.description,
            color=data.color or DEFAULT_TEAM_COLOR,
            company_id=company_id,
        )
        self.db.add(team)
        self._commit("criar time")
        self.db.refresh(team)
        self._logger.info(f"Team {team.id} created in company {company_id}")
        return team

    def update_team(self, team_id: UUID, patch: TeamUpdate) -> Team:
        changes = patch.changes()
        team = self.get_team(team_id)
        self._apply_patch(team, changes)
        self._commit("atualizar time")
        self.db.refresh(team)
        return team

    def delete_team(self, team_id: UUID) -> None:
        """Detach the team's developers and delete the team in one transaction."""
        team = self.get_team(team_id)
        try:
            self.db.query(Developer).filter(Developer.team_id == team.id).update(
                {Developer.team_id: None}, synchronize_session=False
            )
            self.db.delete(team)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            self._logger.error(f"Deleting team {team_id} failed: {e}", exc_info=True)
            raise InternalError("Erro ao excluir time")
        self._logger.warning(f"Team {team_id} deleted")
