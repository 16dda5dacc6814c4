from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.core.permissions import Actor
from app.core.schemas import ApiResponse
from app.database import get_db
from app.models.user import User
from app.routers.auth_deps import require_admin, require_manager, require_password_changed
from app.schemas.developer import DeveloperResponse
from app.schemas.team import TeamCreate, TeamResponse, TeamUpdate
from app.services.team_service import TeamService

router = APIRouter(
    prefix="/teams",
    tags=["teams"],
    dependencies=[Depends(require_password_changed)]
)


@router.get("", response_model=ApiResponse[List[TeamResponse]])
def list_teams(current_user: User = Depends(require_password_changed), db: Session = Depends(get_db)):
    teams = TeamService(db, Actor.from_user(current_user)).list_teams()
    return ApiResponse.ok(data=[TeamResponse.model_validate(t) for t in teams])


@router.get("/{team_id}", response_model=ApiResponse[TeamResponse])
def get_team(
    team_id: UUID,
    current_user: User = Depends(require_password_changed),
    db: Session = Depends(get_db),
):
    team = TeamService(db, Actor.from_user(current_user)).get_team(team_id)
    return ApiResponse.ok(data=TeamResponse.model_validate(team))


@router.get("/{team_id}/developers", response_model=ApiResponse[List[DeveloperResponse]])
def list_team_developers(
    team_id: UUID,
    include_archived: bool = Query(False),
    current_user: User = Depends(require_password_changed),
    db: Session = Depends(get_db),
):
    developers = TeamService(db, Actor.from_user(current_user)).list_team_developers(team_id, include_archived)
    return ApiResponse.ok(data=[DeveloperResponse.model_validate(d) for d in developers])


@router.post("", response_model=ApiResponse[TeamResponse], status_code=status.HTTP_201_CREATED)
def create_team(
    data: TeamCreate,
    current_user: User = Depends(require_manager()),
    db: Session = Depends(get_db),
):
    team = TeamService(db, Actor.from_user(current_user)).create_team(data)
    return ApiResponse.ok(data=TeamResponse.model_validate(team), message="Time criado com sucesso")


@router.put("/{team_id}", response_model=ApiResponse[TeamResponse])
def update_team(
    team_id: UUID,
    data: TeamUpdate,
    current_user: User = Depends(require_manager()),
    db: Session = Depends(get_db),
):
    team = TeamService(db, Actor.from_user(current_user)).update_team(team_id, data)
    return ApiResponse.ok(data=TeamResponse.model_validate(team), message="Time atualizado com sucesso")


@router.delete("/{team_id}", response_model=ApiResponse[None])
def delete_team(
    team_id: UUID,
    current_user: User = Depends(require_admin()),
    db: Session = Depends(get_db),
):
    TeamService(db, Actor.from_user(current_user)).delete_team(team_id)
    return ApiResponse.ok(message="Time excluído com sucesso")
