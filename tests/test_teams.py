from fastapi import status

from app.models.developer import Developer
from app.models.team import Team


def test_manager_creates_team_in_own_company(client, manager_user, other_company, auth_headers):
    response = client.post(
        "/api/v1/teams",
        headers=auth_headers(manager_user),
        json={"name": "Platform", "company_id": str(other_company.id)},
    )
    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()["data"]
    assert data["company_id"] == str(manager_user.company_id)
    assert data["color"] == "blue"


def test_admin_without_company_must_name_one(client, admin_user, auth_headers):
    response = client.post("/api/v1/teams", headers=auth_headers(admin_user), json={"name": "Orphans"})
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_plain_user_cannot_create_team(client, regular_user, auth_headers):
    response = client.post("/api/v1/teams", headers=auth_headers(regular_user), json={"name": "Rogue"})
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_teams_are_filtered_by_company(client, admin_user, regular_user, company, other_company, make_team, auth_headers):
    make_team("Core", company)
    make_team("Rival", other_company)

    mine = client.get("/api/v1/teams", headers=auth_headers(regular_user)).json()["data"]
    assert [t["name"] for t in mine] == ["Core"]

    everything = client.get("/api/v1/teams", headers=auth_headers(admin_user)).json()["data"]
    assert len(everything) == 2


def test_team_of_other_company_is_forbidden(client, regular_user, other_company, make_team, auth_headers):
    rival = make_team("Rival", other_company)
    response = client.get(f"/api/v1/teams/{rival.id}", headers=auth_headers(regular_user))
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_update_team(client, manager_user, company, make_team, auth_headers):
    team = make_team("Core", company)
    response = client.put(f"/api/v1/teams/{team.id}", headers=auth_headers(manager_user), json={"color": "green"})
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["data"]["color"] == "green"
    assert response.json()["data"]["name"] == "Core"


def test_team_developers_hide_archived_by_default(
    client, db_session, regular_user, company, make_team, make_developer, auth_headers
):
    from datetime import datetime, timezone

    team = make_team("Core", company)
    make_developer("Ada", company, team)
    gone = make_developer("Bob", company, team)
    gone.archived_at = datetime.now(timezone.utc)
    db_session.commit()

    active = client.get(f"/api/v1/teams/{team.id}/developers", headers=auth_headers(regular_user)).json()["data"]
    assert [d["name"] for d in active] == ["Ada"]

    everyone = client.get(
        f"/api/v1/teams/{team.id}/developers",
        params={"include_archived": "true"},
        headers=auth_headers(regular_user),
    ).json()["data"]
    assert len(everyone) == 2


def test_manager_cannot_delete_team(client, manager_user, company, make_team, auth_headers):
    team = make_team("Core", company)
    response = client.delete(f"/api/v1/teams/{team.id}", headers=auth_headers(manager_user))
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_deleting_team_detaches_developers(client, db_session, admin_user, company, make_team, make_developer, auth_headers):
    team = make_team("Core", company)
    developer = make_developer("Ada", company, team)
    team_id, developer_id = team.id, developer.id

    response = client.delete(f"/api/v1/teams/{team_id}", headers=auth_headers(admin_user))
    assert response.status_code == status.HTTP_200_OK

    db_session.expire_all()
    assert db_session.get(Team, team_id) is None
    remaining = db_session.get(Developer, developer_id)
    assert remaining is not None
    assert remaining.team_id is None
