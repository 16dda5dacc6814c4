from fastapi import status

from app.models.company import Company


def test_admin_creates_company(client, admin_user, auth_headers):
    response = client.post(
        "/api/v1/companies",
        headers=auth_headers(admin_user),
        json={"name": "Initech", "description": "Software"},
    )
    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()["data"]
    assert data["name"] == "Initech"
    assert data["is_active"] is True


def test_company_name_conflict(client, admin_user, company, auth_headers):
    response = client.post("/api/v1/companies", headers=auth_headers(admin_user), json={"name": company.name})
    assert response.status_code == status.HTTP_409_CONFLICT


def test_company_names_are_case_sensitive(client, admin_user, company, auth_headers):
    response = client.post("/api/v1/companies", headers=auth_headers(admin_user), json={"name": company.name.upper()})
    assert response.status_code == status.HTTP_201_CREATED


def test_manager_cannot_create_company(client, manager_user, auth_headers):
    response = client.post("/api/v1/companies", headers=auth_headers(manager_user), json={"name": "Nope Ltd"})
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_manager_lists_only_own_company(client, admin_user, manager_user, other_company, auth_headers):
    mine = client.get("/api/v1/companies", headers=auth_headers(manager_user)).json()["data"]
    assert [c["id"] for c in mine] == [str(manager_user.company_id)]

    everything = client.get("/api/v1/companies", headers=auth_headers(admin_user)).json()["data"]
    assert {c["name"] for c in everything} == {"Acme", "Globex"}


def test_plain_user_cannot_list_companies(client, regular_user, auth_headers):
    response = client.get("/api/v1/companies", headers=auth_headers(regular_user))
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_rename_to_existing_name_conflicts(client, admin_user, company, other_company, auth_headers):
    response = client.put(
        f"/api/v1/companies/{other_company.id}",
        headers=auth_headers(admin_user),
        json={"name": company.name},
    )
    assert response.status_code == status.HTTP_409_CONFLICT


def test_update_company(client, admin_user, company, auth_headers):
    response = client.put(
        f"/api/v1/companies/{company.id}",
        headers=auth_headers(admin_user),
        json={"description": None, "is_active": False},
    )
    assert response.status_code == status.HTTP_200_OK
    data = response.json()["data"]
    assert data["is_active"] is False
    assert data["description"] is None
    assert data["name"] == "Acme"


def test_null_name_is_rejected(client, admin_user, company, auth_headers):
    response = client.put(f"/api/v1/companies/{company.id}", headers=auth_headers(admin_user), json={"name": None})
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_delete_company_with_users_conflicts(client, db_session, admin_user, manager_user, company, auth_headers):
    response = client.delete(f"/api/v1/companies/{company.id}", headers=auth_headers(admin_user))
    assert response.status_code == status.HTTP_409_CONFLICT
    assert db_session.get(Company, company.id) is not None


def test_delete_empty_company(client, db_session, admin_user, other_company, auth_headers):
    company_id = other_company.id
    response = client.delete(f"/api/v1/companies/{company_id}", headers=auth_headers(admin_user))
    assert response.status_code == status.HTTP_200_OK
    db_session.expire_all()
    assert db_session.get(Company, company_id) is None


def test_get_unknown_company(client, admin_user, auth_headers):
    response = client.get(
        "/api/v1/companies/00000000-0000-0000-0000-000000000000",
        headers=auth_headers(admin_user),
    )
    assert response.status_code == status.HTTP_404_NOT_FOUND
