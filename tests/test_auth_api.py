from fastapi import status

from app.core.config import settings
from app.models.user import User, UserRole
from app.services import auth as auth_service
from tests.conftest import DEFAULT_PASSWORD


def test_login_success(client, admin_user):
    """Test successful login with valid credentials."""
    response = client.post("/api/v1/auth/login", json={"email": admin_user.email, "password": DEFAULT_PASSWORD})
    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["success"] is True
    assert body["data"]["user"]["email"] == admin_user.email
    assert "password" not in body["data"]["user"]

    claims = auth_service.decode_access_token(body["data"]["token"])
    assert claims.user_id == admin_user.id


def test_login_wrong_password(client, admin_user):
    response = client.post("/api/v1/auth/login", json={"email": admin_user.email, "password": "Wrong1234"})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    body = response.json()
    assert body["success"] is False
    assert body["message"] == "Credenciais inválidas"


def test_login_unknown_email(client):
    response = client.post("/api/v1/auth/login", json={"email": "nobody@example.com", "password": "Whatever1"})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_login_inactive_user_with_correct_password(client, make_user, company):
    user = make_user("sleepy@acme.com", UserRole.USER, company, is_active=False)
    response = client.post("/api/v1/auth/login", json={"email": user.email, "password": DEFAULT_PASSWORD})
    assert response.status_code == status.HTTP_403_FORBIDDEN
    assert response.json()["message"] == "Usuário inativo"


def test_login_inactive_user_with_wrong_password_stays_401(client, make_user, company):
    user = make_user("sleepy@acme.com", UserRole.USER, company, is_active=False)
    response = client.post("/api/v1/auth/login", json={"email": user.email, "password": "Wrong1234"})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_login_with_malformed_stored_hash(client, db_session, admin_user):
    admin_user.password = "plaintext-by-mistake"
    db_session.commit()
    response = client.post("/api/v1/auth/login", json={"email": admin_user.email, "password": DEFAULT_PASSWORD})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_login_validation_error_is_400(client):
    response = client.post("/api/v1/auth/login", json={"email": "not-an-email"})
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    body = response.json()
    assert body["success"] is False
    assert body["message"] == "Dados de entrada inválidos"
    assert body["errors"]


# --- Bearer handling -------------------------------------------------------

def test_missing_authorization_header(client):
    response = client.get("/api/v1/auth/profile")
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json()["message"] == "Token de autorização não fornecido"


def test_non_bearer_scheme(client):
    response = client.get("/api/v1/auth/profile", headers={"Authorization": "Basic abc123"})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json()["message"] == "Formato de token inválido. Use 'Bearer <token>'"


def test_invalid_token(client):
    response = client.get("/api/v1/auth/profile", headers={"Authorization": "Bearer garbage"})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json()["errors"][0]["code"] == "INVALID_TOKEN"


def test_token_of_deactivated_user_is_refused(client, db_session, regular_user, auth_headers):
    headers = auth_headers(regular_user)
    regular_user.is_active = False
    db_session.commit()
    response = client.get("/api/v1/auth/profile", headers=headers)
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_profile(client, manager_user, auth_headers):
    response = client.get("/api/v1/auth/profile", headers=auth_headers(manager_user))
    assert response.status_code == status.HTTP_200_OK
    data = response.json()["data"]
    assert data["id"] == str(manager_user.id)
    assert data["role"] == "manager"
    assert data["company_id"] == str(manager_user.company_id)


def test_refresh_issues_new_token(client, manager_user, auth_headers):
    response = client.post("/api/v1/auth/refresh", headers=auth_headers(manager_user))
    assert response.status_code == status.HTTP_200_OK
    claims = auth_service.decode_access_token(response.json()["data"]["token"])
    assert claims.user_id == manager_user.id


# --- Password flows --------------------------------------------------------

def test_must_change_password_gate(client, make_user, company, auth_headers):
    user = make_user("fresh@acme.com", UserRole.MANAGER, company, needs_password_change=True)
    headers = auth_headers(user)

    blocked = client.get("/api/v1/teams", headers=headers)
    assert blocked.status_code == status.HTTP_403_FORBIDDEN
    assert blocked.json()["details"] == {"requires_password_change": True}

    # Profile stays reachable so the client can drive the flow
    assert client.get("/api/v1/auth/profile", headers=headers).status_code == status.HTTP_200_OK

    response = client.post("/api/v1/auth/set-new-password", headers=headers, json={"new_password": "BrandNew123"})
    assert response.status_code == status.HTTP_200_OK
    data = response.json()["data"]
    assert data["user"]["needs_password_change"] is False

    new_headers = {"Authorization": f"Bearer {data['token']}"}
    assert client.get("/api/v1/teams", headers=new_headers).status_code == status.HTTP_200_OK

    login = client.post("/api/v1/auth/login", json={"email": user.email, "password": "BrandNew123"})
    assert login.status_code == status.HTTP_200_OK


def test_set_new_password_without_flag(client, manager_user, auth_headers):
    response = client.post(
        "/api/v1/auth/set-new-password",
        headers=auth_headers(manager_user),
        json={"new_password": "BrandNew123"},
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_set_new_password_enforces_policy(client, make_user, company, auth_headers):
    user = make_user("fresh@acme.com", UserRole.USER, company, needs_password_change=True)
    response = client.post("/api/v1/auth/set-new-password", headers=auth_headers(user), json={"new_password": "weak"})
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_change_password(client, manager_user, auth_headers):
    headers = auth_headers(manager_user)
    wrong = client.post(
        "/api/v1/auth/change-password",
        headers=headers,
        json={"current_password": "Nope12345", "new_password": "Another123"},
    )
    assert wrong.status_code == status.HTTP_401_UNAUTHORIZED

    ok = client.post(
        "/api/v1/auth/change-password",
        headers=headers,
        json={"current_password": DEFAULT_PASSWORD, "new_password": "Another123"},
    )
    assert ok.status_code == status.HTTP_200_OK

    login = client.post("/api/v1/auth/login", json={"email": manager_user.email, "password": "Another123"})
    assert login.status_code == status.HTTP_200_OK


# --- First-admin bootstrap -------------------------------------------------

def test_init_check_on_empty_system(client):
    response = client.get("/api/v1/init/check")
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["data"] == {"initialized": False, "user_count": 0}


def test_init_admin_creates_first_admin(client, db_session):
    payload = {
        "install_key": settings.install_key,
        "email": "first@example.com",
        "password": "Secret123",
        "name": "First Admin",
    }
    response = client.post("/api/v1/init/admin", json=payload)
    assert response.status_code == status.HTTP_201_CREATED
    assert response.json()["data"]["role"] == "admin"

    user = db_session.query(User).filter(User.email == "first@example.com").one()
    assert user.role == UserRole.ADMIN
    assert user.company_id is None

    check = client.get("/api/v1/init/check").json()["data"]
    assert check == {"initialized": True, "user_count": 1}


def test_init_admin_refused_once_users_exist(client, admin_user):
    payload = {
        "install_key": settings.install_key,
        "email": "second@example.com",
        "password": "Secret123",
        "name": "Second Admin",
    }
    response = client.post("/api/v1/init/admin", json=payload)
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_init_admin_with_wrong_install_key(client, db_session):
    payload = {
        "install_key": "guess",
        "email": "first@example.com",
        "password": "Secret123",
        "name": "First Admin",
    }
    response = client.post("/api/v1/init/admin", json=payload)
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert db_session.query(User).count() == 0


def test_init_admin_validates_body_before_user_count(client, admin_user):
    payload = {
        "install_key": settings.install_key,
        "email": "not-an-email",
        "password": "Secret123",
        "name": "Second Admin",
    }
    response = client.post("/api/v1/init/admin", json=payload)
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["message"] == "Dados de entrada inválidos"


def test_init_admin_rejects_oversized_name(client, db_session):
    payload = {
        "install_key": settings.install_key,
        "email": "first@example.com",
        "password": "Secret123",
        "name": "A" * 256,
    }
    response = client.post("/api/v1/init/admin", json=payload)
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert db_session.query(User).count() == 0
