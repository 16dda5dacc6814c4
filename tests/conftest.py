import pytest
import os

# Set env before importing app components
os.environ["APP_ENV"] = "testing"
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["BCRYPT_ROUNDS"] = "4"

from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from app.database import create_db_engine, get_db
from app.main import app
from app.migrations import run_migrations

DEFAULT_PASSWORD = "Password123"


@pytest.fixture(scope="function")
def engine():
    """A fresh in-memory database with every migration applied."""
    engine = create_db_engine("sqlite://")
    run_migrations(engine)
    yield engine
    engine.dispose()


@pytest.fixture(scope="function")
def db_session(engine):
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    yield session
    session.close()


@pytest.fixture(scope="function")
def client(db_session):
    """Get a TestClient that uses the test database session via dependency override."""
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def make_company(db_session):
    from app.models.company import Company

    def _make_company(name, is_active=True):
        company = Company(name=name, is_active=is_active)
        db_session.add(company)
        db_session.commit()
        return company
    return _make_company


@pytest.fixture(scope="function")
def make_user(db_session):
    from app.models.user import User
    from app.services import auth as auth_service

    def _make_user(email, role, company=None, password=DEFAULT_PASSWORD, **kwargs):
        user = User(
            email=email,
            password=auth_service.get_password_hash(password),
            name=kwargs.pop("name", email.split("@")[0].title()),
            role=role,
            company_id=company.id if company else None,
            is_active=kwargs.pop("is_active", True),
            needs_password_change=kwargs.pop("needs_password_change", False),
        )
        db_session.add(user)
        db_session.commit()
        return user
    return _make_user


@pytest.fixture(scope="function")
def company(make_company):
    return make_company("Acme")


@pytest.fixture(scope="function")
def other_company(make_company):
    return make_company("Globex")


@pytest.fixture(scope="function")
def admin_user(make_user):
    from app.models.user import UserRole
    return make_user("admin@example.com", UserRole.ADMIN)


@pytest.fixture(scope="function")
def manager_user(make_user, company):
    from app.models.user import UserRole
    return make_user("manager@acme.com", UserRole.MANAGER, company)


@pytest.fixture(scope="function")
def regular_user(make_user, company):
    from app.models.user import UserRole
    return make_user("user@acme.com", UserRole.USER, company)


@pytest.fixture(scope="function")
def other_manager(make_user, other_company):
    from app.models.user import UserRole
    return make_user("manager@globex.com", UserRole.MANAGER, other_company)


@pytest.fixture(scope="function")
def auth_headers():
    """Helper fixture to build bearer headers for a user."""
    from app.services.auth import create_access_token

    def _auth_headers(user):
        return {"Authorization": f"Bearer {create_access_token(user)}"}
    return _auth_headers


@pytest.fixture(scope="function")
def make_team(db_session):
    from app.models.team import Team

    def _make_team(name, company):
        team = Team(name=name, color="blue", company_id=company.id)
        db_session.add(team)
        db_session.commit()
        return team
    return _make_team


@pytest.fixture(scope="function")
def make_developer(db_session):
    from app.models.developer import Developer

    def _make_developer(name, company, team=None, role="Backend Engineer"):
        developer = Developer(
            name=name,
            role=role,
            company_id=company.id,
            team_id=team.id if team else None,
            latest_performance_score=0.0,
        )
        db_session.add(developer)
        db_session.commit()
        return developer
    return _make_developer
