"""
Schema units applied by the migration ledger.

Each unit is safe to re-run against a partially migrated database: tables and
indexes are created only when missing, columns are added only after
inspecting the live schema.
"""
import uuid

from sqlalchemy import Uuid, func, inspect, select, text
from sqlalchemy.engine import Connection

from app.core.config import settings
from app.database import Base
from app.migrations.manager import Migration
from app.models import Company, Developer, PerformanceReport, Team, User, UserRole
from app.models.company import utcnow

DOMAIN_TABLES = [
    Company.__table__,
    User.__table__,
    Team.__table__,
    Developer.__table__,
    PerformanceReport.__table__,
]

LOOKUP_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_companies_is_active ON companies (is_active)",
    "CREATE INDEX IF NOT EXISTS idx_users_role ON users (role)",
    "CREATE INDEX IF NOT EXISTS idx_users_is_active ON users (is_active)",
    "CREATE INDEX IF NOT EXISTS idx_developers_team_id ON developers (team_id)",
    "CREATE INDEX IF NOT EXISTS idx_developers_archived_at ON developers (archived_at)",
    "CREATE INDEX IF NOT EXISTS idx_performance_reports_developer_id ON performance_reports (developer_id)",
    "CREATE INDEX IF NOT EXISTS idx_performance_reports_month ON performance_reports (month)",
    "CREATE INDEX IF NOT EXISTS idx_performance_reports_developer_month ON performance_reports (developer_id, month)",
]

UPDATED_AT_FUNCTION = """
CREATE OR REPLACE FUNCTION update_updated_at_column()
RETURNS TRIGGER AS $$
BEGIN
    NEW.updated_at = CURRENT_TIMESTAMP;
    RETURN NEW;
END;
$$ language 'plpgsql'
"""

# (table, ON DELETE action for its company reference)
TENANT_SCOPED_TABLES = [
    ("users", "SET NULL"),
    ("teams", "CASCADE"),
    ("developers", "CASCADE"),
]


def create_tables(conn: Connection) -> None:
    Base.metadata.create_all(conn, tables=DOMAIN_TABLES, checkfirst=True)


def create_indexes(conn: Connection) -> None:
    for statement in LOOKUP_INDEXES:
        conn.execute(text(statement))


def create_updated_at_triggers(conn: Connection) -> None:
    # plpgsql only; other dialects rely on the application setting updated_at
    if conn.dialect.name != "postgresql":
        return
    conn.execute(text(UPDATED_AT_FUNCTION))
    for table in DOMAIN_TABLES:
        conn.execute(text(f"DROP TRIGGER IF EXISTS update_{table.name}_updated_at ON {table.name}"))
        conn.execute(text(
            f"CREATE TRIGGER update_{table.name}_updated_at "
            f"BEFORE UPDATE ON {table.name} "
            f"FOR EACH ROW EXECUTE FUNCTION update_updated_at_column()"
        ))


def add_company_columns(conn: Connection) -> None:
    inspector = inspect(conn)
    uuid_type = Uuid().compile(dialect=conn.dialect)
    for table_name, on_delete in TENANT_SCOPED_TABLES:
        columns = {column["name"] for column in inspector.get_columns(table_name)}
        if "company_id" not in columns:
            conn.execute(text(
                f"ALTER TABLE {table_name} ADD COLUMN company_id {uuid_type} "
                f"REFERENCES companies(id) ON DELETE {on_delete}"
            ))
        conn.execute(text(
            f"CREATE INDEX IF NOT EXISTS idx_{table_name}_company_id ON {table_name} (company_id)"
        ))


def assign_default_company(conn: Connection) -> None:
    """Move company-less non-admin users, teams and developers into the default company."""
    users = User.__table__
    teams = Team.__table__
    developers = Developer.__table__
    companies = Company.__table__

    orphan_filters = [
        (users, [users.c.company_id.is_(None), users.c.role != UserRole.ADMIN]),
        (teams, [teams.c.company_id.is_(None)]),
        (developers, [developers.c.company_id.is_(None)]),
    ]
    orphan_count = sum(
        conn.execute(select(func.count()).select_from(table).where(*criteria)).scalar_one()
        for table, criteria in orphan_filters
    )
    if orphan_count == 0:
        return

    company_id = conn.execute(
        select(companies.c.id).where(companies.c.name == settings.default_company_name)
    ).scalar()
    if company_id is None:
        company_id = uuid.uuid4()
        now = utcnow()
        conn.execute(companies.insert().values(
            id=company_id,
            name=settings.default_company_name,
            description="Empresa padrão do sistema",
            is_active=True,
            created_at=now,
            updated_at=now,
        ))

    for table, criteria in orphan_filters:
        conn.execute(table.update().where(*criteria).values(company_id=company_id))


ALL_MIGRATIONS = [
    Migration("001_create_tables", "Create core tables", create_tables),
    Migration("002_create_indexes", "Create lookup indexes", create_indexes),
    Migration("003_updated_at_triggers", "updated_at triggers (PostgreSQL)", create_updated_at_triggers),
    Migration("004_multitenant_columns", "Add company reference to tenant-scoped tables", add_company_columns),
    Migration("005_assign_default_company", "Assign company-less rows to the default company", assign_default_company),
]
