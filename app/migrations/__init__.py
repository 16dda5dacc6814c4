from app.migrations.manager import (
    Migration,
    MigrationStatus,
    get_applied_migrations,
    migration_status,
    run_migrations,
)
from app.migrations.units import ALL_MIGRATIONS

__all__ = [
    "ALL_MIGRATIONS",
    "Migration",
    "MigrationStatus",
    "get_applied_migrations",
    "migration_status",
    "run_migrations",
]
