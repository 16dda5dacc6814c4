"""
Migration ledger.

Every unit moves Pending -> Applied exactly once. Units run in lexicographic
order of their id, each inside its own transaction together with the insert
of its ledger row, so a unit is either fully applied and recorded or not at
all. The first failure aborts the run; units applied before it stay applied.
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Dict, List, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.engine import Connection, Engine

from app.core.exceptions import MigrationError
from app.models.company import utcnow
from app.models.migration import SchemaMigration

logger = logging.getLogger(__name__)

ledger_table = SchemaMigration.__table__


@dataclass(frozen=True)
class Migration:
    id: str
    description: str
    upgrade: Callable[[Connection], None]


@dataclass(frozen=True)
class MigrationStatus:
    id: str
    description: str
    applied: bool
    applied_at: Optional[datetime] = None


def ensure_ledger(bind: Engine) -> None:
    with bind.begin() as conn:
        ledger_table.create(conn, checkfirst=True)


def get_applied_migrations(bind: Engine) -> Dict[str, datetime]:
    """Applied migration ids mapped to their applied_at timestamp."""
    with bind.connect() as conn:
        rows = conn.execute(select(ledger_table.c.id, ledger_table.c.applied_at)).all()
    return {row.id: row.applied_at for row in rows}


def _ordered(migrations: Sequence[Migration]) -> List[Migration]:
    seen = set()
    for migration in migrations:
        if migration.id in seen:
            raise ValueError(f"Duplicate migration id: {migration.id}")
        seen.add(migration.id)
    return sorted(migrations, key=lambda m: m.id)


def run_migrations(bind: Engine, migrations: Optional[Sequence[Migration]] = None) -> List[str]:
    """
    Apply every pending unit and return the ids applied by this run.

    Raises:
        MigrationError: a unit failed; its transaction was rolled back and
            no later unit was attempted.
    """
    if migrations is None:
        from app.migrations.units import ALL_MIGRATIONS
        migrations = ALL_MIGRATIONS

    ensure_ledger(bind)
    applied = get_applied_migrations(bind)

    newly_applied: List[str] = []
    for migration in _ordered(migrations):
        if migration.id in applied:
            continue

        logger.info(f"Applying migration {migration.id}: {migration.description}")
        try:
            with bind.begin() as conn:
                migration.upgrade(conn)
                conn.execute(
                    ledger_table.insert().values(
                        id=migration.id,
                        description=migration.description,
                        applied_at=utcnow(),
                    )
                )
        except Exception as e:
            logger.error(f"Migration {migration.id} failed and was rolled back: {e}")
            raise MigrationError(migration.id, e) from e

        logger.info(f"Migration {migration.id} applied")
        newly_applied.append(migration.id)

    if newly_applied:
        logger.info(f"{len(newly_applied)} migration(s) applied")
    else:
        logger.info("No pending migrations")
    return newly_applied


def migration_status(bind: Engine, migrations: Optional[Sequence[Migration]] = None) -> List[MigrationStatus]:
    """Read-only report of every known unit and whether/when it was applied."""
    if migrations is None:
        from app.migrations.units import ALL_MIGRATIONS
        migrations = ALL_MIGRATIONS

    ensure_ledger(bind)
    applied = get_applied_migrations(bind)
    return [
        MigrationStatus(
            id=m.id,
            description=m.description,
            applied=m.id in applied,
            applied_at=applied.get(m.id),
        )
        for m in _ordered(migrations)
    ]
