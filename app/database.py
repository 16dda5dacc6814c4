from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool
from app.core.config import settings

Base = declarative_base()


def create_db_engine(database_url: str) -> Engine:
    """
    Build an engine for PostgreSQL (production) or SQLite (development/testing).

    SQLite gets pysqlite's implicit transaction handling switched off so that
    DDL participates in the migration ledger's transactions like it does on
    PostgreSQL.
    """
    if database_url.startswith("postgresql"):
        return create_engine(database_url, pool_pre_ping=True)

    kwargs = {"connect_args": {"check_same_thread": False}}
    if database_url in ("sqlite://", "sqlite:///:memory:"):
        kwargs["poolclass"] = StaticPool
    engine = create_engine(database_url, **kwargs)

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")

    return engine


engine = create_db_engine(settings.database_url)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    """
    Session Provider: Provides a database session per request.
    Transaction management is handled explicitly in the Service Layer.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind: Engine = engine):
    """
    Brings the schema up to date through the migration ledger.
    This should be called during the application startup lifespan.
    """
    import app.models  # noqa: F401  register models with Base.metadata
    from app.migrations import run_migrations

    return run_migrations(bind)
