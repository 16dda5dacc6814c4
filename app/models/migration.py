from sqlalchemy import Column, String, Text, DateTime
from app.database import Base
from app.models.company import utcnow


class SchemaMigration(Base):
    """Append-only ledger of applied migration units."""
    __tablename__ = "schema_migrations"

    id = Column(String(255), primary_key=True)
    description = Column(Text, nullable=False)
    applied_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
