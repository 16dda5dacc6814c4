import uuid

from sqlalchemy import Column, String, DateTime, ForeignKey, Numeric, Uuid
from sqlalchemy.orm import relationship
from app.database import Base
from app.models.company import utcnow


class Developer(Base):
    __tablename__ = "developers"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    role = Column(String(255), nullable=False)  # job title, not an access role
    latest_performance_score = Column(Numeric(4, 2, asdecimal=False), default=0.0, nullable=False)
    team_id = Column(Uuid(as_uuid=True), ForeignKey("teams.id", ondelete="SET NULL"), nullable=True)
    company_id = Column(Uuid(as_uuid=True), ForeignKey("companies.id", ondelete="CASCADE"), nullable=True)
    archived_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    team = relationship("Team", back_populates="developers")
    reports = relationship("PerformanceReport", back_populates="developer", passive_deletes=True)

    def __repr__(self):
        return f"<Developer {self.name} ({self.role})>"

    @property
    def is_archived(self) -> bool:
        return self.archived_at is not None
