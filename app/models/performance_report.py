import uuid

from sqlalchemy import Column, String, Text, DateTime, ForeignKey, Numeric, Uuid, JSON
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import relationship
from app.database import Base
from app.models.company import utcnow

ScoreMap = JSON().with_variant(JSONB(), "postgresql")


class PerformanceReport(Base):
    """Monthly evaluation of a developer. One per (developer, month)."""
    __tablename__ = "performance_reports"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    developer_id = Column(Uuid(as_uuid=True), ForeignKey("developers.id", ondelete="CASCADE"), nullable=False)
    month = Column(String(7), nullable=False)  # YYYY-MM
    question_scores = Column(ScoreMap, nullable=False)
    category_scores = Column(ScoreMap, nullable=False)
    weighted_average_score = Column(Numeric(4, 2, asdecimal=False), nullable=False)
    highlights = Column(Text, nullable=True)
    points_to_develop = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    developer = relationship("Developer", back_populates="reports")

    def __repr__(self):
        return f"<PerformanceReport {self.developer_id} {self.month}>"
