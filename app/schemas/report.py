from pydantic import BaseModel, Field, ConfigDict
from typing import Dict, Optional
from uuid import UUID
from datetime import datetime

MONTH_PATTERN = r"^\d{4}-(0[1-9]|1[0-2])$"


class PerformanceReportCreate(BaseModel):
    # Scores must be finite numbers
    model_config = ConfigDict(allow_inf_nan=False)

    developer_id: UUID
    month: str = Field(..., pattern=MONTH_PATTERN, description="YYYY-MM")
    question_scores: Dict[str, float]
    category_scores: Dict[str, float]
    weighted_average_score: float = Field(..., ge=0, le=10)
    highlights: Optional[str] = None
    points_to_develop: Optional[str] = None


class PerformanceReportResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    developer_id: UUID
    month: str
    question_scores: Dict[str, float]
    category_scores: Dict[str, float]
    weighted_average_score: float
    highlights: Optional[str] = None
    points_to_develop: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class PerformanceStats(BaseModel):
    total_reports: int
    average_score: float
    highest_score: float
    lowest_score: float
