from pydantic import BaseModel, Field, ConfigDict
from typing import Optional
from uuid import UUID
from datetime import datetime

from app.core.schemas import PatchSchema


class DeveloperCreate(BaseModel):
    name: str = Field(..., min_length=2, max_length=255)
    role: str = Field(..., min_length=2, max_length=255)
    team_id: Optional[UUID] = None
    # Honoured for admins only
    company_id: Optional[UUID] = None


class DeveloperUpdate(PatchSchema):
    NULLABLE_FIELDS = frozenset({"team_id"})

    name: Optional[str] = Field(None, min_length=2, max_length=255)
    role: Optional[str] = Field(None, min_length=2, max_length=255)
    latest_performance_score: Optional[float] = Field(None, ge=0, le=10)
    team_id: Optional[UUID] = None


class ArchiveRequest(BaseModel):
    archive: bool


class DeveloperResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    role: str
    latest_performance_score: float
    team_id: Optional[UUID] = None
    company_id: Optional[UUID] = None
    archived_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
