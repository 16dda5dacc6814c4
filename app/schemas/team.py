from pydantic import BaseModel, Field, ConfigDict
from typing import Optional
from uuid import UUID
from datetime import datetime

from app.core.schemas import PatchSchema


class TeamCreate(BaseModel):
    name: str = Field(..., min_length=2, max_length=255)
    description: Optional[str] = None
    color: Optional[str] = Field(None, max_length=50)
    # Honoured for admins only; everyone else creates teams in their own company
    company_id: Optional[UUID] = None


class TeamUpdate(PatchSchema):
    NULLABLE_FIELDS = frozenset({"description"})

    name: Optional[str] = Field(None, min_length=2, max_length=255)
    description: Optional[str] = None
    color: Optional[str] = Field(None, min_length=1, max_length=50)


class TeamResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    description: Optional[str] = None
    color: str
    company_id: Optional[UUID] = None
    created_at: datetime
    updated_at: datetime
