# file: models/ministering.py

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class FamilyUrgencyUpdate(BaseModel):
    is_urgent: bool
    observation: Optional[str] = None


class FamilyResponse(BaseModel):
    id: int
    companionship_id: int
    name: str
    is_urgent: bool
    observation: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class MissionaryAssignmentCreate(BaseModel):
    description: Optional[str] = None


class MissionaryAssignmentResponse(BaseModel):
    id: int
    description: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
