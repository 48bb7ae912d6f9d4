# file: models/activity.py

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from quorumflow.utils.dates import to_naive_utc


class ActivityCreate(BaseModel):
    title: str
    date: datetime
    description: str = ""
    time: Optional[str] = None
    location: Optional[str] = None
    context: Optional[str] = None
    learning: Optional[str] = None
    additional_text: Optional[str] = None
    image_urls: List[str] = Field(default_factory=list)

    @field_validator('title')
    def validate_title(cls, v):
        if not v.strip():
            raise ValueError('Title cannot be empty')
        return v.strip()

    @field_validator('date')
    def normalize_date(cls, v):
        return to_naive_utc(v)


class ActivityResponse(ActivityCreate):
    id: int

    model_config = ConfigDict(from_attributes=True)
