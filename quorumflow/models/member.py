# file: models/member.py

from datetime import date, datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from quorumflow.utils.dates import to_naive_utc

MemberStatus = Literal["active", "less_active", "inactive"]


class MemberCreate(BaseModel):
    first_name: str
    last_name: str
    phone: Optional[str] = None
    birth_date: Optional[date] = None
    baptism_date: Optional[datetime] = None
    status: MemberStatus = "active"

    @field_validator('first_name', 'last_name')
    def validate_name(cls, v):
        if not v.strip():
            raise ValueError('Name cannot be empty')
        return v.strip()

    @field_validator('baptism_date')
    def normalize_baptism_date(cls, v):
        return to_naive_utc(v)


class MemberUpdate(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    birth_date: Optional[date] = None
    baptism_date: Optional[datetime] = None
    status: Optional[MemberStatus] = None

    @field_validator('baptism_date')
    def normalize_baptism_date(cls, v):
        return to_naive_utc(v)


class MemberResponse(BaseModel):
    id: int
    first_name: str
    last_name: str
    phone: Optional[str] = None
    birth_date: Optional[date] = None
    baptism_date: Optional[datetime] = None
    status: MemberStatus = "active"

    model_config = ConfigDict(from_attributes=True)

    @field_validator('status', mode='before')
    def default_status(cls, v):
        return v or "active"
