# file: models/user.py

from typing import Optional

from pydantic import BaseModel, ConfigDict


class UserSyncRequest(BaseModel):
    fullName: Optional[str] = None


class UserResponse(BaseModel):
    id: int
    firebase_uid: str
    email: Optional[str] = None
    full_name: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)
