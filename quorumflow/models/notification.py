# file: models/notification.py

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

NotificationContextType = Literal[
    "convert", "activity", "service", "member", "council", "baptism",
    "birthday", "investigator", "urgent_family", "missionary_assignment",
]


class NotificationBase(BaseModel):
    title: str
    body: Optional[str] = None


class NotificationResponse(NotificationBase):
    id: int
    user_id: int
    is_read: bool
    created_at: datetime
    action_url: Optional[str] = None
    action_type: Optional[str] = None
    context_type: Optional[str] = None
    context_id: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class NotificationAction(BaseModel):
    action: str
    title: str
    icon: Optional[str] = None
    url: Optional[str] = None


class NotificationContext(BaseModel):
    context_type: Optional[NotificationContextType] = None
    context_id: Optional[str] = None
    action_url: Optional[str] = None
    action_type: Optional[Literal["navigate", "external"]] = None


class BroadcastRequest(BaseModel):
    title: str
    body: str
    url: Optional[str] = None
    tag: Optional[str] = None
    actions: List[NotificationAction] = Field(default_factory=list)
    context: Optional[NotificationContext] = None


class ReadAllResponse(BaseModel):
    updated: int
