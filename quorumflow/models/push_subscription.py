# file: models/push_subscription.py

from pydantic import BaseModel, ConfigDict


class PushSubscriptionKeys(BaseModel):
    p256dh: str
    auth: str


class PushSubscriptionPayload(BaseModel):
    """Browser PushSubscription.toJSON() shape."""
    endpoint: str
    keys: PushSubscriptionKeys
    expirationTime: float | None = None


class UnsubscribeRequest(BaseModel):
    endpoint: str


class PushSubscriptionResponse(BaseModel):
    id: int
    user_id: int
    endpoint: str

    model_config = ConfigDict(from_attributes=True)
