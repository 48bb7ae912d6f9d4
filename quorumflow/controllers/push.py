# file: controllers/push.py

from fastapi import APIRouter, Depends, status
from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession

from quorumflow.config import VAPID_PUBLIC_KEY
from quorumflow.database.connection import get_db
from quorumflow.database.models import PushSubscription, User
from quorumflow.models.push_subscription import (
    PushSubscriptionPayload,
    PushSubscriptionResponse,
    UnsubscribeRequest,
)
from quorumflow.services.firebase_auth import get_current_user

router = APIRouter()


@router.get("/vapid-public-key")
async def get_vapid_public_key():
    return {"publicKey": VAPID_PUBLIC_KEY}


@router.post("/subscribe", response_model=PushSubscriptionResponse, status_code=status.HTTP_201_CREATED)
async def subscribe(
        payload: PushSubscriptionPayload,
        current_user: User = Depends(get_current_user),
        db: AsyncSession = Depends(get_db),
):
    """Registers the browser subscription for the current user. Re-subscribing an endpoint moves it."""
    result = await db.execute(select(PushSubscription).where(PushSubscription.endpoint == payload.endpoint))
    subscription = result.scalars().first()
    if subscription is None:
        subscription = PushSubscription(endpoint=payload.endpoint)
        db.add(subscription)

    subscription.user_id = current_user.id
    subscription.subscription = payload.model_dump(exclude_none=True)
    await db.commit()
    await db.refresh(subscription)
    return subscription


@router.post("/unsubscribe", status_code=status.HTTP_204_NO_CONTENT)
async def unsubscribe(
        payload: UnsubscribeRequest,
        current_user: User = Depends(get_current_user),
        db: AsyncSession = Depends(get_db),
):
    stmt = delete(PushSubscription).where(
        PushSubscription.endpoint == payload.endpoint,
        PushSubscription.user_id == current_user.id,
    )
    await db.execute(stmt)
    await db.commit()
