# file: services/notification_dispatcher.py

import logging
import re
import unicodedata
from typing import Any, Dict

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from quorumflow.database.models import Notification, PushSubscription, User
from quorumflow.models.notification import BroadcastRequest
from quorumflow.services.push_service import PushSender, SubscriptionTarget, send_to_subscriptions

logger = logging.getLogger(__name__)


def slugify(value: str) -> str:
    normalized = unicodedata.normalize("NFD", value)
    without_accents = "".join(c for c in normalized if not unicodedata.combining(c))
    return re.sub(r"[^a-z0-9]+", "-", without_accents.lower()).strip("-")


def build_notification_record(user_id: int, request: BroadcastRequest) -> Notification:
    context = request.context
    action_url = (context.action_url if context else None) or request.url
    action_type = (context.action_type if context else None) or ("navigate" if action_url else None)
    return Notification(
        user_id=user_id,
        title=request.title,
        body=request.body,
        is_read=False,
        action_url=action_url,
        action_type=action_type,
        context_type=context.context_type if context else None,
        context_id=context.context_id if context else None,
    )


def build_push_payload(request: BroadcastRequest) -> Dict[str, Any]:
    context = request.context
    return {
        "title": request.title,
        "body": request.body,
        "url": request.url or (context.action_url if context else None),
        "tag": request.tag,
        "actions": [action.model_dump(exclude_none=True) for action in request.actions],
        "data": {
            "contextType": context.context_type if context else None,
            "contextId": context.context_id if context else None,
        },
    }


async def broadcast(db: AsyncSession, sender: PushSender, request: BroadcastRequest) -> int:
    """
    Stores an in-app notification for every registered user and pushes the
    same message to every subscription. Returns the number of records written.
    """
    logger.info("Broadcasting notification: %s", request.title)

    user_ids = (await db.execute(select(User.id))).scalars().all()
    subscriptions = (await db.execute(select(PushSubscription))).scalars().all()

    if not user_ids:
        logger.warning("No users registered in the system to notify.")

    db.add_all([build_notification_record(user_id, request) for user_id in user_ids])

    targets = [
        SubscriptionTarget(user_id=s.user_id, subscription=s.subscription)
        for s in subscriptions
        if s.subscription and s.subscription.get("endpoint")
    ]
    if targets:
        deliveries = await send_to_subscriptions(sender, targets, build_push_payload(request))
        failed = sum(1 for d in deliveries if not d.ok)
        if failed:
            logger.warning("%d push notifications were rejected during broadcast.", failed)
    else:
        logger.info("No push subscriptions to notify.")

    await db.commit()
    return len(user_ids)
