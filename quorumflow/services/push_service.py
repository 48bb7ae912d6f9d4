# file: services/push_service.py

import asyncio
import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol, Sequence

from pywebpush import WebPushException, webpush

from quorumflow.config import PUSH_CONCURRENCY, VAPID_PRIVATE_KEY, VAPID_PUBLIC_KEY, VAPID_SUBJECT_EMAIL
from quorumflow.utils.concurrency import gather_bounded

logger = logging.getLogger(__name__)

GONE_STATUS_CODES = (404, 410)


class PushDeliveryError(Exception):
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code

    @property
    def is_subscription_gone(self) -> bool:
        return self.status_code in GONE_STATUS_CODES


class PushSender(Protocol):
    async def send(self, subscription: Dict[str, Any], payload: Dict[str, Any]) -> None: ...


class NullPushSender:
    """Used when VAPID keys are not configured: push delivery is skipped."""

    async def send(self, subscription: Dict[str, Any], payload: Dict[str, Any]) -> None:
        return None


class WebPushSender:
    def __init__(self, vapid_private_key: str, vapid_claims: Dict[str, Any]):
        self.vapid_private_key = vapid_private_key
        self.vapid_claims = vapid_claims

    def _send(self, subscription: Dict[str, Any], data: str) -> None:
        try:
            webpush(
                subscription_info=subscription,
                data=data,
                vapid_private_key=self.vapid_private_key,
                vapid_claims=dict(self.vapid_claims),
            )
        except WebPushException as e:
            status_code = e.response.status_code if e.response is not None else None
            raise PushDeliveryError(str(e), status_code=status_code) from e

    async def send(self, subscription: Dict[str, Any], payload: Dict[str, Any]) -> None:
        await asyncio.to_thread(self._send, subscription, json.dumps(payload))


def build_push_sender() -> PushSender:
    if not (VAPID_PUBLIC_KEY and VAPID_PRIVATE_KEY):
        logger.info("VAPID keys not configured; push notifications are disabled.")
        return NullPushSender()
    return WebPushSender(VAPID_PRIVATE_KEY, {"sub": VAPID_SUBJECT_EMAIL})


@dataclass
class SubscriptionTarget:
    user_id: int
    subscription: Dict[str, Any]


@dataclass
class DeliveryResult:
    target: SubscriptionTarget
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def log_delivery_failure(user_id: int, error: BaseException) -> None:
    # Invalid subscriptions are reported but kept; nothing removes them here.
    if isinstance(error, PushDeliveryError) and error.is_subscription_gone:
        logger.warning("Subscription for user %s is invalid. Consider removing it.", user_id)
    else:
        logger.error("Error sending push notification to user %s: %s", user_id, error)


async def send_to_subscriptions(
        sender: PushSender,
        targets: Sequence[SubscriptionTarget],
        payload: Dict[str, Any],
        concurrency: int = PUSH_CONCURRENCY,
) -> List[DeliveryResult]:
    """Pushes one payload to every target; a failing target never stops the rest."""
    results = await gather_bounded((sender.send(t.subscription, payload) for t in targets), concurrency)

    deliveries = []
    for target, result in zip(targets, results):
        error = result if isinstance(result, BaseException) else None
        if error is not None:
            log_delivery_failure(target.user_id, error)
        deliveries.append(DeliveryResult(target=target, error=error))
    return deliveries


def get_push_sender() -> PushSender:
    """FastAPI dependency."""
    return build_push_sender()
