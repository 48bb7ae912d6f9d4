# file: services/notification_scheduler.py

import asyncio
import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import List, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from quorumflow.config import NOTIFICATION_HOUR, PUSH_CONCURRENCY
from quorumflow.database.connection import get_db_session
from quorumflow.database.models import Birthday, Companionship, Notification, PushSubscription, Service
from quorumflow.services.push_service import (
    PushSender,
    SubscriptionTarget,
    build_push_sender,
    log_delivery_failure,
)
from quorumflow.utils.concurrency import gather_bounded
from quorumflow.utils.dates import as_date, days_from

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NotificationPayload:
    title: str
    body: str

    def to_dict(self) -> dict:
        return {"title": self.title, "body": self.body}


def service_reminders(today: date, services: Sequence[Service]) -> List[NotificationPayload]:
    next_week = days_from(today, 7)
    tomorrow = days_from(today, 1)
    payloads = []
    for service in services:
        service_day = as_date(service.date)
        time_string = f" a las {service.time}" if service.time else ""
        if service_day == next_week:
            payloads.append(NotificationPayload(
                "Recordatorio de Servicio",
                f'El servicio "{service.title}" está programado para la próxima semana.',
            ))
        if service_day == tomorrow:
            payloads.append(NotificationPayload(
                "Recordatorio de Servicio",
                f'¡El servicio "{service.title}" es mañana{time_string}!',
            ))
    return payloads


def urgent_family_reminders(companionships: Sequence[Companionship]) -> List[NotificationPayload]:
    # Fires on every run while the flag stays set, not only when it changes.
    return [
        NotificationPayload(
            "Necesidad Urgente",
            f"Recordatorio: La familia {family.name} tiene una necesidad urgente que requiere atención.",
        )
        for companionship in companionships
        for family in companionship.families
        if family.is_urgent
    ]


def birthday_this_year(today: date, birth_date: date) -> date:
    try:
        return birth_date.replace(year=today.year)
    except ValueError:
        # Feb 29 in a common year is celebrated on Mar 1
        return date(today.year, 3, 1)


def birthday_reminders(today: date, birthdays: Sequence[Birthday]) -> List[NotificationPayload]:
    in_two_weeks = days_from(today, 14)
    payloads = []
    for birthday in birthdays:
        next_birthday = birthday_this_year(today, as_date(birthday.birth_date))
        if next_birthday == in_two_weeks:
            payloads.append(NotificationPayload(
                "Próximo Cumpleaños",
                f"En 2 semanas es el cumpleaños de {birthday.name}.",
            ))
        if next_birthday == today:
            payloads.append(NotificationPayload(
                "¡Feliz Cumpleaños!",
                f"Hoy es el cumpleaños de {birthday.name}. ¡No olvides felicitarle!",
            ))
    return payloads


def build_daily_notifications(
        today: date,
        services: Sequence[Service],
        companionships: Sequence[Companionship],
        birthdays: Sequence[Birthday],
) -> List[NotificationPayload]:
    return (
        service_reminders(today, services)
        + urgent_family_reminders(companionships)
        + birthday_reminders(today, birthdays)
    )


async def _deliver(sender: PushSender, target: SubscriptionTarget, payload: NotificationPayload) -> None:
    try:
        await sender.send(target.subscription, payload.to_dict())
    except Exception as e:
        log_delivery_failure(target.user_id, e)


async def run_daily_notifications(db: AsyncSession, sender: PushSender, today: Optional[date] = None) -> int:
    """
    Evaluates the daily reminders and fans them out to every push subscription.

    Every (subscription, notification) pair gets a push attempt and an in-app
    notification row for the subscription's user. A failed push never prevents
    the row from being written. Returns the number of notifications built.
    """
    today = today or date.today()
    logger.info("Checking for notifications to send for %s...", today)

    services = (await db.execute(select(Service))).scalars().all()
    companionships = (await db.execute(select(Companionship))).scalars().all()
    birthdays = (await db.execute(select(Birthday))).scalars().all()

    payloads = build_daily_notifications(today, services, companionships, birthdays)
    if not payloads:
        logger.info("No notifications to send today.")
        return 0

    subscriptions = (await db.execute(select(PushSubscription))).scalars().all()
    if not subscriptions:
        logger.info("No users subscribed to notifications.")
        return len(payloads)

    targets = [SubscriptionTarget(user_id=s.user_id, subscription=s.subscription) for s in subscriptions]

    for target in targets:
        db.add_all([
            Notification(user_id=target.user_id, title=payload.title, body=payload.body, is_read=False)
            for payload in payloads
        ])

    await gather_bounded(
        (_deliver(sender, target, payload) for target in targets for payload in payloads),
        PUSH_CONCURRENCY,
    )
    await db.commit()

    logger.info("Sent %d types of notifications to %d subscriptions.", len(payloads), len(targets))
    return len(payloads)


def seconds_until_next_run(now: datetime, hour: int = NOTIFICATION_HOUR) -> float:
    next_run = now.replace(hour=hour, minute=0, second=0, microsecond=0)
    if next_run <= now:
        next_run += timedelta(days=1)
    return (next_run - now).total_seconds()


async def run_once(sender: Optional[PushSender] = None) -> int:
    sender = sender or build_push_sender()
    async with get_db_session() as db:
        return await run_daily_notifications(db, sender)


async def main_scheduler_loop():
    """Runs the notification job once a day at NOTIFICATION_HOUR, local time."""
    sender = build_push_sender()
    while True:
        delay = seconds_until_next_run(datetime.now())
        logger.info("Next notification run in %.0f seconds.", delay)
        await asyncio.sleep(delay)
        try:
            await run_once(sender)
        except Exception:
            logger.exception("An error occurred in the notification job")
