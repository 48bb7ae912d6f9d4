# file: controllers/activities.py

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from quorumflow.database.connection import get_db
from quorumflow.database.models import Activity, User
from quorumflow.models.activity import ActivityCreate, ActivityResponse
from quorumflow.models.notification import BroadcastRequest, NotificationAction, NotificationContext
from quorumflow.services.firebase_auth import get_current_user
from quorumflow.services.notification_dispatcher import broadcast
from quorumflow.services.push_service import PushSender, get_push_sender
from quorumflow.utils.dates import format_weekday_date, in_year

logger = logging.getLogger(__name__)

router = APIRouter()


def build_activity_announcement(activity: Activity) -> BroadcastRequest:
    title = (activity.title or "").strip() or "Nueva actividad"
    details = []
    if activity.date:
        time_segment = f" a las {activity.time}" if activity.time else ""
        details.append(f"para el {format_weekday_date(activity.date)}{time_segment}")
    if activity.location:
        details.append(f"en {activity.location}")
    detail_text = f" {' '.join(details)}" if details else ""

    return BroadcastRequest(
        title="Nueva Actividad Programada",
        body=f'Se programó la actividad "{title}"{detail_text}.',
        url="/reports",
        tag=f"activity-{activity.id}",
        actions=[NotificationAction(action="open", title="Ver actividades", url="/reports")],
        context=NotificationContext(
            context_type="activity",
            context_id=str(activity.id),
            action_url="/reports",
            action_type="navigate",
        ),
    )


@router.get("/", response_model=List[ActivityResponse])
async def list_activities(
        year: Optional[int] = None,
        current_user: User = Depends(get_current_user),
        db: AsyncSession = Depends(get_db),
):
    result = await db.execute(select(Activity).order_by(Activity.date.desc()))
    activities = result.scalars().all()
    if year is not None:
        activities = [a for a in activities if in_year(a.date, year)]
    return activities


@router.post("/", response_model=ActivityResponse, status_code=status.HTTP_201_CREATED)
async def create_activity(
        activity_in: ActivityCreate,
        current_user: User = Depends(get_current_user),
        db: AsyncSession = Depends(get_db),
        sender: PushSender = Depends(get_push_sender),
):
    """Creates an activity and announces it to every user. A failed announcement does not undo the activity."""
    activity = Activity(**activity_in.model_dump())
    db.add(activity)
    await db.commit()
    await db.refresh(activity)
    response = ActivityResponse.model_validate(activity)

    try:
        await broadcast(db, sender, build_activity_announcement(activity))
    except Exception as e:
        await db.rollback()
        logger.error("Failed to broadcast activity notification for activity %s: %s", response.id, e)

    return response
