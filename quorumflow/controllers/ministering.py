# file: controllers/ministering.py

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from quorumflow.database.connection import get_db
from quorumflow.database.models import Family, MissionaryAssignment, User
from quorumflow.models.ministering import (
    FamilyResponse,
    FamilyUrgencyUpdate,
    MissionaryAssignmentCreate,
    MissionaryAssignmentResponse,
)
from quorumflow.models.notification import BroadcastRequest, NotificationAction, NotificationContext
from quorumflow.services.firebase_auth import get_current_user
from quorumflow.services.notification_dispatcher import broadcast, slugify
from quorumflow.services.push_service import PushSender, get_push_sender

logger = logging.getLogger(__name__)

router = APIRouter()


def build_urgent_family_alert(family: Family) -> BroadcastRequest:
    family_name = family.name or "Familia"
    family_slug = slugify(family_name) or "familia"
    observation = (family.observation or "").strip()
    body = (
        f"La familia {family_name} requiere ayuda: {observation}"
        if observation
        else f"La familia {family_name} ha sido marcada como urgente."
    )
    return BroadcastRequest(
        title="Nueva familia con necesidad urgente",
        body=body,
        url="/ministering/urgent",
        tag=f"urgent-family-{family.companionship_id}-{family_slug}",
        actions=[NotificationAction(action="open", title="Ver familias urgentes", url="/ministering/urgent")],
        context=NotificationContext(
            context_type="urgent_family",
            context_id=f"{family.companionship_id}:{family_slug}",
            action_url="/ministering/urgent",
            action_type="navigate",
        ),
    )


@router.put("/families/{family_id}/urgency", response_model=FamilyResponse)
async def update_family_urgency(
        family_id: int,
        update: FamilyUrgencyUpdate,
        current_user: User = Depends(get_current_user),
        db: AsyncSession = Depends(get_db),
        sender: PushSender = Depends(get_push_sender),
):
    """Sets the urgent flag of a family; only a change from not urgent to urgent is announced."""
    family = await db.get(Family, family_id)
    if family is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Family not found")

    newly_urgent = update.is_urgent and not family.is_urgent
    family.is_urgent = update.is_urgent
    if update.observation is not None:
        family.observation = update.observation
    await db.commit()
    await db.refresh(family)
    response = FamilyResponse.model_validate(family)

    if newly_urgent:
        try:
            await broadcast(db, sender, build_urgent_family_alert(family))
        except Exception as e:
            await db.rollback()
            logger.error("Failed to broadcast urgent family notification for family %s: %s", response.id, e)

    return response


def build_missionary_assignment_announcement(assignment: MissionaryAssignment) -> BroadcastRequest:
    description = (assignment.description or "").strip()
    return BroadcastRequest(
        title="Nueva Asignación Misional",
        body=description or "Se registró una nueva asignación misional.",
        url="/missionary-work",
        tag=f"missionary-assignment-{assignment.id}",
        actions=[NotificationAction(action="open", title="Ver asignaciones", url="/missionary-work")],
        context=NotificationContext(
            context_type="missionary_assignment",
            context_id=str(assignment.id),
            action_url="/missionary-work",
            action_type="navigate",
        ),
    )


@router.post("/missionary-assignments", response_model=MissionaryAssignmentResponse,
             status_code=status.HTTP_201_CREATED)
async def create_missionary_assignment(
        payload: MissionaryAssignmentCreate,
        current_user: User = Depends(get_current_user),
        db: AsyncSession = Depends(get_db),
        sender: PushSender = Depends(get_push_sender),
):
    """Records a missionary assignment and announces it to every user. A failed announcement does not undo it."""
    assignment = MissionaryAssignment(description=payload.description)
    db.add(assignment)
    await db.commit()
    await db.refresh(assignment)
    response = MissionaryAssignmentResponse.model_validate(assignment)

    try:
        await broadcast(db, sender, build_missionary_assignment_announcement(assignment))
    except Exception as e:
        await db.rollback()
        logger.error("Failed to broadcast missionary assignment %s: %s", response.id, e)

    return response
