# file: controllers/notification.py

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from quorumflow.database.connection import get_db
from quorumflow.database.models import Notification, User
from quorumflow.models.notification import NotificationResponse, ReadAllResponse
from quorumflow.services.firebase_auth import get_current_user

router = APIRouter()


def _owned_by(user: User):
    return Notification.user_id == user.id


async def _require_notification(db: AsyncSession, notification_id: int, user: User) -> Notification:
    notification = await db.scalar(
        select(Notification).where(Notification.id == notification_id, _owned_by(user))
    )
    if notification is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Notification not found")
    return notification


@router.get("/", response_model=List[NotificationResponse])
async def list_notifications(
        unread_only: bool = False,
        current_user: User = Depends(get_current_user),
        db: AsyncSession = Depends(get_db),
):
    """The caller's in-app inbox, newest first."""
    stmt = select(Notification).where(_owned_by(current_user))
    if unread_only:
        stmt = stmt.where(Notification.is_read.is_(False))
    stmt = stmt.order_by(Notification.created_at.desc(), Notification.id.desc())
    return (await db.scalars(stmt)).all()


@router.put("/read-all", response_model=ReadAllResponse)
async def mark_all_read(
        current_user: User = Depends(get_current_user),
        db: AsyncSession = Depends(get_db),
):
    result = await db.execute(
        update(Notification)
        .where(_owned_by(current_user), Notification.is_read.is_(False))
        .values(is_read=True)
        .execution_options(synchronize_session="fetch")
    )
    await db.commit()
    return ReadAllResponse(updated=result.rowcount)


@router.put("/{notification_id}/read", response_model=NotificationResponse)
async def mark_read(
        notification_id: int,
        current_user: User = Depends(get_current_user),
        db: AsyncSession = Depends(get_db),
):
    notification = await _require_notification(db, notification_id, current_user)
    if not notification.is_read:
        notification.is_read = True
        await db.commit()
        await db.refresh(notification)
    return notification


@router.delete("/", status_code=status.HTTP_204_NO_CONTENT)
async def clear_notifications(
        current_user: User = Depends(get_current_user),
        db: AsyncSession = Depends(get_db),
):
    await db.execute(delete(Notification).where(_owned_by(current_user)))
    await db.commit()


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_notification(
        notification_id: int,
        current_user: User = Depends(get_current_user),
        db: AsyncSession = Depends(get_db),
):
    await db.delete(await _require_notification(db, notification_id, current_user))
    await db.commit()
