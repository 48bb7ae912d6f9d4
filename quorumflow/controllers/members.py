# file: controllers/members.py

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from quorumflow.database.connection import get_db
from quorumflow.database.models import Member, User
from quorumflow.models.member import MemberCreate, MemberResponse, MemberStatus, MemberUpdate
from quorumflow.services.firebase_auth import get_current_user

router = APIRouter()


async def _get_member(db: AsyncSession, member_id: int) -> Member:
    member = await db.get(Member, member_id)
    if member is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Member not found")
    return member


@router.get("/", response_model=List[MemberResponse])
async def list_members(
        member_status: Optional[MemberStatus] = Query(default=None, alias="status"),
        current_user: User = Depends(get_current_user),
        db: AsyncSession = Depends(get_db),
):
    """Lists members by last name. Members without a stored status count as active."""
    stmt = select(Member).order_by(Member.last_name, Member.first_name)
    if member_status == "active":
        stmt = stmt.where(or_(Member.status == "active", Member.status.is_(None)))
    elif member_status is not None:
        stmt = stmt.where(Member.status == member_status)
    result = await db.execute(stmt)
    return result.scalars().all()


@router.get("/{member_id}", response_model=MemberResponse)
async def get_member(
        member_id: int,
        current_user: User = Depends(get_current_user),
        db: AsyncSession = Depends(get_db),
):
    return await _get_member(db, member_id)


@router.post("/", response_model=MemberResponse, status_code=status.HTTP_201_CREATED)
async def create_member(
        member_in: MemberCreate,
        current_user: User = Depends(get_current_user),
        db: AsyncSession = Depends(get_db),
):
    member = Member(**member_in.model_dump())
    db.add(member)
    await db.commit()
    await db.refresh(member)
    return member


@router.put("/{member_id}", response_model=MemberResponse)
async def update_member(
        member_id: int,
        member_update: MemberUpdate,
        current_user: User = Depends(get_current_user),
        db: AsyncSession = Depends(get_db),
):
    member = await _get_member(db, member_id)
    for name, value in member_update.model_dump(exclude_unset=True).items():
        setattr(member, name, value)
    await db.commit()
    await db.refresh(member)
    return member


@router.delete("/{member_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_member(
        member_id: int,
        current_user: User = Depends(get_current_user),
        db: AsyncSession = Depends(get_db),
):
    member = await _get_member(db, member_id)
    await db.delete(member)
    await db.commit()
