# file: controllers/auth.py

import asyncio
import logging
from typing import Optional

import firebase_admin
from fastapi import APIRouter, Depends
from firebase_admin import auth
from sqlalchemy.ext.asyncio import AsyncSession

from quorumflow.database.connection import get_db
from quorumflow.database.models import User
from quorumflow.errors import InternalError
from quorumflow.models.user import UserResponse, UserSyncRequest
from quorumflow.services.firebase_app import get_firebase_app
from quorumflow.services.firebase_auth import find_user_by_uid, get_current_user, oauth2_scheme, verify_token

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/sync", response_model=UserResponse)
async def sync_user(
    sync_data: UserSyncRequest,
    token: Optional[str] = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db),
    app: firebase_admin.App = Depends(get_firebase_app),
):
    """Creates the local user record for a Firebase account on first sign-in. Idempotent."""
    claims = verify_token(token, app)

    existing = await find_user_by_uid(db, claims["uid"])
    if existing is not None:
        return existing

    try:
        record = await asyncio.to_thread(auth.get_user, claims["uid"], app=app)
        user = User(
            firebase_uid=record.uid,
            email=record.email or claims.get("email"),
            full_name=sync_data.fullName or record.display_name,
        )
        db.add(user)
        await db.commit()
        await db.refresh(user)
    except Exception as e:
        await db.rollback()
        logger.error("Could not create local profile for %s: %s", claims["uid"], e)
        raise InternalError("Failed to create user profile.") from e

    logger.info("Synced new user %s", user.id)
    return user


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: User = Depends(get_current_user)):
    return current_user
