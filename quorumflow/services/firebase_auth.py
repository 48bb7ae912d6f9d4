# file: services/firebase_auth.py

import logging
from typing import Optional

import firebase_admin
from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from firebase_admin import auth
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from quorumflow.database.connection import get_db
from quorumflow.database.models import User
from quorumflow.errors import InternalError, UnauthenticatedError
from quorumflow.services.firebase_app import get_firebase_app

logger = logging.getLogger(__name__)

# auto_error=False so a missing token is reported in the API error format
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/sync", auto_error=False)


def verify_token(token: Optional[str], app: Optional[firebase_admin.App] = None) -> dict:
    """Verifies a Firebase ID token and returns its decoded claims."""
    if not token:
        raise UnauthenticatedError("The function must be called while authenticated.")
    try:
        return auth.verify_id_token(token, app=app)
    except auth.ExpiredIdTokenError:
        raise UnauthenticatedError("Token has expired")
    except auth.UserDisabledError:
        raise UnauthenticatedError("User account is disabled")
    except (auth.InvalidIdTokenError, ValueError) as e:
        logger.info("Rejected Firebase token: %s", e)
        raise UnauthenticatedError("Could not validate credentials")
    except auth.CertificateFetchError as e:
        logger.error("Could not fetch Firebase public keys: %s", e)
        raise InternalError("Could not verify credentials at this time.") from e


async def find_user_by_uid(db: AsyncSession, firebase_uid: str) -> Optional[User]:
    return await db.scalar(select(User).where(User.firebase_uid == firebase_uid))


async def get_current_user(
        token: Optional[str] = Depends(oauth2_scheme),
        db: AsyncSession = Depends(get_db),
        app: firebase_admin.App = Depends(get_firebase_app),
) -> User:
    """
    Required dependency for every protected route.

    The token must verify and belong to an account that has already been
    synced through /auth/sync; anything else is an UnauthenticatedError.
    """
    claims = verify_token(token, app)
    user = await find_user_by_uid(db, claims["uid"])
    if user is None:
        raise UnauthenticatedError("User profile not found. Please sync your account.")
    return user
