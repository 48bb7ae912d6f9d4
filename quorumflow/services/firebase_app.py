# file: services/firebase_app.py

import logging

import firebase_admin
from firebase_admin import credentials

from quorumflow.config import FIREBASE_CREDENTIALS, FIREBASE_STORAGE_BUCKET

logger = logging.getLogger(__name__)


def get_firebase_app() -> firebase_admin.App:
    """
    Returns the process-wide firebase-admin app, initializing it on first use.
    Callers receive it as an explicit handle rather than relying on the
    default app being present.
    """
    if firebase_admin._apps:
        return firebase_admin.get_app()

    options = {"storageBucket": FIREBASE_STORAGE_BUCKET} if FIREBASE_STORAGE_BUCKET else None
    cred = credentials.Certificate(FIREBASE_CREDENTIALS) if FIREBASE_CREDENTIALS else None
    app = firebase_admin.initialize_app(cred, options)
    logger.info("Firebase Admin SDK initialized.")
    return app
