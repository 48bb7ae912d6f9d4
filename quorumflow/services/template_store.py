# file: services/template_store.py

import asyncio
import logging
from pathlib import Path
from typing import Optional

import firebase_admin
from firebase_admin import storage

from quorumflow.config import REPORT_TEMPLATE_FILE, REPORT_TEMPLATE_PATH

logger = logging.getLogger(__name__)


class FirebaseTemplateStore:
    """Downloads the report template from the Firebase Storage bucket."""

    def __init__(self, app: Optional[firebase_admin.App], path: str = REPORT_TEMPLATE_PATH):
        self.app = app
        self.path = path

    def _download(self) -> bytes:
        bucket = storage.bucket(app=self.app)
        return bucket.blob(self.path).download_as_bytes()

    async def load(self) -> bytes:
        logger.info("Downloading report template %s", self.path)
        return await asyncio.to_thread(self._download)


class FileTemplateStore:
    def __init__(self, path: str | Path):
        self.path = Path(path)

    async def load(self) -> bytes:
        return await asyncio.to_thread(self.path.read_bytes)


def build_template_store(app: Optional[firebase_admin.App]):
    if REPORT_TEMPLATE_FILE:
        return FileTemplateStore(REPORT_TEMPLATE_FILE)
    return FirebaseTemplateStore(app)
