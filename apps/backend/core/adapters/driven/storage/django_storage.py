"""Document storage on top of Django's configured default storage."""

from __future__ import annotations

import logging
import os
import uuid

from django.core.files.base import ContentFile
from django.core.files.storage import default_storage
from django.utils.text import get_valid_filename

from apps.backend.core.domain.errors import NotFound, PersistenceFailure

logger = logging.getLogger(__name__)


class DjangoDocumentStorage:
    """
    DocumentStoragePort implementation.

    References are storage-relative paths such as
    `payment_proofs/12/5f3c..._receipt.png`. Contents are never logged.
    """

    def __init__(self, storage=None):
        self._storage = storage or default_storage

    def save(self, folder: str, filename: str, content: bytes) -> str:
        name = get_valid_filename(os.path.basename(filename or "")) or "document"
        path = f"{folder.strip('/')}/{uuid.uuid4().hex[:12]}_{name}"
        try:
            reference = self._storage.save(path, ContentFile(content))
        except OSError as e:
            logger.error(f"Failed to store document under {folder}: {e}", exc_info=True)
            raise PersistenceFailure("Could not store the uploaded document") from e
        logger.info(f"Stored document {reference} ({len(content)} bytes)")
        return reference

    def open(self, reference: str) -> bytes:
        if not reference or not self._storage.exists(reference):
            raise NotFound("Document not found")
        with self._storage.open(reference, "rb") as fh:
            return fh.read()
