"""Document store implementations: whole-document reads and writes by key."""

from __future__ import annotations

import logging
from typing import Protocol

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from proposal_box.models.document import Document

logger = logging.getLogger(__name__)


class PersistenceError(RuntimeError):
    """Raised when a document cannot be read or written."""


class DocumentStore(Protocol):
    """Protocol for key-value document persistence."""

    def get(self, key: str) -> str | None:
        """Return the serialized document for ``key`` or None when absent."""

    def put(self, key: str, body: str) -> None:
        """Replace the document stored under ``key``."""


class InMemoryDocumentStore:
    """Process-local document store."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._documents: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._documents.get(key)

    def put(self, key: str, body: str) -> None:
        self._documents[key] = body


class SqlDocumentStore:
    """Document store backed by the ``documents`` table.

    Each ``put`` runs in its own session and transaction, so a reader never
    observes a partially replaced document.
    """

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    def get(self, key: str) -> str | None:
        try:
            with self._session_factory() as db:
                return db.scalar(select(Document.body).where(Document.key == key))
        except SQLAlchemyError as exc:
            logger.exception("documents.read_failed key=%s", key)
            raise PersistenceError(f"Failed to read document: {key}") from exc

    def put(self, key: str, body: str) -> None:
        try:
            with self._session_factory() as db:
                document = db.scalar(select(Document).where(Document.key == key))
                if document is None:
                    db.add(Document(key=key, body=body))
                else:
                    document.body = body
                db.commit()
        except SQLAlchemyError as exc:
            logger.exception("documents.write_failed key=%s bytes=%d", key, len(body))
            raise PersistenceError(f"Failed to write document: {key}") from exc
