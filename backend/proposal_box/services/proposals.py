"""Proposal store: owns the proposal collection and persists it as one document."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Sequence
from datetime import datetime, timezone
from functools import lru_cache

from pydantic import TypeAdapter, ValidationError

from proposal_box.config import get_settings
from proposal_box.db.session import SessionLocal
from proposal_box.schema.categories import normalize_category
from proposal_box.schema.statuses import ProposalStatus
from proposal_box.schemas.identity import Identity
from proposal_box.schemas.proposal import Proposal, ProposalCreate
from proposal_box.services.demo import build_demo_proposals
from proposal_box.services.endorsements import toggle_endorsement as toggle_ledger_entry
from proposal_box.storage.document_store import DocumentStore, PersistenceError, SqlDocumentStore

logger = logging.getLogger(__name__)

_PROPOSAL_COLLECTION = TypeAdapter(list[Proposal])


class AuthenticationRequiredError(RuntimeError):
    """Raised when an operation needs a signed-in identity and none was given."""


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def serialize_proposals(proposals: Sequence[Proposal]) -> str:
    """Encode a proposal collection as the persisted JSON document."""

    return _PROPOSAL_COLLECTION.dump_json(list(proposals), by_alias=True).decode("utf-8")


def deserialize_proposals(body: str) -> list[Proposal]:
    """Decode a persisted JSON document into proposals."""

    return _PROPOSAL_COLLECTION.validate_json(body)


class ProposalStore:
    """Encapsulated proposal collection.

    Storage order is most-recent-first. Every mutation builds the updated
    collection aside, writes the whole collection under one key, and only then
    replaces the in-memory copy. A failed write leaves memory unchanged and
    raises ``PersistenceError``.
    """

    def __init__(
        self,
        documents: DocumentStore,
        *,
        key: str = "schoolProposals",
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._documents = documents
        self._key = key
        self._clock = clock
        self._proposals: list[Proposal] = []
        self._loaded = False
        self._lock = threading.RLock()

    def load(self, *, seed: Sequence[Proposal] | None = None) -> list[Proposal]:
        """Read the persisted collection, seeding it when absent and a seed is given."""

        with self._lock:
            body = self._documents.get(self._key)
            if body is None:
                self._proposals = []
                self._loaded = True
                if seed:
                    self._commit(list(seed))
                    logger.info("proposals.seeded key=%s count=%d", self._key, len(seed))
                return self.list_proposals()
            try:
                self._proposals = deserialize_proposals(body)
            except ValidationError as exc:
                logger.exception("proposals.load_failed key=%s", self._key)
                raise PersistenceError(f"Stored proposal collection is unreadable: {self._key}") from exc
            self._loaded = True
            logger.info("proposals.loaded key=%s count=%d", self._key, len(self._proposals))
            return self.list_proposals()

    def list_proposals(self) -> list[Proposal]:
        """Return copies of all proposals in storage order."""

        with self._lock:
            self._ensure_loaded()
            return [proposal.model_copy(deep=True) for proposal in self._proposals]

    def get(self, proposal_id: int) -> Proposal | None:
        """Return a copy of one proposal, or None when the id is unknown."""

        with self._lock:
            self._ensure_loaded()
            proposal = self._find(proposal_id)
            return proposal.model_copy(deep=True) if proposal is not None else None

    def create(self, fields: ProposalCreate) -> Proposal:
        """Create a RECEIVED proposal with the next id and persist the collection."""

        with self._lock:
            self._ensure_loaded()
            next_id = max((p.id for p in self._proposals), default=0) + 1
            proposal = Proposal(
                id=next_id,
                title=fields.title,
                content=fields.content,
                category=normalize_category(fields.category).value,
                status=ProposalStatus.RECEIVED,
                administrator_response="",
                created_at=self._clock(),
                endorsements=[],
            )
            self._commit([proposal, *self._proposals])
            logger.info("proposals.created id=%d category=%s", proposal.id, proposal.category)
            return proposal.model_copy(deep=True)

    def set_status(
        self,
        proposal_id: int,
        status: ProposalStatus,
        administrator_response: str = "",
    ) -> Proposal | None:
        """Replace status and administrator response; unknown ids are a no-op.

        Any status may follow any other, including moving backwards.
        """

        with self._lock:
            self._ensure_loaded()
            current = self._find(proposal_id)
            if current is None:
                logger.info("proposals.set_status_skipped id=%d reason=not_found", proposal_id)
                return None
            updated = current.model_copy(
                update={"status": ProposalStatus(status), "administrator_response": administrator_response},
            )
            self._commit(self._replace(updated))
            logger.info(
                "proposals.status_changed id=%d from=%s to=%s",
                proposal_id,
                current.status.value,
                updated.status.value,
            )
            return updated.model_copy(deep=True)

    def toggle_endorsement(self, proposal_id: int, identity: Identity | None) -> tuple[Proposal, bool] | None:
        """Sign or unsign ``proposal_id`` for ``identity``.

        Returns the updated proposal and whether the identity now endorses it,
        or None when the id is unknown.
        """

        if identity is None:
            raise AuthenticationRequiredError("Sign in to endorse a proposal.")
        with self._lock:
            self._ensure_loaded()
            current = self._find(proposal_id)
            if current is None:
                return None
            endorsements, endorsed = toggle_ledger_entry(current.endorsements, identity, now=self._clock())
            updated = current.model_copy(update={"endorsements": endorsements})
            self._commit(self._replace(updated))
            logger.info(
                "proposals.endorsement_toggled id=%d identity=%s endorsed=%s count=%d",
                proposal_id,
                identity.id,
                endorsed,
                len(endorsements),
            )
            return updated.model_copy(deep=True), endorsed

    def _ensure_loaded(self) -> None:
        if not self._loaded:
            self.load()

    def _find(self, proposal_id: int) -> Proposal | None:
        for proposal in self._proposals:
            if proposal.id == proposal_id:
                return proposal
        return None

    def _replace(self, updated: Proposal) -> list[Proposal]:
        return [updated if proposal.id == updated.id else proposal for proposal in self._proposals]

    def _commit(self, updated: list[Proposal]) -> None:
        body = serialize_proposals(updated)
        try:
            self._documents.put(self._key, body)
        except PersistenceError:
            logger.error("proposals.persist_failed key=%s count=%d", self._key, len(updated))
            raise
        self._proposals = updated


@lru_cache
def get_proposal_store() -> ProposalStore:
    """Return the process-wide store backed by the configured database."""

    settings = get_settings()
    store = ProposalStore(SqlDocumentStore(SessionLocal), key=settings.proposals_document_key)
    store.load(seed=build_demo_proposals(_utcnow()) if settings.seed_demo_proposals else None)
    return store
