"""Submission gate: moves one draft through AI moderation into the proposal store."""

from __future__ import annotations

import logging
import threading
import uuid
from dataclasses import dataclass
from functools import lru_cache

from proposal_box.moderation.client import ModerationClient, unavailable_verdict
from proposal_box.schema.categories import Category
from proposal_box.schemas.draft import Draft, DraftRead, GateState
from proposal_box.schemas.moderation import ModerationVerdict
from proposal_box.schemas.proposal import Proposal, ProposalCreate
from proposal_box.services.proposals import ProposalStore

logger = logging.getLogger(__name__)


class DraftValidationError(ValueError):
    """Raised when a draft lacks a required field for the requested action."""


class SubmissionError(RuntimeError):
    """Raised when an action is not legal in the gate's current state."""


class DraftNotFoundError(LookupError):
    """Raised when a draft id is not registered."""


@dataclass(frozen=True, slots=True)
class CheckTicket:
    """One in-flight check, bound to the text that was sent for moderation."""

    sequence: int
    title: str
    content: str


class SubmissionGate:
    """State machine over a single draft.

    COMPOSING -> CHECKING -> APPROVED | REJECTED -> SUBMITTED. Any edit returns
    to COMPOSING and drops the held verdict. A verdict only counts while the
    (title, content) it was issued for equals the live draft.
    """

    def __init__(self, draft: Draft | None = None) -> None:
        self._draft = draft.model_copy() if draft is not None else Draft()
        self._state = GateState.COMPOSING
        self._verdict: ModerationVerdict | None = None
        self._verdict_binding: tuple[str, str] | None = None
        self._ticket: CheckTicket | None = None
        self._sequence = 0
        self._closed = False
        self._lock = threading.Lock()

    @property
    def state(self) -> GateState:
        return self._state

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def draft(self) -> Draft:
        return self._draft.model_copy()

    @property
    def verdict(self) -> ModerationVerdict | None:
        """The held verdict, or None if it no longer matches the draft."""

        with self._lock:
            return self._current_verdict()

    @property
    def can_submit(self) -> bool:
        with self._lock:
            return self._can_submit()

    def edit(self, *, title: str | None = None, content: str | None = None, category: str | None = None) -> None:
        """Change draft fields; always returns the gate to COMPOSING."""

        with self._lock:
            self._ensure_open()
            updates = {
                name: value
                for name, value in (("title", title), ("content", content), ("category", category))
                if value is not None
            }
            self._draft = self._draft.model_copy(update=updates)
            self._state = GateState.COMPOSING
            self._verdict = None
            self._verdict_binding = None
            self._ticket = None

    def begin_check(self) -> CheckTicket | None:
        """Enter CHECKING and return a ticket, or None if a check is already in flight."""

        with self._lock:
            self._ensure_open()
            if self._state is GateState.CHECKING:
                return None
            self._require_text()
            self._sequence += 1
            self._ticket = CheckTicket(self._sequence, self._draft.title, self._draft.content)
            self._state = GateState.CHECKING
            self._verdict = None
            self._verdict_binding = None
            return self._ticket

    def complete_check(self, ticket: CheckTicket, verdict: ModerationVerdict) -> bool:
        """Apply a verdict for ``ticket``; stale tickets are discarded.

        Returns True when the verdict was accepted.
        """

        with self._lock:
            if self._closed or ticket != self._ticket or (ticket.title, ticket.content) != self._live_text():
                logger.info("submission.verdict_discarded sequence=%d approved=%s", ticket.sequence, verdict.approved)
                return False
            self._ticket = None
            self._verdict = verdict
            if verdict.approved:
                self._draft = self._draft.model_copy(
                    update={
                        "title": verdict.refined_title or self._draft.title,
                        "content": verdict.refined_content or self._draft.content,
                        "category": verdict.category.value,
                    }
                )
                self._state = GateState.APPROVED
            else:
                self._state = GateState.REJECTED
            self._verdict_binding = self._live_text()
            logger.info(
                "submission.verdict_applied sequence=%d state=%s category=%s",
                ticket.sequence,
                self._state.value,
                verdict.category.value,
            )
            return True

    def check(self, client: ModerationClient) -> bool:
        """Run one moderation check; a check already in flight makes this a no-op.

        The moderation call runs without holding the gate lock.
        """

        ticket = self.begin_check()
        if ticket is None:
            return False
        try:
            verdict = client.classify(ticket.title, ticket.content)
        except Exception:
            logger.exception("submission.check_failed sequence=%d", ticket.sequence)
            verdict = unavailable_verdict()
        return self.complete_check(ticket, verdict)

    def submit(self, store: ProposalStore) -> Proposal:
        """Persist the approved draft as a proposal and end this draft.

        On a persistence failure the gate stays APPROVED so the user can retry.
        """

        with self._lock:
            self._ensure_open()
            self._require_text()
            if not self._can_submit():
                raise SubmissionError("Run the AI check on the current text before submitting.")
            verdict = self._verdict
            category = self._draft.category or (verdict.category.value if verdict else "") or Category.OTHER.value
            proposal = store.create(
                ProposalCreate(title=self._draft.title, content=self._draft.content, category=category)
            )
            self._state = GateState.SUBMITTED
            self._closed = True
            self._draft = Draft()
            self._verdict = None
            self._verdict_binding = None
            logger.info("submission.submitted proposal_id=%d", proposal.id)
            return proposal

    def discard(self) -> None:
        """Drop the draft and any held verdict."""

        with self._lock:
            self._closed = True
            self._draft = Draft()
            self._verdict = None
            self._verdict_binding = None
            self._ticket = None

    def snapshot(self, draft_id: str | None = None) -> DraftRead:
        """Return a read model of the gate."""

        with self._lock:
            verdict = self._verdict if self._state in (GateState.APPROVED, GateState.REJECTED) else None
            current = self._current_verdict()
            return DraftRead(
                draft_id=draft_id,
                state=self._state,
                draft=self._draft.model_copy(),
                verdict=verdict,
                advice=verdict.advice if verdict is not None else None,
                can_submit=self._can_submit(),
                tags=list(current.tags) if current is not None else [],
            )

    def _current_verdict(self) -> ModerationVerdict | None:
        if self._verdict is None or self._verdict_binding != self._live_text():
            return None
        return self._verdict

    def _can_submit(self) -> bool:
        if self._closed or self._state is not GateState.APPROVED:
            return False
        verdict = self._current_verdict()
        return verdict is not None and verdict.approved

    def _live_text(self) -> tuple[str, str]:
        return self._draft.title, self._draft.content

    def _require_text(self) -> None:
        if not self._draft.title.strip() or not self._draft.content.strip():
            raise DraftValidationError("Enter a title and content before running the AI check.")

    def _ensure_open(self) -> None:
        if self._closed:
            raise SubmissionError("This draft has already been submitted or discarded.")


class DraftRegistry:
    """Live submission gates keyed by draft id."""

    def __init__(self) -> None:
        self._gates: dict[str, SubmissionGate] = {}
        self._lock = threading.Lock()

    def open(self, draft: Draft | None = None) -> tuple[str, SubmissionGate]:
        draft_id = uuid.uuid4().hex
        gate = SubmissionGate(draft)
        with self._lock:
            self._gates[draft_id] = gate
        return draft_id, gate

    def get(self, draft_id: str) -> SubmissionGate:
        with self._lock:
            gate = self._gates.get(draft_id)
        if gate is None:
            raise DraftNotFoundError(f"Draft not found: {draft_id}")
        return gate

    def close(self, draft_id: str) -> None:
        with self._lock:
            gate = self._gates.pop(draft_id, None)
        if gate is None:
            raise DraftNotFoundError(f"Draft not found: {draft_id}")
        gate.discard()

    def release(self, draft_id: str) -> bool:
        """Forget a finished draft; returns False if it was already removed."""

        with self._lock:
            return self._gates.pop(draft_id, None) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._gates)


@lru_cache
def get_draft_registry() -> DraftRegistry:
    """Return the process-wide draft registry."""

    return DraftRegistry()
