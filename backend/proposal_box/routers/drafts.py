"""Draft composition, AI check, and submission routes."""

from fastapi import APIRouter, Body, Depends, HTTPException, Path

from proposal_box.dependencies import get_current_identity, get_moderation_client, get_registry, get_store
from proposal_box.moderation.client import ModerationClient
from proposal_box.schemas.common import ApiResponse
from proposal_box.schemas.draft import Draft, DraftRead, DraftUpdateRequest
from proposal_box.schemas.identity import Identity
from proposal_box.schemas.proposal import ProposalRead
from proposal_box.services.proposals import ProposalStore
from proposal_box.services.submission import (
    DraftNotFoundError,
    DraftRegistry,
    DraftValidationError,
    SubmissionError,
    SubmissionGate,
)
from proposal_box.services.views import present_proposal
from proposal_box.storage.document_store import PersistenceError

router = APIRouter(prefix="/drafts")


def _get_gate(registry: DraftRegistry, draft_id: str) -> SubmissionGate:
    try:
        return registry.get(draft_id)
    except DraftNotFoundError as exc:
        raise HTTPException(status_code=404, detail="Draft not found") from exc


@router.post("", response_model=ApiResponse[DraftRead], status_code=201)
def open_draft(
    payload: Draft | None = Body(default=None),
    registry: DraftRegistry = Depends(get_registry),
) -> ApiResponse[DraftRead]:
    """Start composing a new draft."""

    draft_id, gate = registry.open(payload)
    return ApiResponse(data=gate.snapshot(draft_id))


@router.get("/{draft_id}", response_model=ApiResponse[DraftRead])
def get_draft(
    draft_id: str = Path(..., min_length=1),
    registry: DraftRegistry = Depends(get_registry),
) -> ApiResponse[DraftRead]:
    """Current text, gate state, and verdict of a draft."""

    return ApiResponse(data=_get_gate(registry, draft_id).snapshot(draft_id))


@router.patch("/{draft_id}", response_model=ApiResponse[DraftRead])
def patch_draft(
    payload: DraftUpdateRequest,
    draft_id: str = Path(..., min_length=1),
    registry: DraftRegistry = Depends(get_registry),
) -> ApiResponse[DraftRead]:
    """Edit a draft; any held verdict is dropped."""

    gate = _get_gate(registry, draft_id)
    try:
        gate.edit(title=payload.title, content=payload.content, category=payload.category)
    except SubmissionError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    return ApiResponse(data=gate.snapshot(draft_id))


@router.post("/{draft_id}/check", response_model=ApiResponse[DraftRead])
def check_draft(
    draft_id: str = Path(..., min_length=1),
    registry: DraftRegistry = Depends(get_registry),
    client: ModerationClient = Depends(get_moderation_client),
) -> ApiResponse[DraftRead]:
    """Run the AI check; a check already in flight leaves the draft unchanged."""

    gate = _get_gate(registry, draft_id)
    try:
        gate.check(client)
    except DraftValidationError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except SubmissionError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    return ApiResponse(data=gate.snapshot(draft_id))


@router.post("/{draft_id}/submit", response_model=ApiResponse[ProposalRead], status_code=201)
def submit_draft(
    draft_id: str = Path(..., min_length=1),
    registry: DraftRegistry = Depends(get_registry),
    store: ProposalStore = Depends(get_store),
    viewer: Identity | None = Depends(get_current_identity),
) -> ApiResponse[ProposalRead]:
    """Publish an approved draft as a proposal."""

    gate = _get_gate(registry, draft_id)
    try:
        proposal = gate.submit(store)
    except DraftValidationError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except SubmissionError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    except PersistenceError as exc:
        raise HTTPException(status_code=503, detail="Your proposal was not saved. Please try again.") from exc
    registry.release(draft_id)
    return ApiResponse(data=present_proposal(proposal, viewer))


@router.delete("/{draft_id}", response_model=ApiResponse[DraftRead])
def discard_draft(
    draft_id: str = Path(..., min_length=1),
    registry: DraftRegistry = Depends(get_registry),
) -> ApiResponse[DraftRead]:
    """Throw a draft away."""

    gate = _get_gate(registry, draft_id)
    try:
        registry.close(draft_id)
    except DraftNotFoundError as exc:
        raise HTTPException(status_code=404, detail="Draft not found") from exc
    return ApiResponse(data=gate.snapshot(draft_id))
