"""Proposal browsing, administration, and endorsement routes."""

from fastapi import APIRouter, Depends, HTTPException, Path, Query

from proposal_box.dependencies import STORE_UNAVAILABLE_DETAIL, get_current_identity, get_store
from proposal_box.schema.statuses import STATUS_LABELS
from proposal_box.schemas.common import ApiResponse
from proposal_box.schemas.identity import Identity
from proposal_box.schemas.proposal import (
    Proposal,
    EndorsementToggleResult,
    ProposalRead,
    ProposalStatusUpdateRequest,
    SortOrder,
    StatusBoardColumn,
    TrendingTag,
)
from proposal_box.services.proposals import AuthenticationRequiredError, ProposalStore
from proposal_box.services.views import ALL_CATEGORIES, present_proposal, query_proposals, status_board, trending_tags
from proposal_box.storage.document_store import PersistenceError

NOT_SAVED_DETAIL = "Your change was not saved. Please try again."

router = APIRouter(prefix="/proposals")


def _read_all(store: ProposalStore) -> list[Proposal]:
    try:
        return store.list_proposals()
    except PersistenceError as exc:
        raise HTTPException(status_code=503, detail=STORE_UNAVAILABLE_DETAIL) from exc


@router.get("", response_model=ApiResponse[list[ProposalRead]])
def list_proposals(
    category: str = Query(default=ALL_CATEGORIES),
    q: str | None = Query(default=None),
    sort: SortOrder = Query(default="newest"),
    store: ProposalStore = Depends(get_store),
    viewer: Identity | None = Depends(get_current_identity),
) -> ApiResponse[list[ProposalRead]]:
    """List proposals filtered by category and search text."""

    records = query_proposals(_read_all(store), category=category, search_term=q, order=sort)
    return ApiResponse(data=[present_proposal(proposal, viewer) for proposal in records])


@router.get("/trending-tags", response_model=ApiResponse[list[TrendingTag]])
def get_trending_tags(
    limit: int = Query(default=5, ge=1, le=50),
    store: ProposalStore = Depends(get_store),
) -> ApiResponse[list[TrendingTag]]:
    """Most used hashtags across proposal contents."""

    ranked = trending_tags(_read_all(store), limit=limit)
    return ApiResponse(data=[TrendingTag(tag=tag, count=count) for tag, count in ranked])


@router.get("/status-board", response_model=ApiResponse[list[StatusBoardColumn]])
def get_status_board(
    store: ProposalStore = Depends(get_store),
    viewer: Identity | None = Depends(get_current_identity),
) -> ApiResponse[list[StatusBoardColumn]]:
    """Proposals grouped into one column per review status."""

    board = status_board(_read_all(store))
    return ApiResponse(
        data=[
            StatusBoardColumn(
                status=status,
                label=STATUS_LABELS[status],
                proposals=[present_proposal(proposal, viewer) for proposal in proposals],
            )
            for status, proposals in board.items()
        ]
    )


@router.get("/{proposal_id}", response_model=ApiResponse[ProposalRead])
def get_proposal(
    proposal_id: int = Path(..., ge=1),
    store: ProposalStore = Depends(get_store),
    viewer: Identity | None = Depends(get_current_identity),
) -> ApiResponse[ProposalRead]:
    """Fetch one proposal."""

    try:
        proposal = store.get(proposal_id)
    except PersistenceError as exc:
        raise HTTPException(status_code=503, detail=STORE_UNAVAILABLE_DETAIL) from exc
    if proposal is None:
        raise HTTPException(status_code=404, detail="Proposal not found")
    return ApiResponse(data=present_proposal(proposal, viewer))


@router.patch("/{proposal_id}/status", response_model=ApiResponse[ProposalRead])
def patch_proposal_status(
    payload: ProposalStatusUpdateRequest,
    proposal_id: int = Path(..., ge=1),
    store: ProposalStore = Depends(get_store),
    viewer: Identity | None = Depends(get_current_identity),
) -> ApiResponse[ProposalRead]:
    """Set review status and response text (administrators only)."""

    if viewer is None:
        raise HTTPException(status_code=401, detail="Sign in as an administrator to update status.")
    if not viewer.is_administrator:
        raise HTTPException(status_code=403, detail="Only administrators can update status.")
    try:
        updated = store.set_status(proposal_id, payload.status, payload.administrator_response)
    except PersistenceError as exc:
        raise HTTPException(status_code=503, detail=NOT_SAVED_DETAIL) from exc
    if updated is None:
        raise HTTPException(status_code=404, detail="Proposal not found")
    return ApiResponse(data=present_proposal(updated, viewer))


@router.post("/{proposal_id}/endorsement", response_model=ApiResponse[EndorsementToggleResult])
def toggle_proposal_endorsement(
    proposal_id: int = Path(..., ge=1),
    store: ProposalStore = Depends(get_store),
    viewer: Identity | None = Depends(get_current_identity),
) -> ApiResponse[EndorsementToggleResult]:
    """Sign the proposal, or unsign it if the caller already signed."""

    try:
        outcome = store.toggle_endorsement(proposal_id, viewer)
    except AuthenticationRequiredError as exc:
        raise HTTPException(status_code=401, detail=str(exc)) from exc
    except PersistenceError as exc:
        raise HTTPException(status_code=503, detail=NOT_SAVED_DETAIL) from exc
    if outcome is None:
        raise HTTPException(status_code=404, detail="Proposal not found")
    proposal, endorsed = outcome
    return ApiResponse(data=EndorsementToggleResult(proposal=present_proposal(proposal, viewer), endorsed=endorsed))
