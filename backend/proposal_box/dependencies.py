"""FastAPI dependencies shared by the routers."""

from fastapi import Header, HTTPException

from proposal_box.moderation.client import ModerationClient, get_default_moderation_client
from proposal_box.schemas.identity import Identity
from proposal_box.services.identity import identity_from_headers
from proposal_box.services.proposals import ProposalStore, get_proposal_store
from proposal_box.services.submission import DraftRegistry, get_draft_registry
from proposal_box.storage.document_store import PersistenceError

STORE_UNAVAILABLE_DETAIL = "Proposals could not be loaded. Please try again later."


def get_store() -> ProposalStore:
    try:
        return get_proposal_store()
    except PersistenceError as exc:
        raise HTTPException(status_code=503, detail=STORE_UNAVAILABLE_DETAIL) from exc


def get_registry() -> DraftRegistry:
    return get_draft_registry()


def get_moderation_client() -> ModerationClient:
    return get_default_moderation_client()


def get_current_identity(
    x_identity_id: str | None = Header(default=None),
    x_identity_name: str | None = Header(default=None),
    x_identity_role: str | None = Header(default=None),
    x_identity_group: str | None = Header(default=None),
) -> Identity | None:
    """Resolve the caller from headers set by the authentication layer."""

    return identity_from_headers(x_identity_id, x_identity_name, x_identity_role, x_identity_group)
