"""Proposal, endorsement, and derived-view schemas."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from proposal_box.schema.categories import Category
from proposal_box.schema.statuses import ProposalStatus

SortOrder = Literal["newest", "byEndorsement"]


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Endorsement(_CamelModel):
    """One identity's recorded support for a proposal."""

    identity_id: str
    display_name: str
    timestamp: datetime


class Proposal(_CamelModel):
    """Persisted, approved submission."""

    id: int = Field(ge=1)
    title: str
    content: str
    category: str = Category.OTHER.value
    status: ProposalStatus = ProposalStatus.RECEIVED
    administrator_response: str = ""
    created_at: datetime
    endorsements: list[Endorsement] = Field(default_factory=list)

    @field_validator("created_at")
    @classmethod
    def assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class ProposalCreate(_CamelModel):
    """Fields supplied when a finalized draft becomes a proposal."""

    title: str = Field(min_length=1)
    content: str = Field(min_length=1)
    category: str = ""


class ProposalStatusUpdateRequest(_CamelModel):
    """Administrator status transition payload."""

    status: ProposalStatus
    administrator_response: str = ""


class ProposalRead(Proposal):
    """Proposal as shown to one viewer."""

    category_label: str
    status_label: str
    status_step: int
    endorsement_count: int
    endorsed_by_viewer: bool = False


class EndorsementToggleResult(_CamelModel):
    """Outcome of a sign/unsign toggle."""

    proposal: ProposalRead
    endorsed: bool


class TrendingTag(_CamelModel):
    """Tag token with its occurrence count."""

    tag: str
    count: int


class StatusBoardColumn(_CamelModel):
    """Proposals sharing one review status."""

    status: ProposalStatus
    label: str
    proposals: list[ProposalRead]
