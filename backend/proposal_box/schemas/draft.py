"""Draft request/response schemas for the submission gate."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from proposal_box.schemas.moderation import ModerationVerdict


class GateState(str, Enum):
    """Submission gate states for one draft."""

    COMPOSING = "COMPOSING"
    CHECKING = "CHECKING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    SUBMITTED = "SUBMITTED"


class Draft(BaseModel):
    """Text a user is composing."""

    title: str = ""
    content: str = ""
    category: str = ""


class DraftUpdateRequest(BaseModel):
    """Allowed mutable fields for a draft."""

    title: str | None = None
    content: str | None = None
    category: str | None = None

    @model_validator(mode="after")
    def validate_non_empty_update(self) -> "DraftUpdateRequest":
        if self.title is None and self.content is None and self.category is None:
            raise ValueError("At least one field must be provided.")
        return self


class DraftRead(BaseModel):
    """Serialized gate state for one draft."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    draft_id: str | None = None
    state: GateState
    draft: Draft
    verdict: ModerationVerdict | None = None
    advice: str | None = None
    can_submit: bool = False
    tags: list[str] = Field(default_factory=list)
