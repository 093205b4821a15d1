"""Moderation verdict schema."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from proposal_box.schema.categories import Category


class ModerationVerdict(BaseModel):
    """Structured judgment on one (title, content) pair."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    approved: bool
    category: Category = Category.OTHER
    tags: tuple[str, ...] = ()
    refined_title: str | None = None
    refined_content: str | None = None
    advice: str = ""
