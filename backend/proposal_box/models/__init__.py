"""ORM models package exports."""

from proposal_box.models.document import Document

__all__ = ["Document"]
