"""SQLAlchemy metadata registry import for Alembic."""

from proposal_box.models import Document
from proposal_box.models.base import Base

__all__ = ["Base", "Document"]
