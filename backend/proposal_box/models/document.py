"""Key-value document ORM model."""

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from proposal_box.models.base import Base, IdMixin, TimestampMixin


class Document(Base, IdMixin, TimestampMixin):
    """One serialized document stored under a unique key."""

    __tablename__ = "documents"

    key: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    body: Mapped[str] = mapped_column(Text, nullable=False)
