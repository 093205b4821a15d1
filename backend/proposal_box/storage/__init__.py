"""Key-value document persistence."""

from proposal_box.storage.document_store import (
    DocumentStore,
    InMemoryDocumentStore,
    PersistenceError,
    SqlDocumentStore,
)

__all__ = ["DocumentStore", "InMemoryDocumentStore", "PersistenceError", "SqlDocumentStore"]
