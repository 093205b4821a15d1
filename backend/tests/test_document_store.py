"""Tests for the SQL-backed document store."""

from __future__ import annotations

import unittest

from sqlalchemy import create_engine, func, select
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from proposal_box.models.base import Base
from proposal_box.models.document import Document
from proposal_box.schemas.proposal import ProposalCreate
from proposal_box.services.proposals import ProposalStore
from proposal_box.storage.document_store import PersistenceError, SqlDocumentStore


class SqlDocumentStoreTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls) -> None:
        cls.engine = create_engine(
            "sqlite+pysqlite:///:memory:",
            future=True,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        cls.SessionLocal = sessionmaker(bind=cls.engine, autoflush=False, autocommit=False, future=True)
        Base.metadata.create_all(cls.engine)

    @classmethod
    def tearDownClass(cls) -> None:
        Base.metadata.drop_all(cls.engine)
        cls.engine.dispose()

    def setUp(self) -> None:
        with self.SessionLocal() as db:
            db.query(Document).delete()
            db.commit()
        self.documents = SqlDocumentStore(self.SessionLocal)

    def test_get_absent_key_returns_none(self) -> None:
        self.assertIsNone(self.documents.get("missing"))

    def test_put_replaces_whole_document_under_one_row(self) -> None:
        self.documents.put("schoolProposals", "[]")
        self.documents.put("schoolProposals", '[{"id": 1}]')
        self.documents.put("schoolNews", "[]")

        self.assertEqual(self.documents.get("schoolProposals"), '[{"id": 1}]')
        self.assertEqual(self.documents.get("schoolNews"), "[]")
        with self.SessionLocal() as db:
            self.assertEqual(db.scalar(select(func.count()).select_from(Document)), 2)

    def test_proposal_store_round_trips_through_database(self) -> None:
        store = ProposalStore(self.documents)
        store.create(ProposalCreate(title="Grey socks", content="Allow grey #socks", category="RULES"))
        store.create(ProposalCreate(title="Noodles", content="#lunch", category="FACILITIES"))

        reloaded = ProposalStore(SqlDocumentStore(self.SessionLocal)).list_proposals()
        self.assertEqual(
            [(p.id, p.title, p.category) for p in reloaded],
            [(2, "Noodles", "FACILITIES"), (1, "Grey socks", "RULES")],
        )
        self.assertIsNotNone(reloaded[0].created_at.tzinfo)

    def test_database_errors_become_persistence_errors(self) -> None:
        broken_engine = create_engine(
            "sqlite+pysqlite:///:memory:",
            future=True,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        broken = SqlDocumentStore(sessionmaker(bind=broken_engine, future=True))
        with self.assertRaises(PersistenceError):
            broken.get("schoolProposals")
        with self.assertRaises(PersistenceError):
            broken.put("schoolProposals", "[]")
        broken_engine.dispose()


if __name__ == "__main__":
    unittest.main()
