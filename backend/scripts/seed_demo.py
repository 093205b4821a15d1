"""Seed the proposal collection with demo proposals.

Usage (from repository root):
    python backend/scripts/seed_demo.py

Usage (from backend directory):
    python scripts/seed_demo.py
    # or
    python -m scripts.seed_demo
"""

from __future__ import annotations

import argparse
import sys
from datetime import datetime, timezone
from pathlib import Path

# Make `proposal_box` imports work whether the script is run from repo root or backend/.
BACKEND_DIR = Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from proposal_box.config import get_settings
from proposal_box.db.session import SessionLocal
from proposal_box.services.demo import build_demo_proposals
from proposal_box.services.proposals import ProposalStore, serialize_proposals
from proposal_box.storage.document_store import SqlDocumentStore


def parse_args() -> argparse.Namespace:
    """Parse script CLI arguments."""

    parser = argparse.ArgumentParser(description="Seed demo proposals.")
    parser.add_argument(
        "--no-reset",
        action="store_true",
        help="Only seed when no proposal collection exists yet.",
    )
    return parser.parse_args()


def main() -> None:
    """Seed demo data and print a short summary."""

    args = parse_args()
    settings = get_settings()
    documents = SqlDocumentStore(SessionLocal)
    seeds = build_demo_proposals(datetime.now(timezone.utc))

    if not args.no_reset:
        documents.put(settings.proposals_document_key, serialize_proposals(seeds))
    store = ProposalStore(documents, key=settings.proposals_document_key)
    proposals = store.load(seed=seeds)

    print("Seed complete")
    print(f"document_key={settings.proposals_document_key}")
    print(f"proposals={len(proposals)}")
    print()
    print("Inspect:")
    print("  GET /proposals")
    print("  GET /proposals/status-board")
    print("  GET /proposals/trending-tags")


if __name__ == "__main__":
    main()
