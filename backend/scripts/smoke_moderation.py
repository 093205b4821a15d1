"""Run a real moderation call against a couple of sample drafts.

Usage (from repo root):
    python backend/scripts/smoke_moderation.py

Usage (from backend/):
    python scripts/smoke_moderation.py
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

BACKEND_DIR = Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from proposal_box.moderation.client import get_default_moderation_client


def _demo_drafts() -> list[tuple[str, str]]:
    return [
        (
            "Allow grey socks",
            "Our socks may only be white, navy or black. Other schools allow grey, so please add grey.",
        ),
        (
            "Smoking corner",
            "We want a place to smoke at school.",
        ),
    ]


def main() -> None:
    client = get_default_moderation_client()
    results = []
    for title, content in _demo_drafts():
        verdict = client.classify(title, content)
        results.append({"title": title, "verdict": verdict.model_dump(mode="json", by_alias=True)})
    print(json.dumps(results, indent=2, ensure_ascii=False))


if __name__ == "__main__":
    main()
