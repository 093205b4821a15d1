"""Derived views over the proposal collection.

All functions are pure: they never mutate their input and never persist.
"""

from __future__ import annotations

import re
from collections import Counter
from collections.abc import Iterable

from proposal_box.schema.categories import category_label
from proposal_box.schema.statuses import STATUS_LABELS, STATUS_STEPS, ProposalStatus, status_progress
from proposal_box.schemas.identity import Identity
from proposal_box.schemas.proposal import Proposal, ProposalRead, SortOrder
from proposal_box.services.endorsements import has_endorsed

ALL_CATEGORIES = "all"

# A tag is a marker ("#" or full-width "＃") followed by a run of
# non-whitespace characters. ``\s`` covers the ideographic space U+3000.
TAG_TOKEN_PATTERN = re.compile(r"[#＃]\S+")


def filter_proposals(
    proposals: Iterable[Proposal],
    *,
    category: str | None = ALL_CATEGORIES,
    search_term: str | None = None,
) -> list[Proposal]:
    """Keep proposals matching the category (exact, or "all") and the search term.

    The search term matches case-insensitively as a substring of the title or
    the content. Both filters must hold.
    """

    needle = (search_term or "").lower()
    result: list[Proposal] = []
    for proposal in proposals:
        if category and category != ALL_CATEGORIES and proposal.category != category:
            continue
        if needle and needle not in proposal.title.lower() and needle not in proposal.content.lower():
            continue
        result.append(proposal)
    return result


def sort_proposals(proposals: Iterable[Proposal], order: SortOrder = "newest") -> list[Proposal]:
    """Stable sort, newest first or most-endorsed first."""

    if order == "newest":
        return sorted(proposals, key=lambda p: p.created_at, reverse=True)
    if order == "byEndorsement":
        return sorted(proposals, key=lambda p: len(p.endorsements), reverse=True)
    raise ValueError(f"Unknown sort order: {order}")


def query_proposals(
    proposals: Iterable[Proposal],
    *,
    category: str | None = ALL_CATEGORIES,
    search_term: str | None = None,
    order: SortOrder = "newest",
) -> list[Proposal]:
    """Filter then sort, as shown in the proposal list."""

    return sort_proposals(filter_proposals(proposals, category=category, search_term=search_term), order)


def extract_tags(text: str) -> list[str]:
    """Return tag tokens in ``text`` in order of appearance."""

    return TAG_TOKEN_PATTERN.findall(text or "")


def trending_tags(proposals: Iterable[Proposal], limit: int = 5) -> list[tuple[str, int]]:
    """Most frequent tag tokens across proposal contents.

    Counts are keyed by exact token text. Ties keep first-seen order.
    """

    if limit <= 0:
        return []
    counts: Counter[str] = Counter()
    for proposal in proposals:
        counts.update(extract_tags(proposal.content))
    return counts.most_common(limit)


def status_board(proposals: Iterable[Proposal]) -> dict[ProposalStatus, list[Proposal]]:
    """Group proposals by status in workflow order; every status is present."""

    board: dict[ProposalStatus, list[Proposal]] = {status: [] for status in STATUS_STEPS}
    for proposal in proposals:
        board[proposal.status].append(proposal)
    return board


def present_proposal(proposal: Proposal, viewer: Identity | None = None) -> ProposalRead:
    """Attach display labels and per-viewer endorsement state."""

    return ProposalRead(
        **proposal.model_dump(),
        category_label=category_label(proposal.category),
        status_label=STATUS_LABELS[proposal.status],
        status_step=status_progress(proposal.status),
        endorsement_count=len(proposal.endorsements),
        endorsed_by_viewer=has_endorsed(proposal.endorsements, viewer),
    )
