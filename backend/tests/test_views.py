"""Tests for derived proposal views: filtering, sorting, trending tags, status board."""

from __future__ import annotations

import itertools
import unittest
from datetime import datetime, timedelta, timezone

from proposal_box.schema.statuses import ProposalStatus
from proposal_box.schemas.identity import Identity
from proposal_box.schemas.proposal import Endorsement, Proposal
from proposal_box.services.views import (
    extract_tags,
    filter_proposals,
    present_proposal,
    query_proposals,
    sort_proposals,
    status_board,
    trending_tags,
)

BASE = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)


def _proposal(
    proposal_id: int,
    *,
    title: str = "title",
    content: str = "content",
    category: str = "OTHER",
    age_hours: int = 0,
    endorsers: int = 0,
    status: ProposalStatus = ProposalStatus.RECEIVED,
) -> Proposal:
    return Proposal(
        id=proposal_id,
        title=title,
        content=content,
        category=category,
        status=status,
        created_at=BASE - timedelta(hours=age_hours),
        endorsements=[
            Endorsement(identity_id=f"user-{n}", display_name=f"User {n}", timestamp=BASE) for n in range(endorsers)
        ],
    )


class FilterTests(unittest.TestCase):
    def setUp(self) -> None:
        self.proposals = [
            _proposal(1, title="Grey socks", content="Please allow grey #socks", category="RULES"),
            _proposal(2, title="Noodles", content="Warm NOODLES in the cafeteria", category="FACILITIES"),
            _proposal(3, title="Library hours", content="Open the library longer", category="FACILITIES"),
        ]

    def test_all_category_and_empty_search_keep_everything(self) -> None:
        self.assertEqual([p.id for p in filter_proposals(self.proposals)], [1, 2, 3])
        self.assertEqual([p.id for p in filter_proposals(self.proposals, category="all", search_term="")], [1, 2, 3])

    def test_category_is_exact_match(self) -> None:
        self.assertEqual([p.id for p in filter_proposals(self.proposals, category="FACILITIES")], [2, 3])
        self.assertEqual(filter_proposals(self.proposals, category="facilities"), [])

    def test_search_is_case_insensitive_over_title_or_content(self) -> None:
        self.assertEqual([p.id for p in filter_proposals(self.proposals, search_term="noodles")], [2])
        self.assertEqual([p.id for p in filter_proposals(self.proposals, search_term="LIBRARY")], [3])
        self.assertEqual([p.id for p in filter_proposals(self.proposals, search_term="grey #SOCKS")], [1])

    def test_filters_compose_with_and(self) -> None:
        self.assertEqual(filter_proposals(self.proposals, category="RULES", search_term="noodles"), [])
        self.assertEqual(
            [p.id for p in filter_proposals(self.proposals, category="FACILITIES", search_term="open")],
            [3],
        )


class SortTests(unittest.TestCase):
    def setUp(self) -> None:
        self.proposals = [
            _proposal(1, age_hours=5, endorsers=1),
            _proposal(2, age_hours=1, endorsers=3),
            _proposal(3, age_hours=9, endorsers=3),
            _proposal(4, age_hours=1, endorsers=0),
        ]

    def test_newest_is_non_increasing_in_creation_time_and_stable(self) -> None:
        result = sort_proposals(self.proposals, "newest")
        self.assertEqual([p.id for p in result], [2, 4, 1, 3])
        for earlier, later in zip(result, result[1:]):
            self.assertGreaterEqual(earlier.created_at, later.created_at)

    def test_by_endorsement_is_non_increasing_and_stable(self) -> None:
        result = sort_proposals(self.proposals, "byEndorsement")
        self.assertEqual([p.id for p in result], [2, 3, 1, 4])
        for earlier, later in zip(result, result[1:]):
            self.assertGreaterEqual(len(earlier.endorsements), len(later.endorsements))

    def test_sort_does_not_mutate_input(self) -> None:
        sort_proposals(self.proposals, "byEndorsement")
        self.assertEqual([p.id for p in self.proposals], [1, 2, 3, 4])

    def test_unknown_order_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            sort_proposals(self.proposals, "alphabetical")  # type: ignore[arg-type]

    def test_query_filters_then_sorts(self) -> None:
        self.proposals[1] = _proposal(2, content="#lunch", age_hours=1, endorsers=3)
        self.assertEqual([p.id for p in query_proposals(self.proposals, search_term="content")], [4, 1, 3])


class TrendingTagTests(unittest.TestCase):
    def test_counts_and_ranks_tags(self) -> None:
        proposals = [_proposal(1, content="#a #a #b"), _proposal(2, content="#a #c")]
        result = trending_tags(proposals, limit=2)

        self.assertEqual(result[0], ("#a", 3))
        self.assertIn(result[1], [("#b", 1), ("#c", 1)])

    def test_top_tag_is_independent_of_scan_order(self) -> None:
        proposals = [
            _proposal(1, content="#a #a #b"),
            _proposal(2, content="#a #c"),
            _proposal(3, content="#c #d"),
        ]
        expected_counts = {"#a": 3, "#b": 1, "#c": 2, "#d": 1}
        for ordering in itertools.permutations(proposals):
            result = trending_tags(ordering, limit=10)
            self.assertEqual(dict(result), expected_counts)
            self.assertEqual(result[:2], [("#a", 3), ("#c", 2)])

    def test_ties_keep_first_seen_order(self) -> None:
        proposals = [_proposal(1, content="#x #y"), _proposal(2, content="#z #y #x")]
        self.assertEqual(trending_tags(proposals, limit=3), [("#x", 2), ("#y", 2), ("#z", 1)])

    def test_default_limit_is_five(self) -> None:
        proposals = [_proposal(1, content=" ".join(f"#t{n}" for n in range(8)))]
        self.assertEqual(len(trending_tags(proposals)), 5)

    def test_no_tags_returns_empty(self) -> None:
        self.assertEqual(trending_tags([_proposal(1, content="no tags here"), _proposal(2, content="# alone")]), [])
        self.assertEqual(trending_tags([]), [])

    def test_token_grammar_handles_full_width_marker_and_space(self) -> None:
        self.assertEqual(
            extract_tags("今は#食堂　＃ランチ #改善希望。 email@x #"),
            ["#食堂", "＃ランチ", "#改善希望。"],
        )


class StatusBoardTests(unittest.TestCase):
    def test_groups_by_status_in_workflow_order(self) -> None:
        proposals = [
            _proposal(1, status=ProposalStatus.RESOLVED),
            _proposal(2, status=ProposalStatus.RECEIVED),
            _proposal(3, status=ProposalStatus.RESOLVED),
        ]
        board = status_board(proposals)

        self.assertEqual(list(board), list(ProposalStatus))
        self.assertEqual([p.id for p in board[ProposalStatus.RESOLVED]], [1, 3])
        self.assertEqual([p.id for p in board[ProposalStatus.RECEIVED]], [2])
        self.assertEqual(board[ProposalStatus.UNDER_REVIEW], [])


class PresentProposalTests(unittest.TestCase):
    def test_labels_and_viewer_state(self) -> None:
        proposal = _proposal(1, category="RULES", endorsers=2, status=ProposalStatus.COORDINATING)
        viewer = Identity(id="user-1", display_name="User 1")

        shown = present_proposal(proposal, viewer)
        anonymous = present_proposal(proposal)

        self.assertEqual(shown.category_label, "校則")
        self.assertEqual(shown.status_label, "先生と調整中")
        self.assertEqual(shown.status_step, 2)
        self.assertEqual(shown.endorsement_count, 2)
        self.assertTrue(shown.endorsed_by_viewer)
        self.assertFalse(anonymous.endorsed_by_viewer)


if __name__ == "__main__":
    unittest.main()
