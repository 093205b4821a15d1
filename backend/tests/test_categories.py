"""Unit tests for controlled category and status vocabularies."""

import unittest

from proposal_box.schema.categories import CATEGORY_VALUES, Category, category_label, normalize_category
from proposal_box.schema.statuses import STATUS_STEPS, ProposalStatus, status_progress


class CategoryNormalizationTests(unittest.TestCase):
    def test_labels_and_synonyms_map_to_categories(self) -> None:
        self.assertEqual(CATEGORY_VALUES, ("RULES", "FACILITIES", "CURRICULUM", "OTHER"))
        self.assertEqual(normalize_category("校則"), Category.RULES)
        self.assertEqual(normalize_category("設備・環境"), Category.FACILITIES)
        self.assertEqual(normalize_category("授業"), Category.CURRICULUM)
        self.assertEqual(normalize_category("curriculum"), Category.CURRICULUM)
        self.assertEqual(normalize_category(" Facilities "), Category.FACILITIES)

    def test_unknown_or_blank_falls_back_to_other(self) -> None:
        self.assertEqual(normalize_category("Cafeteria politics"), Category.OTHER)
        self.assertEqual(normalize_category(""), Category.OTHER)
        self.assertEqual(normalize_category(None), Category.OTHER)

    def test_display_labels(self) -> None:
        self.assertEqual(category_label("RULES"), "校則")
        self.assertEqual(category_label(Category.OTHER), "その他")


class StatusWorkflowTests(unittest.TestCase):
    def test_steps_follow_declared_order(self) -> None:
        self.assertEqual(
            STATUS_STEPS,
            (
                ProposalStatus.RECEIVED,
                ProposalStatus.UNDER_REVIEW,
                ProposalStatus.COORDINATING,
                ProposalStatus.RESOLVED,
            ),
        )
        self.assertEqual(status_progress(ProposalStatus.RECEIVED), 0)
        self.assertEqual(status_progress(ProposalStatus.RESOLVED), 3)


if __name__ == "__main__":
    unittest.main()
