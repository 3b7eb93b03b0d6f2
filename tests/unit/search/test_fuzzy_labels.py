"""Tests for picker label matching."""

from __future__ import annotations

import unittest

from wswizard.search import fuzzy_score, match_labels


class MatchLabelsTests(unittest.TestCase):
    def test_empty_query_keeps_original_order(self) -> None:
        self.assertEqual(match_labels("", ["b", "a", "c"]), [0, 1, 2])

    def test_substring_hits_rank_by_position_then_length(self) -> None:
        labels = ["my-project", "project", "projects-archive", "other"]
        self.assertEqual(match_labels("proj", labels), [1, 2, 0])

    def test_matching_is_case_insensitive(self) -> None:
        self.assertEqual(match_labels("ALP", ["alpha", "beta"]), [0])

    def test_fuzzy_fallback_when_no_substring(self) -> None:
        labels = ["client-web", "core", "cli-tools"]
        result = match_labels("cwb", labels)
        self.assertEqual(result, [0])

    def test_limit_caps_results(self) -> None:
        self.assertEqual(match_labels("a", ["a1", "a2", "a3"], limit=2), [0, 1])


class FuzzyScoreTests(unittest.TestCase):
    def test_out_of_order_characters_do_not_match(self) -> None:
        self.assertIsNone(fuzzy_score("ba", "ab"))

    def test_word_boundary_hits_score_higher(self) -> None:
        boundary = fuzzy_score("wb", "web-backend")
        buried = fuzzy_score("wb", "awebxxxbz")
        self.assertIsNotNone(boundary)
        self.assertIsNotNone(buried)
        self.assertGreater(boundary, buried)


if __name__ == "__main__":
    unittest.main()
