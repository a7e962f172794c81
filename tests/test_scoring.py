"""Tests for search tokenization and relevance scoring."""

import pytest

from storefront_xray.scoring import max_possible_score, score_product, tokenize


class TestTokenize:
    def test_lowercases_and_splits_on_whitespace(self):
        assert tokenize("Running  SHOE\tpro") == ("running", "shoe", "pro")

    def test_blank_string_has_no_terms(self):
        assert tokenize("") == ()
        assert tokenize("   ") == ()

    def test_preserves_order_and_duplicates(self):
        assert tokenize("golf run golf") == ("golf", "run", "golf")


class TestScoreProduct:
    def test_running_shoe_scenario(self, apex_shoe):
        """Whole-word hits earn full weight, substring hits earn half."""
        b = score_product(apex_shoe, tokenize("running shoe"))

        assert b.name_score == 20.0  # "running" and "shoe" are both words of the name
        assert b.brand_score == 0.0
        assert b.sport_score == 4.0  # "running" only
        assert b.category_score == 1.5  # "shoe" inside "shoes"
        assert b.total_score == 25.5
        assert b.max_possible_score == 46
        assert b.match_percentage == pytest.approx(25.5 / 46 * 100)
        assert b.matched_term_count == 2
        assert b.search_terms == ("running", "shoe")

    def test_substring_match_earns_half_weight(self, make_product):
        p = make_product("p1", "Contour Cap", brand="Nova", sport="Golf", category="Tour")
        b = score_product(p, ("tour",))
        assert b.name_score == 5.0
        assert b.category_score == 3.0
        assert b.total_score == 8.0

    def test_no_terms_scores_zero(self, apex_shoe):
        b = score_product(apex_shoe, ())
        assert b.total_score == 0.0
        assert b.max_possible_score == 0.0
        assert b.match_percentage == 0.0
        assert b.matched_term_count == 0

    def test_unmatched_term_scores_nothing(self, apex_shoe):
        b = score_product(apex_shoe, ("golf",))
        assert b.total_score == 0.0
        assert b.matched_term_count == 0
        assert b.max_possible_score == 23

    def test_partial_match_counts_as_matched_term(self, apex_shoe):
        """A mid-word hit is enough for the term to count as matched."""
        b = score_product(apex_shoe, ("unn",))
        assert b.matched_term_count == 1
        assert b.total_score == 5.0 + 2.0

    def test_matched_term_count_counts_distinct_terms(self, apex_shoe):
        b = score_product(apex_shoe, ("apex", "apex", "golf"))
        assert b.matched_term_count == 1
        # scores still accumulate for every occurrence
        assert b.name_score == 20.0
        assert b.brand_score == 12.0

    def test_adding_matching_term_never_decreases_score(self, apex_shoe):
        one = score_product(apex_shoe, tokenize("running"))
        two = score_product(apex_shoe, tokenize("running shoe"))
        assert two.total_score >= one.total_score

    def test_total_score_independent_of_term_order(self, apex_shoe):
        a = score_product(apex_shoe, ("shoe", "apex"))
        b = score_product(apex_shoe, ("apex", "shoe"))
        assert a.total_score == b.total_score
        assert a.search_terms == ("shoe", "apex")

    def test_max_possible_score(self):
        assert max_possible_score(0) == 0
        assert max_possible_score(3) == 69
