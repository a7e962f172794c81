"""Tests for per-product filter evaluation."""

import pytest

from storefront_xray import FilterCriteria, evaluate
from storefront_xray.evaluator import match_quality
from storefront_xray.models import MembershipCheckDetails, SearchCheckDetails


class TestEvaluateNoCriteria:
    def test_default_criteria_pass_without_checks(self, apex_shoe):
        d = evaluate(apex_shoe, FilterCriteria())
        assert d.passed
        assert d.checks == {}
        assert d.score == 0.0
        assert d.score_breakdown is None

    def test_whitespace_search_is_not_a_constraint(self, apex_shoe):
        d = evaluate(apex_shoe, FilterCriteria(search="   "))
        assert d.passed
        assert "search" not in d.checks


class TestSearchCheck:
    def test_matching_search_passes_with_score(self, apex_shoe):
        d = evaluate(apex_shoe, FilterCriteria(search="running shoe"))
        check = d.checks["search"]

        assert d.passed
        assert check.passed
        assert d.score == 25.5
        assert isinstance(check.details, SearchCheckDetails)
        assert check.details.search_terms == ("running", "shoe")
        assert check.details.match_quality == "high"
        assert check.reason.startswith("Matched 2/2 search terms with score 25.5 (55.4% relevance)")

    def test_one_matching_term_is_enough(self, apex_shoe):
        d = evaluate(apex_shoe, FilterCriteria(search="golf shoe"))
        assert d.passed
        assert d.checks["search"].details.score_breakdown.matched_term_count == 1

    def test_no_matching_term_fails(self, apex_shoe):
        d = evaluate(apex_shoe, FilterCriteria(search="golf club"))
        check = d.checks["search"]
        assert not d.passed
        assert not check.passed
        assert d.score == 0.0
        assert check.reason == 'Failed: No matches found for search terms: "golf", "club"'
        assert d.failed_checks == ("search",)

    @pytest.mark.parametrize(
        "percentage,quality",
        [(100.0, "high"), (50.0, "high"), (49.9, "medium"), (25.0, "medium"), (24.9, "low"), (0.0, "low")],
    )
    def test_match_quality_buckets(self, percentage, quality):
        assert match_quality(percentage) == quality


class TestMembershipChecks:
    def test_sport_membership(self, apex_shoe):
        d = evaluate(apex_shoe, FilterCriteria(sports={"Running", "Golf"}))
        check = d.checks["sport"]
        assert d.passed
        assert check.reason == 'Sport "Running" is in selected sports filter'
        assert check.details == MembershipCheckDetails(
            criterion="sport", product_value="Running", selected=("Golf", "Running")
        )

    def test_sport_membership_is_case_sensitive(self, apex_shoe):
        d = evaluate(apex_shoe, FilterCriteria(sports={"running"}))
        assert not d.passed

    def test_brand_failure_reason(self, apex_shoe):
        d = evaluate(apex_shoe, FilterCriteria(brands={"Nova", "Swift"}))
        assert not d.passed
        assert d.checks["brand"].reason == 'Failed: Brand "Apex" not in [Nova, Swift]'

    def test_category_failure(self, apex_shoe):
        d = evaluate(apex_shoe, FilterCriteria(categories={"Footwear"}))
        assert not d.passed
        assert d.checks["category"].reason == 'Failed: Category "Shoes" not in [Footwear]'

    def test_rating_membership(self, make_product):
        p = make_product("p1", "Nova Gym Equipment", rating=3)
        d = evaluate(p, FilterCriteria(ratings={4, 5}))
        assert not d.passed
        assert d.checks["rating"].reason == "Failed: Rating 3 stars not in [4, 5 stars]"
        assert evaluate(p, FilterCriteria(ratings={3})).checks["rating"].reason == (
            "Rating 3 stars is in selected ratings filter"
        )


class TestCombinedChecks:
    def test_any_failed_check_fails_the_product(self, apex_shoe):
        criteria = FilterCriteria(search="running", sports={"Running"}, brands={"Nova"}, ratings={4})
        d = evaluate(apex_shoe, criteria)
        assert not d.passed
        assert d.failed_checks == ("brand",)
        assert d.score == 14.0

    def test_checks_recorded_only_for_active_criteria_in_fixed_order(self, apex_shoe):
        criteria = FilterCriteria(search="apex", ratings={4}, categories={"Shoes"})
        d = evaluate(apex_shoe, criteria)
        assert list(d.checks) == ["search", "category", "rating"]
        assert d.passed

    def test_search_only_check_without_search_details_for_other_filters(self, apex_shoe):
        d = evaluate(apex_shoe, FilterCriteria(sports={"Running"}))
        assert d.score == 0.0
        assert not any(isinstance(c.details, SearchCheckDetails) for c in d.checks.values())
