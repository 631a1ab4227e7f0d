"""Test weighted risk scoring and tier mapping."""

from decimal import Decimal

import pytest

from quote_engine.models.quote import BusinessType, RiskFactorType
from quote_engine.models.rating import RiskFactorScore, RiskTier
from quote_engine.services.rating.risk_assessor import RiskAssessor
from tests.fixtures.test_data import TestDataFactory


def _scores(assessment) -> dict[str, int]:
    return {f.factor_name: f.score for f in assessment.factor_scores}


class TestRiskAssessor:
    """Test risk assessment of quote requests."""

    def test_established_office_is_preferred(
        self, risk_assessor: RiskAssessor
    ) -> None:
        """Default office request scores 34 and lands in Preferred."""
        request = TestDataFactory.create_quote_request()

        assessment = risk_assessor.assess(request)

        assert _scores(assessment) == {
            "Years in Business": 25,
            "Employee Count": 35,
            "Industry Risk": 25,
            "Claims History": 40,
            "Revenue Size": 50,
        }
        assert assessment.overall_score == 34
        assert assessment.risk_tier == RiskTier.PREFERRED
        assert [f.weight for f in assessment.factor_scores] == [20, 15, 25, 25, 15]

    def test_retail_is_standard(self, risk_assessor: RiskAssessor) -> None:
        """Mid-size retail business scores 43, Standard."""
        request = TestDataFactory.create_standard_wc_request()

        assessment = risk_assessor.assess(request)

        assert assessment.overall_score == 43
        assert assessment.risk_tier == RiskTier.STANDARD

    def test_new_construction_is_non_standard(
        self, risk_assessor: RiskAssessor
    ) -> None:
        """Young construction firm scores 63 with the hazard penalty."""
        request = TestDataFactory.create_quote_request(
            business_type=BusinessType.CONSTRUCTION,
            years_in_business=1,
            employee_count=50,
            annual_revenue=Decimal("5000000"),
        )

        assessment = risk_assessor.assess(request)

        scores = _scores(assessment)
        assert scores["Years in Business"] == 70
        assert scores["Employee Count"] == 65
        assert scores["Industry Risk"] == 80
        assert scores["Revenue Size"] == 60
        assert assessment.overall_score == 63
        assert assessment.risk_tier == RiskTier.NON_STANDARD
        assert "Non-standard tier - premium surcharge applied" in assessment.notes

    def test_worst_case_declines(self, risk_assessor: RiskAssessor) -> None:
        """Startup construction giant with bad claims is declined."""
        request = TestDataFactory.create_quote_request(
            business_type=BusinessType.CONSTRUCTION,
            years_in_business=0,
            employee_count=600,
            annual_revenue=Decimal("30000000"),
            risk_factors=[
                TestDataFactory.create_risk_factor(RiskFactorType.CLAIMS, 100)
            ],
        )

        assessment = risk_assessor.assess(request)

        assert _scores(assessment)["Employee Count"] == 95
        assert assessment.overall_score == 89
        assert assessment.risk_tier == RiskTier.DECLINE

    def test_score_rounds_half_up(self, risk_assessor: RiskAssessor) -> None:
        """A weighted average of 34.5 rounds to 35."""
        request = TestDataFactory.create_quote_request(
            risk_factors=[
                TestDataFactory.create_risk_factor(RiskFactorType.CLAIMS, 42)
            ],
        )

        assessment = risk_assessor.assess(request)

        assert assessment.overall_score == 35
        assert assessment.risk_tier == RiskTier.PREFERRED

    @pytest.mark.parametrize("value,expected", [("150", 100), ("-20", 0), ("72.9", 72)])
    def test_claims_factor_is_clamped(
        self, risk_assessor: RiskAssessor, value: str, expected: int
    ) -> None:
        """Claims values are clamped to 0-100 and truncated."""
        request = TestDataFactory.create_quote_request(
            risk_factors=[
                TestDataFactory.create_risk_factor(RiskFactorType.CLAIMS, value)
            ],
        )

        assert _scores(risk_assessor.assess(request))["Claims History"] == expected

    @pytest.mark.parametrize(
        "years,expected",
        [(0, 90), (1, 70), (2, 55), (3, 40), (4, 40), (5, 25), (9, 25), (10, 15), (40, 15)],
    )
    def test_years_in_business_score(
        self, risk_assessor: RiskAssessor, years: int, expected: int
    ) -> None:
        """Tenure lowers the score."""
        request = TestDataFactory.create_quote_request(years_in_business=years)

        assert _scores(risk_assessor.assess(request))["Years in Business"] == expected

    @pytest.mark.parametrize(
        "employees,expected",
        [(0, 20), (5, 20), (6, 35), (25, 35), (100, 50), (500, 65), (501, 80)],
    )
    def test_employee_count_score(
        self, risk_assessor: RiskAssessor, employees: int, expected: int
    ) -> None:
        """Larger headcount raises the score."""
        request = TestDataFactory.create_quote_request(employee_count=employees)

        assert _scores(risk_assessor.assess(request))["Employee Count"] == expected

    def test_manufacturing_employee_penalty(
        self, risk_assessor: RiskAssessor
    ) -> None:
        """High-hazard industries carry a headcount penalty."""
        request = TestDataFactory.create_quote_request(
            business_type=BusinessType.MANUFACTURING, employee_count=3
        )

        assessment = risk_assessor.assess(request)

        assert _scores(assessment)["Employee Count"] == 35
        assert (
            "High-risk industry classification - verify safety programs in place"
            in assessment.notes
        )

    @pytest.mark.parametrize(
        "revenue,expected",
        [
            ("0", 30),
            ("99999.99", 30),
            ("100000", 35),
            ("999999.99", 40),
            ("1000000", 50),
            ("9999999", 60),
            ("24999999", 70),
            ("25000000", 80),
        ],
    )
    def test_revenue_size_score(
        self, risk_assessor: RiskAssessor, revenue: str, expected: int
    ) -> None:
        """Revenue bands are exclusive at the upper bound."""
        request = TestDataFactory.create_quote_request(annual_revenue=Decimal(revenue))

        assert _scores(risk_assessor.assess(request))["Revenue Size"] == expected

    def test_notes_for_preferred_established_business(
        self, risk_assessor: RiskAssessor
    ) -> None:
        """Preferred tier and long tenure are noted."""
        request = TestDataFactory.create_quote_request(
            years_in_business=12, business_type=BusinessType.TECHNOLOGY
        )

        assessment = risk_assessor.assess(request)

        assert assessment.risk_tier == RiskTier.PREFERRED
        assert assessment.notes == [
            "Account qualifies for preferred rates based on favorable risk profile",
            "Established business history - positive indicator",
        ]

    def test_large_payroll_note(self, risk_assessor: RiskAssessor) -> None:
        """Large payroll is flagged for loss history review."""
        request = TestDataFactory.create_quote_request(
            annual_payroll=Decimal("6000000")
        )

        assert (
            "Large payroll exposure - review workers' compensation loss history"
            in risk_assessor.assess(request).notes
        )

    def test_same_request_same_assessment(self, risk_assessor: RiskAssessor) -> None:
        """Assessment is a pure function of the request."""
        request = TestDataFactory.create_quote_request()

        assert risk_assessor.assess(request) == risk_assessor.assess(request)


class TestTierMapping:
    """Test score to tier mapping."""

    @pytest.mark.parametrize(
        "score,tier",
        [
            (0, RiskTier.PREFERRED),
            (35, RiskTier.PREFERRED),
            (36, RiskTier.STANDARD),
            (55, RiskTier.STANDARD),
            (56, RiskTier.NON_STANDARD),
            (75, RiskTier.NON_STANDARD),
            (76, RiskTier.DECLINE),
            (100, RiskTier.DECLINE),
        ],
    )
    def test_thresholds(self, score: int, tier: RiskTier) -> None:
        """Tier boundaries are inclusive at the upper end."""
        assert RiskAssessor.tier_for_score(score) == tier

    def test_tier_is_monotonic_in_score(self) -> None:
        """A higher score never maps to a better tier."""
        ranks = [RiskAssessor.tier_for_score(score).rank for score in range(101)]
        assert ranks == sorted(ranks)


class TestWeightedScore:
    """Test weighted averaging."""

    def test_weighted_average(self) -> None:
        """Weights scale each factor's contribution."""
        scores = [
            RiskFactorScore(factor_name="A", score=10, weight=1),
            RiskFactorScore(factor_name="B", score=40, weight=3),
        ]
        assert RiskAssessor.weighted_score(scores) == 33

    def test_zero_weight_scores_zero(self) -> None:
        """No weight means no score."""
        scores = [RiskFactorScore(factor_name="A", score=90, weight=0)]
        assert RiskAssessor.weighted_score(scores) == 0
