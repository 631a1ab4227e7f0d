# QuoteEngine - Commercial Insurance Quote Engine
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Weighted multi-factor risk scoring for commercial quotes.

Each factor is scored 0-100 (lower is better) from fixed thresholds and the
scores are combined as a weighted average. The assessor is a pure function of
the request and holds no mutable state, so one instance can serve concurrent
requests.
"""

import logging
from decimal import ROUND_HALF_UP, Decimal

from beartype import beartype

from ...models.quote import BusinessType, QuoteRequest, RiskFactorType
from ...models.rating import RiskAssessment, RiskFactorScore, RiskTier
from ..performance_monitor import performance_monitor

logger = logging.getLogger(__name__)

YEARS_IN_BUSINESS_WEIGHT = 20
EMPLOYEE_COUNT_WEIGHT = 15
INDUSTRY_WEIGHT = 25
CLAIMS_HISTORY_WEIGHT = 25
REVENUE_SIZE_WEIGHT = 15

NEUTRAL_CLAIMS_SCORE = 40
HIGH_HAZARD_EMPLOYEE_PENALTY = 15

HIGH_HAZARD_INDUSTRIES = frozenset(
    {BusinessType.CONSTRUCTION, BusinessType.MANUFACTURING}
)

INDUSTRY_SCORES = {
    BusinessType.TECHNOLOGY: 20,
    BusinessType.PROFESSIONAL_SERVICES: 25,
    BusinessType.OFFICE: 25,
    BusinessType.RETAIL: 40,
    BusinessType.REAL_ESTATE: 45,
    BusinessType.HEALTHCARE: 55,
    BusinessType.RESTAURANT: 60,
    BusinessType.TRANSPORTATION: 65,
    BusinessType.MANUFACTURING: 70,
    BusinessType.CONSTRUCTION: 80,
}
_UNLISTED_INDUSTRY_SCORE = 50

# (inclusive upper bound on headcount, score)
_EMPLOYEE_BANDS = ((5, 20), (25, 35), (100, 50), (500, 65))
_LARGE_EMPLOYER_SCORE = 80

# (exclusive upper bound on revenue, score)
_REVENUE_BANDS = (
    (Decimal("100000"), 30),
    (Decimal("500000"), 35),
    (Decimal("1000000"), 40),
    (Decimal("5000000"), 50),
    (Decimal("10000000"), 60),
    (Decimal("25000000"), 70),
)
_LARGE_REVENUE_SCORE = 80

# (inclusive upper bound on overall score, tier)
_TIER_THRESHOLDS = (
    (35, RiskTier.PREFERRED),
    (55, RiskTier.STANDARD),
    (75, RiskTier.NON_STANDARD),
)

_LARGE_PAYROLL_NOTE_THRESHOLD = Decimal("5000000")


@beartype
class RiskAssessor:
    """Compute a risk score, tier and underwriting notes for a quote request."""

    @performance_monitor("risk_assessment", max_duration_ms=50)
    def assess(self, request: QuoteRequest) -> RiskAssessment:
        """Score the request across the five weighted factors.

        Args:
            request: The quote request to assess

        Returns:
            Risk assessment with overall score, tier, factor scores and notes
        """
        logger.debug(
            "Calculating risk for %s in %s",
            request.business_type.value,
            request.state_code,
        )

        factor_scores = [
            RiskFactorScore(
                factor_name="Years in Business",
                score=self._years_in_business_score(request.years_in_business),
                weight=YEARS_IN_BUSINESS_WEIGHT,
            ),
            RiskFactorScore(
                factor_name="Employee Count",
                score=self._employee_count_score(
                    request.employee_count, request.business_type
                ),
                weight=EMPLOYEE_COUNT_WEIGHT,
            ),
            RiskFactorScore(
                factor_name="Industry Risk",
                score=INDUSTRY_SCORES.get(
                    request.business_type, _UNLISTED_INDUSTRY_SCORE
                ),
                weight=INDUSTRY_WEIGHT,
            ),
            RiskFactorScore(
                factor_name="Claims History",
                score=self._claims_score(request),
                weight=CLAIMS_HISTORY_WEIGHT,
            ),
            RiskFactorScore(
                factor_name="Revenue Size",
                score=self._revenue_size_score(request.annual_revenue),
                weight=REVENUE_SIZE_WEIGHT,
            ),
        ]

        overall_score = self.weighted_score(factor_scores)
        risk_tier = self.tier_for_score(overall_score)

        logger.info(
            "Risk assessment complete: Score=%d, Tier=%s",
            overall_score,
            risk_tier.value,
        )

        return RiskAssessment(
            overall_score=overall_score,
            risk_tier=risk_tier,
            factor_scores=factor_scores,
            notes=self._underwriting_notes(request, risk_tier),
        )

    @staticmethod
    def weighted_score(factor_scores: list[RiskFactorScore]) -> int:
        """Weighted average of factor scores, rounded half up."""
        total_weight = sum(f.weight for f in factor_scores)
        if total_weight == 0:
            return 0
        weighted_sum = sum(f.score * f.weight for f in factor_scores)
        average = Decimal(weighted_sum) / Decimal(total_weight)
        return int(average.quantize(Decimal("1"), rounding=ROUND_HALF_UP))

    @staticmethod
    def tier_for_score(overall_score: int) -> RiskTier:
        """Map an overall score to its risk tier."""
        for upper_bound, tier in _TIER_THRESHOLDS:
            if overall_score <= upper_bound:
                return tier
        return RiskTier.DECLINE

    def _years_in_business_score(self, years: int) -> int:
        # Risk falls monotonically with tenure
        if years >= 10:
            return 15
        if years >= 5:
            return 25
        if years >= 3:
            return 40
        if years >= 2:
            return 55
        if years == 1:
            return 70
        return 90

    def _employee_count_score(
        self, employee_count: int, business_type: BusinessType
    ) -> int:
        score = _LARGE_EMPLOYER_SCORE
        for upper_bound, band_score in _EMPLOYEE_BANDS:
            if employee_count <= upper_bound:
                score = band_score
                break

        if business_type in HIGH_HAZARD_INDUSTRIES:
            score = min(100, score + HIGH_HAZARD_EMPLOYEE_PENALTY)
        return score

    def _claims_score(self, request: QuoteRequest) -> int:
        claims = request.find_risk_factor(RiskFactorType.CLAIMS)
        if claims is None:
            return NEUTRAL_CLAIMS_SCORE
        return int(min(max(claims.value, Decimal("0")), Decimal("100")))

    def _revenue_size_score(self, annual_revenue: Decimal) -> int:
        for upper_bound, score in _REVENUE_BANDS:
            if annual_revenue < upper_bound:
                return score
        return _LARGE_REVENUE_SCORE

    def _underwriting_notes(
        self, request: QuoteRequest, risk_tier: RiskTier
    ) -> list[str]:
        """Advisory notes; they never change the score."""
        notes = []

        if risk_tier == RiskTier.PREFERRED:
            notes.append(
                "Account qualifies for preferred rates based on favorable risk profile"
            )

        if request.years_in_business >= 10:
            notes.append("Established business history - positive indicator")
        elif request.years_in_business < 3:
            notes.append("New business - limited experience data available")

        if request.business_type in HIGH_HAZARD_INDUSTRIES:
            notes.append(
                "High-risk industry classification - verify safety programs in place"
            )

        if request.annual_payroll > _LARGE_PAYROLL_NOTE_THRESHOLD:
            notes.append(
                "Large payroll exposure - review workers' compensation loss history"
            )

        if risk_tier == RiskTier.NON_STANDARD:
            notes.append("Non-standard tier - premium surcharge applied")

        return notes
