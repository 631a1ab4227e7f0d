# QuoteEngine - Commercial Insurance Quote Engine
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Premium calculation with penny precision.

Adjustments are stacked in a fixed order: risk tier, experience mod,
loyalty, safety, minimum-premium top-up, deductible credit. The minimum
premium floor sees the post-discount subtotal and the deductible credit is
taken on the post-floor subtotal, so the order changes the final premium.

Every monetary step is rounded to cents with ROUND_HALF_UP.
"""

import logging
from collections.abc import Callable
from decimal import ROUND_HALF_UP, Decimal

from beartype import beartype

from ...models.quote import QuoteRequest, RiskFactorType
from ...models.rating import (
    AdjustmentType,
    PremiumAdjustment,
    PremiumBreakdown,
    ProductType,
    RateEntry,
    RiskAssessment,
    RiskTier,
)
from ..performance_monitor import performance_monitor

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")
MONTHS_PER_YEAR = Decimal("12")


@beartype
def round_money(amount: Decimal) -> Decimal:
    """Round a currency amount to cents."""
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def _workers_comp(request: QuoteRequest, base_rate: Decimal) -> Decimal:
    # Rate per $100 of payroll
    return request.annual_payroll / Decimal("100") * base_rate


def _general_liability(request: QuoteRequest, base_rate: Decimal) -> Decimal:
    # Rate per $1000 of revenue
    return request.annual_revenue / Decimal("1000") * base_rate


def _business_owners(request: QuoteRequest, base_rate: Decimal) -> Decimal:
    # Property + liability package
    return _general_liability(request, base_rate) * Decimal("1.25")


def _commercial_auto(request: QuoteRequest, base_rate: Decimal) -> Decimal:
    # Headcount stands in for vehicle count
    return Decimal(request.employee_count) * base_rate * Decimal("0.5")


def _professional_liability(request: QuoteRequest, base_rate: Decimal) -> Decimal:
    return _general_liability(request, base_rate) * Decimal("0.8")


def _cyber_liability(request: QuoteRequest, base_rate: Decimal) -> Decimal:
    return _general_liability(request, base_rate) * Decimal("0.3") + Decimal(
        request.employee_count * 50
    )


BASE_PREMIUM_FORMULAS: dict[ProductType, Callable[[QuoteRequest, Decimal], Decimal]] = {
    ProductType.WORKERS_COMPENSATION: _workers_comp,
    ProductType.GENERAL_LIABILITY: _general_liability,
    ProductType.BUSINESS_OWNERS_POLICY: _business_owners,
    ProductType.COMMERCIAL_AUTO: _commercial_auto,
    ProductType.PROFESSIONAL_LIABILITY: _professional_liability,
    ProductType.CYBER_LIABILITY: _cyber_liability,
}

POLICY_FEES = {
    ProductType.WORKERS_COMPENSATION: Decimal("250.00"),
    ProductType.GENERAL_LIABILITY: Decimal("150.00"),
    ProductType.BUSINESS_OWNERS_POLICY: Decimal("200.00"),
    ProductType.COMMERCIAL_AUTO: Decimal("175.00"),
    ProductType.PROFESSIONAL_LIABILITY: Decimal("200.00"),
    ProductType.CYBER_LIABILITY: Decimal("125.00"),
}
_FALLBACK_POLICY_FEE = Decimal("150.00")

TIER_FACTORS = {
    RiskTier.PREFERRED: Decimal("-0.15"),
    RiskTier.STANDARD: Decimal("0"),
    RiskTier.NON_STANDARD: Decimal("0.25"),
}

# (inclusive upper bound on claims score, experience modifier)
_EXPERIENCE_MOD_STEPS = (
    (Decimal("20"), Decimal("0.75")),
    (Decimal("30"), Decimal("0.85")),
    (Decimal("40"), Decimal("0.95")),
    (Decimal("50"), Decimal("1.00")),
    (Decimal("60"), Decimal("1.10")),
    (Decimal("70"), Decimal("1.20")),
    (Decimal("80"), Decimal("1.30")),
)
_MAX_EXPERIENCE_MOD = Decimal("1.50")
EXPERIENCE_MOD_MIN_YEARS = 3

LOYALTY_MIN_YEARS = 5
LOYALTY_FACTOR = Decimal("-0.05")

SAFETY_CREDIT_THRESHOLD = Decimal("80")
SAFETY_FACTOR = Decimal("-0.10")

# (minimum deductible, credit rate), highest band first
_DEDUCTIBLE_CREDIT_BANDS = (
    (Decimal("25000"), Decimal("0.15")),
    (Decimal("10000"), Decimal("0.10")),
    (Decimal("5000"), Decimal("0.07")),
    (Decimal("2500"), Decimal("0.05")),
    (Decimal("1000"), Decimal("0.02")),
)


@beartype
class PremiumCalculator:
    """Build an itemized premium from a request, risk assessment and rate."""

    @performance_monitor("premium_calculation", max_duration_ms=50)
    def calculate(
        self,
        request: QuoteRequest,
        risk_assessment: RiskAssessment,
        rate_entry: RateEntry,
    ) -> PremiumBreakdown:
        """Calculate the premium breakdown.

        Args:
            request: The quote request
            risk_assessment: Risk assessment for the request
            rate_entry: Resolved rate entry

        Returns:
            Premium breakdown with adjustments in the order applied
        """
        logger.debug(
            "Calculating premium. BaseRate: %s, RiskTier: %s",
            rate_entry.base_rate,
            risk_assessment.risk_tier.value,
        )

        base_premium = self.calculate_base_premium(request, rate_entry.base_rate)

        adjustments = self._rating_adjustments(request, risk_assessment, base_premium)
        subtotal = base_premium + sum(
            (a.amount for a in adjustments), start=Decimal("0.00")
        )

        minimum_premium = rate_entry.min_premium
        if subtotal < minimum_premium:
            adjustments.append(
                PremiumAdjustment(
                    code="MIN",
                    description="Minimum Premium Adjustment",
                    adjustment_type=AdjustmentType.SURCHARGE,
                    factor=Decimal("0"),
                    amount=round_money(minimum_premium - subtotal),
                )
            )
            subtotal = minimum_premium

        credit_rate = self.deductible_credit_rate(request.deductible)
        deductible_credit = round_money(subtotal * credit_rate)
        if deductible_credit != 0:
            adjustments.append(
                PremiumAdjustment(
                    code="DED",
                    description="Deductible Credit",
                    adjustment_type=AdjustmentType.CREDIT,
                    factor=-credit_rate,
                    amount=-deductible_credit,
                )
            )
            subtotal -= deductible_credit

        subtotal = round_money(subtotal)
        state_tax = round_money(subtotal * rate_entry.state_tax_rate)
        policy_fee = self.policy_fee(request.product_type)
        annual_premium = subtotal + state_tax + policy_fee
        monthly_premium = round_money(annual_premium / MONTHS_PER_YEAR)

        logger.debug("Premium calculated: Annual=%s", annual_premium)

        return PremiumBreakdown(
            base_premium=base_premium,
            adjustments=adjustments,
            total_adjustments=sum(
                (a.amount for a in adjustments), start=Decimal("0.00")
            ),
            subtotal=subtotal,
            state_tax=state_tax,
            policy_fee=policy_fee,
            annual_premium=annual_premium,
            monthly_premium=monthly_premium,
            minimum_premium=round_money(minimum_premium),
        )

    @staticmethod
    def calculate_base_premium(request: QuoteRequest, base_rate: Decimal) -> Decimal:
        """Product-specific base premium; unknown products use the GL formula."""
        formula = BASE_PREMIUM_FORMULAS.get(request.product_type, _general_liability)
        return round_money(formula(request, base_rate))

    @staticmethod
    def policy_fee(product_type: ProductType) -> Decimal:
        """Flat policy fee for a product."""
        return POLICY_FEES.get(product_type, _FALLBACK_POLICY_FEE)

    @staticmethod
    def experience_modifier(claims_score: Decimal) -> Decimal:
        """Map a claims score to a workers' comp experience modifier."""
        for upper_bound, modifier in _EXPERIENCE_MOD_STEPS:
            if claims_score <= upper_bound:
                return modifier
        return _MAX_EXPERIENCE_MOD

    @staticmethod
    def deductible_credit_rate(deductible: Decimal) -> Decimal:
        """Credit rate earned by a deductible."""
        for minimum, rate in _DEDUCTIBLE_CREDIT_BANDS:
            if deductible >= minimum:
                return rate
        return Decimal("0")

    def _rating_adjustments(
        self,
        request: QuoteRequest,
        risk_assessment: RiskAssessment,
        base_premium: Decimal,
    ) -> list[PremiumAdjustment]:
        """Tier, experience mod, loyalty and safety adjustments, in that order."""
        adjustments = []

        tier = risk_assessment.risk_tier
        tier_factor = TIER_FACTORS.get(tier, Decimal("0"))
        if tier_factor != 0:
            adjustments.append(
                PremiumAdjustment(
                    code="TIER",
                    description=f"{tier.label} Tier Adjustment",
                    adjustment_type=(
                        AdjustmentType.DISCOUNT
                        if tier_factor < 0
                        else AdjustmentType.SURCHARGE
                    ),
                    factor=tier_factor,
                    amount=round_money(base_premium * tier_factor),
                )
            )

        if request.product_type == ProductType.WORKERS_COMPENSATION:
            modifier = self._experience_mod_for(request)
            if modifier != 1:
                factor = modifier - 1
                adjustments.append(
                    PremiumAdjustment(
                        code="EXPMOD",
                        description="Experience Modification",
                        adjustment_type=(
                            AdjustmentType.CREDIT
                            if modifier < 1
                            else AdjustmentType.DEBIT
                        ),
                        factor=factor,
                        amount=round_money(base_premium * factor),
                    )
                )

        if request.years_in_business >= LOYALTY_MIN_YEARS:
            adjustments.append(
                PremiumAdjustment(
                    code="LOYAL",
                    description="Established Business Discount",
                    adjustment_type=AdjustmentType.DISCOUNT,
                    factor=LOYALTY_FACTOR,
                    amount=round_money(base_premium * LOYALTY_FACTOR),
                )
            )

        safety = request.find_risk_factor(RiskFactorType.SAFETY)
        if safety is not None and safety.value >= SAFETY_CREDIT_THRESHOLD:
            adjustments.append(
                PremiumAdjustment(
                    code="SAFETY",
                    description="Safety Program Credit",
                    adjustment_type=AdjustmentType.CREDIT,
                    factor=SAFETY_FACTOR,
                    amount=round_money(base_premium * SAFETY_FACTOR),
                )
            )

        return adjustments

    def _experience_mod_for(self, request: QuoteRequest) -> Decimal:
        # New businesses and missing claims data get no modification
        if request.years_in_business < EXPERIENCE_MOD_MIN_YEARS:
            return Decimal("1")
        claims = request.find_risk_factor(RiskFactorType.CLAIMS)
        if claims is None:
            return Decimal("1")
        return self.experience_modifier(claims.value)
