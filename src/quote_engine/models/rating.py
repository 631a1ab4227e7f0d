# QuoteEngine - Commercial Insurance Quote Engine
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Rating models: rate entries, risk assessments and premium breakdowns."""

from datetime import date
from decimal import Decimal
from enum import Enum

from beartype import beartype
from pydantic import Field, computed_field, field_validator

from .base import BaseModelConfig

ZERO_MONEY = Decimal("0.00")


class ProductType(str, Enum):
    """Commercial insurance product types."""

    WORKERS_COMPENSATION = "workers_compensation"
    GENERAL_LIABILITY = "general_liability"
    BUSINESS_OWNERS_POLICY = "business_owners_policy"
    COMMERCIAL_AUTO = "commercial_auto"
    PROFESSIONAL_LIABILITY = "professional_liability"
    CYBER_LIABILITY = "cyber_liability"


class RiskTier(str, Enum):
    """Risk tier, ordered from lowest to highest risk."""

    PREFERRED = "preferred"
    STANDARD = "standard"
    NON_STANDARD = "non_standard"
    DECLINE = "decline"

    @property
    def rank(self) -> int:
        """Position in the tier ordering (Preferred is 1)."""
        return _TIER_RANK[self]

    @property
    def label(self) -> str:
        """Display name used in adjustment descriptions."""
        return _TIER_LABEL[self]


_TIER_RANK = {
    RiskTier.PREFERRED: 1,
    RiskTier.STANDARD: 2,
    RiskTier.NON_STANDARD: 3,
    RiskTier.DECLINE: 4,
}

_TIER_LABEL = {
    RiskTier.PREFERRED: "Preferred",
    RiskTier.STANDARD: "Standard",
    RiskTier.NON_STANDARD: "NonStandard",
    RiskTier.DECLINE: "Decline",
}


class AdjustmentType(str, Enum):
    """Kinds of premium adjustment."""

    DISCOUNT = "discount"
    SURCHARGE = "surcharge"
    CREDIT = "credit"
    DEBIT = "debit"


@beartype
class RateEntry(BaseModelConfig):
    """A single row of the rate table."""

    state_code: str = Field(
        ..., min_length=2, max_length=10, description="State code or DEFAULT"
    )
    classification_code: str = Field(
        ..., min_length=1, max_length=10, description="Classification code or DEFAULT"
    )
    product_type: ProductType = Field(..., description="Product this rate applies to")
    base_rate: Decimal = Field(
        ...,
        gt=Decimal("0"),
        decimal_places=4,
        description="Rate per exposure unit (per $100 payroll, $1000 revenue, ...)",
    )
    min_premium: Decimal = Field(
        ..., ge=Decimal("0"), decimal_places=2, description="Minimum premium floor"
    )
    state_tax_rate: Decimal = Field(
        ...,
        ge=Decimal("0"),
        lt=Decimal("1"),
        decimal_places=4,
        description="Premium tax rate as a fraction",
    )
    is_active: bool = Field(default=True, description="Whether the rate can be used")
    effective_date: date = Field(..., description="Date the rate takes effect")
    expiration_date: date | None = Field(None, description="Date the rate expires")

    @field_validator("state_code", "classification_code")
    @classmethod
    def normalize_code(cls, v: str) -> str:
        """Codes are matched case-insensitively."""
        return v.upper()


@beartype
class ClassificationCode(BaseModelConfig):
    """Industry classification available for a product."""

    code: str = Field(..., min_length=1, max_length=10)
    description: str = Field(..., min_length=1, max_length=200)
    product_type: ProductType = Field(...)
    base_rate: Decimal = Field(..., ge=Decimal("0"), decimal_places=4)
    hazard_group: str = Field(..., pattern="^[A-G]$")
    is_active: bool = Field(default=True)


@beartype
class RiskFactorScore(BaseModelConfig):
    """Score of one risk factor (lower is better)."""

    factor_name: str = Field(..., min_length=1, max_length=100)
    score: int = Field(..., ge=0, le=100)
    weight: int = Field(..., ge=0)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def impact(self) -> str:
        """Qualitative impact derived from the score."""
        if self.score <= 30:
            return "Favorable"
        if self.score >= 60:
            return "Unfavorable"
        return "Neutral"


@beartype
class RiskAssessment(BaseModelConfig):
    """Weighted multi-factor risk assessment."""

    overall_score: int = Field(..., ge=0, le=100, description="Weighted risk score")
    risk_tier: RiskTier = Field(...)
    factor_scores: list[RiskFactorScore] = Field(default_factory=list)
    notes: list[str] = Field(
        default_factory=list, description="Advisory underwriting notes"
    )


@beartype
class PremiumAdjustment(BaseModelConfig):
    """One line of the premium adjustment stack."""

    code: str = Field(..., min_length=1, max_length=20)
    description: str = Field(..., min_length=1, max_length=200)
    adjustment_type: AdjustmentType = Field(...)
    factor: Decimal = Field(
        ..., decimal_places=4, description="Signed fraction of the premium it was taken on"
    )
    amount: Decimal = Field(..., decimal_places=2, description="Signed amount")


@beartype
class PremiumBreakdown(BaseModelConfig):
    """Fully itemized premium. All-zero when a quote is declined."""

    base_premium: Decimal = Field(default=ZERO_MONEY, decimal_places=2)
    adjustments: list[PremiumAdjustment] = Field(
        default_factory=list, description="Adjustments in the order they were applied"
    )
    total_adjustments: Decimal = Field(default=ZERO_MONEY, decimal_places=2)
    subtotal: Decimal = Field(default=ZERO_MONEY, ge=Decimal("0"), decimal_places=2)
    state_tax: Decimal = Field(default=ZERO_MONEY, ge=Decimal("0"), decimal_places=2)
    policy_fee: Decimal = Field(default=ZERO_MONEY, ge=Decimal("0"), decimal_places=2)
    annual_premium: Decimal = Field(
        default=ZERO_MONEY, ge=Decimal("0"), decimal_places=2
    )
    monthly_premium: Decimal = Field(
        default=ZERO_MONEY, ge=Decimal("0"), decimal_places=2
    )
    minimum_premium: Decimal = Field(
        default=ZERO_MONEY, ge=Decimal("0"), decimal_places=2
    )


@beartype
class EligibilityResult(BaseModelConfig):
    """Outcome of the eligibility rules."""

    messages: list[str] = Field(
        default_factory=list, description="Blocking reasons; any makes it ineligible"
    )
    warnings: list[str] = Field(default_factory=list, description="Non-blocking")
    referral_reason: str | None = Field(None)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_eligible(self) -> bool:
        """Eligible when no blocking message was raised."""
        return not self.messages
