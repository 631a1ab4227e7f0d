# QuoteEngine - Commercial Insurance Quote Engine
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Quote domain models: requests, persisted quote records and estimates."""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from beartype import beartype
from pydantic import Field, field_validator, model_validator

from .base import BaseModelConfig
from .rating import PremiumBreakdown, ProductType, RiskAssessment

QUOTE_ID_PATTERN = r"^QT-\d{8}-[0-9A-Z]{8}$"


class BusinessType(str, Enum):
    """Industry segment of the insured business."""

    RETAIL = "retail"
    RESTAURANT = "restaurant"
    OFFICE = "office"
    MANUFACTURING = "manufacturing"
    CONSTRUCTION = "construction"
    TECHNOLOGY = "technology"
    HEALTHCARE = "healthcare"
    TRANSPORTATION = "transportation"
    REAL_ESTATE = "real_estate"
    PROFESSIONAL_SERVICES = "professional_services"


class RiskFactorType(str, Enum):
    """Categories of caller-supplied risk factors."""

    CREDIT = "credit"
    CLAIMS = "claims"
    SAFETY = "safety"
    EXPERIENCE = "experience"
    INDUSTRY = "industry"


class QuoteStatus(str, Enum):
    """Quote lifecycle status."""

    DRAFT = "draft"
    QUOTED = "quoted"
    REFERRED = "referred"
    DECLINED = "declined"
    EXPIRED = "expired"
    BOUND = "bound"


VALID_US_STATE_CODES = frozenset(
    {
        "AL", "AK", "AZ", "AR", "CA", "CO", "CT", "DE", "FL", "GA", "HI",
        "ID", "IL", "IN", "IA", "KS", "KY", "LA", "ME", "MD", "MA", "MI",
        "MN", "MS", "MO", "MT", "NE", "NV", "NH", "NJ", "NM", "NY", "NC",
        "ND", "OH", "OK", "OR", "PA", "RI", "SC", "SD", "TN", "TX", "UT",
        "VT", "VA", "WA", "WV", "WI", "WY", "DC",
    }
)  # fmt: skip


def _normalize_state(v: Any) -> Any:
    if isinstance(v, str):
        v = v.strip().upper()
        if v not in VALID_US_STATE_CODES:
            raise ValueError(f"Invalid US state code: {v}")
    return v


@beartype
class RiskFactor(BaseModelConfig):
    """Caller-supplied risk factor, usually scored 0-100."""

    factor_code: str = Field(..., min_length=1, max_length=20)
    factor_name: str = Field(default="", max_length=100)
    factor_type: RiskFactorType = Field(...)
    value: Decimal = Field(..., description="Factor value, nominally 0-100")


@beartype
class QuoteRequest(BaseModelConfig):
    """Request for a commercial insurance quote."""

    # Business
    business_name: str = Field(..., min_length=2, max_length=200)
    tax_id: str = Field(
        ..., pattern=r"^\d{2}-\d{7}$", description="Federal EIN, XX-XXXXXXX"
    )
    business_type: BusinessType = Field(...)
    state_code: str = Field(..., min_length=2, max_length=2)
    years_in_business: int = Field(..., ge=0)
    employee_count: int = Field(..., ge=0)
    annual_revenue: Decimal = Field(..., ge=Decimal("0"), decimal_places=2)
    annual_payroll: Decimal = Field(..., ge=Decimal("0"), decimal_places=2)

    # Coverage
    product_type: ProductType = Field(...)
    classification_code: str = Field(..., min_length=1, max_length=10)
    coverage_limit: Decimal = Field(
        default=Decimal("1000000"), ge=Decimal("0"), decimal_places=2
    )
    deductible: Decimal = Field(
        default=Decimal("1000"), ge=Decimal("0"), decimal_places=2
    )
    effective_date: date | None = Field(None)

    risk_factors: list[RiskFactor] = Field(default_factory=list)

    @field_validator("state_code", mode="before")
    @classmethod
    def validate_state(cls, v: Any) -> Any:
        """Validate and upper-case the state code."""
        return _normalize_state(v)

    @field_validator("classification_code")
    @classmethod
    def normalize_classification(cls, v: str) -> str:
        """Classification codes are matched case-insensitively."""
        return v.upper()

    def find_risk_factor(self, factor_type: RiskFactorType) -> RiskFactor | None:
        """Return the first risk factor of the given type, if any."""
        for factor in self.risk_factors:
            if factor.factor_type == factor_type:
                return factor
        return None


@beartype
class QuoteRecord(BaseModelConfig):
    """Issued quote as kept in the quote store. Immutable once created."""

    quote_id: str = Field(..., pattern=QUOTE_ID_PATTERN)
    issued_at: datetime = Field(...)
    expires_at: datetime = Field(...)
    status: QuoteStatus = Field(...)

    # Echoed request
    business_name: str = Field(...)
    tax_id: str = Field(...)
    business_type: BusinessType = Field(...)
    product_type: ProductType = Field(...)
    state_code: str = Field(...)
    classification_code: str = Field(...)
    coverage_limit: Decimal = Field(...)
    deductible: Decimal = Field(...)
    effective_date: date = Field(...)
    policy_expiration_date: date | None = Field(None)

    premium: PremiumBreakdown = Field(default_factory=PremiumBreakdown)
    risk_assessment: RiskAssessment = Field(...)

    is_eligible: bool = Field(...)
    eligibility_messages: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    referral_reason: str | None = Field(None)

    processing_time_ms: float = Field(..., ge=0)
    api_version: str = Field(default="1.0")

    @model_validator(mode="after")
    def validate_outcome(self) -> "QuoteRecord":
        """Declined quotes explain themselves; quoted ones carry no blockers."""
        if self.status == QuoteStatus.DECLINED:
            if self.is_eligible or not self.eligibility_messages:
                raise ValueError("Declined quote must carry at least one reason")
        elif self.status == QuoteStatus.QUOTED:
            if not self.is_eligible or self.eligibility_messages:
                raise ValueError("Quoted quote cannot carry blocking messages")
        if self.expires_at < self.issued_at:
            raise ValueError("Quote cannot expire before it was issued")
        return self


@beartype
class PremiumEstimateRequest(BaseModelConfig):
    """Inputs for a quick premium estimate without a full quote."""

    product_type: ProductType = Field(...)
    state_code: str = Field(..., min_length=2, max_length=2)
    classification_code: str | None = Field(None, max_length=10)
    annual_payroll: Decimal = Field(
        default=Decimal("0"), ge=Decimal("0"), decimal_places=2
    )
    annual_revenue: Decimal = Field(
        default=Decimal("0"), ge=Decimal("0"), decimal_places=2
    )
    employee_count: int = Field(default=0, ge=0)
    coverage_limit: Decimal = Field(
        default=Decimal("1000000"), ge=Decimal("0"), decimal_places=2
    )
    deductible: Decimal = Field(
        default=Decimal("1000"), ge=Decimal("0"), decimal_places=2
    )

    @field_validator("state_code", mode="before")
    @classmethod
    def validate_state(cls, v: Any) -> Any:
        """Validate and upper-case the state code."""
        return _normalize_state(v)


@beartype
class PremiumEstimate(BaseModelConfig):
    """Result of a premium estimate."""

    estimated_annual_premium: Decimal = Field(default=Decimal("0.00"))
    estimated_monthly_premium: Decimal = Field(default=Decimal("0.00"))
    base_premium: Decimal = Field(default=Decimal("0.00"))
    minimum_premium: Decimal = Field(default=Decimal("0.00"))
    state_tax_rate: Decimal = Field(default=Decimal("0"))
    note: str = Field(default="")
