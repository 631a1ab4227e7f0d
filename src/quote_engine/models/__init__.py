# QuoteEngine - Commercial Insurance Quote Engine
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Domain models for quote requests, rating inputs and quote records."""

from .quote import (
    BusinessType,
    PremiumEstimate,
    PremiumEstimateRequest,
    QuoteRecord,
    QuoteRequest,
    QuoteStatus,
    RiskFactor,
    RiskFactorType,
)
from .rating import (
    AdjustmentType,
    ClassificationCode,
    EligibilityResult,
    PremiumAdjustment,
    PremiumBreakdown,
    ProductType,
    RateEntry,
    RiskAssessment,
    RiskFactorScore,
    RiskTier,
)

__all__ = [
    "AdjustmentType",
    "BusinessType",
    "ClassificationCode",
    "EligibilityResult",
    "PremiumAdjustment",
    "PremiumBreakdown",
    "PremiumEstimate",
    "PremiumEstimateRequest",
    "ProductType",
    "QuoteRecord",
    "QuoteRequest",
    "QuoteStatus",
    "RateEntry",
    "RiskAssessment",
    "RiskFactor",
    "RiskFactorScore",
    "RiskFactorType",
    "RiskTier",
]
