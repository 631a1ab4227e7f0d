# QuoteEngine - Commercial Insurance Quote Engine
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Rating components: rate resolution, risk scoring, premium and eligibility."""

from .business_rules import EligibilityGate
from .calculators import PremiumCalculator
from .rate_tables import (
    ClassificationCatalog,
    InMemoryRateTableProvider,
    RateResolver,
    RateTable,
    RateTableProvider,
)
from .risk_assessor import RiskAssessor

__all__ = [
    "ClassificationCatalog",
    "EligibilityGate",
    "InMemoryRateTableProvider",
    "PremiumCalculator",
    "RateResolver",
    "RateTable",
    "RateTableProvider",
    "RiskAssessor",
]
