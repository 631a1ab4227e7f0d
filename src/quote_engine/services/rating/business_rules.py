# QuoteEngine - Commercial Insurance Quote Engine
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Eligibility rules evaluated before any rating work.

Hard stops make a request ineligible; soft warnings never block. Every rule
is evaluated so the caller sees all reasons at once.
"""

import logging
from decimal import Decimal

from beartype import beartype

from ...models.quote import BusinessType, QuoteRequest
from ...models.rating import EligibilityResult, ProductType

logger = logging.getLogger(__name__)

MIN_YEARS_IN_BUSINESS = 1
MIN_WORKERS_COMP_EMPLOYEES = 1
HIGH_PAYROLL_THRESHOLD = Decimal("10000000")
CONSTRUCTION_MIN_YEARS = 3
GL_EXCESS_LIMIT_THRESHOLD = Decimal("2000000")


@beartype
class EligibilityGate:
    """Evaluate hard-stop and soft-warning business rules for a request."""

    def check(self, request: QuoteRequest) -> EligibilityResult:
        """Check a request against the eligibility rules.

        Args:
            request: The quote request

        Returns:
            Eligibility result with blocking messages, warnings and referral
        """
        messages: list[str] = []
        warnings: list[str] = []
        referral_reason: str | None = None

        if request.years_in_business < MIN_YEARS_IN_BUSINESS:
            messages.append("Business must have at least 1 year of operating history")

        if (
            request.product_type == ProductType.WORKERS_COMPENSATION
            and request.employee_count < MIN_WORKERS_COMP_EMPLOYEES
        ):
            messages.append("Workers' Compensation requires at least 1 employee")

        if request.annual_payroll > HIGH_PAYROLL_THRESHOLD:
            warnings.append("High payroll - quote may require underwriter review")
            referral_reason = "Annual payroll exceeds $10M threshold"

        if (
            request.business_type == BusinessType.CONSTRUCTION
            and request.years_in_business < CONSTRUCTION_MIN_YEARS
        ):
            warnings.append(
                "Construction businesses with less than 3 years experience "
                "may have limited coverage options"
            )

        if (
            request.product_type == ProductType.GENERAL_LIABILITY
            and request.coverage_limit > GL_EXCESS_LIMIT_THRESHOLD
        ):
            warnings.append("Coverage limits over $2M may require excess liability policy")

        if messages:
            logger.debug(
                "Eligibility failed for %s: %s", request.business_name, "; ".join(messages)
            )

        return EligibilityResult(
            messages=messages,
            warnings=warnings,
            referral_reason=referral_reason,
        )
