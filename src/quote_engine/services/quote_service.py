# QuoteEngine - Commercial Insurance Quote Engine
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Quote orchestration: eligibility, rate, risk, premium, then persistence.

A request moves from draft to either quoted or declined. Declines are normal
outcomes carried on the quote record, never exceptions; unexpected faults
are logged and re-raised to the caller.
"""

import calendar
import logging
import time
from collections.abc import Callable
from datetime import date, datetime, timedelta, timezone
from uuid import uuid4

from beartype import beartype

from ..core.config import Settings, get_settings
from ..models.quote import (
    BusinessType,
    PremiumEstimate,
    PremiumEstimateRequest,
    QuoteRecord,
    QuoteRequest,
    QuoteStatus,
)
from ..models.rating import (
    EligibilityResult,
    PremiumBreakdown,
    RiskAssessment,
    RiskTier,
)
from .quote_store import QuoteStore
from .rating.business_rules import EligibilityGate
from .rating.calculators import PremiumCalculator
from .rating.rate_tables import DEFAULT_CODE, RateResolver
from .rating.risk_assessor import RiskAssessor

logger = logging.getLogger(__name__)

RISK_DECLINE_MESSAGE = "Risk assessment indicates decline"

ESTIMATE_NOTE = (
    "This is an estimate. Final premium may vary based on full underwriting."
)
ESTIMATE_NO_RATE_NOTE = "No rate available for the requested coverage."
MAX_QUOTE_ID_ATTEMPTS = 5
_ESTIMATE_YEARS_IN_BUSINESS = 5
_NEUTRAL_RISK_SCORE = 50


@beartype
def generate_quote_id(now: datetime) -> str:
    """Quote number in the form QT-YYYYMMDD-XXXXXXXX."""
    return f"QT-{now:%Y%m%d}-{uuid4().hex[:8].upper()}"


def _add_months(start: date, months: int) -> date:
    month_index = start.month - 1 + months
    year = start.year + month_index // 12
    month = month_index % 12 + 1
    day = min(start.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class QuoteService:
    """Service for quote calculation and retrieval."""

    @beartype
    def __init__(
        self,
        rate_resolver: RateResolver,
        risk_assessor: RiskAssessor,
        premium_calculator: PremiumCalculator,
        eligibility_gate: EligibilityGate,
        quote_store: QuoteStore,
        settings: Settings | None = None,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        """Initialize quote service with its collaborators."""
        self._rate_resolver = rate_resolver
        self._risk_assessor = risk_assessor
        self._premium_calculator = premium_calculator
        self._eligibility_gate = eligibility_gate
        self._quote_store = quote_store
        self._settings = settings if settings is not None else get_settings()
        self._clock = clock

    @beartype
    def calculate_quote(self, request: QuoteRequest) -> QuoteRecord:
        """Run the quote pipeline and store the resulting record.

        Args:
            request: The quote request

        Returns:
            The stored quote record, either quoted or declined
        """
        start_time = time.perf_counter()

        logger.info(
            "Processing quote request for %s, Product: %s",
            request.business_name,
            request.product_type.value,
        )

        try:
            record = self._store(self._run_pipeline(request, start_time))
        except Exception:
            logger.exception("Error calculating quote for %s", request.business_name)
            raise

        if record.status == QuoteStatus.QUOTED:
            logger.info(
                "Quote %s generated. Premium: %s, Processing time: %.2fms",
                record.quote_id,
                record.premium.annual_premium,
                record.processing_time_ms,
            )
        if record.processing_time_ms > self._settings.slow_quote_threshold_ms:
            logger.warning(
                "Quote %s took %.2fms (threshold: %dms)",
                record.quote_id,
                record.processing_time_ms,
                self._settings.slow_quote_threshold_ms,
            )
        return record

    @beartype
    def get_quote(self, quote_id: str) -> QuoteRecord | None:
        """Look up a previously issued quote."""
        return self._quote_store.get_by_id(quote_id)

    @beartype
    def get_quote_history(self, tax_id: str) -> list[QuoteRecord]:
        """Quotes issued for a business, most recent first."""
        return self._quote_store.get_by_tax_id(tax_id)

    @beartype
    def check_eligibility(self, request: QuoteRequest) -> EligibilityResult:
        """Evaluate eligibility without quoting."""
        return self._eligibility_gate.check(request)

    @beartype
    def estimate_premium(self, request: PremiumEstimateRequest) -> PremiumEstimate:
        """Quick premium estimate against a neutral risk profile.

        Skips eligibility and risk scoring and stores nothing.
        """
        logger.info(
            "Premium estimate requested for Product: %s, State: %s",
            request.product_type.value,
            request.state_code,
        )

        classification_code = request.classification_code or DEFAULT_CODE
        rate_result = self._rate_resolver.resolve(
            request.state_code, classification_code, request.product_type
        )
        if rate_result.is_err():
            return PremiumEstimate(note=ESTIMATE_NO_RATE_NOTE)
        rate_entry = rate_result.unwrap()

        quote_request = QuoteRequest(
            business_name="Estimate",
            tax_id="00-0000000",
            business_type=BusinessType.OFFICE,
            state_code=request.state_code,
            classification_code=classification_code,
            product_type=request.product_type,
            annual_payroll=request.annual_payroll,
            annual_revenue=request.annual_revenue,
            employee_count=max(1, request.employee_count),
            years_in_business=_ESTIMATE_YEARS_IN_BUSINESS,
            coverage_limit=request.coverage_limit,
            deductible=request.deductible,
        )
        neutral_risk = RiskAssessment(
            overall_score=_NEUTRAL_RISK_SCORE, risk_tier=RiskTier.STANDARD
        )

        premium = self._premium_calculator.calculate(
            quote_request, neutral_risk, rate_entry
        )

        return PremiumEstimate(
            estimated_annual_premium=premium.annual_premium,
            estimated_monthly_premium=premium.monthly_premium,
            base_premium=premium.base_premium,
            minimum_premium=premium.minimum_premium,
            state_tax_rate=rate_entry.state_tax_rate,
            note=ESTIMATE_NOTE,
        )

    def _store(self, record: QuoteRecord) -> QuoteRecord:
        """Persist the record, drawing a fresh identifier if its own is taken."""
        for _ in range(MAX_QUOTE_ID_ATTEMPTS):
            if self._quote_store.put(record):
                return record
            logger.warning("Quote id %s already in use, reissuing", record.quote_id)
            record = record.model_copy(
                update={"quote_id": generate_quote_id(record.issued_at)}
            )
        raise RuntimeError(
            f"Could not allocate a unique quote id after {MAX_QUOTE_ID_ATTEMPTS} attempts"
        )

    def _run_pipeline(self, request: QuoteRequest, start_time: float) -> QuoteRecord:
        eligibility = self._eligibility_gate.check(request)
        if not eligibility.is_eligible:
            logger.warning(
                "Business %s not eligible: %s",
                request.business_name,
                ", ".join(eligibility.messages),
            )
            return self._declined(
                request, eligibility, eligibility.messages, start_time
            )

        rate_result = self._rate_resolver.resolve(
            request.state_code, request.classification_code, request.product_type
        )
        if rate_result.is_err():
            logger.warning(
                "No rate found for State: %s, Class: %s, Product: %s",
                request.state_code,
                request.classification_code,
                request.product_type.value,
            )
            return self._declined(
                request, eligibility, [rate_result.unwrap_err()], start_time
            )
        rate_entry = rate_result.unwrap()

        risk_assessment = self._risk_assessor.assess(request)
        if risk_assessment.risk_tier == RiskTier.DECLINE:
            logger.warning(
                "Risk decline for %s: score %d",
                request.business_name,
                risk_assessment.overall_score,
            )
            return self._declined(
                request,
                eligibility,
                [RISK_DECLINE_MESSAGE],
                start_time,
                risk_assessment=risk_assessment,
            )

        premium = self._premium_calculator.calculate(
            request, risk_assessment, rate_entry
        )

        issued_at = self._clock()
        effective_date = self._effective_date(request, issued_at)
        return QuoteRecord(
            quote_id=generate_quote_id(issued_at),
            issued_at=issued_at,
            expires_at=issued_at + timedelta(days=self._settings.quote_validity_days),
            status=QuoteStatus.QUOTED,
            effective_date=effective_date,
            policy_expiration_date=_add_months(
                effective_date, self._settings.policy_term_months
            ),
            premium=premium,
            risk_assessment=risk_assessment,
            is_eligible=True,
            warnings=eligibility.warnings,
            referral_reason=eligibility.referral_reason,
            processing_time_ms=_elapsed_ms(start_time),
            **self._echo(request),
        )

    def _declined(
        self,
        request: QuoteRequest,
        eligibility: EligibilityResult,
        messages: list[str],
        start_time: float,
        risk_assessment: RiskAssessment | None = None,
    ) -> QuoteRecord:
        issued_at = self._clock()
        return QuoteRecord(
            quote_id=generate_quote_id(issued_at),
            issued_at=issued_at,
            expires_at=issued_at,
            status=QuoteStatus.DECLINED,
            effective_date=self._effective_date(request, issued_at),
            premium=PremiumBreakdown(),
            risk_assessment=(
                risk_assessment
                if risk_assessment is not None
                else RiskAssessment(overall_score=0, risk_tier=RiskTier.DECLINE)
            ),
            is_eligible=False,
            eligibility_messages=messages,
            warnings=eligibility.warnings,
            referral_reason=eligibility.referral_reason,
            processing_time_ms=_elapsed_ms(start_time),
            **self._echo(request),
        )

    def _effective_date(self, request: QuoteRequest, issued_at: datetime) -> date:
        if request.effective_date is not None:
            return request.effective_date
        return issued_at.date() + timedelta(days=self._settings.effective_date_lag_days)

    @staticmethod
    def _echo(request: QuoteRequest) -> dict[str, object]:
        return {
            "business_name": request.business_name,
            "tax_id": request.tax_id,
            "business_type": request.business_type,
            "product_type": request.product_type,
            "state_code": request.state_code,
            "classification_code": request.classification_code,
            "coverage_limit": request.coverage_limit,
            "deductible": request.deductible,
        }


def _elapsed_ms(start_time: float) -> float:
    return (time.perf_counter() - start_time) * 1000
