# QuoteEngine - Commercial Insurance Quote Engine
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Wire the quote pipeline once at process start."""

import logging

from beartype import beartype

from .core.config import Settings, get_settings
from .core.logging_utils import configure_logging
from .services.quote_service import QuoteService
from .services.quote_store import QuoteStore
from .services.rating.business_rules import EligibilityGate
from .services.rating.calculators import PremiumCalculator
from .services.rating.rate_tables import (
    InMemoryRateTableProvider,
    RateResolver,
    RateTable,
    RateTableProvider,
)
from .services.rating.risk_assessor import RiskAssessor

logger = logging.getLogger(__name__)


@beartype
def create_quote_service(
    settings: Settings | None = None,
    rate_provider: RateTableProvider | None = None,
    quote_store: QuoteStore | None = None,
) -> QuoteService:
    """Build a ready-to-use quote service.

    The rate table is loaded here, before any request is served, and is
    never reloaded.
    """
    settings = settings if settings is not None else get_settings()
    configure_logging(level=settings.log_level)

    rate_table = RateTable.from_provider(
        rate_provider if rate_provider is not None else InMemoryRateTableProvider()
    )
    logger.info("%s ready (%s)", settings.app_name, settings.environment)

    return QuoteService(
        rate_resolver=RateResolver(rate_table),
        risk_assessor=RiskAssessor(),
        premium_calculator=PremiumCalculator(),
        eligibility_gate=EligibilityGate(),
        quote_store=quote_store if quote_store is not None else QuoteStore(),
        settings=settings,
    )
