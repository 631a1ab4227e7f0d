"""Test configuration and shared fixtures for the quote engine."""

from collections.abc import Generator

import pytest

from quote_engine.core.config import Settings, clear_settings_cache
from quote_engine.services.quote_service import QuoteService
from quote_engine.services.quote_store import QuoteStore
from quote_engine.services.rating.business_rules import EligibilityGate
from quote_engine.services.rating.calculators import PremiumCalculator
from quote_engine.services.rating.rate_tables import (
    InMemoryRateTableProvider,
    RateResolver,
    RateTable,
)
from quote_engine.services.rating.risk_assessor import RiskAssessor
from tests.fixtures.test_data import FIXED_NOW, TestDataFactory


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None, None, None]:
    """Each test starts from freshly loaded settings."""
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def settings() -> Settings:
    """Default settings."""
    return Settings()


@pytest.fixture
def factory() -> type[TestDataFactory]:
    """Test data factory."""
    return TestDataFactory


@pytest.fixture(scope="session")
def rate_table() -> RateTable:
    """Rate table loaded from the seed rates."""
    return RateTable.from_provider(InMemoryRateTableProvider())


@pytest.fixture
def rate_resolver(rate_table: RateTable) -> RateResolver:
    """Resolver over the seeded rate table."""
    return RateResolver(rate_table)


@pytest.fixture
def risk_assessor() -> RiskAssessor:
    """Risk assessor."""
    return RiskAssessor()


@pytest.fixture
def premium_calculator() -> PremiumCalculator:
    """Premium calculator."""
    return PremiumCalculator()


@pytest.fixture
def eligibility_gate() -> EligibilityGate:
    """Eligibility gate."""
    return EligibilityGate()


@pytest.fixture
def quote_store() -> QuoteStore:
    """Empty quote store."""
    return QuoteStore()


@pytest.fixture
def quote_service(
    rate_resolver: RateResolver,
    risk_assessor: RiskAssessor,
    premium_calculator: PremiumCalculator,
    eligibility_gate: EligibilityGate,
    quote_store: QuoteStore,
    settings: Settings,
) -> QuoteService:
    """Quote service on the seeded rate table with a fixed clock."""
    return QuoteService(
        rate_resolver=rate_resolver,
        risk_assessor=risk_assessor,
        premium_calculator=premium_calculator,
        eligibility_gate=eligibility_gate,
        quote_store=quote_store,
        settings=settings,
        clock=lambda: FIXED_NOW,
    )
