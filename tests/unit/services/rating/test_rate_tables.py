"""Test rate table loading, tiered resolution and the classification catalog."""

from decimal import Decimal

from quote_engine.models.rating import ClassificationCode, ProductType
from quote_engine.services.rating.rate_tables import (
    DEFAULT_CODE,
    NO_RATE_MESSAGE,
    ClassificationCatalog,
    InMemoryRateTableProvider,
    RateResolver,
    RateTable,
    RateTableProvider,
)
from tests.fixtures.test_data import TestDataFactory

WC = ProductType.WORKERS_COMPENSATION
GL = ProductType.GENERAL_LIABILITY


class TestRateTable:
    """Test rate table indexing."""

    def test_seed_provider_loads_all_states(self, rate_table: RateTable) -> None:
        """Ten states plus DEFAULT, eleven rows each."""
        assert len(rate_table) == 11 * 11

    def test_provider_satisfies_protocol(self) -> None:
        """In-memory provider is a rate table provider."""
        assert isinstance(InMemoryRateTableProvider(), RateTableProvider)

    def test_inactive_entries_are_skipped(self) -> None:
        """Inactive rows never make it into the index."""
        table = RateTable([TestDataFactory.create_rate_entry(is_active=False)])

        assert len(table) == 0
        assert table.lookup("CA", "41677", GL) is None

    def test_first_entry_for_a_key_wins(self) -> None:
        """Duplicate keys keep the first row seen."""
        table = RateTable(
            [
                TestDataFactory.create_rate_entry(base_rate=Decimal("5.50")),
                TestDataFactory.create_rate_entry(base_rate=Decimal("9.99")),
            ]
        )

        entry = table.lookup("CA", "41677", GL)
        assert entry is not None
        assert entry.base_rate == Decimal("5.50")

    def test_lookup_is_case_insensitive(self) -> None:
        """Codes are upper-cased on load and on lookup."""
        table = RateTable(
            [TestDataFactory.create_rate_entry(state_code="ca", classification_code="abc1")]
        )

        assert table.lookup("Ca", "ABC1", GL) is not None


class TestRateResolver:
    """Test the three-tier rate fallback."""

    def test_exact_match(self, rate_resolver: RateResolver) -> None:
        """Exact state and classification wins."""
        entry = rate_resolver.resolve("CA", "8810", WC).unwrap()

        assert entry.state_code == "CA"
        assert entry.classification_code == "8810"
        assert entry.base_rate == Decimal("2.50")
        assert entry.state_tax_rate == Decimal("0.0328")

    def test_state_specific_rates(self, rate_resolver: RateResolver) -> None:
        """Other states carry their own rates and taxes."""
        entry = rate_resolver.resolve("TX", "8810", WC).unwrap()

        assert entry.base_rate == Decimal("1.85")
        assert entry.state_tax_rate == Decimal("0.018")

    def test_falls_back_to_state_default_class(
        self, rate_resolver: RateResolver
    ) -> None:
        """Unknown classification uses the state's DEFAULT row."""
        entry = rate_resolver.resolve("CA", "9999", WC).unwrap()

        assert entry.state_code == "CA"
        assert entry.classification_code == DEFAULT_CODE
        assert entry.base_rate == Decimal("2.00")
        assert entry.state_tax_rate == Decimal("0.0328")

    def test_falls_back_to_default_default(
        self, rate_resolver: RateResolver
    ) -> None:
        """Unseeded state skips straight to DEFAULT/DEFAULT, not DEFAULT/class."""
        entry = rate_resolver.resolve("WA", "8810", WC).unwrap()

        assert entry.state_code == DEFAULT_CODE
        assert entry.classification_code == DEFAULT_CODE
        assert entry.base_rate == Decimal("2.00")
        assert entry.state_tax_rate == Decimal("0.02")

    def test_no_rate_returns_err(self) -> None:
        """Missing product is an expected outcome, not an exception."""
        resolver = RateResolver(RateTable([TestDataFactory.create_rate_entry()]))

        result = resolver.resolve("CA", "41677", WC)

        assert result.is_err()
        assert result.unwrap_err() == NO_RATE_MESSAGE

    def test_more_specific_tier_wins(self) -> None:
        """All three tiers present: the exact row is chosen."""
        resolver = RateResolver(
            RateTable(
                [
                    TestDataFactory.create_rate_entry(
                        state_code=DEFAULT_CODE,
                        classification_code=DEFAULT_CODE,
                        base_rate=Decimal("1.00"),
                    ),
                    TestDataFactory.create_rate_entry(
                        classification_code=DEFAULT_CODE, base_rate=Decimal("2.00")
                    ),
                    TestDataFactory.create_rate_entry(base_rate=Decimal("3.00")),
                ]
            )
        )

        assert resolver.resolve("CA", "41677", GL).unwrap().base_rate == Decimal("3.00")
        assert resolver.resolve("CA", "00000", GL).unwrap().base_rate == Decimal("2.00")
        assert resolver.resolve("NY", "41677", GL).unwrap().base_rate == Decimal("1.00")

    def test_every_product_resolves_in_every_seeded_state(
        self, rate_resolver: RateResolver
    ) -> None:
        """Seed data covers each product everywhere via DEFAULT rows."""
        for state in ("CA", "TX", "NY", "FL", "IL", "PA", "OH", "GA", "NC", "MI", "WA"):
            for product in ProductType:
                assert rate_resolver.resolve(state, "ANY", product).is_ok()


class TestClassificationCatalog:
    """Test classification code listing and validation."""

    def test_codes_by_product_sorted(self) -> None:
        """Codes are filtered by product and ordered by code."""
        catalog = ClassificationCatalog()

        codes = [c.code for c in catalog.get_classification_codes(WC)]

        assert codes == sorted(codes)
        assert len(codes) == 9
        assert "8810" in codes
        assert len(catalog.get_classification_codes(GL)) == 7

    def test_product_without_codes(self) -> None:
        """Products with no catalog entries return an empty list."""
        catalog = ClassificationCatalog()

        assert catalog.get_classification_codes(ProductType.CYBER_LIABILITY) == []

    def test_inactive_codes_hidden(self) -> None:
        """Inactive codes are neither listed nor valid."""
        catalog = ClassificationCatalog(
            [
                ClassificationCode(
                    code="8810",
                    description="Clerical Office Employees",
                    product_type=WC,
                    base_rate=Decimal("0.25"),
                    hazard_group="A",
                    is_active=False,
                )
            ]
        )

        assert catalog.get_classification_codes(WC) == []
        assert not catalog.is_valid(WC, "8810")

    def test_is_valid(self) -> None:
        """Validity depends on the product."""
        catalog = ClassificationCatalog()

        assert catalog.is_valid(GL, "41677")
        assert not catalog.is_valid(WC, "41677")
