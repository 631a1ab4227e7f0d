# QuoteEngine - Commercial Insurance Quote Engine
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Rate table loading and tiered rate resolution.

The rate table is built once at startup from the rate table provider and is
read-only afterwards, so lookups need no locking. Resolution falls back from
the exact (state, classification) row to the state's DEFAULT classification
and finally to the DEFAULT/DEFAULT row for the product.
"""

import logging
from collections.abc import Iterable, Mapping
from datetime import date
from decimal import Decimal
from types import MappingProxyType
from typing import Protocol, runtime_checkable

from beartype import beartype

from ...core.result_types import Err, Ok, Result
from ...models.rating import ClassificationCode, ProductType, RateEntry

logger = logging.getLogger(__name__)

DEFAULT_CODE = "DEFAULT"
NO_RATE_MESSAGE = "No rate available for the requested coverage"

RateKey = tuple[str, str, ProductType]


@runtime_checkable
class RateTableProvider(Protocol):
    """Source of rate entries, read once at startup."""

    def get_active_rates(self) -> list[RateEntry]:
        """Return the active rate entries in priority order."""
        ...


@beartype
class RateTable:
    """Immutable index of active rate entries keyed by (state, class, product)."""

    def __init__(self, entries: Iterable[RateEntry]) -> None:
        """Index active entries; the first entry seen for a key wins."""
        index: dict[RateKey, RateEntry] = {}
        for entry in entries:
            if not entry.is_active:
                continue
            key = (entry.state_code, entry.classification_code, entry.product_type)
            index.setdefault(key, entry)
        self._index: Mapping[RateKey, RateEntry] = MappingProxyType(index)

    @classmethod
    def from_provider(cls, provider: RateTableProvider) -> "RateTable":
        """Build the table from a rate table provider."""
        table = cls(provider.get_active_rates())
        logger.info("Rate table loaded with %d active entries", len(table))
        return table

    def __len__(self) -> int:
        return len(self._index)

    def lookup(
        self, state_code: str, classification_code: str, product_type: ProductType
    ) -> RateEntry | None:
        """Exact-key lookup, case-insensitive on the codes."""
        return self._index.get(
            (state_code.upper(), classification_code.upper(), product_type)
        )


@beartype
class RateResolver:
    """Resolve the single applicable rate entry using tiered fallback."""

    def __init__(self, rate_table: RateTable) -> None:
        """Initialize resolver over a loaded rate table."""
        self._rate_table = rate_table

    def resolve(
        self, state_code: str, classification_code: str, product_type: ProductType
    ) -> Result[RateEntry, str]:
        """Find the applicable rate; first match wins, entries are never merged.

        Args:
            state_code: Two-letter state code
            classification_code: Industry classification code
            product_type: Product being quoted

        Returns:
            Ok with the rate entry, or Err when no tier matches
        """
        logger.debug(
            "Looking up rate for State: %s, Class: %s, Product: %s",
            state_code,
            classification_code,
            product_type.value,
        )

        candidates = (
            (state_code, classification_code),
            (state_code, DEFAULT_CODE),
            (DEFAULT_CODE, DEFAULT_CODE),
        )
        for tier, (state, classification) in enumerate(candidates, start=1):
            entry = self._rate_table.lookup(state, classification, product_type)
            if entry is not None:
                logger.debug(
                    "Found rate entry at tier %d: BaseRate=%s", tier, entry.base_rate
                )
                return Ok(entry)

        logger.warning(
            "No rate entry found for State: %s, Class: %s, Product: %s",
            state_code,
            classification_code,
            product_type.value,
        )
        return Err(NO_RATE_MESSAGE)


_SEED_STATES = ("CA", "TX", "NY", "FL", "IL", "PA", "OH", "GA", "NC", "MI", DEFAULT_CODE)

_STATE_TAX_RATES = {
    "CA": Decimal("0.0328"),
    "TX": Decimal("0.018"),
    "NY": Decimal("0.035"),
    "FL": Decimal("0.015"),
    "IL": Decimal("0.035"),
    "PA": Decimal("0.02"),
    "OH": Decimal("0.015"),
    "GA": Decimal("0.025"),
    "NC": Decimal("0.02"),
    "MI": Decimal("0.025"),
}
_DEFAULT_STATE_TAX_RATE = Decimal("0.02")

_SEED_EFFECTIVE_DATE = date(2024, 1, 1)


def _state_rows(state: str) -> list[tuple[ProductType, str, str, str]]:
    """Seed rows for one state as (product, class, base rate, minimum)."""
    california = state == "CA"
    wc = ProductType.WORKERS_COMPENSATION
    gl = ProductType.GENERAL_LIABILITY
    return [
        # Workers' comp, per $100 of payroll
        (wc, "8810", "2.50" if california else "1.85", "1000"),
        (wc, "8742", "1.20" if california else "0.95", "800"),
        (wc, "5183", "8.50" if california else "6.25", "2500"),
        (wc, DEFAULT_CODE, "2.00", "1000"),
        # General liability, per $1000 of revenue
        (gl, "41677", "5.50", "500"),
        (gl, "91111", "12.00", "750"),
        (gl, DEFAULT_CODE, "7.50", "500"),
        (ProductType.BUSINESS_OWNERS_POLICY, DEFAULT_CODE, "9.00", "750"),
        (ProductType.COMMERCIAL_AUTO, DEFAULT_CODE, "1200", "1500"),
        (ProductType.PROFESSIONAL_LIABILITY, DEFAULT_CODE, "4.25", "1000"),
        (ProductType.CYBER_LIABILITY, DEFAULT_CODE, "2.50", "500"),
    ]


@beartype
class InMemoryRateTableProvider:
    """Rate table provider backed by the built-in seed rates."""

    def __init__(self, entries: list[RateEntry] | None = None) -> None:
        """Use the given entries, or the seed rates when omitted."""
        self._entries = list(entries) if entries is not None else self._seed()

    def get_active_rates(self) -> list[RateEntry]:
        """Return active entries in seed order."""
        return [entry for entry in self._entries if entry.is_active]

    @staticmethod
    def _seed() -> list[RateEntry]:
        entries = []
        for state in _SEED_STATES:
            tax_rate = _STATE_TAX_RATES.get(state, _DEFAULT_STATE_TAX_RATE)
            for product, classification, base_rate, min_premium in _state_rows(state):
                entries.append(
                    RateEntry(
                        state_code=state,
                        classification_code=classification,
                        product_type=product,
                        base_rate=Decimal(base_rate),
                        min_premium=Decimal(min_premium),
                        state_tax_rate=tax_rate,
                        effective_date=_SEED_EFFECTIVE_DATE,
                    )
                )
        return entries


_SEED_CLASSIFICATIONS = (
    # Workers' comp
    ("8810", "Clerical Office Employees", ProductType.WORKERS_COMPENSATION, "0.25", "A"),
    ("8742", "Salespersons - Outside", ProductType.WORKERS_COMPENSATION, "0.35", "A"),
    ("8820", "Attorneys - All Employees", ProductType.WORKERS_COMPENSATION, "0.30", "A"),
    ("8832", "Physicians - All Employees", ProductType.WORKERS_COMPENSATION, "0.45", "B"),
    ("5183", "Plumbing - Residential", ProductType.WORKERS_COMPENSATION, "4.50", "D"),
    ("5190", "Electrical Work", ProductType.WORKERS_COMPENSATION, "3.80", "D"),
    ("5403", "Carpentry - Residential", ProductType.WORKERS_COMPENSATION, "5.20", "D"),
    ("9015", "Building Operation", ProductType.WORKERS_COMPENSATION, "2.10", "C"),
    ("9586", "Parking Lots - Attended", ProductType.WORKERS_COMPENSATION, "2.80", "C"),
    # General liability
    ("41677", "Restaurant - No Liquor", ProductType.GENERAL_LIABILITY, "5.50", "B"),
    ("41675", "Restaurant - With Liquor", ProductType.GENERAL_LIABILITY, "8.50", "C"),
    ("91111", "Retail Store", ProductType.GENERAL_LIABILITY, "3.20", "B"),
    ("41650", "Office - Professional", ProductType.GENERAL_LIABILITY, "2.50", "A"),
    ("91302", "Contractor - General", ProductType.GENERAL_LIABILITY, "12.00", "D"),
    ("91340", "Manufacturer - Light", ProductType.GENERAL_LIABILITY, "6.50", "C"),
    ("91341", "Manufacturer - Heavy", ProductType.GENERAL_LIABILITY, "9.00", "D"),
)


@beartype
class ClassificationCatalog:
    """Valid classification codes per product, for validation and display."""

    def __init__(self, codes: list[ClassificationCode] | None = None) -> None:
        """Use the given codes, or the built-in catalog when omitted."""
        if codes is None:
            codes = [
                ClassificationCode(
                    code=code,
                    description=description,
                    product_type=product,
                    base_rate=Decimal(rate),
                    hazard_group=hazard,
                )
                for code, description, product, rate, hazard in _SEED_CLASSIFICATIONS
            ]
        self._codes = tuple(codes)

    def get_classification_codes(
        self, product_type: ProductType
    ) -> list[ClassificationCode]:
        """Active codes for a product, ordered by code."""
        return sorted(
            (
                c
                for c in self._codes
                if c.product_type == product_type and c.is_active
            ),
            key=lambda c: c.code,
        )

    def is_valid(self, product_type: ProductType, code: str) -> bool:
        """Check whether a code is an active classification for the product."""
        wanted = code.upper()
        return any(
            c.code == wanted for c in self.get_classification_codes(product_type)
        )
