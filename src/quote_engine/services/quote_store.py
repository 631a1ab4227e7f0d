# QuoteEngine - Commercial Insurance Quote Engine
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Thread-safe in-memory quote store.

Quotes are kept by quote identifier with a secondary index from business tax
identifier to the quote identifiers issued for it. A single lock guards both
maps so a record is never visible without its index entry, or the reverse.
The lock is held only for the map access itself.
"""

import logging
import threading

from beartype import beartype

from ..models.quote import QuoteRecord

logger = logging.getLogger(__name__)


@beartype
class QuoteStore:
    """Quote records by identifier and by business tax identifier."""

    def __init__(self) -> None:
        """Initialize empty store."""
        self._quotes: dict[str, QuoteRecord] = {}
        self._tax_id_index: dict[str, list[str]] = {}
        self._lock = threading.Lock()

    def put(self, record: QuoteRecord) -> bool:
        """Store a new quote and index it by tax identifier.

        Returns:
            False, leaving the store unchanged, if the identifier is taken
        """
        with self._lock:
            if record.quote_id in self._quotes:
                return False
            self._quotes[record.quote_id] = record
            if record.tax_id:
                self._tax_id_index.setdefault(record.tax_id, []).append(
                    record.quote_id
                )

        logger.debug("Stored quote %s", record.quote_id)
        return True

    def get_by_id(self, quote_id: str) -> QuoteRecord | None:
        """Look up a quote by identifier."""
        with self._lock:
            return self._quotes.get(quote_id)

    def get_by_tax_id(self, tax_id: str) -> list[QuoteRecord]:
        """Quotes issued for a business, most recent first.

        Ordered by issue time; quotes issued at the same instant are listed
        latest-stored first.
        """
        with self._lock:
            records = [
                self._quotes[quote_id]
                for quote_id in reversed(self._tax_id_index.get(tax_id, []))
            ]
        return sorted(records, key=lambda r: r.issued_at, reverse=True)

    def __len__(self) -> int:
        with self._lock:
            return len(self._quotes)
