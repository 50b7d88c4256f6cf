"""Installment inheritance: reuse the category of earlier installments.

A purchase split into N installments shows up as N transactions whose
descriptions differ only by a trailing ``k/N`` suffix (``"Netflix 2/12"``).
Installment ``k`` inherits the category of earlier installments of the same
purchase. Lookups only ever consider installments numbered below ``k``.

Two variants:

- :func:`resolve_installment` searches the current batch for installment
  ``k - 1``.
- :class:`InstallmentCache` scans a window of up to 12 prior invoices of the
  same card and returns the most frequent category among installments
  ``1..k-1``. The cache lives for one batch run only.
"""

from __future__ import annotations

import re
from collections import Counter
from collections.abc import Sequence
from typing import Protocol

from .logging_setup import get_logger
from .models import Invoice, Transaction

_logger = get_logger("ozz.installments")

_SUFFIX_RE = re.compile(r"\s*\d+/\d+\s*$")

# Longest realistic installment plan, in invoices.
INVOICE_WINDOW: int = 12


def base_description(description: str) -> str:
    """Strip a trailing ``X/Y`` installment marker and surrounding whitespace."""

    return _SUFFIX_RE.sub("", description, count=1).strip()


def resolve_installment(
    transaction: Transaction, batch: Sequence[Transaction]
) -> int | None:
    """Return the category id of installment ``k - 1`` found in ``batch``."""

    if transaction.installment <= 1:
        return None

    target = transaction.installment - 1
    base = base_description(transaction.description)
    for other in batch:
        if other.installment != target:
            continue
        if other.total_installments != transaction.total_installments:
            continue
        if base_description(other.description) == base:
            return other.category_id
    return None


class InvoiceSource(Protocol):
    """The subset of the API client needed for cross-invoice lookups."""

    def get_invoices(self, card_id: int) -> list[Invoice]: ...

    def get_invoice(self, card_id: int, invoice_id: int) -> Invoice: ...


class InstallmentCache:
    """Per-run cache of hydrated invoice transactions, keyed by card id.

    Create one per batch. The first lookup for a card fetches its invoice list,
    orders it newest first, and hydrates up to :data:`INVOICE_WINDOW` invoices
    starting at the current one. Later lookups reuse those transactions.
    """

    def __init__(self, source: InvoiceSource, *, window: int = INVOICE_WINDOW) -> None:
        self._source = source
        self._window = window
        self._by_card: dict[int, list[Transaction]] = {}
        self._primed: dict[tuple[int, int], list[Transaction]] = {}

    def prime(self, card_id: int, invoice_id: int, transactions: Sequence[Transaction]) -> None:
        """Use already-fetched ``transactions`` for an invoice instead of requesting it."""

        self._primed[(card_id, invoice_id)] = list(transactions)

    def clear(self) -> None:
        self._by_card.clear()
        self._primed.clear()

    def _transactions_for(self, card_id: int, current_invoice_id: int) -> list[Transaction]:
        cached = self._by_card.get(card_id)
        if cached is not None:
            return cached

        invoices = sorted(self._source.get_invoices(card_id), key=lambda inv: inv.date, reverse=True)
        start = next((i for i, inv in enumerate(invoices) if inv.id == current_invoice_id), None)
        if start is None:
            _logger.warning(
                "installments:invoice_not_found card_id=%d invoice_id=%d invoices=%d",
                card_id,
                current_invoice_id,
                len(invoices),
            )
            self._by_card[card_id] = []
            return []

        window = invoices[start : start + self._window]
        txns: list[Transaction] = []
        for inv in window:
            primed = self._primed.get((card_id, inv.id))
            if primed is not None:
                txns.extend(primed)
                continue
            hydrated = self._source.get_invoice(card_id, inv.id)
            txns.extend(hydrated.transactions)
        _logger.debug(
            "installments:hydrated card_id=%d invoices=%d transactions=%d",
            card_id,
            len(window),
            len(txns),
        )
        self._by_card[card_id] = txns
        return txns

    def find_installment_category(
        self, transaction: Transaction, card_id: int, current_invoice_id: int
    ) -> int | None:
        """Return the most frequent category among earlier installments.

        Ties go to the category seen first while scanning. Uncategorized
        installments (``category_id == 0``) carry no evidence and are ignored.
        """

        if transaction.installment <= 1:
            return None

        base = base_description(transaction.description)
        counts: Counter[int] = Counter()
        for other in self._transactions_for(card_id, current_invoice_id):
            if other.total_installments != transaction.total_installments:
                continue
            if other.installment >= transaction.installment:
                continue
            if not other.category_id:
                continue
            if base_description(other.description) == base:
                counts[other.category_id] += 1

        if not counts:
            return None
        # Counter keeps insertion order, so max() breaks ties by first seen.
        return max(counts, key=lambda cid: counts[cid])
