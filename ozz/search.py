"""Transaction search helpers used by ``ozz find``.

All functions are pure and operate on already-fetched transactions.
"""

from __future__ import annotations

import re
from collections import defaultdict
from collections.abc import Iterable, Sequence

from rapidfuzz.distance import Levenshtein

from .models import Transaction

# Minimum description similarity for two charges to be considered duplicates.
DUPLICATE_SIMILARITY = 0.8


def find_by_description(pattern: str, transactions: Iterable[Transaction]) -> list[Transaction]:
    """Case-insensitive regex search over descriptions.

    Raises ``re.error`` for an invalid ``pattern``; the caller reports it.
    """

    regex = re.compile(pattern, re.IGNORECASE)
    return [t for t in transactions if regex.search(t.description)]


def find_uncategorized(transactions: Iterable[Transaction]) -> list[Transaction]:
    return [t for t in transactions if not t.category_id]


def edit_distance(a: str, b: str) -> int:
    """Levenshtein distance between ``a`` and ``b``."""

    return Levenshtein.distance(a, b)


def similarity(a: str, b: str) -> float:
    """Normalized Levenshtein similarity in ``[0, 1]``; two empty strings are identical."""

    return Levenshtein.normalized_similarity(a, b)


def find_duplicates(transactions: Sequence[Transaction]) -> list[list[Transaction]]:
    """Group likely duplicate charges.

    Candidates share ``amount_cents``. Within an amount, transactions are
    scanned by date and attached to the first cluster whose first member is at
    most one day apart and has a description similarity above
    :data:`DUPLICATE_SIMILARITY`. Only clusters with two or more members are
    returned, grouped by amount in first-seen order.
    """

    by_amount: dict[int, list[Transaction]] = defaultdict(list)
    for t in transactions:
        by_amount[t.amount_cents].append(t)

    groups: list[list[Transaction]] = []
    for txns in by_amount.values():
        if len(txns) < 2:
            continue
        clusters: list[list[Transaction]] = []
        for t in sorted(txns, key=lambda x: x.date):
            for cluster in clusters:
                first = cluster[0]
                close = abs((t.date - first.date).days) <= 1
                if close and similarity(t.description, first.description) > DUPLICATE_SIMILARITY:
                    cluster.append(t)
                    break
            else:
                clusters.append([t])
        groups.extend(c for c in clusters if len(c) >= 2)
    return groups
