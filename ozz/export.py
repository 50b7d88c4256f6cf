"""CSV export of transactions (``ozz export csv``)."""

from __future__ import annotations

import csv
from collections.abc import Iterable, Mapping
from pathlib import Path

from .config import CategoryTable
from .formatting import format_money
from .models import Account, CreditCard, Transaction

CSV_COLUMNS: tuple[str, ...] = (
    "id",
    "date",
    "description",
    "amount",
    "category_name",
    "account_or_card",
    "paid",
    "notes",
    "tags",
)


def _account_or_card(
    txn: Transaction,
    accounts: Mapping[int, str],
    cards: Mapping[int, str],
) -> str:
    if txn.credit_card_id:
        return cards.get(txn.credit_card_id, f"Card #{txn.credit_card_id}")
    return accounts.get(txn.account_id, f"Account #{txn.account_id}")


def build_csv_rows(
    transactions: Iterable[Transaction],
    categories: CategoryTable,
    accounts: Iterable[Account] = (),
    cards: Iterable[CreditCard] = (),
) -> list[dict[str, str]]:
    """Return one row per transaction keyed by :data:`CSV_COLUMNS`."""

    account_names = {a.id: a.name for a in accounts}
    card_names = {c.id: c.name for c in cards}

    rows: list[dict[str, str]] = []
    for txn in transactions:
        rows.append(
            {
                "id": str(txn.id),
                "date": txn.date.isoformat(),
                "description": txn.description,
                "amount": format_money(txn.amount_cents),
                "category_name": categories.name_for(txn.category_id) or "uncategorized",
                "account_or_card": _account_or_card(txn, account_names, card_names),
                "paid": "yes" if txn.paid else "no",
                "notes": txn.notes or "",
                "tags": ", ".join(txn.tag_names),
            }
        )
    return rows


def write_csv(path: str | Path, rows: Iterable[Mapping[str, str]]) -> Path:
    """Write ``rows`` with a header line and return the resolved path."""

    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    with out.open("w", encoding="utf-8", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=list(CSV_COLUMNS))
        writer.writeheader()
        writer.writerows(rows)
    return out.resolve()


def export_filename(*, invoice_id: int | None = None, start: str | None = None, end: str | None = None) -> str:
    if invoice_id is not None:
        return f"ozz_export_invoice_{invoice_id}.csv"
    return f"ozz_export_{start}_{end}.csv"
