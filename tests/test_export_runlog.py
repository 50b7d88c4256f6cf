from __future__ import annotations

import csv
import json
from datetime import datetime
from pathlib import Path

from ozz.config import CategoryTable
from ozz.export import CSV_COLUMNS, build_csv_rows, export_filename, write_csv
from ozz.models import Account, CreditCard
from ozz.runlog import RunLog
from tests.helpers.organizze_stub import make_txn

CATEGORIES = CategoryTable(essential={"Mercado": 101}, lifestyle={"Streaming": 201})


def test_build_csv_rows_resolves_names() -> None:
    txns = [
        make_txn(
            1,
            "Netflix, Inc.",
            category_id=201,
            amount_cents=-4590,
            credit_card_id=7,
            tags=[{"name": "assinatura"}, {"name": "digital"}],
        ),
        make_txn(2, "Mercado", category_id=0, account_id=3, paid=True, notes='say "hi"'),
        make_txn(3, "Posto", account_id=99),
    ]
    accounts = [Account(id=3, name="Conta Corrente")]
    cards = [CreditCard(id=7, name="Nubank", closing_day=3, due_day=10)]

    rows = build_csv_rows(txns, CATEGORIES, accounts, cards)

    assert rows[0]["category_name"] == "Streaming"
    assert rows[0]["account_or_card"] == "Nubank"
    assert rows[0]["amount"] == "-R$ 45,90"
    assert rows[0]["tags"] == "assinatura, digital"
    assert rows[0]["paid"] == "no"
    assert rows[1]["category_name"] == "uncategorized"
    assert rows[1]["account_or_card"] == "Conta Corrente"
    assert rows[1]["paid"] == "yes"
    assert rows[2]["account_or_card"] == "Account #99"


def test_write_csv_quotes_fields(tmp_path: Path) -> None:
    txn = make_txn(1, "Netflix, Inc.", category_id=201, notes='say "hi"')
    rows = build_csv_rows([txn], CATEGORIES)

    path = write_csv(tmp_path / "out" / "export.csv", rows)

    with path.open(encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        assert tuple(reader.fieldnames or ()) == CSV_COLUMNS
        [row] = list(reader)
    assert row["description"] == "Netflix, Inc."
    assert row["notes"] == 'say "hi"'
    assert row["date"] == "2025-01-15"


def test_export_filename() -> None:
    assert export_filename(invoice_id=310) == "ozz_export_invoice_310.csv"
    assert export_filename(start="2025-01", end="2025-03") == "ozz_export_2025-01_2025-03.csv"


def test_runlog_writes_named_json(tmp_path: Path) -> None:
    log = RunLog("update", {"invoice": "7/310", "apply": False}, now=datetime(2025, 3, 4, 5, 6, 7))

    path = log.write(
        {"categorized": 1, "skipped": 1},
        transactions=[{"id": 1, "action": "update"}],
        skipped=[{"id": 2, "reason": "no_match"}],
    )

    assert path == tmp_path / "logs" / "2025-03-04_050607_update.json"
    entry = json.loads(path.read_text(encoding="utf-8"))
    assert entry["command"] == "update"
    assert entry["args"] == {"invoice": "7/310", "apply": False}
    assert entry["results"]["categorized"] == 1
    assert entry["transactions"][0]["action"] == "update"
    assert entry["skipped"][0]["reason"] == "no_match"


def test_runlog_omits_absent_sections(tmp_path: Path) -> None:
    path = RunLog("update", {}, log_dir=tmp_path / "custom").write({"total": 0})
    entry = json.loads(path.read_text(encoding="utf-8"))
    assert path.parent == tmp_path / "custom"
    assert "transactions" not in entry and "skipped" not in entry
