from __future__ import annotations

from datetime import date

import pytest

from ozz.config import CategoryTable
from ozz.models import Action, Changes, InvoiceRef, Reason
from ozz.processor import ProcessOptions, get_tags_for_category, process_batch, should_skip
from tests.helpers.organizze_stub import (
    FakeOrganizzeClient,
    make_config,
    make_invoice,
    make_txn,
)

# ---- should_skip -------------------------------------------------------------


def test_should_skip_no_suggestion_is_no_match() -> None:
    for force in (False, True):
        decision = should_skip(make_txn(category_id=101, edited=True), None, force)
        assert decision.skip and decision.reason is Reason.NO_MATCH


def test_should_skip_already_correct_regardless_of_force() -> None:
    for force in (False, True):
        decision = should_skip(make_txn(category_id=101), 101, force)
        assert decision.skip and decision.reason is Reason.ALREADY_CORRECT


def test_should_skip_manual_edit_unless_forced() -> None:
    edited = make_txn(category_id=101, edited=True)

    decision = should_skip(edited, 102, False)
    assert decision.skip and decision.reason is Reason.MANUAL_EDIT

    forced = should_skip(edited, 102, True)
    assert not forced.skip and forced.reason is None


def test_should_skip_allows_untouched_uncategorized() -> None:
    decision = should_skip(make_txn(category_id=0), 42, False)
    assert not decision.skip


# ---- get_tags_for_category -----------------------------------------------------


def test_get_tags_for_category() -> None:
    table = CategoryTable(essential={"groceries": 42}, lifestyle={})
    tags = {"groceries": ("essential", "food")}

    assert get_tags_for_category(42, table, tags) == ["essential", "food"]
    assert get_tags_for_category(0, table, tags) == []
    assert get_tags_for_category(None, table, tags) == []
    assert get_tags_for_category(99, table, tags) == []
    assert get_tags_for_category(42, table, {}) == []


# ---- process_batch: normal mode ------------------------------------------------


def test_process_batch_categorizes_by_pattern_and_stages_tags() -> None:
    config = make_config(rules=[("netflix", "Streaming")], tags={"Streaming": ["assinatura"]})
    txn = make_txn(1, "NETFLIX.COM")

    [result] = process_batch([txn], config)

    assert result.action is Action.UPDATE
    assert result.reason is Reason.PATTERN
    assert result.changes == Changes(category_id=201, tags=("assinatura",))


def test_process_batch_stages_category_for_untouched_uncategorized() -> None:
    config = make_config(rules=[("mercado", "Mercado")])
    [result] = process_batch([make_txn(1, "MERCADO CENTRAL")], config)

    assert result.action is Action.UPDATE
    assert result.changes is not None and result.changes.category_id == 101
    assert result.changes.tags is None


def test_process_batch_skips_with_reason_and_no_changes() -> None:
    config = make_config(rules=[("mercado", "Mercado")], rename=[("MERCADO*", "Mercado")])
    txns = [
        make_txn(1, "PADARIA"),
        make_txn(2, "MERCADO A", category_id=101),
        make_txn(3, "MERCADO B", category_id=203, edited=True),
    ]

    results = process_batch(txns, config)

    assert [r.action for r in results] == [Action.SKIP] * 3
    assert [r.reason for r in results] == [
        Reason.NO_MATCH,
        Reason.ALREADY_CORRECT,
        Reason.MANUAL_EDIT,
    ]
    # Skipping stops processing: no rename is staged either.
    assert all(r.changes is None for r in results)


def test_process_batch_force_overrides_manual_edit() -> None:
    config = make_config(rules=[("mercado", "Mercado")])
    txn = make_txn(1, "MERCADO", category_id=203, edited=True)

    [result] = process_batch([txn], config, ProcessOptions(force=True))

    assert result.action is Action.UPDATE
    assert result.changes is not None and result.changes.category_id == 101


def test_process_batch_unknown_category_name_is_no_match() -> None:
    config = make_config(rules=[("academia", "Esportes")])
    [result] = process_batch([make_txn(1, "ACADEMIA FIT")], config)

    assert result.action is Action.SKIP
    assert result.reason is Reason.NO_MATCH


def test_process_batch_renames_alongside_categorization() -> None:
    config = make_config(rules=[("netflix", "Streaming")], rename=[("NETFLIX*", "Netflix")])
    [result] = process_batch([make_txn(1, "NETFLIX.COM")], config)

    assert result.action is Action.UPDATE
    assert result.changes is not None
    assert result.changes.category_id == 201
    assert result.changes.description == "Netflix"


def test_process_batch_one_result_per_input_in_order() -> None:
    config = make_config(rules=[("uber", "Transporte")], rename=[("IFOOD*", "iFood")])
    txns = [make_txn(i, d) for i, d in enumerate(["UBER", "X", "IFOOD", "UBER 2", "Y"], start=1)]

    results = process_batch(txns, config)

    assert [r.transaction.id for r in results] == [1, 2, 3, 4, 5]


def test_process_batch_installment_inheritance_in_batch() -> None:
    # Pattern rules would say Compras; the earlier installment says Streaming.
    config = make_config(rules=[("netflix", "Compras")])
    prev = make_txn(1, "Netflix 1/12", installment=1, total_installments=12, category_id=201)
    cur = make_txn(2, "Netflix 2/12", installment=2, total_installments=12)

    results = process_batch([prev, cur], config)

    assert results[1].action is Action.UPDATE
    assert results[1].reason is Reason.INSTALLMENT
    assert results[1].changes is not None and results[1].changes.category_id == 201


def test_process_batch_inherited_unknown_category_falls_back_to_pattern() -> None:
    config = make_config(rules=[("netflix", "Streaming")])
    prev = make_txn(1, "Netflix 1/2", installment=1, total_installments=2, category_id=999)
    cur = make_txn(2, "Netflix 2/2", installment=2, total_installments=2)

    result = process_batch([prev, cur], config)[1]

    assert result.reason is Reason.PATTERN
    assert result.changes is not None and result.changes.category_id == 201


def test_process_batch_uncategorized_previous_installment_falls_back_to_pattern() -> None:
    config = make_config(rules=[("loja", "Compras")])
    prev = make_txn(1, "Loja 1/3", installment=1, total_installments=3)
    cur = make_txn(2, "Loja 2/3", installment=2, total_installments=3)

    result = process_batch([prev, cur], config)[1]

    assert result.reason is Reason.PATTERN
    assert result.changes is not None and result.changes.category_id == 203


def test_process_batch_cross_invoice_mode_uses_invoice_history() -> None:
    history = [
        make_invoice(
            2,
            date(2025, 2, 10),
            [make_txn(20, "Loja 2/3", installment=2, total_installments=3)],
        ),
        make_invoice(
            1,
            date(2025, 1, 10),
            [make_txn(10, "Loja 1/3", installment=1, total_installments=3, category_id=202)],
        ),
    ]
    client = FakeOrganizzeClient(invoices=history)
    config = make_config(rules=[("loja", "Compras")])
    options = ProcessOptions(invoice=InvoiceRef(7, 2), invoice_source=client)

    [result] = process_batch(history[0].transactions, config, options)

    assert result.reason is Reason.INSTALLMENT
    assert result.changes is not None and result.changes.category_id == 202
    # The batch stands in for the current invoice.
    assert [args for name, args in client.calls if name == "get_invoice"] == [(7, 1)]


def test_process_batch_builds_fresh_cache_per_call() -> None:
    history = [
        make_invoice(1, date(2025, 1, 10), [make_txn(10, "Loja 2/3", installment=2, total_installments=3)]),
    ]
    client = FakeOrganizzeClient(invoices=history)
    config = make_config()
    options = ProcessOptions(invoice=InvoiceRef(7, 1), invoice_source=client)

    process_batch(history[0].transactions, config, options)
    process_batch(history[0].transactions, config, options)

    assert client.count("get_invoices") == 2


def test_process_batch_invalid_rule_warns_once_per_batch_and_continues() -> None:
    warnings: list[str] = []
    config = make_config(rules=[("(", "Compras"), ("uber", "Transporte")])
    txns = [make_txn(1, "UBER"), make_txn(2, "UBER"), make_txn(3, "OTHER")]

    results = process_batch(txns, config, on_warning=warnings.append)

    assert [r.action for r in results] == [Action.UPDATE, Action.UPDATE, Action.SKIP]
    assert len(warnings) == 1


# ---- process_batch: rename-only / tags-only -----------------------------------


def test_process_batch_rename_only() -> None:
    config = make_config(rules=[("uber", "Transporte")], rename=[("UBER*", "Uber")])
    txns = [make_txn(1, "UBER TRIP 123"), make_txn(2, "Uber"), make_txn(3, "OTHER")]

    results = process_batch(txns, config, ProcessOptions(rename_only=True))

    assert results[0].action is Action.RENAME
    assert results[0].changes == Changes(description="Uber")
    assert results[0].reason is None
    assert results[1].action is Action.SKIP and results[1].changes is None
    assert results[2].action is Action.SKIP


def test_process_batch_rename_only_ignores_manual_edits() -> None:
    config = make_config(rename=[("UBER*", "Uber")])
    txn = make_txn(1, "UBER TRIP", category_id=102, edited=True)

    [result] = process_batch([txn], config, ProcessOptions(rename_only=True))

    assert result.action is Action.RENAME


def test_process_batch_tags_only_uses_current_category() -> None:
    table_config = make_config(
        rename=[("MERCADO*", "Mercado")],
        tags={"Mercado": ["essential", "food"]},
    )
    txn = make_txn(1, "MERCADO CENTRAL", category_id=101)

    [result] = process_batch([txn], table_config, ProcessOptions(tags_only=True))

    assert result.action is Action.UPDATE
    assert result.changes == Changes(tags=("essential", "food"))
    assert result.changes.category_id is None and result.changes.description is None


def test_process_batch_tags_only_without_tags_skips() -> None:
    config = make_config(tags={"Mercado": ["food"]})
    txns = [make_txn(1, "A", category_id=0), make_txn(2, "B", category_id=202)]

    results = process_batch(txns, config, ProcessOptions(tags_only=True))

    assert [r.action for r in results] == [Action.SKIP, Action.SKIP]
    assert all(r.changes is None for r in results)


# ---- Documented examples -------------------------------------------------------


def test_example_untouched_transaction_gets_suggested_category() -> None:
    config = make_config(rules=[("feira", "Mercado")])
    txn = make_txn(1, "FEIRA LIVRE", category_id=0)

    assert not should_skip(txn, 101, False).skip
    [result] = process_batch([txn], config)
    assert result.changes is not None and result.changes.category_id == 101


@pytest.mark.parametrize("force", [False, True])
def test_example_skip_reason_ordering(force: bool) -> None:
    # already_correct takes precedence over manual_edit
    txn = make_txn(1, category_id=101, edited=True)
    assert should_skip(txn, 101, force).reason is Reason.ALREADY_CORRECT
