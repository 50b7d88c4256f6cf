"""Rule-based transaction processor.

Public API:
    - :func:`process_batch`
    - :func:`should_skip`
    - :func:`get_tags_for_category`

For each transaction the processor decides one of ``update``, ``rename`` or
``skip`` by combining installment inheritance, regex category rules, the
manual-edit skip policy, glob renames and category tags. It performs no direct
I/O; cross-invoice installment lookups go through the injected
:class:`~ozz.installments.InvoiceSource`.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from .config import CategoryTable, RuleConfig, TagTable
from .installments import InstallmentCache, InvoiceSource, resolve_installment
from .logging_setup import get_logger
from .matching import WarningSink, match_category, match_rename
from .models import Action, Changes, InvoiceRef, ProcessResult, Reason, Transaction

_logger = get_logger("ozz.processor")


@dataclass(frozen=True, slots=True)
class ProcessOptions:
    """Flags for a batch run.

    ``invoice`` together with ``invoice_source`` enables cross-invoice
    installment lookups; without both, installments are resolved within the
    batch only.
    """

    rename_only: bool = False
    tags_only: bool = False
    force: bool = False
    invoice: InvoiceRef | None = None
    invoice_source: InvoiceSource | None = None


@dataclass(frozen=True, slots=True)
class SkipDecision:
    skip: bool
    reason: Reason | None = None


def should_skip(
    transaction: Transaction, suggested_category_id: int | None, force: bool
) -> SkipDecision:
    """Decide whether a transaction keeps its current category.

    Checks run in order: no suggestion, already correct, then (unless
    ``force``) manual edit, i.e. ``updated_at`` later than ``created_at``.
    """

    if suggested_category_id is None:
        return SkipDecision(True, Reason.NO_MATCH)
    if transaction.category_id == suggested_category_id:
        return SkipDecision(True, Reason.ALREADY_CORRECT)
    if not force and transaction.updated_at > transaction.created_at:
        return SkipDecision(True, Reason.MANUAL_EDIT)
    return SkipDecision(False)


def get_tags_for_category(
    category_id: int | None, categories: CategoryTable, tags: TagTable
) -> list[str]:
    """Return the tags configured for a category id (empty when unknown)."""

    name = categories.name_for(category_id)
    if name is None:
        return []
    return list(tags.get(name, ()))


def _suggest_category(
    txn: Transaction,
    transactions: Sequence[Transaction],
    config: RuleConfig,
    options: ProcessOptions,
    cache: InstallmentCache | None,
    on_warning: WarningSink,
) -> tuple[int | None, Reason | None]:
    if cache is not None and options.invoice is not None:
        inherited = cache.find_installment_category(
            txn, options.invoice.card_id, options.invoice.invoice_id
        )
    else:
        inherited = resolve_installment(txn, transactions)

    # Inherited ids outside the configured table are not trusted.
    if inherited and inherited in config.categories:
        return inherited, Reason.INSTALLMENT
    if inherited:
        _logger.debug(
            "process_batch:installment_unknown_category id=%d category_id=%d",
            txn.id,
            inherited,
        )

    name = match_category(txn.description, config.rules, on_warning=on_warning)
    if name is None:
        return None, None
    category_id = config.categories.id_for(name)
    if category_id is None:
        _logger.debug(
            "process_batch:unknown_category id=%d category=%r", txn.id, name
        )
    return category_id, Reason.PATTERN


def process_batch(
    transactions: Sequence[Transaction],
    config: RuleConfig,
    options: ProcessOptions | None = None,
    *,
    on_warning: WarningSink | None = None,
) -> list[ProcessResult]:
    """Return one :class:`ProcessResult` per transaction, in input order.

    Parameters
    ----------
    transactions:
        The batch to process (an invoice or a date range).
    config:
        Rules, rename map, categories and tags loaded by :mod:`ozz.config`.
    options:
        Mode flags and optional invoice context; defaults to a normal,
        non-forced categorization run.
    on_warning:
        Receives each distinct diagnostic (e.g., an invalid rule pattern) once
        per batch.
    """

    options = options or ProcessOptions()
    categorize = not options.rename_only and not options.tags_only

    seen_warnings: set[str] = set()

    def _emit(message: str) -> None:
        if message in seen_warnings:
            return
        seen_warnings.add(message)
        if on_warning is not None:
            on_warning(message)

    # Fresh per call so state never leaks across runs.
    cache: InstallmentCache | None = None
    if categorize and options.invoice is not None and options.invoice_source is not None:
        cache = InstallmentCache(options.invoice_source)
        # The batch is the current invoice; no need to fetch it again.
        cache.prime(options.invoice.card_id, options.invoice.invoice_id, transactions)

    results: list[ProcessResult] = []
    for txn in transactions:
        category_id: int | None = None
        description: str | None = None
        tags: tuple[str, ...] | None = None
        source: Reason | None = None

        if categorize:
            suggested, source = _suggest_category(
                txn, transactions, config, options, cache, _emit
            )
            decision = should_skip(txn, suggested, options.force)
            if decision.skip:
                results.append(ProcessResult(txn, Action.SKIP, reason=decision.reason))
                continue
            category_id = suggested

        if not options.tags_only:
            renamed = match_rename(txn.description, config.rename, on_warning=_emit)
            if renamed is not None and renamed != txn.description:
                description = renamed

        if options.tags_only:
            derived = get_tags_for_category(txn.category_id, config.categories, config.tags)
        elif category_id is not None:
            derived = get_tags_for_category(category_id, config.categories, config.tags)
        else:
            derived = []
        if derived:
            tags = tuple(derived)

        changes = Changes(category_id=category_id, description=description, tags=tags)
        if changes.is_empty():
            action = Action.SKIP
        elif category_id is None and description is not None:
            action = Action.RENAME
        else:
            action = Action.UPDATE

        results.append(
            ProcessResult(
                txn,
                action,
                changes=None if changes.is_empty() else changes,
                reason=source,
            )
        )

    if cache is not None:
        cache.clear()

    _logger.debug(
        "process_batch:done total=%d update=%d rename=%d skip=%d",
        len(results),
        sum(1 for r in results if r.action is Action.UPDATE),
        sum(1 for r in results if r.action is Action.RENAME),
        sum(1 for r in results if r.action is Action.SKIP),
    )
    return results
