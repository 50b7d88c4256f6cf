"""Typer-based console interface for ``ozz``.

Environment variables (``ORGANIZZE_EMAIL``, ``ORGANIZZE_TOKEN``) are loaded
from a local ``.env`` using ``python-dotenv`` before any command runs. Business
logic lives in :mod:`ozz.processor`, :mod:`ozz.search` and :mod:`ozz.export`;
this module only fetches, displays and applies.

Every command reports failures as a single ``Error: ...`` line on stderr and
exits with status 1.
"""

from __future__ import annotations

import re
import time
from collections import Counter
from collections.abc import Sequence
from pathlib import Path
from typing import Annotated, Any, NoReturn

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .client import OrganizzeAPIError, OrganizzeClient
from .config import (
    CategoryTable,
    ConfigError,
    RuleConfig,
    get_config_dir,
    load_all_config,
    load_categories,
    validate_config,
)
from .export import build_csv_rows, export_filename, write_csv
from .formatting import format_duration, format_money, format_month, truncate
from .logging_setup import configure_logging, get_logger
from .models import Action, InvoiceRef, ProcessResult, Transaction
from .options import OptionsError, UpdateOptions, validate_source_options, validate_update_options
from .processor import ProcessOptions, process_batch
from .runlog import RunLog
from .search import find_by_description, find_duplicates, find_uncategorized

_logger = get_logger("ozz.cli")

console = Console()
err_console = Console(stderr=True)

# Failures reported at the command boundary. ``typer.Exit`` is itself a
# RuntimeError, so ``_fail`` is only ever called outside these try blocks.
_COMMAND_ERRORS = (RuntimeError, ValueError, OSError, re.error)


app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help=(
        "Categorize, rename and tag Organizze transactions using local YAML rules. "
        "Loads ORGANIZZE_EMAIL/ORGANIZZE_TOKEN from a local .env before running."
    ),
)
list_app = typer.Typer(no_args_is_help=True, help="List categories, accounts, cards or invoices.")
export_app = typer.Typer(no_args_is_help=True, help="Export transactions.")
config_app = typer.Typer(no_args_is_help=True, help="Inspect the YAML rule configuration.")
app.add_typer(list_app, name="list")
app.add_typer(export_app, name="export")
app.add_typer(config_app, name="config")


# ---- Small module-level helpers used by CLI commands -------------------------


def get_client() -> OrganizzeClient:
    """Build the API client from environment credentials."""

    return OrganizzeClient()


def _fail(message: str) -> NoReturn:
    err_console.print(f"[red]Error:[/red] {escape(message)}")
    raise typer.Exit(1)


def _is_debug(ctx: typer.Context) -> bool:
    obj = ctx.find_root().obj
    return bool(obj and obj.get("debug"))


def _category_label(category_id: int | None, categories: CategoryTable) -> str:
    if not category_id:
        return "uncategorized"
    return categories.name_for(category_id) or f"Unknown ({category_id})"


def _optional_categories() -> CategoryTable:
    # Display-only lookups degrade to raw ids when the config is unusable.
    try:
        return load_categories()
    except ConfigError as e:
        _logger.debug("cli:categories_unavailable error=%s", e)
        return CategoryTable(essential={}, lifestyle={})


def _fetch_source(
    client: OrganizzeClient,
    *,
    invoice: InvoiceRef | None = None,
    start: str | None = None,
    end: str | None = None,
    account: int | None = None,
) -> list[Transaction]:
    if invoice is not None:
        with console.status(f"Fetching invoice {invoice}..."):
            inv = client.get_invoice(invoice.card_id, invoice.invoice_id)
        return list(inv.transactions)
    if start is None or end is None:
        raise OptionsError("Either --invoice or both --start and --end are required")
    with console.status(f"Fetching transactions from {start} to {end}..."):
        return client.get_transactions_batched(start, end, account)


def _transactions_table(transactions: Sequence[Transaction], categories: CategoryTable) -> Table:
    table = Table("Date", "Description", "Amount", "Category")
    for t in transactions:
        table.add_row(
            t.date.isoformat(),
            escape(truncate(t.description, 30)),
            format_money(t.amount_cents),
            escape(truncate(_category_label(t.category_id, categories), 20)),
        )
    return table


# ---- update -----------------------------------------------------------------


_ACTION_ICONS = {
    Action.UPDATE: "✅",
    Action.RENAME: "🔄",
    Action.CONFLICT: "⚠️",
    Action.SKIP: "⏭️",
}


def count_results(results: Sequence[ProcessResult]) -> dict[str, int]:
    """Summary counts shown after ``update`` and stored in the run log."""

    return {
        "total": len(results),
        "categorized": sum(
            1
            for r in results
            if r.action is Action.UPDATE and r.changes and r.changes.category_id is not None
        ),
        "renamed": sum(1 for r in results if r.changes and r.changes.description is not None),
        "conflicts": sum(1 for r in results if r.action is Action.CONFLICT),
        "skipped": sum(1 for r in results if r.action is Action.SKIP),
    }


def _print_pre_summary(
    opts: UpdateOptions, card_name: str | None, account_name: str | None
) -> None:
    console.print()
    if opts.invoice is not None:
        card = f"{card_name} ({opts.invoice.card_id})" if card_name else str(opts.invoice.card_id)
        console.print(
            f"[blue]📋 Updating invoice {opts.invoice.invoice_id} for card {escape(card)}[/blue]"
        )
    elif opts.start is not None and opts.end is not None:
        period = (
            format_month(opts.start)
            if opts.start == opts.end
            else f"{format_month(opts.start)} to {format_month(opts.end)}"
        )
        console.print(f"[blue]📋 Updating transactions from {period}[/blue]")
        if account_name:
            console.print(f"[blue]   → Account: {escape(account_name)}[/blue]")

    if opts.tags_only:
        mode = "Applying tags"
    elif opts.rename_only:
        mode = "Renaming merchants"
    else:
        mode = "Categorizing transactions and renaming merchants"
    console.print(f"[blue]   → {mode}[/blue]")

    if opts.apply:
        console.print("[yellow]   → ⚠️  APPLYING CHANGES (not a dry-run)[/yellow]")
    else:
        console.print("[blue]   → Dry-run mode (use --apply to save changes)[/blue]")
    console.print()


def _print_results_table(results: Sequence[ProcessResult], categories: CategoryTable) -> None:
    table = Table("Description", "Amount", "Category", "Action")
    for r in results:
        category = "-"
        if r.changes and r.changes.category_id is not None:
            category = _category_label(r.changes.category_id, categories)
        table.add_row(
            escape(truncate(r.transaction.description, 28)),
            format_money(r.transaction.amount_cents),
            escape(category),
            _ACTION_ICONS[r.action],
        )
    console.print(table)


def _print_post_summary(counts: dict[str, int], duration_ms: float, dry_run: bool) -> None:
    parts = [
        f"{counts[key]} {label}"
        for key, label in (
            ("categorized", "categorized"),
            ("renamed", "renamed"),
            ("conflicts", "conflicts"),
            ("skipped", "skipped"),
        )
        if counts[key] > 0
    ]
    suffix = " [dry-run]" if dry_run else ""
    console.print()
    console.print(f"[green]✅ Complete in {format_duration(duration_ms)}[/green]")
    console.print(f"[green]   {escape(', '.join(parts) + suffix)}[/green]")
    console.print()


def _lookup_names(client: OrganizzeClient, opts: UpdateOptions) -> tuple[str | None, str | None]:
    """Best-effort card/account names for the pre-execution summary."""

    card_name: str | None = None
    account_name: str | None = None
    try:
        if opts.invoice is not None:
            card_name = next(
                (c.name for c in client.get_credit_cards() if c.id == opts.invoice.card_id), None
            )
        if opts.account is not None:
            account_name = next(
                (a.name for a in client.get_accounts() if a.id == opts.account), None
            )
    except (OrganizzeAPIError, ValueError, OSError) as e:
        _logger.debug("cli:name_lookup_failed error=%s", e)
    return card_name, account_name


def _apply_changes(
    client: OrganizzeClient, results: Sequence[ProcessResult]
) -> tuple[int, int]:
    applied = 0
    failed = 0
    with console.status("Applying changes..."):
        for r in results:
            if r.changes is None or r.action not in (Action.UPDATE, Action.RENAME):
                continue
            try:
                client.update_transaction(r.transaction.id, r.changes.to_payload())
            except (OrganizzeAPIError, ValueError, OSError) as e:
                failed += 1
                err_console.print(
                    f"[red]Failed to update transaction {r.transaction.id}:[/red] {escape(str(e))}"
                )
                continue
            applied += 1
    console.print(f"[green]✓[/green] Applied {applied} changes")
    if failed:
        console.print(f"[red]✗[/red] {failed} updates failed")
    return applied, failed


def run_update(
    client: OrganizzeClient,
    config: RuleConfig,
    opts: UpdateOptions,
    *,
    debug: bool = False,
) -> dict[str, Any]:
    """Fetch, process, optionally apply, summarize and log one update run."""

    card_name, account_name = _lookup_names(client, opts)
    _print_pre_summary(opts, card_name, account_name)

    t0 = time.perf_counter()
    transactions = _fetch_source(
        client, invoice=opts.invoice, start=opts.start, end=opts.end, account=opts.account
    )
    fetch_ms = (time.perf_counter() - t0) * 1000
    console.print(
        f"[green]✓[/green] Fetched {len(transactions)} transactions in {format_duration(fetch_ms)}"
    )

    def _warn(message: str) -> None:
        console.print(f"[yellow]⚠ {escape(message)}[/yellow]")

    with console.status("Processing transactions..."):
        results = process_batch(
            transactions,
            config,
            ProcessOptions(
                rename_only=opts.rename_only,
                tags_only=opts.tags_only,
                force=opts.force,
                invoice=opts.invoice,
                invoice_source=client if opts.invoice is not None else None,
            ),
            on_warning=_warn,
        )
    console.print(f"[green]✓[/green] Processed {len(results)} transactions")

    if debug:
        _print_results_table(results, config.categories)

    counts: dict[str, Any] = count_results(results)
    if opts.apply:
        counts["applied"], counts["failed"] = _apply_changes(client, results)

    duration_ms = (time.perf_counter() - t0) * 1000
    _print_post_summary(counts, duration_ms, dry_run=not opts.apply)

    counts["dry_run"] = not opts.apply
    counts["duration_ms"] = round(duration_ms)
    changed = [
        {
            "id": r.transaction.id,
            "description": r.transaction.description,
            "action": str(r.action),
            "old_category": _category_label(r.transaction.category_id, config.categories),
            "new_category": _category_label(r.changes.category_id, config.categories)
            if r.changes and r.changes.category_id is not None
            else None,
            "new_description": r.changes.description if r.changes else None,
            "tags": list(r.changes.tags) if r.changes and r.changes.tags else [],
        }
        for r in results
        if r.action is not Action.SKIP
    ]
    skipped = [
        {
            "id": r.transaction.id,
            "description": r.transaction.description,
            "reason": str(r.reason) if r.reason else None,
            "category": _category_label(r.transaction.category_id, config.categories),
        }
        for r in results
        if r.action is Action.SKIP
    ]
    path = RunLog("update", opts.model_dump(mode="json")).write(counts, changed, skipped)
    console.print(f"[dim]Log: {escape(str(path))}[/dim]")
    return counts


@app.command("update")
def update_cmd(
    ctx: typer.Context,
    invoice: Annotated[
        str | None, typer.Option(help="Credit card invoice as cardId/invoiceId.")
    ] = None,
    start: Annotated[str | None, typer.Option(help="Start month (YYYY-MM).")] = None,
    end: Annotated[str | None, typer.Option(help="End month (YYYY-MM).")] = None,
    account: Annotated[
        int | None, typer.Option(help="Restrict a date range to one account id.")
    ] = None,
    apply: Annotated[
        bool, typer.Option("--apply", help="Save changes (default: dry-run).")
    ] = False,
    force: Annotated[bool, typer.Option("--force", help="Override manual edits.")] = False,
    rename_only: Annotated[
        bool, typer.Option("--rename-only", help="Only rename, skip categorization.")
    ] = False,
    tags_only: Annotated[bool, typer.Option("--tags-only", help="Only apply tags.")] = False,
) -> None:
    """Categorize, rename and tag transactions of an invoice or month range."""

    message: str | None = None
    try:
        opts = validate_update_options(
            invoice=invoice,
            start=start,
            end=end,
            account=account,
            apply=apply,
            force=force,
            rename_only=rename_only,
            tags_only=tags_only,
        )
        config = load_all_config()
        run_update(get_client(), config, opts, debug=_is_debug(ctx))
    except _COMMAND_ERRORS as e:
        message = str(e)
    if message is not None:
        _fail(message)


# ---- list -------------------------------------------------------------------


@list_app.command("categories")
def list_categories_cmd() -> None:
    """List categories from the local config."""

    try:
        categories = load_categories()
    except ConfigError as e:
        _fail(f"Failed to load categories: {e}")

    for title, group in (("Essencial", categories.essential), ("Estilo de Vida", categories.lifestyle)):
        console.print()
        console.print(f"[bold]{title}[/bold]")
        for name, cid in sorted(group.items()):
            console.print(f"├── {escape(name)} [dim]({cid})[/dim]")
    console.print()


@list_app.command("accounts")
def list_accounts_cmd() -> None:
    """List accounts from the API."""

    try:
        with console.status("Fetching accounts..."):
            accounts = get_client().get_accounts()
    except _COMMAND_ERRORS as e:
        message = f"Failed to fetch accounts: {e}"
    else:
        message = None
    if message is not None:
        _fail(message)

    table = Table("ID", "Name", "Type", "Default", "Status")
    for a in sorted(accounts, key=lambda a: a.name):
        table.add_row(
            str(a.id),
            escape(a.name),
            a.type or "",
            "[green]✓[/green]" if a.default else "",
            "[dim]archived[/dim]" if a.archived else "[green]active[/green]",
        )
    console.print(table)


@list_app.command("cards")
def list_cards_cmd() -> None:
    """List credit cards from the API."""

    try:
        with console.status("Fetching cards..."):
            cards = get_client().get_credit_cards()
    except _COMMAND_ERRORS as e:
        message = f"Failed to fetch cards: {e}"
    else:
        message = None
    if message is not None:
        _fail(message)

    table = Table("ID", "Name", "Closing", "Due", "Status")
    for c in sorted(cards, key=lambda c: c.name):
        table.add_row(
            str(c.id),
            escape(c.name),
            str(c.closing_day),
            str(c.due_day),
            "[dim]archived[/dim]" if c.archived else "[green]active[/green]",
        )
    console.print(table)


def invoice_status(balance_cents: int, amount_cents: int) -> str:
    if balance_cents == 0:
        return "Paid"
    if balance_cents == amount_cents:
        return "Open"
    return "Partial"


@list_app.command("invoices")
def list_invoices_cmd(
    card: Annotated[int, typer.Option("--card", help="Credit card id.")],
) -> None:
    """List invoices of a credit card, newest first."""

    try:
        with console.status(f"Fetching invoices for card {card}..."):
            invoices = get_client().get_invoices(card)
    except _COMMAND_ERRORS as e:
        message = f"Failed to fetch invoices: {e}"
    else:
        message = None
    if message is not None:
        _fail(message)

    table = Table("ID", "Date", "Closing", "Amount", "Status")
    for inv in sorted(invoices, key=lambda i: i.date, reverse=True):
        table.add_row(
            str(inv.id),
            inv.date.isoformat(),
            inv.closing_date.isoformat(),
            format_money(inv.amount_cents),
            invoice_status(inv.balance_cents, inv.amount_cents),
        )
    console.print(table)


# ---- find -------------------------------------------------------------------


def _print_transaction(t: Transaction, categories: CategoryTable) -> None:
    console.print()
    console.print(f"[bold]Transaction #{t.id}[/bold]")
    console.print(f"├── Description: [cyan]{escape(t.description)}[/cyan]")
    console.print(f"├── Date: {t.date.isoformat()}")
    console.print(f"├── Amount: {format_money(t.amount_cents)}")
    console.print(
        f"├── Category: {escape(_category_label(t.category_id, categories))} "
        f"[dim]({t.category_id})[/dim]"
    )
    if t.total_installments > 1:
        console.print(f"├── Installment: {t.installment}/{t.total_installments}")
    console.print(f"├── Account: [dim]({t.account_id})[/dim]")
    console.print(f"├── Created: {t.created_at.isoformat()}")
    console.print(f"└── Updated: {t.updated_at.isoformat()}")
    console.print()


def _print_duplicates(groups: Sequence[Sequence[Transaction]]) -> None:
    console.print()
    for n, group in enumerate(groups, start=1):
        console.print(f"[bold]Group {n}: {format_money(group[0].amount_cents)}[/bold]")
        for i, t in enumerate(group):
            prefix = "└──" if i == len(group) - 1 else "├──"
            console.print(
                f"{prefix} {t.date.isoformat()} {escape(truncate(t.description, 40))} "
                f"[dim](#{t.id})[/dim]"
            )
        console.print()


def _run_find(
    *,
    transaction_id: int | None,
    desc: str | None,
    uncategorized: bool,
    duplicates: bool,
    invoice: str | None,
    start: str | None,
    end: str | None,
) -> None:
    if transaction_id is not None:
        if desc or uncategorized or duplicates or invoice or start or end:
            raise OptionsError("--id cannot be combined with other search options")
        with console.status(f"Fetching transaction #{transaction_id}..."):
            txn = get_client().get_transaction(transaction_id)
        _print_transaction(txn, _optional_categories())
        return

    if sum(bool(x) for x in (desc, uncategorized, duplicates)) > 1:
        raise OptionsError("--desc, --uncategorized and --duplicates are mutually exclusive")

    source = validate_source_options(invoice=invoice, start=start, end=end)
    transactions = _fetch_source(
        get_client(), invoice=source.invoice, start=source.start, end=source.end
    )
    console.print(f"[green]✓[/green] Fetched {len(transactions)} transactions")
    categories = _optional_categories()

    if duplicates:
        groups = find_duplicates(transactions)
        console.print(f"\n[bold]Found {len(groups)} potential duplicate groups[/bold]")
        _print_duplicates(groups)
        return

    if desc:
        found = find_by_description(desc, transactions)
        title = f"Found {len(found)} transactions matching {desc!r}"
    elif uncategorized:
        found = find_uncategorized(transactions)
        title = f"Found {len(found)} uncategorized transactions"
    else:
        found = transactions
        title = f"Showing {len(found)} transactions"
    console.print(f"\n[bold]{escape(title)}[/bold]")
    console.print(_transactions_table(found, categories))


@app.command("find")
def find_cmd(
    transaction_id: Annotated[
        int | None, typer.Option("--id", help="Show a single transaction by id.")
    ] = None,
    desc: Annotated[
        str | None, typer.Option("--desc", help="Search descriptions (regex, case-insensitive).")
    ] = None,
    uncategorized: Annotated[
        bool, typer.Option("--uncategorized", help="Only uncategorized transactions.")
    ] = False,
    duplicates: Annotated[
        bool, typer.Option("--duplicates", help="Group likely duplicate charges.")
    ] = False,
    invoice: Annotated[
        str | None, typer.Option(help="Credit card invoice as cardId/invoiceId.")
    ] = None,
    start: Annotated[str | None, typer.Option(help="Start month (YYYY-MM).")] = None,
    end: Annotated[str | None, typer.Option(help="End month (YYYY-MM).")] = None,
) -> None:
    """Find transactions by id, description, missing category or duplication."""

    message: str | None = None
    try:
        _run_find(
            transaction_id=transaction_id,
            desc=desc,
            uncategorized=uncategorized,
            duplicates=duplicates,
            invoice=invoice,
            start=start,
            end=end,
        )
    except _COMMAND_ERRORS as e:
        message = str(e)
    if message is not None:
        _fail(message)


# ---- export -----------------------------------------------------------------


def _run_export_csv(
    *, invoice: str | None, start: str | None, end: str | None, output: Path
) -> Path | None:
    source = validate_source_options(invoice=invoice, start=start, end=end)
    categories = load_categories()
    client = get_client()
    transactions = _fetch_source(client, invoice=source.invoice, start=source.start, end=source.end)

    console.print()
    console.print("[bold]Export summary:[/bold]")
    if source.invoice is not None:
        console.print(f"  Source: Invoice {source.invoice}")
        filename = export_filename(invoice_id=source.invoice.invoice_id)
    else:
        console.print(f"  Period: {source.start} to {source.end}")
        filename = export_filename(start=source.start, end=source.end)
    console.print(f"  Transactions: {len(transactions)}")
    console.print("  Format: CSV")
    console.print()

    if not transactions:
        console.print("[yellow]No transactions to export[/yellow]")
        return None

    with console.status("Fetching accounts and cards..."):
        accounts = client.get_accounts()
        cards = client.get_credit_cards()
    rows = build_csv_rows(transactions, categories, accounts, cards)
    return write_csv(output / filename, rows)


@export_app.command("csv")
def export_csv_cmd(
    invoice: Annotated[
        str | None, typer.Option(help="Credit card invoice as cardId/invoiceId.")
    ] = None,
    start: Annotated[str | None, typer.Option(help="Start month (YYYY-MM).")] = None,
    end: Annotated[str | None, typer.Option(help="End month (YYYY-MM).")] = None,
    output: Annotated[
        Path, typer.Option("--output", "-o", help="Output directory.", file_okay=False)
    ] = Path("."),
) -> None:
    """Export transactions of an invoice or month range to CSV."""

    message: str | None = None
    path: Path | None = None
    try:
        path = _run_export_csv(invoice=invoice, start=start, end=end, output=output)
    except _COMMAND_ERRORS as e:
        message = str(e)
    if message is not None:
        _fail(message)
    if path is not None:
        console.print(f"[green]✓ Exported to: {escape(str(path))}[/green]")


# ---- config -----------------------------------------------------------------


_COUNT_LABELS = {
    "categories.yaml": ("category", "categories"),
    "rules.yaml": ("rule", "rules"),
    "rename.yaml": ("mapping", "mappings"),
    "tags.yaml": ("mapping", "mappings"),
    "pix.yaml": ("override", "overrides"),
}


@config_app.command("validate")
def config_validate_cmd() -> None:
    """Validate every YAML rule file and report per-file status."""

    console.print("[dim]Validating configuration...[/dim]\n")
    reports = validate_config()
    for r in reports:
        icon = {"ok": "[green]✓[/green]", "error": "[red]✗[/red]"}.get(r.status, "[yellow]⚠[/yellow]")
        singular, plural = _COUNT_LABELS.get(r.name, ("item", "items"))
        count = f" [dim]- {r.count} {singular if r.count == 1 else plural}[/dim]" if r.count else ""
        if r.status == "error":
            console.print(f"{icon} {r.name}")
            console.print(f"[red]  → {escape(r.message or '')}[/red]")
        else:
            note = f" [dim]({escape(r.message)})[/dim]" if r.message else ""
            console.print(f"{icon} {r.name}{count}{note}")
    console.print()

    if any(r.status == "error" for r in reports):
        _fail("Configuration has errors. Please fix before running commands.")
    console.print("[green]All configurations valid![/green]")


@config_app.command("show")
def config_show_cmd() -> None:
    """Summarize the loaded configuration."""

    try:
        config = load_all_config()
    except ConfigError as e:
        _fail(str(e))

    console.print()
    console.print("[bold cyan]Configuration Summary[/bold cyan]")
    console.print()

    essential = len(config.categories.essential)
    lifestyle = len(config.categories.lifestyle)
    console.print(f"[bold]Categories ({essential + lifestyle})[/bold]")
    console.print(f"├── Essencial: {essential} categories")
    console.print(f"└── Estilo de Vida: {lifestyle} categories")
    console.print()

    by_category = Counter(rule.category for rule in config.rules)
    top = by_category.most_common(4)
    console.print(f"[bold]Rules ({len(config.rules)})[/bold]")
    for i, (category, n) in enumerate(top):
        prefix = "└──" if i == len(top) - 1 else "├──"
        console.print(f"{prefix} {escape(category)}: {n} {'pattern' if n == 1 else 'patterns'}")
    console.print()

    console.print(f"[bold]Rename ({len(config.rename)} mappings)[/bold]")
    console.print(f"[bold]Tags ({len(config.tags)} category mappings)[/bold]")
    console.print(f"[bold]Pix ({len(config.pix)} overrides)[/bold]")
    console.print()
    console.print(f"[dim]Config path: {escape(str(get_config_dir()))}[/dim]")


# ---- root -------------------------------------------------------------------


@app.callback()
def _root(
    ctx: typer.Context,
    *,
    debug: Annotated[
        bool, typer.Option("--debug", help="Verbose logging and per-transaction tables.")
    ] = False,
) -> None:
    """Root command.

    Loads ``.env`` from the current working directory (without overriding any
    already-set environment variables) and configures package logging.
    """

    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)
    configure_logging("DEBUG" if debug else None)
    ctx.obj = {"debug": debug}


if __name__ == "__main__":  # pragma: no cover
    app()
