"""Thin client for the Organizze REST API (v2).

Uses HTTP Basic auth with ``ORGANIZZE_EMAIL`` and ``ORGANIZZE_TOKEN`` from the
environment (the CLI loads a local ``.env`` first). Every response body is
validated with Pydantic before it is returned, so callers only ever see typed
records.

The client intentionally omits retries, backoff and rate limiting.
"""

from __future__ import annotations

import base64
import json
import os
import urllib.error
import urllib.parse
import urllib.request
from collections.abc import Mapping
from datetime import date
from typing import Any, TypeVar

from pydantic import TypeAdapter, ValidationError

from . import __version__
from .dates import month_ranges, parse_day
from .logging_setup import get_logger
from .models import Account, Category, CreditCard, Invoice, Transaction

T = TypeVar("T")

BASE_URL = "https://api.organizze.com.br/rest/v2"

# The transactions endpoint silently truncates at this many rows.
PAGE_LIMIT = 500

_logger = get_logger("ozz.client")

_TRANSACTIONS = TypeAdapter(list[Transaction])
_CATEGORIES = TypeAdapter(list[Category])
_ACCOUNTS = TypeAdapter(list[Account])
_CARDS = TypeAdapter(list[CreditCard])
_INVOICES = TypeAdapter(list[Invoice])


class OrganizzeAPIError(RuntimeError):
    """Non-2xx response from the API."""

    def __init__(self, status: int, reason: str, body: str) -> None:
        super().__init__(f"API error {status} {reason}: {body}")
        self.status = status
        self.reason = reason
        self.body = body


class OrganizzeClient:
    """Typed wrapper over the handful of endpoints ``ozz`` needs.

    Satisfies :class:`ozz.installments.InvoiceSource`.
    """

    def __init__(
        self,
        email: str | None = None,
        token: str | None = None,
        *,
        base_url: str = BASE_URL,
        timeout: float = 30.0,
    ) -> None:
        email = email or os.getenv("ORGANIZZE_EMAIL")
        token = token or os.getenv("ORGANIZZE_TOKEN")
        if not email or not token:
            raise RuntimeError("Missing ORGANIZZE_EMAIL or ORGANIZZE_TOKEN environment variables")
        self._email = email
        self._auth = base64.b64encode(f"{email}:{token}".encode()).decode("ascii")
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout

    # ---- transport ------------------------------------------------------

    def _request(
        self,
        path: str,
        *,
        method: str = "GET",
        query: Mapping[str, Any] | None = None,
        body: Mapping[str, Any] | None = None,
    ) -> Any:
        url = f"{self._base_url}{path}"
        if query:
            params = {k: v for k, v in query.items() if v is not None}
            url = f"{url}?{urllib.parse.urlencode(params)}"

        data = json.dumps(body).encode("utf-8") if body is not None else None
        req = urllib.request.Request(url, data=data, method=method)
        req.add_header("Authorization", f"Basic {self._auth}")
        req.add_header("Content-Type", "application/json; charset=utf-8")
        req.add_header("User-Agent", f"ozz-cli/{__version__} ({self._email})")

        _logger.debug("api:request method=%s path=%s", method, path)
        try:
            with urllib.request.urlopen(req, timeout=self._timeout) as resp:
                raw = resp.read()
        except urllib.error.HTTPError as e:
            try:
                err_body = e.read().decode("utf-8", errors="replace")
            except OSError:
                err_body = ""
            raise OrganizzeAPIError(e.code, str(e.reason), err_body) from e

        try:
            return json.loads(raw.decode("utf-8"))
        except json.JSONDecodeError as e:
            raise ValueError(f"Failed to parse JSON from {method} {path}") from e

    def _parse(self, adapter: TypeAdapter[T], payload: Any, what: str) -> T:
        try:
            return adapter.validate_python(payload)
        except ValidationError as e:
            raise ValueError(f"Unexpected {what} payload from API: {e}") from e

    # ---- transactions ---------------------------------------------------

    def get_transactions(
        self, start_date: str | date, end_date: str | date, account_id: int | None = None
    ) -> list[Transaction]:
        """Return transactions in ``[start_date, end_date]`` (max 500 per call)."""

        payload = self._request(
            "/transactions",
            query={
                "start_date": str(parse_day(start_date)),
                "end_date": str(parse_day(end_date)),
                "account_id": account_id,
            },
        )
        txns = self._parse(_TRANSACTIONS, payload, "transactions")
        if len(txns) == PAGE_LIMIT:
            _logger.warning(
                "api:transactions_truncated start=%s end=%s count=%d "
                "(narrow the date range)",
                start_date,
                end_date,
                len(txns),
            )
        return txns

    def get_transactions_batched(
        self, start: str | date, end: str | date, account_id: int | None = None
    ) -> list[Transaction]:
        """Fetch a month range one calendar month at a time.

        Avoids the 500-row cap for long ranges. ``start``/``end`` accept
        ``YYYY-MM`` or ``YYYY-MM-DD``.
        """

        out: list[Transaction] = []
        for first, last in month_ranges(start, end):
            out.extend(self.get_transactions(first, last, account_id))
        return out

    def get_transaction(self, transaction_id: int) -> Transaction:
        payload = self._request(f"/transactions/{transaction_id}")
        return self._parse(TypeAdapter(Transaction), payload, "transaction")

    def update_transaction(self, transaction_id: int, updates: Mapping[str, Any]) -> Transaction:
        payload = self._request(f"/transactions/{transaction_id}", method="PUT", body=updates)
        return self._parse(TypeAdapter(Transaction), payload, "transaction")

    # ---- cards and invoices ----------------------------------------------

    def get_credit_cards(self) -> list[CreditCard]:
        return self._parse(_CARDS, self._request("/credit_cards"), "credit cards")

    def get_invoices(self, card_id: int) -> list[Invoice]:
        payload = self._request(f"/credit_cards/{card_id}/invoices")
        return self._parse(_INVOICES, payload, "invoices")

    def get_invoice(self, card_id: int, invoice_id: int) -> Invoice:
        payload = self._request(f"/credit_cards/{card_id}/invoices/{invoice_id}")
        return self._parse(TypeAdapter(Invoice), payload, "invoice")

    # ---- reference data ---------------------------------------------------

    def get_categories(self) -> list[Category]:
        return self._parse(_CATEGORIES, self._request("/categories"), "categories")

    def get_category(self, category_id: int) -> Category:
        payload = self._request(f"/categories/{category_id}")
        return self._parse(TypeAdapter(Category), payload, "category")

    def get_accounts(self) -> list[Account]:
        return self._parse(_ACCOUNTS, self._request("/accounts"), "accounts")
