"""Data models for ``ozz``.

Two families live here:

- API records (``Transaction``, ``Invoice``, ``CreditCard``, ...) mirroring the
  Organizze REST v2 payloads. They are validated once, at the HTTP boundary,
  with Pydantic. Unknown fields are ignored so additions on the server side do
  not break parsing.
- Engine results (``ProcessResult``, ``Changes``, ``Action``, ``Reason``) used
  by :mod:`ozz.processor`. These are plain frozen dataclasses and closed
  enumerations.
"""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

# ---------------------------------------------------------------------------
# API records
# ---------------------------------------------------------------------------


class Tag(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str


class Transaction(BaseModel):
    """A single transaction as returned by ``/transactions`` or an invoice.

    ``installment``/``total_installments`` of ``1/1`` denote a regular
    (non-installment) charge. ``category_id == 0`` means uncategorized.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: int
    description: str
    date: dt.date
    paid: bool = False
    amount_cents: int
    total_installments: int = Field(default=1, ge=1)
    installment: int = Field(default=1, ge=1)
    recurring: bool = False
    account_id: int = 0
    category_id: int = 0
    contact_id: int | None = None
    notes: str | None = None
    attachments_count: int = 0
    credit_card_id: int | None = None
    credit_card_invoice_id: int | None = None
    paid_credit_card_id: int | None = None
    paid_credit_card_invoice_id: int | None = None
    oposite_transaction_id: int | None = None
    oposite_account_id: int | None = None
    created_at: dt.datetime
    updated_at: dt.datetime
    tags: list[Tag] | str | None = None
    recurrence_id: int | None = None
    account_type: Literal["CreditCard", "Account"] | None = None

    @property
    def tag_names(self) -> list[str]:
        if not self.tags:
            return []
        if isinstance(self.tags, str):
            return [t.strip() for t in self.tags.split(",") if t.strip()]
        return [t.name for t in self.tags]


class Category(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: int
    name: str
    color: str | None = None
    parent_id: int | None = None
    group_id: str | None = None
    fixed: bool = False
    essential: bool = False
    default: bool = False
    uuid: str | None = None
    kind: Literal["expenses", "revenues", "earnings", "none"] | None = None
    archived: bool = False


class Account(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: int
    name: str
    description: str | None = None
    archived: bool = False
    created_at: dt.datetime | None = None
    updated_at: dt.datetime | None = None
    default: bool = False
    type: Literal["checking", "savings", "other"] | None = None


class CreditCard(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: int
    name: str
    description: str | None = None
    archived: bool = False
    limit_cents: int = 0
    closing_day: int
    due_day: int
    card_network: str | None = None
    kind: str | None = None
    default: bool = False


class Invoice(BaseModel):
    """A credit-card billing statement; ``transactions`` is only present when
    the invoice is fetched individually."""

    model_config = ConfigDict(extra="ignore")

    id: int
    date: dt.date
    starting_date: dt.date
    closing_date: dt.date
    amount_cents: int
    payment_amount_cents: int = 0
    balance_cents: int = 0
    previous_balance_cents: int = 0
    credit_card_id: int
    transactions: list[Transaction] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Engine results
# ---------------------------------------------------------------------------


class Action(StrEnum):
    UPDATE = "update"
    RENAME = "rename"
    SKIP = "skip"
    # Reserved: no code path produces it yet.
    CONFLICT = "conflict"


class Reason(StrEnum):
    NO_MATCH = "no_match"
    ALREADY_CORRECT = "already_correct"
    MANUAL_EDIT = "manual_edit"
    INSTALLMENT = "installment"
    PATTERN = "pattern"


@dataclass(frozen=True, slots=True)
class Changes:
    """Field changes staged for a single transaction."""

    category_id: int | None = None
    description: str | None = None
    notes: str | None = None
    tags: tuple[str, ...] | None = None

    def is_empty(self) -> bool:
        return (
            self.category_id is None
            and self.description is None
            and self.notes is None
            and not self.tags
        )

    def to_payload(self) -> dict[str, Any]:
        """Return the JSON body for ``PUT /transactions/{id}``."""

        body: dict[str, Any] = {}
        if self.category_id is not None:
            body["category_id"] = self.category_id
        if self.description is not None:
            body["description"] = self.description
        if self.notes is not None:
            body["notes"] = self.notes
        if self.tags:
            body["tags"] = [{"name": t} for t in self.tags]
        return body


@dataclass(frozen=True, slots=True)
class ProcessResult:
    transaction: Transaction
    action: Action
    changes: Changes | None = None
    reason: Reason | None = None


@dataclass(frozen=True)
class InvoiceRef:
    """A ``cardId/invoiceId`` pair identifying one credit-card invoice."""

    card_id: int
    invoice_id: int

    def __str__(self) -> str:
        return f"{self.card_id}/{self.invoice_id}"
