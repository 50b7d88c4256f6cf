"""Validation of command-line option combinations.

Typer parses individual flags; the cross-field rules (``--invoice`` versus
``--start/--end`` and friends) are expressed here as Pydantic models so they
can be unit tested without invoking the CLI.
"""

from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator, model_validator

from .models import InvoiceRef

_MONTH_RE = re.compile(r"^\d{4}-\d{2}$")


class OptionsError(ValueError):
    """Raised when command-line options are missing or inconsistent."""


def parse_invoice_option(value: str) -> InvoiceRef:
    """Parse ``"cardId/invoiceId"`` (e.g., ``"2171204/310"``)."""

    parts = value.split("/")
    if len(parts) != 2:
        raise OptionsError(
            "Invalid invoice format. Expected: cardId/invoiceId (e.g., 2171204/310)"
        )
    try:
        return InvoiceRef(card_id=int(parts[0]), invoice_id=int(parts[1]))
    except ValueError as e:
        raise OptionsError(
            "Invalid invoice format. Card ID and Invoice ID must be numbers"
        ) from e


def parse_month(value: str) -> str:
    if not _MONTH_RE.fullmatch(value):
        raise OptionsError(f"Invalid month {value!r}: must be YYYY-MM format")
    month = int(value[5:])
    if not 1 <= month <= 12:
        raise OptionsError(f"Invalid month {value!r}: month must be 01-12")
    return value


class SourceOptions(BaseModel):
    """Where transactions come from: one invoice, or a month range."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    invoice: InvoiceRef | None = None
    start: str | None = None
    end: str | None = None

    @field_validator("invoice", mode="before")
    @classmethod
    def _parse_invoice(cls, v: object) -> object:
        if isinstance(v, str):
            return parse_invoice_option(v)
        return v

    @field_validator("start", "end")
    @classmethod
    def _check_month(cls, v: str | None) -> str | None:
        return parse_month(v) if v is not None else None

    @model_validator(mode="after")
    def _check_source(self) -> SourceOptions:
        if self.invoice is not None and (self.start or self.end):
            raise ValueError("--invoice and --start/--end are mutually exclusive")
        if self.start and not self.end:
            raise ValueError("--start requires --end")
        if self.end and not self.start:
            raise ValueError("--end requires --start")
        if self.invoice is None and not self.start:
            raise ValueError("Either --invoice or both --start and --end are required")
        return self


class UpdateOptions(SourceOptions):
    account: int | None = None
    apply: bool = False
    force: bool = False
    rename_only: bool = False
    tags_only: bool = False

    @model_validator(mode="after")
    def _check_flags(self) -> UpdateOptions:
        if self.account is not None and not self.start:
            raise ValueError("--account is only valid with --start/--end")
        if self.rename_only and self.tags_only:
            raise ValueError("--rename-only and --tags-only are mutually exclusive")
        return self


def _first_message(err: ValidationError) -> str:
    issue = err.errors()[0]
    msg = str(issue.get("msg", err))
    # Pydantic prefixes messages from ValueError with "Value error, ".
    return msg.removeprefix("Value error, ")


def validate_update_options(**kwargs: object) -> UpdateOptions:
    try:
        return UpdateOptions(**kwargs)
    except ValidationError as e:
        raise OptionsError(_first_message(e)) from e


def validate_source_options(**kwargs: object) -> SourceOptions:
    try:
        return SourceOptions(**kwargs)
    except ValidationError as e:
        raise OptionsError(_first_message(e)) from e
