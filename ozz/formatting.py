"""Small display helpers shared by the CLI commands and the CSV export."""

from __future__ import annotations

from datetime import date


def format_money(cents: int) -> str:
    """Format minor units as Brazilian reais: ``4590 -> "R$ 45,90"``."""

    reais = abs(cents) / 100
    # Swap separators from the en-US grouping to pt-BR.
    body = f"{reais:,.2f}".replace(",", "_").replace(".", ",").replace("_", ".")
    return f"-R$ {body}" if cents < 0 else f"R$ {body}"


def format_duration(ms: float) -> str:
    """``5000 -> "5s"``, ``65000 -> "1m05s"``."""

    seconds = int(ms // 1000)
    if seconds < 60:
        return f"{seconds}s"
    minutes, secs = divmod(seconds, 60)
    return f"{minutes}m{secs:02d}s"


def format_month(year_month: str) -> str:
    """``"2025-01" -> "Jan 2025"``."""

    year, month = year_month.split("-")
    d = date(int(year), int(month), 1)
    # %b is locale dependent; keep English month names explicitly.
    names = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")
    return f"{names[d.month - 1]} {d.year}"


def truncate(text: str, max_length: int) -> str:
    if len(text) <= max_length:
        return text
    return text[: max_length - 1] + "…"
