"""Description matchers: regex category rules and glob rename mappings.

Both matchers evaluate their entries in order and return the first hit. A
pattern that fails to compile is skipped: it is logged at WARNING level and
reported through the optional ``on_warning`` callback, and evaluation moves on
to the next entry.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Sequence
from functools import lru_cache
from typing import TypeAlias

from .config import Rule
from .logging_setup import get_logger

_logger = get_logger("ozz.matching")

WarningSink: TypeAlias = Callable[[str], None]


@lru_cache(maxsize=1024)
def _compile_rule(pattern: str) -> re.Pattern[str]:
    return re.compile(pattern, re.IGNORECASE)


def glob_to_regex(pattern: str) -> str:
    """Translate a rename glob into a full-string regular expression.

    ``*`` matches any run of characters (including none), ``?`` exactly one
    character; everything else is literal.
    """

    parts: list[str] = []
    for ch in pattern:
        if ch == "*":
            parts.append(".*")
        elif ch == "?":
            parts.append(".")
        else:
            parts.append(re.escape(ch))
    return "^" + "".join(parts) + "$"


@lru_cache(maxsize=1024)
def _compile_glob(pattern: str) -> re.Pattern[str]:
    return re.compile(glob_to_regex(pattern), re.IGNORECASE | re.DOTALL)


@lru_cache(maxsize=256)
def _log_once(message: str) -> None:
    _logger.warning(message)


def _warn(message: str, on_warning: WarningSink | None) -> None:
    _log_once(message)
    if on_warning is not None:
        on_warning(message)


def match_category(
    description: str,
    rules: Sequence[Rule],
    *,
    on_warning: WarningSink | None = None,
) -> str | None:
    """Return the category of the first rule whose regex matches ``description``.

    Matching is a case-insensitive search, not a full-string match.
    """

    for rule in rules:
        try:
            regex = _compile_rule(rule.pattern)
        except re.error as e:
            _warn(f"Invalid pattern in rule: {rule.pattern!r} ({e})", on_warning)
            continue
        if regex.search(description):
            return rule.category
    return None


def match_rename(
    description: str,
    rename_map: Iterable[tuple[str, str]],
    *,
    on_warning: WarningSink | None = None,
) -> str | None:
    """Return the replacement for the first glob matching all of ``description``.

    ``None`` when nothing matches or when the replacement is identical to the
    current description.
    """

    for pattern, new_name in rename_map:
        try:
            regex = _compile_glob(pattern)
        except re.error as e:  # pragma: no cover - escaped globs always compile
            _warn(f"Invalid rename pattern: {pattern!r} ({e})", on_warning)
            continue
        if regex.fullmatch(description):
            return new_name if new_name != description else None
    return None
