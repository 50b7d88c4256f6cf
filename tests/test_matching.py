from __future__ import annotations

import re

import pytest

from ozz.config import Rule
from ozz.matching import glob_to_regex, match_category, match_rename


def _rules(*pairs: tuple[str, str]) -> list[Rule]:
    return [Rule(pattern=p, category=c) for p, c in pairs]


# ---- match_category ----------------------------------------------------------


def test_match_category_is_case_insensitive_partial_search() -> None:
    rules = _rules(("netflix", "Streaming"))
    assert match_category("NETFLIX.COM 2/12", rules) == "Streaming"


def test_match_category_first_rule_wins() -> None:
    rules = _rules(("uber", "Transporte"), ("uber eats", "Restaurantes"))
    assert match_category("UBER EATS *PEDIDO", rules) == "Transporte"


def test_match_category_no_rules_or_no_match_returns_none() -> None:
    assert match_category("anything", []) is None
    assert match_category("padaria", _rules(("mercado", "Mercado"))) is None


def test_match_category_skips_invalid_pattern_and_warns() -> None:
    warnings: list[str] = []
    rules = _rules(("[unclosed", "Compras"), ("amazon", "Compras"))

    assert match_category("AMAZON MARKETPLACE", rules, on_warning=warnings.append) == "Compras"
    assert len(warnings) == 1
    assert "[unclosed" in warnings[0]


def test_match_category_invalid_only_rule_returns_none() -> None:
    warnings: list[str] = []
    assert match_category("x", _rules(("(", "Compras")), on_warning=warnings.append) is None
    assert warnings


# ---- match_rename ------------------------------------------------------------


def test_match_rename_glob_star() -> None:
    assert match_rename("NETFLIX.COM 2/12", [("NETFLIX*", "Netflix")]) == "Netflix"


def test_match_rename_is_anchored_to_full_string() -> None:
    # Without a trailing star the glob must match the entire description.
    assert match_rename("NETFLIX.COM", [("NETFLIX", "Netflix")]) is None
    assert match_rename("PAG NETFLIX", [("NETFLIX*", "Netflix")]) is None


def test_match_rename_question_mark_matches_one_character() -> None:
    pairs = [("IFOOD ?", "iFood")]
    assert match_rename("IFOOD X", pairs) == "iFood"
    assert match_rename("IFOOD XY", pairs) is None


def test_match_rename_escapes_regex_metacharacters() -> None:
    pairs = [("AMZN.COM (BR)*", "Amazon")]
    assert match_rename("AMZN.COM (BR) 123", pairs) == "Amazon"
    assert match_rename("AMZNXCOM (BR) 123", pairs) is None


def test_match_rename_case_insensitive() -> None:
    assert match_rename("spotify premium", [("SPOTIFY*", "Spotify")]) == "Spotify"


def test_match_rename_returns_none_when_replacement_equals_description() -> None:
    assert match_rename("Netflix", [("Netf*", "Netflix")]) is None


def test_match_rename_first_declared_pair_wins() -> None:
    pairs = [("UBER*", "Uber"), ("UBER EATS*", "Uber Eats")]
    assert match_rename("UBER EATS 123", pairs) == "Uber"


def test_match_rename_empty_map() -> None:
    assert match_rename("anything", ()) is None


@pytest.mark.parametrize(
    ("glob", "expected"),
    [
        ("A*", "^A.*$"),
        ("A?", "^A.$"),
        ("a.b", "^" + re.escape("a.b") + "$"),
    ],
)
def test_glob_to_regex(glob: str, expected: str) -> None:
    assert glob_to_regex(glob) == expected
