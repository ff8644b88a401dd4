from __future__ import annotations

import pytest

from minedown.lexical import (
    brace_delta,
    find_closing,
    index_of_not_escaped,
    is_double,
    is_escaped,
    wrap,
)


@pytest.mark.parametrize(
    ("text", "pos", "expected"),
    [
        ("\\*", 1, True),
        ("\\\\*", 2, False),
        ("\\\\\\*", 3, True),
        ("*", 0, False),
        ("a*", 1, False),
        ("abc", 10, False),
    ],
)
def test_is_escaped(text: str, pos: int, expected: bool):
    assert is_escaped(text, pos) is expected


def test_is_double():
    assert is_double("**bold**", 0)
    assert not is_double("**bold**", 1)
    assert not is_double("*", 0)
    assert not is_double("*a", 0)


def test_index_of_not_escaped_skips_escaped_occurrences():
    assert index_of_not_escaped("a\\](b](c", "](") == 5
    assert index_of_not_escaped("a\\**b**", "**", 1) == 5
    assert index_of_not_escaped("\\**", "**") == -1
    assert index_of_not_escaped("no match", "**") == -1


def test_find_closing_balances_nesting():
    assert find_closing("(a(b)c)d", 1, "(", ")") == 6
    assert find_closing("[a [b] c](x)", 1, "[", "]") == 8


def test_find_closing_ignores_escaped_delimiters():
    assert find_closing("[a\\]b]", 1, "[", "]") == 5
    assert find_closing("(a\\(b)", 1, "(", ")") == 5


def test_find_closing_returns_minus_one_when_unbalanced():
    assert find_closing("[a [b]", 1, "[", "]") == -1
    assert find_closing("(", 1, "(", ")") == -1


@pytest.mark.parametrize(
    ("token", "expected"),
    [
        ("{a", 1),
        ("b}", -1),
        ("{{a}", 1),
        ("b\\}}", -1),
        ("plain", 0),
        ("\\{", 0),
    ],
)
def test_brace_delta(token: str, expected: int):
    assert brace_delta(token) == expected


def test_wrap_breaks_at_spaces():
    assert wrap("a bb ccc dddd", 5) == "a bb\nccc\ndddd"


def test_wrap_leaves_short_text_alone():
    assert wrap("short", 10) == "short"


def test_wrap_leaves_text_with_newlines_alone():
    text = "line one that is long\nline two"
    assert wrap(text, 5) == text


def test_wrap_moves_word_when_little_room_remains():
    assert wrap("aaaaaaa bbbb", 10) == "aaaaaaa\nbbbb"


def test_wrap_fills_remaining_room_with_part_of_a_long_word():
    assert wrap("aaaa bbbbbbbb", 10) == "aaaa bbbbb\nbbb"


def test_wrap_hard_splits_overlong_words():
    assert wrap("abcdefghijkl", 5) == "abcde\nfghij\nkl"


def test_wrap_ignores_non_positive_width():
    assert wrap("a bb ccc", 0) == "a bb ccc"
