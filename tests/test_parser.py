from __future__ import annotations

import pytest

from minedown import parser as parser_module
from minedown.config import ParserConfig, disable, filter_option
from minedown.exceptions import MarkupError, NestingTooDeepError
from minedown.models import (
    ClickAction,
    ClickEvent,
    Decoration,
    NamedColor,
    Option,
    RgbColor,
    ShowText,
    StyledRun,
)
from minedown.parser import escape, parse, plain_text, split_definitions

BOLD = frozenset({Decoration.BOLD})
NO_URLS = ParserConfig(url_detection=False)


def test_plain_text_is_a_single_run():
    assert parse("Hello world") == [StyledRun("Hello world")]


def test_empty_message_yields_one_empty_run():
    assert parse("") == [StyledRun("")]


def test_markup_without_text_yields_one_empty_run():
    assert parse("&6") == [StyledRun("")]


# Escapes


def test_escaped_color_code_is_literal():
    assert parse("\\&1text") == [StyledRun("&1text")]


def test_escaped_backslash_is_literal():
    assert parse("a\\\\b") == [StyledRun("a\\b")]


def test_trailing_backslash_is_literal():
    assert parse("end\\") == [StyledRun("end\\")]


def test_escaped_formatting_marker_is_literal():
    assert parse("\\**not bold**") == [StyledRun("**not bold**")]


# Legacy colors


def test_color_code_and_reset():
    assert parse("&6Gold&rReset") == [
        StyledRun("Gold", color=NamedColor.GOLD),
        StyledRun("Reset"),
    ]


def test_consecutive_color_codes_switch_color():
    assert parse("&aHello&bWorld") == [
        StyledRun("Hello", color=NamedColor.GREEN),
        StyledRun("World", color=NamedColor.AQUA),
    ]


def test_section_sign_is_always_a_sentinel():
    assert parse("§aGreen") == [StyledRun("Green", color=NamedColor.GREEN)]


@pytest.mark.parametrize("message", ["&#ff00ff&Pink", "&#f0f&Pink", "&x&f&f&0&0&f&fPink"])
def test_hex_color_forms_are_equivalent(message: str):
    assert parse(message) == [StyledRun("Pink", color=RgbColor(0xFF00FF))]


def test_named_color_token():
    assert parse("&gold&Text") == [StyledRun("Text", color=NamedColor.GOLD)]


def test_unknown_code_stays_literal():
    assert parse("&zText") == [StyledRun("&zText")]


def test_incomplete_legacy_hex_keeps_x_literal():
    assert parse("&x&fText") == [
        StyledRun("&x"),
        StyledRun("Text", color=NamedColor.WHITE),
    ]


def test_trailing_sentinel_stays_literal():
    assert parse("Price &") == [StyledRun("Price &")]


def test_decoration_code_keeps_color():
    assert parse("&6Gold &lBold") == [
        StyledRun("Gold ", color=NamedColor.GOLD),
        StyledRun("Bold", color=NamedColor.GOLD, decorations=BOLD),
    ]


def test_color_code_clears_decorations():
    assert parse("&lBold&cRed") == [
        StyledRun("Bold", decorations=BOLD),
        StyledRun("Red", color=NamedColor.RED),
    ]


def test_custom_color_char():
    config = ParserConfig(color_char="$")

    assert parse("$6Gold &6Amp", config) == [StyledRun("Gold &6Amp", color=NamedColor.GOLD)]


def test_disabled_legacy_colors_are_literal():
    config = disable(ParserConfig(), Option.LEGACY_COLORS)

    assert parse("&6Gold", config) == [StyledRun("&6Gold")]


def test_filtered_legacy_colors_are_stripped():
    config = filter_option(ParserConfig(), Option.LEGACY_COLORS)

    assert parse("&6Gold &lBold", config) == [StyledRun("Gold Bold")]


def test_filtering_implies_recognition():
    config = ParserConfig(
        enabled_options=frozenset(), filtered_options=frozenset({Option.LEGACY_COLORS})
    )

    assert parse("&6Gold", config) == [StyledRun("Gold")]


# Inline formatting


@pytest.mark.parametrize("decoration", list(Decoration))
def test_each_marker_applies_its_decoration(decoration: Decoration):
    message = f"{decoration.marker}text{decoration.marker}"

    assert parse(message) == [StyledRun("text", decorations=frozenset({decoration}))]


def test_nested_formatting():
    assert parse("**Bold ##Italic## End**") == [
        StyledRun("Bold ", decorations=BOLD),
        StyledRun("Italic", decorations=frozenset({Decoration.BOLD, Decoration.ITALIC})),
        StyledRun(" End", decorations=BOLD),
    ]


def test_unclosed_marker_is_literal():
    assert parse("**Bold") == [StyledRun("**Bold")]


def test_single_marker_is_literal():
    assert parse("a * b") == [StyledRun("a * b")]


def test_escaped_closing_marker_is_skipped():
    assert parse("**a\\**b**") == [StyledRun("a**b", decorations=BOLD)]


def test_formatting_inherits_current_color():
    assert parse("&c**Bold**") == [
        StyledRun("Bold", color=NamedColor.RED, decorations=BOLD),
    ]


def test_filtered_formatting_is_stripped():
    config = filter_option(ParserConfig(), Option.SIMPLE_FORMATTING)

    assert parse("**Bold** and ##italic##", config) == [
        StyledRun("Bold"),
        StyledRun(" and "),
        StyledRun("italic"),
    ]


def test_disabled_formatting_is_literal():
    config = disable(ParserConfig(), Option.SIMPLE_FORMATTING)

    assert parse("**Bold**", config) == [StyledRun("**Bold**")]


# Interactive constructs


def _click_hover(action: ClickAction, value: str) -> ShowText:
    return ShowText(
        (
            StyledRun(action.label, color=NamedColor.BLUE),
            StyledRun(f" {value}", color=NamedColor.WHITE),
        )
    )


def test_link_construct():
    assert parse("[Link](https://example.com)") == [
        StyledRun(
            "Link",
            click=ClickEvent(ClickAction.OPEN_URL, "https://example.com"),
            hover=_click_hover(ClickAction.OPEN_URL, "https://example.com"),
        )
    ]


def test_keyed_definitions():
    assert parse("[Text](color=red format=underline run_command=/help)") == [
        StyledRun(
            "Text",
            color=NamedColor.RED,
            decorations=frozenset({Decoration.UNDERLINED}),
            click=ClickEvent(ClickAction.RUN_COMMAND, "/help"),
            hover=_click_hover(ClickAction.RUN_COMMAND, "/help"),
        )
    ]


def test_construct_splits_surrounding_text():
    runs = parse("Go [here](/spawn) now")

    assert [run.text for run in runs] == ["Go ", "here", " now"]
    assert runs[0].click is None
    assert runs[1].click == ClickEvent(ClickAction.RUN_COMMAND, "/spawn")
    assert runs[2].click is None


def test_nested_brackets_in_display_text():
    runs = parse("[[inner] text](https://example.com)")

    assert plain_text(runs) == "[inner] text"
    assert len(runs) == 1
    assert runs[0].click == ClickEvent(ClickAction.OPEN_URL, "https://example.com")


def test_bracket_not_followed_by_definitions_stays_literal():
    runs = parse("[x] [y](z)")

    assert runs == [
        StyledRun("[x] "),
        StyledRun("y", hover=ShowText((StyledRun("z"),))),
    ]


def test_unclosed_construct_is_literal():
    assert parse("[Link](https://example.com", NO_URLS) == [
        StyledRun("[Link](https://example.com")
    ]


def test_nested_constructs_keep_their_own_clicks():
    runs = parse("[a [b](/x) c](/y)")

    assert [run.text for run in runs] == ["a ", "b", " c"]
    assert [run.click.value for run in runs] == ["/y", "/x", "/y"]


def test_construct_inherits_ambient_color():
    runs = parse("&6[Link](/cmd)")

    assert runs == [
        StyledRun(
            "Link",
            color=NamedColor.GOLD,
            click=ClickEvent(ClickAction.RUN_COMMAND, "/cmd"),
            hover=_click_hover(ClickAction.RUN_COMMAND, "/cmd"),
        )
    ]


def test_reset_definition_drops_ambient_style():
    runs = parse("&6**[Link](reset /cmd)**")

    assert runs[0].text == "Link"
    assert runs[0].color is None
    assert runs[0].decorations == frozenset()


def test_empty_display_text_keeps_its_click():
    assert parse("a[](/cmd)b") == [
        StyledRun("a"),
        StyledRun(
            "",
            click=ClickEvent(ClickAction.RUN_COMMAND, "/cmd"),
            hover=_click_hover(ClickAction.RUN_COMMAND, "/cmd"),
        ),
        StyledRun("b"),
    ]


def test_empty_formatting_span_yields_empty_styled_run():
    assert parse("a****b") == [
        StyledRun("a"),
        StyledRun("", decorations=BOLD),
        StyledRun("b"),
    ]


def test_display_text_is_not_url_detected():
    runs = parse("[example.com](/cmd)")

    assert runs[0].click == ClickEvent(ClickAction.RUN_COMMAND, "/cmd")


def test_filtered_constructs_keep_display_text_only():
    config = filter_option(ParserConfig(), Option.ADVANCED_FORMATTING)

    assert parse("[Link](https://example.com) done", config) == [
        StyledRun("Link"),
        StyledRun(" done"),
    ]


def test_disabled_constructs_are_literal():
    config = disable(NO_URLS, Option.ADVANCED_FORMATTING)

    assert parse("[Link](/cmd)", config) == [StyledRun("[Link](/cmd)")]


# URL detection


def test_bare_url_becomes_a_link():
    assert parse("Visit example.com now") == [
        StyledRun("Visit "),
        StyledRun(
            "example.com",
            click=ClickEvent(ClickAction.OPEN_URL, "http://example.com"),
            hover=ShowText((StyledRun("Click to open url"),)),
        ),
        StyledRun(" now"),
    ]


def test_bare_url_with_scheme_keeps_it():
    runs = parse("https://example.com/path?q=1")

    assert runs[0].click == ClickEvent(ClickAction.OPEN_URL, "https://example.com/path?q=1")


def test_url_hover_template_substitutes_url():
    runs = parse("example.com", ParserConfig(url_hover_text="Open %url%"))

    assert runs[0].hover == ShowText((StyledRun("Open example.com"),))


def test_empty_url_hover_template_disables_hover():
    runs = parse("example.com", ParserConfig(url_hover_text=""))

    assert runs[0].hover is None
    assert runs[0].click == ClickEvent(ClickAction.OPEN_URL, "http://example.com")


def test_url_detection_can_be_disabled():
    assert parse("Visit example.com", NO_URLS) == [StyledRun("Visit example.com")]


def test_detected_url_keeps_current_style():
    runs = parse("&ahttps://example.com")

    assert runs[0].color is NamedColor.GREEN


class _CountingPattern:
    def __init__(self, pattern):
        self.pattern = pattern
        self.calls = 0

    def fullmatch(self, candidate: str):
        self.calls += 1
        return self.pattern.fullmatch(candidate)


def test_long_word_is_not_rescanned_for_urls(monkeypatch):
    counting = _CountingPattern(parser_module.URL_PATTERN)
    monkeypatch.setattr(parser_module, "URL_PATTERN", counting)
    word = "a" * 5000

    assert parse(word) == [StyledRun(word)]
    assert counting.calls <= 1


def test_url_after_long_word_is_still_detected():
    runs = parse("a" * 5000 + " example.com")

    assert runs[-1].text == "example.com"
    assert runs[-1].click == ClickEvent(ClickAction.OPEN_URL, "http://example.com")


# Limits and errors


def test_nesting_deeper_than_limit_raises():
    with pytest.raises(NestingTooDeepError):
        parse("**a ##b __c__##**", ParserConfig(max_depth=2))


def test_nesting_deeper_than_limit_is_literal_when_lenient():
    runs = parse("**a ##b __c__##**", ParserConfig(max_depth=2, lenient=True))

    assert plain_text(runs) == "a b c"


def test_markup_errors_are_value_errors():
    with pytest.raises(ValueError):
        parse("[E](show_entity=broken)")
    with pytest.raises(MarkupError):
        parse("[E](show_entity=broken)")


# Helpers


@pytest.mark.parametrize(
    ("definitions", "expected"),
    [
        ("", []),
        ("red /cmd ", ["red", "/cmd", ""]),
        (" spaced", ["", "spaced"]),
        ("a  b", ["a", "", "b"]),
    ],
)
def test_split_definitions(definitions: str, expected: list[str]):
    assert split_definitions(definitions) == expected


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("**bold** [link]", "\\**bold\\** \\[link]"),
        ("a\\b", "a\\\\b"),
        ("&6", "\\&6"),
        ("§a", "\\§a"),
        ("end&", "end&"),
        ("a * b", "a * b"),
    ],
)
def test_escape(text: str, expected: str):
    assert escape(text) == expected


def test_escape_respects_disabled_options():
    config = disable(ParserConfig(), Option.LEGACY_COLORS)

    assert escape("&6 [x]", config) == "&6 \\[x]"


def test_escape_accepts_option_names():
    config = ParserConfig(enabled_options=["legacy_colors", "simple_formatting"])  # type: ignore[arg-type]

    assert plain_text(parse(escape("&6Gold **b**", config), config)) == "&6Gold **b**"


@pytest.mark.parametrize(
    "text",
    ["**bold** [link](/x) &6 §a \\ end&", "__a__ ~~b~~ ??c?? ##d##", "example.com"],
)
def test_escaped_text_parses_back_verbatim(text: str):
    assert plain_text(parse(escape(text))) == text
