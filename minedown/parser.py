"""Markup scanning: turns minedown text into styled runs."""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from dataclasses import replace

from .colors import LegacyCode, from_legacy_code, is_color, is_hex_digit, parse_color
from .config import ParserConfig, normalize_config, validate_config
from .constants import (
    COLOR_PREFIX,
    COLOR_TOKEN_CHARACTERS,
    DEFAULT_NAMESPACE,
    DEFAULT_URL_SCHEME,
    FONT_PREFIX,
    FORMAT_PREFIX,
    FORMATTING_MARKERS,
    KEY_PATTERN,
    LEGACY_COLOR_CHAR,
    URL_PATTERN,
    URL_PLACEHOLDER,
)
from .exceptions import (
    EntityDefinitionError,
    FormatMismatchError,
    InvalidKeyError,
    ItemCountError,
    MarkupError,
    NestingTooDeepError,
    UnknownStyleError,
)
from .lexical import brace_delta, find_closing, index_of_not_escaped, is_double, is_escaped, wrap
from .models import (
    RESET,
    ClickAction,
    ClickEvent,
    Decoration,
    HoverAction,
    HoverEvent,
    NamedColor,
    Option,
    RgbColor,
    ScanState,
    ShowEntity,
    ShowItem,
    ShowText,
    Style,
    StyledRun,
)

logger = logging.getLogger(__name__)

_COUNT_PATTERN = re.compile(r"[+-]?[0-9]+")


def parse(message: str, config: ParserConfig | None = None) -> list[StyledRun]:
    """Parse minedown markup into styled runs.

    Recognizes, in order of precedence at every position: backslash escapes,
    legacy color codes, interactive ``[text](definitions)`` constructs, doubled
    inline formatting markers, and bare URLs. Everything else is literal text.

    Args:
        message: The markup to parse.
        config: Parser configuration. Defaults to a new `ParserConfig` when
            omitted.

    Returns:
        list[StyledRun]: Runs in display order. Never empty; markup without
            text yields a single empty run.

    Raises:
        ConfigError: If the configuration fails validation.
        MarkupError: If the markup is malformed and `config.lenient` is False.

    Examples:
        parse("&6Gold&rReset")
        parse("[Help](run_command=/help color=red)")
    """
    config = normalize_config(config or ParserConfig())
    validate_config(config)
    return _parse_document(message, config, Style(), 0)


def parse_event(
    text: str,
    definitions: str,
    config: ParserConfig | None = None,
    style: Style | None = None,
) -> list[StyledRun]:
    """Parse the display text of an interactive construct with its definitions.

    Args:
        text: Display text found between ``[`` and ``]``.
        definitions: Space-separated definitions found between ``(`` and ``)``.
        config: Parser configuration. Defaults to a new `ParserConfig`.
        style: Ambient style the construct inherits. Defaults to no style.

    Returns:
        list[StyledRun]: Runs for the display text, never empty.

    Raises:
        ConfigError: If the configuration fails validation.
        MarkupError: If a definition is malformed and `config.lenient` is False.

    Examples:
        parse_event("Docs", "blue underline https://example.com Read the docs")
    """
    config = normalize_config(config or ParserConfig())
    validate_config(config)
    style = style or Style()
    return _parse_event(text, definitions, config, style, 0)


def escape(text: str, config: ParserConfig | None = None) -> str:
    r"""Escape every markup character `config` would interpret, backslashes included.

    Parsing the result with the same configuration reproduces `text` verbatim.

    Examples:
        escape("**bold** [link]")  # "\**bold\** \[link]"
    """
    config = normalize_config(config or ParserConfig())
    legacy = config.recognizes(Option.LEGACY_COLORS)
    advanced = config.recognizes(Option.ADVANCED_FORMATTING)
    simple = config.recognizes(Option.SIMPLE_FORMATTING)

    escaped = []
    for i, character in enumerate(text):
        if (
            character == "\\"
            or (
                legacy
                and i + 1 < len(text)
                and character in (LEGACY_COLOR_CHAR, config.color_char)
            )
            or (advanced and character == "[")
            or (simple and character in FORMATTING_MARKERS and is_double(text, i))
        ):
            escaped.append("\\")
        escaped.append(character)
    return "".join(escaped)


def plain_text(runs: list[StyledRun]) -> str:
    """Concatenate the text of `runs`, dropping all styling."""
    return "".join(run.text for run in runs)


def split_definitions(definitions: str) -> list[str]:
    """Split an event definition string on single spaces.

    Empty tokens are kept, so a leading or trailing space survives as an
    empty token and consecutive spaces are preserved when tokens are rejoined.

    Examples:
        split_definitions("red /cmd ")  # ["red", "/cmd", ""]
    """
    if not definitions:
        return []
    return definitions.split(" ")


def _run(style: Style | ScanState, text: str) -> StyledRun:
    return StyledRun(
        text=text,
        color=style.color,
        decorations=frozenset(style.decorations),
        font=style.font,
        click=style.click,
        hover=style.hover,
    )


def _flush(state: ScanState) -> None:
    """Turn pending literal text into a run; an empty buffer produces nothing."""
    if not state.buffer:
        return
    state.runs.append(_run(state, "".join(state.buffer)))
    state.buffer.clear()


def _fail(config: ParserConfig, error: MarkupError) -> None:
    if not config.lenient:
        raise error
    logger.debug("Ignoring malformed markup: %s", error)


def _parse_document(
    message: str, config: ParserConfig, style: Style, depth: int
) -> list[StyledRun]:
    """Scan a sub-document, seeding an empty result with one empty run in `style`."""
    return _scan(message, config, style, depth) or [_run(style, "")]


def _scan(message: str, config: ParserConfig, style: Style, depth: int) -> list[StyledRun]:
    """Scan `message` left to right with `style` as the starting state.

    Args:
        message: Text to scan.
        config: Validated parser configuration.
        style: Ambient style inherited from the enclosing construct.
        depth: Current nesting depth.

    Returns:
        list[StyledRun]: Produced runs; empty when `message` yields no text.

    Raises:
        NestingTooDeepError: If `depth` exceeds `config.max_depth` in strict mode.
    """
    if depth > config.max_depth:
        _fail(config, NestingTooDeepError(config.max_depth))
        return [_run(style, message)] if message else []

    state = ScanState.from_style(style)
    i = 0
    while i < len(message):
        for recognizer in _RECOGNIZERS:
            next_index = recognizer(state, message, i, config, depth)
            if next_index is not None:
                i = next_index
                break
        else:
            state.buffer.append(message[i])
            i += 1

    _flush(state)
    return state.runs


def _try_escape(
    state: ScanState, message: str, i: int, config: ParserConfig, depth: int
) -> int | None:
    """Consume a backslash and keep the following character literally.

    A trailing backslash has nothing to escape and stays literal.
    """
    if message[i] != "\\" or i + 1 >= len(message):
        return None
    state.buffer.append(message[i + 1])
    return i + 2


def _try_legacy_color(
    state: ScanState, message: str, i: int, config: ParserConfig, depth: int
) -> int | None:
    """Apply a legacy color code such as ``&6``, ``&gold&``, ``&#f0f&`` or ``&x&f&f&0&0&f&f``.

    Unresolvable codes keep both characters as literal text.
    """
    sentinel = message[i]
    if (
        sentinel not in (LEGACY_COLOR_CHAR, config.color_char)
        or i + 1 >= len(message)
        or not config.recognizes(Option.LEGACY_COLORS)
    ):
        return None

    resolved, end = _resolve_extended_code(message, i + 1, sentinel)
    if resolved is None:
        resolved, end = from_legacy_code(message[i + 1]), i + 2
    if resolved is None:
        state.buffer.append(message[i : i + 2])
        return i + 2

    if not config.is_filtered(Option.LEGACY_COLORS):
        _apply_code(state, resolved)
    return end


def _resolve_extended_code(
    message: str, start: int, sentinel: str
) -> tuple[LegacyCode | None, int]:
    if message[start] in "xX":
        return _resolve_legacy_hex(message, start + 1, sentinel)

    j = start
    while j < len(message) and message[j] in COLOR_TOKEN_CHARACTERS:
        j += 1
    if j < len(message) and message[j] == sentinel and j - start > 1:
        return parse_color(message[start:j]), j + 1
    return None, start


def _resolve_legacy_hex(message: str, pos: int, sentinel: str) -> tuple[RgbColor | None, int]:
    """Read six sentinel-prefixed hex nibbles, e.g. ``&f&f&0&0&f&f``."""
    digits = []
    for _ in range(6):
        if (
            pos + 1 >= len(message)
            or message[pos] != sentinel
            or not is_hex_digit(message[pos + 1])
        ):
            return None, pos
        digits.append(message[pos + 1])
        pos += 2
    return RgbColor(int("".join(digits), 16)), pos


def _apply_code(state: ScanState, resolved: LegacyCode) -> None:
    # Flushing an empty buffer is a no-op, so every branch may flush.
    _flush(state)
    if resolved is RESET:
        state.color = None
        state.decorations = set()
    elif isinstance(resolved, Decoration):
        state.decorations.add(resolved)
    else:
        state.color = resolved
        state.decorations = set()


def _try_event(
    state: ScanState, message: str, i: int, config: ParserConfig, depth: int
) -> int | None:
    """Handle an interactive ``[text](definitions)`` construct."""
    if message[i] != "[" or not config.recognizes(Option.ADVANCED_FORMATTING):
        return None

    bounds = _find_event_bounds(message, i)
    if bounds is None:
        return None
    text_end, definitions_end = bounds

    _flush(state)
    text = message[i + 1 : text_end]
    if config.is_filtered(Option.ADVANCED_FORMATTING):
        state.runs.extend(_parse_document(text, config, state.style(), depth + 1))
    else:
        definitions = message[text_end + 2 : definitions_end]
        state.runs.extend(_parse_event(text, definitions, config, state.style(), depth + 1))
    return definitions_end + 1


def _find_event_bounds(message: str, start: int) -> tuple[int, int] | None:
    """Locate the ``]`` closing the display text and the ``)`` closing the definitions.

    Nested brackets and parentheses must balance. When the bracket opened at
    `start` closes without being followed by ``(``, there is no construct:
    ``[x] [y](z)`` leaves ``[x] `` as literal text.

    Returns:
        tuple[int, int] | None: Indices of the closing ``]`` and ``)``.
    """
    text_end = find_closing(message, start + 1, "[", "]")
    if text_end == -1 or not message.startswith("(", text_end + 1):
        return None
    definitions_end = find_closing(message, text_end + 2, "(", ")")
    if definitions_end == -1:
        return None
    return text_end, definitions_end


def _try_formatting(
    state: ScanState, message: str, i: int, config: ParserConfig, depth: int
) -> int | None:
    """Handle a doubled-marker span such as ``**bold**`` or ``##italic##``."""
    marker = message[i]
    decoration = FORMATTING_MARKERS.get(marker)
    if (
        decoration is None
        or not config.recognizes(Option.SIMPLE_FORMATTING)
        or not is_double(message, i)
    ):
        return None

    end = index_of_not_escaped(message, marker * 2, i + 2)
    if end == -1:
        return None

    _flush(state)
    style = state.style()
    if not config.is_filtered(Option.SIMPLE_FORMATTING):
        style = style.with_decoration(decoration)
    state.runs.extend(_parse_document(message[i + 2 : end], config, style, depth + 1))
    return end + 2


def _try_url(
    state: ScanState, message: str, i: int, config: ParserConfig, depth: int
) -> int | None:
    """Turn a bare URL starting at `i` into its own clickable run.

    The candidate ends at a space or a backslash, so escape sequences are
    never swallowed into a URL. A candidate without a dot rules out every
    later start inside it, so the word is not rescanned character by character.
    """
    if not config.url_detection or i < state.no_url_before:
        return None

    end = i
    while end < len(message) and message[end] not in " \\":
        end += 1
    candidate = message[i:end]
    if "." not in candidate:
        state.no_url_before = end
        return None
    match = URL_PATTERN.fullmatch(candidate)
    if match is None:
        return None

    _flush(state)
    url = candidate if match.group(1) else DEFAULT_URL_SCHEME + candidate
    hover = state.hover
    if config.url_hover_text:
        template = config.url_hover_text.replace(URL_PLACEHOLDER, escape(candidate, config))
        hover = ShowText(
            tuple(_parse_document(template, _without_urls(config), Style(), depth + 1))
        )
    state.runs.append(
        replace(_run(state, candidate), click=ClickEvent(ClickAction.OPEN_URL, url), hover=hover)
    )
    return end


_RECOGNIZERS: tuple[Callable[[ScanState, str, int, ParserConfig, int], int | None], ...] = (
    _try_escape,
    _try_legacy_color,
    _try_event,
    _try_formatting,
    _try_url,
)


def _without_urls(config: ParserConfig) -> ParserConfig:
    if not config.url_detection:
        return config
    return replace(config, url_detection=False)


def _with_url_scheme(value: str) -> str:
    if value.startswith(("http://", "https://")):
        return value
    return DEFAULT_URL_SCHEME + value


def _starts_directive(token: str) -> bool:
    """Whether `token` opens a new ``key=value`` entry, ending the current value."""
    equals_index = token.find("=")
    return equals_index > 0 and not is_escaped(token, equals_index)


def _parse_event(
    text: str, definitions: str, config: ParserConfig, style: Style, depth: int
) -> list[StyledRun]:
    """Resolve event definitions and scan the display text with them applied.

    Definitions are read left to right: bare color and format names (and
    ``font=``, ``color=``, ``format=`` entries) come first; a URL right after
    them becomes an ``open_url`` click; every other token starts a
    ``key=value`` entry whose value runs until the next entry. Tokens without
    a known key start a ``show_text`` hover.
    """
    tokens = split_definitions(definitions)
    font: str | None = None
    color = None
    decorations: set[Decoration] = set()
    inherit = True
    click: ClickEvent | None = None
    hover: HoverEvent | None = None
    format_end = -1

    i = 0
    while i < len(tokens):
        token = tokens[i]
        lowered = token.lower()

        resolved = parse_color(token)
        if resolved is not None:
            if resolved is RESET:
                color = None
                decorations.clear()
                inherit = False
            elif isinstance(resolved, Decoration):
                decorations.add(resolved)
            else:
                color = resolved
            format_end = i
            i += 1
            continue

        if lowered.startswith(FONT_PREFIX):
            font = token[len(FONT_PREFIX) :] or None
            format_end = i
            i += 1
            continue

        if lowered.startswith(COLOR_PREFIX):
            value = token[len(COLOR_PREFIX) :]
            parsed = parse_color(value)
            if is_color(parsed):
                color = parsed
            elif isinstance(parsed, Decoration):
                _fail(config, FormatMismatchError(value, "color"))
            elif parsed is RESET:
                color = None
            else:
                _fail(config, UnknownStyleError(value))
            format_end = i
            i += 1
            continue

        if lowered.startswith(FORMAT_PREFIX):
            for entry in token[len(FORMAT_PREFIX) :].split(","):
                parsed = parse_color(entry)
                if isinstance(parsed, Decoration):
                    decorations.add(parsed)
                elif is_color(parsed) or parsed is RESET:
                    _fail(config, FormatMismatchError(entry, "format"))
                else:
                    _fail(config, UnknownStyleError(entry))
            format_end = i
            i += 1
            continue

        if i == format_end + 1 and URL_PATTERN.fullmatch(token):
            click = ClickEvent(ClickAction.OPEN_URL, _with_url_scheme(token))
            i += 1
            continue

        click_action = ClickAction.RUN_COMMAND if token.startswith("/") else None
        hover_action = None
        key, separator, raw_value = token.partition("=")
        keyed = False
        if separator:
            keyed_click = ClickAction.from_key(key)
            keyed_hover = HoverAction.from_key(key)
            if keyed_click is not None or keyed_hover is not None:
                click_action, hover_action, keyed = keyed_click, keyed_hover, True

        value, i = _collect_value(tokens, i, raw_value if keyed else token, keyed)

        if click_action is not None:
            if (
                click_action is ClickAction.OPEN_URL
                and config.auto_add_url_prefix
            ):
                value = _with_url_scheme(value)
            click = ClickEvent(click_action, value)
        elif hover_action is None:
            hover_action = HoverAction.SHOW_TEXT

        if hover_action is not None:
            hover = _build_hover(hover_action, value, config, depth)

    if click is not None and hover is None:
        hover = _describe_click(click, config, depth)

    base = style if inherit else Style(font=style.font, click=style.click, hover=style.hover)
    event_style = Style(
        color=color if color is not None else base.color,
        decorations=base.decorations | decorations,
        font=font if font is not None else base.font,
        click=click if click is not None else base.click,
        hover=hover if hover is not None else base.hover,
    )
    return _parse_document(text, _without_urls(config), event_style, depth)


def _collect_value(tokens: list[str], i: int, first: str, keyed: bool) -> tuple[str, int]:
    """Gather the value that starts at ``tokens[i]``.

    Values opened with ``{`` run until their braces balance and lose the outer
    pair; other values run until the next ``key=value`` token.

    Returns:
        tuple[str, int]: The value and the index of the next unread token.
    """
    in_braces = keyed and first.startswith("{")
    parts = [first]
    depth = brace_delta(first) if in_braces else 0
    i += 1

    if not in_braces or depth > 0:
        while i < len(tokens):
            part = tokens[i]
            if not in_braces and _starts_directive(part):
                break
            parts.append(part)
            i += 1
            if in_braces:
                depth += brace_delta(part)
                if depth <= 0:
                    break

    value = " ".join(parts)
    if in_braces:
        value = value[1:]
        if value.endswith("}") and not is_escaped(value, len(value) - 1):
            value = value[:-1]
    return value, i


def _build_hover(
    action: HoverAction, value: str, config: ParserConfig, depth: int
) -> HoverEvent | None:
    sub_config = _without_urls(config)

    if action is HoverAction.SHOW_TEXT:
        wrapped = wrap(value, config.hover_text_width)
        return ShowText(tuple(_parse_document(wrapped, sub_config, Style(), depth + 1)))

    if action is HoverAction.SHOW_ENTITY:
        entity_id, separator, rest = value.partition(":")
        if not separator:
            _fail(config, EntityDefinitionError(value))
            return None
        kind, has_name, name = rest.partition(" ")
        kind = _namespaced(kind)
        if not KEY_PATTERN.fullmatch(kind):
            _fail(config, InvalidKeyError(kind))
            return None
        name_runs = (
            tuple(_parse_document(name, sub_config, Style(), depth + 1)) if has_name else None
        )
        return ShowEntity(kind=kind, entity_id=entity_id, name=name_runs)

    item, has_tag, tag = value.partition(" ")
    count = 1
    count_index = item.find("*")
    if 0 < count_index < len(item) - 1:
        count_text = item[count_index + 1 :]
        item = item[:count_index]
        if _COUNT_PATTERN.fullmatch(count_text):
            count = int(count_text)
        else:
            _fail(config, ItemCountError(f"{item}*{count_text}"))
    item = _namespaced(item)
    if not KEY_PATTERN.fullmatch(item):
        _fail(config, InvalidKeyError(item))
        return None
    return ShowItem(item_id=item, count=count, tag=tag if has_tag else None)


def _namespaced(key: str) -> str:
    if ":" in key:
        return key
    return f"{DEFAULT_NAMESPACE}:{key}"


def _describe_click(click: ClickEvent, config: ParserConfig, depth: int) -> ShowText:
    """Default hover for a click: the action label in blue, then its value in white."""
    label = StyledRun(text=click.action.label, color=NamedColor.BLUE)
    value_runs = _scan(
        " " + escape(click.value, config),
        _without_urls(config),
        Style(color=NamedColor.WHITE),
        depth + 1,
    )
    return ShowText((label, *value_runs))
