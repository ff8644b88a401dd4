"""Build Rich `Text` objects from styled runs."""

from __future__ import annotations

from collections.abc import Iterable

from rich.color import Color as RichColor
from rich.style import Style as RichStyle
from rich.text import Text

from .colors import rgb_triplet
from .models import ClickAction, Decoration, HoverEvent, ShowEntity, ShowText, StyledRun

_DECORATION_ATTRIBUTES = {
    Decoration.BOLD: "bold",
    Decoration.ITALIC: "italic",
    Decoration.UNDERLINED: "underline",
    Decoration.STRIKETHROUGH: "strike",
    Decoration.OBFUSCATED: "blink",
}


def hover_text(hover: HoverEvent) -> str:
    """Describe a hover payload as plain text.

    Examples:
        hover_text(ShowItem("minecraft:stone", 2))  # "2x minecraft:stone"
    """
    if isinstance(hover, ShowText):
        return "".join(run.text for run in hover.runs)
    if isinstance(hover, ShowEntity):
        name = "".join(run.text for run in hover.name) if hover.name else ""
        return " ".join(part for part in (name, hover.kind, hover.entity_id) if part)
    return f"{hover.count}x {hover.item_id}"


def run_style(run: StyledRun) -> RichStyle:
    """Translate one run's style into a Rich `Style`.

    Colors become truecolor values, ``open_url`` clicks become terminal links,
    and click/hover payloads are carried in the style's ``meta``.
    """
    attributes: dict[str, object] = {
        name: True
        for decoration, name in _DECORATION_ATTRIBUTES.items()
        if decoration in run.decorations
    }
    if run.color is not None:
        attributes["color"] = RichColor.from_rgb(*rgb_triplet(run.color))

    meta: dict[str, object] = {}
    if run.click is not None:
        meta["click"] = (run.click.action.value, run.click.value)
        if run.click.action is ClickAction.OPEN_URL:
            attributes["link"] = run.click.value
    if run.hover is not None:
        meta["hover"] = hover_text(run.hover)
    if run.font is not None:
        meta["font"] = run.font

    return RichStyle(meta=meta or None, **attributes)


def to_rich_text(runs: Iterable[StyledRun]) -> Text:
    """Append every run to a new Rich `Text`.

    Args:
        runs: Runs produced by `minedown.parse`.

    Returns:
        Text: Rich text with one span per run.

    Examples:
        console.print(to_rich_text(parse("&6Gold **and bold**")))
    """
    text = Text()
    for run in runs:
        text.append(run.text, style=run_style(run))
    return text
