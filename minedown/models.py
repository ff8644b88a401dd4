"""Data models for minedown."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum, auto


class Option(Enum):
    """Markup features that can be enabled, disabled, or filtered.

    Attributes:
        SIMPLE_FORMATTING: Inline formatting spans such as ``**bold**``.
        ADVANCED_FORMATTING: Interactive ``[text](definitions)`` constructs.
        LEGACY_COLORS: Legacy color codes such as ``&6``.
    """

    SIMPLE_FORMATTING = auto()
    ADVANCED_FORMATTING = auto()
    LEGACY_COLORS = auto()

    @classmethod
    def from_name(cls, name: str) -> Option:
        """Look up an option by its case-insensitive name.

        Raises:
            ValueError: If no option carries that name.
        """
        try:
            return cls[name.strip().upper().replace("-", "_")]
        except KeyError as error:
            raise ValueError(f"Unknown option: {name}") from error


class NamedColor(Enum):
    """The sixteen palette colors with their legacy code and RGB value."""

    BLACK = ("0", 0x000000)
    DARK_BLUE = ("1", 0x0000AA)
    DARK_GREEN = ("2", 0x00AA00)
    DARK_AQUA = ("3", 0x00AAAA)
    DARK_RED = ("4", 0xAA0000)
    DARK_PURPLE = ("5", 0xAA00AA)
    GOLD = ("6", 0xFFAA00)
    GRAY = ("7", 0xAAAAAA)
    DARK_GRAY = ("8", 0x555555)
    BLUE = ("9", 0x5555FF)
    GREEN = ("a", 0x55FF55)
    AQUA = ("b", 0x55FFFF)
    RED = ("c", 0xFF5555)
    LIGHT_PURPLE = ("d", 0xFF55FF)
    YELLOW = ("e", 0xFFFF55)
    WHITE = ("f", 0xFFFFFF)

    @property
    def code(self) -> str:
        return self.value[0]

    @property
    def rgb(self) -> int:
        return self.value[1]

    @property
    def hex(self) -> str:
        return f"#{self.rgb:06x}"


@dataclass(frozen=True)
class RgbColor:
    """An arbitrary 24-bit color.

    Attributes:
        rgb: Packed ``0xRRGGBB`` value.
    """

    rgb: int

    @property
    def hex(self) -> str:
        return f"#{self.rgb:06x}"


Color = NamedColor | RgbColor


class Decoration(Enum):
    """Boolean text attributes, independent of color.

    Each member carries its legacy code and its doubled inline marker.
    """

    OBFUSCATED = ("k", "??")
    BOLD = ("l", "**")
    STRIKETHROUGH = ("m", "~~")
    UNDERLINED = ("n", "__")
    ITALIC = ("o", "##")

    @property
    def code(self) -> str:
        return self.value[0]

    @property
    def marker(self) -> str:
        return self.value[1]


class ResetCode(Enum):
    """Pseudo-color that clears color and decorations."""

    RESET = "r"


RESET = ResetCode.RESET


class ClickAction(Enum):
    """Actions a click on a run can trigger."""

    OPEN_URL = "open_url"
    OPEN_FILE = "open_file"
    RUN_COMMAND = "run_command"
    SUGGEST_COMMAND = "suggest_command"
    CHANGE_PAGE = "change_page"
    COPY_TO_CLIPBOARD = "copy_to_clipboard"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ")

    @classmethod
    def from_key(cls, key: str) -> ClickAction | None:
        try:
            return cls(key.lower())
        except ValueError:
            return None


class HoverAction(Enum):
    """Kinds of hover payload."""

    SHOW_TEXT = "show_text"
    SHOW_ITEM = "show_item"
    SHOW_ENTITY = "show_entity"

    @classmethod
    def from_key(cls, key: str) -> HoverAction | None:
        key = key.lower()
        if key == "hover":
            return cls.SHOW_TEXT
        try:
            return cls(key)
        except ValueError:
            return None


@dataclass(frozen=True)
class ClickEvent:
    """A click action with its value.

    Attributes:
        action: What happens on click.
        value: URL, command, page number, or clipboard text.
    """

    action: ClickAction
    value: str


@dataclass(frozen=True)
class ShowText:
    """Hover payload showing a styled sub-document."""

    runs: tuple[StyledRun, ...]

    action = HoverAction.SHOW_TEXT


@dataclass(frozen=True)
class ShowEntity:
    """Hover payload describing an entity.

    Attributes:
        kind: Namespaced entity type, e.g. ``minecraft:pig``.
        entity_id: Entity identifier, usually a UUID.
        name: Optional styled display name.
    """

    kind: str
    entity_id: str
    name: tuple[StyledRun, ...] | None = None

    action = HoverAction.SHOW_ENTITY


@dataclass(frozen=True)
class ShowItem:
    """Hover payload describing an item stack.

    Attributes:
        item_id: Namespaced item id, e.g. ``minecraft:stone``.
        count: Stack size.
        tag: Raw structured-data tag text, kept verbatim.
    """

    item_id: str
    count: int = 1
    tag: str | None = None

    action = HoverAction.SHOW_ITEM


HoverEvent = ShowText | ShowEntity | ShowItem


@dataclass(frozen=True)
class StyledRun:
    """A contiguous span of text sharing one style.

    Attributes:
        text: The run's text.
        color: Resolved color, or None for the host default.
        decorations: Decorations applied to the run.
        font: Opaque font key, or None.
        click: Click action attached to the run, or None.
        hover: Hover payload attached to the run, or None.
    """

    text: str
    color: Color | None = None
    decorations: frozenset[Decoration] = frozenset()
    font: str | None = None
    click: ClickEvent | None = None
    hover: HoverEvent | None = None

    def to_dict(self) -> dict[str, object]:
        """Return a JSON-ready representation, omitting unset fields."""
        data: dict[str, object] = {"text": self.text}
        if self.color is not None:
            data["color"] = (
                self.color.name.lower() if isinstance(self.color, NamedColor) else self.color.hex
            )
        if self.decorations:
            data["decorations"] = sorted(decoration.name.lower() for decoration in self.decorations)
        if self.font is not None:
            data["font"] = self.font
        if self.click is not None:
            data["click"] = {"action": self.click.action.value, "value": self.click.value}
        if self.hover is not None:
            data["hover"] = _hover_to_dict(self.hover)
        return data


def _hover_to_dict(hover: HoverEvent) -> dict[str, object]:
    data: dict[str, object] = {"action": hover.action.value}
    if isinstance(hover, ShowText):
        data["runs"] = [run.to_dict() for run in hover.runs]
    elif isinstance(hover, ShowEntity):
        data["kind"] = hover.kind
        data["id"] = hover.entity_id
        if hover.name is not None:
            data["name"] = [run.to_dict() for run in hover.name]
    else:
        data["id"] = hover.item_id
        data["count"] = hover.count
        if hover.tag is not None:
            data["tag"] = hover.tag
    return data


@dataclass(frozen=True)
class Style:
    """Ambient style handed to a recursive scan.

    Attributes:
        color: Inherited color.
        decorations: Inherited decorations.
        font: Inherited font key.
        click: Inherited click action.
        hover: Inherited hover payload.
    """

    color: Color | None = None
    decorations: frozenset[Decoration] = frozenset()
    font: str | None = None
    click: ClickEvent | None = None
    hover: HoverEvent | None = None

    def with_decoration(self, decoration: Decoration) -> Style:
        return replace(self, decorations=self.decorations | {decoration})


@dataclass
class ScanState:
    """Mutable state owned by one scanner invocation.

    Attributes:
        buffer: Pending literal characters not yet flushed into a run.
        color: Current color.
        decorations: Current decorations.
        font: Current font key.
        click: Current click action.
        hover: Current hover payload.
        runs: Runs produced so far.
        no_url_before: Index before which no bare URL can start.
    """

    buffer: list[str] = field(default_factory=list)
    color: Color | None = None
    decorations: set[Decoration] = field(default_factory=set)
    font: str | None = None
    click: ClickEvent | None = None
    hover: HoverEvent | None = None
    runs: list[StyledRun] = field(default_factory=list)
    no_url_before: int = 0

    @classmethod
    def from_style(cls, style: Style) -> ScanState:
        return cls(
            color=style.color,
            decorations=set(style.decorations),
            font=style.font,
            click=style.click,
            hover=style.hover,
        )

    def style(self) -> Style:
        """Snapshot the current style for a nested scan."""
        return Style(
            color=self.color,
            decorations=frozenset(self.decorations),
            font=self.font,
            click=self.click,
            hover=self.hover,
        )
