"""
minedown: Markdown-inspired markup for styled, interactive chat text.

This package can be used both as a CLI tool and as a library.

CLI Usage:
    minedown "&6Gold **bold** [link](https://example.com)"

Library Usage:
    from minedown import ParserConfig, parse, to_rich_text

    runs = parse("[Help](run_command=/help color=red)", ParserConfig(lenient=True))
    text = to_rich_text(runs)
"""

from .config import ConfigError, ParserConfig, disable, enable, filter_option, unfilter_option
from .exceptions import (
    EntityDefinitionError,
    FormatMismatchError,
    InvalidKeyError,
    ItemCountError,
    MarkupError,
    NestingTooDeepError,
    UnknownStyleError,
)
from .lexical import wrap
from .models import (
    ClickAction,
    ClickEvent,
    Decoration,
    HoverAction,
    NamedColor,
    Option,
    RgbColor,
    ShowEntity,
    ShowItem,
    ShowText,
    StyledRun,
)
from .parser import escape, parse, parse_event, plain_text
from .rich_text import to_rich_text

__version__ = "0.1.0"

__all__ = [
    # Core functionality
    "parse",
    "parse_event",
    "escape",
    "plain_text",
    "wrap",
    "to_rich_text",
    # Configuration
    "ParserConfig",
    "Option",
    "enable",
    "disable",
    "filter_option",
    "unfilter_option",
    # Data models
    "StyledRun",
    "NamedColor",
    "RgbColor",
    "Decoration",
    "ClickAction",
    "ClickEvent",
    "HoverAction",
    "ShowText",
    "ShowEntity",
    "ShowItem",
    # Exceptions
    "ConfigError",
    "MarkupError",
    "FormatMismatchError",
    "EntityDefinitionError",
    "ItemCountError",
    "InvalidKeyError",
    "NestingTooDeepError",
    "UnknownStyleError",
    # Version
    "__version__",
]
