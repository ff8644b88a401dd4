"""Color and decoration vocabulary."""

from __future__ import annotations

from .models import RESET, Color, Decoration, NamedColor, ResetCode, RgbColor

LegacyCode = NamedColor | RgbColor | Decoration | ResetCode

_CODES: dict[str, LegacyCode] = {
    **{color.code: color for color in NamedColor},
    **{decoration.code: decoration for decoration in Decoration},
    RESET.value: RESET,
}

_NAMES: dict[str, LegacyCode] = {
    **{color.name.lower(): color for color in NamedColor},
    **{decoration.name.lower(): decoration for decoration in Decoration},
    "underline": Decoration.UNDERLINED,
    "magic": Decoration.OBFUSCATED,
    "reset": RESET,
}

_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")


def is_hex_digit(character: str) -> bool:
    return character in _HEX_DIGITS


def from_legacy_code(code: str) -> LegacyCode | None:
    """Resolve a single-letter legacy code, ignoring case.

    Examples:
        from_legacy_code("6")  # NamedColor.GOLD
        from_legacy_code("L")  # Decoration.BOLD
    """
    return _CODES.get(code.lower())


def resolve_hex(value: str) -> RgbColor | None:
    """Parse ``#RRGGBB`` or the short ``#RGB`` form.

    Examples:
        resolve_hex("#f0f")  # RgbColor(0xFF00FF)
    """
    if not value.startswith("#"):
        return None
    digits = value[1:]
    if len(digits) == 3:
        digits = "".join(digit * 2 for digit in digits)
    if len(digits) != 6 or not all(is_hex_digit(digit) for digit in digits):
        return None
    return RgbColor(int(digits, 16))


def resolve_name(value: str) -> LegacyCode | None:
    """Look up a color, decoration, or ``reset`` by case-insensitive name."""
    return _NAMES.get(value.lower())


def parse_color(value: str) -> LegacyCode | None:
    """Resolve a hex literal or a style name.

    Args:
        value: ``#RRGGBB``, ``#RGB``, or a name such as ``gold`` or ``bold``.

    Returns:
        The resolved color, decoration, or reset code; None when the value
        names nothing.

    Examples:
        parse_color("Gold")  # NamedColor.GOLD
        parse_color("#ff00ff")  # RgbColor(0xFF00FF)
        parse_color("underline")  # Decoration.UNDERLINED
    """
    if not value:
        return None
    if value[0] == "#":
        return resolve_hex(value)
    return resolve_name(value)


def is_color(value: LegacyCode | None) -> bool:
    return isinstance(value, (NamedColor, RgbColor))


def rgb_triplet(color: Color) -> tuple[int, int, int]:
    rgb = color.rgb
    return (rgb >> 16) & 0xFF, (rgb >> 8) & 0xFF, rgb & 0xFF
