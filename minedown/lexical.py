"""Stateless text helpers used by the markup scanner."""

from __future__ import annotations


def is_escaped(text: str, pos: int) -> bool:
    """Determine whether a character is escaped by preceding backslashes.

    Counts consecutive backslashes immediately before `pos`; an odd count marks
    the character as escaped.

    Args:
        text: Text containing the character.
        pos: Zero-based index of the character to inspect.

    Returns:
        bool: True when the character is escaped, otherwise False.

    Examples:
        is_escaped("\\\\*", 2)  # False, two backslashes
        is_escaped("\\*", 1)  # True, one backslash
    """
    if pos <= 0 or pos > len(text):
        return False

    # Count consecutive backslashes before pos
    backslash_count = 0
    i = pos - 1
    while i >= 0 and text[i] == "\\":
        backslash_count += 1
        i -= 1

    # Odd number of backslashes means the character is escaped
    return backslash_count % 2 == 1


def is_double(text: str, pos: int) -> bool:
    """Check whether the character at `pos` is immediately repeated.

    Examples:
        is_double("**bold**", 0)  # True
        is_double("*a", 0)  # False
    """
    return pos + 1 < len(text) and text[pos] == text[pos + 1]


def index_of_not_escaped(text: str, needle: str, start: int = 0) -> int:
    """Find the first occurrence of `needle` whose first character is not escaped.

    Args:
        text: Text to search.
        needle: Substring to look for.
        start: Index to start searching from.

    Returns:
        int: Index of the occurrence, or -1 when none exists.

    Examples:
        index_of_not_escaped("a\\](b](c", "](")  # 5
    """
    index = text.find(needle, start)
    while index != -1:
        if not is_escaped(text, index):
            return index
        index = text.find(needle, index + 1)
    return -1


def find_closing(text: str, start: int, opener: str, closer: str) -> int:
    """Find the closer that balances an already-consumed opener.

    Scanning starts at `start` with a depth of one. Escaped characters never
    change the depth.

    Args:
        text: Text to scan.
        start: Index just past the opening delimiter.
        opener: Character that increases the depth.
        closer: Character that decreases the depth.

    Returns:
        int: Index of the balancing closer, or -1 when the text ends first.

    Examples:
        find_closing("(a(b)c)d", 1, "(", ")")  # 6
    """
    depth = 1
    j = start
    while j < len(text):
        character = text[j]
        if character == "\\" and j + 1 < len(text):
            # Skip escaped character (e.g., \) or \()
            j += 2
            continue
        if character == opener:
            depth += 1
        elif character == closer:
            depth -= 1
            if depth == 0:
                return j
        j += 1
    return -1


def brace_delta(token: str) -> int:
    """Net change in unescaped brace depth across `token`.

    Examples:
        brace_delta("{a")  # 1
        brace_delta("b\\}}")  # -1
    """
    delta = 0
    for i, character in enumerate(token):
        if character in "{}" and not is_escaped(token, i):
            delta += 1 if character == "{" else -1
    return delta


def wrap(text: str, width: int) -> str:
    """Greedily wrap `text` at spaces so lines fit within `width`.

    Text that already contains a newline, or fits, is returned unchanged.
    Words that do not fit on the current line are split only when the
    remaining room is worth filling; remainders longer than `width` are
    hard-split.

    Args:
        text: Text to wrap.
        width: Maximum line length.

    Returns:
        str: The wrapped text joined with newlines.

    Examples:
        wrap("a bb ccc dddd", 5)  # "a bb\\nccc\\ndddd"
    """
    if width <= 0 or len(text) <= width or "\n" in text:
        return text

    lines: list[str] = []
    current = ""
    for word in text.split(" "):
        separator = " " if current else ""
        if len(current) + len(separator) + len(word) > width:
            rest = width - len(current) - len(separator)
            if rest > width // 4 and len(word) > min(rest * 2, width // 4):
                current += separator + word[:rest]
            else:
                rest = 0
            if current:
                lines.append(current)
            remainder = word[rest:]
            while len(remainder) > width:
                lines.append(remainder[:width])
                remainder = remainder[width:]
            current = remainder
        else:
            current += separator + word
    if current:
        lines.append(current)
    return "\n".join(lines)
