"""Package-specific exception types."""

from __future__ import annotations


class MarkupError(ValueError):
    """Base class for markup errors.

    Raised only when the parser runs in strict mode; lenient parsing degrades
    the same conditions to defaults instead.
    """


class FormatMismatchError(MarkupError):
    """Raised when a `color=` entry names a decoration or a `format=` entry names a color.

    Args:
        token: The offending definition entry.
        expected: Either ``"color"`` or ``"format"``.
    """

    def __init__(self, token: str, expected: str):
        self.token = token
        self.expected = expected
        super().__init__(self._build_message())

    def _build_message(self) -> str:
        if self.expected == "color":
            return f"'{self.token}' is a format and not a color"
        return f"'{self.token}' is a color and not a format"


class EntityDefinitionError(MarkupError):
    """Raised when a `show_entity` value lacks the ``id:kind`` separator.

    Args:
        value: The raw hover value.
    """

    def __init__(self, value: str):
        self.value = value
        super().__init__(
            f"Invalid entity definition '{value}'. "
            "Needs to be of format uuid:id or uuid:namespace:id"
        )


class ItemCountError(MarkupError):
    """Raised when the ``*count`` suffix of a `show_item` value is not a number.

    Args:
        value: The item id including its count suffix.
    """

    def __init__(self, value: str):
        self.value = value
        super().__init__(f"Invalid item count in '{value}'")


class InvalidKeyError(MarkupError):
    """Raised when an entity kind or item id is not a valid namespaced key.

    Args:
        key: The rejected key.
    """

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"'{key}' is not a valid namespaced key")


class NestingTooDeepError(MarkupError):
    """Raised when nested constructs exceed the configured depth.

    Args:
        limit: Maximum nesting depth permitted.
    """

    def __init__(self, limit: int):
        self.limit = limit
        super().__init__(f"Markup nested too deeply (limit: {self.limit})")


class UnknownStyleError(MarkupError):
    """Raised when a `color=` or `format=` entry names nothing known.

    Args:
        token: The unresolvable entry.
    """

    def __init__(self, token: str):
        self.token = token
        super().__init__(f"'{token}' is neither a color nor a format")
