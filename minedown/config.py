"""Configuration loading and management."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, replace
from pathlib import Path
import tomllib

from .models import Option

ALL_OPTIONS = frozenset(Option)


@dataclass(frozen=True)
class ParserConfig:
    """Configuration for parsing minedown markup.

    Instances are immutable; use `enable`, `disable`, `filter_option`,
    `unfilter_option`, or `dataclasses.replace` to derive new ones.

    Attributes:
        color_char: Sentinel that introduces legacy color codes alongside ``§``.
        enabled_options: Markup features that are recognized and applied.
        filtered_options: Markup features that are recognized and stripped
            without applying their style.
        lenient: Degrade malformed definitions to defaults instead of raising.
        url_detection: Turn bare URLs into clickable runs.
        auto_add_url_prefix: Prefix ``http://`` to ``open_url`` values
            without a scheme.
        url_hover_text: Hover template for detected URLs; ``%url%`` is
            replaced by the URL. Empty disables the hover.
        hover_text_width: Maximum line width of ``show_text`` hovers.
        max_depth: Maximum nesting depth of recursive constructs.

    Examples:
        ParserConfig(lenient=True, url_detection=False)
    """

    color_char: str = "&"
    enabled_options: frozenset[Option] = ALL_OPTIONS
    filtered_options: frozenset[Option] = frozenset()
    lenient: bool = False

    # URLs
    url_detection: bool = True
    auto_add_url_prefix: bool = True
    url_hover_text: str = "Click to open url"

    # Limits
    hover_text_width: int = 60
    max_depth: int = 64

    def recognizes(self, option: Option) -> bool:
        """Whether the syntax of `option` is recognized; filtering implies recognition."""
        return option in self.enabled_options or option in self.filtered_options

    def is_filtered(self, option: Option) -> bool:
        return option in self.filtered_options


class ConfigError(ValueError):
    """Exception raised when configuration values are invalid.

    Examples:
        raise ConfigError("`color_char` must be a single character")
    """


def enable(config: ParserConfig, option: Option) -> ParserConfig:
    """Return a copy of `config` with `option` enabled."""
    return replace(config, enabled_options=config.enabled_options | {option})


def disable(config: ParserConfig, option: Option) -> ParserConfig:
    """Return a copy of `config` with `option` disabled.

    A filtered option stays recognized until it is unfiltered.
    """
    return replace(config, enabled_options=config.enabled_options - {option})


def filter_option(config: ParserConfig, option: Option) -> ParserConfig:
    """Return a copy of `config` that strips `option`'s syntax without styling."""
    return replace(
        config,
        enabled_options=config.enabled_options | {option},
        filtered_options=config.filtered_options | {option},
    )


def unfilter_option(config: ParserConfig, option: Option) -> ParserConfig:
    """Return a copy of `config` no longer filtering `option`. Does not enable it."""
    return replace(config, filtered_options=config.filtered_options - {option})


def load_config(search_path: Path) -> ParserConfig:
    """Load configuration from the nearest config file.

    Walks parent directories from `search_path` to the filesystem root, reading
    the ``[tool.minedown]`` table from `pyproject.toml` and the ``[minedown]``
    or ``[tool.minedown]`` table from `.minedown.toml` when present. Returns
    default values when no configuration is found. TOML files that cannot be
    read or decoded are skipped.

    Args:
        search_path: Directory used as the starting point for configuration lookup.

    Returns:
        ParserConfig: Loaded configuration with defaults applied when necessary.

    Raises:
        ConfigError: If the table is present but not a mapping or contains
            unsupported keys.

    Examples:
        load_config(Path("messages"))
    """
    current = search_path.resolve()

    while True:
        pyproject_config = _load_from_file(
            current / "pyproject.toml", table_paths=[("tool", "minedown")]
        )
        if pyproject_config is not None:
            return normalize_config(pyproject_config)

        dotfile_config = _load_from_file(
            current / ".minedown.toml",
            table_paths=[("minedown",), ("tool", "minedown")],
        )
        if dotfile_config is not None:
            return normalize_config(dotfile_config)

        parent = current.parent
        if parent == current:
            break
        current = parent

    return ParserConfig()


_MISSING = object()


def _load_from_file(config_file: Path, table_paths: list[tuple[str, ...]]) -> ParserConfig | None:
    if not config_file.exists():
        return None

    try:
        with open(config_file, "rb") as stream:
            data = tomllib.load(stream)
    except (OSError, tomllib.TOMLDecodeError):
        return None

    for table_path in table_paths:
        raw_config = _extract_table(data, table_path)
        if raw_config is _MISSING:
            continue
        return _build_config_from_raw(raw_config, config_file, table_path)

    return None


def _extract_table(data: object, table_path: tuple[str, ...]) -> object:
    current = data
    for key in table_path:
        if not isinstance(current, dict) or key not in current:
            return _MISSING
        current = current[key]
    return current


def _build_config_from_raw(
    raw_config: object, config_file: Path, table_path: tuple[str, ...]
) -> ParserConfig:
    table_display = ".".join(table_path)

    if raw_config is None:
        return ParserConfig()

    if not isinstance(raw_config, dict):
        raise ConfigError(f"Invalid `[{table_display}]` settings in {config_file}")

    if not raw_config:
        return ParserConfig()

    try:
        return ParserConfig(**raw_config)
    except TypeError as error:
        raise ConfigError(f"Invalid `[{table_display}]` settings in {config_file}") from error


def _to_options(value: object, key: str) -> frozenset[Option]:
    if isinstance(value, str) or not isinstance(value, Iterable):
        raise ConfigError(f"`{key}` must be a list of option names")
    options = set()
    for item in value:
        if isinstance(item, Option):
            options.add(item)
            continue
        if not isinstance(item, str):
            raise ConfigError(f"`{key}` must be a list of option names")
        try:
            options.add(Option.from_name(item))
        except ValueError as error:
            raise ConfigError(f"`{key}` contains an unknown option: {item}") from error
    return frozenset(options)


def normalize_config(config: ParserConfig) -> ParserConfig:
    """Convert option name lists to `Option` sets and enable filtered options.

    Raises:
        ConfigError: If an option list is malformed or names an unknown option.
    """
    enabled = _to_options(config.enabled_options, "enabled_options")
    filtered = _to_options(config.filtered_options, "filtered_options")
    return replace(config, enabled_options=enabled | filtered, filtered_options=filtered)


def validate_config(config: ParserConfig) -> None:
    """Validate a `ParserConfig` instance.

    Args:
        config: Configuration to validate.

    Returns:
        None.

    Raises:
        ConfigError: If the color character is unusable, option sets are
            malformed, flags are not booleans, or limits are non-positive.

    Examples:
        validate_config(ParserConfig(hover_text_width=40))
    """
    config = normalize_config(config)

    if not isinstance(config.color_char, str) or len(config.color_char) != 1:
        raise ConfigError("`color_char` must be a single character")
    if config.color_char == "\\":
        raise ConfigError("`color_char` must not be a backslash")

    for key in ("lenient", "url_detection", "auto_add_url_prefix"):
        if not isinstance(getattr(config, key), bool):
            raise ConfigError(f"`{key}` must be a boolean")

    if not isinstance(config.url_hover_text, str):
        raise ConfigError("`url_hover_text` must be a string")

    _ensure_integers({"hover_text_width": config.hover_text_width, "max_depth": config.max_depth})
    _ensure_positive({"hover_text_width": config.hover_text_width, "max_depth": config.max_depth})


def apply_overrides(config: ParserConfig, **overrides: object) -> ParserConfig:
    """Apply override values to a `ParserConfig`.

    Args:
        config: Base configuration to update.
        overrides: Override values keyed by configuration field name; values set to
            None are ignored.

    Returns:
        ParserConfig: New configuration with the provided overrides applied. The
        original configuration is returned when no changes are supplied.

    Raises:
        TypeError: If an override name is not defined on `ParserConfig`.

    Examples:
        updated = apply_overrides(config, lenient=True, hover_text_width=40)
    """
    changes = {key: value for key, value in overrides.items() if value is not None}
    if not changes:
        return config
    return replace(config, **changes)


def build_config(search_path: Path, **overrides: object) -> ParserConfig:
    """Load, override, and validate configuration.

    Args:
        search_path: Directory where configuration files are resolved.
        overrides: Override values keyed by configuration attributes; None values
            are ignored.

    Returns:
        ParserConfig: Validated configuration ready for parsing.

    Raises:
        ConfigError: If configuration loading or validation fails.

    Examples:
        config = build_config(Path.cwd(), lenient=True)
    """
    config = load_config(search_path)
    config = apply_overrides(config, **overrides)
    config = normalize_config(config)
    validate_config(config)
    return config


def _ensure_positive(values: dict[str, int]) -> None:
    for key, value in values.items():
        if value <= 0:
            raise ConfigError(f"`{key}` must be a positive integer")


def _ensure_integers(values: dict[str, object]) -> None:
    for key, value in values.items():
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigError(f"`{key}` must be an integer")
