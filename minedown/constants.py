"""Constants used across the minedown package."""

from __future__ import annotations

import re

from .models import Decoration

# Historical sentinel, always recognized next to the configured color character
LEGACY_COLOR_CHAR = "§"

# Bare URLs; the first group is the scheme when present
URL_PATTERN = re.compile(r"^(?:(https?)://)?([-\w_.]{2,}\.[a-z]{2,4})(/\S*)?$", re.ASCII)
URL_PLACEHOLDER = "%url%"
DEFAULT_URL_SCHEME = "http://"

# Event definition prefixes
FONT_PREFIX = "font="
COLOR_PREFIX = "color="
FORMAT_PREFIX = "format="

# Doubled inline markers
FORMATTING_MARKERS = {decoration.marker[0]: decoration for decoration in Decoration}

# Namespaced keys for entity kinds and item ids
DEFAULT_NAMESPACE = "minecraft"
KEY_PATTERN = re.compile(r"[a-z0-9_.-]+:[a-z0-9_./-]+")

# Characters allowed in a direct color token such as `&gold&` or `&#f0f&`
COLOR_TOKEN_CHARACTERS = frozenset(
    "_#0123456789abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ"
)

# Input files read by the CLI
DEFAULT_MAX_FILE_SIZE = 1024 * 1024
