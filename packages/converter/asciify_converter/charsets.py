"""Built-in character ramps, ordered from densest to sparsest glyph."""

from __future__ import annotations

from .errors import InvalidConfigurationError

CUSTOM_CHAR_SET = "CUSTOM"
DEFAULT_CUSTOM_CHARS = "@#%xo-+:."

CHAR_SETS: dict[str, str] = {
    "SIMPLE": "@#%xo-+:.",
    "DETAILED": "@%#*+=-:. ",
    "BLOCK": "█▓▒░ ",
    "MINIMAL": "#. ",
    CUSTOM_CHAR_SET: "",
}


def list_char_sets() -> list[str]:
    return list(CHAR_SETS.keys())


def get_char_set(name: str) -> str:
    try:
        return CHAR_SETS[name]
    except KeyError:
        raise InvalidConfigurationError(f"Unknown character set: {name}") from None


def resolve_characters(name: str, custom_chars: str) -> str:
    """Return the preset ramp for ``name``, or ``custom_chars`` when the preset is empty."""
    chars = get_char_set(name) or custom_chars
    if not chars:
        raise InvalidConfigurationError("Effective character set is empty")
    return chars
