"""Name normalization and name-order parsing for OCR output."""

import re
from typing import NamedTuple

from scoresheet.corrections import correct_letters

_NAME_SEPARATOR_RE = re.compile(r'[\s-]+')
_INITIAL_RE = re.compile(r'^[^\W\d_]\.$')


class NameParts(NamedTuple):
    last_name: str
    first_name: str
    display_name: str


_EMPTY = NameParts('', '', '')


def normalize_name(name: str) -> str:
    """Normalize an OCR name token to title case.

    Letter corrections are applied first (``M0LLER`` -> ``Moller``).
    Hyphens are treated as word separators.

    Args:
        name: Raw name from OCR.

    Returns:
        Title-cased name with single spaces, or '' for empty input.
    """
    if not name or not isinstance(name, str):
        return ''
    corrected = correct_letters(name).lower()
    parts = [p for p in _NAME_SEPARATOR_RE.split(corrected) if p]
    return ' '.join(p[:1].upper() + p[1:] for p in parts)


def _tokens(raw_name: str) -> list[str]:
    if not raw_name or not isinstance(raw_name, str):
        return []
    return raw_name.split()


def _compose(last_name: str, first_name: str) -> NameParts:
    return NameParts(last_name, first_name, f'{first_name} {last_name}'.strip())


def parse_player_name(raw_name: str) -> NameParts:
    """Parse a player name in ``LASTNAME FIRSTNAME [MIDDLENAME]`` format.

    Args:
        raw_name: Name as printed on the sheet.

    Returns:
        NameParts with display name ``"First Last"``.
    """
    parts = _tokens(raw_name)
    if not parts:
        return _EMPTY
    if len(parts) == 1:
        return _compose(normalize_name(parts[0]), '')

    last_name = normalize_name(parts[0])
    first_name = ' '.join(normalize_name(p) for p in parts[1:])
    return _compose(last_name, first_name)


def parse_official_name(raw_name: str) -> NameParts:
    """Parse an official name in ``Firstname Lastname`` format.

    Officials are written first name first, unlike players.
    """
    parts = _tokens(raw_name)
    if not parts:
        return _EMPTY
    if len(parts) == 1:
        return _compose(normalize_name(parts[0]), '')

    last_name = normalize_name(parts[-1])
    first_name = ' '.join(normalize_name(p) for p in parts[:-1])
    return _compose(last_name, first_name)


def parse_initial_name(raw_name: str) -> NameParts:
    """Parse a handwritten name that may start with an initial (``S. Angeli``).

    A leading initial means the name is written first name first; anything
    else is read like a player name.
    """
    parts = _tokens(raw_name)
    if len(parts) >= 2 and _INITIAL_RE.match(parts[0]):
        return parse_official_name(raw_name)
    return parse_player_name(raw_name)
