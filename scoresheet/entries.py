"""Single-line player and official entries of handwritten scoresheets."""

import re
from typing import Optional

from scoresheet import OFFICIAL_ROLES, ParsedOfficial, ParsedPlayer
from scoresheet.corrections import extract_shirt_number
from scoresheet.names import parse_official_name, parse_player_name
from scoresheet.splitters import MIN_NAME_LENGTH

PLAYER_LINE_RE = re.compile(r'^(\d{1,2})[\s.:_-]+([A-Za-zÀ-ÿ\s]+)')
# Same as above but accepts letters that OCR returns for handwritten digits
PLAYER_LINE_LENIENT_RE = re.compile(r'^([0-9OoIlZzSsGgBb]{1,2})[\s.:_-]+([A-Za-zÀ-ÿ\s]+)')
OFFICIAL_LINE_RE = re.compile(r'^(C|AC\d?|M)[\s.:_-]+([A-Za-zÀ-ÿ\s]+)', re.IGNORECASE)


def is_entry_line(line: str) -> bool:
    """Check whether a line reads as a player or official entry."""
    return bool(
        PLAYER_LINE_RE.match(line)
        or PLAYER_LINE_LENIENT_RE.match(line)
        or OFFICIAL_LINE_RE.match(line)
    )


def is_strict_entry_line(line: str) -> bool:
    """Like is_entry_line, but the shirt number must be written in digits.

    A leading ``B`` or ``S`` may be a misread 8 or 5, but it is just as often
    a team side (``B GAST``), so marker checks only yield to this variant.
    """
    return bool(PLAYER_LINE_RE.match(line) or OFFICIAL_LINE_RE.match(line))


def try_extract_player(line: str) -> Optional[ParsedPlayer]:
    """Read a ``Number NAME`` line, tolerating misread digits."""
    match = PLAYER_LINE_RE.match(line) or PLAYER_LINE_LENIENT_RE.match(line)
    if not match:
        return None

    name = match.group(2).strip()
    if len(name) < MIN_NAME_LENGTH:
        return None

    parsed = parse_player_name(name)
    if not parsed.display_name:
        return None
    return ParsedPlayer(
        shirt_number=extract_shirt_number(match.group(1)),
        last_name=parsed.last_name,
        first_name=parsed.first_name,
        display_name=parsed.display_name,
        raw_name=name,
        license_status='',
    )


def try_extract_official(line: str, roles: frozenset[str] = OFFICIAL_ROLES) -> Optional[ParsedOfficial]:
    """Read a ``ROLE Firstname Lastname`` line.

    Args:
        line: Trimmed OCR line.
        roles: Accepted role codes.
    """
    match = OFFICIAL_LINE_RE.match(line)
    if not match:
        return None

    role = match.group(1).upper()
    name = match.group(2).strip()
    if role not in roles or len(name) < MIN_NAME_LENGTH:
        return None

    parsed = parse_official_name(name)
    if not parsed.display_name:
        return None
    return ParsedOfficial(
        role=role,
        last_name=parsed.last_name,
        first_name=parsed.first_name,
        display_name=parsed.display_name,
        raw_name=name,
    )
