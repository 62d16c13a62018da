"""Parser for handwritten (manuscript) scoresheets.

Handwritten sheets have no reliable column separation, so rows are matched
with patterns and every shirt number and name goes through the OCR
correction tables. Two layouts are recognized:

* sequential: Team A block followed by a Team B block, one entry per line
* Swiss tabular: two teams side by side under a multilingual header
  (handled in ``scoresheet.swiss``)
"""

import logging
import re
from enum import Enum
from typing import NamedTuple, Optional

from scoresheet import OFFICIAL_ROLES, ParsedGameSheet, ParsedTeam
from scoresheet.diagnostics import NO_LINES_WARNING, NO_TEXT_WARNING, missing_roster_warnings
from scoresheet.entries import (
    PLAYER_LINE_LENIENT_RE,
    PLAYER_LINE_RE,
    is_strict_entry_line,
    try_extract_official,
    try_extract_player,
)
from scoresheet.swiss import is_swiss_tabular_format, parse_swiss_tabular_sheet

log = logging.getLogger(__name__)

MIN_TEAM_NAME_LENGTH = 3
MIN_LETTER_RATIO = 0.6

_LETTER_RE = re.compile(r'[A-Za-zÀ-ÿ]')

TEAM_A_MARKER_RE = re.compile(
    r'\b(?:TEAM|ÉQUIPE|EQUIPE|MANNSCHAFT)\s*A\b|\bHOME\b|\bHEIM\b', re.IGNORECASE,
)
TEAM_B_MARKER_RE = re.compile(
    r'\b(?:TEAM|ÉQUIPE|EQUIPE|MANNSCHAFT)\s*B\b|\bAWAY\b|\bGAST\b', re.IGNORECASE,
)
# Explicit side letter in front of a marker word (``B GAST``)
SIDE_PREFIX_RE = re.compile(r'^([AB])[\s.:-]+(?=\S)')

OFFICIALS_MARKERS = ('OFFICIAL', 'COACH', 'TRAINER')
END_MARKERS = ('SIGNATURE', 'CAPTAIN', 'REFEREE', 'ARBITRE')


class BucketMode(Enum):
    """What the lines of a team block are read as."""

    PLAYERS = 'players'
    OFFICIALS = 'officials'
    DONE = 'done'


# =============================================================================
# Line classification
# =============================================================================

def is_libero_marker(line: str) -> bool:
    return 'LIBERO' in line.upper()


def is_officials_marker(line: str) -> bool:
    upper = line.upper()
    return any(marker in upper for marker in OFFICIALS_MARKERS)


def is_end_marker(line: str) -> bool:
    upper = line.upper()
    return any(marker in upper for marker in END_MARKERS)


def next_mode(mode: BucketMode, line: str) -> tuple[BucketMode, bool]:
    """Transition function for a team block; returns (mode, line consumed).

    Entry lines written with a digit or a role code are never markers, so a
    coach named ``C Hans Trainer`` is read as an official rather than as the
    officials heading.
    """
    if mode is BucketMode.DONE:
        return mode, True
    if is_strict_entry_line(line):
        return mode, False
    if is_end_marker(line):
        return BucketMode.DONE, True
    if is_officials_marker(line):
        return BucketMode.OFFICIALS, True
    if is_libero_marker(line):
        return mode, True
    return mode, False


# =============================================================================
# Team blocks
# =============================================================================

def extract_team_name(line: str) -> Optional[str]:
    """Return the line if it looks like a team name, else None."""
    trimmed = line.strip()
    if len(trimmed) < MIN_TEAM_NAME_LENGTH:
        return None
    if PLAYER_LINE_RE.match(trimmed) or PLAYER_LINE_LENIENT_RE.match(trimmed):
        return None
    if is_libero_marker(trimmed) or is_officials_marker(trimmed) or is_end_marker(trimmed):
        return None

    letters = len(_LETTER_RE.findall(trimmed))
    if letters >= MIN_TEAM_NAME_LENGTH and letters / len(trimmed) > MIN_LETTER_RATIO:
        return trimmed
    return None


class TeamSections(NamedTuple):
    team_a_lines: list[str]
    team_b_lines: list[str]
    team_a_name: str
    team_b_name: str


def _name_after_marker(line: str) -> str:
    cleaned = SIDE_PREFIX_RE.sub('', line, count=1)
    for marker_re in (TEAM_A_MARKER_RE, TEAM_B_MARKER_RE):
        cleaned = marker_re.sub('', cleaned, count=1)
    return extract_team_name(cleaned.strip()) or ''


def _team_marker(line: str) -> Optional[str]:
    """Team side of a marker line (``Team A``, ``B GAST``), None for other lines."""
    if is_strict_entry_line(line):
        return None
    if TEAM_A_MARKER_RE.search(line):
        side = 'A'
    elif TEAM_B_MARKER_RE.search(line):
        side = 'B'
    else:
        return None
    prefix = SIDE_PREFIX_RE.match(line)
    return prefix.group(1) if prefix else side


def split_into_team_sections(lines: list[str]) -> TeamSections:
    """Distribute lines into a Team A and a Team B block.

    Explicit markers (``Team A``, ``HEIM``, ``GAST``, ...) switch the active
    team. Without markers, the first line that looks like a team name names
    Team A and all lines default to Team A.
    """
    team_a_lines: list[str] = []
    team_b_lines: list[str] = []
    team_a_name = ''
    team_b_name = ''
    current = None
    team_a_marker_seen = False

    for line in lines:
        trimmed = line.strip()
        if not trimmed:
            continue

        side = _team_marker(trimmed)
        if side == 'A':
            team_a_name = _name_after_marker(trimmed) or team_a_name
            current = 'A'
            team_a_marker_seen = True
            continue
        if side == 'B':
            team_b_name = _name_after_marker(trimmed) or team_b_name
            current = 'B'
            continue

        if not team_a_marker_seen and not team_a_name:
            name = extract_team_name(trimmed)
            if name:
                team_a_name = name
                current = 'A'
                continue

        if current == 'B':
            team_b_lines.append(trimmed)
        else:
            team_a_lines.append(trimmed)

    return TeamSections(team_a_lines, team_b_lines, team_a_name, team_b_name)


def parse_team_lines(lines: list[str], team_name: str, roles: frozenset[str] = OFFICIAL_ROLES) -> ParsedTeam:
    """Read the players and officials of one team block."""
    team = ParsedTeam(name=team_name)
    mode = BucketMode.PLAYERS

    for line in lines:
        mode, consumed = next_mode(mode, line)
        if mode is BucketMode.DONE:
            break
        if consumed:
            continue

        if mode is BucketMode.PLAYERS:
            player = try_extract_player(line)
            if player is not None:
                team.players.append(player)
                continue

        # Officials may also appear inline below the players
        official = try_extract_official(line, roles)
        if official is not None:
            team.officials.append(official)
        else:
            log.debug("Zeile nicht erkannt: %s", line)

    return team


# =============================================================================
# Entry point
# =============================================================================

def parse_sequential_sheet(lines: list[str], roles: frozenset[str] = OFFICIAL_ROLES) -> ParsedGameSheet:
    sections = split_into_team_sections(lines)
    team_a = parse_team_lines(sections.team_a_lines, sections.team_a_name, roles)
    team_b = parse_team_lines(sections.team_b_lines, sections.team_b_name, roles)

    warnings = missing_roster_warnings(team_a, team_b)
    log.info(
        "Handschriftliches Matchblatt gelesen: %d/%d Spieler, %d/%d Offizielle",
        len(team_a.players), len(team_b.players),
        len(team_a.officials), len(team_b.officials),
    )
    return ParsedGameSheet(team_a, team_b, warnings)


def parse_manuscript_sheet(ocr_text: str, roles: frozenset[str] = OFFICIAL_ROLES) -> ParsedGameSheet:
    """Parse the OCR text of a handwritten scoresheet.

    Detects the Swiss two-column layout and otherwise reads the sheet as
    sequential team blocks.

    Args:
        ocr_text: Raw OCR text.
        roles: Accepted official role codes; pass
            ``EXTENDED_OFFICIAL_ROLES`` to also read medical staff (``M``).

    Returns:
        ParsedGameSheet; problems are reported in ``warnings``, never raised.
    """
    if not ocr_text or not isinstance(ocr_text, str):
        return ParsedGameSheet(warnings=[NO_TEXT_WARNING])

    lines = [line.strip() for line in ocr_text.split('\n') if line.strip()]
    if not lines:
        return ParsedGameSheet(warnings=[NO_LINES_WARNING])

    if is_swiss_tabular_format(ocr_text):
        log.debug("Schweizer Tabellenformat erkannt")
        return parse_swiss_tabular_sheet(ocr_text, roles)
    return parse_sequential_sheet(lines, roles)
