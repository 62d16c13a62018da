"""Parser for the Swiss two-column tabular manuscript scoresheet.

The Swiss handwritten sheet lists both teams side by side under a German /
French / Italian column header (``Punkte Points Punti``, ``Name Nom Nome``).
OCR usually keeps the tab between the two team halves but merges the entries
inside a cell, e.g. ``"S. AngeliL. Collier"`` next to ``"20.2.9721.1.97"``.
Those cells are split again with ``scoresheet.splitters`` and the resulting
names and birth dates are paired per team half.
"""

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import NamedTuple, Optional

from scoresheet import OFFICIAL_ROLES, ParsedGameSheet, ParsedOfficial, ParsedPlayer, ParsedTeam
from scoresheet.corrections import extract_shirt_number
from scoresheet.diagnostics import NO_TEXT_WARNING, missing_roster_warnings
from scoresheet.electronic import parse_libero_entry
from scoresheet.entries import try_extract_official, try_extract_player
from scoresheet.names import parse_initial_name, parse_official_name
from scoresheet.splitters import (
    MIN_NAME_LENGTH,
    split_concatenated_dates,
    split_concatenated_names,
    split_concatenated_numbers,
)

log = logging.getLogger(__name__)

MAX_SWISS_PLAYERS_PER_TEAM = 14
MIN_TAB_LINES = 3
MIN_MARKER_RESIDUE = 3
MAX_TEAM_NAME_LINES = 5

SWISS_HEADER_PATTERNS = (
    re.compile(r'punkte.*points.*punti', re.IGNORECASE),
    re.compile(r'name.*nom.*nome', re.IGNORECASE),
)
CONCATENATED_NAME_RE = re.compile(r'[a-zß-ÿ][A-ZÀ-Þ]\.\s?[A-ZÀ-Þ][a-zß-ÿ]')

CLUB_PREFIXES = ('VBC', 'VTV', 'TSV', 'STV', 'USC', 'TV', 'BC', 'VC', 'SC', 'FC', 'US')
_CLUB_ALTERNATION = '|'.join(CLUB_PREFIXES)
TEAM_NAME_RE = re.compile(
    rf'\b(?:{_CLUB_ALTERNATION})\s+\S[^\t]*?(?=\s+(?:{_CLUB_ALTERNATION})\b|\t|$)'
)
_TRAILING_NUMBERS_RE = re.compile(r'(?:\s+\d+)+$')

NOISE_PATTERNS = (
    re.compile(r'^[\d\s.,:;/|_\-]*$'),      # score columns and rulings
    re.compile(r'^(?:[IVX]+\s*)+$'),         # set numbers
    re.compile(r'^\S$'),                     # stray characters
)
_HEADER_WORD_RE = re.compile(
    r'\b(?:punkte|points|punti|name|nom|nome|nr|no|lizenz|licence|licenza|'
    r'geburtsdatum|date de naissance|data di nascita|spieler|joueurs|giocatori)\b',
    re.IGNORECASE,
)
_NON_LETTER_RE = re.compile(r'[\W\d_]')
_LETTER_RE = re.compile(r'[A-Za-zÀ-ÿ]')
_DIGITS_RE = re.compile(r'\d+')
_INLINE_DATE_RE = re.compile(r'\d{1,2}\.\d{1,2}\.\d{2,4}')
_DATE_FIELD_RE = re.compile(r'\d{1,2}\.\d{1,2}\.(?:\d{4}|\d{2})')

LIBERO_MARKER_RE = re.compile(r'\blib[eé]r[oi]s?\b', re.IGNORECASE)
OFFICIALS_MARKER_RE = re.compile(
    r'\b(?:offizielle|officiels|ufficiali|official members|officials?|'
    r'trainer|coach|allenatore|entraîneur)\b',
    re.IGNORECASE,
)
END_MARKER_RE = re.compile(
    r'\b(?:unterschrift(?:en)?|signatures?|firma|captain|capitaine|capitano|kapitän)\b',
    re.IGNORECASE,
)

NO_TEAM_NAMES_WARNING = 'Could not determine team names from the sheet header'
NUMBERS_SPLIT_WARNING = (
    'Jersey numbers were split from concatenated digits and may be unreliable'
)
PLAYER_CAP_WARNING = 'More than {limit} players read for Team {side} - extra entries ignored'


class SwissSection(Enum):
    PLAYERS = 'players'
    LIBERO = 'libero'
    OFFICIALS = 'officials'


# =============================================================================
# Format detection and header
# =============================================================================

def is_swiss_tabular_format(text: str) -> bool:
    """Check whether OCR text comes from the Swiss two-column manuscript sheet.

    Requires the multilingual column header, plus either at least
    MIN_TAB_LINES tab-separated lines or a concatenated-name pattern.
    """
    if not text or not isinstance(text, str):
        return False

    lines = text.split('\n')
    has_header = any(p.search(line) for line in lines for p in SWISS_HEADER_PATTERNS)
    if not has_header:
        return False

    tab_lines = sum(1 for line in lines if '\t' in line)
    return tab_lines >= MIN_TAB_LINES or bool(CONCATENATED_NAME_RE.search(text))


def is_header_line(line: str) -> bool:
    """Check for a line made only of column header words."""
    if any(p.search(line) for p in SWISS_HEADER_PATTERNS):
        return True
    if not _HEADER_WORD_RE.search(line):
        return False
    return not _NON_LETTER_RE.sub('', _HEADER_WORD_RE.sub('', line))


def is_noise_line(line: str) -> bool:
    return any(p.match(line) for p in NOISE_PATTERNS)


def _find_header_index(lines: list[str]) -> int:
    for i, line in enumerate(lines):
        if is_header_line(line):
            return i
    return -1


def extract_swiss_team_names(lines: list[str]) -> tuple[str, str]:
    """Read team names from club prefixes (``VBC``, ``TV``, ...) above the header.

    Trailing bare numbers (league or team numbers) are stripped. Complex
    headers can yield a partial or empty name.
    """
    names: list[str] = []
    for line in lines:
        for match in TEAM_NAME_RE.finditer(line):
            name = _TRAILING_NUMBERS_RE.sub('', match.group().strip())
            if name and name not in names:
                names.append(name)
        if len(names) >= 2:
            break

    team_a = names[0] if names else ''
    team_b = names[1] if len(names) > 1 else ''
    return team_a, team_b


def _is_marker_line(line: str, marker_re: re.Pattern) -> bool:
    """A marker line holds little besides the marker words themselves."""
    if not marker_re.search(line):
        return False
    residue = _LETTER_RE.findall(marker_re.sub('', line))
    return len(residue) < MIN_MARKER_RESIDUE


# =============================================================================
# Parse state
# =============================================================================

@dataclass
class _SwissState:
    team_a: ParsedTeam = field(default_factory=ParsedTeam)
    team_b: ParsedTeam = field(default_factory=ParsedTeam)
    section: SwissSection = SwissSection.PLAYERS
    numbers_split: bool = False
    capped: set = field(default_factory=set)

    def team(self, side: str) -> ParsedTeam:
        return self.team_a if side == 'A' else self.team_b


@dataclass
class _SideCells:
    """Names, dates and digits read from one team half of a row."""

    names: list[str] = field(default_factory=list)
    dates: list[str] = field(default_factory=list)
    digits: str = ''


def _build_player(
    raw_name: str,
    number: Optional[int],
    birth_date: Optional[str],
) -> Optional[ParsedPlayer]:
    parsed = parse_initial_name(raw_name)
    if not parsed.display_name:
        return None
    return ParsedPlayer(
        shirt_number=number,
        last_name=parsed.last_name,
        first_name=parsed.first_name,
        display_name=parsed.display_name,
        raw_name=raw_name,
        license_status='',
        birth_date=birth_date,
    )


def _build_official(role: str, raw_name: str) -> Optional[ParsedOfficial]:
    parsed = parse_official_name(raw_name)
    if not parsed.display_name:
        return None
    return ParsedOfficial(
        role=role,
        last_name=parsed.last_name,
        first_name=parsed.first_name,
        display_name=parsed.display_name,
        raw_name=raw_name,
    )


def _add_player(state: _SwissState, side: str, player: Optional[ParsedPlayer]) -> None:
    if player is None:
        return
    team = state.team(side)
    if len(team.players) >= MAX_SWISS_PLAYERS_PER_TEAM:
        state.capped.add(side)
        return
    team.players.append(player)


# =============================================================================
# Unstructured player rows
# =============================================================================

def _side_of(idx: int, field_count: int) -> str:
    return 'A' if idx < field_count / 2 else 'B'


def _collect_cells(fields: list[str]) -> dict[str, _SideCells]:
    cells = {'A': _SideCells(), 'B': _SideCells()}
    for idx, text in enumerate(fields):
        if not text:
            continue
        side = cells[_side_of(idx, len(fields))]
        remainder = text
        for date in split_concatenated_dates(text):
            side.dates.append(date)
            remainder = remainder.replace(date, ' ', 1)
        side.digits += ''.join(_DIGITS_RE.findall(remainder))
        if _LETTER_RE.search(remainder):
            side.names.extend(split_concatenated_names(_DIGITS_RE.sub(' ', remainder)))
    return cells


def read_player_row(fields: list[str], state: _SwissState) -> None:
    """Read a tab-separated player row whose cells may hold several entries."""
    for side, cells in _collect_cells(fields).items():
        if not cells.names:
            continue

        numbers: list[int] = []
        if cells.digits:
            numbers = split_concatenated_numbers(cells.digits, expected_count=len(cells.names))
            if len(cells.digits) > 2:
                state.numbers_split = True

        for i, name in enumerate(cells.names):
            number = numbers[i] if i < len(numbers) else None
            birth_date = cells.dates[i] if i < len(cells.dates) else None
            _add_player(state, side, _build_player(name, number, birth_date))


# =============================================================================
# Structured libero and official rows
# =============================================================================

class _Entry(NamedTuple):
    name_idx: int
    birth_date: Optional[str]
    code: int | str | None   # shirt number for liberos, role for officials
    name: str


def _has_name(text: str) -> bool:
    return len(_LETTER_RE.findall(text)) >= MIN_NAME_LENGTH


def _structured_entries(fields: list[str], officials: bool, roles: frozenset[str]) -> list[_Entry]:
    """Walk a row field by field: optional date, number or role, then name."""
    entries: list[_Entry] = []
    idx = 0
    while idx < len(fields):
        if not fields[idx]:
            idx += 1
            continue

        start = idx
        birth_date = None
        code = None

        if _DATE_FIELD_RE.fullmatch(fields[idx]):
            birth_date = fields[idx]
            idx += 1

        if idx < len(fields):
            candidate = fields[idx]
            if officials and candidate.upper() in roles:
                code = candidate.upper()
                idx += 1
            elif not officials and any(ch.isdigit() for ch in candidate):
                code = extract_shirt_number(candidate)
                if code is not None:
                    idx += 1
                else:
                    # Number and name in one cell: "7 M. Brunner"
                    number, name = parse_libero_entry(candidate)
                    if name != candidate.strip() and _has_name(name):
                        entries.append(_Entry(idx, birth_date, number, name))
                        idx += 1
                        continue

        if idx < len(fields) and _has_name(fields[idx]):
            if not officials or code is not None:
                entries.append(_Entry(idx, birth_date, code, fields[idx]))
            idx += 1

        idx = max(idx, start + 1)
    return entries


def _assign_sides(entries: list[_Entry], field_count: int) -> list[tuple[str, _Entry]]:
    """At most one entry per team: first to Team A, second to Team B."""
    if len(entries) == 1:
        entry = entries[0]
        side = _side_of(entry.name_idx, field_count) if field_count >= 4 else 'A'
        return [(side, entry)]
    return list(zip(('A', 'B'), entries))


def read_structured_row(fields: list[str], state: _SwissState, roles: frozenset[str]) -> None:
    officials = state.section is SwissSection.OFFICIALS
    entries = _structured_entries(fields, officials, roles)
    for side, entry in _assign_sides(entries, len(fields)):
        if officials:
            official = _build_official(entry.code, entry.name)
            if official is not None:
                state.team(side).officials.append(official)
        else:
            _add_player(state, side, _build_player(entry.name, entry.code, entry.birth_date))


def read_plain_line(line: str, state: _SwissState, roles: frozenset[str]) -> None:
    """Read a line without tabs in the libero or officials section as Team A."""
    if state.section is SwissSection.OFFICIALS:
        official = try_extract_official(line, roles)
        if official is not None:
            state.team_a.officials.append(official)
        return
    _add_player(state, 'A', try_extract_player(line))


# =============================================================================
# Entry point
# =============================================================================

def parse_swiss_tabular_sheet(ocr_text: str, roles: frozenset[str] = OFFICIAL_ROLES) -> ParsedGameSheet:
    """Parse OCR text of a Swiss two-column manuscript scoresheet.

    Args:
        ocr_text: Raw OCR text.
        roles: Accepted official role codes.

    Returns:
        ParsedGameSheet; problems are reported in ``warnings``, never raised.
    """
    state = _SwissState()
    if not ocr_text or not isinstance(ocr_text, str):
        return ParsedGameSheet(state.team_a, state.team_b, [NO_TEXT_WARNING])

    lines = [line.strip(' \r') for line in ocr_text.split('\n') if line.strip()]
    header_index = _find_header_index(lines)
    name_lines = lines[:header_index + 1] if header_index >= 0 else lines[:MAX_TEAM_NAME_LINES]
    state.team_a.name, state.team_b.name = extract_swiss_team_names(name_lines)

    for line in lines[header_index + 1:]:
        if is_noise_line(line) or is_header_line(line):
            continue
        if END_MARKER_RE.search(line):
            break
        if _is_marker_line(line, LIBERO_MARKER_RE):
            state.section = SwissSection.LIBERO
            continue
        if _is_marker_line(line, OFFICIALS_MARKER_RE):
            state.section = SwissSection.OFFICIALS
            continue
        if TEAM_NAME_RE.search(line) and not _INLINE_DATE_RE.search(line):
            log.debug("Mannschaftszeile uebersprungen: %s", line)
            continue

        fields = [f.strip() for f in line.split('\t')]
        if state.section is SwissSection.PLAYERS:
            read_player_row(fields, state)
        elif len(fields) > 1:
            read_structured_row(fields, state, roles)
        else:
            read_plain_line(line, state, roles)

    warnings: list[str] = []
    if not state.team_a.name and not state.team_b.name:
        warnings.append(NO_TEAM_NAMES_WARNING)
    if state.numbers_split:
        warnings.append(NUMBERS_SPLIT_WARNING)
    for side in sorted(state.capped):
        warnings.append(PLAYER_CAP_WARNING.format(limit=MAX_SWISS_PLAYERS_PER_TEAM, side=side))
    warnings.extend(missing_roster_warnings(state.team_a, state.team_b))

    log.info(
        "Schweizer Matchblatt gelesen: %d/%d Spieler, %d/%d Offizielle",
        len(state.team_a.players), len(state.team_b.players),
        len(state.team_a.officials), len(state.team_b.officials),
    )
    return ParsedGameSheet(state.team_a, state.team_b, warnings)
