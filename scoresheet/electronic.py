"""Parser for electronic (machine-printed) scoresheets.

The OCR text of an electronic sheet is tab separated, one table row per line:

    TeamA Name<tab>TeamB Name
    N.<tab>Name of the player<tab>License<tab>N.<tab>Name of the player<tab>License
    Number<tab>LASTNAME FIRSTNAME<tab>License<tab>Number<tab>LASTNAME FIRSTNAME<tab>License
    ...
    LIBERO
    L1<tab>Number LASTNAME FIRSTNAME<tab>License<tab>L1<tab>Number LASTNAME FIRSTNAME<tab>License
    OFFICIAL MEMBERS ADMITTED ON THE BENCH
    C<tab>Firstname Lastname<tab>C<tab>Firstname Lastname

Lines are fed through a small state machine (see ``Section``). When one team
lists more players than the other, the extra rows only carry one column of
fields; with word bounding boxes those rows are assigned to the team whose
column they sit in, otherwise they default to Team A.
"""

import logging
import re
from collections import defaultdict, deque
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Callable, NamedTuple, Optional

from scoresheet import (
    OFFICIAL_ROLES,
    OCRLine,
    OCRResult,
    OCRWord,
    ParsedGameSheet,
    ParsedOfficial,
    ParsedPlayer,
    ParsedTeam,
)
from scoresheet.corrections import MAX_SHIRT_NUMBER
from scoresheet.diagnostics import NO_LINES_WARNING, NO_TEXT_WARNING, missing_roster_warnings
from scoresheet.names import parse_official_name, parse_player_name

log = logging.getLogger(__name__)

# Minimum tab fields for a row carrying a Team A / Team B player
MIN_PARTS_TEAM_A = 3
MIN_PARTS_TEAM_B = 6
TEAM_B_OFFSET = 3

# Minimum tab fields for a row carrying a Team A / Team B official
MIN_PARTS_OFFICIAL_A = 2
MIN_PARTS_OFFICIAL_B = 4

# Field positions in libero rows (marker, "Number NAME", license)
LIBERO_A_MARKER_IDX = 0
LIBERO_A_ENTRY_IDX = 1
LIBERO_A_LICENSE_IDX = 2
LIBERO_B_MARKER_IDX = 3
LIBERO_B_ENTRY_IDX = 4
LIBERO_B_LICENSE_IDX = 5

# Field positions in official rows
OFFICIAL_A_ROLE_IDX = 0
OFFICIAL_A_NAME_IDX = 1
OFFICIAL_B_ROLE_IDX = 2
OFFICIAL_B_NAME_IDX = 3

MAX_HEADER_ROWS = 3
TEAM_NAME_LOOKBACK = 3
MIN_ALPHA_LENGTH = 3

TEXT_ONLY_WARNING = 'No word bounding boxes available - using text-only parsing'
NO_COLUMN_BOUNDARY_WARNING = (
    'Could not determine column boundaries from bounding boxes - '
    'single-column rows are assigned to Team A'
)
ESTIMATED_BOXES_WARNING = 'Word bounding boxes are estimated - using text-only parsing'

_ALPHA_RE = re.compile(r'[a-zA-Z]{3,}')
_SHIRT_NUMBER_RE = re.compile(r'^\d{1,2}$')
_LEADING_NUMBER_RE = re.compile(r'^(\d+)')
_UPPERCASE_NAME_RE = re.compile(r"^[A-ZÀ-Þ\s'-]+$")
_LIBERO_ENTRY_RE = re.compile(r'^(\d{1,2})\s+(\S.*)$')
_LIBERO_MARKER_RE = re.compile(r'^L\d?\s+(\d{1,2})$', re.IGNORECASE)
_TEAM_SIDE_PREFIX_RE = re.compile(r'^[AB]\s+')


class Section(IntEnum):
    """Parser states, in the order they appear on the sheet."""

    HEADER = 0
    PLAYERS = 1
    LIBERO = 2
    OFFICIALS = 3
    DONE = 4


# =============================================================================
# Column layout from bounding boxes
# =============================================================================

def _widest_gap_midpoint(words: list[OCRWord]) -> Optional[float]:
    """Return the x coordinate in the middle of the widest gap between words."""
    ordered = sorted(words, key=lambda w: w.bbox.x0)
    best_gap = 0.0
    midpoint = None
    for left, right in zip(ordered, ordered[1:]):
        gap = right.bbox.x0 - left.bbox.x1
        if gap > best_gap:
            best_gap = gap
            midpoint = (left.bbox.x1 + right.bbox.x0) / 2
    return midpoint


@dataclass
class ColumnLayout:
    """Horizontal boundary between the Team A and Team B columns.

    The boundary is learned from two-column rows. When none were seen it
    stays unknown and every single-column row belongs to Team A.
    """

    boundary: Optional[float] = None

    @classmethod
    def from_lines(cls, lines: list[OCRLine]) -> 'ColumnLayout':
        midpoints = []
        for line in lines:
            if len(line.text.split('\t')) < MIN_PARTS_TEAM_B:
                continue
            midpoint = _widest_gap_midpoint(line.words)
            if midpoint is not None:
                midpoints.append(midpoint)

        if not midpoints:
            return cls()
        boundary = sum(midpoints) / len(midpoints)
        log.debug("Spaltengrenze bei x=%.1f (%d Referenzzeilen)", boundary, len(midpoints))
        return cls(boundary)

    @property
    def is_known(self) -> bool:
        return self.boundary is not None

    def is_right_column(self, words: list[OCRWord]) -> bool:
        """Check whether a row's first word starts in the Team B column."""
        if self.boundary is None or not words:
            return False
        return min(w.bbox.x0 for w in words) >= self.boundary


def _index_line_words(lines: list[OCRLine]) -> dict[str, deque]:
    """Map each OCR line text to the word lists of the lines with that text."""
    index: dict[str, deque] = defaultdict(deque)
    for line in lines:
        index[line.text.strip()].append(line.words)
    return dict(index)


# =============================================================================
# Parser state
# =============================================================================

@dataclass
class ParserState:
    section: Section = Section.HEADER
    header_rows_parsed: int = 0
    team_a: ParsedTeam = field(default_factory=ParsedTeam)
    team_b: ParsedTeam = field(default_factory=ParsedTeam)
    layout: ColumnLayout = field(default_factory=ColumnLayout)
    line_words: dict[str, deque] = field(default_factory=dict)

    def words_for(self, line: str) -> list[OCRWord]:
        """Take the OCR words recorded for the next occurrence of a line."""
        queue = self.line_words.get(line)
        return queue.popleft() if queue else []

    def overflow_team(self, line: str) -> ParsedTeam:
        """Pick the team for a row carrying only one column of fields."""
        if self.layout.is_right_column(self.words_for(line)):
            log.debug("Einspaltige Zeile rechts -> Team B: %s", line)
            return self.team_b
        return self.team_a


# =============================================================================
# Line classification
# =============================================================================

def _is_officials_header(line: str) -> bool:
    upper = line.upper()
    return 'OFFICIAL MEMBERS' in upper or 'ADMITTED ON THE BENCH' in upper


def _is_signatures_marker(line: str) -> bool:
    upper = line.upper()
    return 'SIGNATURES' in upper or 'TEAM CAPTAIN' in upper


def _is_libero_marker(line: str, parts: list[str]) -> bool:
    return 'LIBERO' in line.upper() and len(parts) <= 2


def _is_section_header(line: str) -> bool:
    upper = line.upper()
    return 'LIBERO' in upper or 'N.' in upper or 'NAME OF THE PLAYER' in upper


def is_official_role(role: str) -> bool:
    return role.strip().upper() in OFFICIAL_ROLES


# =============================================================================
# Player list start and team names
# =============================================================================

class PlayerListStart(NamedTuple):
    start_index: int
    team_names_index: int


def _has_alpha_content(parts: list[str]) -> bool:
    return any(_ALPHA_RE.search(p) for p in parts)


def _find_team_names_index(lines: list[str], header_index: int) -> int:
    min_index = max(0, header_index - TEAM_NAME_LOOKBACK)
    for j in range(header_index - 1, min_index - 1, -1):
        parts = [p for p in lines[j].split('\t') if p.strip()]
        if len(parts) >= 2 and _has_alpha_content(parts):
            return j
    return -1


def _is_player_data_line(line: str) -> bool:
    """Check for ``Number<tab>UPPERCASE NAME`` rows."""
    parts = line.split('\t')
    if len(parts) < MIN_PARTS_TEAM_A:
        return False

    first = parts[0].strip()
    if not _SHIRT_NUMBER_RE.match(first) or not 1 <= int(first) <= MAX_SHIRT_NUMBER:
        return False

    second = parts[1].strip()
    return bool(_UPPERCASE_NAME_RE.match(second)) and len(second) > MIN_ALPHA_LENGTH


def find_player_list_start(lines: list[str]) -> PlayerListStart:
    """Locate the first player row and the line holding the team names.

    Score and set tables above the player list are skipped. The column
    header row (``N.`` / ``Name of the player``) marks the start; without it
    the first row shaped like player data does.
    """
    for i, line in enumerate(lines):
        upper = line.upper()
        if 'NAME OF THE PLAYER' in upper or ('N.' in upper and 'NAME' in upper):
            return PlayerListStart(i + 1, _find_team_names_index(lines, i))

    for i, line in enumerate(lines):
        if _is_player_data_line(line):
            return PlayerListStart(i, i - 1)

    return PlayerListStart(0, -1)


def clean_team_name(name: str) -> str:
    """Strip the ``A``/``B`` side marker printed before team names."""
    return _TEAM_SIDE_PREFIX_RE.sub('', name).strip()


def extract_team_names(lines: list[str], team_names_index: int) -> tuple[str, str]:
    if team_names_index < 0 or team_names_index >= len(lines):
        return '', ''

    names = [p.strip() for p in lines[team_names_index].split('\t') if p.strip()]
    if len(names) >= 2:
        return clean_team_name(names[0]), clean_team_name(names[1])
    if len(names) == 1:
        return clean_team_name(names[0]), ''
    return '', ''


# =============================================================================
# Row parsers
# =============================================================================

def _field(parts: list[str], idx: int) -> str:
    return parts[idx] if idx < len(parts) else ''


def parse_libero_entry(entry: str) -> tuple[Optional[int], str]:
    """Split a libero cell ``"12 LASTNAME FIRSTNAME"`` into number and name."""
    if not entry or not isinstance(entry, str):
        return None, ''

    trimmed = entry.strip()
    match = _LIBERO_ENTRY_RE.match(trimmed)
    if not match:
        return None, trimmed

    number = int(match.group(1))
    if not 1 <= number <= MAX_SHIRT_NUMBER:
        number = None
    return number, match.group(2).strip()


def _libero_marker_number(marker: str) -> Optional[int]:
    """Read the shirt number printed inside a libero marker cell (``L1 10``)."""
    match = _LIBERO_MARKER_RE.match(marker.strip())
    if not match:
        return None
    number = int(match.group(1))
    return number if 1 <= number <= MAX_SHIRT_NUMBER else None


def _build_player(
    number: Optional[int],
    raw_name: str,
    license_status: str,
) -> Optional[ParsedPlayer]:
    parsed = parse_player_name(raw_name)
    if not parsed.display_name:
        return None
    return ParsedPlayer(
        shirt_number=number,
        last_name=parsed.last_name,
        first_name=parsed.first_name,
        display_name=parsed.display_name,
        raw_name=raw_name,
        license_status=license_status,
    )


def _player_from_parts(parts: list[str], start: int) -> Optional[ParsedPlayer]:
    number_str = _field(parts, start)
    name = _field(parts, start + 1)
    if not number_str or not name:
        return None

    match = _LEADING_NUMBER_RE.match(number_str)
    if not match:
        return None
    number = int(match.group(1))
    if not 1 <= number <= MAX_SHIRT_NUMBER:
        number = None

    return _build_player(number, name, _field(parts, start + 2))


def _libero_from_parts(
    parts: list[str],
    marker_idx: int,
    entry_idx: int,
    license_idx: int,
) -> Optional[ParsedPlayer]:
    entry = _field(parts, entry_idx)
    if not entry:
        return None

    number, name = parse_libero_entry(entry)
    if number is None:
        number = _libero_marker_number(_field(parts, marker_idx))
    if not name:
        return None

    return _build_player(number, name, _field(parts, license_idx))


def _official_from_parts(
    parts: list[str],
    role_idx: int,
    name_idx: int,
) -> Optional[ParsedOfficial]:
    role = _field(parts, role_idx)
    name = _field(parts, name_idx)
    if not role or not name or not is_official_role(role):
        return None

    parsed = parse_official_name(name)
    if not parsed.display_name:
        return None
    return ParsedOfficial(
        role=role.strip().upper(),
        last_name=parsed.last_name,
        first_name=parsed.first_name,
        display_name=parsed.display_name,
        raw_name=name,
    )


def _append(target: list, entry: ParsedPlayer | ParsedOfficial | None) -> None:
    if entry is not None:
        target.append(entry)


# =============================================================================
# State machine
# =============================================================================

def _header_transition(state: ParserState, line: str, parts: list[str]) -> Section:
    if state.header_rows_parsed == 0 and not _is_section_header(line):
        names = [p for p in parts if p]
        if len(names) >= 2:
            state.team_a.name = clean_team_name(names[0])
            state.team_b.name = clean_team_name(names[1])
        elif names:
            state.team_a.name = clean_team_name(names[0])
        state.header_rows_parsed += 1
        return Section.HEADER

    if _is_section_header(line):
        return Section.PLAYERS

    state.header_rows_parsed += 1
    return Section.PLAYERS if state.header_rows_parsed > MAX_HEADER_ROWS else Section.HEADER


def next_section(state: ParserState, line: str, parts: list[str]) -> tuple[Section, bool]:
    """Transition function of the parser.

    Sections only move forward; ``DONE`` is terminal.

    Args:
        state: Current parser state.
        line: Trimmed OCR line.
        parts: Tab-separated fields of the line.

    Returns:
        Tuple of the new section and whether the line was consumed as a
        marker or header row (and must not be handled as data).
    """
    current = state.section
    if current is Section.DONE:
        return current, True
    if _is_signatures_marker(line):
        return Section.DONE, True
    if _is_officials_header(line):
        return max(current, Section.OFFICIALS), True
    if _is_libero_marker(line, parts):
        return max(current, Section.LIBERO), True
    if current is Section.HEADER:
        return _header_transition(state, line, parts), True
    return current, False


def _handle_players(state: ParserState, line: str, parts: list[str]) -> None:
    if len(parts) < MIN_PARTS_TEAM_A:
        return
    if len(parts) >= MIN_PARTS_TEAM_B:
        _append(state.team_a.players, _player_from_parts(parts, 0))
        _append(state.team_b.players, _player_from_parts(parts, TEAM_B_OFFSET))
        return
    _append(state.overflow_team(line).players, _player_from_parts(parts, 0))


def _handle_libero(state: ParserState, line: str, parts: list[str]) -> None:
    if len(parts) < MIN_PARTS_TEAM_A:
        return
    if len(parts) >= MIN_PARTS_TEAM_B:
        _append(state.team_a.players, _libero_from_parts(
            parts, LIBERO_A_MARKER_IDX, LIBERO_A_ENTRY_IDX, LIBERO_A_LICENSE_IDX))
        _append(state.team_b.players, _libero_from_parts(
            parts, LIBERO_B_MARKER_IDX, LIBERO_B_ENTRY_IDX, LIBERO_B_LICENSE_IDX))
        return
    _append(state.overflow_team(line).players, _libero_from_parts(
        parts, LIBERO_A_MARKER_IDX, LIBERO_A_ENTRY_IDX, LIBERO_A_LICENSE_IDX))


def _handle_officials(state: ParserState, line: str, parts: list[str]) -> None:
    if len(parts) < MIN_PARTS_OFFICIAL_A:
        return
    if len(parts) >= MIN_PARTS_OFFICIAL_B:
        _append(state.team_a.officials, _official_from_parts(
            parts, OFFICIAL_A_ROLE_IDX, OFFICIAL_A_NAME_IDX))
        _append(state.team_b.officials, _official_from_parts(
            parts, OFFICIAL_B_ROLE_IDX, OFFICIAL_B_NAME_IDX))
        return
    _append(state.overflow_team(line).officials, _official_from_parts(
        parts, OFFICIAL_A_ROLE_IDX, OFFICIAL_A_NAME_IDX))


_SECTION_HANDLERS: dict[Section, Callable[[ParserState, str, list[str]], None]] = {
    Section.PLAYERS: _handle_players,
    Section.LIBERO: _handle_libero,
    Section.OFFICIALS: _handle_officials,
}


def process_line(state: ParserState, line: str) -> None:
    """Feed one trimmed, non-empty line through the state machine."""
    parts = [p.strip() for p in line.split('\t')]
    section, consumed = next_section(state, line, parts)
    if section is not state.section:
        log.debug("Abschnitt %s -> %s", state.section.name, section.name)
        state.section = section
    if consumed:
        return

    handler = _SECTION_HANDLERS.get(state.section)
    if handler is not None:
        handler(state, line, parts)


# =============================================================================
# Entry points
# =============================================================================

def _parse_text(ocr_text: str, state: ParserState, warnings: list[str]) -> ParsedGameSheet:
    if not ocr_text or not isinstance(ocr_text, str):
        warnings.append(NO_TEXT_WARNING)
        return ParsedGameSheet(state.team_a, state.team_b, warnings)

    all_lines = [line.strip() for line in ocr_text.split('\n') if line.strip()]

    start = find_player_list_start(all_lines)
    if start.start_index > 0:
        warnings.append(
            f'Skipped {start.start_index} lines of non-player data (score/set information)'
        )

    team_a_name, team_b_name = extract_team_names(all_lines, start.team_names_index)
    state.team_a.name = team_a_name
    state.team_b.name = team_b_name

    lines = all_lines[start.start_index:]
    if not lines:
        warnings.append(NO_LINES_WARNING)
        return ParsedGameSheet(state.team_a, state.team_b, warnings)

    if team_a_name or team_b_name or _is_player_data_line(lines[0]):
        state.section = Section.PLAYERS

    for line in lines:
        process_line(state, line)

    warnings.extend(missing_roster_warnings(state.team_a, state.team_b, 'OFFICIAL MEMBERS'))

    log.info(
        "Elektronisches Matchblatt gelesen: %d/%d Spieler, %d/%d Offizielle",
        len(state.team_a.players), len(state.team_b.players),
        len(state.team_a.officials), len(state.team_b.officials),
    )
    return ParsedGameSheet(state.team_a, state.team_b, warnings)


def parse_game_sheet(ocr_text: str) -> ParsedGameSheet:
    """Parse the OCR text of an electronic scoresheet.

    Args:
        ocr_text: Tab-separated OCR text.

    Returns:
        ParsedGameSheet; problems are reported in ``warnings``, never raised.
    """
    return _parse_text(ocr_text, ParserState(), [])


def parse_game_sheet_with_ocr(ocr_result: OCRResult) -> ParsedGameSheet:
    """Parse an electronic scoresheet using word bounding boxes when present.

    Bounding boxes only decide which team a single-column row belongs to.
    Without boxes, or with estimated ones, the text-only parser runs and a
    warning is added.

    Args:
        ocr_result: Full OCR result with lines and words.

    Returns:
        ParsedGameSheet.
    """
    if not isinstance(ocr_result, OCRResult):
        return parse_game_sheet('')

    lines = [line for line in ocr_result.lines if line.words]
    full_text = ocr_result.full_text or '\n'.join(line.text for line in ocr_result.lines)

    if not lines:
        return _parse_text(full_text, ParserState(), [TEXT_ONLY_WARNING])
    if not ocr_result.has_precise_bounding_boxes:
        return _parse_text(full_text, ParserState(), [ESTIMATED_BOXES_WARNING])

    layout = ColumnLayout.from_lines(lines)
    warnings: list[str] = []
    if not layout.is_known:
        warnings.append(NO_COLUMN_BOUNDARY_WARNING)

    state = ParserState(layout=layout, line_words=_index_line_words(lines))
    return _parse_text(full_text, state, warnings)


def get_all_players(team: ParsedTeam) -> list[ParsedPlayer]:
    """All players of a team, liberos included."""
    return team.players


def get_all_officials(team: ParsedTeam) -> list[ParsedOfficial]:
    return team.officials
