"""Core module for scoresheet-ocr."""

from dataclasses import dataclass, field
from typing import Optional, Union

# Official roles printed on the team bench list
OFFICIAL_ROLES = frozenset({'C', 'AC', 'AC2', 'AC3', 'AC4'})
MEDICAL_ROLE = 'M'
EXTENDED_OFFICIAL_ROLES = OFFICIAL_ROLES | {MEDICAL_ROLE}

# Comparison statuses
MATCH = 'match'
OCR_ONLY = 'ocr-only'
ROSTER_ONLY = 'roster-only'


@dataclass
class OCRBoundingBox:
    """Pixel coordinates of a recognized word."""

    x0: float
    y0: float
    x1: float
    y1: float


@dataclass
class OCRWord:
    """A single word recognized by the OCR engine."""

    text: str
    confidence: float     # 0 – 100
    bbox: OCRBoundingBox


@dataclass
class OCRLine:
    """A line of recognized text with its words."""

    text: str
    confidence: float
    words: list[OCRWord] = field(default_factory=list)


@dataclass
class OCRResult:
    """Complete output of the OCR engine for one image."""

    full_text: str
    lines: list[OCRLine] = field(default_factory=list)
    words: list[OCRWord] = field(default_factory=list)
    has_precise_bounding_boxes: bool = True


@dataclass
class ParsedPlayer:
    """A player row read from a scoresheet."""

    shirt_number: Optional[int]   # 1 – 99
    last_name: str
    first_name: str
    display_name: str
    raw_name: str
    license_status: str = ''
    birth_date: Optional[str] = None  # DD.MM.YY(YY), Swiss manuscript sheets only


@dataclass
class ParsedOfficial:
    """A team official (coach, assistant, medical) read from a scoresheet."""

    role: str
    last_name: str
    first_name: str
    display_name: str
    raw_name: str


@dataclass
class ParsedTeam:
    """One team's roster as read from the sheet."""

    name: str = ''
    players: list[ParsedPlayer] = field(default_factory=list)
    officials: list[ParsedOfficial] = field(default_factory=list)


@dataclass
class ParsedGameSheet:
    """Both teams of a scoresheet plus parsing diagnostics."""

    team_a: ParsedTeam = field(default_factory=ParsedTeam)
    team_b: ParsedTeam = field(default_factory=ParsedTeam)
    warnings: list[str] = field(default_factory=list)


@dataclass
class RosterPlayer:
    """A known roster entry to compare OCR output against."""

    id: str
    display_name: str
    first_name: str = ''
    last_name: str = ''


@dataclass
class ComparisonResult:
    """Outcome of comparing one OCR entry or roster entry."""

    status: str           # match, ocr-only, roster-only
    ocr_player: Optional[Union[ParsedPlayer, ParsedOfficial]]
    roster_player_id: Optional[str]
    roster_player_name: Optional[str]
    confidence: int       # 0 – 100


@dataclass
class TeamComparisonResult:
    """Comparison of one OCR team against its roster."""

    ocr_team_name: str
    roster_team_name: str
    player_results: list[ComparisonResult] = field(default_factory=list)
    counts: dict[str, int] = field(default_factory=dict)
