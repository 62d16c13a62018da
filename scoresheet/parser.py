"""Entry point routing OCR output to the parser for the scoresheet type."""

import logging
from typing import Optional

from scoresheet import OFFICIAL_ROLES, OCRResult, ParsedGameSheet
from scoresheet.electronic import parse_game_sheet, parse_game_sheet_with_ocr
from scoresheet.manuscript import parse_manuscript_sheet

log = logging.getLogger(__name__)

ELECTRONIC = 'electronic'
MANUSCRIPT = 'manuscript'
SCORESHEET_TYPES = (ELECTRONIC, MANUSCRIPT)
DEFAULT_SCORESHEET_TYPE = ELECTRONIC

UNKNOWN_TYPE_WARNING = "Unknown scoresheet type '{type}' - parsed as electronic scoresheet"


def _resolve_type(scoresheet_type: Optional[str]) -> tuple[str, list[str]]:
    if scoresheet_type is None:
        return DEFAULT_SCORESHEET_TYPE, []
    if scoresheet_type in SCORESHEET_TYPES:
        return scoresheet_type, []
    log.warning("Unbekannter Matchblatt-Typ: %s", scoresheet_type)
    return DEFAULT_SCORESHEET_TYPE, [UNKNOWN_TYPE_WARNING.format(type=scoresheet_type)]


def parse_game_sheet_with_type(
    ocr_text: str,
    scoresheet_type: Optional[str] = None,
    roles: frozenset[str] = OFFICIAL_ROLES,
) -> ParsedGameSheet:
    """Parse OCR text with the parser for the given scoresheet type.

    There is no detection between electronic and manuscript sheets here; the
    type comes from the caller and defaults to electronic.

    Args:
        ocr_text: Raw OCR text.
        scoresheet_type: ``'electronic'``, ``'manuscript'`` or None.
        roles: Accepted official role codes for manuscript sheets.

    Returns:
        ParsedGameSheet. An unknown type is parsed as electronic with a warning.
    """
    resolved, warnings = _resolve_type(scoresheet_type)
    if resolved == MANUSCRIPT:
        sheet = parse_manuscript_sheet(ocr_text, roles)
    else:
        sheet = parse_game_sheet(ocr_text)
    sheet.warnings[:0] = warnings
    return sheet


def parse_ocr_result(
    ocr_result: OCRResult,
    scoresheet_type: Optional[str] = None,
    roles: frozenset[str] = OFFICIAL_ROLES,
) -> ParsedGameSheet:
    """Same as ``parse_game_sheet_with_type`` for a complete OCR result.

    Electronic sheets use the word bounding boxes for column assignment.
    """
    resolved, warnings = _resolve_type(scoresheet_type)
    if resolved == MANUSCRIPT:
        text = ocr_result.full_text if isinstance(ocr_result, OCRResult) else ''
        sheet = parse_manuscript_sheet(text, roles)
    else:
        sheet = parse_game_sheet_with_ocr(ocr_result)
    sheet.warnings[:0] = warnings
    return sheet
