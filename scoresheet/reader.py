"""Readers for OCR output files and roster CSVs with encoding detection."""

import csv
import io
import json
import logging
import re
from pathlib import Path

from scoresheet import OCRBoundingBox, OCRLine, OCRResult, OCRWord, RosterPlayer

log = logging.getLogger(__name__)

# Matches any sequence of whitespace (including Unicode whitespace like U+2006)
_WHITESPACE_RE = re.compile(r'\s+')

ROSTER_REQUIRED_COLUMNS = {'ID', 'First Name', 'Last Name'}


def detect_encoding(path: Path) -> str:
    """Detect file encoding by checking for BOM bytes.

    Args:
        path: Path to the input file.

    Returns:
        Encoding string suitable for open().
    """
    with open(path, 'rb') as f:
        bom = f.read(2)
    if bom == b'\xff\xfe':
        return 'utf-16-le'
    return 'utf-8-sig'


def normalize_whitespace(value: str) -> str:
    """Collapse any whitespace run into one space and strip the ends."""
    if not value:
        return ''
    return _WHITESPACE_RE.sub(' ', value).strip()


def _read_text(path: Path) -> str:
    with open(path, 'r', encoding=detect_encoding(path)) as f:
        content = f.read()
    return content.lstrip('\ufeff')


def read_ocr_text(path: str | Path) -> str:
    """Read the plain OCR text of a scoresheet.

    Tabs and line breaks are kept, the parsers rely on them. Windows line
    endings are converted.

    Raises:
        FileNotFoundError: If the file does not exist.
    """
    path = Path(path)
    text = _read_text(path).replace('\r\n', '\n').replace('\r', '\n')
    log.info("OCR-Text gelesen aus %s (%d Zeilen)", path, text.count('\n') + 1)
    return text


def _parse_bbox(data: dict) -> OCRBoundingBox:
    return OCRBoundingBox(
        x0=float(data['x0']),
        y0=float(data['y0']),
        x1=float(data['x1']),
        y1=float(data['y1']),
    )


def _parse_word(data: dict) -> OCRWord:
    return OCRWord(
        text=str(data['text']),
        confidence=float(data.get('confidence', 0)),
        bbox=_parse_bbox(data['bbox']),
    )


def _parse_words(items: list, source: str) -> list[OCRWord]:
    words: list[OCRWord] = []
    for idx, item in enumerate(items or []):
        try:
            words.append(_parse_word(item))
        except (KeyError, TypeError, ValueError) as exc:
            log.warning("Wort %d in %s uebersprungen: %s", idx, source, exc)
    return words


def read_ocr_result(path: str | Path) -> OCRResult:
    """Read an OCR engine result stored as JSON.

    Expected keys: ``fullText``, ``lines`` (each with ``text``,
    ``confidence`` and ``words``), optional ``words`` and
    ``hasPreciseBoundingBoxes``. Words carry ``bbox`` with x0/y0/x1/y1.
    Malformed words are logged and skipped.

    Args:
        path: Path to the JSON file.

    Returns:
        OCRResult.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file is not valid JSON or lacks ``fullText``.
    """
    path = Path(path)
    try:
        data = json.loads(_read_text(path))
    except json.JSONDecodeError as exc:
        raise ValueError(f"Datei {path} enthaelt kein gueltiges JSON: {exc}") from exc

    if not isinstance(data, dict) or 'fullText' not in data:
        raise ValueError(f"Datei {path} enthaelt kein Feld 'fullText'.")

    lines: list[OCRLine] = []
    for idx, item in enumerate(data.get('lines') or []):
        if not isinstance(item, dict) or 'text' not in item:
            log.warning("Zeile %d in %s uebersprungen: kein Text", idx, path)
            continue
        lines.append(OCRLine(
            text=str(item['text']),
            confidence=float(item.get('confidence', 0)),
            words=_parse_words(item.get('words'), f'{path} Zeile {idx}'),
        ))

    words = _parse_words(data.get('words'), str(path))
    if not words:
        words = [w for line in lines for w in line.words]

    result = OCRResult(
        full_text=str(data['fullText'] or ''),
        lines=lines,
        words=words,
        has_precise_bounding_boxes=bool(data.get('hasPreciseBoundingBoxes', True)),
    )
    log.info("OCR-Ergebnis gelesen aus %s: %d Zeilen, %d Woerter", path, len(lines), len(words))
    return result


def read_roster(path: str | Path) -> list[RosterPlayer]:
    """Read a team roster from a tab-separated CSV file.

    Handles UTF-16LE (with BOM) and UTF-8 encoded files automatically.
    Fields are trimmed and whitespace-normalized. Without a ``Display Name``
    column the display name is ``"First Last"``.

    Args:
        path: Path to the CSV file.

    Returns:
        List of RosterPlayer objects.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If required columns are missing.
    """
    path = Path(path)
    reader = csv.DictReader(io.StringIO(_read_text(path)), delimiter='\t')

    if reader.fieldnames is None:
        raise ValueError(f"Datei {path} ist leer oder hat keine Header-Zeile.")
    actual_cols = {normalize_whitespace(c) for c in reader.fieldnames}
    missing = ROSTER_REQUIRED_COLUMNS - actual_cols
    if missing:
        raise ValueError(
            f"Fehlende Spalten in {path}: {', '.join(sorted(missing))}"
        )

    players: list[RosterPlayer] = []
    for row_num, row in enumerate(reader, start=2):
        cleaned = {normalize_whitespace(k): normalize_whitespace(v)
                   for k, v in row.items() if k is not None}
        player_id = cleaned.get('ID', '')
        first_name = cleaned.get('First Name', '')
        last_name = cleaned.get('Last Name', '')
        display_name = cleaned.get('Display Name') or f'{first_name} {last_name}'.strip()

        if not player_id or not display_name:
            log.warning("Zeile %d in %s uebersprungen: ID oder Name fehlt", row_num, path)
            continue
        players.append(RosterPlayer(
            id=player_id,
            display_name=display_name,
            first_name=first_name,
            last_name=last_name,
        ))

    log.info("%d Kadereintraege gelesen aus %s", len(players), path)
    return players
