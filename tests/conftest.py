"""Shared test fixtures."""

from pathlib import Path

import pytest

from scoresheet.reader import read_ocr_result, read_ocr_text, read_roster


DATA_DIR = Path(__file__).resolve().parent.parent / 'data'


@pytest.fixture(scope='session')
def data_dir() -> Path:
    """Path to the data directory."""
    return DATA_DIR


@pytest.fixture(scope='session')
def electronic_text() -> str:
    """OCR text of an electronic scoresheet with score table, libero and officials."""
    return read_ocr_text(DATA_DIR / 'electronic_sheet.txt')


@pytest.fixture(scope='session')
def electronic_ocr():
    """OCR result with word bounding boxes and a Team B overflow row."""
    return read_ocr_result(DATA_DIR / 'electronic_ocr.json')


@pytest.fixture(scope='session')
def manuscript_text() -> str:
    """OCR text of a sequential handwritten scoresheet."""
    return read_ocr_text(DATA_DIR / 'manuscript_sheet.txt')


@pytest.fixture(scope='session')
def swiss_text() -> str:
    """OCR text of a Swiss two-column handwritten scoresheet."""
    return read_ocr_text(DATA_DIR / 'swiss_manuscript.txt')


@pytest.fixture(scope='session')
def heimteam_roster():
    """Roster of VBC Heimteam."""
    return read_roster(DATA_DIR / 'roster_heimteam.csv')
