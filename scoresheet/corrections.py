"""Character substitution tables for common OCR misreads."""

import re
from types import MappingProxyType

MAX_SHIRT_NUMBER = 99

_SHIRT_NUMBER_RE = re.compile(r'[0-9]{1,2}')

# Letters the OCR engine tends to return where a digit was written
DIGIT_CORRECTIONS = MappingProxyType({
    'O': '0', 'o': '0', 'Q': '0', 'D': '0',
    'I': '1', 'l': '1', 'i': '1', '|': '1',
    'Z': '2', 'z': '2',
    'E': '3',
    'A': '4',
    'S': '5', 's': '5',
    'G': '6', 'b': '6',
    'T': '7',
    'B': '8',
    'g': '9', 'q': '9',
})

# Digits and symbols the OCR engine tends to return where a letter was written
LETTER_CORRECTIONS = MappingProxyType({
    '0': 'O',
    '1': 'I',
    '|': 'I',
    '5': 'S',
    '8': 'B',
    '@': 'A',
    '&': 'A',
    '€': 'E',
    '£': 'L',
    '¢': 'C',
})


def correct_digits(text: str) -> str:
    """Replace characters commonly misread for digits."""
    return ''.join(DIGIT_CORRECTIONS.get(ch, ch) for ch in text)


def correct_letters(text: str) -> str:
    """Replace characters commonly misread for letters."""
    return ''.join(LETTER_CORRECTIONS.get(ch, ch) for ch in text)


def extract_shirt_number(text: str) -> int | None:
    """Extract a valid shirt number from an OCR token.

    Applies digit corrections first, so ``'l2'`` reads as 12 and ``'O1'``
    as 1.

    Args:
        text: Raw OCR token.

    Returns:
        Shirt number between 1 and MAX_SHIRT_NUMBER, or None.
    """
    if not text or not isinstance(text, str):
        return None

    corrected = correct_digits(text.strip())
    if not _SHIRT_NUMBER_RE.fullmatch(corrected):
        return None

    number = int(corrected)
    if 1 <= number <= MAX_SHIRT_NUMBER:
        return number
    return None
