"""Heuristics for re-splitting OCR fields that were read without separators.

Handwritten sheets often have no visible gap between neighbouring entries of
a column, so the OCR engine returns ``"S. AngeliL. Collier"`` or
``"20.2.9721.1.97"``. The functions here split such runs back into entries.
They are best effort and never raise.
"""

import re

MIN_NAME_LENGTH = 2

_SPLIT_MARKER = '\x00'

# "AngeliL. Collier": initial with dot right after a lowercase letter
_INITIAL_BOUNDARY_RE = re.compile(r'(?<=[a-zß-ÿ])(?=[A-ZÀ-Þ]\.)')
# "SuterAnna": uppercase letter right after a lowercase letter
_CAMEL_BOUNDARY_RE = re.compile(r'(?<=[a-zß-ÿ])(?=[A-ZÀ-Þ])')

_DAY = r'(?:0?[1-9]|[12]\d|3[01])'
_MONTH = r'(?:0?[1-9]|1[0-2])'
# A four-digit year directly followed by a dot is really a two-digit year
# plus the next day, so it is rejected.
_DATE_LONG_YEAR_RE = re.compile(rf'{_DAY}\.{_MONTH}\.(?:19|20)\d{{2}}(?!\.)')
_DATE_SHORT_YEAR_RE = re.compile(rf'{_DAY}\.{_MONTH}\.\d{{2}}')

_NON_DIGIT_RE = re.compile(r'\D')


def split_concatenated_names(text: str) -> list[str]:
    """Split names that OCR joined without a separator.

    Examples:
        >>> split_concatenated_names('S. AngeliL. CollierO. Follouier')
        ['S. Angeli', 'L. Collier', 'O. Follouier']

    Args:
        text: OCR text of one name cell.

    Returns:
        Names in reading order; fragments shorter than MIN_NAME_LENGTH are
        dropped.
    """
    if not text or not isinstance(text, str) or not text.strip():
        return []

    marked = _INITIAL_BOUNDARY_RE.sub(_SPLIT_MARKER, text)
    marked = _CAMEL_BOUNDARY_RE.sub(_SPLIT_MARKER, marked)

    names = [part.strip() for part in marked.split(_SPLIT_MARKER)]
    return [n for n in names if len(n) >= MIN_NAME_LENGTH]


def split_concatenated_dates(text: str) -> list[str]:
    """Split birth dates that OCR joined without a separator.

    Scans left to right. At each position a date with a four-digit year is
    tried first, then one with a two-digit year; without a match the scan
    moves on by one character. The loop is bounded by the input length.

    Examples:
        >>> split_concatenated_dates('20.2.9721.1.9713.1.97')
        ['20.2.97', '21.1.97', '13.1.97']
    """
    if not text or not isinstance(text, str):
        return []

    dates: list[str] = []
    pos = 0
    while pos < len(text):
        match = _DATE_LONG_YEAR_RE.match(text, pos) or _DATE_SHORT_YEAR_RE.match(text, pos)
        if match:
            dates.append(match.group())
            pos = match.end()
        else:
            pos += 1
    return dates


def split_concatenated_numbers(text: str, expected_count: int | None = None) -> list[int]:
    """Split a run of jersey numbers that OCR joined without a separator.

    The grouping is ambiguous (``"123"`` may be 1/23, 12/3 or 1/2/3) and this
    heuristic does not resolve that reliably. Single digits are preferred
    since most jersey numbers are below 20. A zero at the start of a group is
    dropped as noise. Two digits are grouped when the following digit is a
    zero, or when ``expected_count`` shows that singles would yield too many
    numbers.

    Args:
        text: OCR text of the number cell.
        expected_count: Number of players the numbers belong to, if known.

    Returns:
        Numbers in reading order.
    """
    if not text or not isinstance(text, str):
        return []

    digits = _NON_DIGIT_RE.sub('', text)
    numbers: list[int] = []
    i = 0
    while i < len(digits):
        if expected_count is not None and len(numbers) >= expected_count:
            break

        if digits[i] == '0':
            i += 1
            continue

        remaining = len(digits) - i
        has_pair = remaining >= 2

        if expected_count is not None:
            still_needed = expected_count - len(numbers)
            if remaining <= still_needed or not has_pair:
                numbers.append(int(digits[i]))
                i += 1
            else:
                numbers.append(int(digits[i:i + 2]))
                i += 2
            continue

        if has_pair and digits[i + 1] == '0':
            numbers.append(int(digits[i:i + 2]))
            i += 2
        else:
            numbers.append(int(digits[i]))
            i += 1

    return numbers
