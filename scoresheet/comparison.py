"""Comparison of OCR-extracted players and officials against a known roster.

Entries are matched by name only, shirt numbers are not available in roster
data. Scores use a 0 – 100 scale.
"""

import logging
import re
import unicodedata
from typing import Iterable, Union

from rapidfuzz.distance import JaroWinkler

from scoresheet import (
    MATCH,
    OCR_ONLY,
    ROSTER_ONLY,
    ComparisonResult,
    ParsedOfficial,
    ParsedPlayer,
    RosterPlayer,
    TeamComparisonResult,
)

log = logging.getLogger(__name__)

MATCH_THRESHOLD = 50
MAX_CONFIDENCE = 100

LAST_NAME_WEIGHT = 0.6
FIRST_NAME_WEIGHT = 0.4

CONTAINED_MATCH_SCORE = 90
WORD_OVERLAP_MATCH_SCORE = 85
WORD_ORDER_MATCH_SCORE = 95

# Per-word similarity (0–1 scale) in the order-independent comparison
PREFIX_WORD_SIMILARITY = 0.9
MIN_PREFIX_LENGTH = 3
FUZZY_WORD_THRESHOLD = 0.9

_NON_ALNUM_RE = re.compile(r'[^a-z0-9\s]')
_WHITESPACE_RE = re.compile(r'\s+')

OCREntry = Union[ParsedPlayer, ParsedOfficial]


# =============================================================================
# Name similarity
# =============================================================================

def normalize_for_comparison(text: str) -> str:
    """Normalize a name for comparison.

    Lowercases, removes accents via NFD decomposition, drops everything that
    is not a letter, digit or space and collapses whitespace.

    Args:
        text: Raw name string.

    Returns:
        Normalized string, '' for empty or non-string input.
    """
    if not text or not isinstance(text, str):
        return ''
    decomposed = unicodedata.normalize('NFD', text.lower())
    stripped = ''.join(ch for ch in decomposed if unicodedata.category(ch) != 'Mn')
    stripped = _NON_ALNUM_RE.sub('', stripped)
    return _WHITESPACE_RE.sub(' ', stripped).strip()


def calculate_name_similarity(name1: str, name2: str) -> int:
    """Similarity of two name parts (0 – 100).

    Equal names score 100. If one name contains the other the score is the
    length ratio scaled to CONTAINED_MATCH_SCORE, otherwise the share of
    overlapping words scaled to WORD_OVERLAP_MATCH_SCORE.
    """
    n1 = normalize_for_comparison(name1)
    n2 = normalize_for_comparison(name2)
    if not n1 or not n2:
        return 0
    if n1 == n2:
        return MAX_CONFIDENCE

    if n1 in n2 or n2 in n1:
        shorter, longer = sorted((n1, n2), key=len)
        return round(len(shorter) / len(longer) * CONTAINED_MATCH_SCORE)

    words1 = [w for w in n1.split(' ') if len(w) > 1]
    words2 = [w for w in n2.split(' ') if len(w) > 1]
    total_words = max(len(words1), len(words2))
    if total_words == 0:
        return 0

    matching = sum(
        1 for w1 in words1
        if any(w1 == w2 or w1 in w2 or w2 in w1 for w2 in words2)
    )
    return round(matching / total_words * WORD_OVERLAP_MATCH_SCORE)


def _word_similarity(word1: str, word2: str) -> float:
    if word1 == word2:
        return 1.0
    if min(len(word1), len(word2)) >= MIN_PREFIX_LENGTH and (
        word1.startswith(word2) or word2.startswith(word1)
    ):
        return PREFIX_WORD_SIMILARITY
    similarity = JaroWinkler.similarity(word1, word2)
    return similarity if similarity >= FUZZY_WORD_THRESHOLD else 0.0


def calculate_word_order_independent_similarity(name1: str, name2: str) -> int:
    """Similarity of two full names regardless of word order (0 – 100).

    Every word of ``name1`` is aligned with its most similar unused word of
    ``name2``. Used for first/last name swaps (``"Anna Müller"`` vs.
    ``"Müller Anna"``).

    Args:
        name1: First full name.
        name2: Second full name.

    Returns:
        100 for equal normalized names, otherwise the summed word
        similarities divided by the larger word count, scaled to
        WORD_ORDER_MATCH_SCORE.
    """
    n1 = normalize_for_comparison(name1)
    n2 = normalize_for_comparison(name2)
    if not n1 or not n2:
        return 0
    if n1 == n2:
        return MAX_CONFIDENCE

    words1 = n1.split(' ')
    remaining = n2.split(' ')
    total_words = max(len(words1), len(remaining))

    score = 0.0
    for word in words1:
        best_similarity = 0.0
        best_idx = None
        for idx, candidate in enumerate(remaining):
            similarity = _word_similarity(word, candidate)
            if similarity > best_similarity:
                best_similarity = similarity
                best_idx = idx
        if best_idx is not None:
            score += best_similarity
            del remaining[best_idx]

    return round(score / total_words * WORD_ORDER_MATCH_SCORE)


def _roster_name_parts(roster_player: RosterPlayer) -> tuple[str, str]:
    """Last and first name of a roster entry, split from the display name if absent."""
    if roster_player.last_name or roster_player.first_name:
        return roster_player.last_name, roster_player.first_name
    parts = (roster_player.display_name or '').split()
    if not parts:
        return '', ''
    return parts[-1], ' '.join(parts[:-1])


def calculate_entity_confidence(ocr_entry: OCREntry, roster_player: RosterPlayer) -> int:
    """Confidence (0 – 100) that an OCR entry and a roster entry are the same person.

    The higher of the weighted last/first name similarity and the
    order-independent similarity of the full names.
    """
    last_name, first_name = _roster_name_parts(roster_player)
    weighted = (
        calculate_name_similarity(ocr_entry.last_name, last_name) * LAST_NAME_WEIGHT
        + calculate_name_similarity(ocr_entry.first_name, first_name) * FIRST_NAME_WEIGHT
    )
    order_free = calculate_word_order_independent_similarity(
        ocr_entry.display_name, roster_player.display_name,
    )
    return min(MAX_CONFIDENCE, round(max(weighted, order_free)))


# =============================================================================
# Roster comparison
# =============================================================================

def compare_rosters(
    ocr_entries: Iterable[OCREntry],
    roster_players: Iterable[RosterPlayer],
    threshold: int = MATCH_THRESHOLD,
) -> list[ComparisonResult]:
    """Compare OCR entries against a roster.

    All pairs scoring at least ``threshold`` are assigned greedily by score,
    ties broken by OCR order and then roster order. Each roster id is
    matched at most once.

    Args:
        ocr_entries: Players or officials read from the scoresheet.
        roster_players: Known roster entries.
        threshold: Minimum confidence for a match (0 – 100).

    Returns:
        Matches first, then OCR-only entries, then roster-only entries.
    """
    entries = list(ocr_entries or [])
    roster = list(roster_players or [])

    candidates: list[tuple[int, int, int]] = []
    for i, entry in enumerate(entries):
        for j, roster_player in enumerate(roster):
            confidence = calculate_entity_confidence(entry, roster_player)
            if confidence >= threshold:
                candidates.append((confidence, i, j))
    candidates.sort(key=lambda c: (-c[0], c[1], c[2]))

    assigned: dict[int, tuple[int, int]] = {}
    used_ids: set[str] = set()
    for confidence, i, j in candidates:
        if i in assigned or roster[j].id in used_ids:
            continue
        assigned[i] = (j, confidence)
        used_ids.add(roster[j].id)

    matches: list[ComparisonResult] = []
    ocr_only: list[ComparisonResult] = []
    for i, entry in enumerate(entries):
        if i in assigned:
            j, confidence = assigned[i]
            matches.append(ComparisonResult(
                status=MATCH,
                ocr_player=entry,
                roster_player_id=roster[j].id,
                roster_player_name=roster[j].display_name,
                confidence=confidence,
            ))
        else:
            ocr_only.append(ComparisonResult(
                status=OCR_ONLY,
                ocr_player=entry,
                roster_player_id=None,
                roster_player_name=None,
                confidence=0,
            ))

    roster_only = [
        ComparisonResult(
            status=ROSTER_ONLY,
            ocr_player=None,
            roster_player_id=p.id,
            roster_player_name=p.display_name,
            confidence=0,
        )
        for p in roster
        if p.id not in used_ids
    ]

    log.info(
        "Kaderabgleich: %d Treffer, %d nur OCR, %d nur Kader",
        len(matches), len(ocr_only), len(roster_only),
    )
    return matches + ocr_only + roster_only


def compare_team_rosters(
    ocr_team_name: str,
    ocr_entries: Iterable[OCREntry],
    roster_team_name: str,
    roster_players: Iterable[RosterPlayer],
    threshold: int = MATCH_THRESHOLD,
) -> TeamComparisonResult:
    """Compare one team and count the results per status."""
    results = compare_rosters(ocr_entries, roster_players, threshold)
    counts = {
        'matched': sum(1 for r in results if r.status == MATCH),
        'ocr_only': sum(1 for r in results if r.status == OCR_ONLY),
        'roster_only': sum(1 for r in results if r.status == ROSTER_ONLY),
    }
    return TeamComparisonResult(
        ocr_team_name=ocr_team_name,
        roster_team_name=roster_team_name,
        player_results=results,
        counts=counts,
    )


def calculate_match_score(result: TeamComparisonResult) -> int:
    """Share of matched entries among all compared entries (0 – 100)."""
    total = sum(result.counts.get(key, 0) for key in ('matched', 'ocr_only', 'roster_only'))
    if total == 0:
        return 0
    return round(result.counts.get('matched', 0) / total * MAX_CONFIDENCE)
