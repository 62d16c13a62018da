"""scoresheet-ocr – CLI-Tool zum Auslesen von Volleyball-Matchblaettern aus OCR-Text."""

import argparse
import logging
from pathlib import Path

from scoresheet import EXTENDED_OFFICIAL_ROLES, OFFICIAL_ROLES, ParsedGameSheet, TeamComparisonResult
from scoresheet.comparison import MATCH_THRESHOLD, compare_team_rosters
from scoresheet.easter_eggs import detect_easter_egg
from scoresheet.electronic import get_all_officials, get_all_players
from scoresheet.parser import DEFAULT_SCORESHEET_TYPE, SCORESHEET_TYPES, parse_game_sheet_with_type, parse_ocr_result
from scoresheet.reader import read_ocr_result, read_ocr_text, read_roster
from scoresheet.reporter import print_summary, write_comparison_csv, write_html_report, write_sheet_csv

ROLE_SETS = {
    'standard': OFFICIAL_ROLES,
    'extended': EXTENDED_OFFICIAL_ROLES,
}


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        description='Auslesen von Volleyball-Matchblaettern aus OCR-Ergebnissen.',
        prog='parse_sheet.py',
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        '--text', type=Path,
        help='Pfad zur OCR-Textdatei',
    )
    source.add_argument(
        '--ocr-json', type=Path,
        help='Pfad zum OCR-Ergebnis als JSON (mit Wort-Koordinaten)',
    )
    parser.add_argument(
        '--type', choices=SCORESHEET_TYPES, default=DEFAULT_SCORESHEET_TYPE,
        help=f'Matchblatt-Typ (Standard: {DEFAULT_SCORESHEET_TYPE})',
    )
    parser.add_argument(
        '--roles', choices=sorted(ROLE_SETS), default='standard',
        help='Erlaubte Funktionen der Offiziellen; "extended" akzeptiert auch M (Arzt)',
    )
    parser.add_argument(
        '--roster-a', type=Path,
        help='Kader-CSV fuer Team A',
    )
    parser.add_argument(
        '--roster-b', type=Path,
        help='Kader-CSV fuer Team B',
    )
    parser.add_argument(
        '--output', type=Path,
        help='Pfad fuer die ausgelesenen Spieler (CSV)',
    )
    parser.add_argument(
        '--comparison-output', type=Path,
        help='Pfad fuer den Kaderabgleich (CSV)',
    )
    parser.add_argument(
        '--html', type=Path,
        help='Pfad fuer einen HTML-Report',
    )
    parser.add_argument(
        '--summary', action='store_true',
        help='Zusammenfassung auf stdout ausgeben',
    )
    parser.add_argument(
        '--threshold', type=int, default=MATCH_THRESHOLD,
        help=f'Mindestwert fuer einen Kadertreffer, 0-100 (Standard: {MATCH_THRESHOLD})',
    )
    parser.add_argument(
        '--verbose', action='store_true',
        help='Ausfuehrliche Log-Ausgabe',
    )
    return parser


def compare_with_rosters(
    sheet: ParsedGameSheet,
    roster_paths: dict[str, Path | None],
    threshold: int,
) -> dict[str, TeamComparisonResult]:
    """Compare each team that has a roster file; keyed by team side."""
    comparisons = {}
    for side, team in (('A', sheet.team_a), ('B', sheet.team_b)):
        path = roster_paths.get(side)
        if path is None:
            continue
        roster = read_roster(path)
        entries = get_all_players(team) + get_all_officials(team)
        comparisons[side] = compare_team_rosters(team.name, entries, path.stem, roster, threshold)
    return comparisons


def main() -> None:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(levelname)s: %(message)s',
    )

    if not 0 <= args.threshold <= 100:
        parser.error('--threshold muss zwischen 0 und 100 liegen.')

    if args.comparison_output and not (args.roster_a or args.roster_b):
        parser.error('--comparison-output erfordert --roster-a oder --roster-b.')

    roles = ROLE_SETS[args.roles]
    if args.ocr_json:
        source = args.ocr_json
        sheet = parse_ocr_result(read_ocr_result(source), args.type, roles)
    else:
        source = args.text
        sheet = parse_game_sheet_with_type(read_ocr_text(source), args.type, roles)

    for warning in sheet.warnings:
        logging.warning(warning)

    comparisons = compare_with_rosters(
        sheet, {'A': args.roster_a, 'B': args.roster_b}, args.threshold,
    )

    if args.output:
        write_sheet_csv(sheet, args.output)

    if args.comparison_output:
        results = [r for c in comparisons.values() for r in c.player_results]
        write_comparison_csv(results, args.comparison_output)

    if args.html:
        write_html_report(sheet, comparisons, args.html, source.name)

    easter_egg = detect_easter_egg(sheet)
    if easter_egg:
        logging.info("Besonderheit auf der Bank erkannt: %s", easter_egg)

    if args.summary:
        print_summary(sheet, comparisons, source.name)


if __name__ == '__main__':
    main()
