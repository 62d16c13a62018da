"""Report generation for parsed scoresheets and roster comparisons (CSV, HTML, summary)."""

import csv
import logging
from pathlib import Path
from typing import Optional

from jinja2 import Environment, FileSystemLoader

from scoresheet import MATCH, OCR_ONLY, ROSTER_ONLY, ComparisonResult, ParsedGameSheet, TeamComparisonResult
from scoresheet.comparison import calculate_match_score

log = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).resolve().parent.parent / 'templates'

SHEET_CSV_COLUMNS = [
    'Team',
    'Team_Name',
    'Kind',
    'Shirt_Number',
    'Role',
    'Last_Name',
    'First_Name',
    'Display_Name',
    'Raw_Name',
    'License',
    'Birth_Date',
]

COMPARISON_CSV_COLUMNS = [
    'Status',
    'OCR_Name',
    'OCR_Shirt_Number',
    'Roster_ID',
    'Roster_Name',
    'Confidence',
]


def _sheet_rows(sheet: ParsedGameSheet) -> list[dict]:
    """Flatten both teams into one row per player and official."""
    rows = []
    for side, team in (('A', sheet.team_a), ('B', sheet.team_b)):
        for p in team.players:
            rows.append({
                'Team': side,
                'Team_Name': team.name,
                'Kind': 'player',
                'Shirt_Number': '' if p.shirt_number is None else str(p.shirt_number),
                'Role': '',
                'Last_Name': p.last_name,
                'First_Name': p.first_name,
                'Display_Name': p.display_name,
                'Raw_Name': p.raw_name,
                'License': p.license_status,
                'Birth_Date': p.birth_date or '',
            })
        for o in team.officials:
            rows.append({
                'Team': side,
                'Team_Name': team.name,
                'Kind': 'official',
                'Shirt_Number': '',
                'Role': o.role,
                'Last_Name': o.last_name,
                'First_Name': o.first_name,
                'Display_Name': o.display_name,
                'Raw_Name': o.raw_name,
                'License': '',
                'Birth_Date': '',
            })
    return rows


def _comparison_row(result: ComparisonResult) -> dict:
    entry = result.ocr_player
    number = getattr(entry, 'shirt_number', None)
    return {
        'Status': result.status,
        'OCR_Name': entry.display_name if entry else '',
        'OCR_Shirt_Number': '' if number is None else str(number),
        'Roster_ID': result.roster_player_id or '',
        'Roster_Name': result.roster_player_name or '',
        'Confidence': str(result.confidence),
    }


def _write_csv(rows: list[dict], columns: list[str], output_path: Path) -> None:
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, 'w', newline='', encoding='utf-8-sig') as f:
        writer = csv.DictWriter(f, fieldnames=columns, delimiter=';', extrasaction='ignore')
        writer.writeheader()
        writer.writerows(rows)

    log.info("CSV-Report geschrieben: %s (%d Zeilen)", output_path, len(rows))


def write_sheet_csv(sheet: ParsedGameSheet, output_path: Path) -> None:
    """Write the parsed roster of both teams as a CSV report.

    Uses UTF-8 with BOM (utf-8-sig) and semicolon delimiter for
    compatibility with German Excel.

    Args:
        sheet: Parsed scoresheet.
        output_path: Path for the output CSV file.
    """
    _write_csv(_sheet_rows(sheet), SHEET_CSV_COLUMNS, output_path)


def write_comparison_csv(results: list[ComparisonResult], output_path: Path) -> None:
    """Write roster comparison results as a CSV report (same format as the sheet CSV)."""
    _write_csv([_comparison_row(r) for r in results], COMPARISON_CSV_COLUMNS, output_path)


def _comparison_stats(comparison: TeamComparisonResult) -> dict:
    return {
        'matched': comparison.counts.get('matched', 0),
        'ocr_only': comparison.counts.get('ocr_only', 0),
        'roster_only': comparison.counts.get('roster_only', 0),
        'score': calculate_match_score(comparison),
    }


def write_html_report(
    sheet: ParsedGameSheet,
    comparisons: Optional[dict[str, TeamComparisonResult]],
    output_path: Path,
    title: str = '',
) -> None:
    """Write the parsed sheet and optional comparisons as an HTML report using Jinja2.

    Args:
        sheet: Parsed scoresheet.
        comparisons: Comparison per team key ('A', 'B'); may be empty.
        output_path: Path for the output HTML file.
        title: Report title, typically the input file name.
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    env = Environment(
        loader=FileSystemLoader(str(TEMPLATE_DIR)),
        autoescape=True,
    )
    template = env.get_template('report.html')

    teams = []
    for side, team in (('A', sheet.team_a), ('B', sheet.team_b)):
        comparison = (comparisons or {}).get(side)
        teams.append({
            'side': side,
            'name': team.name,
            'players': team.players,
            'officials': team.officials,
            'comparison': [_comparison_row(r) for r in comparison.player_results] if comparison else [],
            'stats': _comparison_stats(comparison) if comparison else None,
        })

    html = template.render(
        title=title,
        teams=teams,
        warnings=sheet.warnings,
        comparison_columns=COMPARISON_CSV_COLUMNS,
        statuses={'match': MATCH, 'ocr_only': OCR_ONLY, 'roster_only': ROSTER_ONLY},
    )

    output_path.write_text(html, encoding='utf-8')
    log.info("HTML-Report geschrieben: %s", output_path)


def print_summary(
    sheet: ParsedGameSheet,
    comparisons: Optional[dict[str, TeamComparisonResult]] = None,
    title: str = '',
) -> None:
    """Print a human-readable summary to stdout.

    Args:
        sheet: Parsed scoresheet.
        comparisons: Comparison per team key ('A', 'B'); may be empty.
        title: Name of the input file.
    """
    print(f"\n=== Matchblatt: {title} ===")
    for side, team in (('A', sheet.team_a), ('B', sheet.team_b)):
        print(f"Team {side}: {team.name or '(unbekannt)'}")
        print(f"  Spieler:                 {len(team.players):>5}")
        print(f"  Offizielle:              {len(team.officials):>5}")

        comparison = (comparisons or {}).get(side)
        if comparison:
            stats = _comparison_stats(comparison)
            print(f"  Kader '{comparison.roster_team_name}':")
            print(f"    Treffer:               {stats['matched']:>5}")
            print(f"    Nur auf Matchblatt:    {stats['ocr_only']:>5}")
            print(f"    Nur im Kader:          {stats['roster_only']:>5}")
            print(f"    Uebereinstimmung:      {stats['score']:>4}%")

    print("---")
    print(f"Warnungen:                 {len(sheet.warnings):>5}")
    for warning in sheet.warnings:
        print(f"  - {warning}")
    print()
