"""Tests for scoresheet.reporter module and the command line entry point."""

import csv
import sys

import pytest

import parse_sheet
from scoresheet.comparison import compare_team_rosters
from scoresheet.electronic import get_all_officials, get_all_players, parse_game_sheet
from scoresheet.reporter import (
    COMPARISON_CSV_COLUMNS,
    SHEET_CSV_COLUMNS,
    print_summary,
    write_comparison_csv,
    write_html_report,
    write_sheet_csv,
)


@pytest.fixture
def sheet(electronic_text):
    return parse_game_sheet(electronic_text)


@pytest.fixture
def comparison(sheet, heimteam_roster):
    entries = get_all_players(sheet.team_a) + get_all_officials(sheet.team_a)
    return compare_team_rosters(sheet.team_a.name, entries, 'roster_heimteam', heimteam_roster)


def _read_csv(path) -> list[dict]:
    with open(path, newline='', encoding='utf-8-sig') as f:
        return list(csv.DictReader(f, delimiter=';'))


class TestWriteSheetCsv:
    """Tests for the parsed roster CSV."""

    def test_rows_and_columns(self, sheet, tmp_path):
        out = tmp_path / 'reports' / 'sheet.csv'
        write_sheet_csv(sheet, out)
        rows = _read_csv(out)
        assert list(rows[0].keys()) == SHEET_CSV_COLUMNS
        assert len(rows) == 11
        assert rows[0]['Team'] == 'A'
        assert rows[0]['Display_Name'] == 'Anna Müller'
        assert rows[0]['Shirt_Number'] == '1'

    def test_officials_rows(self, sheet, tmp_path):
        out = tmp_path / 'sheet.csv'
        write_sheet_csv(sheet, out)
        officials = [r for r in _read_csv(out) if r['Kind'] == 'official']
        assert [(r['Team'], r['Role']) for r in officials] == [
            ('A', 'C'), ('A', 'AC'), ('B', 'C'), ('B', 'AC3'),
        ]
        assert all(r['Shirt_Number'] == '' for r in officials)

    def test_bom_and_delimiter(self, sheet, tmp_path):
        out = tmp_path / 'sheet.csv'
        write_sheet_csv(sheet, out)
        raw = out.read_bytes()
        assert raw.startswith(b'\xef\xbb\xbf')
        assert raw.decode('utf-8-sig').splitlines()[0] == ';'.join(SHEET_CSV_COLUMNS)


class TestWriteComparisonCsv:
    """Tests for the comparison CSV."""

    def test_statuses(self, comparison, tmp_path):
        out = tmp_path / 'comparison.csv'
        write_comparison_csv(comparison.player_results, out)
        rows = _read_csv(out)
        assert list(rows[0].keys()) == COMPARISON_CSV_COLUMNS
        assert [r['Status'] for r in rows] == ['match'] * 4 + ['ocr-only'] * 2 + ['roster-only']

    def test_roster_only_row(self, comparison, tmp_path):
        out = tmp_path / 'comparison.csv'
        write_comparison_csv(comparison.player_results, out)
        last = _read_csv(out)[-1]
        assert last['OCR_Name'] == ''
        assert last['Roster_ID'] == 'p5'
        assert last['Confidence'] == '0'


class TestWriteHtmlReport:
    """Tests for the HTML report."""

    def test_contains_teams_and_names(self, sheet, comparison, tmp_path):
        out = tmp_path / 'report.html'
        write_html_report(sheet, {'A': comparison}, out, 'electronic_sheet.txt')
        html = out.read_text(encoding='utf-8')
        assert 'Matchblatt electronic_sheet.txt' in html
        assert 'VBC Heimteam' in html
        assert 'VBC Gastteam' in html
        assert 'Kurt Dritter' in html
        assert '57% Uebereinstimmung' in html
        assert '<tr class="roster-only">' in html

    def test_without_comparisons(self, sheet, tmp_path):
        out = tmp_path / 'report.html'
        write_html_report(sheet, None, out)
        html = out.read_text(encoding='utf-8')
        assert 'Kaderabgleich' not in html
        assert 'Skipped 4 lines' in html


class TestPrintSummary:
    """Tests for the stdout summary."""

    def test_summary(self, sheet, comparison, capsys):
        print_summary(sheet, {'A': comparison}, 'electronic_sheet.txt')
        out = capsys.readouterr().out
        assert '=== Matchblatt: electronic_sheet.txt ===' in out
        assert 'Team A: VBC Heimteam' in out
        assert "Kader 'roster_heimteam':" in out
        assert '57%' in out
        assert 'Skipped 4 lines' in out


class TestCommandLine:
    """Tests for parse_sheet.main."""

    def test_text_with_roster(self, data_dir, tmp_path, monkeypatch, capsys):
        sheet_csv = tmp_path / 'sheet.csv'
        comparison_csv = tmp_path / 'comparison.csv'
        monkeypatch.setattr(sys, 'argv', [
            'parse_sheet.py',
            '--text', str(data_dir / 'electronic_sheet.txt'),
            '--roster-a', str(data_dir / 'roster_heimteam.csv'),
            '--output', str(sheet_csv),
            '--comparison-output', str(comparison_csv),
            '--summary',
        ])
        parse_sheet.main()
        assert len(_read_csv(sheet_csv)) == 11
        assert len(_read_csv(comparison_csv)) == 7
        assert "Kader 'roster_heimteam':" in capsys.readouterr().out

    def test_manuscript_extended_roles(self, data_dir, tmp_path, monkeypatch):
        sheet_csv = tmp_path / 'sheet.csv'
        monkeypatch.setattr(sys, 'argv', [
            'parse_sheet.py',
            '--text', str(data_dir / 'manuscript_sheet.txt'),
            '--type', 'manuscript',
            '--roles', 'extended',
            '--output', str(sheet_csv),
        ])
        parse_sheet.main()
        roles = [r['Role'] for r in _read_csv(sheet_csv) if r['Kind'] == 'official']
        assert roles.count('M') == 3

    def test_ocr_json(self, data_dir, tmp_path, monkeypatch):
        sheet_csv = tmp_path / 'sheet.csv'
        monkeypatch.setattr(sys, 'argv', [
            'parse_sheet.py',
            '--ocr-json', str(data_dir / 'electronic_ocr.json'),
            '--output', str(sheet_csv),
        ])
        parse_sheet.main()
        teams = [(r['Team'], r['Last_Name']) for r in _read_csv(sheet_csv)]
        assert ('B', 'Keller') in teams

    def test_threshold_out_of_range(self, data_dir, monkeypatch):
        monkeypatch.setattr(sys, 'argv', [
            'parse_sheet.py', '--text', str(data_dir / 'electronic_sheet.txt'), '--threshold', '101',
        ])
        with pytest.raises(SystemExit):
            parse_sheet.main()

    def test_comparison_output_requires_roster(self, data_dir, tmp_path, monkeypatch):
        monkeypatch.setattr(sys, 'argv', [
            'parse_sheet.py', '--text', str(data_dir / 'electronic_sheet.txt'),
            '--comparison-output', str(tmp_path / 'c.csv'),
        ])
        with pytest.raises(SystemExit):
            parse_sheet.main()
