"""Tests for scoresheet.swiss module."""

from scoresheet.swiss import (
    MAX_SWISS_PLAYERS_PER_TEAM,
    NO_TEAM_NAMES_WARNING,
    NUMBERS_SPLIT_WARNING,
    extract_swiss_team_names,
    is_header_line,
    is_noise_line,
    is_swiss_tabular_format,
    parse_swiss_tabular_sheet,
)

HEADER = 'Punkte Points Punti\tName Nom Nome\tPunkte Points Punti\tName Nom Nome'


def _sheet(*rows: str, names: str = 'VBC Muri\tTV Schönenwerd') -> str:
    """Build a Swiss sheet with team names, column header and the given rows."""
    return '\n'.join([names, HEADER, *rows])


class TestIsSwissTabularFormat:
    """Tests for layout detection."""

    def test_header_and_tab_lines(self, swiss_text):
        assert is_swiss_tabular_format(swiss_text)

    def test_header_and_concatenated_names(self):
        text = 'Name Nom Nome\nS. AngeliL. Collier'
        assert is_swiss_tabular_format(text)

    def test_header_without_tabs_or_concatenation(self):
        assert not is_swiss_tabular_format('Name Nom Nome\nAnna Suter')

    def test_tabs_without_header(self):
        assert not is_swiss_tabular_format('a\tb\nc\td\ne\tf\ng\th')

    def test_sequential_sheet(self, manuscript_text):
        assert not is_swiss_tabular_format(manuscript_text)
        assert not is_swiss_tabular_format('Team A\n1 MÜLLER ANNA\nTeam B\n3 SCHMIDT LISA')

    def test_empty(self):
        assert not is_swiss_tabular_format('')
        assert not is_swiss_tabular_format(None)


class TestLineClassification:
    """Tests for header and noise lines."""

    def test_header_lines(self):
        assert is_header_line(HEADER)
        assert is_header_line('Name\tNom')
        assert not is_header_line('Suter Anna\t05.06.2001')

    def test_noise_lines(self):
        assert is_noise_line('25 : 20 / 18')
        assert is_noise_line('III')
        assert is_noise_line('x')
        assert not is_noise_line('Suter Anna')


class TestExtractSwissTeamNames:
    """Tests for club prefix team names."""

    def test_tab_separated(self):
        assert extract_swiss_team_names(['VBC Muri 3\tTV Schönenwerd 12']) == (
            'VBC Muri', 'TV Schönenwerd',
        )

    def test_space_separated(self):
        assert extract_swiss_team_names(['VBC Muri TV Schönenwerd']) == ('VBC Muri', 'TV Schönenwerd')

    def test_single_team(self):
        assert extract_swiss_team_names(['Heim: VBC Muri']) == ('VBC Muri', '')

    def test_no_prefix(self):
        assert extract_swiss_team_names(['Matchblatt', HEADER]) == ('', '')


class TestParseSwissTabularSheet:
    """Tests for the two-column sheet parser."""

    def test_sample_file(self, swiss_text):
        result = parse_swiss_tabular_sheet(swiss_text)
        assert result.team_a.name == 'VBC Muri'
        assert result.team_b.name == 'TV Schönenwerd'
        assert [p.display_name for p in result.team_a.players] == [
            'S. Angeli', 'L. Collier', 'O. Follouier', 'Anna Suter', 'M. Brunner',
        ]
        assert [p.display_name for p in result.team_b.players] == [
            'A. Meier', 'B. Huber', 'Lea Keller', 'R. Frei',
        ]
        assert result.warnings == []

    def test_birth_dates_paired_with_names(self, swiss_text):
        result = parse_swiss_tabular_sheet(swiss_text)
        assert [p.birth_date for p in result.team_a.players[:4]] == [
            '20.2.97', '21.1.97', '13.1.97', '05.06.2001',
        ]
        assert [p.birth_date for p in result.team_b.players[:3]] == [
            '3.4.99', '12.12.98', '14.7.2000',
        ]

    def test_libero_row(self, swiss_text):
        result = parse_swiss_tabular_sheet(swiss_text)
        libero_a = result.team_a.players[-1]
        libero_b = result.team_b.players[-1]
        assert (libero_a.shirt_number, libero_a.birth_date) == (7, '12.5.99')
        assert libero_a.last_name == 'Brunner'
        assert libero_a.first_name == 'M.'
        assert (libero_b.shirt_number, libero_b.birth_date) == (9, '3.3.98')

    def test_officials(self, swiss_text):
        result = parse_swiss_tabular_sheet(swiss_text)
        assert [(o.role, o.display_name) for o in result.team_a.officials] == [
            ('C', 'Hans Trainer'), ('AC', 'Maria Assistentin'),
        ]
        assert [(o.role, o.display_name) for o in result.team_b.officials] == [
            ('C', 'Peter Coach'),
        ]

    def test_concatenated_numbers_warn(self):
        text = _sheet('12 S. AngeliL. Collier\tA. Meier', 'OFFIZIELLE', 'C\tHans Trainer')
        result = parse_swiss_tabular_sheet(text)
        assert [p.shirt_number for p in result.team_a.players] == [1, 2]
        assert NUMBERS_SPLIT_WARNING not in result.warnings

        text = _sheet('123 S. AngeliL. Collier\tA. Meier', 'OFFIZIELLE', 'C\tHans Trainer')
        result = parse_swiss_tabular_sheet(text)
        assert [p.shirt_number for p in result.team_a.players] == [12, 3]
        assert NUMBERS_SPLIT_WARNING in result.warnings

    def test_player_cap(self):
        rows = ['Muster Anna\tKeller Lea'] * (MAX_SWISS_PLAYERS_PER_TEAM + 2)
        result = parse_swiss_tabular_sheet(_sheet(*rows))
        assert len(result.team_a.players) == MAX_SWISS_PLAYERS_PER_TEAM
        assert len(result.team_b.players) == MAX_SWISS_PLAYERS_PER_TEAM
        assert any('Team A' in w and 'extra entries ignored' in w for w in result.warnings)

    def test_noise_and_header_repeats_skipped(self):
        text = _sheet('25 : 20', HEADER, 'Suter Anna\tKeller Lea')
        result = parse_swiss_tabular_sheet(text)
        assert [p.display_name for p in result.team_a.players] == ['Anna Suter']
        assert [p.display_name for p in result.team_b.players] == ['Lea Keller']

    def test_end_marker_stops_parsing(self):
        text = _sheet('Suter Anna\tKeller Lea', 'Unterschrift Captain', 'Late Entry\tOther Late')
        result = parse_swiss_tabular_sheet(text)
        assert len(result.team_a.players) == 1
        assert len(result.team_b.players) == 1

    def test_official_without_tabs(self):
        text = _sheet('Suter Anna\tKeller Lea', 'TRAINER', 'C Hans Trainer')
        result = parse_swiss_tabular_sheet(text)
        assert [o.display_name for o in result.team_a.officials] == ['Hans Trainer']

    def test_libero_number_and_name_in_one_cell(self):
        text = _sheet('Suter Anna\tKeller Lea', 'LIBERO', '7 M. Brunner\t9 R. Frei')
        result = parse_swiss_tabular_sheet(text)
        libero_a = result.team_a.players[-1]
        libero_b = result.team_b.players[-1]
        assert (libero_a.shirt_number, libero_a.last_name, libero_a.first_name) == (7, 'Brunner', 'M.')
        assert (libero_b.shirt_number, libero_b.last_name, libero_b.first_name) == (9, 'Frei', 'R.')

    def test_single_structured_entry_in_right_half(self):
        text = _sheet('Suter Anna\tKeller Lea', 'LIBERO', '\t\t\t3.3.98\t9\tR. Frei')
        result = parse_swiss_tabular_sheet(text)
        assert result.team_b.players[-1].display_name == 'R. Frei'
        assert len(result.team_a.players) == 1

    def test_missing_team_names(self):
        text = _sheet('Suter Anna\tKeller Lea', names='Matchblatt')
        result = parse_swiss_tabular_sheet(text)
        assert NO_TEAM_NAMES_WARNING in result.warnings

    def test_empty_input(self):
        result = parse_swiss_tabular_sheet('')
        assert result.warnings == ['No OCR text provided']
        assert result.team_a.players == []
