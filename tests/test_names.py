"""Tests for scoresheet.names module."""

from scoresheet.names import (
    normalize_name,
    parse_initial_name,
    parse_official_name,
    parse_player_name,
)


class TestNormalizeName:
    """Tests for title-casing OCR names."""

    def test_uppercase_to_title_case(self):
        assert normalize_name('MÜLLER') == 'Müller'

    def test_hyphen_becomes_space(self):
        assert normalize_name('MEIER-HUBER') == 'Meier Huber'

    def test_collapses_whitespace(self):
        assert normalize_name('  anna   lisa ') == 'Anna Lisa'

    def test_letter_corrections_applied(self):
        assert normalize_name('M0LLER') == 'Moller'
        assert normalize_name('5CHMIDT') == 'Schmidt'

    def test_idempotent(self):
        for raw in ('MÜLLER', 'de la CRUZ', 'van-der BERG', 'S.'):
            once = normalize_name(raw)
            assert normalize_name(once) == once

    def test_empty_and_non_string(self):
        assert normalize_name('') == ''
        assert normalize_name(None) == ''
        assert normalize_name(42) == ''


class TestParsePlayerName:
    """Players are printed LASTNAME FIRSTNAME."""

    def test_last_first(self):
        parsed = parse_player_name('MÜLLER ANNA')
        assert parsed.last_name == 'Müller'
        assert parsed.first_name == 'Anna'
        assert parsed.display_name == 'Anna Müller'

    def test_middle_names_join_first_name(self):
        parsed = parse_player_name('MEIER LEA SOPHIE')
        assert parsed.last_name == 'Meier'
        assert parsed.first_name == 'Lea Sophie'
        assert parsed.display_name == 'Lea Sophie Meier'

    def test_single_token(self):
        parsed = parse_player_name('HUBER')
        assert parsed.last_name == 'Huber'
        assert parsed.first_name == ''
        assert parsed.display_name == 'Huber'

    def test_empty(self):
        assert parse_player_name('').display_name == ''
        assert parse_player_name('   ').display_name == ''
        assert parse_player_name(None).display_name == ''


class TestParseOfficialName:
    """Officials are written Firstname Lastname."""

    def test_first_last(self):
        parsed = parse_official_name('Hans Trainer')
        assert parsed.first_name == 'Hans'
        assert parsed.last_name == 'Trainer'
        assert parsed.display_name == 'Hans Trainer'

    def test_multiple_first_names(self):
        parsed = parse_official_name('Anna Maria Keller')
        assert parsed.first_name == 'Anna Maria'
        assert parsed.last_name == 'Keller'

    def test_inverse_of_player_order(self):
        player = parse_player_name('LAST First')
        official = parse_official_name('First Last')
        assert (player.first_name, player.last_name) == ('First', 'Last')
        assert (official.first_name, official.last_name) == ('First', 'Last')


class TestParseInitialName:
    """Handwritten names with a leading initial."""

    def test_leading_initial_is_first_name(self):
        parsed = parse_initial_name('S. Angeli')
        assert parsed.first_name == 'S.'
        assert parsed.last_name == 'Angeli'
        assert parsed.display_name == 'S. Angeli'

    def test_without_initial_reads_last_name_first(self):
        parsed = parse_initial_name('Suter Anna')
        assert parsed.last_name == 'Suter'
        assert parsed.first_name == 'Anna'

    def test_initial_alone(self):
        parsed = parse_initial_name('S.')
        assert parsed.last_name == 'S.'
        assert parsed.first_name == ''
