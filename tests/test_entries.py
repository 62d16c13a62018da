"""Tests for scoresheet.entries module."""

from scoresheet import EXTENDED_OFFICIAL_ROLES
from scoresheet.entries import (
    is_entry_line,
    is_strict_entry_line,
    try_extract_official,
    try_extract_player,
)


class TestTryExtractPlayer:
    """Tests for ``Number NAME`` lines."""

    def test_plain_line(self):
        player = try_extract_player('1 MÜLLER ANNA')
        assert player.shirt_number == 1
        assert player.display_name == 'Anna Müller'
        assert player.raw_name == 'MÜLLER ANNA'

    def test_separators(self):
        assert try_extract_player('12. HUBER EVA').shirt_number == 12
        assert try_extract_player('4: KELLER NINA').shirt_number == 4
        assert try_extract_player('9-FREI ZOE').shirt_number == 9

    def test_misread_digits(self):
        assert try_extract_player('O7 MEIER LEA').shirt_number == 7
        assert try_extract_player('1O KELLER NINA').shirt_number == 10
        assert try_extract_player('l2 HUBER EVA').shirt_number == 12

    def test_invalid_number_kept_as_none(self):
        player = try_extract_player('OO MEIER LEA')
        assert player is not None
        assert player.shirt_number is None

    def test_name_too_short(self):
        assert try_extract_player('5 X') is None

    def test_not_a_player_line(self):
        assert try_extract_player('Team A') is None
        assert try_extract_player('C Hans Trainer') is None


class TestTryExtractOfficial:
    """Tests for ``ROLE Firstname Lastname`` lines."""

    def test_coach(self):
        official = try_extract_official('C Hans Trainer')
        assert official.role == 'C'
        assert official.first_name == 'Hans'
        assert official.last_name == 'Trainer'

    def test_numbered_assistant(self):
        assert try_extract_official('AC2: Maria Assistentin').role == 'AC2'

    def test_lowercase_role(self):
        assert try_extract_official('ac Maria Assistentin').role == 'AC'

    def test_medical_role_is_configurable(self):
        assert try_extract_official('M Doris Doktor') is None
        official = try_extract_official('M Doris Doktor', EXTENDED_OFFICIAL_ROLES)
        assert official.role == 'M'
        assert official.display_name == 'Doris Doktor'

    def test_not_an_official_line(self):
        assert try_extract_official('1 MÜLLER ANNA') is None


class TestEntryLines:
    """Tests for entry line classification."""

    def test_lenient_digits(self):
        assert is_entry_line('B GAST')
        assert not is_strict_entry_line('B GAST')

    def test_strict_entries(self):
        assert is_strict_entry_line('12. HUBER EVA')
        assert is_strict_entry_line('C Hans Trainer')
        assert not is_strict_entry_line('O7 MEIER LEA')
