"""Tests for scoresheet.corrections module."""

import pytest

from scoresheet.corrections import (
    DIGIT_CORRECTIONS,
    LETTER_CORRECTIONS,
    MAX_SHIRT_NUMBER,
    correct_digits,
    correct_letters,
    extract_shirt_number,
)


class TestCorrectionTables:
    """The tables are immutable lookups."""

    def test_digit_table_is_read_only(self):
        with pytest.raises(TypeError):
            DIGIT_CORRECTIONS['X'] = '1'

    def test_letter_table_is_read_only(self):
        with pytest.raises(TypeError):
            LETTER_CORRECTIONS['9'] = 'G'

    def test_correct_digits(self):
        assert correct_digits('O7') == '07'
        assert correct_digits('lZ') == '12'
        assert correct_digits('Sb') == '56'

    def test_correct_letters(self):
        assert correct_letters('M0LLER') == 'MOLLER'
        assert correct_letters('5CHMIDT') == 'SCHMIDT'

    def test_unmapped_characters_unchanged(self):
        assert correct_digits('12') == '12'
        assert correct_letters('Anna') == 'Anna'


class TestExtractShirtNumber:
    """Tests for shirt number extraction."""

    def test_plain_number(self):
        assert extract_shirt_number('7') == 7
        assert extract_shirt_number(' 12 ') == 12

    def test_misread_digits(self):
        assert extract_shirt_number('l2') == 12
        assert extract_shirt_number('O1') == 1
        assert extract_shirt_number('1O') == 10
        assert extract_shirt_number('B') == 8

    def test_zero_rejected(self):
        assert extract_shirt_number('0') is None
        assert extract_shirt_number('OO') is None

    def test_three_digits_rejected(self):
        assert extract_shirt_number('100') is None

    def test_upper_bound(self):
        assert extract_shirt_number(str(MAX_SHIRT_NUMBER)) == MAX_SHIRT_NUMBER

    def test_not_a_number(self):
        assert extract_shirt_number('Xy') is None
        assert extract_shirt_number('') is None

    def test_non_string_input(self):
        assert extract_shirt_number(None) is None
        assert extract_shirt_number(12) is None

    @pytest.mark.parametrize('token', ['O', 'o', 'I', 'l', 'Z', 'z', 'S', 's', 'G', 'g', 'B', 'b'])
    def test_correctable_tokens_stay_in_range(self, token):
        for text in (token, token + token, '1' + token, token + '9'):
            number = extract_shirt_number(text)
            assert number is None or 1 <= number <= MAX_SHIRT_NUMBER
