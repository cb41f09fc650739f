"""Unit tests for Polish spelled-out amounts."""

import pytest

from faktura.core.services import amount_in_words, integer_to_words, plural_form

ZLOTY = ("złoty", "złote", "złotych")


class TestPluralForm:
    @pytest.mark.parametrize(
        ("number", "expected"),
        [
            (0, "złotych"),
            (1, "złoty"),
            (2, "złote"),
            (4, "złote"),
            (5, "złotych"),
            (11, "złotych"),
            (12, "złotych"),
            (14, "złotych"),
            (21, "złotych"),
            (22, "złote"),
            (112, "złotych"),
            (1003, "złote"),
        ],
    )
    def test_forms(self, number, expected):
        assert plural_form(number, ZLOTY) == expected


class TestIntegerToWords:
    @pytest.mark.parametrize(
        ("number", "expected"),
        [
            (0, "zero"),
            (7, "siedem"),
            (15, "piętnaście"),
            (40, "czterdzieści"),
            (123, "sto dwadzieścia trzy"),
            (1000, "tysiąc"),
            (1001, "tysiąc jeden"),
            (2000, "dwa tysiące"),
            (5000, "pięć tysięcy"),
            (12000, "dwanaście tysięcy"),
            (22000, "dwadzieścia dwa tysiące"),
            (1000000, "milion"),
            (3500000, "trzy miliony pięćset tysięcy"),
            (2000000000, "dwa miliardy"),
        ],
    )
    def test_numbers(self, number, expected):
        assert integer_to_words(number) == expected


class TestAmountInWords:
    def test_zloty_and_grosze(self):
        assert amount_in_words(123.45) == "sto dwadzieścia trzy złote czterdzieści pięć groszy"

    def test_no_grosze(self):
        assert amount_in_words(1414) == "tysiąc czterysta czternaście złotych"

    def test_single_grosz(self):
        assert amount_in_words(1.01) == "jeden złoty jeden grosz"

    def test_zero(self):
        assert amount_in_words(0) == "zero złotych"

    def test_only_grosze(self):
        assert amount_in_words(0.22) == "zero złotych dwadzieścia dwa grosze"

    def test_negative(self):
        assert amount_in_words(-5) == "minus pięć złotych"

    def test_rounds_first(self):
        assert amount_in_words(2.005) == "dwa złote jeden grosz"
