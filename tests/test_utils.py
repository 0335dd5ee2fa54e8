import numpy as np

from mwav_utils import (MORSE_MAP, MORSE_REVERSE, char_to_morse, clamp_wpm, dot_ms,
                        is_valid_pattern, morse_to_char, morse_to_text, round_half_away,
                        round_half_away_array, text_to_morse)


def test_reverse_table_mirrors_forward_table():
    assert len(MORSE_REVERSE) == len(MORSE_MAP)
    for ch, code in MORSE_MAP.items():
        assert MORSE_REVERSE[code] == ch


def test_round_half_away_from_zero():
    assert round_half_away(2.5) == 3
    assert round_half_away(-2.5) == -3
    assert round_half_away(220.5) == 221
    assert round_half_away(2.4) == 2
    np.testing.assert_array_equal(round_half_away_array(np.array([0.5, -0.5, 1.49, -1.51])),
                                  [1.0, -1.0, 1.0, -2.0])


def test_clamp_wpm():
    assert clamp_wpm(20) == 20
    assert clamp_wpm(3) == 5
    assert clamp_wpm(60) == 50


def test_dot_ms():
    assert dot_ms(20) == 60
    assert dot_ms(12) == 100
    assert dot_ms(32) == 38
    assert dot_ms(100) == 24
    assert dot_ms(0) == 240


def test_text_to_morse():
    assert text_to_morse("SOS") == "... --- ..."
    assert text_to_morse("Hi there") == ".... .. / - .... . .-. ."
    assert text_to_morse("A#B") == ".- -..."


def test_morse_to_text():
    assert morse_to_text(".... . .-.. .-.. --- / .-- --- .-. .-.. -..") == "HELLO WORLD"
    assert morse_to_text("") == ""


def test_unknown_letter_pattern_is_dropped_by_default():
    assert morse_to_text("... ........ ...") == "SS"
    assert morse_to_text("... ........ ...", unknown="?") == "S?S"


def test_single_character_lookups():
    assert char_to_morse("q") == "--.-"
    assert char_to_morse("#") is None
    assert morse_to_char(".-.-.-") == "."
    assert morse_to_char("........") is None


def test_is_valid_pattern():
    assert is_valid_pattern("...")
    assert not is_valid_pattern("")
    assert not is_valid_pattern("..x")
    assert not is_valid_pattern("........")
