from __future__ import annotations

import logging

import pytest

from conftest import all_keys
from fifthwheel.theory.convert import (absolute_to_roman, chord_to_roman, convert_romans,
                                       roman_to_absolute, roman_to_chord)
from fifthwheel.theory.errors import ParseError, UnknownNote
from fifthwheel.theory.keys import Key
from fifthwheel.theory.palette import build_palette


def test_c_major_triads() -> None:
    romans = ["I", "ii", "iii", "IV", "V", "vi", "vii°"]
    assert roman_to_absolute("C", romans) == ["C", "Dm", "Em", "F", "G", "Am", "Bdim"]


def test_minor_numerals_are_major_relative() -> None:
    romans = ["i", "ii°", "bIII", "iv", "v", "bVI", "bVII"]
    assert roman_to_absolute("A", romans) == ["Am", "Bdim", "C", "Dm", "Em", "F", "G"]


def test_sevenths_and_extensions() -> None:
    assert roman_to_absolute("C", ["V7", "Imaj7", "viiø7", "vii°7", "ii9", "IVsus4"]) == \
        ["G7", "Cmaj7", "Bm7b5", "Bdim7", "Dm9", "Fsus4"]


def test_secondary_numerals_use_the_target_root() -> None:
    assert roman_to_chord("C", "V7/ii") == "A7"
    assert roman_to_chord("C", "V/V") == "D"
    assert roman_to_chord("C", "vii°7/V") == "F#dim7"


def test_enharmonic_policy_changes_spelling_only() -> None:
    assert roman_to_absolute("C", ["bVI"]) == ["Ab"]
    assert roman_to_absolute("C", ["bVI"], "sharp") == ["G#"]
    assert roman_to_absolute("C", ["#iv°"], "flat") == ["Gbdim"]
    with pytest.raises(ValueError):
        roman_to_absolute("C", ["I"], "enharmonic")


def test_malformed_element_does_not_abort_siblings(caplog) -> None:
    with caplog.at_level(logging.WARNING, logger="fifthwheel.theory.convert"):
        assert roman_to_absolute("C", ["I", "xyz", "V"]) == ["C", None, "G"]
    assert "xyz" in caplog.text


def test_convert_romans_reports_the_failing_element() -> None:
    details = convert_romans("C", ["I", "Vq"])
    assert details[0] == {"roman": "I", "chord": "C", "error": None}
    assert details[1]["chord"] is None
    assert details[1]["error"]


def test_single_conversion_raises() -> None:
    with pytest.raises(ParseError):
        roman_to_chord("C", "xyz")


def test_unknown_tonic_raises() -> None:
    with pytest.raises(UnknownNote):
        roman_to_absolute("H", ["I"])
    with pytest.raises(UnknownNote):
        absolute_to_roman("H", ["C"])
    with pytest.raises(UnknownNote):
        roman_to_absolute("Ebbb", ["I"])
    with pytest.raises(UnknownNote):
        absolute_to_roman("C###", ["C"])


def test_absolute_to_roman() -> None:
    assert absolute_to_roman("C", ["C", "Dm", "G7", "Ab", "F#dim"]) == ["I", "ii", "V7", "bVI", "#iv°"]
    assert absolute_to_roman("A", ["Am", "C", "E7"]) == ["i", "bIII", "V7"]


def test_absolute_to_roman_ignores_slash_bass() -> None:
    assert absolute_to_roman("C", ["C/E", "G/B"]) == ["I", "V"]


def test_unparsable_chord_gives_none() -> None:
    assert absolute_to_roman("C", ["C", "Cxyz", "Q7"]) == ["I", None, None]


def test_enharmonic_root_falls_back_to_semitones() -> None:
    # Fbb is a letter step above C but two flats down
    assert chord_to_roman("C", "Fbb") == "bIII"


@pytest.mark.parametrize("key", all_keys(), ids=str)
def test_round_trip_every_diatonic_numeral(key: Key) -> None:
    for sevenths in (False, True):
        romans = build_palette(key, sevenths)
        chords = roman_to_absolute(key.tonic, romans)
        assert None not in chords
        assert absolute_to_roman(key.tonic, chords) == romans


def test_conversion_is_idempotent() -> None:
    romans = ["I", "V7/V", "bVI", "x"]
    assert roman_to_absolute("Eb", romans) == roman_to_absolute("Eb", romans)


@pytest.mark.parametrize("key", all_keys(("Ebb", "Cbb", "F##", "G##")), ids=str)
def test_round_trip_in_double_accidental_keys(key: Key) -> None:
    for sevenths in (False, True):
        romans = build_palette(key, sevenths)
        assert absolute_to_roman(key.tonic, roman_to_absolute(key.tonic, romans)) == romans


def test_triple_flat_roots() -> None:
    assert roman_to_absolute("Ebb", ["bV"]) == ["Bbbb"]
    assert absolute_to_roman("Ebb", ["Bbbb"]) == ["bV"]
    assert roman_to_absolute("Cbb", ["bVII"]) == ["Bbbb"]
    assert absolute_to_roman("Cbb", ["Bbbb"]) == ["bVII"]
