from __future__ import annotations

import pytest

from fifthwheel.theory import primitives
from fifthwheel.theory.errors import UnknownChord, UnknownNote, UnknownScale


def test_pitch_class_ignores_spelling() -> None:
    assert primitives.pitch_class("F#") == primitives.pitch_class("Gb") == 6
    assert primitives.pitch_class("B#") == 0
    assert primitives.pitch_class("Cb") == 11
    assert primitives.are_enharmonic("E#", "F")
    assert not primitives.are_enharmonic("E", "F")


def test_spell_normalises_case_and_glyphs() -> None:
    assert primitives.spell("f#") == "F#"
    assert primitives.spell("B♭") == "Bb"
    assert primitives.spell("Ebb") == "Ebb"


def test_unknown_note_is_typed() -> None:
    with pytest.raises(UnknownNote):
        primitives.pitch_class("H")
    with pytest.raises(UnknownNote):
        primitives.pitch_class("")
    assert not primitives.is_note_name("C7")


def test_transpose_keeps_letter_spelling() -> None:
    assert primitives.transpose("C", "M3") == "E"
    assert primitives.transpose("A", "m3") == "C"
    assert primitives.transpose("Db", "d5") == "Abb"


def test_intervals() -> None:
    assert primitives.semitones_between("C", "G") == 7
    assert primitives.semitones_between("G", "C") == 5
    assert primitives.interval_name("C", "G") == "P5"
    assert primitives.interval_name("G", "C") == "P4"
    assert primitives.interval_name("A", "C") == "m3"


def test_scale_notes_in_scale_order() -> None:
    assert primitives.scale_notes("C", "major") == ["C", "D", "E", "F", "G", "A", "B"]
    assert primitives.scale_notes("A", "natural minor") == ["A", "B", "C", "D", "E", "F", "G"]
    assert primitives.scale_notes("A", "harmonic minor")[-1] == "G#"
    assert primitives.scale_notes("F", "lydian")[3] == "B"


def test_unknown_scale() -> None:
    with pytest.raises(UnknownScale):
        primitives.scale_notes("C", "bebop")


def test_parse_chord_symbol() -> None:
    assert primitives.parse_chord_symbol("Bbm7") == ("Bb", "m7", None)
    assert primitives.parse_chord_symbol("C/E") == ("C", "", "E")
    assert primitives.parse_chord_symbol("F#ø7") == ("F#", "m7b5", None)
    assert primitives.chord_quality("Gmaj7") == "major seventh"


def test_unknown_chord() -> None:
    with pytest.raises(UnknownChord):
        primitives.parse_chord_symbol("Cxyz")
    with pytest.raises(UnknownChord):
        primitives.parse_chord_symbol("7")


def test_chord_notes() -> None:
    assert primitives.chord_notes("C") == ["C", "E", "G"]
    assert primitives.chord_notes("Bdim7") == ["B", "D", "F", "Ab"]
    assert primitives.chord_notes("C/E") == ["E", "G", "C"]
    assert primitives.chord_notes("C/D") == ["D", "C", "E", "G"]


def test_triple_accidentals() -> None:
    assert primitives.parse_chord_symbol("Bbbb") == ("Bbbb", "", None)
    assert primitives.parse_chord_symbol("Ebbbm") == ("Ebbb", "m", None)
    assert primitives.parse_chord_symbol("C###dim") == ("C###", "dim", None)
    assert primitives.pitch_class("Bbbb") == 8
    assert primitives.transpose("Ebb", "d5") == "Bbbb"


def test_tonic_name() -> None:
    assert primitives.tonic_name("f##") == "F##"
    assert primitives.tonic_name("Cx") == "C##"
    with pytest.raises(UnknownNote):
        primitives.tonic_name("Ebbb")


def test_interval_semitones() -> None:
    assert primitives.interval_semitones("m3") == 3
    assert primitives.interval_semitones("A4") == 6
    assert primitives.interval_semitones("M9") == 14
