from __future__ import annotations

import pytest

from fifthwheel.theory.errors import InvalidKeyConfiguration, ParseError, UnknownNote
from fifthwheel.theory.keys import MODE_ORDER, MODES, Key, canonical_roman, parse_roman


def test_parse_plain_numerals() -> None:
    p = parse_roman("IV")
    assert (p.degree, p.quality, p.accidental) == (4, "major", "")
    assert parse_roman("vi").quality == "minor"
    assert parse_roman("V7").quality == "dominant"
    assert parse_roman("ii7").quality == "minor seventh"


def test_parse_accidentals_and_glyphs() -> None:
    p = parse_roman("♭VI")
    assert (p.degree, p.accidental, p.canonical) == (6, "b", "bVI")
    assert parse_roman("#iv°").accidental == "#"


def test_suffix_aliases_fold_to_canonical() -> None:
    assert canonical_roman("viio") == "vii°"
    assert canonical_roman("viidim") == "vii°"
    assert canonical_roman("IIIaug") == "III+"
    assert canonical_roman("IM7") == "Imaj7"
    assert canonical_roman("viim7b5") == "viiø7"
    assert canonical_roman("nonsense") is None


def test_secondary_target() -> None:
    p = parse_roman("V7/ii")
    assert p.is_secondary
    assert p.secondary_target == "ii"
    assert p.degree == 5
    assert parse_roman("viio7/V").canonical == "vii°7/V"


@pytest.mark.parametrize("text", ["", "X", "VIII?", "Vxyz", "V/", "V/X", "bb", None, 5])
def test_malformed_numerals_raise(text) -> None:
    with pytest.raises(ParseError):
        parse_roman(text)


def test_parse_error_is_a_value_error() -> None:
    with pytest.raises(ValueError):
        parse_roman("Q")


def test_key_validation() -> None:
    with pytest.raises(InvalidKeyConfiguration):
        Key("C", "blues")
    with pytest.raises(InvalidKeyConfiguration):
        Key("C", "dorian", "harmonic")
    with pytest.raises(InvalidKeyConfiguration):
        Key("A", "minor", "hungarian")
    assert Key("A", "minor", "natural").minor_variant == "natural"


def test_key_equality_is_structural() -> None:
    assert Key("C") == Key("C", "major")
    assert Key("C", "major") != Key("C", "lydian")
    assert len({Key("C"), Key("C", "major")}) == 1


def test_key_dict_round_trip() -> None:
    key = Key("A", "minor", "harmonic")
    assert Key.from_dict(key.to_dict()) == key
    assert Key.from_dict({"tonic": "G"}) == Key("G", "major")
    assert Key("D", "dorian").to_dict() == {"tonic": "D", "mode": "dorian"}
    with pytest.raises(InvalidKeyConfiguration):
        Key.from_dict({"mode": "major"})


def test_minor_variant_tables() -> None:
    assert Key("A", "minor").triads == ("i", "ii°", "bIII", "iv", "v", "bVI", "bVII")
    assert Key("A", "minor", "harmonic").triads[4] == "V"
    assert Key("A", "minor", "melodic").triads[3] == "IV"
    assert Key("A", "minor", "harmonic").scale_name == "harmonic minor"
    assert str(Key("A", "minor", "harmonic")) == "A harmonic minor"
    assert str(Key("D", "dorian")) == "D dorian"


def test_every_mode_has_seven_parsable_numerals() -> None:
    for spec in MODES.values():
        assert len(spec.triads) == len(spec.sevenths) == 7
        for roman in spec.triads + spec.sevenths:
            assert parse_roman(roman).canonical == roman


def test_minor_likeness() -> None:
    assert not Key("C", "mixolydian").is_minor_like
    assert not Key("C", "lydian").is_minor_like
    assert Key("C", "dorian").is_minor_like
    assert Key("C", "locrian").is_minor_like


def test_tonic_spelling_is_validated() -> None:
    assert Key("Ebb", "locrian").tonic == "Ebb"
    assert Key("F##").tonic == "F##"
    for tonic in ("H", "Ebbb", "C###", ""):
        with pytest.raises(UnknownNote):
            Key(tonic)


def test_mode_order_follows_brightness() -> None:
    assert MODE_ORDER == ("lydian", "major", "mixolydian", "dorian", "aeolian", "phrygian", "locrian")
    levels = [MODES[m].brightness for m in MODE_ORDER]
    assert levels == sorted(set(levels))
    assert MODES["minor"].brightness == MODES["aeolian"].brightness
