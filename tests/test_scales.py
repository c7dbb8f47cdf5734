from __future__ import annotations

import pytest

from fifthwheel.theory import scales
from fifthwheel.theory.errors import UnknownNote, UnknownScale


def test_exotic_scale_notes() -> None:
    assert scales.scale_notes("C", "major pentatonic") == ["C", "D", "E", "G", "A"]
    assert scales.scale_notes("A", "minor pentatonic") == ["A", "C", "D", "E", "G"]
    assert scales.scale_notes("C", "blues") == ["C", "Eb", "F", "Gb", "G", "Bb"]
    assert scales.scale_notes("E", "phrygian dominant") == ["E", "F", "G#", "A", "B", "C", "D"]
    assert scales.scale_notes("C", "Dorian") == ["C", "D", "Eb", "F", "G", "A", "Bb"]


def test_unknown_scale_is_typed() -> None:
    with pytest.raises(UnknownScale):
        scales.scale_notes("C", "bebop")
    with pytest.raises(KeyError):
        scales.scale_info("C", "bebop")


def test_exotic_catalogue() -> None:
    names = scales.exotic_scales()
    assert "hirajoshi" in names and "whole tone" in names
    assert "major" not in names


def test_symmetrical_scales() -> None:
    whole = scales.analyze_scale("whole tone")
    assert whole["is_symmetrical"] is True
    assert whole["pattern"] == "2-2-2-2-2"
    assert whole["has_augmented_intervals"] is True
    assert scales.analyze_scale("diminished")["pattern"] == "2-1-2-1-2-1-2"
    assert scales.analyze_scale("augmented")["pattern"] == "3-1-3-1-3"


def test_asymmetrical_scales() -> None:
    major = scales.analyze_scale("major")
    assert major == {
        "is_symmetrical": False,
        "is_pentatonic": False,
        "is_heptatonic": True,
        "has_augmented_intervals": False,
        "has_diminished_intervals": False,
        "pattern": None,
    }
    assert scales.analyze_scale("locrian")["has_diminished_intervals"] is True
    assert scales.analyze_scale("yo")["is_pentatonic"] is True


def test_scale_info() -> None:
    info = scales.scale_info("d", "Spanish")
    assert info["name"] == "spanish"
    assert info["tonic"] == "D"
    assert info["notes"] == ["D", "Eb", "F#", "G", "A", "Bb", "C"]
    assert info["note_count"] == 7
    assert info["aliases"] == ["phrygian dominant"]
    assert scales.scale_info("A", "aeolian")["aliases"] == ["minor", "natural minor"]


def test_compatible_scales_for_c_major() -> None:
    found = scales.compatible_scales("C", "major")
    names = [d["scale"] for d in found]
    assert "major" not in names
    assert "major pentatonic" in names
    counts = [d["common_notes"] for d in found]
    assert counts == sorted(counts, reverse=True)

    pent = next(d for d in found if d["scale"] == "major pentatonic")
    assert pent == {
        "name": "C major pentatonic",
        "scale": "major pentatonic",
        "type": "subset",
        "reason": "Subset scale with 5 common notes",
        "common_notes": 5,
    }
    lydian = next(d for d in found if d["scale"] == "lydian")
    assert (lydian["type"], lydian["common_notes"]) == ("parallel", 6)
    diminished = next(d for d in found if d["scale"] == "diminished")
    assert diminished["type"] == "extended"


def test_compatible_scales_skip_identical_formulas() -> None:
    names = [d["scale"] for d in scales.compatible_scales("A", "natural minor")]
    assert "minor" not in names
    assert "dorian" in names


def test_compatible_scales_threshold() -> None:
    # in sen (C Db F G Bb) meets C major on C, F and G; iwato on C and F
    found = scales.compatible_scales("C", "major", candidates=["in sen", "iwato"])
    assert [d["scale"] for d in found] == ["in sen"]
    assert found[0]["common_notes"] == 3


def test_scales_containing_notes() -> None:
    found = scales.scales_containing_notes(["C", "E", "G", "B"])
    assert "C major" in found
    assert "G major" in found
    assert "A natural minor" in found
    assert "C minor pentatonic" not in found
    assert len(found) == len(set(found))


def test_scales_containing_notes_rejects_bad_input() -> None:
    with pytest.raises(ValueError):
        scales.scales_containing_notes([])
    with pytest.raises(UnknownNote):
        scales.scales_containing_notes(["C", "H"])
