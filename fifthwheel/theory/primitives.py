"""
Pitch-class and scale primitives backed by music21.

The rest of the engine never touches music21 directly; it asks this module
for four facts only:

    * which pitch class a spelling denotes     (pitch_class, are_enharmonic)
    * which notes a named scale holds          (scale_notes)
    * which notes a chord symbol holds         (chord_notes, parse_chord_symbol)
    * the distance between two spellings       (semitones_between, interval_name)

Spellings use the common ``b`` / ``#`` notation ("Bb", "F#", "Ebb", "Cx").
music21's own ``-`` flat sign is converted on the way in and out.
"""

import re
from typing import Dict, List, Optional, Tuple

from music21.interval import Interval
from music21.pitch import Pitch

from .errors import UnknownChord, UnknownNote, UnknownScale

_ACC       = r'(?:bbb|bb|b|###|##|#|x|♭♭♭|♭♭|♭|♯♯♯|♯♯|♯)'
_NOTE_RE   = re.compile(r'^([A-Ga-g])(' + _ACC + r')?$')
# tonics stop at double accidentals so every degree above them stays spellable
_TONIC_RE  = re.compile(r'^[A-Ga-g](?:bb|b|##|#|x|♭♭|♭|♯♯|♯)?$')
_CHORD_RE  = re.compile(r'^([A-G]' + _ACC + r'?)(.*?)(?:/([A-G]' + _ACC + r'?))?$')


# ──────────────────────────────────────────────────────────────────────────────
# Scale and chord formulas (interval names as music21 spells them)
# ──────────────────────────────────────────────────────────────────────────────

SCALE_INTERVALS: Dict[str, Tuple[str, ...]] = {
    'major':          ('P1', 'M2', 'M3', 'P4', 'P5', 'M6', 'M7'),
    'natural minor':  ('P1', 'M2', 'm3', 'P4', 'P5', 'm6', 'm7'),
    'harmonic minor': ('P1', 'M2', 'm3', 'P4', 'P5', 'm6', 'M7'),
    'melodic minor':  ('P1', 'M2', 'm3', 'P4', 'P5', 'M6', 'M7'),
    'dorian':         ('P1', 'M2', 'm3', 'P4', 'P5', 'M6', 'm7'),
    'phrygian':       ('P1', 'm2', 'm3', 'P4', 'P5', 'm6', 'm7'),
    'lydian':         ('P1', 'M2', 'M3', 'A4', 'P5', 'M6', 'M7'),
    'mixolydian':     ('P1', 'M2', 'M3', 'P4', 'P5', 'M6', 'm7'),
    'locrian':        ('P1', 'm2', 'm3', 'P4', 'd5', 'm6', 'm7'),
}
SCALE_INTERVALS['ionian']  = SCALE_INTERVALS['major']
SCALE_INTERVALS['aeolian'] = SCALE_INTERVALS['natural minor']
SCALE_INTERVALS['minor']   = SCALE_INTERVALS['natural minor']

# canonical suffix -> (quality tag, interval formula)
CHORD_TYPES: Dict[str, Tuple[str, Tuple[str, ...]]] = {
    '':       ('major',                   ('P1', 'M3', 'P5')),
    'm':      ('minor',                   ('P1', 'm3', 'P5')),
    'dim':    ('diminished',              ('P1', 'm3', 'd5')),
    'aug':    ('augmented',               ('P1', 'M3', 'A5')),
    '7':      ('dominant',                ('P1', 'M3', 'P5', 'm7')),
    'maj7':   ('major seventh',           ('P1', 'M3', 'P5', 'M7')),
    'm7':     ('minor seventh',           ('P1', 'm3', 'P5', 'm7')),
    'm7b5':   ('half-diminished',         ('P1', 'm3', 'd5', 'm7')),
    'dim7':   ('diminished seventh',      ('P1', 'm3', 'd5', 'd7')),
    'mMaj7':  ('minor-major seventh',     ('P1', 'm3', 'P5', 'M7')),
    'maj7#5': ('augmented major seventh', ('P1', 'M3', 'A5', 'M7')),
    'sus2':   ('suspended second',        ('P1', 'M2', 'P5')),
    'sus4':   ('suspended fourth',        ('P1', 'P4', 'P5')),
    '6':      ('major sixth',             ('P1', 'M3', 'P5', 'M6')),
    'm6':     ('minor sixth',             ('P1', 'm3', 'P5', 'M6')),
    '9':      ('dominant ninth',          ('P1', 'M3', 'P5', 'm7', 'M9')),
    'm9':     ('minor ninth',             ('P1', 'm3', 'P5', 'm7', 'M9')),
}

CHORD_ALIASES: Dict[str, str] = {
    'M': '', 'maj': '', 'min': 'm', '-': 'm',
    '°': 'dim', 'o': 'dim', '+': 'aug',
    'M7': 'maj7', 'Δ': 'maj7', 'Δ7': 'maj7',
    'min7': 'm7', '-7': 'm7',
    'ø': 'm7b5', 'ø7': 'm7b5', 'min7b5': 'm7b5',
    '°7': 'dim7', 'o7': 'dim7',
    'm(maj7)': 'mMaj7', 'mM7': 'mMaj7',
    '+maj7': 'maj7#5', 'augmaj7': 'maj7#5',
    'min6': 'm6', 'min9': 'm9',
}


# ──────────────────────────────────────────────────────────────────────────────
# Spelling conversion
# ──────────────────────────────────────────────────────────────────────────────

def _to_m21(name: str) -> str:
    m = _NOTE_RE.match(name.strip()) if isinstance(name, str) else None
    if not m:
        raise UnknownNote(f"unrecognised pitch spelling: {name!r}")
    acc = (m.group(2) or '').replace('♭', 'b').replace('♯', '#').replace('x', '##')
    return m.group(1).upper() + acc.replace('b', '-')

def _from_m21(name: str) -> str:
    return name.replace('-', 'b')

def _pitch(name: str) -> Pitch:
    return Pitch(_to_m21(name))


def is_note_name(name: str) -> bool:
    return isinstance(name, str) and bool(_NOTE_RE.match(name.strip()))

def spell(name: str) -> str:
    """Canonical spelling of a note name ("f#" -> "F#", "B♭" -> "Bb")."""
    return _from_m21(_pitch(name).name)

def tonic_name(name: str) -> str:
    """Canonical spelling of a key tonic; at most a double accidental."""
    if not isinstance(name, str) or not _TONIC_RE.match(name.strip()):
        raise UnknownNote(f"unusable tonic spelling: {name!r}")
    return spell(name)

def pitch_class(name: str) -> int:
    return _pitch(name).pitchClass

def interval_semitones(interval_name: str) -> int:
    """Width of a named interval ('m3' -> 3, 'M9' -> 14)."""
    return Interval(interval_name).semitones

def letter(name: str) -> str:
    return _pitch(name).step

def are_enharmonic(a: str, b: str) -> bool:
    """Acoustic identity, ignoring octave and spelling."""
    return pitch_class(a) == pitch_class(b)

def transpose(name: str, interval_name: str) -> str:
    return _from_m21(_pitch(name).transpose(interval_name).name)

def semitones_between(a: str, b: str) -> int:
    """Ascending distance a -> b, 0..11."""
    return (pitch_class(b) - pitch_class(a)) % 12

def interval_name(a: str, b: str) -> str:
    """Spelled ascending interval a -> b within one octave (e.g. 'P5', 'm3')."""
    p1, p2 = _pitch(a), _pitch(b)
    p1.octave = 4
    p2.octave = 4
    if p2.diatonicNoteNum < p1.diatonicNoteNum:
        p2.octave = 5
    return Interval(p1, p2).simpleName


# ──────────────────────────────────────────────────────────────────────────────
# Scales and chords
# ──────────────────────────────────────────────────────────────────────────────

def scale_notes(tonic: str, scale_name: str) -> List[str]:
    """Members of ``<tonic> <scale_name>`` in scale order, spelled from the tonic."""
    ivs = SCALE_INTERVALS.get(scale_name.strip().lower())
    if ivs is None:
        raise UnknownScale(scale_name)
    return [transpose(tonic, iv) for iv in ivs]


def canonical_chord_suffix(suffix: str) -> Optional[str]:
    suffix = CHORD_ALIASES.get(suffix, suffix)
    return suffix if suffix in CHORD_TYPES else None


def parse_chord_symbol(symbol: str) -> Tuple[str, str, Optional[str]]:
    """
    Split a chord symbol into (root, canonical suffix, bass).

    "Bbm7"  -> ("Bb", "m7", None)
    "C/E"   -> ("C", "", "E")
    """
    m = _CHORD_RE.match(symbol.strip()) if isinstance(symbol, str) else None
    if not m:
        raise UnknownChord(f"unrecognised chord symbol: {symbol!r}")
    root, raw, bass = m.group(1), m.group(2), m.group(3)
    suffix = canonical_chord_suffix(raw)
    if suffix is None:
        raise UnknownChord(f"unknown chord type {raw!r} in {symbol!r}")
    return spell(root), suffix, spell(bass) if bass else None


def chord_quality(symbol: str) -> str:
    return CHORD_TYPES[parse_chord_symbol(symbol)[1]][0]


def chord_notes(symbol: str) -> List[str]:
    """Constituent notes of a chord symbol, bass first for slash chords."""
    root, suffix, bass = parse_chord_symbol(symbol)
    notes = [transpose(root, iv) for iv in CHORD_TYPES[suffix][1]]
    if bass is None:
        return notes
    bass_pc = pitch_class(bass)
    for i, n in enumerate(notes):
        if pitch_class(n) == bass_pc:
            return notes[i:] + notes[:i]
    return [bass] + notes
