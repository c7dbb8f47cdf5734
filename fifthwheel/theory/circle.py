"""
Circle Position Model.

Every pitch class owns one of twelve slots, numbered by ascending fifths from
F (slot 0) so that C major's seven notes fill slots 0-6. A key's slot is its
tonic's slot shifted by the mode's distance from the parent major, so
D dorian, A aeolian and F lydian all land on C's slot.

Slots are assigned by pitch class, never by spelling: F# and Gb share a slot.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from . import primitives
from .errors import InvalidKeyConfiguration, UnknownNote
from .keys import MODES, MODE_ORDER, Key, parse_roman

LOGGER = logging.getLogger(__name__)

# slot -> pitch class (F C G D A E B F# C# G# D# A#)
SLOT_PCS: Tuple[int, ...] = tuple((5 + 7 * s) % 12 for s in range(12))
# pitch class -> slot
PC_SLOTS: Tuple[int, ...] = tuple(SLOT_PCS.index(pc) for pc in range(12))

SLOT_NAMES   : Tuple[str, ...] = ('F','C','G','D','A','E','B','F#','C#','G#','D#','A#')
SLOT_NAMES_b : Tuple[str, ...] = ('F','C','G','D','A','E','B','Gb','Db','Ab','Eb','Bb')

# Rotation track for tonics: sharp side clockwise from C, then the flat side.
CIRCLE_OF_FIFTHS_ORDER: Tuple[str, ...] = (
    'C', 'G', 'D', 'A', 'E', 'B', 'F#', 'C#',
    'G#', 'D#', 'A#',
    'F', 'Bb', 'Eb', 'Ab', 'Db', 'Gb', 'Cb',
)

CLASSIC_KEY_SIGNATURES: Tuple[str, ...] = (
    'C#', 'F#', 'B', 'E', 'A', 'D', 'G', 'C',
    'F', 'Bb', 'Eb', 'Ab', 'Db', 'Gb', 'Cb',
)

# Spelling rank used to order notes around the circle (flats, naturals, sharps).
_SPELLING_ORDER: Tuple[str, ...] = (
    'Fb', 'Cb', 'Gb', 'Db', 'Ab', 'Eb', 'Bb',
    'F', 'C', 'G', 'D', 'A', 'E', 'B',
    'F#', 'C#', 'G#', 'D#', 'A#', 'E#', 'B#',
)


# ──────────────────────────────────────────────────────────────────────────────
# Slots
# ──────────────────────────────────────────────────────────────────────────────

def mode_offset(mode: str) -> int:
    spec = MODES.get(mode)
    if spec is None:
        raise InvalidKeyConfiguration(f"unknown mode {mode!r}")
    return spec.circle_offset

def slot_of_pc(pc: int) -> int:
    return PC_SLOTS[pc % 12]


def slot_of(name: str, mode: Optional[str] = None, strict: bool = False) -> int:
    """
    Circle slot of a pitch spelling, optionally shifted by a mode offset.

    An unrecognised spelling maps to slot 0 (with a warning) unless
    ``strict`` is set, in which case UnknownNote propagates.
    """
    offset = mode_offset(mode) if mode is not None else 0
    try:
        base = slot_of_pc(primitives.pitch_class(name))
    except UnknownNote:
        if strict:
            raise
        LOGGER.warning("unrecognised pitch spelling %r; using slot 0", name)
        base = 0
    return (base + offset) % 12


def key_slot(key: Key, strict: bool = False) -> int:
    """Slot of the key signature's parent major."""
    return slot_of(key.tonic, key.mode, strict=strict)


def slot_name(slot: int, prefer_flat: bool = False) -> str:
    return (SLOT_NAMES_b if prefer_flat else SLOT_NAMES)[slot % 12]


# ──────────────────────────────────────────────────────────────────────────────
# Per-key views
# ──────────────────────────────────────────────────────────────────────────────

def scale_of(key: Key) -> List[str]:
    return primitives.scale_notes(key.tonic, key.scale_name)


def _circle_rank(note: str) -> Tuple[int, int]:
    rank = _SPELLING_ORDER.index(note) if note in _SPELLING_ORDER else len(_SPELLING_ORDER)
    return (rank, slot_of_pc(primitives.pitch_class(note)))


def diatonic_notes(key: Key) -> List[str]:
    """Scale members ordered around the circle (flat side first)."""
    return sorted(scale_of(key), key=_circle_rank)


def diatonic_slots(key: Key) -> List[int]:
    return sorted(slot_of_pc(primitives.pitch_class(n)) for n in scale_of(key))


def degree_slots(key: Key) -> List[Dict[str, Any]]:
    notes = scale_of(key)
    return [{"degree": i + 1,
             "roman": key.triads[i],
             "note": n,
             "slot": slot_of_pc(primitives.pitch_class(n)),
             "is_tonic": i == 0}
            for i, n in enumerate(notes)]


def _triad_quality(roman: str) -> str:
    q = parse_roman(roman).quality
    return q if q in ('major', 'minor', 'diminished', 'augmented') else 'major'


def triad_quality_slots(key: Key) -> List[Dict[str, Any]]:
    return [{"slot": d["slot"], "note": d["note"], "quality": _triad_quality(d["roman"])}
            for d in degree_slots(key)]


def are_enharmonic_keys(a: Key, b: Key) -> bool:
    """True when both keys hold the same pitch-class set, however spelled."""
    pcs_a = sorted(primitives.pitch_class(n) for n in scale_of(a))
    pcs_b = sorted(primitives.pitch_class(n) for n in scale_of(b))
    return pcs_a == pcs_b


def classic_key_signatures() -> List[str]:
    return list(CLASSIC_KEY_SIGNATURES)


# ──────────────────────────────────────────────────────────────────────────────
# Rotation
# ──────────────────────────────────────────────────────────────────────────────

def _tonic_index(tonic: str) -> int:
    if tonic in CIRCLE_OF_FIFTHS_ORDER:
        return CIRCLE_OF_FIFTHS_ORDER.index(tonic)
    pc = primitives.pitch_class(tonic)
    for i, name in enumerate(CIRCLE_OF_FIFTHS_ORDER):
        if primitives.pitch_class(name) == pc:
            return i
    return 0


def rotate_circle(key: Key, direction: str = 'clockwise', rotate_by: str = 'tonic') -> Key:
    """
    Step a key one position around the circle.

    Clockwise adds a sharp (or removes a flat). Rotating by 'tonic' walks the
    tonic list; rotating by 'mode' keeps the tonic and moves one step brighter
    (clockwise) or darker along lydian..locrian.
    """
    if direction not in ('clockwise', 'counterclockwise'):
        raise ValueError(f"direction must be 'clockwise' or 'counterclockwise', not {direction!r}")
    step = 1 if direction == 'clockwise' else -1

    if rotate_by == 'tonic':
        n = len(CIRCLE_OF_FIFTHS_ORDER)
        tonic = CIRCLE_OF_FIFTHS_ORDER[(_tonic_index(key.tonic) + step) % n]
        return Key(tonic, key.mode, key.minor_variant)

    if rotate_by == 'mode':
        idx  = MODE_ORDER.index('aeolian' if key.mode == 'minor' else key.mode)
        mode = MODE_ORDER[(idx - step) % len(MODE_ORDER)]
        return Key(key.tonic, mode)

    raise ValueError(f"rotate_by must be 'tonic' or 'mode', not {rotate_by!r}")


# ──────────────────────────────────────────────────────────────────────────────
# Aggregate view
# ──────────────────────────────────────────────────────────────────────────────

def circle_data(key: Key) -> Dict[str, Any]:
    degrees = degree_slots(key)
    return {
        "key"            : key.to_dict(),
        "key_slot"       : key_slot(key),
        "tonic_slot"     : degrees[0]["slot"],
        "diatonic_notes" : diatonic_notes(key),
        "diatonic_slots" : diatonic_slots(key),
        "degrees"        : degrees,
        "chord_qualities": triad_quality_slots(key),
    }
