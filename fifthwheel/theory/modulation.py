"""
Key Transition Planner.

Pivot sets are picked from the relationship between the two keys:

    relative    vi, IV, ii
    parallel    I/i, iv/IV
    P5 / P4 / M2 / m3 above     a fixed pivot table

Keys with no listed relationship get a secondary dominant aimed at the new
tonic instead.
"""

import logging
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Tuple

from . import primitives
from .circle import key_slot
from .keys import Key
from .utils import mod_abs_dist, mod_signed_dist

LOGGER = logging.getLogger(__name__)

RELATIVE_PIVOTS: Tuple[str, ...] = ('vi', 'IV', 'ii')
PARALLEL_PIVOTS: Tuple[str, ...] = ('I/i', 'iv/IV')

# semitones from the old tonic up to the new one -> pivots
INTERVAL_PIVOTS: Mapping[int, Tuple[str, ...]] = MappingProxyType({
    7: ('V', 'I', 'vi'),
    5: ('IV', 'I', 'ii'),
    2: ('V', 'ii'),
    3: ('vi', 'iii'),
})

# semitones -> target numeral of the applied dominant
INTERVAL_ROMANS: Mapping[int, str] = MappingProxyType({
    0: 'I', 2: 'II', 4: 'III', 5: 'IV', 7: 'V', 9: 'VI', 11: 'VII',
})

_MINOR_MODES = ('minor', 'aeolian')

MAX_PIVOTS = 2


# ──────────────────────────────────────────────────────────────────────────────
# Key relationships
# ──────────────────────────────────────────────────────────────────────────────

def _semitones(from_key: Key, to_key: Key) -> int:
    return primitives.semitones_between(from_key.tonic, to_key.tonic)


def is_same_key(from_key: Key, to_key: Key) -> bool:
    return _semitones(from_key, to_key) == 0 and from_key.mode == to_key.mode


def is_relative(from_key: Key, to_key: Key) -> bool:
    """C major -> A minor, or A minor -> C major. Direction matters."""
    semis = _semitones(from_key, to_key)
    if from_key.mode == 'major' and to_key.mode in _MINOR_MODES:
        return semis == 9
    if from_key.mode in _MINOR_MODES and to_key.mode == 'major':
        return semis == 3
    return False


def is_parallel(from_key: Key, to_key: Key) -> bool:
    return _semitones(from_key, to_key) == 0 and from_key.mode != to_key.mode


def key_relationship(from_key: Key, to_key: Key) -> str:
    """One of identical, relative, parallel, interval, distant."""
    if is_same_key(from_key, to_key):
        return 'identical'
    if is_relative(from_key, to_key):
        return 'relative'
    if is_parallel(from_key, to_key):
        return 'parallel'
    if _semitones(from_key, to_key) in INTERVAL_PIVOTS:
        return 'interval'
    return 'distant'


def circle_distance(from_key: Key, to_key: Key, signed: bool = False) -> int:
    """Steps around the circle between the two key signatures."""
    a, b = key_slot(from_key), key_slot(to_key)
    return mod_signed_dist(a, b) if signed else mod_abs_dist(a, b)


# ──────────────────────────────────────────────────────────────────────────────
# Planning
# ──────────────────────────────────────────────────────────────────────────────

def find_pivots(from_key: Key, to_key: Key) -> List[str]:
    relation = key_relationship(from_key, to_key)
    if relation == 'relative':
        return list(RELATIVE_PIVOTS)
    if relation == 'parallel':
        return list(PARALLEL_PIVOTS)
    if relation == 'interval':
        return list(INTERVAL_PIVOTS[_semitones(from_key, to_key)])
    return []


def secondary_target(from_key: Key, to_key: Key) -> str:
    semis = _semitones(from_key, to_key)
    roman = INTERVAL_ROMANS.get(semis)
    if roman is None:
        LOGGER.debug("no numeral for %d semitones (%s -> %s); aiming V/I",
                     semis, from_key, to_key)
        roman = 'I'
    return roman


def plan_transition(from_key: Key, to_key: Key) -> Dict[str, Any]:
    """
    How to get from ``from_key`` to ``to_key``.

    Returns {"kind", "chords", "explanation"} where kind is direct, pivot or
    secondary.
    """
    if is_same_key(from_key, to_key):
        return {"kind": "direct",
                "chords": [],
                "explanation": "Already in the same key - no transition needed."}

    pivots = find_pivots(from_key, to_key)
    if pivots:
        return {"kind": "pivot",
                "chords": pivots[:MAX_PIVOTS],
                "explanation": (f"Pivot chord modulation via {pivots[0]}. This chord exists in both "
                                f"{from_key.tonic} {from_key.mode} and {to_key.tonic} {to_key.mode}.")}

    dominant = f"V/{secondary_target(from_key, to_key)}"
    return {"kind": "secondary",
            "chords": [dominant],
            "explanation": (f"Use secondary dominant {dominant} to tonicize {to_key.tonic}. "
                            f"This creates a temporary dominant-tonic relationship.")}


def describe_interval(from_key: Key, to_key: Key) -> str:
    """Spelled interval between the tonics, e.g. 'P5' for C -> G."""
    return primitives.interval_name(from_key.tonic, to_key.tonic)
