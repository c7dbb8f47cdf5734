"""
Scale catalogue beyond the seven modes, and scale-to-scale comparison.

The exotic formulas live here rather than in ``primitives.SCALE_INTERVALS``
so that key modes stay limited to heptatonic church modes. Lookups accept
either table.
"""

import logging
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Set, Tuple

from . import primitives
from .errors import UnknownScale

LOGGER = logging.getLogger(__name__)

EXOTIC_SCALES: Mapping[str, Tuple[str, ...]] = MappingProxyType({
    'major pentatonic':   ('P1', 'M2', 'M3', 'P5', 'M6'),
    'minor pentatonic':   ('P1', 'm3', 'P4', 'P5', 'm7'),
    'egyptian':           ('P1', 'M2', 'P4', 'P5', 'm7'),
    'hirajoshi':          ('P1', 'M2', 'm3', 'P5', 'm6'),
    'in sen':             ('P1', 'm2', 'P4', 'P5', 'm7'),
    'iwato':              ('P1', 'm2', 'P4', 'd5', 'm7'),
    'yo':                 ('P1', 'M2', 'P4', 'P5', 'M6'),
    'blues':              ('P1', 'm3', 'P4', 'd5', 'P5', 'm7'),
    'blues major':        ('P1', 'M2', 'm3', 'M3', 'P5', 'M6'),
    'whole tone':         ('P1', 'M2', 'M3', 'A4', 'A5', 'm7'),
    'augmented':          ('P1', 'm3', 'M3', 'P5', 'A5', 'M7'),
    'prometheus':         ('P1', 'M2', 'M3', 'A4', 'M6', 'm7'),
    'phrygian dominant':  ('P1', 'm2', 'M3', 'P4', 'P5', 'm6', 'm7'),
    'spanish':            ('P1', 'm2', 'M3', 'P4', 'P5', 'm6', 'm7'),
    'double harmonic':    ('P1', 'm2', 'M3', 'P4', 'P5', 'm6', 'M7'),
    'raga bhairav':       ('P1', 'm2', 'M3', 'P4', 'P5', 'm6', 'M7'),
    'raga todi':          ('P1', 'm2', 'm3', 'A4', 'P5', 'm6', 'M7'),
    'gypsy':              ('P1', 'M2', 'm3', 'A4', 'P5', 'm6', 'M7'),
    'enigmatic':          ('P1', 'm2', 'M3', 'A4', 'A5', 'A6', 'M7'),
    'diminished':         ('P1', 'M2', 'm3', 'P4', 'd5', 'm6', 'M6', 'M7'),
})

# candidates for compatible_scales; "minor" stands for the natural minor
STANDARD_MODES: Tuple[str, ...] = ('major', 'minor', 'dorian', 'phrygian',
                                   'lydian', 'mixolydian', 'locrian')

SEARCH_ROOTS: Tuple[str, ...] = ('C', 'Db', 'D', 'Eb', 'E', 'F', 'F#',
                                 'G', 'Ab', 'A', 'Bb', 'B')


def scale_intervals(name: str) -> Tuple[str, ...]:
    key = name.strip().lower() if isinstance(name, str) else name
    ivs = primitives.SCALE_INTERVALS.get(key) or EXOTIC_SCALES.get(key)
    if ivs is None:
        raise UnknownScale(name)
    return ivs


def scale_notes(tonic: str, name: str) -> List[str]:
    """Like ``primitives.scale_notes`` but also knows the exotic formulas."""
    return [primitives.transpose(tonic, iv) for iv in scale_intervals(name)]


def exotic_scales() -> List[str]:
    return list(EXOTIC_SCALES)


# ──────────────────────────────────────────────────────────────────────────────
# Structure
# ──────────────────────────────────────────────────────────────────────────────

def _steps(intervals: Sequence[str]) -> List[int]:
    semis = [primitives.interval_semitones(iv) for iv in intervals]
    return [b - a for a, b in zip(semis, semis[1:])]


def _is_symmetrical(steps: Sequence[int]) -> bool:
    if not steps:
        return False
    if len(set(steps)) == 1:
        return True
    # two alternating step sizes, e.g. 2-1-2-1
    return (len(steps) >= 4
            and all(s == steps[0] for s in steps[0::2])
            and all(s == steps[1] for s in steps[1::2]))


def analyze_intervals(intervals: Sequence[str]) -> Dict[str, Any]:
    steps = _steps(intervals)
    symmetrical = _is_symmetrical(steps)
    return {
        "is_symmetrical"          : symmetrical,
        "is_pentatonic"           : len(intervals) == 5,
        "is_heptatonic"           : len(intervals) == 7,
        "has_augmented_intervals" : any(iv.startswith('A') for iv in intervals),
        "has_diminished_intervals": any(iv.startswith('d') for iv in intervals),
        "pattern"                 : '-'.join(str(s) for s in steps) if symmetrical else None,
    }


def analyze_scale(name: str) -> Dict[str, Any]:
    return analyze_intervals(scale_intervals(name))


def _aliases(name: str) -> List[str]:
    ivs = scale_intervals(name)
    tables = list(primitives.SCALE_INTERVALS.items()) + list(EXOTIC_SCALES.items())
    return sorted({other for other, o_ivs in tables if o_ivs == ivs and other != name})


def scale_info(tonic: str, name: str) -> Dict[str, Any]:
    """
    Notes and structure of ``<tonic> <name>``.

    ``aliases`` lists every other catalogued name with the same formula
    (``spanish`` and ``phrygian dominant``, ``minor`` and ``aeolian``).
    """
    name = name.strip().lower()
    ivs  = scale_intervals(name)
    return {
        "name"           : name,
        "tonic"          : primitives.spell(tonic),
        "notes"          : scale_notes(tonic, name),
        "intervals"      : list(ivs),
        "note_count"     : len(ivs),
        "characteristics": analyze_intervals(ivs),
        "aliases"        : _aliases(name),
    }


# ──────────────────────────────────────────────────────────────────────────────
# Comparison
# ──────────────────────────────────────────────────────────────────────────────

def _pitch_classes(notes: Iterable[str]) -> Set[int]:
    return {primitives.pitch_class(n) for n in notes}


def _compat_reason(source_size: int, candidate_size: int, common: int) -> Tuple[str, str]:
    if candidate_size < source_size:
        return 'subset', f"Subset scale with {common} common notes"
    if candidate_size == source_size:
        return 'parallel', f"Parallel mode with {common} common notes"
    return 'extended', f"Extended scale with {common} common notes"


def compatible_scales(tonic: str, name: str,
                      candidates: Optional[Sequence[str]] = None) -> List[Dict[str, Any]]:
    """
    Scales on the same tonic that share enough pitch classes with ``name``.

    A candidate qualifies with 3 common notes when it has at most five notes,
    4 otherwise. Results are ordered by common-note count, most first; ties
    keep candidate order (standard modes, then the exotic catalogue).
    Candidates with the same formula as ``name`` are skipped.
    """
    name    = name.strip().lower()
    formula = scale_intervals(name)
    source  = _pitch_classes(scale_notes(tonic, name))
    if candidates is None:
        candidates = STANDARD_MODES + tuple(EXOTIC_SCALES)

    found = []
    for cand in candidates:
        cand_ivs = scale_intervals(cand)
        if cand_ivs == formula:
            continue
        common   = len(source & _pitch_classes(scale_notes(tonic, cand)))
        need     = 3 if len(cand_ivs) <= 5 else 4
        if common < need:
            continue
        kind, reason = _compat_reason(len(source), len(cand_ivs), common)
        found.append({
            "name"        : f"{primitives.spell(tonic)} {cand}",
            "scale"       : cand,
            "type"        : kind,
            "reason"      : reason,
            "common_notes": common,
        })
    found.sort(key=lambda d: -d["common_notes"])
    LOGGER.debug("%d scales compatible with %s %s", len(found), tonic, name)
    return found


def scales_containing_notes(notes: Sequence[str]) -> List[str]:
    """
    Every ``"<root> <scale>"`` whose pitch classes include all of ``notes``.

    Roots run C..B with flats for the black keys; raises ValueError for an
    empty note list and UnknownNote for a bad spelling.
    """
    if not notes:
        raise ValueError("need at least one note")
    wanted = _pitch_classes(notes)
    names  = [n for n in primitives.SCALE_INTERVALS if n not in ('ionian', 'aeolian', 'minor')]
    names += list(EXOTIC_SCALES)

    found = []
    for root in SEARCH_ROOTS:
        for name in names:
            if wanted <= _pitch_classes(scale_notes(root, name)):
                found.append(f"{root} {name}")
    return found
