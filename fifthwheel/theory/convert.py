import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

from . import primitives
from .errors import ParseError, UnknownChord, UnknownNote
from .keys import ParsedRoman, parse_roman
from .utils import LETTERS, MAJOR_STEPS, nn, roman_for_degree

LOGGER = logging.getLogger(__name__)

ENHARMONIC_POLICIES = ("key-signature", "flat", "sharp")

_BASE_INTERVALS = ('P1', 'M2', 'M3', 'P4', 'P5', 'M6', 'M7')

# roman quality tag -> chord-symbol suffix
QUALITY_SUFFIX: Dict[str, str] = {
    'major'                  : '',
    'minor'                  : 'm',
    'diminished'             : 'dim',
    'augmented'              : 'aug',
    'dominant'               : '7',
    'major seventh'          : 'maj7',
    'minor seventh'          : 'm7',
    'half-diminished'        : 'm7b5',
    'diminished seventh'     : 'dim7',
    'minor-major seventh'    : 'mMaj7',
    'augmented major seventh': 'maj7#5',
    'suspended second'       : 'sus2',
    'suspended fourth'       : 'sus4',
    'major sixth'            : '6',
    'minor sixth'            : 'm6',
    'dominant ninth'         : '9',
    'minor ninth'            : 'm9',
}

# chord quality tag -> (upper-case numeral, roman suffix)
QUALITY_ROMAN: Dict[str, Tuple[bool, str]] = {
    'major'                  : (True,  ''),
    'minor'                  : (False, ''),
    'diminished'             : (False, '°'),
    'augmented'              : (True,  '+'),
    'dominant'               : (True,  '7'),
    'major seventh'          : (True,  'maj7'),
    'minor seventh'          : (False, '7'),
    'half-diminished'        : (False, 'ø7'),
    'diminished seventh'     : (False, '°7'),
    'minor-major seventh'    : (False, 'maj7'),
    'augmented major seventh': (True,  '+maj7'),
    'suspended second'       : (True,  'sus2'),
    'suspended fourth'       : (True,  'sus4'),
    'major sixth'            : (True,  '6'),
    'minor sixth'            : (False, '6'),
    'dominant ninth'         : (True,  '9'),
    'minor ninth'            : (False, '9'),
}

# semitones above the tonic -> (accidental, degree), for spellings the
# letter arithmetic cannot express with a single b/#
_SEMITONE_DEGREES: Dict[int, Tuple[str, int]] = {
    0: ('', 1), 1: ('b', 2), 2: ('', 2), 3: ('b', 3), 4: ('', 3), 5: ('', 4),
    6: ('#', 4), 7: ('', 5), 8: ('b', 6), 9: ('', 6), 10: ('b', 7), 11: ('', 7),
}


def degree_interval(accidental: str, degree: int) -> str:
    """Interval name from the tonic to an (accidental, degree) root: bIII -> 'm3'."""
    base = _BASE_INTERVALS[degree - 1]
    qual, num = base[0], base[1:]
    if accidental == 'b':
        qual = 'd' if qual == 'P' else 'm'
    elif accidental == '#':
        qual = 'A'
    return qual + num


def _respell(name: str, policy: str) -> str:
    if policy == "key-signature":
        return name
    return nn(primitives.pitch_class(name), prefer_flat=(policy == "flat"))


def chord_root(tonic: str, parsed: ParsedRoman) -> str:
    """Root spelling of a parsed numeral in the key of ``tonic``."""
    if parsed.secondary_target is not None:
        tonic = chord_root(tonic, parse_roman(parsed.secondary_target))
    return primitives.transpose(tonic, degree_interval(parsed.accidental, parsed.degree))


def roman_to_chord(tonic: str, roman: str, enharmonic_policy: str = "key-signature") -> str:
    """Single-numeral conversion; raises ParseError for malformed input."""
    parsed = parse_roman(roman)
    root   = _respell(chord_root(tonic, parsed), enharmonic_policy)
    return root + QUALITY_SUFFIX[parsed.quality]


def convert_romans(tonic: str, romans: Sequence[str],
                   enharmonic_policy: str = "key-signature") -> List[Dict[str, Any]]:
    """
    Per-element conversion detail: {roman, chord, error}.

    A malformed numeral only fails its own element.
    """
    if enharmonic_policy not in ENHARMONIC_POLICIES:
        raise ValueError(f"enharmonic_policy must be one of {ENHARMONIC_POLICIES}, "
                         f"not {enharmonic_policy!r}")
    primitives.tonic_name(tonic)   # unknown tonic is a caller error, not per-element

    results = []
    for i, roman in enumerate(romans):
        try:
            chord = roman_to_chord(tonic, roman, enharmonic_policy)
            results.append({"roman": roman, "chord": chord, "error": None})
        except ParseError as e:
            LOGGER.warning("cannot convert element %d (%r): %s", i, roman, e)
            results.append({"roman": roman, "chord": None, "error": str(e)})
    return results


def roman_to_absolute(tonic: str, romans: Sequence[str],
                      enharmonic_policy: str = "key-signature") -> List[Optional[str]]:
    return [r["chord"] for r in convert_romans(tonic, romans, enharmonic_policy)]


# ──────────────────────────────────────────────────────────────────────────────
# Absolute -> roman
# ──────────────────────────────────────────────────────────────────────────────

def _root_degree(tonic: str, root: str) -> Tuple[str, int]:
    steps = (LETTERS.index(primitives.letter(root)) - LETTERS.index(primitives.letter(tonic))) % 7
    semis = primitives.semitones_between(tonic, root)
    diff  = (semis - MAJOR_STEPS[steps] + 6) % 12 - 6
    if diff == 0:
        return '', steps + 1
    if diff == -1:
        return 'b', steps + 1
    if diff == 1:
        return '#', steps + 1
    return _SEMITONE_DEGREES[semis]


def chord_to_roman(tonic: str, chord: str) -> str:
    """Roman numeral of an absolute chord symbol in the key of ``tonic``."""
    root, suffix, _bass = primitives.parse_chord_symbol(chord)
    acc, degree = _root_degree(tonic, root)
    upper, roman_suffix = QUALITY_ROMAN[primitives.CHORD_TYPES[suffix][0]]
    return acc + roman_for_degree(degree, upper) + roman_suffix


def absolute_to_roman(tonic: str, chords: Sequence[str]) -> List[Optional[str]]:
    primitives.tonic_name(tonic)
    romans: List[Optional[str]] = []
    for i, chord in enumerate(chords):
        try:
            romans.append(chord_to_roman(tonic, chord))
        except (UnknownChord, UnknownNote) as e:
            LOGGER.warning("cannot convert element %d (%r): %s", i, chord, e)
            romans.append(None)
    return romans
