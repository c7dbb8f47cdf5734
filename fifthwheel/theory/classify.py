"""
Chord Origin Classifier.

Origins are decided by an ordered rule table; the first rule whose predicate
holds names the origin:

    1. secondary           "/" applied-chord marker          (V/V, vii°7/ii)
    2. diatonic            exact member of the key's 7 triads + 7 sevenths
    3. borrowed            parallel-minor interchange, major keys only
    4. chromatic-mediant   major/minor chord a third from the tonic
    5. borrowed            any other altered root
    6. diatonic            everything else

Numerals that do not parse are reported as custom/unknown.
"""

from typing import Callable, Dict, FrozenSet, List, Sequence, Tuple

from .errors import ParseError
from .keys import Key, ParsedRoman, parse_roman

BORROWED_IN_MAJOR: FrozenSet[str] = frozenset({
    'i', 'i7', 'ii°', 'iiø7', 'bIII', 'bIIImaj7', 'iv', 'iv7', 'v', 'v7',
    'bVI', 'bVImaj7', 'bVII', 'bVII7', 'bII', 'bIImaj7', 'vii°7',
})

CHROMATIC_MEDIANTS: FrozenSet[str] = frozenset({
    'III', 'VI', 'bIII', 'bVI', 'biii', 'bvi', '#iii', '#vi',
})

Predicate = Callable[[ParsedRoman, Key], bool]


def _is_secondary(p: ParsedRoman, key: Key) -> bool:
    return p.is_secondary

def _is_diatonic(p: ParsedRoman, key: Key) -> bool:
    return p.canonical in key.triads or p.canonical in key.sevenths

def _is_borrowed_in_major(p: ParsedRoman, key: Key) -> bool:
    return key.mode == 'major' and p.canonical in BORROWED_IN_MAJOR

def _is_chromatic_mediant(p: ParsedRoman, key: Key) -> bool:
    return p.canonical in CHROMATIC_MEDIANTS

def _has_accidental(p: ParsedRoman, key: Key) -> bool:
    return bool(p.accidental)

def _always(p: ParsedRoman, key: Key) -> bool:
    return True


CLASSIFICATION_RULES: Tuple[Tuple[str, Predicate, str], ...] = (
    ("secondary-marker",   _is_secondary,          "secondary"),
    ("diatonic-table",     _is_diatonic,           "diatonic"),
    ("modal-interchange",  _is_borrowed_in_major,  "borrowed"),
    ("chromatic-mediant",  _is_chromatic_mediant,  "chromatic-mediant"),
    ("altered-root",       _has_accidental,        "borrowed"),
    ("fallback",           _always,                "diatonic"),
)


def _first_match(parsed: ParsedRoman, key: Key) -> Tuple[str, str]:
    for name, predicate, origin in CLASSIFICATION_RULES[:-1]:
        if predicate(parsed, key):
            return name, origin
    name, _predicate, origin = CLASSIFICATION_RULES[-1]
    return name, origin


def match_rule(roman: str, key: Key) -> Tuple[str, str]:
    """(rule name, origin) of the first matching rule. Raises ParseError."""
    return _first_match(parse_roman(roman), key)


def classify(roman: str, key: Key) -> Dict[str, str]:
    try:
        parsed = parse_roman(roman)
    except ParseError:
        return {"origin": "custom", "quality": "unknown"}
    _, origin = _first_match(parsed, key)
    return {"origin": origin, "quality": parsed.quality}


def classify_progression(romans: Sequence[str], key: Key) -> List[Dict[str, str]]:
    return [classify(r, key) for r in romans]
