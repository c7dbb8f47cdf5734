from typing import Any, Dict, List, Sequence

from .classify import classify
from .errors import ParseError
from .keys import Key, parse_roman

# tension weights
BASE_TENSION       = {'T': 0.1, 'SD': 0.4, 'D': 0.7}
W_DOMINANT_MARKER  = 0.2
W_SECONDARY        = 0.3
W_ACCIDENTAL       = 0.2
W_UNSTABLE_QUALITY = 0.15
W_ANTICIPATION     = 0.15
MAX_DISTANCE_TERM  = 0.3

_UNSTABLE_MARKS = ('°', 'o', 'ø', '+')

# cadence hints
PERFECT_AUTHENTIC = '✓ Perfect Authentic Cadence (V-I) - Strong resolution'
HALF_CADENCE      = '⚠ Half Cadence - Ends on dominant (unresolved). Consider adding I to resolve.'
PLAGAL            = '✓ Plagal Cadence (IV-I) - "Amen" cadence'
DECEPTIVE         = '✓ Deceptive Cadence (V-vi) - Surprise resolution'
AUTHENTIC         = '✓ Authentic Cadence - Dominant to Tonic resolution'
WEAK_SUBDOMINANT  = '⚠ Ends on subdominant - Consider V-I or I for stronger resolution'
WEAK_TONIC        = '💡 Weak cadence - Consider adding V before final I for stronger resolution'
II_V_I            = '✓ Strong cadence with ii-V-I progression'

_PAC_PAIRS = {('V', 'I'), ('V', 'i'), ('v', 'i')}


# ──────────────────────────────────────────────────────────────────────────────
# Functional labels
# ──────────────────────────────────────────────────────────────────────────────

def label_function(roman: str, key: Key) -> str:
    """T / SD / D for one numeral. Applied chords are always D."""
    if not isinstance(roman, str):
        return 'T'
    if '/' in roman:
        return 'D'
    try:
        degree = parse_roman(roman).degree
    except ParseError:
        return 'T'
    return key.spec.function_table.get(degree, 'T')


def label_functions(romans: Sequence[str], key: Key) -> List[str]:
    return [label_function(r, key) for r in romans]


# ──────────────────────────────────────────────────────────────────────────────
# Cadences
# ──────────────────────────────────────────────────────────────────────────────

def detect_cadences(romans: Sequence[str], key: Key) -> List[str]:
    """
    Hints about how the progression ends.

    Only the final two chords are inspected (three for the ii-V-I note). At
    most one cadence type is reported; weak-ending advice is given only when
    no cadence type matched.
    """
    if len(romans) < 2:
        return []
    penult, final = romans[-2], romans[-1]
    f_penult = label_function(penult, key)
    f_final  = label_function(final, key)
    hints: List[str] = []

    if (penult, final) in _PAC_PAIRS:
        hints.append(PERFECT_AUTHENTIC)
    elif f_final == 'D':
        hints.append(HALF_CADENCE)
    elif (penult, final) == ('IV', 'I'):
        hints.append(PLAGAL)
    elif (penult, final) == ('V', 'vi'):
        hints.append(DECEPTIVE)
    elif f_penult == 'D' and f_final == 'T':
        hints.append(AUTHENTIC)
    elif f_final == 'SD':
        hints.append(WEAK_SUBDOMINANT)
    elif f_penult == 'T' and f_final == 'T':
        hints.append(WEAK_TONIC)

    if len(romans) >= 3 and tuple(romans[-3:]) == ('ii', 'V', 'I'):
        hints.append(II_V_I)
    return hints


# ──────────────────────────────────────────────────────────────────────────────
# Tension
# ──────────────────────────────────────────────────────────────────────────────

def chord_tension(romans: Sequence[str], index: int, key: Key) -> float:
    """
    Heuristic tension of romans[index] in [0, 1].

    The marker checks read the canonical spelling, so ``iidim`` and ``ii°``
    score alike. Unparseable text is scanned as written.
    """
    roman = romans[index] if isinstance(romans[index], str) else ''
    func  = label_function(roman, key)
    t     = BASE_TENSION[func]
    try:
        parsed = parse_roman(roman)
    except ParseError:
        parsed = None
    text = parsed.canonical if parsed is not None else roman

    if 'V' in text or 'v' in text:
        t += W_DOMINANT_MARKER
    if '/' in text:
        t += W_SECONDARY
    if 'b' in text or '#' in text:
        t += W_ACCIDENTAL
    if any(mark in text for mark in _UNSTABLE_MARKS):
        t += W_UNSTABLE_QUALITY
    if index < len(romans) - 1 and func == 'D' and label_function(romans[index + 1], key) == 'T':
        t += W_ANTICIPATION
    if parsed is not None:
        t += min(abs(parsed.degree - 1) / 6.0, MAX_DISTANCE_TERM)

    return round(max(0.0, min(t, 1.0)), 4)


def tension_curve(romans: Sequence[str], key: Key) -> List[Dict[str, Any]]:
    return [{"position": i, "value": chord_tension(romans, i, key)}
            for i in range(len(romans))]


def describe_tension(value: float) -> str:
    if value < 0.3: return 'Stable/Resolved'
    if value < 0.5: return 'Moderate Tension'
    if value < 0.7: return 'Building Tension'
    return 'High Tension'


# ──────────────────────────────────────────────────────────────────────────────
# Whole-progression analysis
# ──────────────────────────────────────────────────────────────────────────────

def analyze_progression(romans: Sequence[str], key: Key) -> Dict[str, Any]:
    origins = [classify(r, key)["origin"] for r in romans]
    return {
        "functions"      : label_functions(romans, key),
        "cadence_hints"  : detect_cadences(romans, key),
        "tension"        : tension_curve(romans, key),
        "borrowed_count" : origins.count("borrowed"),
        "secondary_count": origins.count("secondary"),
    }
