"""
Extended and altered chord symbols: C9, G7b9#11, Dm11, Fadd9, Bbmaj7#11/D.

``primitives.parse_chord_symbol`` only knows the fixed suffix table used by
roman-numeral conversion. This module reads a symbol token by token so that
extensions, alterations and added tones combine freely.
"""

import re
from typing import Any, Dict, List, Optional, Tuple

from . import primitives
from .convert import chord_root, degree_interval
from .errors import ParseError, UnknownChord, UnknownNote
from .keys import parse_roman

_ROOT_RE  = re.compile(r'^([A-G](?:bbb|bb|b|###|##|#|x|♭♭♭|♭♭|♭|♯♯♯|♯♯|♯)?)(.*)$')
_TOKEN_RE = re.compile(
    r'maj|Maj|min|dim|aug|sus[24]?|add(?:13|11|9|6|4|2)|'
    r'[b#♭♯](?:13|11|9|5)|13|11|9|7|6|M|m|Δ|°|o|ø|\+|-')
_XROMAN_RE = re.compile(
    r'^(?P<acc>[b#♭♯])?(?P<numeral>VII|VI|IV|V|III|II|I|vii|vi|iv|v|iii|ii|i)(?P<ext>.*)$')

_EXTENSION_STACK = (7, 9, 11, 13)
_NATURAL = {9: 'M9', 11: 'P11', 13: 'M13'}
_ALTERED = {
    ('b', 5): 'd5',   ('#', 5): 'A5',
    ('b', 9): 'm9',   ('#', 9): 'A9',
    ('b', 11): 'd11', ('#', 11): 'A11',
    ('b', 13): 'm13', ('#', 13): 'A13',
}
_ADDED = {2: 'M2', 4: 'P4', 6: 'M6', 9: 'M9', 11: 'P11', 13: 'M13'}

# extended numeral text that already states the quality; no 'm' is added
_QUALITY_MARKS = ('°', 'o', 'ø', '+', 'dim', 'aug', 'sus')


def _states_quality(ext: str) -> bool:
    return ext.startswith(_QUALITY_MARKS) or (ext[:1] == 'm' and not ext.startswith('maj'))


def _tokens(body: str, symbol: str) -> List[str]:
    body = body.replace('(', '').replace(')', '').replace(',', '')
    out, pos = [], 0
    while pos < len(body):
        m = _TOKEN_RE.match(body, pos)
        if not m:
            raise UnknownChord(f"cannot read {body[pos:]!r} in {symbol!r}")
        out.append(m.group(0).replace('♭', 'b').replace('♯', '#'))
        pos = m.end()
    return out


def _split_bass(symbol: str) -> Tuple[str, Optional[str]]:
    if '/' not in symbol:
        return symbol, None
    head, bass = symbol.rsplit('/', 1)
    if not primitives.is_note_name(bass):
        raise UnknownChord(f"slash bass {bass!r} is not a note in {symbol!r}")
    return head, primitives.spell(bass)


def parse_extended_chord(symbol: str) -> Dict[str, Any]:
    """
    Read an extended chord symbol.

    Returns root, quality (major, minor, dominant, diminished,
    half-diminished, augmented, sus2 or sus4), extensions, alterations
    ({degree, alteration}), added_tones, bass, symbol and notes. A stated
    extension implies the ones below it: 13 carries 7, 9 and 11. Notes are
    bass first for slash chords. Raises UnknownChord.
    """
    if not isinstance(symbol, str) or not symbol.strip():
        raise UnknownChord(f"unrecognised chord symbol: {symbol!r}")
    symbol = symbol.strip()
    head, bass = _split_bass(symbol)
    m = _ROOT_RE.match(head)
    if not m:
        raise UnknownChord(f"unrecognised chord symbol: {symbol!r}")
    root, tokens = primitives.spell(m.group(1)), _tokens(m.group(2), symbol)

    quality, third, fifth = 'major', 'M3', 'P5'
    i = 0
    if tokens and tokens[0] in ('m', 'min', '-'):
        quality, third, i = 'minor', 'm3', 1
    elif tokens and tokens[0] in ('dim', '°', 'o'):
        quality, third, fifth, i = 'diminished', 'm3', 'd5', 1
    elif tokens and tokens[0] == 'ø':
        quality, third, fifth, i = 'half-diminished', 'm3', 'd5', 1
    elif tokens and tokens[0] in ('aug', '+'):
        quality, fifth, i = 'augmented', 'A5', 1

    major7 = False
    if i < len(tokens) and tokens[i] in ('maj', 'Maj', 'M', 'Δ'):
        major7 = True
        i += 1

    stack: List[int] = []
    alterations: List[Dict[str, Any]] = []
    added: List[int] = []
    sus, sixth = None, False
    for tok in tokens[i:]:
        if tok == '9' and sixth:
            added.append(9)
        elif tok in ('7', '9', '11', '13'):
            if stack:
                raise UnknownChord(f"two extension numbers in {symbol!r}")
            stack = [e for e in _EXTENSION_STACK if e <= int(tok)]
        elif tok == '6':
            sixth = True
        elif tok.startswith('sus'):
            sus = tok[3:] or '4'
        elif tok.startswith('add'):
            added.append(int(tok[3:]))
        elif tok[0] in 'b#':
            alterations.append({"degree": int(tok[1:]), "alteration": tok[0]})
        else:
            raise UnknownChord(f"unexpected {tok!r} in {symbol!r}")

    if not stack and (quality == 'half-diminished' or tokens[i - 1:i] == ['Δ']):
        stack = [7]

    seventh = None
    if stack:
        if major7:
            seventh = 'M7'
        elif quality == 'diminished':
            seventh = 'd7'
        else:
            seventh = 'm7'

    altered = {a["degree"]: _ALTERED[(a["alteration"], a["degree"])] for a in alterations}
    if 5 in altered:
        fifth = altered[5]
    if sus is not None:
        third = 'M2' if sus == '2' else 'P4'

    intervals = ['P1', third, fifth]
    if sixth:
        intervals.append('M6')
    if seventh:
        intervals.append(seventh)
    for ext in (9, 11, 13):
        if ext in altered:
            intervals.append(altered[ext])
        elif ext in stack:
            intervals.append(_NATURAL[ext])
    intervals.extend(_ADDED[a] for a in added)

    if quality == 'major' and stack and not major7:
        quality = 'dominant'
    elif quality == 'minor' and fifth == 'd5' and seventh == 'm7':
        quality = 'half-diminished'
    elif quality == 'major' and sus is not None:
        quality = 'sus' + sus

    notes = [primitives.transpose(root, iv) for iv in intervals]
    if bass is not None:
        bass_pc = primitives.pitch_class(bass)
        notes = [bass] + [n for n in notes if primitives.pitch_class(n) != bass_pc]

    extensions = sorted(set(stack) | {a["degree"] for a in alterations if a["degree"] > 7})
    return {
        "root"       : root,
        "quality"    : quality,
        "extensions" : extensions,
        "alterations": alterations,
        "added_tones": added,
        "bass"       : bass,
        "symbol"     : symbol,
        "notes"      : notes,
    }


def extended_chord_notes(symbol: str) -> List[str]:
    return parse_extended_chord(symbol)["notes"]


def validate_chord_symbol(symbol: str) -> Dict[str, Any]:
    try:
        parse_extended_chord(symbol)
    except (UnknownChord, UnknownNote) as e:
        return {"is_valid": False, "error": str(e)}
    return {"is_valid": True, "error": None}


def slash_chord(chord: str, bass: str) -> Dict[str, Any]:
    """
    ``chord`` over ``bass``.

    ``inversion`` is the index of the bass among the chord tones (0 for root
    position, 1 for first inversion), or -1 when the bass is foreign to the
    chord; the bass then sounds below the full chord.
    """
    tones   = extended_chord_notes(chord)
    bass    = primitives.spell(bass)
    bass_pc = primitives.pitch_class(bass)
    pcs     = [primitives.pitch_class(n) for n in tones]

    if bass_pc in pcs:
        inversion = pcs.index(bass_pc)
        notes = tones[inversion:] + tones[:inversion]
    else:
        inversion = -1
        notes = [bass] + tones
    return {
        "chord"    : chord,
        "bass"     : bass,
        "symbol"   : f"{chord}/{bass}",
        "inversion": inversion,
        "notes"    : notes,
    }


def extended_roman_to_absolute(tonic: str, roman: str) -> str:
    """
    Numeral with free extension text to a chord symbol: ``V7b9`` in G is ``D7b9``.

    Lower-case numerals gain an ``m`` unless the extension names its own
    quality (``vii°7`` -> ``B°7``). A ``/target`` suffix is resolved as a
    secondary chord. Raises ParseError for a bad numeral and UnknownChord when
    the resulting symbol does not read back.
    """
    primitives.tonic_name(tonic)
    if not isinstance(roman, str):
        raise ParseError(f"roman numeral must be a string, got {type(roman).__name__}")
    text, target = roman.strip(), None
    if '/' in text:
        text, target = text.split('/', 1)
    m = _XROMAN_RE.match(text)
    if not m:
        raise ParseError(f"malformed roman numeral: {roman!r}")
    if target is not None:
        tonic = chord_root(tonic, parse_roman(target))

    numeral = m.group('numeral')
    acc     = (m.group('acc') or '').replace('♭', 'b').replace('♯', '#')
    ext     = m.group('ext')
    root    = primitives.transpose(tonic, degree_interval(acc, parse_roman(numeral).degree))
    minor   = numeral.islower() and not _states_quality(ext)
    symbol  = root + ('m' if minor else '') + ext
    parse_extended_chord(symbol)
    return symbol
