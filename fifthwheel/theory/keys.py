"""
Key model, per-mode lookup tables and the roman-numeral parser.

Roman numerals are read relative to the major scale of the tonic, with
accidentals spelled out: in A minor the mediant is ``bIII`` (C), not ``III``.
Every table below uses that notation so that a palette entry always converts
to the chord the mode actually contains.
"""

import re
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

from . import primitives
from .errors import InvalidKeyConfiguration, ParseError


# ──────────────────────────────────────────────────────────────────────────────
# Roman numerals
# ──────────────────────────────────────────────────────────────────────────────

_ROMAN_RE = re.compile(
    r'^(?P<acc>[b#♭♯])?'
    r'(?P<numeral>VII|VI|IV|V|III|II|I|vii|vi|iv|v|iii|ii|i)'
    r'(?P<suffix>[^/]*)'
    r'(?:/(?P<target>.+))?$')

_DEGREES = {'i': 1, 'ii': 2, 'iii': 3, 'iv': 4, 'v': 5, 'vi': 6, 'vii': 7}

# written suffix -> canonical suffix
ROMAN_SUFFIXES: Mapping[str, str] = MappingProxyType({
    '': '', '°': '°', 'o': '°', 'dim': '°',
    '+': '+', 'aug': '+',
    '7': '7', 'maj7': 'maj7', 'M7': 'maj7', 'Δ': 'maj7', 'Δ7': 'maj7',
    'ø': 'ø7', 'ø7': 'ø7', 'm7b5': 'ø7',
    '°7': '°7', 'o7': '°7', 'dim7': '°7',
    '+maj7': '+maj7', '+M7': '+maj7',
    '6': '6', '9': '9', 'sus2': 'sus2', 'sus4': 'sus4',
})

# (canonical suffix, numeral is upper case) -> quality tag
ROMAN_QUALITIES: Mapping[Tuple[str, bool], str] = MappingProxyType({
    ('', True):      'major',
    ('', False):     'minor',
    ('°', True):     'diminished',
    ('°', False):    'diminished',
    ('+', True):     'augmented',
    ('+', False):    'augmented',
    ('7', True):     'dominant',
    ('7', False):    'minor seventh',
    ('maj7', True):  'major seventh',
    ('maj7', False): 'minor-major seventh',
    ('ø7', True):    'half-diminished',
    ('ø7', False):   'half-diminished',
    ('°7', True):    'diminished seventh',
    ('°7', False):   'diminished seventh',
    ('+maj7', True): 'augmented major seventh',
    ('+maj7', False):'augmented major seventh',
    ('6', True):     'major sixth',
    ('6', False):    'minor sixth',
    ('9', True):     'dominant ninth',
    ('9', False):    'minor ninth',
    ('sus2', True):  'suspended second',
    ('sus2', False): 'suspended second',
    ('sus4', True):  'suspended fourth',
    ('sus4', False): 'suspended fourth',
})


@dataclass(frozen=True)
class ParsedRoman:
    degree           : int
    quality          : str
    accidental       : str = ''
    secondary_target : Optional[str] = None
    numeral          : str = ''
    suffix           : str = ''

    @property
    def is_upper(self) -> bool:
        return self.numeral.isupper()

    @property
    def is_secondary(self) -> bool:
        return self.secondary_target is not None

    @property
    def canonical(self) -> str:
        text = self.accidental + self.numeral + self.suffix
        if self.secondary_target is not None:
            text += '/' + self.secondary_target
        return text


def parse_roman(text: str) -> ParsedRoman:
    """
    Parse a roman numeral such as ``V7``, ``bVI``, ``viiø7`` or ``V7/ii``.

    Raises ParseError for anything else. The secondary target must itself be
    a valid numeral; it is stored in canonical spelling.
    """
    if not isinstance(text, str):
        raise ParseError(f"roman numeral must be a string, got {type(text).__name__}")
    m = _ROMAN_RE.match(text.strip())
    if not m:
        raise ParseError(f"malformed roman numeral: {text!r}")
    suffix = ROMAN_SUFFIXES.get(m.group('suffix'))
    if suffix is None:
        raise ParseError(f"unknown chord suffix {m.group('suffix')!r} in {text!r}")

    target = None
    if m.group('target') is not None:
        try:
            target = parse_roman(m.group('target')).canonical
        except ParseError as e:
            raise ParseError(f"bad secondary target in {text!r}: {e}") from e

    numeral = m.group('numeral')
    acc     = (m.group('acc') or '').replace('♭', 'b').replace('♯', '#')
    return ParsedRoman(
        degree           = _DEGREES[numeral.lower()],
        quality          = ROMAN_QUALITIES[(suffix, numeral.isupper())],
        accidental       = acc,
        secondary_target = target,
        numeral          = numeral,
        suffix           = suffix,
    )


def canonical_roman(text: str) -> Optional[str]:
    """Canonical spelling, or None when the text does not parse."""
    try:
        return parse_roman(text).canonical
    except ParseError:
        return None


# ──────────────────────────────────────────────────────────────────────────────
# Modes
# ──────────────────────────────────────────────────────────────────────────────

MAJOR_FUNCTIONS: Mapping[int, str] = MappingProxyType(
    {1: 'T', 3: 'T', 6: 'T', 2: 'SD', 4: 'SD', 5: 'D', 7: 'D'})
MINOR_FUNCTIONS: Mapping[int, str] = MappingProxyType(
    {1: 'T', 3: 'T', 6: 'T', 2: 'SD', 4: 'SD', 5: 'D', 7: 'D'})


@dataclass(frozen=True)
class ModeSpec:
    name          : str
    scale         : str
    circle_offset : int
    brightness    : int
    triads        : Tuple[str, ...]
    sevenths      : Tuple[str, ...]
    function_table: Mapping[int, str] = field(default_factory=lambda: MAJOR_FUNCTIONS, compare=False)

    @property
    def tonic_is_major(self) -> bool:
        return self.triads[0][0].isupper()


def _mode(name, scale, offset, brightness, triads, sevenths, functions=MAJOR_FUNCTIONS):
    return ModeSpec(name, scale, offset, brightness,
                    tuple(triads.split()), tuple(sevenths.split()), functions)


MODES: Mapping[str, ModeSpec] = MappingProxyType({
    'lydian':     _mode('lydian',     'lydian',        1, 0,
                        'I II iii #iv° V vi vii',
                        'Imaj7 II7 iii7 #ivø7 Vmaj7 vi7 vii7'),
    'major':      _mode('major',      'major',         0, 1,
                        'I ii iii IV V vi vii°',
                        'Imaj7 ii7 iii7 IVmaj7 V7 vi7 viiø7'),
    'mixolydian': _mode('mixolydian', 'mixolydian',   -1, 2,
                        'I ii iii° IV v vi bVII',
                        'I7 ii7 iiiø7 IVmaj7 v7 vi7 bVIImaj7'),
    'dorian':     _mode('dorian',     'dorian',       -2, 3,
                        'i ii bIII IV v vi° bVII',
                        'i7 ii7 bIIImaj7 IV7 v7 viø7 bVIImaj7'),
    'minor':      _mode('minor',      'natural minor', -3, 4,
                        'i ii° bIII iv v bVI bVII',
                        'i7 iiø7 bIIImaj7 iv7 v7 bVImaj7 bVII7',
                        MINOR_FUNCTIONS),
    'aeolian':    _mode('aeolian',    'aeolian',      -3, 4,
                        'i ii° bIII iv v bVI bVII',
                        'i7 iiø7 bIIImaj7 iv7 v7 bVImaj7 bVII7'),
    'phrygian':   _mode('phrygian',   'phrygian',     -4, 5,
                        'i bII bIII iv v° bVI bvii',
                        'i7 bIImaj7 bIII7 iv7 vø7 bVImaj7 bvii7'),
    'locrian':    _mode('locrian',    'locrian',      -5, 6,
                        'i° bII biii iv bV bVI bvii',
                        'iø7 bIImaj7 biii7 iv7 bVmaj7 bVI7 bvii7'),
})

# brightest -> darkest; "minor" shares aeolian's place
MODE_ORDER: Tuple[str, ...] = tuple(sorted((m for m in MODES if m != 'minor'),
                                         key=lambda m: MODES[m].brightness))

MINOR_VARIANTS: Mapping[str, ModeSpec] = MappingProxyType({
    'natural':  MODES['minor'],
    'harmonic': replace(MODES['minor'], scale='harmonic minor',
                        triads=tuple('i ii° bIII+ iv V bVI vii°'.split()),
                        sevenths=tuple('imaj7 iiø7 bIII+maj7 iv7 V7 bVImaj7 vii°7'.split())),
    'melodic':  replace(MODES['minor'], scale='melodic minor',
                        triads=tuple('i ii bIII+ IV V vi° vii°'.split()),
                        sevenths=tuple('imaj7 ii7 bIII+maj7 IV7 V7 viø7 viiø7'.split())),
})


# ──────────────────────────────────────────────────────────────────────────────
# Key
# ──────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Key:
    """An immutable (tonic, mode[, minor_variant]) triple."""

    tonic        : str
    mode         : str = 'major'
    minor_variant: Optional[str] = None

    def __post_init__(self):
        if self.mode not in MODES:
            raise InvalidKeyConfiguration(
                f"unknown mode {self.mode!r}; expected one of {sorted(MODES)}")
        if self.minor_variant is not None:
            if self.mode != 'minor':
                raise InvalidKeyConfiguration(
                    f"minor_variant={self.minor_variant!r} is only valid with mode='minor', "
                    f"not {self.mode!r}")
            if self.minor_variant not in MINOR_VARIANTS:
                raise InvalidKeyConfiguration(
                    f"unknown minor variant {self.minor_variant!r}; "
                    f"expected one of {sorted(MINOR_VARIANTS)}")
        primitives.tonic_name(self.tonic)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'Key':
        if not isinstance(data, Mapping) or 'tonic' not in data:
            raise InvalidKeyConfiguration(f"key needs at least a tonic: {data!r}")
        return cls(data['tonic'], data.get('mode', 'major'), data.get('minor_variant'))

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {"tonic": self.tonic, "mode": self.mode}
        if self.minor_variant is not None:
            d["minor_variant"] = self.minor_variant
        return d

    @property
    def spec(self) -> ModeSpec:
        if self.mode == 'minor':
            return MINOR_VARIANTS[self.minor_variant or 'natural']
        return MODES[self.mode]

    @property
    def scale_name(self) -> str:
        return self.spec.scale

    @property
    def triads(self) -> Tuple[str, ...]:
        return self.spec.triads

    @property
    def sevenths(self) -> Tuple[str, ...]:
        return self.spec.sevenths

    @property
    def is_minor_like(self) -> bool:
        return not self.spec.tonic_is_major

    def __str__(self) -> str:
        if self.minor_variant and self.minor_variant != 'natural':
            return f"{self.tonic} {self.minor_variant} minor"
        return f"{self.tonic} {self.mode}"
