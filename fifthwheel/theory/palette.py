from types import MappingProxyType
from typing import List, Mapping, Optional, Sequence, Tuple

from .harmony import label_function
from .keys import Key

STYLES: Tuple[str, ...] = ('pop', 'jazz', 'folk')

# last function ("start" for an empty history) -> (major column, minor column)
NEXT_CHORDS: Mapping[str, Tuple[Tuple[str, ...], Tuple[str, ...]]] = MappingProxyType({
    'start': (('I', 'IV', 'V', 'vi'),  ('i', 'iv', 'v', 'bVI')),
    'T':     (('IV', 'ii', 'V', 'vi'), ('iv', 'ii°', 'V', 'bVI')),
    'SD':    (('V', 'I', 'vi'),        ('V', 'i', 'bVI')),
    'D':     (('I', 'vi', 'IV'),       ('i', 'bVI', 'iv')),
})


def build_palette(key: Key, sevenths: bool = False) -> List[str]:
    """Diatonic numerals of the key, degree I through VII."""
    return list(key.sevenths if sevenths else key.triads)


def suggest_next(history: Sequence[str], key: Key, style: Optional[str] = None) -> List[str]:
    """
    Candidate numerals to follow ``history``.

    Only the function of the last chord matters. ``style`` is validated but
    does not change the table.
    """
    if style is not None and style not in STYLES:
        raise ValueError(f"style must be one of {STYLES}, not {style!r}")
    last = label_function(history[-1], key) if history else 'start'
    major_col, minor_col = NEXT_CHORDS[last]
    return list(minor_col if key.is_minor_like else major_col)
