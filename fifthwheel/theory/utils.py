from typing import List

NOTE_NAMES   = ['C','C#','D','D#','E','F','F#','G','G#','A','A#','B']
NOTE_NAMES_b = ['C','Db','D','Eb','E','F','Gb','G','Ab','A','Bb','B']

MAJOR_STEPS  = [0, 2, 4, 5, 7, 9, 11]
LETTERS      = 'CDEFGAB'

ROMAN_UP = ['I', 'II', 'III', 'IV', 'V', 'VI', 'VII']
ROMAN_LO = ['i', 'ii', 'iii', 'iv', 'v', 'vi', 'vii']


def nn(pc: int, prefer_flat: bool = False) -> str:
    return (NOTE_NAMES_b if prefer_flat else NOTE_NAMES)[pc % 12]

def mod_signed_dist(a: int, b: int, modulus: int = 12) -> int:
    d = (b - a) % modulus
    if d > modulus // 2:
        d -= modulus
    return d

def mod_abs_dist(a: int, b: int, modulus: int = 12) -> int:
    return abs(mod_signed_dist(a, b, modulus))

def roman_for_degree(degree: int, upper: bool = True) -> str:
    """Bare numeral letters for a 1-based scale degree."""
    return (ROMAN_UP if upper else ROMAN_LO)[(degree - 1) % 7]
