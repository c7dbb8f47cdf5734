"""Exception taxonomy for the theory engine."""


class TheoryError(Exception):
    """Base class for every fault raised by fifthwheel.theory."""


class ParseError(TheoryError, ValueError):
    """Malformed roman numeral."""


class UnknownNote(TheoryError, ValueError):
    """A pitch spelling that cannot be resolved to a pitch class."""


class UnknownScale(TheoryError, KeyError):
    """No interval table exists for the requested scale name."""


class UnknownChord(TheoryError, ValueError):
    """A chord symbol whose root or suffix cannot be resolved."""


class InvalidKeyConfiguration(TheoryError, ValueError):
    """Key fields that contradict each other (e.g. a minor variant on dorian)."""
