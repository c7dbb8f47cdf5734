"""
Logging setup for the command front end.

Library modules only create ``LOGGER = logging.getLogger(__name__)`` and never
install handlers; ``configure_logging`` is called once by the entry point.
"""

import logging
import os
import sys
from typing import Optional

VERBOSITY_LEVELS = ("quiet", "info", "debug")

_NUMERIC = {"quiet": logging.WARNING, "info": logging.INFO, "debug": logging.DEBUG}
_FORMAT  = "%(levelname).1s %(name)s: %(message)s"


def _coerce_level_name(level: Optional[str], env_var: str) -> str:
    candidate = (level or "").strip().lower()
    if not candidate:
        candidate = os.environ.get(env_var, "").strip().lower()
    if candidate not in VERBOSITY_LEVELS:
        return "quiet"
    return candidate


def configure_logging(level: Optional[str], env_var: str = "FIFTHWHEEL_VERBOSE") -> str:
    """
    Install one stderr handler on the root logger.

    ``level`` wins over ``env_var``; anything unrecognised resolves to quiet.
    Returns the resolved level name.
    """
    resolved = _coerce_level_name(level, env_var)

    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)

    # stdout carries the JSON responses
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(_FORMAT))
    root.addHandler(handler)
    root.setLevel(_NUMERIC[resolved])

    logging.captureWarnings(True)
    return resolved
