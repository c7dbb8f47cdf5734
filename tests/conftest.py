from __future__ import annotations

import logging

import pytest

from fifthwheel.theory.keys import MINOR_VARIANTS, MODES, Key

TONICS = ("C", "G", "F#", "Bb", "Eb", "Db")


def all_keys(tonics=TONICS):
    keys = []
    for tonic in tonics:
        for mode in MODES:
            keys.append(Key(tonic, mode))
        for variant in MINOR_VARIANTS:
            keys.append(Key(tonic, "minor", variant))
    return keys


@pytest.fixture
def c_major() -> Key:
    return Key("C", "major")


@pytest.fixture
def a_minor() -> Key:
    return Key("A", "minor")


@pytest.fixture
def restore_root_logging():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    for handler in list(root.handlers):
        root.removeHandler(handler)
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)
