import sys
from pathlib import Path
import importlib
import random
import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


@pytest.fixture()
def m():
    """Lazily import the main module for tests to avoid module-level import."""
    return importlib.import_module("main")


@pytest.fixture()
def rng():
    """Deterministic random source so generated inputs are reproducible."""
    return random.Random(20200615)


@pytest.fixture()
def values_file(tmp_path: Path):
    """Write whitespace-separated integers to a text file and return its path."""

    def _write(values, name="values.txt"):
        path = tmp_path / name
        path.write_text(" ".join(str(v) for v in values) + "\n", encoding="utf-8")
        return path

    return _write


def bits_of(data: bytes) -> str:
    """Return ``data`` as a string of ``0``/``1`` characters, MSB first."""
    return "".join(f"{b:08b}" for b in data)


@pytest.fixture()
def bits_of_fn():
    """
    Fixture that provides the bits_of helper without importing conftest.
    """
    return bits_of
