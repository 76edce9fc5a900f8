"""
Connector Ident - Pytest Configuration and Fixtures

This module provides shared fixtures for all tests.
"""

import pytest

from connector_ident.core.constants import TEST_SERIAL_NUMBERS
from connector_ident.crypto.entropy import EntropyExpander


# Reference PIN set for TEST_SERIAL_NUMBERS, computed independently from
# sha512(b"23421337meowmeow*squeak*") and sha512 of that digest.
GOLDEN_PINS = [
    bytes.fromhex("2c794158702577ff"),
    bytes.fromhex("2c238642119782ff"),
    bytes.fromhex("2c050346386081ff"),
    bytes.fromhex("2c645226165500ff"),
    bytes.fromhex("2c245183706555ff"),
    bytes.fromhex("2c179740829935ff"),
]

GOLDEN_FIRST_DIGEST = bytes.fromhex(
    "4f8ddf9eaa7d4d7b568e6fc5b669ea67928a3cb540981a749bfbe1007c975346"
    "4137fa75c52852c7875dc1322ff93c1e9da11a2b7d7a5d0aa53f298bdf6c1b1d"
)

GOLDEN_SECOND_DIGEST = bytes.fromhex(
    "1ff366b11031d771ff0b63b96087d8f6c25403d19a251ff011ab76a594a7a545"
    "04ca2738442b122573efc347a40c06412d8b14eb4d816b896fd56e8f019c4822"
)


class FixedExpander(EntropyExpander):
    """Expander returning a prepared entropy buffer."""

    def __init__(self, buffer: bytes):
        super().__init__()
        self.buffer = buffer
        self.calls = 0

    def expand(self, identifiers):
        self.calls += 1
        return self.buffer


@pytest.fixture
def reference_identifiers():
    """The bench-test serial numbers."""
    return list(TEST_SERIAL_NUMBERS)


@pytest.fixture
def golden_pins():
    return list(GOLDEN_PINS)


@pytest.fixture
def fixed_expander():
    """Factory for expanders over a crafted entropy buffer."""
    return FixedExpander


@pytest.fixture
def reader_files(tmp_path):
    """Card reader serial files holding the reference serial numbers."""
    paths = []
    for index, serial in enumerate(TEST_SERIAL_NUMBERS):
        path = tmp_path / f"reader-{index}" / "serial"
        path.parent.mkdir()
        path.write_bytes(serial + b"\n")
        paths.append(str(path))
    return paths


@pytest.fixture
def clean_env(monkeypatch):
    """Remove connector-ident settings from the environment."""
    for name in (
        "ENVIRONMENT",
        "LOG_LEVEL",
        "CARD_READERS",
        "ALGORITHM",
        "PIN_COUNT",
        "SERIAL_NUMBERS",
    ):
        monkeypatch.delenv(f"CONNECTOR_IDENT_{name}", raising=False)
    return monkeypatch
