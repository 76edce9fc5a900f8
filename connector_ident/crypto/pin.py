"""
PIN Records

A PIN is stored in the framed record format expected by the smart card:

    byte 0       control flags (0x20) | number of decimal digits (12)
    bytes 1..K   digit pairs, tens digit in the high nibble
    last byte    stop marker 0xFF

With six digit pairs a record is 8 bytes long and holds a 12-digit PIN.
"""

import itertools
from dataclasses import dataclass
from typing import Sequence, Tuple

from ..core.constants import (
    DEFAULT_PIN_DIGIT_CYCLE,
    DIGIT_PAIRS_PER_PIN,
    PIN_CONTROL,
    PIN_LENGTH_MASK,
    PIN_STOP,
)
from .digits import DigitPair, DigitStream


@dataclass(frozen=True)
class PinRecord:
    """One framed PIN record, validated on construction."""

    data: bytes

    def __post_init__(self):
        data = bytes(self.data)
        if len(data) < 3:
            raise ValueError(f"PIN record too short: {len(data)} bytes")

        pair_count = len(data) - 2
        if 2 * pair_count > PIN_LENGTH_MASK:
            raise ValueError(f"PIN record too long: {pair_count} digit pairs")
        expected_header = PIN_CONTROL | (2 * pair_count)
        if data[0] != expected_header:
            raise ValueError(
                f"Invalid PIN header 0x{data[0]:02x}, expected 0x{expected_header:02x}"
            )
        if data[-1] != PIN_STOP:
            raise ValueError(f"Invalid PIN stop byte 0x{data[-1]:02x}")
        for packed in data[1:-1]:
            if (packed >> 4) > 9 or (packed & 0x0F) > 9:
                raise ValueError(f"Invalid digit pair 0x{packed:02x}")

        object.__setattr__(self, "data", data)

    @property
    def length(self) -> int:
        """Number of decimal digits, as encoded in the header byte."""
        return self.data[0] & PIN_LENGTH_MASK

    @property
    def digit_pairs(self) -> Tuple[DigitPair, ...]:
        return tuple(DigitPair.unpack(packed) for packed in self.data[1:-1])

    @property
    def digits(self) -> str:
        """The PIN as a string of decimal digits."""
        return "".join(f"{pair.tens}{pair.units}" for pair in self.digit_pairs)

    def __bytes__(self) -> bytes:
        return self.data

    def __len__(self) -> int:
        return len(self.data)

    def hex(self) -> str:
        return self.data.hex()

    def __str__(self) -> str:
        raw = ", ".join(f"{byte:02x}" for byte in self.data)
        digits = "".join(
            f" {pair.tens:x} {pair.units:x}" for pair in self.digit_pairs
        )
        return f"[{raw}]:{digits}"


class PinEncoder:
    """Packs digit pairs into PIN records of a fixed length."""

    def __init__(self, digit_pairs_per_pin: int = DIGIT_PAIRS_PER_PIN):
        if digit_pairs_per_pin < 1 or 2 * digit_pairs_per_pin > PIN_LENGTH_MASK:
            raise ValueError(
                f"Digit pairs per PIN must be between 1 and {PIN_LENGTH_MASK // 2}"
            )
        self.digit_pairs_per_pin = digit_pairs_per_pin

    @property
    def header(self) -> int:
        return PIN_CONTROL | (2 * self.digit_pairs_per_pin)

    def encode(self, digit_pairs: Sequence[DigitPair]) -> PinRecord:
        if len(digit_pairs) != self.digit_pairs_per_pin:
            raise ValueError(
                f"Expected {self.digit_pairs_per_pin} digit pairs, got {len(digit_pairs)}"
            )
        packed = bytes(pair.packed for pair in digit_pairs)
        return PinRecord(bytes([self.header]) + packed + bytes([PIN_STOP]))

    def encode_from(self, stream: DigitStream) -> PinRecord:
        """Encode the next PIN worth of digit pairs from ``stream``."""
        return self.encode(stream.take(self.digit_pairs_per_pin))

    def default(self) -> PinRecord:
        """The fixed default PIN, digits cycling 1 2 3 4 5 6 7 8 9 1 2 3 ..."""
        digits = list(
            itertools.islice(
                itertools.cycle(DEFAULT_PIN_DIGIT_CYCLE), 2 * self.digit_pairs_per_pin
            )
        )
        return self.encode(
            [DigitPair(tens, units) for tens, units in zip(digits[::2], digits[1::2])]
        )


DEFAULT_PIN = PinEncoder().default()
