"""
Unbiased Decimal Digit Pairs

Bytes of the entropy buffer are mapped onto two decimal digits (0..99).
Mapping all 256 byte values with a plain modulo would favour 0..55, so only
bytes below 200 are accepted and the rest are skipped (rejection sampling).
Every value in 0..99 then has exactly two preimages.
"""

import logging
from dataclasses import dataclass
from typing import List, Union

from prometheus_client import Counter

from ..core.constants import REJECTION_THRESHOLD
from ..core.exceptions import RandomnessExhaustedException

logger = logging.getLogger(__name__)

ENTROPY_BYTES_REJECTED = Counter(
    "connector_ident_entropy_bytes_rejected_total",
    "Entropy bytes discarded by rejection sampling",
)


@dataclass(frozen=True)
class DigitPair:
    """Two decimal digits, packed into one byte as nibbles."""

    tens: int
    units: int

    def __post_init__(self):
        if not (0 <= self.tens <= 9 and 0 <= self.units <= 9):
            raise ValueError(f"Digits out of range: {self.tens}, {self.units}")

    @classmethod
    def from_byte(cls, byte: int) -> "DigitPair":
        """Map an accepted entropy byte (below the threshold) onto two digits."""
        if not 0 <= byte < REJECTION_THRESHOLD:
            raise ValueError(f"Byte {byte} is outside the accepted range")
        return cls((byte % 100) // 10, byte % 10)

    @classmethod
    def unpack(cls, packed: int) -> "DigitPair":
        return cls(packed >> 4, packed & 0x0F)

    @property
    def value(self) -> int:
        return self.tens * 10 + self.units

    @property
    def packed(self) -> int:
        return (self.tens << 4) | self.units


class DigitStream:
    """
    Forward-only stream of digit pairs over one entropy buffer.

    The stream is consumed by every PIN of a derivation run in turn, so PINs
    never share digit pairs. Once the buffer is used up the stream stays
    exhausted: every further read raises ``RandomnessExhaustedException``.
    It is not a Python iterator: read it with ``take`` or ``next_pair``.
    """

    def __init__(self, buffer: Union[bytes, bytearray, memoryview]):
        if not isinstance(buffer, (bytes, bytearray, memoryview)):
            raise TypeError(
                f"Entropy buffer must be bytes, not {type(buffer).__name__}"
            )
        self._buffer = bytes(buffer)
        self._cursor = 0
        self._accepted = 0
        self._rejected = 0
        self._exhausted = False

    @property
    def cursor(self) -> int:
        """Number of buffer bytes consumed so far."""
        return self._cursor

    @property
    def accepted_count(self) -> int:
        return self._accepted

    @property
    def rejected_count(self) -> int:
        return self._rejected

    @property
    def exhausted(self) -> bool:
        return self._exhausted

    def next_pair(self) -> DigitPair:
        """Return the next digit pair, skipping bytes at or above the threshold."""
        if not self._exhausted:
            while self._cursor < len(self._buffer):
                byte = self._buffer[self._cursor]
                self._cursor += 1
                if byte < REJECTION_THRESHOLD:
                    self._accepted += 1
                    return DigitPair.from_byte(byte)
                self._rejected += 1
                ENTROPY_BYTES_REJECTED.inc()

            self._exhausted = True
            logger.debug(
                f"Entropy buffer exhausted after {self._accepted} digit pairs "
                f"({self._rejected} bytes rejected)"
            )

        raise RandomnessExhaustedException(
            cursor=self._cursor, accepted=self._accepted
        )

    def take(self, count: int) -> List[DigitPair]:
        """Return the next ``count`` digit pairs in buffer order."""
        return [self.next_pair() for _ in range(count)]
