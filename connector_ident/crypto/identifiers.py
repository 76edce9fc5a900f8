"""
Card Reader Serial Identifiers

A connector is identified by the serial numbers of its card readers. Each
serial number is an opaque 8-byte value, obtained either from a fixed list
(bench testing) or by reading the readers' sysfs ``serial`` files.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence, Tuple, Union

from ..core.constants import (
    DEFAULT_CARD_READERS,
    NUMBER_OF_CARD_READERS,
    SERIAL_NUMBER_LENGTH,
)
from ..core.exceptions import IdentifierUnavailableException

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SerialIdentifier:
    """Serial number of one card reader."""

    value: bytes

    def __post_init__(self):
        if not isinstance(self.value, (bytes, bytearray, memoryview)):
            raise TypeError(
                f"Serial identifier must be bytes, not {type(self.value).__name__}"
            )
        value = bytes(self.value)
        if len(value) != SERIAL_NUMBER_LENGTH:
            raise ValueError(
                f"Serial identifier must be {SERIAL_NUMBER_LENGTH} bytes, got {len(value)}"
            )
        object.__setattr__(self, "value", value)

    @classmethod
    def from_text(cls, text: str) -> "SerialIdentifier":
        """Build an identifier from its printable form, e.g. ``"23421337"``."""
        return cls(text.encode("utf-8"))

    @classmethod
    def coerce(
        cls, value: Union["SerialIdentifier", bytes, bytearray, str]
    ) -> "SerialIdentifier":
        if isinstance(value, SerialIdentifier):
            return value
        if isinstance(value, str):
            return cls.from_text(value)
        return cls(value)

    def __bytes__(self) -> bytes:
        return self.value

    def __repr__(self) -> str:
        # Identity material: show the length only
        return f"SerialIdentifier(<{len(self.value)} bytes>)"


class IdentifierSource(ABC):
    """Supplies the serial identifier of each card reader slot."""

    @property
    @abstractmethod
    def slot_count(self) -> int:
        """Number of card reader slots served by this source."""

    @abstractmethod
    def get(self, slot_index: int) -> SerialIdentifier:
        """
        Return the identifier of one slot.

        Raises:
            IdentifierUnavailableException: the slot cannot produce 8 bytes
        """

    def read_all(self) -> Tuple[SerialIdentifier, ...]:
        """Read every slot in order. The first failure aborts the read."""
        return tuple(self.get(slot_index) for slot_index in range(self.slot_count))


class StaticIdentifierSource(IdentifierSource):
    """Identifiers given up front, e.g. from configuration."""

    def __init__(self, identifiers: Sequence[Union[SerialIdentifier, bytes, str]]):
        self._identifiers = tuple(SerialIdentifier.coerce(i) for i in identifiers)

    @property
    def slot_count(self) -> int:
        return len(self._identifiers)

    def get(self, slot_index: int) -> SerialIdentifier:
        if not 0 <= slot_index < len(self._identifiers):
            raise IdentifierUnavailableException(
                "No serial number configured for slot", slot_index=slot_index
            )
        return self._identifiers[slot_index]


class DeviceIdentifierSource(IdentifierSource):
    """
    Reads serial numbers from card reader device files.

    Only the first 8 bytes of each file are used; sysfs serial files usually
    carry a trailing newline or a longer serial that is truncated here.
    """

    def __init__(
        self, paths: Sequence[Union[str, Path]] = DEFAULT_CARD_READERS
    ):
        if len(paths) != NUMBER_OF_CARD_READERS:
            raise ValueError(
                f"Expected {NUMBER_OF_CARD_READERS} card reader paths, got {len(paths)}"
            )
        self.paths = tuple(Path(p) for p in paths)

    @property
    def slot_count(self) -> int:
        return len(self.paths)

    def get(self, slot_index: int) -> SerialIdentifier:
        if not 0 <= slot_index < len(self.paths):
            raise IdentifierUnavailableException(
                "No card reader configured for slot", slot_index=slot_index
            )

        path = self.paths[slot_index]
        try:
            with open(path, "rb") as fh:
                data = fh.read(SERIAL_NUMBER_LENGTH)
        except OSError as e:
            logger.error(f"Cannot open file {path}: {e}")
            raise IdentifierUnavailableException(
                "Cannot open smart card readers",
                slot_index=slot_index,
                source=str(path),
            ) from e

        if len(data) != SERIAL_NUMBER_LENGTH:
            logger.error(
                f"Cannot read {SERIAL_NUMBER_LENGTH} bytes from file {path}: "
                f"only {len(data)} available"
            )
            raise IdentifierUnavailableException(
                "Cannot read from file", slot_index=slot_index, source=str(path)
            )

        logger.debug(f"Read serial number of slot {slot_index} from {path}")
        return SerialIdentifier(data)
