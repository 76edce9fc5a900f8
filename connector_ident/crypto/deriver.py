"""
Connector PIN Derivation

Derives the PINs of the connector's security module cards from the serial
numbers of its card readers.

Usage:
    # Read the serial numbers from the card readers
    pins = derive_all_pins()

    # Bench testing with known serial numbers
    pins = derive_all_pins([b"23421337", b"meowmeow", b"*squeak*"])
    pin = get_pin_by_index(2, [b"23421337", b"meowmeow", b"*squeak*"])

A run either yields every PIN or raises: the entropy buffer is expanded
once, and one digit stream is threaded through all PIN encodings so that no
digit pair is used twice.
"""

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterator, Optional, Sequence, Tuple, Union

from prometheus_client import Counter, Histogram

from ..core.constants import (
    DIGIT_PAIRS_PER_PIN,
    NUMBER_OF_CARD_READERS,
    NUMBER_OF_PINS,
)
from ..core.exceptions import (
    DerivationException,
    IdentifierUnavailableException,
    PinIndexOutOfRangeException,
    UnsupportedAlgorithmException,
)
from .digits import DigitStream
from .entropy import EntropyExpander
from .identifiers import (
    DeviceIdentifierSource,
    IdentifierSource,
    SerialIdentifier,
    StaticIdentifierSource,
)
from .pin import PinEncoder, PinRecord

logger = logging.getLogger(__name__)

# Metrics
PIN_DERIVATIONS = Counter(
    "connector_ident_pin_derivations_total",
    "Total PIN derivation runs",
    ["algorithm", "outcome"],
)

DERIVATION_TIME = Histogram(
    "connector_ident_derivation_seconds",
    "Time to derive a full PIN set",
    buckets=[0.0001, 0.0005, 0.001, 0.005, 0.01, 0.05, 0.1],
)

IdentifierLike = Union[SerialIdentifier, bytes, bytearray, str]


class PinAlgorithm(Enum):
    """PIN algorithms, keeping their legacy numeric selectors."""

    DEFAULT_PIN = 0
    DOUBLE_SHA512 = 3

    @property
    def label(self) -> str:
        return self.name.lower().replace("_", "-")

    @classmethod
    def parse(cls, value: Any) -> "PinAlgorithm":
        """
        Resolve an algorithm selector.

        Accepts enum members, legacy numeric selectors (0, 3), names
        (``DOUBLE_SHA512``) and labels (``double-sha512``).
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, int) and not isinstance(value, bool):
            for algorithm in cls:
                if algorithm.value == value:
                    return algorithm
        if isinstance(value, str):
            normalized = value.strip().lower().replace("_", "-")
            for algorithm in cls:
                if algorithm.label == normalized:
                    return algorithm
        raise UnsupportedAlgorithmException(value)


@dataclass(frozen=True)
class PinSet:
    """All PINs of one derivation run, in derivation order."""

    pins: Tuple[PinRecord, ...]
    algorithm: PinAlgorithm

    def __len__(self) -> int:
        return len(self.pins)

    def __getitem__(self, index: int) -> PinRecord:
        return self.pins[index]

    def __iter__(self) -> Iterator[PinRecord]:
        return iter(self.pins)


class PinSetDeriver:
    """
    Orchestrates identifiers -> entropy -> digit stream -> PIN records.

    Identifiers passed to ``derive`` take precedence; otherwise they are read
    from the identifier source (the card readers by default).
    """

    def __init__(
        self,
        identifier_source: Optional[IdentifierSource] = None,
        pin_count: int = NUMBER_OF_PINS,
        digit_pairs_per_pin: int = DIGIT_PAIRS_PER_PIN,
        identifier_count: int = NUMBER_OF_CARD_READERS,
        expander: Optional[EntropyExpander] = None,
    ):
        if pin_count < 1:
            raise ValueError(f"Pin count must be positive, got {pin_count}")
        self.identifier_source = identifier_source or DeviceIdentifierSource()
        self.pin_count = pin_count
        self.digit_pairs_per_pin = digit_pairs_per_pin
        self.identifier_count = identifier_count
        self.expander = expander or EntropyExpander(identifier_count)

    @classmethod
    def from_config(cls, config) -> "PinSetDeriver":
        """Build a deriver from a validated ``Config``."""
        serial_numbers = config.derivation.serial_number_bytes()
        if serial_numbers is not None:
            source = StaticIdentifierSource(serial_numbers)
        else:
            source = DeviceIdentifierSource(config.card_readers.paths)
        return cls(identifier_source=source, pin_count=config.derivation.pin_count)

    def derive(
        self,
        identifiers: Optional[Sequence[IdentifierLike]] = None,
        algorithm: Any = PinAlgorithm.DOUBLE_SHA512,
        pin_count: Optional[int] = None,
        digit_pairs_per_pin: Optional[int] = None,
    ) -> PinSet:
        """
        Derive the full PIN set.

        Raises:
            UnsupportedAlgorithmException: unknown algorithm selector
            IdentifierUnavailableException: a serial number could not be read
            RandomnessExhaustedException: the entropy buffer ran out
        """
        algorithm = PinAlgorithm.parse(algorithm)
        pin_count = self.pin_count if pin_count is None else pin_count
        if pin_count < 1:
            raise ValueError(f"Pin count must be positive, got {pin_count}")
        encoder = PinEncoder(
            self.digit_pairs_per_pin
            if digit_pairs_per_pin is None
            else digit_pairs_per_pin
        )

        if algorithm is PinAlgorithm.DEFAULT_PIN:
            PIN_DERIVATIONS.labels(algorithm=algorithm.label, outcome="success").inc()
            return PinSet(pins=(encoder.default(),) * pin_count, algorithm=algorithm)

        start = time.time()
        try:
            serials = self._resolve_identifiers(identifiers)
            stream = DigitStream(self.expander.expand(serials))
            pins = tuple(encoder.encode_from(stream) for _ in range(pin_count))
        except DerivationException as e:
            PIN_DERIVATIONS.labels(algorithm=algorithm.label, outcome=e.error_code.lower()).inc()
            logger.error(f"connector-ident: Could not get connector ident number: {e}")
            raise

        DERIVATION_TIME.observe(time.time() - start)
        PIN_DERIVATIONS.labels(algorithm=algorithm.label, outcome="success").inc()
        logger.debug(
            f"Derived {pin_count} PINs using {stream.accepted_count} digit pairs, "
            f"{stream.rejected_count} entropy bytes rejected"
        )
        return PinSet(pins=pins, algorithm=algorithm)

    def pin_at(
        self,
        pin_index: int,
        identifiers: Optional[Sequence[IdentifierLike]] = None,
        algorithm: Any = PinAlgorithm.DOUBLE_SHA512,
    ) -> PinRecord:
        """Derive the PIN set and return the PIN at ``pin_index``."""
        if (
            not isinstance(pin_index, int)
            or isinstance(pin_index, bool)
            or not 0 <= pin_index < self.pin_count
        ):
            logger.error(
                f"Input parameter pin_index {pin_index} out of range "
                f"(0-{self.pin_count - 1})"
            )
            raise PinIndexOutOfRangeException(pin_index, self.pin_count)

        return self.derive(identifiers, algorithm=algorithm)[pin_index]

    def _resolve_identifiers(
        self, identifiers: Optional[Sequence[IdentifierLike]]
    ) -> Tuple[SerialIdentifier, ...]:
        if identifiers is not None:
            return tuple(SerialIdentifier.coerce(i) for i in identifiers)

        try:
            return self.identifier_source.read_all()
        except IdentifierUnavailableException as e:
            logger.error(f"Could not read serial numbers from card readers: {e}")
            raise


def derive_all_pins(
    identifiers: Optional[Sequence[IdentifierLike]] = None,
) -> PinSet:
    """Get all PINs of all smart cards."""
    return PinSetDeriver().derive(identifiers)


def get_pin_by_index(
    pin_index: int,
    identifiers: Optional[Sequence[IdentifierLike]] = None,
) -> PinRecord:
    """Get the PIN of a single smart card."""
    return PinSetDeriver().pin_at(pin_index, identifiers)
