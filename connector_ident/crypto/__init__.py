"""
Connector Ident - PIN Derivation Pipeline

Serial identifiers are expanded with a double SHA-512 into a 128-byte entropy
buffer, rejection-sampled into unbiased decimal digit pairs, and packed into
framed PIN records.

Components:
- SerialIdentifier / IdentifierSource: card reader serial numbers
- EntropyExpander: double SHA-512 expansion
- DigitStream: rejection sampling into digit pairs
- PinEncoder / PinRecord: PIN record layout
- PinSetDeriver: orchestration and algorithm selection
"""

from .identifiers import (
    SerialIdentifier,
    IdentifierSource,
    StaticIdentifierSource,
    DeviceIdentifierSource,
)

from .entropy import EntropyExpander

from .digits import (
    DigitPair,
    DigitStream,
)

from .pin import (
    DEFAULT_PIN,
    PinEncoder,
    PinRecord,
)

from .deriver import (
    PinAlgorithm,
    PinSet,
    PinSetDeriver,
    derive_all_pins,
    get_pin_by_index,
)

__all__ = [
    # Identifiers
    "SerialIdentifier",
    "IdentifierSource",
    "StaticIdentifierSource",
    "DeviceIdentifierSource",
    # Entropy
    "EntropyExpander",
    # Digits
    "DigitPair",
    "DigitStream",
    # Records
    "DEFAULT_PIN",
    "PinEncoder",
    "PinRecord",
    # Orchestration
    "PinAlgorithm",
    "PinSet",
    "PinSetDeriver",
    "derive_all_pins",
    "get_pin_by_index",
]
