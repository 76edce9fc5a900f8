"""
Connector Ident

Deterministic derivation of smart card PINs from the serial numbers of a
connector's card readers.
"""

from .crypto import (
    PinAlgorithm,
    PinRecord,
    PinSet,
    PinSetDeriver,
    SerialIdentifier,
    derive_all_pins,
    get_pin_by_index,
)

__version__ = "1.0.0"
__all__ = [
    "PinAlgorithm",
    "PinRecord",
    "PinSet",
    "PinSetDeriver",
    "SerialIdentifier",
    "derive_all_pins",
    "get_pin_by_index",
]
