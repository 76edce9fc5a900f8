"""
Double SHA-512 Entropy Expansion

The serial identifiers are hashed in one SHA-512 context, and the digest is
hashed again; both digests together form the 128-byte entropy buffer that
feeds the digit stream. A single 64-byte digest does not leave enough
accepted bytes after rejection sampling for all PINs.
"""

import hashlib
import logging
from typing import Sequence

from ..core.constants import NUMBER_OF_CARD_READERS
from .identifiers import SerialIdentifier

logger = logging.getLogger(__name__)


class EntropyExpander:
    """Condenses the card reader identifiers into the entropy buffer."""

    def __init__(self, identifier_count: int = NUMBER_OF_CARD_READERS):
        self.identifier_count = identifier_count

    def expand(self, identifiers: Sequence[SerialIdentifier]) -> bytes:
        """
        Compute ``SHA512(id_1 || ... || id_N) || SHA512(SHA512(id_1 || ... || id_N))``.

        Identifiers are concatenated in the given order without separators.
        """
        if len(identifiers) != self.identifier_count:
            raise ValueError(
                f"Expected {self.identifier_count} serial identifiers, got {len(identifiers)}"
            )

        hasher = hashlib.sha512()
        for identifier in identifiers:
            hasher.update(identifier.value)

        first = hasher.digest()
        second = hashlib.sha512(first).digest()

        buffer = first + second

        logger.debug(
            f"Expanded {len(identifiers)} identifiers into {len(buffer)} bytes of entropy"
        )
        return buffer
