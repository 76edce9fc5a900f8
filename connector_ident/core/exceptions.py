"""
Connector Ident - Custom Exceptions

This module defines custom exception classes for PIN derivation.
"""

from typing import Any, Dict, Optional


class ConnectorIdentException(Exception):
    """Base exception for all connector-ident errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or "CONNECTOR_IDENT_ERROR"
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            return f"{self.message} (Code: {self.error_code}, Context: {self.context})"
        return f"{self.message} (Code: {self.error_code})"


class ConfigurationException(ConnectorIdentException):
    """Exception raised for configuration-related errors."""

    def __init__(self, message: str, config_key: Optional[str] = None):
        super().__init__(
            message,
            error_code="CONFIG_ERROR",
            context={"config_key": config_key} if config_key else {},
        )


class DerivationException(ConnectorIdentException):
    """Base exception for failures that abort a derivation run."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message, error_code=error_code or "DERIVATION_ERROR", context=context
        )


class IdentifierUnavailableException(DerivationException):
    """Exception raised when a card reader serial number cannot be obtained."""

    def __init__(
        self,
        message: str,
        slot_index: Optional[int] = None,
        source: Optional[str] = None,
    ):
        context = {}
        if slot_index is not None:
            context["slot_index"] = slot_index
        if source:
            context["source"] = source

        super().__init__(message, error_code="IDENTIFIER_UNAVAILABLE", context=context)


class RandomnessExhaustedException(DerivationException):
    """Exception raised when the entropy buffer runs out of acceptable bytes."""

    def __init__(
        self,
        message: str = "End of randomness",
        cursor: Optional[int] = None,
        accepted: Optional[int] = None,
    ):
        context = {}
        if cursor is not None:
            context["cursor"] = cursor
        if accepted is not None:
            context["accepted"] = accepted

        super().__init__(message, error_code="RANDOMNESS_EXHAUSTED", context=context)


class PinIndexOutOfRangeException(ConnectorIdentException):
    """Exception raised when a PIN index outside the derived set is requested."""

    def __init__(self, pin_index: Any, pin_count: int):
        super().__init__(
            f"pin-index out of range (0-{pin_count - 1})",
            error_code="PIN_INDEX_OUT_OF_RANGE",
            context={"pin_index": pin_index, "pin_count": pin_count},
        )
        self.pin_index = pin_index
        self.pin_count = pin_count


class UnsupportedAlgorithmException(ConnectorIdentException):
    """Exception raised for an unknown PIN algorithm selector."""

    def __init__(self, algorithm: Any):
        super().__init__(
            f"Unsupported PIN algorithm: {algorithm!r}",
            error_code="UNSUPPORTED_ALGORITHM",
            context={"algorithm": repr(algorithm)},
        )
        self.algorithm = algorithm
