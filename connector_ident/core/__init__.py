"""
Connector Ident - Core Module

This module provides the core infrastructure for PIN derivation including
configuration management, constants, and exception handling.
"""

from .config import Config, CardReaderConfig, DerivationConfig, get_config, load_config
from .exceptions import (
    ConnectorIdentException,
    ConfigurationException,
    DerivationException,
    IdentifierUnavailableException,
    RandomnessExhaustedException,
    PinIndexOutOfRangeException,
    UnsupportedAlgorithmException,
)

__all__ = [
    "Config",
    "CardReaderConfig",
    "DerivationConfig",
    "get_config",
    "load_config",
    "ConnectorIdentException",
    "ConfigurationException",
    "DerivationException",
    "IdentifierUnavailableException",
    "RandomnessExhaustedException",
    "PinIndexOutOfRangeException",
    "UnsupportedAlgorithmException",
]
