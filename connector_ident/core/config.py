"""
Connector Ident - Configuration Management

This module provides configuration management for PIN derivation, supporting
YAML configuration files and environment variables.
"""

import os
import yaml
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union
from pathlib import Path
from enum import Enum
import logging

from .constants import (
    DEFAULT_CARD_READERS,
    MAX_NUMBER_OF_PINS,
    NUMBER_OF_CARD_READERS,
    NUMBER_OF_PINS,
    SERIAL_NUMBER_LENGTH,
)
from .exceptions import ConfigurationException, UnsupportedAlgorithmException

logger = logging.getLogger(__name__)


class Environment(str, Enum):
    """Environment types for configuration."""

    DEVELOPMENT = "development"
    PRODUCTION = "production"
    TESTING = "testing"


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


@dataclass
class CardReaderConfig:
    """Locations of the card reader serial number files."""

    paths: List[str] = field(default_factory=lambda: list(DEFAULT_CARD_READERS))


HEX_SERIAL_PREFIX = "hex:"


def serial_to_bytes(serial: Any) -> bytes:
    """
    Encode a configured serial number.

    Plain values are taken as UTF-8 text. Serial numbers with surrounding
    whitespace, commas, or non-UTF-8 bytes are written as ``hex:<digits>``,
    e.g. ``hex:2020202020202020``.
    """
    text = str(serial)
    if text.lower().startswith(HEX_SERIAL_PREFIX):
        return bytes.fromhex(text[len(HEX_SERIAL_PREFIX):])
    return text.encode("utf-8")


@dataclass
class DerivationConfig:
    """PIN derivation settings."""

    algorithm: str = "double-sha512"
    pin_count: int = NUMBER_OF_PINS
    # Fixed serial numbers for testing; None reads them from the card readers
    serial_numbers: Optional[List[str]] = None

    def serial_number_bytes(self) -> Optional[List[bytes]]:
        """Return the configured serial numbers encoded as bytes."""
        if self.serial_numbers is None:
            return None
        return [serial_to_bytes(serial) for serial in self.serial_numbers]


@dataclass
class Config:
    """Main configuration class."""

    environment: Environment = Environment.DEVELOPMENT
    log_level: LogLevel = LogLevel.INFO
    service_name: str = "connector-ident"

    card_readers: CardReaderConfig = field(default_factory=CardReaderConfig)
    derivation: DerivationConfig = field(default_factory=DerivationConfig)

    @classmethod
    def load_from_file(cls, config_path: Union[str, Path]) -> "Config":
        """Load configuration from a YAML file."""
        config_path = Path(config_path)

        if not config_path.exists():
            raise ConfigurationException(
                f"Configuration file not found: {config_path}",
                config_key=str(config_path),
            )

        try:
            with open(config_path, "r") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationException(
                f"Failed to parse configuration file {config_path}: {e}"
            ) from e

        if not isinstance(data, dict):
            raise ConfigurationException(
                f"Configuration file {config_path} must contain a mapping"
            )

        logger.info(f"Loaded configuration from {config_path}")
        return cls._from_dict(data)

    @classmethod
    def load_from_env(cls, prefix: str = "CONNECTOR_IDENT_") -> "Config":
        """Load configuration from environment variables."""
        config = cls()

        if os.getenv(f"{prefix}ENVIRONMENT"):
            config.environment = cls._parse_enum(
                Environment, os.getenv(f"{prefix}ENVIRONMENT").lower(), "environment"
            )
        if os.getenv(f"{prefix}LOG_LEVEL"):
            config.log_level = cls._parse_enum(
                LogLevel, os.getenv(f"{prefix}LOG_LEVEL").upper(), "log_level"
            )

        if os.getenv(f"{prefix}CARD_READERS"):
            config.card_readers.paths = cls._split_list(
                os.getenv(f"{prefix}CARD_READERS")
            )

        if os.getenv(f"{prefix}ALGORITHM"):
            config.derivation.algorithm = os.getenv(f"{prefix}ALGORITHM")
        if os.getenv(f"{prefix}PIN_COUNT"):
            try:
                config.derivation.pin_count = int(os.getenv(f"{prefix}PIN_COUNT"))
            except ValueError as e:
                raise ConfigurationException(
                    f"Invalid pin count: {os.getenv(f'{prefix}PIN_COUNT')}",
                    config_key=f"{prefix}PIN_COUNT",
                ) from e
        if os.getenv(f"{prefix}SERIAL_NUMBERS"):
            config.derivation.serial_numbers = cls._split_list(
                os.getenv(f"{prefix}SERIAL_NUMBERS")
            )

        return config

    @staticmethod
    def _split_list(value: str) -> List[str]:
        return [item.strip() for item in value.split(",") if item.strip()]

    @staticmethod
    def _parse_enum(enum_cls, value: Any, config_key: str):
        try:
            return enum_cls(value)
        except ValueError as e:
            raise ConfigurationException(
                f"Invalid {config_key}: {value}", config_key=config_key
            ) from e

    @classmethod
    def _from_dict(cls, data: Dict[str, Any]) -> "Config":
        """Create configuration from dictionary."""
        config = cls()

        if "environment" in data:
            config.environment = cls._parse_enum(
                Environment, data["environment"], "environment"
            )
        if "log_level" in data:
            config.log_level = cls._parse_enum(
                LogLevel, str(data["log_level"]).upper(), "log_level"
            )
        if "service_name" in data:
            config.service_name = data["service_name"]

        try:
            if "card_readers" in data:
                config.card_readers = CardReaderConfig(**data["card_readers"])
            if "derivation" in data:
                config.derivation = DerivationConfig(**data["derivation"])
        except TypeError as e:
            raise ConfigurationException(f"Unknown configuration option: {e}") from e

        return config

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            "environment": self.environment.value,
            "log_level": self.log_level.value,
            "service_name": self.service_name,
            "card_readers": {"paths": list(self.card_readers.paths or [])},
            "derivation": {
                "algorithm": self.derivation.algorithm,
                "pin_count": self.derivation.pin_count,
                # Serial numbers are identity material, keep them out of dumps
                "serial_numbers_configured": self.derivation.serial_numbers
                is not None,
            },
        }

    def validate(self) -> None:
        """Validate configuration settings."""
        from ..crypto.deriver import PinAlgorithm

        errors = []

        paths = self.card_readers.paths
        if not isinstance(paths, (list, tuple)):
            errors.append("Card reader paths must be a list")
        elif len(paths) != NUMBER_OF_CARD_READERS:
            errors.append(
                f"Expected {NUMBER_OF_CARD_READERS} card reader paths, got {len(paths)}"
            )

        pin_count = self.derivation.pin_count
        if (
            not isinstance(pin_count, int)
            or isinstance(pin_count, bool)
            or not 1 <= pin_count <= MAX_NUMBER_OF_PINS
        ):
            errors.append(f"Pin count must be between 1 and {MAX_NUMBER_OF_PINS}")

        try:
            PinAlgorithm.parse(self.derivation.algorithm)
        except UnsupportedAlgorithmException:
            errors.append(f"Unknown algorithm: {self.derivation.algorithm}")

        serials = self.derivation.serial_numbers
        if serials is not None and not isinstance(serials, (list, tuple)):
            errors.append("Serial numbers must be a list")
        elif serials is not None:
            if len(serials) != NUMBER_OF_CARD_READERS:
                errors.append(
                    f"Expected {NUMBER_OF_CARD_READERS} serial numbers, got {len(serials)}"
                )
            for index, serial in enumerate(serials):
                try:
                    value = serial_to_bytes(serial)
                except ValueError:
                    errors.append(f"Serial number {index} is not valid hex")
                    continue
                if len(value) != SERIAL_NUMBER_LENGTH:
                    errors.append(
                        f"Serial number {index} must be {SERIAL_NUMBER_LENGTH} bytes"
                    )

        if errors:
            raise ConfigurationException(
                f"Configuration validation failed: {'; '.join(errors)}"
            )


# Global configuration instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = Config.load_from_env()
    return _config


def set_config(config: Config) -> None:
    """Set the global configuration instance."""
    global _config
    config.validate()
    _config = config


def load_config(config_path: Union[str, Path]) -> Config:
    """Load and set configuration from file."""
    config = Config.load_from_file(config_path)
    set_config(config)
    return config
