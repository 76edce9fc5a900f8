"""
Connector Ident - Main Entry Point

Derives and prints the PINs of the connector's smart cards.
"""

import argparse
import logging
import sys
from typing import List, Optional

from .core.config import Config, LogLevel
from .core.constants import NUMBER_OF_CARD_READERS, TEST_SERIAL_NUMBERS
from .core.exceptions import ConfigurationException, ConnectorIdentException
from .crypto.deriver import PinAlgorithm, PinSetDeriver

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="connector-ident",
        description="Derive smart card PINs from the serial numbers of the card readers",
    )

    # Configuration
    parser.add_argument("--config", type=str, help="Configuration file path")

    # Identifiers
    identifiers = parser.add_mutually_exclusive_group()
    identifiers.add_argument(
        "--serial",
        action="append",
        metavar="SERIAL",
        help=f"Serial number of a card reader, repeat {NUMBER_OF_CARD_READERS} times",
    )
    identifiers.add_argument(
        "--test-serials",
        action="store_true",
        help="Use the built-in reference serial numbers",
    )

    # Derivation
    parser.add_argument(
        "--algorithm",
        type=str,
        choices=[algorithm.label for algorithm in PinAlgorithm],
        help="PIN algorithm (default: from configuration)",
    )
    parser.add_argument(
        "--pin-index", type=int, help="Print only the PIN with this index"
    )

    # Logging
    parser.add_argument(
        "--log-level",
        type=str,
        choices=[level.value for level in LogLevel],
        help="Log level",
    )

    return parser


def load_configuration(args: argparse.Namespace) -> Config:
    """Load configuration and apply command line overrides."""
    if args.config:
        config = Config.load_from_file(args.config)
    else:
        config = Config.load_from_env()

    if args.serial:
        config.derivation.serial_numbers = list(args.serial)
    elif args.test_serials:
        config.derivation.serial_numbers = [
            serial.decode("utf-8") for serial in TEST_SERIAL_NUMBERS
        ]
    if args.algorithm:
        config.derivation.algorithm = args.algorithm
    if args.log_level:
        config.log_level = LogLevel(args.log_level)

    config.validate()
    return config


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for connector-ident."""
    parser = build_parser()
    args = parser.parse_args(argv)

    # PINs go to stdout, logs to stderr
    logging.basicConfig(
        level=getattr(logging, (args.log_level or "WARNING").upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )

    try:
        config = load_configuration(args)
        logging.getLogger().setLevel(getattr(logging, config.log_level.value))

        deriver = PinSetDeriver.from_config(config)
        algorithm = PinAlgorithm.parse(config.derivation.algorithm)
        logger.info(f"Deriving {deriver.pin_count} PINs with {algorithm.label}")

        if args.pin_index is not None:
            pin = deriver.pin_at(args.pin_index, algorithm=algorithm)
            print(f"PIN {args.pin_index}: {pin}")
        else:
            for index, pin in enumerate(deriver.derive(algorithm=algorithm)):
                print(f"PIN {index}: {pin}")

    except ConfigurationException as e:
        logger.error(f"Invalid configuration: {e}")
        return 1
    except ConnectorIdentException as e:
        logger.error(f"Failed to derive PINs: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
