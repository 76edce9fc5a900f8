"""
Connector Ident - Constants and Derivation Limits

This module defines the fixed parameters of the PIN derivation pipeline:
slot counts, PIN record layout, and the entropy buffer geometry.

The rejection threshold and the doubled SHA-512 buffer are sized for the
values below. Changing the pin count or pin length requires re-checking the
exhaustion margin of the entropy buffer.
"""

# =============================================================================
# CARD READER SLOTS
# =============================================================================

NUMBER_OF_CARD_READERS = 3                        # identifier slots per connector
SERIAL_NUMBER_LENGTH = 8                          # bytes per serial identifier

# sysfs serial files of the card readers
DEFAULT_CARD_READERS = (
    "/sys/bus/usb/devices/1-4/serial",
    "/sys/bus/usb/devices/1-5/serial",
    "/sys/bus/usb/devices/1-6/serial",
)

# Reference identifiers for bench testing without card readers attached
TEST_SERIAL_NUMBERS = (
    b"23421337",
    b"meowmeow",
    b"*squeak*",
)


# =============================================================================
# PIN LAYOUT
# =============================================================================

NUMBER_OF_PINS = 6                                # PINs derived per run
MAX_NUMBER_OF_PINS = 15                           # entropy buffer is not sized beyond this
PIN_LENGTH = 12                                   # decimal digits per PIN
DIGIT_PAIRS_PER_PIN = PIN_LENGTH // 2             # packed bytes per PIN

PIN_CONTROL = 0x20                                # control flag bits of byte 0
PIN_LENGTH_MASK = 0x1F                            # length field of byte 0
PIN_STOP = 0xFF                                   # trailing sentinel
PIN_RECORD_SIZE = 2 + DIGIT_PAIRS_PER_PIN

# Default PIN digits cycle through 1..9: 1 2 3 4 5 6 7 8 9 1 2 3
DEFAULT_PIN_DIGIT_CYCLE = (1, 2, 3, 4, 5, 6, 7, 8, 9)


# =============================================================================
# ENTROPY
# =============================================================================

SHA512_DIGEST_SIZE = 0x40
ENTROPY_BUFFER_SIZE = 2 * SHA512_DIGEST_SIZE
REJECTION_THRESHOLD = 200                         # largest multiple of 100 below 256
