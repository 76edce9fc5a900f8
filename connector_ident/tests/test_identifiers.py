"""
Tests for card reader serial identifiers and identifier sources.
"""

import pytest

from connector_ident.core.exceptions import IdentifierUnavailableException
from connector_ident.crypto.identifiers import (
    DeviceIdentifierSource,
    SerialIdentifier,
    StaticIdentifierSource,
)


class TestSerialIdentifier:
    """Test SerialIdentifier construction."""

    def test_valid_identifier(self):
        identifier = SerialIdentifier(b"23421337")
        assert identifier.value == b"23421337"
        assert bytes(identifier) == b"23421337"

    def test_bytearray_is_frozen_to_bytes(self):
        raw = bytearray(b"meowmeow")
        identifier = SerialIdentifier(raw)
        raw[0] = ord("x")
        assert identifier.value == b"meowmeow"

    @pytest.mark.parametrize("value", [b"", b"1234567", b"123456789"])
    def test_wrong_length_rejected(self, value):
        with pytest.raises(ValueError):
            SerialIdentifier(value)

    def test_text_rejected_without_from_text(self):
        with pytest.raises(TypeError):
            SerialIdentifier("23421337")

    def test_from_text(self):
        assert SerialIdentifier.from_text("*squeak*").value == b"*squeak*"

    def test_coerce(self):
        identifier = SerialIdentifier(b"meowmeow")
        assert SerialIdentifier.coerce(identifier) is identifier
        assert SerialIdentifier.coerce("meowmeow") == identifier
        assert SerialIdentifier.coerce(b"meowmeow") == identifier

    def test_repr_hides_value(self):
        assert "meow" not in repr(SerialIdentifier(b"meowmeow"))


class TestStaticIdentifierSource:
    """Test StaticIdentifierSource."""

    def test_read_all_in_order(self, reference_identifiers):
        source = StaticIdentifierSource(reference_identifiers)
        assert source.slot_count == 3
        assert [i.value for i in source.read_all()] == reference_identifiers

    def test_missing_slot(self, reference_identifiers):
        source = StaticIdentifierSource(reference_identifiers)
        with pytest.raises(IdentifierUnavailableException) as exc_info:
            source.get(3)
        assert exc_info.value.context["slot_index"] == 3


class TestDeviceIdentifierSource:
    """Test reading serial numbers from card reader files."""

    def test_reads_first_eight_bytes(self, reader_files, reference_identifiers):
        source = DeviceIdentifierSource(reader_files)
        assert [i.value for i in source.read_all()] == reference_identifiers

    def test_longer_serial_is_truncated(self, tmp_path, reader_files):
        long_serial = tmp_path / "long"
        long_serial.write_bytes(b"0123456789ABCDEF\n")
        source = DeviceIdentifierSource([str(long_serial)] + reader_files[1:])
        assert source.get(0).value == b"01234567"

    def test_missing_file(self, tmp_path, reader_files):
        missing = str(tmp_path / "absent" / "serial")
        source = DeviceIdentifierSource(reader_files[:2] + [missing])
        with pytest.raises(IdentifierUnavailableException) as exc_info:
            source.read_all()
        assert exc_info.value.error_code == "IDENTIFIER_UNAVAILABLE"
        assert exc_info.value.context["slot_index"] == 2
        assert exc_info.value.context["source"] == missing

    def test_short_file(self, tmp_path, reader_files):
        short = tmp_path / "short"
        short.write_bytes(b"1234")
        source = DeviceIdentifierSource([str(short)] + reader_files[1:])
        with pytest.raises(IdentifierUnavailableException, match="Cannot read from file"):
            source.get(0)

    def test_wrong_path_count(self, reader_files):
        with pytest.raises(ValueError):
            DeviceIdentifierSource(reader_files[:2])

    def test_default_paths(self):
        source = DeviceIdentifierSource()
        assert str(source.paths[0]) == "/sys/bus/usb/devices/1-4/serial"
        assert source.slot_count == 3
