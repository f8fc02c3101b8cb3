"""
Tests for the Reading model and feed payload validation.
"""

import json
from datetime import UTC, datetime

import pytest

from src.core.readings import MalformedReadingError, Reading, format_timestamp


class TestReadingFromMessage:
    """Tests for decoding feed messages."""

    def test_valid_bytes_payload(self, message_factory):
        reading = Reading.from_message(json.dumps(message_factory()).encode("utf-8"))

        assert reading.zone_id == "assembly-1"
        assert reading.zone_name == "Assembly Line 1"
        assert reading.energy_kw == 250.5
        assert reading.temperature == 22.3
        assert reading.equipment_count == 12
        assert reading.timestamp == datetime(2026, 1, 14, 14, 0, 0, tzinfo=UTC)

    def test_valid_text_and_dict_payloads(self, message_factory):
        from_text = Reading.from_message(json.dumps(message_factory()))
        from_dict = Reading.from_message(message_factory())

        assert from_text == from_dict

    def test_integer_energy_is_accepted(self, message_factory):
        reading = Reading.from_message(message_factory(energyKw=250))
        assert reading.energy_kw == 250.0

    def test_naive_timestamp_is_treated_as_utc(self, message_factory):
        reading = Reading.from_message(message_factory(timestamp="2026-01-14T14:00:00"))
        assert reading.timestamp.tzinfo == UTC

    def test_invalid_json(self):
        with pytest.raises(MalformedReadingError, match="not valid JSON"):
            Reading.from_message(b"{broken")

    def test_not_an_object(self):
        with pytest.raises(MalformedReadingError):
            Reading.from_message("[]")

    @pytest.mark.parametrize(
        "missing",
        ["timestamp", "zoneId", "zoneName", "energyKw", "temperature", "equipmentCount"],
    )
    def test_missing_field(self, message_factory, missing):
        message = message_factory()
        del message[missing]

        with pytest.raises(MalformedReadingError, match="missing field"):
            Reading.from_message(message)

    @pytest.mark.parametrize(
        "overrides",
        [
            {"energyKw": "250"},
            {"energyKw": -1.0},
            {"energyKw": True},
            {"energyKw": None},
            {"temperature": "warm"},
            {"equipmentCount": -3},
            {"equipmentCount": 2.5},
            {"zoneId": ""},
            {"zoneName": 42},
            {"timestamp": "yesterday"},
            {"timestamp": 1736863200},
        ],
    )
    def test_invalid_field_values(self, message_factory, overrides):
        with pytest.raises(MalformedReadingError):
            Reading.from_message(message_factory(**overrides))

    def test_energy_too_large_for_a_float(self, message_factory):
        payload = json.dumps(message_factory(energyKw=10**400)).encode("utf-8")

        with pytest.raises(MalformedReadingError, match="energyKw"):
            Reading.from_message(payload)

    def test_integer_beyond_parser_digit_limit(self, message_factory):
        """JSON integers too long for int() are rejected like any other bad payload."""
        payload = json.dumps(message_factory()).replace("250.5", "1" + "0" * 5000)

        with pytest.raises(MalformedReadingError):
            Reading.from_message(payload)

    def test_malformed_error_is_a_value_error(self):
        assert issubclass(MalformedReadingError, ValueError)


class TestReadingSerialization:
    """Tests for the wire representation."""

    def test_to_dict_round_trips_message(self, message_factory):
        message = message_factory(timestamp="2026-01-14T14:00:00Z")
        assert Reading.from_message(message).to_dict() == message

    def test_format_timestamp_uses_z_suffix(self):
        assert format_timestamp(datetime(2026, 1, 12, tzinfo=UTC)) == "2026-01-12T00:00:00Z"
