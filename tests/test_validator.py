"""Unit tests for reading validation and timestamp normalization."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from app.schemas import BatchPayload, BatchReadingPayload, SensorReadingPayload
from errors import ErrorKind, ValidationFailure
from services.validator import MAX_BATCH_SIZE, ReadingValidator

FIXED_NOW = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture()
def validator() -> ReadingValidator:
    return ReadingValidator(clock=lambda: FIXED_NOW)


def _violations(func, payload) -> list[str]:
    with pytest.raises(ValidationFailure) as excinfo:
        func(payload)
    assert excinfo.value.kind is ErrorKind.validation_failure
    return excinfo.value.violations


def test_valid_reading_is_normalized(validator: ReadingValidator) -> None:
    payload = SensorReadingPayload(
        device_id="esp32-01",
        temperature=21.5,
        humidity=40.0,
        pressure=1013.2,
        light=300.0,
        motion=True,
        battery=87.0,
    )

    reading = validator.validate_reading(payload)

    assert reading.device_id == "esp32-01"
    assert reading.temperature == 21.5
    assert reading.battery == 87.0
    assert reading.motion is True
    assert reading.timestamp == FIXED_NOW


def test_missing_timestamp_defaults_to_now() -> None:
    validator = ReadingValidator()
    before = datetime.now(timezone.utc)

    reading = validator.validate_reading(
        SensorReadingPayload(device_id="d", temperature=20.0, humidity=50.0)
    )

    after = datetime.now(timezone.utc)
    assert before <= reading.timestamp <= after
    assert reading.timestamp.tzinfo is not None


def test_zero_valued_timestamp_is_replaced(validator: ReadingValidator) -> None:
    payload = SensorReadingPayload.model_validate(
        {"device_id": "d", "temperature": 1, "humidity": 1, "timestamp": "0001-01-01T00:00:00Z"}
    )

    assert validator.validate_reading(payload).timestamp == FIXED_NOW


def test_explicit_timestamp_is_converted_to_utc(validator: ReadingValidator) -> None:
    local = datetime(2024, 3, 1, 10, 0, tzinfo=timezone(timedelta(hours=2)))
    naive = datetime(2024, 3, 1, 10, 0)

    aware_reading = validator.validate_reading(
        SensorReadingPayload(device_id="d", temperature=1, humidity=1, timestamp=local)
    )
    naive_reading = validator.validate_reading(
        SensorReadingPayload(device_id="d", temperature=1, humidity=1, timestamp=naive)
    )

    assert aware_reading.timestamp == datetime(2024, 3, 1, 8, 0, tzinfo=timezone.utc)
    assert aware_reading.timestamp.tzinfo == timezone.utc
    assert naive_reading.timestamp == datetime(2024, 3, 1, 10, 0, tzinfo=timezone.utc)


@pytest.mark.parametrize("temperature", [-100.0, 100.0])
@pytest.mark.parametrize("humidity", [0.0, 100.0])
def test_range_bounds_are_inclusive(validator: ReadingValidator, temperature, humidity) -> None:
    payload = SensorReadingPayload(
        device_id="d", temperature=temperature, humidity=humidity, battery=100.0
    )

    assert validator.validate_reading(payload).temperature == temperature


@pytest.mark.parametrize(
    ("field", "value", "expected"),
    [
        ("temperature", -100.1, "temperature must be between -100 and 100 celsius"),
        ("temperature", 150.0, "temperature must be between -100 and 100 celsius"),
        ("humidity", -0.5, "humidity must be between 0 and 100 percent"),
        ("humidity", 100.01, "humidity must be between 0 and 100 percent"),
        ("battery", 101.0, "battery must be between 0 and 100 percent"),
        ("battery", -1.0, "battery must be between 0 and 100 percent"),
    ],
)
def test_out_of_range_field_is_named(validator: ReadingValidator, field, value, expected) -> None:
    data = {"device_id": "d", "temperature": 20.0, "humidity": 50.0, field: value}

    violations = _violations(validator.validate_reading, SensorReadingPayload(**data))

    assert violations == [expected]
    assert field in violations[0]


def test_all_violations_are_collected_in_order(validator: ReadingValidator) -> None:
    payload = SensorReadingPayload(device_id="", temperature=500, humidity=-3, battery=120)

    violations = _violations(validator.validate_reading, payload)

    assert violations == [
        "device_id is required",
        "temperature must be between -100 and 100 celsius",
        "humidity must be between 0 and 100 percent",
        "battery must be between 0 and 100 percent",
    ]


def test_valid_batch_produces_entries(validator: ReadingValidator) -> None:
    stamp = datetime(2024, 1, 1, 11, 0, tzinfo=timezone.utc)
    payload = BatchPayload(
        device_id="esp32-02",
        readings=[
            BatchReadingPayload(temperature=20.0, humidity=30.0, timestamp=stamp),
            BatchReadingPayload(temperature=21.0, humidity=31.0, battery=55.0),
        ],
    )

    batch = validator.validate_batch(payload)

    assert batch.device_id == "esp32-02"
    assert len(batch.entries) == 2
    assert batch.entries[0].timestamp == stamp
    assert batch.entries[1].timestamp == FIXED_NOW
    assert batch.entries[1].battery == 55.0


def test_empty_batch_is_rejected(validator: ReadingValidator) -> None:
    violations = _violations(validator.validate_batch, BatchPayload(device_id="", readings=[]))

    assert violations == ["device_id is required", "at least one reading is required"]


def test_batch_size_limit(validator: ReadingValidator) -> None:
    full = BatchPayload(
        device_id="d",
        readings=[BatchReadingPayload(temperature=1, humidity=1)] * MAX_BATCH_SIZE,
    )
    oversized = BatchPayload(
        device_id="d",
        readings=[BatchReadingPayload(temperature=1, humidity=1)] * (MAX_BATCH_SIZE + 1),
    )

    assert len(validator.validate_batch(full).entries) == MAX_BATCH_SIZE
    assert _violations(validator.validate_batch, oversized) == ["maximum 100 readings per batch"]


def test_batch_entries_are_checked_individually(validator: ReadingValidator) -> None:
    payload = BatchPayload(
        device_id="d",
        readings=[
            BatchReadingPayload(temperature=10, humidity=10),
            BatchReadingPayload(temperature=-101, humidity=10),
            BatchReadingPayload(temperature=10, humidity=101),
        ],
    )

    assert _violations(validator.validate_batch, payload) == [
        "reading 1: temperature out of range",
        "reading 2: humidity out of range",
    ]


def test_batch_battery_is_not_range_checked(validator: ReadingValidator) -> None:
    payload = BatchPayload(
        device_id="d",
        readings=[BatchReadingPayload(temperature=10, humidity=10, battery=250.0)],
    )

    assert validator.validate_batch(payload).entries[0].battery == 250.0


def test_whitespace_device_id_is_accepted(validator: ReadingValidator) -> None:
    reading = validator.validate_reading(
        SensorReadingPayload(device_id=" ", temperature=1, humidity=1)
    )

    assert reading.device_id == " "


@pytest.mark.parametrize(
    "timestamp",
    ["0001-01-01T00:30:00+01:00", "9999-12-31T23:30:00-01:00"],
)
def test_timestamp_outside_utc_range_is_a_violation(validator: ReadingValidator, timestamp) -> None:
    payload = SensorReadingPayload.model_validate(
        {"device_id": "d", "temperature": 500, "humidity": 1, "timestamp": timestamp}
    )

    assert _violations(validator.validate_reading, payload) == [
        "temperature must be between -100 and 100 celsius",
        "timestamp out of range",
    ]


def test_batch_entry_timestamp_outside_utc_range_is_a_violation(validator: ReadingValidator) -> None:
    payload = BatchPayload.model_validate(
        {
            "device_id": "d",
            "readings": [
                {"temperature": 1, "humidity": 1},
                {"temperature": 1, "humidity": 1, "timestamp": "0001-01-01T00:30:00+01:00"},
            ],
        }
    )

    assert _violations(validator.validate_batch, payload) == ["reading 1: timestamp out of range"]
