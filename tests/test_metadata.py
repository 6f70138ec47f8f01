"""Tests for appender/metadata.py (property extraction and filtering)."""

from datetime import UTC, datetime

import pytest

from telemetry_appender.appender.events import LocationInfo, LogEvent
from telemetry_appender.appender.metadata import (
    RESERVED_PREFIX,
    add_property,
    extract_properties,
    is_excluded_key,
    is_reserved_key,
    populate_common_fields,
)
from telemetry_appender.errors import MissingArgumentError
from telemetry_appender.telemetry.records import TraceTelemetry

TIMESTAMP = datetime(2024, 5, 1, 12, 30, tzinfo=UTC)


def make_event(**overrides) -> LogEvent:
    """LogEvent with every optional field unset unless overridden."""
    fields = {"timestamp": TIMESTAMP, "rendered_message": "msg"}
    fields.update(overrides)
    return LogEvent(**fields)


class TestKeyPredicates:
    """Tests for is_reserved_key and is_excluded_key."""

    @pytest.mark.parametrize(
        "key",
        ["log4net", "log4net.test", "Log4Net.HostName", "LOG4NET:UserName", "log4netx"],
    )
    def test_reserved_prefix_any_casing(self, key):
        """Verifies the reserved prefix matches regardless of case."""
        assert is_reserved_key(key)
        assert is_excluded_key(key)

    @pytest.mark.parametrize("key", ["UserId", "mylog4net", "log-4net", "l"])
    def test_ordinary_keys_are_kept(self, key):
        assert not is_reserved_key(key)
        assert not is_excluded_key(key)

    @pytest.mark.parametrize("key", [None, "", 42])
    def test_empty_none_and_non_string_keys_are_excluded(self, key):
        assert is_excluded_key(key)

    def test_prefix_constant(self):
        assert RESERVED_PREFIX == "log4net"


class TestAddProperty:
    """Tests for add_property."""

    def test_adds_value(self):
        props = {}
        add_property(props, "Key", "value")
        assert props == {"Key": "value"}

    def test_none_value_is_skipped(self):
        """Verifies a None value never produces a key (not even an empty one)."""
        props = {}
        add_property(props, "Key", None)
        assert "Key" not in props

    def test_first_write_wins(self):
        props = {"Key": "first"}
        add_property(props, "Key", "second")
        assert props == {"Key": "first"}

    def test_none_key_raises_missing_argument(self):
        with pytest.raises(MissingArgumentError) as exc_info:
            add_property({}, None, "value")  # type: ignore[arg-type]

        assert exc_info.value.argument == "key"
        assert isinstance(exc_info.value, TypeError)


class TestExtractProperties:
    """Tests for extract_properties."""

    def test_fixed_fields_in_order(self):
        """Verifies fixed metadata fields and their insertion order.

        Arrangement:
        1. Event with logger, thread, full location, domain and identity.

        Action:
        Extracts properties.

        Assertion Strategy:
        Validates both content and order by comparing the list of items:
        LoggerName, ThreadName, ClassName, FileName, MethodName,
        LineNumber, Domain, Identity.
        """
        event = make_event(
            logger_name="shop.orders",
            thread_name="MainThread",
            location=LocationInfo("orders", "/srv/orders.py", "place", "12"),
            domain="MainProcess",
            identity="svc",
        )

        assert list(extract_properties(event).items()) == [
            ("LoggerName", "shop.orders"),
            ("ThreadName", "MainThread"),
            ("ClassName", "orders"),
            ("FileName", "/srv/orders.py"),
            ("MethodName", "place"),
            ("LineNumber", "12"),
            ("Domain", "MainProcess"),
            ("Identity", "svc"),
        ]

    def test_missing_fields_are_omitted(self):
        """Verifies absent values are skipped, never written as empty strings."""
        event = make_event(
            logger_name="app",
            location=LocationInfo(class_name="mod", line_number=None),
        )

        assert extract_properties(event) == {"LoggerName": "app", "ClassName": "mod"}

    def test_no_location_means_no_location_keys(self):
        props = extract_properties(make_event(logger_name="app"))
        assert set(props) == {"LoggerName"}

    def test_reserved_and_null_context_properties_filtered(self):
        """Verifies the reserved-prefix and None-value rules on context properties.

        Arrangement:
        1. Event with no fixed fields set.
        2. Properties {"log4net.test": "x", "UserId": "42", "Flag": None}.

        Action:
        Extracts properties.

        Assertion Strategy:
        Validates filtering by confirming the output is exactly
        {"UserId": "42"}.
        """
        event = make_event(
            properties={"log4net.test": "x", "UserId": "42", "Flag": None}
        )

        assert extract_properties(event) == {"UserId": "42"}

    def test_reserved_prefix_any_casing_filtered(self):
        event = make_event(
            properties={"Log4Net.Something": "a", "LOG4NET": "b", "keep": "c"}
        )
        assert extract_properties(event) == {"keep": "c"}

    def test_empty_key_filtered(self):
        event = make_event(properties={"": "blank", "ok": 1})
        assert extract_properties(event) == {"ok": "1"}

    def test_values_are_stringified(self):
        """Verifies values use their natural text form via str()."""
        event = make_event(
            properties={"count": 3, "ratio": 0.5, "flag": False, "tags": ["a", "b"]}
        )

        assert extract_properties(event) == {
            "count": "3",
            "ratio": "0.5",
            "flag": "False",
            "tags": "['a', 'b']",
        }

    def test_context_property_cannot_override_fixed_field(self):
        """Verifies first-write-wins between fixed fields and context properties.

        Arrangement:
        1. Event with logger_name "shop.orders".
        2. Context property "LoggerName" = "spoofed".

        Action:
        Extracts properties.

        Assertion Strategy:
        Validates collision policy by confirming LoggerName keeps the
        event's logger name.
        """
        event = make_event(
            logger_name="shop.orders", properties={"LoggerName": "spoofed"}
        )

        assert extract_properties(event) == {"LoggerName": "shop.orders"}

    def test_context_property_fills_absent_fixed_field(self):
        event = make_event(properties={"Identity": "from-context"})
        assert extract_properties(event) == {"Identity": "from-context"}

    def test_deterministic(self):
        """Verifies two extractions from the same event are equal."""
        event = make_event(
            logger_name="app",
            thread_name="worker-1",
            properties={"a": 1, "log4net:x": 2, "b": None},
        )

        assert extract_properties(event) == extract_properties(event)

    def test_none_event_raises_missing_argument(self):
        with pytest.raises(MissingArgumentError):
            extract_properties(None)  # type: ignore[arg-type]


class TestPopulateCommonFields:
    """Tests for populate_common_fields."""

    def test_sets_timestamp_user_and_properties(self):
        """Verifies timestamp and user id pass through unchanged."""
        event = make_event(user_name="alice", logger_name="app")
        trace = TraceTelemetry("hello")

        populate_common_fields(event, trace)

        assert trace.timestamp is TIMESTAMP
        assert trace.context.user.id == "alice"
        assert trace.properties == {"LoggerName": "app"}

    def test_absent_user_stays_none(self):
        trace = TraceTelemetry("hello")
        populate_common_fields(make_event(), trace)
        assert trace.context.user.id is None

    def test_existing_record_properties_are_kept(self):
        trace = TraceTelemetry("hello", properties={"LoggerName": "preset"})

        populate_common_fields(make_event(logger_name="app", thread_name="t"), trace)

        assert trace.properties == {"LoggerName": "preset", "ThreadName": "t"}

    def test_none_telemetry_raises_missing_argument(self):
        with pytest.raises(MissingArgumentError) as exc_info:
            populate_common_fields(make_event(), None)  # type: ignore[arg-type]
        assert exc_info.value.argument == "telemetry"
