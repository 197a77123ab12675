"""
Tests for OpenTelemetry-shaped log formatters.

Tests for JsonFormatter and HumanFormatter.
"""

import json
import logging
import sys


def _record(level=logging.INFO, msg="Test message", **extra):
    record = logging.LogRecord(
        name="spiece",
        level=level,
        pathname="/site-packages/spiece/processor/processor.py",
        lineno=42,
        msg=msg,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJsonFormatter:
    """Tests for JsonFormatter."""

    def test_otel_structure(self):
        """Output follows the OpenTelemetry Logging Data Model."""
        from spiece._logging import JsonFormatter

        parsed = json.loads(JsonFormatter().format(_record()))

        assert set(parsed) == {"timestamp", "severityText", "body", "attributes", "resource"}
        assert parsed["body"] == "Test message"

    def test_timestamp_format(self):
        """Timestamp is RFC3339 with nanoseconds."""
        from spiece._logging import JsonFormatter

        ts = json.loads(JsonFormatter().format(_record()))["timestamp"]

        assert ts.endswith("Z")
        assert "T" in ts
        assert len(ts.split(".")[-1]) == 10  # 9 digits + Z

    def test_severity_text_mapping(self):
        from spiece._logging import JsonFormatter

        formatter = JsonFormatter()
        cases = [
            (logging.DEBUG, "DEBUG"),
            (logging.INFO, "INFO"),
            (logging.WARNING, "WARN"),
            (logging.ERROR, "ERROR"),
            (logging.CRITICAL, "FATAL"),
        ]
        for level, expected in cases:
            parsed = json.loads(formatter.format(_record(level)))
            assert parsed["severityText"] == expected, f"Level {level}"

    def test_resource_names_service(self):
        from spiece._logging import JsonFormatter
        from spiece._version import __version__

        resource = json.loads(JsonFormatter().format(_record()))["resource"]

        assert resource == {"service.name": "spiece", "service.version": __version__}

    def test_extra_fields_become_attributes(self):
        from spiece._logging import JsonFormatter

        record = _record(scope="processor", vocab_size=1000, source="<bytes>")
        attributes = json.loads(JsonFormatter().format(record))["attributes"]

        assert attributes["scope"] == "processor"
        assert attributes["vocab_size"] == 1000
        assert attributes["source"] == "<bytes>"

    def test_debug_includes_code_location(self):
        """DEBUG records carry a package-relative file path and line."""
        from spiece._logging import JsonFormatter

        attributes = json.loads(JsonFormatter().format(_record(logging.DEBUG)))["attributes"]

        assert attributes["code.filepath"].replace("\\", "/") == "processor/processor.py"
        assert attributes["code.lineno"] == 42

    def test_info_omits_code_location(self):
        from spiece._logging import JsonFormatter

        attributes = json.loads(JsonFormatter().format(_record(logging.INFO)))["attributes"]

        assert "code.filepath" not in attributes

    def test_exception_message(self):
        from spiece._logging import JsonFormatter

        try:
            raise ValueError("bad piece")
        except ValueError:
            record = _record(logging.ERROR)
            record.exc_info = sys.exc_info()

        attributes = json.loads(JsonFormatter().format(record))["attributes"]

        assert "bad piece" in attributes["exception.message"]


class TestHumanFormatter:
    """Tests for HumanFormatter."""

    def test_plain_output(self):
        from spiece._logging import HumanFormatter

        output = HumanFormatter(use_colors=False).format(_record(scope="ffi"))

        assert "INFO" in output
        assert "[ffi]" in output
        assert output.endswith("Test message")
        assert "\x1b[" not in output

    def test_colored_warning(self):
        from spiece._logging import HumanFormatter

        output = HumanFormatter(use_colors=True).format(_record(logging.WARNING))

        assert "\x1b[33m" in output

    def test_scope_defaults_to_logger_name(self):
        from spiece._logging import HumanFormatter

        output = HumanFormatter(use_colors=False).format(_record())

        assert "[spiece]" in output
