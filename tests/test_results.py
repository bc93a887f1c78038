"""
Result Envelope Tests
---------------------
"""

import json

import pytest

from tools.results import (
    TextContent, ToolResult, error_result, json_result, text_result,
    total_seconds, with_formatted
)


class TestEnvelope:
    """ToolResult shape."""

    def test_wire_shape(self):
        assert text_result("hello").to_dict() == {
            "content": [{"type": "text", "text": "hello"}],
            "isError": False,
        }

    def test_error_flag(self):
        assert error_result("nope").to_dict()["isError"] is True

    def test_empty_content_rejected(self):
        with pytest.raises(ValueError):
            ToolResult(content=[])

    def test_blank_text_rejected(self):
        with pytest.raises(ValueError):
            ToolResult(content=[TextContent("")])

    def test_text_joins_items(self):
        result = ToolResult(content=[TextContent("a"), TextContent("b")])
        assert result.text == "a\nb"

    def test_json_is_indented(self):
        result = json_result({"total": 0})
        assert result.text == '{\n  "total": 0\n}'
        assert json.loads(result.text) == {"total": 0}


class TestFormattedFields:
    """Human-readable companions for duration fields."""

    def test_adds_companion(self):
        record = {"id": 1, "time": 5400}
        assert with_formatted(record, "time") == {"id": 1, "time": 5400, "timeFormatted": "1h 30m 0s"}
        assert "timeFormatted" not in record

    def test_missing_field_untouched(self):
        assert with_formatted({"id": 1}, "time") == {"id": 1}

    def test_non_integer_field(self):
        assert with_formatted({"time": None}, "time")["timeFormatted"] is None

    def test_non_dict_passthrough(self):
        assert with_formatted(None, "time") is None

    def test_total_seconds_skips_gaps(self):
        records = [{"time": 60}, {"time": None}, {}, {"time": "x"}, {"time": 30}]
        assert total_seconds(records, "time") == 90
