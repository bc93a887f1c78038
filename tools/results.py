"""
Result Envelope
---------------
Uniform wrapper returned by every tool invocation:

    {"content": [{"type": "text", "text": "..."}], "isError": false}

Callers must check is_error; failures are reported inside the envelope
rather than raised.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
import json

from core.timecodec import format_duration


@dataclass(frozen=True)
class TextContent:
    """One text item of an envelope."""
    text: str
    type: str = "text"

    def to_dict(self) -> Dict[str, str]:
        return {"type": self.type, "text": self.text}


@dataclass(frozen=True)
class ToolResult:
    """Result envelope of a tool invocation."""
    content: List[TextContent] = field(default_factory=list)
    is_error: bool = False

    def __post_init__(self):
        # An envelope always says something
        if not self.content or not any(item.text for item in self.content):
            raise ValueError("ToolResult needs at least one non-empty text item")

    @property
    def text(self) -> str:
        """All text items joined by newlines."""
        return "\n".join(item.text for item in self.content)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "content": [item.to_dict() for item in self.content],
            "isError": self.is_error,
        }

    def __repr__(self) -> str:
        status = "✗" if self.is_error else "✓"
        preview = self.text if len(self.text) <= 60 else self.text[:57] + "..."
        return f"ToolResult({status} {preview!r})"


def with_formatted(record: Optional[Dict[str, Any]], *fields: str) -> Optional[Dict[str, Any]]:
    """
    Copy of an upstream record with a "<field>Formatted" companion for
    each duration field, e.g. time=5400 -> timeFormatted="1h 30m 0s".
    """
    if not isinstance(record, dict):
        return record

    annotated = dict(record)
    for name in fields:
        value = record.get(name)
        if isinstance(value, int) and not isinstance(value, bool) and value >= 0:
            annotated[f"{name}Formatted"] = format_duration(value)
        elif name in record:
            annotated[f"{name}Formatted"] = None
    return annotated


def total_seconds(records: List[Dict[str, Any]], name: str) -> int:
    """Sum of one integer duration field across records."""
    return sum(
        r.get(name) or 0 for r in records
        if isinstance(r, dict) and isinstance(r.get(name) or 0, int)
    )


def text_result(text: str) -> ToolResult:
    return ToolResult(content=[TextContent(text)])


def json_result(payload: Any) -> ToolResult:
    """Success envelope holding indented JSON."""
    return text_result(json.dumps(payload, indent=2, default=str))


def error_result(message: str) -> ToolResult:
    return ToolResult(content=[TextContent(message)], is_error=True)
