"""
Shared argument types for tool argument models.
"""

from typing import Annotated, Optional, Union

from pydantic import Field

from core.errors import FormatError
from core.timecodec import to_seconds
from .registry import ToolArgs


DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"

DateStr = Annotated[str, Field(pattern=DATE_PATTERN, description="Date in YYYY-MM-DD format")]

# Integer seconds or duration text such as "1h 30m"
DurationValue = Annotated[
    Union[Annotated[int, Field(gt=0)], Annotated[str, Field(min_length=1)]],
    Field(description='Time in seconds, or text like "1h 30m", "90m", "3600s"'),
]

NonEmptyStr = Annotated[str, Field(min_length=1)]


class PageArgs(ToolArgs):
    """Pagination shared by listing tools."""
    page: Optional[int] = Field(None, ge=1, description="Page number for pagination (default: 1)")
    limit: Optional[int] = Field(None, ge=1, description="Number of items per page (default: 100)")


class DateRangeArgs(PageArgs):
    """Pagination plus the usual project/assignee/date filters."""
    project: Optional[str] = Field(None, description="Filter by project ID")
    assignee: Optional[int] = Field(None, description="Filter by assignee user ID")
    from_: Optional[DateStr] = Field(None, alias="from", description="Start date (YYYY-MM-DD)")
    to: Optional[DateStr] = Field(None, description="End date (YYYY-MM-DD)")


def positive_seconds(value) -> int:
    """Decode a DurationValue; text that comes out as zero is rejected like 0."""
    seconds = to_seconds(value)
    if seconds <= 0:
        raise FormatError(f"Invalid time format: {value!r} is zero. Time must be greater than 0s")
    return seconds
