"""
Time record tools.
"""

from typing import Optional

from pydantic import Field

from core.timecodec import format_duration
from .args import DateRangeArgs, DateStr, DurationValue, positive_seconds
from .registry import OperationType, ToolArgs, descriptor_group, tool
from .results import json_result, total_seconds, with_formatted


RESOURCES = ["time_records"]


class RecordIdArgs(ToolArgs):
    id: int = Field(description="Time record ID")


class CreateRecordArgs(ToolArgs):
    time: DurationValue
    date: DateStr
    task: Optional[str] = Field(None, description="Task ID to log time against")
    project: Optional[str] = Field(None, description="Project ID to log time against")
    comment: Optional[str] = Field(None, description="Optional comment")


class UpdateRecordArgs(ToolArgs):
    id: int = Field(description="Time record ID")
    time: Optional[DurationValue] = None
    date: Optional[DateStr] = None
    task: Optional[str] = Field(None, description="Task ID")
    project: Optional[str] = Field(None, description="Project ID")
    comment: Optional[str] = Field(None, description="Comment")


@tool(
    "everhour_list_time_records",
    "List time records from Everhour. Supports filtering by project, assignee, and date range.",
    DateRangeArgs, OperationType.READ, RESOURCES,
)
async def list_time_records(gateway, args: DateRangeArgs):
    records = await gateway.list_time_records(args.to_params()) or []
    total = total_seconds(records, "time")
    return json_result({
        "timeRecords": [with_formatted(r, "time") for r in records],
        "total": len(records),
        "totalTime": total,
        "totalTimeFormatted": format_duration(total),
    })


@tool(
    "everhour_get_time_record",
    "Get details of a specific time record by ID.",
    RecordIdArgs, OperationType.READ, RESOURCES,
)
async def get_time_record(gateway, args: RecordIdArgs):
    record = await gateway.get_time_record(args.id)
    return json_result({"timeRecord": with_formatted(record, "time")})


@tool(
    "everhour_create_time_record",
    'Create a time record. Time can be seconds or text like "1h 30m", "90m", "3600s".',
    CreateRecordArgs, OperationType.WRITE, RESOURCES,
)
async def create_time_record(gateway, args: CreateRecordArgs):
    params = args.to_params()
    params["time"] = positive_seconds(args.time)
    record = await gateway.create_time_record(params)
    return json_result({
        "timeRecord": with_formatted(record, "time"),
        "message": f"Time record created successfully: {format_duration(params['time'])}",
    })


@tool(
    "everhour_update_time_record",
    "Update an existing time record.",
    UpdateRecordArgs, OperationType.WRITE, RESOURCES,
)
async def update_time_record(gateway, args: UpdateRecordArgs):
    params = args.to_params(exclude={"id"})
    if args.time is not None:
        params["time"] = positive_seconds(args.time)
    record = await gateway.update_time_record(args.id, params)
    return json_result({
        "timeRecord": with_formatted(record, "time"),
        "message": "Time record updated successfully",
    })


@tool(
    "everhour_delete_time_record",
    "Delete a time record. This action cannot be undone.",
    RecordIdArgs, OperationType.DELETE, RESOURCES,
)
async def delete_time_record(gateway, args: RecordIdArgs):
    await gateway.delete_time_record(args.id)
    return json_result({
        "success": True,
        "message": f"Time record {args.id} deleted successfully",
    })


TOOLS = descriptor_group(
    list_time_records,
    get_time_record,
    create_time_record,
    update_time_record,
    delete_time_record,
)
