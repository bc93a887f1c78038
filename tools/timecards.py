"""
Timecard tools: attendance clock-in/clock-out records.
"""

from typing import Optional

from pydantic import Field

from .args import DateStr, PageArgs
from .registry import OperationType, ToolArgs, descriptor_group, tool
from .results import json_result


RESOURCES = ["timecards"]


class ListTimecardsArgs(PageArgs):
    user: Optional[int] = Field(None, description="Only timecards of this user ID")
    from_: Optional[DateStr] = Field(None, alias="from", description="Start date (YYYY-MM-DD)")
    to: Optional[DateStr] = Field(None, description="End date (YYYY-MM-DD)")


class TimecardIdArgs(ToolArgs):
    id: int = Field(description="Timecard ID")


class ClockInArgs(ToolArgs):
    user: int = Field(description="User ID to clock in")
    date: Optional[DateStr] = Field(None, description="Date to clock in for (default: today)")


class ClockOutArgs(ToolArgs):
    user: int = Field(description="User ID to clock out")


@tool(
    "everhour_list_timecards",
    "List timecards, optionally for one user and a date range.",
    ListTimecardsArgs, OperationType.READ, RESOURCES,
)
async def list_timecards(gateway, args: ListTimecardsArgs):
    params = args.to_params(exclude={"user"})
    if args.user is not None:
        timecards = await gateway.list_user_timecards(args.user, params)
    else:
        timecards = await gateway.list_timecards(params)
    timecards = timecards or []
    return json_result({"timecards": timecards, "total": len(timecards)})


@tool(
    "everhour_get_timecard",
    "Get details of a specific timecard by ID.",
    TimecardIdArgs, OperationType.READ, RESOURCES,
)
async def get_timecard(gateway, args: TimecardIdArgs):
    timecard = await gateway.get_timecard(args.id)
    return json_result({"timecard": timecard})


@tool(
    "everhour_clock_in",
    "Clock a user in for the day.",
    ClockInArgs, OperationType.WRITE, RESOURCES,
)
async def clock_in(gateway, args: ClockInArgs):
    timecard = await gateway.clock_in(args.user, args.date)
    return json_result({
        "timecard": timecard,
        "message": f"User {args.user} clocked in",
    })


@tool(
    "everhour_clock_out",
    "Clock a user out.",
    ClockOutArgs, OperationType.WRITE, RESOURCES,
)
async def clock_out(gateway, args: ClockOutArgs):
    timecard = await gateway.clock_out(args.user)
    return json_result({
        "timecard": timecard,
        "message": f"User {args.user} clocked out",
    })


@tool(
    "everhour_delete_timecard",
    "Delete a timecard. This action cannot be undone.",
    TimecardIdArgs, OperationType.DELETE, RESOURCES,
)
async def delete_timecard(gateway, args: TimecardIdArgs):
    await gateway.delete_timecard(args.id)
    return json_result({
        "success": True,
        "message": f"Timecard {args.id} deleted successfully",
    })


TOOLS = descriptor_group(
    list_timecards,
    get_timecard,
    clock_in,
    clock_out,
    delete_timecard,
)
