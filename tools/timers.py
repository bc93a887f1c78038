"""
Timer tools.

Starting a timer while one is running is refused up front with a soft
error envelope; the start endpoint is not called.
"""

from typing import Optional

from pydantic import Field

from api.client import is_active_timer
from core.timecodec import format_duration
from .args import DateRangeArgs, NonEmptyStr
from .registry import NoArgs, OperationType, ToolArgs, descriptor_group, tool
from .results import ToolResult, error_result, json_result, total_seconds, with_formatted


RESOURCES = ["timers"]

NO_TIMER_MESSAGE = "No timer is currently running"
ALREADY_RUNNING_MESSAGE = "A timer is already running. Stop the current timer before starting a new one."


class StartTimerArgs(ToolArgs):
    task: Optional[str] = Field(None, description="Task ID to associate with the timer")
    project: Optional[str] = Field(None, description="Project ID to associate with the timer")
    comment: Optional[str] = Field(None, description="Optional comment for the timer")


class StartForTaskArgs(ToolArgs):
    task_id: NonEmptyStr = Field(description="Task ID to start the timer for")
    comment: Optional[str] = Field(None, description="Optional comment for the timer")


def _already_running(timer) -> ToolResult:
    payload = json_result({
        "success": False,
        "currentTimer": with_formatted(timer, "duration"),
        "message": ALREADY_RUNNING_MESSAGE,
    })
    return error_result(payload.text)


def _started(timer) -> ToolResult:
    message = "Timer started successfully"
    if isinstance(timer, dict):
        task = timer.get("task")
        if isinstance(task, dict) and task.get("name"):
            message += f' for task "{task["name"]}"'
    return json_result({"success": True, "timer": timer, "message": message})


@tool(
    "everhour_get_current_timer",
    "Get the currently running timer, if any.",
    NoArgs, OperationType.READ, RESOURCES,
)
async def get_current_timer(gateway, args: NoArgs):
    timer = await gateway.get_current_timer()
    if timer is None:
        return json_result({"timer": None, "message": NO_TIMER_MESSAGE})

    running = is_active_timer(timer)
    return json_result({
        "timer": with_formatted(timer, "duration"),
        "message": "Timer is currently running" if running else "Timer is stopped",
    })


@tool(
    "everhour_start_timer",
    "Start a new timer in Everhour. Can be associated with a task or project.",
    StartTimerArgs, OperationType.WRITE, RESOURCES,
)
async def start_timer(gateway, args: StartTimerArgs):
    current = await gateway.get_current_timer()
    if is_active_timer(current):
        return _already_running(current)

    timer = await gateway.start_timer(args.to_params())
    return _started(timer)


@tool(
    "everhour_stop_timer",
    "Stop the currently running timer.",
    NoArgs, OperationType.WRITE, RESOURCES,
)
async def stop_timer(gateway, args: NoArgs):
    record = await gateway.stop_timer()
    recorded = None
    if isinstance(record, dict) and isinstance(record.get("time"), int):
        recorded = format_duration(record["time"])
    return json_result({
        "success": True,
        "timeRecord": with_formatted(record, "time"),
        "message": f"Timer stopped successfully. Time recorded: {recorded or 'Unknown'}",
    })


@tool(
    "everhour_list_timers",
    "List timer history from Everhour. Supports filtering by project, assignee, and date range.",
    DateRangeArgs, OperationType.READ, RESOURCES,
)
async def list_timers(gateway, args: DateRangeArgs):
    timers = await gateway.list_timers(args.to_params()) or []
    total = total_seconds(timers, "duration")
    return json_result({
        "timers": [with_formatted(t, "duration") for t in timers],
        "total": len(timers),
        "totalDuration": total,
        "totalDurationFormatted": format_duration(total),
    })


@tool(
    "everhour_timer_status",
    "Get a summary of timer status and activity.",
    NoArgs, OperationType.READ, RESOURCES,
)
async def timer_status(gateway, args: NoArgs):
    timer = await gateway.get_current_timer()
    if timer is None:
        return json_result({"status": "inactive", "timer": None, "message": NO_TIMER_MESSAGE})

    running = is_active_timer(timer)
    return json_result({
        "status": timer.get("status") or "inactive",
        "timer": with_formatted(timer, "duration"),
        "message": "Timer is currently running" if running else "Last timer was stopped",
    })


@tool(
    "everhour_get_running_timer",
    "Get the currently running timer.",
    NoArgs, OperationType.READ, RESOURCES,
)
async def get_running_timer(gateway, args: NoArgs):
    timer = await gateway.get_running_timer()
    if timer is None:
        return json_result({"timer": None, "message": NO_TIMER_MESSAGE})
    return json_result({
        "timer": with_formatted(timer, "duration"),
        "message": "Timer is currently running",
    })


@tool(
    "everhour_start_timer_for_task",
    "Start a timer directly for a specific task.",
    StartForTaskArgs, OperationType.WRITE, RESOURCES + ["tasks"],
)
async def start_timer_for_task(gateway, args: StartForTaskArgs):
    current = await gateway.get_current_timer()
    if is_active_timer(current):
        return _already_running(current)

    timer = await gateway.start_timer_for_task(args.task_id, args.comment)
    return _started(timer)


TOOLS = descriptor_group(
    get_current_timer,
    start_timer,
    stop_timer,
    list_timers,
    timer_status,
    get_running_timer,
    start_timer_for_task,
)
