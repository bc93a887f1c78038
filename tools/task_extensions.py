"""
Task extension tools: per-project task listing, estimates and time
logged directly on a task.
"""

from typing import Literal, Optional

from pydantic import Field

from core.timecodec import format_duration
from .args import DateStr, DurationValue, NonEmptyStr, PageArgs, positive_seconds
from .registry import OperationType, ToolArgs, descriptor_group, tool
from .results import json_result, with_formatted


class TasksForProjectArgs(PageArgs):
    project_id: NonEmptyStr = Field(description="Project ID to get tasks for")
    query: Optional[str] = Field(None, description="Search query to filter tasks by name")
    status: Optional[Literal["open", "closed", "in_progress"]] = Field(
        None, description="Filter tasks by status"
    )
    assignee: Optional[int] = Field(None, description="Filter tasks by assignee user ID")


class UpdateEstimateArgs(ToolArgs):
    id: NonEmptyStr = Field(description="Task ID")
    estimate: int = Field(gt=0, description="Estimate in seconds")


class TaskIdArgs(ToolArgs):
    id: NonEmptyStr = Field(description="Task ID")


class AddTaskTimeArgs(ToolArgs):
    id: NonEmptyStr = Field(description="Task ID")
    time: DurationValue
    date: DateStr
    comment: Optional[str] = Field(None, description="Optional comment")


class UpdateTaskTimeArgs(ToolArgs):
    id: NonEmptyStr = Field(description="Task ID")
    time: Optional[DurationValue] = None
    date: Optional[DateStr] = None
    comment: Optional[str] = Field(None, description="Optional comment")


@tool(
    "everhour_get_tasks_for_project",
    "Get all tasks for a specific project.",
    TasksForProjectArgs, OperationType.READ, ["tasks", "projects"],
)
async def get_tasks_for_project(gateway, args: TasksForProjectArgs):
    tasks = await gateway.list_project_tasks(args.project_id, args.to_params(exclude={"project_id"})) or []
    return json_result({
        "projectId": args.project_id,
        "tasks": [with_formatted(t, "time", "estimate") for t in tasks],
        "total": len(tasks),
    })


@tool(
    "everhour_update_task_estimate",
    "Update the time estimate of a task.",
    UpdateEstimateArgs, OperationType.WRITE, ["tasks"],
)
async def update_task_estimate(gateway, args: UpdateEstimateArgs):
    task = await gateway.update_task_estimate(args.id, args.estimate)
    return json_result({
        "task": with_formatted(task, "estimate"),
        "message": f"Task estimate updated to {format_duration(args.estimate)}",
    })


@tool(
    "everhour_delete_task_estimate",
    "Remove the time estimate from a task.",
    TaskIdArgs, OperationType.DELETE, ["tasks"],
)
async def delete_task_estimate(gateway, args: TaskIdArgs):
    await gateway.delete_task_estimate(args.id)
    return json_result({
        "success": True,
        "message": f"Estimate removed from task {args.id}",
    })


@tool(
    "everhour_add_time_to_task",
    'Log time on a task. Time can be seconds or text like "1h 30m".',
    AddTaskTimeArgs, OperationType.WRITE, ["tasks", "time_records"],
)
async def add_time_to_task(gateway, args: AddTaskTimeArgs):
    seconds = positive_seconds(args.time)
    record = await gateway.add_task_time(args.id, {
        "time": seconds,
        "date": args.date,
        "comment": args.comment,
    })
    return json_result({
        "timeRecord": with_formatted(record, "time"),
        "message": f"Time added to task: {format_duration(seconds)}",
    })


@tool(
    "everhour_update_task_time",
    "Update time logged on a task.",
    UpdateTaskTimeArgs, OperationType.WRITE, ["tasks", "time_records"],
)
async def update_task_time(gateway, args: UpdateTaskTimeArgs):
    seconds = positive_seconds(args.time) if args.time is not None else None
    record = await gateway.update_task_time(args.id, {
        "time": seconds,
        "date": args.date,
        "comment": args.comment,
    })
    message = "Task time updated"
    if seconds is not None:
        message += f": {format_duration(seconds)}"
    return json_result({
        "timeRecord": with_formatted(record, "time"),
        "message": message,
    })


@tool(
    "everhour_delete_task_time",
    "Delete time logged on a task.",
    TaskIdArgs, OperationType.DELETE, ["tasks", "time_records"],
)
async def delete_task_time(gateway, args: TaskIdArgs):
    await gateway.delete_task_time(args.id)
    return json_result({
        "success": True,
        "message": f"Time removed from task {args.id}",
    })


TOOLS = descriptor_group(
    get_tasks_for_project,
    update_task_estimate,
    delete_task_estimate,
    add_time_to_task,
    update_task_time,
    delete_task_time,
)
