"""
Task tools.
"""

from typing import List, Literal, Optional

from pydantic import Field

from .args import NonEmptyStr, PageArgs
from .registry import OperationType, ToolArgs, descriptor_group, tool
from .results import json_result, with_formatted


RESOURCES = ["tasks"]

TaskType = Literal["task", "bug", "feature"]
TaskStatus = Literal["open", "closed", "in_progress"]


class ListTasksArgs(PageArgs):
    query: Optional[str] = Field(None, description="Search query to filter tasks by name")
    status: Optional[TaskStatus] = Field(None, description="Filter tasks by status")
    project: Optional[str] = Field(None, description="Filter tasks by project ID")
    assignee: Optional[int] = Field(None, description="Filter tasks by assignee user ID")


class TaskIdArgs(ToolArgs):
    id: NonEmptyStr = Field(description="Task ID")


class CreateTaskArgs(ToolArgs):
    name: NonEmptyStr = Field(description="Task name")
    project: NonEmptyStr = Field(description="Project ID where the task will be created")
    section: Optional[str] = Field(None, description="Section ID within the project")
    assignee: Optional[int] = Field(None, description="User ID to assign the task to")
    type: Optional[TaskType] = Field(None, description="Task type")
    description: Optional[str] = Field(None, description="Task description")
    labels: Optional[List[str]] = Field(None, description="Labels to assign to the task")


class UpdateTaskArgs(ToolArgs):
    id: NonEmptyStr = Field(description="Task ID")
    name: Optional[NonEmptyStr] = Field(None, description="New task name")
    status: Optional[TaskStatus] = Field(None, description="Task status")
    type: Optional[TaskType] = Field(None, description="Task type")
    assignee: Optional[int] = Field(None, description="User ID to assign the task to")
    description: Optional[str] = Field(None, description="Task description")
    labels: Optional[List[str]] = Field(None, description="Labels to assign to the task")


@tool(
    "everhour_list_tasks",
    "List tasks from Everhour. Supports filtering by status, project, assignee, and search query. "
    "Returns an empty list unless a query or project is given.",
    ListTasksArgs, OperationType.READ, RESOURCES,
)
async def list_tasks(gateway, args: ListTasksArgs):
    tasks = await gateway.search_tasks(args.to_params()) or []
    return json_result({
        "tasks": [with_formatted(t, "time") for t in tasks],
        "total": len(tasks),
    })


@tool(
    "everhour_get_task",
    "Get details of a specific task by ID.",
    TaskIdArgs, OperationType.READ, RESOURCES,
)
async def get_task(gateway, args: TaskIdArgs):
    task = await gateway.get_task(args.id)
    return json_result({"task": with_formatted(task, "time", "estimate")})


@tool(
    "everhour_create_task",
    "Create a new task in Everhour.",
    CreateTaskArgs, OperationType.WRITE, RESOURCES,
)
async def create_task(gateway, args: CreateTaskArgs):
    task = await gateway.create_task(args.project, args.to_params(exclude={"project"}))
    return json_result({
        "task": task,
        "message": f'Task "{args.name}" created successfully',
    })


@tool(
    "everhour_update_task",
    "Update an existing task in Everhour.",
    UpdateTaskArgs, OperationType.WRITE, RESOURCES,
)
async def update_task(gateway, args: UpdateTaskArgs):
    task = await gateway.update_task(args.id, args.to_params(exclude={"id"}))
    return json_result({
        "task": task,
        "message": "Task updated successfully",
    })


@tool(
    "everhour_delete_task",
    "Delete a task from Everhour. This action cannot be undone.",
    TaskIdArgs, OperationType.DELETE, RESOURCES,
)
async def delete_task(gateway, args: TaskIdArgs):
    await gateway.delete_task(args.id)
    return json_result({
        "success": True,
        "message": f"Task {args.id} deleted successfully",
    })


TOOLS = descriptor_group(
    list_tasks,
    get_task,
    create_task,
    update_task,
    delete_task,
)
