"""
Project tools.
"""

from typing import Literal, Optional

from pydantic import Field

from .args import NonEmptyStr, PageArgs
from .registry import OperationType, ToolArgs, descriptor_group, tool
from .results import json_result, with_formatted


RESOURCES = ["projects"]


class Billing(ToolArgs):
    type: Literal["flat_rate", "hourly_rate", "none"] = Field(description="Billing type")
    budget: Optional[float] = Field(None, description="Project budget")
    rate: Optional[float] = Field(None, description="Hourly rate")


class ListProjectsArgs(PageArgs):
    query: Optional[str] = Field(None, description="Search query to filter projects by name")
    status: Optional[Literal["active", "archived", "completed"]] = Field(
        None, description="Filter projects by status"
    )
    client: Optional[int] = Field(None, description="Filter projects by client ID")


class ProjectIdArgs(ToolArgs):
    id: NonEmptyStr = Field(description="Project ID")


class CreateProjectArgs(ToolArgs):
    name: NonEmptyStr = Field(description="Project name")
    client: Optional[int] = Field(None, description="Client ID to associate with the project")
    type: Optional[Literal["board", "list"]] = Field(None, description="Project type (board or list)")
    billing: Optional[Billing] = Field(None, description="Billing configuration")


class UpdateProjectArgs(ToolArgs):
    id: NonEmptyStr = Field(description="Project ID")
    name: Optional[NonEmptyStr] = Field(None, description="New project name")
    status: Optional[Literal["active", "archived", "completed"]] = Field(None, description="Project status")
    billing: Optional[Billing] = Field(None, description="Billing configuration")


@tool(
    "everhour_list_projects",
    "List all projects from Everhour. Supports filtering by status, client, and search query.",
    ListProjectsArgs, OperationType.READ, RESOURCES,
)
async def list_projects(gateway, args: ListProjectsArgs):
    projects = await gateway.list_projects(args.to_params()) or []
    return json_result({
        "projects": [with_formatted(p, "time") for p in projects],
        "total": len(projects),
    })


@tool(
    "everhour_get_project",
    "Get details of a specific project by ID.",
    ProjectIdArgs, OperationType.READ, RESOURCES,
)
async def get_project(gateway, args: ProjectIdArgs):
    project = await gateway.get_project(args.id)
    return json_result({"project": with_formatted(project, "time")})


@tool(
    "everhour_create_project",
    "Create a new project in Everhour.",
    CreateProjectArgs, OperationType.WRITE, RESOURCES,
)
async def create_project(gateway, args: CreateProjectArgs):
    project = await gateway.create_project(args.to_params())
    return json_result({
        "project": project,
        "message": f'Project "{args.name}" created successfully',
    })


@tool(
    "everhour_update_project",
    "Update an existing project in Everhour.",
    UpdateProjectArgs, OperationType.WRITE, RESOURCES,
)
async def update_project(gateway, args: UpdateProjectArgs):
    project = await gateway.update_project(args.id, args.to_params(exclude={"id"}))
    return json_result({
        "project": project,
        "message": "Project updated successfully",
    })


@tool(
    "everhour_delete_project",
    "Delete a project from Everhour. This action cannot be undone.",
    ProjectIdArgs, OperationType.DELETE, RESOURCES,
)
async def delete_project(gateway, args: ProjectIdArgs):
    await gateway.delete_project(args.id)
    return json_result({
        "success": True,
        "message": f"Project {args.id} deleted successfully",
    })


TOOLS = descriptor_group(
    list_projects,
    get_project,
    create_project,
    update_project,
    delete_project,
)
