"""
User tools.
"""

from typing import Optional

from pydantic import Field

from .args import PageArgs
from .registry import NoArgs, OperationType, ToolArgs, descriptor_group, tool
from .results import json_result


RESOURCES = ["users"]


class ListUsersArgs(PageArgs):
    query: Optional[str] = Field(None, description="Search query to filter users by name")


class UserIdArgs(ToolArgs):
    id: int = Field(description="User ID")


@tool(
    "everhour_get_current_user",
    "Get the profile of the user the API key belongs to.",
    NoArgs, OperationType.READ, RESOURCES,
)
async def get_current_user(gateway, args: NoArgs):
    user = await gateway.get_current_user()
    return json_result({"user": user})


@tool(
    "everhour_list_team_users",
    "List all users in the team.",
    ListUsersArgs, OperationType.READ, RESOURCES,
)
async def list_team_users(gateway, args: ListUsersArgs):
    users = await gateway.list_team_users(args.to_params()) or []
    return json_result({"users": users, "total": len(users)})


@tool(
    "everhour_get_user",
    "Get details of a specific team user by ID.",
    UserIdArgs, OperationType.READ, RESOURCES,
)
async def get_user(gateway, args: UserIdArgs):
    user = await gateway.get_user(args.id)
    return json_result({"user": user})


TOOLS = descriptor_group(
    get_current_user,
    list_team_users,
    get_user,
)
