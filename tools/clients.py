"""
Client tools.
"""

from typing import Optional

from pydantic import Field

from .args import NonEmptyStr, PageArgs
from .registry import OperationType, ToolArgs, descriptor_group, tool
from .results import json_result


RESOURCES = ["clients"]


class BusinessDetails(ToolArgs):
    name: Optional[str] = Field(None, description="Business name")
    address: Optional[str] = Field(None, description="Business address")
    phone: Optional[str] = Field(None, description="Business phone number")
    website: Optional[str] = Field(None, description="Business website URL")


class ListClientsArgs(PageArgs):
    query: Optional[str] = Field(None, description="Search query to filter clients by name")


class ClientIdArgs(ToolArgs):
    id: int = Field(description="Client ID")


class CreateClientArgs(ToolArgs):
    name: NonEmptyStr = Field(description="Client name")
    business_details: Optional[BusinessDetails] = Field(None, description="Optional business details")


class UpdateClientArgs(ToolArgs):
    id: int = Field(description="Client ID")
    name: Optional[NonEmptyStr] = Field(None, description="New client name")
    business_details: Optional[BusinessDetails] = Field(None, description="Business details")


@tool(
    "everhour_list_clients",
    "List all clients from Everhour. Supports pagination and search query.",
    ListClientsArgs, OperationType.READ, RESOURCES,
)
async def list_clients(gateway, args: ListClientsArgs):
    clients = await gateway.list_clients(args.to_params()) or []
    return json_result({"clients": clients, "total": len(clients)})


@tool(
    "everhour_get_client",
    "Get details of a specific client by ID.",
    ClientIdArgs, OperationType.READ, RESOURCES,
)
async def get_client(gateway, args: ClientIdArgs):
    client = await gateway.get_client(args.id)
    return json_result({"client": client})


@tool(
    "everhour_create_client",
    "Create a new client in Everhour.",
    CreateClientArgs, OperationType.WRITE, RESOURCES,
)
async def create_client(gateway, args: CreateClientArgs):
    client = await gateway.create_client(args.to_params())
    return json_result({
        "client": client,
        "message": f'Client "{args.name}" created successfully',
    })


@tool(
    "everhour_update_client",
    "Update an existing client in Everhour.",
    UpdateClientArgs, OperationType.WRITE, RESOURCES,
)
async def update_client(gateway, args: UpdateClientArgs):
    client = await gateway.update_client(args.id, args.to_params(exclude={"id"}))
    return json_result({
        "client": client,
        "message": "Client updated successfully",
    })


@tool(
    "everhour_delete_client",
    "Delete a client from Everhour. This action cannot be undone.",
    ClientIdArgs, OperationType.DELETE, RESOURCES,
)
async def delete_client(gateway, args: ClientIdArgs):
    await gateway.delete_client(args.id)
    return json_result({
        "success": True,
        "message": f"Client {args.id} deleted successfully",
    })


TOOLS = descriptor_group(
    list_clients,
    get_client,
    create_client,
    update_client,
    delete_client,
)
