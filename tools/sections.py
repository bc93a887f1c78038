"""
Section tools.
"""

from typing import Optional

from pydantic import Field

from .args import NonEmptyStr, PageArgs
from .registry import OperationType, ToolArgs, descriptor_group, tool
from .results import json_result


RESOURCES = ["sections"]


class ListSectionsArgs(PageArgs):
    query: Optional[str] = Field(None, description="Search query to filter sections by name")


class SectionIdArgs(ToolArgs):
    id: NonEmptyStr = Field(description="Section ID")


class CreateSectionArgs(ToolArgs):
    name: NonEmptyStr = Field(description="Section name")
    project: NonEmptyStr = Field(description="Project ID the section belongs to")
    position: Optional[int] = Field(None, ge=0, description="Position of the section in the project")


class UpdateSectionArgs(ToolArgs):
    id: NonEmptyStr = Field(description="Section ID")
    name: Optional[NonEmptyStr] = Field(None, description="New section name")
    position: Optional[int] = Field(None, ge=0, description="New position")


@tool(
    "everhour_list_all_sections",
    "List sections across projects. Supports pagination and search query.",
    ListSectionsArgs, OperationType.READ, RESOURCES,
)
async def list_all_sections(gateway, args: ListSectionsArgs):
    sections = await gateway.list_all_sections(args.to_params()) or []
    return json_result({"sections": sections, "total": len(sections)})


@tool(
    "everhour_get_section",
    "Get details of a specific section by ID.",
    SectionIdArgs, OperationType.READ, RESOURCES,
)
async def get_section(gateway, args: SectionIdArgs):
    section = await gateway.get_section(args.id)
    return json_result({"section": section})


@tool(
    "everhour_create_section",
    "Create a new section in Everhour.",
    CreateSectionArgs, OperationType.WRITE, RESOURCES,
)
async def create_section(gateway, args: CreateSectionArgs):
    section = await gateway.create_section(args.to_params())
    return json_result({
        "section": section,
        "message": f'Section "{args.name}" created successfully',
    })


@tool(
    "everhour_update_section",
    "Update an existing section in Everhour.",
    UpdateSectionArgs, OperationType.WRITE, RESOURCES,
)
async def update_section(gateway, args: UpdateSectionArgs):
    section = await gateway.update_section(args.id, args.to_params(exclude={"id"}))
    return json_result({
        "section": section,
        "message": "Section updated successfully",
    })


@tool(
    "everhour_delete_section",
    "Delete a section from Everhour. This action cannot be undone.",
    SectionIdArgs, OperationType.DELETE, RESOURCES,
)
async def delete_section(gateway, args: SectionIdArgs):
    await gateway.delete_section(args.id)
    return json_result({
        "success": True,
        "message": f"Section {args.id} deleted successfully",
    })


TOOLS = descriptor_group(
    list_all_sections,
    get_section,
    create_section,
    update_section,
    delete_section,
)
