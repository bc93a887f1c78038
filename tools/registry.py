"""
Tool Registry
-------------
Pydantic-validated tool definitions, merged from per-resource groups
into one name -> descriptor mapping.

Each tool is unit-testable without the protocol server: a descriptor is
plain data plus an async handler taking (gateway, validated args).
"""

from dataclasses import dataclass
from enum import Enum
from typing import (
    Any, Awaitable, Callable, Dict, FrozenSet, Iterable, Iterator,
    List, Mapping, Optional, Sequence, Type,
)
import logging

from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from core.errors import ToolNotFoundError, ValidationError
from .results import ToolResult


class OperationType(str, Enum):
    """What a tool does to upstream data."""
    READ = "read"       # No side effects
    WRITE = "write"     # Creates or modifies data
    DELETE = "delete"   # Removes data


class ToolArgs(BaseModel):
    """
    Base class for tool argument models.

    Field names are snake_case in Python and camelCase on the wire.
    Unknown arguments are rejected.
    """
    model_config = ConfigDict(extra="forbid", alias_generator=to_camel)

    def to_params(self, exclude: Iterable[str] = ()) -> Dict[str, Any]:
        """Arguments as an upstream payload, without unset optionals."""
        return self.model_dump(
            by_alias=True,
            exclude_none=True,
            exclude=set(exclude) or None,
        )


class NoArgs(ToolArgs):
    """Tools that take no arguments."""


Handler = Callable[[Any, ToolArgs], Awaitable[ToolResult]]


@dataclass(frozen=True)
class ToolDescriptor:
    """
    Tool definition with argument model and handler.

    Each tool declares:
    - Name and description
    - Argument model (validation and JSON schema)
    - Operation type and a readonly-safe flag
    - Affected resource tags
    - Async handler receiving the gateway and validated arguments
    """
    name: str
    description: str
    args_model: Type[ToolArgs]
    operation_type: OperationType
    affected_resources: FrozenSet[str]
    handler: Handler
    readonly: bool = False

    @property
    def input_schema(self) -> Dict[str, Any]:
        schema = self.args_model.model_json_schema(by_alias=True)
        schema.pop("title", None)
        schema.setdefault("properties", {})
        return schema

    def validate(self, raw: Optional[Mapping[str, Any]]) -> ToolArgs:
        """
        Validate raw arguments.

        Raises ValidationError listing every violated field as
        "<field>: <reason>".
        """
        try:
            return self.args_model.model_validate(raw if raw is not None else {})
        except PydanticValidationError as e:
            problems = []
            for error in e.errors():
                field_path = ".".join(str(part) for part in error["loc"]) or "arguments"
                problems.append(f"{field_path}: {error['msg']}")
            raise ValidationError(self.name, problems) from e

    def describe(self) -> Dict[str, Any]:
        """Discovery entry: name, description and input schema."""
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema,
        }

    def __repr__(self) -> str:
        return f"ToolDescriptor(name={self.name}, operation={self.operation_type.value})"


def tool(
    name: str,
    description: str,
    args_model: Type[ToolArgs],
    operation_type: OperationType,
    resources: Iterable[str],
    readonly: Optional[bool] = None
) -> Callable[[Handler], ToolDescriptor]:
    """
    Decorator turning an async handler into a ToolDescriptor.

    readonly defaults to True exactly for READ tools.
    """
    def decorator(handler: Handler) -> ToolDescriptor:
        return ToolDescriptor(
            name=name,
            description=description,
            args_model=args_model,
            operation_type=operation_type,
            affected_resources=frozenset(resources),
            handler=handler,
            readonly=operation_type is OperationType.READ if readonly is None else readonly,
        )
    return decorator


def descriptor_group(*descriptors: ToolDescriptor) -> Dict[str, ToolDescriptor]:
    """Name -> descriptor mapping for one resource family."""
    group: Dict[str, ToolDescriptor] = {}
    for descriptor in descriptors:
        if descriptor.name in group:
            raise ValueError(f"Duplicate tool name in group: {descriptor.name}")
        group[descriptor.name] = descriptor
    return group


class ToolRegistry:
    """
    Registry for all available tools.

    Built once from descriptor groups and read-only afterwards. Every
    invocation resolves its descriptor here.
    """

    def __init__(self, descriptors: Iterable[ToolDescriptor] = ()):
        self._tools: Dict[str, ToolDescriptor] = {}
        self._logger = logging.getLogger("everhour.tools.registry")

        for descriptor in descriptors:
            self._add(descriptor)

    @classmethod
    def from_groups(cls, groups: Sequence[Mapping[str, ToolDescriptor]]) -> "ToolRegistry":
        """
        Merge groups in order.

        A later group overwrites an earlier entry with the same name.
        """
        registry = cls()
        for group in groups:
            for descriptor in group.values():
                registry._add(descriptor)

        registry._logger.info(f"Registered {len(registry)} tools from {len(groups)} groups")
        return registry

    def _add(self, descriptor: ToolDescriptor) -> None:
        if descriptor.name in self._tools:
            self._logger.warning(f"Overwriting existing tool: {descriptor.name}")

        self._tools[descriptor.name] = descriptor
        self._logger.debug(f"Registered tool: {descriptor.name} ({descriptor.operation_type.value})")

    def get(self, name: str) -> Optional[ToolDescriptor]:
        """Get a tool by name."""
        return self._tools.get(name)

    def resolve(self, name: str) -> ToolDescriptor:
        """Get a tool by name, raising ToolNotFoundError if absent."""
        descriptor = self._tools.get(name)
        if descriptor is None:
            raise ToolNotFoundError(name)
        return descriptor

    def list_tools(self) -> List[Dict[str, Any]]:
        """Discovery listing, in registration order."""
        return [descriptor.describe() for descriptor in self._tools.values()]

    @property
    def names(self) -> List[str]:
        return list(self._tools)

    def __iter__(self) -> Iterator[ToolDescriptor]:
        return iter(self._tools.values())

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, name: str) -> bool:
        return name in self._tools
