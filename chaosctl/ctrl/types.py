"""Schema and query types shared by the completion engine.

Two layers of types:
1. Schema model: immutable description of the service's type graph,
   decoded once from an introspection response
2. Query model: transient selection trees built per request
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

# -- Schema model -------------------------------------------------------------


class Kind(str, Enum):
    """GraphQL ``__TypeKind`` values."""

    SCALAR = "SCALAR"
    OBJECT = "OBJECT"
    INTERFACE = "INTERFACE"
    UNION = "UNION"
    ENUM = "ENUM"
    INPUT_OBJECT = "INPUT_OBJECT"
    LIST = "LIST"
    NON_NULL = "NON_NULL"

    @property
    def is_wrapper(self) -> bool:
        return self in (Kind.LIST, Kind.NON_NULL)

    @property
    def is_leaf(self) -> bool:
        return self in (Kind.SCALAR, Kind.ENUM)


@dataclass(frozen=True)
class TypeRef:
    """A reference to a type, possibly wrapped in LIST / NON_NULL modifiers."""

    kind: Kind
    name: str | None = None
    of_type: TypeRef | None = None

    @classmethod
    def from_introspection(cls, data: dict[str, Any]) -> TypeRef:
        of_type = data.get("ofType")
        return cls(
            kind=Kind(data["kind"]),
            name=data.get("name"),
            of_type=cls.from_introspection(of_type) if of_type else None,
        )

    def __str__(self) -> str:
        if self.kind == Kind.NON_NULL and self.of_type is not None:
            return f"{self.of_type}!"
        if self.kind == Kind.LIST and self.of_type is not None:
            return f"[{self.of_type}]"
        return self.name or "?"


@dataclass(frozen=True)
class ArgumentDef:
    """An argument declared on a field."""

    name: str
    type: TypeRef


@dataclass(frozen=True)
class FieldDef:
    """A field of an object or interface type, with its declared arguments."""

    name: str
    type: TypeRef
    args: tuple[ArgumentDef, ...] = ()


@dataclass(frozen=True)
class SchemaType:
    """A named type of the schema. ``fields`` keeps declaration order."""

    name: str
    kind: Kind
    fields: tuple[FieldDef, ...] = ()

    def get_field(self, name: str) -> FieldDef | None:
        for f in self.fields:
            if f.name == name:
                return f
        return None


# -- Query model --------------------------------------------------------------


@dataclass
class Query:
    """A node of a selection tree.

    ``argument`` is the concrete value bound to the first declared argument
    of ``field_def``; children are keyed by field name in selection order.
    """

    name: str
    type: SchemaType
    field_def: FieldDef | None = None
    argument: str | None = None
    fields: dict[str, Query] = field(default_factory=lambda: dict[str, Query]())
