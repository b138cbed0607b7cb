"""Build GraphQL request documents from selection trees and decode responses.

Selection trees (``Query``) are turned into graphql-core AST nodes, so the
printed document is always syntactically valid. Responses are kept as plain
JSON trees and walked against the same selection tree, which avoids
generating a response type per query.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from graphql.language import OperationType, print_ast
from graphql.language.ast import (
    ArgumentNode,
    DocumentNode,
    FieldNode,
    ListTypeNode,
    NamedTypeNode,
    NameNode,
    NonNullTypeNode,
    OperationDefinitionNode,
    SelectionSetNode,
    TypeNode,
    VariableDefinitionNode,
    VariableNode,
)

from chaosctl.ctrl.errors import ResponseShapeError, SchemaError
from chaosctl.ctrl.types import Kind, Query, TypeRef


class Variables:
    """Named placeholders bound while building a request.

    Names are generated in binding order (``v0``, ``v1``, ...).
    """

    def __init__(self) -> None:
        self._values: dict[str, Any] = {}
        self._definitions: list[VariableDefinitionNode] = []

    def bind(self, value: Any, type_ref: TypeRef) -> VariableNode:
        name = f"v{len(self._values)}"
        variable = VariableNode(name=NameNode(value=name))
        self._values[name] = value
        self._definitions.append(
            VariableDefinitionNode(variable=variable, type=_type_node(type_ref), directives=())
        )
        return variable

    @property
    def definitions(self) -> tuple[VariableDefinitionNode, ...]:
        return tuple(self._definitions)

    def gen_map(self) -> dict[str, Any]:
        return dict(self._values)

    def __len__(self) -> int:
        return len(self._values)


@dataclass
class RequestDescriptor:
    """A ready-to-send request: the document plus the variables it refers to."""

    document: DocumentNode
    query: Query
    variables: Variables

    @property
    def text(self) -> str:
        return print_ast(self.document)


def build_request(query: Query, variables: Variables) -> RequestDescriptor:
    """Wrap ``query`` under an anonymous query operation.

    Raises SchemaError when a node cannot be decoded: composite types
    without a sub-selection, leaf types with one, or an argument value that
    does not fit the argument's scalar type.
    """
    field_node = _field_node(query, variables)
    operation = OperationDefinitionNode(
        operation=OperationType.QUERY,
        variable_definitions=variables.definitions,
        directives=(),
        selection_set=SelectionSetNode(selections=(field_node,)),
    )
    return RequestDescriptor(
        document=DocumentNode(definitions=(operation,)),
        query=query,
        variables=variables,
    )


def _field_node(query: Query, variables: Variables) -> FieldNode:
    if query.type.kind.is_leaf and query.fields:
        raise SchemaError(
            f"field {query.name!r} of leaf type {query.type.name!r} cannot have sub-selections",
            {"field": query.name, "type": query.type.name},
        )
    if not query.type.kind.is_leaf and not query.fields:
        raise SchemaError(
            f"field {query.name!r} of type {query.type.name!r} needs a sub-selection",
            {"field": query.name, "type": query.type.name},
        )

    arguments: tuple[ArgumentNode, ...] = ()
    if query.argument is not None and query.field_def is not None and query.field_def.args:
        arg_def = query.field_def.args[0]
        value = _coerce(query.argument, arg_def.type, query.name)
        arguments = (
            ArgumentNode(name=NameNode(value=arg_def.name), value=variables.bind(value, arg_def.type)),
        )

    selection_set = None
    if query.fields:
        selection_set = SelectionSetNode(
            selections=tuple(_field_node(child, variables) for child in query.fields.values())
        )

    return FieldNode(
        name=NameNode(value=query.name),
        arguments=arguments,
        directives=(),
        selection_set=selection_set,
    )


def _type_node(ref: TypeRef) -> TypeNode:
    if ref.kind == Kind.NON_NULL and ref.of_type is not None:
        return NonNullTypeNode(type=_type_node(ref.of_type))
    if ref.kind == Kind.LIST and ref.of_type is not None:
        return ListTypeNode(type=_type_node(ref.of_type))
    if not ref.name:
        raise SchemaError(f"malformed type reference of kind {ref.kind.value}", {"kind": ref.kind.value})
    return NamedTypeNode(name=NameNode(value=ref.name))


def _named(ref: TypeRef) -> str | None:
    while ref.name is None and ref.of_type is not None:
        ref = ref.of_type
    return ref.name


def _coerce(value: str, ref: TypeRef, field_name: str) -> Any:
    """Convert a path segment to the JSON value expected by a scalar argument."""
    type_name = _named(ref)
    try:
        if type_name == "Int":
            return int(value)
        if type_name == "Float":
            return float(value)
    except ValueError:
        raise SchemaError(
            f"argument value {value!r} of field {field_name!r} is not a valid {type_name}",
            {"field": field_name, "value": value, "type": type_name},
        ) from None
    if type_name == "Boolean":
        if value.lower() not in ("true", "false"):
            raise SchemaError(
                f"argument value {value!r} of field {field_name!r} is not a valid Boolean",
                {"field": field_name, "value": value, "type": type_name},
            )
        return value.lower() == "true"
    return value


# -- Response decoding --------------------------------------------------------


def extract_leaf_values(value: Any, query: Query | None, prefix: str = "") -> list[str]:
    """Collect the scalar leaves of ``value`` selected by ``query``.

    Objects are dereferenced by the query node's name, lists are flattened
    in order and ``null`` yields nothing. A leaf is kept only if its string
    form starts with ``prefix``.
    """
    if isinstance(value, list):
        results: list[str] = []
        for item in value:
            results.extend(extract_leaf_values(item, query, prefix))
        return results

    if isinstance(value, dict):
        if query is None:
            raise ResponseShapeError(
                "found an object where a scalar value was expected",
                {"keys": sorted(value)},
            )
        if query.name not in value:
            raise ResponseShapeError(
                f"cannot find field {query.name!r} in response object",
                {"field": query.name, "keys": sorted(value)},
            )
        child = value[query.name]
        if not query.fields:
            return extract_leaf_values(child, None, prefix)
        results = []
        for sub_query in query.fields.values():
            results.extend(extract_leaf_values(child, sub_query, prefix))
        return results

    if value is None:
        return []

    if query is not None:
        raise ResponseShapeError(
            f"found scalar {value!r} where field {query.name!r} was expected",
            {"field": query.name},
        )

    text = _scalar_to_str(value)
    return [text] if text.startswith(prefix) else []


def _scalar_to_str(value: Any) -> str:
    # bool before int: bool is a subclass of int
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return value
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return f"{value:f}"
    raise ResponseShapeError(
        f"unsupported scalar value {value!r} of type {type(value).__name__}",
        {"type": type(value).__name__},
    )
