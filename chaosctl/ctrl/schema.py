"""In-memory schema model built from a GraphQL introspection response.

The model is built once per client and never mutated afterwards, so it can
be shared freely between completion requests.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from chaosctl.ctrl.errors import SchemaError
from chaosctl.ctrl.types import ArgumentDef, FieldDef, Kind, Query, SchemaType, TypeRef


class Schema:
    """Read-only view over the service's type graph."""

    def __init__(self, types: dict[str, SchemaType], query_type_name: str):
        self._types = types
        self.query_type_name = query_type_name
        if query_type_name not in types:
            raise SchemaError(
                f"query root type {query_type_name!r} is not declared by the schema",
                {"type": query_type_name},
            )

    @classmethod
    def from_introspection(cls, data: dict[str, Any]) -> Schema:
        """Build a schema from the ``__schema`` object of an introspection result."""
        query_type = data.get("queryType") or {}
        query_type_name = query_type.get("name")
        if not query_type_name:
            raise SchemaError("introspection result has no query type")

        types: dict[str, SchemaType] = {}
        for raw in data.get("types") or []:
            try:
                fields = tuple(_field_from_introspection(f) for f in raw.get("fields") or [])
                types[raw["name"]] = SchemaType(name=raw["name"], kind=Kind(raw["kind"]), fields=fields)
            except (KeyError, ValueError, TypeError, AttributeError) as e:
                type_name = raw.get("name") if isinstance(raw, dict) else None
                raise SchemaError(
                    f"malformed introspection entry for type {type_name!r}: {e!r}",
                    {"type": type_name},
                ) from e

        return cls(types, query_type_name)

    @property
    def types(self) -> list[SchemaType]:
        return list(self._types.values())

    def get_type(self, name: str) -> SchemaType:
        try:
            return self._types[name]
        except KeyError:
            raise SchemaError(f"type {name!r} not found in schema", {"type": name}) from None

    def query_type(self) -> SchemaType:
        return self.get_type(self.query_type_name)

    def resolve(self, ref: TypeRef) -> SchemaType:
        """Unwrap LIST / NON_NULL modifiers down to the named type."""
        if ref.name:
            return self.get_type(ref.name)
        if ref.of_type is not None:
            return self.resolve(ref.of_type)
        raise SchemaError(
            f"malformed type reference of kind {ref.kind.value}: no name and no wrapped type",
            {"kind": ref.kind.value},
        )

    def parse_query(self, segments: Sequence[str], root: SchemaType) -> Query:
        """Build a selection chain from path segments, starting at ``root``.

        Each segment must name a field of the current type. A field that
        declares arguments takes the next segment as the value of its first
        argument, unless that segment is the last one. Returns the node for
        the first segment.

        >>> schema.parse_query(["namespace", "ns1", "pods", "name"], schema.query_type())
        Query(name='namespace', ..., argument='ns1', fields={'pods': ...})
        """
        if not segments:
            raise SchemaError("cannot parse an empty query path")

        nodes: list[Query] = []
        current = root
        i = 0
        while i < len(segments):
            name = segments[i]
            field_def = current.get_field(name)
            if field_def is None:
                raise SchemaError(
                    f"type {current.name!r} has no field {name!r}",
                    {"type": current.name, "field": name, "path": list(segments)},
                )

            argument = None
            if field_def.args and i + 2 < len(segments):
                argument = segments[i + 1]
                i += 1

            sub_type = self.resolve(field_def.type)
            node = Query(name=name, type=sub_type, field_def=field_def, argument=argument)
            if nodes:
                nodes[-1].fields[name] = node
            nodes.append(node)
            current = sub_type
            i += 1

        return nodes[0]


def _field_from_introspection(data: dict[str, Any]) -> FieldDef:
    return FieldDef(
        name=data["name"],
        type=TypeRef.from_introspection(data["type"]),
        args=tuple(
            ArgumentDef(name=a["name"], type=TypeRef.from_introspection(a["type"]))
            for a in data.get("args") or []
        ),
    )
