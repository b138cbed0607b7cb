"""Recursive query completion over the schema graph.

Walks the schema from a namespace-scoped root, producing every path that
can follow ``namespace/<ns>``. Fields that take an argument are expanded
with the live values of that argument, fetched through an argument lister.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from chaosctl.ctrl.errors import UnsupportedTypeError
from chaosctl.ctrl.schema import Schema
from chaosctl.ctrl.types import SchemaType
from chaosctl.helpers.permutation import full_permutation

logger = logging.getLogger(__name__)

NAMESPACE_KEY = "namespace"
NAMESPACE_TYPE = "Namespace"

ArgumentLister = Callable[[Sequence[str], str], list[str]]


@dataclass(frozen=True)
class AutoCompleteContext:
    """Per-branch traversal state. Children are derived with ``next``, never mutated."""

    remaining: int
    visited: frozenset[str] = frozenset()
    query: tuple[str, ...] = ()
    complete_leaves: bool = False

    @classmethod
    def root(cls, namespace: str, depth: int, complete_leaves: bool) -> AutoCompleteContext:
        return cls(
            remaining=depth,
            query=(NAMESPACE_KEY, namespace),
            complete_leaves=complete_leaves,
        )

    @property
    def is_complete(self) -> bool:
        return self.remaining == 0

    def next(self, type_name: str, field_name: str, arg: str | None = None) -> AutoCompleteContext:
        query = self.query + (field_name,)
        if arg is not None:
            query += (arg,)
        return AutoCompleteContext(
            remaining=self.remaining - 1,
            visited=self.visited | {type_name},
            query=query,
            complete_leaves=self.complete_leaves,
        )


class QueryCompleter:
    """Produces completions for one schema, using ``list_arguments`` for live values."""

    def __init__(self, schema: Schema, list_arguments: ArgumentLister):
        self.schema = schema
        self.list_arguments = list_arguments

    def complete(self, ctx: AutoCompleteContext, root: SchemaType) -> list[str]:
        """Return completions below ``root``: leaves first, then trunks.

        An empty result means ``root`` has nothing selectable below it, or
        the depth budget ran out.
        """
        if ctx.is_complete:
            return []

        if root.kind.is_leaf:
            return []
        if root.kind.is_wrapper:
            raise UnsupportedTypeError(
                f"type {root.name!r} of kind {root.kind.value} cannot be completed",
                {"type": root.name, "kind": root.kind.value},
            )

        leaves: list[str] = []
        trunks: list[str] = []
        for field_def in root.fields:
            sub_type = self.schema.resolve(field_def.type)
            if sub_type.name in ctx.visited:
                continue

            if not field_def.args:
                sub_queries = self.complete(ctx.next(sub_type.name, field_def.name), sub_type)
                if not sub_queries:
                    leaves.append(field_def.name)
                    continue
                trunks.extend(f"{field_def.name}/{sub}" for sub in sub_queries)
                continue

            # only the first argument is enumerated
            arg_name = field_def.args[0].name
            values = self.list_arguments(ctx.query + (field_def.name,), arg_name)
            logger.debug(
                "expanding %s/%s(%s) with %d value(s)",
                "/".join(ctx.query), field_def.name, arg_name, len(values),
            )
            for value in values:
                # a value with nothing selectable below it is not offered
                sub_queries = self.complete(ctx.next(sub_type.name, field_def.name, value), sub_type)
                trunks.extend(f"{field_def.name}/{value}/{sub}" for sub in sub_queries)

        if ctx.complete_leaves:
            queries = [",".join(names) for names in full_permutation(leaves)]
        else:
            queries = leaves
        return queries + trunks
