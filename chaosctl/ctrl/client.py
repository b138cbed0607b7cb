"""Client for the control-plane GraphQL service, with path completion on top.

The schema is introspected once when the client is created; every later
call (completion, argument listing, path queries) only reads it.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

import requests
from graphql import get_introspection_query

from chaosctl.config import CtrlConfig
from chaosctl.ctrl.completion import NAMESPACE_TYPE, AutoCompleteContext, QueryCompleter
from chaosctl.ctrl.errors import CtrlError, ExecutionError, SchemaError
from chaosctl.ctrl.query import RequestDescriptor, Variables, build_request, extract_leaf_values
from chaosctl.ctrl.schema import Schema
from chaosctl.ctrl.types import SchemaType
from chaosctl.helpers.naming import pluralize

logger = logging.getLogger(__name__)


class CtrlClient:
    """A session against one query service URL.

    Holds no per-request state: a failed call leaves the client usable for
    the next one.
    """

    def __init__(self, config: CtrlConfig | None = None):
        self.config = config or CtrlConfig.from_env()
        self._session = requests.Session()
        self._session.headers.update(self.config.headers)
        self.schema = self._introspect()

    @property
    def session(self) -> requests.Session:
        return self._session

    def get_query_type(self) -> SchemaType:
        return self.schema.query_type()

    # -- Transport -------------------------------------------------------------

    def _introspect(self) -> Schema:
        logger.debug("introspecting schema at %s", self.config.url)
        data = self._post({"query": get_introspection_query(descriptions=False)})
        raw_schema = data.get("__schema")
        if not isinstance(raw_schema, dict):
            raise SchemaError("introspection response has no __schema object", {"url": self.config.url})
        schema = Schema.from_introspection(raw_schema)
        logger.debug("loaded %d types, query root %s", len(schema.types), schema.query_type_name)
        return schema

    def execute(self, request: RequestDescriptor) -> dict[str, Any]:
        """Run a built request and return its ``data`` object.

        All or nothing: any reported error fails the whole call, even when
        partial data came back with it.
        """
        variables = request.variables.gen_map()
        logger.debug("executing query %s with variables %s", request.text, variables)
        return self._post({"query": request.text, "variables": variables})

    def _post(self, payload: dict[str, Any]) -> dict[str, Any]:
        url = self.config.url
        try:
            resp = self._session.post(url, json=payload, timeout=self.config.timeout)
        except requests.RequestException as e:
            raise ExecutionError(f"request to {url} failed: {e}", {"url": url}) from e

        if resp.status_code >= 400:
            raise ExecutionError(
                f"{url} returned HTTP {resp.status_code}: {resp.text[:200]}",
                {"url": url, "status": resp.status_code},
            )

        try:
            body = resp.json()
        except ValueError as e:
            raise ExecutionError(f"{url} returned a non-JSON response", {"url": url}) from e
        if not isinstance(body, dict):
            raise ExecutionError(f"{url} returned an unexpected response body", {"url": url})

        errors = body.get("errors")
        if errors:
            if not isinstance(errors, list):
                errors = [errors]
            messages = "; ".join(
                str(err.get("message", err)) if isinstance(err, dict) else str(err) for err in errors
            )
            raise ExecutionError(f"query failed: {messages}", {"url": url, "errors": errors})

        data = body.get("data")
        if not isinstance(data, dict):
            raise ExecutionError("response carries no data", {"url": url})
        return data

    # -- Queries ---------------------------------------------------------------

    def query_path(self, path: Sequence[str]) -> dict[str, Any]:
        """Select the field chain described by ``path`` and return the raw data.

        ``["namespace", "ns1", "pods", "name"]`` runs
        ``{ namespace(ns: "ns1") { pods { name } } }``.
        """
        query = self.schema.parse_query(path, self.get_query_type())
        return self.execute(build_request(query, Variables()))

    def list_arguments(self, path: Sequence[str], argument_name: str, prefix: str = "") -> list[str]:
        """List the distinct live values of ``argument_name`` for a resource.

        ``path`` ends with the resource name (singular or plural), e.g.
        ``["namespace", "ns1", "pod"]``. Values are kept in the order the
        service returns them and filtered by ``prefix``.
        """
        if not path:
            raise SchemaError("cannot list arguments of an empty path", {"field": argument_name})

        segments = list(path)
        segments[-1] = pluralize(segments[-1])
        segments.append(argument_name)

        try:
            query = self.schema.parse_query(segments, self.get_query_type())
            data = self.execute(build_request(query, Variables()))
            values = extract_leaf_values(data, query, prefix)
        except CtrlError as e:
            raise type(e)(
                f"cannot list {argument_name!r} of {'/'.join(path)}: {e}",
                {**e.details, "path": list(path), "field": argument_name},
            ) from e

        logger.debug("listed %d value(s) of %s at %s", len(values), argument_name, "/".join(segments))
        return list(dict.fromkeys(values))

    # -- Completion ------------------------------------------------------------

    def complete_query(self, namespace: str, complete_leaves: bool = False) -> list[str]:
        """Every path that can follow ``namespace/<namespace>``.

        Paths are joined with ``/``; with ``complete_leaves`` sibling leaves
        are also offered as comma-joined combinations. Issues one live query
        per argument-taking field reached.
        """
        root = self.schema.get_type(NAMESPACE_TYPE)
        completer = QueryCompleter(self.schema, self.list_arguments)
        ctx = AutoCompleteContext.root(namespace, self.config.completion_depth, complete_leaves)
        return completer.complete(ctx, root)
