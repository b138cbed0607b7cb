"""Shared test fixtures for chaosctl tests.

The fake service answers real GraphQL requests (introspection included)
from a schema written in SDL, so the client is exercised against the same
wire shapes a live control plane returns.
"""

from __future__ import annotations

from typing import Any
from unittest.mock import patch

import pytest
from graphql import build_schema, graphql_sync, introspection_from_schema

from chaosctl.config import CtrlConfig
from chaosctl.ctrl.client import CtrlClient
from chaosctl.ctrl.schema import Schema

CONTROL_PLANE_SDL = """
type Query {
  namespace(ns: String): [Namespace!]
}

type Namespace {
  ns: String!
  pods: [Pod!]!
  pod(name: String!): [Pod!]!
}

type Pod {
  name: String!
  phase: PodPhase
  ready: Boolean!
}

enum PodPhase {
  Running
  Pending
}
"""


def schema_from_sdl(sdl: str) -> Schema:
    """Build our schema model from SDL through a real introspection result."""
    return Schema.from_introspection(introspection_from_schema(build_schema(sdl))["__schema"])


def make_namespace(ns: str, pods: list[dict[str, Any]]) -> dict[str, Any]:
    """A namespace object as resolved by the fake service."""

    def pod(_info: Any, name: str) -> list[dict[str, Any]]:
        return [p for p in pods if p["name"] == name]

    return {"ns": ns, "pods": pods, "pod": pod}


class FakeResponse:
    def __init__(self, body: Any = None, status_code: int = 200, text: str | None = None):
        self._body = body
        self.status_code = status_code
        self.text = text if text is not None else str(body)

    def json(self) -> Any:
        if isinstance(self._body, Exception):
            raise self._body
        return self._body


class FakeGraphQLSession:
    """Stands in for ``requests.Session``, executing queries with graphql-core."""

    def __init__(self, sdl: str, namespaces: dict[str, dict[str, Any]]):
        self.schema = build_schema(sdl)
        self.namespaces = namespaces
        self.headers: dict[str, str] = {}
        self.requests: list[dict[str, Any]] = []
        self.next_response: FakeResponse | Exception | None = None

    def _resolve_namespace(self, _info: Any, ns: str | None = None) -> list[dict[str, Any]]:
        if ns is None:
            return list(self.namespaces.values())
        return [n for n in self.namespaces.values() if n["ns"] == ns]

    def post(self, url: str, json: dict[str, Any], timeout: float | None = None) -> FakeResponse:
        self.requests.append(json)
        if self.next_response is not None:
            response, self.next_response = self.next_response, None
            if isinstance(response, Exception):
                raise response
            return response

        result = graphql_sync(
            self.schema,
            json["query"],
            root_value={"namespace": self._resolve_namespace},
            variable_values=json.get("variables"),
        )
        body: dict[str, Any] = {"data": result.data}
        if result.errors:
            body["errors"] = [{"message": e.message} for e in result.errors]
        return FakeResponse(body)


@pytest.fixture
def namespaces() -> dict[str, dict[str, Any]]:
    return {
        "ns1": make_namespace(
            "ns1",
            [
                {"name": "p1", "phase": "Running", "ready": True},
                {"name": "p2", "phase": "Pending", "ready": False},
            ],
        ),
        "ns2": make_namespace("ns2", [{"name": "web-0", "phase": "Running", "ready": True}]),
    }


@pytest.fixture
def fake_session(namespaces: dict[str, dict[str, Any]]) -> FakeGraphQLSession:
    return FakeGraphQLSession(CONTROL_PLANE_SDL, namespaces)


@pytest.fixture
def client(fake_session: FakeGraphQLSession) -> CtrlClient:
    with patch("chaosctl.ctrl.client.requests.Session", return_value=fake_session):
        return CtrlClient(CtrlConfig(url="http://chaos.test/api/graphql"))


@pytest.fixture
def schema() -> Schema:
    return schema_from_sdl(CONTROL_PLANE_SDL)


@pytest.fixture
def build_model():
    """Build a schema model from an SDL string."""
    return schema_from_sdl
