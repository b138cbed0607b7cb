"""Tests for the CLI commands."""

from __future__ import annotations

import json
from collections.abc import Iterator
from unittest.mock import patch

import pytest
import requests
from click.testing import CliRunner

from chaosctl.main import cli
from tests.conftest import FakeGraphQLSession

URL = "http://chaos.test/api/graphql"


@pytest.fixture
def runner(fake_session: FakeGraphQLSession) -> Iterator[CliRunner]:
    with patch("chaosctl.ctrl.client.requests.Session", return_value=fake_session):
        yield CliRunner()


class TestComplete:
    def test_prints_one_completion_per_line(self, runner: CliRunner):
        result = runner.invoke(cli, ["--url", URL, "complete", "ns1"])
        assert result.exit_code == 0, result.output
        lines = result.output.splitlines()
        assert lines[0] == "ns"
        assert "pod/p2/ready" in lines

    def test_leaves_flag(self, runner: CliRunner):
        result = runner.invoke(cli, ["--url", URL, "complete", "ns1", "--leaves"])
        assert result.exit_code == 0, result.output
        assert "pods/name,ready" in result.output.splitlines()

    def test_service_failure(self, runner: CliRunner, fake_session: FakeGraphQLSession):
        # introspection succeeds, the first live listing fails
        original_post = fake_session.post
        calls = {"n": 0}

        def flaky_post(url, json, timeout=None):
            calls["n"] += 1
            if calls["n"] == 2:
                raise requests.ConnectionError("reset")
            return original_post(url, json=json, timeout=timeout)

        fake_session.post = flaky_post  # type: ignore[method-assign]
        result = runner.invoke(cli, ["--url", URL, "complete", "ns1"])
        assert result.exit_code == 1
        assert "Error" in result.output


class TestArgs:
    def test_lists_values(self, runner: CliRunner):
        result = runner.invoke(cli, ["--url", URL, "args", "namespace/ns1/pod", "name"])
        assert result.exit_code == 0, result.output
        assert result.output.splitlines() == ["p1", "p2"]

    def test_prefix(self, runner: CliRunner):
        result = runner.invoke(cli, ["--url", URL, "args", "namespace/ns1/pods", "name", "--prefix", "p1"])
        assert result.output.splitlines() == ["p1"]

    def test_unknown_field(self, runner: CliRunner):
        result = runner.invoke(cli, ["--url", URL, "args", "namespace/ns1/pods", "uid"])
        assert result.exit_code == 1
        assert "uid" in result.output


class TestQuery:
    def test_prints_json(self, runner: CliRunner):
        result = runner.invoke(cli, ["--url", URL, "query", "namespace/ns2/pods/name"])
        assert result.exit_code == 0, result.output
        assert json.loads(result.output) == {"namespace": [{"pods": [{"name": "web-0"}]}]}


class TestTypes:
    def test_lists_types(self, runner: CliRunner):
        result = runner.invoke(cli, ["--url", URL, "types"])
        assert result.exit_code == 0, result.output
        assert "Namespace" in result.output
        assert "__Schema" not in result.output

    def test_type_fields(self, runner: CliRunner):
        result = runner.invoke(cli, ["--url", URL, "types", "Namespace"])
        assert result.exit_code == 0, result.output
        assert "pods" in result.output
        assert "name: String!" in result.output

    def test_unknown_type(self, runner: CliRunner):
        result = runner.invoke(cli, ["--url", URL, "types", "Ghost"])
        assert result.exit_code == 1


class TestConnection:
    def test_unreachable_service(self, runner: CliRunner, fake_session: FakeGraphQLSession):
        fake_session.next_response = requests.ConnectionError("refused")
        result = runner.invoke(cli, ["--url", URL, "complete", "ns1"])
        assert result.exit_code == 1
        assert "Error connecting" in result.output

    def test_invalid_timeout(self, runner: CliRunner):
        result = runner.invoke(cli, ["--url", URL, "--timeout", "0", "complete", "ns1"])
        assert result.exit_code == 1
        assert "Invalid configuration" in result.output
