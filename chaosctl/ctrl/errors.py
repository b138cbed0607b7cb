"""Errors raised by the query-completion engine."""

from __future__ import annotations

from typing import Any


class CtrlError(Exception):
    """Base class for every failure surfaced by the control-plane client."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.details: dict[str, Any] = details or {}


class SchemaError(CtrlError):
    """Unknown type or field, malformed type reference, or unparseable path."""


class ExecutionError(CtrlError):
    """Transport or service-side failure while running a query."""


class ResponseShapeError(CtrlError):
    """A decoded response does not match the shape of the query that produced it."""


class UnsupportedTypeError(CtrlError):
    """Completion was attempted directly on a LIST or NON_NULL wrapper type."""
