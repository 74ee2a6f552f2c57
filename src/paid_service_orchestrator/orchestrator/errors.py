"""Structured errors raised by the orchestrator and its collaborators.

Every error carries a numeric class and a stable machine-readable message so
callers can branch on `code`/`message` instead of parsing free-form text.
"""

from __future__ import annotations

from typing import Any


class OrchestratorError(Exception):
    """Base error: a `(code, message)` pair plus optional details."""

    default_code: int = 500

    def __init__(
        self,
        message: str,
        *,
        code: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code if code is not None else self.default_code
        self.message = message
        self.details: dict[str, Any] = dict(details or {})

    def as_pair(self) -> tuple[int, str]:
        """Return the `(code, message)` pair surfaced to callers."""

        return (self.code, self.message)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.code}, {self.message!r})"


class GraphDefinitionError(OrchestratorError):
    """The task graph is malformed (unknown dependency, cycle, bad definition)."""

    default_code = 400


class ValidationError(OrchestratorError):
    """Top-level input to a workflow is missing or malformed."""

    default_code = 400


class CatalogUnavailable(OrchestratorError):
    default_code = 503


class ServiceNotFound(OrchestratorError):
    default_code = 404


class ServiceRequestFailed(OrchestratorError):
    default_code = 503


class MalformedPaymentRequest(OrchestratorError):
    default_code = 400


class PaymentFailed(OrchestratorError):
    """Payment did not complete (routing failure, fee above ceiling, ...)."""

    default_code = 503
