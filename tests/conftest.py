"""Test configuration and fixtures."""

from __future__ import annotations

import logging
from typing import Any
from unittest.mock import Mock

import pytest

from paid_service_orchestrator.orchestrator.paid_services.capabilities import (
    CatalogClient,
    PaymentClient,
    Prompt,
)
from paid_service_orchestrator.orchestrator.paid_services.models import (
    DecodedPaymentRequest,
    PaymentResult,
    Question,
    ServiceSchema,
    ServiceSummary,
)

NODE = "A1B2" + "0" * 62


class ScriptedPrompt(Prompt):
    """Answer questions from a script keyed by question name."""

    def __init__(self, answers: dict[str, Any] | None = None) -> None:
        self.answers = dict(answers or {})
        self.asked: list[list[Question]] = []

    async def ask(self, questions: list[Question]) -> dict[str, Any]:
        self.asked.append(list(questions))
        return {q.name: self.answers[q.name] for q in questions if q.name in self.answers}


@pytest.fixture
def node() -> str:
    """Provide a valid 66 hex character node identity."""
    return NODE


@pytest.fixture
def prompt() -> ScriptedPrompt:
    """Provide a prompt choosing "alpha" and confirming payment."""
    return ScriptedPrompt({"name": "alpha", "confirm": True})


@pytest.fixture
def catalog() -> Mock:
    """Provide a mocked catalog with two services and a plain text response."""
    mock_catalog = Mock(spec=CatalogClient)
    mock_catalog.list_services.return_value = [
        ServiceSummary(name="beta", description="second"),
        ServiceSummary(name="alpha", description="first"),
    ]
    mock_catalog.get_service_schema.return_value = ServiceSchema(id="1", description="d")
    mock_catalog.make_service_request.return_value = {"text": "ok"}
    return mock_catalog


@pytest.fixture
def lnd() -> Mock:
    """Provide a mocked payment client."""
    mock_lnd = Mock(spec=PaymentClient)
    mock_lnd.decode_payment_request.return_value = DecodedPaymentRequest(amount=1000)
    mock_lnd.pay.return_value = PaymentResult(amount=1000, fee=1)
    return mock_lnd


@pytest.fixture
def service_logger() -> Mock:
    """Provide a mocked logger capturing structured records."""
    return Mock(spec=logging.Logger)


@pytest.fixture
def make_prompt() -> type[ScriptedPrompt]:
    """Provide the scripted prompt class for tests needing custom answers."""
    return ScriptedPrompt
