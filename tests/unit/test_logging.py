"""Unit tests for structured JSON logging."""

from __future__ import annotations

import io
import json
import logging
from collections.abc import Iterator

import pytest

from paid_service_orchestrator.orchestrator.logging import JsonFormatter, configure_logging
from paid_service_orchestrator.orchestrator.paid_services.models import PaymentResult


@pytest.fixture
def stream() -> Iterator[io.StringIO]:
    root = logging.getLogger()
    saved_level = root.level
    buffer = io.StringIO()
    configure_logging("debug", stream=buffer)
    yield buffer
    for handler in list(root.handlers):
        if isinstance(handler.formatter, JsonFormatter):
            root.removeHandler(handler)
    root.setLevel(saved_level)


def test_records_are_json_with_extra_fields(stream: io.StringIO) -> None:
    logging.getLogger("paid_service_orchestrator.test").info(
        "Service response", extra={"service_response": {"text": "ok"}}
    )

    payload = json.loads(stream.getvalue().splitlines()[-1])

    assert payload["level"] == "INFO"
    assert payload["logger"] == "paid_service_orchestrator.test"
    assert payload["message"] == "Service response"
    assert payload["extra"] == {"service_response": {"text": "ok"}}


def test_models_and_exceptions_are_serialized(stream: io.StringIO) -> None:
    log = logging.getLogger("paid_service_orchestrator.test")
    try:
        raise RuntimeError("boom")
    except RuntimeError:
        log.exception("Payment failed", extra={"payment": PaymentResult(amount=5)})

    payload = json.loads(stream.getvalue().splitlines()[0])

    assert payload["extra"]["payment"] == {"amount": 5, "fee": 0}
    assert "RuntimeError: boom" in payload["exception"]


def test_reconfiguring_does_not_duplicate_handlers(stream: io.StringIO) -> None:
    configure_logging("info", stream=stream)

    assert len(logging.getLogger().handlers) == 1
    assert logging.getLogger().level == logging.INFO
