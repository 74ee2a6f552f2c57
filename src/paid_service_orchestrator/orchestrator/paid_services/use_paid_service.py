"""Use a paid service offered by a remote node.

The workflow is a task graph: list services, choose one, fetch its schema,
collect arguments, send the request, record the response, then optionally
confirm and pay a paywall. Tasks that have nothing to do return `ABSENT`.
"""

from __future__ import annotations

import logging
import re
from decimal import Decimal
from typing import Any

from paid_service_orchestrator.orchestrator.errors import ServiceNotFound, ValidationError
from paid_service_orchestrator.orchestrator.paid_services.capabilities import (
    CatalogClient,
    PaymentClient,
    Prompt,
)
from paid_service_orchestrator.orchestrator.paid_services.models import (
    PaymentResult,
    Question,
    ServiceSchema,
    ServiceSummary,
)
from paid_service_orchestrator.orchestrator.paid_services.prompt import confirm_service_use
from paid_service_orchestrator.orchestrator.workflow import ABSENT, Task, TaskGraphExecutor
from paid_service_orchestrator.orchestrator.workflow.tasks import TaskInputs

# Routing fee ceiling for paywall payments, in base units. Not caller-configurable.
DEFAULT_MAX_FEE = 1337

_PUBLIC_KEY = re.compile(r"^[0-9A-F]{66}$", re.IGNORECASE)
_BASE_UNITS_PER_COIN = Decimal(100_000_000)


def is_public_key(value: object) -> bool:
    return isinstance(value, str) and _PUBLIC_KEY.fullmatch(value) is not None


def big_unit(amount: int) -> str:
    """Format base units as coin units, e.g. `1000 -> "0.00001000"`."""

    return f"{Decimal(amount) / _BASE_UNITS_PER_COIN:.8f}"


def redact(response: dict[str, Any]) -> dict[str, Any]:
    """Drop undefined (None) attributes from a service response."""

    return {key: value for key, value in response.items() if value is not None}


def validate_paid_service_inputs(
    *,
    prompt: Prompt | None,
    lnd: PaymentClient | None,
    catalog: CatalogClient | None,
    logger: logging.Logger | None,
    network: str | None,
    node: str | None,
) -> None:
    """Check top-level arguments before any task starts.

    Raises:
        ValidationError: On the first missing or malformed argument.
    """
    if not prompt:
        raise ValidationError("ExpectedPromptToUsePaidService")

    if not lnd:
        raise ValidationError("ExpectedLndToUsePaidService")

    if not catalog:
        raise ValidationError("ExpectedCatalogClientToUsePaidService")

    if not logger:
        raise ValidationError("ExpectedLoggerToUsePaidService")

    if not network:
        raise ValidationError("ExpectedNetworkNameToUsePaidService")

    if not is_public_key(node):
        raise ValidationError("ExpectedNodePublicKeyToUsePaidService")


def build_paid_service_tasks(
    *,
    prompt: Prompt,
    lnd: PaymentClient,
    catalog: CatalogClient,
    logger: logging.Logger,
    network: str,
    node: str,
) -> dict[str, Task]:
    """Build the task graph for a single paid-service interaction."""

    # Get the services list for the node
    async def get_services(_: TaskInputs) -> list[ServiceSummary]:
        return await catalog.list_services(node=node, network=network)

    # Select a service from the available services
    async def choose_service(inputs: TaskInputs) -> dict[str, Any]:
        services: list[ServiceSummary] = inputs["get_services"]
        if not services:
            raise ServiceNotFound("ExpectedServicesToChooseFrom")

        return await prompt.ask(
            [
                Question(
                    type="list",
                    name="name",
                    message="Choose service:",
                    choices=sorted(service.name for service in services),
                )
            ]
        )

    # Get details for the selected service
    async def get_service(inputs: TaskInputs) -> ServiceSchema:
        named = inputs["choose_service"].get("name")
        known = {service.name for service in inputs["get_services"]}
        if named not in known:
            raise ServiceNotFound("ExpectedKnownServiceName", details={"name": named})

        return await catalog.get_service_schema(node=node, network=network, named=named)

    # Confirm use of the service and fill in any required arguments
    async def confirm_service(inputs: TaskInputs) -> dict[str, Any]:
        schema: ServiceSchema = inputs["get_service"]
        return await confirm_service_use(
            prompt=prompt, description=schema.description, fields=schema.fields
        )

    async def send_request(inputs: TaskInputs) -> dict[str, Any]:
        return await catalog.make_service_request(
            node=node,
            network=network,
            id=inputs["get_service"].id,
            arguments=inputs["confirm_service"].get("arguments") or {},
        )

    # Log the redacted service response
    async def result(inputs: TaskInputs) -> dict[str, Any]:
        response = redact(inputs["send_request"])
        logger.info("Service response", extra={"service_response": response})
        return response

    async def confirm_payment(inputs: TaskInputs) -> Any:
        response = inputs["result"]
        if not response.get("paywall"):
            return ABSENT

        decoded = await lnd.decode_payment_request(request=response["paywall"])

        return await prompt.ask(
            [
                Question(
                    type="confirm",
                    name="confirm",
                    message=response.get("text") or "Confirm?",
                    prefix=f"[Pay {big_unit(decoded.amount)}]",
                )
            ]
        )

    async def pay(inputs: TaskInputs) -> Any:
        response = inputs["result"]
        if not response.get("paywall"):
            return ABSENT

        confirmation = inputs["confirm_payment"]
        if confirmation is ABSENT or not confirmation.get("confirm"):
            return ABSENT

        return await lnd.pay(request=response["paywall"], max_fee=DEFAULT_MAX_FEE)

    async def paid_total(inputs: TaskInputs) -> Any:
        payment = inputs["pay"]
        if payment is ABSENT:
            return ABSENT

        paid: PaymentResult = payment
        logger.info(
            "Paywall paid", extra={"success": {"paid": big_unit(paid.amount + paid.fee)}}
        )
        return ABSENT

    return {
        "get_services": Task(run=get_services),
        "choose_service": Task(run=choose_service, depends_on=("get_services",)),
        "get_service": Task(run=get_service, depends_on=("get_services", "choose_service")),
        "confirm_service": Task(run=confirm_service, depends_on=("get_service",)),
        "send_request": Task(run=send_request, depends_on=("confirm_service", "get_service")),
        "result": Task(run=result, depends_on=("send_request",)),
        "confirm_payment": Task(run=confirm_payment, depends_on=("result",)),
        "pay": Task(run=pay, depends_on=("confirm_payment", "result")),
        "paid_total": Task(run=paid_total, depends_on=("pay",)),
    }


async def use_paid_service(
    *,
    prompt: Prompt | None,
    lnd: PaymentClient | None,
    catalog: CatalogClient | None,
    logger: logging.Logger | None,
    network: str | None,
    node: str | None,
    executor: TaskGraphExecutor | None = None,
) -> dict[str, Any]:
    """Use a paid service on `node`.

    Args:
        prompt: Interactive prompt used to choose a service and confirm payment.
        lnd: Authenticated payment client.
        catalog: Service directory client.
        logger: Logger receiving the service response and paid total.
        network: Network name, e.g. "btc".
        node: Remote node public key (66 hex characters).
        executor: Executor to run the graph with. Defaults to a sequential one.

    Returns:
        The redacted service response. An unpaid paywall stays in the response.

    Raises:
        ValidationError: If an argument is missing or malformed. Raised before
            any collaborator is called.
        OrchestratorError: The first failure raised by a collaborator.
    """
    validate_paid_service_inputs(
        prompt=prompt, lnd=lnd, catalog=catalog, logger=logger, network=network, node=node
    )
    assert prompt is not None and lnd is not None and catalog is not None
    assert logger is not None and network is not None and node is not None

    tasks = build_paid_service_tasks(
        prompt=prompt, lnd=lnd, catalog=catalog, logger=logger, network=network, node=node
    )

    context = await (executor or TaskGraphExecutor(max_concurrency=1)).execute(tasks)
    response: dict[str, Any] = context["result"]
    return response
