"""Abstract collaborator interfaces used by paid-service tasks.

These allow pluggable backends (LND REST, an HTTP catalog, a console prompt,
test doubles) without the workflow knowing which one it talks to.
"""

from abc import ABC, abstractmethod
from typing import Any

from paid_service_orchestrator.orchestrator.paid_services.models import (
    DecodedPaymentRequest,
    PaymentResult,
    Question,
    ServiceSchema,
    ServiceSummary,
)


class Prompt(ABC):
    """Interactive prompting capability."""

    @abstractmethod
    async def ask(self, questions: list[Question]) -> dict[str, Any]:
        """Present questions and collect answers.

        Args:
            questions: Questions to present, in order.

        Returns:
            Answers keyed by question name. A missing key is a valid answer.
        """
        pass


class CatalogClient(ABC):
    """Directory of services offered by a remote node."""

    @abstractmethod
    async def list_services(self, *, node: str, network: str) -> list[ServiceSummary]:
        """List the services a node offers.

        Raises:
            CatalogUnavailable: If the directory cannot be reached.
        """
        pass

    @abstractmethod
    async def get_service_schema(self, *, node: str, network: str, named: str) -> ServiceSchema:
        """Describe a single service.

        Raises:
            ServiceNotFound: If the node does not offer `named`.
        """
        pass

    @abstractmethod
    async def make_service_request(
        self,
        *,
        node: str,
        network: str,
        id: str,  # noqa: A002 (service id)
        arguments: dict[str, Any],
    ) -> dict[str, Any]:
        """Send a request to a service.

        Returns:
            The raw response. It may carry `paywall` and `text` fields.

        Raises:
            ServiceRequestFailed: If the request is rejected or cannot be sent.
        """
        pass


class PaymentClient(ABC):
    """Authenticated payment network handle."""

    @abstractmethod
    async def decode_payment_request(self, *, request: str) -> DecodedPaymentRequest:
        """Decode a payment request.

        Raises:
            MalformedPaymentRequest: If the request cannot be decoded.
        """
        pass

    @abstractmethod
    async def pay(self, *, request: str, max_fee: int) -> PaymentResult:
        """Pay a payment request, spending at most `max_fee` in routing fees.

        Raises:
            PaymentFailed: If the payment does not complete.
        """
        pass
