"""Paid-service workflow and the collaborator interfaces it depends on."""

from paid_service_orchestrator.orchestrator.paid_services.capabilities import (
    CatalogClient,
    PaymentClient,
    Prompt,
)
from paid_service_orchestrator.orchestrator.paid_services.use_paid_service import (
    DEFAULT_MAX_FEE,
    build_paid_service_tasks,
    use_paid_service,
)

__all__ = [
    "DEFAULT_MAX_FEE",
    "CatalogClient",
    "PaymentClient",
    "Prompt",
    "build_paid_service_tasks",
    "use_paid_service",
]
