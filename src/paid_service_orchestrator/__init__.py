"""Paid Service Orchestrator.

Provides:
- a dependency-driven async task graph executor
- a paid-service workflow built on it (choose, request, pay)
- configuration loaded from `.env` and structured logging
"""

__version__ = "0.1.0"

from paid_service_orchestrator.orchestrator.config import OrchestratorSettings

__all__ = ["__version__", "OrchestratorSettings"]
