"""Console-script shim.

The CLI is implemented in `paid_service_orchestrator.orchestrator.main`.
"""

from __future__ import annotations

from paid_service_orchestrator.orchestrator.main import main

__all__ = ["main"]


if __name__ == "__main__":
    raise SystemExit(main())
