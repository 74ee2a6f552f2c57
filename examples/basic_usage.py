#!/usr/bin/env python3
"""Programmatic paid-service example.

This demonstrates using the orchestrator components directly:

* load settings from `.env`
* build the paid-service task graph
* run it with an explicit executor and inspect every task's result

The node is passed as an argument (not read from `.env`).
"""

from __future__ import annotations

import argparse
import asyncio
import logging
from typing import Sequence

from paid_service_orchestrator.orchestrator.catalog.client import HttpCatalogClient
from paid_service_orchestrator.orchestrator.config import OrchestratorSettings
from paid_service_orchestrator.orchestrator.errors import OrchestratorError
from paid_service_orchestrator.orchestrator.lnd.client import LndRestClient
from paid_service_orchestrator.orchestrator.logging import configure_logging
from paid_service_orchestrator.orchestrator.paid_services import build_paid_service_tasks
from paid_service_orchestrator.orchestrator.paid_services.prompt import ConsolePrompt
from paid_service_orchestrator.orchestrator.workflow import TaskGraphExecutor, is_absent


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Use a paid service (programmatic example).")
    parser.add_argument("--node", required=True, help="Node public key (66 hex characters)")
    parser.add_argument("--network", default=None, help="Network name (defaults to settings)")
    return parser.parse_args(argv)


async def _run(settings: OrchestratorSettings, *, node: str, network: str) -> int:
    lnd = LndRestClient(
        base_url=settings.lnd_rest_url,
        macaroon=settings.lnd_macaroon,
        cert_path=settings.lnd_cert_path,
    )
    catalog = HttpCatalogClient(base_url=settings.catalog_base_url)

    tasks = build_paid_service_tasks(
        prompt=ConsolePrompt(),
        lnd=lnd,
        catalog=catalog,
        logger=logging.getLogger("example"),
        network=network,
        node=node,
    )

    try:
        context = await TaskGraphExecutor(max_concurrency=1).execute(tasks)
    except OrchestratorError as exc:
        print(f"Failed: {list(exc.as_pair())}")
        return 1
    finally:
        lnd.close()
        catalog.close()

    for name, value in context.items():
        print(f"{name}: {'(nothing)' if is_absent(value) else value}")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)

    settings = OrchestratorSettings()
    configure_logging(settings.log_level)

    return asyncio.run(_run(settings, node=args.node, network=args.network or settings.network))


if __name__ == "__main__":
    raise SystemExit(main())
