"""CLI entrypoint for the paid-service orchestrator."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from collections.abc import Sequence
from typing import Any

from pydantic import ValidationError as SettingsValidationError

from paid_service_orchestrator import __version__
from paid_service_orchestrator.orchestrator.catalog.client import HttpCatalogClient
from paid_service_orchestrator.orchestrator.config import OrchestratorSettings
from paid_service_orchestrator.orchestrator.errors import OrchestratorError, ValidationError
from paid_service_orchestrator.orchestrator.lnd.client import LndRestClient
from paid_service_orchestrator.orchestrator.logging import configure_logging
from paid_service_orchestrator.orchestrator.paid_services.prompt import ConsolePrompt
from paid_service_orchestrator.orchestrator.paid_services.use_paid_service import (
    is_public_key,
    use_paid_service,
)
from paid_service_orchestrator.orchestrator.workflow import TaskGraphExecutor

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="paid-services",
        description="Discover and use paid services offered by Lightning nodes",
    )
    parser.add_argument(
        "--version", action="version", version=f"paid-service-orchestrator {__version__}"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    use_service = subparsers.add_parser(
        "use-service",
        help="Choose a service on a node, send a request and pay any paywall",
    )
    use_service.add_argument(
        "--node",
        required=True,
        help="Public key of the node offering services (66 hex characters)",
    )
    use_service.add_argument(
        "--network",
        default=None,
        help="Network name (defaults to PAID_SERVICES_NETWORK)",
    )

    list_services = subparsers.add_parser(
        "list-services", help="List the services offered by a node"
    )
    list_services.add_argument(
        "--node",
        required=True,
        help="Public key of the node offering services (66 hex characters)",
    )
    list_services.add_argument(
        "--network",
        default=None,
        help="Network name (defaults to PAID_SERVICES_NETWORK)",
    )

    return parser


def _print_json(value: Any) -> None:
    print(json.dumps(value, indent=2, ensure_ascii=False, default=str))


async def _use_service(settings: OrchestratorSettings, *, node: str, network: str) -> int:
    lnd = LndRestClient(
        base_url=settings.lnd_rest_url,
        macaroon=settings.lnd_macaroon,
        cert_path=settings.lnd_cert_path,
    )
    catalog = HttpCatalogClient(base_url=settings.catalog_base_url)
    try:
        response = await use_paid_service(
            prompt=ConsolePrompt(),
            lnd=lnd,
            catalog=catalog,
            logger=logging.getLogger("paid_service_orchestrator.paid_services"),
            network=network,
            node=node,
            executor=TaskGraphExecutor(max_concurrency=settings.max_concurrency),
        )
    finally:
        lnd.close()
        catalog.close()

    _print_json(response)
    return 0


async def _list_services(settings: OrchestratorSettings, *, node: str, network: str) -> int:
    if not is_public_key(node):
        raise ValidationError("ExpectedNodePublicKeyToListServices")

    catalog = HttpCatalogClient(base_url=settings.catalog_base_url)
    try:
        services = await catalog.list_services(node=node, network=network)
    finally:
        catalog.close()

    for service in sorted(services, key=lambda s: s.name):
        print(f"{service.name}\t{service.description}")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = OrchestratorSettings()
    except SettingsValidationError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 2

    configure_logging(settings.log_level)
    network = args.network or settings.network

    try:
        if args.command == "use-service":
            return asyncio.run(_use_service(settings, node=args.node, network=network))

        if args.command == "list-services":
            return asyncio.run(_list_services(settings, node=args.node, network=network))

        logger.error("Unknown command", extra={"command": args.command})
        return 2

    except OrchestratorError as e:
        logger.warning(e.message, extra={"code": e.code, "details": e.details})
        print(json.dumps(list(e.as_pair())), file=sys.stderr)
        return 3

    except Exception:
        logger.exception("Command failed")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
