"""LND REST client wrapper.

Keeps payment network calls out of workflow code and makes tests easy: the
HTTP session can be injected.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any
from urllib.parse import quote

import requests

from paid_service_orchestrator.orchestrator.errors import MalformedPaymentRequest, PaymentFailed
from paid_service_orchestrator.orchestrator.paid_services.capabilities import PaymentClient
from paid_service_orchestrator.orchestrator.paid_services.models import (
    DecodedPaymentRequest,
    PaymentResult,
)

logger = logging.getLogger(__name__)


def _int(value: object) -> int:
    # LND encodes 64-bit integers as JSON strings.
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip():
        return int(value)
    return 0


class LndRestClient(PaymentClient):
    """Small wrapper around the LND REST API for decoding and paying requests."""

    def __init__(
        self,
        *,
        base_url: str,
        macaroon: str,
        cert_path: Path | None = None,
        session: requests.Session | None = None,
    ) -> None:
        if not macaroon:
            raise ValueError("LND macaroon is required")

        self._base_url = base_url.rstrip("/")
        self._session = session or requests.Session()
        self._session.headers.update(
            {
                "Grpc-Metadata-macaroon": macaroon,
                "User-Agent": "paid-service-orchestrator",
            }
        )
        self._session.verify = str(cert_path) if cert_path is not None else True

    def close(self) -> None:
        self._session.close()

    def _url(self, path: str) -> str:
        return f"{self._base_url}/{path.lstrip('/')}"

    def decode_payment_request_sync(self, *, request: str) -> DecodedPaymentRequest:
        if not request:
            raise MalformedPaymentRequest("ExpectedPaymentRequestToDecode")

        try:
            resp = self._session.get(self._url(f"/v1/payreq/{quote(request, safe='')}"))
        except requests.RequestException as e:
            raise MalformedPaymentRequest(
                "UnexpectedErrorDecodingPaymentRequest", code=503, details={"error": str(e)}
            ) from e

        if not resp.ok:
            raise MalformedPaymentRequest(
                "FailedToDecodePaymentRequest", details={"status": resp.status_code}
            )

        data: dict[str, Any] = resp.json()
        return DecodedPaymentRequest(
            amount=_int(data.get("num_satoshis")),
            destination=data.get("destination") or None,
            description=data.get("description") or None,
        )

    def pay_sync(self, *, request: str, max_fee: int) -> PaymentResult:
        logger.info("Paying payment request", extra={"max_fee": max_fee})

        try:
            resp = self._session.post(
                self._url("/v1/channels/transactions"),
                json={"payment_request": request, "fee_limit": {"fixed": str(max_fee)}},
            )
        except requests.RequestException as e:
            raise PaymentFailed("UnexpectedErrorPayingRequest", details={"error": str(e)}) from e

        if not resp.ok:
            raise PaymentFailed("FailedToPayPaymentRequest", details={"status": resp.status_code})

        data: dict[str, Any] = resp.json()
        if data.get("payment_error"):
            raise PaymentFailed("PaymentRejected", details={"error": data["payment_error"]})

        route = data.get("payment_route") or {}
        fee = _int(route.get("total_fees"))
        if fee > max_fee:
            # The payment has already settled at this point.
            logger.warning(
                "Payment fee exceeded the requested maximum",
                extra={"fee": fee, "max_fee": max_fee},
            )

        result = PaymentResult(amount=_int(route.get("total_amt")) - fee, fee=fee)
        logger.info("Payment sent", extra={"amount": result.amount, "fee": result.fee})
        return result

    async def decode_payment_request(self, *, request: str) -> DecodedPaymentRequest:
        return await asyncio.to_thread(self.decode_payment_request_sync, request=request)

    async def pay(self, *, request: str, max_fee: int) -> PaymentResult:
        return await asyncio.to_thread(self.pay_sync, request=request, max_fee=max_fee)
