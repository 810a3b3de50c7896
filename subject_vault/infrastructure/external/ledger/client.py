"""HTTP client for the external erasure ledger.

POSTs one erasure event per call to {ledger_url}/erasures and returns the
ledger's receipt. All HTTP calls use httpx.AsyncClient so they do not block
the event loop.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

import httpx
from pydantic import SecretStr

from subject_vault.application.dtos.subject import LedgerReceipt
from subject_vault.domain.exceptions import LedgerNotificationException
from subject_vault.shared.telemetry.logging import get_logger
from subject_vault.shared.utils.datetime import ensure_utc, utc_now

logger = get_logger(__name__)


def _parse_receipt(subject_id: str, body: dict[str, Any]) -> LedgerReceipt:
    """Build a receipt from the ledger response body."""
    transaction_id = body.get("transaction_id") or body.get("tx_hash")
    if not transaction_id:
        raise LedgerNotificationException(
            subject_id, "ledger response has no transaction_id"
        )
    recorded_at_raw = body.get("recorded_at")
    try:
        recorded_at = (
            ensure_utc(datetime.fromisoformat(recorded_at_raw))
            if recorded_at_raw
            else utc_now()
        )
    except (TypeError, ValueError) as e:
        raise LedgerNotificationException(
            subject_id, f"ledger returned invalid recorded_at: {recorded_at_raw!r}"
        ) from e
    return LedgerReceipt(
        subject_id=subject_id,
        transaction_id=str(transaction_id),
        recorded_at=recorded_at,
        raw=body,
    )


class HttpErasureLedger:
    """Erasure ledger notifier over HTTP (Bearer token auth when configured)."""

    def __init__(
        self,
        base_url: str,
        *,
        api_token: SecretStr | None = None,
        timeout: float = 10.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._api_token = api_token
        self._owns_client = http_client is None
        self._http = http_client if http_client is not None else httpx.AsyncClient(timeout=timeout)

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self._api_token is not None and self._api_token.get_secret_value():
            headers["Authorization"] = f"Bearer {self._api_token.get_secret_value()}"
        return headers

    async def record_erasure(self, subject_id: str) -> LedgerReceipt:
        """Record an erasure event for subject_id.

        Raises:
            LedgerNotificationException: On transport errors, non-2xx status or an
                unusable response body.
        """
        payload = {"subject_id": subject_id, "erased_at": utc_now().isoformat()}
        try:
            resp = await self._http.post(
                f"{self._base_url}/erasures", json=payload, headers=self._headers()
            )
            resp.raise_for_status()
            body = resp.json() if resp.content else {}
        except httpx.HTTPStatusError as e:
            raise LedgerNotificationException(
                subject_id, f"ledger returned HTTP {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise LedgerNotificationException(subject_id, str(e) or type(e).__name__) from e
        except ValueError as e:
            raise LedgerNotificationException(subject_id, "ledger response is not JSON") from e
        if not isinstance(body, dict):
            raise LedgerNotificationException(subject_id, "ledger response is not an object")
        receipt = _parse_receipt(subject_id, body)
        logger.info(
            "Erasure recorded on ledger: subject_id=%s transaction_id=%s",
            subject_id,
            receipt.transaction_id,
        )
        return receipt

    async def aclose(self) -> None:
        """Close the underlying HTTP client when this notifier created it."""
        if self._owns_client:
            await self._http.aclose()
