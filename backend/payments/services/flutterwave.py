from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests
from django.conf import settings

logger = logging.getLogger(__name__)


class GatewayError(Exception):
    """Raised when Flutterwave cannot be reached or answers with a non-2xx status."""

    def __init__(self, message: str, *, status_code: Optional[int] = None, payload: Any = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload


class FlutterwaveClient:
    """
    Thin wrapper over the Flutterwave v3 REST endpoints used by the checkout flow.

    Both calls return the decoded JSON body on a 2xx reply and raise
    ``GatewayError`` otherwise; interpreting the body is left to the caller.
    """

    def __init__(
        self,
        *,
        secret_key: str,
        base_url: str = "https://api.flutterwave.com",
        timeout: float = 15.0,
        session: Optional[requests.Session] = None,
    ):
        self.secret_key = secret_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    @classmethod
    def from_settings(cls, session: Optional[requests.Session] = None) -> "FlutterwaveClient":
        if not settings.FLUTTERWAVE_SECRET_KEY:
            raise RuntimeError("FLUTTERWAVE_SECRET_KEY is not configured.")
        return cls(
            secret_key=settings.FLUTTERWAVE_SECRET_KEY,
            base_url=settings.FLUTTERWAVE_BASE_URL,
            timeout=settings.FLUTTERWAVE_TIMEOUT,
            session=session,
        )

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.secret_key}",
            "Content-Type": "application/json",
        }

    def _request(self, method: str, path: str, **kwargs) -> Dict[str, Any]:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(
                method,
                url,
                headers=self._headers(),
                timeout=self.timeout,
                **kwargs,
            )
        except requests.RequestException as exc:
            logger.exception("Flutterwave request %s %s failed: %s", method, path, exc)
            raise GatewayError("Payment gateway unavailable") from exc

        try:
            body = response.json()
        except ValueError:
            body = {}

        if not response.ok:
            message = body.get("message") if isinstance(body, dict) else None
            logger.warning(
                "Flutterwave %s %s returned %s: %s",
                method,
                path,
                response.status_code,
                message or response.text[:500],
            )
            raise GatewayError(
                message or "Payment gateway error",
                status_code=response.status_code,
                payload=body,
            )
        return body if isinstance(body, dict) else {}

    def charge(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("POST", "/v3/charges", json=payload)

    def verify(self, *, tx_ref: Optional[str] = None, transaction_id: Optional[str] = None) -> Dict[str, Any]:
        if transaction_id:
            return self._request("GET", f"/v3/transactions/{transaction_id}/verify")
        if tx_ref:
            return self._request(
                "GET",
                "/v3/transactions/verify_by_reference",
                params={"tx_ref": tx_ref},
            )
        raise ValueError("A transaction reference or id is required.")
