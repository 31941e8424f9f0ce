"""Razorpay gateway: order creation and payment signature checks."""

from __future__ import annotations

import hashlib
import hmac
import logging
import os

import requests
from dotenv import load_dotenv

from resume_builder.errors import ExternalServiceError, PaymentConfigurationError

load_dotenv()

logger = logging.getLogger(__name__)

RAZORPAY_ORDERS_URL = "https://api.razorpay.com/v1/orders"


class RazorpayGateway:
    """Thin client for the Razorpay Orders API.

    Credentials default to ``RAZORPAY_KEY_ID`` and ``RAZORPAY_KEY_SECRET``.
    A gateway without credentials can be constructed; using it raises
    :class:`PaymentConfigurationError`.
    """

    def __init__(
        self,
        key_id: str | None = None,
        key_secret: str | None = None,
        *,
        timeout: float = 10.0,
        session: requests.Session | None = None,
    ) -> None:
        self.key_id = key_id if key_id is not None else os.environ.get("RAZORPAY_KEY_ID", "")
        self.key_secret = (
            key_secret if key_secret is not None else os.environ.get("RAZORPAY_KEY_SECRET", "")
        )
        self.timeout = timeout
        self.session = session or requests.Session()

    @property
    def configured(self) -> bool:
        return bool(self.key_id and self.key_secret)

    def _require_configured(self) -> None:
        if not self.configured:
            raise PaymentConfigurationError("Payment gateway not configured")

    def create_order(self, amount: int, currency: str, receipt: str) -> dict:
        """Create a gateway order and return its JSON body (``id``, ``amount``, ...).

        Raises:
            PaymentConfigurationError: If credentials are missing.
            ExternalServiceError: If the gateway is unreachable or rejects the order.
        """
        self._require_configured()
        try:
            response = self.session.post(
                RAZORPAY_ORDERS_URL,
                json={"amount": amount, "currency": currency, "receipt": receipt},
                auth=(self.key_id, self.key_secret),
                timeout=self.timeout,
            )
            response.raise_for_status()
            order = response.json()
        except (requests.RequestException, ValueError) as e:
            logger.exception("Razorpay order creation failed for receipt %s", receipt)
            raise ExternalServiceError(f"Failed to create payment order: {e}") from e

        if not isinstance(order, dict) or not order.get("id"):
            raise ExternalServiceError("Payment gateway returned an order without an id")
        return order

    def expected_signature(self, order_id: str, payment_id: str) -> str:
        self._require_configured()
        message = f"{order_id}|{payment_id}".encode()
        return hmac.new(self.key_secret.encode(), message, hashlib.sha256).hexdigest()

    def verify_signature(self, order_id: str, payment_id: str, signature: str) -> bool:
        """Check *signature* against HMAC-SHA256 of ``order_id|payment_id``."""
        expected = self.expected_signature(order_id, payment_id)
        return hmac.compare_digest(expected, signature or "")
