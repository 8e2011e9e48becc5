import hashlib
import hmac
import logging

import razorpay
from razorpay.errors import BadRequestError, GatewayError, ServerError
import requests

from course_checkout.config import DEFAULT_TIMEOUT
from course_checkout.errors import ConfigurationError, UpstreamError, UpstreamTimeout

logger = logging.getLogger(__name__)

GATEWAY_ERRORS = (
    BadRequestError,
    GatewayError,
    ServerError,
    requests.RequestException,
    ValueError,
)


def compute_signature(secret: str, order_id: str, payment_id: str) -> str:
    """HMAC-SHA256 of ``"<order_id>|<payment_id>"``, hex encoded.

    This is the string Razorpay checkout signs on the client side, so the
    ``|`` separator and the field order must stay as they are.
    """
    message = f"{order_id}|{payment_id}"
    return hmac.new(
        secret.encode("utf-8"), message.encode("utf-8", "surrogatepass"), hashlib.sha256
    ).hexdigest()


def verify_signature(secret: str, order_id: str, payment_id: str, signature: str) -> bool:
    if not secret:
        raise ConfigurationError("RAZORPAY_KEY_SECRET is empty, cannot verify payments")
    expected = compute_signature(secret, order_id, payment_id)
    return hmac.compare_digest(expected.encode("ascii"), signature.encode("utf-8", "surrogatepass"))


class RazorpayGateway:
    """Thin wrapper over ``razorpay.Client`` with a timeout on every call."""

    def __init__(self, key_id, key_secret, timeout=DEFAULT_TIMEOUT, client=None):
        self.key_secret = key_secret
        self.timeout = timeout
        self.client = client or razorpay.Client(auth=(key_id, key_secret))

    def create_order(self, amount: int, currency: str, receipt: str, notes: dict) -> dict:
        data = {
            "amount": amount,
            "currency": currency,
            "receipt": receipt,
            "notes": notes,
        }
        return self._call("create order", self.client.order.create, data=data)

    def fetch_order(self, order_id: str) -> dict:
        return self._call("fetch order " + order_id, self.client.order.fetch, order_id)

    def verify_signature(self, order_id: str, payment_id: str, signature: str) -> bool:
        return verify_signature(self.key_secret, order_id, payment_id, signature)

    def _call(self, what, func, *args, **kwargs):
        try:
            return func(*args, timeout=self.timeout, **kwargs)
        except requests.Timeout as exc:
            logger.error("Razorpay %s timed out after %ss", what, self.timeout)
            raise UpstreamTimeout(f"{what} timed out") from exc
        except GATEWAY_ERRORS as exc:
            logger.error("Razorpay %s failed", what, exc_info=True)
            raise UpstreamError(f"{what} failed: {exc}") from exc
