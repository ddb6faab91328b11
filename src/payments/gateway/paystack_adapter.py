"""Paystack inline popup adapter.

The popup runs in the shopper's browser and reports back through two
callbacks: ``callback`` with the transaction response on success and
``onClose`` when the shopper dismisses it. This adapter turns that pair into
a single awaitable: ``collect`` parks an asyncio future per reference and
``on_success`` / ``on_close`` resolve it. Whichever arrives first wins;
anything after that for the same reference is ignored.
"""

import asyncio

import structlog

from ordering.checkout.errors import PaymentConfigurationError
from payments.gateway.port import PaymentOutcome, PaymentRequest, PaymentWidget

logger = structlog.get_logger(__name__)

PUBLIC_KEY_PREFIXES = ("pk_test_", "pk_live_")


class PaystackPopup(PaymentWidget):
    """Paystack inline checkout, driven by browser callbacks."""

    def __init__(self, public_key: str, script_loaded: bool = True) -> None:
        self.public_key = public_key or ""
        self.script_loaded = script_loaded
        self._waiting: dict[str, asyncio.Future] = {}

    def ensure_configured(self) -> None:
        if not self.public_key.startswith(PUBLIC_KEY_PREFIXES):
            raise PaymentConfigurationError("Paystack public key is missing or malformed")
        if not self.script_loaded:
            raise PaymentConfigurationError("Paystack library not loaded")

    def setup_config(self, request: PaymentRequest) -> dict:
        """Options passed to ``PaystackPop.setup`` in the browser."""
        return {
            "key": self.public_key,
            "email": request.email,
            "amount": request.amount_minor,
            "currency": request.currency,
            "ref": request.reference,
            "metadata": request.metadata,
        }

    async def collect(self, request: PaymentRequest) -> PaymentOutcome:
        self.ensure_configured()
        if request.reference in self._waiting:
            raise ValueError(f"Payment {request.reference} is already being collected")

        future = asyncio.get_running_loop().create_future()
        self._waiting[request.reference] = future
        logger.info("paystack_popup_opened", reference=request.reference, amount=request.amount_minor)
        try:
            return await future
        finally:
            self._waiting.pop(request.reference, None)

    def is_waiting(self, reference: str) -> bool:
        return reference in self._waiting

    def on_success(self, reference: str, response: dict | None = None) -> bool:
        """Deliver the popup's success callback. Returns False if nobody was waiting."""
        response = response or {}
        outcome = PaymentOutcome.succeeded(
            response.get("reference") or reference,
            response.get("status") or "success",
        )
        return self._resolve(reference, outcome)

    def on_close(self, reference: str) -> bool:
        """Deliver the popup's close callback. Returns False if nobody was waiting."""
        return self._resolve(reference, PaymentOutcome.cancelled())

    def _resolve(self, reference: str, outcome: PaymentOutcome) -> bool:
        future = self._waiting.get(reference)
        if future is None or future.done():
            logger.debug("paystack_callback_ignored", reference=reference, outcome=outcome.kind.value)
            return False
        future.set_result(outcome)
        return True
