"""Configurable fake payment widget for development and testing.

Resolves every ``collect`` immediately with the configured outcome, so
checkout flows can be driven end to end without a browser. It can also be
made to report a cancelled payment or to look unconfigured.
"""

from ordering.checkout.errors import PaymentConfigurationError
from payments.gateway.port import PaymentOutcome, PaymentRequest, PaymentWidget


class FakePaymentWidget(PaymentWidget):
    """Configurable fake payment widget."""

    def __init__(self) -> None:
        self.should_succeed: bool = True
        self.is_configured: bool = True
        self.gateway_status: str = "success"
        self.reference_override: str | None = None
        self.calls: list[dict] = []

    def configure(
        self,
        should_succeed: bool = True,
        is_configured: bool = True,
        gateway_status: str = "success",
        reference_override: str | None = None,
    ) -> None:
        """Configure widget behavior at runtime."""
        self.should_succeed = should_succeed
        self.is_configured = is_configured
        self.gateway_status = gateway_status
        self.reference_override = reference_override

    def ensure_configured(self) -> None:
        if not self.is_configured:
            raise PaymentConfigurationError("Payment widget is not configured")

    async def collect(self, request: PaymentRequest) -> PaymentOutcome:
        self.calls.append({"method": "collect", **request.to_dict()})

        if self.should_succeed:
            return PaymentOutcome.succeeded(
                self.reference_override or request.reference,
                self.gateway_status,
            )
        return PaymentOutcome.cancelled()
