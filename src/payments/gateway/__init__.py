"""Payment widget factory.

Provides get_widget() / set_widget() to swap implementations:
- PaystackPopup for the storefront, keyed by PAYSTACK_PUBLIC_KEY
- FakePaymentWidget for development and testing
"""

from ordering.config import get_settings
from payments.gateway.paystack_adapter import PaystackPopup
from payments.gateway.port import PaymentWidget

_current_widget: PaymentWidget | None = None


def get_widget() -> PaymentWidget:
    """Return the current payment widget. Defaults to PaystackPopup."""
    global _current_widget
    if _current_widget is None:
        _current_widget = PaystackPopup(get_settings().paystack_public_key)
    return _current_widget


def set_widget(widget: PaymentWidget) -> None:
    """Override the active payment widget (useful for tests)."""
    global _current_widget
    _current_widget = widget


def reset_widget() -> None:
    """Reset to default widget."""
    global _current_widget
    _current_widget = None
