"""Checkout failures and the notices shown to the shopper for them."""

CHECKOUT_FAILED = "Failed to process checkout. Please try again."
PAYMENT_NOT_CONFIGURED = "Payment system not configured. Please contact support."
RECONCILIATION_FAILED = "Payment successful but order update failed. Please contact support."
EMPTY_CART = "Your cart is empty"
PAYMENT_CANCELLED = "Payment cancelled"


class CheckoutError(Exception):
    """Base class for checkout failures that carry a shopper-facing notice."""

    notice = CHECKOUT_FAILED


class PaymentConfigurationError(CheckoutError):
    """The payment widget cannot be opened (no public key, script missing)."""

    notice = PAYMENT_NOT_CONFIGURED


class ReconciliationError(CheckoutError):
    """Payment was taken but the order could not be confirmed."""

    notice = RECONCILIATION_FAILED
