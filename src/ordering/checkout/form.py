"""Checkout form: shopper contact and delivery details."""

import re
from dataclasses import asdict, dataclass

from protean.exceptions import ValidationError

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

# Field name -> label used in "Please fill in <label>"
REQUIRED_FIELDS = {
    "customer_name": "name",
    "customer_email": "email",
    "customer_phone": "phone",
    "address_line1": "address line1",
    "city": "city",
    "state": "state",
}


@dataclass(frozen=True)
class ShopperDetails:
    customer_name: str = ""
    customer_email: str = ""
    customer_phone: str = ""
    address_line1: str = ""
    address_line2: str = ""
    city: str = ""
    state: str = ""
    country: str = "Nigeria"
    postal_code: str = ""
    notes: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> "ShopperDetails":
        known = {key: (data.get(key) or "").strip() for key in cls.__dataclass_fields__ if key in data}
        if not known.get("country"):
            known.pop("country", None)
        return cls(**known)

    def to_dict(self) -> dict:
        return asdict(self)

    def shipping_address(self) -> dict:
        """The delivery address in the shape ``ShippingAddress`` takes."""
        return {
            "full_name": self.customer_name,
            "phone": self.customer_phone,
            "address_line1": self.address_line1,
            "address_line2": self.address_line2 or None,
            "city": self.city,
            "state": self.state,
            "country": self.country or "Nigeria",
            "postal_code": self.postal_code or None,
        }

    def fingerprint(self) -> tuple:
        return (
            self.customer_name,
            self.customer_email.lower(),
            self.customer_phone,
            self.address_line1,
            self.address_line2,
            self.city,
            self.state,
            self.country,
            self.postal_code,
            self.notes,
        )


def validate_shopper(details: ShopperDetails) -> None:
    """Raise ValidationError naming every missing or malformed field."""
    errors = {}
    for field_name, label in REQUIRED_FIELDS.items():
        if not (getattr(details, field_name) or "").strip():
            errors[field_name] = [f"Please fill in {label}"]

    email = (details.customer_email or "").strip()
    if email and not EMAIL_PATTERN.match(email):
        errors["customer_email"] = ["Please enter a valid email address"]

    if errors:
        raise ValidationError(errors)
