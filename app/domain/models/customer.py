"""
Customer domain model.

Represents the buyer attached to an order.
"""

from dataclasses import dataclass
from typing import Any


@dataclass
class CustomerDomain:
    """
    Domain model representing a customer.

    All fields are mandatory when the order is created.

    Attributes:
        name: Customer full name
        email: Customer email address
        phone: Customer phone number
        identity_document: National identity document (CPF/CNPJ)
    """

    name: str
    email: str
    phone: str
    identity_document: str

    def __post_init__(self) -> None:
        """Validate customer data after initialization."""
        for field_name in ("name", "email", "phone", "identity_document"):
            value = getattr(self, field_name)
            if not isinstance(value, str) or not value.strip():
                raise ValueError(f"Customer {field_name} is required")

        if "@" not in self.email:
            raise ValueError(f"Invalid email format: {self.email}")

    def to_dict(self) -> dict[str, Any]:
        """Convert customer to its JSON representation."""
        return {
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "identityDocument": self.identity_document,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CustomerDomain":
        """Create customer from its JSON representation."""
        return cls(
            name=data.get("name", ""),
            email=data.get("email", ""),
            phone=data.get("phone", ""),
            identity_document=data.get("identityDocument", ""),
        )
