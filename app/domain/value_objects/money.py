"""
Money value object for handling monetary amounts with currency.

This value object ensures type safety and provides clear semantics
for monetary operations in the domain.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

# Pix settles in BRL with centavo precision
DEFAULT_CURRENCY = "BRL"
CURRENCY_UNIT = Decimal("0.01")


@dataclass(frozen=True)
class Money:
    """
    Immutable value object representing a settled monetary amount.

    Amounts are quantized to centavos on construction, so Money is only
    built from final amounts (order totals, summed subtotals). Per-unit
    prices stay as plain Decimal until they are summed.

    Attributes:
        amount: The monetary amount as Decimal, quantized to centavos
        currency: Currency code (e.g., "BRL", "USD")

    Example:
        >>> Money(amount=Decimal("1.005")).amount
        Decimal('1.01')
    """

    amount: Decimal
    currency: str = DEFAULT_CURRENCY

    def __post_init__(self) -> None:
        """Validate money object after initialization."""
        if not isinstance(self.amount, Decimal):
            object.__setattr__(self, "amount", Decimal(str(self.amount)))

        object.__setattr__(self, "amount", quantize_amount(self.amount))

        if self.amount < 0:
            raise ValueError(f"Money amount cannot be negative: {self.amount}")

        if not self.currency or len(self.currency) != 3:
            raise ValueError(f"Invalid currency code: {self.currency}")

    def __str__(self) -> str:
        """String representation of Money."""
        return f"{self.currency} {self.amount:.2f}"

    def __repr__(self) -> str:
        """Developer-friendly representation."""
        return f"Money(amount=Decimal('{self.amount}'), currency='{self.currency}')"

    @property
    def is_positive(self) -> bool:
        """Check if amount is positive."""
        return self.amount > Decimal("0")


def quantize_amount(amount: Decimal) -> Decimal:
    """Round an amount to centavos, half up."""
    return amount.quantize(CURRENCY_UNIT, rounding=ROUND_HALF_UP)
