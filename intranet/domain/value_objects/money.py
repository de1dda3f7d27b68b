"""
Money value object for handling monetary amounts with currency.

This value object ensures type safety and provides clear semantics
for monetary operations in the domain.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

_CENT = Decimal("0.01")

# Sumas de montos bajo este tope caben en la precisión del contexto decimal
MAX_AMOUNT = Decimal("1e18")


@dataclass(frozen=True)
class Money:
    """
    Immutable value object representing a monetary amount with currency.

    Attributes:
        amount: The monetary amount as Decimal for precision
        currency: Currency code (e.g., "CLP", "USD")

    Example:
        >>> subtotal = Money(amount=Decimal("2000"), currency="CLP")
        >>> shipping = Money(amount=Decimal("3500"), currency="CLP")
        >>> (subtotal + shipping).to_wire()
        '5500.00'
    """

    amount: Decimal
    currency: str = "CLP"

    def __post_init__(self) -> None:
        """Validate money object after initialization."""
        if not isinstance(self.amount, Decimal):
            # Convert to Decimal if needed
            object.__setattr__(self, "amount", Decimal(str(self.amount)))

        # WooCommerce trabaja con 2 decimales aunque CLP no use centavos
        normalized_amount = self.amount.quantize(_CENT, rounding=ROUND_HALF_UP)
        object.__setattr__(self, "amount", normalized_amount)

        if self.amount < 0:
            raise ValueError(f"Money amount cannot be negative: {self.amount}")

        if not self.currency or len(self.currency) != 3:
            raise ValueError(f"Invalid currency code: {self.currency}")

    def __add__(self, other: "Money") -> "Money":
        """Add two Money objects with the same currency."""
        if not isinstance(other, Money):
            raise TypeError(f"Cannot add Money with {type(other)}")

        if self.currency != other.currency:
            raise ValueError(f"Cannot add different currencies: {self.currency} and {other.currency}")

        return Money(amount=self.amount + other.amount, currency=self.currency)

    def __sub__(self, other: "Money") -> "Money":
        """Subtract two Money objects with the same currency."""
        if not isinstance(other, Money):
            raise TypeError(f"Cannot subtract Money with {type(other)}")

        if self.currency != other.currency:
            raise ValueError(f"Cannot subtract different currencies: {self.currency} and {other.currency}")

        return Money(amount=self.amount - other.amount, currency=self.currency)

    def __str__(self) -> str:
        """String representation of Money."""
        return f"{self.currency} {self.amount:.2f}"

    def __repr__(self) -> str:
        """Developer-friendly representation."""
        return f"Money(amount=Decimal('{self.amount}'), currency='{self.currency}')"

    def to_wire(self) -> str:
        """Decimal-formatted string as WooCommerce expects monetary totals."""
        return f"{self.amount:.2f}"

    def to_float(self) -> float:
        """Float value for CMS numeric fields."""
        return float(self.amount)

    def clamp(self, upper: "Money") -> "Money":
        """Return self capped at upper."""
        return self if self.amount <= upper.amount else Money(amount=upper.amount, currency=self.currency)

    @property
    def is_zero(self) -> bool:
        """Check if amount is zero."""
        return self.amount == Decimal("0")

    @classmethod
    def zero(cls, currency: str = "CLP") -> "Money":
        """Create a zero Money object."""
        return cls(amount=Decimal("0"), currency=currency)

    @classmethod
    def parse(cls, value: Any, currency: str = "CLP") -> "Money":
        """
        Create Money from a user-supplied number or numeric string.

        Raises:
            ValueError: If value is not numeric or is negative
        """
        if value is None or (isinstance(value, str) and not value.strip()):
            return cls.zero(currency)
        if isinstance(value, bool):
            raise ValueError(f"Not a monetary amount: {value!r}")
        try:
            amount = Decimal(str(value).strip())
        except InvalidOperation as e:
            raise ValueError(f"Not a monetary amount: {value!r}") from e
        if not amount.is_finite() or abs(amount) >= MAX_AMOUNT:
            raise ValueError(f"Not a monetary amount: {value!r}")
        try:
            return cls(amount=amount, currency=currency)
        except InvalidOperation as e:
            raise ValueError(f"Not a monetary amount: {value!r}") from e
