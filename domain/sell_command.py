"""
Domain: Sell commands typed into a buyer/seller chat.

A sell command is a chat message beginning with ``sell`` that lets a seller
declare price, quantity, variant, discount and payment terms inline, e.g.::

    sell 599 x2 10% off red medium cod

Contract rules implemented here:
- A parse result is immutable and carries no identity.
- ``is_valid`` is True only when a positive price was found.
- Invalid results carry a human-readable ``error`` and no order terms.
- Variant vocabularies are closed sets fixed at design time.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Mapping, Optional


class DiscountKind(str, Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"


class PaymentMethod(str, Enum):
    COD = "cod"
    UPI = "upi"
    CARD = "card"


# Vocabulary order is the match priority within each category.
COLORS: tuple[str, ...] = (
    "red", "blue", "green", "yellow", "black", "white",
    "pink", "purple", "orange", "brown", "grey", "gray",
)
SIZES: tuple[str, ...] = ("xs", "small", "medium", "large", "xl", "xxl", "xxxl", "s", "m", "l")
MATERIALS: tuple[str, ...] = ("cotton", "silk", "polyester", "wool", "leather", "denim", "linen")

# Category processing order: color -> size -> material.
VARIANT_VOCABULARIES: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("color", COLORS),
    ("size", SIZES),
    ("material", MATERIALS),
)

PAYMENT_METHOD_PRIORITY: tuple[PaymentMethod, ...] = (
    PaymentMethod.COD,
    PaymentMethod.UPI,
    PaymentMethod.CARD,
)

DEFAULT_PAYMENT_METHOD = PaymentMethod.UPI


@dataclass(frozen=True, slots=True)
class Discount:
    """Price reduction: a percentage of the subtotal or a fixed currency amount."""

    kind: DiscountKind
    value: int

    def __post_init__(self) -> None:
        if self.value < 0:
            raise ValueError("discount value must be non-negative")


@dataclass(frozen=True, slots=True)
class SellCommandResult:
    """
    Outcome of parsing one chat message.

    Produced fresh per parse call and consumed immediately by the order
    projector. Failures are data: ``is_valid=False`` plus ``error``.
    """

    is_valid: bool
    price: Optional[Decimal] = None
    quantity: int = 1
    variants: Optional[Mapping[str, str]] = None
    discount: Optional[Discount] = None
    payment_method: Optional[PaymentMethod] = None
    express_shipping: bool = False
    error: Optional[str] = None

    def __post_init__(self) -> None:
        if self.quantity < 1:
            raise ValueError("quantity must be at least 1")

    @classmethod
    def rejected(cls, error: str) -> "SellCommandResult":
        """Build an invalid result carrying only the rejection reason."""
        return cls(is_valid=False, error=error)

    def to_dict(self) -> dict:
        """JSON-ready view, used for chat message metadata."""
        return {
            "is_valid": self.is_valid,
            "price": str(self.price) if self.price is not None else None,
            "quantity": self.quantity,
            "variants": dict(self.variants) if self.variants else None,
            "discount": (
                {"kind": self.discount.kind.value, "value": self.discount.value}
                if self.discount
                else None
            ),
            "payment_method": self.payment_method.value if self.payment_method else None,
            "express_shipping": self.express_shipping,
            "error": self.error,
        }


@dataclass(frozen=True, slots=True)
class ProductReference:
    """Loose product hints pulled from free chat text."""

    product_ref: Optional[str] = None
    description: Optional[str] = None
