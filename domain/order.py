"""
Domain: Order payloads created from chat sell commands.

The payload is handed to an external order-creation collaborator; this module
does not persist anything.

Invariants:
- total_amount = unit_price * quantity - discount_amount
- discount_amount >= 0 and total_amount >= 0
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, getcontext, localcontext
from typing import Any, ContextManager, Mapping, Optional

from .sell_command import PaymentMethod

CREATED_VIA_CHAT = "chat"

# Room for the cents digits plus rounding headroom.
_EXTRA_DIGITS = 4


def money_context(*values: Decimal | int) -> ContextManager:
    """
    Decimal context wide enough to multiply the given amounts exactly.

    Prices and quantities typed in chat have no length limit, so the default
    28-digit precision is not always enough.
    """
    digits = 0
    for value in values:
        _, value_digits, exponent = Decimal(value).as_tuple()
        digits += len(value_digits) + max(int(exponent), 0)

    context = getcontext().copy()
    context.prec = max(context.prec, digits + _EXTRA_DIGITS)
    return localcontext(context)


@dataclass(frozen=True, slots=True)
class OrderPayload:
    """
    Normalized order-creation payload.

    Identifiers are opaque strings supplied by the caller; nothing here is
    derived from the chat text except the pricing terms.
    """

    product_id: str
    buyer_id: str
    seller_id: str
    quantity: int
    unit_price: Decimal
    discount_amount: Decimal
    total_amount: Decimal
    payment_method: PaymentMethod
    variants: Optional[Mapping[str, str]] = None
    created_via: str = CREATED_VIA_CHAT

    def __post_init__(self) -> None:
        if self.discount_amount < 0:
            raise ValueError("discount_amount must be non-negative")
        if self.total_amount < 0:
            raise ValueError("total_amount must be non-negative")
        with money_context(self.unit_price, self.quantity):
            balanced = self.subtotal - self.discount_amount == self.total_amount
        if not balanced:
            raise ValueError("total_amount must equal unit_price * quantity - discount_amount")

    @property
    def subtotal(self) -> Decimal:
        """Amount before discount."""
        with money_context(self.unit_price, self.quantity):
            return self.unit_price * self.quantity

    def to_dict(self) -> dict[str, Any]:
        """Serialize for the order-persistence collaborator (JSON-safe)."""
        return {
            "product_id": self.product_id,
            "buyer_id": self.buyer_id,
            "seller_id": self.seller_id,
            "quantity": self.quantity,
            "unit_price": str(self.unit_price),
            "discount_amount": str(self.discount_amount),
            "total_amount": str(self.total_amount),
            "payment_method": self.payment_method.value,
            "variants": dict(self.variants) if self.variants else None,
            "created_via": self.created_via,
        }
