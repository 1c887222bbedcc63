"""
Order projection service.

Projects a valid SellCommandResult onto an OrderPayload for the buyer, seller
and product the chat is about. Pure computation: persisting the order is the
job of the order-creation collaborator.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from domain.order import OrderPayload, money_context
from domain.sell_command import (
    DEFAULT_PAYMENT_METHOD,
    Discount,
    DiscountKind,
    SellCommandResult,
)

_CENTS = Decimal("0.01")
_ZERO = Decimal("0")
_HUNDRED = Decimal("100")


class InvalidSellCommandError(ValueError):
    """Raised when projection is attempted on an invalid or incomplete command."""
    pass


def apply_discount(subtotal: Decimal, discount: Discount | None) -> Decimal:
    """
    Apply a discount to a subtotal.

    The result is rounded half-up to cents and never drops below zero.

    Example:
        apply_discount(Decimal("1000"), Discount(DiscountKind.PERCENTAGE, 10))
        # Returns Decimal('900.00')
    """
    amount = subtotal

    with money_context(subtotal, discount.value if discount else 0):
        if discount is not None:
            if discount.kind is DiscountKind.PERCENTAGE:
                amount = subtotal * (_HUNDRED - discount.value) / _HUNDRED
            else:
                amount = subtotal - discount.value

        return max(_ZERO, amount).quantize(_CENTS, rounding=ROUND_HALF_UP)


def generate_order_from_command(
    command: SellCommandResult,
    product_id: str,
    buyer_id: str,
    seller_id: str,
) -> OrderPayload:
    """
    Build the order-creation payload for a parsed sell command.

    Args:
        command: Result of parse_sell_command(); must be valid
        product_id: Product being sold
        buyer_id: Buyer in the chat
        seller_id: Seller who typed the command

    Returns:
        OrderPayload with discount and total computed

    Raises:
        InvalidSellCommandError: If the command is invalid, has no price, or an
            identifier is empty. Callers are expected to check ``is_valid``
            first.

    Example:
        order = generate_order_from_command(
            parse_sell_command("sell 500 x2 10% off"), "p1", "b1", "s1"
        )
        # order.total_amount == Decimal('900.00')
        # order.discount_amount == Decimal('100.00')
        # order.payment_method == PaymentMethod.UPI
    """
    if not command.is_valid or not command.price:
        raise InvalidSellCommandError("Invalid command")

    for name, value in (("product_id", product_id), ("buyer_id", buyer_id), ("seller_id", seller_id)):
        if not value:
            raise InvalidSellCommandError(f"{name} is required")

    unit_price = command.price
    quantity = command.quantity or 1
    with money_context(unit_price, quantity):
        subtotal = unit_price * quantity
        total_amount = apply_discount(subtotal, command.discount)
        discount_amount = subtotal - total_amount

    return OrderPayload(
        product_id=product_id,
        buyer_id=buyer_id,
        seller_id=seller_id,
        quantity=quantity,
        unit_price=unit_price,
        discount_amount=discount_amount,
        total_amount=total_amount,
        payment_method=command.payment_method or DEFAULT_PAYMENT_METHOD,
        variants=command.variants,
    )


__all__ = [
    "InvalidSellCommandError",
    "apply_discount",
    "generate_order_from_command",
]
