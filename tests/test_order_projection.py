"""
Tests for `services/order_projection_service.py`.

Covers contract rules:
- total_amount = unit_price * quantity - discount_amount
- Fixed discounts never push the total below zero
- Payment method defaults to UPI
- Projecting an invalid command is a caller error and raises
"""

from __future__ import annotations

from decimal import Decimal

import pytest

from domain.order import CREATED_VIA_CHAT
from domain.sell_command import Discount, DiscountKind, PaymentMethod, SellCommandResult
from services.order_projection_service import (
    InvalidSellCommandError,
    apply_discount,
    generate_order_from_command,
)
from services.sell_command_parser import parse_sell_command


def test_percentage_discount_projection() -> None:
    """sell 500 x2 10% off → 900 total, 100 discount, UPI by default."""

    order = generate_order_from_command(parse_sell_command("sell 500 x2 10% off"), "p1", "b1", "s1")

    assert order.product_id == "p1"
    assert order.buyer_id == "b1"
    assert order.seller_id == "s1"
    assert order.unit_price == Decimal("500")
    assert order.quantity == 2
    assert order.total_amount == Decimal("900")
    assert order.discount_amount == Decimal("100")
    assert order.payment_method is PaymentMethod.UPI
    assert order.variants is None
    assert order.created_via == CREATED_VIA_CHAT


def test_fixed_discount_projection() -> None:
    order = generate_order_from_command(parse_sell_command("sell 250 x3 50 off cod"), "p1", "b1", "s1")

    assert order.total_amount == Decimal("700")
    assert order.discount_amount == Decimal("50")
    assert order.payment_method is PaymentMethod.COD


def test_fixed_discount_is_clamped_at_zero() -> None:
    """A discount larger than the subtotal gives a zero total, never negative."""

    order = generate_order_from_command(parse_sell_command("sell 100 500 off"), "p1", "b1", "s1")

    assert order.total_amount == Decimal("0")
    assert order.discount_amount == Decimal("100")


def test_percentage_over_hundred_is_clamped_at_zero() -> None:
    order = generate_order_from_command(parse_sell_command("sell 100 150% off"), "p1", "b1", "s1")

    assert order.total_amount == Decimal("0")
    assert order.discount_amount == Decimal("100")


def test_no_discount_keeps_subtotal() -> None:
    order = generate_order_from_command(parse_sell_command("sell 99.99 x3 card"), "p1", "b1", "s1")

    assert order.total_amount == Decimal("299.97")
    assert order.discount_amount == Decimal("0")
    assert order.payment_method is PaymentMethod.CARD


def test_variants_pass_through() -> None:
    order = generate_order_from_command(parse_sell_command("sell 599 red medium"), "p1", "b1", "s1")

    assert order.variants == {"color": "red", "size": "MEDIUM"}


def test_totals_are_rounded_to_cents() -> None:
    """599 x 1 at 33% off = 401.33"""

    order = generate_order_from_command(parse_sell_command("sell 599 33% off"), "p1", "b1", "s1")

    assert order.total_amount == Decimal("401.33")
    assert order.discount_amount == Decimal("197.67")
    assert order.unit_price * order.quantity - order.discount_amount == order.total_amount


@pytest.mark.parametrize(
    "message",
    ["sell 10 x5 5 off", "sell 10 x5 60 off", "sell 10 x5 99% off", "sell 0.01 100% off", "sell 3.33 x3 7% off"],
)
def test_total_is_never_negative(message: str) -> None:
    order = generate_order_from_command(parse_sell_command(message), "p1", "b1", "s1")

    assert order.total_amount >= 0
    assert order.discount_amount >= 0
    assert order.subtotal - order.discount_amount == order.total_amount


def test_price_longer_than_default_precision() -> None:
    """Chat prices have no length limit; the total stays exact past 28 digits."""

    order = generate_order_from_command(
        parse_sell_command("sell 1234567890123456789012345678 x2"), "p1", "b1", "s1"
    )

    assert order.total_amount == Decimal("2469135780246913578024691356")
    assert order.discount_amount == 0
    assert order.subtotal == order.total_amount


def test_long_price_with_percentage_discount() -> None:
    order = generate_order_from_command(
        parse_sell_command("sell 1234567890123456789012345678 x2 10% off"), "p1", "b1", "s1"
    )

    assert order.total_amount == Decimal("2222222202222222220222222220.40")
    assert order.discount_amount == Decimal("246913578024691357802469135.60")
    assert order.subtotal - order.discount_amount == order.total_amount


def test_invalid_command_raises() -> None:
    """Projection is only defined for valid commands."""

    with pytest.raises(InvalidSellCommandError):
        generate_order_from_command(parse_sell_command("hello"), "p1", "b1", "s1")

    with pytest.raises(InvalidSellCommandError):
        generate_order_from_command(SellCommandResult(is_valid=True), "p1", "b1", "s1")


def test_invalid_command_error_is_a_value_error() -> None:
    with pytest.raises(ValueError):
        generate_order_from_command(parse_sell_command("sell 0"), "p1", "b1", "s1")


@pytest.mark.parametrize("ids", [("", "b1", "s1"), ("p1", "", "s1"), ("p1", "b1", "")])
def test_empty_identifiers_raise(ids: tuple[str, str, str]) -> None:
    with pytest.raises(InvalidSellCommandError):
        generate_order_from_command(parse_sell_command("sell 100"), *ids)


def test_apply_discount_without_discount() -> None:
    assert apply_discount(Decimal("120"), None) == Decimal("120.00")


def test_apply_discount_fixed() -> None:
    assert apply_discount(Decimal("120"), Discount(DiscountKind.FIXED, 20)) == Decimal("100.00")


def test_order_payload_to_dict() -> None:
    order = generate_order_from_command(parse_sell_command("sell 500 x2 10% off"), "p1", "b1", "s1")

    assert order.to_dict() == {
        "product_id": "p1",
        "buyer_id": "b1",
        "seller_id": "s1",
        "quantity": 2,
        "unit_price": "500",
        "discount_amount": "100.00",
        "total_amount": "900.00",
        "payment_method": "upi",
        "variants": None,
        "created_via": "chat",
    }
