"""
Sell command parser.

Turns one chat message into a SellCommandResult. Parsing never raises: every
rejection is returned as an invalid result with an ``error`` reason so that the
chat layer can fall back to treating the message as plain text.

Extraction is a pipeline of stages. Each stage receives the unconsumed
remainder of the command body and returns ``(value, remainder)``, removing the
text it consumed. Stage order is fixed:

    price -> quantity -> variants -> discount -> payment method -> shipping

Keyword detection uses substring containment, not whole-word matching, so
"silk" inside a longer word still counts as the material. Sizes are the one
exception and only match as whole words.
"""

from __future__ import annotations

import logging
import re
from decimal import Decimal
from re import Pattern
from typing import Optional

from domain.sell_command import (
    PAYMENT_METHOD_PRIORITY,
    SIZES,
    VARIANT_VOCABULARIES,
    Discount,
    DiscountKind,
    PaymentMethod,
    ProductReference,
    SellCommandResult,
)

logger = logging.getLogger(__name__)

SELL_KEYWORD = "sell "

ERROR_NOT_SELL_COMMAND = "Not a sell command"
ERROR_PRICE_REQUIRED = "Price is required"
ERROR_PRICE_NOT_POSITIVE = "Price must be positive"

_PRICE_PATTERN = re.compile(r"^(\d+(?:\.\d{1,2})?)", re.ASCII)

# Tried in order; only the first pattern that matches is used.
_QUANTITY_PATTERNS: tuple[Pattern[str], ...] = (
    re.compile(r"x(\d+)", re.ASCII),
    re.compile(r"qty\s*(\d+)", re.ASCII),
    re.compile(r"(\d+)\s*pcs", re.ASCII),
    re.compile(r"(\d+)\s*pieces?", re.ASCII),
)

SIZE_CATEGORY = "size"
_SIZE_PATTERNS: dict[str, Pattern[str]] = {
    size: re.compile(rf"\b{re.escape(size)}\b", re.ASCII) for size in SIZES
}

_PERCENT_DISCOUNT_PATTERN = re.compile(r"(\d+)%\s*off", re.ASCII)
_FIXED_DISCOUNT_PATTERN = re.compile(r"(\d+)\s*off", re.ASCII)

_EXPRESS_KEYWORDS: tuple[str, ...] = ("express", "fast")

_PRODUCT_PATTERNS: tuple[Pattern[str], ...] = (
    re.compile(r"product #?(\d+)", re.IGNORECASE | re.ASCII),
    re.compile(r"item #?(\d+)", re.IGNORECASE | re.ASCII),
    re.compile(r"#(\d+)", re.ASCII),
)
_CONTEXT_WORDS: tuple[str, ...] = ("this", "that")
_STOP_WORDS = frozenset({"sell", "this", "that", "with", "for"})


def _cut(text: str, start: int, end: int) -> str:
    """Remove text[start:end] and trim what is left."""
    return (text[:start] + text[end:]).strip()


def is_sell_command(message: str) -> bool:
    """True if the message starts with the ``sell`` keyword (any case)."""
    return message.lower().strip().startswith(SELL_KEYWORD)


def extract_price(body: str) -> tuple[Optional[Decimal], str]:
    """Leading price token with up to two decimals."""
    match = _PRICE_PATTERN.match(body)
    if not match:
        return None, body
    return Decimal(match.group(1)), _cut(body, *match.span())


def extract_quantity(remaining: str) -> tuple[int, str]:
    """First matching quantity pattern wins; defaults to 1, as does a quantity of 0."""
    for pattern in _QUANTITY_PATTERNS:
        match = pattern.search(remaining)
        if match:
            return int(match.group(1)) or 1, _cut(remaining, *match.span())
    return 1, remaining


def _find_variant(category: str, word: str, remaining: str) -> Optional[tuple[int, int]]:
    if category == SIZE_CATEGORY:
        match = _SIZE_PATTERNS[word].search(remaining)
        return match.span() if match else None
    index = remaining.find(word)
    return (index, index + len(word)) if index != -1 else None


def extract_variants(remaining: str) -> tuple[Optional[dict[str, str]], str]:
    """
    Detect at most one color, one size and one material.

    Within a category the vocabulary order decides, not the position in the
    text. Each recorded value is removed before the next category is scanned.
    Sizes must stand alone as words; "s", "m" and "l" would otherwise match
    inside almost any other word.
    """
    variants: dict[str, str] = {}

    for category, vocabulary in VARIANT_VOCABULARIES:
        for word in vocabulary:
            span = _find_variant(category, word, remaining)
            if span is None:
                continue
            variants[category] = word.upper() if category == SIZE_CATEGORY else word
            remaining = _cut(remaining, *span)
            break

    return (variants or None), remaining


def extract_discount(remaining: str) -> tuple[Optional[Discount], str]:
    """Percentage discount takes precedence over a fixed amount."""
    match = _PERCENT_DISCOUNT_PATTERN.search(remaining)
    if match:
        discount = Discount(kind=DiscountKind.PERCENTAGE, value=int(match.group(1)))
        return discount, _cut(remaining, *match.span())

    match = _FIXED_DISCOUNT_PATTERN.search(remaining)
    if match:
        discount = Discount(kind=DiscountKind.FIXED, value=int(match.group(1)))
        return discount, _cut(remaining, *match.span())

    return None, remaining


def extract_payment_method(remaining: str) -> tuple[Optional[PaymentMethod], str]:
    """cod, then upi, then card. Nothing is removed."""
    for method in PAYMENT_METHOD_PRIORITY:
        if method.value in remaining:
            return method, remaining
    return None, remaining


def extract_express_shipping(remaining: str) -> tuple[bool, str]:
    """True when the remainder mentions express or fast delivery. Nothing is removed."""
    return any(keyword in remaining for keyword in _EXPRESS_KEYWORDS), remaining


def parse_sell_command(message: str) -> SellCommandResult:
    """
    Parse a chat message into a SellCommandResult.

    Args:
        message: Raw chat text, any case and surrounding whitespace

    Returns:
        SellCommandResult; ``is_valid`` is False with an ``error`` when the
        message is not a sell command or carries no positive price

    Example:
        result = parse_sell_command("sell 599 x2 10% off red medium cod")
        # price=Decimal('599'), quantity=2,
        # variants={'color': 'red', 'size': 'MEDIUM'},
        # discount=Discount(PERCENTAGE, 10), payment_method=PaymentMethod.COD
    """
    normalized = message.lower().strip()

    if not normalized.startswith(SELL_KEYWORD):
        return SellCommandResult.rejected(ERROR_NOT_SELL_COMMAND)

    body = normalized[len(SELL_KEYWORD):].strip()

    price, remaining = extract_price(body)
    if price is None:
        logger.debug("Sell command rejected, no price: %r", message)
        return SellCommandResult.rejected(ERROR_PRICE_REQUIRED)
    if price <= 0:
        logger.debug("Sell command rejected, non-positive price: %r", message)
        return SellCommandResult.rejected(ERROR_PRICE_NOT_POSITIVE)

    quantity, remaining = extract_quantity(remaining)
    variants, remaining = extract_variants(remaining)
    discount, remaining = extract_discount(remaining)
    payment_method, remaining = extract_payment_method(remaining)
    express_shipping, _ = extract_express_shipping(remaining)

    return SellCommandResult(
        is_valid=True,
        price=price,
        quantity=quantity,
        variants=variants,
        discount=discount,
        payment_method=payment_method,
        express_shipping=express_shipping,
    )


def extract_product_reference(message: str) -> ProductReference:
    """
    Pull a product reference and descriptive words out of free chat text.

    "this"/"that" point at the product already in the chat context; an explicit
    number (``product 12``, ``item #7``, ``#3``) overrides that.
    """
    product_ref: Optional[str] = None

    if any(word in message for word in _CONTEXT_WORDS):
        product_ref = "context"

    for pattern in _PRODUCT_PATTERNS:
        match = pattern.search(message)
        if match:
            product_ref = match.group(1)
            break

    descriptive_words = [
        word for word in message.split(" ")
        if len(word) > 3 and word not in _STOP_WORDS
    ]

    return ProductReference(
        product_ref=product_ref,
        description=" ".join(descriptive_words) if descriptive_words else None,
    )


__all__ = [
    "ERROR_NOT_SELL_COMMAND",
    "ERROR_PRICE_NOT_POSITIVE",
    "ERROR_PRICE_REQUIRED",
    "extract_discount",
    "extract_express_shipping",
    "extract_payment_method",
    "extract_price",
    "extract_product_reference",
    "extract_quantity",
    "extract_variants",
    "is_sell_command",
    "parse_sell_command",
]
