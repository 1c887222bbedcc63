"""
Chat command service.

Routes an incoming chat message either to plain chat storage or, when the
seller types a sell command, through the parser and order projector.

Handles:
- Plain text messages (stored as-is)
- Sell commands from the seller (order preview + system notice)
- Product resolution from the chat's latest product card
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from domain.chat_message import ChatMessage, MessageType
from domain.order import OrderPayload, money_context
from domain.sell_command import SellCommandResult
from domain.time import utc_now
from repositories import chat_message_repository
from services.order_projection_service import generate_order_from_command
from services.sell_command_parser import is_sell_command, parse_sell_command

logger = logging.getLogger(__name__)

DEFAULT_CURRENCY_SYMBOL = "₹"
ERROR_NO_PRODUCT = "No product selected for this order"

ORDER_STATUS_PENDING = "pending"


class ChatCommandError(Exception):
    """Raised when a chat message cannot be stored."""
    pass


@dataclass(frozen=True, slots=True)
class ChatMessageRequest:
    """
    A message sent into a buyer/seller chat.

    product_id is optional; when absent the product is taken from the chat's
    most recent product card.
    """
    chat_id: str
    sender_id: str
    buyer_id: str
    seller_id: str
    message: str
    product_id: Optional[str] = None

    @property
    def from_seller(self) -> bool:
        return self.sender_id == self.seller_id


@dataclass(frozen=True, slots=True)
class ChatCommandOutcome:
    """
    Result of handling a chat message.

    kind:
    - "text": stored as ordinary chat text
    - "order": sell command accepted, order preview stored
    - "rejected": sell command invalid; nothing stored
    """
    kind: str
    messages: list[ChatMessage]
    command: Optional[SellCommandResult] = None
    order: Optional[OrderPayload] = None
    error: Optional[str] = None


def _currency_symbol() -> str:
    return os.getenv("CURRENCY_SYMBOL", DEFAULT_CURRENCY_SYMBOL)


def _format_amount(amount: Decimal) -> str:
    """599 -> "599", 599.50 -> "599.50"."""
    if amount == amount.to_integral_value():
        return str(amount.quantize(Decimal("1")))
    return str(amount.quantize(Decimal("0.01")))


def format_order_summary(
    order: OrderPayload,
    currency_symbol: str = DEFAULT_CURRENCY_SYMBOL,
) -> str:
    """
    System message announcing an order created from a sell command.

    Example:
        "Order created: 2 item(s) for ₹500 each. Total: ₹900. Buyer can now
        proceed to checkout."
    """
    with money_context(order.unit_price, order.quantity):
        unit_price = _format_amount(order.unit_price)
        total = _format_amount(order.total_amount)

    return (
        f"Order created: {order.quantity} item(s) for "
        f"{currency_symbol}{unit_price} each. "
        f"Total: {currency_symbol}{total}. "
        "Buyer can now proceed to checkout."
    )


def _resolve_product_id(request: ChatMessageRequest) -> Optional[str]:
    if request.product_id:
        return request.product_id

    latest = chat_message_repository.get_latest_product_message(request.chat_id)
    return latest.product_id if latest else None


def _store_text(request: ChatMessageRequest) -> ChatCommandOutcome:
    message = chat_message_repository.insert_chat_message(
        chat_id=request.chat_id,
        sender_id=request.sender_id,
        message_type=MessageType.TEXT,
        content=request.message,
    )
    return ChatCommandOutcome(kind="text", messages=[message])


def _store_order(request: ChatMessageRequest) -> ChatCommandOutcome:
    command = parse_sell_command(request.message)

    if not command.is_valid:
        logger.info("Sell command rejected in chat %s: %s", request.chat_id, command.error)
        return ChatCommandOutcome(kind="rejected", messages=[], command=command, error=command.error)

    product_id = _resolve_product_id(request)
    if not product_id:
        logger.info("Sell command rejected in chat %s: no product", request.chat_id)
        return ChatCommandOutcome(kind="rejected", messages=[], command=command, error=ERROR_NO_PRODUCT)

    order = generate_order_from_command(command, product_id, request.buyer_id, request.seller_id)

    command_message = chat_message_repository.insert_chat_message(
        chat_id=request.chat_id,
        sender_id=request.sender_id,
        message_type=MessageType.ORDER,
        content=request.message,
        metadata={
            "command": command.to_dict(),
            "order_preview": order.to_dict(),
            "status": ORDER_STATUS_PENDING,
        },
    )
    system_message = chat_message_repository.insert_chat_message(
        chat_id=request.chat_id,
        sender_id=request.sender_id,
        message_type=MessageType.SYSTEM,
        content=format_order_summary(order, _currency_symbol()),
    )

    logger.info(
        "Order preview created in chat %s: product=%s quantity=%d total=%s",
        request.chat_id,
        product_id,
        order.quantity,
        order.total_amount,
    )

    return ChatCommandOutcome(
        kind="order",
        messages=[command_message, system_message],
        command=command,
        order=order,
    )


def handle_chat_message(request: ChatMessageRequest) -> ChatCommandOutcome:
    """
    Handle one chat message.

    Process:
    1. Only the seller can issue sell commands; anything else is plain text
    2. Parse the sell command; invalid commands are rejected without storing
    3. Resolve the product (explicit, else latest product card in the chat)
    4. Store the command as an order message with the order preview
    5. Post a system message summarizing the order
    6. Update the chat's last-message marker

    Args:
        request: ChatMessageRequest

    Returns:
        ChatCommandOutcome describing what was stored

    Raises:
        ValueError: If the message is blank
        ChatCommandError: If storage fails
    """
    if not request.message.strip():
        raise ValueError("Message must not be empty")

    try:
        if request.from_seller and is_sell_command(request.message):
            outcome = _store_order(request)
        else:
            outcome = _store_text(request)

        if outcome.messages:
            chat_message_repository.touch_chat(request.chat_id, request.sender_id, utc_now())
    except RuntimeError as e:
        logger.error("Failed to store chat message in chat %s: %s", request.chat_id, e)
        raise ChatCommandError(str(e)) from e

    return outcome


__all__ = [
    "ChatCommandError",
    "ChatCommandOutcome",
    "ChatMessageRequest",
    "format_order_summary",
    "handle_chat_message",
]
