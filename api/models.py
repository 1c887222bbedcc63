"""
API Request and Response Models.

Pydantic models for validating API requests and serializing responses.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from domain.chat_message import ChatMessage
from domain.order import OrderPayload
from domain.sell_command import ProductReference, SellCommandResult


# ============================================================================
# Sell Command Models
# ============================================================================

class SellCommandRequest(BaseModel):
    """Request to parse a chat message as a sell command."""
    message: str = Field(
        ...,
        min_length=1,
        description="Raw chat message, e.g. 'sell 599 x2 10% off red medium cod'"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "message": "sell 599 x2 10% off red medium cod"
            }
        }


class DiscountResponse(BaseModel):
    """Discount attached to a sell command."""
    kind: str  # "percentage" or "fixed"
    value: int


class SellCommandResponse(BaseModel):
    """Parsed sell command. Invalid commands are reported, not rejected."""
    is_valid: bool
    price: Optional[Decimal] = None
    quantity: int = 1
    variants: Optional[Dict[str, str]] = None
    discount: Optional[DiscountResponse] = None
    payment_method: Optional[str] = None
    express_shipping: bool = False
    error: Optional[str] = None

    @classmethod
    def from_result(cls, result: SellCommandResult) -> "SellCommandResponse":
        return cls(
            is_valid=result.is_valid,
            price=result.price,
            quantity=result.quantity,
            variants=dict(result.variants) if result.variants else None,
            discount=(
                DiscountResponse(kind=result.discount.kind.value, value=result.discount.value)
                if result.discount
                else None
            ),
            payment_method=result.payment_method.value if result.payment_method else None,
            express_shipping=result.express_shipping,
            error=result.error,
        )

    class Config:
        json_schema_extra = {
            "example": {
                "is_valid": True,
                "price": "599",
                "quantity": 2,
                "variants": {"color": "red", "size": "MEDIUM"},
                "discount": {"kind": "percentage", "value": 10},
                "payment_method": "cod",
                "express_shipping": False,
                "error": None
            }
        }


class OrderPreviewRequest(BaseModel):
    """Request to project a sell command onto an order payload."""
    message: str = Field(..., min_length=1)
    product_id: str = Field(..., min_length=1, description="Product being sold")
    buyer_id: str = Field(..., min_length=1, description="Buyer in the chat")
    seller_id: str = Field(..., min_length=1, description="Seller issuing the command")

    class Config:
        json_schema_extra = {
            "example": {
                "message": "sell 500 x2 10% off",
                "product_id": "p1",
                "buyer_id": "b1",
                "seller_id": "s1"
            }
        }


class OrderPayloadResponse(BaseModel):
    """Order-creation payload derived from a sell command."""
    product_id: str
    buyer_id: str
    seller_id: str
    quantity: int
    unit_price: Decimal
    discount_amount: Decimal
    total_amount: Decimal
    payment_method: str
    variants: Optional[Dict[str, str]] = None
    created_via: str

    @classmethod
    def from_order(cls, order: OrderPayload) -> "OrderPayloadResponse":
        return cls(
            product_id=order.product_id,
            buyer_id=order.buyer_id,
            seller_id=order.seller_id,
            quantity=order.quantity,
            unit_price=order.unit_price,
            discount_amount=order.discount_amount,
            total_amount=order.total_amount,
            payment_method=order.payment_method.value,
            variants=dict(order.variants) if order.variants else None,
            created_via=order.created_via,
        )

    class Config:
        json_schema_extra = {
            "example": {
                "product_id": "p1",
                "buyer_id": "b1",
                "seller_id": "s1",
                "quantity": 2,
                "unit_price": "500",
                "discount_amount": "100.00",
                "total_amount": "900.00",
                "payment_method": "upi",
                "variants": None,
                "created_via": "chat"
            }
        }


class ProductReferenceResponse(BaseModel):
    """Product hints pulled from free chat text."""
    product_ref: Optional[str] = None
    description: Optional[str] = None

    @classmethod
    def from_reference(cls, reference: ProductReference) -> "ProductReferenceResponse":
        return cls(product_ref=reference.product_ref, description=reference.description)


# ============================================================================
# Chat Models
# ============================================================================

class ChatMessageCreateRequest(BaseModel):
    """Message sent into a buyer/seller chat."""
    sender_id: str = Field(..., min_length=1)
    buyer_id: str = Field(..., min_length=1)
    seller_id: str = Field(..., min_length=1)
    message: str = Field(..., min_length=1)
    product_id: Optional[str] = Field(
        None,
        description="Product being discussed; defaults to the chat's latest product card"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "sender_id": "s1",
                "buyer_id": "b1",
                "seller_id": "s1",
                "message": "sell 599 x2 red cod",
                "product_id": "p1"
            }
        }


class ChatMessageResponse(BaseModel):
    """Stored chat message."""
    message_id: str
    chat_id: str
    sender_id: str
    message_type: str
    content: str
    created_at: datetime
    metadata: Dict[str, Any] = {}

    @classmethod
    def from_message(cls, message: ChatMessage) -> "ChatMessageResponse":
        return cls(
            message_id=message.message_id,
            chat_id=message.chat_id,
            sender_id=message.sender_id,
            message_type=message.message_type.value,
            content=message.content,
            created_at=message.created_at,
            metadata=dict(message.metadata),
        )


class ChatMessageCreateResponse(BaseModel):
    """Outcome of sending a chat message."""
    kind: str  # "text", "order" or "rejected"
    messages: List[ChatMessageResponse]
    command: Optional[SellCommandResponse] = None
    order: Optional[OrderPayloadResponse] = None
    error: Optional[str] = None
