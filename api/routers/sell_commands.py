"""
Sell Command API Endpoints.

Endpoints for parsing chat sell commands and previewing the orders they
would create. Nothing here touches the database.
"""

from fastapi import APIRouter, HTTPException

from api.models import (
    OrderPayloadResponse,
    OrderPreviewRequest,
    ProductReferenceResponse,
    SellCommandRequest,
    SellCommandResponse,
)
from services.order_projection_service import (
    InvalidSellCommandError,
    generate_order_from_command,
)
from services.sell_command_parser import extract_product_reference, parse_sell_command

router = APIRouter()


@router.post(
    "/sell-commands/parse",
    response_model=SellCommandResponse,
    summary="Parse Sell Command",
    description="Parse a chat message as a sell command. Invalid commands are reported in the body."
)
def parse_command(request: SellCommandRequest):
    """
    Parse a chat message into price, quantity, variants, discount and payment
    method.

    Always returns 200: a message that is not a valid sell command comes back
    with `is_valid: false` and an `error` so the caller can treat it as plain
    chat text.

    **Example request:**
    ```json
    {"message": "sell 599 x2 10% off red medium cod"}
    ```
    """
    return SellCommandResponse.from_result(parse_sell_command(request.message))


@router.post(
    "/sell-commands/preview",
    response_model=OrderPayloadResponse,
    summary="Preview Order",
    description="Project a sell command onto the order payload it would create."
)
def preview_order(request: OrderPreviewRequest):
    """
    Compute the order-creation payload for a sell command.

    **Pricing:**
    - subtotal = price x quantity
    - percentage discount multiplies by (1 - value/100)
    - fixed discount subtracts value, never below zero
    - payment method defaults to UPI

    Returns 422 when the message is not a valid sell command.
    """
    try:
        command = parse_sell_command(request.message)

        if not command.is_valid:
            raise HTTPException(
                status_code=422,
                detail=command.error or "Invalid sell command"
            )

        order = generate_order_from_command(
            command,
            request.product_id,
            request.buyer_id,
            request.seller_id,
        )
        return OrderPayloadResponse.from_order(order)

    except HTTPException:
        raise
    except InvalidSellCommandError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except Exception as e:
        raise HTTPException(
            status_code=500,
            detail=f"Failed to preview order: {str(e)}"
        )


@router.post(
    "/sell-commands/product-reference",
    response_model=ProductReferenceResponse,
    summary="Extract Product Reference",
    description="Find product references (#12, item 7, 'this') in free chat text."
)
def product_reference(request: SellCommandRequest):
    """
    Extract a product reference and descriptive words from a chat message.
    """
    return ProductReferenceResponse.from_reference(extract_product_reference(request.message))
