"""
Chats API Endpoints.

Endpoint for sending messages into a buyer/seller chat, where the seller's
sell commands become order previews.
"""

from fastapi import APIRouter, HTTPException

from api.models import (
    ChatMessageCreateRequest,
    ChatMessageCreateResponse,
    ChatMessageResponse,
    OrderPayloadResponse,
    SellCommandResponse,
)
from services.chat_command_service import (
    ChatCommandError,
    ChatMessageRequest,
    handle_chat_message,
)

router = APIRouter()


@router.post(
    "/chats/{chat_id}/messages",
    response_model=ChatMessageCreateResponse,
    summary="Send Chat Message",
    description="Send a chat message. Seller sell commands create an order preview."
)
def send_chat_message(chat_id: str, request: ChatMessageCreateRequest):
    """
    Send a message into a chat.

    **Process:**
    1. Messages from the buyer, and seller messages not starting with `sell`,
       are stored as plain text
    2. Seller sell commands are parsed; invalid ones are rejected (nothing stored)
    3. Valid commands store an `order` message carrying the order preview,
       followed by a `system` message summarizing the order

    **Example request:**
    ```json
    {
      "sender_id": "s1",
      "buyer_id": "b1",
      "seller_id": "s1",
      "message": "sell 599 x2 red cod",
      "product_id": "p1"
    }
    ```
    """
    try:
        outcome = handle_chat_message(
            ChatMessageRequest(
                chat_id=chat_id,
                sender_id=request.sender_id,
                buyer_id=request.buyer_id,
                seller_id=request.seller_id,
                message=request.message,
                product_id=request.product_id,
            )
        )

        return ChatMessageCreateResponse(
            kind=outcome.kind,
            messages=[ChatMessageResponse.from_message(m) for m in outcome.messages],
            command=SellCommandResponse.from_result(outcome.command) if outcome.command else None,
            order=OrderPayloadResponse.from_order(outcome.order) if outcome.order else None,
            error=outcome.error,
        )

    except HTTPException:
        raise
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ChatCommandError as e:
        raise HTTPException(
            status_code=500,
            detail=f"Failed to send chat message: {str(e)}"
        )
    except Exception as e:
        raise HTTPException(
            status_code=500,
            detail=f"Failed to handle chat message: {str(e)}"
        )
