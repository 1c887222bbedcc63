"""
Chat message repository (persistence).

Thin wrappers over the existing ``chat_messages`` and ``chats`` tables. No
business rules live here: deciding what to store is the chat command
service's job.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Mapping, Optional

from domain.chat_message import ChatMessage, MessageType
from domain.time import parse_utc_datetime, require_utc_timestamp, utc_now
from repositories.client import get_supabase

_CHAT_MESSAGES_TABLE: str = "chat_messages"
_CHATS_TABLE: str = "chats"


def _row_to_message(row: Mapping[str, Any]) -> ChatMessage:
    """Convert a Supabase row into a ChatMessage."""

    return ChatMessage(
        message_id=str(row["id"]),
        chat_id=str(row["chat_id"]),
        sender_id=str(row["sender_id"]),
        message_type=MessageType(str(row["message_type"])),
        content=str(row.get("content") or ""),
        created_at=parse_utc_datetime(row["created_at"]) if row.get("created_at") else utc_now(),
        metadata=row.get("metadata") or {},
    )


def insert_chat_message(
    chat_id: str,
    sender_id: str,
    message_type: MessageType,
    content: str,
    metadata: Optional[Mapping[str, Any]] = None,
) -> ChatMessage:
    """
    Insert a chat message and return the stored row.

    Args:
        chat_id: Chat the message belongs to
        sender_id: User who sent it
        message_type: text, product, order or system
        content: Message text
        metadata: Optional JSON metadata (order preview, product card, ...)

    Returns:
        ChatMessage as stored by Supabase
    """

    payload: dict[str, Any] = {
        "chat_id": chat_id,
        "sender_id": sender_id,
        "message_type": message_type.value,
        "content": content,
    }
    if metadata is not None:
        payload["metadata"] = dict(metadata)

    response = get_supabase().table(_CHAT_MESSAGES_TABLE).insert(payload).execute()
    error = getattr(response, "error", None)
    if error:
        raise RuntimeError(f"Failed to insert chat message: {error}")

    rows = getattr(response, "data", None) or []
    if not rows:
        raise RuntimeError("Failed to insert chat message: no row returned")

    return _row_to_message(rows[0])


def get_latest_product_message(chat_id: str) -> Optional[ChatMessage]:
    """
    Most recent ``product`` message in a chat, used to resolve which product a
    sell command refers to.
    """

    response = (
        get_supabase().table(_CHAT_MESSAGES_TABLE)
        .select("*")
        .eq("chat_id", chat_id)
        .eq("message_type", MessageType.PRODUCT.value)
        .order("created_at", desc=True)
        .limit(1)
        .execute()
    )
    error = getattr(response, "error", None)
    if error:
        raise RuntimeError(f"Failed to fetch product message: {error}")

    rows = getattr(response, "data", None) or []

    if not rows:
        return None

    return _row_to_message(rows[0])


def touch_chat(chat_id: str, sender_id: str, at: datetime) -> None:
    """Record who spoke last in a chat and when."""

    require_utc_timestamp("at", at)

    response = (
        get_supabase().table(_CHATS_TABLE)
        .update({"last_message_at": at.isoformat(), "last_message_by": sender_id})
        .eq("id", chat_id)
        .execute()
    )
    error = getattr(response, "error", None)
    if error:
        raise RuntimeError(f"Failed to update chat: {error}")


__all__ = [
    "insert_chat_message",
    "get_latest_product_message",
    "touch_chat",
]
