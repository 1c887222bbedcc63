"""
Domain: Chat messages exchanged between a buyer and a seller.

A message is one of four kinds:
- text: ordinary chat text
- product: a product card (metadata carries product_id)
- order: a sell command that produced an order preview
- system: an automated notice posted by the platform
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Mapping, Optional

from .time import require_utc_timestamp


class MessageType(str, Enum):
    TEXT = "text"
    PRODUCT = "product"
    ORDER = "order"
    SYSTEM = "system"


@dataclass(frozen=True, slots=True)
class ChatMessage:
    """Immutable chat message as stored in the chat_messages table."""

    message_id: str
    chat_id: str
    sender_id: str
    message_type: MessageType
    content: str
    created_at: datetime
    metadata: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        require_utc_timestamp("created_at", self.created_at)

    @property
    def product_id(self) -> Optional[str]:
        """Product referenced by a product message, if any."""
        value = self.metadata.get("product_id") if self.metadata else None
        return str(value) if value else None
