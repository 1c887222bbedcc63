"""
Pytest configuration.

Adds the project root to the Python path so tests can import domain,
services, repositories and api, and provides an in-memory stand-in for the
chat message repository so no test needs Supabase credentials.
"""

import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping, Optional

import pytest

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from domain.chat_message import ChatMessage, MessageType  # noqa: E402
from repositories import chat_message_repository  # noqa: E402


class InMemoryChatStore:
    """Records chat messages and chat updates instead of calling Supabase."""

    def __init__(self) -> None:
        self.messages: list[ChatMessage] = []
        self.touched: list[tuple[str, str, datetime]] = []
        self._counter = 0

    def insert_chat_message(
        self,
        chat_id: str,
        sender_id: str,
        message_type: MessageType,
        content: str,
        metadata: Optional[Mapping[str, Any]] = None,
    ) -> ChatMessage:
        self._counter += 1
        message = ChatMessage(
            message_id=f"m{self._counter}",
            chat_id=chat_id,
            sender_id=sender_id,
            message_type=message_type,
            content=content,
            created_at=datetime(2025, 1, 1, 12, 0, self._counter, tzinfo=timezone.utc),
            metadata=dict(metadata) if metadata else {},
        )
        self.messages.append(message)
        return message

    def get_latest_product_message(self, chat_id: str) -> Optional[ChatMessage]:
        products = [
            m for m in self.messages
            if m.chat_id == chat_id and m.message_type is MessageType.PRODUCT
        ]
        return products[-1] if products else None

    def touch_chat(self, chat_id: str, sender_id: str, at: datetime) -> None:
        self.touched.append((chat_id, sender_id, at))


@pytest.fixture
def chat_store(monkeypatch) -> InMemoryChatStore:
    store = InMemoryChatStore()
    monkeypatch.setattr(chat_message_repository, "insert_chat_message", store.insert_chat_message)
    monkeypatch.setattr(chat_message_repository, "get_latest_product_message", store.get_latest_product_message)
    monkeypatch.setattr(chat_message_repository, "touch_chat", store.touch_chat)
    return store
