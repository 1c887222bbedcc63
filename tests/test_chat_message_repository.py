"""
Tests for `repositories/chat_message_repository.py`.

A fake Supabase client records the query-builder calls so the repository can
be checked without a database.
"""

from __future__ import annotations

from datetime import datetime, timezone
from types import SimpleNamespace
from typing import Any

import pytest

from domain.chat_message import MessageType
from repositories import chat_message_repository


class FakeQuery:
    def __init__(self, table: str, client: "FakeSupabase") -> None:
        self.table = table
        self.client = client
        self.calls: list[tuple[str, Any]] = []

    def __getattr__(self, name: str):
        def record(*args, **kwargs):
            self.calls.append((name, args))
            return self
        return record

    def execute(self):
        self.client.executed.append(self)
        return self.client.response


class FakeSupabase:
    def __init__(self, data=None, error=None) -> None:
        self.response = SimpleNamespace(data=data, error=error)
        self.executed: list[FakeQuery] = []

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(name, self)


@pytest.fixture
def fake_supabase(monkeypatch):
    def install(data=None, error=None) -> FakeSupabase:
        fake = FakeSupabase(data=data, error=error)
        monkeypatch.setattr(chat_message_repository, "get_supabase", lambda: fake)
        return fake
    return install


_ROW = {
    "id": "m1",
    "chat_id": "c1",
    "sender_id": "s1",
    "message_type": "order",
    "content": "sell 599",
    "created_at": "2025-01-01T10:00:00Z",
    "metadata": {"status": "pending"},
}


def test_insert_chat_message_returns_stored_row(fake_supabase) -> None:
    fake = fake_supabase(data=[_ROW])

    message = chat_message_repository.insert_chat_message(
        "c1", "s1", MessageType.ORDER, "sell 599", {"status": "pending"}
    )

    assert message.message_id == "m1"
    assert message.message_type is MessageType.ORDER
    assert message.created_at == datetime(2025, 1, 1, 10, 0, tzinfo=timezone.utc)
    query = fake.executed[0]
    assert query.table == "chat_messages"
    name, args = query.calls[0]
    assert name == "insert"
    assert args[0]["message_type"] == "order"
    assert args[0]["metadata"] == {"status": "pending"}


def test_insert_chat_message_raises_on_error(fake_supabase) -> None:
    fake_supabase(error="permission denied")

    with pytest.raises(RuntimeError, match="Failed to insert chat message"):
        chat_message_repository.insert_chat_message("c1", "s1", MessageType.TEXT, "hi")


def test_get_latest_product_message_none_when_empty(fake_supabase) -> None:
    fake_supabase(data=[])

    assert chat_message_repository.get_latest_product_message("c1") is None


def test_get_latest_product_message(fake_supabase) -> None:
    row = dict(_ROW, message_type="product", metadata={"product_id": "p1"})
    fake = fake_supabase(data=[row])

    message = chat_message_repository.get_latest_product_message("c1")

    assert message.product_id == "p1"
    assert ("eq", ("message_type", "product")) in fake.executed[0].calls


def test_touch_chat_requires_utc(fake_supabase) -> None:
    fake_supabase(data=[])

    with pytest.raises(ValueError):
        chat_message_repository.touch_chat("c1", "s1", datetime(2025, 1, 1))


def test_touch_chat_updates_chat_row(fake_supabase) -> None:
    fake = fake_supabase(data=[])
    at = datetime(2025, 1, 1, tzinfo=timezone.utc)

    chat_message_repository.touch_chat("c1", "s1", at)

    query = fake.executed[0]
    assert query.table == "chats"
    assert query.calls[0] == ("update", ({"last_message_at": at.isoformat(), "last_message_by": "s1"},))
