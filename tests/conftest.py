from __future__ import annotations

import sys
from pathlib import Path
from typing import Iterator, Sequence

import pytest

repo_root = Path(__file__).resolve().parents[1]
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from chatbot.models import ChatMessage


class FakeChatClient:
    """Chat client double that records calls and replays canned output."""

    def __init__(
        self,
        replies: Sequence[str] = ("Hello.",),
        fragments: Sequence[str] = (),
        error: Exception | None = None,
    ) -> None:
        self.replies = list(replies)
        self.fragments = list(fragments)
        self.error = error
        self.calls: list[dict[str, object]] = []

    def _record(self, kind: str, model, messages, temperature, max_tokens) -> None:
        self.calls.append(
            {
                "kind": kind,
                "model": model,
                "messages": [(m.role.value, m.content) for m in messages],
                "temperature": temperature,
                "max_tokens": max_tokens,
            }
        )

    def complete_once(
        self, model: str, messages: Sequence[ChatMessage], temperature: float, max_tokens: int
    ) -> str:
        self._record("once", model, messages, temperature, max_tokens)
        if self.error is not None:
            raise self.error
        return self.replies.pop(0) if self.replies else ""

    def complete_streaming(
        self, model: str, messages: Sequence[ChatMessage], temperature: float, max_tokens: int
    ) -> Iterator[str]:
        self._record("stream", model, messages, temperature, max_tokens)
        for fragment in self.fragments:
            yield fragment
        if self.error is not None:
            raise self.error


@pytest.fixture
def fake_client() -> FakeChatClient:
    return FakeChatClient()
