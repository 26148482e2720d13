from __future__ import annotations

import pytest

from chatbot.memory import ConversationMemory
from chatbot.models import MessageRole


def _pairs(memory: ConversationMemory) -> list[tuple[str, str]]:
    return [(m.role.value, m.content) for m in memory.snapshot()]


def test_preamble_seeds_history_and_survives_clear() -> None:
    memory = ConversationMemory("You are terse.")
    memory.append_user("Hi")
    memory.append_assistant("Hello.")

    assert _pairs(memory) == [
        ("system", "You are terse."),
        ("user", "Hi"),
        ("assistant", "Hello."),
    ]

    memory.clear()

    assert _pairs(memory) == [("system", "You are terse.")]


def test_history_without_preamble_starts_and_clears_empty() -> None:
    memory = ConversationMemory()
    assert memory.snapshot() == []

    memory.append_user("Hi")
    memory.clear()

    assert memory.snapshot() == []
    assert memory.preamble is None


def test_blank_preamble_is_ignored() -> None:
    assert ConversationMemory("   ").snapshot() == []


@pytest.mark.parametrize("preamble", [None, "Be kind."])
def test_snapshot_length_and_order_follow_calls(preamble: str | None) -> None:
    memory = ConversationMemory(preamble)
    calls = ["user", "user", "assistant", "user", "assistant", "assistant"]
    for index, role in enumerate(calls):
        if role == "user":
            memory.append_user(f"u{index}")
        else:
            memory.append_assistant(f"a{index}")

    snapshot = memory.snapshot()
    offset = 1 if preamble else 0

    assert len(snapshot) == len(calls) + offset
    assert [m.role.value for m in snapshot[offset:]] == calls
    if preamble:
        assert snapshot[0].role == MessageRole.SYSTEM
    assert len(memory) == len(snapshot)


def test_set_preamble_moves_system_message_to_front() -> None:
    memory = ConversationMemory("Old.")
    memory.append_user("Hi")
    memory.append_assistant("Hello.")

    memory.set_preamble("New.")

    assert _pairs(memory) == [("system", "New."), ("user", "Hi"), ("assistant", "Hello.")]
    assert memory.preamble == "New."


def test_set_preamble_on_empty_history() -> None:
    memory = ConversationMemory()
    memory.append_user("Hi")

    memory.set_preamble("Be terse.")
    memory.clear()

    assert _pairs(memory) == [("system", "Be terse.")]


def test_set_preamble_is_idempotent() -> None:
    memory = ConversationMemory()
    memory.append_user("Hi")

    memory.set_preamble("Be terse.")
    once = memory.snapshot()
    memory.set_preamble("Be terse.")
    twice = memory.snapshot()

    assert once == twice


def test_set_preamble_rejects_empty_text() -> None:
    with pytest.raises(ValueError):
        ConversationMemory().set_preamble("")


def test_remove_preamble() -> None:
    memory = ConversationMemory("Be terse.")
    memory.append_user("Hi")

    memory.remove_preamble()
    memory.clear()

    assert memory.snapshot() == []


def test_snapshot_is_independent_copy() -> None:
    memory = ConversationMemory("Be terse.")
    memory.append_user("Hi")

    snapshot = memory.snapshot()
    snapshot[1].content = "tampered"
    snapshot.append(snapshot[0])

    assert _pairs(memory) == [("system", "Be terse."), ("user", "Hi")]


def test_outbound_request_never_contains_system_messages() -> None:
    memory = ConversationMemory("Be terse.")
    memory.append_user("Hi")
    memory.append_assistant("Hello.")
    memory.set_preamble("Be verbose.")
    memory.append_user("Again")

    outbound = memory.for_outbound_request()

    assert [(m.role.value, m.content) for m in outbound] == [
        ("user", "Hi"),
        ("assistant", "Hello."),
        ("user", "Again"),
    ]
    assert all(m.role != MessageRole.SYSTEM for m in outbound)
