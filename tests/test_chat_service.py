from __future__ import annotations

import pytest

from chatbot.models import ChatbotConfig, ChatbotPreset
from chatbot.prompts import apply_template, get_template
from chatbot.services.chat_service import NO_RESPONSE_PLACEHOLDER, Chatbot
from chatbot.utils.error_handler import ChatError, ConfigurationError, TemplateNotFoundError

from conftest import FakeChatClient


def _pairs(bot: Chatbot) -> list[tuple[str, str]]:
    return [(m.role.value, m.content) for m in bot.get_conversation_history()]


def test_send_message_commits_turn_and_builds_payload(fake_client: FakeChatClient) -> None:
    bot = Chatbot(fake_client, ChatbotConfig(preamble="You are terse.", max_tokens=42))

    reply = bot.send_message("Hi")

    assert reply == "Hello."
    assert _pairs(bot) == [("system", "You are terse."), ("user", "Hi"), ("assistant", "Hello.")]
    assert fake_client.calls == [
        {
            "kind": "once",
            "model": "command-r-plus",
            "messages": [("user", "Hi")],
            "temperature": 0.3,
            "max_tokens": 42,
        }
    ]


def test_second_turn_sends_full_history() -> None:
    client = FakeChatClient(replies=["One.", "Two."])
    bot = Chatbot(client)

    bot.send_message("first")
    bot.send_message("second")

    assert client.calls[1]["messages"] == [("user", "first"), ("assistant", "One."), ("user", "second")]


def test_empty_reply_is_replaced_with_placeholder() -> None:
    bot = Chatbot(FakeChatClient(replies=[""]))

    assert bot.send_message("Hi") == NO_RESPONSE_PLACEHOLDER
    assert _pairs(bot)[-1] == ("assistant", NO_RESPONSE_PLACEHOLDER)


def test_streaming_concatenates_fragments_in_order() -> None:
    client = FakeChatClient(fragments=["Hel", "lo"])
    bot = Chatbot(client, ChatbotConfig(enable_streaming=True))
    seen: list[str] = []

    reply = bot.send_message("Hi", on_fragment=seen.append)

    assert reply == "Hello"
    assert seen == ["Hel", "lo"]
    assert _pairs(bot)[-1] == ("assistant", "Hello")
    assert client.calls[0]["kind"] == "stream"


def test_streaming_without_observer() -> None:
    bot = Chatbot(FakeChatClient(fragments=["a", "b", "c"]), ChatbotConfig(enable_streaming=True))

    assert bot.send_message("Hi") == "abc"


def test_failed_dispatch_keeps_user_message() -> None:
    cause = ConnectionError("network down")
    bot = Chatbot(FakeChatClient(error=cause), ChatbotConfig(preamble="Be terse."))

    with pytest.raises(ChatError) as excinfo:
        bot.send_message("Hi")

    assert excinfo.value.__cause__ is cause
    assert _pairs(bot) == [("system", "Be terse."), ("user", "Hi")]


def test_interrupted_stream_is_a_chat_error() -> None:
    client = FakeChatClient(fragments=["Hel"], error=RuntimeError("stream closed"))
    bot = Chatbot(client, ChatbotConfig(enable_streaming=True))

    with pytest.raises(ChatError):
        bot.send_message("Hi")

    assert _pairs(bot) == [("user", "Hi")]


def test_retry_after_failure_duplicates_user_message() -> None:
    client = FakeChatClient(error=TimeoutError("slow"))
    bot = Chatbot(client)
    with pytest.raises(ChatError):
        bot.send_message("Hi")

    client.error = None
    bot.send_message("Hi")

    assert _pairs(bot) == [("user", "Hi"), ("user", "Hi"), ("assistant", "Hello.")]


def test_templated_message_uses_active_template(fake_client: FakeChatClient) -> None:
    bot = Chatbot(fake_client)

    assert bot.set_template("code") is True
    bot.send_templated_message("sort an array")

    expected = apply_template(get_template("code"), "sort an array")
    assert fake_client.calls[0]["messages"] == [("user", expected)]
    assert bot.get_active_template() == "code"


def test_templated_message_without_template_sends_raw_text(fake_client: FakeChatClient) -> None:
    bot = Chatbot(fake_client)

    bot.send_templated_message("plain")

    assert fake_client.calls[0]["messages"] == [("user", "plain")]


def test_unknown_template_leaves_config_unchanged(fake_client: FakeChatClient) -> None:
    bot = Chatbot(fake_client)
    bot.set_template("qa")
    before = bot.get_config()

    assert bot.set_template("nonexistent") is False
    assert bot.get_config() == before
    assert bot.get_active_template() == "qa"


def test_clear_template(fake_client: FakeChatClient) -> None:
    bot = Chatbot(fake_client)
    bot.set_template("creative")

    bot.clear_template()
    bot.send_templated_message("raw")

    assert bot.get_active_template() is None
    assert fake_client.calls[0]["messages"] == [("user", "raw")]


def test_unresolvable_active_template_commits_nothing(
    fake_client: FakeChatClient, monkeypatch: pytest.MonkeyPatch
) -> None:
    bot = Chatbot(fake_client)
    bot.set_template("code")
    monkeypatch.setattr("chatbot.services.chat_service.get_template", lambda name: None)

    with pytest.raises(TemplateNotFoundError):
        bot.send_templated_message("sort an array")

    assert bot.get_conversation_history() == []
    assert fake_client.calls == []


def test_preset_then_overrides_precedence(fake_client: FakeChatClient) -> None:
    bot = Chatbot.from_preset(fake_client, ChatbotPreset.CREATIVE, ChatbotConfig(max_tokens=64))
    config = bot.get_config()

    assert config.temperature == 1.0
    assert config.max_tokens == 64
    assert config.preamble.startswith("You are a creative")
    assert bot.get_preset_info() == "creative (imaginative responses)"
    assert _pairs(bot)[0][0] == "system"


def test_precise_preset_reports_precise(fake_client: FakeChatClient) -> None:
    bot = Chatbot.from_preset(fake_client, "precise")

    assert bot.get_preset_info() == "precise (focused on accuracy)"
    bot.send_message("Hi")
    assert fake_client.calls[0]["temperature"] == 0.0


def test_unknown_preset_raises(fake_client: FakeChatClient) -> None:
    with pytest.raises(ConfigurationError):
        Chatbot.from_preset(fake_client, "wild")


def test_update_config_merges_fields(fake_client: FakeChatClient) -> None:
    bot = Chatbot(fake_client)

    bot.update_config(temperature=0.6, enable_streaming=True)

    config = bot.get_config()
    assert config.temperature == 0.6
    assert config.enable_streaming is True
    assert config.max_tokens == 500
    assert bot.get_preset_info() == "custom (temperature: 0.6)"


def test_update_config_rejects_malformed_override(fake_client: FakeChatClient) -> None:
    bot = Chatbot(fake_client)
    before = bot.get_config()

    with pytest.raises(ConfigurationError):
        bot.update_config(temperature=3.0)
    with pytest.raises(ConfigurationError):
        bot.update_config(active_template="nonexistent")
    with pytest.raises(ConfigurationError):
        bot.update_config(colour="blue")

    assert bot.get_config() == before


def test_update_config_preamble_keeps_history_in_sync(fake_client: FakeChatClient) -> None:
    bot = Chatbot(fake_client)
    bot.send_message("Hi")

    bot.update_config(ChatbotConfig(preamble="Be brief."))
    assert _pairs(bot)[0] == ("system", "Be brief.")

    bot.update_config(preamble=None)
    assert [role for role, _ in _pairs(bot)] == ["user", "assistant"]


def test_set_preamble_updates_config_and_clear(fake_client: FakeChatClient) -> None:
    bot = Chatbot(fake_client)
    bot.send_message("Hi")

    bot.set_preamble("You are a pirate.")
    bot.set_preamble("You are a pirate.")
    assert bot.get_config().preamble == "You are a pirate."
    assert [role for role, _ in _pairs(bot)] == ["system", "user", "assistant"]

    bot.clear_history()
    assert _pairs(bot) == [("system", "You are a pirate.")]


def test_history_copy_does_not_leak(fake_client: FakeChatClient) -> None:
    bot = Chatbot(fake_client)
    bot.send_message("Hi")

    history = bot.get_conversation_history()
    history.clear()

    assert len(bot.get_conversation_history()) == 2


def test_outbound_payload_excludes_preamble(fake_client: FakeChatClient) -> None:
    bot = Chatbot.from_preset(fake_client, ChatbotPreset.BALANCED)

    bot.send_message("Hi")

    assert all(role != "system" for role, _ in fake_client.calls[0]["messages"])
