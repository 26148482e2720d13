"""Command-line entry point for the chatbot.

Loads settings, configures logging, lets the user pick a preset and then
hands control to :class:`~chatbot.controllers.shell_controller.ChatShell`.
Run it as ``chatbot`` or ``python -m chatbot``.
"""

from __future__ import annotations

import argparse
import sys
from typing import Callable, Optional

from loguru import logger
from pydantic import ValidationError

from .config.app_config import get_app_config
from .config.llm_config import LlmConfig, get_llm_config
from .controllers.shell_controller import ChatShell
from .models.chatbot_config import ChatbotConfig
from .models.enums import ChatbotPreset
from .services.chat_service import Chatbot
from .services.llm_service import ChatClient, LLMService
from .utils.logger import setup_logging

PRESET_CHOICES = {
    "1": ChatbotPreset.PRECISE,
    "2": ChatbotPreset.BALANCED,
    "3": ChatbotPreset.CREATIVE,
}


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Chat with a Cohere model from the terminal.")
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "--preset",
        choices=[preset.value for preset in ChatbotPreset],
        help="Start with a named preset instead of asking.",
    )
    mode.add_argument(
        "--custom",
        action="store_true",
        help="Skip presets; use the defaults and enable the 'preamble' command.",
    )
    parser.add_argument("--stream", action="store_true", help="Stream replies as they are generated.")
    return parser.parse_args(argv)


def select_preset(input_func: Callable[[str], str] = input) -> ChatbotPreset:
    """Ask the user for a preset, defaulting to balanced."""
    print("Choose your chatbot style:")
    print("1. Precise - Focused on accuracy (temperature: 0.0)")
    print("2. Balanced - General conversation (temperature: 0.3)")
    print("3. Creative - Imaginative responses (temperature: 1.0)")
    choice = input_func("\nSelect (1-3) [default: 2]: ").strip() or "2"
    return PRESET_CHOICES.get(choice, ChatbotPreset.BALANCED)


def create_chatbot(args: argparse.Namespace, client: ChatClient) -> Chatbot:
    """Build the chatbot described by the command-line arguments."""
    overrides = ChatbotConfig(enable_streaming=True) if args.stream else None
    if args.custom:
        return Chatbot(client, overrides)
    preset = ChatbotPreset(args.preset) if args.preset else select_preset()
    print(f"\nChatbot initialised with {preset.value} preset")
    return Chatbot.from_preset(client, preset, overrides)


def main(argv: Optional[list[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging(get_app_config())

    try:
        llm_config: LlmConfig = get_llm_config()
    except ValidationError:
        logger.opt(exception=True).debug("LLM configuration could not be loaded")
        print("COHERE_API_KEY is not set in your environment or .env file.", file=sys.stderr)
        print("Add it as COHERE_API_KEY=your_actual_api_key_here", file=sys.stderr)
        print("Get your API key from: https://dashboard.cohere.com/", file=sys.stderr)
        return 1

    print("Cohere Chatbot")
    print("==============\n")

    chatbot = create_chatbot(args, LLMService(llm_config))
    print(f"Mode: {chatbot.get_preset_info()}\n")

    ChatShell(chatbot, allow_preamble=args.custom).run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
