"""Interactive command loop for a chatbot session.

The shell reads lines from the user, handles the built-in commands and
sends everything else to the chatbot as a turn.  Input and output are
injectable so the loop can be driven without a terminal.
"""

from __future__ import annotations

import sys
from typing import Callable, Optional, TextIO

from loguru import logger

from ..prompts.templates import list_templates
from ..services.chat_service import Chatbot
from ..utils.error_handler import ChatError, TemplateNotFoundError

SEPARATOR = "=" * 24


class ChatShell:
    """Read-eval-print loop around a :class:`Chatbot`.

    Parameters
    ----------
    chatbot: Chatbot
        The session to drive.
    allow_preamble: bool
        Enables the ``preamble`` command.  Used in custom mode, where no
        preset supplies the preamble.
    input_func: callable
        Prompt function returning one line, ``input`` by default.
    output: TextIO
        Stream the conversation is written to, ``sys.stdout`` by default.
    """

    def __init__(
        self,
        chatbot: Chatbot,
        *,
        allow_preamble: bool = False,
        input_func: Callable[[str], str] = input,
        output: Optional[TextIO] = None,
    ) -> None:
        self.chatbot = chatbot
        self.allow_preamble = allow_preamble
        self._input = input_func
        self._output = output or sys.stdout

    def run(self) -> None:
        """Loop until ``quit``/``exit`` or end of input."""
        self.print_help()
        while True:
            try:
                line = self._input("You: ")
            except (EOFError, KeyboardInterrupt):
                self._write("\nGoodbye!")
                break
            if not self.handle_line(line):
                break

    def handle_line(self, line: str) -> bool:
        """Process one line of input; return ``False`` to stop the loop."""
        command = line.strip().lower()

        if command in ("quit", "exit"):
            self._write("Goodbye!")
            return False
        if command == "clear":
            self.chatbot.clear_history()
            self._write("Conversation history cleared!\n")
        elif command == "history":
            self.print_history()
        elif command == "streaming":
            enabled = not self.chatbot.get_config().enable_streaming
            self.chatbot.update_config(enable_streaming=enabled)
            self._write(f"Streaming mode {'enabled' if enabled else 'disabled'}\n")
        elif command == "templates":
            self.print_templates()
        elif command == "template":
            self._write("Usage: template <name>\n")
        elif command.startswith("template "):
            self.activate_template(line.strip()[len("template "):].strip())
        elif command == "no-template":
            self.chatbot.clear_template()
            self._write("Template deactivated\n")
        elif command == "info":
            self.print_info()
        elif command == "preamble" and self.allow_preamble:
            self.change_preamble()
        elif command:
            self.send(line)
        return True

    def send(self, text: str) -> None:
        """Send one turn, printing the reply or the failure."""
        streaming = self.chatbot.get_config().enable_streaming
        self._write("Assistant: ", end="")
        try:
            reply = self.chatbot.send_templated_message(
                text, on_fragment=self._write_fragment if streaming else None
            )
        except (ChatError, TemplateNotFoundError) as exc:
            logger.warning("Turn failed: {}", exc)
            self._write(f"\nError: {exc}\n")
            return
        if streaming:
            self._write("\n")
        else:
            self._write(f"{reply}\n")

    def activate_template(self, name: str) -> None:
        if self.chatbot.set_template(name):
            self._write(f"Template '{name}' activated\n")
        else:
            self._write(f"Template '{name}' not found. Type 'templates' to list them.\n")

    def change_preamble(self) -> None:
        text = self._input("New preamble: ").strip()
        if not text:
            self._write("Preamble unchanged\n")
            return
        self.chatbot.set_preamble(text)
        self._write("Preamble updated\n")

    def print_help(self) -> None:
        self._write("Available commands:")
        self._write('- "quit" or "exit" to end the conversation')
        self._write('- "clear" to clear conversation history')
        self._write('- "history" to see conversation history')
        self._write('- "streaming" to toggle streaming mode')
        self._write('- "templates" to list prompt templates')
        self._write('- "template <name>" to activate a template')
        self._write('- "no-template" to deactivate the template')
        if self.allow_preamble:
            self._write('- "preamble" to set a new preamble')
        self._write('- "info" to see current configuration\n')

    def print_history(self) -> None:
        self._write("\nConversation History:")
        self._write(SEPARATOR)
        for index, message in enumerate(self.chatbot.get_conversation_history(), start=1):
            timestamp = message.timestamp.astimezone().strftime("%H:%M:%S")
            self._write(f"{index}. [{timestamp}] {message.role.value.upper()}: {message.content}")
        self._write(SEPARATOR + "\n")

    def print_templates(self) -> None:
        self._write("\nAvailable Prompt Templates:")
        for index, (name, description) in enumerate(list_templates(), start=1):
            self._write(f"{index}. {name} - {description}")
        self._write("")

    def print_info(self) -> None:
        config = self.chatbot.get_config()
        self._write("\nCurrent Configuration:")
        self._write(SEPARATOR)
        self._write(f"Model: {config.model}")
        self._write(f"Temperature: {config.temperature}")
        self._write(f"Max Tokens: {config.max_tokens}")
        self._write(f"Streaming: {'enabled' if config.enable_streaming else 'disabled'}")
        self._write(f"Template: {config.active_template or 'none'}")
        self._write(f"Mode: {self.chatbot.get_preset_info()}")
        self._write(SEPARATOR + "\n")

    def _write_fragment(self, fragment: str) -> None:
        self._write(fragment, end="")

    def _write(self, text: str, end: str = "\n") -> None:
        self._output.write(text + end)
        self._output.flush()
