"""Prompt templates for specialised chatbot interactions.

Each template wraps the user's raw input in instructions tailored to a
particular kind of request.  The default registry is built once at import
time and is shared by every chatbot in the process.
"""

from __future__ import annotations

from typing import Iterable, Optional

from ..models.prompt_template import USER_INPUT_MARKER, PromptTemplate

GENERAL_TEMPLATE = (
    "You are a helpful and friendly AI assistant. Please answer the user's question "
    "clearly and helpfully.\n\n"
    "User question: {user_input}\n\n"
    "Please provide a clear and helpful response:"
)

CODE_TEMPLATE = (
    "You are an expert programmer and coding mentor. Help the user with their "
    "programming question or problem.\n\n"
    "Programming question: {user_input}\n\n"
    "Please provide:\n"
    "1. A clear explanation\n"
    "2. Code examples if needed\n"
    "3. Best practices or tips\n\n"
    "Response:"
)

CREATIVE_TEMPLATE = (
    "You are a creative writing assistant. Help the user with creative tasks like "
    "stories, poems, or creative ideas.\n\n"
    "Creative request: {user_input}\n\n"
    "Please be imaginative, engaging, and help bring their creative vision to life:"
)

QA_TEMPLATE = (
    "You are a knowledgeable expert. Answer the user's question with accurate, "
    "well-structured information.\n\n"
    "Question: {user_input}\n\n"
    "Please provide:\n"
    "- A direct answer\n"
    "- Supporting details\n"
    "- Relevant context if helpful\n\n"
    "Answer:"
)


class PromptTemplateRegistry:
    """Ordered collection of prompt templates keyed by name.

    Lookups are case-sensitive.  Iteration follows registration order,
    which is also the order shown to users.
    """

    def __init__(self, templates: Iterable[PromptTemplate] = ()) -> None:
        self._templates: dict[str, PromptTemplate] = {}
        for template in templates:
            self.register(template)

    def register(self, template: PromptTemplate) -> None:
        """Add a template; names must be unique."""
        if template.name in self._templates:
            raise ValueError(f"Prompt template {template.name!r} is already registered")
        self._templates[template.name] = template

    def get(self, name: str) -> Optional[PromptTemplate]:
        """Return the template called ``name`` or ``None``."""
        return self._templates.get(name)

    def list(self) -> list[tuple[str, str]]:
        """Return ``(name, description)`` pairs in registration order."""
        return [(t.name, t.description) for t in self._templates.values()]

    def __contains__(self, name: object) -> bool:
        return name in self._templates

    def __len__(self) -> int:
        return len(self._templates)


prompt_templates = PromptTemplateRegistry(
    [
        PromptTemplate(
            name="general",
            description="General conversation and questions",
            template=GENERAL_TEMPLATE,
        ),
        PromptTemplate(
            name="code",
            description="Programming and coding help",
            template=CODE_TEMPLATE,
        ),
        PromptTemplate(
            name="creative",
            description="Creative writing and storytelling",
            template=CREATIVE_TEMPLATE,
        ),
        PromptTemplate(
            name="qa",
            description="Structured question and answer",
            template=QA_TEMPLATE,
        ),
    ]
)


def get_template(name: str) -> Optional[PromptTemplate]:
    """Retrieve a template from the default registry by exact name."""
    return prompt_templates.get(name)


def apply_template(template: PromptTemplate, user_input: str) -> str:
    """Insert ``user_input`` into the template body.

    Only the first marker is replaced and the input is inserted verbatim,
    so braces or marker text inside ``user_input`` are left alone.  A body
    without the marker is returned unchanged.
    """
    return template.template.replace(USER_INPUT_MARKER, user_input, 1)


def list_templates() -> list[tuple[str, str]]:
    """Return ``(name, description)`` pairs for the default registry."""
    return prompt_templates.list()
