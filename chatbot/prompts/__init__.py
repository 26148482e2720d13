"""Prompt templates used to structure individual turns."""

from .templates import (  # noqa: F401
    PromptTemplateRegistry,
    apply_template,
    get_template,
    list_templates,
    prompt_templates,
)
