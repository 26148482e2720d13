"""Model describing a reusable prompt template."""

from pydantic import BaseModel, ConfigDict, Field

USER_INPUT_MARKER = "{user_input}"


class PromptTemplate(BaseModel):
    """A named prompt with a single slot for the user's raw input.

    The ``template`` body is expected to contain :data:`USER_INPUT_MARKER`
    exactly once.  Templates are immutable once created.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="Unique identifier used to activate the template.")
    description: str = Field(..., description="Human-readable summary of the template's purpose.")
    template: str = Field(..., description="Prompt body containing the user input marker.")
