"""Argument models for the built-in tools.

Each model is both the validator for incoming ``tools/call`` arguments and the
source of the ``inputSchema`` advertised by ``tools/list``.
"""

from pydantic import BaseModel, ConfigDict, Field


class ToolArguments(BaseModel):
    """Base for tool argument models.

    Strict mode: JSON types must match exactly ("6" is not an integer).
    Unknown keys are ignored.
    """

    model_config = ConfigDict(strict=True, extra="ignore")


class NoArguments(ToolArguments):
    """Arguments for tools that take none."""


class EchoArgs(ToolArguments):
    """Arguments for the echo tool."""

    message: str = Field(..., description="Message to echo back verbatim")


class ReverseArgs(ToolArguments):
    """Arguments for the reverse tool."""

    text: str = Field(..., description="Text to reverse")


class DiceArgs(ToolArguments):
    """Arguments for the dice tool."""

    sides: int = Field(6, ge=2, description="Number of sides on the die (at least 2)")
