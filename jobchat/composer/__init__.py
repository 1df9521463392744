"""Response composition: grounded replies from match results."""

from .exceptions import ComposerError, GenerativeCallError, PromptRenderError
from .generator import OpenAIGenerator, TextGenerator
from .prompts import PromptRenderer
from .service import (
    ComposedReply,
    ComposeRequest,
    ComposerEvent,
    DoneEvent,
    JobsEvent,
    ResponseComposer,
    TextEvent,
)

__all__ = [
    "ResponseComposer",
    "ComposeRequest",
    "ComposedReply",
    "ComposerEvent",
    "TextEvent",
    "JobsEvent",
    "DoneEvent",
    "PromptRenderer",
    "OpenAIGenerator",
    "TextGenerator",
    "ComposerError",
    "GenerativeCallError",
    "PromptRenderError",
]
