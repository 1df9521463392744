"""Response composition over one interface with two delivery adapters.

- compose(): resolve-once; returns the full text and the match list together
- stream(): push-incremental; text pieces as they arrive, then the match
  list, then an end-of-stream marker

Both paths build the same prompt, fall back to the templated reply when no
generator is configured, and turn a failed model call into an apology while
still delivering the matches.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, AsyncIterator, Dict, List, Optional, Sequence, Union

from jobchat.domain.models import FilterSet, JobPosting
from jobchat.matching.models import MatchResult
from jobchat.matching.utils import build_jobs_block

from .exceptions import GenerativeCallError
from .generator import TextGenerator
from .prompts import PromptRenderer

logger = logging.getLogger(__name__)

APOLOGY_WITH_JOBS = (
    "Sorry, I couldn't reach the assistant just now. "
    "Here are the matching jobs I found for you."
)
APOLOGY_WITHOUT_JOBS = "Sorry, I couldn't reach the assistant just now. Please try again in a moment."


@dataclass(frozen=True)
class ComposeRequest:
    """Everything the composer needs for one reply."""

    message: str
    filters: FilterSet
    match_result: MatchResult
    history: Sequence[Dict[str, str]] = ()


@dataclass(frozen=True)
class ComposedReply:
    """Outcome of one composition.

    Attributes:
        text: Full user-facing text
        jobs: Postings the reply is grounded on (catalog references)
        failed: True when the generative call failed and text is an apology
        error_type: Short failure classification when failed
    """

    text: str
    jobs: Sequence[JobPosting] = ()
    failed: bool = False
    error_type: Optional[str] = None


@dataclass(frozen=True)
class TextEvent:
    data: str

    def to_frame(self) -> Dict[str, Any]:
        return {"type": "text", "data": self.data}


@dataclass(frozen=True)
class JobsEvent:
    block: Dict[str, Any]

    def to_frame(self) -> Dict[str, Any]:
        return {"type": "blocks", "data": [self.block]}


@dataclass(frozen=True)
class DoneEvent:
    reply: ComposedReply = field(default_factory=lambda: ComposedReply(text=""))

    def to_frame(self) -> Dict[str, Any]:
        return {"type": "done"}


ComposerEvent = Union[TextEvent, JobsEvent, DoneEvent]


def _apology(match_result: MatchResult) -> str:
    return APOLOGY_WITH_JOBS if match_result.jobs else APOLOGY_WITHOUT_JOBS


class ResponseComposer:
    """Builds grounded replies, optionally delegating to a generative model.

    Args:
        generator: Model client; None selects the templated reply
        renderer: Prompt/reply renderer (defaults to PromptRenderer())
    """

    def __init__(
        self,
        generator: Optional[TextGenerator] = None,
        renderer: Optional[PromptRenderer] = None,
        logger_instance: Optional[logging.Logger] = None,
    ):
        self.generator = generator
        self.renderer = renderer or PromptRenderer()
        self.logger = logger_instance or logger

    @property
    def uses_model(self) -> bool:
        return self.generator is not None

    async def compose(self, request: ComposeRequest) -> ComposedReply:
        """Produce the whole reply at once."""
        jobs = request.match_result.jobs

        if self.generator is None:
            return ComposedReply(text=self.renderer.render_reply(request.match_result), jobs=jobs)

        messages = self._messages(request)
        try:
            text = await self.generator.complete(messages)
        except GenerativeCallError as e:
            self._log_failure(e, streamed_chars=0)
            return ComposedReply(
                text=_apology(request.match_result), jobs=jobs, failed=True, error_type=e.error_type
            )

        self.logger.info(
            "Reply composed",
            extra={"event": "composer.completed", "mode": "batch", "reply_chars": len(text)},
        )
        return ComposedReply(text=text, jobs=jobs)

    async def stream(self, request: ComposeRequest) -> AsyncIterator[ComposerEvent]:
        """Yield text pieces, then the jobs block, then DoneEvent.

        If the consumer stops iterating early, the model stream is closed and
        nothing else is produced.
        """
        match_result = request.match_result
        pieces: List[str] = []
        failed = False
        error_type = None

        if self.generator is None:
            text = self.renderer.render_reply(match_result)
            pieces.append(text)
            yield TextEvent(text)
        else:
            upstream = self.generator.stream(self._messages(request))
            try:
                async for piece in upstream:
                    pieces.append(piece)
                    yield TextEvent(piece)
            except GenerativeCallError as e:
                self._log_failure(e, streamed_chars=sum(len(p) for p in pieces))
                failed = True
                error_type = e.error_type
                apology = _apology(match_result)
                yield TextEvent(f"\n\n{apology}" if pieces else apology)
                pieces = [apology]
            finally:
                aclose = getattr(upstream, "aclose", None)
                if aclose is not None:
                    await aclose()

        yield JobsEvent(build_jobs_block(match_result))

        reply = ComposedReply(
            text="".join(pieces), jobs=match_result.jobs, failed=failed, error_type=error_type
        )
        if not failed:
            self.logger.info(
                "Reply streamed",
                extra={"event": "composer.completed", "mode": "stream", "reply_chars": len(reply.text)},
            )
        yield DoneEvent(reply)

    def _messages(self, request: ComposeRequest) -> List[Dict[str, str]]:
        return self.renderer.build_messages(
            message=request.message,
            filters=request.filters,
            match_result=request.match_result,
            history=request.history,
        )

    def _log_failure(self, error: GenerativeCallError, streamed_chars: int) -> None:
        self.logger.warning(
            f"Generative call failed: {error}",
            extra={
                "event": "composer.generation.failed",
                "error_type": error.error_type,
                "streamed_chars": streamed_chars,
            },
        )
