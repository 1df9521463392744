"""Prompt and reply rendering using Jinja2.

Templates live in the jobchat.composer prompt_templates directory:
- system.txt.j2: rules constraining the model to the supplied matches
- user.txt.j2: the message, filters, fallback note and MATCHES_JSON
- reply.txt.j2: the deterministic reply used when no model is configured
"""

import json
import logging
from typing import Any, Dict, List, Sequence

from jinja2 import Environment, PackageLoader, StrictUndefined, TemplateError

from jobchat.domain.models import FilterSet, JobPosting
from jobchat.matching import format_rate
from jobchat.matching.models import MatchResult
from jobchat.matching.utils import build_matches_json

from .exceptions import PromptRenderError

logger = logging.getLogger(__name__)


class PromptRenderer:
    """Renders the model prompt and the templated fallback reply."""

    def __init__(
        self,
        template_dir: str = "prompt_templates",
        system_template: str = "system.txt.j2",
        user_template: str = "user.txt.j2",
        reply_template: str = "reply.txt.j2",
    ):
        self.system_template_name = system_template
        self.user_template_name = user_template
        self.reply_template_name = reply_template

        # Plain text output: nothing to escape, but missing variables must fail loudly
        self.env = Environment(
            loader=PackageLoader("jobchat.composer", template_dir),
            autoescape=False,
            undefined=StrictUndefined,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=False,
        )

    def build_messages(
        self,
        message: str,
        filters: FilterSet,
        match_result: MatchResult,
        history: Sequence[Dict[str, str]] = (),
    ) -> List[Dict[str, str]]:
        """Chat-completion messages: system rules, prior turns, then this request."""
        user_prompt = self._render(
            self.user_template_name,
            {
                "message": message,
                "filters_json": json.dumps(filters.to_dict()),
                "fallback_note": match_result.fallback_note,
                "matches_json": json.dumps(build_matches_json(match_result), indent=2),
            },
        )

        messages = [{"role": "system", "content": self._render(self.system_template_name, {})}]
        messages.extend({"role": turn["role"], "content": turn["content"]} for turn in history)
        messages.append({"role": "user", "content": user_prompt})
        return messages

    def render_reply(self, match_result: MatchResult) -> str:
        """Deterministic reply listing the matches (or asking for preferences)."""
        return self._render(
            self.reply_template_name,
            {
                "jobs": [_reply_row(job) for job in match_result.jobs],
                "fallback_note": match_result.fallback_note,
            },
        ).strip()

    def _render(self, template_name: str, context: Dict[str, Any]) -> str:
        try:
            return self.env.get_template(template_name).render(context)
        except TemplateError as e:
            logger.error(f"Template rendering failed: {template_name}", exc_info=True)
            raise PromptRenderError(f"Template rendering failed for {template_name}: {e}") from e


def _reply_row(job: JobPosting) -> Dict[str, str]:
    location = ", ".join(part for part in (job.city, job.state) if part) or "location to be confirmed"
    return {
        "job_id": job.job_id,
        "title": job.title or "Untitled role",
        "location": location,
        "rate": format_rate(job.rate_numeric, job.rate_unit.value),
    }
