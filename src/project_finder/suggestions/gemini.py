"""Project suggestions from a Gemini model, called through litellm.

litellm routes ``gemini/<model>`` identifiers to Google's Generative
Language API: https://docs.litellm.ai/docs/providers/gemini
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from tenacity import RetryError, retry, stop_after_attempt, wait_exponential

from project_finder.errors import ConfigurationError, SuggestionError
from project_finder.models import CanonicalProject, Characteristic, Preference
from project_finder.query import split_terms, translate
from project_finder.suggestions.parser import parse_suggestions

logger = logging.getLogger(__name__)

_PROVIDER_PREFIX = "gemini"
_TIMEOUT = 30.0
_MAX_ATTEMPTS = 3
_BACKOFF_MIN_SECONDS = 1.0
_BACKOFF_MAX_SECONDS = 10.0
MAX_SUGGESTIONS = 5

_PROMPT = """\
You recommend real, existing, actively developed open-source projects.
Suggest up to {limit} projects for this user.

Languages: {languages}
Topics: {topics}
Desired characteristics: {characteristics}

Reply with ONLY a JSON array. Each element is an object with the fields
"name", "description", "language", "tags" (array of strings), "url"
(repository URL), and "conceptual_difficulty" (Beginner, Intermediate,
or Advanced).
"""


def build_prompt(preference: Preference) -> str:
    params = translate(preference)
    labels = [c.label for c in Characteristic if params.wants(c)]
    return _PROMPT.format(
        limit=MAX_SUGGESTIONS,
        languages=", ".join(split_terms(preference.languages)) or "Any",
        topics=", ".join(split_terms(preference.topics)) or "Any",
        characteristics=", ".join(labels) or "General interest",
    )


def _response_text(response: Any) -> str:
    try:
        content = response.choices[0].message.content
    except (AttributeError, IndexError, TypeError) as exc:
        raise SuggestionError("AI response had an unexpected shape.") from exc
    if not isinstance(content, str) or not content.strip():
        raise SuggestionError("AI response contained no text.")
    return content


@dataclass
class GeminiSuggester:
    """Asks a Gemini model for project suggestions.

    A missing API key only fails the suggestion call itself; discovery keeps
    working without one. Each call is retried up to ``attempts`` times with
    exponential backoff before it fails.
    """

    api_key: str = ""
    model: str = "gemini-1.5-flash"
    timeout: float = _TIMEOUT
    attempts: int = _MAX_ATTEMPTS
    backoff_min: float = _BACKOFF_MIN_SECONDS
    backoff_max: float = _BACKOFF_MAX_SECONDS

    @property
    def model_id(self) -> str:
        return f"{_PROVIDER_PREFIX}/{self.model}"

    async def _complete(self, messages: list[dict[str, str]]) -> Any:
        import litellm

        @retry(
            stop=stop_after_attempt(self.attempts),
            wait=wait_exponential(min=self.backoff_min, max=self.backoff_max),
            reraise=False,
        )
        async def _do_call() -> Any:
            return await litellm.acompletion(
                model=self.model_id,
                messages=messages,
                api_key=self.api_key,
                timeout=self.timeout,
            )

        try:
            return await _do_call()
        except RetryError as exc:
            last = exc.last_attempt.exception() if exc.last_attempt else exc
            logger.warning("Gemini retries exhausted for %s: %s", self.model_id, last)
            if isinstance(last, litellm.Timeout):
                raise SuggestionError("AI suggestion request timed out.") from last
            raise SuggestionError(f"AI suggestion request failed: {last}") from last

    async def suggest(self, preference: Preference) -> list[CanonicalProject]:
        if not self.api_key:
            raise ConfigurationError(
                "AI suggestions are not configured. Set GEMINI_API_KEY to enable them."
            )

        messages = [{"role": "user", "content": build_prompt(preference)}]
        response = await self._complete(messages)

        projects = parse_suggestions(_response_text(response))
        logger.info("Gemini suggested %d projects", len(projects))
        return projects[:MAX_SUGGESTIONS]
