"""AI meeting summarizer — turns raw meeting notes into a summary + client sentiment.

The model is asked for JSON but is not guaranteed to reply with clean JSON, so the
first balanced ``{...}`` object is pulled out of the reply text and validated
strictly. Anything short of a usable summary and a known sentiment is a
SummarizationError; nothing is defaulted.
"""

from __future__ import annotations

import asyncio
import json
from typing import Any

import litellm
import structlog
from pydantic import BaseModel

from portfolai.core.config import settings
from portfolai.core.errors import SummarizationError
from portfolai.models.enums import Sentiment

logger = structlog.get_logger()

litellm.set_verbose = False

SUMMARY_PROMPT = """You are a financial advisor's AI assistant. Below are meeting notes from a client meeting. Please provide:
1. A concise 2-3 sentence summary of what was discussed
2. The client's sentiment (positive, negative, or neutral)

Meeting Notes:
{notes}

Respond in this exact JSON format:
{{
  "summary": "your summary here",
  "sentiment": "positive/negative/neutral"
}}"""


class SummaryResult(BaseModel):
    summary: str
    sentiment: Sentiment


def extract_json_object(text: str) -> dict[str, Any]:
    """Return the first balanced JSON object embedded in ``text``.

    Braces inside string literals (and escaped quotes) do not count towards
    nesting. Raises SummarizationError when no object is found or the first
    one is not valid JSON.
    """
    start = text.find("{")
    if start == -1:
        raise SummarizationError("Failed to parse AI response: no JSON object found")

    depth = 0
    in_string = False
    escaped = False
    for pos in range(start, len(text)):
        char = text[pos]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue
        if char == '"':
            in_string = True
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                try:
                    parsed = json.loads(text[start:pos + 1])
                except json.JSONDecodeError as exc:
                    raise SummarizationError(
                        f"Failed to parse AI response: {exc.msg}"
                    ) from exc
                return parsed

    # The first object never closes
    raise SummarizationError("Failed to parse AI response: unterminated JSON object")


def parse_summary_reply(text: str) -> SummaryResult:
    data = extract_json_object(text)

    summary = data.get("summary")
    if not isinstance(summary, str) or not summary.strip():
        raise SummarizationError("AI response is missing a summary")

    raw_sentiment = data.get("sentiment")
    if not isinstance(raw_sentiment, str):
        raise SummarizationError("AI response is missing a sentiment")
    try:
        sentiment = Sentiment(raw_sentiment.strip().lower())
    except ValueError as exc:
        raise SummarizationError(
            f"AI response has unknown sentiment {raw_sentiment!r}"
        ) from exc

    return SummaryResult(summary=summary.strip(), sentiment=sentiment)


class MeetingSummarizer:
    """Summarizes meeting notes through litellm.

    One call per request, no retries. The call is bounded by ``timeout`` seconds
    and cannot be cancelled once issued.
    """

    def __init__(
        self,
        model: str | None = None,
        api_key: str | None = None,
        max_tokens: int | None = None,
        timeout: float | None = None,
    ) -> None:
        self.model = model or settings.AI_SUMMARY_MODEL
        self.api_key = api_key if api_key is not None else settings.ANTHROPIC_API_KEY
        self.max_tokens = max_tokens or settings.AI_SUMMARY_MAX_TOKENS
        self.timeout = timeout or settings.AI_SUMMARY_TIMEOUT_SECONDS

    async def _complete(self, prompt: str) -> str:
        response = await litellm.acompletion(
            model=self.model,
            messages=[{"role": "user", "content": prompt}],
            max_tokens=self.max_tokens,
            api_key=self.api_key,
            timeout=self.timeout,
        )
        return response.choices[0].message.content or ""

    async def summarize(self, notes: str) -> SummaryResult:
        if not self.api_key:
            raise SummarizationError("AI summarization is not configured on the server")

        prompt = SUMMARY_PROMPT.format(notes=notes)
        try:
            content = await asyncio.wait_for(self._complete(prompt), timeout=self.timeout)
        except asyncio.TimeoutError as exc:
            logger.warning("summarizer.timeout", model=self.model, timeout=self.timeout)
            raise SummarizationError(
                f"AI summarization timed out after {self.timeout:g}s"
            ) from exc
        except Exception as exc:  # noqa: BLE001  provider, HTTP and transport errors
            logger.warning("summarizer.failed", model=self.model, error=str(exc))
            raise SummarizationError(f"AI summarization failed: {exc}") from exc

        if not content.strip():
            raise SummarizationError("AI response was empty")

        result = parse_summary_reply(content)
        logger.info("summarizer.completed", model=self.model, sentiment=result.sentiment.value)
        return result


_summarizer: MeetingSummarizer | None = None


def get_summarizer() -> MeetingSummarizer:
    """FastAPI dependency returning the process summarizer. Override in tests."""
    global _summarizer
    if _summarizer is None:
        _summarizer = MeetingSummarizer()
    return _summarizer
