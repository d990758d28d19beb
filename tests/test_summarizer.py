"""Tests for the AI meeting summarizer: reply parsing and the litellm call."""

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from portfolai.core.errors import SummarizationError
from portfolai.models.enums import Sentiment
from portfolai.services.summarizer import (
    SUMMARY_PROMPT,
    MeetingSummarizer,
    extract_json_object,
    parse_summary_reply,
)


def _completion(content: str) -> MagicMock:
    response = MagicMock()
    response.choices = [MagicMock()]
    response.choices[0].message.content = content
    return response


# ── JSON extraction ──────────────────────────────────────────────────────────


class TestExtractJsonObject:

    def test_plain_json(self):
        assert extract_json_object('{"summary": "ok", "sentiment": "neutral"}') == {
            "summary": "ok",
            "sentiment": "neutral",
        }

    def test_json_with_surrounding_prose(self):
        text = 'Here is the analysis:\n{"summary": "Talked fees.", "sentiment": "negative"}\nHope this helps.'
        assert extract_json_object(text)["sentiment"] == "negative"

    def test_first_object_wins(self):
        text = '{"summary": "first", "sentiment": "positive"} and later {"summary": "second"}'
        assert extract_json_object(text)["summary"] == "first"

    def test_nested_objects_are_balanced(self):
        text = 'x {"summary": "s", "meta": {"a": {"b": 1}}, "sentiment": "neutral"} y'
        assert extract_json_object(text)["meta"] == {"a": {"b": 1}}

    def test_braces_inside_strings_are_ignored(self):
        text = '{"summary": "client said \\"}{\\" twice", "sentiment": "positive"} trailing }'
        assert extract_json_object(text)["summary"] == 'client said "}{" twice'

    def test_no_object(self):
        with pytest.raises(SummarizationError, match="no JSON object"):
            extract_json_object("The client seemed happy overall.")

    def test_unterminated_object(self):
        with pytest.raises(SummarizationError, match="unterminated"):
            extract_json_object('{"summary": "cut off')

    def test_invalid_json_inside_braces(self):
        with pytest.raises(SummarizationError, match="Failed to parse"):
            extract_json_object("{summary: unquoted}")


class TestParseSummaryReply:

    def test_sentiment_is_lower_cased(self):
        result = parse_summary_reply('{"summary": "Good call.", "sentiment": " Positive "}')
        assert result.sentiment == Sentiment.POSITIVE
        assert result.summary == "Good call."

    def test_missing_summary(self):
        with pytest.raises(SummarizationError, match="summary"):
            parse_summary_reply('{"sentiment": "positive"}')

    def test_blank_summary(self):
        with pytest.raises(SummarizationError, match="summary"):
            parse_summary_reply('{"summary": "   ", "sentiment": "positive"}')

    def test_missing_sentiment(self):
        with pytest.raises(SummarizationError, match="sentiment"):
            parse_summary_reply('{"summary": "Fine."}')

    def test_unknown_sentiment_fails_closed(self):
        with pytest.raises(SummarizationError, match="unknown sentiment"):
            parse_summary_reply('{"summary": "Fine.", "sentiment": "mixed"}')


# ── MeetingSummarizer ────────────────────────────────────────────────────────


@pytest.mark.anyio
async def test_summarize_calls_litellm_with_notes_in_prompt():
    summarizer = MeetingSummarizer(model="anthropic/test-model", api_key="sk-test", max_tokens=300)
    reply = 'Sure!\n{"summary": "Reviewed portfolio.", "sentiment": "POSITIVE"}'
    with patch(
        "portfolai.services.summarizer.litellm.acompletion",
        new_callable=AsyncMock,
        return_value=_completion(reply),
    ) as mock_completion:
        result = await summarizer.summarize("Reviewed portfolio, client pleased")

    assert result.summary == "Reviewed portfolio."
    assert result.sentiment == Sentiment.POSITIVE
    kwargs = mock_completion.await_args.kwargs
    assert kwargs["model"] == "anthropic/test-model"
    assert kwargs["max_tokens"] == 300
    assert kwargs["api_key"] == "sk-test"
    assert kwargs["messages"][0]["content"] == SUMMARY_PROMPT.format(
        notes="Reviewed portfolio, client pleased"
    )


@pytest.mark.anyio
async def test_upstream_failure_becomes_summarization_error():
    summarizer = MeetingSummarizer(api_key="sk-test")
    with patch(
        "portfolai.services.summarizer.litellm.acompletion",
        new_callable=AsyncMock,
        side_effect=RuntimeError("529 overloaded"),
    ):
        with pytest.raises(SummarizationError, match="529 overloaded"):
            await summarizer.summarize("notes")


@pytest.mark.anyio
async def test_unparseable_reply_becomes_summarization_error():
    summarizer = MeetingSummarizer(api_key="sk-test")
    with patch(
        "portfolai.services.summarizer.litellm.acompletion",
        new_callable=AsyncMock,
        return_value=_completion("I could not summarize these notes."),
    ):
        with pytest.raises(SummarizationError):
            await summarizer.summarize("notes")


@pytest.mark.anyio
async def test_empty_reply_becomes_summarization_error():
    summarizer = MeetingSummarizer(api_key="sk-test")
    with patch(
        "portfolai.services.summarizer.litellm.acompletion",
        new_callable=AsyncMock,
        return_value=_completion(""),
    ):
        with pytest.raises(SummarizationError, match="empty"):
            await summarizer.summarize("notes")


@pytest.mark.anyio
async def test_timeout_becomes_summarization_error():
    async def _slow(**_kwargs):
        await asyncio.sleep(5)

    summarizer = MeetingSummarizer(api_key="sk-test", timeout=0.05)
    with patch("portfolai.services.summarizer.litellm.acompletion", new=_slow):
        with pytest.raises(SummarizationError, match="timed out"):
            await summarizer.summarize("notes")


@pytest.mark.anyio
async def test_missing_api_key_fails_without_calling_upstream():
    summarizer = MeetingSummarizer(api_key="")
    with patch(
        "portfolai.services.summarizer.litellm.acompletion",
        new_callable=AsyncMock,
    ) as mock_completion:
        with pytest.raises(SummarizationError, match="not configured"):
            await summarizer.summarize("notes")
    mock_completion.assert_not_awaited()
