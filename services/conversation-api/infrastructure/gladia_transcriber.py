"""Gladia implementation of the TranscriptionService interface."""

import time
from collections.abc import Callable
from typing import Any

import httpx
from omi_common.logging import setup_logging
from pydantic import BaseModel, Field, ValidationError

from domain.models import (
    ACTION_ITEMS_PROMPT,
    TITLE_PROMPT,
    Sentence,
    TranscriptionOutcome,
)
from exceptions import ProviderError, ProviderPhase

from .interfaces import TranscriptionService

logger = setup_logging()

API_KEY_HEADER = "x-gladia-key"
DONE_STATUS = "done"
ERROR_STATUS = "error"


class _SubmitResponse(BaseModel):
    id: str = ""
    result_url: str = ""


class _PromptResult(BaseModel):
    prompt: str = ""
    response: str = ""


class _PromptResponse(BaseModel):
    success: bool = False
    results: _PromptResult | None = None


class _AudioToLLM(BaseModel):
    results: list[_PromptResponse] = Field(default_factory=list)


class _Transcription(BaseModel):
    full_transcript: str = ""
    sentences: list[Sentence] = Field(default_factory=list)
    utterances: list[Sentence] = Field(default_factory=list)


class _Result(BaseModel):
    transcription: _Transcription = Field(default_factory=_Transcription)
    audio_to_llm: _AudioToLLM | None = None


class _PollResponse(BaseModel):
    status: str = ""
    result: _Result | None = None
    error_code: int | None = None


class GladiaTranscriber(TranscriptionService):
    """
    Transcribes audio through Gladia's asynchronous v2 API.

    One call submits the job with diarization, sentence segmentation,
    summarization and two audio-to-LLM prompts, then polls the returned
    result URL at a fixed interval until the job is done. Polling is capped
    at ``max_polls`` requests per call.
    """

    def __init__(
        self,
        client: httpx.Client,
        poll_interval_seconds: float = 5.0,
        max_polls: int = 120,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self._client = client
        self._poll_interval_seconds = poll_interval_seconds
        self._max_polls = max_polls
        self._sleep = sleep

    def transcribe(self, audio_url: str, api_key: str) -> TranscriptionOutcome:
        headers = {API_KEY_HEADER: api_key}
        result_url = self._submit(audio_url, headers)
        result = self._poll(result_url, headers)
        outcome = self._to_outcome(result)

        logger.info(
            "Audio transcription successful",
            extra={
                "sentence_count": len(outcome.sentences),
                "action_item_count": len(outcome.action_items),
            },
        )
        return outcome

    def _submit(self, audio_url: str, headers: dict[str, str]) -> str:
        """Submits the job and returns the URL to poll for its result."""
        payload = {
            "audio_url": audio_url,
            "diarization_enhanced": True,
            "sentences": True,
            "summarization": True,
            "audio_to_llm": True,
            "audio_to_llm_config": {"prompts": [ACTION_ITEMS_PROMPT, TITLE_PROMPT]},
        }
        body = self._request_json("submit", "POST", "transcription/", headers, payload)
        try:
            submitted = _SubmitResponse.model_validate(body)
        except ValidationError as e:
            raise ProviderError("submit", "unexpected response shape", e) from e

        if not submitted.result_url:
            raise ProviderError("submit", "no result URL in response")

        logger.info("Transcription job submitted", extra={"job_id": submitted.id})
        return submitted.result_url

    def _poll(self, result_url: str, headers: dict[str, str]) -> _Result:
        for poll_number in range(1, self._max_polls + 1):
            body = self._request_json("poll", "GET", result_url, headers)
            try:
                polled = _PollResponse.model_validate(body)
            except ValidationError as e:
                raise ProviderError("poll", "unexpected response shape", e) from e

            if polled.status == DONE_STATUS:
                if polled.result is None:
                    raise ProviderError("poll", "job is done but carries no result")
                return polled.result

            if polled.status == ERROR_STATUS:
                raise ProviderError(
                    "poll", f"provider reported an error (code {polled.error_code})"
                )

            logger.debug(
                "Transcription pending",
                extra={"status": polled.status, "poll": poll_number},
            )
            if poll_number < self._max_polls:
                self._sleep(self._poll_interval_seconds)

        raise ProviderError("poll", f"no result after {self._max_polls} polls")

    def _request_json(
        self,
        phase: ProviderPhase,
        method: str,
        url: str,
        headers: dict[str, str],
        payload: dict[str, Any] | None = None,
    ) -> Any:
        try:
            response = self._client.request(method, url, headers=headers, json=payload)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            raise ProviderError(
                phase, f"HTTP {e.response.status_code}", e
            ) from e
        except httpx.HTTPError as e:
            raise ProviderError(phase, "transport error", e) from e
        except ValueError as e:
            raise ProviderError(phase, "response is not valid JSON", e) from e

    @staticmethod
    def _to_outcome(result: _Result) -> TranscriptionOutcome:
        transcription = result.transcription
        sentences = transcription.sentences or transcription.utterances

        action_items: list[str] = []
        if result.audio_to_llm is not None:
            for prompt_response in result.audio_to_llm.results:
                if prompt_response.results is None:
                    continue
                if prompt_response.results.prompt == ACTION_ITEMS_PROMPT:
                    action_items.append(prompt_response.results.response)

        return TranscriptionOutcome(
            sentences=sentences,
            summary=transcription.full_transcript,
            action_items=action_items,
        )
