import asyncio

import httpx
import openai
import pytest

from services.openai.content_generator import ContentGenerator, is_rate_limit_error, retry_with_backoff
from services.openai.errors import API_ERROR, AUTH_ERROR, EMPTY_RESPONSE, RATE_LIMIT, VALIDATION_ERROR, GenerationError
from tests.helpers import VALID_REPLY, FakeOpenAI, make_completion, status_error


def _generate(generator, prompt="hello", platform="twitter"):
    return asyncio.run(generator.generate(prompt, platform))


def test_successful_generation_returns_validated_result(recording_sleep):
    client = FakeOpenAI(make_completion(VALID_REPLY))
    generator = ContentGenerator(client, model="gpt-test", sleep=recording_sleep)

    result = _generate(generator, "Launch our app", "linkedin")

    assert all(tag.startswith("#") for tag in result.hashtags)
    metrics = result.quality_metrics
    for value in (result.engagement_prediction, metrics.clarity, metrics.relevance, metrics.originality, metrics.engagement_potential):
        assert 0 <= value <= 100
    call = client.completions.calls[0]
    assert call["model"] == "gpt-test"
    assert call["response_format"] == {"type": "json_object"}
    assert [m["role"] for m in call["messages"]] == ["system", "user"]
    assert "Launch our app" in call["messages"][1]["content"]
    assert recording_sleep.delays == []


def test_rate_limit_exhausts_three_attempts(recording_sleep):
    client = FakeOpenAI(status_error(429))
    generator = ContentGenerator(client, sleep=recording_sleep)

    with pytest.raises(GenerationError) as exc_info:
        _generate(generator)

    assert exc_info.value.code == RATE_LIMIT
    assert exc_info.value.message.startswith("Failed to generate content:")
    assert len(client.completions.calls) == 3
    assert recording_sleep.delays == [1.0, 2.0]


def test_backoff_doubles_per_attempt(recording_sleep):
    client = FakeOpenAI(status_error(429))
    generator = ContentGenerator(client, max_attempts=4, sleep=recording_sleep)

    with pytest.raises(GenerationError):
        _generate(generator)

    assert recording_sleep.delays == [1.0, 2.0, 4.0]


def test_rate_limit_then_success(recording_sleep):
    client = FakeOpenAI(status_error(429), make_completion(VALID_REPLY))
    generator = ContentGenerator(client, sleep=recording_sleep)

    result = _generate(generator)

    assert result.tone == "upbeat"
    assert len(client.completions.calls) == 2
    assert recording_sleep.delays == [1.0]


@pytest.mark.parametrize("status,code", [(401, AUTH_ERROR), (500, API_ERROR), (400, API_ERROR)])
def test_non_rate_limit_failure_is_not_retried(recording_sleep, status, code):
    client = FakeOpenAI(status_error(status), make_completion(VALID_REPLY))
    generator = ContentGenerator(client, sleep=recording_sleep)

    with pytest.raises(GenerationError) as exc_info:
        _generate(generator)

    assert exc_info.value.code == code
    assert len(client.completions.calls) == 1
    assert recording_sleep.delays == []


def test_connection_error_maps_to_api_error(recording_sleep):
    request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
    client = FakeOpenAI(openai.APIConnectionError(request=request))
    generator = ContentGenerator(client, sleep=recording_sleep)

    with pytest.raises(GenerationError) as exc_info:
        _generate(generator)

    assert exc_info.value.code == API_ERROR
    assert len(client.completions.calls) == 1


def test_empty_reply_raises_empty_response(recording_sleep):
    generator = ContentGenerator(FakeOpenAI(make_completion(None)), sleep=recording_sleep)

    with pytest.raises(GenerationError) as exc_info:
        _generate(generator)

    assert exc_info.value.code == EMPTY_RESPONSE


def test_invalid_reply_raises_validation_error(recording_sleep):
    reply = dict(VALID_REPLY, engagement_prediction=250)
    generator = ContentGenerator(FakeOpenAI(make_completion(reply)), sleep=recording_sleep)

    with pytest.raises(GenerationError) as exc_info:
        _generate(generator)

    assert exc_info.value.code == VALIDATION_ERROR


def test_rate_limit_detected_from_error_type():
    error = status_error(400, body={"type": "rate_limit_exceeded", "message": "slow down"})

    assert is_rate_limit_error(error)
    assert is_rate_limit_error(status_error(429))
    assert not is_rate_limit_error(status_error(500))
    assert not is_rate_limit_error(ValueError("boom"))


def test_retry_reraises_unexpected_errors_immediately(recording_sleep):
    calls = []

    async def operation():
        calls.append(1)
        raise KeyError("missing")

    with pytest.raises(KeyError):
        asyncio.run(retry_with_backoff(operation, sleep=recording_sleep))

    assert len(calls) == 1
    assert recording_sleep.delays == []


def test_generator_requires_client():
    with pytest.raises(ValueError):
        ContentGenerator(None)


def test_retry_scales_waits_from_base_delay(recording_sleep):
    outcomes = [status_error(429), status_error(429), "done"]

    async def operation():
        outcome = outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    result = asyncio.run(retry_with_backoff(operation, base_delay=0.5, sleep=recording_sleep))

    assert result == "done"
    assert recording_sleep.delays == [0.5, 1.0]
