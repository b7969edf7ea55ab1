"""Fakes and builders shared by the test modules."""

import json
from types import SimpleNamespace

import httpx
import openai

VALID_REPLY = {
    "content": "  Big news: our spring collection just dropped!  ",
    "hashtags": ["spring", "#fashion", " newarrivals "],
    "engagement_prediction": 82,
    "tone": " upbeat ",
    "quality_metrics": {
        "clarity": 90,
        "relevance": "85",
        "originality": 70.5,
        "engagement_potential": 88,
    },
}


def make_completion(payload):
    """Build a chat completion shaped object whose first message carries `payload`."""
    content = payload if isinstance(payload, str) or payload is None else json.dumps(payload)
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


def status_error(status: int, body=None) -> openai.APIStatusError:
    """Return the openai exception raised for an HTTP `status` reply."""
    request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
    response = httpx.Response(status, request=request)
    error_cls = {
        401: openai.AuthenticationError,
        429: openai.RateLimitError,
        500: openai.InternalServerError,
    }.get(status, openai.APIStatusError)
    return error_cls(f"Error code: {status}", response=response, body=body)


class FakeCompletions:
    """Replays queued outcomes; the last one repeats once the queue runs dry."""

    def __init__(self, outcomes):
        self.outcomes = list(outcomes)
        self.calls = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        outcome = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


class FakeOpenAI:
    def __init__(self, *outcomes):
        self.completions = FakeCompletions(outcomes)
        self.chat = SimpleNamespace(completions=self.completions)


class RecordingSleep:
    """Stands in for asyncio.sleep and records requested delays."""

    def __init__(self):
        self.delays = []

    async def __call__(self, delay):
        self.delays.append(delay)


def login(client, user_id=1):
    """Create a login session and return headers carrying its cookie."""
    session = client.app.state.session_store.create(user_id=user_id)
    return {"cookie": f"sid={session.session_id}"}
