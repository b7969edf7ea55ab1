import pytest
from starlette.testclient import WebSocketDenialResponse

from services.openai.content_generator import ContentGenerator
from tests.helpers import VALID_REPLY, FakeOpenAI, RecordingSleep, login, make_completion, status_error


@pytest.mark.parametrize("cookie", [None, "sid=bogus", "other=1"])
def test_handshake_without_valid_session_is_denied(make_client, cookie):
    client = make_client(make_completion(VALID_REPLY))
    headers = {"cookie": cookie} if cookie else {}

    with pytest.raises(WebSocketDenialResponse) as exc_info:
        with client.websocket_connect("/ws", headers=headers):
            pass  # pragma: no cover - the handshake never completes

    assert exc_info.value.status_code == 401


def test_anonymous_session_is_denied(make_client):
    client = make_client(make_completion(VALID_REPLY))

    with pytest.raises(WebSocketDenialResponse) as exc_info:
        with client.websocket_connect("/ws", headers=login(client, user_id=None)):
            pass  # pragma: no cover

    assert exc_info.value.status_code == 401
    assert exc_info.value.text == "no user in session"


def test_generate_content_round_trip(make_client):
    client = make_client(make_completion(VALID_REPLY))

    with client.websocket_connect("/ws", headers=login(client)) as ws:
        assert ws.receive_json() == {"type": "connection_status", "status": "connected"}
        ws.send_json({"type": "generate_content", "prompt": "hello", "platform": "twitter"})
        frame = ws.receive_json()

    assert frame["type"] == "content_generated"
    assert frame["content"]["hashtags"]
    assert all(tag.startswith("#") for tag in frame["content"]["hashtags"])
    assert frame["content"]["content"] == VALID_REPLY["content"].strip()
    assert "timestamp" in frame


def test_rate_limited_provider_reports_rate_limit(make_client):
    sleep = RecordingSleep()
    openai_client = FakeOpenAI(status_error(429))
    client = make_client(generator=ContentGenerator(openai_client, sleep=sleep))

    with client.websocket_connect("/ws", headers=login(client)) as ws:
        ws.receive_json()
        ws.send_json({"type": "generate_content", "prompt": "new reel", "platform": "instagram"})
        frame = ws.receive_json()

    assert frame["type"] == "error"
    assert frame["code"] == "RATE_LIMIT"
    assert len(openai_client.completions.calls) == 3
    assert sleep.delays == [1.0, 2.0]


def test_malformed_provider_reply_yields_error_frame(make_client):
    client = make_client(make_completion(dict(VALID_REPLY, hashtags=["ok", 3])))

    with client.websocket_connect("/ws", headers=login(client)) as ws:
        ws.receive_json()
        ws.send_json({"type": "generate_content", "prompt": "hello", "platform": "facebook"})
        frame = ws.receive_json()

    assert frame["type"] == "error"
    assert frame["code"] == "VALIDATION_ERROR"


def test_parse_error_keeps_connection_usable(make_client):
    client = make_client(make_completion(VALID_REPLY))

    with client.websocket_connect("/ws", headers=login(client)) as ws:
        ws.receive_json()
        ws.send_text("{not json")
        error = ws.receive_json()
        ws.send_json({"type": "generate_content", "prompt": "hello", "platform": "linkedin"})
        frame = ws.receive_json()

    assert error == {"type": "error", "code": "MESSAGE_PARSE_ERROR", "message": "Invalid message format"}
    assert frame["type"] == "content_generated"


def test_sequential_requests_on_one_socket(make_client):
    client = make_client(make_completion(VALID_REPLY))

    with client.websocket_connect("/ws", headers=login(client)) as ws:
        ws.receive_json()
        frames = []
        for platform in ("twitter", "linkedin"):
            ws.send_json({"type": "generate_content", "prompt": "hello", "platform": platform})
            frames.append(ws.receive_json())

    assert [f["type"] for f in frames] == ["content_generated", "content_generated"]
