import pytest

from services.realtime.authenticator import ConnectionAuthenticator, HandshakeRejected
from services.realtime.session_store import SessionStore


@pytest.fixture
def store():
    return SessionStore()


@pytest.fixture
def authenticator(store):
    return ConnectionAuthenticator(store, cookie_name="sid")


def _reason(authenticator, header):
    with pytest.raises(HandshakeRejected) as exc_info:
        authenticator.authenticate(header)
    assert exc_info.value.status_code == 401
    return exc_info.value.reason


def test_missing_cookie_header_is_rejected(authenticator):
    assert _reason(authenticator, None) == "no cookie"
    assert _reason(authenticator, "") == "no cookie"


def test_header_without_session_cookie_is_rejected(authenticator):
    assert _reason(authenticator, "theme=dark; lang=en") == "no cookie"


def test_unknown_session_is_rejected(authenticator):
    assert _reason(authenticator, "sid=doesnotexist") == "invalid session"


def test_failing_session_lookup_is_rejected():
    class BrokenStore:
        def get(self, session_id):
            raise ConnectionError("session backend down")

    authenticator = ConnectionAuthenticator(BrokenStore())

    assert _reason(authenticator, "sid=abc") == "invalid session"


def test_session_without_user_is_rejected(store, authenticator):
    anonymous = store.create(user_id=None)

    assert _reason(authenticator, f"sid={anonymous.session_id}") == "no user in session"


def test_valid_session_yields_identity(store, authenticator):
    session = store.create(user_id=42)

    identity = authenticator.authenticate(f"theme=dark; sid={session.session_id}")

    assert identity.user_id == 42
    assert identity.session_id == session.session_id


def test_deleted_session_no_longer_authenticates(store, authenticator):
    session = store.create(user_id=7)
    assert store.delete(session.session_id)

    assert _reason(authenticator, f"sid={session.session_id}") == "invalid session"
    assert not store.delete(session.session_id)
