import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
root_str = str(ROOT)
if root_str not in sys.path:
    sys.path.insert(0, root_str)

from tests.helpers import FakeOpenAI, RecordingSleep  # noqa: E402


@pytest.fixture
def recording_sleep():
    return RecordingSleep()


@pytest.fixture
def make_client(tmp_path):
    """Build TestClients around the app with a fake OpenAI backend."""
    from fastapi.testclient import TestClient

    from main import create_app
    from services.openai.content_generator import ContentGenerator
    from utils.app_config import AppConfig

    clients = []

    def _make(*outcomes, generator=None, dev_login_enabled=False):
        if generator is None:
            generator = ContentGenerator(FakeOpenAI(*outcomes), sleep=RecordingSleep())
        config = AppConfig(dev_login_enabled=dev_login_enabled)
        app = create_app(config, content_generator=generator, database_dir=tmp_path)
        client = TestClient(app)
        client.__enter__()
        clients.append(client)
        return client

    yield _make
    for client in clients:
        client.__exit__(None, None, None)
