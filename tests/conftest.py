import os

import pytest

from tests.fakes.fake_http import FakeUpstream


@pytest.fixture(scope="session", autouse=True)
def env_offline_mode():
    os.environ.setdefault("SENTIMENT_BACKEND", "rule")
    os.environ.setdefault("LOG_PATH", "logs/test-sentiment.log")
    return os.environ["SENTIMENT_BACKEND"]


@pytest.fixture
def upstream() -> FakeUpstream:
    return FakeUpstream()
