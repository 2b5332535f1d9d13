# skillstreak/conftest.py
import pytest


@pytest.fixture(scope="function", autouse=True)
def reset_state():
    """
    Clear in-memory run history, user stats and the run rate limiter.

    Each test should start with a clean slate.
    """
    from skillstreak.features.runs.service import run_service

    run_service.reset()
    yield
    run_service.reset()


@pytest.fixture
def client():
    from fastapi.testclient import TestClient
    from skillstreak.main import app

    with TestClient(app) as test_client:
        yield test_client
