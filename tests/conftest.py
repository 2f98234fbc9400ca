"""Shared pytest fixtures for the am-rest-translator test suite.

Outbound calls never leave the process: every VictorOps client used in
tests is wired to an :class:`httpx.MockTransport` backed by
:class:`~helpers.FakeVictorOps`.
"""

import httpx
import pytest
from fastapi.testclient import TestClient

from amtranslator.api.victorops import get_translator
from amtranslator.main import app
from amtranslator.translators.victorops import VictorOpsTranslator
from amtranslator.victorops.client import VictorOpsClient
from helpers import FakeVictorOps

FAKE_NOW = 1_700_000_000
VICTOROPS_URL = "https://alert.victorops.test"


@pytest.fixture()
def victorops():
    """Return a fresh :class:`FakeVictorOps` endpoint."""
    return FakeVictorOps()


@pytest.fixture()
def victorops_client(victorops):
    """Return a :class:`VictorOpsClient` talking to the fake endpoint."""
    return VictorOpsClient(VICTOROPS_URL, transport=httpx.MockTransport(victorops))


@pytest.fixture()
def client(victorops_client):
    """Return a FastAPI :class:`TestClient` wired to the fake endpoint.

    The ``get_translator`` dependency is overridden so every request
    uses a translator with a fixed clock and the mocked transport.

    Yields:
        A :class:`httpx.Client`-like test client.
    """
    translator = VictorOpsTranslator(victorops_client, clock=lambda: FAKE_NOW)
    app.dependency_overrides[get_translator] = lambda: translator
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
