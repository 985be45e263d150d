"""Shared fixtures for CLI command tests."""

import httpx
import pytest
from click.testing import CliRunner

import resilient_ops.cli.commands.probe as probe_module


@pytest.fixture
def cli_runner(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    for name in ("RESILIENT_OPS_CONFIG_FILE", "RESILIENT_OPS_MAX_RETRIES", "RESILIENT_OPS_INITIAL_DELAY_MS"):
        monkeypatch.delenv(name, raising=False)
    return CliRunner()


@pytest.fixture
def mock_http(monkeypatch):
    """Route probe requests to a scripted MockTransport.

    Set ``mock_http.responses`` to a list of status codes or exceptions;
    each request consumes one entry (the last entry repeats).
    """

    class Script:
        def __init__(self):
            self.responses = [200]
            self.requests = []

        def handler(self, request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            index = min(len(self.requests) - 1, len(self.responses) - 1)
            outcome = self.responses[index]
            if isinstance(outcome, Exception):
                raise outcome
            return httpx.Response(outcome, json={"message": f"status {outcome}"})

    script = Script()

    def build_client(timeout):
        return httpx.AsyncClient(transport=httpx.MockTransport(script.handler), timeout=timeout)

    monkeypatch.setattr(probe_module, "_build_client", build_client)
    return script