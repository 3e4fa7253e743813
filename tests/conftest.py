"""Shared test fixtures for judgment-sdk-py tests.

Sets up a TracerProvider with InMemorySpanExporter so tests can capture
and assert on spans without a real collector, and a fake Judgment backend
built on ``httpx.MockTransport``.

The global TracerProvider can only be set once per process and proxy
tracers cache the first real tracer they see, so one provider is installed
at import time and the exporter is cleared around every test.
"""

import json

import httpx
import pytest
from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter

from judgment_sdk.config import JudgmentConfig
from judgment_sdk.evals.api import JudgmentApiClient

# Module-level singletons, initialised once per process.
_exporter = InMemorySpanExporter()
_provider = TracerProvider(
    resource=Resource.create({"service.name": "test-service"}),
)
_provider.add_span_processor(SimpleSpanProcessor(_exporter))

trace._TRACER_PROVIDER_SET_ONCE._done = False
trace._TRACER_PROVIDER = None
trace.set_tracer_provider(_provider)

API_URL = "https://judgment.test"


@pytest.fixture(autouse=True)
def _clear_spans():
    """Clear the shared InMemorySpanExporter before and after every test."""
    _exporter.clear()
    yield
    _exporter.clear()


@pytest.fixture()
def exporter():
    """Provide the shared InMemorySpanExporter for tests that need it."""
    return _exporter


@pytest.fixture()
def config():
    return JudgmentConfig(api_key="test-key", organization_id="test-org", api_url=API_URL)


class FakeBackend:
    """Routes requests to per-path handlers and records every call.

    Register a handler with ``backend.on("/evaluate/", handler)`` where the
    handler receives the decoded JSON body and returns an ``httpx.Response``
    (or a JSON-serializable value, sent with status 200).
    """

    def __init__(self):
        self.handlers = {}
        self.calls = []

    def on(self, path, handler):
        self.handlers[path] = handler

    def paths(self):
        return [path for path, _ in self.calls]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content) if request.content else None
        self.calls.append((request.url.path, body))
        handler = self.handlers.get(request.url.path)
        if handler is None:
            return httpx.Response(404, json={"detail": f"no handler for {request.url.path}"})
        outcome = handler(body)
        if isinstance(outcome, httpx.Response):
            return outcome
        return httpx.Response(200, json=outcome)


@pytest.fixture()
def backend():
    return FakeBackend()


@pytest.fixture()
def api(config, backend):
    """A JudgmentApiClient whose HTTP traffic goes to ``backend``."""
    client = httpx.AsyncClient(transport=httpx.MockTransport(backend))
    return JudgmentApiClient(config, client=client)
