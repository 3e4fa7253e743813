"""OTEL pipeline setup for Judgment tracing.

The register() function is the single entry point for configuring
tracing. It creates a TracerProvider bound to a Judgment project and wires
it to a JudgmentSpanExporter, so spans from instrumented code and from
evaluation runs reach the same backend.
"""

from __future__ import annotations

import logging
from typing import Optional

from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import (
    BatchSpanProcessor,
    SimpleSpanProcessor,
    SpanExporter,
)

from judgment_sdk.config import JudgmentConfig
from judgment_sdk.exporters import JudgmentSpanExporter

logger = logging.getLogger(__name__)

DEFAULT_PROJECT = "default_project"


def register(
    config: Optional[JudgmentConfig] = None,
    *,
    project_name: str = DEFAULT_PROJECT,
    service_name: Optional[str] = None,
    batch: bool = True,
    exporter: Optional[SpanExporter] = None,
    set_global: bool = True,
) -> TracerProvider:
    """Configure the OTEL tracing pipeline for Judgment.

    Args:
        config: Judgment credentials. Resolved from the environment
            (``JUDGMENT_API_KEY``, ``JUDGMENT_ORG_ID``, ``JUDGMENT_API_URL``)
            when omitted and no custom exporter is given.
        project_name: Project the spans are recorded under.
        service_name: ``service.name`` resource attribute. Defaults to
            ``project_name``.
        batch: Use BatchSpanProcessor (True) or SimpleSpanProcessor (False).
        exporter: Custom SpanExporter. Overrides config.
        set_global: Set as the global TracerProvider (default: True).

    Returns:
        The configured TracerProvider.

    Examples:
        # Credentials from the environment
        register(project_name="support-bot")

        # Explicit credentials
        register(JudgmentConfig(api_key="...", organization_id="..."), project_name="qa")
    """
    resource = Resource.create({"service.name": service_name or project_name})
    provider = TracerProvider(resource=resource)

    if exporter is None:
        config = config or JudgmentConfig.from_env()
        exporter = JudgmentSpanExporter(config, project_name)

    if batch:
        processor = BatchSpanProcessor(exporter)
    else:
        processor = SimpleSpanProcessor(exporter)
    provider.add_span_processor(processor)

    if set_global:
        trace.set_tracer_provider(provider)

    logger.info("Judgment tracing initialized: project=%s batch=%s", project_name, batch)
    return provider
