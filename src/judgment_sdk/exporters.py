"""OTLP span exporter for the Judgment backend.

A drop-in ``OTLPSpanExporter`` that authenticates every export with the
Judgment API key, organization, and project headers.

``OTLPSpanExporter`` accepts a ``session=`` constructor argument and routes
all HTTP calls through it, so the auth headers are set once on a
``requests.Session`` and never patched after init.
"""

from __future__ import annotations

import logging
from typing import Dict, Optional

import requests
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter

from judgment_sdk.config import JudgmentConfig
from judgment_sdk.constants import OTEL_TRACES_ROUTE

logger = logging.getLogger(__name__)


class _JudgmentAuthSession(requests.Session):
    """A ``requests.Session`` that carries Judgment auth headers on every request."""

    def __init__(self, api_key: str, organization_id: str, project_name: str) -> None:
        super().__init__()
        self.headers.update(
            {
                "Authorization": f"Bearer {api_key}",
                "X-Organization-Id": organization_id,
                "X-Project-Id": project_name,
            }
        )


class JudgmentSpanExporter(OTLPSpanExporter):
    """OTLP HTTP span exporter bound to a Judgment project.

    Args:
        config: Credentials and base URL of the Judgment API.
        project_name: Project the spans belong to. Must be non-empty.
        endpoint: Override for the traces endpoint. Defaults to
            ``{config.api_url}/otel/v1/traces``.
        headers: Extra headers for every export.
        **kwargs: Additional arguments passed to OTLPSpanExporter.

    Example:
        exporter = JudgmentSpanExporter(
            JudgmentConfig.from_env(),
            project_name="support-bot",
        )
    """

    def __init__(
        self,
        config: JudgmentConfig,
        project_name: str,
        *,
        endpoint: Optional[str] = None,
        headers: Optional[Dict[str, str]] = None,
        **kwargs,
    ):
        if not project_name or not project_name.strip():
            raise ValueError("project_name is required for JudgmentSpanExporter")

        session = _JudgmentAuthSession(
            api_key=config.api_key,
            organization_id=config.organization_id,
            project_name=project_name,
        )
        if headers:
            session.headers.update(headers)
        kwargs["session"] = session

        self.project_name = project_name
        resolved_endpoint = endpoint or config.url(OTEL_TRACES_ROUTE)
        super().__init__(endpoint=resolved_endpoint, **kwargs)

        logger.info(
            "JudgmentSpanExporter initialized for project=%s endpoint=%s",
            project_name,
            resolved_endpoint,
        )
