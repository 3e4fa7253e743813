"""Connection settings for the Judgment backend.

Environment variables are read once, at the application boundary, by
:meth:`JudgmentConfig.from_env`. Everything below that boundary receives
an explicit config object.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Dict, Optional

from judgment_sdk.constants import DEFAULT_API_URL

API_KEY_ENV = "JUDGMENT_API_KEY"
ORG_ID_ENV = "JUDGMENT_ORG_ID"
API_URL_ENV = "JUDGMENT_API_URL"


@dataclass(frozen=True)
class JudgmentConfig:
    """Credentials and endpoint for the Judgment API.

    Attributes:
        api_key: Judgment API key, sent as a Bearer token.
        organization_id: Organization sent as ``X-Organization-Id``.
        api_url: Base URL of the backend.
        timeout: Per-request timeout in seconds.
    """

    api_key: str
    organization_id: str
    api_url: str = DEFAULT_API_URL
    timeout: float = 30.0

    @classmethod
    def from_env(
        cls,
        *,
        api_key: Optional[str] = None,
        organization_id: Optional[str] = None,
        api_url: Optional[str] = None,
        timeout: float = 30.0,
    ) -> "JudgmentConfig":
        """Build a config, falling back to environment variables.

        Raises:
            ValueError: If no API key or organization id can be resolved.
        """
        api_key = api_key or os.environ.get(API_KEY_ENV)
        organization_id = organization_id or os.environ.get(ORG_ID_ENV)
        api_url = api_url or os.environ.get(API_URL_ENV, DEFAULT_API_URL)

        if not api_key:
            raise ValueError(
                f"Judgment API key is required. Pass api_key or set {API_KEY_ENV}."
            )
        if not organization_id:
            raise ValueError(
                f"Organization ID is required. Pass organization_id or set {ORG_ID_ENV}."
            )

        return cls(
            api_key=api_key,
            organization_id=organization_id,
            api_url=api_url.rstrip("/"),
            timeout=timeout,
        )

    def with_url(self, api_url: str) -> "JudgmentConfig":
        return replace(self, api_url=api_url.rstrip("/"))

    def url(self, route: str) -> str:
        return f"{self.api_url.rstrip('/')}{route}"

    def auth_headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
            "X-Organization-Id": self.organization_id,
        }
