"""Exception types raised by the Judgment SDK."""

from __future__ import annotations

from typing import List, Optional

import httpx


class JudgmentError(Exception):
    """Base class for all SDK errors."""


class ValidationError(JudgmentError, ValueError):
    """Raised when an evaluation input is malformed."""


class JudgmentAPIError(JudgmentError):
    """Raised when a call to the Judgment backend fails.

    Attributes:
        status_code: HTTP status, or None for transport failures.
        detail: The server's ``detail`` message when one was returned.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        detail: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.detail = detail

    @classmethod
    def from_response(cls, response: httpx.Response, context: str) -> "JudgmentAPIError":
        detail = _extract_detail(response)
        return cls(
            f"{context}: {detail}",
            status_code=response.status_code,
            detail=detail,
        )


class NameCollisionError(JudgmentAPIError):
    """Raised when an eval run name already exists for the project."""


class AlignmentError(JudgmentError):
    """Raised when API and local result lists cannot be matched 1:1."""


class ScorerExecutionError(JudgmentError):
    """Raised when a local scorer fails and errors are not being ignored."""

    def __init__(self, scorer_name: str, example_index: Optional[int], message: str) -> None:
        super().__init__(
            f"Scorer '{scorer_name}' failed on example {example_index}: {message}"
        )
        self.scorer_name = scorer_name
        self.example_index = example_index


class EvaluationTimeoutError(JudgmentError):
    """Raised when an async evaluation does not finish in the allotted attempts."""


class AssertionFailedError(JudgmentError, AssertionError):
    """Raised by ``assert_test`` with every failing result enumerated."""

    def __init__(self, failures: List[str]) -> None:
        super().__init__("Test assertion failed:\n" + "\n".join(failures))
        self.failures = failures


def _extract_detail(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    if isinstance(body, dict) and body.get("detail"):
        return str(body["detail"])
    return str(body)
