"""Local scorer that checks for an exact output match."""

from __future__ import annotations

from typing import Any

from judgment_sdk.data.example import Example
from judgment_sdk.data.result import ScorerData
from judgment_sdk.scorers.base import LocalScorer


def _normalize(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, list):
        return "\n".join(str(v).strip() for v in value)
    return str(value).strip()


class ExactMatchScorer(LocalScorer):
    """Scores 1.0 when ``actual_output`` equals ``expected_output`` after stripping."""

    def __init__(self, threshold: float = 1.0, **options: Any) -> None:
        super().__init__("exact_match", threshold, **options)

    def score_example(self, example: Example) -> ScorerData:
        self.error = None
        self.verbose_logs = None

        if not example.expected_output:
            self.score = 0.0
            self.reason = "Expected output is required for exact match scoring"
            self.error = "Missing expected output"
            return self._build_scorer_data(evaluation_model="exact-match")

        actual = _normalize(example.actual_output)
        expected = _normalize(example.expected_output)
        matched = actual == expected

        self.score = 1.0 if matched else 0.0
        if matched:
            self.reason = "The actual output exactly matches the expected output."
        else:
            self.reason = (
                f'The actual output "{actual}" does not match the expected output "{expected}".'
            )
        self.verbose_logs = f'Comparing: "{actual}" with "{expected}"'
        return self._build_scorer_data(evaluation_model="exact-match")
