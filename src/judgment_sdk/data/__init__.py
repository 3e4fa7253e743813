"""Evaluation data types."""

from judgment_sdk.data.example import Example
from judgment_sdk.data.result import ScorerData, ScoringResult

__all__ = ["Example", "ScorerData", "ScoringResult"]
