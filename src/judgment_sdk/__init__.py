"""Judgment SDK.

Evaluation orchestration for LLM applications: API-hosted and local
scorers, result merging, alerting rules, and OTEL-native tracing.
"""

from judgment_sdk.client import JudgmentClient
from judgment_sdk.config import JudgmentConfig
from judgment_sdk.constants import APIScorerType
from judgment_sdk.data import Example, ScorerData, ScoringResult
from judgment_sdk.errors import (
    AlignmentError,
    AssertionFailedError,
    EvaluationTimeoutError,
    JudgmentAPIError,
    JudgmentError,
    NameCollisionError,
    ScorerExecutionError,
    ValidationError,
)
from judgment_sdk.evals import JudgmentApiClient, assert_test, run_eval
from judgment_sdk.evaluation_run import EvaluationRun
from judgment_sdk.judges import JudgevalJudge
from judgment_sdk.register import register
from judgment_sdk.rules import AlertStatus, Condition, Rule, RulesEngine
from judgment_sdk.score import score

__all__ = [
    # Setup
    "JudgmentConfig",
    "register",
    # Data
    "Example",
    "ScorerData",
    "ScoringResult",
    "EvaluationRun",
    "APIScorerType",
    "JudgevalJudge",
    # Evaluation
    "JudgmentClient",
    "JudgmentApiClient",
    "run_eval",
    "assert_test",
    "score",
    # Rules
    "Rule",
    "Condition",
    "RulesEngine",
    "AlertStatus",
    # Errors
    "JudgmentError",
    "ValidationError",
    "JudgmentAPIError",
    "NameCollisionError",
    "AlignmentError",
    "ScorerExecutionError",
    "EvaluationTimeoutError",
    "AssertionFailedError",
]
