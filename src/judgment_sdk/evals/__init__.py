"""Evaluation orchestration: remote and local dispatch, merge, and assertions."""

from judgment_sdk.evals.api import EvalStatus, JudgmentApiClient, RunRef
from judgment_sdk.evals.evaluate import (
    assert_test,
    check_examples,
    check_missing_scorer_data,
    merge_results,
    run_eval,
)
from judgment_sdk.evals.local import execute_local_eval

__all__ = [
    "JudgmentApiClient",
    "EvalStatus",
    "RunRef",
    "run_eval",
    "merge_results",
    "check_missing_scorer_data",
    "check_examples",
    "execute_local_eval",
    "assert_test",
]
