"""Evaluation orchestrator for Judgment.

Validates nothing itself (an :class:`EvaluationRun` is valid by
construction). It splits scorers into API and local sets, dispatches each,
merges the per-example results, reports missing data, and optionally
persists the run. The whole flow is recorded under one OTEL span.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from opentelemetry import trace

from judgment_sdk.config import JudgmentConfig
from judgment_sdk.data.example import Example
from judgment_sdk.data.result import ScoringResult
from judgment_sdk.errors import (
    AlignmentError,
    AssertionFailedError,
    JudgmentAPIError,
    ValidationError,
)
from judgment_sdk.evals.api import JudgmentApiClient
from judgment_sdk.evals.local import execute_local_eval
from judgment_sdk.evaluation_run import EvaluationRun
from judgment_sdk.judges import JudgevalJudge
from judgment_sdk.scorers.api_scorers import REQUIRED_FIELDS
from judgment_sdk.scorers.base import APIScorer, LocalScorer
from judgment_sdk.score import emit_result_scores

logger = logging.getLogger(__name__)

_TRACER_NAME = "judgment-sdk-evals"


# ----------------------------------------------------------------------
# Merge and diagnostics
# ----------------------------------------------------------------------


def merge_results(
    api_results: List[ScoringResult],
    local_results: List[ScoringResult],
) -> List[ScoringResult]:
    """Combine API and local results example by example.

    When one side is empty the other is returned unchanged. Otherwise the
    API result at each index receives the local result's scorer data after
    its own, and the local error when it has none.

    Raises:
        AlignmentError: If the lists differ in length or an index pairs two
            different examples.
    """
    if not local_results:
        return api_results
    if not api_results:
        return local_results

    if len(api_results) != len(local_results):
        raise AlignmentError(
            f"The number of API and local results do not match: "
            f"{len(api_results)} vs {len(local_results)}"
        )

    for index, (api_result, local_result) in enumerate(zip(api_results, local_results)):
        api_example = api_result.data_object
        local_example = local_result.data_object
        for field_name in ("input", "actual_output", "expected_output"):
            if getattr(api_example, field_name) != getattr(local_example, field_name):
                raise AlignmentError(
                    f"API and local results at index {index} refer to different examples "
                    f"({field_name} differs)"
                )

        api_result.scorers_data = list(api_result.scorers_data) + list(local_result.scorers_data)
        if api_result.error is None:
            api_result.error = local_result.error

    return api_results


def check_missing_scorer_data(
    results: List[ScoringResult],
    log: Optional[logging.Logger] = None,
) -> List[ScoringResult]:
    """Warn about every result without scorer data. Results are returned untouched."""
    log = log or logger
    for index, result in enumerate(results):
        if not result.scorers_data:
            example_index = result.data_object.example_index
            log.warning(
                "Scorer data is missing for example %s. This is usually caused by the "
                "example lacking fields required by the configured scorers.",
                index if example_index is None else example_index,
                extra={"example_index": index if example_index is None else example_index},
            )
    return results


def check_examples(
    examples: Sequence[Example],
    scorers: Sequence[APIScorer],
    log: Optional[logging.Logger] = None,
) -> List[str]:
    """Warn about examples missing fields their API scorers need.

    Advisory only: scoring is still attempted. Returns the warning messages.
    """
    log = log or logger
    messages: List[str] = []
    for scorer in scorers:
        required = REQUIRED_FIELDS.get(scorer.score_type, [])
        for example in examples:
            for field_name in required:
                if getattr(example, field_name, None):
                    continue
                message = (
                    f"Scorer {scorer.score_type} requires '{field_name}' but example "
                    f"{example.example_index} does not provide it."
                )
                log.warning(
                    "Scorer %s requires %r but example %s does not provide it.",
                    scorer.score_type,
                    field_name,
                    example.example_index,
                    extra={
                        "example_index": example.example_index,
                        "score_type": scorer.score_type,
                        "missing_field": field_name,
                    },
                )
                messages.append(message)
    return messages


def _error_results(examples: Sequence[Example], error: str) -> List[ScoringResult]:
    return [ScoringResult(data_object=example, error=error) for example in examples]


def _api_for(run: EvaluationRun) -> JudgmentApiClient:
    if not run.judgment_api_key or not run.organization_id:
        raise ValidationError(
            "A Judgment API client or judgment_api_key and organization_id are required "
            "for API scorers, async execution and result logging."
        )
    return JudgmentApiClient(
        JudgmentConfig(api_key=run.judgment_api_key, organization_id=run.organization_id)
    )


# ----------------------------------------------------------------------
# Orchestrator
# ----------------------------------------------------------------------


async def run_eval(
    run: EvaluationRun,
    *,
    api: Optional[JudgmentApiClient] = None,
    override: bool = False,
    ignore_errors: bool = True,
    async_execution: bool = False,
    log: Optional[logging.Logger] = None,
    emit_scores: bool = False,
) -> List[ScoringResult]:
    """Execute an evaluation run.

    Args:
        run: The validated run.
        api: Backend client. Built from the run's credentials when omitted
            and the backend is needed.
        override: Skip the eval-run-name collision check.
        ignore_errors: Substitute per-example errors for backend and local
            scorer failures instead of raising.
        async_execution: Enqueue the run on the backend and return ``[]``
            immediately. Poll with ``JudgmentApiClient.poll_until_complete``.
        log: Logger for diagnostics. Defaults to this module's logger.
        emit_scores: Emit one ``gen_ai.evaluation.result`` span per scorer output.

    Returns:
        One :class:`ScoringResult` per example, in example order, or ``[]``
        for async execution.

    Raises:
        NameCollisionError: If the run would overwrite logged results.
        JudgmentAPIError: On backend failures when ``ignore_errors`` is false.
        ScorerExecutionError: On local scorer failures when ``ignore_errors`` is false.
        AlignmentError: If API and local results cannot be merged.
    """
    log = log or logger
    tracer = trace.get_tracer(_TRACER_NAME)

    with tracer.start_as_current_span(
        "judgment.evaluate",
        attributes={
            "judgment.eval_name": run.eval_name or "",
            "judgment.project_name": run.project_name or "",
            "judgment.example_count": len(run.examples),
            "judgment.scorer_count": len(run.scorers),
            "judgment.async_execution": async_execution,
        },
    ) as span:
        try:
            api_scorers, local_scorers = run.partition_scorers()
            needs_backend = async_execution or run.log_results or bool(api_scorers)
            owned_api = None
            if api is None and needs_backend:
                api = owned_api = _api_for(run)
            try:
                results = await _run(
                    run,
                    api,
                    api_scorers,
                    local_scorers,
                    override=override,
                    ignore_errors=ignore_errors,
                    async_execution=async_execution,
                    log=log,
                )
            finally:
                if owned_api is not None:
                    await owned_api.aclose()
        except Exception as exc:
            span.set_status(trace.StatusCode.ERROR, str(exc))
            span.record_exception(exc)
            raise

        span.set_attribute("judgment.result_count", len(results))
        span.set_attribute("judgment.failed_count", sum(1 for r in results if not r.success))

        if emit_scores:
            for result in results:
                try:
                    emit_result_scores(result, eval_name=run.eval_name)
                except Exception as exc:
                    log.warning("Failed to emit scores for example %s: %s", result.data_object.example_index, exc)

    return results


async def _run(
    run: EvaluationRun,
    api: Optional[JudgmentApiClient],
    api_scorers: List[APIScorer],
    local_scorers: List[LocalScorer],
    *,
    override: bool,
    ignore_errors: bool,
    async_execution: bool,
    log: logging.Logger,
) -> List[ScoringResult]:
    if run.log_results and not override:
        await api.check_eval_run_name_exists(run.eval_name, run.project_name)

    for index, example in enumerate(run.examples):
        example.reset_for_run(index)

    if api_scorers:
        check_examples(run.examples, api_scorers, log)

    if async_execution:
        await api.send_to_queue(run)
        log.info("Evaluation %s dispatched for asynchronous execution", run.eval_name)
        return []

    api_results: List[ScoringResult] = []
    if api_scorers:
        try:
            api_results = await api.execute_api_eval(run)
        except JudgmentAPIError as exc:
            if not ignore_errors:
                raise
            log.error("API evaluation failed: %s", exc)
            api_results = _error_results(run.examples, str(exc))

    local_results: List[ScoringResult] = []
    if local_scorers:
        model = run.model.get_model_name() if isinstance(run.model, JudgevalJudge) else None
        local_results = await execute_local_eval(
            run.examples,
            local_scorers,
            ignore_errors=ignore_errors,
            model=model,
            log=log,
        )

    results = merge_results(api_results, local_results)
    if not results:
        results = [ScoringResult(data_object=example) for example in run.examples]

    check_missing_scorer_data(results, log)

    if run.log_results:
        try:
            url = await api.log_evaluation_results(results, run)
        except JudgmentAPIError as exc:
            if not ignore_errors:
                raise
            log.error("Failed to log evaluation results: %s", exc)
        else:
            if url:
                log.info("View results at: %s", url)

    return results


def assert_test(results: Sequence[ScoringResult]) -> None:
    """Raise if any result errored, has no scorer data, or failed a scorer.

    Raises:
        AssertionFailedError: Enumerating every failure.
    """
    failures: List[str] = []
    for result in results:
        index = result.data_object.example_index
        if result.error:
            failures.append(f"Error in result {index}: {result.error}")
        if not result.scorers_data:
            failures.append(f"No scorer data found in result {index}")
            continue
        for scorer_data in result.scorers_data:
            if not scorer_data.success:
                line = (
                    f"Test failed: {scorer_data.name} with score {scorer_data.score} "
                    f"(threshold: {scorer_data.threshold})"
                )
                if scorer_data.error:
                    line += f" error: {scorer_data.error}"
                failures.append(line)

    if failures:
        raise AssertionFailedError(failures)
