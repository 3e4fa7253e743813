"""Tests for judgment_sdk.evals.evaluate.

Covers merge_results, the diagnostics helpers, assert_test, and the
run_eval orchestrator against a fake backend: alignment across scorer
combinations, async dispatch, name collisions, error policy, persistence,
and span output.
"""

import logging

import httpx
import pytest
from opentelemetry.trace import StatusCode

from judgment_sdk.data import Example, ScorerData, ScoringResult
from judgment_sdk.errors import (
    AlignmentError,
    AssertionFailedError,
    JudgmentAPIError,
    NameCollisionError,
    ScorerExecutionError,
    ValidationError,
)
from judgment_sdk.evals.evaluate import (
    assert_test,
    check_examples,
    check_missing_scorer_data,
    merge_results,
    run_eval,
)
from judgment_sdk.evaluation_run import EvaluationRun
from judgment_sdk.scorers import (
    AnswerCorrectnessScorer,
    ExactMatchScorer,
    FaithfulnessScorer,
    LocalScorer,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class ExplodingScorer(LocalScorer):
    def __init__(self):
        super().__init__("exploding", 0.5)

    def score_example(self, example):
        raise RuntimeError("scorer exploded")


def _examples(n=3):
    return [
        Example(input=f"q{i}", actual_output=f"a{i}", expected_output=f"a{i}" if i % 2 == 0 else "other")
        for i in range(n)
    ]


def _api_scores(body):
    """Backend handler: one passing faithfulness score per submitted example."""
    return [
        {
            "scorers_data": [
                {"name": "faithfulness", "threshold": 0.7, "success": True, "score": 0.9}
            ],
            "error": None,
        }
        for _ in body["examples"]
    ]


def _result(example, *names, error=None):
    return ScoringResult(
        data_object=example,
        scorers_data=[ScorerData(name=name, threshold=0.5, success=True, score=1.0) for name in names],
        error=error,
    )


# ---------------------------------------------------------------------------
# merge_results
# ---------------------------------------------------------------------------


class TestMergeResults:
    """Combining API and local results."""

    def test_empty_local_returns_api(self):
        api_results = [_result(Example(input="q"), "a")]
        assert merge_results(api_results, []) is api_results

    def test_empty_api_returns_local(self):
        local_results = [_result(Example(input="q"), "b")]
        assert merge_results([], local_results) is local_results

    def test_concatenates_api_first(self):
        examples = _examples(2)
        merged = merge_results(
            [_result(ex, "api") for ex in examples],
            [_result(ex, "local") for ex in examples],
        )
        for result in merged:
            assert [d.name for d in result.scorers_data] == ["api", "local"]
        assert [r.data_object for r in merged] == examples

    def test_local_error_carried_when_api_has_none(self):
        example = Example(input="q")
        merged = merge_results([_result(example, "api")], [_result(example, "local", error="boom")])
        assert merged[0].error == "boom"

    def test_length_mismatch(self):
        examples = _examples(2)
        with pytest.raises(AlignmentError):
            merge_results([_result(examples[0], "a")], [_result(ex, "b") for ex in examples])

    def test_misaligned_examples(self):
        a, b = _examples(2)
        with pytest.raises(AlignmentError, match="index 0"):
            merge_results([_result(a, "api")], [_result(b, "local")])


# ---------------------------------------------------------------------------
# Diagnostics
# ---------------------------------------------------------------------------


class TestDiagnostics:
    """Missing-data warnings never change results."""

    def test_missing_scorer_data_warns(self, caplog):
        examples = _examples(2)
        examples[1].reset_for_run(1)
        results = [_result(examples[0], "a"), ScoringResult(data_object=examples[1])]

        with caplog.at_level(logging.WARNING):
            returned = check_missing_scorer_data(results)

        assert returned is results
        assert len(results[1].scorers_data) == 0
        (record,) = [r for r in caplog.records if "Scorer data is missing" in r.getMessage()]
        assert record.example_index == 1

    def test_check_examples_flags_missing_field(self, caplog):
        example = Example(input="q", actual_output="a")
        example.reset_for_run(0)

        with caplog.at_level(logging.WARNING):
            messages = check_examples([example], [AnswerCorrectnessScorer()])

        assert len(messages) == 1
        record = caplog.records[0]
        assert record.missing_field == "expected_output"
        assert record.score_type == "answer_correctness"

    def test_check_examples_quiet_when_complete(self):
        example = Example(input="q", actual_output="a", expected_output="a")
        assert check_examples([example], [AnswerCorrectnessScorer(), FaithfulnessScorer()]) == []


# ---------------------------------------------------------------------------
# assert_test
# ---------------------------------------------------------------------------


class TestAssertTest:
    """The CI gate."""

    def test_passes_when_all_succeed(self):
        assert_test([_result(Example(input="q"), "a")])

    def test_enumerates_failing_scorer(self):
        passing = _result(Example(input="q0"), "a")
        failing = ScoringResult(
            data_object=Example(input="q1"),
            scorers_data=[ScorerData(name="faithfulness", threshold=0.7, success=False, score=0.2)],
        )

        with pytest.raises(AssertionFailedError) as info:
            assert_test([passing, failing])

        message = str(info.value)
        assert "faithfulness" in message
        assert "0.2" in message
        assert "0.7" in message
        assert len(info.value.failures) == 1

    def test_reports_errors_and_empty_results(self):
        errored = _result(Example(input="q0"), "a", error="backend down")
        empty = ScoringResult(data_object=Example(input="q1"))

        with pytest.raises(AssertionFailedError) as info:
            assert_test([errored, empty])

        assert any("backend down" in f for f in info.value.failures)
        assert any("No scorer data" in f for f in info.value.failures)

    def test_is_an_assertion_error(self):
        with pytest.raises(AssertionError):
            assert_test([ScoringResult(data_object=Example(input="q"))])


# ---------------------------------------------------------------------------
# run_eval
# ---------------------------------------------------------------------------


def _run(scorers, n=3, **overrides):
    kwargs = dict(
        examples=_examples(n),
        scorers=scorers,
        model="gpt-4o",
        project_name="proj",
        eval_name="run-1",
    )
    kwargs.update(overrides)
    return EvaluationRun(**kwargs)


class TestRunEvalAlignment:
    """N examples in, N results out, in order."""

    @pytest.mark.asyncio
    async def test_api_only(self, api, backend):
        backend.on("/evaluate/", _api_scores)
        run = _run([FaithfulnessScorer()])

        results = await run_eval(run, api=api)

        assert [r.data_object for r in results] == run.examples
        assert all(r.scorers_data[0].name == "faithfulness" for r in results)

    @pytest.mark.asyncio
    async def test_local_only(self, api, backend):
        run = _run([ExactMatchScorer()])

        results = await run_eval(run, api=api)

        assert [r.data_object for r in results] == run.examples
        assert [r.scorers_data[0].success for r in results] == [True, False, True]
        assert backend.calls == []

    @pytest.mark.asyncio
    async def test_both(self, api, backend):
        backend.on("/evaluate/", _api_scores)
        run = _run([ExactMatchScorer(), FaithfulnessScorer()])

        results = await run_eval(run, api=api)

        assert len(results) == 3
        for result in results:
            assert [d.name for d in result.scorers_data] == ["faithfulness", "exact_match"]

    @pytest.mark.asyncio
    async def test_neither_produces_empty_results(self, api, backend):
        backend.on("/evaluate/", lambda body: [{"scorers_data": []} for _ in body["examples"]])
        run = _run([FaithfulnessScorer()])

        results = await run_eval(run, api=api)

        assert len(results) == 3
        assert all(r.scorers_data == [] for r in results)

    @pytest.mark.asyncio
    async def test_examples_indexed_in_order(self, api):
        run = _run([ExactMatchScorer()])
        results = await run_eval(run, api=api)
        assert [r.data_object.example_index for r in results] == [0, 1, 2]


class TestRunEvalErrors:
    """ignore_errors policy."""

    @pytest.mark.asyncio
    async def test_api_failure_substituted(self, api, backend):
        backend.on("/evaluate/", lambda body: httpx.Response(500, json={"detail": "scorer pool down"}))
        run = _run([FaithfulnessScorer(), ExactMatchScorer()])

        results = await run_eval(run, api=api)

        assert len(results) == 3
        for result in results:
            assert "scorer pool down" in result.error
            assert [d.name for d in result.scorers_data] == ["exact_match"]

    @pytest.mark.asyncio
    async def test_api_failure_propagates(self, api, backend):
        backend.on("/evaluate/", lambda body: httpx.Response(500, json={"detail": "scorer pool down"}))
        with pytest.raises(JudgmentAPIError):
            await run_eval(_run([FaithfulnessScorer()]), api=api, ignore_errors=False)

    @pytest.mark.asyncio
    async def test_local_failure_captured(self, api):
        results = await run_eval(_run([ExplodingScorer()]), api=api)
        assert all("scorer exploded" in r.error for r in results)

    @pytest.mark.asyncio
    async def test_local_failure_propagates(self, api):
        with pytest.raises(ScorerExecutionError):
            await run_eval(_run([ExplodingScorer()]), api=api, ignore_errors=False)

    @pytest.mark.asyncio
    async def test_missing_field_is_advisory(self, api, backend, caplog):
        backend.on(
            "/evaluate/",
            lambda body: [
                {
                    "scorers_data": [
                        {"name": "answer_correctness", "threshold": 0.7, "error": "expected_output missing"}
                    ]
                }
            ],
        )
        run = EvaluationRun(
            examples=[Example(input="q", actual_output="a")],
            scorers=[AnswerCorrectnessScorer()],
            model="gpt-4o",
        )

        with caplog.at_level(logging.WARNING):
            results = await run_eval(run, api=api)

        assert len(backend.calls) == 1
        assert results[0].scorers_data[0].error == "expected_output missing"
        assert any(getattr(r, "missing_field", None) == "expected_output" for r in caplog.records)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "scorers_data",
        [{"name": "faithfulness"}, ["faithfulness"], "faithfulness"],
    )
    async def test_malformed_scorers_data_substituted(self, api, backend, scorers_data):
        backend.on(
            "/evaluate/",
            lambda body: [{"scorers_data": scorers_data, "error": None} for _ in body["examples"]],
        )
        run = _run([FaithfulnessScorer(), ExactMatchScorer()])

        results = await run_eval(run, api=api, ignore_errors=True)

        assert [r.data_object for r in results] == run.examples
        for result in results:
            assert "Unexpected scorers_data" in result.error
            assert [d.name for d in result.scorers_data] == ["exact_match"]

    @pytest.mark.asyncio
    async def test_malformed_scorers_data_propagates(self, api, backend):
        backend.on(
            "/evaluate/",
            lambda body: [{"scorers_data": {"name": "faithfulness"}} for _ in body["examples"]],
        )
        with pytest.raises(JudgmentAPIError, match="Unexpected scorers_data"):
            await run_eval(_run([FaithfulnessScorer()]), api=api, ignore_errors=False)

    @pytest.mark.asyncio
    async def test_missing_backend_credentials(self):
        run = _run([FaithfulnessScorer()])
        with pytest.raises(ValidationError, match="judgment_api_key"):
            await run_eval(run)


class TestRunEvalAsync:
    """Async dispatch always returns an empty list."""

    @pytest.mark.asyncio
    async def test_returns_empty_after_enqueue(self, api, backend):
        backend.on("/add_to_run_eval_queue/", lambda body: {"ok": True})
        run = _run([FaithfulnessScorer(), ExactMatchScorer()])

        assert await run_eval(run, api=api, async_execution=True) == []
        assert backend.paths() == ["/add_to_run_eval_queue/"]

    @pytest.mark.asyncio
    async def test_queue_failure_not_raised(self, api, backend):
        backend.on("/add_to_run_eval_queue/", lambda body: httpx.Response(503))
        assert await run_eval(_run([ExactMatchScorer()]), api=api, async_execution=True) == []

    @pytest.mark.asyncio
    async def test_queue_failure_not_raised_without_ignore_errors(self, api, backend):
        backend.on("/add_to_run_eval_queue/", lambda body: httpx.Response(503))
        results = await run_eval(
            _run([FaithfulnessScorer()]), api=api, async_execution=True, ignore_errors=False
        )
        assert results == []


class TestRunEvalPersistence:
    """Name collision guard and result logging."""

    @pytest.mark.asyncio
    async def test_name_collision_before_dispatch(self, api, backend):
        backend.on("/eval-run-name-exists/", lambda body: httpx.Response(409, json={"detail": "exists"}))
        backend.on("/evaluate/", _api_scores)
        run = _run([FaithfulnessScorer()], log_results=True)

        with pytest.raises(NameCollisionError):
            await run_eval(run, api=api)

        assert backend.paths() == ["/eval-run-name-exists/"]

    @pytest.mark.asyncio
    async def test_override_skips_name_check(self, api, backend):
        backend.on("/evaluate/", _api_scores)
        backend.on("/log_eval_results/", lambda body: {"ui_results_url": "https://app/run-1"})
        run = _run([FaithfulnessScorer()], log_results=True)

        await run_eval(run, api=api, override=True)

        assert backend.paths() == ["/evaluate/", "/log_eval_results/"]

    @pytest.mark.asyncio
    async def test_results_logged(self, api, backend, caplog):
        backend.on("/eval-run-name-exists/", lambda body: {"exists": False})
        backend.on("/evaluate/", _api_scores)
        backend.on("/log_eval_results/", lambda body: {"ui_results_url": "https://app/run-1"})
        run = _run([FaithfulnessScorer()], log_results=True)

        with caplog.at_level(logging.INFO):
            results = await run_eval(run, api=api)

        path, body = backend.calls[-1]
        assert path == "/log_eval_results/"
        assert len(body["results"]) == len(results) == 3
        assert "https://app/run-1" in caplog.text

    @pytest.mark.asyncio
    async def test_log_failure_ignored(self, api, backend):
        backend.on("/eval-run-name-exists/", lambda body: {"exists": False})
        backend.on("/log_eval_results/", lambda body: httpx.Response(500))
        run = _run([ExactMatchScorer()], log_results=True)

        results = await run_eval(run, api=api)

        assert len(results) == 3

    @pytest.mark.asyncio
    async def test_log_failure_propagates(self, api, backend):
        backend.on("/eval-run-name-exists/", lambda body: {"exists": False})
        backend.on("/log_eval_results/", lambda body: httpx.Response(500))
        run = _run([ExactMatchScorer()], log_results=True)

        with pytest.raises(JudgmentAPIError):
            await run_eval(run, api=api, ignore_errors=False)


class TestRunEvalSpans:
    """OTEL output."""

    @pytest.mark.asyncio
    async def test_evaluate_span(self, api, exporter):
        await run_eval(_run([ExactMatchScorer()]), api=api)

        (span,) = [s for s in exporter.get_finished_spans() if s.name == "judgment.evaluate"]
        assert span.attributes["judgment.eval_name"] == "run-1"
        assert span.attributes["judgment.example_count"] == 3
        assert span.attributes["judgment.result_count"] == 3
        assert span.attributes["judgment.failed_count"] == 1

    @pytest.mark.asyncio
    async def test_error_recorded_on_span(self, api, exporter):
        with pytest.raises(ScorerExecutionError):
            await run_eval(_run([ExplodingScorer()]), api=api, ignore_errors=False)

        (span,) = [s for s in exporter.get_finished_spans() if s.name == "judgment.evaluate"]
        assert span.status.status_code == StatusCode.ERROR
        assert any(event.name == "exception" for event in span.events)

    @pytest.mark.asyncio
    async def test_emit_scores(self, api, exporter):
        await run_eval(_run([ExactMatchScorer()]), api=api, emit_scores=True)

        score_spans = [s for s in exporter.get_finished_spans() if s.name == "gen_ai.evaluation.result"]
        assert len(score_spans) == 3
        assert {s.attributes["gen_ai.evaluation.score.label"] for s in score_spans} == {"pass", "fail"}
