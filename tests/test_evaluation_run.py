"""Tests for judgment_sdk.evaluation_run.

Covers the validation order, model and aggregator rules, rule/scorer
compatibility, partitioning, and payload serialization.
"""

import pytest

from judgment_sdk.data import Example
from judgment_sdk.errors import ValidationError
from judgment_sdk.evaluation_run import EvaluationRun
from judgment_sdk.judges import JudgevalJudge
from judgment_sdk.rules import Condition, Rule
from judgment_sdk.scorers import ExactMatchScorer, FaithfulnessScorer


class EchoJudge(JudgevalJudge):
    def generate(self, prompt):
        return str(prompt)

    async def a_generate(self, prompt):
        return str(prompt)


def _run(**overrides):
    kwargs = dict(
        examples=[Example(input="q", actual_output="a")],
        scorers=[FaithfulnessScorer()],
        model="gpt-4o",
    )
    kwargs.update(overrides)
    return EvaluationRun(**kwargs)


class TestValidation:
    """Each field's failure mode, in validation order."""

    def test_valid_run(self):
        run = _run()
        assert len(run.examples) == 1

    def test_log_results_must_be_bool(self):
        with pytest.raises(ValidationError, match="log_results must be a boolean"):
            _run(log_results="yes")

    def test_log_results_requires_project_name(self):
        with pytest.raises(ValidationError, match="Project name is required"):
            _run(log_results=True, eval_name="e")

    def test_log_results_requires_eval_name(self):
        with pytest.raises(ValidationError, match="Eval name is required"):
            _run(log_results=True, project_name="p")

    def test_first_failure_wins(self):
        with pytest.raises(ValidationError, match="log_results"):
            _run(log_results=1, examples=[], scorers=[])

    def test_empty_examples(self):
        with pytest.raises(ValidationError, match="Examples cannot be empty"):
            _run(examples=[])

    def test_wrong_example_type(self):
        with pytest.raises(ValidationError, match="Invalid type for Example"):
            _run(examples=[{"input": "q"}])

    def test_duplicate_example_ids(self):
        with pytest.raises(ValidationError, match="Duplicate example_id"):
            _run(examples=[Example(input="a", example_id="x"), Example(input="b", example_id="x")])

    def test_empty_scorers(self):
        with pytest.raises(ValidationError, match="Scorers cannot be empty"):
            _run(scorers=[])

    def test_wrong_scorer_type(self):
        with pytest.raises(ValidationError, match="Invalid type for Scorer"):
            _run(scorers=["faithfulness"])

    def test_unknown_model(self):
        with pytest.raises(ValidationError, match="not recognized"):
            _run(model="my-secret-model")

    def test_model_list_requires_aggregator(self):
        with pytest.raises(ValidationError, match="Aggregator cannot be empty"):
            _run(model=["gpt-4o", "gpt-4.1"])

    def test_model_list_with_aggregator(self):
        run = _run(model=["gpt-4o", "gpt-4.1"], aggregator="gpt-4o")
        assert run.aggregator == "gpt-4o"

    def test_judge_requires_local_scorers(self):
        with pytest.raises(ValidationError, match="JudgevalJudge"):
            _run(model=EchoJudge("echo"))

    def test_judge_with_local_scorers(self):
        run = _run(model=EchoJudge("echo"), scorers=[ExactMatchScorer()])
        assert run.to_payload()["model"] == "echo"

    def test_rules_forbid_local_scorers(self):
        rule = Rule("r", [Condition(FaithfulnessScorer())])
        with pytest.raises(ValidationError, match="Cannot use local scorers"):
            _run(scorers=[FaithfulnessScorer(), ExactMatchScorer()], rules=[rule])


class TestPartitionAndPayload:
    """Scorer partition and serialization."""

    def test_partition_by_remote_marker(self):
        api_scorer, local_scorer = FaithfulnessScorer(), ExactMatchScorer()
        run = _run(scorers=[local_scorer, api_scorer])
        assert run.partition_scorers() == ([api_scorer], [local_scorer])

    def test_payload_restricted_to_given_scorers(self):
        run = _run(scorers=[FaithfulnessScorer(), ExactMatchScorer()])
        api_scorers, _ = run.partition_scorers()
        payload = run.to_payload(scorers=api_scorers)
        assert [s["score_type"] for s in payload["scorers"]] == ["faithfulness"]
        assert payload["examples"][0]["input"] == "q"

    def test_payload_includes_rules(self):
        rule = Rule("r", [Condition(FaithfulnessScorer())])
        payload = _run(rules=[rule]).to_payload()
        assert payload["rules"][0]["name"] == "r"
