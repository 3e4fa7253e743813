"""Shared constants for the Judgment SDK.

Scorer kinds, judge model catalogue, and backend route names.
"""

from __future__ import annotations

from enum import Enum


class APIScorerType(str, Enum):
    """Scorer kinds evaluated by the Judgment backend.

    Lookup by value is case-insensitive, so ``APIScorerType("Faithfulness")``
    resolves to ``APIScorerType.FAITHFULNESS``.
    """

    FAITHFULNESS = "faithfulness"
    ANSWER_RELEVANCY = "answer_relevancy"
    ANSWER_CORRECTNESS = "answer_correctness"
    HALLUCINATION = "hallucination"
    SUMMARIZATION = "summarization"
    CONTEXTUAL_RECALL = "contextual_recall"
    CONTEXTUAL_RELEVANCY = "contextual_relevancy"
    CONTEXTUAL_PRECISION = "contextual_precision"
    INSTRUCTION_ADHERENCE = "instruction_adherence"
    EXECUTION_ORDER = "execution_order"
    JSON_CORRECTNESS = "json_correctness"
    COMPARISON = "comparison"
    GROUNDEDNESS = "groundedness"
    TEXT2SQL = "text2sql"

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            lowered = value.lower()
            for member in cls:
                if member.value == lowered:
                    return member
        return None


# Scorer kinds whose scores are not bounded to [0, 1].
UNBOUNDED_SCORERS = frozenset({APIScorerType.COMPARISON.value})

DEFAULT_API_URL = "https://api.judgmentlabs.ai"
DEFAULT_MODEL = "meta-llama/Meta-Llama-3-8B-Instruct-Turbo"

# Backend routes, relative to the configured API URL.
EVALUATE_ROUTE = "/evaluate/"
ADD_TO_RUN_EVAL_QUEUE_ROUTE = "/add_to_run_eval_queue/"
CHECK_EVAL_STATUS_ROUTE = "/check-eval-status/"
FETCH_EVAL_RESULTS_ROUTE = "/fetch_eval_results/"
EVAL_RUN_NAME_EXISTS_ROUTE = "/eval-run-name-exists/"
LOG_EVAL_RESULTS_ROUTE = "/log_eval_results/"
DELETE_EVAL_RESULTS_ROUTE = "/delete_eval_results_by_project_and_run_names/"
DELETE_PROJECT_EVALS_ROUTE = "/delete_eval_results_by_project/"
PROJECT_CREATE_ROUTE = "/projects/add/"
PROJECT_DELETE_ROUTE = "/projects/delete/"
OTEL_TRACES_ROUTE = "/otel/v1/traces"

TOGETHER_SUPPORTED_MODELS = frozenset(
    {
        "meta-llama/Meta-Llama-3-70B-Instruct-Turbo",
        "meta-llama/Meta-Llama-3-8B-Instruct-Turbo",
        "meta-llama/Meta-Llama-3-8B-Instruct-Lite",
        "meta-llama/Meta-Llama-3-70B-Instruct-Lite",
        "meta-llama/Meta-Llama-3.1-8B-Instruct-Turbo",
        "meta-llama/Meta-Llama-3.1-70B-Instruct-Turbo",
        "meta-llama/Meta-Llama-3.1-405B-Instruct-Turbo",
        "meta-llama/Llama-3.2-3B-Instruct-Turbo",
        "meta-llama/Llama-3.3-70B-Instruct-Turbo",
        "meta-llama/Llama-3-8b-chat-hf",
        "meta-llama/Llama-3-70b-chat-hf",
        "meta-llama/Llama-2-7b-chat-hf",
        "meta-llama/Llama-2-13b-chat-hf",
        "Qwen/Qwen2-72B-Instruct",
        "Qwen/Qwen2.5-7B-Instruct-Turbo",
        "Qwen/Qwen2.5-72B-Instruct-Turbo",
        "Qwen/Qwen2.5-Coder-32B-Instruct",
        "Qwen/QwQ-32B-Preview",
        "deepseek-ai/DeepSeek-R1",
        "deepseek-ai/DeepSeek-V3",
        "deepseek-ai/DeepSeek-R1-Distill-Llama-70B",
        "google/gemma-2-9b-it",
        "google/gemma-2-27b-it",
        "google/gemma-2b-it",
        "mistralai/Mistral-7B-Instruct-v0.1",
        "mistralai/Mistral-7B-Instruct-v0.2",
        "mistralai/Mistral-7B-Instruct-v0.3",
        "mistralai/Mixtral-8x7B-Instruct-v0.1",
        "mistralai/Mixtral-8x22B-Instruct-v0.1",
        "mistralai/Mistral-Small-24B-Instruct-2501",
        "microsoft/WizardLM-2-8x22B",
        "nvidia/Llama-3.1-Nemotron-70B-Instruct-HF",
        "databricks/dbrx-instruct",
        "togethercomputer/MoA-1",
        "togethercomputer/MoA-1-Turbo",
    }
)

OPENAI_SUPPORTED_MODELS = frozenset(
    {"gpt-4.1", "gpt-4.1-mini", "gpt-4o", "gpt-4o-mini", "gpt-4", "gpt-3.5-turbo"}
)

JUDGMENT_SUPPORTED_MODELS = frozenset({"osiris-large", "osiris-mini", "osiris"})

ACCEPTABLE_MODELS = TOGETHER_SUPPORTED_MODELS | OPENAI_SUPPORTED_MODELS | JUDGMENT_SUPPORTED_MODELS

# Upper bound on rule evaluations in flight at once.
MAX_CONCURRENT_EVALUATIONS = 50
