"""Local evaluation with judgment-sdk-py.

Runs the exact-match scorer in-process. No backend calls are made
because nothing is logged and no API scorers are used, so placeholder
credentials are enough.
"""

from judgment_sdk import Example, JudgmentClient, JudgmentConfig
from judgment_sdk.scorers import ExactMatchScorer

client = JudgmentClient(JudgmentConfig(api_key="unused", organization_id="unused"))

examples = [
    Example(
        input="What is the capital of France?",
        actual_output="Paris is the capital of France.",
        expected_output="Paris is the capital of France.",
    ),
    Example(
        input="What is the capital of Italy?",
        actual_output="Milan.",
        expected_output="Rome is the capital of Italy.",
    ),
]

results = client.run_evaluation(examples, [ExactMatchScorer()], log_results=False)

for result in results:
    for scorer_data in result.scorers_data:
        print(f"{result.data_object.input!r}: {scorer_data.name}={scorer_data.score} success={scorer_data.success}")
