"""API-scored evaluation with judgment-sdk-py.

Requires JUDGMENT_API_KEY and JUDGMENT_ORG_ID. API scorers run on the
Judgment backend; the local exact-match scorer runs in-process and the
two result sets are merged per example.
"""

import asyncio
import logging

from judgment_sdk import APIScorerType, Example, JudgmentClient, register
from judgment_sdk.scorers import ExactMatchScorer, FaithfulnessScorer

logging.basicConfig(level=logging.INFO)

# --- Setup ---
register(project_name="capitals")


async def main():
    async with JudgmentClient() as client:
        results = await client.evaluate(
            examples=[
                Example(
                    input="What is the capital of France?",
                    actual_output="Paris is the capital of France.",
                    expected_output="Paris is the capital of France.",
                    retrieval_context=["Paris is the capital and largest city of France."],
                ),
            ],
            scorers=[FaithfulnessScorer(threshold=0.7), APIScorerType.ANSWER_RELEVANCY, ExactMatchScorer()],
            model="gpt-4.1",
            project_name="capitals",
            eval_run_name="capitals-nightly",
            override=True,
            emit_scores=True,
        )

    for result in results:
        print(result.to_dict())


if __name__ == "__main__":
    asyncio.run(main())
