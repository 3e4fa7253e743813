"""Queue an evaluation and poll for its results.

Requires JUDGMENT_API_KEY and JUDGMENT_ORG_ID.
"""

import asyncio

from judgment_sdk import Example, JudgmentClient
from judgment_sdk.scorers import AnswerCorrectnessScorer


async def main():
    async with JudgmentClient() as client:
        queued = await client.a_run_evaluation(
            [
                Example(
                    input="Who wrote Hamlet?",
                    actual_output="William Shakespeare.",
                    expected_output="Shakespeare",
                )
            ],
            [AnswerCorrectnessScorer()],
            project_name="literature",
            eval_run_name="hamlet-async",
            override=True,
        )
        assert queued == []

        results = await client.wait_for_evaluation(
            "literature", "hamlet-async", interval=2.0, max_attempts=60
        )
        if not results:
            print("Timed out waiting for results")
        for result in results:
            print(result.success, [d.to_dict() for d in result.scorers_data])


if __name__ == "__main__":
    asyncio.run(main())
