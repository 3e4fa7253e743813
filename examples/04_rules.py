"""Alerting rules over scorer outputs.

Evaluates rules locally against per-example scores. No backend needed.
"""

import asyncio

from judgment_sdk import Condition, Rule, RulesEngine
from judgment_sdk.scorers import AnswerRelevancyScorer, FaithfulnessScorer

rules = [
    Rule(
        name="High quality",
        conditions=[
            Condition(FaithfulnessScorer(threshold=0.8)),
            Condition(AnswerRelevancyScorer(threshold=0.8)),
        ],
        combine_type="all",
    ),
    Rule(
        name="Either metric strong",
        conditions=[
            Condition(FaithfulnessScorer(threshold=0.9)),
            Condition(AnswerRelevancyScorer(threshold=0.9)),
        ],
        combine_type="any",
    ),
]

engine = RulesEngine.from_rules(rules)
engine.configure_all_notifications(communication_methods=["email"], email_addresses=["oncall@example.com"])

# Single example
for alert in engine.evaluate_rules({"faithfulness": 0.92, "answer_relevancy": 0.85}).values():
    print(f"{alert.rule_name}: {alert.status.value}")

# Many examples, 2 at a time
scores = {
    "ex-1": {"faithfulness": 0.95, "answer_relevancy": 0.5},
    "ex-2": {"faithfulness": 0.4, "answer_relevancy": 0.4},
    "ex-3": {"faithfulness": 0.85, "answer_relevancy": 0.88},
}
by_example = asyncio.run(engine.evaluate_rules_parallel(scores, max_concurrent=2))
for example_id, alerts in by_example.items():
    print(example_id, {a.rule_name: a.status.value for a in alerts.values()})
