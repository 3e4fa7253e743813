"""The Example record: one evaluation case."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union

from judgment_sdk.errors import ValidationError

TextOrList = Union[str, List[str]]


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class Example:
    """A single evaluation case.

    Attributes:
        input: The prompt or question given to the system under test.
        actual_output: What the system produced.
        expected_output: The reference answer, if any.
        context: Ground-truth context passages.
        retrieval_context: Passages the system actually retrieved.
        additional_metadata: Free-form caller metadata.
        tools_called: Tools the system invoked, in order.
        expected_tools: Tools the system should have invoked, in order.
        name: Display name. Serialized as ``"example"`` when unset.
        example_id: Unique id, generated as a UUID4 when not given.
        example_index: Position within the run. Overwritten by ``run_eval``.
        timestamp: ISO-8601 creation time. Reset by ``run_eval``.
        trace_id: Optional link to a distributed trace.
    """

    input: str
    actual_output: Optional[TextOrList] = None
    expected_output: Optional[TextOrList] = None
    context: Optional[List[str]] = None
    retrieval_context: Optional[List[str]] = None
    additional_metadata: Optional[Dict[str, Any]] = None
    tools_called: Optional[List[str]] = None
    expected_tools: Optional[List[str]] = None
    name: Optional[str] = None
    example_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    example_index: Optional[int] = None
    timestamp: str = field(default_factory=_now)
    trace_id: Optional[str] = None

    def __post_init__(self) -> None:
        if not isinstance(self.input, str):
            raise ValidationError(
                f"Example input must be a string, got {type(self.input).__name__}"
            )
        if not self.example_id:
            self.example_id = str(uuid.uuid4())

    def reset_for_run(self, index: int) -> None:
        """Stamp the example with its run position and a fresh timestamp."""
        self.example_index = index
        self.timestamp = _now()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "input": self.input,
            "actual_output": self.actual_output,
            "expected_output": self.expected_output,
            "context": self.context,
            "retrieval_context": self.retrieval_context,
            "additional_metadata": self.additional_metadata,
            "tools_called": self.tools_called,
            "expected_tools": self.expected_tools,
            "name": self.name or "example",
            "example_id": self.example_id,
            "example_index": self.example_index,
            "timestamp": self.timestamp,
            "trace_id": self.trace_id,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Example":
        kwargs: Dict[str, Any] = {
            "input": data.get("input") or "",
            "actual_output": data.get("actual_output"),
            "expected_output": data.get("expected_output"),
            "context": data.get("context"),
            "retrieval_context": data.get("retrieval_context"),
            "additional_metadata": data.get("additional_metadata"),
            "tools_called": data.get("tools_called"),
            "expected_tools": data.get("expected_tools"),
            "name": data.get("name"),
            "example_index": data.get("example_index"),
            "trace_id": data.get("trace_id"),
        }
        if data.get("example_id"):
            kwargs["example_id"] = data["example_id"]
        timestamp = data.get("timestamp") or data.get("created_at")
        if timestamp:
            kwargs["timestamp"] = timestamp
        return cls(**kwargs)
