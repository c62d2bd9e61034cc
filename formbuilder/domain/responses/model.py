"""
Response Domain Model Module

This module defines the FormResponse entity: one respondent's graded
submission against a form.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Mapping, Optional, Union

from formbuilder.common.utils import utcnow


def build_answer_payload(
    responses: Mapping[str, Any],
    score: int,
    max_score: Union[int, float],
    time_spent: int,
    submitted_at: datetime
) -> Dict[str, Any]:
    """
    Build the stored answer payload.

    Args:
        responses: Mapping of question id to the submitted answer
        score: Rounded total score
        max_score: Sum of the form's point values
        time_spent: Seconds the respondent spent on the form
        submitted_at: Submission time

    Returns:
        Payload dictionary using the client's field names
    """
    return {
        "responses": dict(responses),
        "score": score,
        "maxScore": max_score,
        "timeSpent": time_spent,
        "submittedAt": submitted_at.isoformat(),
    }


def _number(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    return value


@dataclass(frozen=True)
class FormResponse:
    """
    Represents a recorded submission. Immutable once created.

    Attributes:
        id: Unique identifier for the response
        form_id: Identifier of the form the response was submitted against
        answers: Answer payload (responses, score, maxScore, timeSpent, submittedAt)
        submitted_at: When the response was recorded
    """
    id: str
    form_id: Optional[str]
    answers: Dict[str, Any] = field(default_factory=dict)
    submitted_at: datetime = field(default_factory=utcnow)

    @property
    def responses(self) -> Dict[str, Any]:
        value = self.answers.get("responses")
        return value if isinstance(value, dict) else {}

    @property
    def score(self) -> float:
        return _number(self.answers.get("score"))

    @property
    def max_score(self) -> float:
        return _number(self.answers.get("maxScore"))

    @property
    def time_spent(self) -> float:
        return _number(self.answers.get("timeSpent"))

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the response to a dictionary.

        Returns:
            Dictionary representation of the response
        """
        return {
            'id': self.id,
            'form_id': self.form_id,
            'answers': self.answers,
            'submitted_at': self.submitted_at.isoformat(),
        }
