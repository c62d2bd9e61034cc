"""
Results Analytics Module

Aggregate statistics and CSV export for the responses collected by a form.
"""

import csv
import io
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Sequence

from formbuilder.common.utils import format_duration, js_round, safe_divide
from .model import FormResponse

CSV_HEADER = ["Submission Date", "Score", "Max Score", "Percentage", "Time Spent"]


@dataclass
class ResultsSummary:
    """
    Aggregate view over a form's responses.

    Attributes:
        total_responses: Number of responses
        average_score: Mean score
        average_time: Mean time spent, in seconds
        average_percentage: Mean score as a percentage of the max score
    """
    total_responses: int
    average_score: float
    average_time: float
    average_percentage: int

    def to_dict(self) -> Dict[str, Any]:
        result = asdict(self)
        result["average_time_display"] = format_duration(js_round(self.average_time))
        return result


def summarize(responses: Sequence[FormResponse]) -> ResultsSummary:
    """
    Compute aggregate statistics.

    The percentage uses the max score of the first response in the list,
    which is the most recent one when the list comes from list_by_form().
    """
    total = len(responses)
    average_score = safe_divide(sum(r.score for r in responses), total)
    average_time = safe_divide(sum(r.time_spent for r in responses), total)

    average_percentage = 0
    if responses and responses[0].max_score:
        average_percentage = js_round(average_score / responses[0].max_score * 100)

    return ResultsSummary(
        total_responses=total,
        average_score=average_score,
        average_time=average_time,
        average_percentage=average_percentage,
    )


def response_percentage(response: FormResponse) -> int:
    """Score of a single response as a rounded percentage, 0 without a max score."""
    if response.max_score > 0:
        return js_round(response.score / response.max_score * 100)
    return 0


def export_rows(responses: Sequence[FormResponse]) -> List[List[Any]]:
    """Rows of the results export, header first."""
    rows: List[List[Any]] = [list(CSV_HEADER)]
    for response in responses:
        rows.append([
            response.submitted_at.isoformat(),
            response.score,
            response.max_score,
            response_percentage(response),
            format_duration(response.time_spent),
        ])
    return rows


def export_csv(responses: Sequence[FormResponse]) -> str:
    """
    Render responses as CSV.

    Returns:
        CSV text with a header row
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerows(export_rows(responses))
    return buffer.getvalue()
