"""
Scoring Module

Grades a submitted answer set against the answer keys embedded in a form.

Scoring never raises: a missing or malformed answer scores zero for its
question.
"""

from typing import Any, Mapping, Optional, Tuple, Union

from formbuilder.common.logger import app_logger
from formbuilder.common.utils import js_round
from .model import (
    CategorizeQuestion,
    ClozeQuestion,
    ComprehensionQuestion,
    Form,
    Question,
    question_points,
    try_parse_question,
)

logger = app_logger.getChild("forms.scoring")


def _normalize(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return None
    return value.strip().lower()


def score_comprehension(question: ComprehensionQuestion, answer: Any) -> float:
    """Full points for an exact, case-sensitive match."""
    return question.points if answer == question.correct_answer else 0


def score_cloze(question: ClozeQuestion, answer: Any) -> float:
    """
    Partial credit per blank.

    Blanks compare case-insensitively after trimming; a submission shorter
    than the answer key counts the missing blanks as wrong.
    """
    correct_answers = question.correct_answer
    if not correct_answers or not isinstance(answer, (list, tuple)):
        return 0

    correct_count = 0
    for index, correct in enumerate(correct_answers):
        submitted = _normalize(answer[index]) if index < len(answer) else None
        if submitted is not None and submitted == _normalize(correct):
            correct_count += 1

    return (correct_count / len(correct_answers)) * question.points


def score_categorize(question: CategorizeQuestion, answer: Any) -> float:
    """
    Full points when at least one item was placed in any category.

    There is no stored item-to-category key, so placements are not checked.
    """
    if not isinstance(answer, Mapping):
        return 0
    has_answers = any(
        isinstance(items, (list, tuple)) and len(items) > 0
        for items in answer.values()
    )
    return question.points if has_answers else 0


def score_question(question: Question, answer: Any) -> float:
    """
    Score a single question.

    Args:
        question: The question with its answer key
        answer: The submitted answer, any shape

    Returns:
        Points earned, possibly fractional for cloze questions
    """
    if not answer:
        return 0
    if isinstance(question, ComprehensionQuestion):
        return score_comprehension(question, answer)
    if isinstance(question, ClozeQuestion):
        return score_cloze(question, answer)
    if isinstance(question, CategorizeQuestion):
        return score_categorize(question, answer)
    return 0


def score_submission(
    form: Form,
    answers: Optional[Mapping[str, Any]]
) -> Tuple[int, Union[int, float]]:
    """
    Score a submission against a form.

    Stored questions that do not parse as a known variant score zero but
    still count their numeric points toward the max score.

    Args:
        form: The form, with answer keys embedded in its questions
        answers: Mapping of question id to submitted answer; absent entries
            are unanswered

    Returns:
        Tuple of (total_score rounded to an integer, max_score)
    """
    if not isinstance(answers, Mapping):
        answers = {}

    total_score = 0.0
    max_score: Union[int, float] = 0
    for data in form.questions:
        max_score += question_points(data)
        question = try_parse_question(data)
        if question is None:
            continue
        total_score += score_question(question, answers.get(question.id))

    logger.debug(f"Scored submission for form {form.id}: {total_score}/{max_score}")
    return js_round(total_score), max_score
