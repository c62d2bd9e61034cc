"""
Form domain module.

This module contains the question and form models, the editing operations,
the scoring engine, and the repositories for forms.
"""

from .model import (
    BLANK_MARKER,
    CategorizeQuestion,
    ClozeQuestion,
    ComprehensionQuestion,
    Form,
    Question,
    new_question,
    normalize_questions,
    parse_question,
    question_points,
    try_parse_question,
)
from .editor import FormEditor, move, remap_selection
from .scoring import score_question, score_submission
from .repository import FormRepository, SQLFormRepository
from .memory_repository import MemoryFormRepository

__all__ = [
    'BLANK_MARKER',
    'CategorizeQuestion',
    'ClozeQuestion',
    'ComprehensionQuestion',
    'Form',
    'Question',
    'new_question',
    'normalize_questions',
    'parse_question',
    'question_points',
    'try_parse_question',
    'FormEditor',
    'move',
    'remap_selection',
    'score_question',
    'score_submission',
    'FormRepository',
    'SQLFormRepository',
    'MemoryFormRepository',
]
