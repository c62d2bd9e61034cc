"""
Response domain module.

This module contains the response model, its repositories, the submission
service that grades answers, and the results analytics.
"""

from .model import FormResponse, build_answer_payload
from .repository import ResponseRepository, SQLResponseRepository
from .memory_repository import MemoryResponseRepository
from .service import SubmissionService
from .analytics import ResultsSummary, export_csv, summarize

__all__ = [
    'FormResponse',
    'build_answer_payload',
    'ResponseRepository',
    'SQLResponseRepository',
    'MemoryResponseRepository',
    'SubmissionService',
    'ResultsSummary',
    'export_csv',
    'summarize',
]
