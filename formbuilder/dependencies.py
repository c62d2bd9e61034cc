"""
FastAPI dependencies.

Repositories and services are built once in the application lifespan and
kept on ``app.state``; these functions hand them to route handlers.
"""

from fastapi import Request

from formbuilder.domain.forms.repository import FormRepository
from formbuilder.domain.responses.repository import ResponseRepository
from formbuilder.domain.responses.service import SubmissionService


def get_form_repository(request: Request) -> FormRepository:
    return request.app.state.form_repository


def get_response_repository(request: Request) -> ResponseRepository:
    return request.app.state.response_repository


def get_submission_service(request: Request) -> SubmissionService:
    return request.app.state.submission_service
