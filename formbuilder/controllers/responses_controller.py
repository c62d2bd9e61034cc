"""
Responses Controller

This module implements the API endpoints for submitting answers to a form and
listing the recorded responses.
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, Field

from formbuilder.dependencies import get_submission_service
from formbuilder.domain.responses.service import SubmissionService

router = APIRouter()


class SubmitResponsePayload(BaseModel):
    form_id: Optional[str] = Field(None, description="Identifier of the answered form")
    answers: Dict[str, Any] = Field(
        default_factory=dict,
        description="Payload with `responses` (question id to answer) and `timeSpent` in seconds"
    )


@router.post("", status_code=status.HTTP_201_CREATED)
async def submit_response(
    payload: SubmitResponsePayload,
    service: SubmissionService = Depends(get_submission_service)
) -> Dict[str, Any]:
    """Grade and record a submission."""
    response = await service.submit(payload.form_id, payload.answers)
    return {"response": response.to_dict()}


@router.get("")
async def list_responses(
    form_id: Optional[str] = Query(None, description="Only return responses for this form"),
    service: SubmissionService = Depends(get_submission_service)
) -> Dict[str, Any]:
    """List responses, most recent first."""
    result = await service.list_responses(form_id)
    return {"responses": [response.to_dict() for response in result]}
