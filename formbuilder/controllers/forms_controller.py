"""
Forms Controller

This module implements the API endpoints for forms: the CRUD operations used
by the builder and dashboard, duplication, and the results views.
"""

import re
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, status
from fastapi.responses import Response
from pydantic import BaseModel, Field

from formbuilder.common.logger import get_logger
from formbuilder.dependencies import get_form_repository, get_response_repository
from formbuilder.domain.forms.repository import FormRepository
from formbuilder.domain.responses.analytics import export_csv, response_percentage, summarize
from formbuilder.domain.responses.repository import ResponseRepository

# Set up logger
logger = get_logger("controllers.forms")

router = APIRouter()


# Request Models
class FormPayload(BaseModel):
    """
    Body of create and update requests.

    Fields are loosely typed so that the repository can apply its own
    validation and answer with a 400 rather than a 422.
    """
    title: Any = None
    description: Any = None
    questions: Any = None
    slug: Optional[str] = Field(None, description="Optional human-chosen identifier")


@router.get("")
async def list_forms(forms: FormRepository = Depends(get_form_repository)) -> List[Dict[str, Any]]:
    """Get all forms, newest first."""
    result = await forms.list()
    result.sort(key=lambda form: form.created_at, reverse=True)
    return [form.to_dict() for form in result]


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_form(
    payload: FormPayload,
    forms: FormRepository = Depends(get_form_repository)
) -> Dict[str, Any]:
    """Create a new form."""
    form = await forms.create(
        title=payload.title,
        description=payload.description,
        questions=payload.questions,
        slug=payload.slug,
    )
    return form.to_dict()


@router.get("/{form_id}")
async def get_form(
    form_id: str,
    forms: FormRepository = Depends(get_form_repository)
) -> Dict[str, Any]:
    form = await forms.get(form_id)
    return form.to_dict()


@router.put("/{form_id}")
async def update_form(
    form_id: str,
    payload: FormPayload,
    forms: FormRepository = Depends(get_form_repository)
) -> Dict[str, Any]:
    """Replace the title, description and questions of a form."""
    form = await forms.update(
        form_id,
        title=payload.title,
        description=payload.description,
        questions=payload.questions,
    )
    return form.to_dict()


@router.delete("/{form_id}")
async def delete_form(
    form_id: str,
    forms: FormRepository = Depends(get_form_repository)
) -> Dict[str, Any]:
    await forms.delete(form_id)
    return {"message": "Form deleted successfully"}


@router.post("/{form_id}/duplicate", status_code=status.HTTP_201_CREATED)
async def duplicate_form(
    form_id: str,
    forms: FormRepository = Depends(get_form_repository)
) -> Dict[str, Any]:
    """Copy a form under the title "<title> (Copy)"."""
    form = await forms.duplicate(form_id)
    return form.to_dict()


@router.get("/{form_id}/results")
async def get_results(
    form_id: str,
    forms: FormRepository = Depends(get_form_repository),
    responses: ResponseRepository = Depends(get_response_repository)
) -> Dict[str, Any]:
    """
    Aggregate results for a form along with its individual responses.
    """
    form = await forms.get(form_id)
    collected = await responses.list_by_form(form.id)
    return {
        "form": form.to_dict(),
        "summary": summarize(collected).to_dict(),
        "responses": [
            {**response.to_dict(), "percentage": response_percentage(response)}
            for response in collected
        ],
    }


@router.get("/{form_id}/results.csv")
async def export_results(
    form_id: str,
    forms: FormRepository = Depends(get_form_repository),
    responses: ResponseRepository = Depends(get_response_repository)
) -> Response:
    """Download the results of a form as CSV."""
    form = await forms.get(form_id)
    collected = await responses.list_by_form(form.id)
    filename = re.sub(r'[^\w\- ().]', "_", form.title) or "form"
    logger.info(f"Exporting {len(collected)} responses for form {form.id}")
    return Response(
        content=export_csv(collected),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}-results.csv"'},
    )
