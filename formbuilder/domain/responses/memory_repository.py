"""
Memory Response Repository Module

This module provides an in-memory implementation of the ResponseRepository
interface for development and testing purposes.
"""

import copy
from typing import List

from formbuilder.common.utils import new_system_id, utcnow
from .model import FormResponse
from .repository import ResponseRepository


class MemoryResponseRepository(ResponseRepository):
    """
    In-memory implementation of the ResponseRepository.
    """

    def __init__(self):
        self._responses: List[FormResponse] = []

    async def record(self, form_id, answers) -> FormResponse:
        response = FormResponse(
            id=new_system_id(),
            form_id=form_id,
            answers=copy.deepcopy(answers) if isinstance(answers, dict) else {},
            submitted_at=utcnow(),
        )
        self._responses.append(response)
        return response

    async def list_by_form(self, form_id=None) -> List[FormResponse]:
        result = [
            response for response in self._responses
            if form_id is None or response.form_id == form_id
        ]
        # Newest insert first among equal timestamps
        return sorted(reversed(result), key=lambda r: r.submitted_at, reverse=True)

    def clear(self) -> None:
        """
        Clear all responses.

        This method is specific to the memory implementation and not part of
        the ResponseRepository interface.
        """
        self._responses.clear()
