"""
Response Repository Module

This module defines the repository interface for FormResponse entities and
its SQLAlchemy implementation.
"""

import abc
import copy
from typing import Any, Dict, List, Optional

from sqlalchemy import select

from formbuilder.common.logger import app_logger
from formbuilder.common.utils import new_system_id, utcnow
from formbuilder.database.base import as_utc
from formbuilder.database.init_db import Database
from formbuilder.database.models import ResponseRecord
from .model import FormResponse

# Setup logging
logger = app_logger.getChild("responses.repository")


class ResponseRepository(abc.ABC):
    """
    Abstract base class for response repositories.

    The form identifier is stored as given; nothing checks that it refers to
    an existing form.
    """

    @abc.abstractmethod
    async def record(self, form_id: Optional[str], answers: Dict[str, Any]) -> FormResponse:
        """
        Store a submission with a fresh identifier and the current time.

        Args:
            form_id: Identifier of the form the answers belong to
            answers: Answer payload

        Returns:
            The stored FormResponse
        """
        pass

    @abc.abstractmethod
    async def list_by_form(self, form_id: Optional[str] = None) -> List[FormResponse]:
        """
        List responses, most recent first.

        Args:
            form_id: Only return responses for this form when given

        Returns:
            List of matching FormResponse entities
        """
        pass


def _record_to_response(record: ResponseRecord) -> FormResponse:
    return FormResponse(
        id=record.id,
        form_id=record.form_id,
        answers=record.answers or {},
        submitted_at=as_utc(record.submitted_at),
    )


class SQLResponseRepository(ResponseRepository):
    """
    SQLAlchemy implementation of the ResponseRepository.
    """

    def __init__(self, database: Database):
        self.database = database

    async def record(self, form_id, answers) -> FormResponse:
        record = ResponseRecord(
            id=new_system_id(),
            form_id=form_id,
            answers=copy.deepcopy(answers) if isinstance(answers, dict) else {},
            submitted_at=utcnow(),
        )
        async with self.database.session() as session:
            session.add(record)
            await session.flush()
            response = _record_to_response(record)

        logger.info(f"Recorded response {response.id} for form {form_id}")
        return response

    async def list_by_form(self, form_id=None) -> List[FormResponse]:
        query = select(ResponseRecord).order_by(ResponseRecord.submitted_at.desc())
        if form_id is not None:
            query = query.where(ResponseRecord.form_id == form_id)

        async with self.database.session() as session:
            records = (await session.scalars(query)).all()
            return [_record_to_response(record) for record in records]
