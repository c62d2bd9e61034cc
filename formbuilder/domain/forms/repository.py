"""
Form Repository Module

This module defines the repository interface for Form entities and its
SQLAlchemy implementation.

Forms are addressable by two identifiers: an optional human-chosen slug and
a system-assigned id. Lookups try the slug first and fall back to the system
id, so slugs shaped like system ids are refused at creation time.
"""

import abc
from typing import Any, List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from formbuilder.common.exceptions import DuplicateError, NotFoundError, ValidationError
from formbuilder.common.logger import app_logger
from formbuilder.common.utils import is_system_id, new_system_id, utcnow
from formbuilder.database.base import as_utc
from formbuilder.database.init_db import Database
from formbuilder.database.models import FormRecord
from .model import Form, normalize_questions

# Setup logging
logger = app_logger.getChild("forms.repository")


def validate_form_fields(title: Any, description: Any, questions: Any) -> Tuple[str, str, List[Any]]:
    """
    Validate and normalize the content fields of a form.

    The title is the only hard requirement; questions are stored as given.

    Args:
        title: Must be a non-empty string
        description: Defaults to an empty string
        questions: Defaults to an empty list when not a list

    Returns:
        Tuple of (title, description, questions)

    Raises:
        ValidationError: If the title is missing, empty or not a string
    """
    if not isinstance(title, str) or not title:
        raise ValidationError("Title is required", errors={"title": ["required"]})
    if not isinstance(description, str):
        description = ""
    return title, description, normalize_questions(questions)


def validate_slug(slug: Any) -> Optional[str]:
    """
    Validate a human-chosen identifier.

    Raises:
        ValidationError: If the slug is blank or could be mistaken for a system id
    """
    if slug is None:
        return None
    if not isinstance(slug, str) or not slug.strip():
        raise ValidationError("Slug must be a non-empty string", errors={"slug": ["invalid"]})
    if is_system_id(slug):
        raise ValidationError(
            "Slug must not look like a system identifier",
            errors={"slug": ["collides with system identifiers"]}
        )
    return slug


class FormRepository(abc.ABC):
    """
    Abstract base class for form repositories.

    This interface defines the contract for accessing and storing Form entities.
    """

    @abc.abstractmethod
    async def create(
        self,
        title: Any,
        description: Any = "",
        questions: Any = None,
        slug: Optional[str] = None
    ) -> Form:
        """
        Create a form with a system-assigned identifier.

        Args:
            title: Form title, required
            description: Optional description
            questions: Question array; anything else is stored as empty
            slug: Optional human-chosen identifier

        Returns:
            The stored Form

        Raises:
            ValidationError: If the title is empty or not a string; nothing is written
            DuplicateError: If the slug is taken
        """
        pass

    @abc.abstractmethod
    async def get(self, identifier: str) -> Form:
        """
        Get a form by slug, falling back to system id.

        Raises:
            NotFoundError: If neither lookup matches
        """
        pass

    @abc.abstractmethod
    async def update(self, identifier: str, title: Any, description: Any, questions: Any) -> Form:
        """
        Replace the content of a form and stamp a new update time.

        The identifier and creation time never change.

        Raises:
            NotFoundError: If neither lookup matches
            ValidationError: If the new content is invalid
        """
        pass

    @abc.abstractmethod
    async def delete(self, identifier: str) -> None:
        """
        Delete a form by slug, falling back to system id.

        Raises:
            NotFoundError: If neither lookup matches
        """
        pass

    @abc.abstractmethod
    async def list(self) -> List[Form]:
        """
        Get all forms. Order is unspecified.
        """
        pass

    async def duplicate(self, identifier: str) -> Form:
        """
        Copy a form under the title "<title> (Copy)".

        Raises:
            NotFoundError: If the source form does not exist
        """
        source = await self.get(identifier)
        return await self.create(
            title=f"{source.title} (Copy)",
            description=source.description,
            questions=source.questions,
        )


def _record_to_form(record: FormRecord) -> Form:
    return Form(
        id=record.slug or record.system_id,
        title=record.title,
        description=record.description or "",
        questions=normalize_questions(record.questions),
        created_at=as_utc(record.created_at),
        updated_at=as_utc(record.updated_at),
    )


class SQLFormRepository(FormRepository):
    """
    SQLAlchemy implementation of the FormRepository.
    """

    def __init__(self, database: Database):
        """
        Args:
            database: Connected storage handle
        """
        self.database = database

    async def _resolve(self, session: AsyncSession, identifier: str) -> Optional[FormRecord]:
        record = await session.scalar(select(FormRecord).where(FormRecord.slug == identifier))
        if record is None and is_system_id(identifier):
            record = await session.get(FormRecord, identifier)
        return record

    async def create(self, title, description="", questions=None, slug=None) -> Form:
        title, description, questions = validate_form_fields(title, description, questions)
        slug = validate_slug(slug)
        now = utcnow()

        async with self.database.session() as session:
            if slug is not None:
                existing = await session.scalar(select(FormRecord).where(FormRecord.slug == slug))
                if existing is not None:
                    raise DuplicateError("form", slug)

            record = FormRecord(
                system_id=new_system_id(),
                slug=slug,
                title=title,
                description=description,
                questions=questions,
                created_at=now,
                updated_at=now,
            )
            session.add(record)
            try:
                await session.flush()
            except IntegrityError as e:
                # Lost a race with a concurrent create of the same slug
                if slug is None:
                    raise
                raise DuplicateError("form", slug) from e
            form = _record_to_form(record)

        logger.info(f"Created form {form.id} with {len(form.questions)} questions")
        return form

    async def get(self, identifier: str) -> Form:
        async with self.database.session() as session:
            record = await self._resolve(session, identifier)
            if record is None:
                raise NotFoundError("Form", identifier)
            return _record_to_form(record)

    async def update(self, identifier: str, title, description, questions) -> Form:
        title, description, questions = validate_form_fields(title, description, questions)

        async with self.database.session() as session:
            record = await self._resolve(session, identifier)
            if record is None:
                raise NotFoundError("Form", identifier)
            record.title = title
            record.description = description
            record.questions = questions
            record.updated_at = utcnow()
            await session.flush()
            form = _record_to_form(record)

        logger.info(f"Updated form {form.id}")
        return form

    async def delete(self, identifier: str) -> None:
        async with self.database.session() as session:
            record = await self._resolve(session, identifier)
            if record is None:
                raise NotFoundError("Form", identifier)
            await session.delete(record)

        logger.info(f"Deleted form {identifier}")

    async def list(self) -> List[Form]:
        async with self.database.session() as session:
            records = (await session.scalars(select(FormRecord))).all()
            return [_record_to_form(record) for record in records]
