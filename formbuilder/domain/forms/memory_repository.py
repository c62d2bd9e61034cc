"""
Memory Form Repository Module

This module provides an in-memory implementation of the FormRepository
interface for development and testing purposes.
"""

import copy
from dataclasses import dataclass, replace
from typing import Dict, List, Optional

from formbuilder.common.exceptions import DuplicateError, NotFoundError
from formbuilder.common.logger import app_logger
from formbuilder.common.utils import is_system_id, new_system_id, utcnow
from .model import Form
from .repository import FormRepository, validate_form_fields, validate_slug

logger = app_logger.getChild("forms.memory_repository")


@dataclass
class _StoredForm:
    system_id: str
    slug: Optional[str]
    form: Form


class MemoryFormRepository(FormRepository):
    """
    In-memory implementation of the FormRepository.

    Forms are keyed by system id; slugs are looked up by scanning.
    """

    def __init__(self):
        self._forms: Dict[str, _StoredForm] = {}

    def _resolve(self, identifier: str) -> Optional[_StoredForm]:
        for stored in self._forms.values():
            if stored.slug is not None and stored.slug == identifier:
                return stored
        if is_system_id(identifier):
            return self._forms.get(identifier)
        return None

    def _copy(self, form: Form) -> Form:
        # Callers must not be able to mutate stored state through returned objects
        return replace(form, questions=copy.deepcopy(form.questions))

    async def create(self, title, description="", questions=None, slug=None) -> Form:
        title, description, questions = validate_form_fields(title, description, questions)
        slug = validate_slug(slug)
        if slug is not None and self._resolve(slug) is not None:
            raise DuplicateError("form", slug)

        now = utcnow()
        system_id = new_system_id()
        form = Form(
            id=slug or system_id,
            title=title,
            description=description,
            questions=questions,
            created_at=now,
            updated_at=now,
        )
        self._forms[system_id] = _StoredForm(system_id=system_id, slug=slug, form=form)
        logger.debug(f"Created form {form.id}")
        return self._copy(form)

    async def get(self, identifier: str) -> Form:
        stored = self._resolve(identifier)
        if stored is None:
            raise NotFoundError("Form", identifier)
        return self._copy(stored.form)

    async def update(self, identifier: str, title, description, questions) -> Form:
        title, description, questions = validate_form_fields(title, description, questions)
        stored = self._resolve(identifier)
        if stored is None:
            raise NotFoundError("Form", identifier)
        stored.form = replace(
            stored.form,
            title=title,
            description=description,
            questions=questions,
            updated_at=utcnow(),
        )
        return self._copy(stored.form)

    async def delete(self, identifier: str) -> None:
        stored = self._resolve(identifier)
        if stored is None:
            raise NotFoundError("Form", identifier)
        del self._forms[stored.system_id]

    async def list(self) -> List[Form]:
        return [self._copy(stored.form) for stored in self._forms.values()]

    def clear(self) -> None:
        """
        Clear all forms.

        This method is specific to the memory implementation and not part of
        the FormRepository interface.
        """
        self._forms.clear()
