"""
Form Editing Module

Pure list operations behind the form editor plus a small stateful editor that
tracks the currently selected question across drag reorders.
"""

from typing import Any, Dict, List, Mapping, Optional, Sequence, TypeVar, Union

from formbuilder.common.exceptions import ValidationError
from formbuilder.common.logger import app_logger
from .model import Form, QuestionBase, new_question

T = TypeVar('T')

logger = app_logger.getChild("forms.editor")


def move(sequence: Sequence[T], from_index: int, to_index: int) -> List[T]:
    """
    Move one element to a new position.

    Args:
        sequence: The original sequence (left untouched)
        from_index: Current position of the element
        to_index: Position the element should end up at

    Returns:
        A new list with the element moved and every other element in its
        original relative order
    """
    items = list(sequence)
    if not items:
        return items
    item = items.pop(from_index)
    items.insert(to_index, item)
    return items


def remap_selection(selected: Optional[int], from_index: int, to_index: int) -> Optional[int]:
    """
    Work out where a selected index ends up after move(from_index, to_index).

    The selected element follows itself: the moved element takes its new
    index, and an element inside the moved span shifts one place against the
    direction of the move.
    """
    if selected is None:
        return None
    if selected == from_index:
        return to_index
    if from_index < selected <= to_index:
        return selected - 1
    if to_index <= selected < from_index:
        return selected + 1
    return selected


class FormEditor:
    """
    Single-session, in-memory editing state for a form draft.

    Questions are handled as the raw objects stored on the form. Nothing here
    touches storage; a draft is persisted only when the caller hands it to a
    FormRepository.
    """

    def __init__(self, form: Form, selected: Optional[int] = None):
        self.form = form
        self.selected = selected

    @property
    def questions(self) -> List[Any]:
        return self.form.questions

    @property
    def selected_question(self) -> Optional[Any]:
        if self.selected is None or not 0 <= self.selected < len(self.questions):
            return None
        return self.questions[self.selected]

    def add_question(self, question_type: str) -> Dict[str, Any]:
        """Append a new question of the given type and select it."""
        question = new_question(question_type)
        while self.form.question_by_id(question.id) is not None:
            question = new_question(question_type)
        data = question.to_dict()
        self.form.questions = self.questions + [data]
        self.selected = len(self.questions) - 1
        return data

    def update_question(self, index: int, question: Union[QuestionBase, Dict[str, Any]]) -> None:
        questions = list(self.questions)
        questions[index] = question.to_dict() if isinstance(question, QuestionBase) else question
        self.form.questions = questions

    def delete_question(self, index: int) -> None:
        self.form.questions = [q for i, q in enumerate(self.questions) if i != index]
        self.selected = None

    def move_question(self, from_index: int, to_index: int) -> None:
        """Reorder a question and keep the selection on the same question."""
        if from_index == to_index:
            return
        self.form.questions = move(self.questions, from_index, to_index)
        self.selected = remap_selection(self.selected, from_index, to_index)

    def move_question_by_id(self, active_id: str, over_id: Optional[str]) -> None:
        """
        Apply a drag-end event: move the dragged question onto the position
        of the question it was dropped over.
        """
        if over_id is None or active_id == over_id:
            return
        ids = [q.get("id") if isinstance(q, Mapping) else None for q in self.questions]
        if active_id not in ids or over_id not in ids:
            logger.debug(f"Ignoring drag of {active_id} over unknown target {over_id}")
            return
        self.move_question(ids.index(active_id), ids.index(over_id))

    def validate_for_save(self) -> None:
        """
        Raises:
            ValidationError: If the draft has no title
        """
        if not self.form.title.strip():
            raise ValidationError("Please enter a form title", errors={"title": ["required"]})
