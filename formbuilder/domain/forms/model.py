"""
Form Domain Model Module

This module defines the core domain entities for the form subsystem: the
three question variants and the form that orders them.
"""

import copy
import math
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Annotated, Any, Dict, List, Literal, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from formbuilder.common.exceptions import ValidationError
from formbuilder.common.utils import utcnow

# Placeholder that marks a blank inside a cloze prompt
BLANK_MARKER = "_____"

QUESTION_TYPES = ("categorize", "cloze", "comprehension")


class QuestionBase(BaseModel):
    """
    Fields shared by every question variant.

    Attributes:
        id: Identifier, unique within a form; joins questions to submitted answers
        question: The prompt text
        image: Optional image URL shown with the prompt
        points: Point value of the question
    """
    model_config = ConfigDict(populate_by_name=True, extra="allow", validate_assignment=True)

    id: str
    question: str = ""
    image: Optional[str] = None
    points: int = 1

    def to_dict(self) -> Dict[str, Any]:
        """Wire representation using the client's field names."""
        return self.model_dump(by_alias=True, exclude_none=True)


class CategorizeQuestion(QuestionBase):
    """Drag items into category buckets. There is no stored answer key."""
    type: Literal["categorize"] = "categorize"
    categories: List[str] = Field(default_factory=list)
    items: List[str] = Field(default_factory=list)


class ClozeQuestion(QuestionBase):
    """Fill in the blanks; one correct answer per blank, matched by position."""
    type: Literal["cloze"] = "cloze"
    correct_answer: List[str] = Field(default_factory=list, alias="correctAnswer")

    def blank_count(self) -> int:
        """Number of blank markers in the prompt."""
        return self.question.count(BLANK_MARKER)


class ComprehensionQuestion(QuestionBase):
    """Single-select multiple choice."""
    type: Literal["comprehension"] = "comprehension"
    options: List[str] = Field(default_factory=list)
    correct_answer: str = Field("", alias="correctAnswer")


Question = Annotated[
    Union[CategorizeQuestion, ClozeQuestion, ComprehensionQuestion],
    Field(discriminator="type"),
]

_question_adapter = TypeAdapter(Question)


def parse_question(data: Any) -> Question:
    """
    Parse a raw question dictionary into its variant.

    Args:
        data: Question data as received from a client or from storage

    Returns:
        The parsed question

    Raises:
        ValidationError: If the data is not a valid question
    """
    if isinstance(data, QuestionBase):
        return data
    try:
        return _question_adapter.validate_python(data)
    except PydanticValidationError as e:
        raise ValidationError(
            "Invalid question",
            errors={"question": [err.get("msg", "") for err in e.errors()]}
        ) from e


def try_parse_question(data: Any) -> Optional[Question]:
    """Parse a stored question, or return None when it is not a valid variant."""
    try:
        return parse_question(data)
    except ValidationError:
        return None


def normalize_questions(data: Any) -> List[Any]:
    """
    Copy of a question array as given. Anything that is not a list becomes
    an empty form; entries are not validated.
    """
    if not isinstance(data, (list, tuple)):
        return []
    return copy.deepcopy(list(data))


def question_points(data: Any) -> Union[int, float]:
    """
    Point value a stored question contributes to the max score.

    Valid questions use their parsed points. Entries that do not parse still
    count a numeric ``points`` value; anything else counts as zero.
    """
    question = try_parse_question(data)
    if question is not None:
        return question.points
    points = data.get("points") if isinstance(data, Mapping) else None
    if isinstance(points, bool) or not isinstance(points, (int, float)) or not math.isfinite(points):
        return 0
    return points


def new_question_id() -> str:
    """Generate an identifier for a question added in the editor."""
    return uuid.uuid4().hex[:12]


def new_question(question_type: str, question_id: Optional[str] = None) -> Question:
    """
    Create a question of the given type with the editor's default content.

    Args:
        question_type: One of "categorize", "cloze", "comprehension"
        question_id: Optional identifier; a fresh one is generated otherwise

    Returns:
        A new question

    Raises:
        ValidationError: If the type is unknown
    """
    qid = question_id or new_question_id()
    if question_type == "categorize":
        return CategorizeQuestion(
            id=qid,
            categories=["Category 1", "Category 2"],
            items=["Item 1", "Item 2"],
        )
    if question_type == "cloze":
        return ClozeQuestion(id=qid, correct_answer=[""])
    if question_type == "comprehension":
        return ComprehensionQuestion(
            id=qid,
            options=["Option 1", "Option 2", "Option 3", "Option 4"],
            correct_answer="",
        )
    raise ValidationError(
        f"Unknown question type: {question_type}",
        errors={"type": [f"must be one of {', '.join(QUESTION_TYPES)}"]}
    )


@dataclass
class Form:
    """
    Represents a form: an ordered collection of questions plus metadata.

    Questions are kept exactly as the client sent them (JSON objects in the
    shapes of the variants above); they are parsed only when scored.

    Attributes:
        id: Public identifier, either a human-chosen slug or the system id
        title: The form title (non-empty)
        description: Free-text description
        questions: Raw question objects in display order
        created_at: When the form was created
        updated_at: When the form was last updated
    """
    id: str
    title: str
    description: str = ""
    questions: List[Any] = field(default_factory=list)
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    @property
    def total_points(self) -> Union[int, float]:
        """Sum of the point values of all questions."""
        return sum(question_points(q) for q in self.questions)

    def question_by_id(self, question_id: str) -> Optional[Dict[str, Any]]:
        """Find a question by its identifier."""
        for question in self.questions:
            if isinstance(question, Mapping) and question.get("id") == question_id:
                return question
        return None

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the form to its wire representation.

        Returns:
            Dictionary representation of the form
        """
        return {
            'id': self.id,
            'title': self.title,
            'description': self.description,
            'questions': list(self.questions),
            'created_at': self.created_at.isoformat(),
            'updated_at': self.updated_at.isoformat(),
        }
