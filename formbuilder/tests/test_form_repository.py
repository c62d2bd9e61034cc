"""
Tests for the form repositories.

The main suite runs against the in-memory repository and against the SQL
repository on an in-memory SQLite database.
"""

import asyncio

import pytest
import pytest_asyncio

from formbuilder.common.exceptions import DuplicateError, NotFoundError, ValidationError
from formbuilder.common.utils import is_system_id, new_system_id
from formbuilder.database import Database
from formbuilder.domain.forms import MemoryFormRepository, SQLFormRepository


@pytest_asyncio.fixture(params=["memory", "sql"])
async def repository(request):
    """Create a repository instance for testing."""
    if request.param == "memory":
        yield MemoryFormRepository()
    else:
        database = Database("sqlite+aiosqlite:///:memory:")
        await database.connect()
        try:
            yield SQLFormRepository(database)
        finally:
            await database.dispose()


@pytest.mark.asyncio
class TestFormRepository:
    """Test suite for FormRepository implementations."""

    async def test_create_and_get(self, repository, sample_questions):
        # Act
        created = await repository.create("Quiz", "About things", sample_questions)
        fetched = await repository.get(created.id)

        # Assert
        assert is_system_id(created.id)
        assert fetched.title == "Quiz"
        assert fetched.description == "About things"
        assert fetched.questions == sample_questions
        assert fetched.created_at == created.created_at

    @pytest.mark.parametrize("title", ["", None, 42])
    async def test_create_requires_title(self, repository, title):
        with pytest.raises(ValidationError):
            await repository.create(title, "", [])

        assert await repository.list() == []

    async def test_whitespace_title_accepted(self, repository):
        created = await repository.create("   ")

        assert (await repository.get(created.id)).title == "   "

    async def test_questions_stored_as_given(self, repository):
        # Arrange
        questions = [
            {"id": "q1", "type": "comprehension", "options": ["A"], "correctAnswer": "A", "points": -2},
            {"id": "q2", "type": "cloze", "question": "The _____ is blue.", "correctAnswer": None},
            {"type": "categorize", "categories": ["Fruit"], "items": ["Apple"]},
            {"id": "q1", "type": "essay"},
        ]

        # Act
        created = await repository.create("Quiz", "", questions)
        fetched = await repository.get(created.id)

        # Assert
        assert created.questions == questions
        assert fetched.questions == questions
        assert fetched.total_points == -2

    async def test_update_stores_questions_as_given(self, repository):
        created = await repository.create("Quiz", "", [])
        questions = [{"type": "cloze", "points": 3}]

        await repository.update(created.id, "Quiz", "", questions)

        assert (await repository.get(created.id)).questions == questions

    async def test_non_list_questions_stored_empty(self, repository):
        created = await repository.create("Quiz", None, "not a list")

        assert created.questions == []
        assert created.description == ""

    async def test_slug_identifier(self, repository):
        created = await repository.create("Intro", slug="intro-quiz")

        fetched = await repository.get("intro-quiz")

        assert created.id == "intro-quiz"
        assert fetched.title == "Intro"

    async def test_duplicate_slug(self, repository):
        await repository.create("Intro", slug="intro-quiz")

        with pytest.raises(DuplicateError):
            await repository.create("Other", slug="intro-quiz")

    async def test_slug_shaped_like_system_id(self, repository):
        with pytest.raises(ValidationError):
            await repository.create("Intro", slug=new_system_id())

    @pytest.mark.parametrize("identifier", ["missing", "0" * 32])
    async def test_get_missing(self, repository, identifier):
        with pytest.raises(NotFoundError):
            await repository.get(identifier)

    async def test_update_replaces_content(self, repository, sample_questions):
        # Arrange
        created = await repository.create("Quiz", "Old", sample_questions)

        # Act
        updated = await repository.update(created.id, "New title", "New", sample_questions[:1])

        # Assert
        assert updated.id == created.id
        assert updated.created_at == created.created_at
        assert updated.updated_at >= created.updated_at
        fetched = await repository.get(created.id)
        assert fetched.title == "New title"
        assert [q["id"] for q in fetched.questions] == ["q1"]

    async def test_update_by_slug(self, repository):
        await repository.create("Intro", slug="intro-quiz")

        updated = await repository.update("intro-quiz", "Renamed", "", [])

        assert updated.id == "intro-quiz"
        assert updated.title == "Renamed"

    async def test_update_missing(self, repository):
        with pytest.raises(NotFoundError):
            await repository.update("missing", "Title", "", [])

    async def test_update_invalid_leaves_form_unchanged(self, repository):
        created = await repository.create("Quiz", "", [])

        with pytest.raises(ValidationError):
            await repository.update(created.id, "", "", [])

        assert (await repository.get(created.id)).title == "Quiz"

    async def test_delete(self, repository):
        created = await repository.create("Quiz")

        await repository.delete(created.id)

        with pytest.raises(NotFoundError):
            await repository.get(created.id)

    async def test_delete_missing(self, repository):
        with pytest.raises(NotFoundError):
            await repository.delete("missing")

    async def test_list(self, repository):
        first = await repository.create("First")
        second = await repository.create("Second", slug="second")

        forms = await repository.list()

        assert {form.id for form in forms} == {first.id, second.id}

    async def test_duplicate(self, repository, sample_questions):
        # Arrange
        source = await repository.create("Quiz", "Desc", sample_questions, slug="quiz")

        # Act
        copy = await repository.duplicate("quiz")

        # Assert
        assert copy.id != source.id
        assert copy.title == "Quiz (Copy)"
        assert copy.description == "Desc"
        assert copy.questions == sample_questions
        assert (await repository.get("quiz")).title == "Quiz"

    async def test_duplicate_missing(self, repository):
        with pytest.raises(NotFoundError):
            await repository.duplicate("missing")

    async def test_returned_forms_are_detached(self, repository, sample_questions):
        created = await repository.create("Quiz", "", sample_questions)

        created.questions[0]["question"] = "Changed"
        created.questions.clear()

        fetched = await repository.get(created.id)
        assert fetched.questions[0]["question"] == "What is the capital of France?"


@pytest.mark.asyncio
class TestConcurrentCreate:
    """Two creates racing for the same slug."""

    @staticmethod
    def _outcome(results):
        created = [r for r in results if not isinstance(r, BaseException)]
        failed = [r for r in results if isinstance(r, BaseException)]
        return created, failed

    async def test_memory_repository(self):
        repository = MemoryFormRepository()

        results = await asyncio.gather(
            repository.create("First", slug="shared"),
            repository.create("Second", slug="shared"),
            return_exceptions=True,
        )

        created, failed = self._outcome(results)
        assert len(created) == 1
        assert len(failed) == 1 and isinstance(failed[0], DuplicateError)

    async def test_sql_repository(self, tmp_path):
        # Arrange: separate connections need a file database
        database = Database(f"sqlite+aiosqlite:///{tmp_path / 'forms.db'}")
        await database.connect()
        repository = SQLFormRepository(database)

        try:
            # Act
            results = await asyncio.gather(
                repository.create("First", slug="shared"),
                repository.create("Second", slug="shared"),
                return_exceptions=True,
            )

            # Assert
            created, failed = self._outcome(results)
            assert len(created) == 1
            assert len(failed) == 1 and isinstance(failed[0], DuplicateError)
            assert [form.id for form in await repository.list()] == ["shared"]
        finally:
            await database.dispose()
