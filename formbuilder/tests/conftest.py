"""
Shared fixtures for the form builder test suite.
"""

import copy

import pytest
from fastapi.testclient import TestClient

from formbuilder import create_app
from formbuilder.config import Settings
from formbuilder.domain.forms import Form


@pytest.fixture
def app_settings():
    """Settings for an application backed by in-memory repositories."""
    return Settings(_env_file=None, STORAGE_BACKEND="memory", LOG_LEVEL="WARNING")


@pytest.fixture
def client(app_settings):
    """Test client with the application lifespan running."""
    app = create_app(app_settings)
    with TestClient(app) as client:
        yield client


@pytest.fixture
def sample_questions():
    """One question of each type, worth 5 points in total."""
    return [
        {
            "id": "q1",
            "type": "comprehension",
            "question": "What is the capital of France?",
            "options": ["Paris", "Rome", "Madrid", "Berlin"],
            "correctAnswer": "Paris",
            "points": 2,
        },
        {
            "id": "q2",
            "type": "cloze",
            "question": "The _____ is blue and the _____ is green.",
            "correctAnswer": ["sky", "grass"],
            "points": 2,
        },
        {
            "id": "q3",
            "type": "categorize",
            "question": "Sort the food",
            "categories": ["Fruit", "Vegetable"],
            "items": ["Apple", "Carrot"],
            "points": 1,
        },
    ]


@pytest.fixture
def sample_form(sample_questions):
    return Form(
        id="geography-quiz",
        title="Geography Quiz",
        description="A short quiz",
        questions=copy.deepcopy(sample_questions),
    )
