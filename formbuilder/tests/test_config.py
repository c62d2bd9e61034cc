"""
Tests for settings and error response mapping.
"""

import pytest
from pydantic import ValidationError as SettingsValidationError

from formbuilder.common.error_handling import error_response, status_code_for
from formbuilder.common.exceptions import DuplicateError, NotFoundError, StorageError, ValidationError
from formbuilder.config import Settings


class TestSettings:

    def test_defaults(self):
        settings = Settings(_env_file=None)

        assert settings.STORAGE_BACKEND == "sql"
        assert settings.REQUIRE_EXISTING_FORM is False
        assert settings.API_PREFIX == "/api"

    def test_normalizes_values(self):
        settings = Settings(_env_file=None, STORAGE_BACKEND=" Memory ", LOG_LEVEL="debug")

        assert settings.STORAGE_BACKEND == "memory"
        assert settings.LOG_LEVEL == "DEBUG"

    def test_rejects_unknown_backend(self):
        with pytest.raises(SettingsValidationError):
            Settings(_env_file=None, STORAGE_BACKEND="mongo")

    def test_cors_origins(self):
        settings = Settings(_env_file=None, CORS_ALLOW_ORIGINS="http://a.test, http://b.test,")

        assert settings.cors_origins == ["http://a.test", "http://b.test"]


@pytest.mark.parametrize("error,expected", [
    (ValidationError("bad"), 400),
    (NotFoundError("Form", "x"), 404),
    (DuplicateError("form", "x"), 409),
    (StorageError("down"), 500),
    (RuntimeError("boom"), 500),
])
def test_status_codes(error, expected):
    assert status_code_for(error) == expected


def test_error_response_body():
    body = error_response(ValidationError("Title is required", errors={"title": ["required"]}))

    assert body == {
        "status": "error",
        "code": "validation_error",
        "message": "Title is required",
        "details": {"title": ["required"]},
    }
    assert error_response(RuntimeError("boom"))["code"] == "internal_error"
