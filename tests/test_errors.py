"""
Resourceful — Error Translator Tests
=====================================

What we test:
    ✅ Sub-errors → JSON error document with the error's status
    ✅ No sub-errors → plain-text message
    ✅ Unclassified exceptions → 500 with an empty body
    ✅ Every error is logged (WARNING for 4xx, ERROR for 5xx)
    ✅ Exception hierarchy status codes and messages
"""

import json
import logging

import pytest

from resourceful.errors import translate_error
from resourceful.exceptions import (
    BadRequestError,
    CardinalityError,
    ConflictError,
    DatabaseError,
    DecodeError,
    ForbiddenError,
    HTTPError,
    InvalidIDError,
    MalformedBodyError,
    NotFoundError,
    ResourceConfigurationError,
)
from resourceful.schemas import ErrorObject


class TestTranslation:

    def test_structured_errors_become_json(self):
        errors = [
            ErrorObject(status="422", title="Bad title", source={"pointer": "/data/title"}),
            ErrorObject(status="422", title="Bad body"),
        ]
        response = translate_error(HTTPError("ignored", status_code=422, errors=errors))

        assert response.status_code == 422
        assert response.media_type == "application/json"
        body = json.loads(response.body)
        assert body == {
            "errors": [
                {"status": "422", "title": "Bad title", "source": {"pointer": "/data/title"}},
                {"status": "422", "title": "Bad body"},
            ]
        }

    def test_message_only_becomes_plain_text(self):
        response = translate_error(NotFoundError(resource="posts", resource_id="4"))

        assert response.status_code == 404
        assert response.headers["content-type"].startswith("text/plain")
        assert response.body == b"posts with ID '4' was not found"

    def test_unclassified_error_is_empty_500(self):
        response = translate_error(ValueError("connection string with password"))

        assert response.status_code == 500
        assert response.body == b""

    def test_database_error_message_is_generic(self):
        response = translate_error(DatabaseError(context={"error_type": "OperationalError"}))

        assert response.status_code == 500
        assert b"OperationalError" not in response.body


class TestLogging:

    def test_client_errors_log_warning(self, caplog):
        with caplog.at_level(logging.WARNING, logger="resourceful.errors"):
            translate_error(ForbiddenError("no"))

        record = caplog.records[-1]
        assert record.levelno == logging.WARNING
        assert "ForbiddenError 403: no" in record.getMessage()

    def test_unclassified_errors_log_traceback(self, caplog):
        try:
            raise RuntimeError("boom")
        except RuntimeError as exc:
            with caplog.at_level(logging.ERROR, logger="resourceful.errors"):
                translate_error(exc)

        record = caplog.records[-1]
        assert record.levelno == logging.ERROR
        assert "boom" in record.getMessage()
        assert record.exc_info is not None

    def test_context_is_logged_not_sent(self, caplog):
        exc = ConflictError("taken", context={"constraint": "uq_title"})
        with caplog.at_level(logging.WARNING, logger="resourceful.errors"):
            response = translate_error(exc)

        assert "uq_title" in caplog.records[-1].getMessage()
        assert b"uq_title" not in response.body


class TestHierarchy:

    @pytest.mark.parametrize(
        "exc, status",
        [
            (BadRequestError(), 400),
            (MalformedBodyError(), 400),
            (CardinalityError(2), 400),
            (InvalidIDError(""), 400),
            (DecodeError("title", "bad"), 400),
            (ForbiddenError(), 403),
            (NotFoundError(), 404),
            (ConflictError(), 409),
            (DatabaseError(), 500),
            (HTTPError(), 500),
        ],
    )
    def test_status_codes(self, exc, status):
        assert exc.status_code == status

    def test_status_override_is_per_instance(self):
        HTTPError(status_code=418)
        assert HTTPError().status_code == 500

    def test_cardinality_message(self):
        assert CardinalityError(0).message == "expected exactly one object, got 0"

    def test_decode_error_message(self):
        exc = DecodeError("viewCount", "Input should be a valid integer")
        assert exc.message == "Invalid value for field 'viewCount': Input should be a valid integer"
        assert exc.field == "viewCount"

    def test_configuration_error_is_a_type_error(self):
        assert issubclass(ResourceConfigurationError, TypeError)
        assert not issubclass(ResourceConfigurationError, HTTPError)
