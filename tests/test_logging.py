"""Tests for the JSON log lines written around article commands."""

import json
import logging
from dataclasses import replace
from io import StringIO

import pytest

from editorial_kernel.domain.article import ArticleStatus
from editorial_kernel.exceptions import (
    ConcurrencyConflictError,
    IllegalTransitionError,
    UnauthorizedActionError,
)
from editorial_kernel.logging_config import (
    CONTEXT_FIELDS,
    LogContext,
    StructuredFormatter,
    configure_logging,
    get_logger,
    reset_logging,
)


def _transitions(captured_logs) -> list[dict]:
    return [r for r in captured_logs() if r["message"] == "article_transition"]


# ---------------------------------------------------------------------------
# Records written by the command facade and repository
# ---------------------------------------------------------------------------


class TestArticleRecords:

    def test_transition_record_is_one_json_line(self, command_service, captured_logs, journalist, make_content):
        article = command_service.create(make_content())
        command_service.submit(article.id)

        record = _transitions(captured_logs)[-1]
        assert record["level"] == "INFO"
        assert record["logger"] == "editorial_kernel.services.command_facade"
        assert record["trace_type"] == "ARTICLE_TRANSITION"
        assert record["actor_id"] == str(journalist.id)
        assert record["actor_role"] == "JOURNALIST"
        assert record["article_id"] == str(article.id)
        assert (record["from_status"], record["to_status"]) == ("DRAFT", "IN_REVIEW")
        assert record["duration_ms"] >= 0

    def test_each_command_gets_its_own_context(self, command_service, captured_logs, make_content):
        first = command_service.create(make_content())
        second = command_service.create(make_content())
        command_service.submit(second.id)

        records = _transitions(captured_logs)
        assert [(r["command"], r["article_id"]) for r in records] == [
            ("create", str(first.id)),
            ("create", str(second.id)),
            ("submit", str(second.id)),
        ]
        assert LogContext.get_all() == {}

    def test_refused_command_logs_reason(self, command_service, captured_logs, make_content):
        article = command_service.create(make_content())

        with pytest.raises(UnauthorizedActionError):
            command_service.approve(article.id)

        record = _transitions(captured_logs)[-1]
        assert record["outcome"] == "rejected"
        assert record["rejection"] == "unauthorized"
        assert record["reason"]
        assert record["from_status"] == "DRAFT"

    def test_version_conflict_carries_command_context(self, repository, command_service, captured_logs, make_content):
        article = command_service.create(make_content())

        with LogContext.bind(command="approve", article_id=str(article.id)):
            with pytest.raises(ConcurrencyConflictError):
                repository.save(replace(article, version=6), expected_version=5)

        conflict = next(r for r in captured_logs() if r["message"] == "article_version_conflict")
        assert conflict["level"] == "WARNING"
        assert conflict["command"] == "approve"
        assert conflict["article_id"] == str(article.id)
        assert (conflict["expected_version"], conflict["actual_version"]) == (5, 1)

    def test_stale_version_warning_precedes_transition(self, command_service, captured_logs, make_content):
        article = command_service.create(make_content())

        with pytest.raises(ConcurrencyConflictError):
            command_service.submit(article.id, expected_version=9)

        messages = [r["message"] for r in captured_logs()]
        assert messages[-2:] == ["stale_expected_version", "article_transition"]


# ---------------------------------------------------------------------------
# LogContext
# ---------------------------------------------------------------------------


class TestLogContext:

    def test_bind_nests_and_restores(self):
        with LogContext.bind(actor_id="a-1", command="submit"):
            with LogContext.bind(article_id="art-9", command="approve"):
                assert LogContext.get_all() == {
                    "actor_id": "a-1",
                    "article_id": "art-9",
                    "command": "approve",
                }
            assert LogContext.get_all() == {"actor_id": "a-1", "command": "submit"}
        assert LogContext.get_all() == {}

    def test_bind_skips_none(self):
        with LogContext.bind(actor_id="a-1", article_id=None):
            assert LogContext.get_all() == {"actor_id": "a-1"}

    def test_bind_restores_after_error(self):
        with pytest.raises(IllegalTransitionError):
            with LogContext.bind(command="finish_revision"):
                raise IllegalTransitionError("finish_revision", "DRAFT", "NONE")
        assert LogContext.get_all() == {}

    def test_bind_rejects_unknown_fields(self):
        with pytest.raises(TypeError):
            with LogContext.bind(correlation_id="x"):
                pass

    def test_get_all_is_a_copy(self):
        with LogContext.bind(command="submit"):
            LogContext.get_all()["command"] = "approve"
            assert LogContext.get_all()["command"] == "submit"

    def test_context_fields(self):
        assert CONTEXT_FIELDS == ("actor_id", "article_id", "command")


# ---------------------------------------------------------------------------
# Formatter and configuration
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_logging():
    """A fresh namespace logger writing to a string buffer."""
    reset_logging()
    stream = StringIO()
    configure_logging(stream=stream)

    def _records() -> list[dict]:
        return [json.loads(line) for line in stream.getvalue().splitlines() if line]

    yield _records
    reset_logging()
    configure_logging(level=logging.DEBUG)


class TestFormatterAndConfiguration:

    def test_enum_values_and_error_code(self, isolated_logging):
        logger = get_logger("services.command_facade")
        try:
            raise IllegalTransitionError("approve", "DRAFT", "NONE")
        except IllegalTransitionError:
            logger.exception("command_failed", extra={"target": ArticleStatus.PUBLISHED})

        record = isolated_logging()[0]
        assert record["target"] == "PUBLISHED"
        assert record["error_type"] == "IllegalTransitionError"
        assert record["error_code"] == "ILLEGAL_TRANSITION"
        assert "Traceback" in record["traceback"]

    def test_plain_errors_have_no_code(self, isolated_logging):
        try:
            raise KeyError("category_id")
        except KeyError:
            get_logger("db.engine").exception("lookup_failed")

        record = isolated_logging()[0]
        assert record["error_type"] == "KeyError"
        assert "error_code" not in record

    def test_default_level_drops_debug(self, isolated_logging):
        logger = get_logger("services.article_repository")
        logger.debug("article_saved")
        logger.info("engine_initialized")

        assert [r["message"] for r in isolated_logging()] == ["engine_initialized"]

    def test_configure_is_idempotent(self, isolated_logging):
        configure_logging(level=logging.DEBUG, stream=StringIO())

        root = logging.getLogger("editorial_kernel")
        assert len(root.handlers) == 1
        assert root.level == logging.INFO
        assert isinstance(root.handlers[0].formatter, StructuredFormatter)
        assert root.propagate is False

    def test_reset_detaches_handlers(self, isolated_logging):
        reset_logging()

        root = logging.getLogger("editorial_kernel")
        assert root.handlers == []
        assert root.propagate is True
