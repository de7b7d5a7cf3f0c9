# ============================================================================
# STRUCTURED LOGGING TESTS
# ============================================================================
# STATUS: Tests - Log context and formatters
# PURPOSE: Verify context nesting and JSON/human output
# CREATED: 19 OCT 2026
# ============================================================================
"""
Structured Logging Tests

Run with:
    pytest tests/test_logging.py -v
"""

import asyncio
import json
import logging

import pytest

from core.logging import (
    HumanFormatter,
    StructuredFormatter,
    get_current_context,
    log_context,
)
from infrastructure.base_repository import BaseRepository, EntityConflictError, RepositoryError


def _record(message="hello") -> logging.LogRecord:
    return logging.LogRecord("repositories.account", logging.INFO, __file__, 10, message, None, None)


class TestLogContext:

    def test_nested_context_inherits_and_restores(self):
        with log_context(request_id="req-1", aggregate="account"):
            with log_context(entity_id="abc", partition_key="ACC-001"):
                inner = get_current_context()
            outer = get_current_context()

        assert (inner.request_id, inner.aggregate, inner.entity_id) == ("req-1", "account", "abc")
        assert outer.entity_id is None
        assert get_current_context().request_id is None

    def test_none_does_not_clear_parent_fields(self):
        with log_context(request_id="req-1"):
            with log_context(request_id=None, aggregate="order"):
                assert get_current_context().request_id == "req-1"

    def test_concurrent_tasks_see_their_own_context(self):
        async def worker(name):
            with log_context(entity_id=name):
                await asyncio.sleep(0)
                return get_current_context().entity_id

        async def run():
            return await asyncio.gather(worker("a"), worker("b"))

        assert asyncio.run(run()) == ["a", "b"]


class TestFormatters:

    def test_structured_output_carries_context(self):
        with log_context(request_id="req-9", aggregate="product"):
            line = StructuredFormatter().format(_record())

        data = json.loads(line)
        assert data["message"] == "hello"
        assert data["level"] == "INFO"
        assert data["context"] == {"request_id": "req-9", "aggregate": "product"}

    def test_human_output_inlines_context(self):
        with log_context(aggregate="account", partition_key="ACC-042"):
            line = HumanFormatter().format(_record("added"))

        assert "[agg=account, pk=ACC-042]" in line
        assert line.endswith("repositories.account [agg=account, pk=ACC-042]: added")


class SampleRepository(BaseRepository):
    pass


class TestErrorContext:

    def test_unexpected_errors_are_wrapped(self):
        repo = SampleRepository()

        with pytest.raises(RepositoryError) as exc_info:
            with repo._error_context("sample add", "abc"):
                raise KeyError("boom")

        assert exc_info.value.operation == "sample add"
        assert exc_info.value.entity_id == "abc"
        assert isinstance(exc_info.value.__cause__, KeyError)

    @pytest.mark.parametrize("error", [EntityConflictError("taken"), ValueError("bad")])
    def test_known_errors_pass_through(self, error):
        with pytest.raises(type(error)) as exc_info:
            with SampleRepository()._error_context("sample add"):
                raise error
        assert exc_info.value is error

    def test_block_carries_operation_context(self):
        with SampleRepository()._error_context("sample get", "abc"):
            context = get_current_context()
        assert (context.operation, context.entity_id) == ("sample get", "abc")
        assert get_current_context().operation is None
