"""Unit tests for infrastructure domain probes.

Tests that domain probes correctly capture domain events
following the Domain Oriented Observability pattern.
"""

from dataclasses import FrozenInstanceError
from unittest.mock import MagicMock

import pytest
import structlog

from infrastructure.observability import (
    DefaultConnectionProbe,
    DefaultStartupProbe,
    ObservationContext,
)


class TestConnectionProbe:
    """Tests for ConnectionProbe protocol and implementation."""

    def test_default_probe_creates_with_default_logger(self):
        """Default probe should work without explicit logger."""
        probe = DefaultConnectionProbe()
        assert probe._logger is not None

    def test_engine_created_logs_info(self):
        mock_logger = MagicMock(spec=structlog.stdlib.BoundLogger)
        probe = DefaultConnectionProbe(logger=mock_logger)

        probe.engine_created(role="write", host="localhost", database="orgtree", pool_size=2)

        mock_logger.info.assert_called_once_with(
            "database_engine_created",
            role="write",
            host="localhost",
            database="orgtree",
            pool_size=2,
        )

    def test_health_check_failed_logs_error(self):
        mock_logger = MagicMock(spec=structlog.stdlib.BoundLogger)
        probe = DefaultConnectionProbe(logger=mock_logger)

        probe.health_check_failed(OSError("refused"))

        mock_logger.error.assert_called_once_with(
            "database_health_check_failed", error="refused"
        )

    def test_with_context_preserves_logger(self):
        mock_logger = MagicMock(spec=structlog.stdlib.BoundLogger)
        probe = DefaultConnectionProbe(logger=mock_logger)

        bound = probe.with_context(ObservationContext(request_id="req-9"))
        bound.engine_disposed(role="read")

        assert bound._logger is mock_logger
        mock_logger.info.assert_called_once_with(
            "database_engine_disposed", role="read", request_id="req-9"
        )


class TestStartupProbe:
    def test_application_started(self):
        mock_logger = MagicMock(spec=structlog.stdlib.BoundLogger)
        probe = DefaultStartupProbe(logger=mock_logger)

        probe.application_started(app_name="Orgtree API", version="0.1.0")

        call_args = mock_logger.info.call_args
        assert call_args[0][0] == "application_started"
        assert call_args[1]["version"] == "0.1.0"


class TestObservationContext:
    """Tests for ObservationContext."""

    def test_as_dict_excludes_none_values(self):
        assert ObservationContext().as_dict() == {}

    def test_as_dict_prefixes_domain_keys(self):
        context = ObservationContext(
            request_id="req-1", operation="assign", group_id="G", person_id="1234567"
        )

        assert context.as_dict() == {
            "request_id": "req-1",
            "ctx_operation": "assign",
            "ctx_group_id": "G",
            "ctx_person_id": "1234567",
        }

    def test_with_helpers_return_new_contexts(self):
        base = ObservationContext(request_id="req-1")

        derived = base.with_person("1234567").with_extra(attempt=2)

        assert base.person_id is None
        assert derived.person_id == "1234567"
        assert derived.as_dict()["attempt"] == 2

    def test_context_is_immutable(self):
        context = ObservationContext()

        with pytest.raises(FrozenInstanceError):
            context.request_id = "other"
