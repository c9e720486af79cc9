"""Tests for structured logging."""

import json
import logging
from pathlib import Path

import structlog

from schemaplane.config.models import LoggingConfig, LogOutputConfig
from schemaplane.core.logging import (
    clear_run_id,
    configure_logging,
    get_logger,
    get_run_id,
    set_run_id,
)


class TestRunIdCorrelation:
    """Run ID context variable tests."""

    def setup_method(self) -> None:
        """Clear run ID before each test."""
        clear_run_id()

    def test_given_run_id_when_set_then_can_retrieve(self) -> None:
        """Run ID can be set and retrieved."""
        # When
        result = set_run_id("run-123")

        # Then
        assert result == "run-123"
        assert get_run_id() == "run-123"

    def test_given_no_id_when_set_then_generates_short_hex(self) -> None:
        """Set generates a 12-character ID when none provided."""
        rid = set_run_id()
        assert len(rid) == 12
        assert get_run_id() == rid

    def test_given_set_id_when_clear_then_removes_id(self) -> None:
        """Clear removes the current run ID."""
        # Given
        set_run_id("to-clear")

        # When
        clear_run_id()

        # Then
        assert get_run_id() is None


class TestLoggingConfiguration:
    """Logging configuration tests."""

    def setup_method(self) -> None:
        """Reset structlog and stdlib logging before each test."""
        structlog.reset_defaults()
        logging.getLogger().handlers.clear()
        clear_run_id()

    def test_given_json_file_output_when_logged_then_event_fields_and_run_id(
        self, tmp_path: Path
    ) -> None:
        """JSON output carries the event, its keys, the logger name and the run ID."""
        # Given
        log_file = tmp_path / "schemaplane.log"
        configure_logging(
            config=LoggingConfig(
                level="INFO",
                outputs=[LogOutputConfig(format="json", destination=str(log_file))],
            )
        )
        set_run_id("abc")

        # When
        get_logger("schemaplane.test").info("entities_built", count=3)

        # Then
        data = json.loads(log_file.read_text().strip().splitlines()[-1])
        assert data["event"] == "entities_built"
        assert data["count"] == 3
        assert data["logger"] == "schemaplane.test"
        assert data["run_id"] == "abc"
        assert data["level"] == "info"
        assert "timestamp" in data

    def test_given_multi_output_config_when_configure_then_levels_respected(
        self, tmp_path: Path
    ) -> None:
        """Each output filters at its own level."""
        # Given
        debug_file = tmp_path / "debug.log"
        warn_file = tmp_path / "warn.log"
        config = LoggingConfig(
            level="DEBUG",
            outputs=[
                LogOutputConfig(format="json", destination=str(warn_file), level="WARNING"),
                LogOutputConfig(format="console", destination=str(debug_file)),
            ],
        )

        # When
        configure_logging(config=config)
        logger = get_logger()
        logger.debug("field_classified")
        logger.warning("unresolved_enum")

        # Then
        warn_content = warn_file.read_text()
        assert "unresolved_enum" in warn_content
        assert "field_classified" not in warn_content
        debug_content = debug_file.read_text()
        assert "field_classified" in debug_content
        assert "unresolved_enum" in debug_content
