"""Tests for structlog configuration."""

import json

import pytest
import structlog

from substreams.config import ScalarConfig
from substreams.log import configure_from_config, configure_logging


@pytest.mark.usefixtures("reset_structlog")
class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_filters_below_level(self, capsys):
        """Events below the configured level are dropped."""
        configure_logging("WARNING")
        logger = structlog.get_logger()
        logger.info("dropped_event")
        logger.warning("kept_event", value=1)
        out = capsys.readouterr().out
        assert "dropped_event" not in out
        assert "kept_event" in out

    def test_json_output(self, capsys):
        """JSON output renders one object per line."""
        configure_logging("debug", json_output=True)
        structlog.get_logger().debug("json_event", amount="12.5")
        record = json.loads(capsys.readouterr().out.strip())
        assert record["event"] == "json_event"
        assert record["amount"] == "12.5"
        assert record["level"] == "debug"
        assert "timestamp" in record

    def test_unknown_level(self):
        """Unknown level names raise ValueError."""
        with pytest.raises(ValueError, match="Unknown log level"):
            configure_logging("LOUD")

    def test_configure_from_config(self, capsys):
        """configure_from_config applies the config's settings."""
        configure_from_config(ScalarConfig(log_level="ERROR", log_json=True))
        logger = structlog.get_logger()
        logger.warning("dropped_event")
        logger.error("kept_event")
        lines = capsys.readouterr().out.strip().splitlines()
        assert [json.loads(line)["event"] for line in lines] == ["kept_event"]
