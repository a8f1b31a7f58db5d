"""Tests unitarios para la configuración de logging."""

import json
import logging

from app.core.logging_config import StructuredFormatter, get_logging_configuration


def test_configuration_without_log_file_uses_console_only():
    """Sin LOG_FILE_PATH solo se configura la consola."""
    config = get_logging_configuration()

    assert set(config["handlers"]) == {"console"}
    assert config["root"]["handlers"] == ["console"]


def test_structured_formatter_includes_extra_fields():
    """El formatter JSON incluye los campos extra del record."""
    record = logging.LogRecord("app.webhook.received", logging.INFO, __file__, 1, "Webhook received", None, None)
    record.transaction_id = "tx_123"

    entry = json.loads(StructuredFormatter().format(record))

    assert entry["message"] == "Webhook received"
    assert entry["extra"]["transaction_id"] == "tx_123"
