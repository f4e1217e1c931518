"""
Tests for environment configuration
"""
import importlib
import logging

from escope import config


class TestDeferredConfigWarnings:
    def test_invalid_number_is_logged_only_once_logging_is_configured(self, monkeypatch, caplog, tmp_path):
        monkeypatch.setenv("ES_REQUEST_TIMEOUT", "fast")
        caplog.set_level(logging.WARNING)
        try:
            reloaded = importlib.reload(config)
            assert reloaded.REQUEST_TIMEOUT == 5
            assert not any("ES_REQUEST_TIMEOUT" in record.getMessage() for record in caplog.records)

            monkeypatch.setattr(reloaded, "LOG_FILE", str(tmp_path / "escope.log"))
            reloaded.configure_logging()
            assert any("ES_REQUEST_TIMEOUT" in record.getMessage() for record in caplog.records)
            assert reloaded.CONFIG_WARNINGS == []
        finally:
            monkeypatch.delenv("ES_REQUEST_TIMEOUT")
            importlib.reload(config)

    def test_valid_number_is_read(self, monkeypatch):
        monkeypatch.setenv("ESCOPE_CHECK_TIMEOUT", "2.5")
        try:
            assert importlib.reload(config).CHECK_TIMEOUT == 2.5
        finally:
            monkeypatch.delenv("ESCOPE_CHECK_TIMEOUT")
            importlib.reload(config)
