from __future__ import annotations

import logging
from dataclasses import dataclass

import structlog

from src.shared.consts import EnumEnvironment, EnumLogLevel
from src.shared.logging import (
    configure_logging,
    get_logger,
    update_logging_from_settings,
)


def test_configure_logging_mirrors_to_file(tmp_path) -> None:
    log_file = tmp_path / "analytics.log"
    configure_logging(level="DEBUG", file_path=str(log_file), environment="development")

    root = logging.getLogger()
    assert root.level == logging.DEBUG
    assert any(isinstance(handler, logging.FileHandler) for handler in root.handlers)

    get_logger(__name__).info("cache.loaded", entries=3)
    for handler in root.handlers:
        handler.flush()

    assert "cache.loaded" in log_file.read_text()


def test_production_renders_json(tmp_path) -> None:
    log_file = tmp_path / "analytics.json.log"
    configure_logging(level="INFO", file_path=str(log_file), environment="production")

    structlog.get_logger("tests.logging").warning("alerts.history.corrupt", key="k")
    for handler in logging.getLogger().handlers:
        handler.flush()

    line = log_file.read_text().strip().splitlines()[-1]
    assert line.startswith("{")
    assert '"event": "alerts.history.corrupt"' in line


def test_unknown_level_falls_back_to_info() -> None:
    configure_logging(level="chatty")

    assert logging.getLogger().level == logging.INFO


@dataclass
class _LoggingSettings:
    level: EnumLogLevel = EnumLogLevel.WARNING
    file_path: str | None = None


@dataclass
class _Settings:
    logging: _LoggingSettings
    environment: EnumEnvironment = EnumEnvironment.PRODUCTION


def test_update_logging_from_settings_applies_configuration() -> None:
    settings = _Settings(logging=_LoggingSettings(level=EnumLogLevel.ERROR))

    update_logging_from_settings(settings)

    assert logging.getLogger().level == logging.ERROR


def test_update_logging_from_settings_tolerates_bad_settings() -> None:
    update_logging_from_settings(object())
