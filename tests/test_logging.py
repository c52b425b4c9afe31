"""Tests for the loguru-based logging helpers."""

from __future__ import annotations

from pathlib import Path

import pytest
from loguru import logger

from rca_taxonomy.config.settings import Settings
from rca_taxonomy.utils.logging import (
    configure_logging,
    get_logger,
    log_timing,
    logging_context,
    verbose_text_logging_enabled,
)


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    return Settings(
        paths={
            "data_dir": tmp_path / "data",
            "output_dir": tmp_path / "output",
            "logs_dir": tmp_path / "logs",
        }
    )


@pytest.fixture(autouse=True)
def _reset_logger():
    yield
    logger.remove()


def test_configure_logging_writes_context_to_file(settings: Settings) -> None:
    configure_logging(settings, level="DEBUG")

    with logging_context(run_id="run-42", step="similar-codes"):
        get_logger(module=__name__).info("Lookup finished")
    logger.complete()
    logger.remove()

    content = settings.log_file.read_text(encoding="utf-8")
    assert "run-42 | similar-codes | Lookup finished" in content


def test_log_timing_records_elapsed_seconds() -> None:
    records: list[dict] = []
    logger.add(lambda message: records.append(message.record), level="INFO")

    with log_timing("scoring"):
        pass

    assert records[-1]["message"] == "Step timing"
    assert records[-1]["extra"]["step"] == "scoring"
    assert records[-1]["extra"]["seconds"] >= 0


@pytest.mark.parametrize(("value", "expected"), [("1", True), ("yes", True), ("", False), ("off", False)])
def test_verbose_text_logging_flag(monkeypatch: pytest.MonkeyPatch, value: str, expected: bool) -> None:
    monkeypatch.setenv("RCA_TAXONOMY_VERBOSE_TEXT_LOGS", value)
    assert verbose_text_logging_enabled() is expected
