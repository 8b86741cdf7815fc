"""Tests for settings loading and structured logging helpers."""
from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from composer_app.config import EngineSettings
from composer_app.logging_config import JsonFormatter, correlation_context, log_event, redact_for_log
from models.optimization import OptimizationConfig

_ENV_KEYS = (
    "COMPOSER_ENV",
    "COMPOSER_CONFIG_PATH",
    "COMPOSER_CONFIG_DIR",
    "VALIDITY_THRESHOLD",
    "MUTATION_RATE",
    "LOG_LEVEL",
    "RANDOM_SEED",
    "GENERATIONS",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def test_defaults_without_overrides() -> None:
    settings = EngineSettings.from_env()

    assert settings == EngineSettings()
    assert settings.validity_threshold == 60
    assert settings.weather_gate == 50.0
    assert settings.random_seed is None
    config = OptimizationConfig.from_settings(settings)
    assert (config.max_candidates, config.time_limit_ms, config.population_size, config.generations) == (
        6,
        1500,
        50,
        10,
    )


def test_environment_variables_override_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("VALIDITY_THRESHOLD", "65")
    monkeypatch.setenv("RANDOM_SEED", "42")

    settings = EngineSettings.from_env()

    assert settings.validity_threshold == 65
    assert settings.random_seed == 42


def test_yaml_file_is_read_and_env_wins(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    config_file = tmp_path / "settings.yaml"
    config_file.write_text("# tuning\nmutation_rate: 0.3\nlog_level: 'DEBUG'\ngenerations: 4\n")
    monkeypatch.setenv("COMPOSER_CONFIG_PATH", str(config_file))
    monkeypatch.setenv("GENERATIONS", "7")

    settings = EngineSettings.from_env()

    assert settings.mutation_rate == 0.3
    assert settings.log_level == "DEBUG"
    assert settings.generations == 7


def test_environment_name_selects_yaml_file(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    (tmp_path / "staging.yaml").write_text("validity_threshold: 55\n")
    monkeypatch.setenv("COMPOSER_ENV", "staging")
    monkeypatch.setenv("COMPOSER_CONFIG_DIR", str(tmp_path))

    settings = EngineSettings.from_env()

    assert settings.environment == "staging"
    assert settings.validity_threshold == 55


def test_log_event_redacts_personal_fields(caplog: pytest.LogCaptureFixture) -> None:
    logger = logging.getLogger("tests.composer")
    with caplog.at_level(logging.INFO, logger="tests.composer"):
        log_event(logger, logging.INFO, "outfits_generated", user_id="alice", count=3, correlation_id="abc123")

    record = caplog.records[-1]
    assert record.user_id == "[redacted]"
    assert record.correlation_id == "abc123"

    payload = json.loads(JsonFormatter().format(record))
    assert payload["event"] == "outfits_generated"
    assert payload["count"] == 3
    assert payload["correlation_id"] == "abc123"


def test_redaction_masks_emails_and_urls() -> None:
    scrubbed = redact_for_log({"note": "mail me at a@b.com", "link": "https://example.com/x", "ids": ("a", 1)})

    assert scrubbed == {"note": "mail me at [redacted-email]", "link": "[redacted-url]", "ids": ["a", 1]}


def test_correlation_context_scopes_the_id() -> None:
    with correlation_context("outer") as outer:
        assert outer == "outer"
        with correlation_context("inner") as inner:
            assert inner == "inner"


def test_package_metadata_points_at_existing_files() -> None:
    root = Path(__file__).resolve().parents[1]
    lines = (root / "pyproject.toml").read_text(encoding="utf-8").splitlines()

    readmes = [line.split("=", 1)[1].strip().strip('"') for line in lines if line.startswith("readme")]
    for readme in readmes:
        assert (root / readme).is_file()
        assert readme != "SPEC_FULL.md"
