"""Configuration helpers for the outfit composition engine."""

from dataclasses import dataclass, fields
from pathlib import Path
import os
from typing import Optional


@dataclass(frozen=True)
class EngineSettings:
    """Heuristic constants and optimisation defaults for the engine.

    The scoring thresholds and penalties are tunable heuristics rather than
    empirically fitted values, so every one of them can be overridden from the
    environment or from an environment YAML file without touching the scoring
    code.
    """

    # compatibility rules and candidate generation
    validity_threshold: int = 60
    suggestion_min_score: int = 70
    suggestion_limit: int = 10
    inventory_soft_cap: int = 30
    color_pass_threshold: float = 0.6
    color_clash_threshold: float = 0.3
    max_formality_gap: int = 1

    # genetic search
    elite_fraction: float = 0.2
    mutation_rate: float = 0.1

    # objective scoring
    novelty_seen_score: float = 20.0
    novelty_wear_penalty: float = 10.0
    recent_wear_days: int = 30
    recent_wear_penalty: float = 20.0
    over_worn_threshold: int = 10
    over_worn_penalty: float = 10.0

    # weather
    weather_gate: float = 50.0
    cold_below_c: float = 10.0
    cold_penalty: float = 40.0
    hot_above_c: float = 25.0
    hot_penalty: float = 30.0
    rain_above_mm_h: float = 0.5
    rain_penalty: float = 30.0
    wind_above_kmh: float = 15.0
    wind_penalty: float = 20.0
    humidity_above_pct: float = 70.0
    humidity_penalty: float = 10.0

    # optimisation defaults
    max_candidates: int = 6
    time_limit_ms: int = 1500
    population_size: int = 50
    generations: int = 10
    random_seed: Optional[int] = None

    log_level: str = "INFO"
    environment: Optional[str] = None

    @classmethod
    def from_env(cls) -> "EngineSettings":
        """Build settings from environment variables or an environment YAML file.

        Environment specific YAML lives in ``config/environments/<env>.yaml`` by
        default. Environment variables named after the upper-cased field win over
        the file so deployments can tweak a single threshold.
        """

        env_name = os.getenv("COMPOSER_ENV")
        config_path = os.getenv("COMPOSER_CONFIG_PATH")
        config_dir = Path(os.getenv("COMPOSER_CONFIG_DIR", "config/environments"))
        yaml_config: dict = {}

        if config_path:
            path = Path(config_path)
        elif env_name:
            path = config_dir / f"{env_name}.yaml"
        else:
            path = None

        if path and path.exists():
            yaml_config = cls._load_yaml_config(path)

        def get_value(key: str) -> Optional[str]:
            return os.getenv(key.upper(), yaml_config.get(key))

        overrides: dict = {}
        for setting in fields(cls):
            if setting.name == "environment":
                continue
            raw = get_value(setting.name)
            if raw is None or raw == "":
                continue
            overrides[setting.name] = cls._coerce(setting.name, raw)
        return cls(environment=env_name, **overrides)

    @classmethod
    def _coerce(cls, name: str, raw: str) -> object:
        default = getattr(cls, name)
        if name == "random_seed":
            return int(raw)
        if isinstance(default, bool):
            return raw.strip().lower() in {"1", "true", "yes", "on"}
        if isinstance(default, int):
            return int(raw)
        if isinstance(default, float):
            return float(raw)
        return raw

    @staticmethod
    def _load_yaml_config(path: Path) -> dict:
        """Parse a minimal YAML/INI-style config without external dependencies."""

        config: dict[str, str] = {}
        for line in path.read_text().splitlines():
            stripped = line.strip()
            if not stripped or stripped.startswith("#"):
                continue
            if ":" not in stripped:
                continue
            key, raw_value = stripped.split(":", 1)
            value = raw_value.strip()
            if (value.startswith("\"") and value.endswith("\"")) or (
                value.startswith("'") and value.endswith("'")
            ):
                value = value[1:-1]
            config[key.strip()] = value
        return config


DEFAULT_SETTINGS = EngineSettings()

__all__ = ["EngineSettings", "DEFAULT_SETTINGS"]
