"""Runtime settings: defaults -> optional YAML file -> environment variables."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from pathlib import Path

import yaml

from project_finder.errors import ConfigurationError


CONFIG_ENV_VAR = "PROJECT_FINDER_CONFIG"
SOURCES_ENV_VAR = "PROJECT_FINDER_SOURCES"
LOG_LEVEL_ENV_VAR = "PROJECT_FINDER_LOG_LEVEL"
GEMINI_MODEL_ENV_VAR = "PROJECT_FINDER_GEMINI_MODEL"

_DEFAULT_GEMINI_MODEL = "gemini-1.5-flash"


@dataclass(frozen=True, slots=True)
class RateLimitSettings:
    capacity: int = 100
    refill_amount: int = 50
    refill_interval: float = 60.0


@dataclass(frozen=True, slots=True)
class Settings:
    """Resolved configuration for one server process.

    ``sources`` is ``None`` when the user did not choose; the catalog then
    enables every implemented source.
    """

    sources: tuple[str, ...] | None = None
    max_results: int = 50
    request_timeout: float = 10.0
    rate_limit: RateLimitSettings = field(default_factory=RateLimitSettings)
    github_token: str = ""
    gitlab_token: str = ""
    gemini_api_key: str = ""
    gemini_model: str = _DEFAULT_GEMINI_MODEL
    log_level: str = "WARNING"


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Build Settings from the YAML file named by ``PROJECT_FINDER_CONFIG`` and env vars.

    Raises:
        ConfigurationError: If the YAML file is missing, unparseable, or holds
            invalid values.
    """
    env = os.environ if environ is None else environ
    settings = Settings()

    config_path = env.get(CONFIG_ENV_VAR, "").strip()
    if config_path:
        settings = _apply_yaml(settings, _load_yaml(Path(config_path)), source=config_path)

    sources_raw = env.get(SOURCES_ENV_VAR, "").strip()
    if sources_raw:
        settings = replace(settings, sources=_split_ids(sources_raw))

    return replace(
        settings,
        github_token=env.get("GITHUB_TOKEN", "").strip(),
        gitlab_token=env.get("GITLAB_TOKEN", "").strip(),
        gemini_api_key=env.get("GEMINI_API_KEY", "").strip(),
        gemini_model=env.get(GEMINI_MODEL_ENV_VAR, "").strip() or settings.gemini_model,
        log_level=env.get(LOG_LEVEL_ENV_VAR, "").strip().upper() or settings.log_level,
    )


def _split_ids(raw: str) -> tuple[str, ...]:
    return tuple(part.strip().lower() for part in raw.split(",") if part.strip())


def _load_yaml(path: Path) -> dict:
    if not path.exists():
        raise ConfigurationError(f"Config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigurationError(f"Failed to parse config file '{path}': {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Invalid config format in {path}: expected a YAML mapping.")
    return data


def _apply_yaml(settings: Settings, data: dict, source: str) -> Settings:
    """Overlay YAML values onto ``settings``."""
    sources = data.get("sources")
    if sources is not None:
        if not isinstance(sources, list) or not all(isinstance(s, str) for s in sources):
            raise ConfigurationError(f"Invalid config in {source}: 'sources' must be a list.")
        settings = replace(settings, sources=_split_ids(",".join(sources)))

    if "max_results" in data:
        settings = replace(
            settings, max_results=_positive(data["max_results"], "max_results", source, int)
        )
    if "request_timeout" in data:
        settings = replace(
            settings,
            request_timeout=_positive(data["request_timeout"], "request_timeout", source, float),
        )

    rate_limit = data.get("rate_limit")
    if rate_limit is not None:
        if not isinstance(rate_limit, dict):
            raise ConfigurationError(f"Invalid config in {source}: 'rate_limit' must be a mapping.")
        current = settings.rate_limit
        settings = replace(
            settings,
            rate_limit=RateLimitSettings(
                capacity=_positive(
                    rate_limit.get("capacity", current.capacity), "capacity", source, int
                ),
                refill_amount=_positive(
                    rate_limit.get("refill_amount", current.refill_amount),
                    "refill_amount",
                    source,
                    int,
                ),
                refill_interval=_positive(
                    rate_limit.get("refill_interval", current.refill_interval),
                    "refill_interval",
                    source,
                    float,
                ),
            ),
        )
    return settings


def _positive(value: object, name: str, source: str, kind: type) -> int | float:
    try:
        number = kind(value)
    except (TypeError, ValueError):
        msg = f"Invalid config in {source}: '{name}' must be a number."
        raise ConfigurationError(msg) from None
    if number <= 0:
        raise ConfigurationError(f"Invalid config in {source}: '{name}' must be positive.")
    return number
