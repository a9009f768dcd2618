"""
core/config.py — Typed configuration loader for the Kairen transliterator.

Loads config/kairen.yaml and validates all values into typed dataclasses.
All downstream modules import from this module; never read YAML directly.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

from core.constants import KairenConstants as C, ResolverKind

logger = logging.getLogger(__name__)


# ──────────────────────────────────────────────
# Dataclass hierarchy (mirrors kairen.yaml)
# ──────────────────────────────────────────────


@dataclass(frozen=True)
class ResolverConfig:
    """Which pronunciation source feeds the word pipeline."""

    kind: str = ResolverKind.PHONEME_SET.value

    @property
    def resolver_kind(self) -> ResolverKind:
        """Return :attr:`kind` as a :class:`ResolverKind`."""
        return ResolverKind(self.kind)


@dataclass(frozen=True)
class PhonemeTableConfig:
    """Source of the static word → phoneme table."""

    path: Optional[str] = None
    url: Optional[str] = None

    @property
    def resolved_path(self) -> Optional[Path]:
        """Return the table path as a Path, expanding ~ if needed."""
        if self.path is None:
            return None
        return Path(os.path.expanduser(self.path))


@dataclass(frozen=True)
class DictionaryApiConfig:
    """Remote phonetic-alphabet lookup configuration."""

    base_url: str = C.DICTIONARY_API_URL
    timeout_s: float = C.LOOKUP_TIMEOUT_S
    retries: int = C.LOOKUP_RETRIES
    backoff_factor: float = C.LOOKUP_BACKOFF_S


@dataclass(frozen=True)
class TaggerConfig:
    """Part-of-speech tagger configuration."""

    enabled: bool = True
    auto_download: bool = False


@dataclass(frozen=True)
class PipelineConfig:
    """Orchestrator tuning and extra exception words."""

    max_workers: int = 1
    exceptions: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class LoggingConfig:
    """Structured logging configuration."""

    level: str = "INFO"


@dataclass(frozen=True)
class KairenConfig:
    """Root configuration object — single source of truth for all settings."""

    resolver: ResolverConfig = field(default_factory=ResolverConfig)
    phoneme_table: PhonemeTableConfig = field(default_factory=PhonemeTableConfig)
    dictionary_api: DictionaryApiConfig = field(default_factory=DictionaryApiConfig)
    tagger: TaggerConfig = field(default_factory=TaggerConfig)
    pipeline: PipelineConfig = field(default_factory=PipelineConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


# ──────────────────────────────────────────────
# Loader
# ──────────────────────────────────────────────


def load_config(config_path: Path | str | None = None) -> KairenConfig:
    """
    Load, validate, and return a KairenConfig from a YAML file.

    The search order for the config file is:
    1. *config_path* argument (if provided)
    2. KAIREN_CONFIG environment variable
    3. ``config/kairen.yaml`` relative to the project root
    4. Built-in defaults (no file required)

    Args:
        config_path: Optional path to a ``kairen.yaml`` file.

    Returns:
        A fully populated and frozen :class:`KairenConfig` instance.

    Raises:
        ValueError: If a YAML field has an invalid type or value.
        FileNotFoundError: If *config_path* is explicitly given but does not exist.
    """
    resolved_path: Path | None = None

    if config_path is not None:
        resolved_path = Path(config_path)
        if not resolved_path.exists():
            raise FileNotFoundError(f"Config file not found: {resolved_path}")
    elif "KAIREN_CONFIG" in os.environ:
        resolved_path = Path(os.environ["KAIREN_CONFIG"])
        if not resolved_path.exists():
            raise FileNotFoundError(
                f"KAIREN_CONFIG points to missing file: {resolved_path}"
            )
    else:
        candidate = Path(__file__).resolve().parent.parent / "config" / "kairen.yaml"
        if candidate.exists():
            resolved_path = candidate

    raw: dict = {}
    if resolved_path is not None:
        logger.info("Loading config from: %s", resolved_path)
        with resolved_path.open("r", encoding="utf-8") as fh:
            loaded = yaml.safe_load(fh) or {}
        if not isinstance(loaded, dict):
            raise ValueError(f"Config file must be a YAML mapping, got: {type(loaded)}")
        raw = loaded
    else:
        logger.info("No config file found — using built-in defaults")

    return config_from_dict(raw)


def config_from_dict(raw: dict) -> KairenConfig:
    """
    Build and validate a :class:`KairenConfig` from an already-parsed mapping.

    Missing sections and keys fall back to their defaults.

    Args:
        raw: Mapping shaped like ``kairen.yaml``.

    Returns:
        A validated :class:`KairenConfig`.

    Raises:
        ValueError: If a key is unknown or a value violates a constraint.
    """
    try:
        resolver_cfg = ResolverConfig(**(raw.get("resolver") or {}))
        table_cfg = PhonemeTableConfig(**(raw.get("phoneme_table") or {}))
        api_cfg = DictionaryApiConfig(**(raw.get("dictionary_api") or {}))
        tagger_cfg = TaggerConfig(**(raw.get("tagger") or {}))

        # Exception keys are matched against uppercased words
        pipe_raw = dict(raw.get("pipeline") or {})
        if "exceptions" in pipe_raw:
            exceptions = pipe_raw["exceptions"] or {}
            if not isinstance(exceptions, dict):
                raise ValueError(
                    f"pipeline.exceptions must be a mapping, got: {type(exceptions)}"
                )
            pipe_raw["exceptions"] = {
                str(k).upper(): str(v) for k, v in exceptions.items()
            }
        pipe_cfg = PipelineConfig(**pipe_raw)

        log_cfg = LoggingConfig(**(raw.get("logging") or {}))

    except TypeError as exc:
        raise ValueError(f"Invalid config value: {exc}") from exc

    _validate_types(resolver_cfg, table_cfg, api_cfg, tagger_cfg, pipe_cfg, log_cfg)
    _validate_config(resolver_cfg, api_cfg, pipe_cfg, log_cfg)

    config = KairenConfig(
        resolver=resolver_cfg,
        phoneme_table=table_cfg,
        dictionary_api=api_cfg,
        tagger=tagger_cfg,
        pipeline=pipe_cfg,
        logging=log_cfg,
    )
    logger.debug("Config loaded: %s", config)
    return config


_NUMBER = (int, float)


def _check_type(name: str, value: object, expected: type | tuple[type, ...], optional: bool = False) -> None:
    """Raise ValueError unless *value* is an instance of *expected* (bool is never a number)."""
    if optional and value is None:
        return
    is_bool = isinstance(value, bool)
    wants_bool = expected is bool
    if not isinstance(value, expected) or (is_bool and not wants_bool):
        raise ValueError(f"{name} has the wrong type: {value!r} ({type(value).__name__})")


def _validate_types(
    resolver: ResolverConfig,
    table: PhonemeTableConfig,
    api: DictionaryApiConfig,
    tagger: TaggerConfig,
    pipeline: PipelineConfig,
    log: LoggingConfig,
) -> None:
    """
    Check the YAML value types before any range check compares them.

    Raises:
        ValueError: If a field holds a value of the wrong type.
    """
    _check_type("resolver.kind", resolver.kind, str)
    _check_type("phoneme_table.path", table.path, str, optional=True)
    _check_type("phoneme_table.url", table.url, str, optional=True)
    _check_type("dictionary_api.base_url", api.base_url, str)
    _check_type("dictionary_api.timeout_s", api.timeout_s, _NUMBER)
    _check_type("dictionary_api.retries", api.retries, int)
    _check_type("dictionary_api.backoff_factor", api.backoff_factor, _NUMBER)
    _check_type("tagger.enabled", tagger.enabled, bool)
    _check_type("tagger.auto_download", tagger.auto_download, bool)
    _check_type("pipeline.max_workers", pipeline.max_workers, int)
    _check_type("logging.level", log.level, str)


def _validate_config(
    resolver: ResolverConfig,
    api: DictionaryApiConfig,
    pipeline: PipelineConfig,
    log: LoggingConfig,
) -> None:
    """
    Validate cross-field constraints on the loaded configuration.

    Raises:
        ValueError: If any configured value violates a hard constraint.
    """
    valid_kinds = {k.value for k in ResolverKind}
    if resolver.kind not in valid_kinds:
        raise ValueError(
            f"resolver.kind must be one of {sorted(valid_kinds)}, got '{resolver.kind}'"
        )
    if api.timeout_s <= 0:
        raise ValueError(f"dictionary_api.timeout_s must be positive, got {api.timeout_s}")
    if api.retries < 0:
        raise ValueError(f"dictionary_api.retries must be ≥0, got {api.retries}")
    if api.backoff_factor < 0:
        raise ValueError(
            f"dictionary_api.backoff_factor must be ≥0, got {api.backoff_factor}"
        )
    if pipeline.max_workers < 1:
        raise ValueError(f"pipeline.max_workers must be ≥1, got {pipeline.max_workers}")
    if log.level.upper() not in {"DEBUG", "INFO", "WARN", "WARNING", "ERROR", "CRITICAL"}:
        raise ValueError(f"logging.level is not a known level, got '{log.level}'")
