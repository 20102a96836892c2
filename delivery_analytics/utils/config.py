"""
Configuration management for the delivery analytics engine
Provides environment-based, type-safe configuration with validation
"""

import os
import logging
import yaml
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional
from pathlib import Path

from dotenv import load_dotenv

from delivery_analytics.models import (
    AnalyticsOptions,
    Metric,
    RiskThresholds,
    VelocitySettings,
    WorkloadThresholds,
)
from delivery_analytics.utils.errors import ConfigurationError

logger = logging.getLogger(__name__)


@dataclass
class WorkloadConfig:
    """Workload bucket cut points (inclusive upper bounds)"""
    light_max: int = 0
    normal_max: int = 8
    heavy_max: int = 13


@dataclass
class RiskConfig:
    """Risk level cut points (minimum score per level)"""
    medium: int = 6
    high: int = 12
    critical: int = 20


@dataclass
class VelocityConfig:
    """Velocity trend and recommendation settings"""
    trend_window: int = 3
    improving_factor: float = 1.1
    declining_factor: float = 0.9
    high_variance_cv: float = 30.0
    min_cycles: int = 3
    low_completion_rate: int = 80
    high_completion_rate: int = 95


@dataclass
class LoggingConfig:
    """Logging configuration"""
    level: str = "INFO"
    log_file: Optional[str] = None


@dataclass
class AnalyticsConfig:
    """Main configuration class"""
    default_metric: str = Metric.POINTS.value
    default_limit: int = 10

    # Sub-configurations
    workload: WorkloadConfig = field(default_factory=WorkloadConfig)
    risk: RiskConfig = field(default_factory=RiskConfig)
    velocity: VelocityConfig = field(default_factory=VelocityConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def to_options(self, as_of: datetime) -> AnalyticsOptions:
        """Build per-call options from the configured defaults"""
        return AnalyticsOptions(
            metric=self.default_metric,
            limit=self.default_limit,
            as_of=as_of,
            workload_thresholds=WorkloadThresholds(**vars(self.workload)),
            risk_thresholds=RiskThresholds(**vars(self.risk)),
            velocity=VelocitySettings(**vars(self.velocity)),
        )


ENV_PREFIX = "ANALYTICS_"

# (section, key, parser) for every value that may come from the environment
_ENV_KEYS = [
    (None, "default_metric", str),
    (None, "default_limit", int),
    ("workload", "light_max", int),
    ("workload", "normal_max", int),
    ("workload", "heavy_max", int),
    ("risk", "medium", int),
    ("risk", "high", int),
    ("risk", "critical", int),
    ("velocity", "trend_window", int),
    ("velocity", "improving_factor", float),
    ("velocity", "declining_factor", float),
    ("velocity", "high_variance_cv", float),
    ("velocity", "min_cycles", int),
    ("velocity", "low_completion_rate", int),
    ("velocity", "high_completion_rate", int),
    ("logging", "level", str),
    ("logging", "log_file", str),
]


def _env_name(section: Optional[str], key: str) -> str:
    if section is None:
        return f"{ENV_PREFIX}{key.upper()}"
    return f"{ENV_PREFIX}{section.upper()}_{key.upper()}"


def _load_from_env(config: AnalyticsConfig) -> None:
    """Load configuration from ANALYTICS_* environment variables"""
    for section, key, parser in _ENV_KEYS:
        name = _env_name(section, key)
        raw = os.getenv(name)
        if raw is None or raw == "":
            continue
        try:
            value = parser(raw)
        except ValueError as e:
            raise ConfigurationError(
                f"Invalid value for {name}: {raw!r}", details={"variable": name}
            ) from e
        target = config if section is None else getattr(config, section)
        setattr(target, key, value)


_PARSERS = {(section, key): parser for section, key, parser in _ENV_KEYS}


def _parse_yaml_value(section: Optional[str], key: str, value: Any) -> Any:
    """Coerce a YAML value with the same parser used for the environment"""
    name = key if section is None else f"{section}.{key}"
    parser = _PARSERS[(section, key)]
    # bool is an int subclass, and containers never fit a scalar setting
    if isinstance(value, (bool, dict, list)):
        raise ConfigurationError(f"Invalid value for {name}: {value!r}", details={"key": name})
    try:
        parsed = parser(value)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid value for {name}: {value!r}", details={"key": name}) from e
    # int(2.5) silently truncates
    if not isinstance(value, str) and parsed != value:
        raise ConfigurationError(f"Invalid value for {name}: {value!r}", details={"key": name})
    return parsed


def _merge_yaml_config(config: AnalyticsConfig, yaml_config: Dict[str, Any]) -> None:
    """Merge YAML configuration into current config"""
    if not yaml_config:
        return
    if not isinstance(yaml_config, dict):
        raise ConfigurationError("Analytics config file must contain a mapping")

    for key in ("default_metric", "default_limit"):
        if yaml_config.get(key) is not None:
            setattr(config, key, _parse_yaml_value(None, key, yaml_config[key]))

    for section in ("workload", "risk", "velocity", "logging"):
        values = yaml_config.get(section)
        if values is None:
            continue
        if not isinstance(values, dict):
            raise ConfigurationError(
                f"Config section {section} must be a mapping, got {values!r}", details={"key": section}
            )
        target = getattr(config, section)
        for key, value in values.items():
            if (section, key) not in _PARSERS:
                logger.warning("Ignoring unknown config key %s.%s", section, key)
            elif value is not None:
                setattr(target, key, _parse_yaml_value(section, key, value))


def _load_from_yaml(config: AnalyticsConfig, path: Path) -> None:
    try:
        with open(path, 'r', encoding='utf-8') as f:
            yaml_config = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(
            f"Could not load analytics config from {path}: {e}", details={"path": str(path)}
        ) from e
    _merge_yaml_config(config, yaml_config)


def _validate(config: AnalyticsConfig) -> None:
    """Validate configuration"""
    if config.default_metric not in {m.value for m in Metric}:
        raise ConfigurationError(f"default_metric must be 'points' or 'count', got {config.default_metric!r}")
    if config.default_limit < 1:
        raise ConfigurationError("default_limit must be at least 1")

    w = config.workload
    if not 0 <= w.light_max <= w.normal_max <= w.heavy_max:
        raise ConfigurationError(
            "workload cut points must satisfy 0 <= light_max <= normal_max <= heavy_max",
            details=vars(w),
        )

    r = config.risk
    if not 1 <= r.medium < r.high < r.critical <= 25:
        raise ConfigurationError(
            "risk cut points must satisfy 1 <= medium < high < critical <= 25",
            details=vars(r),
        )

    v = config.velocity
    if v.trend_window < 1:
        raise ConfigurationError("velocity.trend_window must be at least 1")
    if v.declining_factor > v.improving_factor:
        raise ConfigurationError("velocity.declining_factor must not exceed improving_factor")
    if v.low_completion_rate > v.high_completion_rate:
        raise ConfigurationError("velocity.low_completion_rate must not exceed high_completion_rate")


def load_config(
    config_file: Optional[str] = None,
    env_file: Optional[str] = None,
) -> AnalyticsConfig:
    """
    Build configuration from defaults, an optional YAML file and the environment.

    Environment variables win over the YAML file. The YAML path may also be
    given through ANALYTICS_CONFIG_FILE.
    """
    if env_file:
        load_dotenv(env_file, override=False)

    config = AnalyticsConfig()

    path = config_file or os.getenv(f"{ENV_PREFIX}CONFIG_FILE")
    if path:
        _load_from_yaml(config, Path(path))

    _load_from_env(config)
    _validate(config)
    logger.debug("Loaded analytics config: %s", config)
    return config


# Global config instance
_config: Optional[AnalyticsConfig] = None


def get_config() -> AnalyticsConfig:
    """Get the global configuration instance"""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reload_config() -> AnalyticsConfig:
    """Reload configuration from environment and files"""
    global _config
    _config = None
    return get_config()
