"""
Tests for configuration loading.
"""

import os
import pytest
from datetime import datetime

from delivery_analytics.utils import config as config_module
from delivery_analytics.utils.config import (
    ENV_PREFIX,
    AnalyticsConfig,
    get_config,
    load_config,
    reload_config,
)
from delivery_analytics.utils.errors import ConfigurationError


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Start every test without ANALYTICS_* variables or a cached config"""
    for name in list(os.environ):
        if name.startswith(ENV_PREFIX):
            monkeypatch.delenv(name)
    monkeypatch.setattr(config_module, "_config", None)
    yield
    # load_dotenv writes straight to os.environ
    for name in list(os.environ):
        if name.startswith(ENV_PREFIX):
            os.environ.pop(name)


def write_yaml(tmp_path, text):
    path = tmp_path / "analytics.yaml"
    path.write_text(text, encoding="utf-8")
    return path


class TestDefaults:
    """Test built-in defaults"""

    def test_defaults(self):
        config = load_config()

        assert config.default_metric == "points"
        assert config.default_limit == 10
        assert (config.workload.light_max, config.workload.normal_max, config.workload.heavy_max) == (0, 8, 13)
        assert (config.risk.medium, config.risk.high, config.risk.critical) == (6, 12, 20)
        assert config.velocity.trend_window == 3
        assert config.logging.level == "INFO"

    def test_to_options(self):
        config = AnalyticsConfig()
        config.workload.heavy_max = 21
        options = config.to_options(datetime(2025, 3, 3))

        assert options.workload_thresholds.heavy_max == 21
        assert options.velocity.improving_factor == 1.1
        assert options.as_of == datetime(2025, 3, 3)


class TestEnvironment:
    """Test ANALYTICS_* variables"""

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("ANALYTICS_DEFAULT_LIMIT", "5")
        monkeypatch.setenv("ANALYTICS_DEFAULT_METRIC", "count")
        monkeypatch.setenv("ANALYTICS_WORKLOAD_HEAVY_MAX", "20")
        monkeypatch.setenv("ANALYTICS_VELOCITY_IMPROVING_FACTOR", "1.25")
        config = load_config()

        assert config.default_limit == 5
        assert config.default_metric == "count"
        assert config.workload.heavy_max == 20
        assert config.velocity.improving_factor == 1.25

    def test_empty_value_ignored(self, monkeypatch):
        monkeypatch.setenv("ANALYTICS_DEFAULT_LIMIT", "")

        assert load_config().default_limit == 10

    def test_unparsable_value(self, monkeypatch):
        monkeypatch.setenv("ANALYTICS_RISK_HIGH", "twelve")
        with pytest.raises(ConfigurationError) as exc_info:
            load_config()
        assert exc_info.value.details["variable"] == "ANALYTICS_RISK_HIGH"

    def test_env_file(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("ANALYTICS_DEFAULT_LIMIT=7\n", encoding="utf-8")

        assert load_config(env_file=str(env_file)).default_limit == 7


class TestYamlFile:
    """Test YAML configuration files"""

    def test_yaml_values(self, tmp_path):
        path = write_yaml(tmp_path, "default_metric: count\nrisk:\n  critical: 16\nvelocity:\n  trend_window: 2\n")
        config = load_config(config_file=str(path))

        assert config.default_metric == "count"
        assert config.risk.critical == 16
        assert config.velocity.trend_window == 2

    def test_env_wins_over_yaml(self, tmp_path, monkeypatch):
        path = write_yaml(tmp_path, "default_limit: 4\n")
        monkeypatch.setenv("ANALYTICS_DEFAULT_LIMIT", "6")

        assert load_config(config_file=str(path)).default_limit == 6

    def test_path_from_env(self, tmp_path, monkeypatch):
        path = write_yaml(tmp_path, "default_limit: 4\n")
        monkeypatch.setenv("ANALYTICS_CONFIG_FILE", str(path))

        assert load_config().default_limit == 4

    def test_unknown_keys_ignored(self, tmp_path, caplog):
        path = write_yaml(tmp_path, "workload:\n  medium_max: 3\n")
        config = load_config(config_file=str(path))

        assert not hasattr(config.workload, "medium_max")
        assert "workload.medium_max" in caplog.text

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError):
            load_config(config_file=str(tmp_path / "missing.yaml"))

    def test_malformed_yaml(self, tmp_path):
        path = write_yaml(tmp_path, "risk: [1, 2\n")
        with pytest.raises(ConfigurationError):
            load_config(config_file=str(path))

    def test_not_a_mapping(self, tmp_path):
        path = write_yaml(tmp_path, "- points\n- count\n")
        with pytest.raises(ConfigurationError):
            load_config(config_file=str(path))

    @pytest.mark.parametrize("text,key", [
        ("default_limit: ten\n", "default_limit"),
        ("default_limit: 2.5\n", "default_limit"),
        ("default_limit: true\n", "default_limit"),
        ("risk:\n  high: [12]\n", "risk.high"),
        ("velocity:\n  improving_factor: fast\n", "velocity.improving_factor"),
    ])
    def test_unparsable_yaml_value(self, tmp_path, text, key):
        path = write_yaml(tmp_path, text)
        with pytest.raises(ConfigurationError) as exc_info:
            load_config(config_file=str(path))
        assert exc_info.value.details["key"] == key

    @pytest.mark.parametrize("text", ["workload: 5\n", "logging: debug\n", "risk: [6, 12, 20]\n"])
    def test_section_not_a_mapping(self, tmp_path, text):
        path = write_yaml(tmp_path, text)
        with pytest.raises(ConfigurationError):
            load_config(config_file=str(path))

    def test_values_coerced_like_environment(self, tmp_path):
        path = write_yaml(tmp_path, "default_limit: '6'\nvelocity:\n  improving_factor: 2\nlogging:\n  log_file:\n")
        config = load_config(config_file=str(path))

        assert config.default_limit == 6
        assert config.velocity.improving_factor == 2.0
        assert isinstance(config.velocity.improving_factor, float)
        assert config.logging.log_file is None


class TestValidation:
    """Test configuration validation"""

    @pytest.mark.parametrize("text", [
        "default_metric: hours\n",
        "default_limit: 0\n",
        "workload:\n  normal_max: 20\n",
        "risk:\n  high: 25\n",
        "risk:\n  critical: 30\n",
        "velocity:\n  trend_window: 0\n",
        "velocity:\n  declining_factor: 1.5\n",
        "velocity:\n  low_completion_rate: 99\n",
    ])
    def test_invalid_values(self, tmp_path, text):
        path = write_yaml(tmp_path, text)
        with pytest.raises(ConfigurationError) as exc_info:
            load_config(config_file=str(path))
        assert exc_info.value.to_dict()["error_code"] == "CONFIG_001"


class TestGlobalConfig:
    """Test the cached global instance"""

    def test_get_config_is_cached(self):
        assert get_config() is get_config()

    def test_reload_config(self, monkeypatch):
        first = get_config()
        monkeypatch.setenv("ANALYTICS_DEFAULT_LIMIT", "3")
        reloaded = reload_config()

        assert reloaded is not first
        assert reloaded.default_limit == 3
        assert get_config() is reloaded
