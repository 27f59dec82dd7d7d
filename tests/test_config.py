"""Unit tests for configuration management module."""

import json
from pathlib import Path
from typing import Any

import pytest
import yaml
from pydantic import ValidationError

from src.config import (
    GraphkitConfig,
    LoaderConfig,
    LoggingConfig,
    SearchConfig,
    load_config,
)

ENV_VARS = [
    "GRAPHKIT_LOGGING_LEVEL",
    "GRAPHKIT_LOGGING_JSON",
    "GRAPHKIT_SEARCH_ALGORITHM",
    "GRAPHKIT_SEARCH_DFS_MAX_NODES",
    "GRAPHKIT_LOADER_ENCODING",
]


@pytest.fixture
def valid_config_dict() -> dict[str, Any]:
    """Fixture providing valid configuration dictionary."""
    return {
        "logging": {"level": "debug", "json_logs": True},
        "search": {"default_algorithm": "bfs", "dfs_max_nodes": 50},
        "loader": {"encoding": "latin-1"},
    }


@pytest.fixture
def temp_config_file(tmp_path: Path, valid_config_dict: dict[str, Any]) -> Path:
    """Fixture providing temporary YAML config file."""
    config_path = tmp_path / "config.yaml"
    with config_path.open("w") as f:
        yaml.dump(valid_config_dict, f)
    return config_path


@pytest.fixture(autouse=True)
def clean_env_vars(monkeypatch):
    """Remove GRAPHKIT_* overrides before each test."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestLoggingConfig:
    """Tests for LoggingConfig model."""

    def test_defaults(self):
        """Test default logging settings."""
        config = LoggingConfig()
        assert config.level == "INFO"
        assert config.json_logs is False

    def test_level_normalized(self):
        """Test that level names are stripped and upper-cased."""
        assert LoggingConfig(level=" warning ").level == "WARNING"

    def test_invalid_level(self):
        """Test that unknown levels are rejected."""
        with pytest.raises(ValidationError, match="logging level must be one of"):
            LoggingConfig(level="LOUD")


class TestSearchConfig:
    """Tests for SearchConfig model."""

    def test_defaults(self):
        """Test default search settings."""
        config = SearchConfig()
        assert config.default_algorithm == "both"
        assert config.dfs_max_nodes == 1000

    def test_invalid_algorithm(self):
        """Test that only bfs, dfs and both are accepted."""
        with pytest.raises(ValidationError):
            SearchConfig(default_algorithm="dijkstra")

    def test_negative_dfs_limit(self):
        """Test that dfs_max_nodes must be non-negative."""
        with pytest.raises(ValidationError):
            SearchConfig(dfs_max_nodes=-1)


class TestLoaderConfig:
    """Tests for LoaderConfig model."""

    def test_encoding_stripped(self):
        """Test that whitespace around the encoding is removed."""
        assert LoaderConfig(encoding=" utf-16 ").encoding == "utf-16"

    def test_empty_encoding(self):
        """Test that an empty encoding is rejected."""
        with pytest.raises(ValidationError):
            LoaderConfig(encoding="")


class TestGraphkitConfig:
    """Tests for GraphkitConfig model."""

    def test_defaults(self):
        """Test that every section has defaults."""
        config = GraphkitConfig()
        assert config.logging.level == "INFO"
        assert config.search.default_algorithm == "both"
        assert config.loader.encoding == "utf-8"

    def test_nested_validation_errors(self, valid_config_dict):
        """Test that errors inside a section are reported."""
        valid_config_dict["search"]["dfs_max_nodes"] = "many"

        with pytest.raises(ValidationError, match="dfs_max_nodes"):
            GraphkitConfig(**valid_config_dict)

    def test_from_env_defaults(self):
        """Test from_env without any overrides."""
        assert GraphkitConfig.from_env() == GraphkitConfig()

    def test_from_env_overrides(self, monkeypatch):
        """Test that environment variables override each section."""
        monkeypatch.setenv("GRAPHKIT_LOGGING_LEVEL", "error")
        monkeypatch.setenv("GRAPHKIT_LOGGING_JSON", "yes")
        monkeypatch.setenv("GRAPHKIT_SEARCH_ALGORITHM", "dfs")
        monkeypatch.setenv("GRAPHKIT_SEARCH_DFS_MAX_NODES", "25")
        monkeypatch.setenv("GRAPHKIT_LOADER_ENCODING", "ascii")

        config = GraphkitConfig.from_env()

        assert config.logging.level == "ERROR"
        assert config.logging.json_logs is True
        assert config.search.default_algorithm == "dfs"
        assert config.search.dfs_max_nodes == 25
        assert config.loader.encoding == "ascii"

    def test_json_override_false(self, monkeypatch):
        """Test that anything but true, 1 or yes disables JSON logs."""
        monkeypatch.setenv("GRAPHKIT_LOGGING_JSON", "off")

        assert GraphkitConfig.from_env().logging.json_logs is False

    def test_bad_integer_override(self, monkeypatch):
        """Test that a non-numeric DFS limit fails loudly."""
        monkeypatch.setenv("GRAPHKIT_SEARCH_DFS_MAX_NODES", "lots")

        with pytest.raises(ValueError):
            GraphkitConfig.from_env()

    def test_validate_config_clean(self):
        """Test that defaults produce no warnings."""
        assert GraphkitConfig().validate_config() == []

    def test_validate_config_warnings(self):
        """Test warnings for a disabled DFS, a huge DFS limit and DEBUG logging."""
        disabled = GraphkitConfig(search=SearchConfig(dfs_max_nodes=0))
        huge = GraphkitConfig(search=SearchConfig(dfs_max_nodes=1_000_000))
        verbose = GraphkitConfig(logging=LoggingConfig(level="DEBUG"))

        assert any("never run DFS" in w for w in disabled.validate_config())
        assert any("is high (1000000)" in w for w in huge.validate_config())
        assert any("DEBUG logging" in w for w in verbose.validate_config())


class TestLoadConfig:
    """Tests for loading configuration files."""

    def test_load_yaml_config(self, temp_config_file):
        """Test loading configuration from YAML file."""
        config = load_config(temp_config_file)

        assert config.logging.level == "DEBUG"
        assert config.logging.json_logs is True
        assert config.search.default_algorithm == "bfs"
        assert config.search.dfs_max_nodes == 50
        assert config.loader.encoding == "latin-1"

    def test_load_json_config(self, tmp_path, valid_config_dict):
        """Test that JSON files load through the YAML parser."""
        config_path = tmp_path / "config.json"
        config_path.write_text(json.dumps(valid_config_dict))

        assert load_config(config_path).search.dfs_max_nodes == 50

    def test_partial_config(self, tmp_path):
        """Test that missing sections fall back to defaults."""
        config_path = tmp_path / "config.yaml"
        config_path.write_text("search:\n  default_algorithm: dfs\n")

        config = load_config(config_path)

        assert config.search.default_algorithm == "dfs"
        assert config.logging.level == "INFO"

    def test_env_overrides_file(self, temp_config_file, monkeypatch):
        """Test that environment variables win over file values."""
        monkeypatch.setenv("GRAPHKIT_SEARCH_DFS_MAX_NODES", "7")

        assert load_config(temp_config_file).search.dfs_max_nodes == 7

    def test_env_override_creates_section(self, tmp_path, monkeypatch):
        """Test overriding a section the file does not mention."""
        config_path = tmp_path / "config.yaml"
        config_path.write_text("logging:\n  level: INFO\n")
        monkeypatch.setenv("GRAPHKIT_LOADER_ENCODING", "utf-16")

        assert load_config(config_path).loader.encoding == "utf-16"

    def test_load_config_not_found(self, tmp_path):
        """Test loading non-existent config file."""
        with pytest.raises(FileNotFoundError, match="Configuration file not found"):
            load_config(tmp_path / "nonexistent.yaml")

    def test_load_config_invalid_yaml(self, tmp_path):
        """Test loading invalid YAML file."""
        config_path = tmp_path / "invalid.yaml"
        config_path.write_text("search: [unclosed\n")

        with pytest.raises(ValueError, match="Invalid YAML"):
            load_config(config_path)

    def test_load_config_empty(self, tmp_path):
        """Test loading an empty file."""
        config_path = tmp_path / "empty.yaml"
        config_path.write_text("")

        with pytest.raises(ValueError, match="Configuration file is empty"):
            load_config(config_path)

    def test_load_config_not_mapping(self, tmp_path):
        """Test loading a file whose top level is a list."""
        config_path = tmp_path / "list.yaml"
        config_path.write_text("- logging\n- search\n")

        with pytest.raises(ValueError, match="must contain a mapping"):
            load_config(config_path)

    def test_load_config_validation_error(self, tmp_path):
        """Test loading config with a bad value."""
        config_path = tmp_path / "bad.yaml"
        config_path.write_text("logging:\n  level: CHATTY\n")

        with pytest.raises(ValidationError):
            load_config(config_path)

    def test_load_config_default_location(self, tmp_path, valid_config_dict, monkeypatch):
        """Test loading config from default location."""
        monkeypatch.chdir(tmp_path)
        (tmp_path / "graphkit.yaml").write_text(yaml.dump(valid_config_dict))

        assert load_config().search.default_algorithm == "bfs"

    def test_load_config_default_location_not_found(self, tmp_path, monkeypatch):
        """Test error when no default config file exists."""
        monkeypatch.chdir(tmp_path)

        with pytest.raises(FileNotFoundError, match="No configuration file found"):
            load_config()


    def test_load_config_default_location_order(self, tmp_path, monkeypatch):
        """Test that graphkit.yaml wins over graphkit.yml and graphkit.json."""
        monkeypatch.chdir(tmp_path)
        (tmp_path / "graphkit.json").write_text('{"search": {"dfs_max_nodes": 3}}')
        (tmp_path / "graphkit.yml").write_text("search:\n  dfs_max_nodes: 2\n")

        assert load_config().search.dfs_max_nodes == 2

        (tmp_path / "graphkit.yaml").write_text("search:\n  dfs_max_nodes: 1\n")

        assert load_config().search.dfs_max_nodes == 1
