"""Configuration Management with Pydantic.

This module implements configuration models using Pydantic for parsing and
validation of YAML/JSON configuration files with environment variable overrides.
"""

import os
from pathlib import Path
from typing import Literal

import structlog
import yaml
from pydantic import BaseModel, Field, field_validator

logger = structlog.get_logger(__name__)

# Constants
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
LARGE_DFS_LIMIT = 100_000
DEFAULT_CONFIG_FILES = ("graphkit.yaml", "graphkit.yml", "graphkit.json")


class LoggingConfig(BaseModel):
    """Logging configuration settings.

    Attributes:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_logs: Render log events as JSON instead of console text
    """

    level: str = Field(
        default="INFO",
        description="Logging level",
    )
    json_logs: bool = Field(
        default=False,
        description="Render logs as JSON",
    )

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Normalize and validate the logging level.

        Args:
            v: The level name to validate

        Returns:
            The upper-cased level name

        Raises:
            ValueError: If the level is unknown
        """
        level = v.strip().upper()
        if level not in LOG_LEVELS:
            msg = f"logging level must be one of {', '.join(LOG_LEVELS)}"
            raise ValueError(msg)
        return level


class SearchConfig(BaseModel):
    """Path search settings.

    Attributes:
        default_algorithm: Algorithm used when a command does not name one
        dfs_max_nodes: Depth-first search is skipped by the word ladder for
            graphs with at least this many nodes
    """

    default_algorithm: Literal["bfs", "dfs", "both"] = Field(
        default="both",
        description="Default search algorithm",
    )
    dfs_max_nodes: int = Field(
        default=1000,
        ge=0,
        description="Node count from which DFS is skipped",
    )


class LoaderConfig(BaseModel):
    """Graph file loader settings.

    Attributes:
        encoding: Text encoding of graph files
    """

    encoding: str = Field(
        default="utf-8",
        min_length=1,
        description="Graph file encoding",
    )

    model_config = {"str_strip_whitespace": True}


class GraphkitConfig(BaseModel):
    """Main configuration combining all settings.

    Attributes:
        logging: Logging configuration
        search: Path search configuration
        loader: Graph file loader configuration
    """

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    search: SearchConfig = Field(default_factory=SearchConfig)
    loader: LoaderConfig = Field(default_factory=LoaderConfig)

    @classmethod
    def from_yaml(cls, path: str | Path) -> "GraphkitConfig":
        """Load configuration from a YAML (or JSON) file.

        Args:
            path: Path to the configuration file

        Returns:
            Parsed and validated GraphkitConfig instance

        Raises:
            FileNotFoundError: If configuration file doesn't exist
            ValueError: If the file is empty or not valid YAML
            pydantic.ValidationError: If a setting has an invalid value
        """
        config_path = Path(path)

        if not config_path.exists():
            msg = f"Configuration file not found: {config_path}"
            raise FileNotFoundError(msg)

        logger.info("loading_configuration", path=str(config_path))

        try:
            with config_path.open() as f:
                config_data = yaml.safe_load(f)

            if not config_data:
                msg = "Configuration file is empty"
                raise ValueError(msg)

            if not isinstance(config_data, dict):
                msg = "Configuration file must contain a mapping"
                raise ValueError(msg)

            config_data = cls._apply_env_overrides(config_data)

            config = cls(**config_data)
        except yaml.YAMLError as e:
            logger.exception("yaml_parse_error", error=str(e), path=str(config_path))
            msg = f"Invalid YAML in configuration file: {e}"
            raise ValueError(msg) from e
        else:
            logger.info(
                "configuration_loaded",
                logging_level=config.logging.level,
                default_algorithm=config.search.default_algorithm,
            )

            return config

    @classmethod
    def from_env(cls) -> "GraphkitConfig":
        """Build configuration from defaults and environment overrides only."""
        return cls(**cls._apply_env_overrides({}))

    @classmethod
    def _apply_env_overrides(cls, config_data: dict) -> dict:
        """Apply environment variable overrides to configuration.

        Environment variables follow the pattern: GRAPHKIT_<SECTION>_<KEY>
        Example: GRAPHKIT_LOGGING_LEVEL, GRAPHKIT_SEARCH_DFS_MAX_NODES

        Args:
            config_data: Base configuration dictionary from file

        Returns:
            Configuration dictionary with environment overrides applied
        """
        env_overrides = {
            ("logging", "level"): "GRAPHKIT_LOGGING_LEVEL",
            ("logging", "json_logs"): "GRAPHKIT_LOGGING_JSON",
            ("search", "default_algorithm"): "GRAPHKIT_SEARCH_ALGORITHM",
            ("search", "dfs_max_nodes"): "GRAPHKIT_SEARCH_DFS_MAX_NODES",
            ("loader", "encoding"): "GRAPHKIT_LOADER_ENCODING",
        }

        for path, env_var in env_overrides.items():
            value = os.environ.get(env_var)
            if value is not None:
                # Navigate to nested config section
                current = config_data
                for key in path[:-1]:
                    if not isinstance(current.get(key), dict):
                        current[key] = {}
                    current = current[key]

                final_key = path[-1]
                if env_var.endswith("_MAX_NODES"):
                    value = int(value)
                elif env_var.endswith("_JSON"):
                    value = value.lower() in ("true", "1", "yes")

                current[final_key] = value
                logger.debug(
                    "env_override_applied",
                    env_var=env_var,
                    config_path=".".join(path),
                )

        return config_data

    def validate_config(self) -> list[str]:
        """Validate configuration and return list of warnings.

        Returns:
            List of validation warning messages (empty if no warnings)
        """
        warnings = []

        if self.search.dfs_max_nodes == 0:
            warnings.append("dfs_max_nodes is 0 - the word ladder will never run DFS")

        if self.search.dfs_max_nodes > LARGE_DFS_LIMIT:
            warnings.append(
                f"dfs_max_nodes is high ({self.search.dfs_max_nodes}) - "
                "DFS paths on large graphs can be very long",
            )

        if self.logging.level == "DEBUG":
            warnings.append("DEBUG logging records every node and edge mutation")

        return warnings


def load_config(config_path: str | Path | None = None) -> GraphkitConfig:
    """Load configuration from file.

    Args:
        config_path: Path to configuration file. If None, looks for graphkit.yaml,
                    graphkit.yml or graphkit.json in current directory.

    Returns:
        Loaded GraphkitConfig instance

    Raises:
        FileNotFoundError: If config file not found
        ValueError: If config file is invalid
    """
    if config_path is None:
        for default_name in DEFAULT_CONFIG_FILES:
            default_path = Path(default_name)
            if default_path.exists():
                config_path = default_path
                break
        else:
            msg = f"No configuration file found. Expected one of: {', '.join(DEFAULT_CONFIG_FILES)}"
            raise FileNotFoundError(msg)

    return GraphkitConfig.from_yaml(config_path)


__all__ = [
    "DEFAULT_CONFIG_FILES",
    "GraphkitConfig",
    "LoaderConfig",
    "LoggingConfig",
    "SearchConfig",
    "load_config",
]
