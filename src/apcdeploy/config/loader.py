"""Load and validate apcdeploy.yml deployment config files."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError as PydanticValidationError

from apcdeploy.config.validator import describe_config_errors
from apcdeploy.lib.errors import ConfigError
from apcdeploy.lib.logging_config import get_logger
from apcdeploy.models.config import DeployConfig

logger = get_logger(__name__)


def resolve_data_file_path(config_path: Path, data_file: str) -> Path:
    """Resolve a data file path relative to the config file's directory."""
    path = Path(data_file)
    if path.is_absolute():
        return path
    return config_path.parent / path


class ConfigLoader:
    """Loads apcdeploy.yml files into DeployConfig models."""

    def parse_yaml(self, path: Path) -> dict[str, Any]:
        """Read a YAML file into a dict.

        Raises:
            ConfigError: If the file is missing, unreadable, or not a mapping
        """
        try:
            content = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigError(
                field="config_file", message=f"failed to read config file {path}: {exc}"
            ) from exc

        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as exc:
            raise ConfigError(
                field="config_file", message=f"failed to parse YAML in {path}: {exc}"
            ) from exc

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError(
                field="config_file",
                message=f"{path} must contain a mapping, got {type(data).__name__}",
            )
        return data

    def load(self, config_path: str | Path) -> DeployConfig:
        """Load, validate, and resolve a deployment config file.

        The returned config has ``data_file`` resolved to an absolute path.

        Raises:
            ConfigError: If the file cannot be read or fails validation
        """
        path = Path(config_path).resolve()
        data = self.parse_yaml(path)

        try:
            config = DeployConfig.model_validate(data)
        except PydanticValidationError as exc:
            errors = describe_config_errors(exc)
            raise ConfigError(field="config_file", message="; ".join(errors)) from exc

        data_file = resolve_data_file_path(path, config.data_file)
        logger.debug(f"Loaded {path} (data file: {data_file})")
        return config.model_copy(update={"data_file": str(data_file)})


def save_config(config: DeployConfig, path: Path, force: bool = False) -> Path:
    """Write a DeployConfig to an apcdeploy.yml file.

    Args:
        config: Config to save
        path: Destination file
        force: Overwrite an existing file

    Returns:
        Path where the config was saved

    Raises:
        ConfigError: If the file exists without ``force`` or cannot be written
    """
    if path.exists() and not force:
        raise ConfigError(
            field="config_file",
            message=f"config file already exists at {path} (use --force to overwrite)",
        )

    config_dict = config.model_dump(exclude_none=True, mode="json")
    yaml_content = yaml.dump(
        config_dict,
        default_flow_style=False,
        sort_keys=False,
        allow_unicode=True,
    )

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(yaml_content, encoding="utf-8")
    except OSError as exc:
        raise ConfigError(
            field="config_file", message=f"failed to write config file {path}: {exc}"
        ) from exc

    logger.debug(f"Saved deployment config to {path}")
    return path
