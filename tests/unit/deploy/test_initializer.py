"""Unit tests for generating apcdeploy.yml from existing resources."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

import pytest
import yaml

from apcdeploy.aws.client import AppConfigClient
from apcdeploy.config.loader import ConfigLoader
from apcdeploy.deploy.initializer import Initializer
from apcdeploy.lib.errors import ConfigError
from apcdeploy.models.deployment import InitOptions


@pytest.fixture
def versions(demo_sdk: MagicMock) -> MagicMock:
    """Profile with hosted versions 1 and 3; version 3 holds YAML."""
    demo_sdk.list_hosted_configuration_versions.return_value = {
        "Items": [{"VersionNumber": 1}, {"VersionNumber": 3}]
    }
    demo_sdk.get_hosted_configuration_version.return_value = {
        "VersionNumber": 3,
        "Content": b"limit: 10\n",
        "ContentType": "application/x-yaml",
    }
    return demo_sdk


def _options(tmp_path: Path, **overrides: Any) -> InitOptions:
    values: dict[str, Any] = {
        "application": "demo",
        "configuration_profile": "cfg",
        "environment": "prod",
        "config_file": str(tmp_path / "apcdeploy.yml"),
    }
    values.update(overrides)
    return InitOptions(**values)


class TestInitializer:
    """Tests for Initializer.run."""

    def test_writes_config_and_latest_version(
        self, client: AppConfigClient, versions: MagicMock, tmp_path: Path
    ) -> None:
        result = Initializer(client).run(_options(tmp_path))

        assert result.version_number == 3
        assert result.data_written is True
        assert result.deployment_strategy == "AppConfig.AllAtOnce"
        assert versions.get_hosted_configuration_version.call_args.kwargs[
            "VersionNumber"
        ] == 3
        assert (tmp_path / "data.yaml").read_bytes() == b"limit: 10\n"

        saved = yaml.safe_load((tmp_path / "apcdeploy.yml").read_text(encoding="utf-8"))
        assert saved == {
            "application": "demo",
            "configuration_profile": "cfg",
            "environment": "prod",
            "deployment_strategy": "AppConfig.AllAtOnce",
            "data_file": "data.yaml",
            "region": "us-east-1",
        }

        config = ConfigLoader().load(tmp_path / "apcdeploy.yml")
        assert config.data_file == str((tmp_path / "data.yaml").resolve())

    def test_strategy_from_latest_deployment(
        self,
        client: AppConfigClient,
        versions: MagicMock,
        deployment_response: Callable[..., dict[str, Any]],
        tmp_path: Path,
    ) -> None:
        versions.list_deployments.return_value = {
            "Items": [{"DeploymentNumber": 2, "State": "COMPLETE"}]
        }
        versions.get_deployment.return_value = deployment_response(
            2, "COMPLETE", strategy_id="s-1"
        )

        result = Initializer(client).run(_options(tmp_path))

        assert result.deployment_strategy == "AllAtOnce"

    def test_no_versions_writes_config_only(
        self, client: AppConfigClient, demo_sdk: MagicMock, tmp_path: Path
    ) -> None:
        result = Initializer(client).run(_options(tmp_path))

        assert result.version_number is None
        assert result.data_written is False
        assert result.data_file == str(tmp_path.resolve() / "data.json")
        assert (tmp_path / "apcdeploy.yml").exists()
        assert not (tmp_path / "data.json").exists()
        demo_sdk.get_hosted_configuration_version.assert_not_called()

    def test_output_data_name(
        self, client: AppConfigClient, versions: MagicMock, tmp_path: Path
    ) -> None:
        Initializer(client).run(_options(tmp_path, data_file="settings.yml"))

        assert (tmp_path / "settings.yml").read_bytes() == b"limit: 10\n"

    def test_existing_config_requires_force(
        self, client: AppConfigClient, versions: MagicMock, tmp_path: Path
    ) -> None:
        (tmp_path / "apcdeploy.yml").write_text("application: old\n", encoding="utf-8")

        with pytest.raises(ConfigError, match="already exists"):
            Initializer(client).run(_options(tmp_path))

        versions.list_applications.assert_not_called()

    def test_existing_data_file_requires_force(
        self, client: AppConfigClient, versions: MagicMock, tmp_path: Path
    ) -> None:
        (tmp_path / "data.yaml").write_text("limit: 1\n", encoding="utf-8")

        with pytest.raises(ConfigError) as exc_info:
            Initializer(client).run(_options(tmp_path))

        assert exc_info.value.field == "data_file"
        assert not (tmp_path / "apcdeploy.yml").exists()

    def test_force_overwrites(
        self, client: AppConfigClient, versions: MagicMock, tmp_path: Path
    ) -> None:
        (tmp_path / "apcdeploy.yml").write_text("application: old\n", encoding="utf-8")
        (tmp_path / "data.yaml").write_text("limit: 1\n", encoding="utf-8")

        Initializer(client).run(_options(tmp_path, force=True))

        assert (tmp_path / "data.yaml").read_bytes() == b"limit: 10\n"
        assert "application: demo" in (tmp_path / "apcdeploy.yml").read_text(
            encoding="utf-8"
        )
