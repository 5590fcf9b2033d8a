"""Unit tests for 'apcdeploy ls-resources'."""

from __future__ import annotations

import json
from collections.abc import Iterator
from unittest.mock import MagicMock, patch

import pytest
from click.testing import CliRunner

from apcdeploy.aws.client import AppConfigClient
from apcdeploy.cli.main import cli


@pytest.fixture
def runner() -> CliRunner:
    """Create a CLI runner."""
    return CliRunner()


@pytest.fixture
def create_client(client: AppConfigClient, demo_sdk: MagicMock) -> Iterator[MagicMock]:
    """Patch client construction to return the mocked demo client."""
    demo_sdk.list_deployment_strategies.return_value = {
        "Items": [
            {
                "Id": "s-1",
                "Name": "AllAtOnce",
                "Description": "Everything at once",
                "DeploymentDurationInMinutes": 0,
                "FinalBakeTimeInMinutes": 5,
                "GrowthFactor": 100.0,
                "GrowthType": "LINEAR",
            }
        ]
    }
    with (
        patch(
            "apcdeploy.cli.commands.resources.create_client", return_value=client
        ) as factory,
        patch("apcdeploy.cli.commands.resources.setup_logging"),
    ):
        yield factory


class TestLsResourcesCommand:
    """Tests for 'apcdeploy ls-resources'."""

    def test_human_readable(self, runner: CliRunner, create_client: MagicMock) -> None:
        result = runner.invoke(cli, ["ls-resources", "--region", "eu-west-1"])

        assert result.exit_code == 0
        assert result.output.splitlines() == [
            "Region: us-east-1",
            "",
            "Applications:",
            "  [1] demo (ID: app-1)",
            "      Configuration Profiles:",
            "        - cfg (ID: p-1)",
            "      Environments:",
            "        - prod (ID: e-1)",
        ]
        assert create_client.call_args.args[0] == "eu-west-1"

    def test_show_strategies(self, runner: CliRunner, create_client: MagicMock) -> None:
        result = runner.invoke(cli, ["ls-resources", "--show-strategies"])

        assert result.exit_code == 0
        assert "Deployment Strategies:" in result.output
        assert "  - AllAtOnce (ID: s-1)" in result.output
        assert "    Description: Everything at once" in result.output
        assert "    Final Bake Time: 5 minutes" in result.output
        assert "    Growth Factor: 100.0%" in result.output

    def test_json(self, runner: CliRunner, create_client: MagicMock) -> None:
        result = runner.invoke(cli, ["ls-resources", "--json"])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["region"] == "us-east-1"
        assert data["applications"][0]["environments"] == [{"id": "e-1", "name": "prod"}]
        assert "deployment_strategies" not in data

    def test_json_with_strategies(
        self, runner: CliRunner, create_client: MagicMock
    ) -> None:
        result = runner.invoke(cli, ["ls-resources", "--json", "--show-strategies"])

        strategy = json.loads(result.output)["deployment_strategies"][0]
        assert strategy["final_bake_time_in_minutes"] == 5
        assert strategy["growth_type"] == "LINEAR"

    def test_no_applications(
        self, runner: CliRunner, create_client: MagicMock, demo_sdk: MagicMock
    ) -> None:
        demo_sdk.list_applications.return_value = {"Items": []}

        result = runner.invoke(cli, ["ls-resources"])

        assert result.exit_code == 0
        assert "No applications found." in result.output
