"""Tests for buildhost.cli — typer commands."""

from __future__ import annotations

from unittest.mock import patch

from typer.testing import CliRunner

from buildhost.cli import _target_identifier, app
from buildhost.core.environment import detect_sdk_locations
from buildhost.core.errors import PackageInstallError
from buildhost.core.models import HostEnvironment, HostOS

runner = CliRunner()

LINUX_HOST = HostEnvironment(
    os=HostOS.LINUX, os_version="Ubuntu 22.04", distro_codename="jammy"
)


def _detect():
    return patch(
        "buildhost.core.environment.EnvironmentDetector.detect_current",
        return_value=LINUX_HOST,
    )


class TestTargetIdentifier:
    def test_option_wins(self):
        assert _target_identifier("ignored", "aarch64-unknown-linux-gnu") == (
            "--target=aarch64-unknown-linux-gnu"
        )

    def test_positional(self):
        assert _target_identifier("i686-unknown-linux-gnu", None) == "i686-unknown-linux-gnu"

    def test_neither(self):
        assert _target_identifier("", None) == ""


class TestProvisionCommand:
    def test_dry_run(self):
        with _detect():
            result = runner.invoke(
                app, ["provision", "--target", "aarch64-unknown-linux-gnu", "--dry-run"]
            )
        assert result.exit_code == 0, result.output
        assert "qemu-user" in result.output
        assert "4 applied" in result.output

    def test_android_dry_run_on_fresh_sdk(self, tmp_path):
        host = HostEnvironment(
            os=HostOS.LINUX, os_version="Ubuntu 22.04", distro_codename="jammy",
            sdk=detect_sdk_locations({"ANDROID_HOME": str(tmp_path / "sdk")}),
        )
        with patch(
            "buildhost.core.environment.EnvironmentDetector.detect_current",
            return_value=host,
        ):
            result = runner.invoke(
                app, ["provision", "--target", "aarch64-linux-android", "--dry-run"]
            )
        assert result.exit_code == 0, result.output
        assert not (tmp_path / "sdk").exists()

    @patch("buildhost.core.provisioner.Provisioner.run")
    def test_collaborator_exit_code_passed_through(self, mock_run):
        mock_run.side_effect = PackageInstallError(
            "E: Unable to locate package nope", exit_code=100
        )
        with _detect():
            result = runner.invoke(app, ["provision", "i686-unknown-linux-gnu"])
        assert result.exit_code == 100
        assert "Unable to locate package" in result.output


class TestPlanCommand:
    def test_plan_table(self):
        with _detect():
            result = runner.invoke(app, ["plan", "x86_64-unknown-linux-musl"])
        assert result.exit_code == 0, result.output
        assert "clang-15" in result.output
        assert "x86_64-unknown-linux-musl" in result.output

    def test_unmatched_plan(self):
        with _detect():
            result = runner.invoke(app, ["plan", "totally-unknown-triple-xyz"])
        assert result.exit_code == 0
        assert "unmatched" in result.output


class TestInfoCommands:
    def test_list_targets(self):
        result = runner.invoke(app, ["list-targets"])
        assert result.exit_code == 0
        assert "riscv64gc-unknown-linux-gnu" in result.output

    def test_detect(self):
        with _detect():
            result = runner.invoke(app, ["detect"])
        assert result.exit_code == 0
        assert "jammy" in result.output

    def test_version(self):
        result = runner.invoke(app, ["version"])
        assert result.exit_code == 0
        assert "buildhost" in result.output
