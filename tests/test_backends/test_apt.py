"""Tests for buildhost.backends.apt and the shared run_tool helper."""

from __future__ import annotations

import subprocess
from unittest.mock import MagicMock, call, patch

import pytest

from buildhost.backends.apt import AptPackageManager, AptToolchainRepository
from buildhost.backends.base import run_tool, with_sudo
from buildhost.core.errors import PackageInstallError, RepositoryConfigError


# ---------------------------------------------------------------------------
# run_tool
# ---------------------------------------------------------------------------

class TestRunTool:
    @patch("buildhost.backends.base.subprocess.run")
    def test_success_returns_result(self, mock_run):
        mock_run.return_value = MagicMock(returncode=0, stdout="ok", stderr="")
        result = run_tool(["true"], PackageInstallError)
        assert result.stdout == "ok"
        mock_run.assert_called_once_with(
            ["true"], capture_output=True, text=True, timeout=None,
        )

    @patch("buildhost.backends.base.subprocess.run")
    def test_failure_keeps_exit_code_and_stderr(self, mock_run):
        mock_run.return_value = MagicMock(
            returncode=100, stdout="Reading package lists...",
            stderr="E: Unable to locate package nope\n",
        )
        with pytest.raises(PackageInstallError) as exc_info:
            run_tool(["apt-get", "install", "nope"], PackageInstallError)
        assert exc_info.value.exit_code == 100
        assert str(exc_info.value) == "E: Unable to locate package nope"
        assert exc_info.value.detail == "Reading package lists..."

    @patch("buildhost.backends.base.subprocess.run")
    def test_failure_without_output(self, mock_run):
        mock_run.return_value = MagicMock(returncode=2, stdout="", stderr="")
        with pytest.raises(RepositoryConfigError, match="exited with status 2"):
            run_tool(["apt-key", "add", "k"], RepositoryConfigError)

    @patch("buildhost.backends.base.subprocess.run")
    def test_command_not_found(self, mock_run):
        mock_run.side_effect = FileNotFoundError("apt-get")
        with pytest.raises(PackageInstallError) as exc_info:
            run_tool(["apt-get"], PackageInstallError)
        assert exc_info.value.exit_code == 127

    @patch("buildhost.backends.base.subprocess.run")
    def test_timeout(self, mock_run):
        mock_run.side_effect = subprocess.TimeoutExpired(cmd="apt-get", timeout=5)
        with pytest.raises(PackageInstallError, match="timed out"):
            run_tool(["apt-get"], PackageInstallError, timeout=5)

    def test_with_sudo(self):
        assert with_sudo(["apt-get", "update"], True) == ["sudo", "apt-get", "update"]
        assert with_sudo(["apt-get", "update"], False) == ["apt-get", "update"]


# ---------------------------------------------------------------------------
# AptPackageManager
# ---------------------------------------------------------------------------

class TestAptPackageManager:
    @patch("buildhost.backends.apt.run_tool")
    def test_single_transaction(self, mock_run_tool):
        AptPackageManager().install(["qemu-user", "gcc-aarch64-linux-gnu"])
        mock_run_tool.assert_called_once_with(
            [
                "sudo", "apt-get", "-yq", "--no-install-suggests",
                "--no-install-recommends", "install",
                "qemu-user", "gcc-aarch64-linux-gnu",
            ],
            PackageInstallError,
            timeout=None,
        )

    @patch("buildhost.backends.apt.run_tool")
    def test_without_sudo(self, mock_run_tool):
        AptPackageManager(use_sudo=False).install(["llvm-15"])
        cmd = mock_run_tool.call_args[0][0]
        assert cmd[0] == "apt-get"

    @patch("buildhost.backends.apt.run_tool")
    def test_empty_list_is_noop(self, mock_run_tool):
        AptPackageManager().install([])
        mock_run_tool.assert_not_called()


# ---------------------------------------------------------------------------
# AptToolchainRepository
# ---------------------------------------------------------------------------

class TestAptToolchainRepository:
    def test_source_line(self):
        repo = AptToolchainRepository("jammy", "mk/llvm-snapshot.gpg.key")
        assert repo.source_line("llvm", 15) == (
            "deb http://apt.llvm.org/jammy/ llvm-toolchain-jammy-15 main"
        )

    @patch("buildhost.backends.apt.run_tool")
    def test_configure_steps_in_order(self, mock_run_tool):
        repo = AptToolchainRepository("jammy", "mk/llvm-snapshot.gpg.key")
        repo.configure("llvm", 15)
        assert mock_run_tool.call_args_list == [
            call(["sudo", "apt-key", "add", "mk/llvm-snapshot.gpg.key"],
                 RepositoryConfigError),
            call(["sudo", "add-apt-repository",
                  "deb http://apt.llvm.org/jammy/ llvm-toolchain-jammy-15 main"],
                 RepositoryConfigError),
            call(["sudo", "apt-get", "update"], RepositoryConfigError),
        ]

    @patch("buildhost.backends.apt.run_tool")
    def test_stops_on_first_failed_step(self, mock_run_tool):
        mock_run_tool.side_effect = RepositoryConfigError("gpg: no valid OpenPGP data")
        repo = AptToolchainRepository("jammy", "missing.key")
        with pytest.raises(RepositoryConfigError):
            repo.configure("llvm", 15)
        assert mock_run_tool.call_count == 1

    @patch("buildhost.backends.apt.run_tool")
    def test_missing_codename(self, mock_run_tool):
        repo = AptToolchainRepository("", "k")
        with pytest.raises(RepositoryConfigError, match="codename"):
            repo.configure("llvm", 15)
        mock_run_tool.assert_not_called()
