"""Tests for buildhost.core.config — flag → env → default resolution."""

from __future__ import annotations

from buildhost.core.config import (
    DEFAULT_LLVM_KEY_FILE,
    ProvisionConfig,
    resolve_config,
)


class TestResolveConfig:
    def test_defaults(self):
        config = resolve_config(environ={})
        assert config == ProvisionConfig()
        assert config.llvm_version == 15
        assert config.ndk_version == "25.1.8937393"
        assert config.use_sudo is True
        assert config.llvm_key_file == DEFAULT_LLVM_KEY_FILE

    def test_env_vars(self):
        config = resolve_config(environ={
            "BUILDHOST_LLVM_VERSION": "17",
            "BUILDHOST_NDK_VERSION": "26.1.10909125",
            "BUILDHOST_NO_SUDO": "true",
            "BUILDHOST_LLVM_KEY_FILE": "/keys/llvm.asc",
        })
        assert config.llvm_version == 17
        assert config.ndk_version == "26.1.10909125"
        assert config.use_sudo is False
        assert config.llvm_key_file == "/keys/llvm.asc"

    def test_flags_override_env(self):
        config = resolve_config(
            llvm_version=16,
            ndk_version="25.2.9519653",
            no_sudo=False,
            environ={
                "BUILDHOST_LLVM_VERSION": "17",
                "BUILDHOST_NDK_VERSION": "26.1.10909125",
                "BUILDHOST_NO_SUDO": "1",
            },
        )
        assert config.llvm_version == 16
        assert config.ndk_version == "25.2.9519653"
        assert config.use_sudo is True

    def test_invalid_llvm_version_falls_back(self, caplog):
        config = resolve_config(environ={"BUILDHOST_LLVM_VERSION": "latest"})
        assert config.llvm_version == 15
        assert "BUILDHOST_LLVM_VERSION" in caplog.text

    def test_no_sudo_falsey_values(self):
        for value in ("0", "false", "no", ""):
            config = resolve_config(environ={"BUILDHOST_NO_SUDO": value})
            assert config.use_sudo is True

    def test_dry_run_passthrough(self):
        assert resolve_config(dry_run=True, environ={}).dry_run is True
