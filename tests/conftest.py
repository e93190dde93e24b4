"""Shared test fixtures for buildhost tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from buildhost.backends.recording import recording_backends
from buildhost.core.config import ProvisionConfig
from buildhost.core.environment import detect_sdk_locations
from buildhost.core.models import HostEnvironment, HostOS, SdkLocations


@pytest.fixture
def default_config() -> ProvisionConfig:
    return ProvisionConfig()


@pytest.fixture
def linux_host() -> HostEnvironment:
    """Ubuntu host without any Android SDK configured."""
    return HostEnvironment(
        os=HostOS.LINUX,
        os_version="Ubuntu 22.04.3 LTS",
        distro_codename="jammy",
    )


@pytest.fixture
def android_sdk(tmp_path) -> SdkLocations:
    """SdkLocations with ANDROID_HOME pointing at a temp directory."""
    sdk_root = tmp_path / "android-sdk"
    sdk_root.mkdir()
    return detect_sdk_locations({"ANDROID_HOME": str(sdk_root)})


@pytest.fixture
def ndk_only(tmp_path) -> SdkLocations:
    """Only ANDROID_NDK_ROOT set, no SDK root."""
    ndk_root = tmp_path / "ndk"
    ndk_root.mkdir()
    return detect_sdk_locations({"ANDROID_NDK_ROOT": str(ndk_root)})


@pytest.fixture
def recorder():
    """(Backends, calls) pair whose backends only record."""
    return recording_backends()


def make_ndk_tree(root: Path, arches=("aarch64", "arm", "x86_64")) -> list[Path]:
    """Create a fake NDK layout with one libunwind.a per architecture."""
    created = []
    for arch in arches:
        lib_dir = root / "toolchains" / "llvm" / "prebuilt" / "lib" / arch
        lib_dir.mkdir(parents=True)
        unwind = lib_dir / "libunwind.a"
        unwind.write_bytes(b"!<arch>\n")
        created.append(unwind)
    return created
