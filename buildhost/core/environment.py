"""Host detection — OS, distro codename, Android SDK/NDK locations."""

from __future__ import annotations

import os
import platform
import subprocess
from typing import Mapping, Optional

from buildhost.core.models import HostEnvironment, HostOS, SdkLocations

# Ordered (variable, is_sdk_root). An SDK root contributes <root>/ndk/<ver>
# and the licenses directory; an NDK root only locates the NDK itself.
SDK_ROOT_VARIABLES: tuple[tuple[str, bool], ...] = (
    ("ANDROID_HOME", True),
    ("ANDROID_SDK_ROOT", True),
    ("ANDROID_NDK_ROOT", False),
)


class EnvironmentDetector:
    """Detects the facts about the host that provisioning depends on."""

    @staticmethod
    def detect_current(environ: Optional[Mapping[str, str]] = None) -> HostEnvironment:
        """Detect the current host. Call once per process."""
        detected_os = _detect_os()
        return HostEnvironment(
            os=detected_os,
            os_version=_detect_os_version(),
            distro_codename=(
                _detect_distro_codename() if detected_os == HostOS.LINUX else ""
            ),
            sdk=detect_sdk_locations(os.environ if environ is None else environ),
        )


def detect_sdk_locations(environ: Mapping[str, str]) -> SdkLocations:
    """Resolve the SDK/NDK candidate list from environment variables."""
    candidates = tuple(
        (var, environ[var], is_sdk_root)
        for var, is_sdk_root in SDK_ROOT_VARIABLES
        if environ.get(var)
    )
    return SdkLocations(candidates=candidates)


def _detect_os() -> HostOS:
    system = platform.system().lower()
    if system == "linux":
        return HostOS.LINUX
    elif system == "darwin":
        return HostOS.MACOS
    elif system == "windows":
        return HostOS.WINDOWS
    return HostOS.OTHER


def _detect_os_version() -> str:
    try:
        if platform.system() == "Linux":
            result = subprocess.run(
                ["lsb_release", "-ds"],
                capture_output=True, text=True, timeout=5,
            )
            if result.returncode == 0 and result.stdout.strip():
                return result.stdout.strip().strip('"')
        return platform.platform()
    except (OSError, subprocess.SubprocessError):
        return platform.platform()


def _detect_distro_codename() -> str:
    """Return the distro codename (e.g. ``jammy``), or "" if unavailable."""
    try:
        result = subprocess.run(
            ["lsb_release", "--codename", "--short"],
            capture_output=True, text=True, timeout=5,
        )
        if result.returncode == 0:
            return result.stdout.strip()
    except (OSError, subprocess.SubprocessError):
        pass
    return _codename_from_os_release()


def _codename_from_os_release(path: str = "/etc/os-release") -> str:
    try:
        with open(path) as f:
            for line in f:
                key, _, value = line.strip().partition("=")
                if key in ("VERSION_CODENAME", "UBUNTU_CODENAME") and value:
                    return value.strip('"')
    except OSError:
        pass
    return ""
