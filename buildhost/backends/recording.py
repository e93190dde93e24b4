"""Recording backends for dry runs: note each call instead of running it."""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence

from buildhost.backends.base import (
    Backends,
    CargoInstaller,
    FileSystem,
    PackageManager,
    RepositoryConfigurer,
    SdkComponentManager,
)

Call = tuple[str, tuple]


class _Recorder:
    def __init__(self, calls: Optional[list[Call]] = None):
        self.calls: list[Call] = calls if calls is not None else []


class RecordingPackageManager(_Recorder, PackageManager):
    def install(self, names: Sequence[str]) -> None:
        self.calls.append(("install_packages", tuple(names)))


class RecordingRepositoryConfigurer(_Recorder, RepositoryConfigurer):
    def configure(self, vendor: str, version: int) -> None:
        self.calls.append(("configure_repository", (vendor, version)))


class RecordingSdkManager(_Recorder, SdkComponentManager):
    def install_component(self, component_id: str) -> None:
        self.calls.append(("install_sdk_component", (component_id,)))


class RecordingCargoInstaller(_Recorder, CargoInstaller):
    def install(self, crate: str, binaries: Sequence[str] = ()) -> None:
        self.calls.append(("cargo_install", (crate, tuple(binaries))))


class RecordingFileSystem(_Recorder, FileSystem):
    """Touches nothing on disk, so paths need not exist yet."""

    def accept_license(self, license_file: Path, token: str) -> bool:
        self.calls.append(("accept_license", (str(license_file), token)))
        return True

    def patch_shims(
        self,
        search_root: Path,
        filename_pattern: str,
        content: str,
        shim_filename: Optional[str] = None,
    ) -> list[Path]:
        self.calls.append(
            ("patch_library_shim", (str(search_root), filename_pattern, shim_filename))
        )
        return []


def recording_backends() -> tuple[Backends, list[Call]]:
    """Backends that share one call log, returned alongside it."""
    calls: list[Call] = []
    backends = Backends(
        packages=RecordingPackageManager(calls),
        repositories=RecordingRepositoryConfigurer(calls),
        sdk=RecordingSdkManager(calls),
        cargo=RecordingCargoInstaller(calls),
        files=RecordingFileSystem(calls),
    )
    return backends, calls
