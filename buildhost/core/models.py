"""Core data models for buildhost."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional, Union


class HostOS(Enum):
    LINUX = "linux"
    MACOS = "macos"
    WINDOWS = "windows"
    OTHER = "other"


class TargetKind(Enum):
    HOST_NATIVE = "host-native"
    CROSS = "cross"
    UNMATCHED = "unmatched"


@dataclass(frozen=True)
class TargetSpec:
    raw: str
    kind: TargetKind
    triple: str = ""
    arch: str = ""
    vendor: str = ""
    os: str = ""
    abi: str = ""
    abi_suffix: Optional[str] = None
    features: frozenset[str] = frozenset()

    @property
    def full_abi(self) -> str:
        return self.abi + (self.abi_suffix or "")


# ── Provisioning actions ─────────────────────────────────────────────


@dataclass(frozen=True)
class InstallPackages:
    names: tuple[str, ...]

    kind = "install_packages"

    def describe(self) -> str:
        return "install " + " ".join(self.names)


@dataclass(frozen=True)
class ConfigureToolchainRepository:
    vendor: str
    version: int

    kind = "configure_repository"

    @property
    def key(self) -> str:
        return f"{self.vendor}-{self.version}"

    def describe(self) -> str:
        return f"configure {self.vendor} {self.version} repository"


@dataclass(frozen=True)
class AcceptLicense:
    license_id: str
    license_file: Path
    token: str

    kind = "accept_license"

    def describe(self) -> str:
        return f"accept {self.license_id} in {self.license_file}"


@dataclass(frozen=True)
class InstallSdkComponent:
    component_id: str

    kind = "install_sdk_component"

    def describe(self) -> str:
        return f"install SDK component {self.component_id}"


@dataclass(frozen=True)
class PatchLibraryShim:
    """Rewrite a library shim next to (or over) every matching file.

    With ``shim_filename`` unset each match is overwritten in place.
    """

    search_root: Path
    filename_pattern: str
    replacement_content: str
    shim_filename: Optional[str] = None

    kind = "patch_library_shim"

    def describe(self) -> str:
        target = self.shim_filename or self.filename_pattern
        return (
            f"write {target} beside {self.filename_pattern} "
            f"under {self.search_root}"
        )


@dataclass(frozen=True)
class InstallCargoBinary:
    crate: str
    binaries: tuple[str, ...] = ()

    kind = "install_cargo_binary"

    def describe(self) -> str:
        bins = f" (--bin {', '.join(self.binaries)})" if self.binaries else ""
        return f"cargo install {self.crate}{bins}"


ProvisioningAction = Union[
    InstallPackages,
    ConfigureToolchainRepository,
    AcceptLicense,
    InstallSdkComponent,
    PatchLibraryShim,
    InstallCargoBinary,
]


@dataclass(frozen=True)
class ActionPlan:
    spec: TargetSpec
    host: HostOS
    actions: tuple[ProvisioningAction, ...] = ()
    rule_name: Optional[str] = None

    def __iter__(self):
        return iter(self.actions)

    def __len__(self) -> int:
        return len(self.actions)


# ── Execution state ──────────────────────────────────────────────────


class ActionStatus(Enum):
    PENDING = "pending"
    APPLIED = "applied"
    SKIPPED = "skipped"
    FAILED = "failed"


class PlanStatus(Enum):
    PENDING = "pending"
    COMPLETE = "complete"
    FAILED = "failed"


@dataclass
class ActionRecord:
    action: ProvisioningAction
    status: ActionStatus = ActionStatus.PENDING
    duration_ms: int = 0
    error: str = ""


@dataclass
class ExecutionReport:
    records: list[ActionRecord] = field(default_factory=list)
    status: PlanStatus = PlanStatus.PENDING

    def count(self, status: ActionStatus) -> int:
        return sum(1 for r in self.records if r.status is status)


# ── Host environment ─────────────────────────────────────────────────


@dataclass(frozen=True)
class SdkLocations:
    """Ordered SDK/NDK root candidates, resolved once at startup.

    ``candidates`` holds ``(variable, value, is_sdk_root)`` entries in
    priority order; unset variables are dropped when the list is built.
    """

    candidates: tuple[tuple[str, str, bool], ...] = ()

    @property
    def sdk_root(self) -> Optional[Path]:
        for _var, value, is_sdk_root in self.candidates:
            if is_sdk_root:
                return Path(value)
        return None

    def shim_root(self, ndk_version: str) -> Optional[Path]:
        """First usable NDK directory: ``<sdk>/ndk/<version>`` or an NDK root."""
        if not self.candidates:
            return None
        _var, value, is_sdk_root = self.candidates[0]
        if is_sdk_root:
            return Path(value) / "ndk" / ndk_version
        return Path(value)


@dataclass(frozen=True)
class HostEnvironment:
    os: HostOS
    os_version: str
    distro_codename: str = ""
    sdk: SdkLocations = SdkLocations()
