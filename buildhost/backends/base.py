"""Collaborator interfaces — the side-effecting half of provisioning.

Each backend wraps one external tool, except FileSystem, which owns the
direct file edits. Tool backends raise the matching
ProvisionError subclass carrying the tool's own exit code and stderr; they
never retry.
"""

from __future__ import annotations

import logging
import subprocess
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence, Type

from buildhost.core.errors import ProvisionError

logger = logging.getLogger(__name__)


class PackageManager(ABC):
    @abstractmethod
    def install(self, names: Sequence[str]) -> None:
        """Install all ``names`` in one transaction."""


class RepositoryConfigurer(ABC):
    @abstractmethod
    def configure(self, vendor: str, version: int) -> None:
        """Register the toolchain repository and refresh the package index."""


class SdkComponentManager(ABC):
    @abstractmethod
    def install_component(self, component_id: str) -> None: ...


class CargoInstaller(ABC):
    @abstractmethod
    def install(self, crate: str, binaries: Sequence[str] = ()) -> None: ...


class FileSystem(ABC):
    """Edits made directly on the host's files rather than through a tool.

    Implementations may raise OSError; the executor wraps it.
    """

    @abstractmethod
    def accept_license(self, license_file: Path, token: str) -> bool:
        """Ensure ``token`` is a line of ``license_file``. True if it was added."""

    @abstractmethod
    def patch_shims(
        self,
        search_root: Path,
        filename_pattern: str,
        content: str,
        shim_filename: Optional[str] = None,
    ) -> list[Path]:
        """Write ``content`` for each match under ``search_root``; return the paths."""


@dataclass
class Backends:
    packages: PackageManager
    repositories: RepositoryConfigurer
    sdk: SdkComponentManager
    cargo: CargoInstaller
    files: FileSystem


def run_tool(
    cmd: list[str],
    error_class: Type[ProvisionError],
    timeout: Optional[int] = None,
) -> subprocess.CompletedProcess:
    """Run ``cmd`` and raise ``error_class`` with the tool's exit status on failure."""
    logger.info("Running: %s", " ".join(cmd))
    try:
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except FileNotFoundError as e:
        raise error_class(f"{cmd[0]}: command not found", exit_code=127) from e
    except subprocess.TimeoutExpired as e:
        raise error_class(
            f"{cmd[0]} timed out after {timeout} seconds", exit_code=124
        ) from e

    if result.returncode != 0:
        output = (result.stderr or result.stdout or "").strip()
        raise error_class(
            output or f"{cmd[0]} exited with status {result.returncode}",
            exit_code=result.returncode,
            detail=result.stdout,
        )
    return result


def with_sudo(cmd: list[str], use_sudo: bool) -> list[str]:
    return ["sudo", *cmd] if use_sudo else cmd
