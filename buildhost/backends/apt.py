"""apt-based package installation and apt.llvm.org repository setup."""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from buildhost.backends.base import (
    PackageManager,
    RepositoryConfigurer,
    run_tool,
    with_sudo,
)
from buildhost.core.errors import PackageInstallError, RepositoryConfigError

logger = logging.getLogger(__name__)

APT_INSTALL = [
    "apt-get", "-yq", "--no-install-suggests", "--no-install-recommends", "install",
]

LLVM_APT_URL = "http://apt.llvm.org"


class AptPackageManager(PackageManager):
    def __init__(self, use_sudo: bool = True, timeout: Optional[int] = None):
        self.use_sudo = use_sudo
        self.timeout = timeout

    def install(self, names: Sequence[str]) -> None:
        if not names:
            return
        cmd = with_sudo(APT_INSTALL + list(names), self.use_sudo)
        run_tool(cmd, PackageInstallError, timeout=self.timeout)


class AptToolchainRepository(RepositoryConfigurer):
    """Adds the apt.llvm.org source for the host's distro codename."""

    def __init__(
        self,
        codename: str,
        key_file: str,
        use_sudo: bool = True,
    ):
        self.codename = codename
        self.key_file = key_file
        self.use_sudo = use_sudo

    def source_line(self, vendor: str, version: int) -> str:
        c = self.codename
        return f"deb {LLVM_APT_URL}/{c}/ {vendor}-toolchain-{c}-{version} main"

    def configure(self, vendor: str, version: int) -> None:
        if not self.codename:
            raise RepositoryConfigError(
                "Cannot determine the distro codename for the "
                f"{vendor} {version} repository (is lsb_release installed?)"
            )
        steps = [
            ["apt-key", "add", self.key_file],
            ["add-apt-repository", self.source_line(vendor, version)],
            ["apt-get", "update"],
        ]
        for cmd in steps:
            run_tool(with_sudo(cmd, self.use_sudo), RepositoryConfigError)
        logger.info("Configured %s %s repository", vendor, version)
