"""cargo install for host-side test runners."""

from __future__ import annotations

from typing import Optional, Sequence

from buildhost.backends.base import CargoInstaller, run_tool
from buildhost.core.errors import PackageInstallError


class CargoCommandInstaller(CargoInstaller):
    def __init__(self, timeout: Optional[int] = None):
        self.timeout = timeout

    def install(self, crate: str, binaries: Sequence[str] = ()) -> None:
        cmd = ["cargo", "install", crate]
        for binary in binaries:
            cmd += ["--bin", binary]
        run_tool(cmd, PackageInstallError, timeout=self.timeout)
