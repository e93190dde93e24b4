"""Android SDK component installation via sdkmanager."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from buildhost.backends.base import SdkComponentManager, run_tool
from buildhost.core.errors import SdkComponentInstallError


class AndroidSdkManager(SdkComponentManager):
    """sdkmanager is itself idempotent: installing a present component is a no-op."""

    def __init__(self, sdk_root: Optional[Path], timeout: Optional[int] = None):
        self.sdk_root = sdk_root
        self.timeout = timeout

    @property
    def sdkmanager(self) -> Path:
        return self.sdk_root / "cmdline-tools" / "latest" / "bin" / "sdkmanager"

    def install_component(self, component_id: str) -> None:
        if self.sdk_root is None:
            raise SdkComponentInstallError(
                f"Cannot install {component_id}: no Android SDK root configured"
            )
        run_tool(
            [str(self.sdkmanager), component_id],
            SdkComponentInstallError,
            timeout=self.timeout,
        )
