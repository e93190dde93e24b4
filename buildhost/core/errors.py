"""Provisioning error taxonomy.

Every error here is fatal and never retried. Collaborator failures keep the
tool's own exit code and output so the CLI can pass them through unchanged.
An unrecognised target is not an error: it classifies as
``TargetKind.UNMATCHED`` and provisions nothing extra.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from buildhost.core.models import ExecutionReport


class ProvisionError(Exception):
    """Base class for failures that halt plan execution."""

    def __init__(self, message: str, exit_code: int = 1, detail: str = ""):
        super().__init__(message)
        self.exit_code = exit_code
        self.detail = detail
        self.report: Optional[ExecutionReport] = None


class RepositoryConfigError(ProvisionError):
    pass


class LicenseFileIOError(ProvisionError):
    pass


class PackageInstallError(ProvisionError):
    pass


class SdkComponentInstallError(ProvisionError):
    pass


class ShimPatchIOError(ProvisionError):
    pass
