"""Plan executor — applies provisioning actions in order, idempotently.

Every action is safe to re-run: repository configuration is deduplicated per
process through ExecutionContext, license acceptance checks the file before
appending, shim patches always write the same content, and installs defer to
package managers that no-op on installed packages. Execution stops at the
first failure and the collaborator's error propagates unchanged.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Optional

from buildhost.backends.base import Backends
from buildhost.core.errors import LicenseFileIOError, ProvisionError, ShimPatchIOError
from buildhost.core.models import (
    AcceptLicense,
    ActionPlan,
    ActionRecord,
    ActionStatus,
    ConfigureToolchainRepository,
    ExecutionReport,
    InstallCargoBinary,
    InstallPackages,
    InstallSdkComponent,
    PatchLibraryShim,
    PlanStatus,
    ProvisioningAction,
)

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[ActionRecord], None]


@dataclass
class ExecutionContext:
    """Per-process provisioning state. Create one per invocation."""

    configured_repositories: set[str] = field(default_factory=set)


class PlanExecutor:
    """Executes an ActionPlan against a set of collaborator backends."""

    def __init__(
        self,
        backends: Backends,
        context: Optional[ExecutionContext] = None,
        progress_callback: Optional[ProgressCallback] = None,
    ):
        self.backends = backends
        self.context = context or ExecutionContext()
        self.progress_callback = progress_callback

    def execute(self, plan: ActionPlan) -> ExecutionReport:
        """Apply every action in order; raise the first ProvisionError."""
        report = ExecutionReport(
            records=[ActionRecord(action=a) for a in plan.actions]
        )

        for record in report.records:
            start = time.monotonic()
            try:
                record.status = self.apply(record.action)
            except ProvisionError as e:
                record.status = ActionStatus.FAILED
                record.error = str(e)
                record.duration_ms = int((time.monotonic() - start) * 1000)
                report.status = PlanStatus.FAILED
                logger.error("Failed: %s: %s", record.action.describe(), e)
                self._notify(record)
                e.report = report
                raise
            record.duration_ms = int((time.monotonic() - start) * 1000)
            self._notify(record)

        report.status = PlanStatus.COMPLETE
        return report

    def apply(self, action: ProvisioningAction) -> ActionStatus:
        """Apply a single action and return its end state."""
        handler = getattr(self, f"_apply_{action.kind}", None)
        if handler is None:
            raise TypeError(f"Unknown provisioning action: {action!r}")
        logger.info("Applying: %s", action.describe())
        return handler(action)

    def _notify(self, record: ActionRecord) -> None:
        if self.progress_callback is not None:
            self.progress_callback(record)

    # ── Handlers ─────────────────────────────────────────────────────

    def _apply_configure_repository(
        self, action: ConfigureToolchainRepository
    ) -> ActionStatus:
        if action.key in self.context.configured_repositories:
            logger.debug("Repository %s already configured", action.key)
            return ActionStatus.SKIPPED
        self.backends.repositories.configure(action.vendor, action.version)
        self.context.configured_repositories.add(action.key)
        return ActionStatus.APPLIED

    def _apply_install_packages(self, action: InstallPackages) -> ActionStatus:
        self.backends.packages.install(list(action.names))
        return ActionStatus.APPLIED

    def _apply_install_sdk_component(
        self, action: InstallSdkComponent
    ) -> ActionStatus:
        self.backends.sdk.install_component(action.component_id)
        return ActionStatus.APPLIED

    def _apply_install_cargo_binary(self, action: InstallCargoBinary) -> ActionStatus:
        self.backends.cargo.install(action.crate, action.binaries)
        return ActionStatus.APPLIED

    def _apply_accept_license(self, action: AcceptLicense) -> ActionStatus:
        try:
            changed = self.backends.files.accept_license(
                action.license_file, action.token
            )
        except OSError as e:
            raise LicenseFileIOError(
                f"Cannot update {action.license_file}: {e}"
            ) from e
        return ActionStatus.APPLIED if changed else ActionStatus.SKIPPED

    def _apply_patch_library_shim(self, action: PatchLibraryShim) -> ActionStatus:
        try:
            written = self.backends.files.patch_shims(
                action.search_root,
                action.filename_pattern,
                action.replacement_content,
                action.shim_filename,
            )
        except OSError as e:
            raise ShimPatchIOError(
                f"Cannot patch shims under {action.search_root}: {e}"
            ) from e
        logger.info("Wrote %d shim file(s)", len(written))
        return ActionStatus.APPLIED
