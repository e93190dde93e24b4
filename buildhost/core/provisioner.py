"""Provisioner — classify → resolve → execute for one invocation."""

from __future__ import annotations

import logging
from typing import Optional

from rich.console import Console

from buildhost.backends import build_backends
from buildhost.backends.base import Backends
from buildhost.backends.recording import recording_backends
from buildhost.core.classifier import classify
from buildhost.core.config import ProvisionConfig
from buildhost.core.executor import ExecutionContext, PlanExecutor
from buildhost.core.models import (
    ActionPlan,
    ActionRecord,
    ActionStatus,
    ExecutionReport,
    HostEnvironment,
)
from buildhost.core.resolver import resolve

logger = logging.getLogger(__name__)

_STATUS_STYLE = {
    ActionStatus.APPLIED: "[green]✓[/]",
    ActionStatus.SKIPPED: "[dim]–[/]",
    ActionStatus.FAILED: "[red]✗[/]",
    ActionStatus.PENDING: "[dim]·[/]",
}


class Provisioner:
    """Runs one provisioning invocation against a detected host."""

    def __init__(
        self,
        host: HostEnvironment,
        config: ProvisionConfig,
        backends: Optional[Backends] = None,
        context: Optional[ExecutionContext] = None,
        console: Optional[Console] = None,
    ):
        self.host = host
        self.config = config
        self.console = console or Console()
        self.calls: list = []
        if backends is None:
            if config.dry_run:
                backends, self.calls = recording_backends()
            else:
                backends = build_backends(host, config)
        self.executor = PlanExecutor(
            backends,
            context=context,
            progress_callback=self._print_progress,
        )

    def plan(self, target: str, features: str = "") -> ActionPlan:
        spec = classify(target, features)
        plan = resolve(spec, self.host.os, self.host.sdk, self.config)
        logger.debug(
            "Resolved %d action(s) for %r (rule: %s)",
            len(plan), target, plan.rule_name or "none",
        )
        return plan

    def run(self, target: str, features: str = "") -> ExecutionReport:
        """Resolve and apply the plan. ProvisionError propagates."""
        plan = self.plan(target, features)
        if not plan.actions:
            self.console.print("[dim]Nothing to provision for this host.[/]")
        return self.executor.execute(plan)

    def _print_progress(self, record: ActionRecord) -> None:
        mark = _STATUS_STYLE[record.status]
        prefix = "[dim](dry run)[/] " if self.config.dry_run else ""
        self.console.print(f"{mark} {prefix}{record.action.describe()}")
