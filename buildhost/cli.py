"""CLI entry point for buildhost."""

from __future__ import annotations

import logging
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

import buildhost
from buildhost.core.models import ActionStatus

app = typer.Typer(
    name="buildhost",
    help="Provision a build host with the toolchains a target needs.",
    no_args_is_help=True,
)
console = Console()


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _target_identifier(triple: str, target: Optional[str]) -> str:
    """``--target`` wins over the positional triple; neither means host-native."""
    if target:
        return f"--target={target}"
    return triple


@app.command()
def provision(
    triple: str = typer.Argument("", help="Target triple; empty for host-native"),
    features: str = typer.Argument("", help="Feature flags (space/comma separated)"),
    target: Optional[str] = typer.Option(
        None, "--target", help="Target triple (same as the TRIPLE argument)"
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", "-n", help="Show what would run without changing the host"
    ),
    no_sudo: Optional[bool] = typer.Option(
        None, "--no-sudo/--sudo", help="Run package commands without sudo"
    ),
    llvm_version: Optional[int] = typer.Option(
        None, "--llvm-version", help="LLVM toolchain version"
    ),
    ndk_version: Optional[str] = typer.Option(
        None, "--ndk-version", help="Android NDK version"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Install everything needed to build and test for a target."""
    from buildhost.core.config import resolve_config
    from buildhost.core.environment import EnvironmentDetector
    from buildhost.core.errors import ProvisionError
    from buildhost.core.provisioner import Provisioner

    _setup_logging(verbose)
    config = resolve_config(
        llvm_version=llvm_version,
        ndk_version=ndk_version,
        no_sudo=no_sudo,
        dry_run=dry_run,
    )
    host = EnvironmentDetector.detect_current()
    provisioner = Provisioner(host, config, console=console)

    try:
        report = provisioner.run(_target_identifier(triple, target), features)
    except ProvisionError as e:
        console.print(f"[red]Error:[/] {escape(str(e))}")
        raise typer.Exit(e.exit_code or 1)

    console.print(
        f"[green]Provisioned: {report.count(ActionStatus.APPLIED)} applied, "
        f"{report.count(ActionStatus.SKIPPED)} already satisfied[/]"
    )


@app.command()
def plan(
    triple: str = typer.Argument("", help="Target triple; empty for host-native"),
    features: str = typer.Argument("", help="Feature flags"),
    target: Optional[str] = typer.Option(None, "--target", help="Target triple"),
    llvm_version: Optional[int] = typer.Option(None, "--llvm-version"),
    ndk_version: Optional[str] = typer.Option(None, "--ndk-version"),
) -> None:
    """Show the actions a target would need, without running them."""
    from buildhost.core.classifier import classify
    from buildhost.core.config import resolve_config
    from buildhost.core.environment import EnvironmentDetector
    from buildhost.core.resolver import resolve

    config = resolve_config(llvm_version=llvm_version, ndk_version=ndk_version)
    host = EnvironmentDetector.detect_current()
    spec = classify(_target_identifier(triple, target), features)
    action_plan = resolve(spec, host.os, host.sdk, config)

    table = Table(title=f"Plan for {spec.triple or spec.kind.value} on {host.os.value}")
    table.add_column("#", justify="right")
    table.add_column("Action", style="cyan")
    table.add_column("Details")
    for i, action in enumerate(action_plan.actions, 1):
        table.add_row(str(i), action.kind, action.describe())

    console.print(f"Class: {spec.kind.value}  Rule: {action_plan.rule_name or '(none)'}")
    if spec.features:
        console.print(f"Features: {', '.join(sorted(spec.features))}")
    console.print(table)


@app.command()
def detect() -> None:
    """Show the host facts provisioning depends on."""
    from buildhost.core.environment import EnvironmentDetector

    host = EnvironmentDetector.detect_current()

    table = Table(title="Host")
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("OS", f"{host.os.value} ({host.os_version})")
    table.add_row("Codename", host.distro_codename or "(unknown)")
    for var, value, _is_sdk_root in host.sdk.candidates:
        table.add_row(var, value)
    if not host.sdk.candidates:
        table.add_row("Android SDK", "(not set)")
    console.print(table)


@app.command("list-targets")
def list_targets() -> None:
    """List target classes with extra provisioning rules."""
    from buildhost.targets.rules import TARGET_RULES

    table = Table(title="Target rules")
    table.add_column("Rule", style="cyan", no_wrap=True)
    table.add_column("Packages")
    table.add_column("Clang")
    table.add_column("Extras")
    for rule in TARGET_RULES:
        extras = []
        if rule.android_sdk:
            extras.append("Android NDK + libgcc shim")
        if rule.cargo_crate:
            extras.append(f"cargo {rule.cargo_crate}")
        table.add_row(
            rule.name,
            " ".join(rule.packages) or "-",
            "yes" if rule.use_alternate_compiler else "",
            ", ".join(extras),
        )
    console.print(table)


@app.command()
def version() -> None:
    """Print version."""
    console.print(f"buildhost {buildhost.__version__}")


if __name__ == "__main__":
    app()
