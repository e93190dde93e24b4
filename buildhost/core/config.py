"""Provisioning configuration — CLI flag → environment variable → default."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Optional

from buildhost.targets.rules import DEFAULT_LLVM_VERSION, DEFAULT_NDK_VERSION

logger = logging.getLogger(__name__)

ENV_LLVM_VERSION = "BUILDHOST_LLVM_VERSION"
ENV_NDK_VERSION = "BUILDHOST_NDK_VERSION"
ENV_NO_SUDO = "BUILDHOST_NO_SUDO"
ENV_LLVM_KEY_FILE = "BUILDHOST_LLVM_KEY_FILE"

DEFAULT_LLVM_KEY_FILE = "mk/llvm-snapshot.gpg.key"

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class ProvisionConfig:
    llvm_version: int = DEFAULT_LLVM_VERSION
    ndk_version: str = DEFAULT_NDK_VERSION
    use_sudo: bool = True
    llvm_key_file: str = DEFAULT_LLVM_KEY_FILE
    dry_run: bool = False


def resolve_config(
    llvm_version: Optional[int] = None,
    ndk_version: Optional[str] = None,
    no_sudo: Optional[bool] = None,
    llvm_key_file: Optional[str] = None,
    dry_run: bool = False,
    environ: Optional[dict[str, str]] = None,
) -> ProvisionConfig:
    """Build a ProvisionConfig from explicit values, then env vars, then defaults."""
    env = os.environ if environ is None else environ

    return ProvisionConfig(
        llvm_version=_resolve_llvm_version(llvm_version, env),
        ndk_version=ndk_version or env.get(ENV_NDK_VERSION) or DEFAULT_NDK_VERSION,
        use_sudo=not _resolve_no_sudo(no_sudo, env),
        llvm_key_file=(
            llvm_key_file or env.get(ENV_LLVM_KEY_FILE) or DEFAULT_LLVM_KEY_FILE
        ),
        dry_run=dry_run,
    )


def _resolve_llvm_version(value: Optional[int], env) -> int:
    if value is not None:
        return value
    env_value = env.get(ENV_LLVM_VERSION)
    if env_value:
        try:
            return int(env_value)
        except ValueError:
            logger.warning(
                "Ignoring %s=%r (not an integer)", ENV_LLVM_VERSION, env_value
            )
    return DEFAULT_LLVM_VERSION


def _resolve_no_sudo(value: Optional[bool], env) -> bool:
    if value is not None:
        return value
    return env.get(ENV_NO_SUDO, "").strip().lower() in _TRUTHY
