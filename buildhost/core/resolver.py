"""Action resolver — (target, host) → ordered ActionPlan.

The plan is built in a fixed order: host toolchain repository and base
packages, then the target rule's SDK prefix, its packages and cargo tools,
and finally its library shim. ``resolve`` is pure: the same inputs always
produce an equal plan.
"""

from __future__ import annotations

import logging
from typing import Optional

from buildhost.core.config import ProvisionConfig
from buildhost.core.models import (
    AcceptLicense,
    ActionPlan,
    ConfigureToolchainRepository,
    HostOS,
    InstallCargoBinary,
    InstallPackages,
    InstallSdkComponent,
    PatchLibraryShim,
    ProvisioningAction,
    SdkLocations,
    TargetKind,
    TargetSpec,
)
from buildhost.targets.rules import (
    ANDROID_LICENSE_ID,
    ANDROID_LICENSE_TOKEN,
    LIBGCC_SHIM,
    LIBGCC_SHIM_CONTENT,
    TARGET_RULES,
    TOOLCHAIN_VENDOR,
    UNWIND_LIBRARY,
    TargetRule,
    find_rule,
)

logger = logging.getLogger(__name__)

_DEFAULT_CONFIG = ProvisionConfig()
_NO_SDK = SdkLocations()


def resolve(
    spec: TargetSpec,
    host: HostOS,
    sdk: Optional[SdkLocations] = None,
    config: Optional[ProvisionConfig] = None,
    rules: tuple[TargetRule, ...] = TARGET_RULES,
) -> ActionPlan:
    """Resolve the provisioning plan for ``spec`` on ``host``."""
    sdk = sdk or _NO_SDK
    config = config or _DEFAULT_CONFIG

    rule = find_rule(spec, rules) if spec.kind == TargetKind.CROSS else None

    actions: list[ProvisioningAction] = []
    actions.extend(host_actions(host, rule, config))
    if rule is not None:
        actions.extend(target_actions(rule, sdk, config))

    return ActionPlan(
        spec=spec,
        host=host,
        actions=tuple(actions),
        rule_name=rule.name if rule else None,
    )


def host_actions(
    host: HostOS, rule: Optional[TargetRule], config: ProvisionConfig
) -> list[ProvisioningAction]:
    """Toolchain repository + base packages; Linux hosts only."""
    if host != HostOS.LINUX:
        return []
    version = config.llvm_version
    actions: list[ProvisioningAction] = [
        ConfigureToolchainRepository(TOOLCHAIN_VENDOR, version),
        # llvm-nm is needed by the symbol-prefix checks on every target.
        InstallPackages((f"llvm-{version}",)),
    ]
    if rule is not None and rule.use_alternate_compiler:
        actions.append(InstallPackages((f"clang-{version}",)))
    return actions


def target_actions(
    rule: TargetRule, sdk: SdkLocations, config: ProvisionConfig
) -> list[ProvisioningAction]:
    actions: list[ProvisioningAction] = []

    if rule.android_sdk:
        actions.extend(_android_sdk_prefix(sdk, config))

    if rule.packages:
        actions.append(InstallPackages(rule.packages))

    if rule.cargo_crate:
        actions.append(InstallCargoBinary(rule.cargo_crate, rule.cargo_binaries))

    if rule.android_sdk:
        shim_root = sdk.shim_root(config.ndk_version)
        if shim_root is None:
            logger.warning(
                "No Android SDK or NDK root set; skipping the %s shim", LIBGCC_SHIM
            )
        else:
            actions.append(PatchLibraryShim(
                search_root=shim_root,
                filename_pattern=UNWIND_LIBRARY,
                replacement_content=LIBGCC_SHIM_CONTENT,
                shim_filename=LIBGCC_SHIM,
            ))

    return actions


def _android_sdk_prefix(
    sdk: SdkLocations, config: ProvisionConfig
) -> list[ProvisioningAction]:
    sdk_root = sdk.sdk_root
    if sdk_root is None:
        logger.warning(
            "No Android SDK root set; assuming the NDK is already installed"
        )
        return []
    return [
        AcceptLicense(
            license_id=ANDROID_LICENSE_ID,
            license_file=sdk_root / "licenses" / ANDROID_LICENSE_ID,
            token=ANDROID_LICENSE_TOKEN,
        ),
        InstallSdkComponent(f"ndk;{config.ndk_version}"),
    ]
