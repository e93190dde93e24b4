"""Backend selection for the executor."""

from __future__ import annotations

from buildhost.backends.base import Backends
from buildhost.core.config import ProvisionConfig
from buildhost.core.models import HostEnvironment


def build_backends(host: HostEnvironment, config: ProvisionConfig) -> Backends:
    """Return the real collaborators for ``host``.

    Dry runs use ``recording_backends()`` instead.
    """
    from buildhost.backends.android import AndroidSdkManager
    from buildhost.backends.apt import AptPackageManager, AptToolchainRepository
    from buildhost.backends.cargo import CargoCommandInstaller
    from buildhost.backends.files import LocalFileSystem

    return Backends(
        packages=AptPackageManager(use_sudo=config.use_sudo),
        repositories=AptToolchainRepository(
            codename=host.distro_codename,
            key_file=config.llvm_key_file,
            use_sudo=config.use_sudo,
        ),
        sdk=AndroidSdkManager(host.sdk.sdk_root),
        cargo=CargoCommandInstaller(),
        files=LocalFileSystem(),
    )
