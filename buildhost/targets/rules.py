"""Target rule table — which extra provisioning each target class needs.

Rules are matched most-specific first: a rule that pins more triple fields
beats one that pins fewer. Rules with the same specificity must never match
the same target (checked in tests/test_targets/test_rules.py).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from buildhost.core.models import TargetSpec

ANY = "*"

# Host toolchain (apt.llvm.org). llvm-nm is always needed; clang only for
# targets whose rule asks for the alternate compiler.
TOOLCHAIN_VENDOR = "llvm"
DEFAULT_LLVM_VERSION = 15

DEFAULT_NDK_VERSION = "25.1.8937393"
ANDROID_LICENSE_ID = "android-sdk-license"
ANDROID_LICENSE_TOKEN = "24333f8a63b6825ea9c5514f83c2829b004d1fee"

# Older Rust toolchains link Android binaries with -lgcc instead of -lunwind
# (rust-lang/rust#85806).
UNWIND_LIBRARY = "libunwind.a"
LIBGCC_SHIM = "libgcc.a"
LIBGCC_SHIM_CONTENT = "INPUT(-lunwind)\n"


@dataclass(frozen=True)
class TargetRule:
    name: str
    arch: str = ANY
    vendor: str = ANY
    os: str = ANY
    abi: str = ANY
    # None pins "no ABI suffix"; ANY accepts any suffix.
    abi_suffix: Optional[str] = ANY
    packages: tuple[str, ...] = ()
    use_alternate_compiler: bool = False
    android_sdk: bool = False
    cargo_crate: Optional[str] = None
    cargo_binaries: tuple[str, ...] = ()

    def _fields(self) -> tuple[tuple[str, Optional[str]], ...]:
        return (
            ("arch", self.arch),
            ("vendor", self.vendor),
            ("os", self.os),
            ("abi", self.abi),
            ("abi_suffix", self.abi_suffix),
        )

    @property
    def specificity(self) -> int:
        return sum(1 for _name, value in self._fields() if value != ANY)

    def matches(self, spec: TargetSpec) -> bool:
        for name, value in self._fields():
            if value != ANY and getattr(spec, name) != value:
                return False
        return True

    def overlaps(self, other: TargetRule) -> bool:
        """True if some target could satisfy both rules."""
        for (_name, mine), (_other_name, theirs) in zip(
            self._fields(), other._fields()
        ):
            if mine != ANY and theirs != ANY and mine != theirs:
                return False
        return True


def _linux(arch: str, abi: str, suffix: Optional[str] = None, **kwargs) -> TargetRule:
    # Exact rustc spelling only: aarch64-pc-linux-gnu or aarch64-linux-gnu get nothing.
    name = f"{arch}-unknown-linux-{abi}{suffix or ''}"
    return TargetRule(
        name=name, arch=arch, vendor="unknown", os="linux", abi=abi,
        abi_suffix=suffix, **kwargs,
    )


TARGET_RULES: tuple[TargetRule, ...] = (
    TargetRule(name="android", abi="android", android_sdk=True),
    _linux(
        "aarch64", "gnu",
        packages=("qemu-user", "gcc-aarch64-linux-gnu", "libc6-dev-arm64-cross"),
        # Clang is needed for code coverage.
        use_alternate_compiler=True,
    ),
    _linux("aarch64", "musl", packages=("qemu-user",), use_alternate_compiler=True),
    _linux(
        "armv7", "musl", "eabihf",
        packages=("qemu-user",), use_alternate_compiler=True,
    ),
    _linux(
        "arm", "gnu", "eabihf",
        packages=("qemu-user", "gcc-arm-linux-gnueabihf", "libc6-dev-armhf-cross"),
    ),
    _linux(
        "i686", "gnu",
        packages=("gcc-multilib", "libc6-dev-i386"), use_alternate_compiler=True,
    ),
    _linux("i686", "musl", use_alternate_compiler=True),
    _linux("x86_64", "musl", use_alternate_compiler=True),
    _linux(
        "mipsel", "gnu",
        packages=("gcc-mipsel-linux-gnu", "libc6-dev-mipsel-cross", "qemu-user"),
    ),
    _linux(
        "riscv64gc", "gnu",
        packages=("gcc-riscv64-linux-gnu", "libc6-dev-riscv64-cross", "qemu-user"),
    ),
    TargetRule(
        name="wasm32-unknown-unknown",
        arch="wasm32", vendor="unknown", os="unknown", abi_suffix=None,
        use_alternate_compiler=True,
        cargo_crate="wasm-bindgen-cli",
        cargo_binaries=("wasm-bindgen-test-runner",),
    ),
)


def ordered_rules(rules: tuple[TargetRule, ...] = TARGET_RULES) -> list[TargetRule]:
    """Rules sorted most-specific first, table order breaking ties."""
    return sorted(rules, key=lambda r: -r.specificity)


def find_rule(
    spec: TargetSpec, rules: tuple[TargetRule, ...] = TARGET_RULES
) -> Optional[TargetRule]:
    for rule in ordered_rules(rules):
        if rule.matches(spec):
            return rule
    return None


KNOWN_ARCHES = frozenset({
    "aarch64", "arm", "armv5te", "armv7", "armv7a", "armv7s", "arm64",
    "i386", "i586", "i686", "x86_64", "mips", "mipsel", "mips64", "mips64el",
    "powerpc", "powerpc64", "powerpc64le", "riscv32gc", "riscv32imac",
    "riscv64gc", "riscv64", "s390x", "sparc64", "sparcv9", "loongarch64",
    "thumbv6m", "thumbv7em", "thumbv7m", "thumbv7neon", "thumbv8m.main",
    "wasm32", "wasm64",
})

KNOWN_OSES = frozenset({
    "linux", "android", "darwin", "ios", "windows", "freebsd", "netbsd",
    "openbsd", "dragonfly", "illumos", "solaris", "fuchsia", "redox",
    "wasi", "emscripten", "none", "unknown", "uefi", "hermit",
})

KNOWN_ENVIRONMENTS = (
    "android", "gnu", "musl", "msvc", "uclibc", "ohos", "sgx", "newlib", "elf",
)


def known_targets() -> list[str]:
    """Concrete triples named by the rule table (for listings)."""
    return [rule.name for rule in TARGET_RULES if rule.arch != ANY]
