"""Target classifier — parse a target identifier into a TargetSpec.

Classification never fails: anything that does not look like a known triple
comes back as ``TargetKind.UNMATCHED`` and the resolver provisions only the
host baseline for it.
"""

from __future__ import annotations

import logging
import re
from typing import Optional

from buildhost.core.models import TargetKind, TargetSpec
from buildhost.targets.rules import KNOWN_ARCHES, KNOWN_ENVIRONMENTS, KNOWN_OSES

logger = logging.getLogger(__name__)

TARGET_FLAG = "--target="
HOST_NATIVE_MARKERS = frozenset({"", "host", "native"})

_ABI_SUFFIXES = ("eabihf", "eabi", "abi64", "abin32", "x32", "spe", "hf")
_FEATURE_SPLIT = re.compile(r"[\s,]+")


def classify(raw_triple: str, feature_flags: str = "") -> TargetSpec:
    """Classify ``raw_triple`` (``--target=<triple>`` or a bare triple)."""
    raw = (raw_triple or "").strip()
    features = parse_features(feature_flags)

    if raw.startswith(TARGET_FLAG):
        triple = raw[len(TARGET_FLAG):].strip()
    elif raw.lower() in HOST_NATIVE_MARKERS or raw.startswith("-"):
        return TargetSpec(raw=raw, kind=TargetKind.HOST_NATIVE, features=features)
    else:
        triple = raw

    parts = _split_triple(triple)
    if parts is None:
        logger.debug("Unrecognised target %r, provisioning host baseline only", raw)
        return TargetSpec(
            raw=raw, kind=TargetKind.UNMATCHED, triple=triple, features=features
        )

    arch, vendor, os_name, abi_field = parts
    abi, suffix = split_abi(abi_field)
    return TargetSpec(
        raw=raw,
        kind=TargetKind.CROSS,
        triple=triple,
        arch=arch,
        vendor=vendor,
        os=os_name,
        abi=abi,
        abi_suffix=suffix,
        features=features,
    )


def parse_features(feature_flags: str) -> frozenset[str]:
    return frozenset(f for f in _FEATURE_SPLIT.split(feature_flags or "") if f)


def split_abi(abi_field: str) -> tuple[str, Optional[str]]:
    """Split ``musleabihf`` into ``("musl", "eabihf")``."""
    for env in KNOWN_ENVIRONMENTS:
        if abi_field.startswith(env):
            rest = abi_field[len(env):]
            return env, rest or None
    if abi_field:
        # Bare suffixes such as thumbv7em-none-eabihf.
        return "", abi_field
    return "", None


def _looks_like_abi(part: str) -> bool:
    return part.startswith(KNOWN_ENVIRONMENTS) or part.startswith(_ABI_SUFFIXES)


def _split_triple(triple: str) -> Optional[tuple[str, str, str, str]]:
    """Return ``(arch, vendor, os, abi)`` or None for malformed triples.

    Forms without a vendor field get an empty vendor.
    """
    parts = triple.split("-")
    if any(not p for p in parts):
        return None

    if len(parts) == 4:
        arch, vendor, os_name, abi = parts
    elif len(parts) == 3:
        if parts[1] in KNOWN_OSES and _looks_like_abi(parts[2]):
            arch, os_name, abi = parts
            vendor = ""
        else:
            arch, vendor, os_name = parts
            abi = ""
    elif len(parts) == 2:
        arch, os_name = parts
        vendor, abi = "", ""
    else:
        return None

    if arch not in KNOWN_ARCHES or os_name not in KNOWN_OSES:
        return None
    return arch, vendor, os_name, abi
