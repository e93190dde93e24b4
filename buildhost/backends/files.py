"""Local file edits: the license file and the NDK library shims."""

from __future__ import annotations

import fnmatch
import os
from pathlib import Path
from typing import Optional

from buildhost.backends.base import FileSystem


class LocalFileSystem(FileSystem):
    def accept_license(self, license_file: Path, token: str) -> bool:
        return accept_license(license_file, token)

    def patch_shims(
        self,
        search_root: Path,
        filename_pattern: str,
        content: str,
        shim_filename: Optional[str] = None,
    ) -> list[Path]:
        return patch_library_shims(search_root, filename_pattern, content, shim_filename)


def accept_license(license_file: Path, token: str) -> bool:
    """Append ``token`` as a line unless it is already present.

    Returns True if the file was modified.
    """
    license_file.parent.mkdir(parents=True, exist_ok=True)
    try:
        content = license_file.read_text()
    except FileNotFoundError:
        content = ""

    if token in content.splitlines():
        return False

    with open(license_file, "a") as f:
        if content and not content.endswith("\n"):
            f.write("\n")
        f.write(token + "\n")
    return True


def patch_library_shims(
    search_root: Path,
    filename_pattern: str,
    content: str,
    shim_filename: Optional[str] = None,
) -> list[Path]:
    """Write ``content`` for every file under ``search_root`` matching the pattern.

    Symlinks are followed. Returns the paths written, in sorted order.
    """
    if not search_root.is_dir():
        raise FileNotFoundError(f"No such directory: {search_root}")

    written: list[Path] = []
    for dirpath, dirnames, filenames in os.walk(search_root, followlinks=True):
        dirnames.sort()
        for name in sorted(fnmatch.filter(filenames, filename_pattern)):
            target = Path(dirpath) / (shim_filename or name)
            target.write_text(content)
            written.append(target)
    return written
