from __future__ import annotations

import os
from typing import Iterator

from .constants import MAX_DUPLICATES
from .errors import DestinationUnwritable


def normalize_directory(path: str) -> str:
    """Return ``path`` ending in the host path separator ("" means the current directory)."""
    if not path:
        return "." + os.sep
    if path.endswith(os.sep) or (os.altsep and path.endswith(os.altsep)):
        return path
    return path + os.sep


def section_basename(filename: bytes) -> str:
    """Final path component of a filename recovered from a begin-marker line.

    Directory components are discarded, so ``a/b/c.txt`` becomes ``c.txt``.

    Raises:
        DestinationUnwritable: The name has no usable final component.
    """
    name = os.path.basename(os.fsdecode(filename))
    if name in ("", ".", ".."):
        raise DestinationUnwritable(os.fsdecode(filename), "has no file name component")
    return name


def candidate_paths(directory: str, candidate: str, limit: int = MAX_DUPLICATES) -> Iterator[str]:
    """Destinations to try for ``candidate`` under ``directory``, in order.

    ``candidate`` first, then ``candidate_1`` up to ``candidate_<limit>``.
    The suffix goes on the full basename, extension included (``c.txt_1``).
    The caller stops at the first one it can create and raises
    ``TooManyDuplicates`` when the sequence runs out.
    """
    path = os.path.join(directory, candidate)
    yield path
    for i in range(1, limit + 1):
        yield f"{path}_{i}"
