from __future__ import annotations

import os
import sys
from typing import Sequence, Union

from .errors import InputMissing, InputUnreadable
from .framing import format_header, format_footer
from .settings import Settings


PathArg = Union[str, bytes, os.PathLike]


def combine_files(settings: Settings, files: Sequence[PathArg]) -> bytes:
    """Concatenate ``files`` into one bundle, in the order given.

    The path text in each marker line is the caller's token as-is; payloads
    are copied byte for byte. The whole bundle is built in memory.

    Args:
        settings: Markers and verbosity.
        files: Input paths. An empty sequence yields ``b""``.

    Returns:
        The bundle bytes.

    Raises:
        InputMissing: A path is not an existing regular file.
        InputUnreadable: A file exists but could not be read.
    """
    bm = settings.begin_bytes
    em = settings.end_bytes
    out = bytearray()

    for path in files:
        shown = os.fsdecode(path)
        if not os.path.isfile(path):
            raise InputMissing(path)
        if settings.verbose:
            print(f"Adding file '{shown}' to buffer.", file=sys.stderr)
        try:
            with open(path, "rb") as fh:
                payload = fh.read()
        except OSError as exc:
            raise InputUnreadable(path) from exc

        name = os.fsencode(path)
        out += format_header(bm, name)
        out += payload
        out += format_footer(em, name)
        if settings.verbose:
            print(f"Added file '{shown}' to buffer.", file=sys.stderr)

    if settings.verbose:
        print("All done. No problems reported.", file=sys.stderr)
    return bytes(out)
