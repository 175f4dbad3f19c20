from __future__ import annotations

import os
import sys
from typing import List, Sequence, Union

from .constants import MARKER_ENCODING, MARKER_ERRORS, MAX_DUPLICATES
from .errors import BundleMalformed, DestinationUnwritable, InputUnreadable, TooManyDuplicates
from .framing import Section, has_markers, iter_sections
from .pathutil import candidate_paths, section_basename
from .settings import Settings


BundleArg = Union[str, bytes, os.PathLike]


def _describe(item: BundleArg) -> str:
    text = os.fsdecode(item) if not isinstance(item, bytes) else item.decode(MARKER_ENCODING, "replace")
    return text if len(text) <= 60 else text[:57] + "..."


def load_bundle(settings: Settings, item: BundleArg) -> bytes:
    """Return the bundle bytes for one input item.

    An item naming an existing regular file is read from disk; anything else
    is taken to be bundle text itself.
    """
    if os.path.isfile(item):
        try:
            with open(item, "rb") as fh:
                data = fh.read()
        except OSError as exc:
            raise InputUnreadable(item) from exc
        if settings.verbose:
            print(f"Processing file '{os.fsdecode(item)}'.", file=sys.stderr)
        return data
    if settings.verbose:
        print(f"'{_describe(item)}' is not a file that exists, so treating it as raw data.", file=sys.stderr)
    if isinstance(item, bytes):
        return item
    return os.fspath(item).encode(MARKER_ENCODING, MARKER_ERRORS)


def write_section(settings: Settings, section: Section, *, limit: int = MAX_DUPLICATES) -> str:
    """Write one section under ``settings.directory`` without overwriting anything.

    Returns:
        The destination path written.

    Raises:
        TooManyDuplicates: No free collision suffix remained.
        DestinationUnwritable: The file could not be created or written.
    """
    candidate = section_basename(section.filename)
    for dest in candidate_paths(settings.directory, candidate, limit):
        if os.path.lexists(dest):
            continue
        # Exclusive create: a file that appeared since the check is left alone.
        try:
            fh = open(dest, "xb")
        except FileExistsError:
            continue
        except OSError as exc:
            raise DestinationUnwritable(dest, f"could not be created: {exc}") from exc
        try:
            with fh:
                fh.write(section.payload)
        except OSError as exc:
            raise DestinationUnwritable(dest, f"could not be written: {exc}") from exc
        if settings.verbose and os.path.basename(dest) != candidate:
            print(f"Duplicate file found, renaming it to '{os.path.basename(dest)}'", file=sys.stderr)
        return dest
    raise TooManyDuplicates(os.path.join(settings.directory, candidate))


def separate_files(settings: Settings, items: Sequence[BundleArg], *, limit: int = MAX_DUPLICATES) -> List[str]:
    """Unpack every section of every bundle into ``settings.directory``.

    All inputs are loaded and checked for both markers before anything is
    written. Files already written stay on disk if a later write fails.

    Args:
        settings: Markers, destination directory and verbosity.
        items: Bundle file paths or literal bundle text.
        limit: Highest collision suffix to try.

    Returns:
        Destination paths in the order their sections appear.

    Raises:
        BundleMalformed: An input is missing the begin or the end marker.
        TooManyDuplicates: No free collision suffix remained for a section.
        DestinationUnwritable: A section could not be written.
    """
    bm = settings.begin_bytes
    em = settings.end_bytes

    buffers: List[bytes] = []
    for item in items:
        data = load_bundle(settings, item)
        if not has_markers(data, bm, em):
            raise BundleMalformed(
                f"'{_describe(item)}' is not valid, because it's missing biner marker data. "
                "If needed, try overriding the biner markers."
            )
        buffers.append(data)

    written: List[str] = []
    for data in buffers:
        if settings.verbose:
            print("Parsing file.", file=sys.stderr)
        for section in iter_sections(data, bm, em):
            if section.trailer_name is not None and section.trailer_name != section.filename:
                print(
                    f"Warning: end marker name '{os.fsdecode(section.trailer_name)}' does not match "
                    f"'{os.fsdecode(section.filename)}'; writing under the begin marker name.",
                    file=sys.stderr,
                )
            written.append(write_section(settings, section, limit=limit))
        if settings.verbose:
            print("Parsed file.", file=sys.stderr)

    if settings.verbose:
        print("All done. No problems reported.", file=sys.stderr)
    return written
