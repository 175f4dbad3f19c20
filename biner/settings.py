from __future__ import annotations

from dataclasses import dataclass

from .constants import (
    DEFAULT_BEGIN_MARKER,
    DEFAULT_END_MARKER,
    DEFAULT_DIRECTORY,
    MARKER_ENCODING,
    MARKER_ERRORS,
)
from .errors import InvalidMarker


def encode_marker(marker: str) -> bytes:
    return marker.encode(MARKER_ENCODING, MARKER_ERRORS)


@dataclass(frozen=True)
class Settings:
    """Configuration shared by combine and separate.

    Attributes:
        verbose: Print progress diagnostics to stderr.
        directory: Destination directory for separated files. The command line
            creates it and makes sure it ends with the path separator.
        begin_marker: Marker opening a section; no newline, distinct from end_marker.
        end_marker: Marker closing a section.
    """

    verbose: bool = False
    directory: str = DEFAULT_DIRECTORY
    begin_marker: str = DEFAULT_BEGIN_MARKER
    end_marker: str = DEFAULT_END_MARKER

    def __post_init__(self):
        for name in ("begin_marker", "end_marker"):
            value = getattr(self, name)
            if not value:
                raise InvalidMarker(f"{name} must not be empty")
            if "\n" in value:
                raise InvalidMarker(f"{name} must not contain a newline")
        if self.begin_marker == self.end_marker:
            raise InvalidMarker("begin_marker and end_marker must differ")

    @property
    def begin_bytes(self) -> bytes:
        return encode_marker(self.begin_marker)

    @property
    def end_bytes(self) -> bytes:
        return encode_marker(self.end_marker)
