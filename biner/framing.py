"""Section framing for biner bundles.

A bundle is a concatenation of sections::

    <begin_marker> SP <filename> LF
    <payload bytes>
    <end_marker> SP <filename> LF

Everything here works on bytes and never looks inside payloads. A payload that
itself contains a marker will confuse the scanner; the format does not escape.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Optional, Tuple

from .constants import MARKER_SEP, LINE_END


@dataclass
class Section:
    filename: bytes
    payload: bytes
    trailer_name: Optional[bytes]
    begin: int
    end: int


def format_header(begin_marker: bytes, filename: bytes) -> bytes:
    return begin_marker + MARKER_SEP + filename + LINE_END


def format_footer(end_marker: bytes, filename: bytes) -> bytes:
    return end_marker + MARKER_SEP + filename + LINE_END


def frame_section(begin_marker: bytes, end_marker: bytes, filename: bytes, payload: bytes) -> bytes:
    return format_header(begin_marker, filename) + payload + format_footer(end_marker, filename)


def has_markers(buffer: bytes, begin_marker: bytes, end_marker: bytes) -> bool:
    """True when both markers occur somewhere in ``buffer`` (pairing is not checked)."""
    return begin_marker in buffer and end_marker in buffer


def _line_at(buffer: bytes, start: int) -> Tuple[bytes, int]:
    """Return the text from ``start`` to the next LF and the offset just past that LF."""
    nl = buffer.find(LINE_END, start)
    if nl < 0:
        return buffer[start:], len(buffer)
    return buffer[start:nl], nl + 1


def find_section(
    buffer: bytes,
    begin_marker: bytes,
    end_marker: bytes,
    start: int = 0,
) -> Tuple[Optional[Section], Optional[int]]:
    """Locate the next section whose begin marker sits at or after ``start``.

    Returns:
        ``(section, resume)``. ``section`` is None when the begin marker found
        cannot be turned into a section (no end marker after it, or a header
        line with no newline before the end marker). ``resume`` is where the
        scan continues, or None when nothing is left to scan.
    """
    b = buffer.find(begin_marker, start)
    if b < 0:
        return None, None
    e = buffer.find(end_marker, b)
    if e < 0:
        # Unmatched begin marker: the rest of the buffer is consumed.
        return None, None

    # Consumed span is [b, e + len(end_marker) + 1), clamped at end of buffer.
    after_marker = e + len(end_marker)
    resume = min(after_marker + 1, len(buffer))
    trailer_name = None
    if buffer[after_marker:after_marker + len(MARKER_SEP)] == MARKER_SEP:
        trailer_name, _ = _line_at(buffer, after_marker + len(MARKER_SEP))

    name_start = b + len(begin_marker) + len(MARKER_SEP)
    name_end = buffer.find(LINE_END, name_start)
    if name_end < 0 or name_end >= e:
        return None, resume

    section = Section(
        filename=buffer[name_start:name_end],
        payload=buffer[name_end + 1:e],
        trailer_name=trailer_name,
        begin=b,
        end=resume,
    )
    return section, resume


def iter_sections(buffer: bytes, begin_marker: bytes, end_marker: bytes) -> Iterator[Section]:
    """Yield every well-formed section of ``buffer`` in the order of its begin markers."""
    pos: Optional[int] = 0
    while pos is not None:
        section, pos = find_section(buffer, begin_marker, end_marker, pos)
        if section is not None:
            yield section
