"""
biner: combine text files into one stream and separate them again.

A bundle is a plain concatenation of sections, each framed by a begin-marker
line and an end-marker line that carry the file's path:

- Payloads are copied byte for byte; no newline translation, escaping, or
  compression.
- Separating writes each section under the destination directory by basename,
  never overwriting: collisions get a ``_1``, ``_2``, ... suffix.
- Markers are configurable; the defaults are ``--!- BINER FILE BEGIN -!--`` and
  ``--!- BINER FILE END -!--``.

Payloads that themselves contain a marker are not supported.
"""

__version__ = "0.1"

__all__ = [
    "constants",
    "settings",
    "framing",
    "combiner",
    "separator",
]

# Programmatic API: biner.combiner.combine_files / biner.separator.separate_files,
# both taking a biner.settings.Settings, plus the CLI helpers in biner.cli
# (cmd_combine/cmd_separate).
