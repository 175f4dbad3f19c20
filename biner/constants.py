import os


# Default section markers
DEFAULT_BEGIN_MARKER = "--!- BINER FILE BEGIN -!--"
DEFAULT_END_MARKER = "--!- BINER FILE END -!--"

# Frame bytes between a marker and its filename, and at the end of a marker line
MARKER_SEP = b" "   # 0x20
LINE_END = b"\n"    # 0x0A, never translated

# Marker text <-> bytes
MARKER_ENCODING = "utf-8"
MARKER_ERRORS = "surrogateescape"

# Collision suffixes run _1 .. _MAX_DUPLICATES
MAX_DUPLICATES = 99_999

DEFAULT_DIRECTORY = "." + os.sep
