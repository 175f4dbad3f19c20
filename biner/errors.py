from __future__ import annotations

import os
from typing import Union


class BinerError(Exception):
    """Base class for biner-specific errors."""


class _PathError(BinerError):
    def __init__(self, path: Union[str, bytes, os.PathLike], message: str):
        super().__init__(message)
        self.path = path


# Combine
class InputMissing(_PathError):
    def __init__(self, path):
        super().__init__(path, f"Input file does not exist: {os.fsdecode(path)}")


class InputUnreadable(_PathError):
    def __init__(self, path):
        super().__init__(path, f"Input file failed to open: {os.fsdecode(path)}")


# Separate
class BundleMalformed(BinerError):
    pass


class TooManyDuplicates(_PathError):
    def __init__(self, path):
        super().__init__(
            path,
            f"Too many duplicate files for {os.fsdecode(path)}; stopping before writing more copies.",
        )


class DestinationUnwritable(_PathError):
    def __init__(self, path, reason: str = "could not be written"):
        super().__init__(path, f"Destination {os.fsdecode(path)!r} {reason}")


# Settings / command line
class InvalidMarker(BinerError):
    pass


class ArgUsage(BinerError):
    pass
