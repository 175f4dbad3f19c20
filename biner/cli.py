from __future__ import annotations

import os
import sys
import argparse
import dataclasses
from typing import IO, List, Optional, Sequence

from biner import __version__
from biner.combiner import combine_files
from biner.constants import DEFAULT_BEGIN_MARKER, DEFAULT_END_MARKER, DEFAULT_DIRECTORY
from biner.errors import ArgUsage, BinerError, DestinationUnwritable
from biner.pathutil import normalize_directory
from biner.separator import separate_files
from biner.settings import Settings


USAGE = "biner [-c] [-s] [-d directory] [-v] [-bm text] [-em text] [-o output] files"


def _note(settings: Settings, msg: str) -> None:
    if settings.verbose:
        print(msg, file=sys.stderr)


def read_stdin_list(stream: Optional[IO[str]], settings: Settings) -> List[str]:
    """Collect one input per line from a piped stdin.

    An interactive terminal (or a missing stream) is ignored, so a bare
    ``biner -c a b`` never blocks waiting for input.
    """
    if stream is None:
        return []
    try:
        interactive = stream.isatty()
    except (AttributeError, ValueError):
        return []
    if interactive:
        _note(settings, "Not reading from standard input.")
        return []
    _note(settings, "Reading from standard input.")
    # Lines are file names: decode them the way the OS decodes paths.
    raw = getattr(stream, "buffer", None)
    if raw is not None:
        lines = (os.fsdecode(chunk.rstrip(b"\n")) for chunk in raw)
    else:
        lines = (chunk.rstrip("\n") for chunk in stream)
    items: List[str] = []
    for line in lines:
        if not line:
            continue
        items.append(line)
        _note(settings, f"Added file '{line}' to list.")
    return items


def prepare_directory(directory: str, settings: Settings) -> str:
    """Create ``directory`` if needed and return it with a trailing separator.

    Raises:
        DestinationUnwritable: The directory could not be created.
    """
    if not os.path.isdir(directory):
        try:
            os.makedirs(directory)
        except OSError as exc:
            raise DestinationUnwritable(directory, f"could not be created: {exc}") from exc
        _note(settings, f"Created directory '{directory}' because it does not exist.")
    return normalize_directory(directory)


def cmd_combine(files: Sequence[str], settings: Settings, *, output: Optional[str] = None) -> bool:
    """Combine files into a bundle written to ``output`` or stdout.

    Args:
        files: Input paths, in bundle order.
        settings: Markers and verbosity.
        output: Bundle path. Missing parent directories are created. When
            None, the bundle goes to standard output.

    Raises:
        ArgUsage: ``files`` is empty.
    """
    if not files:
        raise ArgUsage("You must specify at least two files to combine.")
    data = combine_files(settings, files)
    if not output:
        _note(settings, "Outputting data to standard output (stdout)")
        sys.stdout.flush()
        sys.stdout.buffer.write(data)
        sys.stdout.buffer.flush()
        return True

    _note(settings, f"Writing data to file '{output}'")
    parent = os.path.dirname(output)
    try:
        if parent and not os.path.isdir(parent):
            os.makedirs(parent)
        with open(output, "wb") as fh:
            fh.write(data)
    except OSError as exc:
        raise DestinationUnwritable(output, f"could not be written: {exc}") from exc
    return True


def cmd_separate(items: Sequence[str], settings: Settings) -> bool:
    """Separate bundles (paths or literal text) into ``settings.directory``.

    Raises:
        ArgUsage: ``items`` is empty.
    """
    if not items:
        raise ArgUsage("You must specify at least one file to split.")
    separate_files(settings, items)
    return True


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="biner",
        usage=USAGE,
        description="Combine text files into one marked-up stream, or separate such a stream back into files.",
        epilog=(
            "Inputs may also be piped one per line on standard input. "
            "A marker value that starts with '-' and has no spaces must be given as --begin-marker=VALUE."
        ),
    )
    ap.add_argument("-v", "--version", dest="verbose", action="store_true", help="verbose diagnostics on stderr")
    ap.add_argument("--print-version", action="version", version=f"%(prog)s {__version__}", help="print the program version and exit")
    ap.add_argument("-c", "--combine", dest="mode", action="store_const", const="combine", help="combine files into one bundle")
    ap.add_argument("-s", "--separate", dest="mode", action="store_const", const="separate", help="separate bundles into files")
    ap.add_argument("-d", "--directory", default=DEFAULT_DIRECTORY, metavar="directory", help="output directory for --separate (created if missing)")
    ap.add_argument("-bm", "--begin-marker", default=DEFAULT_BEGIN_MARKER, metavar="text", help=f"begin marker (default: {DEFAULT_BEGIN_MARKER!r})")
    ap.add_argument("-em", "--end-marker", default=DEFAULT_END_MARKER, metavar="text", help=f"end marker (default: {DEFAULT_END_MARKER!r})")
    ap.add_argument("-o", "--output", metavar="output", help="write the combined bundle here instead of stdout")
    ap.add_argument("files", nargs="*", help="files to combine, or bundles to separate")
    return ap


def main(argv: List[str] | None = None, stdin: Optional[IO[str]] = None):
    ap = build_parser()
    args = ap.parse_intermixed_args(argv)

    try:
        settings = Settings(
            verbose=args.verbose,
            directory=args.directory,
            begin_marker=args.begin_marker,
            end_marker=args.end_marker,
        )
    except BinerError as e:
        ap.error(str(e))

    if settings.verbose:
        print("Verbose mode enabled (-v)", file=sys.stderr)
        print("Arguments:", file=sys.stderr)
        for a in (sys.argv[1:] if argv is None else argv):
            print(a, file=sys.stderr)

    files: List[str] = []
    for p in args.files:
        if os.path.exists(p):
            files.append(p)
        else:
            print(f"File '{p}' does not exist, or is an invalid parameter.", file=sys.stderr)
    files.extend(read_stdin_list(sys.stdin if stdin is None else stdin, settings))

    if args.mode is None:
        ap.error("You must specify a mode.")

    try:
        if args.mode == "separate":
            directory = prepare_directory(settings.directory, settings)
            settings = dataclasses.replace(settings, directory=directory)
    except DestinationUnwritable as e:
        print("Failed to create directory, exiting.", file=sys.stderr)
        print(str(e), file=sys.stderr)
        sys.exit(2)

    if settings.verbose:
        print("Files:", file=sys.stderr)
        for f in files:
            print(f, file=sys.stderr)
        print("Biner in combine mode." if args.mode == "combine" else "Biner in separate mode.", file=sys.stderr)

    try:
        if args.mode == "combine":
            cmd_combine(files, settings, output=args.output)
        else:
            cmd_separate(files, settings)
    except ArgUsage as e:
        ap.error(str(e))
    except (BinerError, OSError) as e:
        print("biner failed to perform the action you requested.", file=sys.stderr)
        print(str(e), file=sys.stderr)
        sys.exit(2)


if __name__ == "__main__":
    main()
