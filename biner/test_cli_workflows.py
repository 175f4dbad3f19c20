from __future__ import annotations

import contextlib
import io
import os
import subprocess
import sys
import tempfile
import unittest
from pathlib import Path

from biner.cli import main, read_stdin_list, prepare_directory
from biner.settings import Settings


S1_BUNDLE = (
    b"--!- BINER FILE BEGIN -!-- a.txt\nhello\n--!- BINER FILE END -!-- a.txt\n"
    b"--!- BINER FILE BEGIN -!-- b.txt\nworld--!- BINER FILE END -!-- b.txt\n"
)


class CLIIntegrationTests(unittest.TestCase):
    def run_cli(self, args, *, expect: int | None = 0, cwd: Path | None = None, input: bytes | None = None):
        cmd = [sys.executable, "-m", "biner.cli"] + list(args)
        env = os.environ.copy()
        repo_root = Path(__file__).resolve().parents[1]
        existing = env.get("PYTHONPATH", "")
        env["PYTHONPATH"] = str(repo_root) if not existing else f"{repo_root}{os.pathsep}{existing}"
        proc = subprocess.run(
            cmd,
            cwd=cwd,
            input=input,
            stdin=None if input is not None else subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            env=env,
        )
        if expect is not None and proc.returncode != expect:
            raise AssertionError(
                f"CLI exited {proc.returncode}, expected {expect}\nCommand: {' '.join(cmd)}\n"
                f"STDOUT:\n{proc.stdout!r}\nSTDERR:\n{proc.stderr.decode(errors='replace')}"
            )
        return proc

    def make_workspace(self) -> Path:
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        root = Path(tmp.name)
        (root / "a.txt").write_bytes(b"hello\n")
        (root / "b.txt").write_bytes(b"world")
        return root

    def test_combine_to_stdout(self):
        root = self.make_workspace()
        proc = self.run_cli(["-c", "a.txt", "b.txt"], cwd=root)
        self.assertEqual(proc.stdout, S1_BUNDLE)

    def test_combine_to_output_then_separate(self):
        root = self.make_workspace()
        self.run_cli(["--combine", "a.txt", "b.txt", "-o", "bundles/deep/out.biner"], cwd=root)
        bundle = root / "bundles" / "deep" / "out.biner"
        self.assertEqual(bundle.read_bytes(), S1_BUNDLE)

        self.run_cli(["-s", str(bundle), "-d", "restored/x"], cwd=root)
        self.assertEqual((root / "restored" / "x" / "a.txt").read_bytes(), b"hello\n")
        self.assertEqual((root / "restored" / "x" / "b.txt").read_bytes(), b"world")

        # Second run into the same directory renames rather than overwrites
        self.run_cli(["-s", str(bundle), "--directory", "restored/x"], cwd=root)
        self.assertEqual((root / "restored" / "x" / "a.txt_1").read_bytes(), b"hello\n")
        self.assertEqual((root / "restored" / "x" / "b.txt_1").read_bytes(), b"world")

    def test_file_list_from_stdin(self):
        root = self.make_workspace()
        proc = self.run_cli(["-c"], cwd=root, input=b"a.txt\nb.txt\n")
        self.assertEqual(proc.stdout, S1_BUNDLE)

    def test_undecodable_name_from_stdin(self):
        root = self.make_workspace()
        proc = self.run_cli(["-c"], cwd=root, input=b"a.txt\n\xff.txt\n", expect=2)
        self.assertIn(b"biner failed to perform the action you requested.", proc.stderr)
        self.assertNotIn(b"Traceback", proc.stderr)
        self.assertEqual(proc.stdout, b"")

    def test_bundle_list_from_stdin(self):
        root = self.make_workspace()
        (root / "one.biner").write_bytes(S1_BUNDLE)
        (root / "two.biner").write_bytes(b"--!- BINER FILE BEGIN -!-- z\nZ--!- BINER FILE END -!-- z\n")
        self.run_cli(["-s", "-d", "out"], cwd=root, input=b"one.biner\ntwo.biner\n")
        self.assertEqual(sorted(os.listdir(root / "out")), ["a.txt", "b.txt", "z"])

    def test_custom_markers(self):
        root = self.make_workspace()
        (root / "z").write_bytes(b"Z")
        proc = self.run_cli(["-c", "-bm", "<<", "-em", ">>", "z"], cwd=root)
        self.assertEqual(proc.stdout, b"<< z\nZ>> z\n")
        (root / "bundle").write_bytes(proc.stdout)
        self.run_cli(["-s", "--begin-marker", "<<", "--end-marker", ">>", "-d", "out", "bundle"], cwd=root)
        self.assertEqual((root / "out" / "z").read_bytes(), b"Z")

    def test_missing_positional_is_skipped(self):
        root = self.make_workspace()
        proc = self.run_cli(["-c", "a.txt", "ghost.txt"], cwd=root)
        self.assertIn(b"File 'ghost.txt' does not exist", proc.stderr)
        self.assertNotIn(b"ghost.txt", proc.stdout)

    def test_usage_errors(self):
        root = self.make_workspace()
        no_mode = self.run_cli(["a.txt"], cwd=root, expect=None)
        self.assertNotEqual(no_mode.returncode, 0)
        self.assertIn(b"You must specify a mode.", no_mode.stderr)

        empty = self.run_cli(["-c", "-o", "out.biner"], cwd=root, expect=None)
        self.assertNotEqual(empty.returncode, 0)
        self.assertIn(b"at least two files to combine", empty.stderr)
        self.assertFalse((root / "out.biner").exists())

        empty_sep = self.run_cli(["-s"], cwd=root, expect=None)
        self.assertNotEqual(empty_sep.returncode, 0)
        self.assertIn(b"at least one file to split", empty_sep.stderr)

        missing_arg = self.run_cli(["-c", "a.txt", "-o"], cwd=root, expect=None)
        self.assertNotEqual(missing_arg.returncode, 0)

        same = self.run_cli(["-c", "-bm", "X", "-em", "X", "a.txt"], cwd=root, expect=None)
        self.assertNotEqual(same.returncode, 0)

    def test_malformed_bundle(self):
        root = self.make_workspace()
        proc = self.run_cli(["-s", "-d", "out", "a.txt"], cwd=root, expect=None)
        self.assertNotEqual(proc.returncode, 0)
        self.assertIn(b"missing biner marker data", proc.stderr)
        self.assertEqual(os.listdir(root / "out"), [])

    def test_help_and_version(self):
        proc = self.run_cli(["-h"])
        self.assertIn(b"usage: biner", proc.stdout)
        ver = self.run_cli(["--print-version"])
        self.assertIn(b"biner 0.1", ver.stdout)

    def test_verbose_flag_named_version(self):
        root = self.make_workspace()
        proc = self.run_cli(["--version", "-c", "a.txt"], cwd=root)
        self.assertIn(b"Verbose mode enabled", proc.stderr)
        self.assertIn(b"Biner in combine mode.", proc.stderr)
        self.assertTrue(proc.stdout.startswith(b"--!- BINER FILE BEGIN -!-- a.txt\n"))


class CLIInProcessTests(unittest.TestCase):
    def setUp(self):
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        self.root = Path(tmp.name)
        cwd = os.getcwd()
        os.chdir(self.root)
        self.addCleanup(os.chdir, cwd)

    def test_separate_creates_directory(self):
        (self.root / "bundle").write_bytes(S1_BUNDLE)
        main(["-s", "-d", "made", "bundle"], stdin=io.StringIO(""))
        self.assertEqual(sorted(os.listdir(self.root / "made")), ["a.txt", "b.txt"])

    def test_directory_creation_failure(self):
        (self.root / "blocker").write_text("not a directory")
        err = io.StringIO()
        with contextlib.redirect_stderr(err), self.assertRaises(SystemExit) as ctx:
            main(["-s", "-d", "blocker/sub", "x"], stdin=io.StringIO(""))
        self.assertNotEqual(ctx.exception.code, 0)
        self.assertIn("Failed to create directory", err.getvalue())

    def test_engine_failure_exit_code(self):
        (self.root / "bundle").write_bytes(b"--!- BINER FILE BEGIN -!-- dir/\nX--!- BINER FILE END -!-- dir/\n")
        err = io.StringIO()
        with contextlib.redirect_stderr(err), self.assertRaises(SystemExit) as ctx:
            main(["-s", "-d", "out", "bundle"], stdin=io.StringIO(""))
        self.assertEqual(ctx.exception.code, 2)
        self.assertIn("biner failed to perform the action you requested.", err.getvalue())

    def test_read_stdin_list_skips_blank_lines(self):
        items = read_stdin_list(io.StringIO("a.txt\n\nb.txt\n"), Settings())
        self.assertEqual(items, ["a.txt", "b.txt"])
        self.assertEqual(read_stdin_list(None, Settings()), [])

    def test_read_stdin_list_decodes_names_like_paths(self):
        stream = io.TextIOWrapper(io.BytesIO(b"a.txt\n\xff.txt\n"), encoding="utf-8")
        items = read_stdin_list(stream, Settings())
        self.assertEqual(items, ["a.txt", os.fsdecode(b"\xff.txt")])
        self.assertEqual(os.fsencode(items[1]), b"\xff.txt")

    def test_prepare_directory_normalises(self):
        self.assertEqual(prepare_directory("fresh", Settings()), "fresh" + os.sep)
        self.assertTrue((self.root / "fresh").is_dir())


if __name__ == "__main__":
    unittest.main()
