"""Tests for CLI parsing, fatal-error reporting, and exit-time saving."""

from __future__ import annotations

import io
import json
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from fika import cli
from fika.errors import PANIC_EXIT_CODE, BookLoadError, StoreError


class _Tty(io.StringIO):
    def __init__(self, is_tty: bool) -> None:
        super().__init__()
        self._is_tty = is_tty

    def isatty(self) -> bool:
        return self._is_tty

    def fileno(self) -> int:
        return 0


class ParserTests(unittest.TestCase):
    def test_parses_path_and_flags(self) -> None:
        args = cli.build_parser().parse_args(["book.txt", "--keep-blank-lines", "--debug"])

        self.assertEqual(args.path, "book.txt")
        self.assertTrue(args.keep_blank_lines)
        self.assertTrue(args.debug)

    def test_keep_blank_lines_defaults_to_unset(self) -> None:
        args = cli.build_parser().parse_args(["book.txt"])

        self.assertIsNone(args.keep_blank_lines)
        self.assertFalse(args.debug)

    def test_path_is_required(self) -> None:
        with mock.patch("sys.stderr", new_callable=io.StringIO), self.assertRaises(SystemExit) as ctx:
            cli.build_parser().parse_args([])
        self.assertEqual(ctx.exception.code, 2)

    def test_version_flag(self) -> None:
        with mock.patch("sys.stdout", new_callable=io.StringIO) as out, self.assertRaises(SystemExit) as ctx:
            cli.build_parser().parse_args(["--version"])
        self.assertEqual(ctx.exception.code, 0)
        self.assertIn("fika ", out.getvalue())


class MainTests(unittest.TestCase):
    def test_fatal_error_is_reported_as_panic(self) -> None:
        with mock.patch("fika.cli.read_book", side_effect=BookLoadError("Book not found: /x.txt")), mock.patch(
            "fika.cli.configure_logging"
        ), mock.patch("sys.stderr", new_callable=io.StringIO) as err:
            with self.assertRaises(SystemExit) as ctx:
                cli.main(["/x.txt"])

        self.assertEqual(ctx.exception.code, PANIC_EXIT_CODE)
        self.assertIn("fika panic: Book not found: /x.txt", err.getvalue())

    def test_non_terminal_is_rejected_before_loading(self) -> None:
        with mock.patch("fika.cli.sys.stdin", _Tty(False)), mock.patch("fika.cli.sys.stdout", _Tty(True)), mock.patch(
            "fika.cli.ProgressStore.load"
        ) as load_mock, mock.patch("fika.cli.configure_logging"), mock.patch(
            "fika.cli.sys.stderr", new_callable=io.StringIO
        ) as err:
            with self.assertRaises(SystemExit) as ctx:
                cli.main(["book.txt"])

        self.assertEqual(ctx.exception.code, PANIC_EXIT_CODE)
        self.assertIn("interactive terminal", err.getvalue())
        load_mock.assert_not_called()

    def test_debug_flag_enables_logging(self) -> None:
        with mock.patch("fika.cli.read_book"), mock.patch("fika.cli.configure_logging") as configure_mock:
            cli.main(["book.txt", "--debug"])
        configure_mock.assert_called_once_with(True)


class ReadBookTests(unittest.TestCase):
    def _read_book(self, tmp: str, run_session_side_effect, keep_blank_lines=None) -> Path:
        root = Path(tmp)
        book = root / "novel.txt"
        book.write_text("\n".join(f"line {i}" for i in range(60)), encoding="utf-8")
        store_path = root / "progress.json"
        with mock.patch("fika.config.STORE_PATH", store_path), mock.patch(
            "fika.config.CONFIG_PATH", root / "config.json"
        ), mock.patch("fika.cli.sys.stdin", _Tty(True)), mock.patch("fika.cli.sys.stdout", _Tty(True)), mock.patch(
            "fika.cli.TerminalController"
        ), mock.patch("fika.cli.run_session", side_effect=run_session_side_effect):
            cli.read_book(str(book), keep_blank_lines)
        return store_path

    def test_progress_is_saved_after_session(self) -> None:
        def fake_run(session, _terminal, _fd):
            session.state.offset = 20

        with tempfile.TemporaryDirectory() as tmp:
            store_path = self._read_book(tmp, fake_run)
            data = json.loads(store_path.read_text(encoding="utf-8"))

        self.assertEqual(data["books"][0]["progress"], 20)
        self.assertTrue(data["books"][0]["path"].endswith("novel.txt"))

    def test_progress_is_saved_when_session_is_terminated(self) -> None:
        def fake_run(session, _terminal, _fd):
            session.state.offset = 7
            raise SystemExit(143)

        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(SystemExit):
                self._read_book(tmp, fake_run)
            data = json.loads((Path(tmp) / "progress.json").read_text(encoding="utf-8"))

        self.assertEqual(data["books"][0]["progress"], 7)

    def test_save_failure_on_exit_surfaces_as_store_error(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with mock.patch("fika.cli.save_progress", side_effect=StoreError("disk full")):
                with self.assertRaises(StoreError):
                    self._read_book(tmp, lambda *_args: None)


if __name__ == "__main__":
    unittest.main()
