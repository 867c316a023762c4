"""Tests for crash-safe file replacement."""

from __future__ import annotations

import errno
import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from fika.fileio import atomic_write_bytes


class AtomicWriteBytesTests(unittest.TestCase):
    def test_replaces_existing_contents(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "book.txt"
            path.write_bytes(b"old contents that are longer")

            atomic_write_bytes(path, b"new")

            self.assertEqual(path.read_bytes(), b"new")
            self.assertEqual(os.listdir(tmp), ["book.txt"])

    def test_failed_rename_removes_temporary_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "book.txt"
            path.write_bytes(b"old")

            with mock.patch("fika.fileio.os.replace", side_effect=OSError(errno.EXDEV, "Cross-device link")):
                with self.assertRaises(OSError):
                    atomic_write_bytes(path, b"new")

            self.assertEqual(path.read_bytes(), b"old")
            self.assertEqual(os.listdir(tmp), ["book.txt"])


if __name__ == "__main__":
    unittest.main()
