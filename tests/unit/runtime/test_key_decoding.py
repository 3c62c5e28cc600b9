"""Regression tests for raw-key decoding.

Covers ESC timing, paging and Home/End sequences, and control-key tokens.
"""

from __future__ import annotations

import os
import unittest

from markview.runtime import keys


def _read_all(data: bytes, count: int = 1) -> list[str]:
    read_fd, write_fd = os.pipe()
    try:
        os.write(write_fd, data)
        return [keys.read_key(read_fd, timeout_ms=20) for _ in range(count)]
    finally:
        os.close(read_fd)
        os.close(write_fd)


class ReadKeyTests(unittest.TestCase):
    def setUp(self) -> None:
        keys._PENDING_BYTES.clear()

    def tearDown(self) -> None:
        keys._PENDING_BYTES.clear()

    def test_timeout_returns_empty_token(self) -> None:
        self.assertEqual(_read_all(b""), [""])

    def test_arrow_and_paging_sequences(self) -> None:
        cases = {
            b"\x1b[A": "UP",
            b"\x1b[B": "DOWN",
            b"\x1b[5~": "PAGE_UP",
            b"\x1b[6~": "PAGE_DOWN",
            b"\x1b[H": "HOME",
            b"\x1b[F": "END",
            b"\x1b[1~": "HOME",
            b"\x1b[4~": "END",
            b"\x1bOH": "HOME",
            b"\x1bOF": "END",
        }
        for data, expected in cases.items():
            with self.subTest(data=data):
                self.assertEqual(_read_all(data), [expected])

    def test_control_keys(self) -> None:
        cases = {
            b"\x06": "CTRL_F",
            b"\x07": "CTRL_G",
            b"\x0e": "CTRL_N",
            b"\x10": "CTRL_P",
            b"\x04": "CTRL_D",
            b"\x15": "CTRL_U",
            b"\x7f": "BACKSPACE",
            b"\r": "ENTER_CR",
            b"\n": "ENTER_LF",
        }
        for data, expected in cases.items():
            with self.subTest(data=data):
                self.assertEqual(_read_all(data), [expected])

    def test_lone_escape(self) -> None:
        self.assertEqual(_read_all(b"\x1b"), ["ESC"])

    def test_escape_does_not_swallow_following_printable_key(self) -> None:
        self.assertEqual(_read_all(b"\x1ba", count=2), ["ESC", "a"])

    def test_modified_sequences_are_drained(self) -> None:
        self.assertEqual(_read_all(b"\x1b[1;5Aj", count=2), ["ESC", "j"])

    def test_multibyte_utf8_character(self) -> None:
        self.assertEqual(_read_all("é".encode("utf-8")), ["é"])


if __name__ == "__main__":
    unittest.main()
