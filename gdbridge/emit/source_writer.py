"""Indentation-aware text buffer for emitted C# code."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, List

_INDENT = "    "


class SourceWriter:
    """Accumulates lines of C# with brace-delimited blocks."""

    def __init__(self, indent: int = 0) -> None:
        self._lines: List[str] = []
        self._indent = indent

    def line(self, text: str = "") -> None:
        if text:
            self._lines.append(_INDENT * self._indent + text)
        else:
            self._lines.append("")

    def lines(self, *texts: str) -> None:
        for text in texts:
            self.line(text)

    def blank(self) -> None:
        """Add an empty line unless the buffer is empty or already ends with one."""
        if self._lines and self._lines[-1] != "" and not self._lines[-1].endswith("{"):
            self._lines.append("")

    def open_block(self, header: str) -> None:
        self.line(header)
        self.line("{")
        self._indent += 1

    def close_block(self, footer: str = "}") -> None:
        if self._indent > 0:
            self._indent -= 1
        self.line(footer)

    @contextmanager
    def block(self, header: str, footer: str = "}") -> Iterator["SourceWriter"]:
        self.open_block(header)
        try:
            yield self
        finally:
            self.close_block(footer)

    def text(self) -> str:
        """Return the buffer contents; empty buffers yield an empty string."""
        if not self._lines:
            return ""
        return "\n".join(self._lines) + "\n"

    def __bool__(self) -> bool:
        return bool(self._lines)


__all__ = ["SourceWriter"]
