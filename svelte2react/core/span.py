# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Source span representation used by errors and diagnostics.

A span is best-effort: markup nodes know character offsets into the markup
text, script nodes know the line/column lark reported. Either half may be
missing.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class Span:
	"""Represents a source span (offsets and/or line/column)."""

	file: Optional[str] = None
	line: Optional[int] = None
	column: Optional[int] = None
	start: Optional[int] = None
	end: Optional[int] = None

	@classmethod
	def from_loc(cls, loc: Any) -> "Span":
		"""
		Construct a Span from a parser location object.

		Accepts an existing Span (returned unchanged), anything with
		`line`/`column` attributes (script AST locations, lark tokens), or None.
		"""
		if loc is None:
			return cls()
		if isinstance(loc, cls):
			return loc
		return cls(
			file=getattr(loc, "file", None),
			line=getattr(loc, "line", None),
			column=getattr(loc, "column", None),
			start=getattr(loc, "start", None),
			end=getattr(loc, "end", None),
		)

	@classmethod
	def from_offsets(cls, text: str, start: int, end: int | None = None) -> "Span":
		"""Build a span from character offsets, deriving the 1-based line/column."""
		start = max(0, min(start, len(text)))
		line = text.count("\n", 0, start) + 1
		column = start - (text.rfind("\n", 0, start) + 1) + 1
		return cls(line=line, column=column, start=start, end=end if end is not None else start)

	@property
	def pos(self) -> tuple[int, int] | None:
		if self.start is None:
			return None
		return (self.start, self.end if self.end is not None else self.start)

	def is_known(self) -> bool:
		return self.line is not None or self.start is not None


__all__ = ["Span"]
