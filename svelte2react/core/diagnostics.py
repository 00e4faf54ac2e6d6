# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Diagnostic record shared by the converter and the CLI.

Fatal conversion errors and advisory warnings both render through this
structure so text and JSON output stay consistent.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .span import Span


@dataclass
class Diagnostic:
	"""A single conversion diagnostic (error or warning)."""

	message: str
	code: str | None = None
	# Pipeline stage that produced the diagnostic: "split", "markup", "script",
	# "template", "style", "assemble", "driver", or "convert" for warnings.
	phase: str | None = None
	severity: str = "error"
	span: Span = field(default_factory=Span)
	notes: list[str] = field(default_factory=list)

	def __post_init__(self) -> None:
		if self.span is None:  # type: ignore[unreachable]
			self.span = Span()

	def location(self) -> str:
		"""Render `line:col` (or `?:?` when unknown) for human-readable output."""
		line = self.span.line if self.span.line is not None else "?"
		column = self.span.column if self.span.column is not None else "?"
		return f"{line}:{column}"

	def to_json(self, file: str | None = None) -> dict:
		return {
			"phase": self.phase,
			"code": self.code,
			"message": self.message,
			"severity": self.severity,
			"file": self.span.file or file,
			"line": self.span.line,
			"column": self.span.column,
			"notes": list(self.notes),
		}


__all__ = ["Diagnostic"]
