# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Fatal conversion errors.

Every pass raises on the first violation; there is no recovery and no partial
output. The classes are `ValueError` subclasses (like the parser-level errors)
carrying a best-effort location so callers can turn them into a pinned
diagnostic instead of a traceback.
"""

from __future__ import annotations

from typing import Any, Optional

from .diagnostics import Diagnostic
from .span import Span


class ConversionError(ValueError):
	"""Base class for all fatal conversion errors."""

	code = "E-CONVERT"
	phase: Optional[str] = None

	def __init__(
		self,
		message: str,
		pos: tuple[int, int] | None = None,
		*,
		loc: Any = None,
		phase: str | None = None,
	) -> None:
		super().__init__(message)
		self.message = message
		span = Span.from_loc(loc)
		if pos is None:
			pos = span.pos
		self.pos = pos
		self.span = span
		if phase is not None:
			self.phase = phase

	def to_diagnostic(self) -> Diagnostic:
		return Diagnostic(
			message=self.message,
			code=self.code,
			phase=self.phase,
			severity="error",
			span=self.span,
		)


class UnsupportedError(ConversionError):
	"""
	A recognized input construct that is intentionally not converted.

	The message always starts with `Not supported: ` followed by the construct,
	e.g. `Not supported: named slot`.
	"""

	code = "E-UNSUPPORTED"

	def __init__(
		self,
		feature: str,
		pos: tuple[int, int] | None = None,
		*,
		loc: Any = None,
		phase: str | None = None,
	) -> None:
		self.feature = feature
		super().__init__(f"Not supported: {feature}", pos, loc=loc, phase=phase)


class UnrecognizedNodeError(ConversionError):
	"""A markup or attribute node kind outside the closed set lowering handles."""

	code = "E-UNKNOWN-NODE"
	phase = "template"

	def __init__(
		self,
		kind: str,
		pos: tuple[int, int] | None = None,
		*,
		loc: Any = None,
		detail: str | None = None,
	) -> None:
		self.kind = kind
		message = f"Unknown node type: {kind}"
		if detail:
			message = f"{message} ({detail})"
		super().__init__(message, pos, loc=loc)


class MalformedExpressionError(ConversionError):
	"""Script or expression text the script parser could not reduce."""

	code = "E-MALFORMED"
	phase = "script"

	def __init__(
		self,
		message: str,
		pos: tuple[int, int] | None = None,
		*,
		loc: Any = None,
		source: str | None = None,
	) -> None:
		super().__init__(message, pos, loc=loc)
		self.source = source


__all__ = [
	"ConversionError",
	"MalformedExpressionError",
	"UnrecognizedNodeError",
	"UnsupportedError",
]
