# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Shared building blocks used by every conversion stage."""

from .diagnostics import Diagnostic
from .errors import (
	ConversionError,
	MalformedExpressionError,
	UnrecognizedNodeError,
	UnsupportedError,
)
from .identifiers import capitalize, to_safe_identifier
from .span import Span

__all__ = [
	"ConversionError",
	"Diagnostic",
	"MalformedExpressionError",
	"Span",
	"UnrecognizedNodeError",
	"UnsupportedError",
	"capitalize",
	"to_safe_identifier",
]
