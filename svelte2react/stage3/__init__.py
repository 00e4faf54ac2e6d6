# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Stage 3: component styles -> CSS-in-JS declarations and the class alias map."""

from .styles import (
	Declaration,
	StylePass,
	StyleResult,
	StyleRule,
	StyleSyntaxError,
	convert_styles,
	parse_stylesheet,
)

__all__ = [
	"Declaration",
	"StylePass",
	"StyleResult",
	"StyleRule",
	"StyleSyntaxError",
	"convert_styles",
	"parse_stylesheet",
]
