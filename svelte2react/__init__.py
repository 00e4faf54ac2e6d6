# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
svelte2react: Svelte single-file components -> React function components (TSX).

  convert(source, options=None) -> Module      output tree
  svelte_to_react(source, options=None) -> str printed TSX
  split(source) -> ComponentSource             markup / scripts / styles

Pipeline:
  splitter -> markup parser -> stage1 (script analysis, reactive rewrite)
           -> stage3 (styles) -> stage2 (template lowering) -> stage4 (assemble)
"""

from .core.errors import ConversionError, MalformedExpressionError, UnrecognizedNodeError, UnsupportedError
from .options import ConvertOptions, CssLibrary, JsxLibrary
from .splitter import ComponentSource, split
from .stage4.assemble import convert, svelte_to_react

__all__ = [
	"ComponentSource",
	"ConversionError",
	"ConvertOptions",
	"CssLibrary",
	"JsxLibrary",
	"MalformedExpressionError",
	"UnrecognizedNodeError",
	"UnsupportedError",
	"convert",
	"split",
	"svelte_to_react",
]
