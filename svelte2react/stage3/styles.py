# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Style pass: component style blocks -> scoped CSS-in-JS declarations.

Each top-level rule must be a single class selector (`.name`). Rules for the
same class are merged. Every class yields

  const selector$name = css`
    prop: value;
    prop: value
  `;

and an alias entry `name -> selector$name` that template lowering uses to
rewrite `class` attributes. Declarations are deduplicated textually
(`prop: value` strings), keeping first-seen order.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from lark import Lark, Tree
from lark.exceptions import LarkError, UnexpectedInput

from svelte2react.core.errors import ConversionError, UnsupportedError
from svelte2react.core.identifiers import to_safe_identifier
from svelte2react.core.span import Span
from svelte2react.options import ConvertOptions
from svelte2react.script.ast import (
	BindingIdentifier,
	Identifier,
	Located,
	Stmt,
	TaggedTemplate,
	TemplateLiteral,
	VarDecl,
	VarDeclarator,
)
from svelte2react.splitter import StyleBlock

logger = logging.getLogger(__name__)

_GRAMMAR_PATH = Path(__file__).with_name("css.lark")
_GRAMMAR_SRC = _GRAMMAR_PATH.read_text()

_PARSER = Lark(
	_GRAMMAR_SRC,
	parser="lalr",
	start="start",
	propagate_positions=True,
	maybe_placeholders=False,
)

SELECTOR_PREFIX = "selector$"
CSS_TAG = "css"

_COMMENT = re.compile(r"/\*.*?\*/", re.S)
_AT_RULE = re.compile(r"""("[^"]*"|'[^']*')|(?P<at>@[A-Za-z-]+)""")
_VALUE_PART = re.compile(r"""("[^"]*"|'[^']*')|\s+""")
_CLASS_SELECTOR = re.compile(r"^\.(-?[A-Za-z_][A-Za-z0-9_-]*)$")


class StyleSyntaxError(ConversionError):
	code = "E-STYLE"
	phase = "style"


@dataclass
class Declaration:
	property: str
	value: str

	def text(self) -> str:
		return f"{self.property}: {self.value}"


@dataclass
class StyleRule:
	selector: str
	declarations: List[Declaration] = field(default_factory=list)
	loc: Optional[Located] = None


@dataclass
class StyleResult:
	statements: List[Stmt] = field(default_factory=list)
	# Class name (no leading dot) -> generated identifier.
	alias_map: Dict[str, str] = field(default_factory=dict)

	@property
	def uses_css(self) -> bool:
		return bool(self.statements)


def _strip_comments(text: str) -> str:
	# Keep line breaks so reported lines still match the source.
	return _COMMENT.sub(lambda m: "\n" * m.group(0).count("\n"), text)


def parse_stylesheet(text: str) -> List[StyleRule]:
	"""Parse stylesheet text into rules (selector plus ordered declarations)."""
	text = _strip_comments(text)
	at_rule = next((m for m in _AT_RULE.finditer(text) if m.group("at")), None)
	if at_rule:
		found = at_rule.group("at")
		span = Span.from_offsets(text, at_rule.start("at"), at_rule.end("at"))
		raise UnsupportedError(
			f"only support single class selector (found {found})",
			loc=span,
			phase="style",
		)
	try:
		tree = _PARSER.parse(text)
	except UnexpectedInput as err:
		line = getattr(err, "line", None) or 1
		column = getattr(err, "column", None) or 1
		raise StyleSyntaxError("malformed stylesheet", loc=Located(line, column)) from err
	except LarkError as err:
		raise StyleSyntaxError(f"malformed stylesheet: {err}") from err
	return [_build_rule(child) for child in tree.children if isinstance(child, Tree)]


def _normalize_value(text: str) -> str:
	# Whitespace runs collapse to one space; quoted strings are kept verbatim.
	return _VALUE_PART.sub(lambda m: m.group(1) or " ", text.strip())


def _build_rule(tree: Tree) -> StyleRule:
	selector = str(tree.children[0]).strip()
	declarations = []
	for child in tree.children[1:]:
		if isinstance(child, Tree) and child.data == "declaration":
			prop, value = child.children
			declarations.append(Declaration(property=str(prop), value=_normalize_value(str(value))))
	meta = tree.meta
	loc = Located(meta.line, meta.column) if not meta.empty else None
	return StyleRule(selector=selector, declarations=declarations, loc=loc)


def _template_raw(text: str) -> str:
	return text.replace("\\", "\\\\").replace("`", "\\`").replace("${", "\\${")


def _css_body(declarations: List[str]) -> str:
	return ";".join(f"\n  {d}" for d in declarations) + "\n"


class StylePass:
	"""Turns parsed rules into declarations plus the class alias map."""

	def __init__(self, options: Optional[ConvertOptions] = None) -> None:
		self.options = options or ConvertOptions()

	def run(self, blocks: List[StyleBlock]) -> StyleResult:
		for block in blocks:
			if block.lang is not None and block.lang.lower() != "css":
				self.options.warn(f'style lang="{block.lang}" is parsed as plain CSS')
		rules: List[StyleRule] = []
		for block in blocks:
			rules.extend(parse_stylesheet(block.code))

		merged: Dict[str, Dict[str, None]] = {}
		for rule in rules:
			m = _CLASS_SELECTOR.match(rule.selector)
			if not m:
				raise UnsupportedError("only support single class selector", loc=rule.loc, phase="style")
			seen = merged.setdefault(m.group(1), {})
			for decl in rule.declarations:
				seen.setdefault(decl.text(), None)

		result = StyleResult()
		for class_name, declarations in merged.items():
			ident = to_safe_identifier(SELECTOR_PREFIX + class_name)
			result.alias_map[class_name] = ident
			body = _template_raw(_css_body(list(declarations)))
			value = TaggedTemplate(tag=Identifier(CSS_TAG), template=TemplateLiteral(quasis=[body]))
			result.statements.append(
				VarDecl(kind="const", declarations=[VarDeclarator(target=BindingIdentifier(ident), init=value)])
			)
			logger.debug("style: .%s -> %s (%d declaration(s))", class_name, ident, len(declarations))
		return result


def convert_styles(blocks: List[StyleBlock], options: Optional[ConvertOptions] = None) -> StyleResult:
	return StylePass(options).run(blocks)


__all__ = [
	"Declaration",
	"StylePass",
	"StyleResult",
	"StyleRule",
	"StyleSyntaxError",
	"convert_styles",
	"parse_stylesheet",
]
