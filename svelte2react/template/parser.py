# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Markup scanner: component markup text -> template `Fragment`.

A hand-written recursive scanner. Elements nest by tag name, blocks nest by
`{#...}`/`{:...}`/`{/...}` tags, and every `{...}` expression is located by
brace matching that skips string and template literals before it is handed
to the script parser.
"""

from __future__ import annotations

import logging
import re
from typing import List, NoReturn, Optional, Tuple

from svelte2react.core.errors import ConversionError, MalformedExpressionError
from svelte2react.core.span import Span
from svelte2react.script.ast import Arrow, Expr, Pattern
from svelte2react.script.parser import parse_expression
from svelte2react.template.nodes import (
	Attribute,
	AttributeShorthand,
	AwaitBlock,
	Comment,
	ConstTag,
	DebugTag,
	Directive,
	EachBlock,
	ElseBlock,
	Element,
	EventHandler,
	Fragment,
	IfBlock,
	InlineComponent,
	KeyBlock,
	MetaTag,
	MustacheTag,
	RawMustacheTag,
	Slot,
	Spread,
	TemplateNode,
	Text,
)

logger = logging.getLogger(__name__)

VOID_ELEMENTS = frozenset(
	{
		"area",
		"base",
		"br",
		"col",
		"embed",
		"hr",
		"img",
		"input",
		"link",
		"meta",
		"param",
		"source",
		"track",
		"wbr",
	}
)

DIRECTIVE_PREFIXES = ("bind", "class", "use", "transition", "in", "out", "animate", "let", "style")

_TAG_NAME = re.compile(r"[A-Za-z][A-Za-z0-9:._-]*")
_ATTR_NAME = re.compile(r"[^\s=/>\"'{}]+")
_IDENT = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")
_BLOCK_TAG = re.compile(r"\{\s*([#:/@])\s*([A-Za-z]+)")


class MarkupSyntaxError(ConversionError):
	"""Markup the scanner cannot structure (unclosed tags, stray block tags, ...)."""

	code = "E-MARKUP"
	phase = "template"


def find_closing_brace(text: str, start: int) -> int:
	"""
	Index of the `}` matching the `{` just before `start`.

	Nested braces, brackets and parentheses are counted; quoted strings and
	template literals (with their own `${...}` holes) are skipped whole.
	"""
	depth = 0
	i = start
	n = len(text)
	while i < n:
		ch = text[i]
		if ch in "\"'":
			i = _skip_string(text, i)
			continue
		if ch == "`":
			i = _skip_template(text, i)
			continue
		if ch in "{([":
			depth += 1
		elif ch in ")]":
			depth -= 1
		elif ch == "}":
			if depth == 0:
				return i
			depth -= 1
		i += 1
	return -1


def _skip_string(text: str, start: int) -> int:
	quote = text[start]
	i = start + 1
	while i < len(text):
		if text[i] == "\\":
			i += 2
			continue
		if text[i] == quote or text[i] == "\n":
			return i + 1
		i += 1
	return i


def _skip_template(text: str, start: int) -> int:
	i = start + 1
	while i < len(text):
		ch = text[i]
		if ch == "\\":
			i += 2
			continue
		if ch == "`":
			return i + 1
		if ch == "$" and text.startswith("${", i):
			close = find_closing_brace(text, i + 2)
			if close < 0:
				return len(text)
			i = close + 1
			continue
		i += 1
	return i


def _split_top_level(text: str, sep: str) -> List[str]:
	"""Split on `sep` outside brackets and string literals."""
	parts: List[str] = []
	depth = 0
	last = 0
	i = 0
	while i < len(text):
		ch = text[i]
		if ch in "\"'":
			i = _skip_string(text, i)
			continue
		if ch == "`":
			i = _skip_template(text, i)
			continue
		if ch in "{([":
			depth += 1
		elif ch in "})]":
			depth -= 1
		elif depth == 0 and text.startswith(sep, i):
			parts.append(text[last:i])
			i += len(sep)
			last = i
			continue
		i += 1
	parts.append(text[last:])
	return parts


class MarkupParser:
	"""Single-use scanner over one markup string."""

	def __init__(self, source: str) -> None:
		self.source = source
		self.i = 0

	# Entry -------------------------------------------------------------------

	def parse(self) -> Fragment:
		children = self._parse_children()
		if self.i < len(self.source):
			self._fail_on_terminator()
		logger.debug("markup parsed: %d top-level node(s)", len(children))
		return Fragment(children=children, start=0, end=len(self.source))

	def _fail_on_terminator(self) -> None:
		if self.source.startswith("</", self.i):
			m = _TAG_NAME.match(self.source, self.i + 2)
			name = m.group(0) if m else "?"
			self._error(f"unexpected closing tag </{name}>", self.i)
		m = _BLOCK_TAG.match(self.source, self.i)
		tag = f"{{{m.group(1)}{m.group(2)}}}" if m else "{...}"
		self._error(f"unexpected block tag {tag}", self.i)

	# Errors ------------------------------------------------------------------

	def _error(self, message: str, start: int, end: Optional[int] = None) -> NoReturn:
		span = Span.from_offsets(self.source, start, end)
		raise MarkupSyntaxError(message, span.pos, loc=span)

	def _expr(self, text: str, start: int) -> Expr:
		try:
			return parse_expression(text)
		except MalformedExpressionError as err:
			span = Span.from_offsets(self.source, start, start + len(text))
			raise MalformedExpressionError(
				f"malformed expression {text.strip()!r}: {err.message}",
				span.pos,
				loc=span,
				source=text,
			) from err

	# Children ----------------------------------------------------------------

	def _at_terminator(self) -> bool:
		"""True at a closing tag or a `{:...}` / `{/...}` block tag."""
		src = self.source
		if src.startswith("</", self.i):
			return True
		m = _BLOCK_TAG.match(src, self.i)
		return bool(m) and m.group(1) in ":/"

	def _parse_children(self) -> List[TemplateNode]:
		children: List[TemplateNode] = []
		src = self.source
		while self.i < len(src) and not self._at_terminator():
			if src.startswith("<!--", self.i):
				children.append(self._parse_comment())
			elif src[self.i] == "<" and _TAG_NAME.match(src, self.i + 1):
				children.append(self._parse_tag())
			elif src[self.i] == "{":
				children.append(self._parse_mustache())
			else:
				children.append(self._parse_text())
		return children

	def _parse_text(self) -> Text:
		src = self.source
		start = self.i
		i = start + 1
		while i < len(src):
			if src[i] == "{":
				break
			if src[i] == "<" and (src.startswith("<!--", i) or src.startswith("</", i) or _TAG_NAME.match(src, i + 1)):
				break
			i += 1
		self.i = i
		return Text(data=src[start:i], start=start, end=i)

	def _parse_comment(self) -> Comment:
		start = self.i
		end = self.source.find("-->", start + 4)
		if end < 0:
			self._error("unclosed comment", start)
		self.i = end + 3
		return Comment(data=self.source[start + 4 : end], start=start, end=self.i)

	# Mustache tags and blocks --------------------------------------------------

	def _read_braced(self) -> Tuple[str, int, int]:
		"""Consume `{...}` at the cursor; return (inner text, inner start, tag start)."""
		start = self.i
		close = find_closing_brace(self.source, start + 1)
		if close < 0:
			self._error("unclosed '{'", start)
		self.i = close + 1
		return self.source[start + 1 : close], start + 1, start

	def _parse_mustache(self) -> TemplateNode:
		m = _BLOCK_TAG.match(self.source, self.i)
		if m and m.group(1) == "#":
			return self._parse_block(m.group(2))
		if m and m.group(1) == "@":
			return self._parse_special(m.group(2))
		inner, inner_start, start = self._read_braced()
		return MustacheTag(expression=self._expr(inner, inner_start), start=start, end=self.i)

	def _parse_special(self, kind: str) -> TemplateNode:
		inner, inner_start, start = self._read_braced()
		body = inner.lstrip()[1 + len(kind) :]
		body_start = inner_start + (len(inner) - len(inner.lstrip())) + 1 + len(kind)
		if kind == "html":
			return RawMustacheTag(expression=self._expr(body, body_start), start=start, end=self.i)
		if kind == "debug":
			names = [n.strip() for n in body.split(",") if n.strip()]
			for name in names:
				if not _IDENT.match(name):
					self._error(f"{{@debug}} only accepts identifiers, got {name!r}", start, self.i)
			return DebugTag(identifiers=names, start=start, end=self.i)
		if kind == "const":
			return ConstTag(source=body.strip(), start=start, end=self.i)
		self._error(f"unknown tag {{@{kind}}}", start, self.i)
		raise AssertionError("unreachable")

	def _block_header(self, kind: str) -> Tuple[str, int, int]:
		"""Consume `{#kind ...}`; return (header text after the keyword, its offset, tag start)."""
		inner, inner_start, start = self._read_braced()
		stripped = inner.lstrip()
		offset = inner_start + (len(inner) - len(stripped)) + 1 + len(kind)
		return stripped[1 + len(kind) :], offset, start

	def _expect_block_tag(self, sigil: str, kind: str) -> Tuple[str, int]:
		"""Consume `{<sigil><kind> ...}` at the cursor; return (rest text, its offset)."""
		m = _BLOCK_TAG.match(self.source, self.i)
		if not m or m.group(1) != sigil or m.group(2) != kind:
			if self.i >= len(self.source):
				self._error(f"expected {{{sigil}{kind}}} before end of markup", self.i)
			self._fail_on_terminator_expecting(f"{{{sigil}{kind}}}")
		inner, inner_start, _ = self._read_braced()
		stripped = inner.lstrip()
		offset = inner_start + (len(inner) - len(stripped)) + 1 + len(kind)
		return stripped[1 + len(kind) :], offset

	def _fail_on_terminator_expecting(self, expected: str) -> None:
		m = _BLOCK_TAG.match(self.source, self.i)
		found = f"{{{m.group(1)}{m.group(2)}}}" if m else self.source[self.i : self.i + 10]
		self._error(f"expected {expected}, found {found}", self.i)

	def _peek_block_tag(self) -> Optional[Tuple[str, str]]:
		m = _BLOCK_TAG.match(self.source, self.i)
		if not m:
			return None
		return m.group(1), m.group(2)

	def _parse_block(self, kind: str) -> TemplateNode:
		if kind == "if":
			header, offset, start = self._block_header(kind)
			return self._parse_if_rest(header, offset, start, elseif=False)
		if kind == "each":
			return self._parse_each()
		if kind == "key":
			header, offset, start = self._block_header(kind)
			children = self._parse_children()
			self._expect_block_tag("/", "key")
			return KeyBlock(expression=self._expr(header, offset), children=children, start=start, end=self.i)
		if kind == "await":
			return self._parse_await()
		start = self.i
		self._error(f"unknown block {{#{kind}}}", start)
		raise AssertionError("unreachable")

	def _parse_if_rest(self, header: str, offset: int, start: int, elseif: bool) -> IfBlock:
		expression = self._expr(header, offset)
		children = self._parse_children()
		block = IfBlock(expression=expression, children=children, elseif=elseif, start=start)
		peek = self._peek_block_tag()
		if peek == (":", "else"):
			else_start = self.i
			rest, rest_offset = self._expect_block_tag(":", "else")
			stripped = rest.lstrip()
			if stripped.startswith("if") and (len(stripped) == 2 or not stripped[2].isalnum()):
				cond_offset = rest_offset + (len(rest) - len(stripped)) + 2
				nested = self._parse_if_rest(stripped[2:], cond_offset, else_start, elseif=True)
				block.else_ = ElseBlock(children=[nested], start=else_start, end=nested.end)
				block.end = self.i
				return block
			else_children = self._parse_children()
			block.else_ = ElseBlock(children=else_children, start=else_start, end=self.i)
		self._expect_block_tag("/", "if")
		block.end = self.i
		return block

	def _parse_each(self) -> EachBlock:
		header, offset, start = self._block_header("each")
		parts = _split_top_level(header, " as ")
		if len(parts) < 2:
			self._error("{#each} requires 'as'", start, self.i)
		collection_src = " as ".join(parts[:-1])
		binding_src = parts[-1]
		binding_offset = offset + len(collection_src) + 4
		expression = self._expr(collection_src, offset)

		key: Optional[Expr] = None
		stripped = binding_src.rstrip()
		if stripped.endswith(")"):
			open_at = _matching_open_paren(stripped)
			if open_at > 0:
				key = self._expr(stripped[open_at + 1 : -1], binding_offset + open_at + 1)
				binding_src = stripped[:open_at]

		pieces = _split_top_level(binding_src, ",")
		context_src = pieces[0]
		index: Optional[str] = None
		if len(pieces) == 2:
			index = pieces[1].strip()
			if not _IDENT.match(index):
				self._error(f"{{#each}} index must be an identifier, got {index!r}", start, self.i)
		elif len(pieces) > 2:
			self._error("{#each} accepts at most an item and an index binding", start, self.i)
		context = self._pattern(context_src, binding_offset)

		children = self._parse_children()
		block = EachBlock(expression=expression, context=context, children=children, index=index, key=key, start=start)
		if self._peek_block_tag() == (":", "else"):
			else_start = self.i
			self._expect_block_tag(":", "else")
			block.else_ = ElseBlock(children=self._parse_children(), start=else_start, end=self.i)
		self._expect_block_tag("/", "each")
		block.end = self.i
		return block

	def _pattern(self, text: str, offset: int) -> Pattern:
		"""Parse an each-block item binding by parsing it as an arrow parameter."""
		arrow = self._expr(f"({text.strip()}) => 0", offset)
		if isinstance(arrow, Arrow) and len(arrow.params) == 1:
			return arrow.params[0].pattern
		self._error(f"invalid {{#each}} binding {text.strip()!r}", offset, offset + len(text))

	def _parse_await(self) -> AwaitBlock:
		header, _offset, start = self._block_header("await")
		self._parse_children()
		while self._peek_block_tag() in {(":", "then"), (":", "catch")}:
			_sigil, kind = self._peek_block_tag()
			self._expect_block_tag(":", kind)
			self._parse_children()
		self._expect_block_tag("/", "await")
		source = _split_top_level(header, " then ")[0]
		return AwaitBlock(expression_source=source.strip(), start=start, end=self.i)

	# Tags --------------------------------------------------------------------

	def _parse_tag(self) -> TemplateNode:
		src = self.source
		start = self.i
		m = _TAG_NAME.match(src, start + 1)
		if m is None:
			self._error("expected a tag name", start)
		name = m.group(0)
		self.i = m.end()
		attributes = self._parse_attributes(name)
		self_closing = False
		if src.startswith("/>", self.i):
			self.i += 2
			self_closing = True
		elif src.startswith(">", self.i):
			self.i += 1
		else:
			self._error(f"unclosed start tag <{name}>", start)

		children: List[TemplateNode] = []
		if not self_closing and name.lower() not in VOID_ELEMENTS:
			children = self._parse_children()
			if not src.startswith("</", self.i):
				self._error(f"<{name}> was left open", start)
			m_close = _TAG_NAME.match(src, self.i + 2)
			close_name = m_close.group(0) if m_close else ""
			if close_name != name:
				self._error(f"</{close_name}> attempted to close <{name}>", self.i)
			gt = src.find(">", m_close.end() if m_close else self.i)
			if gt < 0:
				self._error(f"unclosed end tag </{name}>", self.i)
			self.i = gt + 1
		return self._make_tag(name, attributes, children, self_closing, start)

	def _make_tag(self, name, attributes, children, self_closing, start) -> TemplateNode:
		end = self.i
		if name == "slot":
			return Slot(attributes=attributes, children=children, start=start, end=end)
		if name == "svelte:self":
			return InlineComponent(
				name=name,
				attributes=attributes,
				children=children,
				self_closing=self_closing,
				start=start,
				end=end,
			)
		if name == "svelte:component":
			this = next((a for a in attributes if isinstance(a, Attribute) and a.name == "this"), None)
			if this is None:
				self._error("<svelte:component> requires a 'this' attribute", start, end)
			if this.value is True or len(this.value) != 1 or not isinstance(this.value[0], MustacheTag):
				self._error("<svelte:component this={...}> requires an expression", start, end)
			expression = this.value[0].expression
			rest = [a for a in attributes if a is not this]
			return InlineComponent(
				name=name,
				attributes=rest,
				children=children,
				expression=expression,
				self_closing=self_closing,
				start=start,
				end=end,
			)
		if name.startswith("svelte:"):
			return MetaTag(name=name, attributes=attributes, children=children, start=start, end=end)
		if name[0].isupper() or "." in name:
			return InlineComponent(
				name=name,
				attributes=attributes,
				children=children,
				self_closing=self_closing,
				start=start,
				end=end,
			)
		return Element(name=name, attributes=attributes, children=children, self_closing=self_closing, start=start, end=end)

	# Attributes ----------------------------------------------------------------

	def _skip_ws(self) -> None:
		src = self.source
		while self.i < len(src) and src[self.i].isspace():
			self.i += 1

	def _parse_attributes(self, tag: str) -> List:
		src = self.source
		attributes: List = []
		while True:
			self._skip_ws()
			if self.i >= len(src):
				self._error(f"unclosed start tag <{tag}>", self.i)
			if src.startswith("/>", self.i) or src[self.i] == ">":
				return attributes
			if src[self.i] == "{":
				attributes.append(self._parse_brace_attribute())
				continue
			m = _ATTR_NAME.match(src, self.i)
			if not m:
				self._error(f"unexpected character {src[self.i]!r} in <{tag}>", self.i)
			start = self.i
			name = m.group(0)
			self.i = m.end()
			value: object = True
			raw_value: Optional[str] = None
			self._skip_ws()
			if src.startswith("=", self.i):
				self.i += 1
				self._skip_ws()
				value_start = self.i
				value = self._parse_attribute_value()
				raw_value = src[value_start : self.i]
			attributes.append(self._classify_attribute(name, value, raw_value, start))

	def _parse_brace_attribute(self):
		inner, inner_start, start = self._read_braced()
		stripped = inner.strip()
		if stripped.startswith("..."):
			spread_offset = inner_start + inner.index("...") + 3
			return Spread(expression=self._expr(stripped[3:], spread_offset), start=start, end=self.i)
		if not _IDENT.match(stripped):
			self._error(f"attribute shorthand must be an identifier, got {stripped!r}", start, self.i)
		return AttributeShorthand(name=stripped, start=start, end=self.i)

	def _parse_attribute_value(self) -> List[TemplateNode]:
		src = self.source
		if self.i < len(src) and src[self.i] in "\"'":
			quote = src[self.i]
			self.i += 1
			chunks = self._parse_value_chunks(lambda i: src[i] == quote)
			if self.i >= len(src):
				self._error("unclosed attribute value", self.i)
			self.i += 1
			return chunks
		if src.startswith("{", self.i):
			inner, inner_start, start = self._read_braced()
			return [MustacheTag(expression=self._expr(inner, inner_start), start=start, end=self.i)]
		return self._parse_value_chunks(lambda i: src[i].isspace() or src[i] == ">" or src.startswith("/>", i))

	def _parse_value_chunks(self, stop) -> List[TemplateNode]:
		src = self.source
		chunks: List[TemplateNode] = []
		text_start = self.i
		while self.i < len(src) and not stop(self.i):
			if src[self.i] == "{":
				if self.i > text_start:
					chunks.append(Text(data=src[text_start : self.i], start=text_start, end=self.i))
				inner, inner_start, start = self._read_braced()
				chunks.append(MustacheTag(expression=self._expr(inner, inner_start), start=start, end=self.i))
				text_start = self.i
				continue
			self.i += 1
		if self.i > text_start:
			chunks.append(Text(data=src[text_start : self.i], start=text_start, end=self.i))
		return chunks

	def _classify_attribute(self, name: str, value, raw_value: Optional[str], start: int):
		end = self.i
		if ":" in name:
			prefix, _, rest = name.partition(":")
			if prefix == "on":
				event, *modifiers = rest.split("|")
				expression: Optional[Expr] = None
				if value is not True:
					if len(value) != 1 or not isinstance(value[0], MustacheTag):
						self._error(f"on:{event} handler must be an expression", start, end)
					expression = value[0].expression
				return EventHandler(name=event, expression=expression, modifiers=modifiers, start=start, end=end)
			if prefix in DIRECTIVE_PREFIXES:
				return Directive(kind=prefix, name=rest, source=raw_value, start=start, end=end)
		return Attribute(name=name, value=value, start=start, end=end)


def parse_markup(source: str) -> Fragment:
	"""Parse component markup (scripts and styles already removed)."""
	return MarkupParser(source).parse()


def _matching_open_paren(text: str) -> int:
	"""Index of the `(` matching the final `)` of `text`, or -1."""
	depth = 0
	for i in range(len(text) - 1, -1, -1):
		ch = text[i]
		if ch == ")":
			depth += 1
		elif ch == "(":
			depth -= 1
			if depth == 0:
				return i
	return -1


__all__ = ["MarkupParser", "MarkupSyntaxError", "find_closing_brace", "parse_markup"]
