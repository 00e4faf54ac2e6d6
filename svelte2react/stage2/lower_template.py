# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Template lowering: template tree -> JSX expression tree.

Pipeline placement:
  analyze -> reactive rewrite -> [template lowering] -> assemble

The lowering is a closed switch over the template node classes; anything
else (directives, `<svelte:*>` meta tags, stray `{:else}`) raises
`UnrecognizedNodeError` naming the node.

  {expr}                  -> {expr}
  {@html e}               -> <div dangerouslySetInnerHTML={{ __html: e }} />
  {@debug a, b}           -> {console.log({ a, b })}
  {#if c}A{:else}B{/if}   -> {c ? <>A</> : <>B</>}   (no else: `undefined`)
  {#each xs as x, i (k)}  -> {xs.map((x, i) => <Fragment key={k}>...</Fragment>)}
  {#key k}...{/key}       -> <Fragment key={k}>...</Fragment>
  <slot />                -> {children}
  on:click={h}            -> onClick={h}
  class="a b"             -> className={[selector$a, "b"].join(" ")}

Template expressions go through the script's reactive rewriter, so markup
handlers assigning state call the setters.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union

from svelte2react.core.errors import UnrecognizedNodeError, UnsupportedError
from svelte2react.core.identifiers import capitalize, to_safe_identifier
from svelte2react.core.span import Span
from svelte2react.options import ConvertOptions
from svelte2react.script.ast import (
	ArrayLiteral,
	Arrow,
	Binary,
	BindingIdentifier,
	Call,
	Conditional,
	Expr,
	Identifier,
	JsxAttribute,
	JsxElement,
	JsxExpressionContainer,
	JsxFragment,
	JsxSpreadAttribute,
	JsxText,
	Member,
	ObjectLiteral,
	Param,
	Property,
	StringLiteral,
	TemplateLiteral,
)
from svelte2react.script.visit import bound_names
from svelte2react.stage1.context import FRAGMENT, FeatureSet, ScriptAnalysis
from svelte2react.stage1.reactive import ReactiveRewriter
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
from svelte2react.template.parser import VOID_ELEMENTS

logger = logging.getLogger(__name__)

CHILDREN = "children"
SELF_TAG = "svelte:self"
DYNAMIC_TAG = "svelte:component"
RAW_HTML_ATTRIBUTE = "dangerouslySetInnerHTML"
RAW_HTML_WRAPPER = "div"

EVENT_NAMES: Dict[str, str] = {
	"click": "onClick",
	"dblclick": "onDoubleClick",
	"input": "onInput",
	"change": "onChange",
	"submit": "onSubmit",
	"reset": "onReset",
	"keydown": "onKeyDown",
	"keyup": "onKeyUp",
	"keypress": "onKeyPress",
	"focus": "onFocus",
	"blur": "onBlur",
	"mouseenter": "onMouseEnter",
	"mouseleave": "onMouseLeave",
	"mousedown": "onMouseDown",
	"mouseup": "onMouseUp",
	"mousemove": "onMouseMove",
	"mouseover": "onMouseOver",
	"mouseout": "onMouseOut",
	"contextmenu": "onContextMenu",
	"wheel": "onWheel",
	"scroll": "onScroll",
	"touchstart": "onTouchStart",
	"touchend": "onTouchEnd",
	"touchmove": "onTouchMove",
	"pointerdown": "onPointerDown",
	"pointerup": "onPointerUp",
	"pointermove": "onPointerMove",
	"dragstart": "onDragStart",
	"dragend": "onDragEnd",
	"dragover": "onDragOver",
	"drop": "onDrop",
	"load": "onLoad",
	"error": "onError",
}

ATTRIBUTE_NAMES: Dict[str, str] = {
	"class": "className",
	"for": "htmlFor",
	"tabindex": "tabIndex",
	"readonly": "readOnly",
	"maxlength": "maxLength",
	"colspan": "colSpan",
	"rowspan": "rowSpan",
	"contenteditable": "contentEditable",
	"autocomplete": "autoComplete",
	"autofocus": "autoFocus",
}

# Svelte AST names for directive prefixes, used in error messages.
DIRECTIVE_KINDS: Dict[str, str] = {
	"bind": "Binding",
	"class": "Class",
	"style": "StyleDirective",
	"use": "Action",
	"transition": "Transition",
	"in": "Transition",
	"out": "Transition",
	"animate": "Animation",
	"let": "Let",
}

_MARKUP_IN_COMMENT = re.compile(r"[<{]")


@dataclass
class TemplateResult:
	jsx: JsxFragment
	features: FeatureSet = field(default_factory=FeatureSet)
	uses_self_reference: bool = False
	uses_default_slot: bool = False


def event_prop_name(event: str) -> str:
	"""`click` -> `onClick`; unlisted events get `on` + capitalized name."""
	return EVENT_NAMES.get(event) or to_safe_identifier("on" + capitalize(event))


def _template_raw(text: str) -> str:
	return text.replace("\\", "\\\\").replace("`", "\\`").replace("${", "\\${")


class TemplateLowering:
	"""Lowers one component's template; holds the flags the assembler reads."""

	def __init__(
		self,
		rewriter: ReactiveRewriter,
		alias_map: Optional[Dict[str, str]] = None,
		options: Optional[ConvertOptions] = None,
		markup: str = "",
	) -> None:
		self.rewriter = rewriter
		self.alias_map = alias_map or {}
		self.options = options or rewriter.options
		self.markup = markup
		self.result = TemplateResult(jsx=JsxFragment())

	def lower(self, root: Fragment) -> TemplateResult:
		self.result.jsx = JsxFragment(children=self._children(root.children))
		logger.debug(
			"template lowering: %d top-level node(s), features=%s, self=%s, slot=%s",
			len(self.result.jsx.children),
			list(self.result.features),
			self.result.uses_self_reference,
			self.result.uses_default_slot,
		)
		return self.result

	def _span(self, node: TemplateNode) -> Optional[Span]:
		if not self.markup:
			return None
		return Span.from_offsets(self.markup, node.start, node.end)

	def _unsupported(self, feature: str, node: TemplateNode) -> UnsupportedError:
		return UnsupportedError(feature, loc=self._span(node), phase="template")

	def _expr(self, expr: Expr) -> Expr:
		return self.rewriter.rewrite_expression(expr)

	# Children ----------------------------------------------------------------

	def _children(self, nodes: List[TemplateNode]) -> List[Expr]:
		out: List[Expr] = []
		for node in nodes:
			lowered = self._node(node)
			if lowered is not None:
				out.append(lowered)
		return out

	def _node(self, node: TemplateNode) -> Optional[Expr]:
		if isinstance(node, Text):
			return JsxText(node.data)
		if isinstance(node, Comment):
			if _MARKUP_IN_COMMENT.search(node.data):
				self.options.warn("dropping template comment containing markup")
			return None
		if isinstance(node, MustacheTag):
			return JsxExpressionContainer(self._expr(node.expression))
		if isinstance(node, RawMustacheTag):
			html = ObjectLiteral(properties=[Property(key=Identifier("__html"), value=self._expr(node.expression))])
			attribute = JsxAttribute(RAW_HTML_ATTRIBUTE, JsxExpressionContainer(html))
			return JsxElement(RAW_HTML_WRAPPER, attributes=[attribute], self_closing=True)
		if isinstance(node, DebugTag):
			fields = [
				Property(key=Identifier(name), value=Identifier(name), shorthand=True)
				for name in node.identifiers
			]
			log = Member(object=Identifier("console"), property="log")
			return JsxExpressionContainer(Call(callee=log, args=[ObjectLiteral(properties=fields)]))
		if isinstance(node, ConstTag):
			raise self._unsupported("{@const}", node)
		if isinstance(node, IfBlock):
			return JsxExpressionContainer(self._conditional(node))
		if isinstance(node, EachBlock):
			return JsxExpressionContainer(self._each(node))
		if isinstance(node, KeyBlock):
			self.result.features.add(FRAGMENT)
			return JsxElement(
				FRAGMENT,
				attributes=[JsxAttribute("key", JsxExpressionContainer(self._expr(node.expression)))],
				children=self._children(node.children),
			)
		if isinstance(node, AwaitBlock):
			raise self._unsupported("{#await}", node)
		if isinstance(node, Slot):
			return self._slot(node)
		if isinstance(node, InlineComponent):
			return self._component(node)
		if isinstance(node, Element):
			return self._element(node)
		if isinstance(node, MetaTag):
			raise UnrecognizedNodeError(node.name, loc=self._span(node))
		if isinstance(node, ElseBlock):
			raise UnrecognizedNodeError("ElseBlock", loc=self._span(node))
		raise UnrecognizedNodeError(type(node).__name__, loc=self._span(node))

	# Blocks ------------------------------------------------------------------

	def _conditional(self, node: IfBlock) -> Conditional:
		consequent = JsxFragment(children=self._children(node.children))
		if node.else_ is not None:
			alternate: Expr = JsxFragment(children=self._children(node.else_.children))
		else:
			alternate = Identifier("undefined")
		return Conditional(test=self._expr(node.expression), consequent=consequent, alternate=alternate)

	def _each(self, node: EachBlock) -> Call:
		if node.else_ is not None:
			raise self._unsupported("{:else} in {#each}", node.else_)
		collection = self._expr(node.expression)
		params = [Param(pattern=node.context)]
		local = bound_names(node.context)
		if node.index is not None:
			params.append(Param(pattern=BindingIdentifier(node.index)))
			local.append(node.index)

		with self.rewriter.scope(local):
			children = self._children(node.children)
			key: Optional[Expr] = None
			if node.key is not None:
				key = self._expr(node.key)
			elif node.index is not None:
				key = Identifier(node.index)

		if key is not None:
			self.result.features.add(FRAGMENT)
			body: Expr = JsxElement(
				FRAGMENT,
				attributes=[JsxAttribute("key", JsxExpressionContainer(key))],
				children=children,
			)
		else:
			body = JsxFragment(children=children)
		return Call(callee=Member(object=collection, property="map"), args=[Arrow(params=params, body=body)])

	def _slot(self, node: Slot) -> JsxExpressionContainer:
		for attr in node.attributes:
			if isinstance(attr, Attribute) and attr.name == "name":
				raise self._unsupported("named slot", node)
			raise self._unsupported("slot props", attr)
		self.result.uses_default_slot = True
		fallback = self._children(node.children)
		if all(isinstance(c, JsxText) and not c.value.strip() for c in fallback):
			return JsxExpressionContainer(Identifier(CHILDREN))
		return JsxExpressionContainer(Binary(op="??", left=Identifier(CHILDREN), right=JsxFragment(children=fallback)))

	# Elements ----------------------------------------------------------------

	def _element(self, node: Element) -> JsxElement:
		attributes = [self._attribute(attr, dom=True) for attr in node.attributes]
		children = self._children(node.children)
		void = node.name.lower() in VOID_ELEMENTS and not children
		return JsxElement(node.name, attributes=attributes, children=children, self_closing=void)

	def _component(self, node: InlineComponent) -> JsxElement:
		if node.name == SELF_TAG:
			self.result.uses_self_reference = True
			name = self.options.component_name
		elif node.name == DYNAMIC_TAG:
			name = self._dynamic_tag(node)
		else:
			name = node.name
		attributes = [self._attribute(attr, dom=False) for attr in node.attributes]
		return JsxElement(name, attributes=attributes, children=self._children(node.children))

	def _dynamic_tag(self, node: InlineComponent) -> str:
		expr = node.expression
		parts: List[str] = []
		while isinstance(expr, Member):
			parts.append(expr.property)
			expr = expr.object
		if not isinstance(expr, Identifier):
			raise self._unsupported(f"<{DYNAMIC_TAG}> with a non-identifier this", node)
		parts.append(expr.name)
		return ".".join(reversed(parts))

	# Attributes --------------------------------------------------------------

	def _attribute(self, attr: TemplateNode, dom: bool) -> Union[JsxAttribute, JsxSpreadAttribute]:
		if isinstance(attr, Spread):
			return JsxSpreadAttribute(self._expr(attr.expression))
		if isinstance(attr, AttributeShorthand):
			name = ATTRIBUTE_NAMES.get(attr.name, attr.name) if dom else attr.name
			return JsxAttribute(name, JsxExpressionContainer(self._expr(Identifier(attr.name))))
		if isinstance(attr, EventHandler):
			if attr.modifiers:
				raise self._unsupported("event modifier", attr)
			if attr.expression is None:
				raise self._unsupported("event forwarding", attr)
			return JsxAttribute(event_prop_name(attr.name), JsxExpressionContainer(self._expr(attr.expression)))
		if isinstance(attr, Attribute):
			if attr.name == "slot":
				raise self._unsupported("named slot", attr)
			if dom and attr.name == "class":
				return self._class_attribute(attr)
			if dom and attr.name == "style":
				return self._style_attribute(attr)
			name = ATTRIBUTE_NAMES.get(attr.name, attr.name) if dom else attr.name
			return JsxAttribute(name, self._attribute_value(attr))
		if isinstance(attr, Directive):
			kind = DIRECTIVE_KINDS.get(attr.kind, attr.kind)
			raise UnrecognizedNodeError(kind, loc=self._span(attr), detail=f"{attr.kind}:{attr.name}")
		raise UnrecognizedNodeError(type(attr).__name__, loc=self._span(attr))

	def _attribute_value(self, attr: Attribute) -> Optional[Union[StringLiteral, JsxExpressionContainer]]:
		if attr.value is True:
			return None
		chunks = list(attr.value) if isinstance(attr.value, list) else []
		if all(isinstance(c, Text) for c in chunks):
			return StringLiteral("".join(c.data for c in chunks))
		if len(chunks) == 1 and isinstance(chunks[0], MustacheTag):
			return JsxExpressionContainer(self._expr(chunks[0].expression))
		return JsxExpressionContainer(self._template_literal(chunks))

	def _template_literal(self, chunks: List[TemplateNode]) -> TemplateLiteral:
		quasis = [""]
		expressions: List[Expr] = []
		for chunk in chunks:
			if isinstance(chunk, Text):
				quasis[-1] += _template_raw(chunk.data)
			elif isinstance(chunk, MustacheTag):
				expressions.append(self._expr(chunk.expression))
				quasis.append("")
			else:
				raise UnrecognizedNodeError(type(chunk).__name__, loc=self._span(chunk))
		return TemplateLiteral(quasis=quasis, expressions=expressions)

	def _class_attribute(self, attr: Attribute) -> JsxAttribute:
		value = attr.value
		if value is True or not all(isinstance(c, Text) for c in value):
			return JsxAttribute("className", self._attribute_value(attr))
		tokens = "".join(c.data for c in value).split()
		if not any(t in self.alias_map for t in tokens):
			return JsxAttribute("className", StringLiteral(" ".join(tokens)))
		items: List[Expr] = [
			Identifier(self.alias_map[t]) if t in self.alias_map else StringLiteral(t)
			for t in tokens
		]
		if len(items) == 1:
			return JsxAttribute("className", JsxExpressionContainer(items[0]))
		joined = Call(callee=Member(object=ArrayLiteral(elements=items), property="join"), args=[StringLiteral(" ")])
		return JsxAttribute("className", JsxExpressionContainer(joined))

	def _style_attribute(self, attr: Attribute) -> JsxAttribute:
		"""A static `style="a: b; c-d: e"` becomes `style={{ a: "b", cD: "e" }}`."""
		value = attr.value
		if value is True or not all(isinstance(c, Text) for c in value):
			return JsxAttribute("style", self._attribute_value(attr))
		properties: List[Property] = []
		for declaration in "".join(c.data for c in value).split(";"):
			if not declaration.strip():
				continue
			prop, sep, val = declaration.partition(":")
			if not sep:
				raise self._unsupported(f"style declaration {declaration.strip()!r}", attr)
			properties.append(Property(key=_style_key(prop.strip()), value=StringLiteral(val.strip())))
		return JsxAttribute("style", JsxExpressionContainer(ObjectLiteral(properties=properties)))


def _style_key(prop: str) -> Expr:
	if prop.startswith("--"):
		return StringLiteral(prop)
	head, *rest = prop.lower().split("-")
	if not head:
		# Vendor prefix: `-webkit-x` -> `WebkitX`.
		return Identifier("".join(capitalize(part) for part in rest))
	return Identifier(head + "".join(capitalize(part) for part in rest))


def lower_template(
	root: Fragment,
	rewriter: ReactiveRewriter,
	alias_map: Optional[Dict[str, str]] = None,
	options: Optional[ConvertOptions] = None,
	markup: str = "",
) -> TemplateResult:
	return TemplateLowering(rewriter, alias_map, options, markup).lower(root)


def lower_markup(
	root: Fragment,
	analysis: Optional[ScriptAnalysis] = None,
	alias_map: Optional[Dict[str, str]] = None,
	options: Optional[ConvertOptions] = None,
) -> TemplateResult:
	"""Lower a template without a rewritten script (standalone use and tests)."""
	rewriter = ReactiveRewriter(analysis or ScriptAnalysis(), options)
	return lower_template(root, rewriter, alias_map, options)


__all__ = [
	"ATTRIBUTE_NAMES",
	"EVENT_NAMES",
	"TemplateLowering",
	"TemplateResult",
	"event_prop_name",
	"lower_markup",
	"lower_template",
]
