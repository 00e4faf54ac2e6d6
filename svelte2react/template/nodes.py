# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Template tree produced by the markup scanner.

The node set is closed: lowering handles exactly these classes and raises on
anything else. Every node records `start`/`end` character offsets into the
markup text so errors can point back at the source.

Expressions are already parsed into script AST nodes; the only raw text kept
is for constructs lowering rejects anyway (`{#await}`, `{@const}`,
directives), so those fail with their own message rather than a parse error.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Union

from svelte2react.script.ast import Expr, Pattern


class TemplateNode:
	start: int
	end: int


# Children -----------------------------------------------------------------


@dataclass
class Fragment(TemplateNode):
	children: List[TemplateNode] = field(default_factory=list)
	start: int = 0
	end: int = 0


@dataclass
class Text(TemplateNode):
	data: str
	start: int = 0
	end: int = 0


@dataclass
class Comment(TemplateNode):
	data: str
	start: int = 0
	end: int = 0


@dataclass
class MustacheTag(TemplateNode):
	"""`{expression}`"""

	expression: Expr
	start: int = 0
	end: int = 0


@dataclass
class RawMustacheTag(TemplateNode):
	"""`{@html expression}`"""

	expression: Expr
	start: int = 0
	end: int = 0


@dataclass
class DebugTag(TemplateNode):
	"""`{@debug a, b}`"""

	identifiers: List[str] = field(default_factory=list)
	start: int = 0
	end: int = 0


@dataclass
class ConstTag(TemplateNode):
	"""`{@const ...}` (kept as source text)."""

	source: str
	start: int = 0
	end: int = 0


@dataclass
class ElseBlock(TemplateNode):
	children: List[TemplateNode] = field(default_factory=list)
	start: int = 0
	end: int = 0


@dataclass
class IfBlock(TemplateNode):
	"""
	`{#if}` block. An `{:else if}` arm is an `ElseBlock` whose single child is
	another `IfBlock` with `elseif=True`.
	"""

	expression: Expr
	children: List[TemplateNode] = field(default_factory=list)
	else_: Optional[ElseBlock] = None
	elseif: bool = False
	start: int = 0
	end: int = 0


@dataclass
class EachBlock(TemplateNode):
	"""`{#each expression as context, index (key)}...{:else}...{/each}`"""

	expression: Expr
	context: Pattern
	children: List[TemplateNode] = field(default_factory=list)
	index: Optional[str] = None
	key: Optional[Expr] = None
	else_: Optional[ElseBlock] = None
	start: int = 0
	end: int = 0


@dataclass
class KeyBlock(TemplateNode):
	expression: Expr
	children: List[TemplateNode] = field(default_factory=list)
	start: int = 0
	end: int = 0


@dataclass
class AwaitBlock(TemplateNode):
	expression_source: str
	start: int = 0
	end: int = 0


@dataclass
class Element(TemplateNode):
	name: str
	attributes: List["AttributeNode"] = field(default_factory=list)
	children: List[TemplateNode] = field(default_factory=list)
	self_closing: bool = False
	start: int = 0
	end: int = 0


@dataclass
class InlineComponent(TemplateNode):
	"""
	Component reference: a capitalized or dotted tag, `<svelte:self>`, or
	`<svelte:component this={...}>` (the `this` value in `expression`).
	"""

	name: str
	attributes: List["AttributeNode"] = field(default_factory=list)
	children: List[TemplateNode] = field(default_factory=list)
	expression: Optional[Expr] = None
	self_closing: bool = False
	start: int = 0
	end: int = 0


@dataclass
class Slot(TemplateNode):
	attributes: List["AttributeNode"] = field(default_factory=list)
	children: List[TemplateNode] = field(default_factory=list)
	start: int = 0
	end: int = 0


@dataclass
class MetaTag(TemplateNode):
	"""Any other `<svelte:*>` tag (`svelte:window`, `svelte:head`, ...)."""

	name: str
	attributes: List["AttributeNode"] = field(default_factory=list)
	children: List[TemplateNode] = field(default_factory=list)
	start: int = 0
	end: int = 0


# Attributes ----------------------------------------------------------------


@dataclass
class Attribute(TemplateNode):
	"""
	`name`, `name="text {expr} text"` or `name={expr}`.

	`value` is True for a valueless attribute, otherwise the list of Text /
	MustacheTag chunks making up the value.
	"""

	name: str
	value: Union[bool, List[TemplateNode]] = True
	start: int = 0
	end: int = 0


@dataclass
class AttributeShorthand(TemplateNode):
	"""`{name}` in attribute position."""

	name: str
	start: int = 0
	end: int = 0


@dataclass
class Spread(TemplateNode):
	"""`{...expression}`"""

	expression: Expr
	start: int = 0
	end: int = 0


@dataclass
class EventHandler(TemplateNode):
	"""`on:name|modifier={expression}`; `expression` is None when forwarding."""

	name: str
	expression: Optional[Expr] = None
	modifiers: List[str] = field(default_factory=list)
	start: int = 0
	end: int = 0


@dataclass
class Directive(TemplateNode):
	"""`bind:`, `class:`, `use:` and the other directives lowering rejects."""

	kind: str
	name: str
	source: Optional[str] = None
	start: int = 0
	end: int = 0


AttributeNode = Union[Attribute, AttributeShorthand, Spread, EventHandler, Directive]

__all__ = [
	"Attribute",
	"AttributeNode",
	"AttributeShorthand",
	"AwaitBlock",
	"Comment",
	"ConstTag",
	"DebugTag",
	"Directive",
	"EachBlock",
	"ElseBlock",
	"Element",
	"EventHandler",
	"Fragment",
	"IfBlock",
	"InlineComponent",
	"KeyBlock",
	"MetaTag",
	"MustacheTag",
	"RawMustacheTag",
	"Slot",
	"Spread",
	"TemplateNode",
	"Text",
]
