# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Markup scanner: node structure for the markup forms components use, plus
the structural errors it reports with positions.
"""

from __future__ import annotations

import pytest

from svelte2react.core.errors import MalformedExpressionError
from svelte2react.script.ast import BindingIdentifier, Identifier, Member, ObjectPattern
from svelte2react.template.nodes import (
	Attribute,
	AttributeShorthand,
	AwaitBlock,
	Comment,
	DebugTag,
	Directive,
	EachBlock,
	Element,
	EventHandler,
	IfBlock,
	InlineComponent,
	KeyBlock,
	MetaTag,
	MustacheTag,
	RawMustacheTag,
	Slot,
	Spread,
	Text,
)
from svelte2react.template.parser import MarkupSyntaxError, find_closing_brace, parse_markup


def only(source: str):
	root = parse_markup(source)
	nodes = [n for n in root.children if not (isinstance(n, Text) and not n.data.strip())]
	assert len(nodes) == 1, nodes
	return nodes[0]


def test_element_with_text_and_mustache():
	node = only("<h1>Hello {name}!</h1>")
	assert isinstance(node, Element) and node.name == "h1"
	text, tag, bang = node.children
	assert isinstance(text, Text) and text.data == "Hello "
	assert isinstance(tag, MustacheTag) and tag.expression == Identifier("name", loc=tag.expression.loc)
	assert isinstance(bang, Text) and bang.data == "!"


def test_void_and_self_closing_tags_have_no_children():
	root = parse_markup("<br><input value={v}/><p></p>")
	br, input_, p = root.children
	assert isinstance(br, Element) and br.children == [] and not br.self_closing
	assert isinstance(input_, Element) and input_.self_closing
	assert isinstance(p, Element) and p.name == "p"


def test_attribute_kinds():
	node = only('<div id="x" class="a {b}" hidden {shorthand} {...rest} on:click|once={go} bind:value={v} on:submit></div>')
	kinds = [type(a) for a in node.attributes]
	assert kinds == [Attribute, Attribute, Attribute, AttributeShorthand, Spread, EventHandler, Directive, EventHandler]
	static, mixed, boolean, shorthand, spread, click, bind, submit = node.attributes
	assert [type(c) for c in static.value] == [Text]
	assert [type(c) for c in mixed.value] == [Text, MustacheTag]
	assert boolean.value is True
	assert shorthand.name == "shorthand"
	assert isinstance(spread.expression, Identifier)
	assert click.name == "click" and click.modifiers == ["once"]
	assert bind.kind == "bind" and bind.name == "value" and bind.source == "{v}"
	assert submit.expression is None


def test_unquoted_attribute_value():
	node = only("<a href=page.html>x</a>")
	(href,) = node.attributes
	assert href.value[0].data == "page.html"


def test_if_else_if_else_nesting():
	node = only("{#if a}one{:else if b}two{:else}three{/if}")
	assert isinstance(node, IfBlock) and not node.elseif
	(nested,) = node.else_.children
	assert isinstance(nested, IfBlock) and nested.elseif
	assert nested.children[0].data == "two"
	assert nested.else_.children[0].data == "three"


def test_each_with_index_and_key():
	node = only("{#each items as item, i (item.id)}<li>{item.name}</li>{/each}")
	assert isinstance(node, EachBlock)
	assert node.context == BindingIdentifier("item", loc=node.context.loc)
	assert node.index == "i"
	assert isinstance(node.key, Member) and node.key.property == "id"
	assert isinstance(node.children[0], Element)


def test_each_with_destructured_item_and_else():
	node = only("{#each list as { a, b }}{a}{:else}empty{/each}")
	assert isinstance(node.context, ObjectPattern)
	assert node.else_.children[0].data == "empty"


def test_key_await_and_special_tags():
	root = parse_markup("{#key k}x{/key}{#await p}wait{:then v}ok{/await}{@html raw}{@debug a, b}")
	key, await_, html, debug = root.children
	assert isinstance(key, KeyBlock)
	assert isinstance(await_, AwaitBlock) and await_.expression_source == "p"
	assert isinstance(html, RawMustacheTag)
	assert isinstance(debug, DebugTag) and debug.identifiers == ["a", "b"]


def test_components_slots_and_meta_tags():
	root = parse_markup('<Foo bar={1} /><ui.Button>x</ui.Button><svelte:component this={Comp} /><slot /><svelte:window on:resize={r} /><!-- note -->')
	foo, button, dynamic, slot, window, comment = root.children
	assert isinstance(foo, InlineComponent) and foo.self_closing
	assert isinstance(button, InlineComponent) and button.name == "ui.Button"
	assert isinstance(dynamic, InlineComponent) and isinstance(dynamic.expression, Identifier)
	assert dynamic.attributes == []
	assert isinstance(slot, Slot)
	assert isinstance(window, MetaTag)
	assert isinstance(comment, Comment) and comment.data == " note "


def test_find_closing_brace_skips_strings_and_templates():
	text = "{ a: '}', b: `${ {c: 1}.c }` }"
	assert find_closing_brace(text, 1) == len(text) - 1


def test_mismatched_closing_tag_is_located():
	with pytest.raises(MarkupSyntaxError, match="attempted to close") as info:
		parse_markup("<div>\n  <span></div>")
	assert (info.value.span.line, info.value.span.column) == (2, 9)


def test_unclosed_element():
	with pytest.raises(MarkupSyntaxError, match="was left open"):
		parse_markup("<div><p>text</p>")


def test_stray_block_tag():
	with pytest.raises(MarkupSyntaxError, match="unexpected block tag"):
		parse_markup("text{/if}")


def test_malformed_mustache_expression():
	with pytest.raises(MalformedExpressionError, match="malformed expression"):
		parse_markup("<p>{a +}</p>")


def test_each_without_as():
	with pytest.raises(MarkupSyntaxError, match="requires 'as'"):
		parse_markup("{#each items}x{/each}")
