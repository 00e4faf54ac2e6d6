# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""TSX printer: statement layout, precedence and JSX formatting."""

from __future__ import annotations

from svelte2react.script.ast import (
	Binary,
	Conditional,
	Identifier,
	JsxAttribute,
	JsxElement,
	JsxExpressionContainer,
	JsxFragment,
	JsxText,
	NumericLiteral,
	StringLiteral,
)
from svelte2react.script.parser import parse_expression, parse_module
from svelte2react.script.printer import jsx_text_value, print_expression, print_module, quote_string


def roundtrip(source: str) -> str:
	return print_module(parse_module(source))


def test_declarations_and_calls():
	assert roundtrip("const x: number = 1;") == "const x: number = 1;\n"
	assert roundtrip("let a = 'b'") == 'let a = "b";\n'
	assert roundtrip("onClick?.({ text: 'hi' })") == 'onClick?.({ text: "hi" });\n'


def test_block_bodies_are_indented_with_spaces():
	out = roundtrip("function f(a) { if (a) { return 1; } return 2; }")
	assert out == "function f(a) {\n  if (a) {\n    return 1;\n  }\n  return 2;\n}\n"


def test_precedence_parentheses_are_kept():
	expr = Binary(op="*", left=Binary(op="+", left=Identifier("a"), right=Identifier("b")), right=Identifier("c"))
	assert print_expression(expr) == "(a + b) * c"
	assert print_expression(parse_expression("(a ?? b) || c")) == "(a ?? b) || c"


def test_imports_are_separated_from_code_by_a_blank_line():
	out = roundtrip('import { a } from "x";\nconst b = a;')
	assert out == 'import { a } from "x";\n\nconst b = a;\n'


def test_quote_string_escapes():
	assert quote_string('say "hi"\n') == '"say \\"hi\\"\\n"'


def test_jsx_text_value_collapses_line_breaks():
	assert jsx_text_value("\n    hello,\n    world\n  ") == "hello, world"
	assert jsx_text_value(" {x} ") == " {x} "
	assert jsx_text_value("\n   \n") == ""


def test_short_jsx_stays_inline():
	span = JsxElement("span", children=[JsxText(" "), JsxExpressionContainer(Identifier("num")), JsxText(" ")])
	assert print_expression(span) == "<span> {num} </span>"


def test_element_children_break_onto_lines():
	inner = JsxElement("h1", children=[JsxText("Nest")])
	outer = JsxElement(
		"div",
		attributes=[JsxAttribute("id", StringLiteral("x"))],
		children=[inner, JsxText("\n  hello, "), JsxExpressionContainer(Identifier("x")), JsxText("\n")],
	)
	assert print_expression(outer) == '<div id="x">\n  <h1>Nest</h1>\n  hello, {x}\n</div>'


def test_jsx_text_special_characters_are_escaped():
	assert print_expression(JsxFragment(children=[JsxText("a < b")])) == '<>a {"<"} b</>'


def test_jsx_conditional_breaks_when_a_branch_is_multiline():
	consequent = JsxFragment(children=[JsxElement("div", children=[JsxText("if-true")])])
	cond = Conditional(test=Identifier("ok"), consequent=consequent, alternate=Identifier("undefined"))
	out = print_expression(JsxFragment(children=[JsxExpressionContainer(cond)]))
	assert "{ok ? (\n" in out
	assert ") : undefined}" in out


def test_self_closing_and_empty_elements():
	assert print_expression(JsxElement("br", self_closing=True)) == "<br />"
	assert print_expression(JsxElement("Foo")) == "<Foo></Foo>"
	assert print_expression(JsxElement("div", attributes=[JsxAttribute("n", JsxExpressionContainer(NumericLiteral("1")))])) == "<div n={1}></div>"
