# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Script parser: statements and expressions component scripts actually use.

Trees are checked structurally; printing is covered by test_printer.py.
"""

from __future__ import annotations

import pytest

from svelte2react.core.errors import MalformedExpressionError
from svelte2react.script.ast import (
	Arrow,
	Assign,
	Binary,
	BindingIdentifier,
	Call,
	ExprStmt,
	Identifier,
	ImportDecl,
	Labeled,
	Member,
	NumericLiteral,
	StringLiteral,
	TemplateLiteral,
	TypeLiteral,
	TypeRef,
	VarDecl,
)
from svelte2react.script.parser import decode_js_string, parse_expression, parse_module


def test_exported_let_with_type_and_default():
	module = parse_module("export let bar: number = 1;")
	(decl,) = module.body
	assert isinstance(decl, VarDecl)
	assert decl.kind == "let"
	assert decl.exported
	(declarator,) = decl.declarations
	assert declarator.target == BindingIdentifier("bar", loc=declarator.target.loc)
	assert isinstance(declarator.type, TypeRef) and declarator.type.name == "number"
	assert isinstance(declarator.init, NumericLiteral) and declarator.init.raw == "1"


def test_statements_without_semicolons():
	module = parse_module("let a = 1\nlet b = 2\na = b\n")
	assert [type(s) for s in module.body] == [VarDecl, VarDecl, ExprStmt]
	assert isinstance(module.body[2].expr, Assign)


def test_imports_keep_specifiers():
	module = parse_module('import { onMount, onDestroy as od } from "svelte";\nimport Foo from "./Foo.svelte";')
	first, second = module.body
	assert isinstance(first, ImportDecl) and first.source == "svelte"
	assert [(s.imported, s.local) for s in first.specifiers] == [("onMount", "onMount"), ("onDestroy", "od")]
	assert isinstance(second, ImportDecl) and second.default == "Foo"


def test_reactive_label():
	module = parse_module("$: doubled = count * 2;")
	(stmt,) = module.body
	assert isinstance(stmt, Labeled) and stmt.label == "$"
	assert isinstance(stmt.body, ExprStmt)
	assign = stmt.body.expr
	assert isinstance(assign, Assign) and isinstance(assign.value, Binary)


def test_call_with_type_literal_argument():
	module = parse_module("const dispatch = createEventDispatcher<{ message: { text: string } }>();")
	(decl,) = module.body
	init = decl.declarations[0].init
	assert isinstance(init, Call)
	assert isinstance(init.callee, Identifier) and init.callee.name == "createEventDispatcher"
	(type_arg,) = init.type_args
	assert isinstance(type_arg, TypeLiteral)
	assert type_arg.members[0].name == "message"


def test_expression_forms():
	arrow = parse_expression("() => count += 1")
	assert isinstance(arrow, Arrow) and isinstance(arrow.body, Assign)
	member = parse_expression("item.name")
	assert isinstance(member, Member) and member.property == "name"
	template = parse_expression("`computed: ${computed}`")
	assert isinstance(template, TemplateLiteral)
	assert template.quasis == ["computed: ", ""]
	assert isinstance(parse_expression("'single'"), StringLiteral)


def test_string_escapes_are_decoded():
	assert decode_js_string(r"a\nbA\x42") == "a\nbAB"


def test_malformed_expression_is_reported():
	with pytest.raises(MalformedExpressionError):
		parse_expression("a +")
	with pytest.raises(MalformedExpressionError, match="empty expression"):
		parse_expression("  ")
