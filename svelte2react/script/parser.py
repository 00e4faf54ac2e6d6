# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Script parser: component `<script>` bodies and markup expressions.

`parse_module` handles whole script blocks; `parse_expression` handles the
expressions embedded in markup (`{count + 1}`, `on:click={...}`) and the
holes of template literals. Both share `grammar.lark`; lark failures are
reported as `MalformedExpressionError` with a 1-based location.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import List, Optional

from lark import Lark, Token, Tree
from lark.exceptions import LarkError, UnexpectedInput

from svelte2react.core.errors import MalformedExpressionError
from svelte2react.script.ast import (
	ArrayLiteral,
	ArrayPattern,
	ArrayType,
	Arrow,
	AsExpr,
	Assign,
	AssignmentPattern,
	Binary,
	BindingIdentifier,
	Block,
	BooleanLiteral,
	Break,
	Call,
	Conditional,
	Continue,
	DoWhile,
	Empty,
	ExportAll,
	ExportDefault,
	ExportNamed,
	ExportSpecifier,
	Expr,
	ExprStmt,
	For,
	ForIn,
	FunctionDecl,
	FunctionExpr,
	FunctionType,
	Identifier,
	If,
	ImportDecl,
	ImportSpecifier,
	Index,
	IndexedType,
	IndexSignature,
	InterfaceDecl,
	IntersectionType,
	Labeled,
	LiteralType,
	Located,
	Member,
	MethodSignature,
	Module,
	New,
	NonNull,
	NullLiteral,
	NumericLiteral,
	ObjectLiteral,
	ObjectPattern,
	Param,
	ParenType,
	Pattern,
	PatternProperty,
	Property,
	PropertySignature,
	RestElement,
	Return,
	Sequence,
	SpreadElement,
	Stmt,
	StringLiteral,
	Switch,
	SwitchCase,
	TaggedTemplate,
	TemplateLiteral,
	ThisExpr,
	Throw,
	Try,
	TupleType,
	TypeAlias,
	TypeLiteral,
	TypeNode,
	TypeOperator,
	TypeParam,
	TypeRef,
	Unary,
	UnionType,
	Update,
	VarDecl,
	VarDeclarator,
	While,
)
from svelte2react.script.postlex import ScriptPostLex

_GRAMMAR_PATH = Path(__file__).with_name("grammar.lark")
_GRAMMAR_SRC = _GRAMMAR_PATH.read_text()

_PARSER = Lark(
	_GRAMMAR_SRC,
	parser="earley",
	lexer="basic",
	start="module",
	propagate_positions=True,
	maybe_placeholders=False,
	postlex=ScriptPostLex(),
)

_EXPR_PARSER = Lark(
	_GRAMMAR_SRC,
	parser="earley",
	lexer="basic",
	start="expr_entry",
	propagate_positions=True,
	maybe_placeholders=False,
	postlex=ScriptPostLex(expression_mode=True),
)


def parse_module(source: str) -> Module:
	"""Parse a script block into a `Module`."""
	tree = _run(_PARSER, source)
	return _build_module(tree)


def parse_expression(source: str) -> Expr:
	"""Parse a single expression (markup mustache, attribute value, template hole)."""
	if not source.strip():
		raise MalformedExpressionError("empty expression", loc=Located(1, 1), source=source)
	tree = _run(_EXPR_PARSER, source)
	return _build_expr(tree.children[0])


def _run(parser: Lark, source: str) -> Tree:
	try:
		return parser.parse(source)
	except UnexpectedInput as err:
		line = getattr(err, "line", None) or 1
		column = getattr(err, "column", None) or 1
		token = getattr(err, "token", None)
		if token is not None:
			message = f"unexpected token {str(token)!r}"
		else:
			char = getattr(err, "char", None)
			message = f"unexpected character {char!r}" if char is not None else "unexpected end of input"
		raise MalformedExpressionError(message, loc=Located(line, column), source=source) from err
	except LarkError as err:
		raise MalformedExpressionError(str(err), loc=Located(1, 1), source=source) from err


# String and template helpers --------------------------------------------------

_SIMPLE_ESCAPES = {
	"n": "\n",
	"t": "\t",
	"r": "\r",
	"b": "\b",
	"f": "\f",
	"v": "\v",
	"0": "\0",
}

_ESCAPE_RE = re.compile(r"\\(u\{[0-9a-fA-F]+\}|u[0-9a-fA-F]{4}|x[0-9a-fA-F]{2}|\r\n|[\s\S])")


def decode_js_string(body: str) -> str:
	"""Decode the escapes of a JS string body (quotes already stripped)."""

	def repl(m: re.Match) -> str:
		esc = m.group(1)
		if esc.startswith("u{"):
			return chr(int(esc[2:-1], 16))
		if esc.startswith("u") and len(esc) == 5:
			return chr(int(esc[1:], 16))
		if esc.startswith("x") and len(esc) == 3:
			return chr(int(esc[1:], 16))
		if esc in ("\n", "\r\n"):
			return ""
		return _SIMPLE_ESCAPES.get(esc, esc)

	return _ESCAPE_RE.sub(repl, body)


def _decode_string_token(tok: Token) -> str:
	return decode_js_string(tok.value[1:-1])


def split_template(raw: str) -> tuple[List[str], List[str]]:
	"""
	Split template literal source (with backticks) into raw quasis and hole sources.

	Holes may contain strings, nested templates and braces; the scan tracks
	those so `${ {a: 1}.a }` and `${`x${y}`}` split correctly.
	"""
	body = raw[1:-1]
	quasis: List[str] = []
	holes: List[str] = []
	buf: List[str] = []
	i = 0
	while i < len(body):
		ch = body[i]
		if ch == "\\":
			buf.append(body[i : i + 2])
			i += 2
			continue
		if ch == "$" and body.startswith("${", i):
			end = _skip_hole(body, i + 2)
			quasis.append("".join(buf))
			buf = []
			holes.append(body[i + 2 : end])
			i = end + 1
			continue
		buf.append(ch)
		i += 1
	quasis.append("".join(buf))
	return quasis, holes


def _skip_hole(body: str, start: int) -> int:
	"""Return the index of the `}` closing a template hole opened before `start`."""
	depth = 0
	i = start
	while i < len(body):
		ch = body[i]
		if ch in "\"'":
			i = _skip_quoted(body, i, ch)
			continue
		if ch == "`":
			i = _skip_template(body, i)
			continue
		if ch == "{":
			depth += 1
		elif ch == "}":
			if depth == 0:
				return i
			depth -= 1
		i += 1
	raise MalformedExpressionError("unterminated template literal hole", source=body)


def _skip_quoted(body: str, start: int, quote: str) -> int:
	i = start + 1
	while i < len(body):
		if body[i] == "\\":
			i += 2
			continue
		if body[i] == quote:
			return i + 1
		i += 1
	return i


def _skip_template(body: str, start: int) -> int:
	i = start + 1
	while i < len(body):
		ch = body[i]
		if ch == "\\":
			i += 2
			continue
		if ch == "`":
			return i + 1
		if ch == "$" and body.startswith("${", i):
			i = _skip_hole(body, i + 2) + 1
			continue
		i += 1
	return i


def _build_template(tok: Token) -> TemplateLiteral:
	quasis, holes = split_template(tok.value)
	loc = _loc_from_token(tok)
	expressions: List[Expr] = []
	for hole in holes:
		try:
			expressions.append(parse_expression(hole))
		except MalformedExpressionError as err:
			raise MalformedExpressionError(f"in template literal: {err.message}", loc=loc, source=tok.value) from err
	return TemplateLiteral(quasis=quasis, expressions=expressions, loc=loc)


# Tree helpers -----------------------------------------------------------------


def _loc(tree: Tree) -> Optional[Located]:
	meta = tree.meta
	if getattr(meta, "empty", True):
		return None
	return Located(line=meta.line, column=meta.column)


def _loc_from_token(token: Token) -> Located:
	return Located(line=token.line or 1, column=token.column or 1)


def _name(node: Tree | Token) -> str:
	if isinstance(node, Tree):
		data = node.data
		if isinstance(data, Token):
			return data.value
		return data
	if isinstance(node, Token):
		return node.type
	return str(node)


def _trees(tree: Tree, name: Optional[str] = None) -> List[Tree]:
	return [c for c in tree.children if isinstance(c, Tree) and (name is None or _name(c) == name)]


def _tokens(tree: Tree, *types: str) -> List[Token]:
	return [c for c in tree.children if isinstance(c, Token) and (not types or c.type in types)]


def _has_token(tree: Tree, ttype: str) -> bool:
	return any(isinstance(c, Token) and c.type == ttype for c in tree.children)


def _first(tree: Tree, name: str) -> Optional[Tree]:
	for child in tree.children:
		if isinstance(child, Tree) and _name(child) == name:
			return child
	return None


def _require(tree: Tree, name: str) -> Tree:
	child = _first(tree, name)
	if child is None:
		raise TypeError(f"{_name(tree)} node without {name}")
	return child


def _ident(node: Tree | Token) -> str:
	"""Name text of an `identifier`/`export_name`/`type_name` node or a bare token."""
	if isinstance(node, Token):
		return node.value
	for child in node.children:
		if isinstance(child, Token):
			return child.value
		if isinstance(child, Tree):
			return _ident(child)
	raise TypeError(f"identifier node without a token: {node!r}")


# Module and statements --------------------------------------------------------


def _build_module(tree: Tree) -> Module:
	body = [_build_stmt(child) for child in tree.children if isinstance(child, Tree)]
	return Module(body=[s for s in body if not isinstance(s, Empty)], loc=_loc(tree))


def _build_block(tree: Tree) -> Block:
	statements = [_build_stmt(child) for child in _trees(tree)]
	return Block(statements=[s for s in statements if not isinstance(s, Empty)], loc=_loc(tree))


def _build_stmt(tree: Tree) -> Stmt:
	name = _name(tree)
	loc = _loc(tree)
	if name == "block":
		return _build_block(tree)
	if name == "empty_stmt":
		return Empty(loc=loc)
	if name == "expr_stmt":
		return ExprStmt(expr=_build_expr(tree.children[0]), loc=loc)
	if name == "var_decl":
		return _build_var_decl(tree)
	if name == "function_decl":
		return _build_function_decl(tree)
	if name == "if_stmt":
		parts = _trees(tree)
		alternate = _build_stmt(parts[2]) if len(parts) > 2 else None
		return If(test=_build_expr(parts[0]), consequent=_build_stmt(parts[1]), alternate=alternate, loc=loc)
	if name == "for_stmt":
		return _build_for(tree)
	if name == "for_in_stmt":
		return _build_for_in(tree)
	if name == "while_stmt":
		test, body = _trees(tree)
		return While(test=_build_expr(test), body=_build_stmt(body), loc=loc)
	if name == "do_stmt":
		body, test = _trees(tree)
		return DoWhile(body=_build_stmt(body), test=_build_expr(test), loc=loc)
	if name == "return_stmt":
		parts = _trees(tree)
		return Return(value=_build_expr(parts[0]) if parts else None, loc=loc)
	if name == "throw_stmt":
		return Throw(value=_build_expr(_trees(tree)[0]), loc=loc)
	if name == "break_stmt":
		parts = _trees(tree)
		return Break(label=_ident(parts[0]) if parts else None, loc=loc)
	if name == "continue_stmt":
		parts = _trees(tree)
		return Continue(label=_ident(parts[0]) if parts else None, loc=loc)
	if name == "try_stmt":
		return _build_try(tree)
	if name == "switch_stmt":
		return _build_switch(tree)
	if name == "labeled_stmt":
		label, body = _trees(tree)
		return Labeled(label=_ident(label), body=_build_stmt(body), loc=loc)
	if name in {"import_decl", "import_bare"}:
		return _build_import(tree)
	if name in {
		"export_var",
		"export_function",
		"export_type",
		"export_interface",
		"export_default_function",
		"export_default",
		"export_named",
		"export_all",
	}:
		return _build_export(tree)
	if name == "type_alias":
		return _build_type_alias(tree)
	if name == "interface_decl":
		return _build_interface(tree)
	raise TypeError(f"Unhandled statement node: {name}")


def _build_var_decl(tree: Tree, exported: bool = False) -> VarDecl:
	kind_tree = _first(tree, "var_kind")
	kind = _ident(kind_tree) if kind_tree is not None else "let"
	declarations: List[VarDeclarator] = []
	for decl in _trees(tree, "declarator"):
		target: Optional[Pattern] = None
		type_: Optional[TypeNode] = None
		init: Optional[Expr] = None
		for child in decl.children:
			if isinstance(child, Token):
				continue
			child_name = _name(child)
			if target is None:
				target = _build_pattern(child)
			elif child_name == "type_ann":
				type_ = _build_type_ann(child)
			else:
				init = _build_expr(child)
		if target is None:
			raise TypeError("variable declarator without a target")
		declarations.append(VarDeclarator(target=target, type=type_, init=init, loc=_loc(decl)))
	return VarDecl(kind=kind, declarations=declarations, exported=exported, loc=_loc(tree))


def _build_function_parts(tree: Tree) -> dict:
	"""Shared shape of `function_decl`, `function_expr` and `prop_method`."""
	parts: dict = {
		"name": None,
		"params": [],
		"body": None,
		"is_async": _has_token(tree, "ASYNC"),
		"return_type": None,
		"type_params": [],
	}
	for child in tree.children:
		if isinstance(child, Token):
			continue
		child_name = _name(child)
		if child_name == "identifier":
			parts["name"] = _ident(child)
		elif child_name == "type_params":
			parts["type_params"] = _build_type_params(child)
		elif child_name == "params":
			parts["params"] = _build_params(child)
		elif child_name == "type_ann":
			parts["return_type"] = _build_type_ann(child)
		elif child_name == "block":
			parts["body"] = _build_block(child)
	return parts


def _build_function_decl(tree: Tree, exported: bool = False, default_export: bool = False) -> FunctionDecl:
	parts = _build_function_parts(tree)
	return FunctionDecl(exported=exported, default_export=default_export, loc=_loc(tree), **parts)


def _build_for(tree: Tree) -> For:
	init = test = update = None
	body: Optional[Stmt] = None
	for child in _trees(tree):
		child_name = _name(child)
		if child_name == "for_init":
			inner = child.children[0]
			init = _build_var_decl(inner) if _name(inner) == "var_decl" else _build_expr(inner)
		elif child_name == "for_test":
			test = _build_expr(child.children[0])
		elif child_name == "for_update":
			update = _build_expr(child.children[0])
		else:
			body = _build_stmt(child)
	if body is None:
		raise TypeError("for statement without a body")
	return For(init=init, test=test, update=update, body=body, loc=_loc(tree))


def _build_for_in(tree: Tree) -> ForIn:
	left_tree, right_tree, body_tree = _trees(tree)
	if _name(left_tree) == "for_left_decl":
		kind_tree, target_tree = _trees(left_tree)
		target = _build_pattern(target_tree)
		left = VarDecl(
			kind=_ident(kind_tree),
			declarations=[VarDeclarator(target=target, loc=_loc(left_tree))],
			loc=_loc(left_tree),
		)
	else:
		left = _build_expr(left_tree.children[0])
	return ForIn(
		left=left,
		right=_build_expr(right_tree),
		body=_build_stmt(body_tree),
		of=_has_token(tree, "OF"),
		is_await=_has_token(tree, "AWAIT"),
		loc=_loc(tree),
	)


def _build_try(tree: Tree) -> Try:
	block = _build_block(_trees(tree)[0])
	param: Optional[Pattern] = None
	handler: Optional[Block] = None
	finalizer: Optional[Block] = None
	catch = _first(tree, "catch_clause")
	if catch is not None:
		for child in _trees(catch):
			child_name = _name(child)
			if child_name == "block":
				handler = _build_block(child)
			elif child_name != "type_ann":
				param = _build_pattern(child)
	fin = _first(tree, "finally_clause")
	if fin is not None:
		finalizer = _build_block(_trees(fin)[0])
	return Try(block=block, param=param, handler=handler, finalizer=finalizer, loc=_loc(tree))


def _build_switch(tree: Tree) -> Switch:
	parts = _trees(tree)
	discriminant = _build_expr(parts[0])
	cases: List[SwitchCase] = []
	for case in parts[1:]:
		children = _trees(case)
		if _name(case) == "case_clause":
			test: Optional[Expr] = _build_expr(children[0])
			body_trees = children[1:]
		else:
			test = None
			body_trees = children
		body = [_build_stmt(s) for s in body_trees]
		cases.append(SwitchCase(test=test, body=[s for s in body if not isinstance(s, Empty)], loc=_loc(case)))
	return Switch(discriminant=discriminant, cases=cases, loc=_loc(tree))


def _build_import(tree: Tree) -> ImportDecl:
	source_tok = _tokens(tree, "STRING")[-1]
	decl = ImportDecl(
		source=_decode_string_token(source_tok),
		type_only=_has_token(tree, "TYPE"),
		loc=_loc(tree),
	)
	clause = _first(tree, "import_clause")
	if clause is None:
		return decl
	for part in _trees(clause):
		part_name = _name(part)
		if part_name == "import_default":
			decl.default = _ident(part)
		elif part_name == "import_namespace":
			decl.namespace = _ident(_trees(part)[0])
		elif part_name == "import_named":
			for spec in _trees(part, "import_spec"):
				names = _trees(spec)
				imported = _ident(names[0])
				local = _ident(names[1]) if len(names) > 1 else imported
				decl.specifiers.append(
					ImportSpecifier(imported=imported, local=local, type_only=_has_token(spec, "TYPE"), loc=_loc(spec))
				)
	return decl


def _build_export(tree: Tree) -> Stmt:
	name = _name(tree)
	loc = _loc(tree)
	if name == "export_var":
		return _build_var_decl(_trees(tree)[0], exported=True)
	if name == "export_function":
		return _build_function_decl(_trees(tree)[0], exported=True)
	if name == "export_default_function":
		return _build_function_decl(_trees(tree)[0], exported=True, default_export=True)
	if name == "export_type":
		alias = _build_type_alias(_trees(tree)[0])
		alias.exported = True
		return alias
	if name == "export_interface":
		iface = _build_interface(_trees(tree)[0])
		iface.exported = True
		return iface
	if name == "export_default":
		return ExportDefault(value=_build_expr(_trees(tree)[0]), loc=loc)
	if name == "export_all":
		strings = _tokens(tree, "STRING")
		aliases = _trees(tree, "identifier")
		return ExportAll(
			source=_decode_string_token(strings[-1]),
			alias=_ident(aliases[0]) if aliases else None,
			loc=loc,
		)
	specifiers: List[ExportSpecifier] = []
	for spec in _trees(tree, "export_spec"):
		names = _trees(spec)
		local = _ident(names[0])
		exported = _ident(names[1]) if len(names) > 1 else local
		specifiers.append(ExportSpecifier(local=local, exported=exported, loc=_loc(spec)))
	strings = _tokens(tree, "STRING")
	return ExportNamed(
		specifiers=specifiers,
		source=_decode_string_token(strings[-1]) if strings else None,
		type_only=_has_token(tree, "TYPE"),
		loc=loc,
	)


def _build_type_alias(tree: Tree) -> TypeAlias:
	name_tree = _require(tree, "identifier")
	params_tree = _first(tree, "type_params")
	type_tree = [c for c in _trees(tree) if _name(c) not in {"identifier", "type_params"}][-1]
	return TypeAlias(
		name=_ident(name_tree),
		type=_build_type(type_tree),
		type_params=_build_type_params(params_tree) if params_tree is not None else [],
		loc=_loc(tree),
	)


def _build_interface(tree: Tree) -> InterfaceDecl:
	name_tree = _require(tree, "identifier")
	params_tree = _first(tree, "type_params")
	body = _build_type(_require(tree, "type_literal"))
	if not isinstance(body, TypeLiteral):
		raise TypeError(f"Unhandled interface body: {type(body).__name__}")
	return InterfaceDecl(
		name=_ident(name_tree),
		body=body,
		type_params=_build_type_params(params_tree) if params_tree is not None else [],
		extends=[_build_type(t) for t in _trees(tree, "type_ref")],
		loc=_loc(tree),
	)


# Patterns and parameters ------------------------------------------------------


def _build_params(tree: Tree) -> List[Param]:
	return [_build_param(p) for p in _trees(tree)]


def _build_param(tree: Tree) -> Param:
	rest = _name(tree) == "rest_param"
	pattern: Optional[Pattern] = None
	type_: Optional[TypeNode] = None
	default: Optional[Expr] = None
	for child in _trees(tree):
		if pattern is None:
			pattern = _build_pattern(child)
		elif _name(child) == "type_ann":
			type_ = _build_type_ann(child)
		else:
			default = _build_expr(child)
	if pattern is None:
		raise TypeError("parameter without a pattern")
	return Param(
		pattern=pattern,
		type=type_,
		default=default,
		optional=_has_token(tree, "QMARK"),
		rest=rest,
		loc=_loc(tree),
	)


def _build_pattern(tree: Tree) -> Pattern:
	name = _name(tree)
	loc = _loc(tree)
	if name == "bind_ident":
		return BindingIdentifier(name=_ident(tree), loc=loc)
	if name == "identifier":
		return BindingIdentifier(name=_ident(tree), loc=loc)
	if name == "object_pattern":
		props: List = []
		for member in _trees(tree):
			member_name = _name(member)
			if member_name == "pat_shorthand":
				children = _trees(member)
				key = _ident(children[0])
				value: Pattern = BindingIdentifier(name=key, loc=_loc(children[0]))
				if len(children) > 1:
					value = AssignmentPattern(target=value, default=_build_expr(children[1]), loc=_loc(member))
				props.append(PatternProperty(key=key, value=value, shorthand=True, loc=_loc(member)))
			elif member_name == "pat_property":
				key_tree, elem = _trees(member)
				props.append(
					PatternProperty(key=_prop_key_text(key_tree), value=_build_pattern(elem), loc=_loc(member))
				)
			else:
				props.append(RestElement(argument=_build_pattern(_trees(member)[0]), loc=_loc(member)))
		return ObjectPattern(properties=props, loc=loc)
	if name == "array_pattern":
		elements: List[Pattern] = []
		for member in _trees(tree):
			inner = member
			if _name(inner) == "arr_pat_member":
				inner = _trees(inner)[0]
			if _name(inner) == "pat_rest":
				elements.append(RestElement(argument=_build_pattern(_trees(inner)[0]), loc=_loc(inner)))
			else:
				elements.append(_build_pattern(inner))
		return ArrayPattern(elements=elements, loc=loc)
	if name == "pattern_elem":
		children = _trees(tree)
		target = _build_pattern(children[0])
		if len(children) > 1:
			return AssignmentPattern(target=target, default=_build_expr(children[1]), loc=loc)
		return target
	raise TypeError(f"Unhandled pattern node: {name}")


def _prop_key_text(tree: Tree) -> str:
	name = _name(tree)
	if name == "key_name":
		return _ident(_trees(tree)[0])
	if name == "key_string":
		return _decode_string_token(_tokens(tree)[0])
	if name == "key_number":
		return _tokens(tree)[0].value
	raise MalformedExpressionError("computed keys are not allowed in destructuring patterns", loc=_loc(tree))


# Types --------------------------------------------------------------------------


def _build_type_ann(tree: Tree) -> TypeNode:
	return _build_type(_trees(tree)[0])


def _build_type_params(tree: Tree) -> List[TypeParam]:
	params: List[TypeParam] = []
	for param in _trees(tree, "type_param"):
		name = _ident(_trees(param)[0])
		constraint = default = None
		seen_eq = False
		for child in param.children[1:]:
			if isinstance(child, Token):
				if child.type == "EQ":
					seen_eq = True
				continue
			if seen_eq:
				default = _build_type(child)
			else:
				constraint = _build_type(child)
		params.append(TypeParam(name=name, constraint=constraint, default=default, loc=_loc(param)))
	return params


def _build_type(tree: Tree | Token) -> TypeNode:
	if isinstance(tree, Token):
		return TypeRef(name=tree.value, loc=_loc_from_token(tree))
	name = _name(tree)
	loc = _loc(tree)
	if name == "union_type":
		members = [_build_type(c) for c in _trees(tree)]
		return members[0] if len(members) == 1 else UnionType(members=members, loc=loc)
	if name == "intersection_type":
		members = [_build_type(c) for c in _trees(tree)]
		return members[0] if len(members) == 1 else IntersectionType(members=members, loc=loc)
	if name == "function_type":
		params_tree = _first(tree, "params")
		returns = [c for c in _trees(tree) if _name(c) != "params"][-1]
		return FunctionType(
			params=_build_params(params_tree) if params_tree is not None else [],
			returns=_build_type(returns),
			loc=loc,
		)
	if name == "keyof_type":
		return TypeOperator(op="keyof", operand=_build_type(_trees(tree)[0]), loc=loc)
	if name == "typeof_type":
		return TypeOperator(op="typeof", operand=TypeRef(name=_qualified_name(_trees(tree)[0])), loc=loc)
	if name == "array_type":
		return ArrayType(element=_build_type(_trees(tree)[0]), loc=loc)
	if name == "indexed_type":
		obj, index = _trees(tree)
		return IndexedType(object=_build_type(obj), index=_build_type(index), loc=loc)
	if name == "tuple_type":
		return TupleType(elements=[_build_type(c) for c in _trees(tree)], loc=loc)
	if name == "paren_type":
		return ParenType(inner=_build_type(_trees(tree)[0]), loc=loc)
	if name == "literal_type":
		return LiteralType(literal=_literal_type_value(tree), loc=loc)
	if name == "type_ref":
		qualified = _trees(tree, "qualified_name")[0]
		args_tree = _first(tree, "type_args")
		args = [_build_type(c) for c in _trees(args_tree)] if args_tree is not None else []
		return TypeRef(name=_qualified_name(qualified), args=args, loc=loc)
	if name == "type_literal":
		return TypeLiteral(members=[_build_type_member(m) for m in _trees(tree)], loc=loc)
	raise TypeError(f"Unhandled type node: {name}")


def _qualified_name(tree: Tree) -> str:
	parts: List[str] = []
	for child in tree.children:
		if isinstance(child, Token):
			parts.append(child.value)
		else:
			parts.append(_ident(child))
	return ".".join(parts)


def _literal_type_value(tree: Tree) -> Expr:
	toks = _tokens(tree)
	loc = _loc(tree)
	if len(toks) == 2:
		return NumericLiteral(raw="-" + toks[1].value, loc=loc)
	tok = toks[0]
	if tok.type == "STRING":
		return StringLiteral(value=_decode_string_token(tok), loc=loc)
	if tok.type == "NUMBER":
		return NumericLiteral(raw=tok.value, loc=loc)
	if tok.type == "TRUE":
		return BooleanLiteral(value=True, loc=loc)
	if tok.type == "FALSE":
		return BooleanLiteral(value=False, loc=loc)
	return NullLiteral(loc=loc)


def _member_key_text(tree: Tree) -> str:
	child = tree.children[0]
	if isinstance(child, Token):
		if child.type == "STRING":
			return _decode_string_token(child)
		return child.value
	return _ident(child)


def _build_type_member(tree: Tree):
	name = _name(tree)
	loc = _loc(tree)
	if name == "prop_sig":
		key_tree, ann = _trees(tree)
		return PropertySignature(
			name=_member_key_text(key_tree),
			type=_build_type_ann(ann),
			optional=_has_token(tree, "QMARK"),
			loc=loc,
		)
	if name == "method_sig":
		key_tree = _trees(tree)[0]
		params_tree = _first(tree, "params")
		ann = _first(tree, "type_ann")
		return MethodSignature(
			name=_member_key_text(key_tree),
			params=_build_params(params_tree) if params_tree is not None else [],
			returns=_build_type_ann(ann) if ann is not None else None,
			optional=_has_token(tree, "QMARK"),
			loc=loc,
		)
	key_tree, key_type, ann = _trees(tree)
	return IndexSignature(
		key_name=_ident(key_tree),
		key_type=_build_type(key_type),
		value_type=_build_type_ann(ann),
		loc=loc,
	)


# Expressions --------------------------------------------------------------------

def _build_expr(node) -> Expr:
	if isinstance(node, Token):
		return _build_token_expr(node)
	name = _name(node)
	loc = _loc(node)
	if name == "identifier":
		return Identifier(name=_ident(node), loc=loc)
	if name in {"number", "string", "template", "true", "false", "null", "this_expr"}:
		return _build_token_expr(node.children[0])
	if name == "binary":
		left, right = node.children[0], node.children[-1]
		# `>>` and `>>>` arrive as separate `>` tokens.
		op = "".join(t.value for t in node.children[1:-1] if isinstance(t, Token))
		return Binary(op=op, left=_build_expr(left), right=_build_expr(right), loc=loc)
	if name == "unary":
		op_tok = node.children[0]
		return Unary(op=op_tok.value, operand=_build_expr(node.children[1]), loc=loc)
	if name == "prefix_update":
		return Update(op=node.children[0].value, prefix=True, operand=_build_expr(node.children[1]), loc=loc)
	if name == "postfix_update":
		return Update(op=node.children[1].value, prefix=False, operand=_build_expr(node.children[0]), loc=loc)
	if name == "assignment":
		target, op_tok, value = node.children
		return Assign(op=op_tok.value, target=_build_expr(target), value=_build_expr(value), loc=loc)
	if name == "ternary":
		test, _q, consequent, alternate = node.children
		return Conditional(
			test=_build_expr(test),
			consequent=_build_expr(consequent),
			alternate=_build_expr(alternate),
			loc=loc,
		)
	if name == "sequence":
		return Sequence(expressions=[_build_expr(c) for c in node.children], loc=loc)
	if name == "as_expr":
		expr_node, _as, type_node = node.children
		return AsExpr(expr=_build_expr(expr_node), type=_build_type(type_node), loc=loc)
	if name == "arrow_function":
		return _build_arrow(node)
	if name == "function_expr":
		parts = _build_function_parts(node)
		return FunctionExpr(loc=loc, **parts)
	if name == "member":
		obj, prop = node.children
		return Member(object=_build_expr(obj), property=prop.value, loc=loc)
	if name == "opt_member":
		obj, _qdot, prop = node.children
		return Member(object=_build_expr(obj), property=prop.value, optional=True, loc=loc)
	if name == "index":
		obj, index = node.children
		return Index(object=_build_expr(obj), index=_build_expr(index), loc=loc)
	if name == "opt_index":
		obj, _qdot, index = node.children
		return Index(object=_build_expr(obj), index=_build_expr(index), optional=True, loc=loc)
	if name == "call":
		callee = node.children[0]
		type_args_tree = _first(node, "call_type_args")
		args_tree = node.children[-1]
		return Call(
			callee=_build_expr(callee),
			args=_build_arguments(args_tree),
			type_args=[_build_type(c) for c in _trees(type_args_tree)] if type_args_tree is not None else [],
			loc=loc,
		)
	if name == "opt_call":
		callee, _qdot, args_tree = node.children
		return Call(callee=_build_expr(callee), args=_build_arguments(args_tree), optional=True, loc=loc)
	if name == "new_expr":
		callee = node.children[0]
		type_args_tree = _first(node, "call_type_args")
		return New(
			callee=_build_expr(callee),
			args=_build_arguments(node.children[-1]),
			type_args=[_build_type(c) for c in _trees(type_args_tree)] if type_args_tree is not None else [],
			loc=loc,
		)
	if name == "tagged_template":
		tag, tmpl = node.children
		return TaggedTemplate(tag=_build_expr(tag), template=_build_template(tmpl), loc=loc)
	if name == "non_null":
		return NonNull(expr=_build_expr(node.children[0]), loc=loc)
	if name == "spread":
		return SpreadElement(argument=_build_expr(node.children[0]), loc=loc)
	if name == "array_literal":
		return ArrayLiteral(elements=[_build_expr(c) for c in node.children], loc=loc)
	if name == "object_literal":
		return ObjectLiteral(properties=[_build_object_member(m) for m in _trees(node)], loc=loc)
	if name == "expr_entry":
		return _build_expr(node.children[0])
	raise TypeError(f"Unhandled expression node: {name}")


def _build_token_expr(tok: Token) -> Expr:
	loc = _loc_from_token(tok)
	ttype = tok.type
	if ttype == "NUMBER":
		return NumericLiteral(raw=tok.value, loc=loc)
	if ttype == "STRING":
		return StringLiteral(value=_decode_string_token(tok), loc=loc)
	if ttype == "TEMPLATE":
		return _build_template(tok)
	if ttype == "TRUE":
		return BooleanLiteral(value=True, loc=loc)
	if ttype == "FALSE":
		return BooleanLiteral(value=False, loc=loc)
	if ttype == "NULL":
		return NullLiteral(loc=loc)
	if ttype == "THIS":
		return ThisExpr(loc=loc)
	return Identifier(name=tok.value, loc=loc)


def _build_arguments(tree: Tree) -> List[Expr]:
	return [_build_expr(c) for c in tree.children]


def _build_arrow(tree: Tree) -> Arrow:
	is_async = _has_token(tree, "ASYNC")
	params: List[Param] = []
	return_type: Optional[TypeNode] = None
	body = None
	for child in tree.children:
		if isinstance(child, Token):
			continue
		child_name = _name(child)
		if child_name == "arrow_single":
			ident = _trees(child)[0]
			params = [Param(pattern=BindingIdentifier(name=_ident(ident), loc=_loc(ident)), loc=_loc(child))]
		elif child_name == "arrow_list":
			params_tree = _first(child, "params")
			params = _build_params(params_tree) if params_tree is not None else []
		elif child_name == "type_ann":
			return_type = _build_type_ann(child)
		elif child_name == "block":
			body = _build_block(child)
		else:
			body = _build_expr(child)
	if body is None:
		raise MalformedExpressionError("arrow function without a body", loc=_loc(tree))
	return Arrow(params=params, body=body, is_async=is_async, return_type=return_type, loc=_loc(tree))


def _build_object_member(tree: Tree):
	name = _name(tree)
	loc = _loc(tree)
	if name == "prop_spread":
		return SpreadElement(argument=_build_expr(tree.children[0]), loc=loc)
	if name == "prop_shorthand":
		ident = _trees(tree)[0]
		key = Identifier(name=_ident(ident), loc=_loc(ident))
		return Property(key=key, value=Identifier(name=key.name, loc=key.loc), shorthand=True, loc=loc)
	if name == "prop_init":
		key_tree, value = tree.children
		key, computed = _build_prop_key(key_tree)
		return Property(key=key, value=_build_expr(value), computed=computed, loc=loc)
	# prop_method
	key_tree = _trees(tree)[0]
	key, computed = _build_prop_key(key_tree)
	parts = _build_function_parts(tree)
	return Property(key=key, value=FunctionExpr(loc=loc, **parts), computed=computed, method=True, loc=loc)


def _build_prop_key(tree: Tree) -> tuple[Expr, bool]:
	name = _name(tree)
	loc = _loc(tree)
	if name == "key_name":
		return Identifier(name=_ident(_trees(tree)[0]), loc=loc), False
	if name == "key_string":
		return StringLiteral(value=_decode_string_token(_tokens(tree)[0]), loc=loc), False
	if name == "key_number":
		return NumericLiteral(raw=_tokens(tree)[0].value, loc=loc), False
	return _build_expr(tree.children[0]), True


__all__ = ["decode_js_string", "parse_expression", "parse_module", "split_template"]
