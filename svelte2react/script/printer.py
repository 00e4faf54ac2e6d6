# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
TSX printer for the script AST.

Output resembles prettier's TypeScript style: two-space indentation, double
quoted strings, `;` after statements, `{ a, b }` object spacing, arrow
parameters always parenthesized, and multi-line JSX wrapped in parentheses
where it is the body of an arrow, a return, or a conditional branch.

Every `_print_*` method returns text whose first line starts at the caller's
current column and whose following lines carry indentation relative to it;
callers nest blocks with `_indent`. Layout decisions only depend on the tree,
so printing is deterministic.
"""

from __future__ import annotations

import re
from typing import List, Optional

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
	Index,
	IndexedType,
	IndexSignature,
	InterfaceDecl,
	IntersectionType,
	JsxAttribute,
	JsxElement,
	JsxExpressionContainer,
	JsxFragment,
	JsxSpreadAttribute,
	JsxText,
	Labeled,
	LiteralType,
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

PRINT_WIDTH = 80
INDENT = "  "

_BINARY_PRECEDENCE = {
	"??": 4,
	"||": 4,
	"&&": 5,
	"|": 6,
	"^": 7,
	"&": 8,
	"==": 9,
	"!=": 9,
	"===": 9,
	"!==": 9,
	"<": 10,
	">": 10,
	"<=": 10,
	">=": 10,
	"instanceof": 10,
	"in": 10,
	"<<": 11,
	">>": 11,
	">>>": 11,
	"+": 12,
	"-": 12,
	"*": 13,
	"/": 13,
	"%": 13,
	"**": 14,
}

PREC_SEQUENCE = 1
PREC_ASSIGN = 2
PREC_CONDITIONAL = 3
PREC_AS = 10
PREC_UNARY = 15
PREC_POSTFIX = 16
PREC_CALL = 17
PREC_PRIMARY = 18

_IDENT_RE = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")
_JSX_TEXT_SPECIAL = re.compile(r"[{}<>]")


def precedence(expr: Expr) -> int:
	if isinstance(expr, Sequence):
		return PREC_SEQUENCE
	if isinstance(expr, (Assign, Arrow)):
		return PREC_ASSIGN
	if isinstance(expr, Conditional):
		return PREC_CONDITIONAL
	if isinstance(expr, Binary):
		return _BINARY_PRECEDENCE.get(expr.op, 10)
	if isinstance(expr, AsExpr):
		return PREC_AS
	if isinstance(expr, Unary):
		return PREC_UNARY
	if isinstance(expr, Update):
		return PREC_UNARY if expr.prefix else PREC_POSTFIX
	if isinstance(expr, (Call, Member, Index, New, TaggedTemplate, NonNull)):
		return PREC_CALL
	return PREC_PRIMARY


def quote_string(value: str) -> str:
	"""Render `value` as a double-quoted JS string literal."""
	out = ['"']
	for ch in value:
		if ch == "\\":
			out.append("\\\\")
		elif ch == '"':
			out.append('\\"')
		elif ch == "\n":
			out.append("\\n")
		elif ch == "\r":
			out.append("\\r")
		elif ch == "\t":
			out.append("\\t")
		elif ch in "\u2028\u2029":
			out.append(f"\\u{ord(ch):04x}")
		elif ord(ch) < 0x20:
			out.append(f"\\x{ord(ch):02x}")
		else:
			out.append(ch)
	out.append('"')
	return "".join(out)


def jsx_text_value(raw: str) -> str:
	"""
	The string a JSX text child evaluates to.

	Lines are trimmed where they touch a line break, whitespace-only lines
	vanish, and the remaining lines are joined with single spaces.
	"""
	lines = raw.replace("\r\n", "\n").split("\n")
	if len(lines) == 1:
		return raw
	kept: List[str] = []
	last = len(lines) - 1
	for i, line in enumerate(lines):
		if i > 0:
			line = line.lstrip(" \t")
		if i < last:
			line = line.rstrip(" \t")
		if line:
			kept.append(line)
	return " ".join(kept)


def _escape_jsx_text(text: str) -> str:
	return _JSX_TEXT_SPECIAL.sub(lambda m: "{" + quote_string(m.group(0)) + "}", text)


def _indent(text: str) -> str:
	return "\n".join(INDENT + line if line else line for line in text.split("\n"))


def _is_multiline(text: str) -> bool:
	return "\n" in text


def _is_jsx(expr: Expr) -> bool:
	return isinstance(expr, (JsxElement, JsxFragment))


class Printer:
	"""Stateless TSX printer; one instance can print any number of trees."""

	# Modules --------------------------------------------------------------

	def print_module(self, module: Module) -> str:
		chunks: List[str] = []
		prev: Optional[Stmt] = None
		prev_text = ""
		for stmt in module.body:
			text = self.print_statement(stmt)
			if prev is not None:
				separate = _is_multiline(text) or _is_multiline(prev_text)
				separate = separate or (isinstance(prev, ImportDecl) != isinstance(stmt, ImportDecl))
				if separate:
					chunks.append("")
			chunks.append(text)
			prev, prev_text = stmt, text
		if not chunks:
			return ""
		return "\n".join(chunks) + "\n"

	# Statements -----------------------------------------------------------

	def print_statement(self, stmt: Stmt) -> str:
		if isinstance(stmt, ExprStmt):
			text = self.print_expression(stmt.expr)
			if isinstance(stmt.expr, (ObjectLiteral, FunctionExpr)):
				text = f"({text})"
			return text + ";"
		if isinstance(stmt, VarDecl):
			prefix = "export " if stmt.exported else ""
			return prefix + self._print_var_decl(stmt) + ";"
		if isinstance(stmt, FunctionDecl):
			return self._print_function_decl(stmt)
		if isinstance(stmt, Return):
			if stmt.value is None:
				return "return;"
			value = self.print_expression(stmt.value)
			if _is_jsx(stmt.value) and _is_multiline(value):
				return "return (\n" + _indent(value) + "\n);"
			return f"return {value};"
		if isinstance(stmt, Block):
			return self._print_block(stmt)
		if isinstance(stmt, If):
			return self._print_if(stmt)
		if isinstance(stmt, For):
			init = ""
			if isinstance(stmt.init, VarDecl):
				init = self._print_var_decl(stmt.init)
			elif stmt.init is not None:
				init = self.print_expression(stmt.init)
			test = self.print_expression(stmt.test) if stmt.test is not None else ""
			update = self.print_expression(stmt.update) if stmt.update is not None else ""
			head = f"for ({init}; {test}; {update})".replace("; )", ";)")
			return head + self._print_body(stmt.body)
		if isinstance(stmt, ForIn):
			if isinstance(stmt.left, VarDecl):
				left = self._print_var_decl(stmt.left)
			else:
				left = self.print_expression(stmt.left)
			keyword = "of" if stmt.of else "in"
			await_ = " await" if stmt.is_await else ""
			return f"for{await_} ({left} {keyword} {self.print_expression(stmt.right)})" + self._print_body(stmt.body)
		if isinstance(stmt, While):
			return f"while ({self.print_expression(stmt.test)})" + self._print_body(stmt.body)
		if isinstance(stmt, DoWhile):
			body = self._print_body(stmt.body).lstrip()
			return f"do {body} while ({self.print_expression(stmt.test)});"
		if isinstance(stmt, Throw):
			return f"throw {self.print_expression(stmt.value)};"
		if isinstance(stmt, Break):
			return f"break {stmt.label};" if stmt.label else "break;"
		if isinstance(stmt, Continue):
			return f"continue {stmt.label};" if stmt.label else "continue;"
		if isinstance(stmt, Try):
			text = "try " + self._print_block(stmt.block)
			if stmt.handler is not None:
				param = f"({self.print_pattern(stmt.param)}) " if stmt.param is not None else ""
				text += f" catch {param}" + self._print_block(stmt.handler)
			if stmt.finalizer is not None:
				text += " finally " + self._print_block(stmt.finalizer)
			return text
		if isinstance(stmt, Switch):
			cases: List[str] = []
			for case in stmt.cases:
				head = f"case {self.print_expression(case.test)}:" if case.test is not None else "default:"
				body = [self.print_statement(s) for s in case.body]
				if len(body) == 1 and isinstance(case.body[0], Block):
					cases.append(f"{head} {body[0]}")
				elif body:
					cases.append(head + "\n" + _indent("\n".join(body)))
				else:
					cases.append(head)
			inner = "\n".join(cases)
			return f"switch ({self.print_expression(stmt.discriminant)}) {{\n{_indent(inner)}\n}}"
		if isinstance(stmt, Labeled):
			return f"{stmt.label}: {self.print_statement(stmt.body)}"
		if isinstance(stmt, Empty):
			return ";"
		if isinstance(stmt, ImportDecl):
			return self._print_import(stmt)
		if isinstance(stmt, ExportNamed):
			specs = ", ".join(s.local if s.local == s.exported else f"{s.local} as {s.exported}" for s in stmt.specifiers)
			type_ = "type " if stmt.type_only else ""
			text = f"export {type_}{{ {specs} }}" if specs else f"export {type_}{{}}"
			if stmt.source is not None:
				text += f" from {quote_string(stmt.source)}"
			return text + ";"
		if isinstance(stmt, ExportAll):
			alias = f" as {stmt.alias}" if stmt.alias else ""
			return f"export *{alias} from {quote_string(stmt.source)};"
		if isinstance(stmt, ExportDefault):
			value = self.print_expression(stmt.value)
			return f"export default {value};"
		if isinstance(stmt, TypeAlias):
			prefix = "export " if stmt.exported else ""
			params = self._print_type_params(stmt.type_params)
			return f"{prefix}type {stmt.name}{params} = {self.print_type(stmt.type)};"
		if isinstance(stmt, InterfaceDecl):
			prefix = "export " if stmt.exported else ""
			params = self._print_type_params(stmt.type_params)
			extends = ""
			if stmt.extends:
				extends = " extends " + ", ".join(self.print_type(t) for t in stmt.extends)
			body = self._print_type_literal(stmt.body, force_multiline=bool(stmt.body.members))
			return f"{prefix}interface {stmt.name}{params}{extends} {body}"
		raise TypeError(f"Unhandled statement node: {type(stmt).__name__}")

	def _print_block(self, block: Block) -> str:
		if not block.statements:
			return "{}"
		inner = "\n".join(self.print_statement(s) for s in block.statements)
		return "{\n" + _indent(inner) + "\n}"

	def _print_body(self, body: Stmt) -> str:
		if isinstance(body, Block):
			return " " + self._print_block(body)
		return "\n" + _indent(self.print_statement(body))

	def _print_if(self, stmt: If) -> str:
		text = f"if ({self.print_expression(stmt.test)})" + self._print_body(stmt.consequent)
		if stmt.alternate is None:
			return text
		sep = " " if isinstance(stmt.consequent, Block) else "\n"
		if isinstance(stmt.alternate, If):
			return text + f"{sep}else " + self._print_if(stmt.alternate)
		return text + f"{sep}else" + self._print_body(stmt.alternate)

	def _print_var_decl(self, decl: VarDecl) -> str:
		return f"{decl.kind} " + ", ".join(self._print_declarator(d) for d in decl.declarations)

	def _print_declarator(self, decl: VarDeclarator) -> str:
		text = self.print_pattern(decl.target)
		if decl.type is not None:
			text += ": " + self.print_type(decl.type)
		if decl.init is not None:
			text += " = " + self._print_operand(decl.init, PREC_ASSIGN)
		return text

	def _print_function_decl(self, fn: FunctionDecl) -> str:
		prefix = ""
		if fn.exported:
			prefix = "export default " if fn.default_export else "export "
		async_ = "async " if fn.is_async else ""
		name = f" {fn.name}" if fn.name else ""
		signature = self._print_signature(fn.params, fn.return_type, fn.type_params)
		return f"{prefix}{async_}function{name}{signature} {self._print_block(fn.body)}"

	def _print_signature(
		self,
		params: List[Param],
		return_type: Optional[TypeNode],
		type_params: List[TypeParam],
	) -> str:
		text = self._print_type_params(type_params) + "(" + self._print_params(params) + ")"
		if return_type is not None:
			text += ": " + self.print_type(return_type)
		return text

	def _print_import(self, decl: ImportDecl) -> str:
		if decl.default is None and decl.namespace is None and not decl.specifiers:
			return f"import {quote_string(decl.source)};"
		parts: List[str] = []
		if decl.default is not None:
			parts.append(decl.default)
		if decl.namespace is not None:
			parts.append(f"* as {decl.namespace}")
		if decl.specifiers:
			specs: List[str] = []
			for spec in decl.specifiers:
				text = spec.imported if spec.imported == spec.local else f"{spec.imported} as {spec.local}"
				specs.append(("type " if spec.type_only else "") + text)
			parts.append("{ " + ", ".join(specs) + " }")
		type_ = "type " if decl.type_only else ""
		return f"import {type_}{', '.join(parts)} from {quote_string(decl.source)};"

	# Patterns and parameters ----------------------------------------------

	def print_pattern(self, pattern: Pattern) -> str:
		if isinstance(pattern, BindingIdentifier):
			return pattern.name
		if isinstance(pattern, AssignmentPattern):
			return f"{self.print_pattern(pattern.target)} = {self._print_operand(pattern.default, PREC_ASSIGN)}"
		if isinstance(pattern, RestElement):
			return "..." + self.print_pattern(pattern.argument)
		if isinstance(pattern, ObjectPattern):
			if not pattern.properties:
				return "{}"
			return "{ " + ", ".join(self._print_pattern_property(p) for p in pattern.properties) + " }"
		if isinstance(pattern, ArrayPattern):
			return "[" + ", ".join(self.print_pattern(p) for p in pattern.elements) + "]"
		raise TypeError(f"Unhandled pattern node: {type(pattern).__name__}")

	def _print_pattern_property(self, prop) -> str:
		if isinstance(prop, RestElement):
			return self.print_pattern(prop)
		if not isinstance(prop, PatternProperty):
			raise TypeError(f"Unhandled pattern property: {type(prop).__name__}")
		if prop.shorthand:
			return self.print_pattern(prop.value)
		key = prop.key if _IDENT_RE.match(prop.key) else quote_string(prop.key)
		return f"{key}: {self.print_pattern(prop.value)}"

	def _print_params(self, params: List[Param]) -> str:
		return ", ".join(self._print_param(p) for p in params)

	def _print_param(self, param: Param) -> str:
		text = ("..." if param.rest else "") + self.print_pattern(param.pattern)
		if param.optional:
			text += "?"
		if param.type is not None:
			text += ": " + self.print_type(param.type)
		if param.default is not None:
			text += " = " + self._print_operand(param.default, PREC_ASSIGN)
		return text

	# Types ------------------------------------------------------------------

	def print_type(self, node: TypeNode) -> str:
		if isinstance(node, TypeRef):
			if node.args:
				return node.name + "<" + ", ".join(self.print_type(a) for a in node.args) + ">"
			return node.name
		if isinstance(node, ArrayType):
			element = self.print_type(node.element)
			if isinstance(node.element, (UnionType, IntersectionType, FunctionType)):
				element = f"({element})"
			return element + "[]"
		if isinstance(node, IndexedType):
			return f"{self.print_type(node.object)}[{self.print_type(node.index)}]"
		if isinstance(node, UnionType):
			return " | ".join(self._print_type_member_of(m, UnionType) for m in node.members)
		if isinstance(node, IntersectionType):
			return " & ".join(self._print_type_member_of(m, IntersectionType) for m in node.members)
		if isinstance(node, FunctionType):
			return f"({self._print_params(node.params)}) => {self.print_type(node.returns)}"
		if isinstance(node, TypeLiteral):
			return self._print_type_literal(node)
		if isinstance(node, TupleType):
			return "[" + ", ".join(self.print_type(e) for e in node.elements) + "]"
		if isinstance(node, LiteralType):
			return self.print_expression(node.literal)
		if isinstance(node, TypeOperator):
			return f"{node.op} {self.print_type(node.operand)}"
		if isinstance(node, ParenType):
			return f"({self.print_type(node.inner)})"
		raise TypeError(f"Unhandled type node: {type(node).__name__}")

	def _print_type_member_of(self, member: TypeNode, parent: type) -> str:
		text = self.print_type(member)
		if isinstance(member, FunctionType) or (isinstance(member, (UnionType, IntersectionType)) and not isinstance(member, parent)):
			return f"({text})"
		return text

	def _print_type_literal(self, node: TypeLiteral, force_multiline: bool = False) -> str:
		if not node.members:
			return "{}"
		members = [self._print_type_member(m) for m in node.members]
		inline = "{ " + "; ".join(members) + " }"
		if force_multiline or any(_is_multiline(m) for m in members) or len(inline) > PRINT_WIDTH:
			return "{\n" + _indent("\n".join(m + ";" for m in members)) + "\n}"
		return inline

	def _print_type_member(self, member) -> str:
		if isinstance(member, PropertySignature):
			readonly = "readonly " if member.readonly else ""
			optional = "?" if member.optional else ""
			name = member.name if _IDENT_RE.match(member.name) else quote_string(member.name)
			type_ = ": " + self.print_type(member.type) if member.type is not None else ""
			return f"{readonly}{name}{optional}{type_}"
		if isinstance(member, MethodSignature):
			optional = "?" if member.optional else ""
			returns = ": " + self.print_type(member.returns) if member.returns is not None else ""
			return f"{member.name}{optional}({self._print_params(member.params)}){returns}"
		if isinstance(member, IndexSignature):
			return f"[{member.key_name}: {self.print_type(member.key_type)}]: {self.print_type(member.value_type)}"
		raise TypeError(f"Unhandled type member: {type(member).__name__}")

	def _print_type_params(self, params: List[TypeParam]) -> str:
		if not params:
			return ""
		parts: List[str] = []
		for param in params:
			text = param.name
			if param.constraint is not None:
				text += " extends " + self.print_type(param.constraint)
			if param.default is not None:
				text += " = " + self.print_type(param.default)
			parts.append(text)
		return "<" + ", ".join(parts) + ">"

	# Expressions ------------------------------------------------------------

	def _print_operand(self, expr: Expr, min_prec: int) -> str:
		text = self.print_expression(expr)
		if precedence(expr) < min_prec:
			return f"({text})"
		return text

	def print_expression(self, expr: Expr) -> str:
		if isinstance(expr, Identifier):
			return expr.name
		if isinstance(expr, StringLiteral):
			return quote_string(expr.value)
		if isinstance(expr, NumericLiteral):
			return expr.raw
		if isinstance(expr, BooleanLiteral):
			return "true" if expr.value else "false"
		if isinstance(expr, NullLiteral):
			return "null"
		if isinstance(expr, ThisExpr):
			return "this"
		if isinstance(expr, TemplateLiteral):
			return self._print_template(expr)
		if isinstance(expr, TaggedTemplate):
			return self._print_operand(expr.tag, PREC_CALL) + self._print_template(expr.template)
		if isinstance(expr, ArrayLiteral):
			return "[" + ", ".join(self._print_operand(e, PREC_ASSIGN) for e in expr.elements) + "]"
		if isinstance(expr, ObjectLiteral):
			return self._print_object(expr)
		if isinstance(expr, SpreadElement):
			return "..." + self._print_operand(expr.argument, PREC_ASSIGN)
		if isinstance(expr, Member):
			obj = self._print_operand(expr.object, PREC_CALL)
			if isinstance(expr.object, NumericLiteral) and expr.object.raw.isdigit():
				obj = f"({obj})"
			return obj + ("?." if expr.optional else ".") + expr.property
		if isinstance(expr, Index):
			obj = self._print_operand(expr.object, PREC_CALL)
			return obj + ("?.[" if expr.optional else "[") + self.print_expression(expr.index) + "]"
		if isinstance(expr, Call):
			callee = self._print_operand(expr.callee, PREC_CALL)
			type_args = ""
			if expr.type_args:
				type_args = "<" + ", ".join(self.print_type(t) for t in expr.type_args) + ">"
			return callee + type_args + ("?.(" if expr.optional else "(") + self._print_args(expr.args) + ")"
		if isinstance(expr, New):
			callee = self._print_operand(expr.callee, PREC_CALL)
			if isinstance(expr.callee, Call):
				callee = f"({callee})"
			type_args = ""
			if expr.type_args:
				type_args = "<" + ", ".join(self.print_type(t) for t in expr.type_args) + ">"
			return f"new {callee}{type_args}(" + self._print_args(expr.args) + ")"
		if isinstance(expr, Unary):
			operand = self._print_operand(expr.operand, PREC_UNARY)
			if expr.op.isalpha():
				return f"{expr.op} {operand}"
			if operand.startswith(expr.op[-1]):
				return f"{expr.op} {operand}"
			return expr.op + operand
		if isinstance(expr, Update):
			if expr.prefix:
				return expr.op + self._print_operand(expr.operand, PREC_UNARY)
			return self._print_operand(expr.operand, PREC_POSTFIX) + expr.op
		if isinstance(expr, Binary):
			return self._print_binary(expr)
		if isinstance(expr, Assign):
			target = self._print_operand(expr.target, PREC_CALL)
			return f"{target} {expr.op} {self._print_operand(expr.value, PREC_ASSIGN)}"
		if isinstance(expr, Conditional):
			return self._print_conditional(expr)
		if isinstance(expr, Sequence):
			return ", ".join(self._print_operand(e, PREC_ASSIGN) for e in expr.expressions)
		if isinstance(expr, Arrow):
			return self._print_arrow(expr)
		if isinstance(expr, FunctionExpr):
			async_ = "async " if expr.is_async else ""
			name = f" {expr.name}" if expr.name else ""
			signature = self._print_signature(expr.params, expr.return_type, expr.type_params)
			return f"{async_}function{name}{signature} {self._print_block(expr.body)}"
		if isinstance(expr, AsExpr):
			return f"{self._print_operand(expr.expr, PREC_AS)} as {self.print_type(expr.type)}"
		if isinstance(expr, NonNull):
			return self._print_operand(expr.expr, PREC_CALL) + "!"
		if isinstance(expr, (JsxElement, JsxFragment)):
			return self._print_jsx(expr)
		if isinstance(expr, JsxExpressionContainer):
			if isinstance(expr.expression, Conditional):
				return "{" + self._print_jsx_conditional(expr.expression) + "}"
			return "{" + self.print_expression(expr.expression) + "}"
		if isinstance(expr, JsxText):
			return _escape_jsx_text(jsx_text_value(expr.value))
		raise TypeError(f"Unhandled expression node: {type(expr).__name__}")

	def _print_args(self, args: List[Expr]) -> str:
		return ", ".join(self._print_operand(a, PREC_ASSIGN) for a in args)

	def _print_template(self, tmpl: TemplateLiteral) -> str:
		parts = ["`", tmpl.quasis[0]]
		for expr, quasi in zip(tmpl.expressions, tmpl.quasis[1:]):
			parts.append("${" + self.print_expression(expr) + "}")
			parts.append(quasi)
		parts.append("`")
		return "".join(parts)

	def _print_binary(self, expr: Binary) -> str:
		prec = _BINARY_PRECEDENCE.get(expr.op, 10)
		left = self.print_expression(expr.left)
		right = self.print_expression(expr.right)
		left_prec = precedence(expr.left)
		right_prec = precedence(expr.right)
		if expr.op == "**":
			wrap_left = left_prec <= prec
			wrap_right = right_prec < prec
		else:
			wrap_left = left_prec < prec
			wrap_right = right_prec <= prec
		# `??` cannot mix with `||`/`&&` without parentheses.
		if expr.op == "??" or (expr.op in {"||", "&&"}):
			wrap_left = wrap_left or self._mixes_nullish(expr.op, expr.left)
			wrap_right = wrap_right or self._mixes_nullish(expr.op, expr.right)
		if wrap_left:
			left = f"({left})"
		if wrap_right:
			right = f"({right})"
		return f"{left} {expr.op} {right}"

	@staticmethod
	def _mixes_nullish(op: str, operand: Expr) -> bool:
		if not isinstance(operand, Binary):
			return False
		if op == "??":
			return operand.op in {"||", "&&"}
		return operand.op == "??"

	def _print_conditional(self, expr: Conditional) -> str:
		test = self._print_operand(expr.test, PREC_CONDITIONAL + 1)
		consequent = self._print_branch(expr.consequent)
		alternate = self._print_branch(expr.alternate, chained=True)
		return f"{test} ? {consequent} : {alternate}"

	def _print_branch(self, expr: Expr, chained: bool = False) -> str:
		if chained and isinstance(expr, Conditional):
			return self.print_expression(expr)
		text = self._print_operand(expr, PREC_ASSIGN)
		if _is_jsx(expr) and _is_multiline(text):
			return "(\n" + _indent(text) + "\n)"
		return text

	def _print_jsx_conditional(self, expr: Conditional) -> str:
		"""
		Ternary in a JSX child position. When it does not fit on one line and
		a branch is JSX, every JSX branch goes on its own parenthesized lines.
		"""
		inline = self._print_conditional(expr)
		has_jsx = _is_jsx(expr.consequent) or _is_jsx(expr.alternate)
		if not has_jsx or (not _is_multiline(inline) and len(inline) + 2 <= PRINT_WIDTH):
			return inline
		parts = [self._print_operand(expr.test, PREC_CONDITIONAL + 1) + " ? "]
		node = expr
		while True:
			parts.append(self._print_broken_branch(node.consequent))
			parts.append(" : ")
			alternate = node.alternate
			if not isinstance(alternate, Conditional):
				parts.append(self._print_broken_branch(alternate))
				return "".join(parts)
			parts.append(self._print_operand(alternate.test, PREC_CONDITIONAL + 1) + " ? ")
			node = alternate

	def _print_broken_branch(self, expr: Expr) -> str:
		text = self._print_operand(expr, PREC_ASSIGN)
		if _is_jsx(expr):
			return "(\n" + _indent(text) + "\n)"
		return text

	def _print_arrow(self, expr: Arrow) -> str:
		async_ = "async " if expr.is_async else ""
		head = f"{async_}({self._print_params(expr.params)})"
		if expr.return_type is not None:
			head += ": " + self.print_type(expr.return_type)
		if isinstance(expr.body, Block):
			return f"{head} => {self._print_block(expr.body)}"
		body = self.print_expression(expr.body)
		if isinstance(expr.body, (ObjectLiteral, Sequence)):
			body = f"({body})"
		elif _is_jsx(expr.body) and _is_multiline(body):
			body = "(\n" + _indent(body) + "\n)"
		return f"{head} => {body}"

	def _print_object(self, expr: ObjectLiteral) -> str:
		if not expr.properties:
			return "{}"
		props = [self._print_property(p) for p in expr.properties]
		inline = "{ " + ", ".join(props) + " }"
		if any(_is_multiline(p) for p in props) or len(inline) > PRINT_WIDTH:
			return "{\n" + _indent(",\n".join(props) + ",") + "\n}"
		return inline

	def _print_property(self, prop) -> str:
		if isinstance(prop, SpreadElement):
			return self.print_expression(prop)
		if not isinstance(prop, Property):
			raise TypeError(f"Unhandled object member: {type(prop).__name__}")
		if prop.shorthand:
			return self.print_expression(prop.value)
		if prop.computed:
			key = "[" + self.print_expression(prop.key) + "]"
		else:
			key = self.print_expression(prop.key)
		if prop.method and isinstance(prop.value, FunctionExpr):
			fn = prop.value
			async_ = "async " if fn.is_async else ""
			signature = self._print_signature(fn.params, fn.return_type, fn.type_params)
			return f"{async_}{key}{signature} {self._print_block(fn.body)}"
		return f"{key}: {self._print_operand(prop.value, PREC_ASSIGN)}"

	# JSX ----------------------------------------------------------------------

	def _print_jsx_attribute(self, attr) -> str:
		if isinstance(attr, JsxSpreadAttribute):
			return "{..." + self.print_expression(attr.argument) + "}"
		if not isinstance(attr, JsxAttribute):
			raise TypeError(f"Unhandled JSX attribute: {type(attr).__name__}")
		if attr.value is None:
			return attr.name
		if isinstance(attr.value, StringLiteral):
			value = attr.value.value
			if '"' in value or "\n" in value or "\\" in value:
				return f"{attr.name}={{{quote_string(value)}}}"
			return f'{attr.name}="{value}"'
		return f"{attr.name}={self.print_expression(attr.value)}"

	def _print_jsx(self, node: Expr) -> str:
		if isinstance(node, JsxFragment):
			open_tag, close_tag = "<>", "</>"
			attr_count = 0
		elif isinstance(node, JsxElement):
			attrs = [self._print_jsx_attribute(a) for a in node.attributes]
			open_tag = self._print_open_tag(node.name, attrs, node.self_closing)
			if node.self_closing:
				return open_tag
			close_tag = f"</{node.name}>"
			attr_count = len(attrs)
		else:
			raise TypeError(f"Unhandled JSX node: {type(node).__name__}")

		items = self._jsx_child_items(node.children)
		if not items:
			return open_tag + close_tag
		inline = "".join(text for _, text in items)
		# An element child, several expression children or several attributes
		# always break the children onto their own lines.
		forced = any(kind == "element" for kind, _ in items)
		forced = forced or sum(1 for kind, _ in items if kind == "expr") > 1
		forced = forced or attr_count > 1
		fits = len(open_tag) + len(inline) + len(close_tag) <= PRINT_WIDTH
		if not forced and fits and not _is_multiline(open_tag) and not _is_multiline(inline):
			return open_tag + inline + close_tag

		lines: List[str] = []
		run = ""
		for kind, text in items:
			if kind == "element":
				_flush_jsx_run(run, lines)
				run = ""
				lines.append(text)
			else:
				run += text
		_flush_jsx_run(run, lines)
		return open_tag + "\n" + _indent("\n".join(lines)) + "\n" + close_tag

	def _print_open_tag(self, name: str, attrs: List[str], self_closing: bool) -> str:
		end = " />" if self_closing else ">"
		if not attrs:
			return f"<{name}{end}"
		one_line = f"<{name} " + " ".join(attrs) + end
		if any(_is_multiline(a) for a in attrs) or len(one_line) > PRINT_WIDTH:
			end = "/>" if self_closing else ">"
			return f"<{name}\n" + _indent("\n".join(attrs)) + "\n" + end
		return one_line

	def _jsx_child_items(self, children: List[Expr]) -> List[tuple[str, str]]:
		"""
		Children as (kind, printed) pairs with kind "text", "expr" or
		"element". Text that evaluates to nothing is dropped.
		"""
		items: List[tuple[str, str]] = []
		for child in children:
			if isinstance(child, JsxText):
				value = jsx_text_value(child.value)
				if value:
					items.append(("text", _escape_jsx_text(value)))
			elif _is_jsx(child):
				items.append(("element", self.print_expression(child)))
			else:
				items.append(("expr", self.print_expression(child)))
		return items


def _flush_jsx_run(run: str, lines: List[str]) -> None:
	"""Emit one line of inline children; edge spaces become `{" "}` lines."""
	if not run:
		return
	stripped = run.strip(" ")
	if run.startswith(" "):
		lines.append('{" "}')
	if stripped:
		lines.append(stripped)
		if run.endswith(" "):
			lines.append('{" "}')



_DEFAULT = Printer()


def print_module(module: Module) -> str:
	return _DEFAULT.print_module(module)


def print_statement(stmt: Stmt) -> str:
	return _DEFAULT.print_statement(stmt)


def print_expression(expr: Expr) -> str:
	return _DEFAULT.print_expression(expr)


def print_type(node: TypeNode) -> str:
	return _DEFAULT.print_type(node)


__all__ = [
	"Printer",
	"jsx_text_value",
	"precedence",
	"print_expression",
	"print_module",
	"print_statement",
	"print_type",
	"quote_string",
]
