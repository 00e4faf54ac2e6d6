# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Script AST shared by the input side and the output side of the converter.

Pipeline placement:
  script parser -> [these nodes] -> stage1 rewrites / stage2 lowering -> printer

One node set covers the TypeScript subset found in component scripts, the
expressions embedded in markup, and the synthesized TSX output (JSX nodes
only ever appear on the output side). Nodes are plain mutable dataclasses;
passes build new nodes rather than mutating parsed ones.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Union


@dataclass(frozen=True)
class Located:
	line: int
	column: int


class Node:
	loc: Optional[Located]


class Expr(Node):
	pass


class Stmt(Node):
	pass


class TypeNode(Node):
	pass


class Pattern(Node):
	"""Binding target in declarations and parameters."""
	pass


# Types ---------------------------------------------------------------------


@dataclass
class TypeRef(TypeNode):
	name: str
	args: List[TypeNode] = field(default_factory=list)
	loc: Optional[Located] = None


@dataclass
class ArrayType(TypeNode):
	element: TypeNode
	loc: Optional[Located] = None


@dataclass
class IndexedType(TypeNode):
	object: TypeNode
	index: TypeNode
	loc: Optional[Located] = None


@dataclass
class UnionType(TypeNode):
	members: List[TypeNode]
	loc: Optional[Located] = None


@dataclass
class IntersectionType(TypeNode):
	members: List[TypeNode]
	loc: Optional[Located] = None


@dataclass
class FunctionType(TypeNode):
	params: List["Param"]
	returns: TypeNode
	loc: Optional[Located] = None


@dataclass
class PropertySignature(Node):
	name: str
	type: Optional[TypeNode]
	optional: bool = False
	readonly: bool = False
	loc: Optional[Located] = None


@dataclass
class MethodSignature(Node):
	name: str
	params: List["Param"]
	returns: Optional[TypeNode]
	optional: bool = False
	loc: Optional[Located] = None


@dataclass
class IndexSignature(Node):
	key_name: str
	key_type: TypeNode
	value_type: TypeNode
	loc: Optional[Located] = None


TypeMember = Union[PropertySignature, MethodSignature, IndexSignature]


@dataclass
class TypeLiteral(TypeNode):
	members: List[TypeMember] = field(default_factory=list)
	loc: Optional[Located] = None


@dataclass
class TupleType(TypeNode):
	elements: List[TypeNode]
	loc: Optional[Located] = None


@dataclass
class LiteralType(TypeNode):
	"""String/number/boolean/null literal used as a type."""

	literal: "Expr"
	loc: Optional[Located] = None


@dataclass
class TypeOperator(TypeNode):
	"""`keyof T` / `typeof x`."""

	op: str
	operand: TypeNode
	loc: Optional[Located] = None


@dataclass
class ParenType(TypeNode):
	inner: TypeNode
	loc: Optional[Located] = None


# Expressions ---------------------------------------------------------------


@dataclass
class Identifier(Expr):
	name: str
	loc: Optional[Located] = None


@dataclass
class StringLiteral(Expr):
	value: str
	loc: Optional[Located] = None


@dataclass
class NumericLiteral(Expr):
	raw: str
	loc: Optional[Located] = None


@dataclass
class BooleanLiteral(Expr):
	value: bool
	loc: Optional[Located] = None


@dataclass
class NullLiteral(Expr):
	loc: Optional[Located] = None


@dataclass
class ThisExpr(Expr):
	loc: Optional[Located] = None


@dataclass
class TemplateLiteral(Expr):
	"""
	Template literal with `len(quasis) == len(expressions) + 1`.

	Quasis keep their raw source text (escapes unprocessed).
	"""

	quasis: List[str]
	expressions: List[Expr] = field(default_factory=list)
	loc: Optional[Located] = None


@dataclass
class TaggedTemplate(Expr):
	tag: Expr
	template: TemplateLiteral
	loc: Optional[Located] = None


@dataclass
class SpreadElement(Expr):
	argument: Expr
	loc: Optional[Located] = None


@dataclass
class ArrayLiteral(Expr):
	elements: List[Expr] = field(default_factory=list)
	loc: Optional[Located] = None


@dataclass
class Property(Node):
	"""
	Object literal member.

	`key` is an Identifier/StringLiteral/NumericLiteral, or any expression
	when `computed`. Methods carry a FunctionExpr value with `method=True`.
	"""

	key: Expr
	value: Expr
	computed: bool = False
	shorthand: bool = False
	method: bool = False
	loc: Optional[Located] = None


@dataclass
class ObjectLiteral(Expr):
	properties: List[Union[Property, SpreadElement]] = field(default_factory=list)
	loc: Optional[Located] = None


@dataclass
class Member(Expr):
	object: Expr
	property: str
	optional: bool = False
	loc: Optional[Located] = None


@dataclass
class Index(Expr):
	object: Expr
	index: Expr
	optional: bool = False
	loc: Optional[Located] = None


@dataclass
class Call(Expr):
	callee: Expr
	args: List[Expr] = field(default_factory=list)
	type_args: List[TypeNode] = field(default_factory=list)
	optional: bool = False
	loc: Optional[Located] = None


@dataclass
class New(Expr):
	callee: Expr
	args: List[Expr] = field(default_factory=list)
	type_args: List[TypeNode] = field(default_factory=list)
	loc: Optional[Located] = None


@dataclass
class Unary(Expr):
	"""Prefix operator: `!`, `-`, `+`, `~`, `typeof`, `void`, `delete`, `await`."""

	op: str
	operand: Expr
	loc: Optional[Located] = None


@dataclass
class Update(Expr):
	op: str  # "++" | "--"
	prefix: bool
	operand: Expr
	loc: Optional[Located] = None


@dataclass
class Binary(Expr):
	"""Binary and logical operators (`+`, `===`, `&&`, `??`, `instanceof`, ...)."""

	op: str
	left: Expr
	right: Expr
	loc: Optional[Located] = None


@dataclass
class Assign(Expr):
	op: str  # "=", "+=", ...
	target: Expr
	value: Expr
	loc: Optional[Located] = None


@dataclass
class Conditional(Expr):
	test: Expr
	consequent: Expr
	alternate: Expr
	loc: Optional[Located] = None


@dataclass
class Sequence(Expr):
	expressions: List[Expr]
	loc: Optional[Located] = None


@dataclass
class Arrow(Expr):
	params: List["Param"]
	body: Union["Block", Expr]
	is_async: bool = False
	return_type: Optional[TypeNode] = None
	loc: Optional[Located] = None


@dataclass
class FunctionExpr(Expr):
	name: Optional[str]
	params: List["Param"]
	body: "Block"
	is_async: bool = False
	return_type: Optional[TypeNode] = None
	type_params: List["TypeParam"] = field(default_factory=list)
	loc: Optional[Located] = None


@dataclass
class AsExpr(Expr):
	expr: Expr
	type: TypeNode
	loc: Optional[Located] = None


@dataclass
class NonNull(Expr):
	expr: Expr
	loc: Optional[Located] = None


# JSX (output side only) ----------------------------------------------------


@dataclass
class JsxText(Expr):
	value: str
	loc: Optional[Located] = None


@dataclass
class JsxExpressionContainer(Expr):
	expression: Expr
	loc: Optional[Located] = None


@dataclass
class JsxAttribute(Node):
	"""`name`, `name="text"` or `name={expr}` (value None / StringLiteral / container)."""

	name: str
	value: Optional[Union[StringLiteral, JsxExpressionContainer]] = None
	loc: Optional[Located] = None


@dataclass
class JsxSpreadAttribute(Node):
	argument: Expr
	loc: Optional[Located] = None


@dataclass
class JsxElement(Expr):
	name: str
	attributes: List[Union[JsxAttribute, JsxSpreadAttribute]] = field(default_factory=list)
	children: List[Expr] = field(default_factory=list)
	self_closing: bool = False
	loc: Optional[Located] = None


@dataclass
class JsxFragment(Expr):
	children: List[Expr] = field(default_factory=list)
	loc: Optional[Located] = None


# Patterns ------------------------------------------------------------------


@dataclass
class BindingIdentifier(Pattern):
	name: str
	loc: Optional[Located] = None


@dataclass
class AssignmentPattern(Pattern):
	"""`target = default` inside a destructuring pattern."""

	target: Pattern
	default: Expr
	loc: Optional[Located] = None


@dataclass
class RestElement(Pattern):
	argument: Pattern
	loc: Optional[Located] = None


@dataclass
class PatternProperty(Node):
	key: str
	value: Pattern
	shorthand: bool = False
	loc: Optional[Located] = None


@dataclass
class ObjectPattern(Pattern):
	properties: List[Union[PatternProperty, RestElement]] = field(default_factory=list)
	loc: Optional[Located] = None


@dataclass
class ArrayPattern(Pattern):
	elements: List[Pattern] = field(default_factory=list)
	loc: Optional[Located] = None


@dataclass
class Param(Node):
	pattern: Pattern
	type: Optional[TypeNode] = None
	default: Optional[Expr] = None
	optional: bool = False
	rest: bool = False
	loc: Optional[Located] = None


@dataclass
class TypeParam(Node):
	name: str
	constraint: Optional[TypeNode] = None
	default: Optional[TypeNode] = None
	loc: Optional[Located] = None


# Statements ----------------------------------------------------------------


@dataclass
class VarDeclarator(Node):
	target: Pattern
	type: Optional[TypeNode] = None
	init: Optional[Expr] = None
	loc: Optional[Located] = None


@dataclass
class VarDecl(Stmt):
	kind: str  # "let" | "const" | "var"
	declarations: List[VarDeclarator]
	exported: bool = False
	loc: Optional[Located] = None


@dataclass
class FunctionDecl(Stmt):
	name: Optional[str]
	params: List[Param]
	body: "Block"
	is_async: bool = False
	return_type: Optional[TypeNode] = None
	type_params: List[TypeParam] = field(default_factory=list)
	exported: bool = False
	default_export: bool = False
	loc: Optional[Located] = None


@dataclass
class ExprStmt(Stmt):
	expr: Expr
	loc: Optional[Located] = None


@dataclass
class Block(Stmt):
	statements: List[Stmt] = field(default_factory=list)
	loc: Optional[Located] = None


@dataclass
class If(Stmt):
	test: Expr
	consequent: Stmt
	alternate: Optional[Stmt] = None
	loc: Optional[Located] = None


@dataclass
class For(Stmt):
	init: Optional[Union[VarDecl, Expr]]
	test: Optional[Expr]
	update: Optional[Expr]
	body: Stmt
	loc: Optional[Located] = None


@dataclass
class ForIn(Stmt):
	"""`for (left of right)` or, with `of=False`, `for (left in right)`."""

	left: Union[VarDecl, Expr]
	right: Expr
	body: Stmt
	of: bool = True
	is_await: bool = False
	loc: Optional[Located] = None


@dataclass
class While(Stmt):
	test: Expr
	body: Stmt
	loc: Optional[Located] = None


@dataclass
class DoWhile(Stmt):
	body: Stmt
	test: Expr
	loc: Optional[Located] = None


@dataclass
class Return(Stmt):
	value: Optional[Expr] = None
	loc: Optional[Located] = None


@dataclass
class Throw(Stmt):
	value: Expr
	loc: Optional[Located] = None


@dataclass
class Break(Stmt):
	label: Optional[str] = None
	loc: Optional[Located] = None


@dataclass
class Continue(Stmt):
	label: Optional[str] = None
	loc: Optional[Located] = None


@dataclass
class Try(Stmt):
	block: Block
	param: Optional[Pattern] = None
	handler: Optional[Block] = None
	finalizer: Optional[Block] = None
	loc: Optional[Located] = None


@dataclass
class SwitchCase(Node):
	test: Optional[Expr]  # None for `default:`
	body: List[Stmt] = field(default_factory=list)
	loc: Optional[Located] = None


@dataclass
class Switch(Stmt):
	discriminant: Expr
	cases: List[SwitchCase] = field(default_factory=list)
	loc: Optional[Located] = None


@dataclass
class Labeled(Stmt):
	label: str
	body: Stmt
	loc: Optional[Located] = None


@dataclass
class Empty(Stmt):
	loc: Optional[Located] = None


@dataclass
class ImportSpecifier(Node):
	imported: str
	local: str
	type_only: bool = False
	loc: Optional[Located] = None


@dataclass
class ImportDecl(Stmt):
	"""
	`import d, { a as b, type C } from "src"`, `import * as ns from "src"`
	or a bare `import "src"` (no bindings).
	"""

	source: str
	default: Optional[str] = None
	namespace: Optional[str] = None
	specifiers: List[ImportSpecifier] = field(default_factory=list)
	type_only: bool = False
	loc: Optional[Located] = None

	def local_names(self) -> List[str]:
		names = [n for n in (self.default, self.namespace) if n]
		names.extend(spec.local for spec in self.specifiers)
		return names


@dataclass
class ExportSpecifier(Node):
	local: str
	exported: str
	loc: Optional[Located] = None


@dataclass
class ExportNamed(Stmt):
	specifiers: List[ExportSpecifier] = field(default_factory=list)
	source: Optional[str] = None
	type_only: bool = False
	loc: Optional[Located] = None


@dataclass
class ExportAll(Stmt):
	source: str
	alias: Optional[str] = None
	loc: Optional[Located] = None


@dataclass
class ExportDefault(Stmt):
	value: Expr
	loc: Optional[Located] = None


@dataclass
class TypeAlias(Stmt):
	name: str
	type: TypeNode
	type_params: List[TypeParam] = field(default_factory=list)
	exported: bool = False
	loc: Optional[Located] = None


@dataclass
class InterfaceDecl(Stmt):
	name: str
	body: TypeLiteral
	type_params: List[TypeParam] = field(default_factory=list)
	extends: List[TypeNode] = field(default_factory=list)
	exported: bool = False
	loc: Optional[Located] = None


@dataclass
class Module(Node):
	body: List[Stmt] = field(default_factory=list)
	loc: Optional[Located] = None


