# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Reactive rewrite: component script statements -> hook-based component body.

Pipeline placement:
  analyze -> [reactive rewrite] -> template lowering -> assemble

Rules (applied recursively, inner callback bodies included):
  - `let x = init`            -> `const [x, set$x] = useState(init)`
  - `x = v` / `x += v` / `x++` as a statement -> `set$x(v)` / `set$x(x + v)` / `set$x(x + 1)`
  - the same assignments anywhere else        -> unsupported
  - `$: x = expr`             -> `const x = expr` (x becomes a derived name)
  - `$: <anything else>`      -> `useEffect(() => {...}, [reactive reads])`
  - `dispatch("name", d)`     -> `onName?.(d)`
  - `onMount(cb)`             -> `useEffect(cb, [])`
  - `onDestroy(cb)`           -> `useEffect(() => { return cb; }, [])`
  - `beforeUpdate(cb)`        -> `useEffect(cb)`
  - `afterUpdate(cb)`         -> `useEffect` skipping its first run through a `useRef(false)` flag

The rewrite is scope-aware: a parameter or local declaration that shadows a
reactive name turns the rewrite off for that name inside its scope.

The same rewriter instance later rewrites template expressions (event
handlers, interpolations), so state assigned from markup goes through the
setters too.
"""

from __future__ import annotations

import dataclasses
import logging
from contextlib import contextmanager
from typing import Dict, Iterable, Iterator, List, Optional, Set

from svelte2react.core.errors import UnsupportedError
from svelte2react.core.identifiers import callback_prop_name, setter_name
from svelte2react.options import ConvertOptions
from svelte2react.script.ast import (
	ArrayLiteral,
	ArrayPattern,
	Arrow,
	Assign,
	Binary,
	BindingIdentifier,
	Block,
	BooleanLiteral,
	Call,
	Expr,
	ExprStmt,
	For,
	ForIn,
	FunctionDecl,
	FunctionExpr,
	Identifier,
	If,
	ImportSpecifier,
	Labeled,
	Member,
	Node,
	NullLiteral,
	NumericLiteral,
	ObjectLiteral,
	Property,
	Return,
	Sequence,
	Stmt,
	StringLiteral,
	Try,
	TypeNode,
	TypeRef,
	Unary,
	UnionType,
	Update,
	VarDecl,
	VarDeclarator,
)
from svelte2react.script.visit import (
	block_statements,
	bound_names,
	declared_names,
	iter_children,
	param_names,
)
from svelte2react.stage1.context import EventProp, ScriptAnalysis, ScriptResult

logger = logging.getLogger(__name__)

REACTIVE_LABEL = "$"
REF_PREFIX = "_ref"


class ReactiveRewriter:
	"""Rewrites statements and expressions against one component's analysis."""

	def __init__(self, analysis: ScriptAnalysis, options: Optional[ConvertOptions] = None) -> None:
		self.analysis = analysis
		self.options = options or ConvertOptions()
		self.props: Set[str] = {p.name for p in analysis.signature.props}
		self.state: Set[str] = set(analysis.reactive) - self.props
		self.derived: Set[str] = set()
		self.result = ScriptResult()
		self._scopes: List[Set[str]] = []
		self._prologue: List[Stmt] = []
		self._taken: Optional[Set[str]] = None
		self._ref_counter = 0

	# Names -------------------------------------------------------------------

	def is_reactive(self, name: str) -> bool:
		if name not in self.state and name not in self.props and name not in self.derived:
			return False
		return not any(name in scope for scope in self._scopes)

	@contextmanager
	def scope(self, names: Iterable[str]) -> Iterator[None]:
		"""Treat `names` as locally bound (not reactive) inside the block."""
		self._scopes.append(set(names))
		try:
			yield
		finally:
			self._scopes.pop()

	def _is_visible(self, name: str) -> bool:
		return not any(name in scope for scope in self._scopes)

	def _hook(self, name: str) -> Identifier:
		self.result.features.add(name)
		return Identifier(self.options.hook_name(name))

	def _new_ref(self) -> str:
		if self._taken is None:
			self._taken = _all_names(self.analysis.hoisted + self.analysis.pending)
		while True:
			name = f"{REF_PREFIX}{self._ref_counter}"
			self._ref_counter += 1
			if name not in self._taken:
				self._taken.add(name)
				return name

	# Program -----------------------------------------------------------------

	def rewrite_program(self, statements: List[Stmt]) -> ScriptResult:
		body: List[Stmt] = []
		for stmt in statements:
			body.extend(self._top_statement(stmt))
		self.result.body = self._prologue + body
		logger.debug(
			"reactive rewrite: %d body statement(s), derived=%s, features=%s",
			len(self.result.body),
			self.result.derived,
			list(self.result.features),
		)
		return self.result

	def _top_statement(self, stmt: Stmt) -> List[Stmt]:
		if isinstance(stmt, VarDecl) and stmt.kind in ("let", "var"):
			if stmt.exported:
				return []
			return [self._state_decl(decl, stmt) for decl in stmt.declarations]
		if isinstance(stmt, Labeled) and stmt.label == REACTIVE_LABEL:
			return self._reactive_statement(stmt)
		return self._statement(stmt)

	def _state_decl(self, decl: VarDeclarator, stmt: VarDecl) -> VarDecl:
		if not isinstance(decl.target, BindingIdentifier):
			raise UnsupportedError("destructuring let declaration", loc=decl.loc or stmt.loc, phase="script")
		name = decl.target.name
		type_args: List[TypeNode] = []
		if decl.init is not None:
			init = self.rewrite_expression(decl.init)
			if decl.type is not None:
				type_args = [decl.type]
		else:
			init = NullLiteral()
			if decl.type is not None:
				type_args = [UnionType(members=[decl.type, TypeRef("null")])]
		call = Call(callee=self._hook("useState"), args=[init], type_args=type_args)
		pair = ArrayPattern(elements=[BindingIdentifier(name), BindingIdentifier(setter_name(name))])
		return VarDecl(kind="const", declarations=[VarDeclarator(target=pair, init=call)], loc=stmt.loc)

	def _reactive_statement(self, stmt: Labeled) -> List[Stmt]:
		body = stmt.body
		if (
			isinstance(body, ExprStmt)
			and isinstance(body.expr, Assign)
			and body.expr.op == "="
			and isinstance(body.expr.target, Identifier)
			and body.expr.target.name not in self.state
			and body.expr.target.name not in self.props
		):
			name = body.expr.target.name
			if name in self.derived:
				raise UnsupportedError(f"reassigned reactive declaration {name}", loc=stmt.loc, phase="script")
			value = self.rewrite_expression(body.expr.value)
			self.derived.add(name)
			self.result.derived.append(name)
			decl = VarDeclarator(target=BindingIdentifier(name), init=value)
			return [VarDecl(kind="const", declarations=[decl], loc=stmt.loc)]

		deps = self.dependencies(body)
		rewritten = self._single(Block(statements=block_statements(body)))
		if not isinstance(rewritten, Block):
			rewritten = Block(statements=[rewritten])
		callback = Arrow(params=[], body=rewritten)
		call = Call(
			callee=self._hook("useEffect"),
			args=[callback, ArrayLiteral(elements=[Identifier(d) for d in deps])],
		)
		return [ExprStmt(expr=call, loc=stmt.loc)]

	# Statements --------------------------------------------------------------

	def _statements(self, statements: List[Stmt]) -> List[Stmt]:
		out: List[Stmt] = []
		for stmt in statements:
			out.extend(self._statement(stmt))
		return out

	def _single(self, stmt: Stmt) -> Stmt:
		out = self._statement(stmt)
		if len(out) == 1:
			return out[0]
		return Block(statements=out, loc=stmt.loc)

	def _statement(self, stmt: Stmt) -> List[Stmt]:
		if isinstance(stmt, ExprStmt):
			return [ExprStmt(expr=self.rewrite_expression(stmt.expr, statement_level=True), loc=stmt.loc)]
		if isinstance(stmt, Block):
			self._scopes.append(declared_names(stmt.statements))
			try:
				return [Block(statements=self._statements(stmt.statements), loc=stmt.loc)]
			finally:
				self._scopes.pop()
		if isinstance(stmt, FunctionDecl):
			scope = param_names(stmt.params) | declared_names(stmt.body.statements)
			self._scopes.append(scope)
			try:
				params = self._rebuild_list(stmt.params)
				body = Block(statements=self._statements(stmt.body.statements), loc=stmt.body.loc)
			finally:
				self._scopes.pop()
			return [dataclasses.replace(stmt, params=params, body=body)]
		if isinstance(stmt, (For, ForIn)):
			head = stmt.init if isinstance(stmt, For) else stmt.left
			scope: Set[str] = set()
			if isinstance(head, VarDecl):
				scope = declared_names([head])
			self._scopes.append(scope)
			try:
				return [self._rebuild(stmt)]
			finally:
				self._scopes.pop()
		if isinstance(stmt, Try) and stmt.param is not None:
			block = self._single(stmt.block)
			self._scopes.append(set(bound_names(stmt.param)))
			try:
				handler = self._single(stmt.handler) if stmt.handler is not None else None
			finally:
				self._scopes.pop()
			finalizer = self._single(stmt.finalizer) if stmt.finalizer is not None else None
			return [dataclasses.replace(stmt, block=block, handler=handler, finalizer=finalizer)]
		if isinstance(stmt, If):
			return [
				If(
					test=self.rewrite_expression(stmt.test),
					consequent=self._single(stmt.consequent),
					alternate=self._single(stmt.alternate) if stmt.alternate is not None else None,
					loc=stmt.loc,
				)
			]
		return [self._rebuild(stmt)]

	# Expressions -------------------------------------------------------------

	def rewrite_expression(self, expr: Expr, statement_level: bool = False) -> Expr:
		"""
		Rewrite one expression. `statement_level` marks an expression whose
		value is discarded (an expression statement or a concise arrow body);
		only there may a reactive name be assigned.
		"""
		if isinstance(expr, Assign):
			return self._assign(expr, statement_level)
		if isinstance(expr, Update):
			return self._update(expr, statement_level)
		if isinstance(expr, Call):
			special = self._special_call(expr)
			if special is not None:
				return special
		if isinstance(expr, (Arrow, FunctionExpr)):
			return self._function(expr)
		if isinstance(expr, Sequence) and statement_level:
			return Sequence(
				expressions=[self.rewrite_expression(e, statement_level=True) for e in expr.expressions],
				loc=expr.loc,
			)
		return self._rebuild(expr)

	def _assign(self, expr: Assign, statement_level: bool) -> Expr:
		target = expr.target
		if isinstance(target, Identifier) and self.is_reactive(target.name):
			if not statement_level:
				raise UnsupportedError("intermediate let value assignment", loc=expr.loc, phase="script")
			value = self.rewrite_expression(expr.value)
			if expr.op != "=":
				value = Binary(op=expr.op[:-1], left=Identifier(target.name), right=value)
			return self._setter_call(target.name, value, expr)
		if isinstance(target, (ArrayLiteral, ObjectLiteral)):
			names = [n for n in _identifier_names(target) if self.is_reactive(n)]
			if names:
				raise UnsupportedError(
					f"destructuring assignment to reactive value {names[0]}", loc=expr.loc, phase="script"
				)
		return self._rebuild(expr)

	def _update(self, expr: Update, statement_level: bool) -> Expr:
		operand = expr.operand
		if isinstance(operand, Identifier) and self.is_reactive(operand.name):
			if not statement_level:
				raise UnsupportedError("intermediate let value assignment", loc=expr.loc, phase="script")
			value = Binary(op=expr.op[0], left=Identifier(operand.name), right=NumericLiteral("1"))
			return self._setter_call(operand.name, value, expr)
		return self._rebuild(expr)

	def _setter_call(self, name: str, value: Expr, origin: Expr) -> Call:
		if name in self.derived:
			raise UnsupportedError(f"assignment to reactive declaration {name}", loc=origin.loc, phase="script")
		if name in self.props and name not in self.result.assigned_props:
			self.result.assigned_props.append(name)
			self.result.features.add("useState")
		return Call(callee=Identifier(setter_name(name)), args=[value], loc=origin.loc)

	def _function(self, expr):
		scope = param_names(expr.params)
		if isinstance(expr, FunctionExpr) and expr.name:
			scope.add(expr.name)
		if isinstance(expr.body, Block):
			scope |= declared_names(expr.body.statements)
		self._scopes.append(scope)
		try:
			params = self._rebuild_list(expr.params)
			if isinstance(expr.body, Block):
				body = Block(statements=self._statements(expr.body.statements), loc=expr.body.loc)
			else:
				body = self.rewrite_expression(expr.body, statement_level=True)
		finally:
			self._scopes.pop()
		return dataclasses.replace(expr, params=params, body=body)

	def _special_call(self, call: Call) -> Optional[Expr]:
		callee = call.callee
		if not isinstance(callee, Identifier) or not self._is_visible(callee.name):
			return None
		if callee.name in self.analysis.lifecycle:
			return self._lifecycle(self.analysis.lifecycle[callee.name], call)
		if callee.name in self.analysis.dispatchers:
			return self._dispatch(call)
		return None

	def _dispatch(self, call: Call) -> Expr:
		if not call.args or not isinstance(call.args[0], StringLiteral):
			raise UnsupportedError("dynamic event name", loc=call.loc, phase="script")
		event = call.args[0].value
		prop = callback_prop_name(event)
		known = {e.name for e in self.analysis.signature.events} | {e.name for e in self.result.events}
		if prop not in known:
			self.result.events.append(EventProp(event=event, name=prop, payload=TypeRef("any")))
		args = [self.rewrite_expression(a) for a in call.args[1:]]
		return Call(callee=Identifier(prop), args=args, optional=True, loc=call.loc)

	# Lifecycle ---------------------------------------------------------------

	def _lifecycle(self, kind: str, call: Call) -> Expr:
		if len(call.args) != 1:
			raise UnsupportedError(f"{kind} with {len(call.args)} arguments", loc=call.loc, phase="script")
		callback = call.args[0]
		use_effect = self._hook("useEffect")
		if kind == "onMount":
			args: List[Expr] = [self._effect_callback(callback), ArrayLiteral()]
		elif kind == "onDestroy":
			cleanup = self.rewrite_expression(callback)
			args = [Arrow(params=[], body=Block(statements=[Return(value=cleanup)])), ArrayLiteral()]
		elif kind == "beforeUpdate":
			args = [self._effect_callback(callback)]
		else:
			args = [self._after_update_callback(callback)]
		return Call(callee=use_effect, args=args, loc=call.loc)

	def _effect_callback(self, callback: Expr) -> Expr:
		"""An effect callback: block-bodied, synchronous, returning only a cleanup."""
		if not isinstance(callback, (Arrow, FunctionExpr)):
			return self.rewrite_expression(callback)
		rewritten = self._function(callback)
		if rewritten.is_async:
			invoke = ExprStmt(expr=Call(callee=rewritten))
			return Arrow(params=[], body=Block(statements=[invoke]))
		if isinstance(rewritten, Arrow) and not isinstance(rewritten.body, Block):
			return dataclasses.replace(rewritten, body=Block(statements=[_concise_statement(rewritten.body)]))
		return rewritten

	def _after_update_callback(self, callback: Expr) -> Arrow:
		ref = self._new_ref()
		use_ref = Call(callee=self._hook("useRef"), args=[BooleanLiteral(False)])
		self._prologue.append(
			VarDecl(kind="const", declarations=[VarDeclarator(target=BindingIdentifier(ref), init=use_ref)])
		)
		flag = Member(object=Identifier(ref), property="current")
		skip_first = If(
			test=Unary(op="!", operand=flag),
			consequent=Block(
				statements=[
					ExprStmt(expr=Assign(op="=", target=Member(object=Identifier(ref), property="current"), value=BooleanLiteral(True))),
					Return(),
				]
			),
		)
		if isinstance(callback, (Arrow, FunctionExpr)):
			rewritten = self._function(callback)
			if rewritten.is_async:
				body: List[Stmt] = [ExprStmt(expr=Call(callee=rewritten))]
			elif isinstance(rewritten.body, Block):
				body = list(rewritten.body.statements)
			else:
				body = [_concise_statement(rewritten.body)]
		else:
			body = [ExprStmt(expr=Call(callee=self.rewrite_expression(callback)))]
		return Arrow(params=[], body=Block(statements=[skip_first] + body))

	# Dependencies ------------------------------------------------------------

	def dependencies(self, node: Node) -> List[str]:
		"""
		Reactive names referenced by `node`, deduplicated in first-encounter
		order. Assignment targets count as references.
		"""
		names: Dict[str, None] = {}
		self._collect_names(node, frozenset(), names)
		return list(names)

	def _collect_names(self, node: Node, shadow: frozenset, names: Dict[str, None]) -> None:
		if isinstance(node, TypeNode):
			return
		if isinstance(node, Identifier):
			if node.name not in shadow and self.is_reactive(node.name):
				names.setdefault(node.name, None)
			return
		if isinstance(node, Property):
			if node.computed:
				self._collect_names(node.key, shadow, names)
			self._collect_names(node.value, shadow, names)
			return
		if isinstance(node, (Arrow, FunctionExpr, FunctionDecl)):
			inner = set(shadow) | param_names(node.params)
			if isinstance(node.body, Block):
				inner |= declared_names(node.body.statements)
			shadow = frozenset(inner)
		elif isinstance(node, Block):
			shadow = frozenset(set(shadow) | declared_names(node.statements))
		for child in iter_children(node):
			self._collect_names(child, shadow, names)

	# Structural rebuild ------------------------------------------------------

	def _rebuild(self, node):
		changes = {}
		for f in dataclasses.fields(node):
			if f.name == "loc":
				continue
			value = getattr(node, f.name)
			new = self._map_value(value)
			if new is not value:
				changes[f.name] = new
		return dataclasses.replace(node, **changes) if changes else node

	def _rebuild_list(self, items: list) -> list:
		return [self._map_value(item) for item in items]

	def _map_value(self, value):
		if isinstance(value, Stmt):
			return self._single(value)
		if isinstance(value, Expr):
			return self.rewrite_expression(value)
		if isinstance(value, TypeNode):
			return value
		if isinstance(value, Node):
			return self._rebuild(value)
		if isinstance(value, list):
			out = []
			changed = False
			for item in value:
				if isinstance(item, Stmt):
					mapped = self._statement(item)
					out.extend(mapped)
					changed = changed or mapped != [item]
				else:
					new = self._map_value(item)
					out.append(new)
					changed = changed or new is not item
			return out if changed else value
		return value


def _concise_statement(body: Expr) -> Stmt:
	"""A concise arrow body as a statement; a returned function stays a cleanup."""
	if isinstance(body, (Arrow, FunctionExpr)):
		return Return(value=body)
	return ExprStmt(expr=body)


def _identifier_names(node: Node) -> List[str]:
	names: List[str] = []
	if isinstance(node, Identifier):
		return [node.name]
	for child in iter_children(node):
		if isinstance(child, Property) and not child.computed:
			names.extend(_identifier_names(child.value))
		else:
			names.extend(_identifier_names(child))
	return names


def _all_names(statements: List[Stmt]) -> Set[str]:
	names: Set[str] = set()
	stack: List[Node] = list(statements)
	while stack:
		node = stack.pop()
		if isinstance(node, (Identifier, BindingIdentifier)):
			names.add(node.name)
		elif isinstance(node, ImportSpecifier):
			names.add(node.local)
		elif isinstance(node, FunctionDecl) and node.name:
			names.add(node.name)
		stack.extend(iter_children(node))
	return names


def rewrite_script(analysis: ScriptAnalysis, options: Optional[ConvertOptions] = None) -> ReactiveRewriter:
	"""Rewrite the analysis' pending statements; the rewriter keeps its result."""
	rewriter = ReactiveRewriter(analysis, options)
	rewriter.rewrite_program(analysis.pending)
	return rewriter


__all__ = ["REACTIVE_LABEL", "ReactiveRewriter", "rewrite_script"]
