# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Generic traversal helpers over the script AST.

Nodes are dataclasses, so children are discovered from their fields in
declaration order (which follows source order for every node kind).
"""

from __future__ import annotations

import dataclasses
from typing import Iterable, Iterator, List, Set

from svelte2react.script.ast import (
	ArrayPattern,
	AssignmentPattern,
	BindingIdentifier,
	Block,
	FunctionDecl,
	Node,
	ObjectPattern,
	Param,
	Pattern,
	PatternProperty,
	RestElement,
	Stmt,
	VarDecl,
)


def iter_children(node: Node) -> Iterator[Node]:
	"""Direct child nodes of `node`, list fields flattened, in field order."""
	for f in dataclasses.fields(node):
		if f.name == "loc":
			continue
		value = getattr(node, f.name)
		if isinstance(value, Node):
			yield value
		elif isinstance(value, list):
			for item in value:
				if isinstance(item, Node):
					yield item


def bound_names(pattern: Pattern) -> List[str]:
	"""Names a binding pattern introduces, in source order."""
	if isinstance(pattern, BindingIdentifier):
		return [pattern.name]
	if isinstance(pattern, AssignmentPattern):
		return bound_names(pattern.target)
	if isinstance(pattern, RestElement):
		return bound_names(pattern.argument)
	if isinstance(pattern, ObjectPattern):
		names: List[str] = []
		for prop in pattern.properties:
			if isinstance(prop, PatternProperty):
				names.extend(bound_names(prop.value))
			else:
				names.extend(bound_names(prop))
		return names
	if isinstance(pattern, ArrayPattern):
		names = []
		for element in pattern.elements:
			names.extend(bound_names(element))
		return names
	return []


def param_names(params: Iterable[Param]) -> Set[str]:
	names: Set[str] = set()
	for param in params:
		names.update(bound_names(param.pattern))
	return names


def declared_names(statements: Iterable[Stmt]) -> Set[str]:
	"""
	Names declared directly in a statement list: variable declarations and
	function declarations. Nested blocks are not searched.
	"""
	names: Set[str] = set()
	for stmt in statements:
		if isinstance(stmt, VarDecl):
			for decl in stmt.declarations:
				names.update(bound_names(decl.target))
		elif isinstance(stmt, FunctionDecl) and stmt.name:
			names.add(stmt.name)
	return names


def block_statements(body: Stmt) -> List[Stmt]:
	return list(body.statements) if isinstance(body, Block) else [body]


__all__ = ["block_statements", "bound_names", "declared_names", "iter_children", "param_names"]
