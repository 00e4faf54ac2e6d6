# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Script analysis: one pass over the top-level statements of the component
scripts.

Pipeline placement:
  splitter -> [analyze] -> reactive rewrite -> template lowering -> assemble

Classifies each instance-script statement:
  - `let` declarations become reactive state; exported ones become props;
  - dispatcher factory bindings register event callback props;
  - imports from the component runtime are dropped (their lifecycle names are
    remembered for the rewrite), other imports and re-exports are hoisted;
  - everything else is queued, in order, for the reactive rewrite.

The module-context script is hoisted whole, ahead of the instance imports.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from svelte2react.core.errors import UnsupportedError
from svelte2react.core.identifiers import callback_prop_name
from svelte2react.options import ConvertOptions
from svelte2react.script.ast import (
	BindingIdentifier,
	Call,
	ExportAll,
	ExportDefault,
	ExportNamed,
	FunctionDecl,
	Identifier,
	ImportDecl,
	InterfaceDecl,
	Module,
	PropertySignature,
	Stmt,
	TypeAlias,
	TypeLiteral,
	VarDecl,
	VarDeclarator,
)
from svelte2react.script.parser import parse_module
from svelte2react.splitter import ComponentSource, ScriptBlock
from svelte2react.stage1.context import EventProp, PropEntry, ScriptAnalysis

logger = logging.getLogger(__name__)

RUNTIME_MODULE = "svelte"
LIFECYCLE_FUNCTIONS = frozenset({"onMount", "onDestroy", "beforeUpdate", "afterUpdate"})
DISPATCHER_FACTORY = "createEventDispatcher"
SCRIPT_LANGS = frozenset({"ts", "typescript", "js", "javascript"})
MUTABLE_KINDS = frozenset({"let", "var"})


class ScriptAnalyzer:
	"""Classifies top-level statements into an `ScriptAnalysis` record."""

	def __init__(self, options: Optional[ConvertOptions] = None) -> None:
		self.options = options or ConvertOptions()
		self.result = ScriptAnalysis()

	def analyze(self, module_code: Optional[Module], instance: Optional[Module]) -> ScriptAnalysis:
		if module_code is not None:
			self.result.hoisted.extend(module_code.body)
		if instance is not None:
			for stmt in instance.body:
				self._classify(stmt)
		logger.debug(
			"script analysis: %d hoisted, %d pending, reactive=%s, dispatchers=%s",
			len(self.result.hoisted),
			len(self.result.pending),
			sorted(self.result.reactive),
			sorted(self.result.dispatchers),
		)
		return self.result

	def _classify(self, stmt: Stmt) -> None:
		if isinstance(stmt, ImportDecl):
			self._import(stmt)
			return
		if isinstance(stmt, (ExportNamed, ExportAll)):
			self.result.hoisted.append(stmt)
			return
		if isinstance(stmt, ExportDefault):
			raise UnsupportedError("export default in component script", loc=stmt.loc, phase="script")
		if isinstance(stmt, (TypeAlias, InterfaceDecl)) and stmt.exported:
			self.result.hoisted.append(stmt)
			return
		if isinstance(stmt, FunctionDecl) and stmt.exported:
			self.options.warn(f"exported function {stmt.name} is kept as a local function")
			stmt = FunctionDecl(
				name=stmt.name,
				params=stmt.params,
				body=stmt.body,
				is_async=stmt.is_async,
				return_type=stmt.return_type,
				type_params=stmt.type_params,
				loc=stmt.loc,
			)
		if isinstance(stmt, VarDecl):
			self._var_decl(stmt)
			return
		self.result.pending.append(stmt)

	def _import(self, stmt: ImportDecl) -> None:
		if stmt.source != RUNTIME_MODULE:
			self.result.hoisted.append(stmt)
			return
		for spec in stmt.specifiers:
			if spec.imported in LIFECYCLE_FUNCTIONS:
				self.result.lifecycle[spec.local] = spec.imported
			elif spec.imported == DISPATCHER_FACTORY:
				self.result.dispatcher_factories.add(spec.local)
			elif not spec.type_only:
				self.options.warn(f"dropping unsupported import {spec.imported} from {RUNTIME_MODULE}")

	def _var_decl(self, stmt: VarDecl) -> None:
		if stmt.kind in MUTABLE_KINDS:
			self._mutable_decl(stmt)
			return
		kept: List[VarDeclarator] = []
		for decl in stmt.declarations:
			factory = self._dispatcher_factory_call(decl)
			if isinstance(decl.target, BindingIdentifier) and factory is not None:
				self._register_dispatcher(decl.target.name, factory)
				continue
			kept.append(decl)
		if stmt.exported:
			self.options.warn("exported const is not a prop; kept as a local constant")
		if kept:
			self.result.pending.append(VarDecl(kind=stmt.kind, declarations=kept, loc=stmt.loc))

	def _mutable_decl(self, stmt: VarDecl) -> None:
		for decl in stmt.declarations:
			if not isinstance(decl.target, BindingIdentifier):
				raise UnsupportedError("destructuring let declaration", loc=decl.loc or stmt.loc, phase="script")
			name = decl.target.name
			self.result.reactive.add(name)
			if stmt.exported:
				self.result.signature.props.append(PropEntry(name=name, type=decl.type, default=decl.init))
		self.result.pending.append(stmt)

	def _dispatcher_factory_call(self, decl: VarDeclarator) -> Optional[Call]:
		init = decl.init
		if isinstance(init, Call) and isinstance(init.callee, Identifier):
			if init.callee.name in self.result.dispatcher_factories:
				return init
		return None

	def _register_dispatcher(self, name: str, factory: Call) -> None:
		self.result.dispatchers.add(name)
		type_args = factory.type_args
		if not type_args:
			return
		if len(type_args) != 1 or not isinstance(type_args[0], TypeLiteral):
			self.options.warn(f"ignoring event types of dispatcher {name}: expected one type literal")
			return
		members = type_args[0].members
		events = [m for m in members if isinstance(m, PropertySignature) and m.type is not None]
		if len(events) != len(members):
			self.options.warn(f"ignoring event types of dispatcher {name}: expected `name: Payload` members")
			return
		for member in events:
			prop = callback_prop_name(member.name)
			if prop in self.result.payload_types:
				continue
			self.result.payload_types[prop] = member.type
			self.result.signature.events.append(EventProp(event=member.name, name=prop, payload=member.type))


def _parse_script(block: Optional[ScriptBlock]) -> Optional[Module]:
	if block is None:
		return None
	if block.lang is not None and block.lang.lower() not in SCRIPT_LANGS:
		raise UnsupportedError(f'script lang="{block.lang}"', phase="script")
	return parse_module(block.code)


def check_script_blocks(scripts: Iterable[ScriptBlock]) -> None:
	scripts = list(scripts)
	module_count = sum(1 for s in scripts if s.module)
	if len(scripts) > 2 or module_count > 1 or len(scripts) - module_count > 1:
		raise UnsupportedError("script tag only allows 2 blocks including default and module", phase="split")


def analyze_component(source: ComponentSource, options: Optional[ConvertOptions] = None) -> ScriptAnalysis:
	"""Parse the component's scripts and classify their statements."""
	check_script_blocks(source.scripts)
	module_code = _parse_script(source.module_script)
	instance = _parse_script(source.instance_script)
	return ScriptAnalyzer(options).analyze(module_code, instance)


__all__ = ["ScriptAnalyzer", "analyze_component", "check_script_blocks"]
