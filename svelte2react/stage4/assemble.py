# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Assembly: pass records -> one output module, plus the `convert` orchestrator.

Output layout:

  import { ... } from "<jsx library>";       // hooks, Fragment, children type
  import { css } from "<css library>";       // only with style rules
  <module script statements>
  <instance script imports and re-exports>
  const selector$x = css`...`;
  export default ({ ...props }: { ...types }) => {
    <prop mirrors>
    <component body>
    return <>...</>;
  };

A component that renders itself (`<svelte:self>`) is emitted as a named
`export default function Component(...) { ... }` so the name is bound inside
its own body.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from svelte2react.core.identifiers import setter_name
from svelte2react.options import ConvertOptions
from svelte2react.script.ast import (
	ArrayPattern,
	Arrow,
	BindingIdentifier,
	Block,
	Call,
	ExportDefault,
	FunctionDecl,
	Identifier,
	ImportDecl,
	ImportSpecifier,
	Module,
	Param,
	Return,
	Stmt,
	TypeNode,
	TypeRef,
	VarDecl,
	VarDeclarator,
)
from svelte2react.script.printer import print_module
from svelte2react.splitter import split
from svelte2react.stage1.analyze import analyze_component
from svelte2react.stage1.context import FRAGMENT, HOOK_FEATURES, ConversionContext
from svelte2react.stage1.reactive import rewrite_script
from svelte2react.stage2.lower_template import CHILDREN, lower_template
from svelte2react.stage3.styles import CSS_TAG, convert_styles
from svelte2react.template.parser import parse_markup

logger = logging.getLogger(__name__)

PROP_PREFIX = "prop$"


class Assembler:
	"""Builds the output module from a filled `ConversionContext`."""

	def __init__(self, context: ConversionContext) -> None:
		self.context = context
		self.options = context.options

	def assemble(self) -> Module:
		body: List[Stmt] = []
		body.extend(self._library_imports())
		if self.context.styles.uses_css:
			css = ImportSpecifier(imported=CSS_TAG, local=CSS_TAG)
			body.append(ImportDecl(source=self.options.css_library.import_source, specifiers=[css]))
		body.extend(self.context.analysis.hoisted)
		body.extend(self.context.styles.statements)
		body.append(self._component())
		logger.debug("assemble: %d top-level statement(s)", len(body))
		return Module(body=body)

	def _library_imports(self) -> List[ImportDecl]:
		jsx = self.options.jsx_library
		by_source: Dict[str, List[ImportSpecifier]] = {}
		for name in self.context.features():
			if name in HOOK_FEATURES:
				local = self.options.hook_name(name)
				by_source.setdefault(jsx.hooks_source, []).append(ImportSpecifier(imported=local, local=local))
			elif name == FRAGMENT:
				by_source.setdefault(jsx.runtime_source, []).append(ImportSpecifier(imported=FRAGMENT, local=FRAGMENT))
			else:
				raise ValueError(f"unknown library feature: {name}")
		if self.context.template.uses_default_slot:
			children = jsx.children_type
			spec = ImportSpecifier(imported=children, local=children, type_only=True)
			by_source.setdefault(jsx.runtime_source, []).append(spec)
		return [
			ImportDecl(source=source, specifiers=sorted(specs, key=lambda s: s.imported))
			for source, specs in by_source.items()
		]

	# Component ---------------------------------------------------------------

	def _component(self) -> Stmt:
		params = self._params()
		statements: List[Stmt] = self._prop_mirrors()
		statements.extend(self.context.script.body)
		statements.append(Return(value=self.context.template.jsx))
		body = Block(statements=statements)
		if self.context.template.uses_self_reference:
			return FunctionDecl(
				name=self.options.component_name,
				params=params,
				body=body,
				exported=True,
				default_export=True,
			)
		return ExportDefault(value=Arrow(params=params, body=body))

	def _params(self) -> List[Param]:
		signature = self.context.signature()
		extra: List[str] = []
		extra_types: Dict[str, TypeNode] = {}
		if self.context.template.uses_default_slot:
			extra.append(CHILDREN)
			extra_types[CHILDREN] = TypeRef(self.options.jsx_library.children_type)
		if not signature.props and not signature.events and not extra:
			return []
		renamed = {name: PROP_PREFIX + name for name in self.context.script.assigned_props}
		pattern = signature.binding_pattern(extra=extra, renamed=renamed)
		return [Param(pattern=pattern, type=signature.type_literal(extra_types))]

	def _prop_mirrors(self) -> List[Stmt]:
		"""`const [foo, set$foo] = useState(prop$foo)` for every prop the component assigns."""
		types = {p.name: p.type for p in self.context.analysis.signature.props}
		use_state = Identifier(self.options.hook_name("useState"))
		mirrors: List[Stmt] = []
		for name in self.context.script.assigned_props:
			type_args = [types[name]] if types.get(name) is not None else []
			init = Call(callee=use_state, args=[Identifier(PROP_PREFIX + name)], type_args=type_args)
			pair = ArrayPattern(elements=[BindingIdentifier(name), BindingIdentifier(setter_name(name))])
			mirrors.append(VarDecl(kind="const", declarations=[VarDeclarator(target=pair, init=init)]))
		return mirrors


def convert(source: str, options: Optional[ConvertOptions] = None) -> Module:
	"""Convert one component source into the output module tree."""
	options = options or ConvertOptions()
	component = split(source)
	analysis = analyze_component(component, options)
	rewriter = rewrite_script(analysis, options)
	styles = convert_styles(list(component.styles), options)
	root = parse_markup(component.markup)
	template = lower_template(root, rewriter, styles.alias_map, options, component.markup)
	context = ConversionContext(
		options=options,
		analysis=analysis,
		script=rewriter.result,
		template=template,
		styles=styles,
	)
	return Assembler(context).assemble()


def svelte_to_react(source: str, options: Optional[ConvertOptions] = None) -> str:
	"""Convert one component source into TSX text."""
	return print_module(convert(source, options))


__all__ = ["Assembler", "PROP_PREFIX", "convert", "svelte_to_react"]
