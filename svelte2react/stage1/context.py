# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Data handed between the conversion passes.

Each pass owns its own output record; nothing here is written by more than
one pass. The orchestrator (`stage4.assemble.convert`) collects the records
into a `ConversionContext` and the assembler reads it.

  analyze   -> ScriptAnalysis   (signature, hoisted + pending statements, names)
  reactive  -> ScriptResult     (component body, derived names)
  lowering  -> TemplateResult   (stage2)
  styles    -> StyleResult      (stage3)

Target-library imports are recorded by canonical name in a `FeatureSet`;
passes only add to it and only the assembler reads it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, Iterator, List, Optional, Set

from svelte2react.options import ConvertOptions
from svelte2react.script.ast import (
	BindingIdentifier,
	Expr,
	FunctionType,
	Param,
	PatternProperty,
	AssignmentPattern,
	ObjectPattern,
	PropertySignature,
	Stmt,
	TypeLiteral,
	TypeNode,
	TypeRef,
)

if TYPE_CHECKING:
	from svelte2react.stage2.lower_template import TemplateResult
	from svelte2react.stage3.styles import StyleResult

# Canonical feature names. Hooks come from the hooks module of the JSX
# library, `Fragment` from its runtime module.
HOOK_FEATURES = ("useEffect", "useRef", "useState")
FRAGMENT = "Fragment"


class FeatureSet:
	"""Insertion-ordered set of required target-library imports."""

	def __init__(self) -> None:
		self._names: Dict[str, None] = {}

	def add(self, name: str) -> None:
		self._names[name] = None

	def update(self, other: "FeatureSet") -> None:
		for name in other:
			self.add(name)

	def __contains__(self, name: object) -> bool:
		return name in self._names

	def __iter__(self) -> Iterator[str]:
		return iter(self._names)

	def __len__(self) -> int:
		return len(self._names)

	def __repr__(self) -> str:
		return f"FeatureSet({list(self._names)!r})"


@dataclass
class PropEntry:
	"""One exported `let` turned into a component prop."""

	name: str
	type: Optional[TypeNode] = None
	default: Optional[Expr] = None

	@property
	def optional(self) -> bool:
		return self.default is not None


@dataclass
class EventProp:
	"""Callback prop inferred from a typed event dispatcher."""

	event: str
	name: str
	payload: TypeNode


@dataclass
class ComponentSignature:
	props: List[PropEntry] = field(default_factory=list)
	events: List[EventProp] = field(default_factory=list)

	def prop_names(self) -> List[str]:
		return [p.name for p in self.props] + [e.name for e in self.events]

	def with_events(self, events: List[EventProp]) -> "ComponentSignature":
		known = {e.name for e in self.events}
		merged = list(self.events) + [e for e in events if e.name not in known]
		return ComponentSignature(props=list(self.props), events=merged)

	def binding_pattern(
		self,
		extra: List[str] = (),
		renamed: Optional[Dict[str, str]] = None,
	) -> ObjectPattern:
		"""
		`{ foo, bar = 1, onMessage }` destructuring the props parameter.

		`renamed` binds a prop under another local name (`{ foo: prop$foo }`).
		"""
		renamed = renamed or {}
		properties = []
		for prop in self.props:
			local = renamed.get(prop.name, prop.name)
			value = BindingIdentifier(local)
			if prop.default is not None:
				value = AssignmentPattern(target=value, default=prop.default)
			properties.append(PatternProperty(key=prop.name, value=value, shorthand=local == prop.name))
		for name in [e.name for e in self.events] + list(extra):
			properties.append(PatternProperty(key=name, value=BindingIdentifier(name), shorthand=True))
		return ObjectPattern(properties=properties)

	def type_literal(self, extra: Optional[Dict[str, TypeNode]] = None) -> TypeLiteral:
		"""`{ foo: number; bar?: number; onMessage?: (data: T) => void }`"""
		members = []
		for prop in self.props:
			members.append(
				PropertySignature(name=prop.name, type=prop.type or TypeRef("any"), optional=prop.optional)
			)
		for event in self.events:
			callback = FunctionType(
				params=[Param(pattern=BindingIdentifier("data"), type=event.payload)],
				returns=TypeRef("void"),
			)
			members.append(PropertySignature(name=event.name, type=callback, optional=True))
		for name, type_ in (extra or {}).items():
			members.append(PropertySignature(name=name, type=type_, optional=True))
		return TypeLiteral(members=members)


@dataclass
class ScriptAnalysis:
	"""Output of the top-level classification pass."""

	signature: ComponentSignature = field(default_factory=ComponentSignature)
	hoisted: List[Stmt] = field(default_factory=list)
	pending: List[Stmt] = field(default_factory=list)
	reactive: Set[str] = field(default_factory=set)
	dispatchers: Set[str] = field(default_factory=set)
	# Callback prop name -> payload type.
	payload_types: Dict[str, TypeNode] = field(default_factory=dict)
	# Local name -> lifecycle function imported from the runtime module
	# (`onMount`, `onDestroy`, `beforeUpdate`, `afterUpdate`).
	lifecycle: Dict[str, str] = field(default_factory=dict)
	# Local names bound to the dispatcher factory.
	dispatcher_factories: Set[str] = field(default_factory=set)


@dataclass
class ScriptResult:
	"""Output of the reactive rewrite: statements of the component body."""

	body: List[Stmt] = field(default_factory=list)
	# Names made reactive by `$: x = ...` (derived values).
	derived: List[str] = field(default_factory=list)
	# Callback props for events dispatched without a declared payload type.
	events: List[EventProp] = field(default_factory=list)
	# Props assigned inside the component; they get a local state mirror.
	assigned_props: List[str] = field(default_factory=list)
	features: FeatureSet = field(default_factory=FeatureSet)


@dataclass
class ConversionContext:
	"""Everything the assembler needs, gathered by the orchestrator."""

	options: ConvertOptions
	analysis: ScriptAnalysis
	script: ScriptResult
	template: "TemplateResult"
	styles: "StyleResult"

	def reactive_names(self) -> Set[str]:
		return set(self.analysis.reactive) | set(self.script.derived)

	def features(self) -> FeatureSet:
		merged = FeatureSet()
		merged.update(self.script.features)
		merged.update(self.template.features)
		return merged

	def signature(self) -> ComponentSignature:
		"""Props plus every callback prop, typed or inferred from a dispatch call."""
		return self.analysis.signature.with_events(self.script.events)


__all__ = [
	"ComponentSignature",
	"ConversionContext",
	"EventProp",
	"FRAGMENT",
	"FeatureSet",
	"HOOK_FEATURES",
	"PropEntry",
	"ScriptAnalysis",
	"ScriptResult",
]
