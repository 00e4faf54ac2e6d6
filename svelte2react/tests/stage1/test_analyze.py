# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Script analysis: classification of top-level statements into props, state,
hoisted statements and the pending component body.
"""

from __future__ import annotations

import pytest

from svelte2react.core.errors import UnsupportedError
from svelte2react.options import ConvertOptions
from svelte2react.script.ast import ExportNamed, ImportDecl, VarDecl
from svelte2react.script.printer import print_type
from svelte2react.splitter import split
from svelte2react.stage1.analyze import analyze_component, check_script_blocks


def analyze(code: str, module_code: str | None = None, warnings: list | None = None):
	source = f"<script>{code}</script>"
	if module_code is not None:
		source = f'<script context="module">{module_code}</script>' + source
	options = ConvertOptions(warn=warnings.append) if warnings is not None else None
	return analyze_component(split(source), options)


def test_exported_let_becomes_prop():
	analysis = analyze("export let foo: string;\nexport let bar = 1;\nlet local = 2;")
	props = analysis.signature.props
	assert [p.name for p in props] == ["foo", "bar"]
	assert print_type(props[0].type) == "string"
	assert not props[0].optional and props[1].optional
	assert analysis.reactive == {"foo", "bar", "local"}
	assert len(analysis.pending) == 3


def test_runtime_imports_are_dropped_and_others_hoisted():
	warnings: list = []
	analysis = analyze(
		'import { onMount as mount, tick } from "svelte";\nimport Foo from "./Foo.svelte";\nexport { x } from "./x";',
		warnings=warnings,
	)
	assert analysis.lifecycle == {"mount": "onMount"}
	assert [type(s) for s in analysis.hoisted] == [ImportDecl, ExportNamed]
	assert analysis.hoisted[0].default == "Foo"
	assert warnings == ["dropping unsupported import tick from svelte"]


def test_module_script_is_hoisted_before_instance_imports():
	analysis = analyze('import A from "a";', module_code="export const shared = 1;")
	first, second = analysis.hoisted
	assert isinstance(first, VarDecl) and first.exported
	assert isinstance(second, ImportDecl) and second.source == "a"


def test_typed_dispatcher_registers_event_props():
	analysis = analyze(
		'import { createEventDispatcher } from "svelte";\n'
		"const dispatch = createEventDispatcher<{ message: { text: string }; close: boolean }>();"
	)
	assert analysis.dispatchers == {"dispatch"}
	events = analysis.signature.events
	assert [(e.event, e.name) for e in events] == [("message", "onMessage"), ("close", "onClose")]
	assert print_type(events[0].payload) == "{ text: string }"
	assert analysis.pending == []


def test_untyped_dispatcher_has_no_declared_events():
	analysis = analyze('import { createEventDispatcher } from "svelte";\nconst dispatch = createEventDispatcher();')
	assert analysis.dispatchers == {"dispatch"}
	assert analysis.signature.events == []


def test_exported_function_is_kept_local_with_warning():
	warnings: list = []
	analysis = analyze("export function reset() {}", warnings=warnings)
	(fn,) = analysis.pending
	assert not fn.exported
	assert warnings == ["exported function reset is kept as a local function"]


def test_export_default_is_rejected():
	with pytest.raises(UnsupportedError, match="export default in component script"):
		analyze("export default 1;")


def test_destructuring_let_is_rejected():
	with pytest.raises(UnsupportedError, match="destructuring let declaration"):
		analyze("let { a, b } = obj;")


def test_unknown_script_language_is_rejected():
	with pytest.raises(UnsupportedError, match='script lang="coffee"'):
		analyze_component(split('<script lang="coffee">x = 1</script>'))


def test_at_most_one_instance_and_one_module_script():
	component = split("<script>let a;</script><script>let b;</script>")
	with pytest.raises(UnsupportedError, match="only allows 2 blocks"):
		check_script_blocks(component.scripts)
	check_script_blocks(split('<script context="module"></script><script></script>').scripts)
