# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Reactive rewrite: state, derived values, effects, lifecycle calls and event
dispatch, checked on the printed component body.
"""

from __future__ import annotations

import pytest

from svelte2react.core.errors import UnsupportedError
from svelte2react.script.printer import print_statement
from svelte2react.splitter import split
from svelte2react.stage1.analyze import analyze_component
from svelte2react.stage1.reactive import rewrite_script


def rewrite(code: str):
	analysis = analyze_component(split(f"<script>{code}</script>"))
	return rewrite_script(analysis)


def body(code: str) -> list:
	return [print_statement(s) for s in rewrite(code).result.body]


def test_let_becomes_state_and_assignments_call_the_setter():
	assert body("let count = 0;\ncount += 1;\ncount = 5;\ncount++;") == [
		"const [count, set$count] = useState(0);",
		"set$count(count + 1);",
		"set$count(5);",
		"set$count(count + 1);",
	]


def test_typed_state_keeps_its_type():
	assert body("let x: number = 1;\nlet y: string;") == [
		"const [x, set$x] = useState<number>(1);",
		"const [y, set$y] = useState<string | null>(null);",
	]


def test_reactive_assignment_becomes_derived_const():
	rewriter = rewrite("let count = 1;\n$: doubled = count * 2;")
	assert print_statement(rewriter.result.body[1]) == "const doubled = count * 2;"
	assert rewriter.result.derived == ["doubled"]
	assert rewriter.is_reactive("doubled")


def test_reactive_statement_becomes_effect_on_its_reads():
	assert body("let a = 0;\nlet b = 1;\n$: a = b + 1;")[2] == (
		"useEffect(() => {\n  set$a(b + 1);\n}, [a, b]);"
	)
	assert body("let n = 0;\n$: console.log(n);")[1] == "useEffect(() => {\n  console.log(n);\n}, [n]);"


def test_effect_dependencies_include_assigned_names_in_encounter_order():
	assert body("let a = 0;\nlet b = 0;\n$: if (a) b = a;")[2] == (
		"useEffect(() => {\n  if (a)\n    set$b(a);\n}, [a, b]);"
	)
	out = body("let count = 0;\n$: { console.log(count); count = 5; }")
	assert out[1].endswith("}, [count]);")
	assert "set$count(5);" in out[1]


def test_derived_value_declared_twice_is_rejected():
	with pytest.raises(UnsupportedError, match="reassigned reactive declaration d"):
		rewrite("let a = 1;\n$: d = a;\n$: d = a + 1;")


def test_assignment_inside_an_expression_is_rejected():
	with pytest.raises(UnsupportedError, match="intermediate let value assignment"):
		rewrite("let a = 0;\nconst b = (a = 1);")


def test_assignment_to_derived_value_is_rejected():
	with pytest.raises(UnsupportedError, match="assignment to reactive declaration d"):
		rewrite("let a = 1;\n$: d = a * 2;\nfunction f() { d = 3; }")


def test_shadowing_parameter_disables_the_rewrite():
	out = body("let a = 0;\nfunction f(a) { a = 2; }\nconst g = () => a = 3;")
	assert out[1] == "function f(a) {\n  a = 2;\n}"
	assert out[2] == "const g = () => set$a(3);"


def test_scope_context_hides_reactive_names():
	rewriter = rewrite("let count = 0;")
	assert rewriter.is_reactive("count")
	with rewriter.scope(["count"]):
		assert not rewriter.is_reactive("count")
	assert rewriter.is_reactive("count")


def test_dispatch_becomes_optional_callback_call():
	rewriter = rewrite(
		'import { createEventDispatcher } from "svelte";\n'
		"const dispatch = createEventDispatcher();\n"
		'function send() { dispatch("message", { text: "hi" }); }'
	)
	assert print_statement(rewriter.result.body[0]) == 'function send() {\n  onMessage?.({ text: "hi" });\n}'
	assert [e.name for e in rewriter.result.events] == ["onMessage"]


def test_dynamic_event_name_is_rejected():
	with pytest.raises(UnsupportedError, match="dynamic event name"):
		rewrite('import { createEventDispatcher } from "svelte";\nconst d = createEventDispatcher();\nd(name);')


def test_lifecycle_calls_become_effects():
	out = body(
		'import { onMount, onDestroy, beforeUpdate } from "svelte";\n'
		"onMount(() => { start(); });\n"
		"onDestroy(stop);\n"
		"beforeUpdate(() => tick());"
	)
	assert out == [
		"useEffect(() => {\n  start();\n}, []);",
		"useEffect(() => {\n  return stop;\n}, []);",
		"useEffect(() => {\n  tick();\n});",
	]


def test_after_update_skips_the_first_run():
	rewriter = rewrite('import { afterUpdate } from "svelte";\nafterUpdate(() => { log(); });')
	out = [print_statement(s) for s in rewriter.result.body]
	assert out[0] == "const _ref0 = useRef(false);"
	assert "if (!_ref0.current) {\n    _ref0.current = true;\n    return;\n  }" in out[1]
	assert list(rewriter.result.features) == ["useEffect", "useRef"]


def test_assigned_prop_gets_a_state_mirror():
	rewriter = rewrite("export let value = 1;\nfunction inc() { value += 1; }")
	assert rewriter.result.assigned_props == ["value"]
	assert "useState" in rewriter.result.features
	assert print_statement(rewriter.result.body[0]) == "function inc() {\n  set$value(value + 1);\n}"


def test_generated_refs_avoid_module_script_names():
	analysis = analyze_component(
		split(
			'<script context="module">const _ref0 = 1;</script>'
			'<script>import { afterUpdate } from "svelte";\nimport { _ref1 } from "./refs";\n'
			"afterUpdate(() => { log(); });</script>"
		)
	)
	out = [print_statement(s) for s in rewrite_script(analysis).result.body]
	assert out[0] == "const _ref2 = useRef(false);"
