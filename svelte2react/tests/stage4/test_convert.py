# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
End-to-end conversion: whole components in, TSX text out.

Most cases check the lines that matter for the feature under test; a few
small components are compared whole to pin the overall layout.
"""

from __future__ import annotations

import pytest

from svelte2react import ConvertOptions, CssLibrary, JsxLibrary, UnsupportedError, convert, svelte_to_react
from svelte2react.script.ast import ExportDefault, FunctionDecl, ImportDecl, Module

COUNTER = """\
<script>
	let count = 0;
	function increment() {
		count += 1;
	}
</script>

<button on:click={increment}>
	Clicked {count} {count === 1 ? 'time' : 'times'}
</button>
"""

COUNTER_TSX = """\
import { useState } from "react";

export default () => {
  const [count, set$count] = useState(0);
  function increment() {
    set$count(count + 1);
  }
  return (
    <>
      <button onClick={increment}>
        Clicked {count} {count === 1 ? "time" : "times"}
      </button>
    </>
  );
};
"""

CARD = """\
<script lang="ts">
	import { createEventDispatcher } from "svelte";
	export let name: string;
	export let greeting = "Hello";
	const dispatch = createEventDispatcher<{ message: { text: string } }>();
</script>

<div class="box" on:click={() => dispatch("message", { text: name })}>
	{greeting}, {name}!
	<slot />
</div>

<style>
	.box { padding: 4px; }
</style>
"""


def test_markup_only_component():
	assert svelte_to_react("<p>hi</p>") == (
		"export default () => {\n  return (\n    <>\n      <p>hi</p>\n    </>\n  );\n};\n"
	)


def test_counter():
	assert svelte_to_react(COUNTER) == COUNTER_TSX


def test_convert_returns_the_module_tree():
	module = convert(COUNTER)
	assert isinstance(module, Module)
	assert isinstance(module.body[0], ImportDecl)
	assert isinstance(module.body[-1], ExportDefault)


def test_props_events_slot_and_styles():
	out = svelte_to_react(CARD)
	lines = out.split("\n")
	assert lines[0] == 'import { type ReactNode } from "react";'
	assert lines[1] == 'import { css } from "@linaria/core";'
	assert "const selector$box = css`\n  padding: 4px\n`;" in out
	assert "export default ({ name, greeting = \"Hello\", onMessage, children }: {\n" in out
	assert "  name: string;\n  greeting?: any;\n  onMessage?: (data: { text: string }) => void;\n  children?: ReactNode;\n}) => {" in out
	assert '<div className={selector$box} onClick={() => onMessage?.({ text: name })}>' in out
	assert "{greeting}, {name}!" in out
	assert "{children}" in out


def test_other_target_libraries():
	options = ConvertOptions(css_library=CssLibrary.EMOTION, jsx_library=JsxLibrary.PREACT)
	out = svelte_to_react(CARD.replace("export let greeting", "let greeting"), options)
	assert 'import { useState } from "preact/hooks";' in out
	assert 'import { type ComponentChildren } from "preact";' in out
	assert 'import { css } from "@emotion/css";' in out
	assert "children?: ComponentChildren;" in out


def test_derived_values_and_effects_share_one_import():
	out = svelte_to_react("<script>\nlet a = 1;\n$: b = a * 2;\n$: console.log(b);\n</script>\n<p>{b}</p>")
	assert out.startswith('import { useEffect, useState } from "react";\n\n')
	assert "  const b = a * 2;\n" in out
	assert "  useEffect(() => {\n    console.log(b);\n  }, [b]);\n" in out


def test_on_mount_assignment_runs_once():
	out = svelte_to_react(
		'<script>\nimport { onMount } from "svelte";\nlet mut = 2;\nonMount(() => { mut = 4; });\n</script>\n<p>{mut}</p>'
	)
	assert out.startswith('import { useEffect, useState } from "react";')
	assert "  const [mut, set$mut] = useState(2);\n" in out
	assert "  useEffect(() => {\n    set$mut(4);\n  }, []);\n" in out


def test_lifecycle_imports():
	out = svelte_to_react(
		'<script>\nimport { onMount, afterUpdate } from "svelte";\n'
		"onMount(() => { load(); });\nafterUpdate(() => { save(); });\n</script>\n<p>x</p>"
	)
	assert out.startswith('import { useEffect, useRef } from "react";')
	assert "const _ref0 = useRef(false);" in out
	assert "_ref0.current = true;" in out
	assert "}, []);" in out


def test_assigned_prop_is_mirrored_in_state():
	out = svelte_to_react("<script>\nexport let value = 0;\n</script>\n<button on:click={() => value += 1}>{value}</button>")
	assert 'import { useState } from "react";' in out
	assert "export default ({ value: prop$value = 0 }: { value?: any }) => {" in out
	assert "  const [value, set$value] = useState(prop$value);\n" in out
	assert "onClick={() => set$value(value + 1)}" in out


def test_typed_prop_mirror_keeps_the_type():
	out = svelte_to_react('<script lang="ts">\nexport let n: number = 1;\nfunction inc() { n++; }\n</script>\n<p>{n}</p>')
	assert "const [n, set$n] = useState<number>(prop$n);" in out


def test_self_referencing_component_is_a_named_function():
	source = "<script>\nexport let depth = 0;\n</script>\n{#if depth < 3}<svelte:self depth={depth + 1} />{/if}"
	out = svelte_to_react(source)
	assert "export default function Component({ depth = 0 }: { depth?: any }) {" in out
	assert "<Component depth={depth + 1}></Component>" in out
	assert isinstance(convert(source).body[-1], FunctionDecl)
	named = svelte_to_react(source, ConvertOptions(component_name="Tree"))
	assert "export default function Tree(" in named
	assert "<Tree depth={depth + 1}></Tree>" in named


def test_keyed_each_imports_fragment():
	out = svelte_to_react("<script>\nlet items = [];\n</script>\n{#each items as item (item.id)}<li>{item.name}</li>{/each}")
	assert 'import { Fragment, useState } from "react";' in out
	assert "items.map((item) => (" in out
	assert "<Fragment key={item.id}>" in out


def test_module_script_and_imports_are_hoisted():
	source = (
		'<script context="module">\nexport const prerender = true;\n</script>\n'
		'<script>\nimport Child from "./Child.svelte";\n</script>\n<Child />'
	)
	out = svelte_to_react(source)
	assert out.index("export const prerender = true;") < out.index('import Child from "./Child.svelte";')
	assert out.index('import Child from "./Child.svelte";') < out.index("export default")
	assert "<Child></Child>" in out


def test_first_error_stops_conversion():
	with pytest.raises(UnsupportedError, match="Not supported: {#await}") as info:
		svelte_to_react("<script>\nlet p;\n</script>\n<p>{#await p}x{/await}</p>")
	assert info.value.span.line == 4


SHOWCASE = """\
<script lang="ts">
	import { onMount, onDestroy } from "svelte";
	export let foo: number;
	export let bar: number = 1;
	const x: number = 1;
	let mut = 2;
	onMount(() => {
		console.log("mounted");
		mut = 4;
		return () => console.log("unmounted");
	});
	onDestroy(() => {
		console.log("unmount");
	});
	const onClick = () => {
		console.log("clicked");
		mut = mut + 1;
	}

	const className = "cls";
</script>
<div id="x" class={className}>
	<h1 class="title">Nest</h1>
	hello, {x}
</div>
{#if true}
	<div>if-true</div>
{:else if false}
	else if block
{:else}
	else block
{/if}
{#each [1] as num}
	<span> {num} </span>
{/each}
{#each [1, 2, 3] as num, i}
	<span>{num}:{i}</span>
{/each}
<button on:click={onClick}>click</button>
<style>
	.title {
		color: red;
	}
</style>
"""


def test_showcase_component():
	out = svelte_to_react(SHOWCASE)
	assert "{ foo, bar = 1 }" in out
	assert "foo: number" in out
	assert "export default (" in out
	assert "const [mut, set$mut] = useState(2);" in out
	assert "set$mut(4);" in out
	assert '    return () => console.log("unmounted");\n  }, []);\n' in out
	assert "set$mut(mut + 1);" in out
	assert "<button onClick={onClick}>" in out
	assert "className={className}" in out
	assert "className={selector$title}" in out
	assert "[1, 2, 3].map((num, i) => (" in out
	assert "{true ? (" in out
	assert ") : (" in out
	assert "if-true" in out
	assert "<>else if block</>" in out
	assert "<>else block</>" in out
