# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Template lowering: each markup construct checked on the printed JSX, plus
the constructs that are rejected.
"""

from __future__ import annotations

import pytest

from svelte2react.core.errors import UnrecognizedNodeError, UnsupportedError
from svelte2react.options import ConvertOptions
from svelte2react.script.printer import print_expression
from svelte2react.stage1.context import FRAGMENT, ScriptAnalysis
from svelte2react.stage1.reactive import ReactiveRewriter
from svelte2react.stage2.lower_template import event_prop_name, lower_markup, lower_template
from svelte2react.template.parser import parse_markup


def lower(markup: str, reactive=(), alias_map=None, warnings=None):
	options = ConvertOptions(warn=warnings.append) if warnings is not None else ConvertOptions()
	rewriter = ReactiveRewriter(ScriptAnalysis(reactive=set(reactive)), options)
	return lower_template(parse_markup(markup), rewriter, alias_map, options, markup)


def render(markup: str, **kwargs) -> str:
	return print_expression(lower(markup, **kwargs).jsx)


def test_element_text_and_interpolation():
	assert render("<p>Hello {name}!</p>") == "<>\n  <p>Hello {name}!</p>\n</>"


def test_if_block_with_and_without_else():
	assert render("{#if ok}yes{:else}no{/if}") == "<>{ok ? <>yes</> : <>no</>}</>"
	assert render("{#if ok}yes{/if}") == "<>{ok ? <>yes</> : undefined}</>"


def test_else_if_chains_nest_conditionals():
	out = render("{#if a}<p>one</p>{:else if b}<p>two</p>{:else}<p>three</p>{/if}")
	assert out.startswith("<>\n  {a ? (\n")
	assert ") : (\n" in out
	assert "{b ? (\n" in out
	assert "<p>three</p>" in out


def test_each_block_with_key():
	result = lower("{#each items as item (item.id)}<li>{item.name}</li>{/each}")
	out = print_expression(result.jsx)
	assert "{items.map((item) => (\n" in out
	assert "<Fragment key={item.id}>" in out
	assert FRAGMENT in result.features


def test_each_block_keyed_by_index_or_unkeyed():
	assert "<Fragment key={i}>" in render("{#each rows as row, i}<td>{row}</td>{/each}")
	result = lower("{#each rows as row}<td>{row}</td>{/each}")
	assert "rows.map((row) => (" in print_expression(result.jsx)
	assert FRAGMENT not in result.features


def test_handlers_assign_state_through_setters():
	out = render("<button on:click={() => count += 1}>+</button>", reactive={"count"})
	assert "onClick={() => set$count(count + 1)}" in out


def test_each_item_shadows_reactive_names():
	out = render("{#each list as count}<button on:click={() => count = 2}>x</button>{/each}", reactive={"count"})
	assert "onClick={() => count = 2}" in out


def test_key_block_raw_html_and_debug():
	assert "<Fragment key={k}>" in render("{#key k}<p>x</p>{/key}")
	assert render("{@html content}") == "<>\n  <div dangerouslySetInnerHTML={{ __html: content }} />\n</>"
	assert render("{@debug a, b}") == "<>{console.log({ a, b })}</>"


def test_default_slot_and_fallback():
	result = lower("<div><slot /></div>")
	assert result.uses_default_slot
	assert print_expression(result.jsx) == "<>\n  <div>{children}</div>\n</>"
	assert render("<slot>Default</slot>") == "<>{children ?? <>Default</>}</>"


def test_class_names_use_style_aliases():
	aliases = {"a": "selector$a"}
	assert 'className={[selector$a, "b"].join(" ")}' in render('<div class="a b"></div>', alias_map=aliases)
	assert "className={selector$a}" in render('<div class="a"></div>', alias_map=aliases)
	assert 'className="x y"' in render('<div class="x  y"></div>', alias_map=aliases)
	assert "className={cls}" in render("<div class={cls}></div>", alias_map=aliases)


def test_static_style_becomes_object():
	out = render('<div style="color: red; font-size: 12px; --gap: 1px; -webkit-user-select: none"></div>')
	assert 'style={{ color: "red", fontSize: "12px", "--gap": "1px", WebkitUserSelect: "none" }}' in out


def test_attribute_names_and_values():
	assert '<label htmlFor="x" tabIndex="1"></label>' in render('<label for="x" tabindex="1"></label>')
	assert "<input disabled />" in render("<input disabled>")
	assert "title={`Hi ${name}!`}" in render('<p title="Hi {name}!"></p>')
	assert "<div {...props}></div>" in render("<div {...props}></div>")
	assert "<div id={id}></div>" in render("<div {id}></div>")


def test_component_events_and_props_keep_their_names():
	out = render('<Child on:message={handle} class="plain" />')
	assert '<Child onMessage={handle} class="plain"></Child>' in out


def test_self_reference_uses_component_name():
	result = lower("<svelte:self depth={depth + 1} />")
	assert result.uses_self_reference
	assert "<Component depth={depth + 1}></Component>" in print_expression(result.jsx)


def test_dynamic_component_tag():
	assert "<ui.Button></ui.Button>" in render("<svelte:component this={ui.Button} />")
	with pytest.raises(UnsupportedError, match="non-identifier this"):
		render("<svelte:component this={a ? B : C} />")


def test_event_prop_names():
	assert event_prop_name("click") == "onClick"
	assert event_prop_name("dblclick") == "onDoubleClick"
	assert event_prop_name("message") == "onMessage"


@pytest.mark.parametrize(
	"markup, message",
	[
		('<slot name="x" />', "Not supported: named slot"),
		("<slot item={x} />", "Not supported: slot props"),
		('<Child slot="x" />', "Not supported: named slot"),
		("<button on:click|preventDefault={go}></button>", "Not supported: event modifier"),
		("<button on:click></button>", "Not supported: event forwarding"),
		("{#await p}x{/await}", "Not supported: {#await}"),
		("{#each xs as x}{x}{:else}none{/each}", "Not supported: {:else} in {#each}"),
		("{@const y = 1}", "Not supported: {@const}"),
	],
)
def test_unsupported_constructs(markup, message):
	with pytest.raises(UnsupportedError) as info:
		render(markup)
	assert info.value.message == message


def test_directives_and_meta_tags_are_unrecognized():
	with pytest.raises(UnrecognizedNodeError, match=r"Unknown node type: Binding \(bind:value\)"):
		render("<input bind:value={v} />")
	with pytest.raises(UnrecognizedNodeError, match="Unknown node type: svelte:window"):
		render("<svelte:window on:resize={r} />")


def test_errors_carry_markup_position():
	with pytest.raises(UnsupportedError) as info:
		render('<p>\n  <slot name="x" />\n</p>')
	assert (info.value.span.line, info.value.span.column) == (2, 3)


def test_comment_with_markup_is_dropped_with_warning():
	warnings: list = []
	assert render("<!-- <b>old</b> --><p>x</p>", warnings=warnings) == "<>\n  <p>x</p>\n</>"
	assert warnings == ["dropping template comment containing markup"]


def test_lower_markup_without_script():
	result = lower_markup(parse_markup("<p>{x}</p>"))
	assert print_expression(result.jsx) == "<>\n  <p>{x}</p>\n</>"
