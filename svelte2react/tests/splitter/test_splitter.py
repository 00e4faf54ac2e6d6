# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Component splitter: script/style extraction by tag boundaries."""

from __future__ import annotations

from svelte2react.splitter import split


def test_instance_and_module_scripts():
	source = '<script context="module">export const x = 1;</script>\n<script lang="ts">let a = 1;</script>\n<p>{a}</p>'
	component = split(source)
	assert len(component.scripts) == 2
	assert component.module_script.code == "export const x = 1;"
	assert component.instance_script.code == "let a = 1;"
	assert component.instance_script.lang == "ts"
	assert component.module_script.lang is None
	assert component.markup.strip() == "<p>{a}</p>"


def test_style_blocks_in_order():
	component = split("<style>.a { color: red; }</style><div/><style lang=\"scss\">.b {}</style>")
	assert [s.code for s in component.styles] == [".a { color: red; }", ".b {}"]
	assert [s.lang for s in component.styles] == [None, "scss"]
	assert component.markup == "<div/>"


def test_removed_blocks_keep_line_numbers():
	source = "<script>\nlet a = 1;\n</script>\n<p>x</p>"
	component = split(source)
	assert component.markup == "\n\n\n<p>x</p>"
	assert component.markup.split("\n")[3] == source.split("\n")[3]


def test_tags_inside_comments_stay_in_markup():
	source = "<!-- <script>nope()</script> --><p>x</p>"
	component = split(source)
	assert component.scripts == []
	assert component.markup == source


def test_markup_only_component():
	component = split("<h1>hi</h1>")
	assert component.scripts == [] and component.styles == []
	assert component.instance_script is None
	assert component.markup == "<h1>hi</h1>"
