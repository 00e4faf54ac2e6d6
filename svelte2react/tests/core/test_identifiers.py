# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Identifier helpers: safe identifiers, callback and setter names."""

from __future__ import annotations

from svelte2react.core.identifiers import callback_prop_name, capitalize, setter_name, to_safe_identifier


def test_safe_identifier_keeps_valid_names():
	assert to_safe_identifier("selector$red") == "selector$red"
	assert to_safe_identifier("_x1") == "_x1"


def test_safe_identifier_escapes_invalid_characters():
	assert to_safe_identifier("selector$my-class") == "selector$my_2d_class"
	assert to_safe_identifier("1abc") == "_abc"
	assert to_safe_identifier("") == "_"


def test_capitalize_only_touches_first_character():
	assert capitalize("message") == "Message"
	assert capitalize("keyDown") == "KeyDown"
	assert capitalize("") == ""


def test_callback_and_setter_names():
	assert callback_prop_name("message") == "onMessage"
	assert callback_prop_name("item-selected") == "onItem_2d_selected"
	assert setter_name("count") == "set$count"
