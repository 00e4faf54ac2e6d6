# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Conversion options and their plain-value constructor."""

from __future__ import annotations

import pytest

from svelte2react.options import ConvertOptions, CssLibrary, JsxLibrary


def test_defaults():
	options = ConvertOptions()
	assert options.css_library is CssLibrary.LINARIA
	assert options.jsx_library is JsxLibrary.REACT
	assert options.component_name == "Component"
	assert options.hook_name("useState") == "useState"


def test_library_sources():
	assert CssLibrary.EMOTION.import_source == "@emotion/css"
	assert CssLibrary.GOOBER.import_source == "goober"
	assert JsxLibrary.PREACT.hooks_source == "preact/hooks"
	assert JsxLibrary.PREACT.runtime_source == "preact"
	assert JsxLibrary.PREACT.children_type == "ComponentChildren"
	assert JsxLibrary.REACT.children_type == "ReactNode"


def test_from_mapping_parses_names_case_insensitively():
	options = ConvertOptions.from_mapping({"css_library": "Emotion", "jsx_library": "preact", "component_name": "Tree"})
	assert options.css_library is CssLibrary.EMOTION
	assert options.jsx_library is JsxLibrary.PREACT
	assert options.component_name == "Tree"


def test_from_mapping_rejects_unknown_values():
	with pytest.raises(ValueError, match="choose from: linaria, emotion, goober"):
		ConvertOptions.from_mapping({"css_library": "tailwind"})
	with pytest.raises(ValueError, match="unknown option"):
		ConvertOptions.from_mapping({"colour": "red"})
	with pytest.raises(ValueError, match="identifier"):
		ConvertOptions.from_mapping({"component_name": "my-component"})
