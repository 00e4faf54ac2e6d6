# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Error taxonomy and diagnostic rendering."""

from __future__ import annotations

from svelte2react.core.diagnostics import Diagnostic
from svelte2react.core.errors import ConversionError, UnrecognizedNodeError, UnsupportedError
from svelte2react.core.span import Span


def test_unsupported_message_prefix():
	err = UnsupportedError("named slot", phase="template")
	assert str(err) == "Not supported: named slot"
	assert err.feature == "named slot"
	assert err.phase == "template"
	assert isinstance(err, ValueError)


def test_unrecognized_node_message_and_detail():
	err = UnrecognizedNodeError("Binding", detail="bind:value")
	assert str(err) == "Unknown node type: Binding (bind:value)"
	assert err.phase == "template"


def test_error_location_from_offsets():
	span = Span.from_offsets("ab\ncd\nef", 4)
	err = ConversionError("boom", loc=span)
	assert err.pos == (4, 4)
	diag = err.to_diagnostic()
	assert diag.location() == "2:2"
	assert diag.severity == "error"


def test_diagnostic_json_falls_back_to_given_file():
	diag = Diagnostic(message="m", code="E-X", phase="style")
	data = diag.to_json(file="App.svelte")
	assert data["file"] == "App.svelte"
	assert data["line"] is None
	assert diag.location() == "?:?"
