# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""CLI driver: output routing, diagnostics (text and JSON) and exit codes."""

from __future__ import annotations

import io
import json

import pytest

from svelte2react import svelte_to_react
from svelte2react.driver import convert_file, main
from svelte2react.options import ConvertOptions

GOOD = "<script>\nlet n = 0;\n</script>\n<button on:click={() => n++}>{n}</button>\n"
BAD = "<p>{#await p}x{/await}</p>\n"


def write(tmp_path, name: str, text: str):
	path = tmp_path / name
	path.write_text(text, encoding="utf-8")
	return path


def test_single_input_goes_to_stdout(tmp_path, capsys):
	src = write(tmp_path, "Counter.svelte", GOOD)
	assert main([str(src)]) == 0
	captured = capsys.readouterr()
	assert captured.out == svelte_to_react(GOOD)
	assert captured.err == ""


def test_single_input_with_output_file(tmp_path, capsys):
	src = write(tmp_path, "Counter.svelte", GOOD)
	out = tmp_path / "build" / "Counter.tsx"
	assert main([str(src), "-o", str(out)]) == 0
	assert out.read_text(encoding="utf-8") == svelte_to_react(GOOD)
	assert capsys.readouterr().out == ""


def test_several_inputs_go_into_the_output_directory(tmp_path):
	a = write(tmp_path, "A.svelte", "<p>a</p>")
	b = write(tmp_path, "B.svelte", "<p>b</p>")
	out_dir = tmp_path / "out"
	assert main([str(a), str(b), "-o", str(out_dir)]) == 0
	assert sorted(p.name for p in out_dir.iterdir()) == ["A.tsx", "B.tsx"]


def test_failing_input_is_reported_and_others_still_convert(tmp_path, capsys):
	bad = write(tmp_path, "Bad.svelte", BAD)
	good = write(tmp_path, "Good.svelte", GOOD)
	assert main([str(bad), str(good)]) == 1
	captured = capsys.readouterr()
	assert f"{bad}:1:4: error: Not supported: {{#await}}" in captured.err
	assert captured.out == svelte_to_react(GOOD)


def test_json_diagnostics(tmp_path, capsys):
	bad = write(tmp_path, "Bad.svelte", BAD)
	good = write(tmp_path, "Good.svelte", GOOD)
	assert main(["--json", str(bad), str(good)]) == 1
	payload = json.loads(capsys.readouterr().out)
	assert payload["exit_code"] == 1
	(diag,) = payload["diagnostics"]
	assert diag["message"] == "Not supported: {#await}"
	assert diag["severity"] == "error"
	assert diag["phase"] == "template"
	assert (diag["file"], diag["line"], diag["column"]) == (str(bad), 1, 4)
	assert payload["outputs"] == {str(good): svelte_to_react(GOOD)}


def test_missing_input(tmp_path, capsys):
	missing = tmp_path / "Nope.svelte"
	assert main([str(missing)]) == 1
	assert f"{missing}:?:?: error: cannot read input" in capsys.readouterr().err


def test_stdin_input(monkeypatch, capsys):
	monkeypatch.setattr("sys.stdin", io.StringIO("<p>x</p>"))
	assert main(["-"]) == 0
	assert capsys.readouterr().out == svelte_to_react("<p>x</p>")


def test_stdin_errors_are_named(monkeypatch, capsys):
	monkeypatch.setattr("sys.stdin", io.StringIO(BAD))
	assert main(["-"]) == 1
	assert "<stdin>:1:4: error:" in capsys.readouterr().err


def test_warnings_are_reported_without_failing(tmp_path, capsys):
	src = write(tmp_path, "Styled.svelte", '<p class="a">x</p>\n<style lang="scss">.a { color: red }</style>')
	assert main([str(src)]) == 0
	err = capsys.readouterr().err
	assert f'{src}:?:?: warning: style lang="scss" is parsed as plain CSS' in err


def test_library_flags(tmp_path, capsys):
	src = write(tmp_path, "Counter.svelte", GOOD)
	assert main([str(src), "--jsx-library", "preact", "--css-library", "goober"]) == 0
	assert 'import { useState } from "preact/hooks";' in capsys.readouterr().out


def test_bad_flags_exit_with_usage_error(tmp_path):
	src = write(tmp_path, "Counter.svelte", GOOD)
	with pytest.raises(SystemExit) as info:
		main([str(src), "--css-library", "tailwind"])
	assert info.value.code == 2
	with pytest.raises(SystemExit):
		main([str(src), "--component-name", "not-an-identifier"])
	with pytest.raises(SystemExit):
		main([str(src), "--log-level", "chatty"])


def test_convert_file_collects_warnings(tmp_path):
	src = write(tmp_path, "Styled.svelte", '<style lang="less">.a { color: red }</style><p class="a">x</p>')
	text, diagnostics = convert_file(str(src), ConvertOptions())
	assert text is not None and "css`" in text
	assert [(d.severity, d.phase) for d in diagnostics] == [("warning", "convert")]
