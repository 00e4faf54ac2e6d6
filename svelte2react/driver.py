# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Command-line driver: `svelte2react [options] FILE...` / `python -m svelte2react`.

Each input converts independently; a failing file is reported and the rest
still convert. The exit code is 1 when any input failed.

Human-readable diagnostics go to stderr as `<file>:<line>:<col>: error: <msg>`.
With --json a single object `{"exit_code": N, "diagnostics": [...]}` is
printed instead (plus `outputs` holding the converted text of every file
that was not written to disk).
"""

from __future__ import annotations

import argparse
import dataclasses
import json
import logging
import os
import sys
from pathlib import Path

from svelte2react.core.diagnostics import Diagnostic
from svelte2react.core.errors import ConversionError
from svelte2react.core.span import Span
from svelte2react.options import ConvertOptions, CssLibrary, JsxLibrary
from svelte2react.stage4.assemble import svelte_to_react

logger = logging.getLogger(__name__)

LOG_LEVEL_ENV = "SVELTE2REACT_LOG_LEVEL"
STDIN_NAME = "-"
OUTPUT_SUFFIX = ".tsx"


def _configure_logging(level_name: str) -> None:
	level = logging.getLevelName(level_name.upper())
	if not isinstance(level, int):
		raise ValueError(f"unknown log level: {level_name}")
	root = logging.getLogger("svelte2react")
	root.setLevel(level)
	root.propagate = False
	for handler in list(root.handlers):
		if getattr(handler, "_svelte2react_cli", False):
			root.removeHandler(handler)
	# Bound to the current stderr so repeated in-process runs write where the caller expects.
	handler = logging.StreamHandler(sys.stderr)
	handler.setFormatter(logging.Formatter("%(name)s: %(levelname)s: %(message)s"))
	handler._svelte2react_cli = True  # type: ignore[attr-defined]
	root.addHandler(handler)


def _display_name(source: str) -> str:
	return "<stdin>" if source == STDIN_NAME else source


def _read_source(source: str) -> str:
	if source == STDIN_NAME:
		return sys.stdin.read()
	return Path(source).read_text(encoding="utf-8")


def _output_path(source: str, output: Path | None, many: bool) -> Path | None:
	if output is None:
		return None
	if not many:
		return output
	stem = "stdin" if source == STDIN_NAME else Path(source).stem
	return output / (stem + OUTPUT_SUFFIX)


def _report(diag: Diagnostic, file: str) -> None:
	location = f"{diag.span.file or file}:{diag.location()}"
	print(f"{location}: {diag.severity}: {diag.message}", file=sys.stderr)


def convert_file(
	source: str,
	options: ConvertOptions,
	output: Path | None = None,
) -> tuple[str | None, list[Diagnostic]]:
	"""
	Convert one input and write it to `output` (when given).

	Returns the converted text (None on failure) and the diagnostics raised
	while converting it, warnings included.
	"""
	diagnostics: list[Diagnostic] = []

	def warn(message: str) -> None:
		diagnostics.append(Diagnostic(message=message, phase="convert", severity="warning"))

	name = _display_name(source)
	try:
		text = _read_source(source)
	except OSError as err:
		diagnostics.append(Diagnostic(message=f"cannot read input: {err.strerror or err}", phase="driver"))
		return None, diagnostics
	try:
		converted = svelte_to_react(text, dataclasses.replace(options, warn=warn))
	except ConversionError as err:
		diag = err.to_diagnostic()
		if diag.span.file is None:
			diag.span = dataclasses.replace(diag.span, file=name)
		diagnostics.append(diag)
		return None, diagnostics
	if output is not None:
		try:
			output.parent.mkdir(parents=True, exist_ok=True)
			output.write_text(converted, encoding="utf-8")
		except OSError as err:
			span = Span(file=str(output))
			diagnostics.append(Diagnostic(message=f"cannot write output: {err.strerror or err}", phase="driver", span=span))
			return None, diagnostics
		logger.info("wrote %s", output)
	return converted, diagnostics


def main(argv: list[str] | None = None) -> int:
	"""
	Convert Svelte components to React TSX.

	Output goes to stdout, to the `-o` file (one input) or into the `-o`
	directory as `<stem>.tsx` (several inputs).
	"""
	parser = argparse.ArgumentParser(prog="svelte2react", description="Convert Svelte components to React TSX")
	parser.add_argument("sources", nargs="+", help="Component file(s) to convert ('-' reads stdin)")
	parser.add_argument("-o", "--output", type=Path, help="Output file (one input) or directory (several inputs)")
	parser.add_argument(
		"--css-library",
		choices=[c.value for c in CssLibrary],
		default=CssLibrary.LINARIA.value,
		help="CSS-in-JS library for scoped styles (default: linaria)",
	)
	parser.add_argument(
		"--jsx-library",
		choices=[j.value for j in JsxLibrary],
		default=JsxLibrary.REACT.value,
		help="Target component library (default: react)",
	)
	parser.add_argument("--component-name", help="Name used when the component must be a named function")
	parser.add_argument(
		"--json",
		action="store_true",
		help="Emit diagnostics as JSON (phase/message/severity/file/line/column)",
	)
	parser.add_argument(
		"--log-level",
		default=os.environ.get(LOG_LEVEL_ENV, "warning"),
		help=f"Logging level for the converter (default: ${LOG_LEVEL_ENV} or warning)",
	)
	args = parser.parse_args(argv)

	try:
		_configure_logging(args.log_level)
		options = ConvertOptions.from_mapping(
			{
				"css_library": args.css_library,
				"jsx_library": args.jsx_library,
				"component_name": args.component_name,
			}
		)
	except ValueError as err:
		parser.error(str(err))

	many = len(args.sources) > 1
	exit_code = 0
	diagnostics: list[dict] = []
	outputs: dict[str, str] = {}
	for source in args.sources:
		name = _display_name(source)
		output = _output_path(source, args.output, many)
		converted, diags = convert_file(source, options, output)
		if converted is None:
			exit_code = 1
		elif output is None:
			if args.json:
				outputs[name] = converted
			else:
				sys.stdout.write(converted)
		for diag in diags:
			if args.json:
				diagnostics.append(diag.to_json(file=name))
			else:
				_report(diag, name)

	if args.json:
		payload: dict = {"exit_code": exit_code, "diagnostics": diagnostics}
		if outputs:
			payload["outputs"] = outputs
		print(json.dumps(payload))
	return exit_code


__all__ = ["convert_file", "main"]
