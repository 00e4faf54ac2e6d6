# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Conversion options.

Options are a frozen value built once per call. The library selectors are
closed enums; each member knows the import sources it implies so the
assembler never branches on raw strings.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Mapping

logger = logging.getLogger(__name__)


class CssLibrary(Enum):
	"""CSS-in-JS library receiving the scoped style declarations."""

	LINARIA = "linaria"
	EMOTION = "emotion"
	GOOBER = "goober"

	@property
	def import_source(self) -> str:
		return _CSS_SOURCES[self]


_CSS_SOURCES = {
	CssLibrary.LINARIA: "@linaria/core",
	CssLibrary.EMOTION: "@emotion/css",
	CssLibrary.GOOBER: "goober",
}


class JsxLibrary(Enum):
	"""Component library the generated TSX targets."""

	REACT = "react"
	PREACT = "preact"

	@property
	def hooks_source(self) -> str:
		return "preact/hooks" if self is JsxLibrary.PREACT else "react"

	@property
	def runtime_source(self) -> str:
		"""Module exporting `Fragment` and the children type."""
		return "preact" if self is JsxLibrary.PREACT else "react"

	@property
	def children_type(self) -> str:
		return "ComponentChildren" if self is JsxLibrary.PREACT else "ReactNode"


def _identity(name: str) -> str:
	return name


def _log_warning(message: str) -> None:
	logger.warning("%s", message)


@dataclass(frozen=True)
class ConvertOptions:
	css_library: CssLibrary = CssLibrary.LINARIA
	jsx_library: JsxLibrary = JsxLibrary.REACT
	# Remaps generated hook names (call sites and import specifiers).
	hook_name: Callable[[str], str] = field(default=_identity, compare=False)
	# Used when the component refers to itself and must be a named function.
	component_name: str = "Component"
	warn: Callable[[str], None] = field(default=_log_warning, compare=False)

	@classmethod
	def from_mapping(cls, values: Mapping[str, Any]) -> "ConvertOptions":
		"""
		Build options from plain values (CLI flags, config files).

		Recognized keys: `css_library`, `jsx_library`, `component_name`.
		Library names are matched case-insensitively; an unknown name raises
		`ValueError` listing the accepted ones.
		"""
		kwargs: dict[str, Any] = {}
		if values.get("css_library") is not None:
			kwargs["css_library"] = _parse_choice(CssLibrary, values["css_library"], "css library")
		if values.get("jsx_library") is not None:
			kwargs["jsx_library"] = _parse_choice(JsxLibrary, values["jsx_library"], "jsx library")
		if values.get("component_name"):
			name = str(values["component_name"])
			if not name.isidentifier():
				raise ValueError(f"component name must be an identifier, got: {name}")
			kwargs["component_name"] = name
		unknown = sorted(set(values) - {"css_library", "jsx_library", "component_name"})
		if unknown:
			raise ValueError(f"unknown option(s): {', '.join(unknown)}")
		return cls(**kwargs)


def _parse_choice(enum_cls, value: Any, what: str):
	if isinstance(value, enum_cls):
		return value
	text = str(value).strip().lower()
	for member in enum_cls:
		if member.value == text:
			return member
	choices = ", ".join(m.value for m in enum_cls)
	raise ValueError(f"unknown {what} {value!r} (choose from: {choices})")


__all__ = ["ConvertOptions", "CssLibrary", "JsxLibrary"]
