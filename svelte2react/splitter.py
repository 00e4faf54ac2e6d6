# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Component splitter.

Separates a component source into markup, script blocks and style blocks by
tag-boundary matching. HTML comments are skipped (a `<script>` inside a
comment stays in the markup, as a comment). Tag attributes are not parsed
beyond the module-context marker and `lang`.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import List, Optional

logger = logging.getLogger(__name__)

_STYLE_TAGS = re.compile(r"<!--.*?-->|<style(\s[^>]*?)?(?:>(.*?)</style>|/>)", re.S | re.I)
_SCRIPT_TAGS = re.compile(r"<!--.*?-->|<script(\s[^>]*?)?(?:>(.*?)</script>|/>)", re.S | re.I)
_MODULE_MARKER = re.compile(r"context=['\"]?module['\"]?")
_LANG_ATTR = re.compile(r"lang=['\"]?([A-Za-z0-9_-]+)['\"]?")


@dataclass(frozen=True)
class ScriptBlock:
	code: str
	module: bool = False
	lang: Optional[str] = None


@dataclass(frozen=True)
class StyleBlock:
	code: str
	lang: Optional[str] = None


@dataclass(frozen=True)
class ComponentSource:
	"""Raw pieces of one component file; built once, never mutated."""

	markup: str
	scripts: List[ScriptBlock] = field(default_factory=list)
	styles: List[StyleBlock] = field(default_factory=list)

	@property
	def module_script(self) -> Optional[ScriptBlock]:
		return next((s for s in self.scripts if s.module), None)

	@property
	def instance_script(self) -> Optional[ScriptBlock]:
		return next((s for s in self.scripts if not s.module), None)


def _lang(attributes: str) -> Optional[str]:
	m = _LANG_ATTR.search(attributes)
	return m.group(1) if m else None


def _blank(block: str) -> str:
	# Keep line breaks so markup lines still match the source.
	return "\n" * block.count("\n")


def split(source: str) -> ComponentSource:
	"""Split `source` into markup, scripts and styles (in source order)."""
	styles: List[StyleBlock] = []
	scripts: List[ScriptBlock] = []

	def take_style(m: re.Match) -> str:
		if m.group(0).startswith("<!--"):
			return m.group(0)
		attributes = m.group(1) or ""
		styles.append(StyleBlock(code=m.group(2) or "", lang=_lang(attributes)))
		return _blank(m.group(0))

	def take_script(m: re.Match) -> str:
		if m.group(0).startswith("<!--"):
			return m.group(0)
		attributes = m.group(1) or ""
		scripts.append(
			ScriptBlock(
				code=m.group(2) or "",
				module=bool(_MODULE_MARKER.search(attributes)),
				lang=_lang(attributes),
			)
		)
		return _blank(m.group(0))

	markup = _STYLE_TAGS.sub(take_style, source)
	markup = _SCRIPT_TAGS.sub(take_script, markup)
	logger.debug("split component: %d script block(s), %d style block(s)", len(scripts), len(styles))
	return ComponentSource(markup=markup, scripts=scripts, styles=styles)


__all__ = ["ComponentSource", "ScriptBlock", "StyleBlock", "split"]
