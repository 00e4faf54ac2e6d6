# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Identifier helpers shared by the script rewriter, the lowering and the style pass."""

from __future__ import annotations

import re

_FIRST_CHAR = re.compile(r"[A-Za-z_$]")
_REST_CHAR = re.compile(r"[A-Za-z0-9_$]")


def to_safe_identifier(text: str) -> str:
	"""
	Turn an arbitrary string into a valid JS identifier.

	- empty input maps to `_`;
	- a disallowed first character is replaced by `_`;
	- every later disallowed character becomes `_<hex code point>_`.

	`to_safe_identifier("selector$my-class") == "selector$my_2d_class"`.
	"""
	if not text:
		return "_"
	parts = [text[0] if _FIRST_CHAR.match(text[0]) else "_"]
	for ch in text[1:]:
		if _REST_CHAR.match(ch):
			parts.append(ch)
		else:
			parts.append(f"_{ord(ch):x}_")
	return "".join(parts)


def capitalize(name: str) -> str:
	"""Upper-case only the first character (`message` -> `Message`)."""
	return name[:1].upper() + name[1:]


def callback_prop_name(event: str) -> str:
	"""Name of the callback prop generated for a dispatched event."""
	return to_safe_identifier("on" + capitalize(event))


def setter_name(name: str) -> str:
	"""Name of the setter paired with a state binding."""
	return f"set${name}"


__all__ = ["callback_prop_name", "capitalize", "setter_name", "to_safe_identifier"]
