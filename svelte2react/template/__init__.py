# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Template collaborator: markup scanner and the template node tree.
"""

from .parser import MarkupParser, MarkupSyntaxError, parse_markup

__all__ = ["MarkupParser", "MarkupSyntaxError", "parse_markup"]
