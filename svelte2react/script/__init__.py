# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Script collaborator: TypeScript-subset parser, shared AST and TSX printer.
"""

from .parser import parse_expression, parse_module
from .printer import Printer, print_expression, print_module, print_statement, print_type

__all__ = [
	"Printer",
	"parse_expression",
	"parse_module",
	"print_expression",
	"print_module",
	"print_statement",
	"print_type",
]
