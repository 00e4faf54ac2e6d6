# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Stage 4: assemble the pass records into the output module."""

from .assemble import PROP_PREFIX, Assembler, convert, svelte_to_react

__all__ = ["Assembler", "PROP_PREFIX", "convert", "svelte_to_react"]
