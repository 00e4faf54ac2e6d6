# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
CLI entrypoint for `python -m svelte2react`.
"""

from .driver import main

if __name__ == "__main__":
	import sys
	sys.exit(main())
