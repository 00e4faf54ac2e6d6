# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Stage 2: template lowering (template tree -> JSX tree).

Public API:
  - lower_template / TemplateLowering: lowering against a rewritten script
  - lower_markup: lowering with an empty script
  - TemplateResult: JSX root plus the flags the assembler reads
"""

from .lower_template import (
	ATTRIBUTE_NAMES,
	EVENT_NAMES,
	TemplateLowering,
	TemplateResult,
	event_prop_name,
	lower_markup,
	lower_template,
)

__all__ = [
	"ATTRIBUTE_NAMES",
	"EVENT_NAMES",
	"TemplateLowering",
	"TemplateResult",
	"event_prop_name",
	"lower_markup",
	"lower_template",
]
