# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Stage 1: script analysis and the reactive rewrite.

Pipeline placement:
  splitter -> stage1 (script) -> stage2 (template) -> stage3 (styles) -> stage4 (assemble)

Public API:
  - analyze_component / ScriptAnalyzer: top-level classification
  - ReactiveRewriter / rewrite_script: hook-based component body
  - pass records (ScriptAnalysis, ScriptResult, ComponentSignature, FeatureSet)
"""

from .analyze import ScriptAnalyzer, analyze_component, check_script_blocks
from .context import (
	ComponentSignature,
	ConversionContext,
	EventProp,
	FeatureSet,
	PropEntry,
	ScriptAnalysis,
	ScriptResult,
)
from .reactive import ReactiveRewriter, rewrite_script

__all__ = [
	"ComponentSignature",
	"ConversionContext",
	"EventProp",
	"FeatureSet",
	"PropEntry",
	"ReactiveRewriter",
	"ScriptAnalysis",
	"ScriptAnalyzer",
	"ScriptResult",
	"analyze_component",
	"check_script_blocks",
	"rewrite_script",
]
